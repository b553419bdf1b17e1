"""Tests for the string table model."""

import pytest

from rcstrings.errors import DuplicateIdError, DuplicateNameError, NotFoundError
from rcstrings.strings import RcFileContent


class TestRcFileContent:
    """Tests for RcFileContent."""

    @pytest.fixture
    def content(self):
        """Create a model with two strings."""
        content = RcFileContent()
        content.add_resource("Hello", "IDS_A", 101)
        content.add_resource("World", "IDS_B", 102)
        return content

    def test_add_and_lookup(self, content):
        """Test adding and looking up resources."""
        entry = content.get_by_name("IDS_A")
        assert entry.id == 101
        assert entry.value == "Hello"
        assert entry.symbol == "IDS_A"
        assert "IDS_B" in content
        assert len(content) == 2

    def test_lookup_missing(self, content):
        assert content.get_by_name("IDS_MISSING") is None

    def test_duplicate_name(self, content):
        """Test a name can only be used once."""
        with pytest.raises(DuplicateNameError) as excinfo:
            content.add_resource("Again", "IDS_A", 200)
        assert excinfo.value.name == "IDS_A"
        assert content.get_by_name("IDS_A").value == "Hello"
        assert 200 not in content.ids()

    def test_duplicate_id(self, content):
        """Test an id can only be used once."""
        with pytest.raises(DuplicateIdError) as excinfo:
            content.add_resource("Other", "IDS_C", 101)
        assert excinfo.value.owner == "IDS_A"
        assert "IDS_C" not in content

    def test_uniqueness_over_many_adds(self):
        """Test names and ids stay unique across adds."""
        content = RcFileContent()
        attempts = [("IDS_X", 1), ("IDS_Y", 2), ("IDS_X", 3), ("IDS_Z", 2), ("IDS_W", 4)]
        for name, resource_id in attempts:
            try:
                content.add_resource("v", name, resource_id)
            except (DuplicateNameError, DuplicateIdError):
                pass

        entries = content.entries()
        assert len({e.name for e in entries}) == len(entries) == 3
        assert len({e.id for e in entries}) == 3

    def test_unresolved_names_are_taken(self, content):
        """Test names kept without id can not be added again."""
        content.add_unresolved("IDS_OLD", "old")
        with pytest.raises(DuplicateNameError):
            content.add_resource("new", "IDS_OLD", 300)

    def test_unresolved_keeps_every_line(self, content):
        """Test entries without id are kept in file order."""
        content.add_unresolved("IDS_OLD", "old")
        content.add_unresolved("IDS_OLD", "again")
        assert content.unresolved == [("IDS_OLD", "old"), ("IDS_OLD", "again")]
        assert content.is_unresolved("IDS_OLD")
        assert not content.is_unresolved("IDS_A")

    def test_sorted_by_id(self):
        """Test the id ordered view."""
        content = RcFileContent()
        content.add_resource("c", "IDS_C", 30)
        content.add_resource("a", "IDS_A", 10)
        content.add_resource("b", "IDS_B", 20)
        assert [e.id for e in content.sorted_by_id()] == [10, 20, 30]

    def test_sorted_view_is_not_cached(self, content):
        """Test the view reflects later additions."""
        assert [e.id for e in content.sorted_by_id()] == [101, 102]
        content.add_resource("first", "IDS_FIRST", 1)
        assert [e.id for e in content.sorted_by_id()] == [1, 101, 102]

    def test_empty_fields(self, content):
        """Test foreign entries are reported with empty fields."""
        content.add_resource("far", "IDS_FAR", 500, symbol="")
        assert content.is_name_with_empty_fields("IDS_FAR")
        assert not content.is_name_with_empty_fields("IDS_A")
        assert not content.is_name_with_empty_fields("IDS_MISSING")

    def test_update_value(self, content):
        entry = content.update_value("IDS_B", "Everyone")
        assert entry.value == "Everyone"
        assert content.get_by_name("IDS_B").value == "Everyone"

    def test_update_missing(self, content):
        with pytest.raises(NotFoundError):
            content.update_value("IDS_MISSING", "x")
