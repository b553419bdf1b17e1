"""In-memory model of the string table of one .rc file."""

from typing import Optional

from ..errors import DuplicateIdError, DuplicateNameError, NotFoundError
from .models import StringEntry


class RcFileContent:
    """String resources of one .rc file, keyed by name.

    Entries whose id could not be resolved are kept apart in ``unresolved``
    so that writing the file back never drops them. They take no part in id
    uniqueness or header synchronization.
    """

    def __init__(self):
        self._entries: dict[str, StringEntry] = {}
        self._ids: dict[int, str] = {}
        self.unresolved: list[tuple[str, str]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def add_resource(
        self,
        value: str,
        name: str,
        resource_id: int,
        symbol: Optional[str] = None
    ) -> StringEntry:
        """Add a string resource.

        Args:
            value: Escaped value of the resource.
            name: Resource name.
            resource_id: Numeric id.
            symbol: Name of the #define in the companion header. Defaults to
                the resource name.

        Returns:
            The new entry.

        Raises:
            DuplicateNameError: If the name is already used.
            DuplicateIdError: If the id is already used.
        """
        if name in self._entries or self.is_unresolved(name):
            raise DuplicateNameError(name)
        if resource_id in self._ids:
            raise DuplicateIdError(resource_id, self._ids[resource_id])

        entry = StringEntry(
            name=name,
            id=resource_id,
            value=value,
            symbol=name if symbol is None else symbol
        )
        self._entries[name] = entry
        self._ids[resource_id] = name
        return entry

    def add_unresolved(self, name: str, value: str) -> None:
        """Keep an entry whose id is not known, in file order."""
        self.unresolved.append((name, value))

    def is_unresolved(self, name: str) -> bool:
        return any(n == name for n, _ in self.unresolved)

    def get_by_name(self, name: str) -> Optional[StringEntry]:
        return self._entries.get(name)

    def update_value(self, name: str, value: str) -> StringEntry:
        """Replace the value of an existing resource.

        Raises:
            NotFoundError: If there is no resource with that name.
        """
        entry = self._entries.get(name)
        if entry is None:
            raise NotFoundError(name, "this RC file")
        entry.value = value
        return entry

    def is_name_with_empty_fields(self, name: str) -> bool:
        """Check whether a resource exists but has a blank header symbol.

        Such resources are declared in another header, so the header
        synchronizer skips them.
        """
        entry = self._entries.get(name)
        return entry is not None and entry.is_foreign

    def ids(self) -> set[int]:
        return set(self._ids)

    def entries(self) -> list[StringEntry]:
        """Entries in insertion order."""
        return list(self._entries.values())

    def sorted_by_id(self) -> list[StringEntry]:
        """Entries in ascending id order, rebuilt on every call."""
        return sorted(self._entries.values(), key=lambda entry: entry.id)
