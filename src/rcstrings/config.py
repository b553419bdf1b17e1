"""Configuration for rcstrings."""

from dataclasses import dataclass

# Template used to replace the selected code when none is configured
DEFAULT_REPLACE_WITH = "{0}"

# Column at which the id of a generated #define starts
DEFAULT_ID_COLUMN = 40

# String table ids are 16-bit values; 0 is reserved
MAX_STRING_ID = 0xFFFF


@dataclass
class RcStringsConfig:
    """Configuration for resource editing.

    Attributes:
        random_ids: Generate random ids instead of sequential ones.
        first_id: Id given to the first string of an empty table.
        random_id_min: Lowest id drawn in random mode.
        random_id_max: Highest id drawn in random mode.
        random_id_attempts: Draws attempted before giving up in random mode.
        id_column: Column at which generated #define ids are aligned.
        escape_values: Escape control characters and quotes in new values.
        replace_with: Template for the code replacing a selection; {0} is the
            resource name.
        dry_run: If True, don't actually modify files.
        verbose: If True, print detailed output.
    """
    random_ids: bool = False
    first_id: int = 1
    random_id_min: int = 1
    random_id_max: int = MAX_STRING_ID
    random_id_attempts: int = 10000
    id_column: int = DEFAULT_ID_COLUMN
    escape_values: bool = True
    replace_with: str = DEFAULT_REPLACE_WITH
    dry_run: bool = False
    verbose: bool = False

    @property
    def random_id_range(self) -> tuple[int, int]:
        """Inclusive range of ids drawn in random mode."""
        return self.random_id_min, self.random_id_max

    def format_replacement(self, name: str) -> str:
        """Build the code that replaces a selection for a resource name.

        Args:
            name: Name of the string resource (e.g., "IDS_HELLO").

        Returns:
            The replacement template with {0} substituted by the name.
        """
        template = self.replace_with or DEFAULT_REPLACE_WITH
        return template.format(name)
