"""Data models for STRINGTABLE entries."""

from dataclasses import dataclass

# Indentation of entries inside a STRINGTABLE block
ENTRY_INDENT = "    "

# Width the entry name is padded to before its value
NAME_WIDTH = 24


@dataclass
class StringEntry:
    """Represents a single string resource of an .rc file.

    Attributes:
        name: The resource name, unique within a string table.
        id: Numeric resource id, unique within a string table.
        value: The value as written between the quotes in the .rc file
            (already escaped).
        symbol: Name of the #define in the companion header. Empty when the
            define lives in another header.
    """
    name: str
    id: int
    value: str
    symbol: str = ""

    @property
    def is_foreign(self) -> bool:
        """Whether the #define of this entry lives in another header."""
        return not self.name or not self.symbol

    def to_rc_format(self) -> str:
        """Convert entry to a STRINGTABLE line.

        Entries defined outside the companion header carry their id in a
        trailing comment so it can be recovered on the next parse.

        Returns:
            Formatted STRINGTABLE line.
        """
        line = f'{ENTRY_INDENT}{self.name.ljust(NAME_WIDTH - 1)} "{self.value}"'
        if self.is_foreign:
            line += f" // {self.id}"
        return line


def escape_value(text: str) -> str:
    """Escape special characters for an .rc string literal."""
    return (text
            .replace("\\", "\\\\")
            .replace('"', '""')
            .replace("\n", "\\n")
            .replace("\r", "\\r")
            .replace("\t", "\\t"))


def unescape_value(text: str) -> str:
    """Unescape an .rc string literal for display."""
    result = []
    i = 0
    while i < len(text):
        if text[i] == '\\' and i + 1 < len(text):
            next_char = text[i + 1]
            if next_char == 'n':
                result.append('\n')
            elif next_char == 'r':
                result.append('\r')
            elif next_char == 't':
                result.append('\t')
            elif next_char == '\\':
                result.append('\\')
            else:
                result.append(text[i])
                result.append(next_char)
            i += 2
        elif text[i] == '"' and text[i + 1:i + 2] == '"':
            result.append('"')
            i += 2
        else:
            result.append(text[i])
            i += 1
    return ''.join(result)
