"""Line tokenizer shared by the .rc and header parsers."""

from typing import Iterable, Optional

# Characters separating the fields of a "#define NAME ID" line
HEADER_SEPARATORS = frozenset(" \t")

# Characters separating the fields of a STRINGTABLE entry
RC_SEPARATORS = frozenset(" \t,")

DEFINE_TAG = "#define"

# "#define", name and id
MIN_DEFINE_FIELDS = 3

# Symbols the resource editor keeps for its own bookkeeping
APSTUDIO_PREFIX = "_APS_"

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def split_line(
    line: str,
    separators: Iterable[str],
    quote: Optional[str] = None
) -> list[str]:
    """Split a line into its non-empty, trimmed fields.

    When ``quote`` is given, a quoted run is kept as a single field holding
    the text between the quotes verbatim. A doubled quote inside the run is
    an escaped quote and stays part of the field. An unterminated run ends at
    the end of the line.

    Args:
        line: Raw text line.
        separators: Characters splitting fields.
        quote: Optional quote character.

    Returns:
        List of fields, in order.
    """
    separators = frozenset(separators)
    fields = []
    current = []
    i = 0

    while i < len(line):
        char = line[i]

        if quote is not None and char == quote:
            _flush(current, fields)
            i += 1
            quoted = []
            while i < len(line):
                if line[i] == quote:
                    if line[i + 1:i + 2] == quote:
                        quoted.append(quote * 2)
                        i += 2
                        continue
                    break
                quoted.append(line[i])
                i += 1
            # Quoted fields may be empty and are never trimmed
            fields.append(''.join(quoted))
            i += 1
            continue

        if char in separators:
            _flush(current, fields)
        else:
            current.append(char)
        i += 1

    _flush(current, fields)
    return fields


def _flush(current: list[str], fields: list[str]) -> None:
    field = ''.join(current).strip()
    if field:
        fields.append(field)
    current.clear()


def parse_int(text: str) -> Optional[int]:
    """Parse a decimal or 0x-prefixed hexadecimal integer.

    Returns:
        The value, or None when the text is not an integer.
    """
    text = text.strip()
    if text.startswith('(') and text.endswith(')'):
        text = text[1:-1].strip()
    if text[:2].lower() == '0x':
        digits = text[2:]
        if digits and all(c in _HEX_DIGITS for c in digits):
            return int(digits, 16)
        return None
    if text.isascii() and text.isdigit():
        return int(text)
    return None


def parse_define(line: str) -> Optional[tuple[str, int]]:
    """Recognize a "#define NAME ID" line.

    Args:
        line: Raw header line.

    Returns:
        Tuple of (name, id), or None when the line has another shape.
    """
    fields = split_line(line, HEADER_SEPARATORS)
    if len(fields) < MIN_DEFINE_FIELDS or fields[0] != DEFINE_TAG:
        return None

    value = parse_int(fields[2])
    if value is None:
        return None
    return fields[1], value
