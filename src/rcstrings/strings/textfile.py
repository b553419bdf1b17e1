"""Reading and writing text files while keeping their encoding and newlines."""

import codecs
import re
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from ..errors import ResourceIOError

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass
class TextFile:
    """Lines of a text file plus what is needed to write it back unchanged.

    Attributes:
        lines: Lines without their line terminators.
        encoding: Codec used to decode the file.
        newline: Line terminator used by the file.
        trailing_newline: Whether the last line is terminated.
    """
    lines: list[str] = field(default_factory=list)
    encoding: str = "utf-8"
    newline: str = "\n"
    trailing_newline: bool = True

    @property
    def text(self) -> str:
        return join_lines(self.lines, self.newline, self.trailing_newline)


def decode(raw: bytes) -> tuple[str, str]:
    """Decode file content with automatic encoding detection.

    Resource scripts saved by Visual Studio are usually UTF-16 with a BOM,
    older ones are in the ANSI code page.

    Returns:
        Tuple of (text, encoding).
    """
    # Check for UTF-16 BOM
    if raw.startswith(codecs.BOM_UTF16_LE) or raw.startswith(codecs.BOM_UTF16_BE):
        return raw.decode('utf-16'), 'utf-16'

    if raw.startswith(codecs.BOM_UTF8):
        return raw.decode('utf-8-sig'), 'utf-8-sig'

    try:
        return raw.decode('utf-8'), 'utf-8'
    except UnicodeDecodeError:
        return raw.decode('latin-1'), 'latin-1'


def split_text(text: str) -> TextFile:
    """Split text into lines, recording its newline style.

    Lines may end with CRLF, LF or CR. The most frequent of CRLF and LF is
    used when the text is written back.
    """
    crlf = text.count("\r\n")
    newline = "\r\n" if crlf and crlf >= text.count("\n") - crlf else "\n"
    if not text:
        return TextFile(lines=[], newline=newline, trailing_newline=False)

    lines = _LINE_BREAK.split(text)
    trailing = text.endswith(("\n", "\r"))
    if trailing:
        lines.pop()
    return TextFile(lines=lines, newline=newline, trailing_newline=trailing)


def join_lines(lines: list[str], newline: str = "\n", trailing_newline: bool = True) -> str:
    text = newline.join(lines)
    if lines and trailing_newline:
        text += newline
    return text


def read_text_file(path: Path) -> TextFile:
    """Read a whole text file.

    Raises:
        ResourceIOError: If the file can not be read.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise ResourceIOError(path, e.strerror or str(e)) from e

    text, encoding = decode(raw)
    document = split_text(text)
    document.encoding = encoding
    logger.debug(
        f"Read {len(document.lines)} lines from {path} ({encoding}, {document.newline!r})"
    )
    return document


def write_text_file(path: Path, document: TextFile) -> None:
    """Write a text file with the encoding and newlines of ``document``.

    Raises:
        ResourceIOError: If the file can not be written.
    """
    try:
        data = document.text.encode(document.encoding)
    except UnicodeEncodeError as e:
        raise ResourceIOError(
            path, f"text can not be encoded as {document.encoding}: {e.reason}"
        ) from e

    try:
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise ResourceIOError(path, e.strerror or str(e)) from e
    logger.debug(f"Wrote {len(document.lines)} lines to {path}")
