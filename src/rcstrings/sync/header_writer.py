"""Merge the string table model into a resource header."""

from pathlib import Path
from typing import Optional

from loguru import logger

from ..config import DEFAULT_ID_COLUMN
from ..strings.content import RcFileContent
from ..strings.models import StringEntry
from ..strings.textfile import TextFile, read_text_file, write_text_file
from ..strings.tokenizer import APSTUDIO_PREFIX, DEFINE_TAG, parse_define


class HeaderFileWriter:
    """Writes the #define lines of new string resources into a header.

    The header is walked line by line next to a cursor over the string
    resources sorted by id. Existing lines are never moved or reformatted;
    only the defines missing from the header are inserted.
    """

    def __init__(self, id_column: int = DEFAULT_ID_COLUMN):
        """Initialize the writer.

        Args:
            id_column: Column at which the id of a generated define starts.
        """
        self.id_column = id_column

    def write_file(
        self,
        content: RcFileContent,
        read_path: Path,
        write_path: Optional[Path] = None
    ) -> TextFile:
        """Merge the model into a header file.

        The source header is read entirely before the destination is
        written, so both may be the same path.

        Args:
            content: String table model.
            read_path: Header to read.
            write_path: Header to write. Defaults to ``read_path``.

        Returns:
            The written document.

        Raises:
            ResourceIOError: If a file can not be read or written.
        """
        read_path = Path(read_path)
        write_path = Path(write_path) if write_path is not None else read_path

        if read_path.exists():
            document = read_text_file(read_path)
        else:
            logger.warning(f"Header {read_path} does not exist, creating it")
            document = TextFile()

        merged = TextFile(
            lines=self.merge(document.lines, content),
            encoding=document.encoding,
            newline=document.newline,
            trailing_newline=True
        )
        write_text_file(write_path, merged)
        return merged

    def merge(self, lines: list[str], content: RcFileContent) -> list[str]:
        """Merge the model into the lines of a header.

        The cursor walks the strings the header does not define yet, in
        ascending id order. The first one lower than a define line is
        inserted before that line; the others are appended at the end.
        Strings defined anywhere in the header, even out of id order, are
        never written again.

        Args:
            lines: Header lines without line terminators.
            content: String table model.

        Returns:
            The lines of the merged header.
        """
        defined = self.defined_symbols(lines)
        # Strings whose #define lives in another header are skipped
        missing = [
            entry for entry in content.sorted_by_id()
            if not self._is_foreign(content, entry) and entry.symbol not in defined
        ]
        position = 0
        inserted = False
        output = []

        for line in lines:
            define = parse_define(line)
            if (define is None or define[0].startswith(APSTUDIO_PREFIX)
                    or inserted or position >= len(missing)):
                output.append(line)
                continue

            name, line_id = define
            current = missing[position]
            if line_id > current.id:
                inserted = True
                output.append(self.format_define(current))
                logger.debug(f"Inserted {current.name} before {name}")
                position += 1
            output.append(line)

        for entry in missing[position:]:
            output.append(self.format_define(entry))
            logger.debug(f"Appended {entry.name}")

        return output

    @staticmethod
    def defined_symbols(lines: list[str]) -> set[str]:
        """Names of every #define in the header lines."""
        return {define[0] for define in map(parse_define, lines) if define is not None}

    @staticmethod
    def _is_foreign(content: RcFileContent, entry: StringEntry) -> bool:
        return content.is_name_with_empty_fields(entry.name)

    def format_define(self, entry: StringEntry) -> str:
        """Format the #define line of an entry.

        The id is padded to start at ``id_column``. When the name leaves
        less than two padding characters a single space is used.
        """
        prefix = f"{DEFINE_TAG} {entry.symbol or entry.name}"
        if len(prefix) < self.id_column - 1:
            return f"{prefix.ljust(self.id_column)}{entry.id}"
        return f"{prefix} {entry.id}"
