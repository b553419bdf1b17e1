"""Parser for the STRINGTABLE of .rc files and #define lines of headers."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from ..errors import DuplicateIdError, DuplicateNameError
from .content import RcFileContent
from .models import ENTRY_INDENT
from .textfile import TextFile, read_text_file, split_text, write_text_file
from .tokenizer import (
    HEADER_SEPARATORS,
    RC_SEPARATORS,
    parse_define,
    parse_int,
    split_line,
)

STRINGTABLE_TAG = "STRINGTABLE"
BEGIN_TAGS = ("BEGIN", "{")
END_TAGS = ("END", "}")
INCLUDE_TAG = "#include"
COMMENT_PREFIXES = ("//", "/*")


@dataclass
class StringTableBlock:
    """Position of a STRINGTABLE block within the lines of an .rc file.

    Attributes:
        header: Index of the STRINGTABLE line.
        begin: Index of the BEGIN line.
        end: Index of the END line, or len(lines) when unterminated.
    """
    header: int
    begin: int
    end: int

    @property
    def body(self) -> slice:
        return slice(self.begin + 1, self.end)


@dataclass
class RawEntry:
    """A STRINGTABLE entry as written in the .rc file."""
    name: str
    value: str
    inline_id: Optional[int] = None


class RcParser:
    """Parser for the string table of .rc files.

    Only the first STRINGTABLE block is modeled. Ids come from the
    companion header, then from sibling headers, then from a trailing
    "// id" comment on the entry line.
    """

    def parse(
        self,
        content: str,
        header_content: Optional[str] = None,
        sibling_headers: Iterable[str] = ()
    ) -> RcFileContent:
        """Parse .rc content into an RcFileContent.

        Args:
            content: The content of an .rc file.
            header_content: The content of the companion header.
            sibling_headers: Contents of other headers included by the file.

        Returns:
            The string table model.
        """
        header_ids = self.parse_defines(header_content or "")
        sibling_ids: dict[str, int] = {}
        for text in sibling_headers:
            for name, value in self.parse_defines(text).items():
                sibling_ids.setdefault(name, value)

        model = RcFileContent()
        for raw in self.parse_entries(content):
            numeric_name = parse_int(raw.name)
            symbol = ""
            if raw.name in header_ids:
                resource_id = header_ids[raw.name]
                symbol = raw.name
            elif numeric_name is not None:
                resource_id = numeric_name
            elif raw.name in sibling_ids:
                resource_id = sibling_ids[raw.name]
            elif raw.inline_id is not None:
                resource_id = raw.inline_id
            else:
                logger.warning(f"No id found for string resource {raw.name}")
                model.add_unresolved(raw.name, raw.value)
                continue

            try:
                model.add_resource(raw.value, raw.name, resource_id, symbol=symbol)
            except (DuplicateNameError, DuplicateIdError) as e:
                logger.warning(f"Keeping {raw.name} without an id: {e}")
                model.add_unresolved(raw.name, raw.value)

        return model

    def parse_file(
        self,
        path: Path,
        header_path: Optional[Path] = None,
        sibling_header_paths: Iterable[Path] = ()
    ) -> RcFileContent:
        """Parse an .rc file and its headers.

        A missing companion header is treated as empty.

        Raises:
            ResourceIOError: If a file can not be read.
        """
        return self.parse(*self.read_sources(path, header_path, sibling_header_paths))

    @staticmethod
    def read_sources(
        path: Path,
        header_path: Optional[Path] = None,
        sibling_header_paths: Iterable[Path] = ()
    ) -> tuple[str, Optional[str], list[str]]:
        """Read an .rc file and the headers paired with it.

        Headers that do not exist are left out.

        Returns:
            Tuple of (rc text, companion header text or None, sibling header texts).

        Raises:
            ResourceIOError: If a file can not be read.
        """
        content = read_text_file(path).text

        header_content = None
        if header_path is not None and Path(header_path).exists():
            header_content = read_text_file(header_path).text

        siblings = [
            read_text_file(p).text for p in sibling_header_paths if Path(p).exists()
        ]
        return content, header_content, siblings

    def parse_entries(self, content: str) -> list[RawEntry]:
        """Extract the entries of the first STRINGTABLE block."""
        lines = split_text(content).lines
        block = self.find_string_table(lines)
        if block is None:
            return []

        entries = []
        pending_name: Optional[str] = None

        for line in lines[block.body]:
            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIXES):
                continue

            fields = split_line(stripped, RC_SEPARATORS, quote='"')

            if '"' not in stripped:
                # Name on its own line, value on the next one
                if len(fields) == 1:
                    pending_name = fields[0]
                continue

            if stripped.startswith('"'):
                if pending_name is None:
                    continue
                name, rest = pending_name, fields
            else:
                if len(fields) < 2:
                    continue
                name, rest = fields[0], fields[1:]
            pending_name = None

            entries.append(RawEntry(
                name=name,
                value=rest[0],
                inline_id=self._inline_id(rest[1:])
            ))

        return entries

    @staticmethod
    def _inline_id(fields: list[str]) -> Optional[int]:
        comment = " ".join(fields).strip()
        if not comment.startswith("//"):
            return None
        return parse_int(comment[2:])

    def find_string_table(self, lines: list[str]) -> Optional[StringTableBlock]:
        """Locate the first STRINGTABLE ... BEGIN ... END block."""
        for index, line in enumerate(lines):
            fields = split_line(line, HEADER_SEPARATORS)
            if not fields or fields[0].upper() != STRINGTABLE_TAG:
                continue

            begin = None
            if fields[-1].upper() in BEGIN_TAGS:
                begin = index
            else:
                for j in range(index + 1, len(lines)):
                    if lines[j].strip().upper() in BEGIN_TAGS:
                        begin = j
                        break
            if begin is None:
                return None

            end = len(lines)
            for j in range(begin + 1, len(lines)):
                if lines[j].strip().upper() in END_TAGS:
                    end = j
                    break
            return StringTableBlock(header=index, begin=begin, end=end)

        return None

    def parse_defines(self, content: str) -> dict[str, int]:
        """Map the names of "#define NAME ID" lines to their ids.

        The first definition of a name wins.
        """
        defines: dict[str, int] = {}
        for line in split_text(content).lines:
            define = parse_define(line)
            if define is not None:
                defines.setdefault(*define)
        return defines

    def include_names(self, content: str) -> list[str]:
        """Return the targets of the #include "file" lines of an .rc file."""
        names = []
        for line in split_text(content).lines:
            fields = split_line(line, HEADER_SEPARATORS, quote='"')
            if len(fields) >= 2 and fields[0] == INCLUDE_TAG and fields[1]:
                if line.strip()[len(INCLUDE_TAG):].strip().startswith('"'):
                    names.append(fields[1])
        return names

    def format(self, model: RcFileContent) -> list[str]:
        """Format the model as the lines of a STRINGTABLE body.

        Entries are written in ascending id order, entries without an id
        last in their original order.
        """
        lines = [entry.to_rc_format() for entry in model.sorted_by_id()]
        for name, value in model.unresolved:
            lines.append(f'{ENTRY_INDENT}{name} "{value}"')
        return lines

    def render(self, document: TextFile, model: RcFileContent) -> TextFile:
        """Replace the first STRINGTABLE body of a document with the model.

        Lines outside that body are kept verbatim. A document without a
        STRINGTABLE gets a new block at its end.
        """
        lines = list(document.lines)
        body = self.format(model)
        block = self.find_string_table(lines)

        if block is None:
            if lines and lines[-1].strip():
                lines.append("")
            lines.extend([STRINGTABLE_TAG, "BEGIN", *body, "END"])
        elif block.end == len(lines):
            lines[block.body] = body + ["END"]
        else:
            lines[block.body] = body

        return TextFile(
            lines=lines,
            encoding=document.encoding,
            newline=document.newline,
            trailing_newline=True
        )

    def write(self, model: RcFileContent, path: Path) -> TextFile:
        """Write the model into an .rc file, keeping its other content.

        Raises:
            ResourceIOError: If the file can not be read or written.
        """
        path = Path(path)
        document = read_text_file(path) if path.exists() else TextFile()
        rendered = self.render(document, model)
        write_text_file(path, rendered)
        return rendered
