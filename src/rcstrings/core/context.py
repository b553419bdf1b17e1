"""Editing context of one .rc file and its header."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config import RcStringsConfig
from ..errors import DuplicateIdError, DuplicateNameError, ResourceIOError
from ..project.models import RcFile
from ..strings.content import RcFileContent
from ..strings.ids import next_id
from ..strings.models import StringEntry
from ..strings.parser import RcParser
from ..strings.textfile import TextFile, read_text_file
from ..strings.tokenizer import APSTUDIO_PREFIX
from ..sync.header_writer import HeaderFileWriter


@dataclass
class UpdateReport:
    """Outcome of writing an .rc file and its header.

    Each file is reported on its own: the .rc file may have been written
    even though the header could not be.

    Attributes:
        rc_path: The .rc file.
        header_path: The companion header, if any.
        rc_written: Whether the .rc file was written.
        header_written: Whether the header was written.
        rc_error: Error message if writing the .rc file failed.
        header_error: Error message if writing the header failed.
        dry_run: Whether this was a dry run.
        rc_preview: Rendered .rc content of a dry run.
        header_preview: Rendered header content of a dry run.
    """
    rc_path: Path
    header_path: Optional[Path]
    rc_written: bool = False
    header_written: bool = False
    rc_error: Optional[str] = None
    header_error: Optional[str] = None
    dry_run: bool = False
    rc_preview: Optional[str] = None
    header_preview: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.rc_error is None and self.header_error is None

    @property
    def errors(self) -> list[str]:
        return [e for e in (self.rc_error, self.header_error) if e]


class StringResourceContext:
    """Owns the string table model of one .rc file during an editing session.

    The model is parsed on first use. Writes always go through the context
    so the .rc file and its header are updated together.
    """

    def __init__(
        self,
        rc_file: RcFile,
        config: Optional[RcStringsConfig] = None,
        parser: Optional[RcParser] = None,
        header_writer: Optional[HeaderFileWriter] = None
    ):
        """Initialize the context.

        Args:
            rc_file: The .rc file, linked to its headers.
            config: Configuration.
            parser: RC parser.
            header_writer: Header synchronizer.
        """
        self.rc_file = rc_file
        self.config = config or RcStringsConfig()
        self.parser = parser or RcParser()
        self.header_writer = header_writer or HeaderFileWriter(self.config.id_column)
        self._content: Optional[RcFileContent] = None
        self._defines: dict[str, int] = {}

    @property
    def content(self) -> RcFileContent:
        """The string table model, parsed on first access.

        Raises:
            ResourceIOError: If the .rc file or a header can not be read.
        """
        if self._content is None:
            self._content = self._load()
        return self._content

    def _load(self) -> RcFileContent:
        rc_text, header_text, siblings = self.parser.read_sources(
            self.rc_file.path, self.rc_file.header_path, self.rc_file.sibling_headers
        )

        self._defines = {}
        for text in [header_text or "", *siblings]:
            for name, value in self.parser.parse_defines(text).items():
                self._defines.setdefault(name, value)

        content = self.parser.parse(rc_text, header_text, siblings)
        logger.debug(
            f"Loaded {len(content)} string(s) from {self.rc_file.file_name}"
        )
        return content

    def reserved_ids(self) -> dict[int, str]:
        """Ids of header symbols that are not strings of this file."""
        reserved = {}
        for name, value in self._defines.items():
            if name in self.content or name.startswith(APSTUDIO_PREFIX):
                continue
            reserved.setdefault(value, name)
        return reserved

    def next_id(self) -> int:
        """Generate an id for a new string with the current id mode."""
        config = self.config
        return next_id(
            self.content.ids(),
            sequential=not config.random_ids,
            first_id=config.first_id,
            id_range=config.random_id_range,
            max_attempts=config.random_id_attempts,
            reserved_ids=self.reserved_ids()
        )

    def add_resource(
        self,
        value: str,
        name: str,
        resource_id: Optional[int] = None
    ) -> StringEntry:
        """Add a string resource to the model.

        Args:
            value: Escaped value.
            name: Resource name.
            resource_id: Id to use. Generated when None.

        Returns:
            The new entry.

        Raises:
            DuplicateNameError: If the name is already used.
            DuplicateIdError: If the id is already used.
            IdentifierSpaceExhaustedError: If no id can be generated.
        """
        content = self.content
        if name not in content and name in self._defines:
            raise DuplicateNameError(name)

        if resource_id is None:
            resource_id = self.next_id()
        else:
            owner = self.reserved_ids().get(resource_id)
            if owner is not None:
                raise DuplicateIdError(resource_id, owner)

        entry = content.add_resource(value, name, resource_id)
        logger.info(f"Added {name} = {resource_id} to {self.rc_file.file_name}")
        return entry

    def get_string_resource_by_name(self, name: str) -> Optional[StringEntry]:
        return self.content.get_by_name(name)

    def update_value(self, name: str, value: str) -> StringEntry:
        """Change the value of an existing resource.

        Raises:
            NotFoundError: If there is no resource with that name.
        """
        entry = self.content.update_value(name, value)
        logger.info(f"Updated {name} in {self.rc_file.file_name}")
        return entry

    def render(self) -> tuple[TextFile, Optional[TextFile]]:
        """Render the .rc file and header without writing them.

        Returns:
            Tuple of (rc document, header document or None without header).
        """
        rc_path = self.rc_file.path
        rc_document = self.parser.render(read_text_file(rc_path), self.content)

        header_path = self.rc_file.header_path
        if header_path is None:
            return rc_document, None

        header = read_text_file(header_path) if header_path.exists() else TextFile()
        header_document = TextFile(
            lines=self.header_writer.merge(header.lines, self.content),
            encoding=header.encoding,
            newline=header.newline
        )
        return rc_document, header_document

    def update_resource_files(self) -> UpdateReport:
        """Write the model back into the .rc file and its header.

        Both files are attempted even if the first one fails.

        Returns:
            UpdateReport describing each file.
        """
        report = UpdateReport(
            rc_path=self.rc_file.path,
            header_path=self.rc_file.header_path,
            dry_run=self.config.dry_run
        )
        content = self.content

        if self.config.dry_run:
            rc_document, header_document = self.render()
            report.rc_preview = rc_document.text
            if header_document is not None:
                report.header_preview = header_document.text
            return report

        try:
            self.parser.write(content, self.rc_file.path)
            report.rc_written = True
        except ResourceIOError as e:
            logger.error(f"Writing {self.rc_file.path} failed: {e}")
            report.rc_error = str(e)

        if self.rc_file.header_path is None:
            report.header_error = f"No header is paired with {self.rc_file.file_name}"
            return report

        try:
            self.header_writer.write_file(content, self.rc_file.header_path)
            report.header_written = True
        except ResourceIOError as e:
            logger.error(f"Writing {self.rc_file.header_path} failed: {e}")
            report.header_error = str(e)

        return report
