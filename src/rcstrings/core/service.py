"""Add and edit workflows over the .rc files of a source tree."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config import DEFAULT_REPLACE_WITH, RcStringsConfig
from ..errors import NotFoundError, RcStringsError, UnresolvedResourceError
from ..project import ProjectScanner, RcFile, VCppProject, resolve_headers
from ..strings.models import StringEntry, escape_value
from .context import StringResourceContext, UpdateReport
from .settings import RcFileInfo, SettingsStore, UserSettings


@dataclass
class ResourceReport:
    """Report of an add or edit operation.

    Attributes:
        entry: The added or edited string resource.
        rc_file: The .rc file holding it.
        update: Outcome of writing the files.
        replacement: Code replacing the selection, if enabled.
    """
    entry: StringEntry
    rc_file: RcFile
    update: UpdateReport
    replacement: Optional[str] = None


class ResourceService:
    """Main service that orchestrates string resource editing.

    A session starts by restoring the last selection from the settings and
    ends with ``save_settings``.
    """

    def __init__(
        self,
        config: Optional[RcStringsConfig] = None,
        root: Optional[Path] = None,
        settings_store: Optional[SettingsStore] = None,
        random_ids: Optional[bool] = None,
        replace_with: Optional[str] = None,
        is_replacing_with: Optional[bool] = None
    ):
        """Initialize the service.

        Args:
            config: Configuration.
            root: Directory holding the projects. Defaults to current directory.
            settings_store: Settings persistence.
            random_ids: Id mode. Defaults to the persisted preference.
            replace_with: Replacement template. Defaults to the persisted one.
            is_replacing_with: Whether replacement code is produced. Defaults
                to the persisted choice.
        """
        self.root = Path(root) if root is not None else Path.cwd()
        self.settings_store = settings_store or SettingsStore()
        self.settings: UserSettings = self.settings_store.load()
        self.config = config or RcStringsConfig()
        self.scanner = ProjectScanner(self.root)
        self._rc_files: Optional[list[RcFile]] = None
        self.selected_rc_file: Optional[RcFile] = None

        previous = self.settings.find(self.solution_name)
        if random_ids is None:
            random_ids = self.settings.random_ids
        self.config.random_ids = random_ids
        if replace_with is None and previous is not None:
            replace_with = previous.replace_with
        if replace_with is not None:
            self.config.replace_with = replace_with or DEFAULT_REPLACE_WITH
        if is_replacing_with is None:
            is_replacing_with = previous.is_replacing_with if previous else True
        self.is_replacing_with = is_replacing_with

    @property
    def solution_name(self) -> str:
        return self.root.resolve().name

    def rc_files(self) -> list[RcFile]:
        """The .rc files under the root, scanned once per session."""
        if self._rc_files is None:
            self._rc_files = self.scanner.scan()
        return self._rc_files

    def select_rc_file(self, rc_path: Optional[Path] = None) -> RcFile:
        """Pick the .rc file to add a resource to.

        An explicit path wins, then the file remembered for this solution,
        then the only .rc file found.

        Raises:
            RcStringsError: If no file can be picked.
        """
        if rc_path is not None:
            rc_path = Path(rc_path)
            for rc_file in self.rc_files():
                if rc_file.path.resolve() == rc_path.resolve():
                    return rc_file
            if not rc_path.is_file():
                raise RcStringsError(f"RC file {rc_path} does not exist")
            project = VCppProject(name=rc_path.resolve().parent.name, path=rc_path.parent)
            return resolve_headers(RcFile(path=rc_path, project=project))

        rc_files = self.rc_files()
        if not rc_files:
            raise RcStringsError("No RC files detected")

        previous = self.settings.find(self.solution_name)
        if previous is not None:
            for rc_file in rc_files:
                if (rc_file.file_name == previous.selected_rc
                        and rc_file.project_name == previous.project_name):
                    logger.debug(f"Using last selected {rc_file.path}")
                    return rc_file

        if len(rc_files) == 1:
            return rc_files[0]

        names = ", ".join(str(f.path) for f in rc_files)
        raise RcStringsError(f"Several RC files found, choose one of: {names}")

    def create_context(self, rc_file: RcFile) -> StringResourceContext:
        return StringResourceContext(rc_file, config=self.config)

    def _format_value(self, value: str) -> str:
        return escape_value(value) if self.config.escape_values else value

    def add_resource(
        self,
        name: str,
        value: str,
        rc_path: Optional[Path] = None,
        resource_id: Optional[int] = None
    ) -> ResourceReport:
        """Add a string resource and write the .rc file and its header.

        Args:
            name: Resource name.
            value: Resource value, escaped unless escaping is disabled.
            rc_path: Target .rc file. Defaults to the last selected one.
            resource_id: Id to use. Generated when None.

        Returns:
            ResourceReport with the new entry and the write outcome.
        """
        rc_file = self.select_rc_file(rc_path)
        self.selected_rc_file = rc_file

        context = self.create_context(rc_file)
        entry = context.add_resource(self._format_value(value), name, resource_id)
        update = context.update_resource_files()

        replacement = None
        if self.is_replacing_with:
            replacement = self.config.format_replacement(name)

        return ResourceReport(
            entry=entry,
            rc_file=rc_file,
            update=update,
            replacement=replacement
        )

    def find_string_resource_by_name(self, name: str) -> tuple[StringEntry, StringResourceContext]:
        """Find a string resource in all .rc files under the root.

        Returns:
            Tuple of (entry, context of the file holding it) for the first
            file defining the name.

        Raises:
            UnresolvedResourceError: If the name is only found without an id.
            NotFoundError: If no file defines the name.
        """
        unresolved_in = None
        for rc_file in self.rc_files():
            context = self.create_context(rc_file)
            entry = context.get_string_resource_by_name(name)
            if entry is not None:
                return entry, context
            if unresolved_in is None and context.content.is_unresolved(name):
                unresolved_in = rc_file
        if unresolved_in is not None:
            raise UnresolvedResourceError(name, unresolved_in.file_name)
        raise NotFoundError(name, "the RC files in the solution")

    def edit_resource(self, name: str, value: str) -> ResourceReport:
        """Change the value of an existing string resource.

        Raises:
            NotFoundError: If no .rc file defines the name.
        """
        _, context = self.find_string_resource_by_name(name)
        entry = context.update_value(name, self._format_value(value))
        update = context.update_resource_files()
        return ResourceReport(entry=entry, rc_file=context.rc_file, update=update)

    def save_settings(self) -> None:
        """Persist the selection and preferences of this session.

        Raises:
            SettingsError: If the settings can not be written.
        """
        if self.selected_rc_file is not None:
            self.settings.remember(RcFileInfo(
                solution_name=self.solution_name,
                project_name=self.selected_rc_file.project_name,
                selected_rc=self.selected_rc_file.file_name,
                replace_with=self.config.replace_with or DEFAULT_REPLACE_WITH,
                is_replacing_with=self.is_replacing_with
            ))
        self.settings.random_ids = self.config.random_ids
        self.settings_store.save(self.settings)
