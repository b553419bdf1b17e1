"""Persisted user settings."""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from ..config import DEFAULT_REPLACE_WITH
from ..errors import SettingsError

APP_NAME = "rcstrings"
SETTINGS_FILE = "settings.json"


@dataclass
class RcFileInfo:
    """Last selection made in a solution.

    Attributes:
        solution_name: Name of the solution (workspace directory).
        project_name: Project owning the selected .rc file.
        selected_rc: File name of the selected .rc file.
        replace_with: Template for the code replacing a selection.
        is_replacing_with: Whether the replacement code is produced.
    """
    solution_name: str
    project_name: str = ""
    selected_rc: str = ""
    replace_with: str = DEFAULT_REPLACE_WITH
    is_replacing_with: bool = True


@dataclass
class UserSettings:
    """All persisted settings.

    Attributes:
        solutions_selected_rc: Last selection per solution.
        random_ids: Generate random ids for new string resources.
    """
    solutions_selected_rc: list[RcFileInfo] = field(default_factory=list)
    random_ids: bool = False

    def find(self, solution_name: str) -> Optional[RcFileInfo]:
        return next(
            (s for s in self.solutions_selected_rc if s.solution_name == solution_name),
            None
        )

    def remember(self, info: RcFileInfo) -> None:
        """Store the selection of a solution, replacing the previous one."""
        self.solutions_selected_rc = [
            s for s in self.solutions_selected_rc if s.solution_name != info.solution_name
        ]
        self.solutions_selected_rc.append(info)

    @classmethod
    def from_dict(cls, data: dict) -> "UserSettings":
        known = set(RcFileInfo.__dataclass_fields__)
        solutions = [
            RcFileInfo(**{k: v for k, v in item.items() if k in known})
            for item in data.get("solutions_selected_rc", [])
            if isinstance(item, dict) and "solution_name" in item
        ]
        return cls(
            solutions_selected_rc=solutions,
            random_ids=bool(data.get("random_ids", False))
        )


def default_settings_path() -> Path:
    return Path(click.get_app_dir(APP_NAME)) / SETTINGS_FILE


class SettingsStore:
    """Loads and saves UserSettings as JSON."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize the store.

        Args:
            path: Settings file. Defaults to the user config directory.
        """
        self.path = Path(path) if path is not None else default_settings_path()

    def load(self) -> UserSettings:
        """Load the settings.

        A missing file gives default settings. An unreadable or corrupt file
        is reported and also gives default settings.
        """
        if not self.path.exists():
            return UserSettings()

        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring settings file {self.path}: {e}")
            return UserSettings()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.path}: not a JSON object")
            return UserSettings()
        return UserSettings.from_dict(data)

    def save(self, settings: UserSettings) -> None:
        """Save the settings.

        Raises:
            SettingsError: If the file can not be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(asdict(settings), indent=2) + "\n",
                encoding='utf-8'
            )
        except OSError as e:
            raise SettingsError(f"Can not save settings to {self.path}: {e}") from e
        logger.debug(f"Saved settings to {self.path}")
