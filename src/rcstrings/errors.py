"""Exceptions raised by rcstrings."""

from pathlib import Path
from typing import Optional


class RcStringsError(Exception):
    """Base class for errors shown to the user."""


class DuplicateNameError(RcStringsError):
    """A string resource with the same name already exists."""

    def __init__(self, name: str):
        super().__init__(f'A string resource named "{name}" already exists')
        self.name = name


class DuplicateIdError(RcStringsError):
    """A string resource with the same id already exists."""

    def __init__(self, resource_id: int, owner: Optional[str] = None):
        message = f"String resource id {resource_id} is already used"
        if owner:
            message += f' by "{owner}"'
        super().__init__(message)
        self.resource_id = resource_id
        self.owner = owner


class NotFoundError(RcStringsError):
    """A string resource name could not be found."""

    def __init__(self, name: str, scope: str = "the RC files in scope"):
        super().__init__(
            f'The string resource name "{name}" can not be found in {scope}'
        )
        self.name = name


class IdentifierSpaceExhaustedError(RcStringsError):
    """No free identifier could be drawn."""


class SettingsError(RcStringsError):
    """The settings file could not be read or written."""


class ResourceIOError(RcStringsError, OSError):
    """Reading or writing an .rc or header file failed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnresolvedResourceError(NotFoundError):
    """A string resource exists but its id could not be resolved."""

    def __init__(self, name: str, file_name: str):
        RcStringsError.__init__(
            self,
            f'The string resource "{name}" in {file_name} has no id; '
            f'add its #define to a header to edit it'
        )
        self.name = name
        self.file_name = file_name
