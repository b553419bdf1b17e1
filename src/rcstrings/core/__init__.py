"""Editing sessions over .rc files."""

from .context import StringResourceContext, UpdateReport
from .service import ResourceReport, ResourceService
from .settings import RcFileInfo, SettingsStore, UserSettings

__all__ = [
    "RcFileInfo",
    "ResourceReport",
    "ResourceService",
    "SettingsStore",
    "StringResourceContext",
    "UpdateReport",
    "UserSettings",
]
