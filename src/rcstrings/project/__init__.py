"""Discovery of projects, .rc files and their headers."""

from .models import RcFile, VCppProject
from .scanner import ProjectScanner, additional_include_directories, resolve_headers

__all__ = [
    "ProjectScanner",
    "RcFile",
    "VCppProject",
    "additional_include_directories",
    "resolve_headers",
]
