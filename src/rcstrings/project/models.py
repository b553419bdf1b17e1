"""Projects and the .rc files they own."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class VCppProject:
    """A native project owning .rc files.

    Attributes:
        name: Project name.
        path: Project file, or the directory of loose .rc files.
        additional_include_directories: Directories searched for headers.
    """
    name: str
    path: Optional[Path] = None
    additional_include_directories: list[Path] = field(default_factory=list)


@dataclass
class RcFile:
    """A resource script and the headers paired with it.

    Attributes:
        path: Path to the .rc file.
        project: Project the file belongs to.
        header_path: Companion header holding the string defines.
        sibling_headers: Other headers included by the file.
    """
    path: Path
    project: VCppProject = field(default_factory=lambda: VCppProject(name=""))
    header_path: Optional[Path] = None
    sibling_headers: list[Path] = field(default_factory=list)

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def project_name(self) -> str:
        return self.project.name

    def link_header(self, header_path: Path, sibling_headers: Optional[list[Path]] = None) -> None:
        """Pair the file with its resolved headers."""
        self.header_path = header_path
        self.sibling_headers = list(sibling_headers or [])
