"""Discovery of .rc files in a source tree."""

import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from ..errors import ResourceIOError
from ..strings.parser import RcParser
from ..strings.textfile import read_text_file
from .models import RcFile, VCppProject

PROJECT_SUFFIX = ".vcxproj"
RC_SUFFIX = ".rc"
HEADER_SUFFIXES = {".h", ".hh", ".hpp", ".hxx"}
DEFAULT_HEADER = "resource.h"

# Item types whose metadata lists additional include directories
INCLUDE_ITEM_TYPES = {"ClCompile", "ResourceCompile"}

IGNORED_DIRS = {".git", ".hg", ".svn", ".vs", "node_modules", "__pycache__"}


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _walk(root: Path, suffix: str) -> list[Path]:
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
        for name in sorted(filenames):
            if Path(name).suffix.lower() == suffix:
                found.append(Path(dirpath) / name)
    return found


def _windows_path(value: str) -> Path:
    return Path(value.strip().replace('\\', '/'))


def additional_include_directories(project_dir: Path, raw_values: Iterable[str]) -> set[Path]:
    """Resolve AdditionalIncludeDirectories values of a project.

    Directories are resolved relative to the project directory. Entries that
    use MSBuild macros or do not name an existing directory are left out.

    Args:
        project_dir: Directory of the project file.
        raw_values: Semicolon separated lists as written in the project.

    Returns:
        Set of existing absolute directories, possibly empty.
    """
    directories: set[Path] = set()
    for raw in raw_values:
        for value in raw.split(';'):
            value = value.strip()
            if not value:
                continue
            if '$(' in value or '%(' in value:
                logger.debug(f"Skipping include directory with macro: {value}")
                continue
            try:
                directory = (project_dir / _windows_path(value)).resolve()
            except (OSError, ValueError) as e:
                logger.debug(f"Skipping include directory {value}: {e}")
                continue
            if directory.is_dir():
                directories.add(directory)
            else:
                logger.debug(f"Include directory {directory} does not exist")
    return directories


def _find_in(directory: Path, relative: Path) -> Optional[Path]:
    """Find a file, falling back to a case-insensitive match of its name."""
    candidate = directory / relative
    if candidate.is_file():
        return candidate

    parent = candidate.parent
    if not parent.is_dir():
        return None
    wanted = candidate.name.lower()
    for child in parent.iterdir():
        if child.name.lower() == wanted and child.is_file():
            return child
    return None


def resolve_headers(rc_file: RcFile, parser: Optional[RcParser] = None) -> RcFile:
    """Pair an .rc file with the headers it includes.

    The first quoted header include found in the .rc directory or one of the
    project include directories is the companion header; the others are
    sibling headers. Without any, ``resource.h`` next to the .rc file is used.

    Returns:
        The same RcFile, linked to its headers.
    """
    parser = parser or RcParser()
    try:
        content = read_text_file(rc_file.path).text
    except ResourceIOError as e:
        logger.warning(f"Can not read {rc_file.path}: {e.reason}")
        content = ""

    search_dirs = [rc_file.path.parent, *rc_file.project.additional_include_directories]
    headers = []
    for name in parser.include_names(content):
        relative = _windows_path(name)
        if relative.suffix.lower() not in HEADER_SUFFIXES:
            continue
        for directory in search_dirs:
            found = _find_in(directory, relative)
            if found is not None and found not in headers:
                headers.append(found)
                break
        else:
            logger.debug(f"Header {name} of {rc_file.file_name} not found")

    if headers:
        rc_file.link_header(headers[0], headers[1:])
    else:
        rc_file.link_header(rc_file.path.parent / DEFAULT_HEADER)
    logger.debug(f"{rc_file.file_name} uses header {rc_file.header_path}")
    return rc_file


class ProjectScanner:
    """Finds the .rc files of the projects under a directory."""

    def __init__(self, root: Path, parser: Optional[RcParser] = None):
        """Initialize the scanner.

        Args:
            root: Directory to scan. Defaults to current directory.
            parser: Parser used to read #include lines.
        """
        self.root = Path(root) if root is not None else Path.cwd()
        self.parser = parser or RcParser()

    def scan(self) -> list[RcFile]:
        """Scan the directory for .rc files.

        Files listed by a .vcxproj belong to that project. Other .rc files
        are grouped by directory into a project named after it.

        Returns:
            List of RcFile objects linked to their headers.
        """
        rc_files = []
        claimed: set[Path] = set()

        for project_file in _walk(self.root, PROJECT_SUFFIX):
            project, rc_paths = self.load_project(project_file)
            for rc_path in rc_paths:
                if rc_path.resolve() in claimed:
                    continue
                claimed.add(rc_path.resolve())
                rc_files.append(resolve_headers(RcFile(path=rc_path, project=project), self.parser))

        loose_projects: dict[Path, VCppProject] = {}
        for rc_path in _walk(self.root, RC_SUFFIX):
            if rc_path.resolve() in claimed:
                continue
            directory = rc_path.parent
            if directory not in loose_projects:
                loose_projects[directory] = VCppProject(
                    name=directory.resolve().name,
                    path=directory
                )
            rc_files.append(
                resolve_headers(RcFile(path=rc_path, project=loose_projects[directory]), self.parser)
            )

        logger.info(f"Found {len(rc_files)} RC file(s) under {self.root}")
        return rc_files

    def load_project(self, project_file: Path) -> tuple[VCppProject, list[Path]]:
        """Read the .rc items and include directories of a project file.

        A project file that can not be parsed yields no .rc files.

        Returns:
            Tuple of (project, existing .rc paths).
        """
        project = VCppProject(name=project_file.stem, path=project_file)
        project_dir = project_file.parent

        try:
            tree = ET.parse(project_file)
        except (ET.ParseError, OSError) as e:
            logger.warning(f"Can not read project {project_file}: {e}")
            return project, []

        rc_paths = []
        include_values = []
        for element in tree.getroot().iter():
            tag = _local_name(element.tag)
            if tag == "ResourceCompile" and element.get("Include"):
                rc_path = project_dir / _windows_path(element.get("Include"))
                if rc_path.suffix.lower() == RC_SUFFIX and rc_path.is_file():
                    rc_paths.append(rc_path)
            if tag in INCLUDE_ITEM_TYPES:
                for child in element:
                    if _local_name(child.tag) == "AdditionalIncludeDirectories" and child.text:
                        include_values.append(child.text)

        project.additional_include_directories = sorted(
            additional_include_directories(project_dir, include_values)
        )
        return project, rc_paths
