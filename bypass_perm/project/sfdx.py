"""
SFDX project resolution.

Locates sfdx-project.json, exposes its package directories and source API
version, and lists sObjects present in local source for offline runs.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel

from bypass_perm.models.catalog import SObjectDescription

logger = logging.getLogger(__name__)

PROJECT_FILE = "sfdx-project.json"


class ProjectError(Exception):
    """Raised when sfdx-project.json exists but cannot be used."""
    pass


class PackageDirectory(BaseModel):
    path: Path                              # Absolute
    default: bool = False


class SfdxProject(BaseModel):
    """The parts of sfdx-project.json this tool relies on."""

    root: Path
    package_directories: List[PackageDirectory] = []
    source_api_version: Optional[str] = None

    @classmethod
    def find_root(cls, start_dir: Path) -> Optional[Path]:
        """Walk up from start_dir to the directory holding sfdx-project.json."""
        current = Path(start_dir).resolve()
        for candidate in (current, *current.parents):
            if (candidate / PROJECT_FILE).is_file():
                return candidate
        return None

    @classmethod
    def load(cls, start_dir: Path) -> Optional["SfdxProject"]:
        """Load the enclosing project, or None when start_dir is not inside one."""
        root = cls.find_root(start_dir)
        if root is None:
            logger.debug("No %s above %s", PROJECT_FILE, start_dir)
            return None

        try:
            config = json.loads((root / PROJECT_FILE).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ProjectError(f"Cannot read {root / PROJECT_FILE}: {e}") from e

        directories = []
        for entry in config.get("packageDirectories", []):
            if "path" not in entry:
                raise ProjectError(f"Package directory without a path in {root / PROJECT_FILE}")
            directories.append(
                PackageDirectory(path=(root / entry["path"]).resolve(), default=bool(entry.get("default")))
            )
        return cls(
            root=root,
            package_directories=directories,
            source_api_version=config.get("sourceApiVersion"),
        )

    @property
    def package_paths(self) -> List[Path]:
        return [d.path for d in self.package_directories]

    @property
    def default_package(self) -> Optional[Path]:
        """The package directory flagged default, else the first one."""
        for directory in self.package_directories:
            if directory.default:
                return directory.path
        if self.package_directories:
            return self.package_directories[0].path
        return None


# objects/ folders in source format (<pkg>/main/default/objects) or directly under the package
OBJECTS_DIR_PATTERNS = ("objects", "*/default/objects")


def list_local_sobjects(directories: Iterable[Path]) -> List[SObjectDescription]:
    """sObjects that have a folder under a package directory's objects/ folder."""
    names = set()
    for directory in directories:
        directory = Path(directory)
        if not directory.is_dir():
            continue
        for pattern in OBJECTS_DIR_PATTERNS:
            for objects_dir in directory.glob(pattern):
                if objects_dir.is_dir():
                    names.update(p.name for p in objects_dir.iterdir() if p.is_dir())
    return [SObjectDescription(name=n, label=n) for n in sorted(names)]
