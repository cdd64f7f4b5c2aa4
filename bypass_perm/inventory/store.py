"""
Permission Inventory — point-in-time snapshot of existing Custom Permissions.

Built once per run from local metadata files and, when connected, the org.
Read-only afterwards: lookups only, never mutated.
"""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

CUSTOM_PERMISSION_SUFFIX = ".customPermission-meta.xml"


class PermissionInventory(BaseModel):
    """Existing Custom Permission full names, keyed for O(1) existence checks."""

    model_config = ConfigDict(frozen=True)

    names: FrozenSet[str] = frozenset()

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "PermissionInventory":
        return cls(names=frozenset(names))

    @classmethod
    def from_directories(cls, directories: Iterable[Path]) -> "PermissionInventory":
        """Collect every *.customPermission-meta.xml found below the given directories."""
        names = set()
        for directory in directories:
            directory = Path(directory)
            if not directory.is_dir():
                continue
            for path in directory.rglob(f"*{CUSTOM_PERMISSION_SUFFIX}"):
                if path.is_file():
                    names.add(path.name[: -len(CUSTOM_PERMISSION_SUFFIX)])
        logger.debug("Local inventory scanned", extra={"count": len(names)})
        return cls(names=frozenset(names))

    def exists(self, full_name: str) -> bool:
        """Whether a permission with this full name already exists."""
        return full_name in self.names

    def union(self, other: "PermissionInventory") -> "PermissionInventory":
        """Merge two snapshots into a new one."""
        return PermissionInventory(names=self.names | other.names)

    def __len__(self) -> int:
        return len(self.names)
