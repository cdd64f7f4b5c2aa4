"""
File Emitter — writes serialized permissions to the output directory.

Behavioral Contract:
- One file per permission: <output_dir>/<PermissionName>.customPermission-meta.xml
- Full overwrite, UTF-8
- Writes in a batch are independent and run concurrently; the batch is joined
  before the result is reported
- A failed write is recorded against its permission name; writes that already
  succeeded are left in place
"""

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

from bypass_perm.inventory.store import CUSTOM_PERMISSION_SUFFIX
from bypass_perm.models.emission import EmitResult, WriteOutcome

logger = logging.getLogger(__name__)

FILE_ENCODING = "utf-8"


def _write_text(path: Path, text: str) -> None:
    path.write_text(text, encoding=FILE_ENCODING)


class FileEmitter:
    """Fans out permission file writes and reports the aggregate outcome."""

    def __init__(
        self,
        output_dir: Path,
        writer: Callable[[Path, str], None] = _write_text,
    ):
        self.output_dir = Path(output_dir)
        self._writer = writer

    def path_for(self, name: str) -> Path:
        """Deterministic file path for a permission name."""
        return self.output_dir / f"{name}{CUSTOM_PERMISSION_SUFFIX}"

    def emit_all(self, items: Sequence[Tuple[str, str]]) -> EmitResult:
        """Write every (name, text) pair; blocking wrapper over emit_all_async."""
        return asyncio.run(self.emit_all_async(items))

    async def emit_all_async(self, items: Sequence[Tuple[str, str]]) -> EmitResult:
        """Write every (name, text) pair concurrently and join the results."""
        start_time = time.monotonic()
        outcomes: List[WriteOutcome] = []

        if items:
            try:
                self.output_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                # Nothing can be written; every item fails with the same cause
                outcomes = [
                    WriteOutcome(name=name, path=str(self.path_for(name)), success=False, error=str(e))
                    for name, _ in items
                ]
            else:
                outcomes = list(
                    await asyncio.gather(*(self._write_one(name, text) for name, text in items))
                )

        elapsed = time.monotonic() - start_time
        result = EmitResult(
            outcomes=outcomes,
            emitted_at=datetime.utcnow(),
            duration_seconds=round(elapsed, 3),
        )
        if not result.success:
            logger.warning(
                "Permission files failed to write",
                extra={"failed": [o.name for o in result.failed]},
            )
        return result

    async def _write_one(self, name: str, text: str) -> WriteOutcome:
        """Write a single permission file, capturing any OS-level failure."""
        path = self.path_for(name)
        start = time.monotonic()
        try:
            await asyncio.to_thread(self._writer, path, text)
        except OSError as e:
            elapsed = time.monotonic() - start
            return WriteOutcome(
                name=name,
                path=str(path),
                success=False,
                error=str(e),
                duration=round(elapsed, 3),
            )
        elapsed = time.monotonic() - start
        logger.debug("Wrote permission file", extra={"path": str(path)})
        return WriteOutcome(
            name=name,
            path=str(path),
            success=True,
            duration=round(elapsed, 3),
        )
