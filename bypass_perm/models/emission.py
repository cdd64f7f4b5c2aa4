"""Emission results — outcome of writing a batch of metadata files."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from bypass_perm.models.permission import GapMap


class WriteOutcome(BaseModel):
    """Outcome of writing one permission file."""

    name: str
    path: str
    success: bool
    error: Optional[str] = None
    duration: float = 0.0


class EmitResult(BaseModel):
    """Aggregate outcome of one emission batch."""

    outcomes: List[WriteOutcome] = []
    emitted_at: datetime
    duration_seconds: float = 0.0

    @property
    def written(self) -> List[WriteOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[WriteOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def success(self) -> bool:
        return len(self.failed) == 0


class GenerationReport(BaseModel):
    """What one generation run decided and produced."""

    gaps: GapMap = {}
    written_paths: List[str] = []
    manifest_path: Optional[str] = None
    inventory_size: int = 0

    @property
    def permission_count(self) -> int:
        return sum(len(kinds) for kinds in self.gaps.values())
