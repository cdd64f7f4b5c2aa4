"""
bypass_perm Plan API — FastAPI endpoints.

Exposes the generation engine over HTTP for editor and CI integrations:
- Automation kinds
- Local inventory inspection
- Gap planning (dry run)
- File generation
"""

from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from bypass_perm.emitter.writer import FileEmitter
from bypass_perm.inventory.store import PermissionInventory
from bypass_perm.metadata.serializer import serialize
from bypass_perm.models.permission import AutomationKind, GapMap
from bypass_perm.reconciler.gaps import build_artifacts, compute_gaps


# --- Request/Response Models ---

class GapRequest(BaseModel):
    objects: List[str] = []
    kinds: List[AutomationKind] = list(AutomationKind)
    existing: List[str] = []                # Names known to exist beyond local source


class GapResponse(BaseModel):
    gaps: GapMap
    permissions: List[str]


class GenerateResponse(BaseModel):
    gaps: GapMap
    written_paths: List[str]


# --- Application Factory ---

def create_app(
    output_dir: Path,
    package_dirs: Optional[List[Path]] = None,
    emitter: Optional[FileEmitter] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="bypass_perm API",
        description="ByPass Custom Permission planning and generation",
        version="0.1.0",
    )

    scan_dirs = [*(package_dirs or []), Path(output_dir)]
    app.state.emitter = emitter or FileEmitter(output_dir)
    app.state.scan_dirs = scan_dirs

    def _inventory(existing: List[str]) -> PermissionInventory:
        local = PermissionInventory.from_directories(scan_dirs)
        return local.union(PermissionInventory.from_names(existing))

    def _plan(req: GapRequest) -> GapMap:
        return compute_gaps(req.objects, req.kinds, _inventory(req.existing))

    @app.get("/automations")
    def list_automations():
        """Automation kinds in emission order."""
        return [kind.value for kind in AutomationKind]

    @app.get("/inventory")
    def get_inventory():
        """Permission names currently present in local source."""
        return sorted(_inventory([]).names)

    @app.post("/gaps", response_model=GapResponse)
    def plan_gaps(req: GapRequest):
        """Which permissions generation would create, without writing anything."""
        gaps = _plan(req)
        return GapResponse(
            gaps=gaps,
            permissions=[a.name for a in build_artifacts(gaps)],
        )

    @app.post("/generate", response_model=GenerateResponse)
    def generate(req: GapRequest):
        """Write the missing permission files."""
        gaps = _plan(req)
        items = [(a.name, serialize(a)) for a in build_artifacts(gaps)]
        result = app.state.emitter.emit_all(items)
        if not result.success:
            raise HTTPException(
                status_code=500,
                detail={
                    "message": "Some permission files could not be written",
                    "failed": [o.name for o in result.failed],
                    "written": [o.path for o in result.written],
                },
            )
        return GenerateResponse(
            gaps=gaps,
            written_paths=[o.path for o in result.written],
        )

    return app
