"""
Generation Pipeline — sequences one bypass permission generation run.

Stages (strictly in order, each consuming the previous one's output):
  inventory -> catalog -> select -> gaps -> emit -> manifest

The first failing stage halts the run with a GenerationError naming it.
Nothing is written before the emit stage, and nothing is retried.
"""

import logging
from typing import Callable, List, Optional, TypeVar

from bypass_perm.emitter.writer import FileEmitter
from bypass_perm.inventory.store import PermissionInventory
from bypass_perm.metadata.manifest import build_manifest
from bypass_perm.metadata.serializer import serialize
from bypass_perm.models.catalog import Selection, SObjectDescription
from bypass_perm.models.emission import GenerationReport
from bypass_perm.models.permission import GapMap
from bypass_perm.models.pipeline import PipelineConfig
from bypass_perm.project.sfdx import ProjectError, list_local_sobjects
from bypass_perm.reconciler.gaps import build_artifacts, compute_gaps
from bypass_perm.salesforce.client import RetrievalError, SalesforceClient
from bypass_perm.selection.prompts import SelectionCancelled, Selector

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GenerationError(Exception):
    """A pipeline stage failed; carries the stage and any failed permission names."""

    def __init__(self, stage: str, message: str, failed: Optional[List[str]] = None):
        self.stage = stage
        self.message = message
        self.failed = failed or []
        super().__init__(f"{stage} stage failed: {message}")


class GenerationPipeline:
    """Runs inventory retrieval through file emission for one selection."""

    def __init__(
        self,
        config: PipelineConfig,
        selector: Selector,
        org: Optional[SalesforceClient] = None,
        emitter: Optional[FileEmitter] = None,
        on_stage: Optional[Callable[[str], None]] = None,
    ):
        self.config = config
        self.selector = selector
        self.org = org
        self.emitter = emitter or FileEmitter(config.output_dir)
        self._on_stage = on_stage

    def _stage(self, name: str, fn: Callable[[], T]) -> T:
        """Run one stage, converting collaborator failures into GenerationError."""
        if self._on_stage:
            self._on_stage(name)
        logger.info("Pipeline stage started", extra={"stage": name})
        try:
            return fn()
        except (RetrievalError, ProjectError, SelectionCancelled, OSError) as e:
            raise GenerationError(name, str(e)) from e

    def _require_org(self) -> SalesforceClient:
        if self.org is None:
            raise RetrievalError("No org connection configured")
        return self.org

    def retrieve_inventory(self) -> PermissionInventory:
        """Existing permissions from local source plus, when connected, the org."""
        local = PermissionInventory.from_directories(
            [*self.config.package_dirs, self.config.output_dir]
        )
        if self.config.offline:
            return local
        remote = PermissionInventory.from_names(
            self._require_org().list_custom_permission_names()
        )
        return local.union(remote)

    def retrieve_catalog(self) -> List[SObjectDescription]:
        if self.config.offline:
            return list_local_sobjects(self.config.package_dirs)
        return self._require_org().list_sobjects()

    def write_files(self, gaps: GapMap) -> List[str]:
        """Serialize and emit one file per gap; raises GenerationError on any failed write."""
        items = [(a.name, serialize(a)) for a in build_artifacts(gaps)]
        result = self.emitter.emit_all(items)
        if not result.success:
            failed = [o.name for o in result.failed]
            raise GenerationError(
                "emit",
                f"could not write {', '.join(failed)}",
                failed=failed,
            )
        return [o.path for o in result.written]

    def write_manifest(self, gaps: GapMap) -> Optional[str]:
        path = self.config.manifest_path
        if path is None or not gaps:
            return None
        members = [a.name for a in build_artifacts(gaps)]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(build_manifest(members, self.config.api_version), encoding="utf-8")
        return str(path)

    def run(self) -> GenerationReport:
        """Execute every stage in order and report what was generated."""
        inventory = self._stage("inventory", self.retrieve_inventory)
        catalog = self._stage("catalog", self.retrieve_catalog)
        selection: Selection = self._stage("select", lambda: self.selector.select(catalog))
        gaps = self._stage(
            "gaps",
            lambda: compute_gaps(selection.objects, selection.kinds, inventory),
        )
        logger.info(
            "Gap analysis complete",
            extra={"sobjects": len(gaps), "inventory_size": len(inventory)},
        )

        written = self._stage("emit", lambda: self.write_files(gaps))
        manifest = self._stage("manifest", lambda: self.write_manifest(gaps))

        return GenerationReport(
            gaps=gaps,
            written_paths=written,
            manifest_path=manifest,
            inventory_size=len(inventory),
        )
