"""bypass_perm data models."""

from bypass_perm.models.catalog import Choice, Selection, SObjectDescription
from bypass_perm.models.emission import EmitResult, GenerationReport, WriteOutcome
from bypass_perm.models.permission import AutomationKind, GapMap, PermissionArtifact
from bypass_perm.models.pipeline import PipelineConfig

__all__ = [
    "AutomationKind",
    "Choice",
    "EmitResult",
    "GapMap",
    "GenerationReport",
    "PermissionArtifact",
    "PipelineConfig",
    "SObjectDescription",
    "Selection",
    "WriteOutcome",
]
