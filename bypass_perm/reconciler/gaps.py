"""
Gap Analyzer — decides which bypass permissions are missing.

Behavioral Contract:
- A (sObject, kind) pair is a gap iff its permission name is absent from the inventory
- Kinds are evaluated in AutomationKind order regardless of selection order
- sObjects with no gaps never appear in the result
- Pure with respect to the inventory snapshot: no mutation, same inputs give same output
"""

from typing import Iterable, List

from bypass_perm.inventory.store import PermissionInventory
from bypass_perm.models.permission import AutomationKind, GapMap, PermissionArtifact
from bypass_perm.naming.policy import permission_name


def _ordered_kinds(selected_kinds: Iterable[AutomationKind]) -> List[AutomationKind]:
    selected = {AutomationKind(k) for k in selected_kinds}
    return [kind for kind in AutomationKind if kind in selected]


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for item in items:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def compute_gaps(
    selected_objects: Iterable[str],
    selected_kinds: Iterable[AutomationKind],
    inventory: PermissionInventory,
) -> GapMap:
    """Map each selected sObject to the automation kinds still lacking a bypass permission."""
    kinds = _ordered_kinds(selected_kinds)
    gaps: GapMap = {}
    if not kinds:
        return gaps

    for sobject in _unique(selected_objects):
        missing = [
            kind for kind in kinds
            if not inventory.exists(permission_name(sobject, kind))
        ]
        if missing:
            gaps[sobject] = missing
    return gaps


def build_artifacts(gaps: GapMap) -> List[PermissionArtifact]:
    """Flatten a gap map into permission artifacts, preserving map order."""
    artifacts = []
    for sobject, kinds in gaps.items():
        for kind in kinds:
            name = permission_name(sobject, kind)
            artifacts.append(PermissionArtifact(name=name, label=name))
    return artifacts
