"""Permission models — automation kinds and the artifacts generated for them."""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict


class AutomationKind(str, Enum):
    """Automation mechanisms a bypass permission can disable, in emission order."""

    VALIDATION_RULE = "VR"
    FLOW = "Flow"
    TRIGGER = "Trigger"


# sObject API name -> kinds still missing a bypass permission
GapMap = Dict[str, List[AutomationKind]]


class PermissionArtifact(BaseModel):
    """A Custom Permission definition ready to be serialized."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    is_licensed: bool = False
