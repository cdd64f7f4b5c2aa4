"""Catalog and selection models."""

from typing import List, Tuple

from pydantic import BaseModel

from bypass_perm.models.permission import AutomationKind


class SObjectDescription(BaseModel):
    """One entry of the org's object catalog (describeGlobal)."""

    name: str                               # API name, e.g. "Account", "Invoice__c"
    label: str

    @property
    def display(self) -> str:
        return f"{self.label}({self.name})"


class Choice(BaseModel):
    """A ranked catalog entry returned by the selection filter."""

    display: str                            # "Label(ApiName)"
    value: str                              # sObject API name
    score: int = 0
    highlighted: List[Tuple[bool, str]] = []  # (is_match, text) runs for rendering


class Selection(BaseModel):
    """What the operator asked bypass permissions for."""

    kinds: List[AutomationKind] = []
    objects: List[str] = []
