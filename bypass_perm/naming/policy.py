"""
Naming Policy — canonical bypass permission names.

A permission name is "ByPass_<sObject>_<kind>". Kind suffixes are distinct
and none is a suffix of another, so the mapping is injective over
(sObject, kind) pairs.
"""

from bypass_perm.models.permission import AutomationKind

PERMISSION_PREFIX = "ByPass"
SEPARATOR = "_"


def permission_name(sobject: str, kind: AutomationKind) -> str:
    """Return the bypass permission name for an sObject and automation kind."""
    return SEPARATOR.join((PERMISSION_PREFIX, sobject, AutomationKind(kind).value))
