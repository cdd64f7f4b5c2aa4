"""
Metadata Serializer — Custom Permission documents in Salesforce metadata XML.

Output is byte-stable: fixed element order, fixed declaration, no
timestamps. Serialization is total over PermissionArtifact values.
"""

import xml.etree.ElementTree as ET

from bypass_perm.models.permission import PermissionArtifact

METADATA_NAMESPACE = "http://soap.sforce.com/2006/04/metadata"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
INDENT = "    "


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def to_document(root: ET.Element) -> str:
    """Render an element tree as a complete metadata document."""
    ET.indent(root, space=INDENT)
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return f"{XML_DECLARATION}\n{body}\n"


def serialize(artifact: PermissionArtifact) -> str:
    """Serialize a permission artifact as a CustomPermission document."""
    root = ET.Element("CustomPermission", xmlns=METADATA_NAMESPACE)
    ET.SubElement(root, "isLicensed").text = _bool_text(artifact.is_licensed)
    ET.SubElement(root, "label").text = artifact.label
    return to_document(root)
