"""package.xml manifest for generated Custom Permissions."""

import xml.etree.ElementTree as ET
from typing import Iterable

from bypass_perm.metadata.serializer import METADATA_NAMESPACE, to_document

CUSTOM_PERMISSION_TYPE = "CustomPermission"


def build_manifest(members: Iterable[str], api_version: str) -> str:
    """Render a package.xml listing the given CustomPermission members."""
    package = ET.Element("Package", xmlns=METADATA_NAMESPACE)
    types = ET.SubElement(package, "types")
    for member in sorted(set(members)):
        ET.SubElement(types, "members").text = member
    ET.SubElement(types, "name").text = CUSTOM_PERMISSION_TYPE
    ET.SubElement(package, "version").text = api_version
    return to_document(package)
