"""Pipeline configuration."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel


class PipelineConfig(BaseModel):
    """Resolved settings for one generation run."""

    output_dir: Path
    package_dirs: List[Path] = []           # Scanned for existing permission files
    api_version: str = "59.0"
    manifest_path: Optional[Path] = None
    offline: bool = False
