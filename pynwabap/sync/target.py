"""Description of one synchronization target."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class SyncTarget:
    """Where local files come from and which BSP container receives them."""

    base_dir: Path
    """Local directory the selected file paths are relative to"""

    container: str
    """BSP container name (may carry a ``/NAMESPACE/`` prefix)"""

    package: str
    """Package that owns created objects"""

    container_description: str = ""
    """Description used when the container has to be created"""

    transport: Optional[str] = None
    """Transport request recorded for every change"""

    preserve_unselected: bool = False
    """Keep remote artifacts that are not part of the selection"""

    calc_app_index: bool = False
    """Re-calculate the application index after a successful sync"""
