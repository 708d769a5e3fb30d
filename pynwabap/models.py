"""Data models for file store artifacts and listing responses."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import RemoteUnavailableError

ATOM_NAMESPACES = {"atom": "http://www.w3.org/2005/Atom"}


class ArtifactKind(str, Enum):
    """Kinds of nodes in a file store tree."""

    FILE = "file"
    FOLDER = "folder"


@dataclass(frozen=True)
class Artifact:
    """A file or folder identified by its container-relative path."""

    kind: ArtifactKind
    """File or folder"""

    id: str
    """Path within the container, e.g. ``/sub/index.html``"""

    @property
    def is_folder(self) -> bool:
        return self.kind == ArtifactKind.FOLDER


@dataclass
class FeedEntry:
    """One ``atom:entry`` of a folder content listing."""

    id: str
    """Escaped object id, including the container prefix"""

    term: str
    """Category term (``file`` or ``folder``)"""

    @property
    def is_folder(self) -> bool:
        return self.term == ArtifactKind.FOLDER.value


@dataclass
class FolderContent:
    """Parsed folder content listing."""

    entries: list[FeedEntry] = field(default_factory=list)

    @classmethod
    def from_atom_feed(cls, body: str) -> "FolderContent":
        """Parse an Atom feed returned by a folder content request.

        Args:
            body: Response body

        Returns:
            FolderContent with one entry per ``atom:entry``

        Raises:
            RemoteUnavailableError: If the body is not a parseable feed
        """
        if not body.strip():
            return cls()

        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise RemoteUnavailableError(
                f"Invalid folder listing from server: {e}"
            ) from e

        entries = []
        for entry in root.findall("atom:entry", ATOM_NAMESPACES):
            entry_id = entry.findtext("atom:id", default="", namespaces=ATOM_NAMESPACES)
            category = entry.find("atom:category", ATOM_NAMESPACES)
            term = category.get("term", "") if category is not None else ""
            entries.append(FeedEntry(id=entry_id.strip(), term=term))

        return cls(entries=entries)
