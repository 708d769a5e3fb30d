"""Artifact comparison logic for sync operations."""

from collections.abc import Set
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models import Artifact, ArtifactKind
from ..utils import path_depth


class Disposition(str, Enum):
    """What has to happen to an artifact on the server."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def past_tense(self) -> str:
        return f"{self.value}d"


@dataclass(frozen=True)
class ChangeItem:
    """An artifact together with the change to apply to it."""

    kind: ArtifactKind
    """File or folder"""

    id: str
    """Container-relative path"""

    disposition: Disposition
    """Create, update or delete"""

    @property
    def depth(self) -> int:
        """Nesting level of the artifact (1 for direct container children)."""
        return path_depth(self.id)

    @property
    def is_folder(self) -> bool:
        return self.kind == ArtifactKind.FOLDER

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "id": self.id,
            "disposition": self.disposition.value,
        }


class ArtifactComparator:
    """Compares local and remote artifacts to determine changes.

    Artifacts are matched on ``(kind, id)``: a local file and a remote folder
    with the same path are unrelated and classified independently.
    """

    def __init__(self, preserve_unselected: bool = False):
        """Initialize the comparator.

        Args:
            preserve_unselected: Keep remote artifacts that are not part of
                the local selection instead of deleting them
        """
        self.preserve_unselected = preserve_unselected

    def compare(
        self,
        local: Set[Artifact],
        remote: Set[Artifact],
        removed: Set[Artifact] = frozenset(),
    ) -> list[ChangeItem]:
        """Classify every artifact found locally or remotely.

        Args:
            local: Selected artifacts present on disk
            remote: Artifacts present in the container
            removed: Selected artifacts that no longer exist on disk

        Returns:
            One ChangeItem per artifact that needs a change, sorted by id
        """
        changes: list[ChangeItem] = []

        for artifact in sorted(local | remote | removed, key=_sort_key):
            disposition = self._classify(
                in_local=artifact in local,
                in_remote=artifact in remote,
                is_removed=artifact in removed,
            )
            if disposition is not None:
                changes.append(
                    ChangeItem(
                        kind=artifact.kind,
                        id=artifact.id,
                        disposition=disposition,
                    )
                )

        return changes

    def _classify(
        self, in_local: bool, in_remote: bool, is_removed: bool
    ) -> Optional[Disposition]:
        # Deleted locally: remove from the server even when preserving
        if is_removed:
            return Disposition.DELETE if in_remote else None

        if in_local and in_remote:
            return Disposition.UPDATE
        if in_local:
            return Disposition.CREATE
        if in_remote and not self.preserve_unselected:
            return Disposition.DELETE
        return None


def _sort_key(artifact: Artifact) -> tuple[str, str]:
    return artifact.id, artifact.kind.value
