"""Ordering of change items into a structurally safe execution plan."""

import logging
from collections.abc import Iterable

from ..models import ArtifactKind
from .comparator import ChangeItem, Disposition

logger = logging.getLogger(__name__)

_KNOWN_PAIRS = frozenset(
    (kind, disposition) for kind in ArtifactKind for disposition in Disposition
)


def order_changes(changes: Iterable[ChangeItem]) -> list[ChangeItem]:
    """Sort change items so that every intermediate server state is valid.

    The plan is the concatenation of six buckets:

    1. file deletions
    2. folder deletions, deepest first
    3. folder creations, shallowest first
    4. folder updates (no-op on the server, kept for completeness)
    5. file creations
    6. file updates

    Items with an unknown kind or disposition are appended last, so that
    executing them fails only after every valid change was applied.

    Sorting within buckets is stable, so items of equal depth keep their
    incoming order.

    Args:
        changes: Classified change items

    Returns:
        Ordered list of change items
    """
    items = list(changes)

    def bucket(kind: ArtifactKind, disposition: Disposition) -> list[ChangeItem]:
        return [i for i in items if i.kind == kind and i.disposition == disposition]

    delete_files = bucket(ArtifactKind.FILE, Disposition.DELETE)
    delete_folders = sorted(
        bucket(ArtifactKind.FOLDER, Disposition.DELETE),
        key=lambda i: i.depth,
        reverse=True,
    )
    create_folders = sorted(
        bucket(ArtifactKind.FOLDER, Disposition.CREATE), key=lambda i: i.depth
    )
    update_folders = bucket(ArtifactKind.FOLDER, Disposition.UPDATE)
    create_files = bucket(ArtifactKind.FILE, Disposition.CREATE)
    update_files = bucket(ArtifactKind.FILE, Disposition.UPDATE)

    plan = (
        delete_files
        + delete_folders
        + create_folders
        + update_folders
        + create_files
        + update_files
    )

    unknown = [i for i in items if (i.kind, i.disposition) not in _KNOWN_PAIRS]
    if unknown:
        logger.warning(
            "%d change item(s) with unknown kind or disposition", len(unknown)
        )

    return plan + unknown
