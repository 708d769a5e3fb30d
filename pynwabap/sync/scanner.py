"""Local and remote tree scanning for sync operations."""

import logging
from collections import deque
from collections.abc import Iterable

from ..api import FileStoreClient
from ..models import Artifact, ArtifactKind
from ..utils import normalize_remote_id

logger = logging.getLogger(__name__)


def resolve_local_artifacts(
    paths: Iterable[str], separator: str = "/"
) -> set[Artifact]:
    """Expand relative file paths into file and folder artifacts.

    Every path yields one file artifact plus one folder artifact for each
    ancestor directory. Folders shared by several paths appear once.

    Args:
        paths: File paths relative to the base directory
        separator: Path separator used in ``paths``

    Returns:
        Set of artifacts with ``/``-prefixed ids

    Examples:
        >>> sorted(a.id for a in resolve_local_artifacts(["a.txt", "sub/b.txt"]))
        ['/a.txt', '/sub', '/sub/b.txt']
    """
    artifacts: set[Artifact] = set()

    for path in paths:
        segments = [s for s in path.split(separator) if s and s != "."]
        if not segments:
            continue

        for depth in range(1, len(segments)):
            folder_id = "/" + "/".join(segments[:depth])
            artifacts.add(Artifact(kind=ArtifactKind.FOLDER, id=folder_id))

        artifacts.add(Artifact(kind=ArtifactKind.FILE, id="/" + "/".join(segments)))

    return artifacts


class RemoteTreeWalker:
    """Enumerates the content of a BSP container breadth-first."""

    def __init__(self, client: FileStoreClient, container: str):
        """Initialize the walker.

        Args:
            client: File store client
            container: Name of the BSP container to walk
        """
        self.client = client
        self.container = container

    def walk(self) -> set[Artifact]:
        """List every file and folder below the container.

        Folders are listed one at a time in breadth-first order. A folder
        the server reports as missing contributes nothing; a missing
        container therefore yields an empty set.

        Returns:
            Set of artifacts with container-relative ids

        Raises:
            AuthRejectedError: If a listing is rejected
            RemoteUnavailableError: If a listing fails for another reason
        """
        artifacts: set[Artifact] = set()
        pending = deque([self.container])

        while pending:
            folder = pending.popleft()
            content = self.client.list_folder_content(folder)

            if content is None:
                logger.debug("Folder %s does not exist", folder)
                continue

            for entry in content.entries:
                try:
                    kind = ArtifactKind(entry.term)
                except ValueError:
                    logger.warning(
                        "Skipping %s with unknown type '%s'", entry.id, entry.term
                    )
                    continue

                artifact_id = normalize_remote_id(entry.id, self.container)
                artifacts.add(Artifact(kind=kind, id=artifact_id))

                if kind == ArtifactKind.FOLDER:
                    pending.append(entry.id)

        logger.debug(
            "Found %d remote artifact(s) in %s", len(artifacts), self.container
        )
        return artifacts
