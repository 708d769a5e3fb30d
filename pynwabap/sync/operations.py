"""Remote operations applied while synchronizing a BSP container."""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..api import FileStoreClient
from ..exceptions import (
    LocalReadFailedError,
    ProvisionFailedError,
    RemoteUnavailableError,
    UnsupportedDispositionError,
)
from ..models import ArtifactKind
from ..session import SessionManager
from ..utils import EMPTY_FILE_PAYLOAD, is_binary_content
from .comparator import ChangeItem, Disposition

logger = logging.getLogger(__name__)

# Container creation answers 405 when the container already exists
CONTAINER_CREATED_STATUSES = (201, 405)


class SyncOperations:
    """Applies single change items to one BSP container."""

    def __init__(
        self,
        client: FileStoreClient,
        sessions: SessionManager,
        container: str,
        package: str,
        base_dir: Path,
        transport: Optional[str] = None,
        container_description: str = "",
    ):
        """Initialize sync operations.

        Args:
            client: File store client
            sessions: Session manager of the current run
            container: BSP container name
            package: Owning package of created objects
            base_dir: Local directory the artifact ids are relative to
            transport: Optional transport request for all changes
            container_description: Description used when creating the container
        """
        self.client = client
        self.sessions = sessions
        self.container = container
        self.package = package
        self.base_dir = Path(base_dir)
        self.transport = transport
        self.container_description = container_description

    def ensure_container(self) -> bool:
        """Create the BSP container unless it already exists.

        Returns:
            True if the container was created, False if it already existed

        Raises:
            ProvisionFailedError: If the container could not be created
        """
        session = self.sessions.ensure_session()

        if self.client.container_exists(self.container):
            logger.debug("BSP container %s exists", self.container)
            return False

        try:
            response = self.client.create_container(
                session,
                self.container,
                description=self.container_description,
                package=self.package,
                transport=self.transport,
            )
        except RemoteUnavailableError as e:
            raise ProvisionFailedError(
                f"BSP container {self.container} could not be created: {e}"
            ) from e

        if response.status_code not in CONTAINER_CREATED_STATUSES:
            raise ProvisionFailedError(
                f"BSP container {self.container} could not be created "
                f"(HTTP {response.status_code})"
            )
        return response.status_code == 201

    def apply(self, item: ChangeItem) -> None:
        """Apply one change item on the server.

        Raises:
            UnsupportedDispositionError: For an unknown kind/disposition pair
            LocalReadFailedError: If a file to upload cannot be read
            AuthRejectedError: If the server rejects the session
            RemoteUnavailableError: If the server call fails
        """
        handlers: dict[tuple, Callable[[ChangeItem], None]] = {
            (ArtifactKind.FOLDER, Disposition.CREATE): self._create_folder,
            (ArtifactKind.FOLDER, Disposition.UPDATE): self._update_folder,
            (ArtifactKind.FOLDER, Disposition.DELETE): self._delete_folder,
            (ArtifactKind.FILE, Disposition.CREATE): self._create_file,
            (ArtifactKind.FILE, Disposition.UPDATE): self._update_file,
            (ArtifactKind.FILE, Disposition.DELETE): self._delete_file,
        }
        handler = handlers.get((item.kind, item.disposition))
        if handler is None:
            raise UnsupportedDispositionError(
                f"Unsupported change '{_name(item.disposition)}' "
                f"for {_name(item.kind)} {item.id}"
            )

        logger.debug(
            "Applying %s of %s %s", _name(item.disposition), _name(item.kind), item.id
        )
        handler(item)

    def refresh_index(self) -> None:
        """Re-calculate the SAPUI5 application index of the container."""
        session = self.sessions.ensure_session()
        self.client.calculate_app_index(session, self.container)

    def _create_folder(self, item: ChangeItem) -> None:
        self.client.create_folder(
            self.sessions.ensure_session(),
            self.container,
            item.id,
            package=self.package,
            transport=self.transport,
        )

    def _update_folder(self, item: ChangeItem) -> None:
        # The file store has no folder update
        logger.debug("Nothing to update for folder %s", item.id)

    def _delete_folder(self, item: ChangeItem) -> None:
        self.client.delete_folder(
            self.sessions.ensure_session(),
            self.container,
            item.id,
            transport=self.transport,
        )

    def _create_file(self, item: ChangeItem) -> None:
        content, is_binary = self._read_file(item)
        self.client.create_file(
            self.sessions.ensure_session(),
            self.container,
            item.id,
            content=content,
            is_binary=is_binary,
            package=self.package,
            transport=self.transport,
        )

    def _update_file(self, item: ChangeItem) -> None:
        content, is_binary = self._read_file(item)
        self.client.update_file(
            self.sessions.ensure_session(),
            self.container,
            item.id,
            content=content,
            is_binary=is_binary,
            transport=self.transport,
        )

    def _delete_file(self, item: ChangeItem) -> None:
        self.client.delete_file(
            self.sessions.ensure_session(),
            self.container,
            item.id,
            transport=self.transport,
        )

    def _read_file(self, item: ChangeItem) -> tuple[bytes, bool]:
        """Read the local content for a file item.

        Returns:
            Tuple of (payload, is_binary); empty files yield a single space
        """
        path = self.base_dir / item.id.lstrip("/")
        try:
            content = path.read_bytes()
        except OSError as e:
            raise LocalReadFailedError(f"Cannot read {path}: {e}") from e

        return content or EMPTY_FILE_PAYLOAD, is_binary_content(content)


def _name(value: object) -> str:
    return str(getattr(value, "value", value))
