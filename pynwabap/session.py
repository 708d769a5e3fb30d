"""Anti-forgery token and session cookie handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .api import FileStoreClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Credentials required by every mutating file store call."""

    csrf_token: str
    """Value of the ``X-CSRF-Token`` response header"""

    cookie: str
    """Session cookie(s) in ``Cookie`` header format"""

    def headers(self) -> dict[str, str]:
        """Return the request headers carrying this session."""
        return {"X-CSRF-Token": self.csrf_token, "Cookie": self.cookie}


class SessionManager:
    """Acquires the session once per synchronization run and caches it.

    The session is never refreshed: if the server invalidates it mid-run,
    the next mutating call fails and the run stops.
    """

    def __init__(self, client: FileStoreClient):
        self.client = client
        self._session: Session | None = None

    @property
    def session(self) -> Session | None:
        """The cached session, if one was acquired."""
        return self._session

    def ensure_session(self) -> Session:
        """Fetch the token on first use, return the cached session afterwards.

        Raises:
            AuthRejectedError: If the server rejects the credentials
            RemoteUnavailableError: If the token could not be fetched
        """
        if self._session is None:
            logger.debug("Fetching CSRF token")
            self._session = self.client.fetch_token()
        return self._session
