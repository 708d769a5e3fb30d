"""API client for the SAP NetWeaver ABAP UI5 file store."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any

import httpx

from .exceptions import AuthRejectedError, RemoteUnavailableError
from .models import FolderContent
from .session import Session
from .utils import encode_uri_component, split_into_path_and_object

logger = logging.getLogger(__name__)

FILESTORE_BASE_PATH = "/sap/bc/adt/filestore/ui5-bsp/objects"
APPINDEX_BASE_PATH = "/sap/bc/adt/filestore/ui5-bsp/appindex"

_MUTATION_HEADERS = {
    "Content-Type": "application/octet-stream",
    "Accept-Language": "en-EN",
    "Accept": "*/*",
}


class FileStoreClient:
    """Client for the ADT file store service of an ABAP system."""

    def __init__(
        self,
        server: str,
        user: str | None = None,
        password: str | None = None,
        sap_client: str | None = None,
        language: str | None = None,
        strict_ssl: bool = True,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the file store client.

        Args:
            server: Server URL, e.g. ``https://host:44300``
            user: User for basic authentication
            password: Password for basic authentication
            sap_client: Optional client, sent as ``sap-client``
            language: Optional logon language, sent as ``sap-language``
            strict_ssl: Verify TLS certificates (default: True)
            timeout: Request timeout in seconds (default: 30.0)
            transport: Optional httpx transport (used by tests)
        """
        self.server = server.rstrip("/")
        self.user = user
        self.password = password
        self.sap_client = sap_client
        self.language = language.upper() if language else None
        self.strict_ssl = strict_ssl
        self.timeout = timeout
        self.transport = transport

        self._client: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return self.server + FILESTORE_BASE_PATH

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            auth = (self.user, self.password or "") if self.user else None
            self._client = httpx.Client(
                auth=auth,
                verify=self.strict_ssl,
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> FileStoreClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # =========================
    # Request helpers
    # =========================

    def _default_params(self) -> dict[str, str]:
        params = {}
        if self.sap_client:
            params["sap-client"] = self.sap_client
        if self.language:
            params["sap-language"] = self.language
        return params

    def _send(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send a request with client, language and authentication attached.

        Raises:
            RemoteUnavailableError: On transport-level failures
        """
        query = self._default_params()
        if params:
            query.update(params)

        try:
            response = self._get_client().request(
                method, url, params=query, headers=headers, content=content
            )
        except httpx.RequestError as e:
            raise RemoteUnavailableError(f"Network error: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Extract the message of an ADT exception document, if any."""
        try:
            root = ET.fromstring(response.text)
        except ET.ParseError:
            return ""
        for element in root.iter():
            if element.tag.rsplit("}", 1)[-1] == "message" and element.text:
                return element.text.strip()
        return ""

    def _raise_for_status(self, response: httpx.Response, action: str) -> None:
        """Translate an error status into a file store exception.

        Raises:
            AuthRejectedError: On 401 and 403
            RemoteUnavailableError: On any other 4xx/5xx status
        """
        status_code = response.status_code
        if status_code in (401, 403):
            raise AuthRejectedError(f"{action} rejected by server (HTTP {status_code})")
        if response.is_error:
            error_msg = f"{action} failed with status {status_code}"
            detail = self._error_detail(response)
            if detail:
                error_msg = f"{error_msg}: {detail}"
            raise RemoteUnavailableError(error_msg, status_code=status_code)

    def _object_url(self, container: str, artifact_path: str) -> str:
        return (
            f"{self.base_url}/{encode_uri_component(container)}"
            f"{encode_uri_component(artifact_path)}/content"
        )

    @staticmethod
    def _mutation_headers(session: Session, if_match: bool = False) -> dict[str, str]:
        headers = dict(_MUTATION_HEADERS)
        headers.update(session.headers())
        if if_match:
            headers["If-Match"] = "*"
        return headers

    @staticmethod
    def _transport_params(transport: str | None) -> dict[str, str]:
        return {"corrNr": transport} if transport else {}

    # =========================
    # Read operations
    # =========================

    def fetch_token(self) -> Session:
        """Fetch the CSRF token and session cookie.

        Returns:
            Session holding the token and cookie

        Raises:
            AuthRejectedError: If credentials are rejected or no token is sent
            RemoteUnavailableError: If the server cannot be reached
        """
        response = self._send(
            "GET",
            self.base_url,
            headers={"X-CSRF-Token": "Fetch", "Accept": "*/*"},
        )
        self._raise_for_status(response, "Token fetch")
        if response.status_code != 200:
            raise RemoteUnavailableError(
                f"Token fetch failed with status {response.status_code}",
                status_code=response.status_code,
            )

        token = response.headers.get("x-csrf-token")
        if not token:
            raise AuthRejectedError("Server did not return a CSRF token")

        cookie = "; ".join(f"{c.name}={c.value}" for c in response.cookies.jar)
        return Session(csrf_token=token, cookie=cookie)

    def container_exists(self, container: str) -> bool:
        """Check whether a BSP container exists.

        Args:
            container: Container name

        Returns:
            True if the container exists, False if the server reports 404
        """
        response = self._send(
            "GET", f"{self.base_url}/{encode_uri_component(container)}"
        )
        if response.status_code == 404:
            return False
        self._raise_for_status(response, f"Metadata request for {container}")
        return True

    def list_folder_content(self, folder_id: str) -> FolderContent | None:
        """List the direct children of a folder.

        Args:
            folder_id: Object id of the folder as returned by the server,
                or the container name for the root

        Returns:
            FolderContent, or None if the folder does not exist
        """
        response = self._send(
            "GET", f"{self.base_url}/{encode_uri_component(folder_id)}/content"
        )
        if response.status_code == 404:
            return None
        self._raise_for_status(response, f"Listing of {folder_id}")
        return FolderContent.from_atom_feed(response.text)

    # =========================
    # Write operations
    # =========================

    def create_container(
        self,
        session: Session,
        container: str,
        description: str,
        package: str,
        transport: str | None = None,
    ) -> httpx.Response:
        """Create a BSP container.

        The response is returned unchecked: 201 means created, 405 means the
        container already exists.
        """
        params = {
            "type": "folder",
            "isBinary": "false",
            "name": container,
            "description": description,
            "devclass": package,
        }
        params.update(self._transport_params(transport))
        return self._send(
            "POST",
            f"{self.base_url}/%20/content",
            params=params,
            headers=self._mutation_headers(session),
        )

    def create_folder(
        self,
        session: Session,
        container: str,
        folder_id: str,
        package: str,
        transport: str | None = None,
    ) -> httpx.Response:
        """Create a folder inside the container.

        Args:
            session: Current session
            container: Container name
            folder_id: Container-relative id of the new folder
            package: Owning package (``devclass``)
            transport: Optional transport request
        """
        parent, name = split_into_path_and_object(folder_id)
        params = {
            "type": "folder",
            "isBinary": "false",
            "name": name,
            "devclass": package,
        }
        params.update(self._transport_params(transport))
        response = self._send(
            "POST",
            self._object_url(container, parent),
            params=params,
            headers=self._mutation_headers(session),
        )
        self._raise_for_status(response, f"Creation of folder {folder_id}")
        return response

    def create_file(
        self,
        session: Session,
        container: str,
        file_id: str,
        content: bytes,
        is_binary: bool,
        package: str,
        transport: str | None = None,
    ) -> httpx.Response:
        """Create a file inside the container."""
        parent, name = split_into_path_and_object(file_id)
        params = {
            "type": "file",
            "isBinary": "true" if is_binary else "false",
            "name": name,
            "devclass": package,
            "charset": "UTF-8",
        }
        params.update(self._transport_params(transport))
        response = self._send(
            "POST",
            self._object_url(container, parent),
            params=params,
            headers=self._mutation_headers(session),
            content=content,
        )
        self._raise_for_status(response, f"Creation of file {file_id}")
        return response

    def update_file(
        self,
        session: Session,
        container: str,
        file_id: str,
        content: bytes,
        is_binary: bool,
        transport: str | None = None,
    ) -> httpx.Response:
        """Replace the content of an existing file, whatever its revision."""
        params = {
            "isBinary": "true" if is_binary else "false",
            "charset": "UTF-8",
        }
        params.update(self._transport_params(transport))
        response = self._send(
            "PUT",
            self._object_url(container, file_id),
            params=params,
            headers=self._mutation_headers(session, if_match=True),
            content=content,
        )
        self._raise_for_status(response, f"Update of file {file_id}")
        return response

    def delete_folder(
        self,
        session: Session,
        container: str,
        folder_id: str,
        transport: str | None = None,
    ) -> httpx.Response:
        """Delete a folder together with its children."""
        params = {"deleteChildren": "true"}
        params.update(self._transport_params(transport))
        response = self._send(
            "DELETE",
            self._object_url(container, folder_id),
            params=params,
            headers=self._mutation_headers(session, if_match=True),
        )
        self._raise_for_status(response, f"Deletion of folder {folder_id}")
        return response

    def delete_file(
        self,
        session: Session,
        container: str,
        file_id: str,
        transport: str | None = None,
    ) -> httpx.Response:
        """Delete a file."""
        response = self._send(
            "DELETE",
            self._object_url(container, file_id),
            params=self._transport_params(transport),
            headers=self._mutation_headers(session, if_match=True),
        )
        self._raise_for_status(response, f"Deletion of file {file_id}")
        return response

    def calculate_app_index(self, session: Session, container: str) -> httpx.Response:
        """Re-calculate the SAPUI5 application index for a container."""
        response = self._send(
            "POST",
            f"{self.server}{APPINDEX_BASE_PATH}/{encode_uri_component(container)}",
            headers=self._mutation_headers(session),
        )
        self._raise_for_status(response, "Application index calculation")
        if response.status_code != 200:
            raise RemoteUnavailableError(
                "Application index calculation failed with status "
                f"{response.status_code}",
                status_code=response.status_code,
            )
        return response
