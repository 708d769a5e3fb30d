"""Shared fixtures: an in-memory ABAP file store behind httpx.MockTransport."""

from typing import Callable, Optional
from urllib.parse import quote, unquote

import httpx
import pytest

from pynwabap.api import FileStoreClient

SERVER = "https://sap.example.com"
OBJECTS_PATH = "/sap/bc/adt/filestore/ui5-bsp/objects"
APPINDEX_PATH = "/sap/bc/adt/filestore/ui5-bsp/appindex"
TOKEN = "csrf-token-123"
COOKIE_NAME = "SAP_SESSIONID_DEV_100"
COOKIE_VALUE = "abc"


class FakeFileStore:
    """Minimal file store that enforces the structural rules of the real one.

    Objects are kept by container-relative id (``/sub/a.txt``). Creating an
    object requires its parent folder; deleting a folder with children
    requires ``deleteChildren=true``.
    """

    def __init__(self, container: str = "ZAPP", exists: bool = True):
        self.container = container
        self.container_exists = exists
        self.kinds: dict[str, str] = {}
        self.contents: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self.fail: Optional[Callable[[httpx.Request], Optional[int]]] = None
        self.index_status = 200

    # Setup helpers

    def add_folder(self, folder_id: str) -> None:
        self.kinds[folder_id] = "folder"

    def add_file(self, file_id: str, content: bytes = b"x") -> None:
        self.kinds[file_id] = "file"
        self.contents[file_id] = content

    def tree(self) -> set[tuple[str, str]]:
        return {(kind, object_id) for object_id, kind in self.kinds.items()}

    def mutations(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method in ("POST", "PUT", "DELETE")]

    # Request handling

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.fail is not None:
            status = self.fail(request)
            if status is not None:
                return httpx.Response(status, text="<error/>")

        raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0]

        if raw_path.startswith(APPINDEX_PATH):
            return self._check_token(request) or httpx.Response(self.index_status)

        rest = raw_path[len(OBJECTS_PATH) :]
        if rest in ("", "/"):
            return self._fetch_token(request)

        segment, _, tail = rest.lstrip("/").partition("/")
        if request.method == "GET" and not tail:
            return httpx.Response(200 if self._has_container(unquote(segment)) else 404)
        if request.method == "GET":
            return self._list(unquote(segment))

        rejected = self._check_token(request)
        if rejected is not None:
            return rejected

        params = request.url.params
        if request.method == "POST" and segment == "%20":
            return self._create_container(params.get("name", ""))

        target = self._relative(unquote(segment))
        if target is None:
            return httpx.Response(404)

        if request.method == "POST":
            return self._create(target, params.get("name", ""), params.get("type"), request)
        if request.method == "PUT":
            return self._update(target, request)
        if request.method == "DELETE":
            return self._delete(target, params.get("deleteChildren") == "true")
        return httpx.Response(405)

    def _fetch_token(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("X-CSRF-Token") != "Fetch":
            return httpx.Response(200)
        return httpx.Response(
            200,
            headers={
                "x-csrf-token": TOKEN,
                "set-cookie": f"{COOKIE_NAME}={COOKIE_VALUE}; path=/",
            },
        )

    def _check_token(self, request: httpx.Request) -> Optional[httpx.Response]:
        if request.headers.get("X-CSRF-Token") != TOKEN:
            return httpx.Response(403, headers={"x-csrf-token": "Required"})
        return None

    def _has_container(self, name: str) -> bool:
        return self.container_exists and name == self.container

    def _create_container(self, name: str) -> httpx.Response:
        if self._has_container(name):
            return httpx.Response(405)
        self.container = name
        self.container_exists = True
        return httpx.Response(201)

    def _relative(self, decoded: str) -> Optional[str]:
        """Map ``<container>/<path>`` of a write URL to a relative id."""
        if not self.container_exists or not decoded.startswith(self.container):
            return None
        return decoded[len(self.container) :]

    def _server_id(self, object_id: str) -> str:
        segments = object_id.strip("/").split("/")
        return self.container + "".join("%2f" + quote(s, safe="") for s in segments)

    def _list(self, folder: str) -> httpx.Response:
        if not self.container_exists:
            return httpx.Response(404)

        if folder == self.container:
            parent = ""
        elif folder.startswith(self.container + "%2f"):
            segments = folder[len(self.container) + 3 :].split("%2f")
            parent = "/" + "/".join(unquote(s) for s in segments)
            if self.kinds.get(parent) != "folder":
                return httpx.Response(404)
        else:
            return httpx.Response(404)

        entries = []
        for object_id, kind in sorted(self.kinds.items()):
            if object_id.rpartition("/")[0] == parent:
                entries.append(
                    "<atom:entry>"
                    f"<atom:id>{self._server_id(object_id)}</atom:id>"
                    f'<atom:category term="{kind}"/>'
                    "</atom:entry>"
                )
        feed = (
            '<?xml version="1.0" encoding="utf-8"?>'
            '<atom:feed xmlns:atom="http://www.w3.org/2005/Atom">'
            + "".join(entries)
            + "</atom:feed>"
        )
        return httpx.Response(200, text=feed)

    def _create(
        self, parent: str, name: str, kind: Optional[str], request: httpx.Request
    ) -> httpx.Response:
        if parent and self.kinds.get(parent) != "folder":
            return httpx.Response(400, text="<message>Parent folder missing</message>")
        object_id = f"{parent}/{name}"
        if object_id in self.kinds:
            return httpx.Response(409)
        if kind == "folder":
            self.add_folder(object_id)
        else:
            self.add_file(object_id, request.content)
        return httpx.Response(201)

    def _update(self, object_id: str, request: httpx.Request) -> httpx.Response:
        if self.kinds.get(object_id) != "file":
            return httpx.Response(404)
        self.contents[object_id] = request.content
        return httpx.Response(200)

    def _delete(self, object_id: str, delete_children: bool) -> httpx.Response:
        if object_id not in self.kinds:
            return httpx.Response(404)
        children = [i for i in self.kinds if i.startswith(object_id + "/")]
        if children and not delete_children:
            return httpx.Response(400)
        for child in children + [object_id]:
            self.kinds.pop(child, None)
            self.contents.pop(child, None)
        return httpx.Response(200)


@pytest.fixture
def fake_store():
    """Provide an empty, existing container named ZAPP."""
    return FakeFileStore("ZAPP")


@pytest.fixture
def store_client(fake_store):
    """Provide a FileStoreClient wired to the fake file store."""
    client = FileStoreClient(
        SERVER,
        user="developer",
        password="secret",
        sap_client="100",
        language="en",
        transport=httpx.MockTransport(fake_store.handle),
    )
    yield client
    client.close()
