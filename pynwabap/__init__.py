"""PyNWABAP - deploy local files into a SAP NetWeaver ABAP UI5 file store."""

__version__ = "0.1.0"

from .api import FileStoreClient  # noqa: E402
from .exceptions import (  # noqa: E402
    AuthRejectedError,
    FileStoreConfigError,
    FileStoreError,
    LocalFilesError,
    LocalReadFailedError,
    ProvisionFailedError,
    RemoteUnavailableError,
    UnsupportedDispositionError,
)
from .session import Session, SessionManager  # noqa: E402
from .utils import encode_uri_component, normalize_remote_id  # noqa: E402

__all__ = [
    "FileStoreClient",
    "AuthRejectedError",
    "FileStoreConfigError",
    "FileStoreError",
    "LocalFilesError",
    "LocalReadFailedError",
    "ProvisionFailedError",
    "RemoteUnavailableError",
    "UnsupportedDispositionError",
    "Session",
    "SessionManager",
    "encode_uri_component",
    "normalize_remote_id",
    "__version__",
]
