"""Exceptions raised by the ABAP file store client and sync engine."""

from typing import Optional


class FileStoreError(Exception):
    """Base exception for all file store errors."""


class FileStoreConfigError(FileStoreError):
    """Upload options are missing or invalid."""


class AuthRejectedError(FileStoreError):
    """Credentials or the anti-forgery token were rejected by the server."""


class RemoteUnavailableError(FileStoreError):
    """The server answered with an unexpected status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ProvisionFailedError(FileStoreError):
    """The BSP container could not be created."""


class LocalReadFailedError(FileStoreError):
    """A file scheduled for upload could not be read from disk."""


class UnsupportedDispositionError(FileStoreError):
    """A change item with an unknown kind/disposition pair reached execution."""


class LocalFilesError(FileStoreError):
    """Local file enumeration (glob or git) failed."""
