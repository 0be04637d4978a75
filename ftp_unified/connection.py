"""
Connection protocol definition.

Defines the interface that both FTPConnection and SFTPConnection implement,
so callers can work with an established session regardless of transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Protocol, runtime_checkable

from .exceptions import FtpOperationError


@dataclass(frozen=True)
class RemoteFile:
    """One entry of a remote directory listing.

    full_path is the listed directory and the name joined with a single "/",
    so entries listed at the root come out as "//name".
    """

    name: str
    size: int
    full_path: str
    last_modified: datetime
    is_directory: bool


@runtime_checkable
class Connection(Protocol):
    """Protocol for an authenticated session on a remote server.

    A connection holds no directory state of its own; the working directory
    lives on the server and is queried when needed.
    """

    def change_directory(self, path: str) -> None:
        """Change the remote working directory.

        Raises:
            FtpOperationError: If the directory does not exist or the
                server could not change into it.
        """
        ...

    def list_files(self, relative_path: str | None = None) -> list[RemoteFile]:
        """List the working directory, or a directory relative to it.

        The working directory is the same before and after the call.

        Raises:
            FtpOperationError: If the listing fails.
        """
        ...

    def download(self, remote_path: str, local_directory: str) -> None:
        """Download a remote file into a local directory, keeping its name."""
        ...

    def upload(self, local_path: str, remote_directory: str) -> None:
        """Upload a local file into a remote directory, keeping its name."""
        ...

    def print_working_directory(self) -> str:
        """Return the remote working directory as reported by the server."""
        ...


def file_name(path: str) -> str:
    """Last segment of a slash separated path."""
    return path.rsplit("/", 1)[-1]


def join_path(directory: str, name: str) -> str:
    return f"{directory}/{name}"


def close_upload_stream(stream: BinaryIO) -> None:
    """Close the local side of an upload.

    A failure here means the server may hold a partial file.
    """
    try:
        stream.close()
    except OSError as e:
        raise FtpOperationError("Upload may not have completed.") from e


def upload_target(local_path: str, remote_directory: str) -> str:
    """Remote path a local file is stored at, dropping one trailing slash."""
    if remote_directory.endswith("/"):
        remote_directory = remote_directory[:-1]
    return join_path(remote_directory, file_name(local_path))
