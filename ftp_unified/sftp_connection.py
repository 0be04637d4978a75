"""
SFTP connection implementation using paramiko.

Provides the same interface as FTPConnection over an open SFTP channel.
"""

import logging
import stat
from datetime import datetime, timezone

import paramiko

from .connection import (
    RemoteFile,
    close_upload_stream,
    file_name,
    join_path,
    upload_target,
)
from .exceptions import FtpOperationError
from .streams import FileStreamFactory

logger = logging.getLogger(__name__)

SFTP_ERRORS = (OSError, EOFError, paramiko.SSHException, paramiko.SFTPError)


class SFTPConnection:
    """
    Connection over an open paramiko.SFTPClient channel.
    """

    def __init__(
        self, sftp: paramiko.SFTPClient, stream_factory: FileStreamFactory | None = None
    ):
        self._sftp = sftp
        self._streams = stream_factory or FileStreamFactory()

    def change_directory(self, path: str) -> None:
        logger.debug("Changing directory: %s", path)
        try:
            self._sftp.chdir(path)
        except (FileNotFoundError, paramiko.SFTPError) as e:
            # SFTPError is raised when the path exists but is not a directory
            raise FtpOperationError(f"Directory {path} does not exist.") from e
        except SFTP_ERRORS as e:
            raise FtpOperationError("Remote server was unable to change directory.") from e

    def list_files(self, relative_path: str | None = None) -> list[RemoteFile]:
        if relative_path is None:
            return self._list_directory(self.print_working_directory())

        original = self.print_working_directory()
        self.change_directory(join_path(original, relative_path))
        try:
            return self._list_directory(self.print_working_directory())
        except FtpOperationError as e:
            # the restore below may raise and replace this error
            logger.error("Listing %s failed: %s", relative_path, e)
            raise
        finally:
            self.change_directory(original)

    def _list_directory(self, directory: str) -> list[RemoteFile]:
        logger.debug("Listing directory: %s", directory)
        try:
            attrs = self._sftp.listdir_attr(directory)
        except SFTP_ERRORS as e:
            raise FtpOperationError(f"Unable to list files in directory {directory}") from e

        results = []
        for attr in attrs:
            name = attr.filename
            if name in (".", ".."):
                continue

            is_dir = stat.S_ISDIR(attr.st_mode) if attr.st_mode else False
            if attr.st_mtime is not None:
                mtime = datetime.fromtimestamp(attr.st_mtime, tz=timezone.utc)
            else:
                mtime = datetime.now(timezone.utc)

            results.append(
                RemoteFile(
                    name=name,
                    size=attr.st_size or 0,
                    full_path=join_path(directory, name),
                    last_modified=mtime,
                    is_directory=is_dir,
                )
            )

        logger.debug("Listed %d entries in %s", len(results), directory)
        return results

    def download(self, remote_path: str, local_directory: str) -> None:
        local_path = join_path(local_directory, file_name(remote_path))
        logger.debug("Downloading %s to %s", remote_path, local_path)

        try:
            stream = self._streams.create_output_stream(local_path)
        except OSError as e:
            raise FtpOperationError(f"Unable to write to local directory {local_path}") from e

        try:
            try:
                self._sftp.getfo(remote_path, stream)
            finally:
                stream.close()
        except SFTP_ERRORS as e:
            raise FtpOperationError(f"Unable to download file {remote_path}") from e

    def upload(self, local_path: str, remote_directory: str) -> None:
        remote_path = upload_target(local_path, remote_directory)
        logger.debug("Uploading %s to %s", local_path, remote_path)

        try:
            stream = self._streams.create_input_stream(local_path)
        except OSError as e:
            raise FtpOperationError(f"Could not find file: {local_path}") from e

        try:
            self._sftp.putfo(stream, remote_path)
        except SFTP_ERRORS as e:
            raise FtpOperationError("Upload failed to complete.") from e
        finally:
            close_upload_stream(stream)

    def print_working_directory(self) -> str:
        try:
            return self._sftp.normalize(".")
        except SFTP_ERRORS as e:
            raise FtpOperationError("Unable to print the working directory") from e
