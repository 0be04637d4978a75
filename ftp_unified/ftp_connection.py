"""
FTP connection implementation using ftplib.
"""

import ftplib
import logging
from datetime import datetime, timezone

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

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

# Replies meaning the server does not implement MLSD
_UNSUPPORTED_COMMAND_CODES = ("500", "501", "502")


class FTPConnection:
    """
    Connection over an authenticated ftplib.FTP handle.
    """

    def __init__(self, ftp: ftplib.FTP, stream_factory: FileStreamFactory | None = None):
        self._ftp = ftp
        self._streams = stream_factory or FileStreamFactory()
        self._supports_mlsd = True

    def change_directory(self, path: str) -> None:
        logger.debug("Changing directory: %s", path)
        try:
            self._ftp.cwd(path)
        except ftplib.error_perm as e:
            raise FtpOperationError(
                f"The directory {path} doesn't exist on the remote server."
            ) from e
        except ftplib.all_errors as e:
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
            if self._supports_mlsd:
                try:
                    return self._list_mlsd(directory)
                except ftplib.error_perm as e:
                    if not str(e).startswith(_UNSUPPORTED_COMMAND_CODES):
                        raise
                    logger.debug("MLSD not supported, falling back to LIST: %s", e)
                    self._supports_mlsd = False
            return self._list_list(directory)
        except ftplib.all_errors as e:
            raise FtpOperationError(f"Unable to list files in directory {directory}") from e

    def _list_mlsd(self, directory: str) -> list[RemoteFile]:
        """List directory using MLSD command (modern, structured)."""
        results = []
        for name, facts in self._ftp.mlsd(directory, facts=["type", "size", "modify"]):
            entry_type = facts.get("type", "").lower()
            if name in (".", "..") or entry_type in ("cdir", "pdir"):
                continue

            results.append(
                RemoteFile(
                    name=name,
                    size=_parse_size(facts.get("size", "")),
                    full_path=join_path(directory, name),
                    last_modified=parse_mlsd_time(facts.get("modify", "")),
                    is_directory=entry_type == "dir",
                )
            )

        logger.debug("MLSD listed %d entries in %s", len(results), directory)
        return results

    def _list_list(self, directory: str) -> list[RemoteFile]:
        """List directory using LIST command (legacy, needs parsing)."""
        lines: list[str] = []
        self._ftp.retrlines(f"LIST {directory}", lines.append)

        results = []
        for line in lines:
            entry = parse_list_line(line, directory)
            if entry and entry.name not in (".", ".."):
                results.append(entry)

        logger.debug("LIST listed %d entries in %s", len(results), directory)
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
                self._ftp.retrbinary(f"RETR {remote_path}", stream.write)
            finally:
                stream.close()
        except ftplib.error_perm as e:
            raise FtpOperationError("Server returned failure while downloading.") from e
        except ftplib.all_errors as e:
            raise FtpOperationError(f"Unable to download file {remote_path}") from e

    def upload(self, local_path: str, remote_directory: str) -> None:
        remote_path = upload_target(local_path, remote_directory)
        logger.debug("Uploading %s to %s", local_path, remote_path)

        try:
            stream = self._streams.create_input_stream(local_path)
        except OSError as e:
            raise FtpOperationError(f"Could not find file: {local_path}") from e

        try:
            self._ftp.storbinary(f"STOR {remote_path}", stream)
        except ftplib.error_perm as e:
            raise FtpOperationError("Upload failed.") from e
        except ftplib.all_errors as e:
            raise FtpOperationError("Upload may not have completed.") from e
        finally:
            close_upload_stream(stream)

    def print_working_directory(self) -> str:
        try:
            return self._ftp.pwd()
        except ftplib.all_errors as e:
            raise FtpOperationError("Unable to print the working directory") from e


def _parse_size(value: str) -> int:
    """Parse an MLSD size fact; missing or malformed sizes become 0."""
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        logger.warning("Failed to parse MLSD size: %s", value)
        return 0


def parse_mlsd_time(time_str: str) -> datetime:
    """Parse MLSD modify time (YYYYMMDDHHmmSS[.sss], always UTC)."""
    if not time_str:
        return datetime.now(timezone.utc)

    try:
        # Remove fractional seconds if present
        time_str = time_str.split(".")[0]
        return datetime.strptime(time_str, "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
    except ValueError:
        logger.warning("Failed to parse MLSD time: %s", time_str)
        return datetime.now(timezone.utc)


def parse_list_line(line: str, directory: str) -> RemoteFile | None:
    """
    Parse a single line from LIST output.
    Handles both Unix and Windows FTP server formats.
    """
    line = line.strip()
    if not line:
        return None

    # Unix:    drwxr-xr-x  2 user group 4096 Dec 10 12:34 filename
    # Windows: 12-10-20  12:34PM       <DIR>          dirname
    # Windows: 12-10-20  12:34PM              1234 filename
    parts = line.split()
    if len(parts) < 4:
        return None

    if len(parts[0]) >= 10 and parts[0][0] in "dl-":
        return _parse_unix_list_line(line, directory)

    if "-" in parts[0] and len(parts[0]) <= 10:
        return _parse_windows_list_line(line, directory)

    logger.warning("Unknown LIST format: %s", line)
    return None


def _parse_unix_list_line(line: str, directory: str) -> RemoteFile | None:
    parts = line.split(None, 8)
    try:
        is_dir = parts[0][0] == "d"
        size = int(parts[4])
        name = parts[8]
        if parts[0][0] == "l" and " -> " in name:
            name = name.split(" -> ", 1)[0]

        return RemoteFile(
            name=name,
            size=size,
            full_path=join_path(directory, name),
            last_modified=_parse_unix_list_time(parts[5], parts[6], parts[7]),
            is_directory=is_dir,
        )
    except (IndexError, ValueError) as e:
        logger.warning("Failed to parse Unix LIST line: %s - %s", line, e)
        return None


def _parse_unix_list_time(month_str: str, day_str: str, time_or_year: str) -> datetime:
    """Parse Unix LIST time format (e.g., 'Dec 10 12:34' or 'Dec 10  2020')."""
    try:
        month = MONTHS[month_str.lower()]
        day = int(day_str)

        if ":" in time_or_year:
            # Time format - assume current year
            hour, minute = map(int, time_or_year.split(":"))
            year = datetime.now(timezone.utc).year
        else:
            year = int(time_or_year)
            hour, minute = 0, 0

        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except (ValueError, KeyError):
        return datetime.now(timezone.utc)


def _parse_windows_list_line(line: str, directory: str) -> RemoteFile | None:
    parts = line.split(None, 3)
    try:
        is_dir = parts[2].upper() == "<DIR>"
        size = 0 if is_dir else int(parts[2])
        name = parts[3]

        return RemoteFile(
            name=name,
            size=size,
            full_path=join_path(directory, name),
            last_modified=_parse_windows_list_time(parts[0], parts[1]),
            is_directory=is_dir,
        )
    except (IndexError, ValueError) as e:
        logger.warning("Failed to parse Windows LIST line: %s - %s", line, e)
        return None


def _parse_windows_list_time(date_str: str, time_str: str) -> datetime:
    """Parse Windows LIST time format (MM-DD-YY HH:MMAM/PM)."""
    try:
        month, day, year = map(int, date_str.split("-"))
        if year < 100:
            year += 2000 if year < 70 else 1900

        time_str = time_str.upper()
        is_pm = "PM" in time_str
        time_str = time_str.replace("AM", "").replace("PM", "")
        hour, minute = map(int, time_str.split(":"))

        if is_pm and hour != 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0

        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except (ValueError, IndexError):
        return datetime.now(timezone.utc)
