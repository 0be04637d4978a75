"""
Shared pytest fixtures for ftp-unified tests.
"""

import ftplib
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import paramiko
import pytest

from ftp_unified.config import ConnectionConfig, UserCredentials
from ftp_unified.streams import FileStreamFactory


@pytest.fixture
def tmp_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a temporary INI configuration file for config tests.

    Returns:
        Path to the temporary config file.
    """
    config_content = """[general]
protocol = sftp

[server]
host = testserver.local
port = 2222
username = testuser
password = testpass

[connection]
timeout_seconds = 45
keepalive_seconds = 120
passive_mode = false
encoding = latin-1
verify_host_keys = false

[logging]
level = DEBUG
file = test.log
console = false
"""
    config_path = tmp_path / "test_config.ini"
    config_path.write_text(config_content, encoding="utf-8")
    yield config_path


@pytest.fixture
def minimal_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """
    Creates a minimal INI configuration file with only required fields.

    Returns:
        Path to the temporary config file.
    """
    config_content = """[server]
host = minimal.server.com
"""
    config_path = tmp_path / "minimal_config.ini"
    config_path.write_text(config_content, encoding="utf-8")
    yield config_path


@pytest.fixture
def credentials() -> UserCredentials:
    return UserCredentials("thisisausername", "thisisapassword")


@pytest.fixture
def conn_config() -> ConnectionConfig:
    """Creates a standard ConnectionConfig for testing."""
    return ConnectionConfig(timeout_seconds=30, keepalive_seconds=300)


@pytest.fixture
def mock_ftp() -> Generator[MagicMock, None, None]:
    """
    Creates a mocked ftplib.FTP instance.

    Returns:
        Mocked FTP object with common methods stubbed.
    """
    mock = MagicMock(spec=ftplib.FTP)
    mock.encoding = "utf-8"
    mock.sock = MagicMock()

    # Default responses
    mock.connect.return_value = "220 Welcome"
    mock.login.return_value = "230 Login successful"
    mock.voidcmd.return_value = "200 Type set to I"
    mock.cwd.return_value = "250 OK"
    mock.pwd.return_value = "this/is/a/directory"
    mock.retrbinary.return_value = "226 Transfer complete"
    mock.storbinary.return_value = "226 Transfer complete"
    mock.quit.return_value = "221 Goodbye"

    yield mock


@pytest.fixture
def mock_sftp() -> Generator[MagicMock, None, None]:
    """Creates a mocked paramiko.SFTPClient."""
    mock = MagicMock(spec=paramiko.SFTPClient)
    mock.normalize.return_value = "this/is/the/pwd"
    yield mock


@pytest.fixture
def mock_stream_factory() -> Generator[MagicMock, None, None]:
    """
    Creates a mocked FileStreamFactory handing out mocked local streams.

    The streams are reachable as mock.input_stream and mock.output_stream.
    """
    mock = MagicMock(spec=FileStreamFactory)
    mock.input_stream = MagicMock(name="input_stream")
    mock.output_stream = MagicMock(name="output_stream")
    mock.create_input_stream.return_value = mock.input_stream
    mock.create_output_stream.return_value = mock.output_stream
    yield mock
