__version__ = "0.1.0"

# Public API exports
from .client import Client, create_client
from .config import (
    AppConfig,
    ConnectionConfig,
    LogConfig,
    ServerConfig,
    UserCredentials,
    load_config,
)
from .connection import Connection, RemoteFile
from .exceptions import FtpConnectionError, FtpError, FtpOperationError
from .factory import ConnectionFactory
from .ftp_client import FTPClient
from .ftp_connection import FTPConnection
from .sftp_client import SFTPClient
from .sftp_connection import SFTPConnection
from .streams import FileStreamFactory

__all__ = [
    "__version__",
    # Configuration
    "AppConfig",
    "ServerConfig",
    "ConnectionConfig",
    "LogConfig",
    "UserCredentials",
    "load_config",
    # Clients
    "Client",
    "FTPClient",
    "SFTPClient",
    "create_client",
    # Connections
    "Connection",
    "ConnectionFactory",
    "FTPConnection",
    "SFTPConnection",
    "RemoteFile",
    "FileStreamFactory",
    # Errors
    "FtpError",
    "FtpConnectionError",
    "FtpOperationError",
]
