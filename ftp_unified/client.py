"""
Client protocol definition.

Defines the interface that both FTPClient and SFTPClient implement,
allowing callers to connect without branching on the transport.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from .config import AppConfig, UserCredentials
from .connection import Connection
from .ftp_client import FTPClient
from .sftp_client import SFTPClient

logger = logging.getLogger(__name__)


@runtime_checkable
class Client(Protocol):
    """Protocol for a configurable remote server client.

    Host, port and credentials should be set before connect() is called.
    """

    def set_host(self, host: str) -> None: ...

    def set_port(self, port: int) -> None: ...

    def set_credentials(self, credentials: UserCredentials) -> None: ...

    def connect(self) -> Connection:
        """Perform the protocol handshake and return a live connection.

        Raises:
            FtpConnectionError: If the handshake fails.
        """
        ...

    def disconnect(self) -> None:
        """Tear down the live connection."""
        ...


def create_client(config: AppConfig) -> Client:
    """Build the client matching config.protocol, fully configured."""
    client_class = SFTPClient if config.protocol == "sftp" else FTPClient
    client = client_class(conn_config=config.connection)
    client.set_host(config.server.host)
    client.set_port(config.server.port)
    if config.server.username is not None:
        client.set_credentials(config.server.credentials)
    elif config.server.password:
        logger.warning("Password configured without a username; it will not be used")
    return client
