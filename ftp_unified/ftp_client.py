import ftplib
import logging
import socket

from .config import ConnectionConfig, UserCredentials
from .exceptions import FtpConnectionError
from .factory import ConnectionFactory
from .ftp_connection import FTPConnection

logger = logging.getLogger(__name__)


class FTPClient:
    """
    Connects to an FTP server with ftplib and hands out an FTPConnection.

    Only one live connection is held at a time; call disconnect() before
    connecting again.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int = 21,
        credentials: UserCredentials | None = None,
        conn_config: ConnectionConfig | None = None,
        connection_factory: ConnectionFactory | None = None,
    ):
        self.host = host
        self.port = port
        self.credentials = credentials
        self.conn_config = conn_config or ConnectionConfig()
        self.connection_factory = connection_factory or ConnectionFactory()
        self._ftp: ftplib.FTP | None = None

    def set_host(self, host: str) -> None:
        self.host = host

    def set_port(self, port: int) -> None:
        self.port = port

    def set_credentials(self, credentials: UserCredentials) -> None:
        self.credentials = credentials

    def is_connected(self) -> bool:
        return self._ftp is not None and self._ftp.sock is not None

    def connect(self) -> FTPConnection:
        """
        Connect, log in and switch to binary mode.

        Raises:
            FtpConnectionError: If the server cannot be reached, answers
                with a bad status, or rejects the login.
        """
        if self.is_connected():
            raise FtpConnectionError(
                f"Already connected to host {self.host} on port {self.port}"
            )

        credentials = self.credentials or UserCredentials("anonymous")
        ftp = ftplib.FTP()
        ftp.encoding = self.conn_config.encoding

        logger.debug("Connecting to FTP server %s:%d", self.host, self.port)
        try:
            welcome = ftp.connect(
                host=self.host,
                port=self.port,
                timeout=self.conn_config.timeout_seconds,
            )
        except ftplib.Error as e:
            # ftplib raises on 4xx/5xx greetings
            self._abort(ftp)
            raise self._bad_status_error() from e
        except (OSError, EOFError) as e:
            self._abort(ftp)
            logger.error("Connection to %s:%d failed: %s", self.host, self.port, e)
            raise FtpConnectionError(
                f"Unable to connect to host {self.host} on port {self.port}"
            ) from e

        if not welcome.startswith("2"):
            self._abort(ftp)
            raise self._bad_status_error()

        ftp.set_pasv(self.conn_config.passive_mode)
        logger.debug("Passive mode: %s", self.conn_config.passive_mode)

        logger.debug("Logging in as user: %s", credentials.username)
        try:
            ftp.login(user=credentials.username, passwd=credentials.password)
        except ftplib.all_errors as e:
            self._abort(ftp)
            logger.error("FTP login failed for %s: %s", credentials.username, e)
            raise FtpConnectionError(f"Unable to login for user {credentials.username}") from e

        self._enable_keepalive(ftp)

        try:
            ftp.voidcmd("TYPE I")
        except ftplib.all_errors as e:
            self._abort(ftp)
            logger.error("Could not switch to binary mode: %s", e)
            raise FtpConnectionError(
                f"Unable to connect to host {self.host} on port {self.port}"
            ) from e

        self._ftp = ftp
        logger.info("Connected to FTP server %s:%d", self.host, self.port)
        return self.connection_factory.create_ftp_connection(ftp)

    def _bad_status_error(self) -> FtpConnectionError:
        logger.error("FTP server %s:%d returned a bad status code", self.host, self.port)
        return FtpConnectionError(
            f"The host {self.host} on port {self.port} returned a bad status code."
        )

    def _abort(self, ftp: ftplib.FTP) -> None:
        """Drop a handle whose handshake failed."""
        try:
            ftp.close()
        except OSError as e:
            logger.debug("Closing failed FTP handle raised: %s", e)

    def _enable_keepalive(self, ftp: ftplib.FTP) -> None:
        """Turn on TCP keep-alive for the control connection."""
        sock = ftp.sock
        if sock is None:
            return

        seconds = self.conn_config.keepalive_seconds
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
            if hasattr(socket, "TCP_KEEPIDLE"):
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, seconds)
            elif hasattr(socket, "TCP_KEEPALIVE"):  # macOS
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_KEEPALIVE, seconds)
            logger.debug("Control channel keep-alive: %ds", seconds)
        except OSError as e:
            logger.warning("Failed to set control channel keep-alive: %s", e)

    def disconnect(self) -> None:
        """
        Close the connection. Does nothing if not connected.

        Raises:
            FtpConnectionError: If the server connection fails to close cleanly.
        """
        if not self.is_connected():
            logger.debug("FTP client not connected, nothing to disconnect")
            self._ftp = None
            return

        ftp = self._ftp
        self._ftp = None
        try:
            ftp.quit()
            logger.info("Disconnected from FTP server %s:%d", self.host, self.port)
        except ftplib.all_errors as e:
            self._abort(ftp)
            logger.error("FTP disconnect failed: %s", e)
            raise FtpConnectionError(
                "There was an unexpected error while trying to disconnect."
            ) from e
