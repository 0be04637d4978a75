"""
SFTP client implementation using paramiko.

Provides the same interface as FTPClient but over SSH/SFTP,
so callers can use either transport transparently.
"""

import logging
from pathlib import Path

import paramiko

from .config import ConnectionConfig, UserCredentials
from .exceptions import FtpConnectionError
from .factory import ConnectionFactory
from .sftp_connection import SFTPConnection

logger = logging.getLogger(__name__)

KNOWN_HOSTS_PATH = Path.home() / ".ssh" / "known_hosts"


class TrustOnFirstUsePolicy(paramiko.MissingHostKeyPolicy):
    """
    Trust-on-first-use host key policy (same model as OpenSSH).

    - Unknown host: accept and save key to ~/.ssh/known_hosts
    - Known host, same key: accept
    - Known host, CHANGED key: reject (possible MITM attack)
    """

    def __init__(self, known_hosts_path: Path = KNOWN_HOSTS_PATH):
        self._known_hosts_path = known_hosts_path

    def missing_host_key(self, client, hostname, key):
        host_keys = client.get_host_keys()
        existing = host_keys.lookup(hostname)

        if existing is not None:
            existing_key = existing.get(key.get_name())
            if existing_key is not None and existing_key != key:
                raise paramiko.SSHException(
                    f"Host key for {hostname} has CHANGED. "
                    f"This could indicate a man-in-the-middle attack. "
                    f"If the server key was legitimately changed, remove the old "
                    f"entry from {self._known_hosts_path} and try again."
                )

        logger.info("Adding host key for %s to known_hosts", hostname)
        host_keys.add(hostname, key.get_name(), key)

        try:
            self._known_hosts_path.parent.mkdir(parents=True, exist_ok=True)
            host_keys.save(str(self._known_hosts_path))
        except OSError as e:
            logger.warning("Could not save known_hosts: %s", e)


class SFTPClient:
    """
    Opens an SSH session and SFTP channel with paramiko and hands out an
    SFTPConnection.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int = 22,
        credentials: UserCredentials | None = None,
        conn_config: ConnectionConfig | None = None,
        connection_factory: ConnectionFactory | None = None,
    ):
        self.host = host
        self.port = port
        self.credentials = credentials
        self.conn_config = conn_config or ConnectionConfig()
        self.connection_factory = connection_factory or ConnectionFactory()
        self._ssh: paramiko.SSHClient | None = None
        self._sftp: paramiko.SFTPClient | None = None

    def set_host(self, host: str) -> None:
        self.host = host

    def set_port(self, port: int) -> None:
        self.port = port

    def set_credentials(self, credentials: UserCredentials) -> None:
        self.credentials = credentials

    def is_connected(self) -> bool:
        return self._ssh is not None and self._sftp is not None

    def connect(self) -> SFTPConnection:
        """
        Open the SSH session with password auth, then the SFTP channel.

        Raises:
            FtpConnectionError: If the session or channel cannot be opened.
        """
        if self.is_connected():
            raise FtpConnectionError(
                f"Already connected to host {self.host} on port {self.port}"
            )

        username = self.credentials.username if self.credentials else None
        password = self.credentials.password if self.credentials else None

        ssh = paramiko.SSHClient()

        logger.debug("Connecting to SSH %s@%s:%d with password", username, self.host, self.port)
        try:
            self._configure_host_keys(ssh)
            ssh.connect(
                hostname=self.host,
                port=self.port,
                username=username,
                password=password,
                timeout=self.conn_config.timeout_seconds,
                look_for_keys=False,
                allow_agent=False,
            )
            logger.debug("Opening SFTP channel")
            sftp = ssh.open_sftp()
        except (OSError, EOFError, paramiko.SSHException) as e:
            ssh.close()
            logger.error("SSH connection to %s:%d failed: %s", self.host, self.port, e)
            raise FtpConnectionError(
                f"Unable to connect to host {self.host} on port {self.port}"
            ) from e

        self._ssh = ssh
        self._sftp = sftp
        logger.info("Connected to SSH server %s:%d", self.host, self.port)
        return self.connection_factory.create_sftp_connection(sftp)

    def _configure_host_keys(self, ssh: paramiko.SSHClient) -> None:
        if not self.conn_config.verify_host_keys:
            logger.warning(
                "Host key verification is disabled for %s; any server key will be accepted",
                self.host,
            )
            ssh.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            return

        ssh.load_system_host_keys()
        try:
            ssh.load_host_keys(str(KNOWN_HOSTS_PATH))
        except FileNotFoundError:
            pass
        ssh.set_missing_host_key_policy(TrustOnFirstUsePolicy())

    def disconnect(self) -> None:
        """
        Close the SFTP channel and the SSH session.

        Raises:
            FtpConnectionError: If connect() never succeeded, or closing fails.
        """
        if not self.is_connected():
            raise FtpConnectionError("The underlying connection was never initially made.")

        ssh, sftp = self._ssh, self._sftp
        self._ssh = None
        self._sftp = None
        try:
            try:
                sftp.close()
            finally:
                ssh.close()
        except (OSError, paramiko.SSHException) as e:
            logger.error("SSH disconnect failed: %s", e)
            raise FtpConnectionError(
                "There was an unexpected error while trying to disconnect."
            ) from e
        logger.info("Disconnected from SSH server %s:%d", self.host, self.port)
