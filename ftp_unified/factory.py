"""
Builds Connection objects around already authenticated handles.
"""

import ftplib

import paramiko

from .ftp_connection import FTPConnection
from .sftp_connection import SFTPConnection
from .streams import FileStreamFactory


class ConnectionFactory:
    def __init__(self, stream_factory: FileStreamFactory | None = None):
        self.stream_factory = stream_factory or FileStreamFactory()

    def create_ftp_connection(self, ftp: ftplib.FTP) -> FTPConnection:
        return FTPConnection(ftp, self.stream_factory)

    def create_sftp_connection(self, sftp: paramiko.SFTPClient) -> SFTPConnection:
        return SFTPConnection(sftp, self.stream_factory)
