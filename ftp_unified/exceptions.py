"""
Exception types raised by ftp_unified.

Every failure coming out of ftplib or paramiko is caught where the call is
made and re-raised as one of these, with the original chained as __cause__.
"""


class FtpError(Exception):
    """Base exception for all client and connection failures."""


class FtpConnectionError(FtpError):
    """Raised while connecting to or disconnecting from a server."""


class FtpOperationError(FtpError):
    """Raised by an operation on an established connection."""
