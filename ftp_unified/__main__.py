"""
ftp-unified - Main Entry Point

Command line access to the unified FTP/SFTP client: connect, run a single
operation, disconnect.
"""

import argparse
import logging
import sys

from .client import create_client
from .config import load_config
from .connection import Connection
from .exceptions import FtpError
from .logger import setup_logging

logger = logging.getLogger(__name__)


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument(
        "--protocol",
        choices=["ftp", "sftp"],
        default=None,
        help="Protocol to use (default: ftp)",
    )
    parser.add_argument("--host", help="Server host")
    parser.add_argument("--port", type=int, help="Server port (default: 21 for FTP, 22 for SFTP)")
    parser.add_argument("--user", help="Username")
    parser.add_argument("--password", help="Password")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="ftp-unified",
        description="ftp-unified - One client for FTP and SFTP servers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ftp-unified ls --host ftp.example.com --user bob --password secret
  ftp-unified ls pub/releases --config config.ini
  ftp-unified get --protocol sftp --host example.com /var/log/app.log ./logs
  ftp-unified put --config config.ini ./build/report.pdf reports/
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    pwd_parser = subparsers.add_parser("pwd", help="Print the remote working directory")
    _add_connection_args(pwd_parser)

    ls_parser = subparsers.add_parser("ls", help="List a remote directory")
    _add_connection_args(ls_parser)
    ls_parser.add_argument("path", nargs="?", help="Directory relative to the working directory")

    get_parser = subparsers.add_parser("get", help="Download a remote file")
    _add_connection_args(get_parser)
    get_parser.add_argument("remote_path", help="Remote file to download")
    get_parser.add_argument("local_directory", help="Local directory to save into")

    put_parser = subparsers.add_parser("put", help="Upload a local file")
    _add_connection_args(put_parser)
    put_parser.add_argument("local_path", help="Local file to upload")
    put_parser.add_argument("remote_directory", help="Remote directory to upload into")

    return parser.parse_args(argv)


def run_command(args, connection: Connection) -> None:
    """Run the selected operation on an open connection."""
    if args.command == "pwd":
        print(connection.print_working_directory())
    elif args.command == "ls":
        for remote_file in connection.list_files(args.path):
            kind = "d" if remote_file.is_directory else "-"
            modified = remote_file.last_modified.strftime("%Y-%m-%d %H:%M")
            print(f"{kind} {remote_file.size:>12} {modified} {remote_file.name}")
    elif args.command == "get":
        connection.download(args.remote_path, args.local_directory)
        print(f"Downloaded {args.remote_path} to {args.local_directory}")
    elif args.command == "put":
        connection.upload(args.local_path, args.remote_directory)
        print(f"Uploaded {args.local_path} to {args.remote_directory}")


def main(argv=None) -> int:
    args = parse_args(argv)
    if not args.command:
        print("[ERROR] No command given. Use --help for usage.")
        return 1

    try:
        config = load_config(
            config_path=args.config,
            protocol=args.protocol,
            host=args.host,
            port=args.port,
            username=args.user,
            password=args.password,
            debug=args.verbose,
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"[ERROR] {e}")
        return 1

    setup_logging(config.logging)
    from . import __version__

    logger.info("Starting ftp-unified v%s", __version__)

    client = create_client(config)
    try:
        connection = client.connect()
    except FtpError as e:
        logger.error("Failed to connect: %s", e)
        print(f"[ERROR] {e}")
        return 1

    try:
        run_command(args, connection)
    except FtpError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"[ERROR] {e}")
        return 1
    finally:
        try:
            client.disconnect()
        except FtpError as e:
            logger.warning("Disconnect failed: %s", e)

    return 0


if __name__ == "__main__":
    sys.exit(main())
