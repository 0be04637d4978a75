"""
Local file streams used on the local side of uploads and downloads.
"""

from typing import BinaryIO


class FileStreamFactory:
    """Opens local files for transfers. Replaced with a mock in tests."""

    def create_input_stream(self, path: str) -> BinaryIO:
        """Open a local file for reading.

        Raises:
            FileNotFoundError: If path does not exist.
        """
        return open(path, "rb")

    def create_output_stream(self, path: str) -> BinaryIO:
        """Open (and truncate) a local file for writing."""
        return open(path, "wb")
