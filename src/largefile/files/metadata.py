"""File verification, line counting, type classification and chunk sizing.

Pure filesystem I/O. Nothing here is cached; every call reflects the file's
on-disk state at the moment of the call.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

from largefile.config.constants import CHUNK_SIZE_CAP, LARGE_FILE_LINES, READ_BLOCK_BYTES
from largefile.core.formatting import format_bytes
from largefile.files.models import FileMetadata, FileType
from largefile.mcp.errors import FileTooLargeError, NotAccessibleError, NotAFileError

EXTENSION_TO_TYPE: dict[str, FileType] = {
    ".txt": FileType.TEXT,
    ".log": FileType.LOG,
    ".csv": FileType.CSV,
    ".json": FileType.JSON,
    ".xml": FileType.XML,
    ".md": FileType.MARKDOWN,
    ".ts": FileType.CODE,
    ".js": FileType.CODE,
    ".py": FileType.CODE,
    ".java": FileType.CODE,
    ".cpp": FileType.CODE,
    ".c": FileType.CODE,
    ".h": FileType.CODE,
    ".go": FileType.CODE,
    ".rs": FileType.CODE,
    ".rb": FileType.CODE,
    ".php": FileType.CODE,
    ".swift": FileType.CODE,
    ".kt": FileType.CODE,
    ".scala": FileType.CODE,
    ".sh": FileType.CODE,
    ".bash": FileType.CODE,
    ".yml": FileType.CODE,
    ".yaml": FileType.CODE,
    ".bin": FileType.BINARY,
    ".exe": FileType.BINARY,
    ".dll": FileType.BINARY,
    ".so": FileType.BINARY,
    ".zip": FileType.BINARY,
    ".gz": FileType.BINARY,
    ".tar": FileType.BINARY,
    ".png": FileType.BINARY,
    ".jpg": FileType.BINARY,
    ".jpeg": FileType.BINARY,
    ".gif": FileType.BINARY,
    ".pdf": FileType.BINARY,
}

# Lines per chunk by type. Dense lines (JSON, code) get smaller chunks.
BASE_CHUNK_SIZES: dict[FileType, int] = {
    FileType.LOG: 500,
    FileType.CSV: 1000,
    FileType.JSON: 100,
    FileType.CODE: 300,
    FileType.TEXT: 500,
    FileType.MARKDOWN: 200,
    FileType.XML: 200,
    FileType.BINARY: 1000,
    FileType.UNKNOWN: 500,
}


def optimal_chunk_size(file_type: FileType, total_lines: int) -> int:
    """Lines per chunk for a file of this type and length.

    Files over LARGE_FILE_LINES lines get double the base size, capped at
    CHUNK_SIZE_CAP, so chunk counts stay manageable.
    """
    base = BASE_CHUNK_SIZES.get(file_type, 500)
    if total_lines > LARGE_FILE_LINES:
        return min(base * 2, CHUNK_SIZE_CAP)
    return base


def iter_lines(path: str | Path, encoding: str = "utf-8") -> Iterator[tuple[int, int, str]]:
    """Yield (line_number, byte_offset, text) for every line in the file.

    Lines split on "\\n" only; the terminator and a preceding "\\r" are
    stripped. Undecodable bytes are replaced. Numbering is 1-based and agrees
    with FileMetadataProvider.count_lines.
    """
    offset = 0
    with open(path, "rb") as f:
        for number, raw in enumerate(f, start=1):
            line_offset = offset
            offset += len(raw)
            if raw.endswith(b"\n"):
                raw = raw[:-1]
                if raw.endswith(b"\r"):
                    raw = raw[:-1]
            yield number, line_offset, raw.decode(encoding, errors="replace")


class FileMetadataProvider:
    """Verifies files and derives their metadata in sequential scans."""

    def __init__(self, max_file_size_bytes: int | None = None, encoding: str = "utf-8") -> None:
        self._max_file_size_bytes = max_file_size_bytes
        self.encoding = encoding

    def verify(self, path: str | Path) -> os.stat_result:
        """Check path is a readable regular file within the size limit.

        Returns:
            The stat result, so callers need not stat again.

        Raises:
            NotAccessibleError: Path missing or unreadable.
            NotAFileError: Path is a directory or special file.
            FileTooLargeError: File exceeds max_file_size_bytes.
        """
        path_str = str(path)
        try:
            st = os.stat(path_str)
        except OSError as e:
            raise NotAccessibleError(path_str) from e
        if not os.access(path_str, os.R_OK):
            raise NotAccessibleError(path_str)
        if not stat.S_ISREG(st.st_mode):
            raise NotAFileError(path_str)
        if self._max_file_size_bytes is not None and st.st_size > self._max_file_size_bytes:
            raise FileTooLargeError(path_str, st.st_size, self._max_file_size_bytes)
        return st

    def count_lines(self, path: str | Path) -> int:
        """Count lines in one forward pass with constant memory.

        A final line without a terminator still counts; an empty file has 0.
        """
        count = 0
        last = b""
        with open(path, "rb") as f:
            while block := f.read(READ_BLOCK_BYTES):
                count += block.count(b"\n")
                last = block[-1:]
        if last and last != b"\n":
            count += 1
        return count

    def classify(self, path: str | Path) -> FileType:
        return EXTENSION_TO_TYPE.get(Path(path).suffix.lower(), FileType.UNKNOWN)

    def describe(self, path: str | Path, total_lines: int | None = None) -> FileMetadata:
        """Verify, stat, count and classify a file.

        Args:
            path: File to describe.
            total_lines: Line count from a scan the caller already made.
                Counted here when None.
        """
        st = self.verify(path)
        if total_lines is None:
            total_lines = self.count_lines(path)
        file_type = self.classify(path)
        created = getattr(st, "st_birthtime", st.st_ctime)
        return FileMetadata(
            path=str(path),
            size_bytes=st.st_size,
            size_formatted=format_bytes(st.st_size),
            total_lines=total_lines,
            encoding=self.encoding,
            file_type=file_type,
            created_at=datetime.fromtimestamp(created, tz=UTC),
            modified_at=datetime.fromtimestamp(st.st_mtime, tz=UTC),
            is_text=file_type is not FileType.BINARY,
        )
