"""Page-level access to database files on disk."""

from __future__ import annotations

import os
import shutil
import stat
import threading
from typing import Dict, Set

from ..errors import (
    FileExistsError,
    FileNotClosedError,
    FileNotFoundError,
    FileNotOpenError,
    UnixError,
)
from .page import PAGE_SIZE

LOG_FILE_NAME = "db.log"

_BINARY = getattr(os, "O_BINARY", 0)


def _unix_error(exc: OSError) -> UnixError:
    return UnixError(exc.errno or 0)


class DiskManager:
    """Creates, opens and removes files and reads and writes pages in them."""

    MAX_FD = 8192

    def __init__(self) -> None:
        self._path2fd: Dict[str, int] = {}
        self._fd2path: Dict[int, str] = {}
        self._fd2pageno: Dict[int, int] = {}
        self._deallocated: Set[int] = set()
        self.log_fd: int | None = None
        self._lock = threading.Lock()

    # Page operations

    def write_page(self, fd: int, page_no: int, data: bytes) -> None:
        """Write data at the start of page page_no; pages not yet allocated are skipped."""
        if page_no >= self.get_fd2pageno(fd):
            return
        with self._lock:
            try:
                os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
                view = memoryview(bytes(data))
                while view:
                    written = os.write(fd, view)
                    view = view[written:]
            except OSError as exc:
                raise _unix_error(exc) from exc

    def read_page(self, fd: int, page_no: int, num_bytes: int) -> bytes:
        """Read num_bytes from page page_no; missing bytes come back as zeros."""
        if page_no >= self.get_fd2pageno(fd):
            return bytes(num_bytes)
        chunks = []
        remaining = num_bytes
        with self._lock:
            try:
                os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
                while remaining > 0:
                    chunk = os.read(fd, remaining)
                    if not chunk:
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
            except OSError as exc:
                raise _unix_error(exc) from exc
        return b"".join(chunks) + bytes(remaining)

    def allocate_page(self, fd: int) -> int:
        """Return the next page number of the file and advance the counter."""
        with self._lock:
            page_no = self._fd2pageno.get(fd, 0)
            self._check_fd(fd)
            self._fd2pageno[fd] = page_no + 1
        return page_no

    def deallocate_page(self, page_no: int) -> None:
        """Record a page number as released; numbers are never handed out again."""
        if page_no < 0:
            raise ValueError(f"invalid page number: {page_no}")
        with self._lock:
            self._deallocated.add(page_no)

    @property
    def deallocated_pages(self) -> frozenset:
        """Page numbers released through deallocate_page."""
        return frozenset(self._deallocated)

    def set_fd2pageno(self, fd: int, start_page_no: int) -> None:
        """Make the next allocation in the file start from start_page_no."""
        self._check_fd(fd)
        self._fd2pageno[fd] = start_page_no

    def get_fd2pageno(self, fd: int) -> int:
        """Return how many page numbers have been allocated in the file."""
        return self._fd2pageno.get(fd, 0)

    def _check_fd(self, fd: int) -> None:
        if not 0 <= fd < self.MAX_FD:
            raise FileNotOpenError(fd)

    # Directory operations

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def create_dir(self, path: str) -> None:
        try:
            os.mkdir(path)
        except OSError as exc:
            raise _unix_error(exc) from exc

    def destroy_dir(self, path: str) -> None:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise _unix_error(exc) from exc

    # File operations

    def is_file(self, path: str) -> bool:
        try:
            return stat.S_ISREG(os.stat(path).st_mode)
        except OSError:
            return False

    def create_file(self, path: str) -> None:
        """Create an empty file; raise FileExistsError if it is already there."""
        if self.is_file(path):
            raise FileExistsError(path)
        try:
            fd = os.open(path, os.O_CREAT | os.O_WRONLY | _BINARY, 0o644)
        except OSError as exc:
            raise _unix_error(exc) from exc
        os.close(fd)

    def destroy_file(self, path: str) -> None:
        """Remove a closed file."""
        if path in self._path2fd:
            raise FileNotClosedError(path)
        if not self.is_file(path):
            raise FileNotFoundError(path)
        try:
            os.unlink(path)
        except OSError:
            raise FileNotFoundError(path) from None

    def open_file(self, path: str) -> int:
        """Open a file for reading and writing; an already open file keeps its descriptor."""
        if path in self._path2fd:
            return self._path2fd[path]
        if not self.is_file(path):
            raise FileNotFoundError(path)
        try:
            fd = os.open(path, os.O_RDWR | _BINARY)
        except OSError:
            raise FileNotFoundError(path) from None
        self._path2fd[path] = fd
        self._fd2path[fd] = path
        return fd

    def close_file(self, fd: int) -> None:
        """Close a file opened with open_file."""
        if fd not in self._fd2path:
            raise FileNotOpenError(fd)
        try:
            os.close(fd)
        except OSError as exc:
            raise _unix_error(exc) from exc
        path = self._fd2path.pop(fd)
        del self._path2fd[path]
        if self.log_fd == fd:
            self.log_fd = None

    def get_file_size(self, path: str) -> int:
        try:
            return os.stat(path).st_size
        except OSError:
            raise FileNotFoundError(path) from None

    def get_file_name(self, fd: int) -> str:
        try:
            return self._fd2path[fd]
        except KeyError:
            raise FileNotOpenError(fd) from None

    def get_file_fd(self, path: str) -> int:
        """Return the descriptor of the file, opening it if needed."""
        if path not in self._path2fd:
            return self.open_file(path)
        return self._path2fd[path]

    # Log operations

    def _log_fd(self) -> int:
        if self.log_fd is None:
            self.log_fd = self.open_file(LOG_FILE_NAME)
        return self.log_fd

    def read_log(self, size: int, offset: int, prev_log_end: int) -> bytes:
        """Read up to size bytes of the log from prev_log_end + offset; b'' at its end."""
        fd = self._log_fd()
        offset += prev_log_end
        file_size = self.get_file_size(LOG_FILE_NAME)
        if offset >= file_size:
            return b""
        size = min(size, file_size - offset)
        with self._lock:
            try:
                os.lseek(fd, offset, os.SEEK_SET)
                data = os.read(fd, size)
            except OSError as exc:
                raise _unix_error(exc) from exc
        if len(data) != size:
            raise UnixError()
        return data

    def write_log(self, data: bytes) -> None:
        """Append data to the end of the log."""
        fd = self._log_fd()
        with self._lock:
            try:
                os.lseek(fd, 0, os.SEEK_END)
                written = os.write(fd, data)
            except OSError as exc:
                raise _unix_error(exc) from exc
        if written != len(data):
            raise UnixError()