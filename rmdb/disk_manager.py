"""Reading and writing pages, files and the log on disk."""

from __future__ import annotations

import os
import shutil
import threading

from rmdb.defs import LOG_FILE_NAME, PAGE_SIZE
from rmdb.errors import (
    FileNotClosedError,
    FileNotOpenError,
    InternalError,
    RmdbFileExistsError,
    RmdbFileNotFoundError,
    UnixError,
)

_BINARY = getattr(os, "O_BINARY", 0)


class DiskManager:
    """Performs the file operations that the upper layers need."""

    MAX_FD = 8192

    def __init__(self) -> None:
        self._path2fd: dict[str, int] = {}
        self._fd2path: dict[int, str] = {}
        self._fd2pageno: dict[int, int] = {}
        self._deallocated: set[int] = set()
        self._pageno_lock = threading.Lock()
        self.log_fd = -1

    # pages

    def write_page(self, fd: int, page_no: int, data: bytes | bytearray) -> None:
        """Write ``data`` at the start of page ``page_no`` of the file."""
        try:
            os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            written = os.write(fd, bytes(data))
        except OSError as exc:
            raise InternalError("write_page failed") from exc
        if written != len(data):
            raise InternalError("write_page failed")

    def read_page(self, fd: int, page_no: int, num_bytes: int) -> bytes:
        """Read ``num_bytes`` from the start of page ``page_no`` of the file."""
        try:
            os.lseek(fd, page_no * PAGE_SIZE, os.SEEK_SET)
            data = os.read(fd, num_bytes)
        except OSError as exc:
            raise InternalError("read_page failed") from exc
        if len(data) != num_bytes:
            raise InternalError("read_page failed")
        return data

    def allocate_page(self, fd: int) -> int:
        """Hand out the next page number of the file."""
        if not 0 <= fd < self.MAX_FD:
            raise ValueError(f"file descriptor out of range: {fd}")
        with self._pageno_lock:
            page_no = self._fd2pageno.get(fd, 0)
            self._fd2pageno[fd] = page_no + 1
        return page_no

    def deallocate_page(self, page_no: int) -> None:
        """Note a released page number; numbers are never handed out again."""
        with self._pageno_lock:
            self._deallocated.add(page_no)

    def set_fd2pageno(self, fd: int, start_page_no: int) -> None:
        """Make the file allocate page numbers from ``start_page_no`` on."""
        with self._pageno_lock:
            self._fd2pageno[fd] = start_page_no

    def get_fd2pageno(self, fd: int) -> int:
        """Number of pages already allocated in the file."""
        with self._pageno_lock:
            return self._fd2pageno.get(fd, 0)

    # directories

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def create_dir(self, path: str) -> None:
        try:
            os.mkdir(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    def destroy_dir(self, path: str) -> None:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    # files

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def create_file(self, path: str) -> None:
        """Create an empty file; it must not already exist."""
        if self.is_file(path):
            raise RmdbFileExistsError(path)
        try:
            fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_RDWR | _BINARY, 0o666)
        except FileExistsError as exc:
            raise RmdbFileExistsError(path) from exc
        except OSError as exc:
            raise UnixError(exc) from exc
        os.close(fd)

    def destroy_file(self, path: str) -> None:
        """Remove a closed file."""
        if not self.is_file(path):
            raise RmdbFileNotFoundError(path)
        if path in self._path2fd:
            raise FileNotClosedError(path)
        try:
            os.unlink(path)
        except OSError as exc:
            raise UnixError(exc) from exc

    def open_file(self, path: str) -> int:
        """Open a file for reading and writing; an open file gives back its descriptor."""
        if path in self._path2fd:
            return self._path2fd[path]
        if not self.is_file(path):
            raise RmdbFileNotFoundError(path)
        try:
            fd = os.open(path, os.O_RDWR | _BINARY)
        except OSError as exc:
            raise UnixError(exc) from exc
        self._path2fd[path] = fd
        self._fd2path[fd] = path
        return fd

    def close_file(self, fd: int) -> None:
        """Close a file opened by :meth:`open_file`."""
        path = self._fd2path.get(fd)
        if path is None:
            raise FileNotOpenError(fd)
        try:
            os.close(fd)
        except OSError as exc:
            raise UnixError(exc) from exc
        del self._path2fd[path]
        del self._fd2path[fd]
        if self.log_fd == fd:
            self.log_fd = -1

    def get_file_size(self, path: str) -> int:
        """Size of the file in bytes, or -1 if it cannot be examined."""
        try:
            return os.stat(path).st_size
        except OSError:
            return -1

    def get_file_name(self, fd: int) -> str:
        path = self._fd2path.get(fd)
        if path is None:
            raise FileNotOpenError(fd)
        return path

    def get_file_fd(self, path: str) -> int:
        fd = self._path2fd.get(path)
        return fd if fd is not None else self.open_file(path)

    # log

    def _ensure_log_open(self) -> int:
        if self.log_fd == -1:
            self.log_fd = self.open_file(LOG_FILE_NAME)
        return self.log_fd

    def read_log(self, size: int, offset: int) -> bytes | None:
        """Read up to ``size`` bytes of the log at ``offset``; None if ``offset`` is past the end."""
        fd = self._ensure_log_open()
        file_size = self.get_file_size(LOG_FILE_NAME)
        if offset > file_size:
            return None
        size = min(size, file_size - offset)
        if size == 0:
            return b""
        os.lseek(fd, offset, os.SEEK_SET)
        data = os.read(fd, size)
        if len(data) != size:
            raise InternalError("read_log failed")
        return data

    def write_log(self, data: bytes | bytearray) -> None:
        """Append ``data`` to the end of the log."""
        fd = self._ensure_log_open()
        try:
            os.lseek(fd, 0, os.SEEK_END)
            written = os.write(fd, bytes(data))
        except OSError as exc:
            raise UnixError(exc) from exc
        if written != len(data):
            raise UnixError()