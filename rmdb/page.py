"""Page identifiers and in-memory page frames."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from rmdb.defs import INVALID_PAGE_ID, PAGE_SIZE

_LSN = struct.Struct("<i")


@dataclass(frozen=True)
class PageId:
    """Identifies a page: the descriptor of its open file and its page number."""

    fd: int
    page_no: int = INVALID_PAGE_ID

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PageId):
            return NotImplemented
        return self.fd < other.fd or self.page_no < other.page_no

    def __str__(self) -> str:
        return f"{{fd: {self.fd} page_no: {self.page_no}}}"


class Page:
    """A page-sized frame of bytes together with its buffer-pool bookkeeping."""

    OFFSET_PAGE_START = 0
    OFFSET_LSN = 0
    OFFSET_PAGE_HDR = 4

    def __init__(self, page_id: PageId | None = None) -> None:
        self.page_id = page_id if page_id is not None else PageId(fd=-1)
        self.data = bytearray(PAGE_SIZE)
        self.is_dirty = False
        self.pin_count = 0

    @property
    def page_lsn(self) -> int:
        """Log sequence number stored in the first bytes of the page."""
        return _LSN.unpack_from(self.data, self.OFFSET_LSN)[0]

    @page_lsn.setter
    def page_lsn(self, lsn: int) -> None:
        _LSN.pack_into(self.data, self.OFFSET_LSN, lsn)

    def reset_memory(self) -> None:
        """Zero the page contents in place."""
        self.data[:] = bytes(PAGE_SIZE)

    def __repr__(self) -> str:
        return (
            f"Page(page_id={self.page_id}, is_dirty={self.is_dirty}, "
            f"pin_count={self.pin_count})"
        )