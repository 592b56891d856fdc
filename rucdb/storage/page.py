"""Fixed-size pages and their identifiers."""

from __future__ import annotations

import struct
from dataclasses import dataclass

PAGE_SIZE = 4096
INVALID_PAGE_ID = -1

_LSN = struct.Struct("<i")


@dataclass(frozen=True)
class PageId:
    """Identifies a page: the descriptor of its open file and its number there."""

    fd: int = -1
    page_no: int = INVALID_PAGE_ID


class Page:
    """One buffer frame: page data plus its bookkeeping."""

    OFFSET_PAGE_START = 0
    OFFSET_LSN = 0
    OFFSET_PAGE_HDR = 4

    def __init__(self) -> None:
        self.page_id = PageId()
        self.data = bytearray(PAGE_SIZE)
        self.is_dirty = False
        self.pin_count = 0

    def reset_memory(self) -> None:
        """Fill the page data with zero bytes, keeping the same buffer object."""
        self.data[:] = bytes(PAGE_SIZE)

    @property
    def lsn(self) -> int:
        """Log sequence number stored at the start of the page."""
        return _LSN.unpack_from(self.data, self.OFFSET_LSN)[0]

    @lsn.setter
    def lsn(self, value: int) -> None:
        _LSN.pack_into(self.data, self.OFFSET_LSN, value)

    def __repr__(self) -> str:
        return (
            f"Page(page_id={self.page_id!r}, is_dirty={self.is_dirty}, "
            f"pin_count={self.pin_count})"
        )