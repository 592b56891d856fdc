"""A fixed-size pool of page frames cached in memory over the disk manager."""

from __future__ import annotations

import threading
from collections import OrderedDict, deque
from typing import Deque, Dict, List, Optional

from .disk_manager import DiskManager
from .page import INVALID_PAGE_ID, PAGE_SIZE, Page, PageId


class _LRUReplacer:
    """Tracks unpinned frames; the least recently unpinned is evicted first."""

    def __init__(self) -> None:
        self._frames: "OrderedDict[int, None]" = OrderedDict()

    def victim(self) -> Optional[int]:
        if not self._frames:
            return None
        frame_id, _ = self._frames.popitem(last=False)
        return frame_id

    def pin(self, frame_id: int) -> None:
        self._frames.pop(frame_id, None)

    def unpin(self, frame_id: int) -> None:
        if frame_id not in self._frames:
            self._frames[frame_id] = None

    def __len__(self) -> int:
        return len(self._frames)


class BufferPoolManager:
    """Caches pages in a fixed number of frames and writes dirty ones back."""

    def __init__(self, pool_size: int, disk_manager: DiskManager) -> None:
        self.pool_size = pool_size
        self._disk = disk_manager
        self._pages: List[Page] = [Page() for _ in range(pool_size)]
        self._page_table: Dict[PageId, int] = {}
        self._free_list: Deque[int] = deque(range(pool_size))
        self._replacer = _LRUReplacer()
        self._latch = threading.Lock()

    def _find_victim_frame(self) -> Optional[int]:
        if self._free_list:
            return self._free_list.popleft()
        return self._replacer.victim()

    def _write_back(self, page: Page) -> None:
        page_id = page.page_id
        self._disk.write_page(page_id.fd, page_id.page_no, page.data)
        page.is_dirty = False

    def _update_page(self, page: Page, new_page_id: PageId, frame_id: int) -> None:
        if page.is_dirty:
            self._write_back(page)
        self._page_table.pop(page.page_id, None)
        if new_page_id.page_no != INVALID_PAGE_ID:
            self._page_table[new_page_id] = frame_id
        page.reset_memory()
        page.page_id = new_page_id

    def fetch_page(self, page_id: PageId) -> Optional[Page]:
        """Pin and return the page, reading it from disk if needed; None if no frame is free."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is not None:
                page = self._pages[frame_id]
                page.pin_count += 1
                self._replacer.pin(frame_id)
                return page
            frame_id = self._find_victim_frame()
            if frame_id is None:
                return None
            page = self._pages[frame_id]
            self._update_page(page, page_id, frame_id)
            page.data[:] = self._disk.read_page(page_id.fd, page_id.page_no, PAGE_SIZE)
            page.pin_count = 1
            self._replacer.pin(frame_id)
            return page

    def unpin_page(self, page_id: PageId, is_dirty: bool) -> bool:
        """Drop one pin; False if the page is not cached or was not pinned."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return False
            page = self._pages[frame_id]
            if page.pin_count <= 0:
                return False
            page.pin_count -= 1
            if page.pin_count == 0:
                self._replacer.unpin(frame_id)
            if is_dirty:
                page.is_dirty = True
            return True

    def flush_page(self, page_id: PageId) -> bool:
        """Write the page to disk regardless of pins; False if it is not cached."""
        with self._latch:
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return False
            self._write_back(self._pages[frame_id])
            return True

    def new_page(self, fd: int) -> Optional[Page]:
        """Allocate a page in the file and pin it in a frame; None if every frame is pinned."""
        with self._latch:
            frame_id = self._find_victim_frame()
            if frame_id is None:
                return None
            page_no = self._disk.allocate_page(fd)
            page = self._pages[frame_id]
            self._update_page(page, PageId(fd, page_no), frame_id)
            page.pin_count = 1
            self._replacer.pin(frame_id)
            return page

    def delete_page(self, page_id: PageId) -> bool:
        """Drop the page from the pool; False only if it is cached and still pinned."""
        with self._latch:
            self._disk.deallocate_page(page_id.page_no)
            frame_id = self._page_table.get(page_id)
            if frame_id is None:
                return True
            page = self._pages[frame_id]
            if page.pin_count > 0:
                return False
            del self._page_table[page_id]
            self._replacer.pin(frame_id)
            page.reset_memory()
            page.page_id = PageId()
            page.is_dirty = False
            page.pin_count = 0
            self._free_list.append(frame_id)
            return True

    def flush_all_pages(self, fd: int) -> None:
        """Write every cached page of the file to disk."""
        with self._latch:
            for page in self._pages:
                if page.page_id.fd == fd and page.page_id.page_no != INVALID_PAGE_ID:
                    self._write_back(page)