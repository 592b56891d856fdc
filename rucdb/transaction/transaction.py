"""A transaction and the sets it accumulates while running."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Set

from ..storage.page import Page
from .txn_defs import (
    INVALID_LSN,
    IsolationLevel,
    LockDataId,
    TransactionState,
    WriteRecord,
)


class Transaction:
    """State of one transaction: its writes, locks and latched pages."""

    def __init__(
        self, txn_id: int, isolation_level: IsolationLevel = IsolationLevel.SERIALIZABLE
    ) -> None:
        self.txn_id = txn_id
        self.isolation_level = isolation_level
        self.state = TransactionState.DEFAULT
        # True while the transaction was opened explicitly and has more statements to run.
        self.txn_mode = False
        self.start_ts = 0
        self.prev_lsn = INVALID_LSN
        self.thread_id = threading.get_ident()
        self.write_set: Deque[WriteRecord] = deque()
        self.lock_set: Set[LockDataId] = set()
        self.page_set: Deque[Page] = deque()
        self.deleted_page_set: Deque[Page] = deque()

    def append_write_record(self, write_record: WriteRecord) -> None:
        self.write_set.append(write_record)

    def add_into_page_set(self, page: Page) -> None:
        self.page_set.append(page)

    def add_into_deleted_page_set(self, page: Page) -> None:
        self.deleted_page_set.append(page)

    def __repr__(self) -> str:
        return f"Transaction(txn_id={self.txn_id}, state={self.state.name})"