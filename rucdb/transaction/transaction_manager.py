"""Beginning, committing and aborting transactions."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from ..defs import Rid
from .lock_manager import LockManager
from .transaction import Transaction
from .txn_defs import INVALID_TXN_ID, TransactionState, WType


class ConcurrencyMode(Enum):
    TWO_PHASE_LOCKING = 0
    BASIC_TO = 1


class RollbackHandler(Protocol):
    """Undoes writes on behalf of an aborting transaction."""

    def rollback_insert(self, tab_name: str, rid: Rid) -> None: ...

    def rollback_delete(self, tab_name: str, record: Any) -> None: ...

    def rollback_update(self, tab_name: str, rid: Rid, record: Any) -> None: ...


class TransactionManager:
    """Hands out transaction ids and finishes transactions, releasing their locks."""

    def __init__(
        self,
        lock_manager: LockManager,
        sm_manager: Optional[RollbackHandler] = None,
        concurrency_mode: ConcurrencyMode = ConcurrencyMode.TWO_PHASE_LOCKING,
    ) -> None:
        self.lock_manager = lock_manager
        self.sm_manager = sm_manager
        self.concurrency_mode = concurrency_mode
        self.txn_map: Dict[int, Transaction] = {}
        self._next_txn_id = 0
        self._next_timestamp = 0
        self._latch = threading.Lock()
        self._running = threading.Event()
        self._running.set()

    @property
    def next_txn_id(self) -> int:
        return self._next_txn_id

    def begin(self, txn: Optional[Transaction] = None) -> Transaction:
        """Register the transaction, creating a new one when none is given."""
        self._running.wait()
        with self._latch:
            if txn is None:
                txn = Transaction(self._next_txn_id)
                self._next_txn_id += 1
                txn.start_ts = self._next_timestamp
                self._next_timestamp += 1
            self.txn_map[txn.txn_id] = txn
        return txn

    def commit(self, txn: Transaction) -> None:
        """Make the writes final, release every lock and mark the transaction committed."""
        txn.write_set.clear()
        self._release(txn)
        txn.state = TransactionState.COMMITTED

    def abort(self, txn: Transaction) -> None:
        """Undo the writes newest first, release every lock and mark the transaction aborted."""
        while txn.write_set:
            write = txn.write_set.pop()
            if self.sm_manager is None:
                continue
            if write.wtype is WType.INSERT_TUPLE:
                self.sm_manager.rollback_insert(write.tab_name, write.rid)
            elif write.wtype is WType.DELETE_TUPLE:
                self.sm_manager.rollback_delete(write.tab_name, write.record)
            else:
                self.sm_manager.rollback_update(write.tab_name, write.rid, write.record)
        self._release(txn)
        txn.state = TransactionState.ABORTED

    def _release(self, txn: Transaction) -> None:
        for lock_id in list(txn.lock_set):
            self.lock_manager.unlock(txn, lock_id)
        txn.lock_set.clear()
        txn.page_set.clear()
        txn.deleted_page_set.clear()

    def get_transaction(self, txn_id: int) -> Optional[Transaction]:
        """Return the registered transaction; None for the invalid id, KeyError if unknown."""
        if txn_id == INVALID_TXN_ID:
            return None
        with self._latch:
            return self.txn_map[txn_id]

    def block_all_transactions(self) -> None:
        """Hold back new transactions until resume_all_transactions is called."""
        self._running.clear()

    def resume_all_transactions(self) -> None:
        self._running.set()