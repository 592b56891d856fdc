"""Two-phase locking with table and record granularity and intention locks."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set

from ..defs import Rid
from .transaction import Transaction
from .txn_defs import AbortReason, LockDataId, TransactionAbortError, TransactionState


class LockMode(Enum):
    SHARED = 0
    EXCLUSIVE = 1
    INTENTION_SHARED = 2
    INTENTION_EXCLUSIVE = 3
    S_IX = 4


class GroupLockMode(Enum):
    """Combined mode of all locks granted on one item."""

    NON_LOCK = 0
    IS = 1
    IX = 2
    S = 3
    X = 4
    SIX = 5


_S, _X = LockMode.SHARED, LockMode.EXCLUSIVE
_IS, _IX, _SIX = LockMode.INTENTION_SHARED, LockMode.INTENTION_EXCLUSIVE, LockMode.S_IX

# Modes whose rights are contained in the key mode.
_COVERS: Dict[LockMode, Set[LockMode]] = {
    _X: set(LockMode),
    _SIX: {_IS, _IX, _S, _SIX},
    _S: {_IS, _S},
    _IX: {_IS, _IX},
    _IS: {_IS},
}

# Group modes of other transactions under which a request may be granted.
_COMPATIBLE: Dict[LockMode, Set[GroupLockMode]] = {
    _IS: {GroupLockMode.NON_LOCK, GroupLockMode.IS, GroupLockMode.IX, GroupLockMode.S, GroupLockMode.SIX},
    _IX: {GroupLockMode.NON_LOCK, GroupLockMode.IS, GroupLockMode.IX},
    _S: {GroupLockMode.NON_LOCK, GroupLockMode.IS, GroupLockMode.S},
    _SIX: {GroupLockMode.NON_LOCK, GroupLockMode.IS},
    _X: {GroupLockMode.NON_LOCK},
}


def _combine(held: LockMode, requested: LockMode) -> LockMode:
    if requested in _COVERS[held]:
        return held
    if held in _COVERS[requested]:
        return requested
    return _SIX


def _group_of(modes: Set[LockMode]) -> GroupLockMode:
    if _X in modes:
        return GroupLockMode.X
    if _SIX in modes or (_S in modes and _IX in modes):
        return GroupLockMode.SIX
    if _S in modes:
        return GroupLockMode.S
    if _IX in modes:
        return GroupLockMode.IX
    if _IS in modes:
        return GroupLockMode.IS
    return GroupLockMode.NON_LOCK


@dataclass
class _LockRequest:
    txn_id: int
    mode: LockMode
    granted: bool = False


class _LockRequestQueue:
    def __init__(self, latch: threading.Lock) -> None:
        self.requests: List[_LockRequest] = []
        self.cv = threading.Condition(latch)
        self.upgrading = False

    def group_mode(self, exclude: Optional[int] = None) -> GroupLockMode:
        return _group_of(
            {r.mode for r in self.requests if r.granted and r.txn_id != exclude}
        )

    def find(self, txn_id: int) -> Optional[_LockRequest]:
        return next((r for r in self.requests if r.txn_id == txn_id), None)


class LockManager:
    """Grants locks on tables and records, blocking until they are compatible."""

    def __init__(self) -> None:
        self._latch = threading.Lock()
        self._lock_table: Dict[LockDataId, _LockRequestQueue] = {}

    def lock_shared_on_record(self, txn: Transaction, rid: Rid, tab_fd: int) -> bool:
        return self._acquire(txn, LockDataId.record(tab_fd, rid), _S)

    def lock_exclusive_on_record(self, txn: Transaction, rid: Rid, tab_fd: int) -> bool:
        return self._acquire(txn, LockDataId.record(tab_fd, rid), _X)

    def lock_shared_on_table(self, txn: Transaction, tab_fd: int) -> bool:
        return self._acquire(txn, LockDataId.table(tab_fd), _S)

    def lock_exclusive_on_table(self, txn: Transaction, tab_fd: int) -> bool:
        return self._acquire(txn, LockDataId.table(tab_fd), _X)

    def lock_is_on_table(self, txn: Transaction, tab_fd: int) -> bool:
        return self._acquire(txn, LockDataId.table(tab_fd), _IS)

    def lock_ix_on_table(self, txn: Transaction, tab_fd: int) -> bool:
        return self._acquire(txn, LockDataId.table(tab_fd), _IX)

    def unlock(self, txn: Transaction, lock_data_id: LockDataId) -> bool:
        """Release the transaction's lock on the item; False if it held none."""
        with self._latch:
            queue = self._lock_table.get(lock_data_id)
            if queue is None:
                return False
            request = queue.find(txn.txn_id)
            if request is None or not request.granted:
                return False
            queue.requests.remove(request)
            txn.lock_set.discard(lock_data_id)
            if txn.state is TransactionState.GROWING:
                txn.state = TransactionState.SHRINKING
            if queue.requests:
                queue.cv.notify_all()
            else:
                del self._lock_table[lock_data_id]
            return True

    def _acquire(self, txn: Transaction, lock_id: LockDataId, mode: LockMode) -> bool:
        with self._latch:
            if txn.state in (TransactionState.COMMITTED, TransactionState.ABORTED):
                return False
            if txn.state is TransactionState.SHRINKING:
                txn.state = TransactionState.ABORTED
                raise TransactionAbortError(txn.txn_id, AbortReason.LOCK_ON_SHRINKING)

            queue = self._lock_table.get(lock_id)
            if queue is None:
                queue = self._lock_table[lock_id] = _LockRequestQueue(self._latch)

            request = queue.find(txn.txn_id)
            if request is not None and request.granted:
                target = _combine(request.mode, mode)
                if target is not request.mode:
                    if queue.upgrading:
                        txn.state = TransactionState.ABORTED
                        raise TransactionAbortError(txn.txn_id, AbortReason.UPGRADE_CONFLICT)
                    queue.upgrading = True
                    try:
                        queue.cv.wait_for(
                            lambda: queue.group_mode(txn.txn_id) in _COMPATIBLE[target]
                        )
                    finally:
                        queue.upgrading = False
                    request.mode = target
                    queue.cv.notify_all()
            else:
                request = _LockRequest(txn.txn_id, mode)
                queue.requests.append(request)
                queue.cv.wait_for(lambda: queue.group_mode(txn.txn_id) in _COMPATIBLE[mode])
                request.granted = True

            txn.lock_set.add(lock_id)
            txn.state = TransactionState.GROWING
            return True