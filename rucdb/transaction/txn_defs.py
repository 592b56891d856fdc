"""Shared definitions for transactions: states, write records and lock identifiers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional

from ..defs import Rid

INVALID_TXN_ID = -1
INVALID_LSN = -1

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


class TransactionState(Enum):
    DEFAULT = 0
    GROWING = 1
    SHRINKING = 2
    COMMITTED = 3
    ABORTED = 4


class IsolationLevel(Enum):
    READ_UNCOMMITTED = 0
    REPEATABLE_READ = 1
    READ_COMMITTED = 2
    SERIALIZABLE = 3


class WType(IntEnum):
    """Kind of write a transaction performed."""

    INSERT_TUPLE = 0
    DELETE_TUPLE = 1
    UPDATE_TUPLE = 2


@dataclass
class WriteRecord:
    """One write of a transaction, kept so that it can be rolled back.

    Inserts carry the rid, deletes the old record, updates both.
    """

    wtype: WType
    tab_name: str
    rid: Optional[Rid] = None
    record: Any = None


class LockDataType(IntEnum):
    TABLE = 0
    RECORD = 1


_TABLE_RID = Rid(-1, -1)


@dataclass(frozen=True)
class LockDataId:
    """Identifies a lockable item: a whole table or one record of it."""

    fd: int
    rid: Rid
    type: LockDataType

    def __post_init__(self) -> None:
        if self.type == LockDataType.TABLE and self.rid != _TABLE_RID:
            raise ValueError("a table lock carries no record id")

    @classmethod
    def table(cls, fd: int) -> "LockDataId":
        return cls(fd, _TABLE_RID, LockDataType.TABLE)

    @classmethod
    def record(cls, fd: int, rid: Rid) -> "LockDataId":
        return cls(fd, rid, LockDataType.RECORD)

    def encode(self) -> int:
        """Pack the identifier into a signed 64-bit integer."""
        if self.type == LockDataType.TABLE:
            return self.fd
        value = (
            (int(self.type) << 63)
            | (self.fd << 31)
            | (self.rid.page_no << 16)
            | self.rid.slot_no
        ) & _INT64_MASK
        return value - (1 << 64) if value & _INT64_SIGN else value


class AbortReason(Enum):
    LOCK_ON_SHRINKING = 0
    UPGRADE_CONFLICT = 1
    DEADLOCK_PREVENTION = 2


class TransactionAbortError(Exception):
    """Raised when a transaction has to be aborted by the lock manager."""

    def __init__(self, txn_id: int, abort_reason: AbortReason) -> None:
        self.txn_id = txn_id
        self.abort_reason = abort_reason
        super().__init__(self.info)

    @property
    def info(self) -> str:
        if self.abort_reason is AbortReason.LOCK_ON_SHRINKING:
            return (
                f"Transaction {self.txn_id} aborted because it cannot request "
                "locks on SHRINKING phase\n"
            )
        if self.abort_reason is AbortReason.UPGRADE_CONFLICT:
            return (
                f"Transaction {self.txn_id} aborted because another transaction "
                "is waiting for upgrading\n"
            )
        if self.abort_reason is AbortReason.DEADLOCK_PREVENTION:
            return f"Transaction {self.txn_id} aborted for deadlock prevention\n"
        return "Transaction aborted\n"

    def __str__(self) -> str:
        return self.info