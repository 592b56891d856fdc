import threading

from rucdb.defs import Rid
from rucdb.storage.page import Page
from rucdb.transaction.transaction import Transaction
from rucdb.transaction.txn_defs import (
    INVALID_LSN,
    IsolationLevel,
    LockDataId,
    TransactionState,
    WriteRecord,
    WType,
)


def test_new_transaction_defaults():
    txn = Transaction(4)
    assert txn.txn_id == 4
    assert txn.state is TransactionState.DEFAULT
    assert txn.isolation_level is IsolationLevel.SERIALIZABLE
    assert txn.prev_lsn == INVALID_LSN
    assert txn.thread_id == threading.get_ident()
    assert list(txn.write_set) == []
    assert txn.lock_set == set()


def test_isolation_level_is_kept():
    txn = Transaction(1, IsolationLevel.READ_COMMITTED)
    assert txn.isolation_level is IsolationLevel.READ_COMMITTED


def test_write_records_keep_order():
    txn = Transaction(1)
    first = WriteRecord(WType.INSERT_TUPLE, "t", Rid(0, 0))
    second = WriteRecord(WType.DELETE_TUPLE, "t", record=b"row")
    txn.append_write_record(first)
    txn.append_write_record(second)
    assert list(txn.write_set) == [first, second]


def test_page_sets():
    txn = Transaction(1)
    latched, deleted = Page(), Page()
    txn.add_into_page_set(latched)
    txn.add_into_deleted_page_set(deleted)
    assert list(txn.page_set) == [latched]
    assert list(txn.deleted_page_set) == [deleted]


def test_lock_set_is_per_transaction():
    a, b = Transaction(1), Transaction(2)
    a.lock_set.add(LockDataId.table(3))
    assert LockDataId.table(3) in a.lock_set
    assert b.lock_set == set()