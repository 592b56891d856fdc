import pytest

from rucdb.defs import Rid
from rucdb.transaction.txn_defs import (
    AbortReason,
    LockDataId,
    LockDataType,
    TransactionAbortError,
    WriteRecord,
    WType,
)


def test_table_lock_encodes_as_fd():
    assert LockDataId.table(5).encode() == 5


def test_table_lock_has_placeholder_rid():
    lock_id = LockDataId.table(3)
    assert lock_id.rid == Rid(-1, -1)
    assert lock_id.type == LockDataType.TABLE


def test_record_lock_sets_sign_bit_and_keeps_slot():
    code = LockDataId.record(1, Rid(2, 3)).encode()
    assert code < 0
    assert code & 0xFFFF == 3


def test_record_encodings_differ_by_rid_and_fd():
    codes = {
        LockDataId.record(fd, Rid(page, slot)).encode()
        for fd in range(3)
        for page in range(3)
        for slot in range(3)
    }
    assert len(codes) == 27


def test_equality_and_hashing():
    a = LockDataId.record(1, Rid(2, 3))
    b = LockDataId.record(1, Rid(2, 3))
    assert a == b
    assert len({a, b}) == 1
    assert LockDataId.table(1) != LockDataId.record(1, Rid(-1, -1))


def test_table_lock_rejects_real_rid():
    with pytest.raises(ValueError):
        LockDataId(1, Rid(0, 0), LockDataType.TABLE)


@pytest.mark.parametrize(
    "wtype, code",
    [(WType.INSERT_TUPLE, 0), (WType.DELETE_TUPLE, 1), (WType.UPDATE_TUPLE, 2)],
)
def test_write_type_codes(wtype, code):
    assert WType(code) is wtype
    record = WriteRecord(WType(code), "t1", Rid(0, code))
    assert record.rid == Rid(0, code)


def test_write_record_fields():
    record = WriteRecord(WType.UPDATE_TUPLE, "t1", Rid(0, 1), b"old")
    assert record.tab_name == "t1"
    assert record.rid == Rid(0, 1)
    assert record.record == b"old"
    insert = WriteRecord(WType.INSERT_TUPLE, "t1", Rid(4, 2))
    assert insert.record is None


@pytest.mark.parametrize(
    "reason, text",
    [
        (
            AbortReason.LOCK_ON_SHRINKING,
            "Transaction 7 aborted because it cannot request locks on SHRINKING phase\n",
        ),
        (
            AbortReason.UPGRADE_CONFLICT,
            "Transaction 7 aborted because another transaction is waiting for upgrading\n",
        ),
        (AbortReason.DEADLOCK_PREVENTION, "Transaction 7 aborted for deadlock prevention\n"),
    ],
)
def test_abort_error_info(reason, text):
    error = TransactionAbortError(7, reason)
    assert error.info == text
    assert str(error) == text
    assert error.txn_id == 7
    assert error.abort_reason is reason