# rucdb

The lower layers of a small relational database engine, as a library.

## What is in it

- **Storage** (`rucdb.storage`)
  - `page.Page` is a buffer frame. It holds `PAGE_SIZE` (4096) bytes of `data`, a
    `page_id` (`page.PageId`, the file descriptor and page number), `is_dirty`,
    `pin_count`, and an `lsn` property stored in the first four bytes of the page.
  - `disk_manager.DiskManager` creates, opens, closes and removes files and
    directories. It reads and writes pages by number (`read_page`, `write_page`) and
    hands out page numbers one file at a time (`allocate_page`, `set_fd2pageno`,
    `get_fd2pageno`). It also appends to and reads from a log file named `db.log` in
    the current directory (`write_log`, `read_log`). Opening a file that is already
    open returns the descriptor it already has.
  - `buffer_pool_manager.BufferPoolManager` keeps pages in a fixed number of frames.
    It provides `new_page`, `fetch_page`, `unpin_page`, `flush_page`, `delete_page`
    and `flush_all_pages`. It takes free frames first and then evicts the least
    recently unpinned page, writing it back first if it is dirty. `new_page` and
    `fetch_page` return `None` when every frame is pinned.
- **Catalog** (`rucdb.meta`): `DbMeta`, `TabMeta` and `ColMeta` describe databases,
  tables and columns. `DbMeta.dumps()` and `DbMeta.loads()` convert the metadata to
  and from the whitespace-separated text form. `DB_META_NAME` is `"db.meta"`.
- **Output** (`rucdb.record_printer.RecordPrinter`): returns the lines of a boxed
  result table as strings. Columns are 16 characters wide, and longer values are cut
  short with `...`. The methods are `separator`, `record` and `record_count`.
- **Transactions** (`rucdb.transaction`)
  - `txn_defs` holds the transaction states, isolation levels, `WriteRecord`,
    `LockDataId` (table or record lock ids) and `TransactionAbortError`.
  - `transaction.Transaction` holds a transaction's write set, lock set and page sets.
  - `lock_manager.LockManager` does two-phase locking on tables and records, with
    shared, exclusive, intention-shared and intention-exclusive locks. A transaction
    that asks for a lock it cannot get yet blocks until the lock is compatible. An
    upgrade of a lock the transaction already holds waits the same way. Asking for a
    lock after releasing one raises `TransactionAbortError`.
  - `transaction_manager.TransactionManager` starts, commits and aborts transactions
    and releases their locks. On abort it undoes the writes, newest first, through an
    optional handler that has `rollback_insert`, `rollback_delete` and
    `rollback_update` methods.
- **Errors** (`rucdb.errors`): every error is a subclass of `RedBaseError`, and its
  message starts with `Error: `.

## What it does not do

It has no SQL parser, no executor, no record or index file layer and no database
directory management. It has no command-line program or server. To read or write rows,
go through pages and the buffer pool. Rolling back writes needs a handler object that
you supply.

## Installation

```
pip install .
```

## Example

```python
from rucdb.storage.disk_manager import DiskManager
from rucdb.storage.buffer_pool_manager import BufferPoolManager

disk = DiskManager()
disk.create_file("data.tbl")
fd = disk.open_file("data.tbl")

pool = BufferPoolManager(10, disk)
page = pool.new_page(fd)
page.data[:5] = b"Hello"
pool.unpin_page(page.page_id, True)
pool.flush_all_pages(fd)

disk.close_file(fd)
```

```python
from rucdb.defs import Rid
from rucdb.transaction.lock_manager import LockManager
from rucdb.transaction.transaction_manager import TransactionManager

locks = LockManager()
txns = TransactionManager(locks)
txn = txns.begin()
locks.lock_ix_on_table(txn, 0)
locks.lock_exclusive_on_record(txn, Rid(0, 0), 0)
txns.commit(txn)  # releases both locks
```

## Tests

```
pip install .[test]
pytest
```