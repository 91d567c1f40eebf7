# rmdb

Building blocks of a small relational database engine, written for learning
and experimentation. The package covers page-level file access, the
write-ahead log file, the catalog and its text format, result tables, and
transaction records.

## Modules

- `rmdb.disk_manager.DiskManager` handles files on disk.
  - It reads and writes 4 KiB pages with `read_page` and `write_page`.
  - It hands out page numbers for each open file with `allocate_page`,
    `set_fd2pageno` and `get_fd2pageno`.
  - It creates, opens, closes and removes files and directories.
  - It appends to and reads from the log file `db.log` in the current
    directory with `write_log` and `read_log`.
- `rmdb.page` holds `PageId` and `Page`.
  - `PageId` names a page by file descriptor and page number.
  - `Page` is a page-sized `bytearray` with a dirty flag and a pin count.
    It has a `page_lsn` property stored in the first four bytes.
- `rmdb.sm_meta` holds `ColMeta`, `IndexMeta`, `TabMeta` and `DbMeta`, which
  describe the catalog.
  - `DbMeta.dumps` writes the catalog as whitespace-separated text and
    `DbMeta.loads` reads it back.
  - Lookups such as `TabMeta.get_col`, `TabMeta.get_index_meta` and
    `DbMeta.get_table` raise `ColumnNotFoundError`, `IndexNotFoundError` and
    `TableNotFoundError`.
- `rmdb.record_printer` holds `Context` and `RecordPrinter`.
  - `Context` carries the result buffer of one statement.
  - `RecordPrinter` writes bordered, fixed-width text tables into it.
  - Cells longer than 16 characters are cut to 13 characters followed by
    `...`.
  - Output that would overflow the 8192-byte buffer is dropped, and
    `print_record_count` then prints `... ...`.
- `rmdb.defs` holds the shared constants (`PAGE_SIZE`, `BUFFER_LENGTH`,
  `LOG_FILE_NAME`, …) and the value types `Rid`, `ColType`, `TabCol`,
  `Value`, `CompOp`, `Condition` and `SetClause`.
  - `Value.init_raw` encodes a value into a fixed-length byte string.
  - For strings that are too long it raises `StringOverflowError`.
- `rmdb.transaction` holds the transaction state and isolation-level enums,
  `WriteRecord`, `LockDataId` (with `table`, `record` and a 64-bit `key`),
  `UndoLink`, `UndoLog`, `Transaction` and `TransactionAbortException`.
- `rmdb.errors` holds the exception hierarchy.
  - Every database error derives from `RMDBError`, and its message starts
    with `Error: `.
  - `DbException` and its subclasses carry an `ExceptionType`.

## Example

```python
import os, tempfile
from rmdb.disk_manager import DiskManager
from rmdb.page import Page, PageId
from rmdb.defs import ColType
from rmdb.sm_meta import ColMeta, TabMeta, DbMeta
from rmdb.record_printer import Context, RecordPrinter

os.chdir(tempfile.mkdtemp())

# Pages on disk
disk = DiskManager()
disk.create_file("basic")
fd = disk.open_file("basic")
page = Page(PageId(fd, disk.allocate_page(fd)))   # page number 0
page.data[:5] = b"Hello"
disk.write_page(fd, page.page_id.page_no, page.data)
assert disk.read_page(fd, 0, 5) == b"Hello"
disk.close_file(fd)

# Catalog round trip
tab = TabMeta(name="grades", cols=[
    ColMeta(tab_name="grades", name="id", type=ColType.TYPE_INT, len=4, offset=0),
])
db = DbMeta(name="school")
db.set_tab_meta("grades", tab)
assert DbMeta.loads(db.dumps()) == db

# Result table
ctx = Context()
printer = RecordPrinter(2)
printer.print_separator(ctx)
printer.print_record(["id", "name"], ctx)
printer.print_separator(ctx)
RecordPrinter.print_record_count(0, ctx)
print(ctx.output())
```

This prints:

```
+------------------+------------------+
|               id |             name |
+------------------+------------------+
Total record(s): 0
```

## What this package does not do

The following are not part of the package:

- **No page cache.** Pages are read and written directly through
  `DiskManager`. There is no in-memory pool with pinning and eviction.
- **No database or table management.** Nothing creates or opens a database
  directory, builds record files from a `TabMeta`, or writes `db.meta`.
  `DbMeta.dumps` and `DbMeta.loads` only convert to and from text.
- **No record or index files.**
- **No query parsing or execution.**
- **No lock manager and no network server.**
- **No recovery from the log.**
- **`Transaction` only holds state.** Nothing commits or aborts a
  transaction.

## Tests

Install the test extra and run pytest:

```
pip install -e .[test]
pytest
```