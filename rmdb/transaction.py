"""Transactions, their write records, lock identifiers and undo logs."""

from __future__ import annotations

import enum
import threading
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any

from rmdb.defs import INVALID_LSN, INVALID_TS, INVALID_TXN_ID, Rid, Value

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


class TransactionState(enum.Enum):
    DEFAULT = 0
    GROWING = 1
    SHRINKING = 2
    COMMITTED = 3
    ABORTED = 4


class IsolationLevel(enum.Enum):
    READ_UNCOMMITTED = 0
    REPEATABLE_READ = 1
    READ_COMMITTED = 2
    SERIALIZABLE = 3


class WType(enum.IntEnum):
    """Kinds of write a transaction performs."""

    INSERT_TUPLE = 0
    DELETE_TUPLE = 1
    UPDATE_TUPLE = 2


@dataclass
class WriteRecord:
    """A write made by a transaction, kept so it can be rolled back.

    Inserts need only the table and rid; deletes and updates also keep the
    record image from before the write.
    """

    wtype: WType
    tab_name: str
    rid: Rid
    record: bytes | None = None


class LockDataType(enum.IntEnum):
    """Granularity of a lock: a whole table or one record."""

    TABLE = 0
    RECORD = 1


@dataclass(frozen=True)
class LockDataId:
    """Identifies a lockable item: a table, or a record within a table."""

    fd: int
    type: LockDataType
    rid: Rid = Rid(-1, -1)

    @staticmethod
    def table(fd: int) -> LockDataId:
        """Identifier of a table-level lock."""
        return LockDataId(fd=fd, type=LockDataType.TABLE, rid=Rid(-1, -1))

    @staticmethod
    def record(fd: int, rid: Rid) -> LockDataId:
        """Identifier of a record-level lock."""
        return LockDataId(fd=fd, type=LockDataType.RECORD, rid=rid)

    def key(self) -> int:
        """A signed 64-bit integer packing the identifier."""
        if self.type is LockDataType.TABLE:
            return self.fd
        packed = (
            (int(self.type) << 63)
            | (self.fd << 31)
            | (self.rid.page_no << 16)
            | self.rid.slot_no
        ) & _INT64_MASK
        return packed - (1 << 64) if packed & _INT64_SIGN else packed

    def __hash__(self) -> int:
        return hash(self.key())


class AbortReason(enum.IntEnum):
    LOCK_ON_SHIRINKING = 0
    UPGRADE_CONFLICT = 1
    DEADLOCK_PREVENTION = 2


class TransactionAbortException(Exception):
    """Raised when a transaction must be rolled back."""

    def __init__(self, txn_id: int, abort_reason: AbortReason) -> None:
        self.txn_id = txn_id
        self.abort_reason = abort_reason
        super().__init__(self.info())

    def info(self) -> str:
        """Human-readable reason for the abort."""
        if self.abort_reason is AbortReason.LOCK_ON_SHIRINKING:
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


@dataclass(frozen=True)
class UndoLink:
    """Points to the previous version of a tuple within some transaction's undo logs."""

    prev_txn: int = INVALID_TXN_ID
    prev_log_idx: int = 0

    def is_valid(self) -> bool:
        return self.prev_txn != INVALID_TXN_ID


@dataclass
class UndoLog:
    """One step back in a tuple's version chain."""

    is_deleted: bool = False
    modified_fields: list[bool] = field(default_factory=list)
    tuple: list[Value] = field(default_factory=list)
    tuple_record: bytes | None = None
    ts: int = INVALID_TS
    prev_version: UndoLink = field(default_factory=UndoLink)


class Transaction:
    """State of one transaction: its writes, locks, pages and undo logs."""

    def __init__(
        self, txn_id: int, isolation_level: IsolationLevel = IsolationLevel.SERIALIZABLE
    ) -> None:
        self.txn_id = txn_id
        self.isolation_level = isolation_level
        self.state = TransactionState.DEFAULT
        self.txn_mode = False
        self.thread_id = threading.get_ident()
        self.prev_lsn = INVALID_LSN
        self.start_ts = INVALID_TS
        self.read_ts = 0
        self.commit_ts = INVALID_TS
        self.write_set: deque[WriteRecord] = deque()
        self.lock_set: set[LockDataId] = set()
        self.index_latch_page_set: deque[Any] = deque()
        self.index_deleted_page_set: deque[Any] = deque()
        self._undo_logs: list[UndoLog] = []
        self._latch = threading.Lock()

    def append_write_record(self, write_record: WriteRecord) -> None:
        self.write_set.append(write_record)

    def append_index_deleted_page(self, page: Any) -> None:
        self.index_deleted_page_set.append(page)

    def append_index_latch_page(self, page: Any) -> None:
        self.index_latch_page_set.append(page)

    def _check_index(self, log_idx: int) -> None:
        if not 0 <= log_idx < len(self._undo_logs):
            raise IndexError(f"undo log index out of range: {log_idx}")

    def modify_undo_log(self, log_idx: int, new_log: UndoLog) -> None:
        """Replace an existing undo log in place."""
        with self._latch:
            self._check_index(log_idx)
            self._undo_logs[log_idx] = new_log

    def append_undo_log(self, log: UndoLog) -> UndoLink:
        """Add an undo log and return the link that points to it."""
        with self._latch:
            self._undo_logs.append(log)
            return UndoLink(self.txn_id, len(self._undo_logs) - 1)

    def get_undo_log(self, log_idx: int) -> UndoLog:
        """A copy of the undo log at ``log_idx``."""
        with self._latch:
            self._check_index(log_idx)
            log = self._undo_logs[log_idx]
            return replace(
                log, modified_fields=list(log.modified_fields), tuple=list(log.tuple)
            )

    def undo_log_count(self) -> int:
        with self._latch:
            return len(self._undo_logs)