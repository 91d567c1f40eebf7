"""Exception hierarchy used throughout the database engine."""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Iterable

_log = logging.getLogger(__name__)


class RMDBError(Exception):
    """Base class of every error reported to a client; messages start with ``Error: ``."""

    def __init__(self, msg: str = "") -> None:
        self.msg = "Error: " + msg
        super().__init__(self.msg)

    def __str__(self) -> str:
        return self.msg


class InternalError(RMDBError):
    """An unexpected internal condition."""


class UnixError(RMDBError):
    """An operating-system call failed."""

    def __init__(self, error: int | OSError | None = None) -> None:
        if isinstance(error, OSError):
            text = error.strerror or str(error)
        elif error is None:
            text = "Unknown error"
        else:
            text = os.strerror(error)
        super().__init__(text)


class FileNotOpenError(RMDBError):
    def __init__(self, fd: int) -> None:
        super().__init__(f"Invalid file descriptor: {fd}")


class FileNotClosedError(RMDBError):
    def __init__(self, filename: str) -> None:
        super().__init__(f"File is opened: {filename}")


class RmdbFileExistsError(RMDBError):
    def __init__(self, filename: str) -> None:
        super().__init__(f"File already exists: {filename}")


class RmdbFileNotFoundError(RMDBError):
    def __init__(self, filename: str) -> None:
        super().__init__(f"File not found: {filename}")


class RecordNotFoundError(RMDBError):
    def __init__(self, page_no: int, slot_no: int) -> None:
        super().__init__(f"Record not found: ({page_no},{slot_no})")


class InvalidRecordSizeError(RMDBError):
    def __init__(self, record_size: int) -> None:
        super().__init__(f"Invalid record size: {record_size}")


class InvalidColLengthError(RMDBError):
    def __init__(self, col_len: int) -> None:
        super().__init__(f"Invalid column length: {col_len}")


class IndexEntryNotFoundError(RMDBError):
    def __init__(self) -> None:
        super().__init__("Index entry not found")


class DatabaseNotFoundError(RMDBError):
    def __init__(self, db_name: str) -> None:
        super().__init__(f"Database not found: {db_name}")


class DatabaseExistsError(RMDBError):
    def __init__(self, db_name: str) -> None:
        super().__init__(f"Database already exists: {db_name}")


class TableNotFoundError(RMDBError):
    def __init__(self, tab_name: str) -> None:
        super().__init__(f"Table not found: {tab_name}")


class TableExistsError(RMDBError):
    def __init__(self, tab_name: str) -> None:
        super().__init__(f"Table already exists: {tab_name}")


class ColumnNotFoundError(RMDBError):
    def __init__(self, col_name: str) -> None:
        super().__init__(f"Column not found: {col_name}")


class IndexNotFoundError(RMDBError):
    def __init__(self, tab_name: str, col_names: Iterable[str]) -> None:
        super().__init__(f"Index not found: {tab_name}.({', '.join(col_names)})")


class IndexExistsError(RMDBError):
    def __init__(self, tab_name: str, col_names: Iterable[str]) -> None:
        super().__init__(f"Index already exists: {tab_name}.({', '.join(col_names)})")


class InvalidValueCountError(RMDBError):
    def __init__(self) -> None:
        super().__init__("Invalid value count")


class StringOverflowError(RMDBError):
    def __init__(self) -> None:
        super().__init__("String is too long")


class IncompatibleTypeError(RMDBError):
    def __init__(self, lhs: str, rhs: str) -> None:
        super().__init__(f"Incompatible type error: lhs {lhs}, rhs {rhs}")


class AmbiguousColumnError(RMDBError):
    def __init__(self, col_name: str) -> None:
        super().__init__(f"Ambiguous column: {col_name}")


class PageNotExistError(RMDBError):
    def __init__(self, table_name: str, page_no: int) -> None:
        super().__init__(f"Page {page_no} in table {table_name}not exits")


class ExceptionType(enum.IntEnum):
    """Kinds of engine-level exceptions."""

    INVALID = 0
    OUT_OF_RANGE = 1
    CONVERSION = 2
    UNKNOWN_TYPE = 3
    DECIMAL = 4
    MISMATCH_TYPE = 5
    DIVIDE_BY_ZERO = 6
    INCOMPATIBLE_TYPE = 8
    OUT_OF_MEMORY = 9
    NOT_IMPLEMENTED = 11
    EXECUTION = 12


_EXCEPTION_TYPE_NAMES = {
    ExceptionType.INVALID: "Invalid",
    ExceptionType.OUT_OF_RANGE: "Out of Range",
    ExceptionType.CONVERSION: "Conversion",
    ExceptionType.UNKNOWN_TYPE: "Unknown Type",
    ExceptionType.DECIMAL: "Decimal",
    ExceptionType.MISMATCH_TYPE: "Mismatch Type",
    ExceptionType.DIVIDE_BY_ZERO: "Divide by Zero",
    ExceptionType.INCOMPATIBLE_TYPE: "Incompatible type",
    ExceptionType.OUT_OF_MEMORY: "Out of Memory",
    ExceptionType.NOT_IMPLEMENTED: "Not implemented",
    ExceptionType.EXECUTION: "Execution",
}


def exception_type_to_string(exception_type: ExceptionType | int) -> str:
    """Return a readable name for an exception type; unknown values give ``Unknown``."""
    try:
        return _EXCEPTION_TYPE_NAMES[ExceptionType(exception_type)]
    except ValueError:
        return "Unknown"


class DbException(RuntimeError):
    """A runtime exception carrying an :class:`ExceptionType`."""

    def __init__(
        self,
        message: str,
        exception_type: ExceptionType = ExceptionType.INVALID,
        echo: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exception_type = exception_type
        if echo:
            _log.debug(
                "Exception Type :: %s, Message :: %s",
                exception_type_to_string(exception_type),
                message,
            )


class NotImplementedException(DbException):
    def __init__(self, msg: str) -> None:
        super().__init__(msg, ExceptionType.NOT_IMPLEMENTED)


class ExecutionException(DbException):
    def __init__(self, msg: str) -> None:
        super().__init__(msg, ExceptionType.EXECUTION)