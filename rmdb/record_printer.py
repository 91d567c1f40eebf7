"""Execution context and tabular formatting of query results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from rmdb.defs import BUFFER_LENGTH

RECORD_COUNT_LENGTH = 40


@dataclass
class Context:
    """Per-statement state: managers, transaction and the result buffer sent to the client."""

    lock_mgr: Any = None
    log_mgr: Any = None
    txn: Any = None
    data_send: bytearray = field(default_factory=bytearray)
    ellipsis: bool = False

    @property
    def offset(self) -> int:
        """Number of bytes written to the result buffer."""
        return len(self.data_send)

    def output(self) -> str:
        """The result text accumulated so far."""
        return self.data_send.decode("utf-8", errors="replace")

    def _append(self, text: str, mark_ellipsis: bool = True) -> None:
        chunk = text.encode()
        if not self.ellipsis and self.offset + RECORD_COUNT_LENGTH + len(chunk) < BUFFER_LENGTH:
            self.data_send += chunk
        elif mark_ellipsis:
            self.ellipsis = True


class RecordPrinter:
    """Formats rows as a fixed-width text table into a context's buffer."""

    COL_WIDTH = 16

    def __init__(self, num_cols: int) -> None:
        if num_cols <= 0:
            raise ValueError("a table needs at least one column")
        self.num_cols = num_cols

    def print_separator(self, context: Context) -> None:
        for _ in range(self.num_cols):
            context._append("+" + "-" * (self.COL_WIDTH + 2))
        context._append("+\n")

    def print_record(self, rec_str: Sequence[str], context: Context) -> None:
        if len(rec_str) != self.num_cols:
            raise ValueError(f"expected {self.num_cols} columns, got {len(rec_str)}")
        for col in rec_str:
            if len(col) > self.COL_WIDTH:
                col = col[: self.COL_WIDTH - 3] + "..."
            context._append(f"| {col:>{self.COL_WIDTH}} ")
        context._append("|\n", mark_ellipsis=False)

    @staticmethod
    def print_record_count(num_rec: int, context: Context) -> None:
        text = "... ...\n" if context.ellipsis else ""
        text += f"Total record(s): {num_rec}\n"
        context.data_send += text.encode()