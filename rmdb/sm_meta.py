"""Metadata of columns, indexes, tables and databases, with their text serialisation."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from rmdb.defs import ColType
from rmdb.errors import ColumnNotFoundError, IndexNotFoundError, TableNotFoundError


class _Tokens:
    """Whitespace-separated token reader over a metadata text."""

    def __init__(self, text: str) -> None:
        self._it: Iterator[str] = iter(text.split())

    def word(self) -> str:
        try:
            return next(self._it)
        except StopIteration:
            raise ValueError("unexpected end of metadata") from None

    def int(self) -> int:
        return int(self.word())


@dataclass
class ColMeta:
    """A column: owning table, name, type, byte length and offset within a record."""

    tab_name: str
    name: str
    type: ColType
    len: int
    offset: int
    index: bool = False

    def __str__(self) -> str:
        return (
            f"{self.tab_name} {self.name} {int(self.type)} {self.len} "
            f"{self.offset} {int(self.index)}"
        )

    @classmethod
    def _read(cls, tokens: _Tokens) -> ColMeta:
        return cls(
            tab_name=tokens.word(),
            name=tokens.word(),
            type=ColType(tokens.int()),
            len=tokens.int(),
            offset=tokens.int(),
            index=bool(tokens.int()),
        )


@dataclass
class IndexMeta:
    """An index over one or more columns of a table."""

    tab_name: str
    col_tot_len: int = 0
    col_num: int = 0
    cols: list[ColMeta] = field(default_factory=list)

    def __str__(self) -> str:
        head = f"{self.tab_name} {self.col_tot_len} {self.col_num}"
        return head + "".join(f"\n{col}" for col in self.cols)

    def _matches(self, col_names: Sequence[str]) -> bool:
        return self.col_num == len(col_names) and all(
            col.name == name for col, name in zip(self.cols, col_names)
        )

    @classmethod
    def _read(cls, tokens: _Tokens) -> IndexMeta:
        index = cls(tab_name=tokens.word(), col_tot_len=tokens.int(), col_num=tokens.int())
        index.cols = [ColMeta._read(tokens) for _ in range(index.col_num)]
        return index


@dataclass
class TabMeta:
    """A table: its name, columns and indexes."""

    name: str = ""
    cols: list[ColMeta] = field(default_factory=list)
    indexes: list[IndexMeta] = field(default_factory=list)

    def is_col(self, col_name: str) -> bool:
        """Whether the table has a column named ``col_name``."""
        return any(col.name == col_name for col in self.cols)

    def is_index(self, col_names: Sequence[str]) -> bool:
        """Whether the table has an index on exactly these columns, in this order."""
        return any(index._matches(col_names) for index in self.indexes)

    def get_index_meta(self, col_names: Sequence[str]) -> IndexMeta:
        """The index on exactly these columns."""
        for index in self.indexes:
            if index._matches(col_names):
                return index
        raise IndexNotFoundError(self.name, col_names)

    def get_col(self, col_name: str) -> ColMeta:
        """The column named ``col_name``."""
        for col in self.cols:
            if col.name == col_name:
                return col
        raise ColumnNotFoundError(col_name)

    def __str__(self) -> str:
        parts = [f"{self.name}\n{len(self.cols)}\n"]
        parts.extend(f"{col}\n" for col in self.cols)
        parts.append(f"{len(self.indexes)}\n")
        parts.extend(f"{index}\n" for index in self.indexes)
        return "".join(parts)

    @classmethod
    def _read(cls, tokens: _Tokens) -> TabMeta:
        tab = cls(name=tokens.word())
        tab.cols = [ColMeta._read(tokens) for _ in range(tokens.int())]
        tab.indexes = [IndexMeta._read(tokens) for _ in range(tokens.int())]
        return tab


@dataclass
class DbMeta:
    """A database: its name and its tables, kept in name order when listed."""

    name: str = ""
    tabs: dict[str, TabMeta] = field(default_factory=dict)

    def is_table(self, tab_name: str) -> bool:
        return tab_name in self.tabs

    def set_tab_meta(self, tab_name: str, meta: TabMeta) -> None:
        self.tabs[tab_name] = meta

    def get_table(self, tab_name: str) -> TabMeta:
        try:
            return self.tabs[tab_name]
        except KeyError:
            raise TableNotFoundError(tab_name) from None

    def sorted_tables(self) -> list[TabMeta]:
        """Tables ordered by name."""
        return [self.tabs[name] for name in sorted(self.tabs)]

    def dumps(self) -> str:
        """Serialise the metadata to the text stored in the metadata file."""
        parts = [f"{self.name}\n{len(self.tabs)}\n"]
        parts.extend(f"{tab}\n" for tab in self.sorted_tables())
        return "".join(parts)

    @staticmethod
    def loads(text: str) -> DbMeta:
        """Parse metadata written by :meth:`dumps`."""
        tokens = _Tokens(text)
        db = DbMeta(name=tokens.word())
        for _ in range(tokens.int()):
            tab = TabMeta._read(tokens)
            db.tabs[tab.name] = tab
        return db