"""Catalog metadata for databases, tables and columns, with a text form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from .defs import ColType
from .errors import ColumnNotFoundError, TableNotFoundError

DB_META_NAME = "db.meta"


@dataclass
class ColMeta:
    """Metadata of one column."""

    tab_name: str
    name: str
    type: ColType
    len: int
    offset: int
    index: bool = False

    def _dumps(self) -> str:
        return (
            f"{self.tab_name} {self.name} {int(self.type)} {self.len} "
            f"{self.offset} {int(self.index)}"
        )

    @classmethod
    def _from_tokens(cls, tokens: Iterator[str]) -> "ColMeta":
        tab_name = next(tokens)
        name = next(tokens)
        col_type = ColType(int(next(tokens)))
        length = int(next(tokens))
        offset = int(next(tokens))
        index = bool(int(next(tokens)))
        return cls(tab_name, name, col_type, length, offset, index)


@dataclass
class TabMeta:
    """Metadata of one table: its name and its columns in order."""

    name: str
    cols: List[ColMeta] = field(default_factory=list)

    def is_col(self, col_name: str) -> bool:
        """Return True if the table has a column of this name."""
        return any(col.name == col_name for col in self.cols)

    def get_col(self, col_name: str) -> ColMeta:
        """Return the column of this name, or raise ColumnNotFoundError."""
        return self.cols[self.col_index(col_name)]

    def col_index(self, col_name: str) -> int:
        """Return the position of the named column, or raise ColumnNotFoundError."""
        for pos, col in enumerate(self.cols):
            if col.name == col_name:
                return pos
        raise ColumnNotFoundError(col_name)

    def _dumps(self) -> str:
        lines = [self.name, str(len(self.cols))]
        lines.extend(col._dumps() for col in self.cols)
        return "\n".join(lines) + "\n"

    @classmethod
    def _from_tokens(cls, tokens: Iterator[str]) -> "TabMeta":
        name = next(tokens)
        count = int(next(tokens))
        return cls(name, [ColMeta._from_tokens(tokens) for _ in range(count)])


@dataclass
class DbMeta:
    """Metadata of a database: its name and its tables by name."""

    name: str = ""
    tabs: Dict[str, TabMeta] = field(default_factory=dict)

    def is_table(self, tab_name: str) -> bool:
        return tab_name in self.tabs

    def get_table(self, tab_name: str) -> TabMeta:
        """Return the named table, or raise TableNotFoundError."""
        try:
            return self.tabs[tab_name]
        except KeyError:
            raise TableNotFoundError(tab_name) from None

    def dumps(self) -> str:
        """Serialise to the whitespace-separated text form; tables sorted by name."""
        parts = [f"{self.name}\n{len(self.tabs)}\n"]
        parts.extend(self.tabs[name]._dumps() + "\n" for name in sorted(self.tabs))
        return "".join(parts)

    @classmethod
    def loads(cls, text: str) -> "DbMeta":
        """Parse the text form produced by dumps."""
        tokens = iter(text.split())
        try:
            name = next(tokens)
            count = int(next(tokens))
            db = cls(name)
            for _ in range(count):
                tab = TabMeta._from_tokens(tokens)
                db.tabs[tab.name] = tab
        except StopIteration:
            raise ValueError("truncated database metadata") from None
        return db