"""Basic shared definitions: record identifiers, column types and scans."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator


@dataclass(frozen=True)
class Rid:
    """Location of a record: page number and slot number within that page."""

    page_no: int
    slot_no: int


class ColType(IntEnum):
    """Column data types."""

    TYPE_INT = 0
    TYPE_FLOAT = 1
    TYPE_STRING = 2


_COLTYPE_NAMES = {
    ColType.TYPE_INT: "INT",
    ColType.TYPE_FLOAT: "FLOAT",
    ColType.TYPE_STRING: "STRING",
}


def coltype_to_str(col_type: ColType) -> str:
    """Return the display name of a column type."""
    try:
        return _COLTYPE_NAMES[ColType(col_type)]
    except ValueError:
        raise KeyError(col_type) from None


class RecScan(abc.ABC):
    """A cursor over record identifiers."""

    @abc.abstractmethod
    def next(self) -> None:
        """Advance to the next record."""

    @abc.abstractmethod
    def is_end(self) -> bool:
        """Return True once the scan is exhausted."""

    @abc.abstractmethod
    def rid(self) -> Rid:
        """Return the identifier of the current record."""

    def __iter__(self) -> Iterator[Rid]:
        while not self.is_end():
            yield self.rid()
            self.next()