"""Exceptions raised while decoding or rendering a mobiledoc."""

from __future__ import annotations


class MobiledocFormatError(ValueError):
    """Raised when a raw payload cannot be decoded into the mobiledoc model."""


class MobiledocIndexError(IndexError):
    """Raised when a marker or section references a missing table row."""

    def __init__(self, table: str, index: int, size: int) -> None:
        super().__init__(f"{table}[{index}] out of range (table has {size} entries)")
        self.table = table
        self.index = index
        self.size = size
