"""Ordered, in-memory store of payout rows."""
from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Iterator

from .errors import RowNotFound
from .models import PayoutRow, RowField


class RowStore:
    """Positional collection of :class:`PayoutRow` objects.

    Reads hand out copies so that the only way to change a row is through
    :meth:`set` or :meth:`clear`. No cross-row rule is enforced here.
    """

    def __init__(self, rows: Iterable[PayoutRow] = ()) -> None:
        self._rows: list[PayoutRow] = [replace(row) for row in rows]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[PayoutRow]:
        return iter(self.all())

    def _locate(self, index: int) -> PayoutRow:
        if not 0 <= index < len(self._rows):
            raise RowNotFound(index, len(self._rows))
        return self._rows[index]

    def append(self, row: PayoutRow | None = None) -> int:
        """Add ``row`` (or a default row) at the end and return its index."""

        self._rows.append(replace(row) if row is not None else PayoutRow())
        return len(self._rows) - 1

    def remove(self, index: int) -> PayoutRow:
        """Delete the row at ``index``; later rows move down by one."""

        self._locate(index)
        return self._rows.pop(index)

    def get(self, index: int) -> PayoutRow:
        return replace(self._locate(index))

    def set(self, index: int, field: RowField, value: int | Decimal | None) -> None:
        setattr(self._locate(index), RowField(field).value, value)

    def clear(self, index: int, field: RowField) -> None:
        """Blank a single field, as when an input box is emptied."""

        self.set(index, field, None)

    def all(self) -> tuple[PayoutRow, ...]:
        return tuple(replace(row) for row in self._rows)
