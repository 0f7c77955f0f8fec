"""Edit context (row index, edited field) attached to log records."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_edit_context: contextvars.ContextVar[tuple[tuple[str, object], ...]] = contextvars.ContextVar(
    "payout_edit_context", default=()
)


class EditContext:
    """Scoped key/value pairs describing the edit being handled."""

    @contextmanager
    def bound(self, **values: object) -> Iterator[None]:
        """Add ``values`` for the duration of the block; ``None`` values are skipped."""

        pairs = tuple((key, value) for key, value in values.items() if value is not None)
        token = _edit_context.set(_edit_context.get() + pairs)
        try:
            yield
        finally:
            _edit_context.reset(token)

    def current(self) -> dict[str, object]:
        return dict(_edit_context.get())


class EditContextFilter(logging.Filter):
    """Render the bound edit context as a ``[row 2] [field percent_amount] `` prefix."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = "".join(f"[{key} {value}] " for key, value in _edit_context.get())
        return True


log_context = EditContext()
