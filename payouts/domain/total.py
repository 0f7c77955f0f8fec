"""Shared total-reward value with change notifications."""
from __future__ import annotations

from decimal import Decimal
from typing import Callable

from .arithmetic import Number, to_decimal

TotalRewardListener = Callable[[Decimal, Decimal], None]


class TotalRewardStore:
    """Single owned total-reward value.

    Listeners registered through :meth:`subscribe` are called with
    ``(new, previous)`` after the value actually changes.
    """

    def __init__(self, value: Number = 0) -> None:
        self._value = to_decimal(value)
        self._listeners: list[TotalRewardListener] = []

    @property
    def value(self) -> Decimal:
        return self._value

    def set(self, value: Number, *, skip: TotalRewardListener | None = None) -> bool:
        """Store ``value`` and notify listeners; return whether it changed.

        ``skip`` is left out of the notification, for the caller that already
        reacted to the new value.
        """

        new_value = to_decimal(value)
        previous = self._value
        if new_value == previous:
            return False
        self._value = new_value
        for listener in list(self._listeners):
            if skip is not None and listener == skip:
                continue
            listener(new_value, previous)
        return True

    def subscribe(self, listener: TotalRewardListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
