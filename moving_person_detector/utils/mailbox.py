"""Single-slot, latest-wins holder for incoming messages."""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Mailbox(Generic[T]):
    """
    Holds at most one pending value.

    put() overwrites a value that was not taken yet; take() hands the value
    over and empties the slot. Used from the detector loop thread only.
    """

    def __init__(self):
        self._value: Optional[T] = None
        self.overwritten = 0

    def put(self, value: T) -> None:
        if self._value is not None:
            self.overwritten += 1
        self._value = value

    def take(self) -> Optional[T]:
        value, self._value = self._value, None
        return value

    @property
    def pending(self) -> bool:
        return self._value is not None
