from __future__ import annotations

from typing import Iterable

from .models import TodoId


class IdAllocator:
    """
    Monotonic integer ids for todos whose store does not assign one.

    After a load, reconcile() moves the counter past every numeric id seen so
    locally allocated ids never collide with persisted ones. Non-numeric ids
    (store-assigned strings) are ignored. The counter never moves backwards.
    """

    def __init__(self, start: int = 0) -> None:
        self._start = start
        self._next_id = start

    @property
    def next_id(self) -> int:
        return self._next_id

    def allocate(self) -> int:
        i = self._next_id
        self._next_id += 1
        return i

    def reconcile(self, ids: Iterable[TodoId]) -> int:
        numeric = [i for i in ids if isinstance(i, int) and not isinstance(i, bool)]
        if numeric:
            self._next_id = max(self._next_id, max(numeric) + 1)
        return self._next_id
