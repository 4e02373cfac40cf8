from __future__ import annotations

from collections import deque
from typing import Iterable

from .state import GameState, StateSnapshot

MAX_HISTORY = 10


class History:
    """Bounded undo stack of whole-state snapshots.

    One entry per resolved action; pushing past capacity drops the oldest.
    """

    def __init__(self, capacity: int = MAX_HISTORY, entries: Iterable[StateSnapshot] = ()) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self.capacity = capacity
        self._stack: deque[StateSnapshot] = deque(entries, maxlen=capacity)

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, state: GameState) -> None:
        self._stack.append(state.snapshot())

    def can_undo(self) -> bool:
        return bool(self._stack)

    def undo(self, state: GameState) -> bool:
        if not self._stack:
            return False
        state.restore(self._stack.pop())
        return True

    def clear(self) -> None:
        self._stack.clear()

    def entries(self) -> list[StateSnapshot]:
        """Oldest first."""
        return list(self._stack)
