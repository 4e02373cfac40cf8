from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .state import GameState
from .types import Card

Outcome = Literal["win", "loss"]

REFILL_THRESHOLD = 1
REFILL_COUNT = 3


@dataclass(frozen=True)
class FloorRefill:
    cards: tuple[tuple[int, Card], ...]
    floor_number: int


def refill_floor(state: GameState) -> FloorRefill | None:
    """Deal a new floor once at most one card remains.

    Draws min(REFILL_COUNT, deck) cards into the empty slots, left to right.
    """
    if state.floor_card_count > REFILL_THRESHOLD or not state.deck:
        return None
    dealt = state.deal_floor(limit=min(REFILL_COUNT, len(state.deck)))
    state.start_new_floor()
    return FloorRefill(cards=tuple(dealt), floor_number=state.floor_number)


def evaluate_outcome(state: GameState) -> Outcome | None:
    # Loss is checked first: dying on the last card is still a loss.
    if state.has_lost:
        state.health = 0
        return "loss"
    if state.has_won:
        return "win"
    return None


def weapon_limit_text(state: GameState, degradation: str) -> str:
    """Human readable summary of what the equipped weapon may still fight."""
    if state.weapon is None:
        return ""
    if degradation == "none":
        return "No degradation"
    if state.weapon_max_next is None:
        return "Fresh weapon - can attack any monster"
    return f"Can attack monsters {_limit_phrase(state.weapon_max_next, degradation)}"


def _limit_phrase(bound: int, degradation: str) -> str:
    if degradation == "strict":
        return f"< {max(2, bound + 1)}"
    return f"<= {max(2, bound)}"


def fight_limit_message(bound: int, degradation: str) -> str:
    return f"Weapon can only fight monsters {_limit_phrase(bound, degradation)} now."
