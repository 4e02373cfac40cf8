from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .settings import GameSettings
from .types import Card

FLOOR_SIZE = 4

Source = Literal["floor", "weapon"]


def _empty_floor() -> list[Card | None]:
    return [None for _ in range(FLOOR_SIZE)]


@dataclass(frozen=True)
class StateSnapshot:
    """Immutable copy of everything an undo has to roll back."""

    deck: tuple[Card, ...]
    discard: tuple[Card, ...]
    floor: tuple[Card | None, ...]
    weapon: Card | None
    weapon_damage: tuple[Card, ...]
    weapon_max_next: int | None
    health: int
    floor_number: int
    runs_remaining: int
    floor_fresh: bool
    heal_used: bool
    first_floor_dealt: bool


@dataclass
class GameState:
    deck: list[Card] = field(default_factory=list)
    discard: list[Card] = field(default_factory=list)
    floor: list[Card | None] = field(default_factory=_empty_floor)
    weapon: Card | None = None
    # Monsters defeated by the current weapon (its trophy pile)
    weapon_damage: list[Card] = field(default_factory=list)
    # None = unbounded; otherwise the highest monster value the weapon may still face
    weapon_max_next: int | None = None
    health: int = 20
    floor_number: int = 1
    runs_remaining: int = 1
    floor_fresh: bool = True
    heal_used: bool = False
    first_floor_dealt: bool = False
    initial_deck_order: list[Card] = field(default_factory=list)

    def __post_init__(self) -> None:
        if len(self.floor) != FLOOR_SIZE:
            raise ValueError(f"Floor must have exactly {FLOOR_SIZE} slots.")

    @staticmethod
    def fresh(deck_order: list[Card], settings: GameSettings) -> "GameState":
        return GameState(
            deck=list(deck_order),
            health=settings.max_health,
            runs_remaining=settings.max_runs,
            initial_deck_order=list(deck_order),
        )

    # -------- Queries --------
    @property
    def floor_card_count(self) -> int:
        return sum(1 for c in self.floor if c is not None)

    @property
    def has_won(self) -> bool:
        return not self.deck and self.floor_card_count == 0

    @property
    def has_lost(self) -> bool:
        return self.health <= 0

    def can_run(self) -> bool:
        return self.runs_remaining > 0 and self.floor_fresh and self.floor_card_count > 0

    def can_heal(self, settings: GameSettings) -> bool:
        return settings.healing_mode == "unlimited" or not self.heal_used

    def find_card_by_id(self, card_id: str, source: Source = "floor") -> Card | None:
        if source == "floor":
            for c in self.floor:
                if c is not None and c.id == card_id:
                    return c
            return None
        if source == "weapon" and self.weapon is not None and self.weapon.id == card_id:
            return self.weapon
        return None

    def get_floor_slot_index(self, card: Card) -> int:
        for i, c in enumerate(self.floor):
            if c is not None and c.id == card.id:
                return i
        return -1

    def all_cards(self) -> list[Card]:
        """Every card in play, across all zones."""
        cards = list(self.deck) + [c for c in self.floor if c is not None]
        if self.weapon is not None:
            cards.append(self.weapon)
        return cards + list(self.weapon_damage) + list(self.discard)

    # -------- Mutation helpers --------
    def remove_card(self, card: Card, source: Source) -> int:
        """Take `card` out of its zone; returns the floor slot it occupied, or -1."""
        if source == "floor":
            idx = self.get_floor_slot_index(card)
            if idx != -1:
                self.floor[idx] = None
            return idx
        if source == "weapon" and self.weapon is not None and self.weapon.id == card.id:
            self.weapon = None
            self.weapon_damage = []
            self.weapon_max_next = None
        return -1

    def discard_weapon_pile(self) -> list[Card]:
        """Move the weapon and its trophy pile to the discard; returns what moved."""
        moved: list[Card] = []
        if self.weapon is not None:
            moved.append(self.weapon)
            moved.extend(self.weapon_damage)
            self.discard.extend(moved)
        self.weapon = None
        self.weapon_damage = []
        self.weapon_max_next = None
        return moved

    def deal_floor(self, limit: int = FLOOR_SIZE) -> list[tuple[int, Card]]:
        """Fill empty slots left to right with at most `limit` cards from the top of the deck."""
        dealt: list[tuple[int, Card]] = []
        for i in range(FLOOR_SIZE):
            if len(dealt) >= limit or not self.deck:
                break
            if self.floor[i] is None:
                card = self.deck.pop(0)
                self.floor[i] = card
                dealt.append((i, card))
        return dealt

    def start_new_floor(self) -> None:
        self.floor_number += 1
        self.floor_fresh = True
        self.heal_used = False

    # -------- Snapshots --------
    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            deck=tuple(self.deck),
            discard=tuple(self.discard),
            floor=tuple(self.floor),
            weapon=self.weapon,
            weapon_damage=tuple(self.weapon_damage),
            weapon_max_next=self.weapon_max_next,
            health=self.health,
            floor_number=self.floor_number,
            runs_remaining=self.runs_remaining,
            floor_fresh=self.floor_fresh,
            heal_used=self.heal_used,
            first_floor_dealt=self.first_floor_dealt,
        )

    def restore(self, snap: StateSnapshot) -> None:
        self.deck = list(snap.deck)
        self.discard = list(snap.discard)
        self.floor = list(snap.floor)
        self.weapon = snap.weapon
        self.weapon_damage = list(snap.weapon_damage)
        self.weapon_max_next = snap.weapon_max_next
        self.health = snap.health
        self.floor_number = snap.floor_number
        self.runs_remaining = snap.runs_remaining
        self.floor_fresh = snap.floor_fresh
        self.heal_used = snap.heal_used
        self.first_floor_dealt = snap.first_floor_dealt
