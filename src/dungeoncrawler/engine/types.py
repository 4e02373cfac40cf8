from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, get_args

Suit = Literal["hearts", "diamonds", "clubs", "spades"]
Rank = Literal["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]
Color = Literal["red", "black"]

SUITS: tuple[Suit, ...] = get_args(Suit)
RANKS: tuple[Rank, ...] = get_args(Rank)

ROYAL_VALUES: dict[str, int] = {"J": 11, "Q": 12, "K": 13}
ACE_VALUE = 14


def rank_value(rank: str) -> int:
    if rank in ROYAL_VALUES:
        return ROYAL_VALUES[rank]
    if rank == "A":
        return ACE_VALUE
    return int(rank)


def suit_color(suit: str) -> Color:
    return "red" if suit in ("hearts", "diamonds") else "black"


class CardError(ValueError):
    pass


@dataclass(frozen=True)
class Card:
    id: str
    suit: Suit
    rank: Rank
    value: int
    color: Color

    @staticmethod
    def make(suit: Suit, rank: Rank) -> "Card":
        if suit not in SUITS:
            raise CardError(f"Unknown suit: {suit}")
        if rank not in RANKS:
            raise CardError(f"Unknown rank: {rank}")
        return Card(
            id=f"{suit}-{rank}",
            suit=suit,
            rank=rank,
            value=rank_value(rank),
            color=suit_color(suit),
        )

    @property
    def is_monster(self) -> bool:
        return self.suit in ("clubs", "spades")

    @property
    def is_weapon(self) -> bool:
        return self.suit == "diamonds"

    @property
    def is_heal(self) -> bool:
        return self.suit == "hearts"

    @property
    def is_royal(self) -> bool:
        return self.rank in ROYAL_VALUES

    @property
    def is_ace(self) -> bool:
        return self.rank == "A"

    def label(self) -> str:
        return f"{self.rank} of {self.suit}"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "suit": self.suit,
            "rank": self.rank,
            "value": self.value,
            "color": self.color,
        }

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Card":
        suit = d.get("suit")
        rank = d.get("rank")
        if not isinstance(suit, str) or not isinstance(rank, str):
            raise CardError("Card requires string suit and rank")
        card = Card.make(suit, rank)  # type: ignore[arg-type]
        # value and color are derived; only the id is preserved from storage
        cid = d.get("id")
        if isinstance(cid, str) and cid != card.id:
            card = Card(id=cid, suit=card.suit, rank=card.rank, value=card.value, color=card.color)
        return card


@dataclass(frozen=True)
class CardCatalog:
    """The full 52-card catalog, in suit-major order."""

    cards: tuple[Card, ...]


def standard_catalog() -> CardCatalog:
    return CardCatalog(cards=tuple(Card.make(s, r) for s in SUITS for r in RANKS))
