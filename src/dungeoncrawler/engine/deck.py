from __future__ import annotations

import random
from typing import Sequence

from .settings import GameSettings
from .types import Card, CardCatalog, standard_catalog


def should_include_card(card: Card, settings: GameSettings) -> bool:
    # Red aces never enter play
    if card.color == "red" and card.is_ace:
        return False
    if card.suit == "diamonds" and card.is_royal and not settings.include_diamond_royals:
        return False
    if card.suit == "hearts" and card.is_royal and not settings.include_heart_royals:
        return False
    if card.is_monster and card.is_ace and settings.remove_ace_monsters:
        return False
    return True


def build_deck(settings: GameSettings, catalog: CardCatalog | None = None) -> list[Card]:
    """Filter the catalog through the settings; the result is unshuffled (42..50 cards)."""
    cat = catalog or standard_catalog()
    return [c for c in cat.cards if should_include_card(c, settings)]


def shuffle_deck(cards: Sequence[Card], rng: random.Random) -> list[Card]:
    out = list(cards)
    rng.shuffle(out)
    return out
