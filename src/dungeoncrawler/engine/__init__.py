"""Deterministic, headless rules engine for the dungeon crawler.

IMPORTANT: This package must never do I/O or import a presentation library.
"""

from .actions import (
    ActionResult,
    DiscardWeaponAction,
    EquipAction,
    FightAction,
    HealAction,
    RunAwayAction,
    TankAction,
)
from .deck import build_deck, shuffle_deck
from .game import Game, new_game, replay, restart
from .history import MAX_HISTORY, History
from .settings import PRESETS, GameSettings, SettingsError, difficulty_mode, preset
from .state import FLOOR_SIZE, GameState
from .types import Card

__all__ = [
    "ActionResult",
    "Card",
    "DiscardWeaponAction",
    "EquipAction",
    "FLOOR_SIZE",
    "FightAction",
    "Game",
    "GameSettings",
    "GameState",
    "HealAction",
    "History",
    "MAX_HISTORY",
    "PRESETS",
    "RunAwayAction",
    "SettingsError",
    "TankAction",
    "build_deck",
    "difficulty_mode",
    "new_game",
    "preset",
    "replay",
    "restart",
    "shuffle_deck",
]
