from __future__ import annotations

from dataclasses import dataclass

from .rules import FloorRefill, Outcome
from .state import Source
from .types import Card


@dataclass(frozen=True)
class HealAction:
    card_id: str
    source: Source = "floor"


@dataclass(frozen=True)
class EquipAction:
    card_id: str
    source: Source = "floor"


@dataclass(frozen=True)
class FightAction:
    card_id: str
    source: Source = "floor"


@dataclass(frozen=True)
class TankAction:
    card_id: str
    source: Source = "floor"


@dataclass(frozen=True)
class DiscardWeaponAction:
    pass


@dataclass(frozen=True)
class RunAwayAction:
    pass


Action = HealAction | EquipAction | FightAction | TankAction | DiscardWeaponAction | RunAwayAction


@dataclass(frozen=True)
class ActionResult:
    success: bool
    message: str
    healed: int | None = None
    damage: int | None = None
    slot_index: int | None = None
    refill: FloorRefill | None = None
    dealt: tuple[tuple[int, Card], ...] = ()
    outcome: Outcome | None = None

    @staticmethod
    def declined(message: str) -> "ActionResult":
        return ActionResult(success=False, message=message)
