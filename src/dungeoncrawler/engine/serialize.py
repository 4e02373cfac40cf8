from __future__ import annotations

from typing import Mapping

from .actions import (
    Action,
    DiscardWeaponAction,
    EquipAction,
    FightAction,
    HealAction,
    RunAwayAction,
    TankAction,
)
from .game import Game
from .history import History
from .settings import GameSettings
from .state import FLOOR_SIZE, GameState, StateSnapshot
from .types import Card

SAVE_VERSION = 1


class SerializeError(ValueError):
    pass


def _card_to_dict(c: Card | None) -> dict[str, object] | None:
    if c is None:
        return None
    return c.to_dict()


def _cards(raw: object, key: str) -> list[Card]:
    if not isinstance(raw, list):
        raise SerializeError(f"Expected list for {key}")
    out: list[Card] = []
    for x in raw:
        if not isinstance(x, dict):
            raise SerializeError(f"Expected card object in {key}")
        out.append(Card.from_dict(x))
    return out


def _optional_card(raw: object) -> Card | None:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise SerializeError("Expected card object or null")
    return Card.from_dict(raw)


def _require_int(d: Mapping[str, object], key: str) -> int:
    v = d.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise SerializeError(f"Expected int for {key}")
    return v


def _require_bool(d: Mapping[str, object], key: str) -> bool:
    v = d.get(key)
    if not isinstance(v, bool):
        raise SerializeError(f"Expected bool for {key}")
    return v


def _optional_int(d: Mapping[str, object], key: str) -> int | None:
    v = d.get(key)
    if v is None:
        return None
    if not isinstance(v, int) or isinstance(v, bool):
        raise SerializeError(f"Expected int or null for {key}")
    return v


def snapshot_to_dict(s: StateSnapshot) -> dict[str, object]:
    return {
        "deck": [c.to_dict() for c in s.deck],
        "discard": [c.to_dict() for c in s.discard],
        "floor": [_card_to_dict(c) for c in s.floor],
        "weapon": _card_to_dict(s.weapon),
        "weapon_damage": [c.to_dict() for c in s.weapon_damage],
        # null, never a float infinity, for "no bound yet"
        "weapon_max_next": s.weapon_max_next,
        "health": s.health,
        "floor_number": s.floor_number,
        "runs_remaining": s.runs_remaining,
        "floor_fresh": s.floor_fresh,
        "heal_used": s.heal_used,
        "first_floor_dealt": s.first_floor_dealt,
    }


def snapshot_from_dict(d: Mapping[str, object]) -> StateSnapshot:
    floor_raw = d.get("floor")
    if not isinstance(floor_raw, list):
        raise SerializeError("Expected list for floor")
    return StateSnapshot(
        deck=tuple(_cards(d.get("deck"), "deck")),
        discard=tuple(_cards(d.get("discard"), "discard")),
        floor=tuple(_optional_card(x) for x in floor_raw),
        weapon=_optional_card(d.get("weapon")),
        weapon_damage=tuple(_cards(d.get("weapon_damage"), "weapon_damage")),
        weapon_max_next=_optional_int(d, "weapon_max_next"),
        health=_require_int(d, "health"),
        floor_number=_require_int(d, "floor_number"),
        runs_remaining=_require_int(d, "runs_remaining"),
        floor_fresh=_require_bool(d, "floor_fresh"),
        heal_used=_require_bool(d, "heal_used"),
        first_floor_dealt=_require_bool(d, "first_floor_dealt"),
    )


def state_to_dict(state: GameState) -> dict[str, object]:
    out = snapshot_to_dict(state.snapshot())
    out["initial_deck_order"] = [c.to_dict() for c in state.initial_deck_order]
    return out


def state_from_dict(d: Mapping[str, object]) -> GameState:
    snap = snapshot_from_dict(d)
    if len(snap.floor) != FLOOR_SIZE:
        raise SerializeError(f"Floor must have exactly {FLOOR_SIZE} slots")
    state = GameState(initial_deck_order=_cards(d.get("initial_deck_order", []), "initial_deck_order"))
    state.restore(snap)
    return state


def game_to_dict(game: Game) -> dict[str, object]:
    """JSON-serializable form of settings, state and undo history."""
    return {
        "version": SAVE_VERSION,
        "settings": game.settings.to_dict(),
        "state": state_to_dict(game.state),
        "history": [snapshot_to_dict(s) for s in game.history.entries()],
    }


def game_from_dict(d: Mapping[str, object]) -> Game:
    settings_raw = d.get("settings")
    state_raw = d.get("state")
    history_raw = d.get("history", [])
    if not isinstance(settings_raw, dict) or not isinstance(state_raw, dict):
        raise SerializeError("Save requires settings and state objects")
    if not isinstance(history_raw, list):
        raise SerializeError("Expected list for history")
    settings = GameSettings.from_dict(settings_raw)
    state = state_from_dict(state_raw)
    entries: list[StateSnapshot] = []
    for h in history_raw:
        if not isinstance(h, dict):
            raise SerializeError("Expected snapshot object in history")
        entries.append(snapshot_from_dict(h))
    history = History(entries=entries)
    return Game(settings, state, history)


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, HealAction):
        return {"type": "heal", "card_id": a.card_id, "source": a.source}
    if isinstance(a, EquipAction):
        return {"type": "equip", "card_id": a.card_id, "source": a.source}
    if isinstance(a, FightAction):
        return {"type": "fight", "card_id": a.card_id, "source": a.source}
    if isinstance(a, TankAction):
        return {"type": "tank", "card_id": a.card_id, "source": a.source}
    if isinstance(a, DiscardWeaponAction):
        return {"type": "discard_weapon"}
    if isinstance(a, RunAwayAction):
        return {"type": "run_away"}
    # should be unreachable
    return {"type": "unknown"}
