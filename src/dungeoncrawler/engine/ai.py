from __future__ import annotations

import random

from .actions import Action, EquipAction, FightAction, HealAction, RunAwayAction, TankAction
from .game import Game, new_game
from .rules import Outcome
from .settings import GameSettings
from .types import Card

# Any move scoring below this is treated as suicidal
LETHAL = -10_000.0


def _can_fight(game: Game, card: Card) -> bool:
    st = game.state
    if st.weapon is None or not card.is_monster:
        return False
    if game.settings.weapon_degradation == "none" or st.weapon_max_next is None:
        return True
    return card.value <= st.weapon_max_next


def legal_actions(game: Game) -> list[Action]:
    """Card actions the rules would accept right now, in floor order."""
    if game.is_over:
        return []
    out: list[Action] = []
    for c in game.state.floor:
        if c is None:
            continue
        if c.is_heal:
            out.append(HealAction(c.id))
        elif c.is_weapon:
            out.append(EquipAction(c.id))
        elif c.is_monster:
            if _can_fight(game, c):
                out.append(FightAction(c.id))
            out.append(TankAction(c.id))
    return out


def _score_heal(game: Game, card: Card) -> float:
    st = game.state
    if not game.can_heal():
        return -100.0
    max_hp = game.settings.max_health
    actual = min(card.value, max_hp - st.health)
    pct = st.health / max_hp
    if pct < 0.25:
        return actual * 10.0
    if pct < 0.5:
        return actual * 5.0
    return actual * 2.0


def _score_equip(game: Game, card: Card) -> float:
    st = game.state
    if st.weapon is None:
        monsters_on_floor = any(c is not None and c.is_monster for c in st.floor)
        return card.value * (5.0 if monsters_on_floor else 3.0)
    effective = st.weapon.value
    if st.weapon_max_next is not None:
        effective = min(effective, st.weapon_max_next)
    if card.value > effective:
        return (card.value - effective) * 3.0
    return -50.0


def _score_fight(game: Game, card: Card) -> float:
    st = game.state
    assert st.weapon is not None
    damage = max(0, card.value - st.weapon.value)
    if damage >= st.health:
        return LETHAL
    fightable = [c for c in st.floor if c is not None and _can_fight(game, c)]
    # Prefer the biggest monster the weapon can still take
    is_highest = not any(m.value > card.value for m in fightable)
    saved = card.value - damage
    return saved * 5.0 + card.value if is_highest else saved * 3.0


def _score_tank(game: Game, card: Card) -> float:
    if card.value >= game.state.health:
        return LETHAL
    if card.value <= 3:
        return -card.value * 3.0
    if card.value <= 5:
        return -card.value * 5.0
    return -card.value * 10.0


def score_action(game: Game, action: Action) -> float:
    card = game.find_card_by_id(getattr(action, "card_id", ""))
    if card is None:
        return LETHAL
    if isinstance(action, HealAction):
        return _score_heal(game, card)
    if isinstance(action, EquipAction):
        return _score_equip(game, card)
    if isinstance(action, FightAction):
        return _score_fight(game, card)
    if isinstance(action, TankAction):
        return _score_tank(game, card)
    return 0.0


def choose_action(game: Game, *, allow_run: bool = True) -> Action | None:
    """Greedy pick for balance simulations.

    Runs away when every card move would be lethal and a run is available.
    Returns None when the game is over or nothing can be done.
    """
    if game.is_over:
        return None
    actions = legal_actions(game)
    best: tuple[float, Action] | None = None
    for a in actions:
        s = score_action(game, a)
        if best is None or s > best[0]:
            best = (s, a)
    if allow_run and (best is None or best[0] <= LETHAL) and game.can_run():
        return RunAwayAction()
    return best[1] if best is not None else None


def play_out(game: Game, max_moves: int = 300) -> Outcome | None:
    """Deal (if needed) and drive the game with `choose_action` until it ends."""
    if not game.state.first_floor_dealt:
        game.deal_first_floor()
    ran = False
    for _ in range(max_moves):
        if game.is_over:
            break
        # Never run twice in a row, or a hopeless floor cycles forever
        action = choose_action(game, allow_run=not ran)
        if action is None:
            break
        if not game.step(action).success:
            break
        ran = isinstance(action, RunAwayAction)
    return game.outcome


def simulate_win_rate(settings: GameSettings, games: int, seed: int = 0) -> float:
    """Fraction of `games` seeded games the greedy player wins under `settings`."""
    if games <= 0:
        return 0.0
    rng = random.Random(seed)
    wins = 0
    for _ in range(games):
        if play_out(new_game(settings, rng=rng)) == "win":
            wins += 1
    return wins / games
