from __future__ import annotations

import random
from typing import Iterable, Sequence

from .actions import (
    Action,
    ActionResult,
    DiscardWeaponAction,
    EquipAction,
    FightAction,
    HealAction,
    RunAwayAction,
    TankAction,
)
from .deck import build_deck, shuffle_deck
from .history import History
from .rules import (
    Outcome,
    evaluate_outcome,
    fight_limit_message,
    refill_floor,
    weapon_limit_text,
)
from .settings import DEFAULT_SETTINGS, GameSettings, difficulty_mode
from .state import FLOOR_SIZE, GameState, Source
from .types import Card


class Game:
    """One game: its settings, mutable state and undo history.

    Every command validates first and returns a declined ActionResult without
    touching state when the move is not allowed. A resolved command snapshots
    the prior state, mutates, refills the floor and evaluates win/loss.
    """

    def __init__(
        self,
        settings: GameSettings,
        state: GameState,
        history: History | None = None,
    ) -> None:
        self.settings = settings
        self.state = state
        self.history = history if history is not None else History()

    # -------- Queries --------
    @property
    def floor_card_count(self) -> int:
        return self.state.floor_card_count

    @property
    def has_won(self) -> bool:
        return self.state.has_won and not self.state.has_lost

    @property
    def has_lost(self) -> bool:
        return self.state.has_lost

    @property
    def outcome(self) -> Outcome | None:
        if self.has_lost:
            return "loss"
        if self.has_won:
            return "win"
        return None

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    @property
    def difficulty_mode(self) -> str:
        return difficulty_mode(self.settings)

    @property
    def weapon_limit_text(self) -> str:
        return weapon_limit_text(self.state, self.settings.weapon_degradation)

    def can_run(self) -> bool:
        return self.state.can_run()

    def can_heal(self) -> bool:
        return self.state.can_heal(self.settings)

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def find_card_by_id(self, card_id: str, source: Source = "floor") -> Card | None:
        return self.state.find_card_by_id(card_id, source)

    def get_floor_slot_index(self, card: Card) -> int:
        return self.state.get_floor_slot_index(card)

    # -------- Commands --------
    def deal_first_floor(self) -> ActionResult:
        st = self.state
        if st.first_floor_dealt:
            return ActionResult.declined("First floor already dealt.")
        dealt = st.deal_floor()
        st.first_floor_dealt = True
        st.floor_fresh = True
        st.heal_used = False
        return ActionResult(
            success=True,
            message="First floor dealt! Drag cards to interact.",
            dealt=tuple(dealt),
        )

    def heal(self, card_id: str, source: Source = "floor") -> ActionResult:
        card, err = self._target(card_id, source)
        if err is not None:
            return err
        assert card is not None
        if not card.is_heal:
            return ActionResult.declined("Only hearts can heal.")

        st = self.state
        self.history.push(st)
        slot = st.remove_card(card, source)
        st.discard.append(card)
        st.floor_fresh = False

        if not st.can_heal(self.settings):
            return self._resolved(
                f"Used {card.label()}, but healing only works once per floor.",
                healed=0,
                slot_index=slot,
            )

        st.heal_used = True
        after = min(self.settings.max_health, st.health + card.value)
        healed = after - st.health
        st.health = after
        return self._resolved(f"Healed {healed} health with {card.label()}.", healed=healed, slot_index=slot)

    def equip(self, card_id: str, source: Source = "floor") -> ActionResult:
        card, err = self._target(card_id, source)
        if err is not None:
            return err
        assert card is not None
        if not card.is_weapon:
            return ActionResult.declined("Only diamonds can be equipped as weapons.")
        if source == "weapon":
            return ActionResult.declined("That weapon is already equipped.")

        st = self.state
        self.history.push(st)
        slot = st.remove_card(card, source)
        st.discard_weapon_pile()
        st.weapon = card
        st.floor_fresh = False
        return self._resolved(f"Equipped weapon {card.label()} (power {card.value}).", slot_index=slot)

    def fight(self, card_id: str, source: Source = "floor") -> ActionResult:
        card, err = self._target(card_id, source)
        if err is not None:
            return err
        assert card is not None
        if not card.is_monster:
            return ActionResult.declined("Only monsters (clubs/spades) can be fought.")

        st = self.state
        weapon = st.weapon
        if weapon is None:
            return ActionResult.declined("Equip a weapon (diamonds) before attacking monsters.")

        mode = self.settings.weapon_degradation
        bound = st.weapon_max_next
        if mode != "none" and bound is not None and card.value > bound:
            return ActionResult.declined(fight_limit_message(bound, mode))

        self.history.push(st)
        slot = st.remove_card(card, source)
        damage = max(0, card.value - weapon.value)
        st.health -= damage
        st.weapon_damage.append(card)

        if mode == "strict":
            st.weapon_max_next = _tighten(bound, card.value - 1)
        elif mode == "equal":
            st.weapon_max_next = _tighten(bound, card.value)

        st.floor_fresh = False
        return self._resolved(
            f"Fought {card.label()} (power {card.value}). Took {damage} damage.",
            damage=damage,
            slot_index=slot,
        )

    def tank(self, card_id: str, source: Source = "floor") -> ActionResult:
        card, err = self._target(card_id, source)
        if err is not None:
            return err
        assert card is not None
        if not card.is_monster:
            return ActionResult.declined("Take damage only from monsters (clubs/spades).")

        st = self.state
        self.history.push(st)
        slot = st.remove_card(card, source)
        damage = card.value
        st.health -= damage
        st.discard.append(card)
        st.floor_fresh = False
        return self._resolved(f"Took {damage} damage from {card.label()}.", damage=damage, slot_index=slot)

    def discard_weapon(self) -> ActionResult:
        if self.is_over:
            return ActionResult.declined("The game is over.")
        st = self.state
        if st.weapon is None:
            return ActionResult.declined("No weapon to discard.")

        self.history.push(st)
        st.discard_weapon_pile()
        st.floor_fresh = False
        return self._resolved("Weapon discarded.")

    def run_away(self) -> ActionResult:
        if self.is_over:
            return ActionResult.declined("The game is over.")
        st = self.state
        if st.runs_remaining <= 0:
            return ActionResult.declined("No runs remaining.")
        if not st.floor_fresh:
            return ActionResult.declined("You can only run before acting on a floor.")
        if st.floor_card_count == 0:
            return ActionResult.declined("There is nothing to run from.")

        self.history.push(st)
        # Floor cards go to the bottom of the deck in slot order
        st.deck.extend(c for c in st.floor if c is not None)
        st.floor = [None] * FLOOR_SIZE
        st.runs_remaining -= 1
        st.start_new_floor()
        dealt = st.deal_floor()
        return self._resolved("You ran away. New dungeon floor drawn.", dealt=tuple(dealt))

    def undo(self) -> bool:
        return self.history.undo(self.state)

    def step(self, action: Action) -> ActionResult:
        """Dispatch an action request to its command."""
        if isinstance(action, HealAction):
            return self.heal(action.card_id, action.source)
        if isinstance(action, EquipAction):
            return self.equip(action.card_id, action.source)
        if isinstance(action, FightAction):
            return self.fight(action.card_id, action.source)
        if isinstance(action, TankAction):
            return self.tank(action.card_id, action.source)
        if isinstance(action, DiscardWeaponAction):
            return self.discard_weapon()
        if isinstance(action, RunAwayAction):
            return self.run_away()
        return ActionResult.declined("Unknown action.")

    # -------- Internals --------
    def _target(self, card_id: str, source: Source) -> tuple[Card | None, ActionResult | None]:
        if self.is_over:
            return None, ActionResult.declined("The game is over.")
        card = self.state.find_card_by_id(card_id, source)
        if card is None:
            return None, ActionResult.declined("Card not found.")
        return card, None

    def _resolved(
        self,
        message: str,
        *,
        healed: int | None = None,
        damage: int | None = None,
        slot_index: int | None = None,
        dealt: tuple[tuple[int, Card], ...] = (),
    ) -> ActionResult:
        refill = refill_floor(self.state)
        outcome = evaluate_outcome(self.state)
        return ActionResult(
            success=True,
            message=message,
            healed=healed,
            damage=damage,
            slot_index=slot_index if slot_index is not None and slot_index >= 0 else None,
            refill=refill,
            dealt=dealt,
            outcome=outcome,
        )


def _tighten(bound: int | None, limit: int) -> int:
    return limit if bound is None else min(bound, limit)


def new_game(
    settings: GameSettings | None = None,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> Game:
    """Build, filter and shuffle a fresh deck. The first floor is not dealt yet."""
    cfg = settings or DEFAULT_SETTINGS
    r = rng or random.Random(seed)
    order = shuffle_deck(build_deck(cfg), r)
    return Game(cfg, GameState.fresh(order, cfg))


def restart(game: Game) -> Game:
    """Start over with the exact deck order `game` began with."""
    order = game.state.initial_deck_order
    if not order:
        return new_game(game.settings)
    return Game(game.settings, GameState.fresh(order, game.settings))


def game_from_order(settings: GameSettings, deck_order: Sequence[Card]) -> Game:
    return Game(settings, GameState.fresh(list(deck_order), settings))


def replay(settings: GameSettings, deck_order: Sequence[Card], actions: Iterable[Action]) -> Game:
    game = game_from_order(settings, deck_order)
    game.deal_first_floor()
    for a in actions:
        game.step(a)
        if game.is_over:
            break
    return game
