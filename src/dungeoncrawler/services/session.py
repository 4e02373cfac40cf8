from __future__ import annotations

import random

from dungeoncrawler.engine.actions import (
    Action,
    ActionResult,
    DiscardWeaponAction,
    EquipAction,
    FightAction,
    HealAction,
    RunAwayAction,
    TankAction,
)
from dungeoncrawler.engine.game import Game, new_game, restart
from dungeoncrawler.engine.serialize import action_to_dict
from dungeoncrawler.engine.settings import GameSettings
from dungeoncrawler.engine.state import Source
from dungeoncrawler.paths import Paths
from dungeoncrawler.services.stats import StatsService
from dungeoncrawler.services.storage import SaveGameStore, StorageError
from dungeoncrawler.services.telemetry import EventType, TelemetryService


class GameSession:
    """Host-side wrapper around one Game.

    Saves synchronously after every state change so a restarted process can
    resume exactly, undo stack included. A win is recorded as soon as it happens
    and clears the save. A loss stays undoable, so its floors are recorded only
    when the player leaves it through `new_game` or `restart`.
    """

    def __init__(
        self,
        game: Game,
        store: SaveGameStore,
        stats: StatsService,
        telemetry: TelemetryService,
        rng: random.Random | None = None,
    ) -> None:
        self.game = game
        self.store = store
        self.stats = stats
        self.telemetry = telemetry
        self.rng = rng or random.Random()
        self._recorded = game.outcome == "win"

    @staticmethod
    def open(
        paths: Paths,
        settings: GameSettings | None = None,
        *,
        rng: random.Random | None = None,
    ) -> "GameSession":
        """Resume the saved game if there is one, else start a new game."""
        store = SaveGameStore(paths.save_path, paths.schema_dir)
        stats = StatsService(paths.stats_path, paths.schema_dir)
        telemetry = TelemetryService(paths.telemetry_path)
        try:
            saved = store.load()
        except StorageError as e:
            store.clear()
            telemetry.log("save_discarded", {"path": str(store.path), "error": str(e)})
            saved = None
        if saved is not None:
            session = GameSession(saved, store, stats, telemetry, rng)
            telemetry.log("game_resumed", {"mode": saved.difficulty_mode, "floor_number": saved.state.floor_number})
            return session
        r = rng or random.Random()
        session = GameSession(new_game(settings, rng=r), store, stats, telemetry, r)
        session._started("game_started")
        return session

    # -------- Lifecycle --------
    def new_game(self, settings: GameSettings | None = None) -> None:
        self._leave()
        self.game = new_game(settings or self.game.settings, rng=self.rng)
        self._recorded = False
        self._started("game_started")

    def restart(self) -> None:
        self._leave()
        self.game = restart(self.game)
        self._recorded = False
        self._started("game_restarted")

    def deal_first_floor(self) -> ActionResult:
        res = self.game.deal_first_floor()
        if res.success:
            self.store.save(self.game)
        return res

    def undo(self) -> bool:
        ok = self.game.undo()
        if ok:
            self.store.save(self.game)
            self.telemetry.log("undo", {"history_left": len(self.game.history)})
        return ok

    # -------- Actions --------
    def heal(self, card_id: str, source: Source = "floor") -> ActionResult:
        return self.step(HealAction(card_id, source))

    def equip(self, card_id: str, source: Source = "floor") -> ActionResult:
        return self.step(EquipAction(card_id, source))

    def fight(self, card_id: str, source: Source = "floor") -> ActionResult:
        return self.step(FightAction(card_id, source))

    def tank(self, card_id: str, source: Source = "floor") -> ActionResult:
        return self.step(TankAction(card_id, source))

    def discard_weapon(self) -> ActionResult:
        return self.step(DiscardWeaponAction())

    def run_away(self) -> ActionResult:
        return self.step(RunAwayAction())

    def step(self, action: Action) -> ActionResult:
        res = self.game.step(action)
        self.telemetry.log(
            "action_resolved",
            {
                "action": action_to_dict(action),
                "success": res.success,
                "message": res.message,
                "damage": res.damage,
                "healed": res.healed,
            },
        )
        if not res.success:
            return res
        if res.outcome == "win":
            if not self._recorded:
                self._record_end("win")
            self.store.clear()
            return res
        self.store.save(self.game)
        return res

    # -------- Internals --------
    def _started(self, event: EventType) -> None:
        self.store.save(self.game)
        self.telemetry.log(
            event,
            {"mode": self.game.difficulty_mode, "deck_size": len(self.game.state.deck)},
        )

    def _leave(self) -> None:
        if self.game.outcome == "loss" and not self._recorded:
            self._record_end("loss")

    def _record_end(self, outcome: str) -> None:
        floor_number = self.game.state.floor_number
        mode = self.game.difficulty_mode
        self.stats.record_result(outcome, mode, floor_number)
        self._recorded = True
        self.telemetry.log("game_ended", {"outcome": outcome, "mode": mode, "floor_number": floor_number})
