from __future__ import annotations

from dungeoncrawler.engine.game import Game
from dungeoncrawler.engine.settings import GameSettings, preset
from dungeoncrawler.engine.state import GameState
from dungeoncrawler.engine.types import Card


def c(suit: str, rank: str) -> Card:
    return Card.make(suit, rank)  # type: ignore[arg-type]


FILLER = [c("spades", "J"), c("spades", "10"), c("spades", "A"), c("clubs", "A"), c("clubs", "7"), c("diamonds", "8")]


def _game(
    floor: list[Card | None],
    deck: list[Card] | None = None,
    settings: GameSettings | None = None,
    *,
    health: int | None = None,
    runs_remaining: int | None = None,
) -> Game:
    cfg = settings or GameSettings()
    st = GameState(
        deck=list(FILLER if deck is None else deck),
        floor=list(floor),
        health=cfg.max_health if health is None else health,
        runs_remaining=cfg.max_runs if runs_remaining is None else runs_remaining,
        first_floor_dealt=True,
    )
    return Game(cfg, st)


def test_strict_degradation_scenario() -> None:
    two_d, five_c, six_s = c("diamonds", "2"), c("clubs", "5"), c("spades", "6")
    game = _game([two_d, five_c, six_s, c("hearts", "3")])

    assert game.equip(two_d.id).success
    res = game.fight(five_c.id)
    assert res.success
    assert res.damage == 3
    assert res.slot_index == 1
    assert game.state.health == 17
    assert game.state.weapon_max_next == 4
    assert game.state.weapon_damage == [five_c]

    res2 = game.fight(six_s.id)
    assert not res2.success
    assert "< 5" in res2.message
    # declined: nothing moved
    assert game.state.floor[2] == six_s
    assert len(game.history) == 2


def test_strict_allows_monster_at_bound() -> None:
    ten_d = c("diamonds", "10")
    game = _game([ten_d, c("clubs", "5"), c("spades", "4"), c("clubs", "6")])
    game.equip(ten_d.id)
    game.fight("clubs-5")
    assert game.state.weapon_max_next == 4
    assert game.fight("spades-4").success
    assert game.state.weapon_max_next == 3


def test_equal_degradation_allows_same_value() -> None:
    nine_d = c("diamonds", "9")
    game = _game(
        [nine_d, c("clubs", "9"), c("spades", "9"), c("clubs", "10")],
        settings=preset("normal"),
    )
    game.equip(nine_d.id)
    assert game.fight("clubs-9").success
    assert game.state.weapon_max_next == 9
    assert game.fight("spades-9").success
    assert game.state.weapon_max_next == 9
    res = game.fight("clubs-10")
    assert not res.success
    assert "<= 9" in res.message


def test_weapon_bound_is_monotonic() -> None:
    five_d = c("diamonds", "5")
    monsters = [c("clubs", "10"), c("spades", "8"), c("clubs", "3")]
    game = _game([five_d] + monsters, deck=[])
    game.equip(five_d.id)
    seen: list[int] = []
    for m in monsters:
        assert game.fight(m.id).success
        assert game.state.weapon_max_next is not None
        seen.append(game.state.weapon_max_next)
    assert seen == sorted(seen, reverse=True)


def test_no_degradation_keeps_bound_unset() -> None:
    two_d = c("diamonds", "2")
    game = _game([two_d, c("clubs", "3"), c("spades", "K"), c("hearts", "4")], settings=preset("casual"))
    game.equip(two_d.id)
    assert game.fight("clubs-3").success
    assert game.state.weapon_max_next is None
    res = game.fight("spades-K")
    assert res.success
    assert res.damage == 11
    assert game.state.weapon_max_next is None


def test_fight_requires_weapon_and_monster() -> None:
    game = _game([c("clubs", "5"), c("hearts", "5"), c("diamonds", "3"), None])
    res = game.fight("clubs-5")
    assert not res.success
    assert "Equip a weapon" in res.message
    game.equip("diamonds-3")
    res2 = game.fight("hearts-5")
    assert not res2.success
    assert game.state.floor[1] == c("hearts", "5")


def test_damage_never_negative() -> None:
    ten_d = c("diamonds", "10")
    game = _game([ten_d, c("clubs", "4"), c("spades", "5"), None])
    game.equip(ten_d.id)
    res = game.fight("clubs-4")
    assert res.damage == 0
    assert game.state.health == 20


def test_equip_discards_old_weapon_and_trophies() -> None:
    three_d, seven_d, four_c = c("diamonds", "3"), c("diamonds", "7"), c("clubs", "4")
    game = _game([three_d, four_c, seven_d, c("spades", "9")])
    game.equip(three_d.id)
    game.fight(four_c.id)
    res = game.equip(seven_d.id)
    assert res.success
    assert game.state.weapon == seven_d
    assert game.state.weapon_damage == []
    assert game.state.weapon_max_next is None
    assert game.state.discard == [three_d, four_c]


def test_equip_rejects_non_diamond() -> None:
    game = _game([c("clubs", "5"), None, None, None])
    res = game.equip("clubs-5")
    assert not res.success
    assert res.message == "Only diamonds can be equipped as weapons."


def test_equip_current_weapon_is_declined() -> None:
    four_d = c("diamonds", "4")
    game = _game([four_d, c("clubs", "3"), c("clubs", "5"), None])
    game.equip(four_d.id)
    game.fight("clubs-3")
    res = game.equip(four_d.id, "weapon")
    assert not res.success
    assert game.state.weapon_damage == [c("clubs", "3")]


def test_heal_once_per_floor() -> None:
    five_h, three_h = c("hearts", "5"), c("hearts", "3")
    game = _game([five_h, three_h, c("clubs", "10"), c("spades", "9")], health=10)

    assert game.can_heal()
    res = game.heal(five_h.id)
    assert res.success
    assert res.healed == 5
    assert game.state.health == 15
    assert game.state.heal_used
    assert not game.can_heal()

    res2 = game.heal(three_h.id)
    assert res2.success
    assert res2.healed == 0
    assert game.state.health == 15
    assert game.state.discard == [five_h, three_h]
    assert game.state.floor[1] is None


def test_heal_unlimited_mode() -> None:
    settings = preset("easy")
    game = _game([c("hearts", "5"), c("hearts", "3"), c("clubs", "10"), c("spades", "9")], settings=settings, health=10)
    assert game.heal("hearts-5").healed == 5
    assert game.heal("hearts-3").healed == 3
    assert game.state.health == 18


def test_heal_is_capped_at_max_health() -> None:
    game = _game([c("hearts", "9"), c("clubs", "10"), c("spades", "9"), None], health=18)
    res = game.heal("hearts-9")
    assert res.healed == 2
    assert game.state.health == 20


def test_heal_rejects_non_heart() -> None:
    game = _game([c("spades", "5"), None, None, None])
    res = game.heal("spades-5")
    assert not res.success
    assert game.state.floor[0] == c("spades", "5")


def test_tank_takes_full_damage_and_discards() -> None:
    q = c("spades", "Q")
    game = _game([q, c("clubs", "2"), c("clubs", "3"), None])
    res = game.tank(q.id)
    assert res.success
    assert res.damage == 12
    assert res.slot_index == 0
    assert game.state.health == 8
    assert game.state.discard == [q]


def test_tank_rejects_non_monster() -> None:
    game = _game([c("diamonds", "5"), None, None, None])
    res = game.tank("diamonds-5")
    assert not res.success
    assert "monsters" in res.message


def test_discard_weapon() -> None:
    six_d, two_c = c("diamonds", "6"), c("clubs", "2")
    game = _game([six_d, two_c, c("clubs", "3"), c("clubs", "4")])
    assert not game.discard_weapon().success
    game.equip(six_d.id)
    game.fight(two_c.id)
    res = game.discard_weapon()
    assert res.success
    assert game.state.weapon is None
    assert game.state.weapon_damage == []
    assert game.state.weapon_max_next is None
    assert game.state.discard == [six_d, two_c]


def test_unknown_card_is_a_noop() -> None:
    game = _game([c("clubs", "5"), None, None, None])
    before = game.state.snapshot()
    res = game.tank("clubs-K")
    assert not res.success
    assert res.message == "Card not found."
    assert game.state.snapshot() == before
    assert not game.can_undo()


def test_floor_slots_are_not_compacted() -> None:
    game = _game([c("clubs", "2"), c("clubs", "3"), c("clubs", "4"), c("clubs", "5")])
    game.tank("clubs-3")
    assert game.state.floor[1] is None
    assert game.state.floor[2] == c("clubs", "4")
    assert game.get_floor_slot_index(c("clubs", "5")) == 3


def test_action_clears_floor_fresh() -> None:
    game = _game([c("clubs", "2"), c("clubs", "3"), c("clubs", "4"), c("clubs", "5")])
    assert game.state.floor_fresh
    game.tank("clubs-2")
    assert not game.state.floor_fresh
    assert not game.can_run()


def test_refill_when_one_card_left() -> None:
    deck = [c("hearts", "2"), c("hearts", "3"), c("diamonds", "4"), c("spades", "6"), c("spades", "7")]
    game = _game([c("clubs", "2"), c("clubs", "3"), c("clubs", "4"), c("clubs", "5")], deck=deck)
    assert game.tank("clubs-2").refill is None
    assert game.tank("clubs-3").refill is None
    res = game.tank("clubs-4")
    assert res.refill is not None
    assert [slot for slot, _ in res.refill.cards] == [0, 1, 2]
    assert game.state.floor == [deck[0], deck[1], deck[2], c("clubs", "5")]
    assert game.state.deck == deck[3:]
    assert game.state.floor_number == 2
    assert res.refill.floor_number == 2
    assert game.state.floor_fresh
    assert not game.state.heal_used


def test_refill_deals_what_is_left() -> None:
    deck = [c("hearts", "2")]
    game = _game([c("clubs", "2"), c("clubs", "3"), None, None], deck=deck)
    res = game.tank("clubs-2")
    assert res.refill is not None
    assert len(res.refill.cards) == 1
    assert game.state.floor == [c("hearts", "2"), c("clubs", "3"), None, None]
    assert game.state.deck == []


def test_refill_resets_heal_allowance() -> None:
    deck = [c("hearts", "4"), c("clubs", "6"), c("clubs", "7")]
    game = _game([c("hearts", "2"), c("clubs", "3"), None, None], deck=deck, health=10)
    res = game.heal("hearts-2")
    assert res.refill is not None
    assert game.can_heal()
    assert game.heal("hearts-4").healed == 4


def test_run_away_scenario() -> None:
    floor_cards = [c("clubs", "K"), c("spades", "Q"), c("clubs", "J")]
    deck = [c("hearts", "2"), c("hearts", "3"), c("diamonds", "4"), c("spades", "5"), c("spades", "6")]
    game = _game(floor_cards + [None], deck=deck, runs_remaining=1)

    assert game.can_run()
    res = game.run_away()
    assert res.success
    assert game.state.runs_remaining == 0
    assert game.state.floor_number == 2
    assert game.state.floor == deck[:4]
    assert [slot for slot, _ in res.dealt] == [0, 1, 2, 3]
    assert game.state.deck == [deck[4]] + floor_cards
    assert game.state.floor_fresh
    assert not game.can_run()


def test_run_away_deals_short_floor_from_small_deck() -> None:
    floor_cards = [c("clubs", "K"), c("spades", "Q")]
    game = _game(floor_cards + [None, None], deck=[c("hearts", "2")], runs_remaining=2)
    res = game.run_away()
    assert res.success
    # the returned cards are redealt behind the remaining deck card
    assert game.state.floor == [c("hearts", "2")] + floor_cards + [None]
    assert game.state.deck == []


def test_run_away_declines() -> None:
    floor = [c("clubs", "2"), c("clubs", "3"), c("clubs", "4"), c("clubs", "5")]
    no_runs = _game(floor, runs_remaining=0)
    assert no_runs.run_away().message == "No runs remaining."

    stale = _game(floor)
    stale.tank("clubs-2")
    assert not stale.run_away().success

    empty = _game([None, None, None, None], deck=[c("clubs", "6")])
    assert not empty.run_away().success
    assert empty.state.runs_remaining == 1


def test_win_when_deck_and_floor_empty() -> None:
    game = _game([None, None, None, c("clubs", "2")], deck=[], health=5)
    res = game.tank("clubs-2")
    assert res.outcome == "win"
    assert game.has_won
    assert not game.has_lost
    assert game.state.health == 3


def test_loss_takes_precedence_over_win() -> None:
    game = _game([c("clubs", "10"), None, None, None], deck=[], health=5)
    res = game.tank("clubs-10")
    assert res.outcome == "loss"
    assert game.has_lost
    assert not game.has_won
    assert game.state.health == 0


def test_no_actions_after_game_over() -> None:
    game = _game([c("clubs", "10"), c("clubs", "2"), None, None], health=5)
    game.tank("clubs-10")
    assert game.is_over
    res = game.tank("clubs-2")
    assert not res.success
    assert res.message == "The game is over."


def test_deal_first_floor_once() -> None:
    deck = [c("clubs", str(n)) for n in range(2, 8)]  # type: ignore[arg-type]
    game = Game(GameSettings(), GameState.fresh(deck, GameSettings()))
    res = game.deal_first_floor()
    assert res.success
    assert [slot for slot, _ in res.dealt] == [0, 1, 2, 3]
    assert game.state.floor == deck[:4]
    assert game.state.floor_number == 1
    assert not game.can_undo()
    assert not game.deal_first_floor().success


def test_weapon_limit_text() -> None:
    five_d = c("diamonds", "5")
    game = _game([five_d, c("clubs", "8"), None, None])
    assert game.weapon_limit_text == ""
    game.equip(five_d.id)
    assert game.weapon_limit_text == "Fresh weapon - can attack any monster"
    game.fight("clubs-8")
    assert game.weapon_limit_text == "Can attack monsters < 8"
