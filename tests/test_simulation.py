import logging
import threading

import pytest

from wildpoker.cards import full_deck
from wildpoker.errors import DuplicateCardError, InvalidHandCompositionError, InvalidTrialCountError
from wildpoker.models import DealContext, HandType, SimulationConfig, Variant
from wildpoker.simulation import TrialTally, hand_type_odds, run_simulation

from .helpers import cards, player


class TripAfter(threading.Event):
    """Event that reports set once it has been checked ``checks`` times."""

    def __init__(self, checks: int) -> None:
        super().__init__()
        self._left = checks
        self._lock = threading.Lock()

    def is_set(self) -> bool:
        with self._lock:
            self._left -= 1
            return self._left < 0


def test_symmetric_matchup_splits_evenly():
    result = run_simulation(
        Variant.HOLDEM,
        [player("spades", "As Ks"), player("diamonds", "Ad Kd")],
        trials=20_000,
        seed=2024,
    )
    spades, diamonds = result.player("spades"), result.player("diamonds")
    assert result.trials_completed == 20_000
    assert not result.cancelled
    assert spades.ties == diamonds.ties
    assert abs(spades.win_pct - diamonds.win_pct) < 0.01
    assert abs(spades.win_pct - (1 - spades.tie_pct) / 2) < 0.01
    for odds in result.players:
        assert odds.win_pct + odds.tie_pct + odds.loss_pct == pytest.approx(1.0)


def test_board_that_plays_for_everyone_is_always_a_tie():
    result = run_simulation(
        "HOLDEM",
        [player("a", "2c 3d"), player("b", "4h 5h")],
        board=cards("Ts Js Qs Ks As"),
        trials=300,
        seed=1,
    )
    for odds in result.players:
        assert odds.ties == 300
        assert odds.wins == 0
    assert result.hand_type_distribution() == {HandType.STRAIGHT_FLUSH: 1.0}


def test_known_draw_hands_have_fixed_outcome():
    result = run_simulation(
        Variant.FIVE_CARD_DRAW,
        [player("flush", "Ah Jh 9h 6h 2h"), player("straight", "9d 8d 7c 6s 5h")],
        trials=50,
        seed=3,
    )
    assert result.player("flush").win_pct == 1.0
    assert result.player("straight").loss_pct == 1.0


def test_hand_type_counts_cover_every_trial():
    result = run_simulation(
        Variant.BASEBALL,
        [player("a", "3h Kd", "Kc"), player("b", "", "9s"), player("c")],
        trials=200,
        seed=11,
        config=SimulationConfig(workers=2, chunk_size=60),
    )
    for odds in result.players:
        assert sum(odds.hand_type_counts.values()) == 200
    assert sum(result.hand_type_counts.values()) == 600
    assert sum(result.hand_type_distribution().values()) == pytest.approx(1.0)
    # A wild three next to a pair of Kings is already trips.
    assert min(result.player("a").hand_type_counts) >= HandType.THREE_OF_A_KIND


def test_follow_the_queen_simulation_runs_with_history():
    result = run_simulation(
        Variant.FOLLOW_THE_QUEEN,
        [player("a", "Qh 7c", "Qd"), player("b", "2c 2d", "8s")],
        trials=150,
        seed=5,
        context=DealContext(tuple(cards("4h"))),
    )
    assert result.trials_completed == 150
    assert sum(odds.wins + odds.ties for odds in result.players) >= 150


def test_same_seed_reproduces_result_for_any_worker_count():
    players = [player("a", "Jh Jd"), player("b", "As 7c")]
    first = run_simulation(
        Variant.HOLDEM, players, trials=900, seed=77, config=SimulationConfig(workers=1, chunk_size=100)
    )
    second = run_simulation(
        Variant.HOLDEM, players, trials=900, seed=77, config=SimulationConfig(workers=4, chunk_size=100)
    )
    assert first.to_dict() == second.to_dict()


def test_pre_set_cancel_event_returns_empty_partial_result():
    event = threading.Event()
    event.set()
    result = run_simulation(
        Variant.HOLDEM, [player("a", "As Ks"), player("b")], trials=1_000, seed=9, cancel_event=event
    )
    assert result.cancelled
    assert result.trials_completed == 0
    assert result.player("a").win_pct == 0.0


def test_cancel_mid_run_keeps_completed_trials():
    result = run_simulation(
        Variant.HOLDEM,
        [player("a", "As Ks"), player("b", "Qh Qd")],
        trials=500,
        seed=9,
        config=SimulationConfig(workers=1, chunk_size=50),
        cancel_event=TripAfter(120),
    )
    assert result.cancelled
    assert result.trials_completed == 120
    odds = result.player("a")
    assert odds.wins + odds.ties + (odds.trials - odds.wins - odds.ties) == 120


def test_cancel_is_logged(caplog):
    event = threading.Event()
    event.set()
    with caplog.at_level(logging.INFO, logger="wildpoker.simulation"):
        run_simulation(Variant.HOLDEM, [player("a", "As Ks")], trials=10, seed=1, cancel_event=event)
    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Simulating HOLDEM") for message in messages)
    assert any("cancelled after 0 of 10" in message for message in messages)


@pytest.mark.parametrize("trials", [0, -5, 100_001])
def test_trial_count_outside_bounds_is_rejected(trials):
    with pytest.raises(InvalidTrialCountError, match="between 1 and 100000"):
        run_simulation(Variant.HOLDEM, [player("a", "As Ks")], trials=trials)


def test_trial_bounds_come_from_config():
    config = SimulationConfig(min_trials=10, max_trials=20)
    with pytest.raises(InvalidTrialCountError, match="between 10 and 20, got 30"):
        run_simulation(Variant.HOLDEM, [player("a")], trials=30, config=config)
    with pytest.raises(InvalidTrialCountError, match="integer"):
        run_simulation(Variant.HOLDEM, [player("a")], trials=1.5)  # type: ignore[arg-type]


def test_simulation_input_errors():
    with pytest.raises(InvalidHandCompositionError, match="At least one player"):
        run_simulation(Variant.HOLDEM, [], trials=10)
    with pytest.raises(DuplicateCardError, match="Duplicate card: As"):
        run_simulation(Variant.HOLDEM, [player("a", "As Ks"), player("b", "As Qd")], trials=10)
    with pytest.raises(DuplicateCardError, match="Duplicate card: Ks"):
        run_simulation(Variant.HOLDEM, [player("a", "As Ks")], board=cards("Ks 2d 3c"), trials=10)
    with pytest.raises(InvalidHandCompositionError, match="more cards than"):
        run_simulation(Variant.HOLDEM, [player("a", "As Ks Qs")], trials=10)
    with pytest.raises(InvalidHandCompositionError, match="no shared board"):
        run_simulation(Variant.SEVEN_CARD_STUD, [player("a", "As Ks")], board=cards("2d"), trials=10)
    with pytest.raises(InvalidHandCompositionError, match="Not enough cards"):
        run_simulation(Variant.SEVEN_CARD_STUD, [player(f"p{idx}") for idx in range(8)], trials=10)


def test_dead_cards_leave_the_deck():
    # Everything but the King of clubs is known, so every draw fills the same full house.
    known = cards("As Ah Ks Kh Kc")
    dead = [card for card in full_deck() if card not in known]
    result = run_simulation(Variant.FIVE_CARD_DRAW, [player("a", "As Ah Ks Kh")], dead_cards=dead, trials=50, seed=4)
    assert result.player("a").hand_type_counts == {HandType.FULL_HOUSE: 50}


def test_hand_type_odds_for_made_quads():
    odds = hand_type_odds(Variant.HOLDEM, cards("As Ad"), cards("Ac Ah Kd"), trials=100, seed=8)
    assert odds == {HandType.FOUR_OF_A_KIND: 1.0}


def test_hand_type_odds_for_stud_uses_own_board():
    odds = hand_type_odds(Variant.BASEBALL, cards("3h 3d"), cards("9c"), trials=100, seed=8)
    assert sum(odds.values()) == pytest.approx(1.0)
    assert min(odds) >= HandType.FOUR_OF_A_KIND


def test_trial_tallies_merge_by_sum():
    first, second = TrialTally(2), TrialTally(2)
    first.record([10, 5], [HandType.ONE_PAIR, HandType.HIGH_CARD])
    second.record([7, 7], [HandType.HIGH_CARD, HandType.HIGH_CARD])
    first.merge(second)
    assert first.trials == 2
    assert first.wins == [1, 0]
    assert first.ties == [1, 1]
    assert first.hand_types[1] == {HandType.HIGH_CARD: 2}


def test_follow_the_queen_history_keeps_deal_order():
    # The Queen is followed by a folded player's 4, so fours are wild, not Jacks.
    history = DealContext.from_labels("Qh 4s Jh Kd 7s 5c 9c 6c 2s 8d")
    result = run_simulation(
        Variant.FOLLOW_THE_QUEEN,
        [player("a", "4d 4h", "Qh Kd 9c 2s", "3c"), player("b", "Jc Jd", "Jh 5c 6c 8d", "Js")],
        trials=5,
        seed=12,
        context=history,
    )
    assert result.player("a").wins == 5
    assert result.player("a").hand_type_counts == {HandType.FOUR_OF_A_KIND: 5}
    assert result.player("b").hand_type_counts == {HandType.FOUR_OF_A_KIND: 5}


def test_follow_the_queen_history_may_stop_mid_deal():
    # Third street is in the history; later streets are dealt after it.
    result = run_simulation(
        Variant.FOLLOW_THE_QUEEN,
        [player("a", "4d 4h", "Qh"), player("b", "Jc Jd", "4s")],
        trials=100,
        seed=3,
        context=DealContext.from_labels("7s Qh 4s"),
    )
    assert result.trials_completed == 100
    for odds in result.players:
        assert sum(odds.hand_type_counts.values()) == 100


def test_history_card_held_by_a_player_is_rejected():
    with pytest.raises(DuplicateCardError, match="Duplicate card: 4d"):
        run_simulation(
            Variant.FOLLOW_THE_QUEEN,
            [player("a", "4d 4h", "Qh")],
            trials=10,
            context=DealContext.from_labels("Qh 4d"),
        )
    with pytest.raises(DuplicateCardError, match="Duplicate card: Qh"):
        run_simulation(
            Variant.FOLLOW_THE_QUEEN,
            [player("a", "4d 4h", "Qh")],
            trials=10,
            context=DealContext.from_labels("Qh 7s Qh"),
        )


def test_hand_type_odds_accepts_history_with_own_up_cards():
    odds = hand_type_odds(
        Variant.FOLLOW_THE_QUEEN,
        cards("4d 4h"),
        cards("Qh Kd"),
        trials=50,
        seed=6,
        context=DealContext.from_labels("Qh 4s Kd"),
    )
    assert sum(odds.values()) == pytest.approx(1.0)
