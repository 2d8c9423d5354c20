"""Monte Carlo odds for any registered variant.

Trials are split into fixed-size chunks. Each chunk owns its RNG (seeded from
the master seed), its deck and its counters, so chunks run on a thread pool
without sharing state and their tallies simply add up. The chunk layout
depends only on the trial count and ``chunk_size``, which keeps results
reproducible for a seed whatever the worker count.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from .cards import Card, deal, deal_specific, find_duplicates, full_deck
from .errors import DuplicateCardError, InvalidHandCompositionError, InvalidTrialCountError
from .models import (
    DealContext,
    Hand,
    HandType,
    PlayerOdds,
    PlayerSetup,
    SimulationConfig,
    SimulationResult,
    Variant,
)
from .variants import HandEvaluator, Layout, VariantRules, get_evaluator
from .wild import WildCardRule

LOGGER = logging.getLogger("wildpoker.simulation")

DEFAULT_TRIALS = 10_000
DEFAULT_ODDS_TRIALS = 1_000


@dataclass
class TrialTally:
    """Counters for a run of trials; tallies from separate chunks add up."""

    players: int
    trials: int = 0
    wins: List[int] = field(default_factory=list)
    ties: List[int] = field(default_factory=list)
    hand_types: List[Dict[HandType, int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.wins:
            self.wins = [0] * self.players
        if not self.ties:
            self.ties = [0] * self.players
        if not self.hand_types:
            self.hand_types = [{} for _ in range(self.players)]

    def record(self, strengths: Sequence[int], hand_types: Sequence[HandType]) -> None:
        self.trials += 1
        best = max(strengths)
        leaders = [idx for idx, strength in enumerate(strengths) if strength == best]
        if len(leaders) == 1:
            self.wins[leaders[0]] += 1
        else:
            for idx in leaders:
                self.ties[idx] += 1
        for idx, hand_type in enumerate(hand_types):
            counts = self.hand_types[idx]
            counts[hand_type] = counts.get(hand_type, 0) + 1

    def merge(self, other: "TrialTally") -> None:
        self.trials += other.trials
        for idx in range(self.players):
            self.wins[idx] += other.wins[idx]
            self.ties[idx] += other.ties[idx]
            for hand_type, count in other.hand_types[idx].items():
                self.hand_types[idx][hand_type] = self.hand_types[idx].get(hand_type, 0) + count


@dataclass(frozen=True)
class _Table:
    # Validated, immutable inputs shared read-only by every chunk.
    evaluator: HandEvaluator
    players: tuple
    board: tuple
    unknown: tuple
    history: tuple
    # Face-up cards already in the history are not appended again.
    shown: frozenset


def run_simulation(
    variant: Union[Variant, str],
    players: Sequence[PlayerSetup],
    board: Sequence[Card] = (),
    dead_cards: Sequence[Card] = (),
    trials: int = DEFAULT_TRIALS,
    *,
    seed: Optional[int] = None,
    context: Optional[DealContext] = None,
    wild_rule: Optional[WildCardRule] = None,
    config: Optional[SimulationConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SimulationResult:
    """Estimate win and tie rates by dealing out every unknown card ``trials`` times.

    ``board`` is the shared board of community games. Stud players carry their
    own exposed cards in ``PlayerSetup.board_cards``. ``context`` is the
    face-up history so far, in deal order: it may include those exposed cards,
    and any other card in it belongs to a folded hand and leaves the deck.
    Each trial appends the up cards missing from it. Setting ``cancel_event``
    stops the run between trials and returns what has been counted so far.
    """
    config = config or SimulationConfig()
    _check_trials(trials, config)
    evaluator = get_evaluator(variant, wild_rule)
    table = _prepare_table(evaluator, players, board, dead_cards, context)

    if seed is None:
        seed = int(time.time() * 1000) & 0xFFFFFFFF
    master = random.Random(seed)
    chunks = []
    start = 0
    while start < trials:
        size = min(config.chunk_size, trials - start)
        chunks.append((len(chunks), size, master.getrandbits(32)))
        start += size

    if cancel_event is None:
        cancel_event = threading.Event()
    workers = max(1, min(config.workers, len(chunks)))
    LOGGER.info(
        "Simulating %s: %d players, %d trials, %d workers, seed %d",
        evaluator.variant.value,
        len(table.players),
        trials,
        workers,
        seed,
    )

    total = TrialTally(len(table.players))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="wildpoker-sim") as pool:
        futures = [
            pool.submit(_run_chunk, table, index, size, chunk_seed, cancel_event)
            for index, size, chunk_seed in chunks
        ]
        for future in futures:
            total.merge(future.result())

    cancelled = total.trials < trials
    if cancelled:
        LOGGER.warning("Simulation cancelled after %d of %d trials", total.trials, trials)

    result = SimulationResult(
        variant=evaluator.variant,
        seed=seed,
        trials_requested=trials,
        trials_completed=total.trials,
        cancelled=cancelled,
    )
    for idx, player in enumerate(table.players):
        result.players.append(
            PlayerOdds(
                name=player.name,
                wins=total.wins[idx],
                ties=total.ties[idx],
                trials=total.trials,
                hand_type_counts=dict(total.hand_types[idx]),
            )
        )
        for hand_type, count in total.hand_types[idx].items():
            result.hand_type_counts[hand_type] = result.hand_type_counts.get(hand_type, 0) + count
    return result


def hand_type_odds(
    variant: Union[Variant, str],
    hole_cards: Sequence[Card],
    board: Sequence[Card] = (),
    dead_cards: Sequence[Card] = (),
    trials: int = DEFAULT_ODDS_TRIALS,
    *,
    down_cards: Sequence[Card] = (),
    seed: Optional[int] = None,
    context: Optional[DealContext] = None,
    wild_rule: Optional[WildCardRule] = None,
    config: Optional[SimulationConfig] = None,
) -> Dict[HandType, float]:
    """Chance of finishing with each hand type for a single player.

    For stud games ``board`` is the player's own face-up cards; for community
    games it is the shared board.
    """
    evaluator = get_evaluator(variant, wild_rule)
    if evaluator.rules.layout == Layout.STUD:
        player = PlayerSetup("hero", tuple(hole_cards), tuple(board), tuple(down_cards))
        shared: Sequence[Card] = ()
    else:
        player = PlayerSetup("hero", tuple(hole_cards), (), tuple(down_cards))
        shared = board
    result = run_simulation(
        evaluator.variant,
        [player],
        shared,
        dead_cards,
        trials,
        seed=seed,
        context=context,
        wild_rule=wild_rule,
        config=config,
    )
    return result.hand_type_distribution("hero")


def _check_trials(trials: int, config: SimulationConfig) -> None:
    if isinstance(trials, bool) or not isinstance(trials, int):
        raise InvalidTrialCountError(f"Trial count must be an integer, got {trials!r}")
    if not config.min_trials <= trials <= config.max_trials:
        raise InvalidTrialCountError(
            f"Trial count must be between {config.min_trials} and {config.max_trials}, got {trials}"
        )


def _prepare_table(
    evaluator: HandEvaluator,
    players: Sequence[PlayerSetup],
    board: Sequence[Card],
    dead_cards: Sequence[Card],
    context: Optional[DealContext],
) -> _Table:
    rules = evaluator.rules
    setups = tuple(players or ())
    if not setups:
        raise InvalidHandCompositionError("At least one player required")
    board = tuple(board)
    history = tuple(context.face_up_cards) if context is not None else ()

    names = [setup.name for setup in setups]
    if len(set(names)) != len(names):
        raise InvalidHandCompositionError("Player names must be unique")

    for setup in setups:
        if rules.layout == Layout.STUD:
            if (
                len(setup.hole_cards) > rules.hole_cards
                or len(setup.board_cards) > rules.open_cards
                or len(setup.down_cards) > rules.down_cards
            ):
                raise InvalidHandCompositionError(f"{setup.name} holds more cards than {rules.name} deals")
        elif setup.board_cards or setup.down_cards or len(setup.hole_cards) > rules.hole_cards:
            raise InvalidHandCompositionError(f"{setup.name} holds more cards than {rules.name} deals")

    if board and rules.layout != Layout.COMMUNITY:
        raise InvalidHandCompositionError(f"{rules.name} has no shared board")
    if len(board) > rules.max_board:
        raise InvalidHandCompositionError(f"{rules.name} deals at most {rules.max_board} board cards")

    known = [card for setup in setups for card in setup.known_cards]
    known += list(board) + list(dead_cards)
    # The history may repeat the players' own exposed cards; any other card in
    # it was shown by a folded hand and is out of the deck.
    exposed = {card for setup in setups for card in setup.board_cards}
    known += [card for card in history if card not in exposed]
    duplicates = find_duplicates(history) or find_duplicates(known)
    if duplicates:
        raise DuplicateCardError(f"Duplicate card: {duplicates[0].label}")

    deck = full_deck()
    for card in known:
        deal_specific(deck, card)
    needed = _cards_needed(rules, setups, board)
    if needed > len(deck):
        raise InvalidHandCompositionError(f"Not enough cards left to deal {needed} more")
    return _Table(evaluator, setups, board, tuple(deck), history, frozenset(history))


def _cards_needed(rules: VariantRules, setups: Sequence[PlayerSetup], board: Sequence[Card]) -> int:
    if rules.layout == Layout.COMMUNITY:
        return sum(rules.hole_cards - len(s.hole_cards) for s in setups) + rules.max_board - len(board)
    return sum(rules.max_cards - len(s.known_cards) for s in setups)


def _run_chunk(table: _Table, index: int, size: int, seed: int, cancel_event: threading.Event) -> TrialTally:
    rng = random.Random(seed)
    tally = TrialTally(len(table.players))
    for _ in range(size):
        if cancel_event.is_set():
            break
        deck = list(table.unknown)
        rng.shuffle(deck)
        hands = _deal_trial(table, deck)
        tally.record([hand.strength for hand in hands], [hand.hand_type for hand in hands])
    LOGGER.debug("Chunk %d finished %d of %d trials", index, tally.trials, size)
    return tally


def _deal_trial(table: _Table, deck: List[Card]) -> List[Hand]:
    evaluator = table.evaluator
    rules = evaluator.rules

    if rules.layout == Layout.COMMUNITY:
        holes = [_fill(setup.hole_cards, deck, rules.hole_cards) for setup in table.players]
        board = table.board + tuple(deal(deck, rules.max_board - len(table.board)))
        return [evaluator.create_positional_hand(hole, board) for hole in holes]

    if rules.layout == Layout.DRAW:
        return [
            evaluator.create_hand(_fill(setup.hole_cards, deck, rules.hole_cards))
            for setup in table.players
        ]

    holes = [_fill(setup.hole_cards, deck, rules.hole_cards) for setup in table.players]
    # Up cards go out one street at a time around the table; that order is
    # what follow-the-queen reads.
    history = list(table.history)
    boards: List[List[Card]] = [[] for _ in table.players]
    for street in range(rules.open_cards):
        for idx, setup in enumerate(table.players):
            if street < len(setup.board_cards):
                card = setup.board_cards[street]
            else:
                card = deal(deck, 1)[0]
            boards[idx].append(card)
            if card not in table.shown:
                history.append(card)
    context = DealContext(tuple(history))
    downs = [_fill(setup.down_cards, deck, rules.down_cards) for setup in table.players]
    return [
        evaluator.create_positional_hand(hole, tuple(board), down, context)
        for hole, board, down in zip(holes, boards, downs)
    ]


def _fill(known: Sequence[Card], deck: List[Card], count: int) -> tuple:
    return tuple(known) + tuple(deal(deck, count - len(known)))
