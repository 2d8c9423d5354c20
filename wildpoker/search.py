"""Best-hand search over five-card subsets and wild-card substitutions.

A wild card may stand for any of the 52 cards, but only a few targets can
ever matter, so each subset is resolved from a short list of substitution
plans instead of every assignment:

* rank plans: every wild copies a rank already held by the naturals. Any
  other assignment leaves a wild either as an unmatched kicker or in a group
  made only of wilds; moving it onto the largest natural group always builds
  a strictly higher hand type.
* straight plans: wilds fill the missing ranks of a five-rank window that
  already contains every (distinct) natural rank, in the naturals' suit when
  they share one, which turns the straight into a straight flush.
* flush plan: wilds take the highest ranks the suited naturals lack.
* five Aces when every card in the subset is wild.

Straights and flushes need five distinct ranks, and rank plans always
duplicate a natural rank, so together the plans reach the best result of a
full brute force. Ties keep the first plan found; rank plans come first and
highest ranks first, which favors the natural reading of the hand.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from .cards import Card, card_of
from .evaluator import evaluate_five, evaluate_partial
from .models import HandType

# Preferred suits for substitutes whose suit cannot matter.
DISPLAY_SUITS = "shdc"


@dataclass(frozen=True)
class SearchResult:
    hand_type: HandType
    strength: int
    best_cards: Tuple[Card, ...]


def search_best_hand(
    cards: Sequence[Card],
    wild_cards: AbstractSet[Card] = frozenset(),
    subsets: Optional[Iterable[Sequence[Card]]] = None,
) -> SearchResult:
    """Strongest concrete hand reachable from ``cards``.

    ``subsets`` restricts which five-card groups may be played (Omaha's two
    hole plus three board); by default any five of the cards may be used.
    Fewer than five cards are evaluated as a partial hand.
    """
    cards = tuple(cards)
    if len(cards) < 5:
        return _best_partial(cards, wild_cards)
    if subsets is None:
        subsets = candidate_subsets(cards, wild_cards)

    best: Optional[SearchResult] = None
    for subset in subsets:
        result = _best_for_subset(tuple(subset), wild_cards)
        if best is None or result.strength > best.strength:
            best = result
    if best is None:
        raise ValueError("No five-card subset to evaluate")
    return best


def candidate_subsets(cards: Sequence[Card], wild_cards: AbstractSet[Card]) -> List[Tuple[Card, ...]]:
    combos = itertools.combinations(cards, 5)
    wild_total = sum(1 for card in cards if card in wild_cards)
    if not wild_total:
        return list(combos)
    # A wild can always copy the natural card it displaces, so subsets holding
    # fewer wilds than possible never win.
    most = min(5, wild_total)
    return [combo for combo in combos if sum(1 for card in combo if card in wild_cards) == most]


def substitution_plans(naturals: Sequence[Card], wild_count: int) -> Iterator[Tuple[Card, ...]]:
    if wild_count == 0:
        yield ()
        return
    if not naturals:
        yield tuple(Card("A", DISPLAY_SUITS[idx % 4]) for idx in range(wild_count))
        return

    values = sorted({card.value for card in naturals}, reverse=True)
    for combo in itertools.combinations_with_replacement(values, wild_count):
        yield _matching_cards(combo, naturals)

    if len(values) != len(naturals):
        return
    suits = {card.suit for card in naturals}
    flush_suit = next(iter(suits)) if len(suits) == 1 else None

    for window in _straight_windows():
        if set(values) <= window:
            missing = sorted(window - set(values), reverse=True)
            yield tuple(card_of(value, flush_suit or DISPLAY_SUITS[0]) for value in missing)

    if flush_suit is not None:
        absent = [value for value in range(14, 1, -1) if value not in values]
        yield tuple(card_of(value, flush_suit) for value in absent[:wild_count])


def _best_for_subset(subset: Tuple[Card, ...], wild_cards: AbstractSet[Card]) -> SearchResult:
    wild_slots = [idx for idx, card in enumerate(subset) if card in wild_cards]
    if not wild_slots:
        hand_type, strength = evaluate_five(subset)
        return SearchResult(hand_type, strength, subset)

    naturals = [card for card in subset if card not in wild_cards]
    best: Optional[SearchResult] = None
    for plan in substitution_plans(naturals, len(wild_slots)):
        concrete = _substitute(subset, wild_slots, plan)
        hand_type, strength = evaluate_five(concrete)
        if best is None or strength > best.strength:
            best = SearchResult(hand_type, strength, concrete)
    assert best is not None
    return best


def _best_partial(cards: Tuple[Card, ...], wild_cards: AbstractSet[Card]) -> SearchResult:
    if not cards:
        raise ValueError("No cards to evaluate")
    wild_slots = [idx for idx, card in enumerate(cards) if card in wild_cards]
    naturals = [card for card in cards if card not in wild_cards]

    best: Optional[SearchResult] = None
    for plan in _rank_plans(naturals, len(wild_slots)):
        concrete = _substitute(cards, wild_slots, plan)
        hand_type, strength = evaluate_partial(concrete)
        if best is None or strength > best.strength:
            best = SearchResult(hand_type, strength, concrete)
    assert best is not None
    return best


def _rank_plans(naturals: Sequence[Card], wild_count: int) -> Iterator[Tuple[Card, ...]]:
    # Partial hands have no straights or flushes; only matching ranks count.
    if wild_count and not naturals:
        yield tuple(Card("A", DISPLAY_SUITS[idx % 4]) for idx in range(wild_count))
        return
    values = sorted({card.value for card in naturals}, reverse=True)
    for combo in itertools.combinations_with_replacement(values, wild_count):
        yield _matching_cards(combo, naturals)


def _matching_cards(values: Sequence[int], naturals: Sequence[Card]) -> Tuple[Card, ...]:
    taken = set(naturals)
    cards: List[Card] = []
    for value in values:
        card = next(
            (card_of(value, suit) for suit in DISPLAY_SUITS if card_of(value, suit) not in taken),
            card_of(value, DISPLAY_SUITS[0]),
        )
        taken.add(card)
        cards.append(card)
    return tuple(cards)


def _substitute(cards: Tuple[Card, ...], wild_slots: Sequence[int], plan: Sequence[Card]) -> Tuple[Card, ...]:
    concrete = list(cards)
    for slot, card in zip(wild_slots, plan):
        concrete[slot] = card
    return tuple(concrete)


def _straight_windows() -> Iterator[set]:
    for high in range(14, 5, -1):
        yield set(range(high - 4, high + 1))
    yield {14, 2, 3, 4, 5}
