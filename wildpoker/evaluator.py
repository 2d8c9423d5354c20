from __future__ import annotations

import itertools
from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from .cards import Card
from .models import HandType

# Strength = hand type * PREFIX + up to five two-digit rank slots, most
# significant group first. Card slots never reach PREFIX, so a better hand
# type always wins regardless of kickers.
PREFIX = 10**10
WHEEL = (5, 4, 3, 2, 1)


def pack_strength(hand_type: HandType, ordered_values: Sequence[int]) -> int:
    strength = int(hand_type) * PREFIX
    for idx, value in enumerate(ordered_values[:5]):
        strength += value * 100 ** (4 - idx)
    return strength


def unpack_strength(strength: int) -> Tuple[HandType, List[int]]:
    hand_type, rest = divmod(strength, PREFIX)
    values = []
    for idx in range(5):
        value, rest = divmod(rest, 100 ** (4 - idx))
        if value:
            values.append(value)
    return HandType(hand_type), values


def classify_five(cards: Sequence[Card]) -> Tuple[HandType, List[int]]:
    """Hand type plus rank values ordered for tie-breaking.

    Cards may repeat (wild substitutes can copy a natural card), so only rank
    groups are trusted when any rank is duplicated.
    """
    values = [card.value for card in cards]
    counts = Counter(values)
    ordered = _ordered_values(counts)
    shape = sorted(counts.values(), reverse=True)

    if shape[0] == 5:
        return HandType.FIVE_OF_A_KIND, ordered
    if shape[0] == 4:
        return HandType.FOUR_OF_A_KIND, ordered
    if shape == [3, 2]:
        return HandType.FULL_HOUSE, ordered
    if shape[0] == 3:
        return HandType.THREE_OF_A_KIND, ordered
    if shape == [2, 2, 1]:
        return HandType.TWO_PAIR, ordered
    if shape[0] == 2:
        return HandType.ONE_PAIR, ordered

    is_flush = len({card.suit for card in cards}) == 1
    straight_high = _straight_high(counts)
    if straight_high is not None:
        ordered = list(WHEEL) if straight_high == 5 else ordered
        return (HandType.STRAIGHT_FLUSH if is_flush else HandType.STRAIGHT), ordered
    if is_flush:
        return HandType.FLUSH, ordered
    return HandType.HIGH_CARD, ordered


def classify_partial(cards: Sequence[Card]) -> Tuple[HandType, List[int]]:
    """Classify fewer than five cards: rank groups only, no straights or flushes."""
    counts = Counter(card.value for card in cards)
    ordered = _ordered_values(counts)
    shape = sorted(counts.values(), reverse=True)

    if shape[0] >= 4:
        return HandType.FOUR_OF_A_KIND, ordered
    if shape[0] == 3:
        return HandType.THREE_OF_A_KIND, ordered
    if shape[:2] == [2, 2]:
        return HandType.TWO_PAIR, ordered
    if shape[0] == 2:
        return HandType.ONE_PAIR, ordered
    return HandType.HIGH_CARD, ordered


def evaluate_five(cards: Sequence[Card]) -> Tuple[HandType, int]:
    hand_type, ordered = classify_five(cards)
    return hand_type, pack_strength(hand_type, ordered)


def evaluate_partial(cards: Sequence[Card]) -> Tuple[HandType, int]:
    hand_type, ordered = classify_partial(cards)
    return hand_type, pack_strength(hand_type, ordered)


def evaluate_best(cards: Sequence[Card]) -> Tuple[HandType, int, Tuple[Card, ...]]:
    """Best natural five-card hand out of five or more cards (no wild cards)."""
    if len(cards) < 5:
        raise ValueError("At least five cards required")
    best: Optional[Tuple[HandType, int, Tuple[Card, ...]]] = None
    for combo in itertools.combinations(cards, 5):
        hand_type, strength = evaluate_five(combo)
        if best is None or strength > best[1]:
            best = (hand_type, strength, combo)
    assert best is not None
    return best


def _ordered_values(counts: Counter) -> List[int]:
    groups = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    return [value for value, count in groups for _ in range(count)]


def _straight_high(counts: Iterable[int]) -> Optional[int]:
    ranks = set(counts)
    if len(ranks) != 5:
        return None
    if max(ranks) - min(ranks) == 4:
        return max(ranks)
    if ranks == {14, 5, 4, 3, 2}:  # Ace low
        return 5
    return None
