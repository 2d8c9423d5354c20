from __future__ import annotations

from typing import List

from .evaluator import unpack_strength
from .models import Hand, HandType

RANK_NAMES = {
    14: "Ace",
    13: "King",
    12: "Queen",
    11: "Jack",
    10: "Ten",
    9: "Nine",
    8: "Eight",
    7: "Seven",
    6: "Six",
    5: "Five",
    4: "Four",
    3: "Three",
    2: "Deuce",
}


def rank_name(value: int) -> str:
    # Wheel straights report the Ace as 1.
    return RANK_NAMES[14 if value == 1 else value]


def rank_plural(value: int) -> str:
    name = rank_name(value)
    if name == "Six":
        return "Sixes"
    return name + "s"


def describe_hand(hand: Hand) -> str:
    """Readable name for an evaluated hand, e.g. "Full house, Aces full of Kings"."""
    hand_type, values = unpack_strength(hand.strength)
    groups = _distinct(values)
    top = groups[0] if groups else 0

    if hand_type == HandType.FIVE_OF_A_KIND:
        return f"Five of a kind, {rank_plural(top)}"
    if hand_type == HandType.STRAIGHT_FLUSH:
        if hand.is_royal:
            return "Royal flush"
        return f"Straight flush to the {rank_name(top)}"
    if hand_type == HandType.FOUR_OF_A_KIND:
        return f"Four of a kind, {rank_plural(top)}"
    if hand_type == HandType.FULL_HOUSE:
        return f"Full house, {rank_plural(top)} full of {rank_plural(groups[1])}"
    if hand_type == HandType.FLUSH:
        return f"{rank_name(top)} high flush"
    if hand_type == HandType.STRAIGHT:
        return f"Straight to the {rank_name(top)}"
    if hand_type == HandType.THREE_OF_A_KIND:
        return f"Three of a kind, {rank_plural(top)}"
    if hand_type == HandType.TWO_PAIR:
        return f"Two pair, {rank_plural(top)} and {rank_plural(groups[1])}"
    if hand_type == HandType.ONE_PAIR:
        return f"Pair of {rank_plural(top)}"
    return f"{rank_name(top)} high"


def _distinct(values: List[int]) -> List[int]:
    seen: List[int] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen
