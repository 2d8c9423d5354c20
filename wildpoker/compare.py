from __future__ import annotations

from typing import List, Optional, Sequence

from .cards import Card
from .errors import InvalidHandCompositionError
from .models import DealContext, Hand, Outcome
from .variants import HandEvaluator

# Stud bring-in only: Clubs < Diamonds < Hearts < Spades. Hand strength and
# pot awards never look at suits.
SUIT_ORDER = "cdhs"


def compare_hands(a: Hand, b: Hand) -> Outcome:
    if a.strength > b.strength:
        return Outcome.A_WINS
    if a.strength < b.strength:
        return Outcome.B_WINS
    return Outcome.TIE


def find_winners(hands: Sequence[Hand]) -> List[int]:
    """Indexes of every hand sharing the top strength (more than one means a split pot)."""
    if not hands:
        return []
    best = max(hand.strength for hand in hands)
    return [idx for idx, hand in enumerate(hands) if hand.strength == best]


def compare_for_bring_in(a: Card, b: Card) -> int:
    """Negative when ``a`` is the lower exposed card, positive when ``b`` is."""
    key_a = (a.value, SUIT_ORDER.index(a.suit))
    key_b = (b.value, SUIT_ORDER.index(b.suit))
    return (key_a > key_b) - (key_a < key_b)


def find_bring_in(upcards: Sequence[Optional[Card]]) -> Optional[int]:
    """Seat showing the lowest door card; seats without one are skipped."""
    lowest: Optional[int] = None
    lowest_card: Optional[Card] = None
    for idx, card in enumerate(upcards):
        if card is None:
            continue
        if lowest_card is None or compare_for_bring_in(card, lowest_card) < 0:
            lowest, lowest_card = idx, card
    return lowest


def best_visible_hand(
    evaluator: HandEvaluator, boards: Sequence[Sequence[Card]], context: Optional[DealContext] = None
) -> Optional[int]:
    """Seat whose exposed cards make the strongest hand; the earliest seat wins ties.

    Used from fourth street on to pick who acts first. Boards with fewer than
    two exposed cards are skipped.
    """
    if not evaluator.supports_positional_cards:
        raise InvalidHandCompositionError("Exposed-hand ordering only applies to stud games")
    best_idx: Optional[int] = None
    best_strength = -1
    for idx, board in enumerate(boards):
        if len(board) < 2:
            continue
        hand = evaluator.create_positional_hand((), board, (), context)
        if hand.strength > best_strength:
            best_idx, best_strength = idx, hand.strength
    return best_idx
