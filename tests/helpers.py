from __future__ import annotations

import itertools
from typing import AbstractSet, List, Optional, Sequence

from wildpoker.cards import Card, full_deck, parse_cards
from wildpoker.evaluator import evaluate_five
from wildpoker.models import DealContext, Hand, PlayerSetup
from wildpoker.variants import get_evaluator


def cards(labels: str) -> List[Card]:
    """Shorthand: ``cards("Ah Kd")``."""
    return parse_cards(labels)


def hand(variant: str, labels: str, face_up: str = "") -> Hand:
    context = DealContext.from_labels(face_up) if face_up else None
    return get_evaluator(variant).create_hand(cards(labels), context)


def stud_hand(variant: str, hole: str, board: str, down: str = "", face_up: Optional[str] = None) -> Hand:
    # Face-up history defaults to the player's own board.
    context = DealContext.from_labels(board if face_up is None else face_up)
    return get_evaluator(variant).create_positional_hand(cards(hole), cards(board), cards(down), context)


def player(name: str, hole: str = "", board: str = "", down: str = "") -> PlayerSetup:
    return PlayerSetup.from_labels(name, hole, board, down)


def brute_force_strength(hand_cards: Sequence[Card], wild_cards: AbstractSet[Card]) -> int:
    """Reference answer: every five-card subset with every wild tried as every card."""
    deck = full_deck()
    best = 0
    for combo in itertools.combinations(hand_cards, 5):
        naturals = [card for card in combo if card not in wild_cards]
        wild_count = len(combo) - len(naturals)
        for substitutes in itertools.combinations_with_replacement(deck, wild_count):
            _, strength = evaluate_five(naturals + list(substitutes))
            best = max(best, strength)
    return best
