from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

RANKS = "23456789TJQKA"
# Lowest to highest; only stud bring-in ordering looks at this order.
SUITS = "cdhs"
RANK_VALUE = {rank: idx for idx, rank in enumerate(RANKS, start=2)}
VALUE_RANK = {value: rank for rank, value in RANK_VALUE.items()}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANK_VALUE:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    def __str__(self) -> str:
        return self.label


def card_of(value: int, suit: str) -> Card:
    """Build a card from its numeric rank (2-14)."""
    if value not in VALUE_RANK:
        raise ValueError(f"Invalid rank value: {value}")
    return Card(VALUE_RANK[value], suit)


def full_deck() -> List[Card]:
    return [Card(rank, suit) for rank in RANKS for suit in SUITS]


def build_deck(seed: Optional[int] = None) -> List[Card]:
    rng = random.Random(seed)
    deck = full_deck()
    rng.shuffle(deck)
    return deck


def deal(deck: List[Card], count: int) -> List[Card]:
    if len(deck) < count:
        raise ValueError("Not enough cards left in deck")
    cards = deck[:count]
    del deck[:count]
    return cards


def deal_specific(deck: List[Card], card: Card) -> Card:
    """Pull a known card out of the deck wherever it sits."""
    try:
        deck.remove(card)
    except ValueError:
        raise ValueError(f"Card not in deck: {card.label}") from None
    return card


def parse_label(label: str) -> Card:
    label = label.strip()
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    return Card(label[0].upper(), label[1].lower())


def parse_cards(labels: Sequence[str] | str) -> List[Card]:
    """Parse labels given as a list or as one whitespace separated string."""
    if isinstance(labels, str):
        labels = labels.split()
    return [parse_label(label) for label in labels]


def find_duplicates(cards: Iterable[Card]) -> List[Card]:
    seen = set()
    duplicates: List[Card] = []
    for card in cards:
        if card in seen and card not in duplicates:
            duplicates.append(card)
        seen.add(card)
    return duplicates
