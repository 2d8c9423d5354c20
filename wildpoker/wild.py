"""Wild-card rules.

Each rule is a small frozen record; ``determine_wild_cards`` is the single
place that knows how every rule behaves. Rules never hold deal state: the
face-up history a rule may need arrives with each call in a ``DealContext``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from .cards import RANK_VALUE, Card, find_duplicates
from .errors import DuplicateCardError, InvalidWildCardInputError
from .models import DealContext


@dataclass(frozen=True)
class NoWildCards:
    pass


@dataclass(frozen=True)
class FixedRanks:
    """Every card of the listed ranks is wild, plus any exactly listed card."""

    ranks: FrozenSet[str]
    cards: FrozenSet[Card] = frozenset()

    def __post_init__(self) -> None:
        ranks = frozenset(self.ranks)
        for rank in ranks:
            if rank not in RANK_VALUE:
                raise ValueError(f"Invalid rank: {rank}")
        object.__setattr__(self, "ranks", ranks)
        object.__setattr__(self, "cards", frozenset(self.cards))


@dataclass(frozen=True)
class LowestCard:
    """Kings plus the lowest-ranked non-King card(s) are wild."""

    king_required: bool = False
    ace_can_be_low: bool = False


@dataclass(frozen=True)
class FollowTheQueen:
    """Queens, plus the rank dealt face up right after the latest face-up Queen."""


WildCardRule = Union[NoWildCards, FixedRanks, LowestCard, FollowTheQueen]

NO_WILDS = NoWildCards()
BASEBALL_WILDS = FixedRanks(frozenset("39"))
TWOS_JACKS_AXE_WILDS = FixedRanks(frozenset("2J"), frozenset({Card("K", "d")}))


def determine_wild_cards(
    rule: WildCardRule, cards: Iterable[Card], context: Optional[DealContext] = None
) -> FrozenSet[Card]:
    checked = _checked_cards(cards)
    context = _checked_context(context)

    if isinstance(rule, NoWildCards):
        return frozenset()
    if isinstance(rule, FixedRanks):
        return frozenset(card for card in checked if card.rank in rule.ranks or card in rule.cards)
    if isinstance(rule, LowestCard):
        return _kings_and_lows(checked, rule.king_required, ace_low=False)
    if isinstance(rule, FollowTheQueen):
        wild_ranks = follow_the_queen_ranks(context.face_up_cards)
        return frozenset(card for card in checked if card.rank in wild_ranks)
    raise TypeError(f"Unsupported wild card rule: {rule!r}")


def wild_card_options(
    rule: WildCardRule, cards: Iterable[Card], context: Optional[DealContext] = None
) -> List[FrozenSet[Card]]:
    """Every wild set the evaluator should try; the best resulting hand wins.

    Only Kings and Lows with a low Ace produces more than one set: the Ace may
    play high (natural) or low (the lowest card, and therefore wild).
    """
    checked = _checked_cards(cards)
    primary = determine_wild_cards(rule, checked, context)
    if isinstance(rule, LowestCard) and rule.ace_can_be_low and any(card.rank == "A" for card in checked):
        ace_low = _kings_and_lows(checked, rule.king_required, ace_low=True)
        if ace_low != primary:
            return [primary, ace_low]
    return [primary]


def follow_the_queen_ranks(face_up_cards: Sequence[Card]) -> FrozenSet[str]:
    wild_ranks = {"Q"}
    following: Optional[str] = None
    for idx, card in enumerate(face_up_cards):
        if card.rank != "Q":
            continue
        # A later Queen replaces the earlier follower; a Queen dealt last leaves none.
        following = face_up_cards[idx + 1].rank if idx + 1 < len(face_up_cards) else None
    if following is not None:
        wild_ranks.add(following)
    return frozenset(wild_ranks)


def has_wild_cards(rule: WildCardRule) -> bool:
    return not isinstance(rule, NoWildCards)


def _kings_and_lows(cards: Sequence[Card], king_required: bool, ace_low: bool) -> FrozenSet[Card]:
    kings = [card for card in cards if card.rank == "K"]
    if king_required and not kings:
        return frozenset()

    wild = set(kings)
    others = [card for card in cards if card.rank != "K"]
    if others:
        lowest = min(_low_value(card, ace_low) for card in others)
        wild.update(card for card in others if _low_value(card, ace_low) == lowest)
    return frozenset(wild)


def _low_value(card: Card, ace_low: bool) -> int:
    if ace_low and card.rank == "A":
        return 1
    return card.value


def _checked_cards(cards: Iterable[Card]) -> Tuple[Card, ...]:
    if cards is None:
        raise InvalidWildCardInputError("Wild card rules need cards")
    checked = tuple(cards)
    if not checked:
        raise InvalidWildCardInputError("Wild card rules need at least one card")
    for card in checked:
        if not isinstance(card, Card):
            raise InvalidWildCardInputError(f"Not a card: {card!r}")
    duplicates = find_duplicates(checked)
    if duplicates:
        raise DuplicateCardError(f"Duplicate card: {duplicates[0].label}")
    return checked


def _checked_context(context: Optional[DealContext]) -> DealContext:
    if context is None:
        return DealContext()
    if not isinstance(context, DealContext):
        raise InvalidWildCardInputError(f"Unsupported deal context: {context!r}")
    for card in context.face_up_cards:
        if not isinstance(card, Card):
            raise InvalidWildCardInputError(f"Not a card in deal history: {card!r}")
    return context
