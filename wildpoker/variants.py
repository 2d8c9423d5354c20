"""Variant registry and the hand evaluator built from it.

Every supported game is one ``VariantRules`` entry in ``VARIANTS``; the
evaluator reads the layout and wild rule from that entry instead of having a
class per game.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from .cards import Card, find_duplicates
from .errors import DuplicateCardError, InvalidHandCompositionError, UnknownVariantError
from .models import DealContext, Hand, Variant
from .search import SearchResult, search_best_hand
from .wild import (
    BASEBALL_WILDS,
    NO_WILDS,
    TWOS_JACKS_AXE_WILDS,
    FollowTheQueen,
    LowestCard,
    WildCardRule,
    determine_wild_cards,
    has_wild_cards,
    wild_card_options,
)


class Layout(str, Enum):
    DRAW = "DRAW"  # five interchangeable cards
    STUD = "STUD"  # two hole, up to four open, one final down card
    COMMUNITY = "COMMUNITY"  # private hole cards plus a shared board


@dataclass(frozen=True)
class VariantRules:
    variant: Variant
    name: str
    layout: Layout
    wild_rule: WildCardRule = NO_WILDS
    hole_cards: int = 2
    open_cards: int = 0
    down_cards: int = 0
    min_board: int = 0
    max_board: int = 0
    # Omaha plays exactly this many hole cards; None lets any five play.
    hole_cards_used: Optional[int] = None

    @property
    def max_cards(self) -> int:
        if self.layout == Layout.COMMUNITY:
            return self.hole_cards + self.max_board
        return self.hole_cards + self.open_cards + self.down_cards


def _draw(variant: Variant, name: str, wild_rule: WildCardRule = NO_WILDS) -> VariantRules:
    return VariantRules(variant, name, Layout.DRAW, wild_rule, hole_cards=5)


def _stud(variant: Variant, name: str, wild_rule: WildCardRule = NO_WILDS) -> VariantRules:
    return VariantRules(variant, name, Layout.STUD, wild_rule, hole_cards=2, open_cards=4, down_cards=1)


VARIANTS: Dict[Variant, VariantRules] = {
    Variant.FIVE_CARD_DRAW: _draw(Variant.FIVE_CARD_DRAW, "Five Card Draw"),
    Variant.TWOS_JACKS_MAN_WITH_THE_AXE: _draw(
        Variant.TWOS_JACKS_MAN_WITH_THE_AXE, "Twos, Jacks, Man with the Axe", TWOS_JACKS_AXE_WILDS
    ),
    Variant.KINGS_AND_LOWS: _draw(Variant.KINGS_AND_LOWS, "Kings and Lows", LowestCard()),
    Variant.SEVEN_CARD_STUD: _stud(Variant.SEVEN_CARD_STUD, "Seven Card Stud"),
    Variant.BASEBALL: _stud(Variant.BASEBALL, "Baseball", BASEBALL_WILDS),
    Variant.FOLLOW_THE_QUEEN: _stud(Variant.FOLLOW_THE_QUEEN, "Follow the Queen", FollowTheQueen()),
    Variant.KINGS_AND_LOWS_STUD: _stud(
        Variant.KINGS_AND_LOWS_STUD, "Kings and Lows (Stud)", LowestCard(ace_can_be_low=True)
    ),
    Variant.HOLDEM: VariantRules(
        Variant.HOLDEM, "Texas Hold'em", Layout.COMMUNITY, hole_cards=2, min_board=3, max_board=5
    ),
    Variant.OMAHA: VariantRules(
        Variant.OMAHA, "Omaha", Layout.COMMUNITY, hole_cards=4, min_board=3, max_board=5, hole_cards_used=2
    ),
}


class HandEvaluator:
    """Builds evaluated hands for one variant.

    Stateless apart from its rules, so one instance can serve any number of
    threads. Nothing is cached between hands.
    """

    def __init__(self, rules: VariantRules, wild_rule: Optional[WildCardRule] = None) -> None:
        self.rules = rules
        self.wild_rule = rules.wild_rule if wild_rule is None else wild_rule

    @property
    def variant(self) -> Variant:
        return self.rules.variant

    @property
    def supports_positional_cards(self) -> bool:
        return self.rules.layout == Layout.STUD

    @property
    def has_wild_cards(self) -> bool:
        return has_wild_cards(self.wild_rule)

    # Hand creation ---------------------------------------------------

    def create_hand(self, cards: Sequence[Card], context: Optional[DealContext] = None) -> Hand:
        cards = _checked(cards)
        layout = self.rules.layout
        if layout == Layout.DRAW:
            if len(cards) != self.rules.hole_cards:
                raise InvalidHandCompositionError(
                    f"{self.rules.name} needs exactly {self.rules.hole_cards} cards, got {len(cards)}"
                )
            return self._evaluate(cards, (), (), (), context)
        if layout == Layout.STUD:
            hole = self.rules.hole_cards
            board_end = hole + self.rules.open_cards
            return self.create_positional_hand(cards[:hole], cards[hole:board_end], cards[board_end:], context)
        hole = self.rules.hole_cards
        return self.create_positional_hand(cards[:hole], cards[hole:], (), context)

    def create_positional_hand(
        self,
        hole_cards: Sequence[Card],
        board_cards: Sequence[Card],
        down_cards: Sequence[Card] = (),
        context: Optional[DealContext] = None,
    ) -> Hand:
        hole, board, down = _checked(hole_cards), _checked(board_cards), _checked(down_cards)
        layout = self.rules.layout
        if layout == Layout.DRAW:
            if board or down:
                raise InvalidHandCompositionError(f"{self.rules.name} has no board or down cards")
            return self.create_hand(hole, context)
        if layout == Layout.STUD:
            self._check_stud(hole, board, down)
        else:
            self._check_community(hole, board, down)
        return self._evaluate(hole + board + down, hole, board, down, context)

    # Explanatory helpers ---------------------------------------------

    def determine_wild_cards(
        self, cards: Sequence[Card], context: Optional[DealContext] = None
    ) -> FrozenSet[Card]:
        return determine_wild_cards(self.wild_rule, cards, context)

    def wild_card_indexes(self, cards: Sequence[Card], context: Optional[DealContext] = None) -> List[int]:
        """Positions of the cards the evaluated hand treats as wild."""
        if not self.has_wild_cards:
            return []
        cards = _checked(cards)
        wild = self.create_hand(cards, context).wild_cards
        return [idx for idx, card in enumerate(cards) if card in wild]

    def evaluated_best_cards(self, hand: Hand) -> Tuple[Card, ...]:
        return hand.best_cards

    # Internals -------------------------------------------------------

    def _check_stud(self, hole: Tuple[Card, ...], board: Tuple[Card, ...], down: Tuple[Card, ...]) -> None:
        rules = self.rules
        if len(hole) > rules.hole_cards or len(board) > rules.open_cards or len(down) > rules.down_cards:
            raise InvalidHandCompositionError(
                f"{rules.name} allows at most {rules.hole_cards} hole, {rules.open_cards} open "
                f"and {rules.down_cards} down cards"
            )
        if down and (len(hole) < rules.hole_cards or len(board) < rules.open_cards):
            raise InvalidHandCompositionError("The final down card comes after every hole and open card")
        total = len(hole) + len(board) + len(down)
        if total < 2:
            raise InvalidHandCompositionError(f"{rules.name} needs at least 2 cards, got {total}")

    def _check_community(self, hole: Tuple[Card, ...], board: Tuple[Card, ...], down: Tuple[Card, ...]) -> None:
        rules = self.rules
        if down:
            raise InvalidHandCompositionError(f"{rules.name} has no down cards")
        if len(hole) != rules.hole_cards:
            raise InvalidHandCompositionError(
                f"{rules.name} needs exactly {rules.hole_cards} hole cards, got {len(hole)}"
            )
        if not rules.min_board <= len(board) <= rules.max_board:
            raise InvalidHandCompositionError(
                f"{rules.name} needs {rules.min_board}-{rules.max_board} board cards, got {len(board)}"
            )

    def _evaluate(
        self,
        cards: Tuple[Card, ...],
        hole: Tuple[Card, ...],
        board: Tuple[Card, ...],
        down: Tuple[Card, ...],
        context: Optional[DealContext],
    ) -> Hand:
        duplicates = find_duplicates(cards)
        if duplicates:
            raise DuplicateCardError(f"Duplicate card: {duplicates[0].label}")

        subsets = None
        if self.rules.hole_cards_used is not None:
            subsets = [
                pair + trio
                for pair in itertools.combinations(hole, self.rules.hole_cards_used)
                for trio in itertools.combinations(board, 5 - self.rules.hole_cards_used)
            ]

        best: Optional[Tuple[SearchResult, FrozenSet[Card]]] = None
        for wild in wild_card_options(self.wild_rule, cards, context):
            result = search_best_hand(cards, wild, subsets)
            if best is None or result.strength > best[0].strength:
                best = (result, wild)
        assert best is not None
        result, wild = best

        return Hand(
            variant=self.variant,
            cards=cards,
            hand_type=result.hand_type,
            strength=result.strength,
            wild_cards=wild,
            best_cards=result.best_cards,
            hole_cards=hole,
            board_cards=board,
            down_cards=down,
            is_partial=len(cards) < 5,
        )


def get_evaluator(variant: Union[Variant, str], wild_rule: Optional[WildCardRule] = None) -> HandEvaluator:
    return HandEvaluator(variant_rules(variant), wild_rule)


def variant_rules(variant: Union[Variant, str]) -> VariantRules:
    if not isinstance(variant, Variant):
        try:
            variant = Variant(str(variant).strip().upper())
        except ValueError:
            raise UnknownVariantError(f"Unknown variant: {variant}") from None
    return VARIANTS[variant]


def _checked(cards: Sequence[Card]) -> Tuple[Card, ...]:
    if cards is None:
        raise InvalidHandCompositionError("Cards required")
    checked = tuple(cards)
    for card in checked:
        if not isinstance(card, Card):
            raise InvalidHandCompositionError(f"Not a card: {card!r}")
    return checked
