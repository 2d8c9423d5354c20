"""Hand evaluation and odds for wild-card poker home games."""

from .cards import Card, RANKS, SUITS, build_deck, deal, deal_specific, parse_cards
from .compare import compare_hands, find_bring_in, find_winners
from .errors import (
    DuplicateCardError,
    InvalidHandCompositionError,
    InvalidTrialCountError,
    InvalidWildCardInputError,
    PokerEngineError,
    UnknownVariantError,
)
from .models import DealContext, Hand, HandType, Outcome, PlayerSetup, SimulationConfig, SimulationResult, Variant
from .simulation import hand_type_odds, run_simulation
from .variants import HandEvaluator, get_evaluator
from .wild import FixedRanks, FollowTheQueen, LowestCard, NoWildCards, determine_wild_cards

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "build_deck",
    "deal",
    "deal_specific",
    "parse_cards",
    "compare_hands",
    "find_bring_in",
    "find_winners",
    "DuplicateCardError",
    "InvalidHandCompositionError",
    "InvalidTrialCountError",
    "InvalidWildCardInputError",
    "PokerEngineError",
    "UnknownVariantError",
    "DealContext",
    "Hand",
    "HandType",
    "Outcome",
    "PlayerSetup",
    "SimulationConfig",
    "SimulationResult",
    "Variant",
    "hand_type_odds",
    "run_simulation",
    "HandEvaluator",
    "get_evaluator",
    "FixedRanks",
    "FollowTheQueen",
    "LowestCard",
    "NoWildCards",
    "determine_wild_cards",
]
