from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .cards import Card, parse_cards


class HandType(IntEnum):
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    # Only reachable through wild cards.
    FIVE_OF_A_KIND = 10

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


class Variant(str, Enum):
    FIVE_CARD_DRAW = "FIVE_CARD_DRAW"
    TWOS_JACKS_MAN_WITH_THE_AXE = "TWOS_JACKS_MAN_WITH_THE_AXE"
    KINGS_AND_LOWS = "KINGS_AND_LOWS"
    SEVEN_CARD_STUD = "SEVEN_CARD_STUD"
    BASEBALL = "BASEBALL"
    FOLLOW_THE_QUEEN = "FOLLOW_THE_QUEEN"
    KINGS_AND_LOWS_STUD = "KINGS_AND_LOWS_STUD"
    HOLDEM = "HOLDEM"
    OMAHA = "OMAHA"


class Outcome(str, Enum):
    A_WINS = "A_WINS"
    B_WINS = "B_WINS"
    TIE = "TIE"


@dataclass(frozen=True)
class DealContext:
    # Face-up cards dealt to the whole table, in deal order.
    face_up_cards: Tuple[Card, ...] = ()

    @classmethod
    def from_labels(cls, labels: Sequence[str] | str) -> "DealContext":
        return cls(tuple(parse_cards(labels)))


@dataclass(frozen=True)
class Hand:
    """Evaluated result for one player's cards under a variant's rules."""

    variant: Variant
    cards: Tuple[Card, ...]
    hand_type: HandType
    strength: int
    wild_cards: FrozenSet[Card] = frozenset()
    # Concrete cards behind ``strength`` with wild substitutions resolved.
    best_cards: Tuple[Card, ...] = ()
    hole_cards: Tuple[Card, ...] = ()
    board_cards: Tuple[Card, ...] = ()
    down_cards: Tuple[Card, ...] = ()
    is_partial: bool = False

    @property
    def is_royal(self) -> bool:
        return self.hand_type == HandType.STRAIGHT_FLUSH and min(card.value for card in self.best_cards) == 10

    @property
    def description(self) -> str:
        from .describe import describe_hand

        return describe_hand(self)


@dataclass(frozen=True)
class PlayerSetup:
    """Known cards for one simulated player; anything missing gets dealt."""

    name: str
    hole_cards: Tuple[Card, ...] = ()
    board_cards: Tuple[Card, ...] = ()
    down_cards: Tuple[Card, ...] = ()

    @classmethod
    def from_labels(cls, name: str, hole: str = "", board: str = "", down: str = "") -> "PlayerSetup":
        return cls(
            name=name,
            hole_cards=tuple(parse_cards(hole)),
            board_cards=tuple(parse_cards(board)),
            down_cards=tuple(parse_cards(down)),
        )

    @property
    def known_cards(self) -> Tuple[Card, ...]:
        return self.hole_cards + self.board_cards + self.down_cards


@dataclass
class SimulationConfig:
    min_trials: int = 1
    max_trials: int = 100_000
    # Worker threads. Chunks are pure Python, so threads overlap with a caller
    # that keeps working (or cancels) but do not add CPU throughput.
    workers: int = 4
    chunk_size: int = 2_500


@dataclass
class PlayerOdds:
    name: str
    wins: int = 0
    ties: int = 0
    trials: int = 0
    hand_type_counts: Dict[HandType, int] = field(default_factory=dict)

    @property
    def win_pct(self) -> float:
        return self.wins / self.trials if self.trials else 0.0

    @property
    def tie_pct(self) -> float:
        return self.ties / self.trials if self.trials else 0.0

    @property
    def loss_pct(self) -> float:
        if not self.trials:
            return 0.0
        return (self.trials - self.wins - self.ties) / self.trials


@dataclass
class SimulationResult:
    variant: Variant
    seed: int
    trials_requested: int
    trials_completed: int
    cancelled: bool = False
    players: List[PlayerOdds] = field(default_factory=list)
    # Every evaluated hand of every player, across all trials.
    hand_type_counts: Dict[HandType, int] = field(default_factory=dict)

    def player(self, name: str) -> PlayerOdds:
        for odds in self.players:
            if odds.name == name:
                return odds
        raise KeyError(name)

    def hand_type_distribution(self, name: Optional[str] = None) -> Dict[HandType, float]:
        counts = self.hand_type_counts if name is None else self.player(name).hand_type_counts
        total = sum(counts.values())
        if not total:
            return {}
        return {hand_type: count / total for hand_type, count in sorted(counts.items()) if count}

    def to_dict(self) -> Dict[str, object]:
        return {
            "variant": self.variant.value,
            "seed": self.seed,
            "trials_requested": self.trials_requested,
            "trials_completed": self.trials_completed,
            "cancelled": self.cancelled,
            "players": [
                {
                    "name": odds.name,
                    "win_pct": odds.win_pct,
                    "tie_pct": odds.tie_pct,
                    "loss_pct": odds.loss_pct,
                    "hand_types": {
                        hand_type.name: pct for hand_type, pct in self.hand_type_distribution(odds.name).items()
                    },
                }
                for odds in self.players
            ],
            "hand_types": {hand_type.name: pct for hand_type, pct in self.hand_type_distribution().items()},
        }
