import argparse
import json
import logging
from typing import List, Optional, Sequence

from .cards import parse_cards
from .models import DealContext, PlayerSetup, SimulationConfig, Variant
from .simulation import DEFAULT_TRIALS, run_simulation

logging.basicConfig(level=logging.INFO)


def parse_player(text: str, index: int) -> PlayerSetup:
    """``"As Ks"`` or, for stud, ``"hole|up cards|down card"``; an optional ``name=`` prefix."""
    name = f"Player{index}"
    if "=" in text:
        name, text = text.split("=", 1)
        name = name.strip()
    parts = text.split("|")
    if len(parts) > 3:
        raise ValueError(f"Too many card groups for {name}: {text}")
    parts += [""] * (3 - len(parts))
    return PlayerSetup.from_labels(name, parts[0], parts[1], parts[2])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Monte Carlo odds for wild-card poker variants")
    parser.add_argument(
        "--variant",
        default=Variant.HOLDEM.value,
        help="One of: " + ", ".join(variant.value for variant in Variant),
    )
    parser.add_argument(
        "--player",
        action="append",
        default=[],
        help='Known cards for one player, e.g. "As Ks" or "hero=9h 9d|3c Qs|" for stud (repeatable)',
    )
    parser.add_argument("--board", default="", help="Shared board cards for community games")
    parser.add_argument("--dead", default="", help="Cards known to be out of the deck")
    parser.add_argument("--face-up", default="", help="Face-up cards dealt so far, in deal order")
    parser.add_argument("--trials", type=int, default=DEFAULT_TRIALS)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--workers", type=int, default=4)
    parser.add_argument("--chunk-size", type=int, default=2_500)
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        players: List[PlayerSetup] = [parse_player(text, idx + 1) for idx, text in enumerate(args.player)]
        context = DealContext.from_labels(args.face_up) if args.face_up else None
        result = run_simulation(
            args.variant,
            players,
            parse_cards(args.board),
            parse_cards(args.dead),
            args.trials,
            seed=args.seed,
            context=context,
            config=SimulationConfig(workers=args.workers, chunk_size=args.chunk_size),
        )
    except ValueError as exc:
        parser.error(str(exc))

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"{result.variant.value}: {result.trials_completed} trials (seed {result.seed})")
    for odds in result.players:
        print(f"  {odds.name:<12} win {odds.win_pct:7.2%}  tie {odds.tie_pct:7.2%}  lose {odds.loss_pct:7.2%}")
    for hand_type, pct in result.hand_type_distribution().items():
        print(f"  {hand_type.label:<16} {pct:7.2%}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
