"""Exceptions raised by the engine.

Every error is a ``ValueError``: the engine only ever rejects bad input, and
the caller decides whether to retry with corrected cards or settings.
"""

from __future__ import annotations


class PokerEngineError(ValueError):
    pass


class InvalidHandCompositionError(PokerEngineError):
    """Card count or card grouping does not fit the variant."""


class DuplicateCardError(PokerEngineError):
    """The same card appears more than once in one input set."""


class InvalidWildCardInputError(PokerEngineError):
    """A wild-card rule received empty or malformed cards or context."""


class InvalidTrialCountError(PokerEngineError):
    """Simulation trial count outside the configured bounds."""


class UnknownVariantError(PokerEngineError):
    pass
