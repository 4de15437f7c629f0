"""Poker hand evaluation and pot settlement."""
from .errors import (
    ShowdownError,
    InputError,
    InvalidRank,
    InvalidSuit,
    InvalidHandSize,
    InvalidContribution,
    InvariantViolation,
    CorruptTable,
    TableConstructionError,
    NoWinnerForPot,
    SettlementMismatch,
)
from .game import (
    Card,
    Rank,
    Suit,
    encode,
    Evaluator,
    HandClass,
    LookupTable,
    SidePot,
    Pot,
    derive_side_pots,
    settle,
)

__version__ = "0.1.0"

__all__ = [
    "ShowdownError",
    "InputError",
    "InvalidRank",
    "InvalidSuit",
    "InvalidHandSize",
    "InvalidContribution",
    "InvariantViolation",
    "CorruptTable",
    "TableConstructionError",
    "NoWinnerForPot",
    "SettlementMismatch",
    "Card",
    "Rank",
    "Suit",
    "encode",
    "Evaluator",
    "HandClass",
    "LookupTable",
    "SidePot",
    "Pot",
    "derive_side_pots",
    "settle",
]
