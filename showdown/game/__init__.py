"""Game engine module."""
from .cards import Card, Suit, Rank, encode, card_from_string, cards_from_string, card_to_string
from .lookup import LookupTable, get_lookup_table, write_table, read_table
from .hand_eval import (
    Evaluator,
    HandClass,
    rank_to_class,
    class_to_label,
    rank_percentile,
    group_by_rank,
)
from .pot import Pot, SidePot, derive_side_pots, settle

__all__ = [
    "Card",
    "Suit",
    "Rank",
    "encode",
    "card_from_string",
    "cards_from_string",
    "card_to_string",
    "LookupTable",
    "get_lookup_table",
    "write_table",
    "read_table",
    "Evaluator",
    "HandClass",
    "rank_to_class",
    "class_to_label",
    "rank_percentile",
    "group_by_rank",
    "Pot",
    "SidePot",
    "derive_side_pots",
    "settle",
]
