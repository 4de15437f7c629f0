"""Hand evaluation for Texas Hold'em.

A variant of Cactus Kev's evaluator: five-card hands are resolved with a single
table lookup, six and seven card hands by taking the best five-card subset.
Hand ranks run from 1 (royal flush) to 7462 (7-5-4-3-2 unsuited); lower is
better.
"""
from enum import IntEnum
from itertools import combinations
from typing import Iterable, Mapping, Optional, Sequence, Union

from showdown.errors import CorruptTable, InputError, InvalidHandSize, InvalidRank
from showdown.game.cards import FULL_DECK, Card, prime_product, prime_product_from_rank_mask
from showdown.game.lookup import (
    MAX_FLUSH,
    MAX_FOUR_OF_A_KIND,
    MAX_FULL_HOUSE,
    MAX_HIGH_CARD,
    MAX_PAIR,
    MAX_STRAIGHT,
    MAX_STRAIGHT_FLUSH,
    MAX_THREE_OF_A_KIND,
    MAX_TWO_PAIR,
    LookupTable,
    get_lookup_table,
)
from showdown.utils.logger import get_logger

logger = get_logger(__name__)

CardLike = Union[int, Card]

_VALID_CARDS = frozenset(FULL_DECK)


class HandClass(IntEnum):
    """Poker hand categories (lower is better)."""
    STRAIGHT_FLUSH = 1
    FOUR_OF_A_KIND = 2
    FULL_HOUSE = 3
    FLUSH = 4
    STRAIGHT = 5
    THREE_OF_A_KIND = 6
    TWO_PAIR = 7
    PAIR = 8
    HIGH_CARD = 9


# Inclusive upper hand rank of each class, strongest first.
CLASS_THRESHOLDS: tuple[tuple[int, HandClass], ...] = (
    (MAX_STRAIGHT_FLUSH, HandClass.STRAIGHT_FLUSH),
    (MAX_FOUR_OF_A_KIND, HandClass.FOUR_OF_A_KIND),
    (MAX_FULL_HOUSE, HandClass.FULL_HOUSE),
    (MAX_FLUSH, HandClass.FLUSH),
    (MAX_STRAIGHT, HandClass.STRAIGHT),
    (MAX_THREE_OF_A_KIND, HandClass.THREE_OF_A_KIND),
    (MAX_TWO_PAIR, HandClass.TWO_PAIR),
    (MAX_PAIR, HandClass.PAIR),
    (MAX_HIGH_CARD, HandClass.HIGH_CARD),
)

CLASS_LABELS: dict[HandClass, str] = {
    HandClass.STRAIGHT_FLUSH: "Straight Flush",
    HandClass.FOUR_OF_A_KIND: "Four of a Kind",
    HandClass.FULL_HOUSE: "Full House",
    HandClass.FLUSH: "Flush",
    HandClass.STRAIGHT: "Straight",
    HandClass.THREE_OF_A_KIND: "Three of a Kind",
    HandClass.TWO_PAIR: "Two Pair",
    HandClass.PAIR: "Pair",
    HandClass.HIGH_CARD: "High Card",
}


def _to_int(card: CardLike) -> int:
    if isinstance(card, Card):
        return card.encoded
    if isinstance(card, bool) or card not in _VALID_CARDS:
        raise InputError(f"Not an encoded card: {card!r}")
    return card


def _check_rank(rank: int) -> None:
    if isinstance(rank, bool) or not isinstance(rank, int) or not 1 <= rank <= MAX_HIGH_CARD:
        raise InvalidRank(f"Invalid hand rank: {rank!r}")


def rank_to_class(rank: int) -> HandClass:
    """Get the hand class of a hand rank.

    Raises:
        InvalidRank: If rank is outside 1..7462.
    """
    _check_rank(rank)
    for max_rank, hand_class in CLASS_THRESHOLDS:
        if rank <= max_rank:
            return hand_class
    raise InvalidRank(f"Invalid hand rank: {rank!r}")


def class_to_label(hand_class: HandClass) -> str:
    """Display name of a hand class, e.g. 'Full House'."""
    return CLASS_LABELS[HandClass(hand_class)]


def rank_percentile(rank: int) -> float:
    """Hand rank as a fraction of the worst rank, in (0, 1]. Lower is better.

    Raises:
        InvalidRank: If rank is outside 1..7462.
    """
    _check_rank(rank)
    return rank / MAX_HIGH_CARD


def describe(rank: int) -> str:
    """Display name of the class a hand rank falls in."""
    return class_to_label(rank_to_class(rank))


class Evaluator:
    """Evaluates 5, 6 and 7 card hands against a lookup table.

    The table is never modified, so one table can back any number of
    evaluators.
    """

    def __init__(self, table: Optional[LookupTable] = None):
        self.table = table if table is not None else get_lookup_table()

    def evaluate(self, hole_cards: Sequence[CardLike], board_cards: Sequence[CardLike]) -> int:
        """Get the best hand rank from hole cards and board cards.

        Args:
            hole_cards: Player's hole cards (encoded ints or Card values).
            board_cards: Community cards.

        Returns:
            Hand rank, 1 (best) to 7462 (worst).

        Raises:
            InvalidHandSize: If the combined card count is not 5, 6 or 7.
            InputError: If a value is not one of the 52 encoded cards, or a
                card appears twice.
        """
        return self.evaluate_cards(list(hole_cards) + list(board_cards))

    def evaluate_cards(self, cards: Iterable[CardLike]) -> int:
        """Get the best hand rank from a single collection of 5-7 cards."""
        all_cards = [_to_int(c) for c in cards]
        if len(set(all_cards)) != len(all_cards):
            raise InputError("Hand contains the same card more than once")
        if len(all_cards) == 5:
            return self._five(all_cards)
        if len(all_cards) in (6, 7):
            return min(self._five(combo) for combo in combinations(all_cards, 5))
        raise InvalidHandSize(f"Need 5, 6 or 7 cards, got {len(all_cards)}")

    def _five(self, cards: Sequence[int]) -> int:
        # all five share a suit bit
        if cards[0] & cards[1] & cards[2] & cards[3] & cards[4] & 0xF000:
            hand_or = (cards[0] | cards[1] | cards[2] | cards[3] | cards[4]) >> 16
            return self._lookup(self.table.flush, prime_product_from_rank_mask(hand_or), "flush")
        return self._lookup(self.table.unsuited, prime_product(cards), "unsuited")

    @staticmethod
    def _lookup(table: Mapping[int, int], key: int, name: str) -> int:
        try:
            return table[key]
        except KeyError:
            message = f"Prime product {key} missing from {name} table"
            logger.error(message)
            raise CorruptTable(message) from None

    def rank_to_class(self, rank: int) -> HandClass:
        return rank_to_class(rank)

    def class_to_label(self, hand_class: HandClass) -> str:
        return class_to_label(hand_class)

    def rank_percentile(self, rank: int) -> float:
        return rank_percentile(rank)

    def rank_players(
        self,
        hands: Mapping[str, Sequence[CardLike]],
        board_cards: Sequence[CardLike],
    ) -> list[list[str]]:
        """Evaluate every player's hand and group players by hand rank.

        Args:
            hands: player_id -> hole cards, in seat order.
            board_cards: Community cards.

        Returns:
            Groups of player_ids, strongest first. Players in a group are tied
            and keep their seat order.
        """
        results = []
        for player_id, hole_cards in hands.items():
            rank = self.evaluate(hole_cards, board_cards)
            logger.debug(f"Rank #{rank} {player_id} {describe(rank).lower()}")
            results.append((player_id, rank))
        return group_by_rank(results)


def group_by_rank(results: Sequence[tuple[str, int]]) -> list[list[str]]:
    """Group (player_id, hand rank) pairs into tied groups, best first.

    Args:
        results: List of (player_id, hand rank) tuples.

    Returns:
        List of player groups (ties are in the same group).
    """
    if not results:
        return []

    # stable sort keeps seat order within ties
    sorted_results = sorted(results, key=lambda x: x[1])

    groups: list[list[str]] = []
    current_group: list[str] = [sorted_results[0][0]]
    current_rank = sorted_results[0][1]

    for player_id, rank in sorted_results[1:]:
        if rank == current_rank:
            current_group.append(player_id)
        else:
            groups.append(current_group)
            current_group = [player_id]
            current_rank = rank

    groups.append(current_group)
    return groups
