"""Card representation and the packed integer card codec.

Cards are evaluated as 32-bit integers laid out as::

    +--------+--------+--------+--------+
    |xxxbbbbb|bbbbbbbb|cdhsrrrr|xxpppppp|
    +--------+--------+--------+--------+

    p = prime number of rank (deuce=2, trey=3, four=5, ..., ace=41)
    r = rank index of card (deuce=0, trey=1, ..., ace=12)
    cdhs = suit bit (spades=1, hearts=2, diamonds=4, clubs=8)
    b = bit turned on depending on rank of card

The prime field gives every 5-card rank multiset a unique product, the suit
nibble detects flushes with a single AND, and the rank bits detect straights.
"""
from enum import Enum
from dataclasses import dataclass
from typing import Iterable, Union

from showdown.errors import InvalidRank, InvalidSuit


PRIMES: tuple[int, ...] = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)
STR_RANKS = "23456789TJQKA"


class Suit(str, Enum):
    """Card suits."""
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"

    def __str__(self) -> str:
        return self.value

    @property
    def bit(self) -> int:
        """Suit bit used in the packed encoding."""
        return SUIT_BITS[self]


class Rank(int, Enum):
    """Card ranks (2-14, where 14 is Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {11: "J", 12: "Q", 13: "K", 14: "A"}[self.value]

    @property
    def index(self) -> int:
        """Zero-based rank index (deuce=0 .. ace=12)."""
        return self.value - 2

    @property
    def prime(self) -> int:
        return PRIMES[self.index]


SUIT_BITS: dict[Suit, int] = {
    Suit.SPADES: 1,
    Suit.HEARTS: 2,
    Suit.DIAMONDS: 4,
    Suit.CLUBS: 8,
}
BIT_TO_SUIT: dict[int, Suit] = {bit: suit for suit, bit in SUIT_BITS.items()}

PRETTY_SUITS: dict[Suit, str] = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}

_RANK_NAMES = {"T": 10, "J": 11, "Q": 12, "K": 13, "A": 14}
_SUIT_NAMES = {"spades": Suit.SPADES, "hearts": Suit.HEARTS,
               "diamonds": Suit.DIAMONDS, "clubs": Suit.CLUBS}


def _parse_rank(rank: Union[Rank, int, str]) -> Rank:
    """Resolve a rank given as enum, face value or string."""
    if isinstance(rank, Rank):
        return rank
    if isinstance(rank, bool):
        raise InvalidRank(f"Invalid rank: {rank!r}")
    if isinstance(rank, int):
        try:
            return Rank(rank)
        except ValueError:
            raise InvalidRank(f"Invalid rank: {rank!r}") from None
    if isinstance(rank, str):
        token = rank.strip().upper()
        if token in _RANK_NAMES:
            return Rank(_RANK_NAMES[token])
        if token.isdigit() and 2 <= int(token) <= 10:
            return Rank(int(token))
    raise InvalidRank(f"Invalid rank: {rank!r}")


def _parse_suit(suit: Union[Suit, str]) -> Suit:
    """Resolve a suit given as enum, letter or name."""
    if isinstance(suit, Suit):
        return suit
    if isinstance(suit, str):
        token = suit.strip().lower()
        if token in _SUIT_NAMES:
            return _SUIT_NAMES[token]
        try:
            return Suit(token)
        except ValueError:
            pass
    raise InvalidSuit(f"Invalid suit: {suit!r}")


def encode(rank: Union[Rank, int, str], suit: Union[Suit, str]) -> int:
    """Pack a rank and suit into an encoded card.

    Args:
        rank: Rank enum, face value 2-14, or string like 'A', 'T', '10'.
        suit: Suit enum, letter ('s', 'h', 'd', 'c') or suit name.

    Returns:
        Encoded card integer.

    Raises:
        InvalidRank: If the rank is not one of the 13 card ranks.
        InvalidSuit: If the suit is not one of the 4 suits.
    """
    parsed_rank = _parse_rank(rank)
    parsed_suit = _parse_suit(suit)
    rank_index = parsed_rank.index
    bitrank = (1 << rank_index) << 16
    return bitrank | parsed_suit.bit << 12 | rank_index << 8 | PRIMES[rank_index]


def decode_rank_index(card: int) -> int:
    return (card >> 8) & 0xF


def decode_suit_bit(card: int) -> int:
    return (card >> 12) & 0xF


def decode_bitrank(card: int) -> int:
    return (card >> 16) & 0x1FFF


def decode_prime(card: int) -> int:
    return card & 0x3F


def prime_product(cards: Iterable[int]) -> int:
    """Multiply the prime fields of the given cards.

    Used as the key for hands that are not flushes.
    """
    product = 1
    for card in cards:
        product *= card & 0x3F
    return product


def prime_product_from_rank_mask(mask: int) -> int:
    """Multiply the primes of every rank bit set in a 13-bit mask.

    Only meaningful for hands of five different ranks (flushes, straights,
    high cards), where the mask alone identifies the hand.
    """
    product = 1
    for i, prime in enumerate(PRIMES):
        if mask & (1 << i):
            product *= prime
    return product


def card_to_string(card: int) -> str:
    """Convert an encoded card to a short string like 'Ah' or 'Td'."""
    suit = BIT_TO_SUIT[decode_suit_bit(card)]
    return f"{STR_RANKS[decode_rank_index(card)]}{suit.value}"


def pretty_card(card: int) -> str:
    """Convert an encoded card to a string with a unicode suit symbol."""
    suit = BIT_TO_SUIT[decode_suit_bit(card)]
    return f"{STR_RANKS[decode_rank_index(card)]}{PRETTY_SUITS[suit]}"


def card_from_string(s: str) -> int:
    """Parse an encoded card from a string like 'Ah', '10s', '2c'."""
    s = s.strip()
    if len(s) < 2:
        raise InvalidRank(f"Invalid card string: {s!r}")
    return encode(s[:-1], s[-1])


def cards_from_string(cards: str) -> list[int]:
    """Parse space-separated cards like 'Ah Kh Qh'."""
    return [card_from_string(c) for c in cards.split()]


@dataclass(frozen=True)
class Card:
    """A playing card."""
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        object.__setattr__(self, "rank", _parse_rank(self.rank))
        object.__setattr__(self, "suit", _parse_suit(self.suit))

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return str(self)

    def __int__(self) -> int:
        return self.encoded

    @property
    def encoded(self) -> int:
        """Packed integer form used by the evaluator."""
        return encode(self.rank, self.suit)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"rank": self.rank.value, "suit": self.suit.value}

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        """Create from dictionary."""
        return cls(rank=_parse_rank(data["rank"]), suit=_parse_suit(data["suit"]))

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse card from string like 'Ah', '10s', '2c'.

        Args:
            s: Card string (rank + suit).

        Returns:
            Card instance.
        """
        s = s.strip()
        if len(s) < 2:
            raise InvalidRank(f"Invalid card string: {s!r}")
        return cls(rank=_parse_rank(s[:-1]), suit=_parse_suit(s[-1]))

    @classmethod
    def from_encoded(cls, card: int) -> "Card":
        """Rebuild a Card from its packed integer form."""
        return cls(
            rank=Rank(decode_rank_index(card) + 2),
            suit=BIT_TO_SUIT[decode_suit_bit(card)],
        )


FULL_DECK: tuple[int, ...] = tuple(
    encode(rank, suit) for suit in Suit for rank in Rank
)
