"""Lookup tables mapping a 5-card hand's prime product to its hand rank.

Number of distinct hand values:

    Straight Flush      10
    Four of a Kind     156    [(13 choose 2) * (2 choose 1)]
    Full Houses        156    [(13 choose 2) * (2 choose 1)]
    Flush             1277    [(13 choose 5) - 10 straight flushes]
    Straight            10
    Three of a Kind    858    [(13 choose 3) * (3 choose 1)]
    Two Pair           858    [(13 choose 3) * (3 choose 2)]
    One Pair          2860    [(13 choose 4) * (4 choose 1)]
    High Card       + 1277    [(13 choose 5) - 10 straights]
    -------------------------
    TOTAL             7462

Rank 1 is a royal flush, rank 7462 is 7-5-4-3-2 unsuited.
"""
import itertools
from collections import Counter
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, TextIO, Union

from showdown.config import config
from showdown.errors import TableConstructionError
from showdown.game.cards import PRIMES, prime_product_from_rank_mask
from showdown.utils.logger import get_logger

logger = get_logger(__name__)


MAX_STRAIGHT_FLUSH = 10
MAX_FOUR_OF_A_KIND = 166
MAX_FULL_HOUSE = 322
MAX_FLUSH = 1599
MAX_STRAIGHT = 1609
MAX_THREE_OF_A_KIND = 2467
MAX_TWO_PAIR = 3325
MAX_PAIR = 6185
MAX_HIGH_CARD = 7462

FLUSH_TABLE_SIZE = 1287
UNSUITED_TABLE_SIZE = 6175

# Royal flush first, the 5-high wheel last.
STRAIGHT_FLUSH_MASKS: tuple[int, ...] = (
    0b1111100000000,
    0b0111110000000,
    0b0011111000000,
    0b0001111100000,
    0b0000111110000,
    0b0000011111000,
    0b0000001111100,
    0b0000000111110,
    0b0000000011111,
    0b1000000001111,
)

FLUSH_FILENAME = "flush.csv"
UNSUITED_FILENAME = "unsuited.csv"

PathOrStream = Union[str, Path, TextIO]


def next_bit_sequences(bits: int, limit: int = 1 << 13) -> Iterator[int]:
    """Yield the integers after `bits` that have the same number of set bits.

    Values come in increasing order and stop before `limit`. Each call starts
    a fresh sequence.

    Args:
        bits: Starting bit pattern (not itself yielded). Must be positive.
        limit: Exclusive upper bound on yielded values.
    """
    current = bits
    while True:
        t = (current | (current - 1)) + 1
        current = t | ((((t & -t) // (current & -current)) >> 1) - 1)
        if current >= limit:
            return
        yield current


def five_card_rank_masks() -> list[int]:
    """Every 13-bit mask with five bits set, lowest first."""
    start = 0b11111
    masks = [start]
    for mask in next_bit_sequences(start):
        masks.append(mask)
        if len(masks) == FLUSH_TABLE_SIZE:
            break
    return masks


class LookupTable:
    """Flush and unsuited prime-product tables.

    Built once, read-only afterwards. Pass `flush` and `unsuited` to wrap
    previously built (for example loaded) mappings instead of building.
    """

    def __init__(
        self,
        flush: Optional[Mapping[int, int]] = None,
        unsuited: Optional[Mapping[int, int]] = None,
    ):
        if flush is None and unsuited is None:
            flush_lookup: dict[int, int] = {}
            unsuited_lookup: dict[int, int] = {}
            self._flushes(flush_lookup, unsuited_lookup)
            self._multiples(unsuited_lookup)
        elif flush is not None and unsuited is not None:
            flush_lookup = dict(flush)
            unsuited_lookup = dict(unsuited)
        else:
            raise TableConstructionError("Both flush and unsuited tables are required")

        _validate(flush_lookup, unsuited_lookup)
        self.flush: Mapping[int, int] = MappingProxyType(flush_lookup)
        self.unsuited: Mapping[int, int] = MappingProxyType(unsuited_lookup)

    def _flushes(self, flush_lookup: dict[int, int], unsuited_lookup: dict[int, int]) -> None:
        """Straight flushes, flushes, and the straights and high cards sharing their masks."""
        straight_flushes = set(STRAIGHT_FLUSH_MASKS)
        flushes = [m for m in five_card_rank_masks() if m not in straight_flushes]
        # strongest first
        flushes.reverse()

        _fill(flush_lookup, 1, STRAIGHT_FLUSH_MASKS)
        _fill(flush_lookup, MAX_FULL_HOUSE + 1, flushes)

        # same rank patterns, no flush
        _fill(unsuited_lookup, MAX_FLUSH + 1, STRAIGHT_FLUSH_MASKS)
        _fill(unsuited_lookup, MAX_PAIR + 1, flushes)

    def _multiples(self, unsuited_lookup: dict[int, int]) -> None:
        """Quads, full houses, trips, two pair and one pair."""
        backwards_ranks = list(range(len(PRIMES) - 1, -1, -1))

        # Four of a kind
        rank = MAX_STRAIGHT_FLUSH + 1
        for quad in backwards_ranks:
            for kicker in backwards_ranks:
                if kicker == quad:
                    continue
                unsuited_lookup[PRIMES[quad] ** 4 * PRIMES[kicker]] = rank
                rank += 1

        # Full house
        rank = MAX_FOUR_OF_A_KIND + 1
        for trips in backwards_ranks:
            for pair in backwards_ranks:
                if pair == trips:
                    continue
                unsuited_lookup[PRIMES[trips] ** 3 * PRIMES[pair] ** 2] = rank
                rank += 1

        # Three of a kind
        rank = MAX_STRAIGHT + 1
        for trips in backwards_ranks:
            kickers = [k for k in backwards_ranks if k != trips]
            for k1, k2 in itertools.combinations(kickers, 2):
                unsuited_lookup[PRIMES[trips] ** 3 * PRIMES[k1] * PRIMES[k2]] = rank
                rank += 1

        # Two pair
        rank = MAX_THREE_OF_A_KIND + 1
        for high, low in itertools.combinations(backwards_ranks, 2):
            for kicker in backwards_ranks:
                if kicker in (high, low):
                    continue
                unsuited_lookup[PRIMES[high] ** 2 * PRIMES[low] ** 2 * PRIMES[kicker]] = rank
                rank += 1

        # One pair
        rank = MAX_TWO_PAIR + 1
        for pair in backwards_ranks:
            kickers = [k for k in backwards_ranks if k != pair]
            for k1, k2, k3 in itertools.combinations(kickers, 3):
                product = PRIMES[pair] ** 2 * PRIMES[k1] * PRIMES[k2] * PRIMES[k3]
                unsuited_lookup[product] = rank
                rank += 1

    def save(self, directory: Union[str, Path]) -> None:
        """Write both tables into `directory` as CSV files."""
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        write_table(self.flush, path / FLUSH_FILENAME)
        write_table(self.unsuited, path / UNSUITED_FILENAME)
        logger.info(f"Saved lookup tables to {path}")

    @classmethod
    def load(cls, directory: Union[str, Path]) -> "LookupTable":
        """Load and validate tables previously written with `save`."""
        path = Path(directory)
        table = cls(
            flush=read_table(path / FLUSH_FILENAME),
            unsuited=read_table(path / UNSUITED_FILENAME),
        )
        logger.info(f"Loaded lookup tables from {path}")
        return table

    @staticmethod
    def is_cached(directory: Union[str, Path]) -> bool:
        path = Path(directory)
        return (path / FLUSH_FILENAME).is_file() and (path / UNSUITED_FILENAME).is_file()

    def __len__(self) -> int:
        return len(self.flush) + len(self.unsuited)


def _fill(lookup: dict[int, int], rank: int, masks) -> None:
    """Assign consecutive ranks starting at `rank` to each mask's prime product."""
    for mask in masks:
        lookup[prime_product_from_rank_mask(mask)] = rank
        rank += 1


def _class_counts(ranks) -> Counter:
    """Count ranks per class boundary."""
    bounds = (MAX_STRAIGHT_FLUSH, MAX_FOUR_OF_A_KIND, MAX_FULL_HOUSE, MAX_FLUSH,
              MAX_STRAIGHT, MAX_THREE_OF_A_KIND, MAX_TWO_PAIR, MAX_PAIR, MAX_HIGH_CARD)
    counts: Counter = Counter()
    for rank in ranks:
        for bound in bounds:
            if rank <= bound:
                counts[bound] += 1
                break
    return counts


def _validate(flush: Mapping[int, int], unsuited: Mapping[int, int]) -> None:
    """Check sizes, class placement, and that every rank 1..7462 appears once."""
    problems = []
    if len(flush) != FLUSH_TABLE_SIZE:
        problems.append(f"flush table has {len(flush)} entries, expected {FLUSH_TABLE_SIZE}")
    if len(unsuited) != UNSUITED_TABLE_SIZE:
        problems.append(
            f"unsuited table has {len(unsuited)} entries, expected {UNSUITED_TABLE_SIZE}"
        )

    flush_classes = _class_counts(flush.values())
    if set(flush_classes) - {MAX_STRAIGHT_FLUSH, MAX_FLUSH}:
        problems.append("flush table holds ranks outside the straight flush and flush classes")

    all_ranks = sorted(itertools.chain(flush.values(), unsuited.values()))
    if all_ranks != list(range(1, MAX_HIGH_CARD + 1)):
        problems.append(f"ranks do not cover 1..{MAX_HIGH_CARD} exactly once")

    if problems:
        message = "Invalid lookup table: " + "; ".join(problems)
        logger.error(message)
        raise TableConstructionError(message)


def write_table(table: Mapping[int, int], destination: PathOrStream) -> None:
    """Write one table as `prime_product,rank` lines.

    Args:
        table: Prime product to rank mapping.
        destination: File path or open text stream.
    """
    if isinstance(destination, (str, Path)):
        with open(destination, "w", encoding="utf-8") as f:
            write_table(table, f)
        return

    for prime_prod, rank in table.items():
        destination.write(f"{prime_prod},{rank}\n")


def read_table(source: PathOrStream) -> dict[int, int]:
    """Read a table written by `write_table`.

    Raises:
        TableConstructionError: If a line is not a `prime_product,rank` pair.
    """
    if isinstance(source, (str, Path)):
        with open(source, encoding="utf-8") as f:
            return read_table(f)

    table: dict[int, int] = {}
    for line_no, line in enumerate(source, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            prime_prod, rank = (int(field) for field in line.split(","))
        except ValueError:
            raise TableConstructionError(
                f"Malformed lookup table line {line_no}: {line!r}"
            ) from None
        table[prime_prod] = rank
    return table


def get_lookup_table(cache_dir: Optional[Union[str, Path]] = None) -> LookupTable:
    """Build a lookup table, going through the on-disk cache when configured.

    Args:
        cache_dir: Cache directory. Defaults to `config.table_cache_dir`;
            empty means no caching.

    Returns:
        A new LookupTable.
    """
    cache = cache_dir if cache_dir is not None else config.table_cache_dir
    if cache and LookupTable.is_cached(cache):
        return LookupTable.load(cache)

    table = LookupTable()
    logger.info(f"Built lookup tables: {len(table.flush)} flush, {len(table.unsuited)} unsuited")
    if cache:
        table.save(cache)
    return table
