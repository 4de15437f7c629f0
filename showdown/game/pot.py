"""Pot, side-pot calculation and settlement."""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

from showdown.errors import (
    InputError,
    InvalidContribution,
    NoWinnerForPot,
    SettlementMismatch,
)
from showdown.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SidePot:
    """One layer of the pot: what each eligible player put into it."""
    contributions: Mapping[str, int]

    def __post_init__(self) -> None:
        _check_contributions(self.contributions)
        object.__setattr__(self, "contributions", MappingProxyType(dict(self.contributions)))

    def total(self) -> int:
        """Total chips in this pot."""
        return sum(self.contributions.values())

    @property
    def players(self) -> list[str]:
        """Contributing player ids, in insertion order."""
        return list(self.contributions)

    def __contains__(self, user_id: object) -> bool:
        """True if the player put chips into this pot."""
        return self.contributions.get(user_id, 0) > 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "amount": self.total(),
            "contributions": dict(self.contributions),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SidePot":
        """Restore from dictionary."""
        return cls(contributions=data["contributions"])


def _check_contributions(contributions: Mapping[str, int]) -> None:
    for user_id, amount in contributions.items():
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidContribution(f"Contribution for {user_id} must be an integer, got {amount!r}")
        if amount < 0:
            raise InvalidContribution(f"Contribution for {user_id} cannot be negative: {amount}")


def derive_side_pots(contributions: Mapping[str, int]) -> list[SidePot]:
    """Split a contribution ledger into side pots.

    Each layer takes the smallest remaining contribution from every player
    still in the ledger; players whose contribution is used up drop out of
    later layers.

    Args:
        contributions: user_id -> total chips put in this hand.

    Returns:
        Side pots, the layer every contributor shares first.

    Raises:
        InvalidContribution: If an amount is negative or not an integer.
    """
    _check_contributions(contributions)

    remaining = {user_id: amount for user_id, amount in contributions.items() if amount > 0}
    pots: list[SidePot] = []

    while remaining:
        level = min(remaining.values())
        pots.append(SidePot({user_id: level for user_id in remaining}))
        remaining = {
            user_id: amount - level
            for user_id, amount in remaining.items()
            if amount - level > 0
        }

    logger.debug(f"Calculated {len(pots)} side pots")
    return pots


def split_pot(amount: int, winners: Sequence[str]) -> dict[str, int]:
    """Split an amount evenly, odd chips going one each to the first winners.

    Args:
        amount: Chips to split.
        winners: Winner ids in seat order.

    Returns:
        Dict of user_id -> share.
    """
    share = amount // len(winners)
    remainder = amount % len(winners)
    return {
        winner: share + (1 if i < remainder else 0)
        for i, winner in enumerate(winners)
    }


def _check_groups(ranked_groups: Sequence[Sequence[str]]) -> None:
    seen: set[str] = set()
    for group in ranked_groups:
        for user_id in group:
            if user_id in seen:
                raise InputError(f"Player {user_id} appears in more than one ranked group")
            seen.add(user_id)


def settle(ranked_groups: Sequence[Sequence[str]], pots: Sequence[SidePot]) -> dict[str, int]:
    """Calculate how much each player wins.

    Each pot goes to the strongest group holding at least one of its
    contributors, split among that group's contributors to the pot.

    Args:
        ranked_groups: Groups of player ids, strongest hand first. Players in
            a group are tied and listed in seat order.
        pots: Side pots from `derive_side_pots`.

    Returns:
        Dict of user_id -> amount won.

    Raises:
        NoWinnerForPot: If no ranked player contributed to a pot.
        SettlementMismatch: If a pot's shares do not add up to its total.
    """
    _check_groups(ranked_groups)
    winnings: dict[str, int] = {}

    for pot_idx, pot in enumerate(pots):
        amount = pot.total()
        if amount == 0:
            continue

        winners: list[str] = []
        for group in ranked_groups:
            winners = [user_id for user_id in group if user_id in pot]
            if winners:
                break

        if not winners:
            message = f"No ranked player contributed to pot {pot_idx} ({amount} chips)"
            logger.error(message)
            raise NoWinnerForPot(message)

        shares = split_pot(amount, winners)
        if sum(shares.values()) != amount:
            message = f"Pot {pot_idx} paid {sum(shares.values())} of {amount} chips"
            logger.error(message)
            raise SettlementMismatch(message)

        for winner, share in shares.items():
            winnings[winner] = winnings.get(winner, 0) + share
        logger.debug(f"Pot {pot_idx} ({amount} chips) won by {', '.join(winners)}")

    return winnings


@dataclass
class Pot:
    """Contribution ledger for a hand."""

    side_pots: list[SidePot] = field(default_factory=list)
    _contributions: dict[str, int] = field(default_factory=dict)  # user_id -> total contributed

    def add_bet(self, user_id: str, amount: int) -> None:
        """Add a bet to the pot.

        Args:
            user_id: Player's user ID.
            amount: Bet amount.
        """
        _check_contributions({user_id: amount})
        if user_id not in self._contributions:
            self._contributions[user_id] = 0
        self._contributions[user_id] += amount

    def calculate_side_pots(self) -> list[SidePot]:
        """Derive side pots from the current contributions."""
        self.side_pots = derive_side_pots(self._contributions)
        return self.side_pots

    def settle(self, ranked_groups: Sequence[Sequence[str]]) -> dict[str, int]:
        """Settle the current contributions among ranked player groups."""
        return settle(ranked_groups, self.calculate_side_pots())

    def get_total(self) -> int:
        """Get total pot amount."""
        return sum(self._contributions.values())

    @property
    def contributions(self) -> dict[str, int]:
        """Copy of the contribution ledger."""
        return dict(self._contributions)

    def reset(self) -> None:
        """Reset pot for new hand."""
        self.side_pots = []
        self._contributions = {}

    def get_contribution(self, user_id: str) -> int:
        """Get a player's total contribution to the pot."""
        return self._contributions.get(user_id, 0)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.get_total(),
            "side_pots": [sp.to_dict() for sp in self.side_pots],
            "contributions": dict(self._contributions),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Pot":
        """Restore from dictionary."""
        pot = cls()
        pot.side_pots = [SidePot.from_dict(sp) for sp in data.get("side_pots", [])]
        pot._contributions = dict(data.get("contributions", {}))
        return pot
