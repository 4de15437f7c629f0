"""Exceptions raised by hand evaluation and settlement.

Input errors are the caller's fault and are raised before any work is done.
Invariant violations mean a table or ledger is internally inconsistent; they
are never recovered from with a default rank or payout.
"""


class ShowdownError(Exception):
    """Base class for all showdown errors."""
    pass


class InputError(ShowdownError, ValueError):
    """Invalid input supplied by the caller."""
    pass


class InvalidRank(InputError):
    """Unknown card rank, or a hand rank outside 1..7462."""
    pass


class InvalidSuit(InputError):
    """Unknown card suit."""
    pass


class InvalidHandSize(InputError):
    """Hand does not contain 5, 6 or 7 cards."""
    pass


class InvalidContribution(InputError):
    """Negative or non-integer chip contribution."""
    pass


class InvariantViolation(ShowdownError, RuntimeError):
    """Internal state is inconsistent. Never expected in correct operation."""
    pass


class CorruptTable(InvariantViolation):
    """A lookup key that must exist is missing from the table."""
    pass


class TableConstructionError(InvariantViolation):
    """Lookup table does not hold the expected entries."""
    pass


class NoWinnerForPot(InvariantViolation):
    """No ranked player contributed to a pot layer."""
    pass


class SettlementMismatch(InvariantViolation):
    """Payouts for a pot do not add up to the pot total."""
    pass
