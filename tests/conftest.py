"""Shared fixtures."""
import pytest

from showdown.game.hand_eval import Evaluator
from showdown.game.lookup import LookupTable


@pytest.fixture(scope="session")
def table() -> LookupTable:
    """One lookup table shared by every test."""
    return LookupTable()


@pytest.fixture(scope="session")
def evaluator(table) -> Evaluator:
    """Evaluator backed by the shared table."""
    return Evaluator(table)
