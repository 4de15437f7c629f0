"""Tests for hand evaluation."""
import random
from collections import Counter
from itertools import combinations
from types import SimpleNamespace

import pytest

from showdown.errors import CorruptTable, InputError, InvalidHandSize, InvalidRank
from showdown.game.cards import FULL_DECK, Card, cards_from_string, decode_rank_index, decode_suit_bit
from showdown.game.hand_eval import (
    Evaluator,
    HandClass,
    class_to_label,
    describe,
    group_by_rank,
    rank_percentile,
    rank_to_class,
)


def make_cards(cards: str) -> list[int]:
    """Helper to create encoded cards from space-separated string."""
    return cards_from_string(cards)


def naive_class(cards: list[int]) -> HandClass:
    """Classify five cards by counting ranks and suits."""
    counts = sorted(Counter(decode_rank_index(c) for c in cards).values(), reverse=True)
    ranks = sorted({decode_rank_index(c) for c in cards})
    is_flush = len({decode_suit_bit(c) for c in cards}) == 1
    is_straight = len(ranks) == 5 and (ranks[-1] - ranks[0] == 4 or ranks == [0, 1, 2, 3, 12])
    
    if is_straight and is_flush:
        return HandClass.STRAIGHT_FLUSH
    if counts[0] == 4:
        return HandClass.FOUR_OF_A_KIND
    if counts[:2] == [3, 2]:
        return HandClass.FULL_HOUSE
    if is_flush:
        return HandClass.FLUSH
    if is_straight:
        return HandClass.STRAIGHT
    if counts[0] == 3:
        return HandClass.THREE_OF_A_KIND
    if counts[:2] == [2, 2]:
        return HandClass.TWO_PAIR
    if counts[0] == 2:
        return HandClass.PAIR
    return HandClass.HIGH_CARD


class TestHandRanking:
    """Test individual hand rankings."""
    
    @pytest.mark.parametrize("cards, expected", [
        ("Th Jh Qh Kh Ah", 1),
        ("9h Th Jh Qh Kh", 2),
        ("Ah 2h 3h 4h 5h", 10),
        ("Ah Ad Ac As Kh", 11),
        ("2h 2d 2c 2s 3h", 166),
        ("Ah Ad Ac Kh Ks", 167),
        ("2h 2d 2c 3h 3s", 322),
        ("Ah Kh Qh Jh 9h", 323),
        ("7h 5h 4h 3h 2h", 1599),
        ("Ah Kd Qc Jh Ts", 1600),
        ("Ah 2d 3c 4h 5s", 1609),
        ("Ah Ad Ac Kh Qs", 1610),
        ("2h 2d 2c 4h 3s", 2467),
        ("Ah Ad Kc Kh Qs", 2468),
        ("3h 3d 2c 2h 4s", 3325),
        ("Ah Ad Kc Qh Js", 3326),
        ("2h 2d 5c 4h 3s", 6185),
        ("Ah Kd Qc Jh 9s", 6186),
        ("7h 5d 4c 3h 2s", 7462),
    ])
    def test_boundary_hands(self, evaluator, cards, expected):
        """Test the best and worst hand of every class."""
        assert evaluator.evaluate_cards(make_cards(cards)) == expected
    
    @pytest.mark.parametrize("cards, expected", [
        ("2h 5d 8c Jh Ks", HandClass.HIGH_CARD),
        ("2h 2d 8c Jh Ks", HandClass.PAIR),
        ("2h 2d 8c 8h Ks", HandClass.TWO_PAIR),
        ("Jh Jd Jc 8h Ks", HandClass.THREE_OF_A_KIND),
        ("5h 6d 7c 8h 9s", HandClass.STRAIGHT),
        ("2h 5h 8h Jh Kh", HandClass.FLUSH),
        ("Jh Jd Jc 8h 8s", HandClass.FULL_HOUSE),
        ("Jh Jd Jc Js Ks", HandClass.FOUR_OF_A_KIND),
        ("5h 6h 7h 8h 9h", HandClass.STRAIGHT_FLUSH),
    ])
    def test_hand_classes(self, evaluator, cards, expected):
        """Test class detection for each category."""
        rank = evaluator.evaluate_cards(make_cards(cards))
        assert rank_to_class(rank) == expected
    
    def test_royal_flush_in_every_suit(self, evaluator):
        """Test suit does not change the rank."""
        for suit in "shdc":
            cards = make_cards(" ".join(f"{r}{suit}" for r in "TJQKA"))
            assert evaluator.evaluate_cards(cards) == 1
    
    def test_accepts_card_objects(self, evaluator):
        """Test Card values evaluate like encoded ints."""
        cards = [Card.from_string(c) for c in "Ah Kh Qh Jh Th".split()]
        assert evaluator.evaluate_cards(cards) == 1
    
    def test_random_hands_match_naive_classes(self, evaluator):
        """Test classes agree with a counting classifier."""
        rng = random.Random(1234)
        for _ in range(2000):
            cards = rng.sample(FULL_DECK, 5)
            assert rank_to_class(evaluator.evaluate_cards(cards)) == naive_class(cards)


class TestBestHandSelection:
    """Test selecting best hand from 6 and 7 cards."""
    
    def test_best_from_seven(self, evaluator):
        """Test finding best 5-card hand from 7 cards."""
        rank = evaluator.evaluate(make_cards("Ah Kh"), make_cards("Qh Jh Th 2c 3d"))
        assert rank == 1
    
    def test_best_from_six(self, evaluator):
        """Test finding best 5-card hand from 6 cards."""
        rank = evaluator.evaluate(make_cards("Ah As"), make_cards("Ad Ac 2h 3c"))
        assert rank_to_class(rank) == HandClass.FOUR_OF_A_KIND
    
    def test_five_cards_total(self, evaluator):
        """Test hole cards plus a flop."""
        rank = evaluator.evaluate(make_cards("Ah Kd"), make_cards("Qc Jh Ts"))
        assert rank == 1600
    
    def test_uses_one_hole_card(self, evaluator):
        """Test when best hand uses one hole card."""
        rank = evaluator.evaluate(make_cards("Ah 2c"), make_cards("Kh Qh Jh Th 3d"))
        assert rank == 1
    
    def test_plays_the_board(self, evaluator):
        """Test when board is the best hand."""
        rank = evaluator.evaluate(make_cards("2c 3d"), make_cards("Ah Kh Qh Jh Th"))
        assert rank == 1
    
    def test_seven_is_min_of_subsets(self, evaluator):
        """Test 7-card rank equals the best 5-card subset."""
        rng = random.Random(42)
        for _ in range(300):
            cards = rng.sample(FULL_DECK, 7)
            best = min(evaluator.evaluate_cards(combo) for combo in combinations(cards, 5))
            assert evaluator.evaluate(cards[:2], cards[2:]) == best
    
    def test_order_does_not_matter(self, evaluator):
        """Test shuffling the input cards keeps the rank."""
        rng = random.Random(7)
        for _ in range(300):
            cards = rng.sample(FULL_DECK, rng.choice((5, 6, 7)))
            expected = evaluator.evaluate_cards(cards)
            shuffled = cards[:]
            rng.shuffle(shuffled)
            assert evaluator.evaluate_cards(shuffled) == expected
    
    @pytest.mark.parametrize("hole, board", [
        ("Ah Kh", ""),
        ("Ah Kh", "Qh Jh"),
        ("Ah Kh", "Qh Jh Th 9h 8h 7h"),
        ("Ah", "Kh Qh Jh"),
    ])
    def test_invalid_hand_size(self, evaluator, hole, board):
        """Test card counts other than 5, 6 or 7 are rejected."""
        with pytest.raises(InvalidHandSize):
            evaluator.evaluate(make_cards(hole), make_cards(board))
    
    def test_duplicate_cards(self, evaluator):
        """Test the same card twice is rejected."""
        with pytest.raises(InputError):
            evaluator.evaluate(make_cards("Ah Kh"), make_cards("Ah Qd Jc 2s 3s"))

    @pytest.mark.parametrize("cards", [
        [41, 41 | 1 << 8, 41 | 2 << 8, 41 | 3 << 8, 37],
        [1, 2, 3, 4, 5],
    ])
    def test_rejects_values_that_are_not_cards(self, evaluator, cards):
        """Test ints outside the 52 encoded cards are rejected, not looked up."""
        with pytest.raises(InputError):
            evaluator.evaluate_cards(cards)
    
    def test_rejects_bool_card(self, evaluator):
        """Test a bool is not accepted as a card."""
        with pytest.raises(InputError):
            evaluator.evaluate(make_cards("Ah Kh"), make_cards("Qh Jh") + [True])
    
    def test_missing_key_is_corrupt_table(self):
        """Test a lookup miss raises instead of guessing a rank."""
        evaluator = Evaluator(SimpleNamespace(flush={}, unsuited={}))
        with pytest.raises(CorruptTable):
            evaluator.evaluate_cards(make_cards("2h 5d 8c Jh Ks"))
        with pytest.raises(CorruptTable):
            evaluator.evaluate_cards(make_cards("2h 5h 8h Jh Kh"))
    
    def test_evaluators_share_table(self, table):
        """Test two evaluators over one table agree."""
        first, second = Evaluator(table), Evaluator(table)
        cards = make_cards("Ah Ad Kc Kh Qs 2d 3c")
        assert first.table is second.table
        assert first.evaluate_cards(cards) == second.evaluate_cards(cards)


class TestRankClasses:
    """Test hand rank classification helpers."""
    
    @pytest.mark.parametrize("rank, expected", [
        (1, HandClass.STRAIGHT_FLUSH),
        (10, HandClass.STRAIGHT_FLUSH),
        (11, HandClass.FOUR_OF_A_KIND),
        (166, HandClass.FOUR_OF_A_KIND),
        (167, HandClass.FULL_HOUSE),
        (322, HandClass.FULL_HOUSE),
        (323, HandClass.FLUSH),
        (1599, HandClass.FLUSH),
        (1600, HandClass.STRAIGHT),
        (1609, HandClass.STRAIGHT),
        (1610, HandClass.THREE_OF_A_KIND),
        (2467, HandClass.THREE_OF_A_KIND),
        (2468, HandClass.TWO_PAIR),
        (3325, HandClass.TWO_PAIR),
        (3326, HandClass.PAIR),
        (6185, HandClass.PAIR),
        (6186, HandClass.HIGH_CARD),
        (7462, HandClass.HIGH_CARD),
    ])
    def test_thresholds(self, rank, expected):
        """Test class boundaries are inclusive maxima."""
        assert rank_to_class(rank) == expected
    
    @pytest.mark.parametrize("rank", [0, -1, 7463, 10000])
    def test_invalid_rank(self, rank):
        """Test ranks outside 1..7462 are rejected."""
        with pytest.raises(InvalidRank):
            rank_to_class(rank)
    
    @pytest.mark.parametrize("rank", [0, -1, 7463])
    def test_percentile_invalid_rank(self, rank):
        """Test percentile rejects ranks outside 1..7462."""
        with pytest.raises(InvalidRank):
            rank_percentile(rank)
    
    def test_labels(self):
        """Test display names."""
        assert class_to_label(HandClass.STRAIGHT_FLUSH) == "Straight Flush"
        assert class_to_label(HandClass.FOUR_OF_A_KIND) == "Four of a Kind"
        assert class_to_label(HandClass.TWO_PAIR) == "Two Pair"
        assert class_to_label(HandClass.PAIR) == "Pair"
        assert class_to_label(HandClass.HIGH_CARD) == "High Card"
        assert len({class_to_label(c) for c in HandClass}) == 9
    
    def test_describe(self):
        """Test describing a hand rank."""
        assert describe(1) == "Straight Flush"
        assert describe(322) == "Full House"
    
    def test_percentile(self, evaluator):
        """Test rank as a fraction of the worst rank."""
        assert rank_percentile(7462) == 1.0
        assert rank_percentile(1) == pytest.approx(1 / 7462)
        assert evaluator.rank_percentile(3731) == pytest.approx(0.5)
    
    def test_evaluator_helpers(self, evaluator):
        """Test evaluator delegates to module helpers."""
        assert evaluator.rank_to_class(1609) == HandClass.STRAIGHT
        assert evaluator.class_to_label(HandClass.FLUSH) == "Flush"


class TestHandComparison:
    """Test grouping players by hand strength."""
    
    def test_higher_class_wins(self, evaluator):
        """Test that a straight beats a pair."""
        groups = evaluator.rank_players(
            {"player1": make_cards("2h 2d"), "player2": make_cards("6d 7c")},
            make_cards("8c 9s Th Ks 3d"),
        )
        assert groups == [["player2"], ["player1"]]
    
    def test_kicker_breaks_tie(self, evaluator):
        """Test kicker decides between equal pairs."""
        groups = evaluator.rank_players(
            {"player1": make_cards("Ah Qd"), "player2": make_cards("As Kd")},
            make_cards("Ac 8c 5h 3s 2d"),
        )
        assert groups[0] == ["player2"]
    
    def test_split_pot(self, evaluator):
        """Test identical hands share a group in seat order."""
        groups = evaluator.rank_players(
            {"player3": make_cards("2c 3d"), "player1": make_cards("4c 5d")},
            make_cards("Ah Kh Qh Jh Th"),
        )
        assert groups == [["player3", "player1"]]
    
    def test_group_by_rank(self):
        """Test grouping raw ranks."""
        results = [("p1", 3000), ("p2", 12), ("p3", 3000), ("p4", 7000)]
        assert group_by_rank(results) == [["p2"], ["p1", "p3"], ["p4"]]
    
    def test_group_by_rank_empty(self):
        """Test no players gives no groups."""
        assert group_by_rank([]) == []


class TestEdgeCases:
    """Test edge cases in hand evaluation."""
    
    def test_ace_low_straight(self, evaluator):
        """Test A-2-3-4-5 beats K-high."""
        wheel = evaluator.evaluate_cards(make_cards("Ah 2d 3c 4h 5s"))
        high_card = evaluator.evaluate_cards(make_cards("Kh Qd Jc 9h 7s"))
        assert wheel < high_card
    
    def test_ace_low_vs_six_high_straight(self, evaluator):
        """Test 6-high straight beats wheel."""
        wheel = evaluator.evaluate_cards(make_cards("Ah 2d 3c 4h 5s"))
        six_high = evaluator.evaluate_cards(make_cards("2h 3d 4c 5h 6s"))
        assert six_high < wheel
    
    def test_flush_beats_straight_in_seven(self, evaluator):
        """Test a flush is chosen over a straight from the same seven cards."""
        rank = evaluator.evaluate(make_cards("2h 9h"), make_cards("5h 6d 7h 8c Jh"))
        assert rank_to_class(rank) == HandClass.FLUSH
