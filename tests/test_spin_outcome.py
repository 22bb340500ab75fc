# tests/test_spin_outcome.py
import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slotsim.domain.machine.entities.symbol_grid import SymbolGrid
from slotsim.domain.machine.entities.symbols import SymbolType
from slotsim.domain.machine.services.win_evaluation import PaylineWin
from slotsim.domain.session.entities.spin_outcome import (
    SpinOutcome, WinTier, classify_tier, win_multiplier
)
from slotsim.domain.session.entities.turn_record import SimulationTurnRecord


class TestWinTiers(unittest.TestCase):
    """Tier thresholds on the win multiplier."""

    def test_thresholds(self):
        cases = [
            (0.0, WinTier.NONE),
            (0.2, WinTier.SMALL),
            (4.99, WinTier.SMALL),
            (5.0, WinTier.MEDIUM),
            (10.0, WinTier.BIG),
            (24.9, WinTier.BIG),
            (25.0, WinTier.MEGA),
            (49.9, WinTier.MEGA),
            (50.0, WinTier.JACKPOT),
            (400.0, WinTier.JACKPOT),
        ]
        for multiplier, tier in cases:
            self.assertEqual(classify_tier(multiplier), tier, f"multiplier {multiplier}")

    def test_win_multiplier(self):
        self.assertEqual(win_multiplier(250, 25), 10)
        self.assertEqual(win_multiplier(100, 0), 0.0)


class TestSpinOutcome(unittest.TestCase):
    """Aggregation of payline wins."""

    def setUp(self):
        self.grid = SymbolGrid.from_rows([
            ["Wild", "Cherry", "Cherry", "Lemon", "Plum"],
            ["Bell", "Bell", "Wild", "Bell", "Orange"],
            ["Bar", "Seven", "Bar", "Seven", "Bar"],
        ])

    def test_losing_spin(self):
        outcome = SpinOutcome.from_wins(self.grid, [], 25)

        self.assertFalse(outcome.is_win)
        self.assertEqual(outcome.total_win, 0)
        self.assertEqual(outcome.tier, WinTier.NONE)
        self.assertIsNone(outcome.highest_paying_symbol)
        self.assertEqual(outcome.longest_match, 0)
        self.assertEqual(outcome.describe_tier(), "")
        self.assertEqual(outcome.wild_count, 2)
        self.assertTrue(outcome.has_wilds)

    def test_aggregates_wins(self):
        wins = [
            PaylineWin(0, SymbolType.CHERRY, 3, 5),
            PaylineWin(1, SymbolType.BELL, 4, 50),
        ]

        outcome = SpinOutcome.from_wins(self.grid, wins, 25)

        self.assertEqual(outcome.total_win, 55)
        self.assertEqual(outcome.total_winning_lines, 2)
        self.assertEqual(outcome.highest_paying_symbol, SymbolType.BELL)
        self.assertEqual(outcome.longest_match, 4)
        self.assertAlmostEqual(outcome.win_multiplier, 2.2)
        self.assertEqual(outcome.tier, WinTier.SMALL)
        self.assertEqual(outcome.describe_tier(), "WIN!")
        self.assertFalse(outcome.is_big_win)

    def test_equal_wins_keep_first_symbol(self):
        wins = [
            PaylineWin(3, SymbolType.LEMON, 3, 10),
            PaylineWin(7, SymbolType.CHERRY, 4, 10),
        ]

        outcome = SpinOutcome.from_wins(self.grid, wins, 25)

        self.assertEqual(outcome.highest_paying_symbol, SymbolType.LEMON)

    def test_big_tiers(self):
        big = SpinOutcome.from_wins(self.grid, [PaylineWin(0, SymbolType.SEVEN, 5, 250)], 25)
        self.assertTrue(big.is_big_win)
        self.assertFalse(big.is_mega_win)
        self.assertEqual(big.describe_tier(), "BIG WIN!")

        mega = SpinOutcome.from_wins(self.grid, [PaylineWin(0, SymbolType.WILD, 4, 1000)], 25)
        self.assertTrue(mega.is_mega_win)
        self.assertFalse(mega.is_jackpot)
        self.assertEqual(mega.describe_tier(), "MEGA WIN!")

        jackpot = SpinOutcome.from_wins(self.grid, [PaylineWin(0, SymbolType.WILD, 5, 1250)], 25)
        self.assertTrue(jackpot.is_jackpot)
        self.assertEqual(jackpot.describe_tier(), "JACKPOT!")

    def test_to_dict(self):
        outcome = SpinOutcome.from_wins(self.grid, [PaylineWin(0, SymbolType.CHERRY, 3, 5, (0, 0, 0))], 25)

        data = outcome.to_dict()

        self.assertEqual(data["tier"], "SMALL")
        self.assertEqual(data["highest_paying_symbol"], "Cherry")
        self.assertEqual(data["wins"][0]["positions"], [0, 0, 0])
        self.assertEqual(data["grid"][0], ["Wild", "Bell", "Bar"])


class TestTurnRecord(unittest.TestCase):
    """Turn records describe the first winning line."""

    def setUp(self):
        self.grid = SymbolGrid.from_rows([
            ["Cherry", "Cherry", "Cherry", "Lemon", "Plum"],
            ["Bell", "Bell", "Bell", "Bell", "Orange"],
            ["Bar", "Seven", "Bar", "Seven", "Bar"],
        ])

    def test_record_from_winning_outcome(self):
        wins = [
            PaylineWin(0, SymbolType.CHERRY, 3, 5),
            PaylineWin(1, SymbolType.BELL, 4, 50),
        ]
        outcome = SpinOutcome.from_wins(self.grid, wins, 25)

        record = SimulationTurnRecord.from_outcome(7, 400, outcome)

        self.assertEqual(record.turn_index, 7)
        self.assertEqual(record.starting_credit, 400)
        self.assertTrue(record.is_win)
        self.assertEqual(record.prize_amount, 55)
        self.assertEqual(record.winning_line_indices, (0, 1))
        self.assertEqual(record.winning_symbol, SymbolType.CHERRY)
        self.assertEqual(record.match_count, 3)
        self.assertEqual(len(record.line_wins), 2)

    def test_record_from_losing_outcome(self):
        record = SimulationTurnRecord.from_outcome(0, 1000, SpinOutcome.from_wins(self.grid, [], 25))

        self.assertFalse(record.is_win)
        self.assertIsNone(record.winning_symbol)
        self.assertEqual(record.match_count, 0)
        self.assertEqual(record.winning_line_indices, ())

    def test_dict_round_trip(self):
        outcome = SpinOutcome.from_wins(self.grid, [PaylineWin(2, SymbolType.BELL, 4, 50)], 25)
        record = SimulationTurnRecord.from_outcome(3, 975, outcome)

        self.assertEqual(SimulationTurnRecord.from_dict(record.to_dict()), record)


if __name__ == '__main__':
    unittest.main()
