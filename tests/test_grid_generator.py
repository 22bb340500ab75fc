# tests/test_grid_generator.py
import unittest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from slotsim.domain.exceptions import ConfigurationError, RangeError
from slotsim.domain.machine.entities.symbol_grid import SymbolGrid
from slotsim.domain.machine.entities.symbols import SymbolType
from slotsim.domain.machine.services.grid_generator import generate_grid
from slotsim.infrastructure.rng.rng_provider import RNGProvider

WEIGHTS = [30, 25, 20, 15, 10, 8, 5, 3]


class TestGenerateGrid(unittest.TestCase):
    """Grid generation by independent weighted sampling."""

    def setUp(self):
        self.provider = RNGProvider()

    def test_grid_shape(self):
        grid = generate_grid(5, 3, WEIGHTS, self.provider.get_rng("mersenne", 1))

        self.assertEqual(grid.reel_count, 5)
        self.assertEqual(grid.row_count, 3)
        for reel in grid.reels:
            for symbol in reel:
                self.assertIsInstance(symbol, SymbolType)

    def test_same_seed_same_grid(self):
        first = generate_grid(5, 3, WEIGHTS, self.provider.get_rng("numpy", 99))
        second = generate_grid(5, 3, WEIGHTS, self.provider.get_rng("numpy", 99))

        self.assertEqual(first, second)

    def test_only_weighted_symbols_appear(self):
        weights = [0] * len(SymbolType)
        weights[SymbolType.BELL] = 1

        grid = generate_grid(4, 2, weights, self.provider.get_rng("mersenne", 5))

        self.assertEqual(grid.count(SymbolType.BELL), 8)

    def test_explicit_symbol_order(self):
        symbols = [SymbolType.SEVEN, SymbolType.WILD]
        grid = generate_grid(3, 3, [0, 1], self.provider.get_rng("mersenne", 5), symbols)

        self.assertEqual(grid.wild_count, 9)

    def test_weight_symbol_mismatch(self):
        with self.assertRaises(ConfigurationError):
            generate_grid(5, 3, [1, 2, 3], self.provider.get_rng("mersenne", 1))

    def test_invalid_geometry(self):
        with self.assertRaises(ConfigurationError):
            generate_grid(0, 3, WEIGHTS, self.provider.get_rng("mersenne", 1))
        with self.assertRaises(ConfigurationError):
            generate_grid(5, 0, WEIGHTS, self.provider.get_rng("mersenne", 1))

    def test_invalid_weights(self):
        with self.assertRaises(ConfigurationError):
            generate_grid(5, 3, [0] * len(SymbolType), self.provider.get_rng("mersenne", 1))


class TestSymbolGrid(unittest.TestCase):
    """Grid addressing."""

    def setUp(self):
        self.grid = SymbolGrid.from_rows([
            ["Cherry", "Lemon", "Orange"],
            ["Plum", "Bell", "Bar"],
        ])

    def test_from_rows_transposes(self):
        self.assertEqual(self.grid.reel_count, 3)
        self.assertEqual(self.grid.row_count, 2)
        self.assertEqual(self.grid.get(0, 1), SymbolType.PLUM)
        self.assertEqual(self.grid[2], (SymbolType.ORANGE, SymbolType.BAR))

    def test_line(self):
        self.assertEqual(self.grid.line([0, 1, 0]), [SymbolType.CHERRY, SymbolType.BELL, SymbolType.ORANGE])

    def test_out_of_range(self):
        with self.assertRaises(RangeError):
            self.grid.get(3, 0)
        with self.assertRaises(RangeError):
            self.grid.get(0, 2)
        # RangeError is also an IndexError
        with self.assertRaises(IndexError):
            self.grid.line([0, 0, 5])

    def test_ragged_grid_rejected(self):
        with self.assertRaises(ConfigurationError):
            SymbolGrid.from_reels([["Cherry", "Lemon"], ["Cherry"]])

    def test_to_list(self):
        self.assertEqual(self.grid.to_list(), [["Cherry", "Plum"], ["Lemon", "Bell"], ["Orange", "Bar"]])


if __name__ == '__main__':
    unittest.main()
