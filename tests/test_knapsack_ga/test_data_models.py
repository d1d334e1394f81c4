"""
Tests for items, the item catalog, budgets and strategy tags.
"""

import unittest
import numpy as np

from knapsack_ga.data_models import (
    CrossoverMethod,
    Item,
    ItemCatalog,
    MutationMethod,
    RepairMethod,
    SelectionMethod,
    StrategyTuple,
    as_budget_vector,
    generate_budgets,
    generate_items,
)


class TestDataGeneration(unittest.TestCase):
    """Test random budgets and catalogs."""

    def setUp(self):
        self.rng = np.random.default_rng(11)

    def test_budget_range(self):
        budgets = generate_budgets(30, 500, self.rng)

        self.assertEqual(budgets.shape, (500,))
        self.assertTrue(np.all(budgets >= 15.0))
        self.assertTrue(np.all(budgets < 75.0))
        self.assertFalse(budgets.flags.writeable)

    def test_item_ranges(self):
        budgets = [9.0, 21.0, 0.5]
        catalog = generate_items(200, 3, budgets, self.rng)

        self.assertEqual(catalog.item_count, 200)
        self.assertEqual(catalog.costs.shape, (200, 3))
        self.assertTrue(np.all((catalog.utilities >= 0) & (catalog.utilities < 2000)))
        self.assertTrue(np.all(catalog.costs[:, 0] < 2.0))
        self.assertTrue(np.all(catalog.costs[:, 1] < 5.0))
        np.testing.assert_array_equal(catalog.costs[:, 2], np.zeros(200))

    def test_budget_count_mismatch(self):
        with self.assertRaises(ValueError):
            generate_items(5, 2, [1.0], self.rng)

    def test_catalog_is_read_only(self):
        catalog = generate_items(5, 2, [9.0, 9.0], self.rng)
        with self.assertRaises(ValueError):
            catalog.costs[0, 0] = 1.0

    def test_negative_costs_rejected(self):
        with self.assertRaises(ValueError):
            ItemCatalog([Item(1.0, (-1.0,))])

    def test_item_total_cost(self):
        self.assertAlmostEqual(Item(3.0, (1, 2.5)).total_cost, 3.5)

    def test_strategy_tuple_rejects_tags(self):
        with self.assertRaises(ValueError):
            StrategyTuple("bit_flip", CrossoverMethod.UNIFORM,
                          RepairMethod.GREEDY_UTILITY, SelectionMethod.RANK)

    def test_strategy_label(self):
        strategy = StrategyTuple(MutationMethod.SWAP, CrossoverMethod.ONE_POINT,
                                 RepairMethod.WEIGHTED_UTILITY, SelectionMethod.TOURNAMENT)
        self.assertEqual(strategy.label, "swap/one_point/weighted_utility/tournament")

    def test_budget_vector_validation(self):
        with self.assertRaises(ValueError):
            as_budget_vector([])
        with self.assertRaises(ValueError):
            as_budget_vector([3.0, -1.0])

    def test_catalog_from_arrays(self):
        catalog = ItemCatalog.from_arrays([4, 7], [[1, 2], [3, 4]])

        self.assertEqual(len(catalog), 2)
        self.assertEqual(catalog.constraint_count, 2)
        self.assertEqual(catalog[1], Item(7.0, (3.0, 4.0)))
        self.assertEqual([item.utility for item in catalog], [4.0, 7.0])

        with self.assertRaises(ValueError):
            ItemCatalog.from_arrays([1.0], [[1.0], [2.0]])


if __name__ == '__main__':
    unittest.main()
