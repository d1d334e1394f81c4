"""
Tests for GA operations: mutation and crossover.
"""

import unittest
import numpy as np

from knapsack_ga.data_models import (
    CrossoverMethod,
    ItemCatalog,
    MutationMethod,
    RepairMethod,
    as_budget_vector,
    generate_items,
)
from knapsack_ga.solution import Solution
from knapsack_ga.mutation import (
    bit_flip_mutation,
    swap_mutation,
    flip_mutation,
    mutate,
    get_mutation_operator,
    mutation_statistics,
)
from knapsack_ga.crossover import (
    uniform_crossover,
    one_point_crossover,
    shuffle_crossover,
    crossover,
    get_crossover_operator,
)


def roomy_catalog(n=10):
    """Catalog whose budget fits every item, so repair never interferes."""
    catalog = ItemCatalog.from_arrays(
        [float(i + 1) for i in range(n)],
        [[1.0, 2.0] for _ in range(n)],
    )
    return catalog, as_budget_vector([1000.0, 1000.0])


class TestMutation(unittest.TestCase):
    """Test mutation operators."""

    def setUp(self):
        self.catalog, self.budgets = roomy_catalog()
        self.rng = np.random.default_rng(42)
        self.solution = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY,
                                 [1, 0, 1, 0, 1, 0, 1, 0, 1, 0])

    def test_bit_flip_changes_one_gene(self):
        """Test exactly one gene differs when everything fits."""
        mutated, log = bit_flip_mutation(self.solution, self.rng)

        self.assertEqual(int(np.count_nonzero(mutated.selection != self.solution.selection)), 1)
        self.assertTrue(log[0].startswith("bit_flip"))
        self.assertTrue(mutated.is_feasible())

    def test_bit_flip_leaves_original_unchanged(self):
        before = self.solution.selection.copy()
        bit_flip_mutation(self.solution, self.rng)
        np.testing.assert_array_equal(self.solution.selection, before)

    def test_swap_changes_two_genes(self):
        """Test swap flips one selected and one unselected gene."""
        for _ in range(20):
            mutated, log = swap_mutation(self.solution, self.rng)

            changed = np.flatnonzero(mutated.selection != self.solution.selection)
            self.assertEqual(len(changed), 2)
            self.assertNotEqual(self.solution.selection[changed[0]],
                                self.solution.selection[changed[1]])
            self.assertEqual(mutated.selected_count(), self.solution.selected_count())
            self.assertTrue(log[0].startswith("swap"))

    def test_swap_on_all_ones_is_noop(self):
        """Test a vector with no differing pair is returned unchanged."""
        full = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY, [1] * 10)

        mutated, log = swap_mutation(full, self.rng)

        np.testing.assert_array_equal(mutated.selection, full.selection)
        self.assertIsNot(mutated, full)
        self.assertIn("no differing gene pair", log[0])

    def test_swap_on_all_zeros_is_noop(self):
        empty = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY)

        mutated, log = swap_mutation(empty, self.rng)

        self.assertEqual(mutated.selected_count(), 0)
        self.assertIn("no differing gene pair", log[0])

    def test_flip_rate_zero_and_one(self):
        """Test flip mutation at the extreme rates."""
        unchanged, _ = flip_mutation(self.solution, self.rng, 0.0)
        np.testing.assert_array_equal(unchanged.selection, self.solution.selection)

        inverted, log = flip_mutation(self.solution, self.rng, 1.0)
        np.testing.assert_array_equal(inverted.selection, 1 - self.solution.selection)
        self.assertIn("10 gene(s) flipped", log[0])

    def test_flip_rate_out_of_range(self):
        with self.assertRaises(ValueError):
            flip_mutation(self.solution, self.rng, 1.5)

    def test_mutate_dispatch(self):
        """Test every mutation tag resolves to an operator."""
        for method in MutationMethod:
            mutated, log = mutate(self.solution, method, self.rng, gene_flip_rate=0.5)
            self.assertTrue(mutated.is_feasible())
            self.assertGreater(len(log), 0)

    def test_unknown_mutation_tag(self):
        with self.assertRaises(ValueError):
            get_mutation_operator("swapMutation")

    def test_mutation_statistics(self):
        mutated, _ = flip_mutation(self.solution, self.rng, 1.0)
        stats = mutation_statistics(self.solution, mutated)

        self.assertEqual(stats['genes'], 10)
        self.assertEqual(stats['genes_changed'], 10)
        self.assertAlmostEqual(stats['change_rate'], 1.0)

    def test_mutations_repair_tight_budgets(self):
        """Test the feasibility invariant holds under tight budgets."""
        rng = np.random.default_rng(7)
        budgets = as_budget_vector([8.0, 6.0, 10.0])
        catalog = generate_items(25, 3, budgets, rng)

        for method in MutationMethod:
            solution = Solution.random(catalog, budgets, RepairMethod.WEIGHTED_UTILITY, rng)
            for _ in range(30):
                solution, _ = mutate(solution, method, rng, gene_flip_rate=0.3)
                self.assertTrue(solution.is_feasible())
                self.assertTrue(np.all(solution.costs <= budgets))


class TestCrossover(unittest.TestCase):
    """Test crossover operators."""

    def setUp(self):
        self.catalog, self.budgets = roomy_catalog()
        self.rng = np.random.default_rng(42)
        self.father = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY, [1] * 10)
        self.mother = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY, [0] * 10)

    def test_uniform_crossover(self):
        """Test each gene comes from one of the parents."""
        child, log = uniform_crossover(self.father, self.mother, self.rng)

        self.assertEqual(len(child), 10)
        self.assertTrue(np.all((child.selection == 0) | (child.selection == 1)))
        self.assertIn(f"{child.selected_count()}/10 genes from father", log[0])

    def test_one_point_crossover(self):
        """Test the child is a head of one parent joined to a tail of the other."""
        father = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY,
                          [1, 1, 0, 1, 0, 1, 1, 0, 0, 1])
        mother = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY,
                          [0, 1, 1, 0, 1, 0, 0, 1, 1, 0])

        for _ in range(20):
            child, _ = one_point_crossover(father, mother, self.rng)

            candidates = []
            for cut in range(10):
                candidates.append(np.concatenate([father.selection[:cut], mother.selection[cut:]]))
                candidates.append(np.concatenate([mother.selection[:cut], father.selection[cut:]]))
            self.assertTrue(any(np.array_equal(child.selection, c) for c in candidates))

    def test_shuffle_crossover_splits_evenly(self):
        """Test half the genes come from each parent."""
        child, _ = shuffle_crossover(self.father, self.mother, self.rng)
        self.assertEqual(child.selected_count(), 5)

        odd_catalog, odd_budgets = roomy_catalog(7)
        father = Solution(odd_catalog, odd_budgets, RepairMethod.GREEDY_UTILITY, [1] * 7)
        mother = Solution(odd_catalog, odd_budgets, RepairMethod.GREEDY_UTILITY, [0] * 7)
        child, _ = shuffle_crossover(father, mother, self.rng)
        self.assertEqual(child.selected_count(), 4)

    def test_parents_are_not_modified(self):
        """Test every crossover leaves both parents untouched."""
        for method in CrossoverMethod:
            child, _ = crossover(self.father, self.mother, method, self.rng)

            self.assertIsNot(child, self.father)
            self.assertIsNot(child, self.mother)
            self.assertEqual(self.father.selected_count(), 10)
            self.assertEqual(self.mother.selected_count(), 0)

    def test_identical_parents_give_identical_child(self):
        parent = Solution(self.catalog, self.budgets, RepairMethod.GREEDY_UTILITY,
                          [1, 0, 0, 1, 1, 0, 1, 0, 1, 1])
        for method in CrossoverMethod:
            child, _ = crossover(parent, parent.copy(), method, self.rng)
            np.testing.assert_array_equal(child.selection, parent.selection)

    def test_child_is_repaired(self):
        """Test children of feasible parents satisfy tight budgets."""
        rng = np.random.default_rng(3)
        budgets = as_budget_vector([6.0, 9.0])
        catalog = generate_items(20, 2, budgets, rng)

        for method in CrossoverMethod:
            for _ in range(20):
                father = Solution.random(catalog, budgets, RepairMethod.GREEDY_UTILITY, rng)
                mother = Solution.random(catalog, budgets, RepairMethod.GREEDY_UTILITY, rng)
                child, _ = crossover(father, mother, method, rng)

                self.assertTrue(child.is_feasible())
                self.assertIs(child.repair_method, RepairMethod.GREEDY_UTILITY)

    def test_unknown_crossover_tag(self):
        with self.assertRaises(ValueError):
            get_crossover_operator("divideCrossover")


if __name__ == '__main__':
    unittest.main()
