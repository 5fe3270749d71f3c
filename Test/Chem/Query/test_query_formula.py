from __future__ import annotations

import unittest

from molmatch.Chem.Query.formula import (
    TRUE,
    QueryAnd,
    QueryLiteral,
    QueryNot,
    QueryOr,
    evaluate,
    implies,
    literals,
    query_and,
    query_not,
    query_or,
)
from molmatch.exceptions import FormulaError, PreconditionError

C = QueryLiteral("symbol", "C")
N = QueryLiteral("symbol", "N")
O = QueryLiteral("symbol", "O")
AROM = QueryLiteral("isaromatic", True)
ALIPH = QueryLiteral("isaromatic", False)


class TestQueryFormula(unittest.TestCase):
    """Unit tests for formula construction and evaluation."""

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def test_empty_group_is_a_contract_violation(self) -> None:
        with self.assertRaises(FormulaError):
            query_and()
        with self.assertRaises(FormulaError):
            query_or()
        self.assertTrue(issubclass(FormulaError, AssertionError))

    def test_single_operand_is_unwrapped(self) -> None:
        self.assertIs(query_and(C), C)
        self.assertIs(query_or(N), N)

    def test_nested_groups_are_flattened(self) -> None:
        f = query_and(C, query_and(AROM, QueryLiteral("charge", 0)))
        self.assertIsInstance(f, QueryAnd)
        self.assertEqual(len(f.operands), 3)
        g = query_or(C, query_or(N, O), N)
        self.assertIsInstance(g, QueryOr)
        self.assertEqual(g.operands, (C, N, O))

    def test_tautology(self) -> None:
        self.assertIs(query_and(TRUE, TRUE), TRUE)
        self.assertIs(query_and(TRUE, C), C)
        self.assertIs(query_or(C, TRUE), TRUE)
        self.assertTrue(evaluate(TRUE, {}))

    def test_double_negation(self) -> None:
        self.assertIs(query_not(query_not(C)), C)
        self.assertIsInstance(query_not(C), QueryNot)

    def test_unknown_descriptor(self) -> None:
        with self.assertRaises(PreconditionError):
            QueryLiteral("colour", "red")

    def test_formulas_are_hashable(self) -> None:
        a = query_and(C, AROM)
        b = query_and(C, AROM)
        self.assertEqual(a, b)
        self.assertEqual(len({a, b}), 1)
        self.assertEqual(str(C), "symbol='C'")

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def test_literals(self) -> None:
        f = query_or(query_and(C, AROM), query_not(N))
        self.assertEqual(literals(f), frozenset({C, AROM, N}))
        self.assertEqual(literals(TRUE), frozenset())

    def test_evaluate_mapping_and_callable(self) -> None:
        f = query_and(C, query_not(AROM))
        self.assertTrue(evaluate(f, {C: True, AROM: False}))
        self.assertFalse(evaluate(f, {C: True, AROM: True}))
        self.assertTrue(evaluate(query_or(N, C), lambda lit: lit == C))

    def test_evaluate_short_circuits(self) -> None:
        seen = []

        def truth(lit):
            seen.append(lit)
            return False

        evaluate(query_and(C, N), truth)
        self.assertEqual(seen, [C])

    # ------------------------------------------------------------------
    # Implication
    # ------------------------------------------------------------------
    def test_implies_basic(self) -> None:
        self.assertTrue(implies(C, C))
        self.assertTrue(implies(query_and(C, AROM), C))
        self.assertFalse(implies(C, query_and(C, AROM)))
        self.assertTrue(implies(C, query_or(C, N)))
        self.assertFalse(implies(query_or(C, N), C))

    def test_implies_uses_single_valued_keys(self) -> None:
        # symbol C excludes symbol N
        self.assertTrue(implies(C, query_not(N)))
        self.assertTrue(implies(AROM, query_not(ALIPH)))
        self.assertFalse(implies(query_not(N), C))

    def test_implies_boolean_descriptors(self) -> None:
        # not aromatic is the same as aliphatic
        self.assertTrue(implies(query_not(AROM), ALIPH))
        self.assertTrue(implies(ALIPH, query_not(AROM)))
        self.assertTrue(implies(TRUE, query_or(AROM, ALIPH)))
        ring = QueryLiteral("is_in_ring", True)
        chain = QueryLiteral("is_in_ring", False)
        self.assertTrue(implies(query_not(chain), ring))
        # a lone literal does not force the other value
        self.assertFalse(implies(TRUE, AROM))
        self.assertFalse(implies(query_not(C), N))

    def test_implies_tautology(self) -> None:
        self.assertTrue(implies(C, TRUE))
        self.assertFalse(implies(TRUE, C))
        self.assertTrue(implies(TRUE, TRUE))

    def test_recursive_is_multi_valued(self) -> None:
        r1 = QueryLiteral("recursive", "[$(CO)]")
        r2 = QueryLiteral("recursive", "[$(CN)]")
        self.assertFalse(implies(r1, query_not(r2)))


if __name__ == "__main__":
    unittest.main()
