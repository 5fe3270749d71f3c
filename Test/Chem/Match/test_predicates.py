from __future__ import annotations

import unittest

import networkx as nx

from molmatch.Chem.Match.predicates import (
    AttributeKind,
    attribute_kind,
    edge_descriptors,
    ematchgen,
    vertex_descriptors,
    vmatchgen,
)
from molmatch.Chem.Query.formula import QueryLiteral, query_and, query_not, query_or
from molmatch.exceptions import PreconditionError


def _ethanol() -> nx.Graph:
    G = nx.Graph()
    G.add_node(0, element="C", hcount=3, charge=0, aromatic=False, pi_electron=0)
    G.add_node(1, element="C", hcount=2, charge=0, aromatic=False, pi_electron=0)
    G.add_node(2, element="O", hcount=1, charge=0, aromatic=False, pi_electron=0)
    G.add_edge(0, 1, order=1)
    G.add_edge(1, 2, order=1)
    return G


def _query(atoms, bonds) -> nx.Graph:
    Q = nx.Graph(kind="query")
    for n, formula in atoms.items():
        Q.add_node(n, query=formula)
    for (u, v), formula in bonds.items():
        Q.add_edge(u, v, query=formula)
    return Q


class TestDescriptors(unittest.TestCase):
    def test_vertex_descriptors(self) -> None:
        table = vertex_descriptors(_ethanol())
        self.assertEqual(table["symbol"], {0: "C", 1: "C", 2: "O"})
        self.assertEqual(table["degree"], {0: 1, 1: 2, 2: 1})
        self.assertEqual(table["connectivity"], {0: 4, 1: 4, 2: 2})
        self.assertEqual(table["valence"], {0: 4, 1: 4, 2: 2})
        self.assertNotIn("recursive", table)

    def test_edge_descriptors(self) -> None:
        G = _ethanol()
        G.edges[1, 2]["order"] = 1.5
        table = edge_descriptors(G)
        self.assertEqual(table["order"][(0, 1)], 1)
        self.assertTrue(table["isaromatic"][(1, 2)])
        self.assertFalse(table["is_in_ring"][(0, 1)])

    def test_attribute_kind(self) -> None:
        self.assertIs(attribute_kind(nx.Graph()), AttributeKind.PLAIN)
        self.assertIs(attribute_kind(nx.Graph(kind="query")), AttributeKind.QUERY)
        with self.assertRaises(PreconditionError):
            attribute_kind(nx.Graph(kind="smiles"))


class TestPredicates(unittest.TestCase):
    """Unit tests for :func:`vmatchgen` / :func:`ematchgen`."""

    def test_plain_regime(self) -> None:
        G1 = _ethanol()
        G2 = _ethanol()
        G2.nodes[1]["pi_electron"] = 1
        vmatch = vmatchgen(G1, G2)
        self.assertTrue(vmatch(0, 0))
        self.assertFalse(vmatch(0, 2))
        self.assertFalse(vmatch(1, 1))
        self.assertTrue(ematchgen(G1, G2)((0, 1), (1, 2)))

    def test_plain_regime_is_memoised(self) -> None:
        G = _ethanol()
        vmatch = vmatchgen(G, G)
        vmatch(0, 1)
        vmatch(0, 1)
        self.assertEqual(vmatch.cache_info().hits, 1)

    def test_query_against_plain(self) -> None:
        G = _ethanol()
        Q = _query(
            {
                0: query_and(QueryLiteral("symbol", "C"), QueryLiteral("total_hydrogens", 3)),
                1: query_or(QueryLiteral("symbol", "O"), QueryLiteral("symbol", "N")),
            },
            {(0, 1): QueryLiteral("order", 2)},
        )
        vmatch = vmatchgen(G, Q)
        self.assertTrue(vmatch(0, 0))
        self.assertFalse(vmatch(1, 0))
        self.assertTrue(vmatch(2, 1))
        self.assertFalse(vmatch(1, 1))

        ematch = ematchgen(G, Q)
        self.assertFalse(ematch((0, 1), (0, 1)))

    def test_missing_query_matches_anything(self) -> None:
        G = _ethanol()
        Q = nx.Graph(kind="query")
        Q.add_edge(0, 1)
        self.assertTrue(vmatchgen(G, Q)(2, 0))
        self.assertTrue(ematchgen(G, Q)((1, 2), (0, 1)))

    def test_edge_query_rejects_vertex_descriptor(self) -> None:
        G = _ethanol()
        Q = _query({0: None, 1: None}, {(0, 1): QueryLiteral("charge", 0)})
        ematch = ematchgen(G, Q)
        with self.assertRaises(PreconditionError):
            ematch((0, 1), (0, 1))

    def test_recursive_literal(self) -> None:
        G = _ethanol()
        sub = _query(
            {0: QueryLiteral("symbol", "C"), 1: QueryLiteral("symbol", "O")},
            {},
        )
        sub.add_edge(0, 1)
        calls = []

        def resolver(text):
            calls.append(text)
            return sub

        Q = _query({0: QueryLiteral("recursive", "[$(CO)]")}, {})
        vmatch = vmatchgen(G, Q, resolver=resolver)
        self.assertFalse(vmatch(0, 0))
        self.assertTrue(vmatch(1, 0))
        self.assertFalse(vmatch(2, 0))
        self.assertEqual(calls, ["[$(CO)]"])

    def test_recursive_literal_needs_resolver(self) -> None:
        Q = _query({0: query_not(QueryLiteral("recursive", "[$(CO)]"))}, {})
        vmatch = vmatchgen(_ethanol(), Q)
        with self.assertRaises(PreconditionError):
            vmatch(0, 0)

    def test_query_against_query(self) -> None:
        Q1 = _query({0: query_and(QueryLiteral("symbol", "N"), QueryLiteral("charge", 1))}, {})
        Q2 = _query({0: query_or(QueryLiteral("symbol", "N"), QueryLiteral("symbol", "O"))}, {})
        self.assertTrue(vmatchgen(Q1, Q2)(0, 0))
        self.assertFalse(vmatchgen(Q2, Q1)(0, 0))

    def test_plain_query_against_query_target_is_rejected(self) -> None:
        Q = _query({0: QueryLiteral("symbol", "C")}, {})
        with self.assertRaises(PreconditionError):
            vmatchgen(Q, _ethanol())
        with self.assertRaises(PreconditionError):
            ematchgen(Q, _ethanol())


if __name__ == "__main__":
    unittest.main()
