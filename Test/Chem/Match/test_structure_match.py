from __future__ import annotations

import unittest

import networkx as nx

from molmatch.Chem.Match.structure_match import (
    connected_mces,
    connected_mcis,
    disconnected_mces,
    disconnected_mcis,
    edge_substruct_matches,
    emaptonmap,
    exact_matches,
    has_edge_substruct_match,
    has_exact_match,
    has_node_substruct_match,
    has_substruct_match,
    node_substruct_matches,
    substruct_matches,
    tcmces,
    tcmcis,
)
from molmatch.Chem.Query.formula import QueryLiteral, query_and
from molmatch.exceptions import InvalidGraphError
from molmatch.Graph.Matcher.config import MCSOptions
from molmatch.Graph.status import SearchStatus


def _mol(elements, bonds, pi=None) -> nx.Graph:
    """Plain molecule from element symbols and ``(u, v, order)`` bonds."""
    G = nx.Graph()
    for i, el in enumerate(elements):
        G.add_node(i, element=el, pi_electron=(pi or {}).get(i, 0))
    for u, v, order in bonds:
        G.add_edge(u, v, order=order)
    return G


def _ethanol() -> nx.Graph:
    return _mol("CCO", [(0, 1, 1), (1, 2, 1)])


def _benzene() -> nx.Graph:
    return _mol("C" * 6, [(i, (i + 1) % 6, 1.5) for i in range(6)], pi={i: 1 for i in range(6)})


def _toluene() -> nx.Graph:
    G = _mol("C" * 7, [(i, (i + 1) % 6, 1.5) for i in range(6)] + [(0, 6, 1)])
    for i in range(6):
        G.nodes[i]["pi_electron"] = 1
    return G


class TestSubstructureMatch(unittest.TestCase):
    """Unit tests for exact and substructure matching entry points."""

    def test_exact_match_is_reflexive(self) -> None:
        for G in (_ethanol(), _benzene(), _toluene()):
            self.assertTrue(has_exact_match(G, G))

    def test_exact_match_relabelled(self) -> None:
        G = _toluene()
        H = nx.relabel_nodes(G, {n: 6 - n for n in G})
        maps = list(exact_matches(G, H))
        self.assertEqual(len(maps), 2)

    def test_exact_match_prefilter(self) -> None:
        self.assertFalse(has_exact_match(_benzene(), _toluene()))
        self.assertEqual(list(exact_matches(_ethanol(), _mol("CC", [(0, 1, 1)]))), [])

    def test_pi_electrons_distinguish_atoms(self) -> None:
        hexane_ring = _mol("C" * 6, [(i, (i + 1) % 6, 1) for i in range(6)])
        self.assertFalse(has_exact_match(_benzene(), hexane_ring))

    def test_substructure(self) -> None:
        hydroxyl_carbon = _mol("CO", [(0, 1, 1)])
        self.assertTrue(has_substruct_match(_ethanol(), hydroxyl_carbon))
        maps = list(substruct_matches(_ethanol(), hydroxyl_carbon))
        self.assertEqual(maps, [{1: 0, 2: 1}])
        self.assertFalse(has_substruct_match(_benzene(), hydroxyl_carbon))

    def test_substructure_is_monotonic(self) -> None:
        host = _toluene()
        query = _mol("CCCC", [(0, 1, 1.5), (1, 2, 1.5), (1, 3, 1)], pi={0: 1, 1: 1, 2: 1})
        self.assertTrue(has_substruct_match(host, query))
        for n in list(query.nodes):
            part = query.copy()
            part.remove_node(n)
            part = nx.convert_node_labels_to_integers(part)
            self.assertTrue(has_substruct_match(host, part))

    def test_empty_graphs_give_no_match(self) -> None:
        self.assertEqual(list(substruct_matches(_ethanol(), nx.Graph())), [])
        self.assertEqual(list(node_substruct_matches(nx.Graph(), _ethanol())), [])
        self.assertEqual(list(edge_substruct_matches(_ethanol(), _mol("C", []))), [])

    def test_node_induced_rejects_ring_closure(self) -> None:
        cyclopropane = _mol("CCC", [(0, 1, 1), (1, 2, 1), (2, 0, 1)])
        propane = _mol("CCC", [(0, 1, 1), (1, 2, 1)])
        self.assertTrue(has_substruct_match(cyclopropane, propane))
        self.assertFalse(has_node_substruct_match(cyclopropane, propane))
        self.assertTrue(has_node_substruct_match(_ethanol(), _mol("CC", [(0, 1, 1)])))

    def test_edge_induced(self) -> None:
        neopentane = _mol("CCCCC", [(0, 1, 1), (0, 2, 1), (0, 3, 1), (0, 4, 1)])
        isobutane = _mol("CCCC", [(0, 1, 1), (0, 2, 1), (0, 3, 1)])
        self.assertTrue(has_edge_substruct_match(neopentane, isobutane))
        emap = next(edge_substruct_matches(neopentane, isobutane))
        options = emaptonmap(emap, neopentane, isobutane)
        self.assertEqual(options[0], [0])

    def test_mandatory_and_timeout_pass_through(self) -> None:
        host = _ethanol()
        query = _mol("C", [])
        maps = list(substruct_matches(host, query, mandatory={0: 0}))
        self.assertEqual(maps, [{0: 0}])
        self.assertEqual(list(substruct_matches(_toluene(), _benzene(), timeout=0)), [])

    def test_query_graph(self) -> None:
        methyl_o = nx.Graph(kind="query")
        methyl_o.add_node(
            0,
            query=query_and(QueryLiteral("symbol", "C"), QueryLiteral("degree", 1)),
        )
        methyl_o.add_node(1, query=QueryLiteral("symbol", "O"))
        methyl_o.add_edge(0, 1, query=QueryLiteral("order", 1))
        self.assertFalse(has_substruct_match(_ethanol(), methyl_o))

        methanol = _mol("CO", [(0, 1, 1)])
        self.assertTrue(has_substruct_match(methanol, methyl_o))

    def test_invalid_graphs_are_rejected(self) -> None:
        chain = nx.DiGraph([(0, 1), (1, 2)])
        bond = nx.DiGraph([(0, 1)])
        with self.assertRaises(InvalidGraphError):
            has_substruct_match(chain, bond)
        with self.assertRaises(InvalidGraphError):
            has_exact_match(chain, chain)
        with self.assertRaises(InvalidGraphError):
            has_node_substruct_match(_ethanol(), bond)
        with self.assertRaises(InvalidGraphError):
            has_edge_substruct_match(nx.MultiGraph([(0, 1), (1, 2)]), _ethanol())
        with self.assertRaises(InvalidGraphError):
            substruct_matches(_ethanol(), nx.DiGraph())
        with self.assertRaises(InvalidGraphError):
            tcmcis(chain, _ethanol())

    def test_boolean_helpers_are_documented(self) -> None:
        for fn in (
            has_exact_match,
            has_substruct_match,
            has_node_substruct_match,
            has_edge_substruct_match,
        ):
            self.assertTrue(fn.__doc__)

    def test_custom_predicates(self) -> None:
        self.assertTrue(
            has_exact_match(
                _benzene(),
                _mol("C" * 6, [(i, (i + 1) % 6, 1) for i in range(6)]),
                vmatch=lambda a, b: True,
            )
        )


class TestMCSWrappers(unittest.TestCase):
    """Unit tests for the molecule-level MCS wrappers."""

    def test_disconnected_mcis(self) -> None:
        res = disconnected_mcis(_toluene(), _benzene())
        self.assertEqual(res.size, 6)
        self.assertTrue(res.is_exhaustive)

    def test_disconnected_mces(self) -> None:
        res = disconnected_mces(_toluene(), _benzene())
        self.assertEqual(res.size, 6)
        self.assertEqual(res.mode, "mces")

    def test_connected_not_larger_than_disconnected(self) -> None:
        G1 = _mol("CCOCC", [(0, 1, 1), (1, 2, 1), (2, 3, 1), (3, 4, 1)])
        G2 = _mol("CCNCC", [(0, 1, 1), (1, 2, 1), (2, 3, 1), (3, 4, 1)])
        loose = disconnected_mcis(G1, G2)
        tight = connected_mcis(G1, G2)
        self.assertEqual(loose.size, 4)
        self.assertEqual(tight.size, 2)
        self.assertTrue(nx.is_connected(G1.subgraph(tight.mapping)))
        self.assertEqual(disconnected_mces(G1, G2).size, 2)
        self.assertEqual(connected_mces(G1, G2).size, 1)

    def test_topological_mcs(self) -> None:
        res = tcmcis(_toluene(), _toluene())
        self.assertEqual(res.size, 7)
        self.assertEqual(tcmces(_ethanol(), _ethanol()).size, 2)

    def test_timeout_zero_is_not_an_error(self) -> None:
        res = tcmcis(_toluene(), _benzene(), timeout=0)
        self.assertEqual(res.status, SearchStatus.TIMED_OUT)
        self.assertLessEqual(res.size, 6)

    def test_options_and_overrides(self) -> None:
        opts = MCSOptions(targetsize=3)
        res = disconnected_mcis(_toluene(), _benzene(), options=opts)
        self.assertEqual(res.status, SearchStatus.TARGET_REACHED)
        self.assertGreaterEqual(res.size, 3)


if __name__ == "__main__":
    unittest.main()
