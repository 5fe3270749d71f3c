from __future__ import annotations

import unittest

import networkx as nx

from molmatch.Graph.Matcher.product import edge_product, modular_product


class TestProductGraphs(unittest.TestCase):
    """Unit tests for the MCIS / MCES compatibility graphs."""

    def test_modular_product_of_edges(self) -> None:
        P = modular_product(nx.path_graph(2), nx.path_graph(2))
        self.assertEqual(P.number_of_nodes(), 4)
        self.assertEqual(
            {frozenset(e) for e in P.edges},
            {
                frozenset({(0, 0), (1, 1)}),
                frozenset({(0, 1), (1, 0)}),
            },
        )
        self.assertTrue(all(d["connected"] for _, _, d in P.edges(data=True)))

    def test_modular_product_non_adjacent_pairs(self) -> None:
        G1 = nx.empty_graph(2)
        G2 = nx.empty_graph(2)
        P = modular_product(G1, G2)
        self.assertEqual(P.number_of_edges(), 2)
        self.assertFalse(any(d["connected"] for _, _, d in P.edges(data=True)))

    def test_modular_product_vertex_predicate(self) -> None:
        P = modular_product(
            nx.path_graph(3), nx.path_graph(3), vmatch=lambda g, h: g == h
        )
        self.assertEqual(sorted(P.nodes), [(0, 0), (1, 1), (2, 2)])
        # 0-1 / 1-2 adjacent in both, 0-2 absent in both
        self.assertEqual(P.number_of_edges(), 3)
        self.assertFalse(P.edges[(0, 0), (2, 2)]["connected"])

    def test_modular_product_edge_predicate(self) -> None:
        P = modular_product(
            nx.path_graph(2), nx.path_graph(2), ematch=lambda e1, e2: False
        )
        self.assertEqual(P.number_of_edges(), 0)

    def test_topological_product_uses_diameter(self) -> None:
        P = modular_product(nx.path_graph(3), nx.path_graph(3), topological=True, diameter=1)
        self.assertGreater(P.number_of_edges(), 0)
        self.assertTrue(all(d["connected"] for _, _, d in P.edges(data=True)))

    def test_topological_product_tolerance(self) -> None:
        G1 = nx.path_graph(3)
        G2 = nx.cycle_graph(3)
        strict = modular_product(G1, G2, topological=True, tolerance=0)
        loose = modular_product(G1, G2, topological=True, tolerance=1)
        plain = modular_product(G1, G2)
        self.assertLessEqual(strict.number_of_edges(), loose.number_of_edges())
        self.assertLessEqual(strict.number_of_edges(), plain.number_of_edges())

    def test_edge_product_of_paths(self) -> None:
        P = edge_product(nx.path_graph(3), nx.path_graph(3))
        self.assertEqual(P.number_of_nodes(), 8)
        self.assertEqual(
            {frozenset(e) for e in P.edges},
            {
                frozenset({((0, 1), (0, 1)), ((1, 2), (1, 2))}),
                frozenset({((0, 1), (2, 1)), ((1, 2), (1, 0))}),
            },
        )
        self.assertTrue(all(d["connected"] for _, _, d in P.edges(data=True)))

    def test_edge_product_disjoint_edges(self) -> None:
        G = nx.Graph([(0, 1), (2, 3)])
        P = edge_product(G, G, vmatch=lambda a, b: a == b)
        self.assertEqual(P.number_of_nodes(), 2)
        self.assertEqual(P.number_of_edges(), 1)
        (_, _, data), = P.edges(data=True)
        self.assertFalse(data["connected"])

    def test_empty_inputs(self) -> None:
        self.assertEqual(modular_product(nx.Graph(), nx.path_graph(3)).number_of_nodes(), 0)
        self.assertEqual(edge_product(nx.empty_graph(3), nx.path_graph(3)).number_of_nodes(), 0)
        topo = modular_product(nx.Graph(), nx.Graph(), topological=True)
        self.assertEqual(topo.number_of_nodes(), 0)


if __name__ == "__main__":
    unittest.main()
