"""Cheap necessary conditions checked before any backtracking search."""

from __future__ import annotations

import networkx as nx

__all__ = ["circuit_rank", "exact_match_prefilter", "substruct_match_prefilter"]


def circuit_rank(G: nx.Graph) -> int:
    """
    First Betti number of ``G``: ``|E| - |V| + #components``.

    The null graph has circuit rank 0.
    """
    if G.number_of_nodes() == 0:
        return 0
    return (
        G.number_of_edges()
        - G.number_of_nodes()
        + nx.number_connected_components(G)
    )


def exact_match_prefilter(G1: nx.Graph, G2: nx.Graph) -> bool:
    """Return ``False`` if ``G1`` and ``G2`` cannot be isomorphic."""
    return (
        G1.number_of_nodes() == G2.number_of_nodes()
        and G1.number_of_edges() == G2.number_of_edges()
        and circuit_rank(G1) == circuit_rank(G2)
    )


def substruct_match_prefilter(G1: nx.Graph, G2: nx.Graph) -> bool:
    """Return ``False`` if ``G2`` cannot be a substructure of ``G1``."""
    return (
        G1.number_of_nodes() >= G2.number_of_nodes()
        and G1.number_of_edges() >= G2.number_of_edges()
        and circuit_rank(G1) >= circuit_rank(G2)
    )
