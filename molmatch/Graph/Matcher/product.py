"""Compatibility graphs whose cliques are common subgraphs.

:func:`modular_product` pairs vertices (MCIS), :func:`edge_product` pairs
oriented edges (MCES). Both mark an edge ``connected=True`` when the two
pairs it joins are adjacent in the input graphs, which is the label the
c-clique search follows to keep the common fragment connected.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

import networkx as nx
import numpy as np

from molmatch.Graph.Matcher.config import DEFAULT_DIAMETER, DEFAULT_TOLERANCE
from molmatch.Graph.utils import (
    always_match,
    distance_matrix,
    line_graph,
    undirected_edge,
)

__all__ = ["modular_product", "edge_product"]

logger = logging.getLogger(__name__)

NodeId = Hashable
Predicate = Callable[[Any, Any], bool]


def _within_tolerance(dg: float, dh: float, tolerance: int) -> bool:
    if np.isinf(dg) or np.isinf(dh):
        return False
    return abs(dg - dh) <= tolerance


class _Distances:
    """Cutoff distance lookup over one graph."""

    def __init__(self, G: nx.Graph, diameter: int) -> None:
        self.index, self.matrix = distance_matrix(G, cutoff=diameter)

    def __call__(self, u: NodeId, v: NodeId) -> float:
        return self.matrix[self.index[u], self.index[v]]


def modular_product(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    topological: bool = False,
    diameter: int = DEFAULT_DIAMETER,
    tolerance: int = DEFAULT_TOLERANCE,
) -> nx.Graph:
    """
    Modular product of ``G1`` and ``G2`` restricted to compatible pairs.

    Vertices are pairs ``(g, h)`` with ``vmatch(g, h)``. Two pairs
    ``(g1, h1)`` and ``(g2, h2)`` are joined when ``g1 != g2``,
    ``h1 != h2`` and either both ``g1-g2`` and ``h1-h2`` are edges that
    pass ``ematch``, or neither is an edge.

    :param G1: First graph.
    :type G1: nx.Graph
    :param G2: Second graph.
    :type G2: nx.Graph
    :param vmatch: Vertex predicate on node ids.
    :param ematch: Edge predicate on normalised edges.
    :param topological: Also require both distances within ``diameter``
        and differing by at most ``tolerance``.
    :param diameter: Distance cutoff of the topological constraint.
    :param tolerance: Allowed distance mismatch.
    :returns: Product graph with a boolean ``connected`` edge attribute.
    :rtype: nx.Graph
    """
    vmatch = vmatch if vmatch is not None else always_match
    ematch = ematch if ematch is not None else always_match

    pairs = [(g, h) for g in G1.nodes for h in G2.nodes if vmatch(g, h)]
    P = nx.Graph()
    P.add_nodes_from(pairs)
    if topological:
        dist1 = _Distances(G1, diameter)
        dist2 = _Distances(G2, diameter)

    for (g1, h1), (g2, h2) in combinations(pairs, 2):
        if g1 == g2 or h1 == h2:
            continue
        adjacent = G1.has_edge(g1, g2)
        if adjacent != G2.has_edge(h1, h2):
            continue
        if adjacent and not ematch(undirected_edge(g1, g2), undirected_edge(h1, h2)):
            continue
        if topological and not _within_tolerance(
            dist1(g1, g2), dist2(h1, h2), tolerance
        ):
            continue
        P.add_edge((g1, h1), (g2, h2), connected=adjacent)

    logger.debug(
        "Modular product: %d vertices, %d edges",
        P.number_of_nodes(),
        P.number_of_edges(),
    )
    return P


def _oriented_pairs(
    G1: nx.Graph, G2: nx.Graph, vmatch: Predicate, ematch: Predicate
) -> List[Tuple[Tuple[NodeId, NodeId], Tuple[NodeId, NodeId]]]:
    out = []
    for u, v in G1.edges():
        e1 = undirected_edge(u, v)
        a, b = e1
        for x, y in G2.edges():
            e2 = undirected_edge(x, y)
            if not ematch(e1, e2):
                continue
            for p, q in (e2, e2[::-1]):
                if vmatch(a, p) and vmatch(b, q):
                    out.append((e1, (p, q)))
    return out


def _union_map(
    e1: Tuple[NodeId, NodeId],
    o1: Tuple[NodeId, NodeId],
    f1: Tuple[NodeId, NodeId],
    o2: Tuple[NodeId, NodeId],
) -> Optional[Dict[NodeId, NodeId]]:
    """Union of two edge node maps, or ``None`` if it is not injective."""
    merged = dict(zip(e1, o1))
    for k, v in zip(f1, o2):
        if merged.setdefault(k, v) != v:
            return None
    if len(set(merged.values())) != len(merged):
        return None
    return merged


def edge_product(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    topological: bool = False,
    diameter: int = DEFAULT_DIAMETER,
    tolerance: int = DEFAULT_TOLERANCE,
) -> nx.Graph:
    """
    Compatibility graph of oriented edge pairs.

    A vertex ``(e1, (p, q))`` maps the normalised ``G1`` edge
    ``e1 = (a, b)`` onto the ``G2`` edge ``p-q`` with ``a -> p`` and
    ``b -> q``. Two vertices are joined when their ``G1`` edges differ and
    the union of their node maps is an injective function. With
    ``topological=True`` the line-graph distances of the two edge pairs
    must also agree within ``tolerance``.

    :returns: Product graph with a boolean ``connected`` edge attribute,
        ``True`` when the two ``G1`` edges share an endpoint.
    :rtype: nx.Graph
    """
    vmatch = vmatch if vmatch is not None else always_match
    ematch = ematch if ematch is not None else always_match

    nodes = _oriented_pairs(G1, G2, vmatch, ematch)
    P = nx.Graph()
    P.add_nodes_from(nodes)
    if topological:
        dist1 = _Distances(line_graph(G1), diameter)
        dist2 = _Distances(line_graph(G2), diameter)

    for (e1, o1), (f1, o2) in combinations(nodes, 2):
        if e1 == f1 or _union_map(e1, o1, f1, o2) is None:
            continue
        if topological and not _within_tolerance(
            dist1(e1, f1),
            dist2(undirected_edge(*o1), undirected_edge(*o2)),
            tolerance,
        ):
            continue
        P.add_edge((e1, o1), (f1, o2), connected=bool(set(e1) & set(f1)))

    logger.debug(
        "Edge product: %d vertices, %d edges",
        P.number_of_nodes(),
        P.number_of_edges(),
    )
    return P
