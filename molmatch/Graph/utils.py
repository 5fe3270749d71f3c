"""Small graph helpers shared by the clique engine, the matcher and the
MCS search.

All helpers operate on plain :class:`networkx.Graph` objects. Node ids are
expected to be hashable and mutually orderable (integers in practice), which
lets undirected edges be represented by a normalised ``(min, max)`` tuple.
"""

from __future__ import annotations

from itertools import combinations
from typing import Any, Dict, Hashable, Mapping, Optional, Set, Tuple

import networkx as nx
import numpy as np

from molmatch.exceptions import InvalidGraphError

__all__ = [
    "Edge",
    "always_match",
    "undirected_edge",
    "check_simple_graph",
    "adjacency_sets",
    "edge_label",
    "line_graph",
    "distance_matrix",
]

NodeId = Hashable
Edge = Tuple[NodeId, NodeId]


def always_match(a: Any, b: Any) -> bool:
    """Default compatibility predicate: every pair is compatible."""
    return True


def undirected_edge(u: NodeId, v: NodeId) -> Edge:
    """
    Return the normalised representation of the undirected edge ``u-v``.

    :param u: First endpoint.
    :param v: Second endpoint.
    :returns: ``(u, v)`` if ``u <= v`` else ``(v, u)``.
    :rtype: tuple
    """
    return (u, v) if u <= v else (v, u)


def check_simple_graph(G: Any, name: str = "graph") -> None:
    """
    Validate that ``G`` is a simple undirected :class:`networkx.Graph`.

    :param G: Candidate graph.
    :param name: Label used in the error message.
    :raises InvalidGraphError: If ``G`` is not a networkx graph, is directed,
        is a multigraph or carries self-loops.
    """
    if not isinstance(G, nx.Graph):
        raise InvalidGraphError(f"{name} must be a networkx.Graph, got {type(G)!r}")
    if G.is_directed():
        raise InvalidGraphError(f"{name} must be undirected")
    if G.is_multigraph():
        raise InvalidGraphError(f"{name} must not be a multigraph")
    if nx.number_of_selfloops(G):
        raise InvalidGraphError(f"{name} must not contain self-loops")


def adjacency_sets(G: nx.Graph) -> Dict[NodeId, Set[NodeId]]:
    """Return ``{node: set(neighbours)}`` for fast membership tests."""
    return {n: set(G[n]) for n in G.nodes}


def edge_label(labels: Mapping[Edge, bool], u: NodeId, v: NodeId) -> bool:
    """
    Orientation-insensitive lookup in an edge label map.

    Edges absent from ``labels`` are treated as ``False``.
    """
    if (u, v) in labels:
        return bool(labels[(u, v)])
    return bool(labels.get((v, u), False))


def line_graph(G: nx.Graph) -> nx.Graph:
    """
    Build the line graph of ``G`` using normalised edges as nodes.

    Each line-graph edge records the original vertex shared by the two
    incident edges in its ``shared`` attribute.

    :param G: Simple undirected graph.
    :type G: nx.Graph
    :returns: Line graph of ``G``.
    :rtype: nx.Graph
    """
    L = nx.Graph()
    L.add_nodes_from(undirected_edge(u, v) for u, v in G.edges())
    for n in G.nodes:
        incident = [undirected_edge(n, w) for w in G[n]]
        for a, b in combinations(incident, 2):
            L.add_edge(a, b, shared=n)
    return L


def distance_matrix(
    G: nx.Graph, cutoff: Optional[int] = None
) -> Tuple[Dict[NodeId, int], np.ndarray]:
    """
    All-pairs shortest path lengths of ``G`` as a dense matrix.

    Unreachable pairs and pairs farther apart than ``cutoff`` hold
    ``numpy.inf``.

    :param G: Input graph.
    :param cutoff: Optional distance cutoff.
    :returns: ``(index, matrix)`` where ``index`` maps node to row/column.
    :rtype: tuple[dict, numpy.ndarray]
    """
    nodelist = list(G.nodes)
    index = {n: i for i, n in enumerate(nodelist)}
    if not nodelist:
        return index, np.zeros((0, 0))
    dist = nx.floyd_warshall_numpy(G, nodelist=nodelist, weight=None)
    if cutoff is not None:
        dist[dist > cutoff] = np.inf
    return index, dist
