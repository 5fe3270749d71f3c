"""Edge-induced subgraph matching on line graphs.

Edge-induced subgraph isomorphisms of ``G2`` in ``G1`` are searched as
node-induced subgraph isomorphisms between the line graphs ``L(G1)`` and
``L(G2)``. A line-graph match does not always come from a vertex mapping
(a triangle and a claw have the same line graph), so every candidate is
checked against :func:`emaptonmap` before it is yielded.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Hashable, Iterator, List, Mapping, Optional, Set

import networkx as nx

from molmatch.exceptions import PreconditionError
from molmatch.Graph.Matcher.vf2_matcher import VF2Matcher
from molmatch.Graph.utils import (
    Edge,
    always_match,
    check_simple_graph,
    line_graph,
    undirected_edge,
)

__all__ = ["edgesubgraph_isomorphisms", "emaptonmap"]

logger = logging.getLogger(__name__)

NodeId = Hashable
EdgeMapping = Dict[Edge, Edge]


def _node_options(emap: Mapping[Edge, Edge], G2: nx.Graph) -> Dict[NodeId, Set[NodeId]]:
    options: Dict[NodeId, Optional[Set[NodeId]]] = {n: None for n in G2.nodes}
    for e1, e2 in emap.items():
        ends = set(e1)
        for n in e2:
            options[n] = set(ends) if options[n] is None else options[n] & ends

    resolved = {n: set() if opts is None else opts for n, opts in options.items()}
    taken = {next(iter(opts)) for opts in resolved.values() if len(opts) == 1}
    for opts in resolved.values():
        if len(opts) > 1:
            opts -= taken
    return resolved


def emaptonmap(
    emap: Mapping[Edge, Edge], G1: nx.Graph, G2: nx.Graph
) -> Dict[NodeId, List[NodeId]]:
    """
    Derive vertex options from an edge mapping ``G1 -> G2``.

    Every query vertex collects the endpoints of the target edges mapped
    onto its incident edges; vertices touched by two or more mapped edges
    get the intersection, and the remaining ambiguous vertices lose the
    options already claimed by a uniquely assigned vertex.

    :param emap: Edge mapping from ``G1`` edges to ``G2`` edges.
    :type emap: Mapping[tuple, tuple]
    :param G1: Target graph.
    :type G1: nx.Graph
    :param G2: Query graph.
    :type G2: nx.Graph
    :returns: ``{query vertex: [target options]}``; vertices without a
        mapped incident edge get ``[]``.
    :rtype: dict
    :raises PreconditionError: If ``G2`` has more vertices than ``G1``.
    """
    if G2.number_of_nodes() > G1.number_of_nodes():
        raise PreconditionError(
            f"query has {G2.number_of_nodes()} vertices, "
            f"target only {G1.number_of_nodes()}"
        )
    return {n: sorted(opts) for n, opts in _node_options(emap, G2).items()}


def _induces_vertex_map(
    emap: EdgeMapping, G2: nx.Graph, vmatch: Callable[[Any, Any], bool]
) -> bool:
    """``True`` if ``emap`` is induced by an injective, compatible vertex map."""
    incident: Dict[NodeId, int] = {}
    for e2 in emap.values():
        for n in e2:
            incident[n] = incident.get(n, 0) + 1

    options = _node_options(emap, G2)
    assigned: Dict[NodeId, NodeId] = {}
    for n2, count in incident.items():
        opts = options[n2]
        if not opts or (count >= 2 and len(opts) != 1):
            return False
        if len(opts) == 1:
            assigned[n2] = next(iter(opts))
    if len(set(assigned.values())) != len(assigned):
        return False
    return all(vmatch(n1, n2) for n2, n1 in assigned.items())


def edgesubgraph_isomorphisms(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Callable[[Any, Any], bool]] = None,
    ematch: Optional[Callable[[Any, Any], bool]] = None,
    mandatory: Optional[Mapping[Edge, Edge]] = None,
    forbidden: Optional[Mapping[Edge, Edge]] = None,
    timeout: Optional[float] = None,
) -> Iterator[EdgeMapping]:
    """
    Lazily yield edge-induced subgraph isomorphisms as edge mappings.

    :param G1: Target graph.
    :param G2: Query graph.
    :param vmatch: Vertex predicate on node ids.
    :param ematch: Edge predicate on normalised edges.
    :param mandatory: Required ``{edge1: edge2}`` pairs.
    :param forbidden: Disallowed ``{edge1: edge2}`` pairs.
    :param timeout: Seconds before iteration stops silently.
    :returns: Iterator of ``{G1 edge: G2 edge}`` dictionaries.
    """
    check_simple_graph(G1, "G1")
    check_simple_graph(G2, "G2")
    vmatch = vmatch if vmatch is not None else always_match
    ematch = ematch if ematch is not None else always_match

    L1 = line_graph(G1)
    L2 = line_graph(G2)

    def lvmatch(e1: Edge, e2: Edge) -> bool:
        if not ematch(e1, e2):
            return False
        (a, b), (x, y) = e1, e2
        return (vmatch(a, x) and vmatch(b, y)) or (vmatch(a, y) and vmatch(b, x))

    def lematch(f1: Edge, f2: Edge) -> bool:
        return vmatch(L1.edges[f1]["shared"], L2.edges[f2]["shared"])

    def normalise(pairs: Optional[Mapping[Edge, Edge]]) -> Dict[Edge, Edge]:
        return {undirected_edge(*k): undirected_edge(*v) for k, v in (pairs or {}).items()}

    matcher = VF2Matcher(
        L1,
        L2,
        vmatch=lvmatch,
        ematch=lematch,
        mandatory=normalise(mandatory),
        forbidden=normalise(forbidden),
        timeout=timeout,
    )
    rejected = 0
    for emap in matcher.subgraph_isomorphisms_iter():
        if _induces_vertex_map(emap, G2, vmatch):
            yield emap
        else:
            rejected += 1
    if rejected:
        logger.debug("Discarded %d line-graph matches without a vertex map", rejected)
