"""structure_match.py — molecule-level matching entry points
===========================================================

Thin front end over the graph algorithms: apply the cheap pre-filters,
fill in the default predicates from :mod:`molmatch.Chem.Match.predicates`
and hand off to the VF2 matcher or the MCS search.

Substructure functions treat ``G1`` as the molecule and ``G2`` as the
query. Matches are ``{G1 node: G2 node}`` dictionaries, or
``{G1 edge: G2 edge}`` for the edge-induced variant.

Examples
--------
.. code-block:: python

    from molmatch.Chem.Match.structure_match import has_substruct_match, tcmcis

    has_substruct_match(ethanol, hydroxyl)      # True
    res = tcmcis(benzene, toluene, timeout=5)
    res.size, res.is_exhaustive
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, Optional

import networkx as nx

from molmatch.Chem.Match.predicates import Resolver, ematchgen, vmatchgen
from molmatch.Graph.Matcher.config import DEFAULT_SUBSTRUCT_TIMEOUT, MCSOptions
from molmatch.Graph.Matcher.edge_matcher import edgesubgraph_isomorphisms, emaptonmap
from molmatch.Graph.Matcher.mcs_matcher import (
    MCSResult,
    maximum_common_edge_subgraph,
    maximum_common_subgraph,
)
from molmatch.Graph.Matcher.prefilter import (
    exact_match_prefilter,
    substruct_match_prefilter,
)
from molmatch.Graph.Matcher.vf2_matcher import (
    isomorphisms,
    nodesubgraph_isomorphisms,
    subgraph_monomorphisms,
)
from molmatch.Graph.utils import check_simple_graph

__all__ = [
    "exact_matches",
    "has_exact_match",
    "substruct_matches",
    "has_substruct_match",
    "node_substruct_matches",
    "has_node_substruct_match",
    "edge_substruct_matches",
    "has_edge_substruct_match",
    "disconnected_mcis",
    "disconnected_mces",
    "connected_mcis",
    "connected_mces",
    "tcmcis",
    "tcmces",
    "emaptonmap",
]

logger = logging.getLogger(__name__)

Predicate = Callable[[Any, Any], bool]


def _validate(G1: nx.Graph, G2: nx.Graph) -> None:
    check_simple_graph(G1, "G1")
    check_simple_graph(G2, "G2")


def _predicates(
    G1: nx.Graph,
    G2: nx.Graph,
    vmatch: Optional[Predicate],
    ematch: Optional[Predicate],
    resolver: Optional[Resolver],
) -> Dict[str, Predicate]:
    return {
        "vmatch": vmatch if vmatch is not None else vmatchgen(G1, G2, resolver=resolver),
        "ematch": ematch if ematch is not None else ematchgen(G1, G2),
    }


def exact_matches(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    timeout: Optional[float] = DEFAULT_SUBSTRUCT_TIMEOUT,
    **kwargs: Any,
) -> Iterator[Dict]:
    """
    Lazily yield isomorphisms between ``G1`` and ``G2``.

    :param vmatch: Vertex predicate; generated by :func:`vmatchgen` if
        omitted.
    :param ematch: Edge predicate; generated by :func:`ematchgen` if
        omitted.
    :param resolver: Resolver for recursive query literals.
    :param timeout: Seconds before iteration stops silently.
    :param kwargs: ``mandatory`` / ``forbidden`` pair constraints.
    """
    _validate(G1, G2)
    if not exact_match_prefilter(G1, G2):
        logger.debug("Exact match rejected by prefilter")
        return iter(())
    preds = _predicates(G1, G2, vmatch, ematch, resolver)
    return isomorphisms(G1, G2, timeout=timeout, **preds, **kwargs)


def has_exact_match(G1: nx.Graph, G2: nx.Graph, **kwargs: Any) -> bool:
    """``True`` if ``G1`` and ``G2`` are isomorphic."""
    return next(exact_matches(G1, G2, **kwargs), None) is not None


def substruct_matches(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    timeout: Optional[float] = DEFAULT_SUBSTRUCT_TIMEOUT,
    **kwargs: Any,
) -> Iterator[Dict]:
    """
    Lazily yield monomorphisms of the query ``G2`` into ``G1``.

    Extra bonds between matched target atoms are allowed. Options as for
    :func:`exact_matches`; an empty molecule or query gives no match.
    """
    _validate(G1, G2)
    if G1.number_of_nodes() == 0 or G2.number_of_nodes() == 0:
        return iter(())
    if not substruct_match_prefilter(G1, G2):
        logger.debug("Substructure match rejected by prefilter")
        return iter(())
    preds = _predicates(G1, G2, vmatch, ematch, resolver)
    return subgraph_monomorphisms(G1, G2, timeout=timeout, **preds, **kwargs)


def has_substruct_match(G1: nx.Graph, G2: nx.Graph, **kwargs: Any) -> bool:
    """``True`` if the query ``G2`` embeds into ``G1`` (monomorphism)."""
    return next(substruct_matches(G1, G2, **kwargs), None) is not None


def node_substruct_matches(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    timeout: Optional[float] = DEFAULT_SUBSTRUCT_TIMEOUT,
    **kwargs: Any,
) -> Iterator[Dict]:
    """Lazily yield node-induced substructure matches."""
    _validate(G1, G2)
    if G1.number_of_nodes() == 0 or G2.number_of_nodes() == 0:
        return iter(())
    if not substruct_match_prefilter(G1, G2):
        logger.debug("Node-induced match rejected by prefilter")
        return iter(())
    preds = _predicates(G1, G2, vmatch, ematch, resolver)
    return nodesubgraph_isomorphisms(G1, G2, timeout=timeout, **preds, **kwargs)


def has_node_substruct_match(G1: nx.Graph, G2: nx.Graph, **kwargs: Any) -> bool:
    """``True`` if ``G2`` is a node-induced substructure of ``G1``."""
    return next(node_substruct_matches(G1, G2, **kwargs), None) is not None


def edge_substruct_matches(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    timeout: Optional[float] = DEFAULT_SUBSTRUCT_TIMEOUT,
    **kwargs: Any,
) -> Iterator[Dict]:
    """
    Lazily yield edge-induced substructure matches as edge mappings.

    ``mandatory`` / ``forbidden`` are keyed by edges here. Use
    :func:`emaptonmap` to recover the vertex correspondence.
    """
    _validate(G1, G2)
    if G1.number_of_edges() == 0 or G2.number_of_edges() == 0:
        return iter(())
    if not substruct_match_prefilter(G1, G2):
        logger.debug("Edge-induced match rejected by prefilter")
        return iter(())
    preds = _predicates(G1, G2, vmatch, ematch, resolver)
    return edgesubgraph_isomorphisms(G1, G2, timeout=timeout, **preds, **kwargs)


def has_edge_substruct_match(G1: nx.Graph, G2: nx.Graph, **kwargs: Any) -> bool:
    """``True`` if ``G2`` is an edge-induced substructure of ``G1``."""
    return next(edge_substruct_matches(G1, G2, **kwargs), None) is not None


# ----------------------------------------------------------------------
# Maximum common substructure
# ----------------------------------------------------------------------
def _mcs(
    search: Callable[..., MCSResult],
    G1: nx.Graph,
    G2: nx.Graph,
    vmatch: Optional[Predicate],
    ematch: Optional[Predicate],
    resolver: Optional[Resolver],
    options: Optional[MCSOptions],
    overrides: Dict[str, Any],
) -> MCSResult:
    _validate(G1, G2)
    preds = _predicates(G1, G2, vmatch, ematch, resolver)
    return search(G1, G2, options=options, **preds, **overrides)


def disconnected_mcis(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """
    Maximum common induced substructure, possibly disconnected.

    :param options: Base :class:`MCSOptions`; keyword ``overrides`` such
        as ``timeout`` (default 60 s) or ``targetsize`` apply on top.
    :returns: Node mapping and search status.
    :rtype: MCSResult
    """
    return _mcs(
        maximum_common_subgraph, G1, G2, vmatch, ematch, resolver, options, overrides
    )


def disconnected_mces(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """Maximum common edge substructure, possibly disconnected."""
    return _mcs(
        maximum_common_edge_subgraph,
        G1,
        G2,
        vmatch,
        ematch,
        resolver,
        options,
        overrides,
    )


def connected_mcis(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """Maximum common induced substructure forming one connected fragment."""
    overrides["connected"] = True
    return _mcs(
        maximum_common_subgraph, G1, G2, vmatch, ematch, resolver, options, overrides
    )


def connected_mces(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """Maximum common edge substructure forming one connected fragment."""
    overrides["connected"] = True
    return _mcs(
        maximum_common_edge_subgraph,
        G1,
        G2,
        vmatch,
        ematch,
        resolver,
        options,
        overrides,
    )


def tcmcis(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """
    Maximum common induced substructure under the topological constraint.

    Matched atom pairs must lie at the same graph distance in both
    molecules (up to ``tolerance``, default 0) whenever that distance is
    within ``diameter`` (default 8); farther pairs are not combined.

    References
    ----------
    1. Kawabata, T. (2011). Build-Up Algorithm for Atomic Correspondence
       between Chemical Structures. J. Chem. Inf. Model., 51(8), 1775–1787.
    """
    overrides["topological"] = True
    return _mcs(
        maximum_common_subgraph, G1, G2, vmatch, ematch, resolver, options, overrides
    )


def tcmces(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    resolver: Optional[Resolver] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """Edge flavour of :func:`tcmcis`, distances taken in the line graphs."""
    overrides["topological"] = True
    return _mcs(
        maximum_common_edge_subgraph,
        G1,
        G2,
        vmatch,
        ematch,
        resolver,
        options,
        overrides,
    )
