"""predicates.py — default vertex and edge compatibility predicates
=================================================================

:func:`vmatchgen` and :func:`ematchgen` inspect the declared attribute
kind of both graphs once and return a plain, memoised function used by
the matcher for the rest of the search.

Attribute kinds
---------------
``G.graph["kind"]`` is ``"plain"`` (default) or ``"query"``.

* **plain** atoms carry the usual annotation keys: ``element``,
  ``charge``, ``hcount``, ``aromatic``, ``pi_electron`` and optionally
  ``mass``, ``valence``, ``smallest_ring``, ``ring_count``. Plain bonds
  carry ``order`` and optionally ``in_ring`` and ``aromatic``.
* **query** atoms and bonds carry a formula from
  :mod:`molmatch.Chem.Query.formula` under ``query``; a missing formula
  matches anything.

Regimes
-------
=========== =========== ==================================================
target      query       predicate
=========== =========== ==================================================
plain       plain       ``element`` and ``pi_electron`` equal; bonds free
plain       query       query formula evaluated on target descriptors
query       query       formula implication
query       plain       unsupported (:class:`PreconditionError`)
=========== =========== ==================================================

``recursive`` literals hold embedded query text. The ``resolver`` passed
to :func:`vmatchgen` turns the text into a query graph; the graph and its
own predicates are cached per text for the lifetime of the returned
predicate.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from operator import eq
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

import networkx as nx
from networkx.algorithms.isomorphism import generic_node_match

from molmatch.Chem.Query.formula import (
    EDGE_DESCRIPTORS,
    TRUE,
    VERTEX_DESCRIPTORS,
    QueryLiteral,
    evaluate,
    implies,
)
from molmatch.exceptions import PreconditionError
from molmatch.Graph.Matcher.config import DEFAULT_SUBSTRUCT_TIMEOUT
from molmatch.Graph.Matcher.prefilter import substruct_match_prefilter
from molmatch.Graph.Matcher.vf2_matcher import VF2Matcher
from molmatch.Graph.utils import Edge, undirected_edge

__all__ = [
    "AttributeKind",
    "attribute_kind",
    "vertex_descriptors",
    "edge_descriptors",
    "vmatchgen",
    "ematchgen",
]

logger = logging.getLogger(__name__)

NodeId = Hashable
Predicate = Callable[[Any, Any], bool]
Resolver = Callable[[str], nx.Graph]
DescriptorTable = Dict[str, Dict[Any, Any]]


class AttributeKind(str, Enum):
    PLAIN = "plain"
    QUERY = "query"


def attribute_kind(G: nx.Graph) -> AttributeKind:
    """
    Read the declared attribute kind of ``G``.

    :raises PreconditionError: If ``G.graph["kind"]`` is not a known kind.
    """
    kind = G.graph.get("kind", AttributeKind.PLAIN)
    try:
        return AttributeKind(kind)
    except ValueError as exc:
        raise PreconditionError(f"Unknown graph attribute kind {kind!r}") from exc


# ----------------------------------------------------------------------
# Descriptor tables
# ----------------------------------------------------------------------
def vertex_descriptors(G: nx.Graph) -> DescriptorTable:
    """
    Precompute atom descriptors of a plain graph.

    :returns: ``{descriptor: {node: value}}`` for every vertex descriptor
        except ``recursive``.
    :rtype: dict
    """
    table: DescriptorTable = {k: {} for k in VERTEX_DESCRIPTORS - {"recursive"}}
    for n, attrs in G.nodes(data=True):
        degree = G.degree(n)
        hcount = attrs.get("hcount", 0)
        bond_sum = sum(G.edges[n, w].get("order", 1) for w in G[n])
        table["symbol"][n] = attrs.get("element")
        table["isaromatic"][n] = bool(attrs.get("aromatic", False))
        table["charge"][n] = attrs.get("charge", 0)
        table["mass"][n] = attrs.get("mass")
        table["degree"][n] = degree
        table["total_hydrogens"][n] = hcount
        table["connectivity"][n] = degree + hcount
        table["valence"][n] = attrs.get("valence", bond_sum + hcount)
        table["smallest_ring"][n] = attrs.get("smallest_ring", 0)
        table["ring_count"][n] = attrs.get("ring_count", 0)
    return table


def edge_descriptors(G: nx.Graph) -> DescriptorTable:
    """Precompute bond descriptors of a plain graph, keyed by normalised edge."""
    table: DescriptorTable = {k: {} for k in EDGE_DESCRIPTORS}
    for u, v, attrs in G.edges(data=True):
        e = undirected_edge(u, v)
        order = attrs.get("order", 1)
        table["order"][e] = order
        table["is_in_ring"][e] = bool(attrs.get("in_ring", False))
        table["isaromatic"][e] = bool(attrs.get("aromatic", order == 1.5))
    return table


def _formula(attrs: Dict[str, Any]) -> Any:
    formula = attrs.get("query")
    return TRUE if formula is None else formula


def _lookup(table: DescriptorTable, lit: QueryLiteral, item: Any) -> bool:
    try:
        column = table[lit.key]
    except KeyError:
        raise PreconditionError(
            f"Descriptor {lit.key!r} is not available here"
        ) from None
    return column[item] == lit.value


# ----------------------------------------------------------------------
# Vertex predicate builders
# ----------------------------------------------------------------------
def _plain_vmatch(
    G1: nx.Graph, G2: nx.Graph, resolver: Optional[Resolver]
) -> Predicate:
    node_match = generic_node_match(["element", "pi_electron"], ["*", 0], [eq, eq])

    @lru_cache(maxsize=None)
    def vmatch(n1: NodeId, n2: NodeId) -> bool:
        return node_match(G1.nodes[n1], G2.nodes[n2])

    return vmatch


def _descriptor_vmatch(
    G1: nx.Graph, G2: nx.Graph, resolver: Optional[Resolver]
) -> Predicate:
    table = vertex_descriptors(G1)
    subqueries: Dict[str, Tuple[nx.Graph, Predicate, Predicate]] = {}

    def subquery(text: str) -> Tuple[nx.Graph, Predicate, Predicate]:
        if text not in subqueries:
            if resolver is None:
                raise PreconditionError(
                    f"Recursive query {text!r} met but no resolver was given"
                )
            sub = resolver(text)
            subqueries[text] = (
                sub,
                vmatchgen(G1, sub, resolver=resolver),
                ematchgen(G1, sub),
            )
            logger.debug("Resolved recursive query %r (%d atoms)", text, len(sub))
        return subqueries[text]

    def recursive_holds(n1: NodeId, text: str) -> bool:
        sub, sub_vmatch, sub_ematch = subquery(text)
        if sub.number_of_nodes() == 0 or not substruct_match_prefilter(G1, sub):
            return False
        anchor = next(iter(sub.nodes))
        matcher = VF2Matcher(
            G1,
            sub,
            vmatch=sub_vmatch,
            ematch=sub_ematch,
            mandatory={n1: anchor},
            timeout=DEFAULT_SUBSTRUCT_TIMEOUT,
        )
        return matcher.subgraph_is_monomorphic()

    @lru_cache(maxsize=None)
    def vmatch(n1: NodeId, n2: NodeId) -> bool:
        formula = _formula(G2.nodes[n2])

        def holds(lit: QueryLiteral) -> bool:
            if lit.key == "recursive":
                return recursive_holds(n1, lit.value)
            return _lookup(table, lit, n1)

        return evaluate(formula, holds)

    return vmatch


def _implication_vmatch(
    G1: nx.Graph, G2: nx.Graph, resolver: Optional[Resolver]
) -> Predicate:
    @lru_cache(maxsize=None)
    def vmatch(n1: NodeId, n2: NodeId) -> bool:
        return implies(_formula(G1.nodes[n1]), _formula(G2.nodes[n2]))

    return vmatch


# ----------------------------------------------------------------------
# Edge predicate builders
# ----------------------------------------------------------------------
def _plain_ematch(G1: nx.Graph, G2: nx.Graph) -> Predicate:
    def ematch(e1: Edge, e2: Edge) -> bool:
        return True

    return ematch


def _descriptor_ematch(G1: nx.Graph, G2: nx.Graph) -> Predicate:
    table = edge_descriptors(G1)

    @lru_cache(maxsize=None)
    def ematch(e1: Edge, e2: Edge) -> bool:
        formula = _formula(G2.edges[e2])
        return evaluate(formula, lambda lit: _lookup(table, lit, e1))

    return ematch


def _implication_ematch(G1: nx.Graph, G2: nx.Graph) -> Predicate:
    @lru_cache(maxsize=None)
    def ematch(e1: Edge, e2: Edge) -> bool:
        return implies(_formula(G1.edges[e1]), _formula(G2.edges[e2]))

    return ematch


_VMATCH_BUILDERS = {
    (AttributeKind.PLAIN, AttributeKind.PLAIN): _plain_vmatch,
    (AttributeKind.PLAIN, AttributeKind.QUERY): _descriptor_vmatch,
    (AttributeKind.QUERY, AttributeKind.QUERY): _implication_vmatch,
}

_EMATCH_BUILDERS = {
    (AttributeKind.PLAIN, AttributeKind.PLAIN): _plain_ematch,
    (AttributeKind.PLAIN, AttributeKind.QUERY): _descriptor_ematch,
    (AttributeKind.QUERY, AttributeKind.QUERY): _implication_ematch,
}


def _regime(G1: nx.Graph, G2: nx.Graph, table: Dict) -> Any:
    key = (attribute_kind(G1), attribute_kind(G2))
    try:
        return table[key]
    except KeyError:
        raise PreconditionError(
            f"Cannot match a {key[1].value} graph against a {key[0].value} target"
        ) from None


def vmatchgen(
    G1: nx.Graph, G2: nx.Graph, *, resolver: Optional[Resolver] = None
) -> Predicate:
    """
    Build the default vertex predicate for target ``G1`` and query ``G2``.

    :param G1: Target graph.
    :type G1: nx.Graph
    :param G2: Query graph.
    :type G2: nx.Graph
    :param resolver: Turns the text of a ``recursive`` literal into a
        query graph. Only needed when such literals occur.
    :type resolver: Callable[[str], nx.Graph] | None
    :returns: Memoised ``(n1, n2) -> bool``.
    :raises PreconditionError: For a query target with a plain query
        graph, or when a recursive literal is met without ``resolver``.
    """
    return _regime(G1, G2, _VMATCH_BUILDERS)(G1, G2, resolver)


def ematchgen(G1: nx.Graph, G2: nx.Graph) -> Predicate:
    """
    Build the default edge predicate; arguments are normalised edges.

    :raises PreconditionError: For a query target with a plain query graph.
    """
    return _regime(G1, G2, _EMATCH_BUILDERS)(G1, G2)
