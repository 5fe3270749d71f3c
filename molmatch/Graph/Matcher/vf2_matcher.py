"""vf2_matcher.py — explicit-stack VF2 matcher
=============================================

A VF2-style backtracking matcher producing vertex mappings from a target
graph ``G1`` onto a query graph ``G2`` under caller-supplied compatibility
predicates.

Highlights
----------
* **Three flavours** sharing one state machine: exact isomorphism,
  node-induced subgraph isomorphism and subgraph monomorphism.
* **Predicates on ids**: ``vmatch(n1, n2)`` receives node ids and
  ``ematch(e1, e2)`` normalised edges, so callers can close over any
  precomputed descriptor table.
* **Mandatory / forbidden pairs** prune the candidate lists up front.
* **Explicit stack**: every level keeps its own candidate iterator, so
  the generator resumes exactly where it yielded and a timeout is a plain
  ``return``.
* **Most-constrained-first**: the next query vertex is the frontier vertex
  with the fewest compatible target candidates.

Examples
--------
.. code-block:: python

    import networkx as nx
    from molmatch.Graph.Matcher.vf2_matcher import VF2Matcher

    host = nx.cycle_graph(6)
    query = nx.path_graph(3)

    matcher = VF2Matcher(host, query, timeout=5)
    next(matcher.subgraph_monomorphisms_iter())   # {0: 0, 1: 1, 5: 2} or similar
    matcher.subgraph_is_isomorphic()               # True
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Set,
    Tuple,
    Union,
)

import networkx as nx

from molmatch.Graph.Matcher.vf2_state import MatchState
from molmatch.Graph.status import SearchBudget
from molmatch.Graph.utils import (
    adjacency_sets,
    always_match,
    check_simple_graph,
    undirected_edge,
)

__all__ = [
    "MatchMode",
    "VF2Matcher",
    "isomorphisms",
    "subgraph_monomorphisms",
    "nodesubgraph_isomorphisms",
]

logger = logging.getLogger(__name__)

NodeId = Hashable
MappingDict = Dict[NodeId, NodeId]
PairConstraint = Union[Mapping[NodeId, NodeId], Iterable[Tuple[NodeId, NodeId]]]


class MatchMode(str, Enum):
    ISOMORPHISM = "isomorphism"
    INDUCED = "induced"
    MONOMORPHISM = "monomorphism"


class VF2Matcher:
    """
    Backtracking matcher between a target ``G1`` and a query ``G2``.

    Mappings are dictionaries from ``G1`` vertices to ``G2`` vertices that
    cover every vertex of ``G2``.

    :param G1: Target graph.
    :type G1: nx.Graph
    :param G2: Query graph.
    :type G2: nx.Graph
    :param vmatch: Vertex predicate ``(n1, n2) -> bool``; defaults to
        always ``True``.
    :type vmatch: Callable | None
    :param ematch: Edge predicate ``(e1, e2) -> bool`` on normalised edges;
        defaults to always ``True``.
    :type ematch: Callable | None
    :param mandatory: Pairs ``{n1: n2}`` that every mapping must contain.
        A vertex with a mandatory partner can only map to that partner.
    :type mandatory: Mapping | None
    :param forbidden: Pairs that no mapping may contain, as a mapping or
        an iterable of ``(n1, n2)`` tuples.
    :type forbidden: Mapping | Iterable[tuple] | None
    :param timeout: Seconds after which iteration stops silently.
    :type timeout: float | None
    :raises InvalidGraphError: If either graph is not simple and
        undirected.
    """

    def __init__(
        self,
        G1: nx.Graph,
        G2: nx.Graph,
        *,
        vmatch: Optional[Callable[[Any, Any], bool]] = None,
        ematch: Optional[Callable[[Any, Any], bool]] = None,
        mandatory: Optional[Mapping[NodeId, NodeId]] = None,
        forbidden: Optional[PairConstraint] = None,
        timeout: Optional[float] = None,
    ) -> None:
        check_simple_graph(G1, "G1")
        check_simple_graph(G2, "G2")
        self.G1 = G1
        self.G2 = G2
        self.vmatch = vmatch if vmatch is not None else always_match
        self.ematch = ematch if ematch is not None else always_match
        self.mandatory: MappingDict = dict(mandatory or {})
        self._mandatory_2: MappingDict = {v: k for k, v in self.mandatory.items()}
        if isinstance(forbidden, Mapping):
            self.forbidden: Set[Tuple[NodeId, NodeId]] = set(forbidden.items())
        else:
            self.forbidden = {tuple(p) for p in forbidden or ()}
        self.timeout = timeout

        self._adj1 = adjacency_sets(G1)
        self._adj2 = adjacency_sets(G2)
        self._rank1 = {n: i for i, n in enumerate(G1.nodes)}
        self._rank2 = {n: i for i, n in enumerate(G2.nodes)}
        self._timed_out = False

    # ------------------------------------------------------------------
    # Feasibility
    # ------------------------------------------------------------------
    def _candidates(self, state: MatchState, n2: NodeId, mode: MatchMode) -> List[NodeId]:
        """Target vertices that pass the per-vertex tests for ``n2``."""
        anchors = [state.core_2[w] for w in self._adj2[n2] if w in state.core_2]
        if anchors:
            pool = set(self._adj1[anchors[0]])
            for m1 in anchors[1:]:
                pool &= self._adj1[m1]
            pool = [n for n in pool if n not in state.core_1]
            pool.sort(key=self._rank1.__getitem__)
        else:
            pool = [n for n in self.G1.nodes if n not in state.core_1]

        partner = self._mandatory_2.get(n2)
        if partner is not None:
            pool = [n for n in pool if n == partner]

        deg2 = len(self._adj2[n2])
        out: List[NodeId] = []
        for n1 in pool:
            deg1 = len(self._adj1[n1])
            if deg1 < deg2 or (mode is MatchMode.ISOMORPHISM and deg1 != deg2):
                continue
            if n1 in self.mandatory and self.mandatory[n1] != n2:
                continue
            if (n1, n2) in self.forbidden:
                continue
            if not self.vmatch(n1, n2):
                continue
            out.append(n1)
        return out

    def _feasible(
        self, state: MatchState, n1: NodeId, n2: NodeId, mode: MatchMode
    ) -> bool:
        """Edge consistency with the mapped part plus VF2 look-ahead."""
        mapped2 = 0
        for w2 in self._adj2[n2]:
            if w2 not in state.core_2:
                continue
            w1 = state.core_2[w2]
            if w1 not in self._adj1[n1]:
                return False
            if not self.ematch(undirected_edge(n1, w1), undirected_edge(n2, w2)):
                return False
            mapped2 += 1
        if mode is not MatchMode.MONOMORPHISM:
            # no extra edges between n1 and the mapped part
            mapped1 = sum(1 for w1 in self._adj1[n1] if w1 in state.core_1)
            if mapped1 != mapped2:
                return False

        term1, new1 = state.lookahead_1(n1)
        term2, new2 = state.lookahead_2(n2)
        if mode is MatchMode.ISOMORPHISM:
            return term1 == term2 and new1 == new2
        if mode is MatchMode.INDUCED:
            return term1 >= term2 and new1 >= new2
        return term1 >= term2 and term1 + new1 >= term2 + new2

    def _next_level(
        self, state: MatchState, mode: MatchMode
    ) -> Tuple[NodeId, Iterator[NodeId]]:
        """Pick the most constrained unmapped query vertex."""
        pool = state.frontier_2() or [n for n in self.G2.nodes if n not in state.core_2]
        best: Optional[Tuple[Tuple[int, int], NodeId, List[NodeId]]] = None
        for n2 in sorted(pool, key=self._rank2.__getitem__):
            cands = self._candidates(state, n2, mode)
            key = (len(cands), -len(self._adj2[n2]))
            if best is None or key < best[0]:
                best = (key, n2, cands)
                if not cands:
                    break
        _, n2, cands = best
        return n2, iter(cands)

    # ------------------------------------------------------------------
    # Core search
    # ------------------------------------------------------------------
    def _match(self, mode: MatchMode) -> Iterator[MappingDict]:
        self._timed_out = False
        n_query = self.G2.number_of_nodes()
        n_target = self.G1.number_of_nodes()
        if n_query == 0:
            if mode is MatchMode.ISOMORPHISM and n_target == 0:
                yield {}
            return
        if n_query > n_target or (
            mode is MatchMode.ISOMORPHISM and n_query != n_target
        ):
            return

        budget = SearchBudget(self.timeout).start()
        state = MatchState(self._adj1, self._adj2)
        levels: List[Tuple[NodeId, Iterator[NodeId]]] = [self._next_level(state, mode)]
        while levels:
            if budget.expired():
                self._timed_out = True
                logger.debug(
                    "VF2 %s search aborted at depth %d", mode.value, state.depth
                )
                return
            n2, candidates = levels[-1]
            for n1 in candidates:
                if self._feasible(state, n1, n2, mode):
                    state.push(n1, n2)
                    break
            else:
                levels.pop()
                if levels:
                    state.pop()
                continue

            if state.depth == n_query:
                yield dict(state.core_1)
                state.pop()
            else:
                levels.append(self._next_level(state, mode))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def isomorphisms_iter(self) -> Iterator[MappingDict]:
        """Lazily yield all isomorphisms ``G1 -> G2``."""
        return self._match(MatchMode.ISOMORPHISM)

    def subgraph_isomorphisms_iter(self) -> Iterator[MappingDict]:
        """Lazily yield node-induced subgraph isomorphisms."""
        return self._match(MatchMode.INDUCED)

    def subgraph_monomorphisms_iter(self) -> Iterator[MappingDict]:
        """Lazily yield subgraph monomorphisms (extra target edges allowed)."""
        return self._match(MatchMode.MONOMORPHISM)

    def is_isomorphic(self) -> bool:
        return next(self.isomorphisms_iter(), None) is not None

    def subgraph_is_isomorphic(self) -> bool:
        return next(self.subgraph_isomorphisms_iter(), None) is not None

    def subgraph_is_monomorphic(self) -> bool:
        return next(self.subgraph_monomorphisms_iter(), None) is not None

    @property
    def timed_out(self) -> bool:
        """``True`` if the most recent search stopped on its timeout."""
        return self._timed_out

    def __repr__(self) -> str:
        return (
            f"<VF2Matcher |G1|={self.G1.number_of_nodes()} "
            f"|G2|={self.G2.number_of_nodes()} timeout={self.timeout}>"
        )


def isomorphisms(G1: nx.Graph, G2: nx.Graph, **kwargs: Any) -> Iterator[MappingDict]:
    """Lazy iterator over isomorphisms; ``kwargs`` as for :class:`VF2Matcher`."""
    return VF2Matcher(G1, G2, **kwargs).isomorphisms_iter()


def subgraph_monomorphisms(
    G1: nx.Graph, G2: nx.Graph, **kwargs: Any
) -> Iterator[MappingDict]:
    """Lazy iterator over monomorphisms of ``G2`` into ``G1``."""
    return VF2Matcher(G1, G2, **kwargs).subgraph_monomorphisms_iter()


def nodesubgraph_isomorphisms(
    G1: nx.Graph, G2: nx.Graph, **kwargs: Any
) -> Iterator[MappingDict]:
    """Lazy iterator over node-induced subgraph isomorphisms."""
    return VF2Matcher(G1, G2, **kwargs).subgraph_isomorphisms_iter()
