"""conn_clique.py — connection-constrained (c-)cliques
=====================================================

A *c-clique* is a clique whose members are also connected through the
edges labelled ``True`` in an auxiliary edge label map. In the MCS setting
``True`` marks product-graph edges that correspond to real bonds in both
molecules, so a c-clique maps back to one contiguous common fragment.

A candidate ``w`` may join a partial clique ``C`` only if some ``v`` in
``C`` has ``labels[(v, w)] is True``. Candidates adjacent to every member
of ``C`` through ``False`` edges only are parked in a *deferred* set and
promoted as soon as a newly added member reaches them via a ``True``
edge.

The enumeration follows Cazals & Karande; the maximum search reuses the
same promotion rule with a colouring bound over candidate and deferred
vertices.

References
----------
1. Cazals, F., & Karande, C. (2005). An algorithm for reporting maximal
   c-cliques. Theoretical Computer Science, 349(3), 484–490.
"""

from __future__ import annotations

from typing import Dict, Hashable, List, Mapping, Set, Tuple

import networkx as nx

from molmatch.Graph.Clique.clique import Clique, CliqueSearch
from molmatch.Graph.status import SearchBudget
from molmatch.Graph.utils import edge_label

__all__ = ["ConnCliqueSearch"]

NodeId = Hashable


class ConnCliqueSearch(CliqueSearch):
    """
    Single-use c-clique search.

    :param graph: Simple undirected graph.
    :type graph: nx.Graph
    :param edge_labels: Edge to bool map; missing edges count as ``False``.
    :type edge_labels: Mapping[tuple, bool]
    :param budget: Budget governing timeout and target size.
    :type budget: SearchBudget
    """

    def __init__(
        self,
        graph: nx.Graph,
        edge_labels: Mapping[Tuple[NodeId, NodeId], bool],
        budget: SearchBudget,
    ) -> None:
        super().__init__(graph, budget)
        self._cadj: Dict[NodeId, Set[NodeId]] = {n: set() for n in self._adj}
        self._dadj: Dict[NodeId, Set[NodeId]] = {n: set() for n in self._adj}
        for u, v in graph.edges():
            target = self._cadj if edge_label(edge_labels, u, v) else self._dadj
            target[u].add(v)
            target[v].add(u)

    def _extend(
        self, u: NodeId, cand: Set[NodeId], dcand: Set[NodeId]
    ) -> Tuple[Set[NodeId], Set[NodeId]]:
        """Restrict ``cand``/``dcand`` to neighbours of ``u`` and promote."""
        nbrs = self._adj[u]
        new_cand = cand & nbrs
        new_dcand = dcand & nbrs
        promoted = new_dcand & self._cadj[u]
        return new_cand | promoted, new_dcand - promoted

    # ------------------------------------------------------------------
    # Maximum c-clique
    # ------------------------------------------------------------------
    def maximum(self) -> Clique:
        self._budget.start()
        done: Set[NodeId] = set()
        for u in self._order:
            self._grow([u], self._cadj[u] - done, self._dadj[u] - done)
            if self._budget.stopped:
                break
            done.add(u)
        return self.best

    def _grow(self, clique: Clique, cand: Set[NodeId], dcand: Set[NodeId]) -> None:
        if self._budget.expired():
            return
        if len(clique) > len(self.best):
            self.best = clique
            if self._budget.reached(len(clique)):
                return
        for u in self._sorted(cand):
            if len(clique) + self._colour_bound(cand | dcand) <= len(self.best):
                return
            cand.discard(u)
            self._grow(clique + [u], *self._extend(u, cand, dcand))
            if self._budget.stopped:
                return

    # ------------------------------------------------------------------
    # All maximal c-cliques
    # ------------------------------------------------------------------
    def all_maximal(self) -> List[Clique]:
        self._budget.start()
        done: Set[NodeId] = set()
        for u in self._order:
            cadj, dadj = self._cadj[u], self._dadj[u]
            self._enumerate([u], cadj - done, dadj - done, cadj & done, dadj & done)
            if self._budget.stopped:
                break
            done.add(u)
        return self.cliques

    def _enumerate(
        self,
        clique: Clique,
        cand: Set[NodeId],
        dcand: Set[NodeId],
        excl: Set[NodeId],
        dexcl: Set[NodeId],
    ) -> None:
        if self._budget.expired():
            return
        if not cand and not excl:
            self._report(clique)
            return
        for u in self._sorted(cand):
            cand.discard(u)
            new_cand, new_dcand = self._extend(u, cand, dcand)
            new_excl, new_dexcl = self._extend(u, excl, dexcl)
            self._enumerate(clique + [u], new_cand, new_dcand, new_excl, new_dexcl)
            if self._budget.stopped:
                return
            excl.add(u)
