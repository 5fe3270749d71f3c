"""clique.py — maximum and maximal cliques of a plain undirected graph
======================================================================

Two classic algorithms sharing one search object:

* **Maximum clique** by branch and bound. Candidates are greedily coloured
  and the colour number bounds how much a partial clique can still grow
  (Tomita & Seki's MCQ). Vertices start in descending-degree order.
* **All maximal cliques** by Bron–Kerbosch with Tomita pivoting. Every
  inclusion-maximal clique is reported exactly once.

Both honour a :class:`~molmatch.Graph.status.SearchBudget`: the search
checks the budget at every expansion and returns cooperatively, keeping
whatever it has found so far.

References
----------
1. Tomita, E., & Seki, T. (2003). An efficient branch-and-bound algorithm
   for finding a maximum clique. DMTCS 2003, LNCS 2731, 278–289.
2. Tomita, E., Tanaka, A., & Takahashi, H. (2006). The worst-case time
   complexity for generating all maximal cliques and computational
   experiments. Theoretical Computer Science, 363(1), 28–42.
"""

from __future__ import annotations

from typing import Dict, Hashable, Iterable, List, Set, Tuple

import networkx as nx

from molmatch.Graph.status import SearchBudget, SearchStatus
from molmatch.Graph.utils import adjacency_sets

__all__ = ["CliqueSearch"]

NodeId = Hashable
Clique = List[NodeId]


class CliqueSearch:
    """
    Single-use clique search over a plain graph.

    :param graph: Simple undirected graph.
    :type graph: nx.Graph
    :param budget: Budget governing timeout and target size.
    :type budget: SearchBudget
    """

    def __init__(self, graph: nx.Graph, budget: SearchBudget) -> None:
        # stable sort keeps insertion order among equal degrees
        self._order: List[NodeId] = sorted(graph.nodes, key=lambda n: -graph.degree(n))
        self._rank: Dict[NodeId, int] = {n: i for i, n in enumerate(self._order)}
        self._adj: Dict[NodeId, Set[NodeId]] = adjacency_sets(graph)
        self._budget = budget
        self.best: Clique = []
        self.cliques: List[Clique] = []

    @property
    def status(self) -> SearchStatus:
        return self._budget.status

    def _sorted(self, nodes: Iterable[NodeId]) -> List[NodeId]:
        return sorted(nodes, key=self._rank.__getitem__)

    def _colour_sort(self, candidates: List[NodeId]) -> Tuple[List[NodeId], List[int]]:
        """
        Greedy sequential colouring of ``candidates``.

        :returns: Vertices regrouped by colour class and the (non-decreasing)
            colour number of each.
        """
        classes: List[List[NodeId]] = []
        for v in candidates:
            nbrs = self._adj[v]
            for cls in classes:
                if nbrs.isdisjoint(cls):
                    cls.append(v)
                    break
            else:
                classes.append([v])
        order: List[NodeId] = []
        colours: List[int] = []
        for k, cls in enumerate(classes, start=1):
            order.extend(cls)
            colours.extend([k] * len(cls))
        return order, colours

    def _colour_bound(self, candidates: Iterable[NodeId]) -> int:
        _, colours = self._colour_sort(self._sorted(candidates))
        return colours[-1] if colours else 0

    def _report(self, clique: Clique) -> None:
        self.cliques.append(clique)
        if len(clique) > len(self.best):
            self.best = clique
        self._budget.reached(len(clique))

    # ------------------------------------------------------------------
    # Maximum clique
    # ------------------------------------------------------------------
    def maximum(self) -> Clique:
        """
        Run branch and bound and return the first maximum clique found.

        :returns: Vertices of the best clique (``[]`` for the null graph).
        :rtype: list
        """
        self._budget.start()
        self._expand([], list(self._order))
        return self.best

    def _expand(self, clique: Clique, candidates: List[NodeId]) -> None:
        if self._budget.expired():
            return
        order, colours = self._colour_sort(candidates)
        for i in range(len(order) - 1, -1, -1):
            if len(clique) + colours[i] <= len(self.best):
                return
            v = order[i]
            grown = clique + [v]
            nbrs = self._adj[v]
            remaining = [w for w in order[:i] if w in nbrs]
            if remaining:
                self._expand(grown, remaining)
            elif len(grown) > len(self.best):
                self.best = grown
                self._budget.reached(len(grown))
            if self._budget.stopped:
                return

    # ------------------------------------------------------------------
    # All maximal cliques
    # ------------------------------------------------------------------
    def all_maximal(self) -> List[Clique]:
        """
        Enumerate all maximal cliques (Bron–Kerbosch with pivoting).

        :returns: Maximal cliques in discovery order.
        :rtype: list[list]
        """
        self._budget.start()
        self._bron_kerbosch([], set(self._order), set())
        return self.cliques

    def _bron_kerbosch(
        self, clique: Clique, cand: Set[NodeId], excl: Set[NodeId]
    ) -> None:
        if self._budget.expired():
            return
        if not cand:
            if not excl and clique:
                self._report(clique)
            return
        # max() keeps the first maximum, so the pivot is rank-deterministic
        pivot = max(self._sorted(cand | excl), key=lambda u: len(cand & self._adj[u]))
        for v in self._sorted(cand - self._adj[pivot]):
            nbrs = self._adj[v]
            self._bron_kerbosch(clique + [v], cand & nbrs, excl & nbrs)
            if self._budget.stopped:
                return
            cand.discard(v)
            excl.add(v)
