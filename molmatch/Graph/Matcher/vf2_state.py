"""Partial-mapping state of the VF2 matcher.

The state is mutated in place by :py:meth:`MatchState.push` and undone by
:py:meth:`MatchState.pop`. Terminal bookkeeping follows VF2: ``inout_1``
and ``inout_2`` store, for every vertex that is mapped or adjacent to a
mapped vertex, the search depth at which it first entered that set, so a
pop only has to clear the entries stamped with the popped depth.
"""

from __future__ import annotations

from typing import Dict, Hashable, List, Set, Tuple

__all__ = ["MatchState"]

NodeId = Hashable


class MatchState:
    """
    Committed pairs and frontier sets of one search.

    :param adj1: Adjacency sets of the target graph ``G1``.
    :type adj1: dict[node, set]
    :param adj2: Adjacency sets of the query graph ``G2``.
    :type adj2: dict[node, set]
    """

    def __init__(
        self, adj1: Dict[NodeId, Set[NodeId]], adj2: Dict[NodeId, Set[NodeId]]
    ) -> None:
        self.adj1 = adj1
        self.adj2 = adj2
        self.core_1: Dict[NodeId, NodeId] = {}
        self.core_2: Dict[NodeId, NodeId] = {}
        self.inout_1: Dict[NodeId, int] = {}
        self.inout_2: Dict[NodeId, int] = {}
        self.stack: List[Tuple[NodeId, NodeId]] = []

    @property
    def depth(self) -> int:
        return len(self.stack)

    def push(self, n1: NodeId, n2: NodeId) -> None:
        depth = len(self.stack) + 1
        self.stack.append((n1, n2))
        self.core_1[n1] = n2
        self.core_2[n2] = n1
        self.inout_1.setdefault(n1, depth)
        self.inout_2.setdefault(n2, depth)
        for w in self.adj1[n1]:
            self.inout_1.setdefault(w, depth)
        for w in self.adj2[n2]:
            self.inout_2.setdefault(w, depth)

    def pop(self) -> Tuple[NodeId, NodeId]:
        depth = len(self.stack)
        n1, n2 = self.stack.pop()
        del self.core_1[n1]
        del self.core_2[n2]
        for inout in (self.inout_1, self.inout_2):
            for n in [n for n, d in inout.items() if d == depth]:
                del inout[n]
        return n1, n2

    def in_frontier_1(self, n: NodeId) -> bool:
        return n in self.inout_1 and n not in self.core_1

    def in_frontier_2(self, n: NodeId) -> bool:
        return n in self.inout_2 and n not in self.core_2

    def frontier_2(self) -> List[NodeId]:
        """Unmapped query vertices adjacent to the mapped part."""
        return [n for n in self.inout_2 if n not in self.core_2]

    def lookahead_1(self, n1: NodeId) -> Tuple[int, int]:
        """Count unmapped neighbours of ``n1`` in and outside the frontier."""
        term = new = 0
        for w in self.adj1[n1]:
            if w in self.core_1:
                continue
            if w in self.inout_1:
                term += 1
            else:
                new += 1
        return term, new

    def lookahead_2(self, n2: NodeId) -> Tuple[int, int]:
        term = new = 0
        for w in self.adj2[n2]:
            if w in self.core_2:
                continue
            if w in self.inout_2:
                term += 1
            else:
                new += 1
        return term, new
