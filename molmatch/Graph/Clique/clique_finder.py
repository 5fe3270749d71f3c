"""clique_finder.py — Clique search front end
===========================================

:class:`MaxCliqueFinder` wraps :class:`CliqueSearch` and
:class:`ConnCliqueSearch` behind one fluent object: configure once, run
:py:meth:`find_maximum` or :py:meth:`find_all_maximal`, then read
:pyattr:`cliques`, :pyattr:`best` and :pyattr:`status`.

The module-level functions are one-shot shortcuts returning plain lists.

Examples
--------
.. code-block:: python

    import networkx as nx
    from molmatch.Graph.Clique import MaxCliqueFinder, all_maximal_cliques

    G = nx.wheel_graph(8)
    len(all_maximal_cliques(G))        # 7 triangles

    finder = MaxCliqueFinder(G, timeout=1).find_maximum()
    len(finder.best), finder.status    # (3, SearchStatus.EXHAUSTED)

    labels = {(0, 1): True, (3, 4): True}
    finder = MaxCliqueFinder(nx.complete_graph(5), edge_labels=labels)
    len(finder.find_all_maximal().cliques)  # 3: {0, 1}, {3, 4}, {2}
"""

from __future__ import annotations

import logging
from typing import Hashable, Iterator, List, Mapping, Optional, Tuple, Union

import networkx as nx

from molmatch.Graph.Clique.clique import Clique, CliqueSearch
from molmatch.Graph.Clique.conn_clique import ConnCliqueSearch
from molmatch.Graph.status import SearchBudget, SearchStatus
from molmatch.Graph.utils import check_simple_graph

__all__ = [
    "MaxCliqueFinder",
    "maximum_clique",
    "all_maximal_cliques",
    "maximum_conn_clique",
    "all_maximal_conn_cliques",
]

logger = logging.getLogger(__name__)

NodeId = Hashable
EdgeLabels = Mapping[Tuple[NodeId, NodeId], bool]


class MaxCliqueFinder:
    """
    Maximum / maximal clique finder with optional connection constraint.

    :param graph: Simple undirected graph to search.
    :type graph: nx.Graph
    :param edge_labels: If given, only c-cliques (cliques connected through
        ``True``-labelled edges) are considered. Missing edges are ``False``.
    :type edge_labels: Mapping[tuple, bool] | None
    :param timeout: Seconds before the search stops with the best result so
        far. ``None`` disables the limit.
    :type timeout: float | None
    :param targetsize: Stop as soon as a clique of at least this size is
        found.
    :type targetsize: int | None
    :raises InvalidGraphError: If ``graph`` is not simple and undirected.
    """

    def __init__(
        self,
        graph: nx.Graph,
        *,
        edge_labels: Optional[EdgeLabels] = None,
        timeout: Optional[float] = None,
        targetsize: Optional[int] = None,
    ) -> None:
        check_simple_graph(graph)
        self._graph: nx.Graph = graph
        self._edge_labels: Optional[EdgeLabels] = edge_labels
        self.timeout: Optional[float] = timeout
        self.targetsize: Optional[int] = targetsize

        self._cliques: List[Clique] = []
        self._best: Clique = []
        self._status: SearchStatus = SearchStatus.EXHAUSTED

    def _new_search(self) -> Union[CliqueSearch, ConnCliqueSearch]:
        budget = SearchBudget(self.timeout, self.targetsize)
        if self._edge_labels is None:
            return CliqueSearch(self._graph, budget)
        return ConnCliqueSearch(self._graph, self._edge_labels, budget)

    # ------------------------------------------------------------------
    # Public search methods
    # ------------------------------------------------------------------
    def find_maximum(self) -> "MaxCliqueFinder":
        """
        Search for one maximum clique.

        :returns: The finder, with :pyattr:`best` and :pyattr:`status` set.
        :rtype: MaxCliqueFinder
        """
        search = self._new_search()
        self._best = search.maximum()
        self._cliques = [self._best] if self._best else []
        self._status = search.status
        logger.debug(
            "Maximum %sclique of size %d (%s)",
            "c-" if self.connected else "",
            len(self._best),
            self._status.value,
        )
        return self

    def find_all_maximal(self) -> "MaxCliqueFinder":
        """
        Enumerate every maximal clique.

        :returns: The finder, with :pyattr:`cliques`, :pyattr:`best` and
            :pyattr:`status` set.
        :rtype: MaxCliqueFinder
        """
        search = self._new_search()
        self._cliques = search.all_maximal()
        self._best = search.best
        self._status = search.status
        logger.debug(
            "Enumerated %d maximal %scliques (%s)",
            len(self._cliques),
            "c-" if self.connected else "",
            self._status.value,
        )
        return self

    # ------------------------------------------------------------------
    # Accessors / properties
    # ------------------------------------------------------------------
    @property
    def connected(self) -> bool:
        """``True`` if the connection-constrained variant is used."""
        return self._edge_labels is not None

    @property
    def cliques(self) -> List[Clique]:
        return [list(c) for c in self._cliques]

    @property
    def best(self) -> Clique:
        return list(self._best)

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def is_exhaustive(self) -> bool:
        return self._status is SearchStatus.EXHAUSTED

    @property
    def num_cliques(self) -> int:
        return len(self._cliques)

    def __iter__(self) -> Iterator[Clique]:
        return iter(self.cliques)

    def __repr__(self) -> str:
        return (
            f"<MaxCliqueFinder cliques={self.num_cliques} "
            f"best={len(self._best)} status={self._status.value}>"
        )

    __str__ = __repr__

    @property
    def help(self) -> str:
        return __doc__ or ""


def maximum_clique(
    G: nx.Graph,
    *,
    timeout: Optional[float] = None,
    targetsize: Optional[int] = None,
) -> Clique:
    """
    Return one maximum clique of ``G``.

    Ties are broken by discovery order. The null graph gives ``[]`` and an
    edgeless graph a single vertex.
    """
    finder = MaxCliqueFinder(G, timeout=timeout, targetsize=targetsize)
    return finder.find_maximum().best


def all_maximal_cliques(
    G: nx.Graph,
    *,
    timeout: Optional[float] = None,
    targetsize: Optional[int] = None,
) -> List[Clique]:
    """Return every maximal clique of ``G`` exactly once."""
    finder = MaxCliqueFinder(G, timeout=timeout, targetsize=targetsize)
    return finder.find_all_maximal().cliques


def maximum_conn_clique(
    G: nx.Graph,
    edge_labels: EdgeLabels,
    *,
    timeout: Optional[float] = None,
    targetsize: Optional[int] = None,
) -> Clique:
    """Return one maximum c-clique of ``G`` under ``edge_labels``."""
    finder = MaxCliqueFinder(
        G, edge_labels=edge_labels, timeout=timeout, targetsize=targetsize
    )
    return finder.find_maximum().best


def all_maximal_conn_cliques(
    G: nx.Graph,
    edge_labels: EdgeLabels,
    *,
    timeout: Optional[float] = None,
    targetsize: Optional[int] = None,
) -> List[Clique]:
    """Return every maximal c-clique of ``G`` under ``edge_labels``."""
    finder = MaxCliqueFinder(
        G, edge_labels=edge_labels, timeout=timeout, targetsize=targetsize
    )
    return finder.find_all_maximal().cliques
