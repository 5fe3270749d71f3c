"""mcs_matcher.py — Maximum Common Subgraph search
=================================================

Maximum common induced subgraphs (MCIS) and maximum common edge
subgraphs (MCES) computed as maximum cliques of a compatibility graph
(see :mod:`molmatch.Graph.Matcher.product`).

Highlights
----------
* **Budgeted**: a wall-clock ``timeout`` and an early-exit ``targetsize``
  return the best mapping found so far together with a
  :class:`~molmatch.Graph.status.SearchStatus`.
* **Connected fragments**: ``connected=True`` switches to the c-clique
  search, so the common subgraph is one connected fragment.
* **Topological constraint**: ``topological=True`` only pairs elements
  whose mutual distances agree within ``tolerance`` (up to ``diameter``).
* :class:`MCSMatcher` keeps results cached with the same
  :pyattr:`mappings` / :pyattr:`last_size` / :pyattr:`help` helpers as
  the other matchers.

Public API
~~~~~~~~~~
``maximum_common_subgraph(G1, G2, **options)``
    Node mapping ``G1 -> G2`` wrapped in :class:`MCSResult`.

``maximum_common_edge_subgraph(G1, G2, **options)``
    Edge mapping ``G1 -> G2`` wrapped in :class:`MCSResult`.

``MCSMatcher(node_label_names, node_label_defaults, edge_attribute='order')``
    Attribute-driven wrapper; ``find_common_subgraph(G1, G2, mode=...)``.

Examples
--------
.. code-block:: python

    import networkx as nx
    from molmatch.Graph.Matcher.mcs_matcher import maximum_common_subgraph

    res = maximum_common_subgraph(nx.cycle_graph(6), nx.path_graph(4))
    res.size, res.status      # (4, SearchStatus.EXHAUSTED)

    from molmatch.Graph.Matcher.mcs_matcher import MCSMatcher

    matcher = MCSMatcher().find_common_subgraph(G1, G2, mode="mces", connected=True)
    matcher.last_size
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Tuple

import networkx as nx
from networkx.algorithms.isomorphism import generic_node_match

from molmatch.exceptions import PreconditionError
from molmatch.Graph.Clique.clique_finder import MaxCliqueFinder
from molmatch.Graph.Matcher.config import MCSOptions
from molmatch.Graph.Matcher.product import edge_product, modular_product
from molmatch.Graph.status import SearchStatus
from molmatch.Graph.utils import check_simple_graph, undirected_edge

__all__ = [
    "MCSResult",
    "MCSMatcher",
    "maximum_common_subgraph",
    "maximum_common_edge_subgraph",
]

logger = logging.getLogger(__name__)

NodeId = Hashable
MappingDict = Dict[Any, Any]
Predicate = Callable[[Any, Any], bool]

MODES = ("mcis", "mces")


@dataclass(frozen=True)
class MCSResult:
    """
    Outcome of one maximum common subgraph search.

    :param mapping: Node (``mcis``) or edge (``mces``) mapping ``G1 -> G2``.
    :param status: Why the search stopped.
    :param mode: ``"mcis"`` or ``"mces"``.
    """

    mapping: MappingDict = field(default_factory=dict)
    status: SearchStatus = SearchStatus.EXHAUSTED
    mode: str = "mcis"

    @property
    def size(self) -> int:
        return len(self.mapping)

    @property
    def is_exhaustive(self) -> bool:
        """``True`` if the mapping is proven maximum."""
        return self.status is SearchStatus.EXHAUSTED


def _clique_to_mapping(clique: List[Any], mode: str) -> MappingDict:
    if mode == "mcis":
        return {g: h for g, h in clique}
    return {e1: undirected_edge(*o) for e1, o in clique}


def _common_subgraphs(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    mode: str,
    vmatch: Optional[Predicate],
    ematch: Optional[Predicate],
    options: MCSOptions,
    maximal: bool = False,
) -> Tuple[List[MappingDict], SearchStatus]:
    """Build the product graph, search it and translate cliques back."""
    if mode not in MODES:
        raise PreconditionError(f"mode must be one of {MODES}, got {mode!r}")
    check_simple_graph(G1, "G1")
    check_simple_graph(G2, "G2")

    build = modular_product if mode == "mcis" else edge_product
    product = build(
        G1,
        G2,
        vmatch=vmatch,
        ematch=ematch,
        topological=options.topological,
        diameter=options.diameter,
        tolerance=options.tolerance,
    )
    labels = (
        nx.get_edge_attributes(product, "connected") if options.connected else None
    )
    finder = MaxCliqueFinder(
        product,
        edge_labels=labels,
        timeout=options.timeout,
        targetsize=options.targetsize,
    )
    if maximal:
        finder.find_all_maximal()
    else:
        finder.find_maximum()

    mappings = [_clique_to_mapping(c, mode) for c in finder.cliques]
    mappings.sort(key=len, reverse=True)
    if finder.status is not SearchStatus.EXHAUSTED:
        logger.info(
            "%s search stopped early (%s) at size %d",
            mode.upper(),
            finder.status.value,
            len(finder.best),
        )
    return mappings, finder.status


def _resolve_options(options: Optional[MCSOptions], **overrides: Any) -> MCSOptions:
    return (options or MCSOptions()).updated(**overrides)


def maximum_common_subgraph(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """
    Maximum common induced subgraph of ``G1`` and ``G2``.

    :param G1: First graph.
    :param G2: Second graph.
    :param vmatch: Vertex predicate on node ids.
    :param ematch: Edge predicate on normalised edges.
    :param options: Base option set; keyword ``overrides`` (``connected``,
        ``topological``, ``diameter``, ``tolerance``, ``timeout``,
        ``targetsize``) are applied on top of it.
    :returns: Node mapping ``G1 -> G2`` and search status.
    :rtype: MCSResult
    """
    opts = _resolve_options(options, **overrides)
    mappings, status = _common_subgraphs(
        G1, G2, mode="mcis", vmatch=vmatch, ematch=ematch, options=opts
    )
    return MCSResult(mappings[0] if mappings else {}, status, "mcis")


def maximum_common_edge_subgraph(
    G1: nx.Graph,
    G2: nx.Graph,
    *,
    vmatch: Optional[Predicate] = None,
    ematch: Optional[Predicate] = None,
    options: Optional[MCSOptions] = None,
    **overrides: Any,
) -> MCSResult:
    """Maximum common edge subgraph; the mapping is ``{G1 edge: G2 edge}``."""
    opts = _resolve_options(options, **overrides)
    mappings, status = _common_subgraphs(
        G1, G2, mode="mces", vmatch=vmatch, ematch=ematch, options=opts
    )
    return MCSResult(mappings[0] if mappings else {}, status, "mces")


class MCSMatcher:
    """
    Attribute-driven maximum common subgraph matcher.

    Node compatibility compares the attributes named in
    ``node_label_names`` through :func:`generic_node_match`; edge
    compatibility compares the scalar ``edge_attribute``.

    :param node_label_names: Node attribute keys to compare. Defaults to
        ``["element"]``.
    :type node_label_names: list[str] | None
    :param node_label_defaults: Fallback values for missing attributes.
        Defaults to ``"*"`` for every key.
    :type node_label_defaults: list[Any] | None
    :param edge_attribute: Edge attribute storing the bond order.
    :type edge_attribute: str
    :param options: Default MCS options for every search.
    :type options: MCSOptions | None

    Examples
    --------
    .. code-block:: python

        matcher = MCSMatcher()
        matcher.find_common_subgraph(G1, G2, mcs=False)
        for mapping in matcher.mappings:
            print(mapping)
    """

    def __init__(
        self,
        node_label_names: Optional[List[str]] = None,
        node_label_defaults: Optional[List[Any]] = None,
        edge_attribute: str = "order",
        *,
        options: Optional[MCSOptions] = None,
    ) -> None:
        if node_label_names is None:
            node_label_names = ["element"]
        if node_label_defaults is None:
            node_label_defaults = ["*"] * len(node_label_names)

        self._node_label_names: List[str] = node_label_names
        self._node_label_defaults: List[Any] = node_label_defaults
        self.edge_attr: str = edge_attribute
        self.options: MCSOptions = options or MCSOptions()

        comparators: List[Callable[[Any, Any], bool]] = [
            lambda x, y: x == y for _ in node_label_names
        ]
        self.node_match: Callable[[Dict[str, Any], Dict[str, Any]], bool] = (
            generic_node_match(node_label_names, node_label_defaults, comparators)
        )

        self._mappings: List[MappingDict] = []
        self._last_size: int = 0
        self._status: SearchStatus = SearchStatus.EXHAUSTED
        self._mode: str = "mcis"

    def _edge_match(
        self, host_attrs: Dict[str, Any], pat_attrs: Dict[str, Any]
    ) -> bool:
        """
        Compare the scalar ``edge_attr`` of two edges.

        Values are compared as floats when both coerce, otherwise with
        plain equality.
        """
        hv = host_attrs.get(self.edge_attr, None)
        pv = pat_attrs.get(self.edge_attr, None)
        try:
            return float(hv) == float(pv)
        except (TypeError, ValueError):
            return hv == pv

    def _predicates(self, G1: nx.Graph, G2: nx.Graph) -> Tuple[Predicate, Predicate]:
        def vmatch(n1: NodeId, n2: NodeId) -> bool:
            return self.node_match(G1.nodes[n1], G2.nodes[n2])

        def ematch(e1: Tuple[NodeId, NodeId], e2: Tuple[NodeId, NodeId]) -> bool:
            return self._edge_match(G1.edges[e1], G2.edges[e2])

        return vmatch, ematch

    # ------------------------------------------------------------------
    # Public search methods
    # ------------------------------------------------------------------
    def find_common_subgraph(
        self,
        G1: nx.Graph,
        G2: nx.Graph,
        *,
        mode: str = "mcis",
        mcs: bool = True,
        **overrides: Any,
    ) -> "MCSMatcher":
        """
        Search for common subgraphs between two graphs.

        :param G1: First input graph.
        :type G1: nx.Graph
        :param G2: Second input graph.
        :type G2: nx.Graph
        :param mode: ``"mcis"`` for node mappings, ``"mces"`` for edge
            mappings.
        :type mode: str
        :param mcs: If ``True`` keep one maximum mapping, otherwise keep
            every maximal common subgraph, largest first.
        :type mcs: bool
        :param overrides: Per-call changes to :pyattr:`options`.
        :returns: The matcher instance (with internal cache updated).
        :rtype: MCSMatcher
        :raises PreconditionError: On an unknown ``mode``.
        """
        vmatch, ematch = self._predicates(G1, G2)
        self._mappings, self._status = _common_subgraphs(
            G1,
            G2,
            mode=mode,
            vmatch=vmatch,
            ematch=ematch,
            options=self.options.updated(**overrides),
            maximal=not mcs,
        )
        self._mode = mode
        self._last_size = len(self._mappings[0]) if self._mappings else 0
        return self

    # ------------------------------------------------------------------
    # Accessors / properties
    # ------------------------------------------------------------------
    def get_mappings(self) -> List[MappingDict]:
        """Return a copy of the cached mapping list, largest first."""
        return list(self._mappings)

    @property
    def mappings(self) -> List[MappingDict]:
        return self.get_mappings()

    @property
    def mapping(self) -> MappingDict:
        """Largest mapping of the most recent search (``{}`` if none)."""
        return dict(self._mappings[0]) if self._mappings else {}

    @property
    def result(self) -> MCSResult:
        return MCSResult(self.mapping, self._status, self._mode)

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def last_size(self) -> int:
        return self._last_size

    @property
    def num_mappings(self) -> int:
        return len(self._mappings)

    def __iter__(self) -> Iterator[MappingDict]:
        return iter(self._mappings)

    def __repr__(self) -> str:
        return (
            f"<MCSMatcher mappings={self.num_mappings} "
            f"last_size={self.last_size} status={self._status.value}>"
        )

    __str__ = __repr__

    @property
    def help(self) -> str:
        """
        Return the module-level documentation string.

        :returns: The full module docstring, if available.
        :rtype: str
        """
        return __doc__ or ""
