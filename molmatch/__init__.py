"""
Public API for :mod:`molmatch`.

Graph matching for molecules: clique search, VF2 subgraph matching and
maximum common substructure on :class:`networkx.Graph` molecules.

Re-exported
-----------
- :func:`~molmatch.Chem.Match.structure_match.has_exact_match`
- :func:`~molmatch.Chem.Match.structure_match.has_substruct_match`
- :func:`~molmatch.Chem.Match.structure_match.tcmcis`
- :class:`~molmatch.Graph.Matcher.mcs_matcher.MCSResult`
- :class:`~molmatch.Graph.status.SearchStatus`
"""

from __future__ import annotations

from typing import List

from .Chem.Match.structure_match import (
    connected_mces,
    connected_mcis,
    disconnected_mces,
    disconnected_mcis,
    edge_substruct_matches,
    emaptonmap,
    exact_matches,
    has_edge_substruct_match,
    has_exact_match,
    has_node_substruct_match,
    has_substruct_match,
    node_substruct_matches,
    substruct_matches,
    tcmces,
    tcmcis,
)
from .Graph.Clique import all_maximal_cliques, maximum_clique
from .Graph.Matcher.mcs_matcher import MCSResult
from .Graph.status import SearchStatus
from .version import __version__

__all__: List[str] = [
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
    "maximum_clique",
    "all_maximal_cliques",
    "MCSResult",
    "SearchStatus",
    "__version__",
]
