from .config import MCSOptions
from .edge_matcher import edgesubgraph_isomorphisms, emaptonmap
from .mcs_matcher import (
    MCSMatcher,
    MCSResult,
    maximum_common_edge_subgraph,
    maximum_common_subgraph,
)
from .prefilter import circuit_rank, exact_match_prefilter, substruct_match_prefilter
from .product import edge_product, modular_product
from .vf2_matcher import (
    MatchMode,
    VF2Matcher,
    isomorphisms,
    nodesubgraph_isomorphisms,
    subgraph_monomorphisms,
)

__all__ = [
    "MCSOptions",
    "VF2Matcher",
    "MatchMode",
    "isomorphisms",
    "subgraph_monomorphisms",
    "nodesubgraph_isomorphisms",
    "edgesubgraph_isomorphisms",
    "emaptonmap",
    "circuit_rank",
    "exact_match_prefilter",
    "substruct_match_prefilter",
    "modular_product",
    "edge_product",
    "MCSMatcher",
    "MCSResult",
    "maximum_common_subgraph",
    "maximum_common_edge_subgraph",
]
