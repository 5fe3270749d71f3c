from .predicates import AttributeKind, ematchgen, vmatchgen
from .similarity import mcs_distance, mcs_size, mcs_tanimoto
from .structure_match import (
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

__all__ = [
    "AttributeKind",
    "vmatchgen",
    "ematchgen",
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
    "mcs_size",
    "mcs_tanimoto",
    "mcs_distance",
]
