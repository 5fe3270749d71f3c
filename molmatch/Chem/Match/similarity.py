"""MCS-based similarity scores.

All scores use the topologically constrained MCS (:func:`tcmcis` /
:func:`tcmces`). ``mode="mcis"`` counts atoms, ``mode="mces"`` counts
bonds.
"""

from __future__ import annotations

from typing import Any, Tuple

import networkx as nx

from molmatch.Chem.Match.structure_match import tcmces, tcmcis
from molmatch.exceptions import PreconditionError

__all__ = ["mcs_size", "mcs_tanimoto", "mcs_distance"]


def _sizes(G1: nx.Graph, G2: nx.Graph, mode: str, **kwargs: Any) -> Tuple[int, int, int]:
    if mode == "mcis":
        return G1.number_of_nodes(), G2.number_of_nodes(), tcmcis(G1, G2, **kwargs).size
    if mode == "mces":
        return G1.number_of_edges(), G2.number_of_edges(), tcmces(G1, G2, **kwargs).size
    raise PreconditionError(f"mode must be 'mcis' or 'mces', got {mode!r}")


def mcs_size(G1: nx.Graph, G2: nx.Graph, mode: str = "mcis", **kwargs: Any) -> int:
    """Size of the topologically constrained MCS of ``G1`` and ``G2``."""
    return _sizes(G1, G2, mode, **kwargs)[2]


def mcs_tanimoto(
    G1: nx.Graph, G2: nx.Graph, mode: str = "mcis", **kwargs: Any
) -> float:
    """
    Tanimoto coefficient ``m / (a + b - m)``.

    ``a`` and ``b`` are the atom (or bond) counts and ``m`` the MCS size.
    Two empty graphs score ``1.0``.
    """
    a, b, m = _sizes(G1, G2, mode, **kwargs)
    denom = a + b - m
    if denom == 0:
        return 1.0
    return m / denom


def mcs_distance(G1: nx.Graph, G2: nx.Graph, mode: str = "mcis", **kwargs: Any) -> int:
    """Edit-style distance ``a + b - 2m``."""
    a, b, m = _sizes(G1, G2, mode, **kwargs)
    return a + b - 2 * m
