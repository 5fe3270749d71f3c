from .clique_finder import (
    MaxCliqueFinder,
    maximum_clique,
    all_maximal_cliques,
    maximum_conn_clique,
    all_maximal_conn_cliques,
)

__all__ = [
    "MaxCliqueFinder",
    "maximum_clique",
    "all_maximal_cliques",
    "maximum_conn_clique",
    "all_maximal_conn_cliques",
]
