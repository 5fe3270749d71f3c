from .formula import (
    TRUE,
    QueryLiteral,
    evaluate,
    implies,
    literals,
    query_and,
    query_not,
    query_or,
)

__all__ = [
    "TRUE",
    "QueryLiteral",
    "query_and",
    "query_or",
    "query_not",
    "literals",
    "evaluate",
    "implies",
]
