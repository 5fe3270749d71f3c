"""formula.py — boolean query formulas over atom and bond descriptors
===================================================================

Query atoms and bonds carry a boolean formula whose leaves are
:class:`QueryLiteral` tests such as ``symbol == "N"`` or ``charge == 1``.
Formulas are immutable, hashable trees built with :func:`query_and`,
:func:`query_or` and :func:`query_not`.

Two operations are needed by the matcher:

* :func:`evaluate` checks a formula against the truth values of its
  literals on one target atom or bond.
* :func:`implies` decides whether every atom satisfying one formula also
  satisfies another, by enumerating the truth table over the union of
  their literals.

Examples
--------
.. code-block:: python

    from molmatch.Chem.Query.formula import QueryLiteral, query_and, query_or, implies

    amine_n = query_and(QueryLiteral("symbol", "N"), QueryLiteral("isaromatic", False))
    n_or_o = query_or(QueryLiteral("symbol", "N"), QueryLiteral("symbol", "O"))
    implies(amine_n, n_or_o)    # True
    implies(n_or_o, amine_n)    # False
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from typing import Any, Callable, Dict, FrozenSet, Mapping, Set, Tuple, Union

from molmatch.exceptions import FormulaError, PreconditionError

__all__ = [
    "VERTEX_DESCRIPTORS",
    "EDGE_DESCRIPTORS",
    "MULTI_VALUED",
    "BOOLEAN_DESCRIPTORS",
    "QueryLiteral",
    "QueryAnd",
    "QueryOr",
    "QueryNot",
    "TRUE",
    "query_and",
    "query_or",
    "query_not",
    "literals",
    "evaluate",
    "implies",
]

VERTEX_DESCRIPTORS: FrozenSet[str] = frozenset(
    {
        "symbol",
        "isaromatic",
        "charge",
        "mass",
        "connectivity",
        "degree",
        "valence",
        "total_hydrogens",
        "smallest_ring",
        "ring_count",
        "recursive",
    }
)
EDGE_DESCRIPTORS: FrozenSet[str] = frozenset({"order", "is_in_ring", "isaromatic"})

# an atom can satisfy several recursive patterns at once
MULTI_VALUED: FrozenSet[str] = frozenset({"recursive"})
BOOLEAN_DESCRIPTORS: FrozenSet[str] = frozenset({"isaromatic", "is_in_ring"})


@dataclass(frozen=True)
class QueryLiteral:
    """
    Atomic test ``descriptor(key) == value``.

    :param key: Descriptor name from :data:`VERTEX_DESCRIPTORS` or
        :data:`EDGE_DESCRIPTORS`.
    :param value: Expected descriptor value. For ``recursive`` this is the
        embedded query text.
    :raises PreconditionError: On an unknown descriptor key.
    """

    key: str
    value: Any = True

    def __post_init__(self) -> None:
        if self.key not in VERTEX_DESCRIPTORS | EDGE_DESCRIPTORS:
            raise PreconditionError(f"Unknown query descriptor {self.key!r}")

    def __str__(self) -> str:
        return f"{self.key}={self.value!r}"


@dataclass(frozen=True)
class QueryAnd:
    operands: Tuple["Formula", ...]

    def __str__(self) -> str:
        return "(" + " & ".join(map(str, self.operands)) + ")"


@dataclass(frozen=True)
class QueryOr:
    operands: Tuple["Formula", ...]

    def __str__(self) -> str:
        return "(" + " , ".join(map(str, self.operands)) + ")"


@dataclass(frozen=True)
class QueryNot:
    operand: "Formula"

    def __str__(self) -> str:
        return f"!{self.operand}"


class _Tautology:
    """Formula satisfied by anything (the ``*`` wildcard)."""

    _instance = None

    def __new__(cls) -> "_Tautology":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "TRUE"

    __str__ = __repr__


TRUE = _Tautology()

Formula = Union[QueryLiteral, QueryAnd, QueryOr, QueryNot, _Tautology]


def _group(kind: type, operands: Tuple[Formula, ...]) -> Formula:
    if not operands:
        raise FormulaError(f"{kind.__name__} needs at least one operand")
    flat = []
    for op in operands:
        if isinstance(op, kind):
            flat.extend(op.operands)
        else:
            flat.append(op)
    if kind is QueryAnd:
        flat = [op for op in flat if op is not TRUE] or [TRUE]
    elif TRUE in flat:
        return TRUE
    # drop duplicates, keep first occurrence
    flat = list(dict.fromkeys(flat))
    if len(flat) == 1:
        return flat[0]
    return kind(tuple(flat))


def query_and(*operands: Formula) -> Formula:
    """
    Conjunction of ``operands``.

    Nested conjunctions are flattened, :data:`TRUE` operands dropped and a
    single remaining operand returned as is.

    :raises FormulaError: If called without operands.
    """
    return _group(QueryAnd, operands)


def query_or(*operands: Formula) -> Formula:
    """Disjunction of ``operands``; see :func:`query_and`."""
    return _group(QueryOr, operands)


def query_not(operand: Formula) -> Formula:
    if operand is None:
        raise FormulaError("QueryNot needs an operand")
    if isinstance(operand, QueryNot):
        return operand.operand
    return QueryNot(operand)


def literals(formula: Formula) -> FrozenSet[QueryLiteral]:
    """Return the set of literals occurring in ``formula``."""
    if isinstance(formula, QueryLiteral):
        return frozenset({formula})
    if isinstance(formula, QueryNot):
        return literals(formula.operand)
    if isinstance(formula, (QueryAnd, QueryOr)):
        return frozenset().union(*(literals(op) for op in formula.operands))
    return frozenset()


def evaluate(
    formula: Formula,
    truth: Union[Mapping[QueryLiteral, bool], Callable[[QueryLiteral], bool]],
) -> bool:
    """
    Evaluate ``formula`` given the truth value of each literal.

    :param formula: Formula to evaluate.
    :param truth: Mapping or callable giving the value of a literal.
    :returns: Truth value of the formula.
    :rtype: bool
    """
    lookup = truth.__getitem__ if isinstance(truth, Mapping) else truth
    return _evaluate(formula, lookup)


def _evaluate(formula: Formula, lookup: Callable[[QueryLiteral], bool]) -> bool:
    if formula is TRUE:
        return True
    if isinstance(formula, QueryLiteral):
        return bool(lookup(formula))
    if isinstance(formula, QueryNot):
        return not _evaluate(formula.operand, lookup)
    if isinstance(formula, QueryAnd):
        return all(_evaluate(op, lookup) for op in formula.operands)
    if isinstance(formula, QueryOr):
        return any(_evaluate(op, lookup) for op in formula.operands)
    raise FormulaError(f"Not a query formula: {formula!r}")


def _consistent(assignment: Dict[QueryLiteral, bool]) -> bool:
    """
    A single-valued descriptor takes exactly one value.

    Two different values cannot hold at once, and a boolean descriptor
    tested for both ``True`` and ``False`` must satisfy one of them.
    """
    seen: Dict[str, Any] = {}
    tested: Dict[str, Set[bool]] = {}
    for lit, value in assignment.items():
        if lit.key in MULTI_VALUED:
            continue
        if lit.key in BOOLEAN_DESCRIPTORS:
            tested.setdefault(lit.key, set()).add(bool(lit.value))
        if not value:
            continue
        if lit.key in seen and seen[lit.key] != lit.value:
            return False
        seen[lit.key] = lit.value
    return all(
        key in seen for key, values in tested.items() if values == {True, False}
    )


def implies(f1: Formula, f2: Formula) -> bool:
    """
    ``True`` if every assignment satisfying ``f1`` also satisfies ``f2``.

    Assignments no atom or bond can realise are skipped: a single-valued
    descriptor holding two values, or a boolean descriptor holding neither.
    """
    lits = sorted(literals(f1) | literals(f2), key=str)
    for values in product((False, True), repeat=len(lits)):
        assignment = dict(zip(lits, values))
        if not _consistent(assignment):
            continue
        if _evaluate(f1, assignment.__getitem__) and not _evaluate(
            f2, assignment.__getitem__
        ):
            return False
    return True
