from __future__ import annotations


class MolMatchError(RuntimeError):
    """Base class for all molmatch-specific errors."""


class PreconditionError(MolMatchError, ValueError):
    """Raised when a caller violates the precondition of an operation."""


class InvalidGraphError(MolMatchError, ValueError):
    """Raised when an input graph is not a simple undirected graph."""


class FormulaError(MolMatchError, AssertionError):
    """Raised when a query formula is built from structurally invalid operands."""
