"""Default search budgets and the bundled MCS option set."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from molmatch.exceptions import PreconditionError

__all__ = [
    "DEFAULT_SUBSTRUCT_TIMEOUT",
    "DEFAULT_MCS_TIMEOUT",
    "DEFAULT_DIAMETER",
    "DEFAULT_TOLERANCE",
    "MCSOptions",
]

# seconds
DEFAULT_SUBSTRUCT_TIMEOUT: float = 10
DEFAULT_MCS_TIMEOUT: float = 60

DEFAULT_DIAMETER: int = 8
DEFAULT_TOLERANCE: int = 0


@dataclass(frozen=True)
class MCSOptions:
    """
    Options recognised by every maximum-common-subgraph entry point.

    :param connected: Restrict results to one connected common fragment.
    :param topological: Apply the distance-tolerant topological constraint.
    :param diameter: Distance cutoff of the topological constraint.
    :param tolerance: Allowed distance mismatch of the topological
        constraint.
    :param timeout: Seconds before the clique search returns its best
        result so far; ``None`` disables the limit.
    :param targetsize: Stop as soon as a common subgraph of at least this
        size is found.
    :raises PreconditionError: If a numeric option is out of range.
    """

    connected: bool = False
    topological: bool = False
    diameter: int = DEFAULT_DIAMETER
    tolerance: int = DEFAULT_TOLERANCE
    timeout: Optional[float] = DEFAULT_MCS_TIMEOUT
    targetsize: Optional[int] = None

    def __post_init__(self) -> None:
        if self.diameter < 1:
            raise PreconditionError(f"diameter must be >= 1, got {self.diameter}")
        if self.tolerance < 0:
            raise PreconditionError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.timeout is not None and self.timeout < 0:
            raise PreconditionError(f"timeout must be >= 0, got {self.timeout}")
        if self.targetsize is not None and self.targetsize < 1:
            raise PreconditionError(
                f"targetsize must be >= 1, got {self.targetsize}"
            )

    def updated(self, **changes: Any) -> "MCSOptions":
        """Return a copy with ``changes`` applied (unknown keys raise ``TypeError``)."""
        return replace(self, **changes)

    def as_kwargs(self) -> Dict[str, Any]:
        return asdict(self)
