"""Search status flags and the cooperative budget shared by all searches."""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Optional

from molmatch.exceptions import PreconditionError

__all__ = ["SearchStatus", "SearchBudget"]

logger = logging.getLogger(__name__)


class SearchStatus(str, Enum):
    """How a bounded search terminated."""

    EXHAUSTED = "exhausted"
    TARGET_REACHED = "target_reached"
    TIMED_OUT = "timed_out"


class SearchBudget:
    """
    Wall-clock and target-size budget checked cooperatively by a search.

    The deadline is armed by :py:meth:`start`; searches call
    :py:meth:`expired` once per expansion step and :py:meth:`reached`
    whenever they improve their best result. Neither method raises: they
    flip :pyattr:`status` and the search returns on its own.

    :param timeout: Seconds before the search gives up, or ``None``.
    :type timeout: float | None
    :param targetsize: Result size at which the search may stop early.
    :type targetsize: int | None
    :raises PreconditionError: On a negative timeout or non-positive
        target size.
    """

    def __init__(
        self, timeout: Optional[float] = None, targetsize: Optional[int] = None
    ) -> None:
        if timeout is not None and timeout < 0:
            raise PreconditionError(f"timeout must be >= 0, got {timeout}")
        if targetsize is not None and targetsize < 1:
            raise PreconditionError(f"targetsize must be >= 1, got {targetsize}")
        self.timeout: Optional[float] = timeout
        self.targetsize: Optional[int] = targetsize
        self.status: SearchStatus = SearchStatus.EXHAUSTED
        self._deadline: Optional[float] = None

    def start(self) -> "SearchBudget":
        self.status = SearchStatus.EXHAUSTED
        self._deadline = (
            None if self.timeout is None else time.perf_counter() + self.timeout
        )
        return self

    @property
    def stopped(self) -> bool:
        return self.status is not SearchStatus.EXHAUSTED

    def expired(self) -> bool:
        """Return ``True`` once the search must stop (timeout or target hit)."""
        if self.stopped:
            return True
        if self._deadline is not None and time.perf_counter() >= self._deadline:
            self.status = SearchStatus.TIMED_OUT
            logger.debug("Search timed out after %.3fs", self.timeout)
            return True
        return False

    def reached(self, size: int) -> bool:
        """Record a result of ``size``; return ``True`` if it meets the target."""
        if self.targetsize is not None and size >= self.targetsize:
            self.status = SearchStatus.TARGET_REACHED
            logger.debug("Target size %d reached", self.targetsize)
            return True
        return False

    def __repr__(self) -> str:
        return (
            f"<SearchBudget timeout={self.timeout} "
            f"targetsize={self.targetsize} status={self.status.value}>"
        )
