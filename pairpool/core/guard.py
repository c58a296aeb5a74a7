"""
Re-entrancy guard for the pool's mutating operations.

Token collaborators are untrusted code that runs in the middle of an
operation. The guard is held for the whole outermost call; any nested
deposit/swap/withdraw is rejected before it reads or writes the ledger.
"""

from __future__ import annotations

from types import TracebackType
from typing import Optional, Type

from .errors import ReentrancyError


class ReentrancyGuard:
    """Non-reentrant context manager: `with guard: ...`."""

    def __init__(self) -> None:
        self._entered = False
        self._rejected = 0

    @property
    def entered(self) -> bool:
        return self._entered

    @property
    def rejected(self) -> int:
        """Number of nested entries rejected so far."""
        return self._rejected

    def __enter__(self) -> "ReentrancyGuard":
        if self._entered:
            self._rejected += 1
            raise ReentrancyError("re-entrant call rejected: an operation is already in progress")
        self._entered = True
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self._entered = False
