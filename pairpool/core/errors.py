"""Exception types for the pool engine.

Every failed operation surfaces as exactly one of these, with no observable
side effect on the ledger or on checkpointable collaborators.
"""

from __future__ import annotations


class PoolError(Exception):
    """Base class for all pool failures."""


class InvalidInputError(PoolError, ValueError):
    """Raised when caller-supplied arguments are rejected before any state change."""


class QuoteError(PoolError, ValueError):
    """Raised when a quote would break a pool invariant or degenerate to zero."""


class TransferError(PoolError):
    """Raised when a token collaborator rejects or fails a transfer."""


class ReentrancyError(PoolError):
    """Raised when a mutating operation is entered while another is in progress."""


class InvariantError(PoolError):
    """Raised when a post-state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
