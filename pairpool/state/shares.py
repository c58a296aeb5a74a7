"""
Pool share tracking.

Shares are fixed-point claims (scaled by `SHARE_PRECISION`) on a proportional
slice of both reserves. The table tracks per-holder balances and the total in
lockstep.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .balances import Amount, HolderId


class ShareTable:
    """
    Sparse share table mapping holder -> share balance, plus the running total.

    Notes:
    - Share balances are always non-negative.
    - Zero balances are omitted to keep the table sparse (a holder that fully
      exits disappears from the table).
    - `total` always equals the sum of all balances.
    """

    def __init__(self) -> None:
        self._balances: Dict[HolderId, Amount] = {}
        self._total: Amount = 0

    @property
    def total(self) -> Amount:
        return self._total

    def get(self, holder: HolderId) -> Amount:
        """Get share balance for holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def mint(self, holder: HolderId, amount: Amount) -> None:
        """Credit `amount` new shares to holder."""
        if amount <= 0:
            raise ValueError(f"Minted shares must be positive: {amount}")
        self._balances[holder] = self.get(holder) + amount
        self._total += amount

    def burn(self, holder: HolderId, amount: Amount) -> None:
        """Destroy `amount` of holder's shares."""
        if amount <= 0:
            raise ValueError(f"Burned shares must be positive: {amount}")
        current = self.get(holder)
        if amount > current:
            raise ValueError(
                f"Insufficient shares: {current} - {amount} = {current - amount} < 0"
            )
        remaining = current - amount
        if remaining == 0:
            del self._balances[holder]
        else:
            self._balances[holder] = remaining
        self._total -= amount

    def holders(self) -> List[HolderId]:
        """Holders with a non-zero balance, sorted."""
        return sorted(self._balances)

    def items(self) -> Tuple[Tuple[HolderId, Amount], ...]:
        """All (holder, shares) pairs, sorted by holder."""
        return tuple(sorted(self._balances.items()))

    def load(self, items: Tuple[Tuple[HolderId, Amount], ...]) -> None:
        """Replace the table contents; the total is recomputed from the items."""
        balances: Dict[HolderId, Amount] = {}
        for holder, amount in items:
            if amount <= 0:
                raise ValueError(f"Stored share balances must be positive: {holder} -> {amount}")
            if holder in balances:
                raise ValueError(f"Duplicate holder in share table: {holder}")
            balances[holder] = amount
        self._balances = balances
        self._total = sum(balances.values())

    def __len__(self) -> int:
        return len(self._balances)

    def __repr__(self) -> str:
        return f"ShareTable({len(self._balances)} holders, total={self._total})"
