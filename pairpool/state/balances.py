"""
Multi-asset balance tracking.

Implements BalanceTable[HolderId, AssetId] -> Amount
"""

from typing import Dict, Tuple


# Type aliases
HolderId = str  # account / contract identity
AssetId = str  # token identity (address-like string)
Amount = int  # Non-negative integer in the asset's smallest unit


class BalanceTable:
    """
    Sparse balance table mapping (holder, asset) -> amount.

    Note: dict iteration order is never relied on; callers sort keys
    explicitly wherever ordering matters (see `state_to_dict` in `pools.py`).
    """

    def __init__(self):
        """Initialize empty balance table."""
        self._balances: Dict[Tuple[HolderId, AssetId], Amount] = {}

    def get(self, holder: HolderId, asset: AssetId) -> Amount:
        """Get balance for (holder, asset). Returns 0 if not found."""
        return self._balances.get((holder, asset), 0)

    def set(self, holder: HolderId, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (holder, asset).

        Args:
            holder: Holder identity
            asset: Asset identifier
            amount: Non-negative amount

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((holder, asset), None)
        else:
            self._balances[(holder, asset)] = amount

    def add(self, holder: HolderId, asset: AssetId, delta: int) -> None:
        """
        Add delta to balance. Equivalent to set(holder, asset, get(...) + delta).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(holder, asset)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(holder, asset, new_balance)

    def subtract(self, holder: HolderId, asset: AssetId, delta: Amount) -> None:
        """Subtract a non-negative delta. Raises ValueError on insufficient balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(holder, asset, -delta)

    def move(self, asset: AssetId, sender: HolderId, recipient: HolderId, amount: Amount) -> None:
        """Move `amount` of `asset` between two holders (all-or-nothing)."""
        if amount < 0:
            raise ValueError(f"Amount must be non-negative: {amount}")
        self.subtract(sender, asset, amount)
        self.add(recipient, asset, amount)

    def get_all_balances(self) -> Dict[Tuple[HolderId, AssetId], Amount]:
        """Return a copy of all balances."""
        return dict(self._balances)

    def load(self, balances: Dict[Tuple[HolderId, AssetId], Amount]) -> None:
        """Replace the whole table (used to roll back to a checkpoint)."""
        for key, amount in balances.items():
            if amount <= 0:
                raise ValueError(f"Stored balances must be positive: {key} -> {amount}")
        self._balances = dict(balances)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
