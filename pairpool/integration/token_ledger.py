"""
Token collaborator contract and an in-memory reference ledger.

The pool never owns token balances; it drives an external fungible-token
ledger through `TokenCollaborator`. Collaborators that also implement
`Checkpointable` take part in the pool's all-or-nothing transactions: a failed
operation rolls them back together with the pool ledger.

`InMemoryToken` is the reference implementation used by tests and the offline
demo. Callers get a caller-bound handle via `token.connect(address)`, the same
way a signer-bound contract handle works on-chain.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol, Tuple, runtime_checkable

from ..state.balances import Amount, AssetId, BalanceTable, HolderId


@runtime_checkable
class TokenCollaborator(Protocol):
    """What the pool needs from each of its two tokens."""

    @property
    def asset_id(self) -> AssetId: ...

    def transfer(self, recipient: HolderId, amount: Amount) -> bool: ...

    def transfer_from(self, holder: HolderId, recipient: HolderId, amount: Amount) -> bool: ...

    def balance_of(self, holder: HolderId) -> Amount: ...


@runtime_checkable
class Checkpointable(Protocol):
    def checkpoint(self) -> object: ...

    def rollback(self, checkpoint: object) -> None: ...


def _require_holder(name: str, value: HolderId) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string: {value!r}")


def _require_amount(amount: Amount) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError("amount must be an int")
    if amount < 0:
        raise ValueError(f"amount must be non-negative: {amount}")


@dataclass(frozen=True)
class TokenCheckpoint:
    asset_id: AssetId
    balances: Dict[Tuple[HolderId, AssetId], Amount]
    allowances: Dict[Tuple[HolderId, HolderId], Amount]
    total_supply: Amount


class InMemoryToken:
    """
    Minimal fungible token: balances, allowances, mint.

    Transfers that cannot be covered by the sender's balance (or the spender's
    allowance) return False instead of raising, the way a non-reverting token
    signals failure; malformed arguments raise ValueError.
    """

    def __init__(self, asset_id: AssetId, name: str = "", symbol: str = "", *, decimals: int = 18) -> None:
        _require_holder("asset_id", asset_id)
        if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
            raise ValueError(f"decimals must be a non-negative int: {decimals!r}")
        self.asset_id = asset_id
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._balances = BalanceTable()
        self._allowances: Dict[Tuple[HolderId, HolderId], Amount] = {}
        self._total_supply: Amount = 0

    @property
    def total_supply(self) -> Amount:
        return self._total_supply

    def units(self, whole: int) -> Amount:
        """Convert a whole-token count to smallest units."""
        return whole * 10**self.decimals

    def connect(self, caller: HolderId) -> "ConnectedToken":
        return ConnectedToken(self, caller)

    def mint(self, recipient: HolderId, amount: Amount) -> None:
        _require_holder("recipient", recipient)
        _require_amount(amount)
        self._balances.add(recipient, self.asset_id, amount)
        self._total_supply += amount

    def balance_of(self, holder: HolderId) -> Amount:
        return self._balances.get(holder, self.asset_id)

    def allowance(self, owner: HolderId, spender: HolderId) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def approve_from(self, owner: HolderId, spender: HolderId, amount: Amount) -> bool:
        _require_holder("owner", owner)
        _require_holder("spender", spender)
        _require_amount(amount)
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount
        return True

    def transfer_as(self, sender: HolderId, recipient: HolderId, amount: Amount) -> bool:
        """Move `amount` from `sender` to `recipient`; False if underfunded."""
        _require_holder("sender", sender)
        _require_holder("recipient", recipient)
        _require_amount(amount)
        if self.balance_of(sender) < amount:
            return False
        self._balances.move(self.asset_id, sender, recipient, amount)
        return True

    def transfer_from_as(self, spender: HolderId, owner: HolderId, recipient: HolderId, amount: Amount) -> bool:
        """Spend `spender`'s allowance over `owner`'s balance; False if either is short."""
        _require_holder("spender", spender)
        _require_holder("owner", owner)
        _require_amount(amount)
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            return False
        if not self.transfer_as(owner, recipient, amount):
            return False
        self.approve_from(owner, spender, allowed - amount)
        return True

    def checkpoint(self) -> TokenCheckpoint:
        return TokenCheckpoint(
            asset_id=self.asset_id,
            balances=self._balances.get_all_balances(),
            allowances=dict(self._allowances),
            total_supply=self._total_supply,
        )

    def rollback(self, checkpoint: object) -> None:
        if not isinstance(checkpoint, TokenCheckpoint) or checkpoint.asset_id != self.asset_id:
            raise ValueError("checkpoint does not belong to this token")
        self._balances.load(checkpoint.balances)
        self._allowances = dict(checkpoint.allowances)
        self._total_supply = checkpoint.total_supply

    def __repr__(self) -> str:
        return f"InMemoryToken({self.symbol or self.asset_id}, supply={self._total_supply})"


class ConnectedToken:
    """Caller-bound handle on an `InMemoryToken` implementing `TokenCollaborator`."""

    def __init__(self, token: InMemoryToken, caller: HolderId) -> None:
        _require_holder("caller", caller)
        self.token = token
        self.caller = caller

    @property
    def asset_id(self) -> AssetId:
        return self.token.asset_id

    def transfer(self, recipient: HolderId, amount: Amount) -> bool:
        return self.token.transfer_as(self.caller, recipient, amount)

    def transfer_from(self, holder: HolderId, recipient: HolderId, amount: Amount) -> bool:
        return self.token.transfer_from_as(self.caller, holder, recipient, amount)

    def approve(self, spender: HolderId, amount: Amount) -> bool:
        return self.token.approve_from(self.caller, spender, amount)

    def balance_of(self, holder: HolderId) -> Amount:
        return self.token.balance_of(holder)

    def checkpoint(self) -> TokenCheckpoint:
        return self.token.checkpoint()

    def rollback(self, checkpoint: object) -> None:
        self.token.rollback(checkpoint)

    def __repr__(self) -> str:
        return f"ConnectedToken({self.token!r}, caller={self.caller})"
