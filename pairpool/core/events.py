"""Records emitted after successful pool operations.

All records are frozen dataclasses. They are appended to the pool's
`EventLog` only once every leg of the operation has succeeded, so a reverted
call never leaves a record behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Iterator, List, Optional, Union

from ..state.balances import Amount, AssetId, HolderId


@unique
class Event(Enum):
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    SWAP = "Swap"


@dataclass(frozen=True)
class DepositRecord:
    holder: HolderId
    amount_a: Amount
    amount_b: Amount
    shares_issued: Amount

    @property
    def event(self) -> Event:
        return Event.DEPOSIT


@dataclass(frozen=True)
class WithdrawalRecord:
    holder: HolderId
    shares_burned: Amount
    amount_a: Amount
    amount_b: Amount

    @property
    def event(self) -> Event:
        return Event.WITHDRAWAL


@dataclass(frozen=True)
class SwapRecord:
    """Swap outcome; reserves are post-swap so consumers can track the price."""

    holder: HolderId
    asset_in: AssetId
    amount_in: Amount
    asset_out: AssetId
    amount_out: Amount
    reserve_a: Amount
    reserve_b: Amount
    timestamp: int

    @property
    def event(self) -> Event:
        return Event.SWAP


Record = Union[DepositRecord, WithdrawalRecord, SwapRecord]


class EventLog:
    """Append-only log of emitted records."""

    def __init__(self) -> None:
        self._records: List[Record] = []

    def append(self, record: Record) -> None:
        self._records.append(record)

    def records(self, event: Optional[Event] = None) -> List[Record]:
        if event is None:
            return list(self._records)
        return [r for r in self._records if r.event == event]

    def swaps(self) -> List[SwapRecord]:
        return [r for r in self._records if isinstance(r, SwapRecord)]

    def __iter__(self) -> Iterator[Record]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
