"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Optional

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class TokenPair:
    """OAuth access/refresh credentials, always replaced as a whole"""

    access_token: str
    refresh_token: str

    def __repr__(self) -> str:
        return "TokenPair(access_token=***, refresh_token=***)"


@dataclass(frozen=True)
class Money:
    """Amount in integer minor units (pence, cents) with its ISO 4217 currency"""

    minor_units: int
    currency: str

    @property
    def major_units(self) -> Decimal:
        return (Decimal(self.minor_units) / 100).quantize(TWO_PLACES)


class Direction(str, Enum):
    IN = "IN"
    OUT = "OUT"


@dataclass(frozen=True)
class Transaction:
    """Feed item from the bank, read-only for one fetch-and-respond cycle"""

    id: str
    amount: Money
    direction: Direction
    time: Optional[str] = None
    status: Optional[str] = None
    reference: Optional[str] = None
    counterparty: Optional[str] = None
    category: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class RoundUpResult:
    """Transaction plus the major-unit amount that rounds it up"""

    transaction: Transaction
    round_up: Decimal

    @property
    def round_up_money(self) -> Money:
        return Money(
            minor_units=int(self.round_up * 100),
            currency=self.transaction.amount.currency,
        )


@dataclass
class TransactionBatch:
    """Round-up results for one listing request"""

    transactions: List[RoundUpResult]
    total_round_up: Decimal
    currency: str


@dataclass
class Account:
    """Bank account as listed by the upstream API"""

    id: str
    name: str
    type: str
    default_category_id: str
    currency: Optional[str] = None


@dataclass
class SavingsGoal:
    """Savings goal mirror; only upstream transfers change its totals"""

    id: str
    name: str
    target: Optional[Money] = None
    total_saved: Optional[Money] = None
    state: Optional[str] = None


@dataclass(frozen=True)
class Transfer:
    """Single add-money intent, keyed so upstream treats a replay as a duplicate"""

    account_id: str
    savings_goal_id: str
    amount: Money
    idempotency_key: str


@dataclass
class TransferResult:
    """Outcome of an add-money call"""

    transfer: Transfer
    transfer_uid: Optional[str]
    success: bool
