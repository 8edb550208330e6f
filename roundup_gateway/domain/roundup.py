"""Round-up math over integer minor units"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union
from roundup_gateway.domain.exceptions import InvalidAmountError
from roundup_gateway.domain.models import Direction, RoundUpResult, Transaction, TWO_PLACES


def round_up(minor_units: int) -> Decimal:
    """
    Amount needed to bring a value up to the next whole major unit.

    Computed on the integer: ceil(m / 100) * 100 - m == (-m) % 100 for any
    integer m, so the result is always in [0, 1).

    Example:
        435 → 0.65  (£4.35 rounds to £5.00)
        100 → 0.00  (already whole, never 1.00)
    """
    remainder = -int(minor_units) % 100
    return max(Decimal(0), Decimal(remainder) / 100).quantize(TWO_PLACES)


def round_up_transaction(transaction: Transaction) -> RoundUpResult:
    """Only outbound transactions round up; inbound always contribute 0"""
    if transaction.direction == Direction.OUT:
        amount = round_up(transaction.amount.minor_units)
    else:
        amount = Decimal(0).quantize(TWO_PLACES)
    return RoundUpResult(transaction=transaction, round_up=amount)


def total_round_up(results: Iterable[RoundUpResult]) -> Decimal:
    return sum((r.round_up for r in results), Decimal(0)).quantize(TWO_PLACES)


def to_minor_units(amount_major_units: Union[Decimal, int, float, str]) -> int:
    """
    Convert a positive major-unit amount to minor units, rounding half up.

    Raises:
        InvalidAmountError: Not a number, not finite, or below one minor unit
    """
    try:
        value = Decimal(str(amount_major_units))
    except InvalidOperation as e:
        raise InvalidAmountError(f"Invalid amount: {amount_major_units!r}") from e

    if not value.is_finite() or value <= 0:
        raise InvalidAmountError(f"Amount must be positive: {amount_major_units!r}")

    minor_units = int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if minor_units <= 0:
        raise InvalidAmountError(f"Amount is below one minor unit: {amount_major_units!r}")
    return minor_units
