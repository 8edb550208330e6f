"""Unit tests for round-up math"""

import pytest
from decimal import Decimal
from roundup_gateway.domain.exceptions import InvalidAmountError
from roundup_gateway.domain.models import Direction, Money, Transaction
from roundup_gateway.domain.roundup import round_up, round_up_transaction, to_minor_units, total_round_up


@pytest.mark.parametrize(
    "minor_units, expected",
    [
        (435, Decimal("0.65")),
        (520, Decimal("0.80")),
        (87, Decimal("0.13")),
        (199, Decimal("0.01")),
        (1, Decimal("0.99")),
    ],
)
def test_round_up_known_values(minor_units, expected):
    """Test round-up to the next whole pound"""
    assert round_up(minor_units) == expected


@pytest.mark.parametrize("minor_units", [0, 100, 300, 123400])
def test_round_up_whole_amount_is_zero_not_one(minor_units):
    """Test ceiling of a whole amount equals itself, so nothing is added"""
    result = round_up(minor_units)
    assert result == Decimal("0.00")
    assert result != Decimal("1.00")


def test_round_up_range_and_zero_iff_multiple_of_100():
    """Test every value stays in [0, 1) and is zero exactly on whole amounts"""
    for minor_units in range(0, 2001):
        result = round_up(minor_units)
        assert Decimal(0) <= result < Decimal(1)
        assert (result == 0) == (minor_units % 100 == 0)


def test_round_up_has_two_decimal_places():
    """Test results are exact decimals, no float residue"""
    assert round_up(435).as_tuple().exponent == -2
    assert str(round_up(435)) == "0.65"


def test_round_up_transaction_inbound_contributes_zero():
    """Test credits are never rounded up"""
    credit = Transaction(id="in", amount=Money(435, "GBP"), direction=Direction.IN)
    assert round_up_transaction(credit).round_up == Decimal("0.00")


def test_round_up_transaction_outbound():
    """Test debits carry their round-up and its money form"""
    debit = Transaction(id="out", amount=Money(435, "EUR"), direction=Direction.OUT)
    result = round_up_transaction(debit)

    assert result.round_up == Decimal("0.65")
    assert result.round_up_money == Money(65, "EUR")
    assert result.transaction is debit


def test_total_round_up(sample_transactions):
    """Test £4.35 + £5.20 + £0.87 debits round up to £1.58 in total"""
    results = [round_up_transaction(t) for t in sample_transactions]
    assert total_round_up(results) == Decimal("1.58")


def test_total_round_up_empty():
    assert total_round_up([]) == Decimal("0.00")


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("1.58"), 158),
        (1.58, 158),
        ("0.01", 1),
        (2, 200),
        ("0.005", 1),  # half up
    ],
)
def test_to_minor_units(amount, expected):
    assert to_minor_units(amount) == expected


@pytest.mark.parametrize("amount", [0, -1, "0.004", "abc", "NaN", float("inf")])
def test_to_minor_units_rejects_non_positive_or_invalid(amount):
    with pytest.raises(InvalidAmountError):
        to_minor_units(amount)


def test_money_major_units():
    assert Money(435, "GBP").major_units == Decimal("4.35")
    assert Money(100, "GBP").major_units == Decimal("1.00")
