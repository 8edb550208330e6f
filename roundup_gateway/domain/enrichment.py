"""Join fetched transactions with their round-up amounts"""

import logging
from datetime import date
from typing import List, Protocol, Union
from roundup_gateway.domain.models import Transaction, TransactionBatch
from roundup_gateway.domain.roundup import round_up_transaction, total_round_up

logger = logging.getLogger(__name__)


class TransactionSource(Protocol):
    async def list_transactions(
        self,
        account_id: str,
        category_id: str,
        date_from: Union[date, str],
        date_to: Union[date, str],
    ) -> List[Transaction]: ...


def enrich_transactions(transactions: List[Transaction], default_currency: str) -> TransactionBatch:
    """
    Attach a round-up to every transaction and total them.

    The batch currency comes from the first transaction; an empty feed is a
    valid result and gets the default currency with a zero total.
    """
    results = [round_up_transaction(txn) for txn in transactions]
    currency = transactions[0].amount.currency if transactions else default_currency

    return TransactionBatch(
        transactions=results,
        total_round_up=total_round_up(results),
        currency=currency,
    )


async def list_transactions_with_round_up(
    source: TransactionSource,
    account_id: str,
    category_id: str,
    date_from: Union[date, str],
    date_to: Union[date, str],
    default_currency: str,
) -> TransactionBatch:
    """Fetch the feed for a date range and return it with round-ups applied"""
    transactions = await source.list_transactions(account_id, category_id, date_from, date_to)
    batch = enrich_transactions(transactions, default_currency)

    logger.info(
        "Round-up batch computed",
        extra={
            "step": "round_up_batch",
            "account_id": account_id,
            "transaction_count": len(batch.transactions),
            "total_round_up": str(batch.total_round_up),
            "currency": batch.currency,
        },
    )
    return batch
