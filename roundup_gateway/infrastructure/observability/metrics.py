"""Prometheus metrics for upstream bank calls, token refreshes and round-ups"""

from prometheus_client import Counter, Histogram
from roundup_gateway.domain.models import TransactionBatch

# Bank API metrics
upstream_request_duration_histogram = Histogram(
    "starling_request_duration_seconds",
    "Starling API response time",
    ["operation", "status"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

upstream_failures_counter = Counter(
    "starling_failures_total",
    "Failed Starling API calls",
    ["operation"],
)

# Auth metrics
token_refresh_counter = Counter(
    "starling_token_refresh_total",
    "OAuth token refresh attempts",
    ["outcome"],  # success | failure | shared
)

# Round-up metrics
round_up_transaction_counter = Counter(
    "roundup_transactions_total",
    "Transactions passed through round-up enrichment",
    ["direction"],  # IN | OUT
)


def record_round_up_batch(batch: TransactionBatch) -> None:
    """Count enriched transactions by direction"""
    for result in batch.transactions:
        round_up_transaction_counter.labels(direction=result.transaction.direction.value).inc()
