"""Starling Bank API client for accounts, transaction feed and savings goals"""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel, ValidationError
from roundup_gateway.domain.exceptions import UpstreamError
from roundup_gateway.domain.models import (
    Account,
    Direction,
    Money,
    SavingsGoal,
    Transaction,
    Transfer,
    TransferResult,
)
from roundup_gateway.domain.roundup import to_minor_units
from roundup_gateway.infrastructure.clients.executor import AuthenticatedExecutor
from roundup_gateway.infrastructure.clients.schemas import (
    StarlingAccountsResponse,
    StarlingAmount,
    StarlingCreateSavingsGoalResponse,
    StarlingFeedResponse,
    StarlingSavingsGoalsResponse,
    StarlingTransferResponse,
)
from roundup_gateway.infrastructure.observability.logging import log_upstream_failure
from roundup_gateway.infrastructure.observability.metrics import upstream_failures_counter
from roundup_gateway.utils.date_utils import full_day_range
from roundup_gateway.utils.json_utils import extract_error_message, safe_json

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class StarlingClient:
    """Typed operations over the authenticated executor; keeps no results between calls"""

    def __init__(self, executor: AuthenticatedExecutor, base_url: str, default_currency: str = "GBP"):
        self.executor = executor
        self.base_url = base_url.rstrip("/")
        self.default_currency = default_currency

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        default_error: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Run the request and return the decoded body, raising UpstreamError on non-2xx"""
        response = await self.executor.execute(
            method,
            f"{self.base_url}{path}",
            operation=operation,
            params=params,
            json=json,
        )
        body = safe_json(response)

        if not response.is_success:
            message = extract_error_message(body) or default_error
            upstream_failures_counter.labels(operation=operation).inc()
            log_upstream_failure(operation, response.status_code, message)
            raise UpstreamError(message, status_code=response.status_code, body=body)

        return body

    @staticmethod
    def _parse(schema: Type[SchemaT], body: Any, endpoint: str) -> SchemaT:
        if not isinstance(body, dict):
            raise UpstreamError(f"Invalid response format from {endpoint} endpoint", body=body)
        try:
            return schema.model_validate(body)
        except ValidationError as e:
            raise UpstreamError(f"Invalid response format from {endpoint} endpoint", body=body) from e

    def _money(self, amount: Optional[StarlingAmount]) -> Optional[Money]:
        if amount is None:
            return None
        return Money(minor_units=amount.minor_units or 0, currency=amount.currency or self.default_currency)

    async def list_accounts(self) -> List[Account]:
        body = await self._send("list_accounts", "GET", "/accounts", "Failed to get accounts")
        data = self._parse(StarlingAccountsResponse, body, "accounts")

        return [
            Account(
                id=acc.account_uid,
                name=acc.name or "Unnamed Account",
                type=acc.account_type,
                default_category_id=acc.default_category,
                currency=acc.currency,
            )
            for acc in data.accounts
        ]

    async def list_transactions(
        self,
        account_id: str,
        category_id: str,
        date_from: Union[date, str],
        date_to: Union[date, str],
    ) -> List[Transaction]:
        """
        Fetch feed items between two calendar days, both days included in full.

        Raises:
            ValueError: date_from is after date_to or not YYYY-MM-DD
            UpstreamError: Non-2xx or malformed feed response
        """
        min_timestamp, max_timestamp = full_day_range(date_from, date_to)
        body = await self._send(
            "list_transactions",
            "GET",
            f"/feed/account/{account_id}/category/{category_id}/transactions-between",
            "Unknown error",
            params={
                "minTransactionTimestamp": min_timestamp,
                "maxTransactionTimestamp": max_timestamp,
            },
        )
        data = self._parse(StarlingFeedResponse, body, "transactions")

        return [
            Transaction(
                id=item.feed_item_uid,
                amount=self._money(item.amount),
                direction=Direction(item.direction),
                time=item.transaction_time,
                status=item.status,
                reference=item.reference,
                counterparty=item.counter_party_name,
                category=item.spending_category,
                source=item.source,
            )
            for item in data.feed_items
        ]

    async def list_savings_goals(self, account_id: str) -> List[SavingsGoal]:
        body = await self._send(
            "list_savings_goals",
            "GET",
            f"/account/{account_id}/savings-goals",
            "Failed to get savings goals",
        )
        data = self._parse(StarlingSavingsGoalsResponse, body, "savings goals")

        return [
            SavingsGoal(
                id=goal.savings_goal_uid,
                name=goal.name,
                target=self._money(goal.target),
                total_saved=self._money(goal.total_saved),
                state=goal.state,
            )
            for goal in data.savings_goal_list
        ]

    async def create_savings_goal(
        self,
        account_id: str,
        name: str,
        currency: str,
        target_minor_units: int,
    ) -> SavingsGoal:
        """Create a goal with a target given in minor units"""
        body = await self._send(
            "create_savings_goal",
            "PUT",
            f"/account/{account_id}/savings-goals",
            "Failed to create savings goal",
            json={
                "name": name,
                "currency": currency,
                "target": {"currency": currency, "minorUnits": target_minor_units},
            },
        )
        data = self._parse(StarlingCreateSavingsGoalResponse, body, "create savings goal")

        if not data.success or not data.savings_goal_uid:
            message = extract_error_message(body) or "Failed to create savings goal"
            upstream_failures_counter.labels(operation="create_savings_goal").inc()
            log_upstream_failure("create_savings_goal", None, message)
            raise UpstreamError(message, body=body)

        logger.info("Savings goal created", extra={"step": "create_savings_goal", "account_id": account_id})
        return SavingsGoal(
            id=data.savings_goal_uid,
            name=name,
            target=Money(minor_units=target_minor_units, currency=currency),
        )

    async def transfer_to_savings_goal(
        self,
        account_id: str,
        goal_id: str,
        amount_major_units: Union[Decimal, int, float, str],
        currency: str,
    ) -> TransferResult:
        """
        Move money into a savings goal.

        Every call gets a fresh uuid4 idempotency key in the URL, so upstream
        collapses a replay of this exact call but never merges two calls.
        Retrying is left to the caller.

        Raises:
            InvalidAmountError: Amount not positive (no request is sent)
            UpstreamError: Non-2xx or success=false from the bank
        """
        transfer = Transfer(
            account_id=account_id,
            savings_goal_id=goal_id,
            amount=Money(minor_units=to_minor_units(amount_major_units), currency=currency),
            idempotency_key=str(uuid.uuid4()),
        )

        body = await self._send(
            "transfer_to_savings_goal",
            "PUT",
            f"/account/{account_id}/savings-goals/{goal_id}/add-money/{transfer.idempotency_key}",
            "Failed to transfer to savings goal",
            json={"amount": {"currency": currency, "minorUnits": transfer.amount.minor_units}},
        )
        data = self._parse(StarlingTransferResponse, body, "transfer") if body is not None else StarlingTransferResponse()

        if not data.success:
            message = extract_error_message(body) or "Failed to transfer to savings goal"
            upstream_failures_counter.labels(operation="transfer_to_savings_goal").inc()
            log_upstream_failure("transfer_to_savings_goal", None, message)
            raise UpstreamError(message, body=body)

        logger.info(
            "Transferred to savings goal",
            extra={
                "step": "transfer_to_savings_goal",
                "account_id": account_id,
                "savings_goal_id": goal_id,
                "minor_units": transfer.amount.minor_units,
                "idempotency_key": transfer.idempotency_key,
            },
        )
        return TransferResult(transfer=transfer, transfer_uid=data.transfer_uid, success=True)
