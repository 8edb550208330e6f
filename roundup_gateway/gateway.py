"""Gateway factory and facade over the Starling integration"""

from datetime import date
from decimal import Decimal
from typing import List, Union
import httpx

from roundup_gateway.config import Settings, get_settings
from roundup_gateway.domain.enrichment import list_transactions_with_round_up
from roundup_gateway.domain.models import Account, SavingsGoal, Transaction, TransactionBatch, TransferResult
from roundup_gateway.infrastructure.clients.executor import AuthenticatedExecutor
from roundup_gateway.infrastructure.clients.starling import StarlingClient
from roundup_gateway.infrastructure.clients.token_state import TokenState
from roundup_gateway.infrastructure.observability.logging import setup_logging
from roundup_gateway.infrastructure.observability.metrics import record_round_up_batch


class RoundUpGateway:
    """Operations offered to the routing layer; all share one TokenState"""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.token_state = TokenState(
            oauth_url=settings.oauth_url,
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            access_token=settings.access_token,
            refresh_token=settings.refresh_token,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
        self.executor = AuthenticatedExecutor(
            self.token_state,
            timeout=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
            transport=transport,
        )
        self.client = StarlingClient(
            self.executor,
            base_url=settings.api_base,
            default_currency=settings.default_currency,
        )

    async def list_accounts(self) -> List[Account]:
        return await self.client.list_accounts()

    async def list_transactions(
        self,
        account_id: str,
        category_id: str,
        date_from: Union[date, str],
        date_to: Union[date, str],
    ) -> List[Transaction]:
        return await self.client.list_transactions(account_id, category_id, date_from, date_to)

    async def list_transactions_with_round_up(
        self,
        account_id: str,
        category_id: str,
        date_from: Union[date, str],
        date_to: Union[date, str],
    ) -> TransactionBatch:
        batch = await list_transactions_with_round_up(
            self.client,
            account_id,
            category_id,
            date_from,
            date_to,
            default_currency=self.settings.default_currency,
        )
        record_round_up_batch(batch)
        return batch

    async def list_savings_goals(self, account_id: str) -> List[SavingsGoal]:
        return await self.client.list_savings_goals(account_id)

    async def create_savings_goal(
        self,
        account_id: str,
        name: str,
        currency: str,
        target_minor_units: int,
    ) -> SavingsGoal:
        return await self.client.create_savings_goal(account_id, name, currency, target_minor_units)

    async def transfer_to_savings_goal(
        self,
        account_id: str,
        goal_id: str,
        amount_major_units: Union[Decimal, int, float, str],
        currency: str,
    ) -> TransferResult:
        return await self.client.transfer_to_savings_goal(account_id, goal_id, amount_major_units, currency)


def create_gateway(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RoundUpGateway:
    """Create and configure the gateway; fails fast if credentials are missing"""
    settings = settings or get_settings()
    setup_logging(settings.log_level, service_name=settings.service_name)
    return RoundUpGateway(settings, transport=transport)
