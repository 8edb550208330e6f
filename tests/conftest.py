"""Pytest fixtures for testing"""

import pytest
from typing import Callable, List
import httpx
from roundup_gateway.domain.models import Direction, Money, Transaction
from roundup_gateway.infrastructure.clients.executor import AuthenticatedExecutor
from roundup_gateway.infrastructure.clients.starling import StarlingClient
from roundup_gateway.infrastructure.clients.token_state import TokenState


API_BASE = "https://api.starling.test/api/v2"
OAUTH_URL = "https://api.starling.test/oauth/access-token"

EXPIRED_BODY = {"error": "invalid_token", "error_description": "Access token has expired"}


class FakeStarling:
    """Routes requests to a handler and records them, including OAuth calls"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def refresh_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == OAUTH_URL]

    @property
    def api_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) != OAUTH_URL]

    def bearer_tokens(self) -> List[str]:
        return [r.headers["Authorization"].removeprefix("Bearer ") for r in self.api_requests]


@pytest.fixture
def make_client() -> Callable[[FakeStarling], StarlingClient]:
    """Build the client stack over an in-memory transport"""

    def _make(fake: FakeStarling) -> StarlingClient:
        transport = httpx.MockTransport(fake)
        token_state = TokenState(
            oauth_url=OAUTH_URL,
            client_id="client-id",
            client_secret="client-secret",
            access_token="access-0",
            refresh_token="refresh-0",
            transport=transport,
        )
        executor = AuthenticatedExecutor(token_state, transport=transport)
        return StarlingClient(executor, base_url=API_BASE, default_currency="GBP")

    return _make


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Three card payments (£4.35, £5.20, £0.87) and one salary credit"""
    return [
        Transaction(id="1", amount=Money(435, "GBP"), direction=Direction.OUT, reference="Coffee"),
        Transaction(id="2", amount=Money(520, "GBP"), direction=Direction.OUT, reference="Lunch"),
        Transaction(id="3", amount=Money(87, "GBP"), direction=Direction.OUT, reference="Snack"),
        Transaction(id="4", amount=Money(150045, "GBP"), direction=Direction.IN, reference="Salary"),
    ]
