"""OAuth token pair owner with single-flight refresh"""

import asyncio
import logging
import httpx
from roundup_gateway.domain.exceptions import RefreshError
from roundup_gateway.domain.models import TokenPair
from roundup_gateway.infrastructure.observability.metrics import token_refresh_counter
from roundup_gateway.utils.json_utils import extract_error_message, safe_json

logger = logging.getLogger(__name__)


class TokenState:
    """
    Sole owner of the current access/refresh token pair.

    States:
    - Bootstrapped: pair from configuration, or the last successful refresh
    - Refreshing: one exchange task in flight, shared by every caller
    - RefreshFailed: RefreshError raised, previous pair still installed

    There is no expiry timer; refresh only runs when a caller saw a 401.
    """

    def __init__(
        self,
        oauth_url: str,
        client_id: str,
        client_secret: str,
        access_token: str,
        refresh_token: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.oauth_url = oauth_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self._transport = transport
        self._pair = TokenPair(access_token=access_token, refresh_token=refresh_token)
        self._in_flight: asyncio.Future | None = None

    @property
    def current(self) -> TokenPair:
        return self._pair

    async def refresh(self, stale_access_token: str | None = None) -> TokenPair:
        """
        Exchange the refresh token for a new pair and install it.

        Callers arriving while an exchange is in flight await that same
        exchange and get its outcome, new pair or RefreshError alike. A caller
        that passes the access token its failed request used gets the
        installed pair back when it has already been replaced.

        Raises:
            RefreshError: Non-2xx response or no access_token in the body
        """
        if stale_access_token is not None and stale_access_token != self._pair.access_token:
            token_refresh_counter.labels(outcome="shared").inc()
            return self._pair

        if self._in_flight is None:
            in_flight = asyncio.ensure_future(self._exchange())
            in_flight.add_done_callback(self._clear_in_flight)
            self._in_flight = in_flight
        else:
            token_refresh_counter.labels(outcome="shared").inc()
            in_flight = self._in_flight

        # A cancelled waiter must not cancel the exchange the others await
        return await asyncio.shield(in_flight)

    def _clear_in_flight(self, future: asyncio.Future) -> None:
        if not future.cancelled():
            future.exception()  # waiters hold the outcome; mark it retrieved
        if self._in_flight is future:
            self._in_flight = None

    async def _exchange(self) -> TokenPair:
        previous = self._pair
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.oauth_url,
                    data={
                        "grant_type": "refresh_token",
                        "refresh_token": previous.refresh_token,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                    },
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError:
            token_refresh_counter.labels(outcome="failure").inc()
            logger.exception("Token refresh request failed", extra={"step": "token_refresh"})
            raise

        body = safe_json(response)

        if not response.is_success:
            token_refresh_counter.labels(outcome="failure").inc()
            message = extract_error_message(body) or f"Token refresh failed: {response.status_code}"
            logger.error(
                "Token refresh rejected",
                extra={"step": "token_refresh", "status_code": response.status_code, "upstream_message": message},
            )
            raise RefreshError(message, status_code=response.status_code, body=body)

        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(access_token, str) or not access_token:
            token_refresh_counter.labels(outcome="failure").inc()
            logger.error("Invalid token response format", extra={"step": "token_refresh"})
            raise RefreshError("Invalid token response format", status_code=response.status_code, body=body)

        # Upstream may or may not rotate the refresh token
        refresh_token = body.get("refresh_token")
        if not isinstance(refresh_token, str) or not refresh_token:
            refresh_token = previous.refresh_token

        self._pair = TokenPair(access_token=access_token, refresh_token=refresh_token)
        token_refresh_counter.labels(outcome="success").inc()
        logger.info("Token refresh succeeded", extra={"step": "token_refresh"})
        return self._pair
