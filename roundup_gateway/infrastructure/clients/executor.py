"""Bearer-authenticated HTTP calls with one refresh-and-retry on token expiry"""

import logging
import time
from typing import Any, Dict, Optional
import httpx
from roundup_gateway.domain.exceptions import AuthError
from roundup_gateway.infrastructure.clients.token_state import TokenState
from roundup_gateway.infrastructure.observability.metrics import (
    upstream_failures_counter,
    upstream_request_duration_histogram,
)
from roundup_gateway.utils.json_utils import extract_error_message, safe_json

logger = logging.getLogger(__name__)

EXPIRED_TOKEN_ERROR = "invalid_token"
EXPIRED_TOKEN_DESCRIPTION = "access token has expired"


def is_expired_token(body: Any) -> bool:
    """401 body says the access token expired, as opposed to being revoked or wrong"""
    if not isinstance(body, dict):
        return False
    description = body.get("error_description")
    return (
        body.get("error") == EXPIRED_TOKEN_ERROR
        and isinstance(description, str)
        and description.lower() == EXPIRED_TOKEN_DESCRIPTION
    )


class AuthenticatedExecutor:
    """Issues bank API requests with the current access token from TokenState"""

    def __init__(
        self,
        token_state: TokenState,
        timeout: float = 5.0,
        user_agent: str = "roundup-gateway/0.1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token_state = token_state
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    async def execute(
        self,
        method: str,
        url: str,
        *,
        operation: str = "request",
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        allow_retry: bool = True,
    ) -> httpx.Response:
        """
        Perform the request; statuses other than 401 come back untouched.

        Flow:
        1. Attach bearer token and standard headers
        2. On a 401 whose body reports an expired token, refresh once and
           retry once with allow_retry=False
        3. Any other 401 (or a second one) raises AuthError

        Raises:
            AuthError: 401 not caused by expiry, or still 401 after refresh
            RefreshError: Refresh exchange failed; the request is not retried
            httpx.HTTPError: Transport failures (timeouts, refused connections)
        """
        token = self.token_state.current.access_token
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

        start_time = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            upstream_request_duration_histogram.labels(
                operation=operation,
                status=type(e).__name__,
            ).observe(time.perf_counter() - start_time)
            upstream_failures_counter.labels(operation=operation).inc()
            logger.error(
                f"Starling {operation} transport error: {e!r}",
                extra={"step": operation, "error_type": type(e).__name__},
            )
            raise
        upstream_request_duration_histogram.labels(
            operation=operation,
            status=response.status_code,
        ).observe(time.perf_counter() - start_time)

        if response.status_code != 401:
            return response

        body = safe_json(response)

        if allow_retry and is_expired_token(body):
            logger.warning(
                "Starling token expired, refreshing",
                extra={"step": operation, "status_code": response.status_code},
            )
            await self.token_state.refresh(stale_access_token=token)
            logger.info("Retrying Starling request with new token", extra={"step": operation})
            return await self.execute(
                method,
                url,
                operation=operation,
                params=params,
                json=json,
                allow_retry=False,
            )

        message = extract_error_message(body) or "Unauthorized: Invalid token"
        logger.error(
            f"Starling {operation} unauthorized: {message}",
            extra={"step": operation, "status_code": response.status_code},
        )
        raise AuthError(message, status_code=response.status_code, body=body)
