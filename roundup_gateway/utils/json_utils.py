"""Lenient JSON decoding and error-message extraction for bank API responses"""

from typing import Any, Callable, List, Optional
import httpx


def safe_json(response: httpx.Response) -> Any:
    """Decoded JSON body, or None when the body is not JSON"""
    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _top_level_message(body: dict) -> Optional[str]:
    value = body.get("message")
    return value if isinstance(value, str) else None


def _error_description(body: dict) -> Optional[str]:
    value = body.get("error_description")
    return value if isinstance(value, str) else None


def _first_of_errors(body: dict) -> Optional[str]:
    errors = body.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if isinstance(first, dict) and isinstance(first.get("message"), str):
        return first["message"]
    if isinstance(first, str):
        return first
    return None


# Tried in order, first match wins
ERROR_MESSAGE_STRATEGIES: List[Callable[[dict], Optional[str]]] = [
    _top_level_message,
    _error_description,
    _first_of_errors,
]


def extract_error_message(body: Any) -> Optional[str]:
    """
    Best human-readable message from the error shapes the bank API uses:
    {"message": ...}, {"error_description": ...}, {"errors": [{"message": ...}]}
    """
    if not isinstance(body, dict):
        return None
    for strategy in ERROR_MESSAGE_STRATEGIES:
        message = strategy(body)
        if message:
            return message
    return None
