"""Domain-specific exceptions"""

from typing import Any


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BankAPIError(DomainException):
    """Bank API returned an error or an unusable response"""

    def __init__(self, message: str, status_code: int | None = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class AuthError(BankAPIError):
    """401 that is not a plain token expiry, or one seen again after a refresh"""

    pass


class RefreshError(BankAPIError):
    """OAuth refresh exchange failed; the previous token pair is still installed"""

    pass


class UpstreamError(BankAPIError):
    """Any other non-2xx or malformed response from the bank API"""

    pass


class InvalidAmountError(DomainException):
    """Transfer amount is zero, negative or not representable in minor units"""

    pass
