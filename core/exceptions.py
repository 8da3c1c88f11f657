"""Custom exceptions for the funding rate alert bot."""
from typing import Optional


class FundingAlertError(RuntimeError):
    """Base class for all bot errors."""


class ConfigLoadError(FundingAlertError):
    """Raised when the schedule config file is missing or invalid."""


class MissingCredentialError(FundingAlertError):
    """Raised when required Pushover credentials are not in the environment."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required environment variables: {', '.join(missing)}")
        self.missing = missing


class NetworkError(FundingAlertError):
    """Raised when an HTTP transport call fails or times out."""


class NotificationSendError(NetworkError):
    """Raised when a Pushover message could not be delivered."""


class MarketDataError(FundingAlertError):
    """Base class for funding rate fetch failures."""


class MarketDataNetworkError(MarketDataError, NetworkError):
    """Raised when the Bybit request itself fails."""


class HttpError(MarketDataError):
    """Raised when Bybit answers with a non-success HTTP status."""

    def __init__(self, status_code: int, body: Optional[str] = None) -> None:
        super().__init__(f"API request failed with status {status_code}")
        self.status_code = status_code
        self.body = body


class ApiError(MarketDataError):
    """Raised when Bybit returns a non-zero retCode."""

    def __init__(self, ret_code: int, ret_msg: str) -> None:
        super().__init__(f"API error: {ret_msg} (code: {ret_code})")
        self.ret_code = ret_code
        self.ret_msg = ret_msg


class EmptyResultError(MarketDataError):
    """Raised when the ticker list for a symbol is empty."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"No ticker data found for symbol: {symbol}")
        self.symbol = symbol


class ParseError(MarketDataError):
    """Raised when the response body or funding rate cannot be parsed."""

    def __init__(self, message: str, value: Optional[str] = None) -> None:
        super().__init__(message)
        self.value = value
