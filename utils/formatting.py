"""
Message formatting utilities for funding rate notifications.
"""
import math

from core.exceptions import ParseError
from core.models import FundingRate

DEBUG_PREFIX = "[DEBUG]"


def format_funding_rate(raw_rate: str) -> str:
    """
    Convert a raw Bybit funding rate into a percentage string.

    Args:
        raw_rate: Decimal fraction as returned by the API (e.g. "0.0001234")

    Returns:
        Percentage with exactly 4 decimals (e.g. "0.0123")

    Raises:
        ParseError: if the value is not a finite number
    """
    try:
        rate = float(raw_rate)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Failed to parse funding rate '{raw_rate}': {e}", raw_rate) from e

    if not math.isfinite(rate):
        raise ParseError(f"Funding rate is not finite: '{raw_rate}'", raw_rate)

    return f"{rate * 100:.4f}"


def format_funding_notification(funding: FundingRate, debug: bool = False) -> str:
    """
    Format a funding rate into a push notification message.

    Debug messages are prefixed so test pushes are easy to tell apart.
    """
    message = f"{funding.symbol} current FR: {funding.rate}%"
    if debug:
        return f"{DEBUG_PREFIX} {message}"
    return message


def seconds_to_time_string(seconds: int) -> str:
    """Render a second-of-day as HH:MM:SS."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours:02d}:{minutes:02d}:{seconds % 60:02d}"
