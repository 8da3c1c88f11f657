"""
Bybit REST client for perpetual funding rates.
Uses the public v5 tickers endpoint for linear (USDT) contracts.
"""
import asyncio
import logging
from typing import Optional

import aiohttp
from pydantic import ValidationError

from core.exceptions import (
    ApiError, EmptyResultError, HttpError, MarketDataNetworkError, ParseError
)
from core.models import FundingRate, TickerResponse
from utils.formatting import format_funding_rate

logger = logging.getLogger(__name__)

TICKERS_PATH = "/v5/market/tickers"
CATEGORY = "linear"


class BybitClient:
    """
    Fetches the current funding rate for a symbol from Bybit.

    One GET per call, no caching and no retries. A shared session can be
    passed in; otherwise one is created on first use and closed by close().
    """

    def __init__(
        self,
        rest_url: str = "https://api.bybit.com",
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """Initialize the Bybit client."""
        self.tickers_url = rest_url.rstrip("/") + TICKERS_PATH
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self):
        """Ensure aiohttp session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

    async def close(self):
        """Close the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def get_funding_rate(self, symbol: str) -> FundingRate:
        """
        Fetch the current funding rate for a symbol.

        Args:
            symbol: Bybit symbol, e.g. "BTCUSDT"

        Returns:
            FundingRate with the rate as a percentage string (4 decimals)

        Raises:
            MarketDataNetworkError: transport failure or timeout
            HttpError: non-success HTTP status
            ParseError: malformed body or non-numeric funding rate
            ApiError: non-zero retCode
            EmptyResultError: no ticker for the symbol
        """
        await self._ensure_session()
        params = {"category": CATEGORY, "symbol": symbol}

        logger.debug(f"Requesting FR for symbol: {symbol}")

        try:
            async with self._session.get(
                self.tickers_url,
                params=params,
                timeout=self._timeout
            ) as response:
                body = await response.read()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise MarketDataNetworkError(f"Request for {symbol} failed: {e!r}") from e

        if not 200 <= status < 300:
            logger.error(f"API request failed with status: {status}")
            raise HttpError(status, body.decode("utf-8", errors="replace"))

        try:
            ticker_response = TickerResponse.model_validate_json(body)
        except ValidationError as e:
            raise ParseError(
                f"Unexpected tickers response for {symbol}: {e}",
                body.decode("utf-8", errors="replace")
            ) from e

        if ticker_response.ret_code != 0:
            logger.error(
                f"API returned error code {ticker_response.ret_code}: {ticker_response.ret_msg}"
            )
            raise ApiError(ticker_response.ret_code, ticker_response.ret_msg)

        tickers = ticker_response.result.list
        if not tickers:
            raise EmptyResultError(symbol)

        rate = format_funding_rate(tickers[0].funding_rate)
        return FundingRate(symbol=symbol, rate=rate)
