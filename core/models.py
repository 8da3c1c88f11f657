"""
Pydantic models for Bybit ticker responses and funding rate results.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TickerData(BaseModel):
    """Single ticker entry. Only the funding rate is used."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str = ""
    funding_rate: str = Field(alias="fundingRate")


class TickerResult(BaseModel):
    """The `result` object of a tickers response."""
    model_config = ConfigDict(extra="ignore")

    # Bybit omits the list on some error responses
    list: List[TickerData] = Field(default_factory=list)


class TickerResponse(BaseModel):
    """Envelope returned by GET /v5/market/tickers."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ret_code: int = Field(alias="retCode")
    ret_msg: str = Field(default="", alias="retMsg")
    result: TickerResult = Field(default_factory=TickerResult)


class FundingRate(BaseModel):
    """Funding rate for one symbol, as a percentage with 4 decimals."""
    model_config = ConfigDict(frozen=True)

    symbol: str
    rate: str
