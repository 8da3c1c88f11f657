import asyncio

import pytest

from conftest import FakeResponse, FakeSession, ticker_body
from core.bybit_client import BybitClient
from core.exceptions import (
    ApiError, EmptyResultError, HttpError, MarketDataError,
    MarketDataNetworkError, NetworkError, ParseError
)


def _client(*responses):
    session = FakeSession(responses)
    return BybitClient(session=session), session


@pytest.mark.asyncio
async def test_get_funding_rate_formats_percentage():
    client, session = _client(FakeResponse(body=ticker_body("0.0001234")))

    funding = await client.get_funding_rate("BTCUSDT")

    assert funding.symbol == "BTCUSDT"
    assert funding.rate == "0.0123"
    request = session.requests[0]
    assert request["method"] == "GET"
    assert request["url"] == "https://api.bybit.com/v5/market/tickers"
    assert request["params"] == {"category": "linear", "symbol": "BTCUSDT"}


@pytest.mark.asyncio
async def test_get_funding_rate_negative_rate():
    client, _ = _client(FakeResponse(body=ticker_body("-0.0005")))

    funding = await client.get_funding_rate("ETHUSDT")

    assert funding.rate == "-0.0500"


@pytest.mark.asyncio
async def test_custom_rest_url_is_used():
    session = FakeSession([FakeResponse(body=ticker_body())])
    client = BybitClient(rest_url="https://api-testnet.bybit.com/", session=session)

    await client.get_funding_rate("BTCUSDT")

    assert session.requests[0]["url"] == "https://api-testnet.bybit.com/v5/market/tickers"


@pytest.mark.asyncio
async def test_transport_failure_raises_network_error(connection_error):
    client, _ = _client(FakeResponse(error=connection_error))

    with pytest.raises(MarketDataNetworkError) as exc_info:
        await client.get_funding_rate("BTCUSDT")

    assert isinstance(exc_info.value, NetworkError)
    assert isinstance(exc_info.value, MarketDataError)


@pytest.mark.asyncio
async def test_timeout_raises_network_error():
    client, _ = _client(FakeResponse(error=asyncio.TimeoutError()))

    with pytest.raises(MarketDataNetworkError):
        await client.get_funding_rate("BTCUSDT")


@pytest.mark.asyncio
async def test_non_success_status_raises_http_error():
    client, _ = _client(FakeResponse(status=503, body="unavailable"))

    with pytest.raises(HttpError) as exc_info:
        await client.get_funding_rate("BTCUSDT")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_non_zero_ret_code_raises_api_error():
    body = '{"retCode": 10001, "retMsg": "params error: symbol invalid", "result": {}}'
    client, _ = _client(FakeResponse(body=body))

    with pytest.raises(ApiError) as exc_info:
        await client.get_funding_rate("NOPE")

    assert exc_info.value.ret_code == 10001
    assert exc_info.value.ret_msg == "params error: symbol invalid"


@pytest.mark.asyncio
async def test_empty_list_raises_empty_result_error():
    client, _ = _client(FakeResponse(body=ticker_body(funding_rate=None)))

    with pytest.raises(EmptyResultError) as exc_info:
        await client.get_funding_rate("BTCUSDT")

    assert exc_info.value.symbol == "BTCUSDT"


@pytest.mark.asyncio
async def test_non_numeric_rate_raises_parse_error():
    client, _ = _client(FakeResponse(body=ticker_body("")))

    with pytest.raises(ParseError):
        await client.get_funding_rate("BTCUSDT")


@pytest.mark.asyncio
async def test_malformed_body_raises_parse_error():
    client, _ = _client(FakeResponse(body="<html>maintenance</html>"))

    with pytest.raises(ParseError):
        await client.get_funding_rate("BTCUSDT")


@pytest.mark.asyncio
async def test_close_leaves_shared_session_open():
    client, session = _client()

    await client.close()

    assert session.closed is False


@pytest.mark.asyncio
async def test_undecodable_body_raises_parse_error():
    client, _ = _client(FakeResponse(body=b'{"retCode":0,\xff\xfe}'))

    with pytest.raises(ParseError):
        await client.get_funding_rate("BTCUSDT")


@pytest.mark.asyncio
async def test_undecodable_error_body_raises_http_error():
    client, _ = _client(FakeResponse(status=502, body=b"\xff\xfe bad gateway"))

    with pytest.raises(HttpError) as exc_info:
        await client.get_funding_rate("BTCUSDT")

    assert "bad gateway" in exc_info.value.body
