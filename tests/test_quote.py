import json

import pytest

from tigeropen.quote import QuoteClient


class _Recorder:
    def __init__(self, result=None):
        self.calls = []
        self.result = result

    async def __call__(self, method, biz_content, version):
        self.calls.append((method, json.loads(biz_content), version, biz_content))
        return self.result


def _client(result=None):
    recorder = _Recorder(result)
    return QuoteClient(recorder), recorder


@pytest.mark.asyncio
async def test_market_state_returns_data():
    client, rec = _client({"status": "open"})
    result = await client.market_state("US")
    assert result == {"status": "open"}
    assert rec.calls[0][:3] == ("market_state", {"market": "US"}, None)


@pytest.mark.asyncio
async def test_none_data_passes_through():
    client, _ = _client(None)
    assert await client.quote_depth("AAPL") is None


@pytest.mark.asyncio
async def test_biz_content_is_compact_json():
    client, rec = _client()
    await client.market_state("US")
    assert rec.calls[0][3] == '{"market":"US"}'


@pytest.mark.asyncio
async def test_kline_wraps_symbol_in_list():
    client, rec = _client()
    await client.kline("AAPL", "day")
    assert rec.calls[0][:3] == ("kline", {"symbols": ["AAPL"], "period": "day"}, None)


@pytest.mark.asyncio
async def test_timeline_uses_version_3():
    client, rec = _client()
    await client.timeline(["AAPL", "TSLA"])
    assert rec.calls[0][:3] == ("timeline", {"symbols": ["AAPL", "TSLA"]}, "3.0")


@pytest.mark.asyncio
async def test_option_chain_contract_format_and_version():
    client, rec = _client()
    await client.option_chain("AAPL", "2024-01-19")
    method, params, version, _ = rec.calls[0]
    assert method == "option_chain"
    assert params == {"contracts": [{"symbol": "AAPL", "expiry": "2024-01-19"}]}
    assert version == "3.0"


@pytest.mark.asyncio
async def test_option_expiration_uses_symbols_list():
    client, rec = _client()
    await client.option_expiration("AAPL")
    assert rec.calls[0][:3] == ("option_expiration", {"symbols": ["AAPL"]}, None)


@pytest.mark.asyncio
async def test_future_exchange_sends_fut():
    client, rec = _client()
    await client.future_exchange()
    assert rec.calls[0][:3] == ("future_exchange", {"sec_type": "FUT"}, None)


@pytest.mark.asyncio
async def test_market_scanner_passes_params_with_version_1():
    client, rec = _client()
    params = {"market": "US", "page": 0}
    await client.market_scanner(params)
    assert rec.calls[0][:3] == ("market_scanner", params, "1.0")


@pytest.mark.asyncio
async def test_grab_quote_permission_empty_params():
    client, rec = _client()
    await client.grab_quote_permission()
    assert rec.calls[0][:3] == ("grab_quote_permission", {}, None)


@pytest.mark.asyncio
async def test_unserializable_params_raise_value_error():
    client, rec = _client()
    with pytest.raises(ValueError):
        await client.market_scanner({"bad": object()})
    assert rec.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, alias, args, method, params",
    [
        ("market_state", "get_market_state", ("HK",), "market_state", {"market": "HK"}),
        ("quote_real_time", "get_brief", (["AAPL"],), "quote_real_time", {"symbols": ["AAPL"]}),
        ("trade_tick", "get_trade_tick", (["AAPL"],), "trade_tick", {"symbols": ["AAPL"]}),
        ("quote_depth", "get_quote_depth", ("AAPL",), "quote_depth", {"symbol": "AAPL"}),
        ("option_brief", "get_option_brief", (["AAPL 240119C00150000"],), "option_brief",
         {"identifiers": ["AAPL 240119C00150000"]}),
        ("option_kline", "get_option_kline", ("AAPL 240119C00150000", "day"), "option_kline",
         {"identifier": "AAPL 240119C00150000", "period": "day"}),
        ("future_contracts", "get_future_contracts", ("CME",), "future_contracts",
         {"exchange": "CME"}),
        ("future_real_time_quote", "get_future_real_time_quote", (["ES2312"],),
         "future_real_time_quote", {"symbols": ["ES2312"]}),
        ("future_kline", "get_future_kline", ("ES2312", "day"), "future_kline",
         {"symbol": "ES2312", "period": "day"}),
        ("financial_daily", "get_financial_daily", ("AAPL",), "financial_daily", {"symbol": "AAPL"}),
        ("financial_report", "get_financial_report", ("AAPL",), "financial_report",
         {"symbol": "AAPL"}),
        ("corporate_action", "get_corporate_action", ("AAPL",), "corporate_action",
         {"symbol": "AAPL"}),
        ("capital_flow", "get_capital_flow", ("AAPL",), "capital_flow", {"symbol": "AAPL"}),
        ("capital_distribution", "get_capital_distribution", ("AAPL",), "capital_distribution",
         {"symbol": "AAPL"}),
    ],
)
async def test_methods_and_aliases_send_same_request(name, alias, args, method, params):
    client, rec = _client("data")
    assert await getattr(client, name)(*args) == "data"
    assert await getattr(client, alias)(*args) == "data"
    assert rec.calls[0][:3] == (method, params, None)
    assert rec.calls[1][:3] == rec.calls[0][:3]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, alias, args",
    [
        ("timeline", "get_timeline", (["AAPL"],)),
        ("option_chain", "get_option_chain", ("AAPL", "2024-01-19")),
        ("kline", "get_kline", ("AAPL", "week")),
        ("option_expiration", "get_option_expiration", ("AAPL",)),
        ("future_exchange", "get_future_exchange", ()),
    ],
)
async def test_other_aliases_match(name, alias, args):
    client, rec = _client()
    await getattr(client, name)(*args)
    await getattr(client, alias)(*args)
    assert rec.calls[0][:3] == rec.calls[1][:3]