import json

import pytest

from tigeropen.trade import TradeClient

ACCOUNT = "test_account"


class _Recorder:
    def __init__(self, result=None):
        self.calls = []
        self.result = result

    async def __call__(self, method, biz_content, version):
        self.calls.append((method, json.loads(biz_content), version))
        return self.result


def _client(result=None):
    recorder = _Recorder(result)
    return TradeClient(recorder, ACCOUNT), recorder


@pytest.mark.asyncio
async def test_contract_params():
    client, rec = _client({"symbol": "AAPL"})
    result = await client.contract("AAPL", "STK")
    assert result == {"symbol": "AAPL"}
    assert rec.calls == [
        ("contract", {"account": ACCOUNT, "symbol": "AAPL", "secType": "STK"}, None)
    ]


@pytest.mark.asyncio
async def test_contracts_params():
    client, rec = _client()
    await client.contracts(["AAPL", "TSLA"], "STK")
    assert rec.calls[0] == (
        "contracts",
        {"account": ACCOUNT, "symbols": ["AAPL", "TSLA"], "secType": "STK"},
        None,
    )


@pytest.mark.asyncio
async def test_place_order_adds_account_without_mutating_input():
    client, rec = _client({"id": 1})
    order = {"symbol": "AAPL", "action": "BUY", "totalQuantity": 100}
    assert await client.place_order(order) == {"id": 1}
    assert rec.calls[0] == ("place_order", {**order, "account": ACCOUNT}, None)
    assert "account" not in order


@pytest.mark.asyncio
async def test_place_order_overrides_account():
    client, rec = _client()
    await client.place_order({"account": "other", "symbol": "AAPL"})
    assert rec.calls[0][1]["account"] == ACCOUNT


@pytest.mark.asyncio
async def test_preview_order_none_order():
    client, rec = _client()
    await client.preview_order(None)
    assert rec.calls[0] == ("preview_order", {"account": ACCOUNT}, None)


@pytest.mark.asyncio
async def test_place_order_rejects_non_mapping():
    client, rec = _client()
    with pytest.raises(TypeError):
        await client.place_order(["AAPL"])
    assert rec.calls == []


@pytest.mark.asyncio
async def test_modify_order_sets_id_and_account():
    client, rec = _client()
    await client.modify_order(42, {"limitPrice": 150.5})
    assert rec.calls[0] == (
        "modify_order",
        {"limitPrice": 150.5, "account": ACCOUNT, "id": 42},
        None,
    )


@pytest.mark.asyncio
async def test_cancel_order_params():
    client, rec = _client()
    await client.cancel_order(42)
    assert rec.calls[0] == ("cancel_order", {"account": ACCOUNT, "id": 42}, None)


@pytest.mark.asyncio
async def test_unserializable_order_raises_value_error():
    client, rec = _client()
    with pytest.raises(ValueError):
        await client.place_order({"bad": object()})
    assert rec.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, alias, method",
    [
        ("orders", "get_orders", "orders"),
        ("active_orders", "get_active_orders", "active_orders"),
        ("inactive_orders", "get_inactive_orders", "inactive_orders"),
        ("filled_orders", "get_filled_orders", "filled_orders"),
        ("positions", "get_positions", "positions"),
        ("assets", "get_assets", "assets"),
        ("prime_assets", "get_prime_assets", "prime_assets"),
    ],
)
async def test_account_queries_and_aliases(name, alias, method):
    client, rec = _client([])
    assert await getattr(client, name)() == []
    assert await getattr(client, alias)() == []
    assert rec.calls == [(method, {"account": ACCOUNT}, None)] * 2


@pytest.mark.asyncio
async def test_order_transactions_and_alias():
    client, rec = _client()
    await client.order_transactions(7)
    await client.get_order_transactions(7)
    assert rec.calls == [("order_transactions", {"account": ACCOUNT, "id": 7}, None)] * 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "name, alias, args",
    [
        ("contract", "get_contract", ("AAPL", "STK")),
        ("contracts", "get_contracts", (["AAPL"], "STK")),
        ("quote_contract", "get_quote_contract", ("AAPL", "OPT")),
    ],
)
async def test_contract_aliases_match(name, alias, args):
    client, rec = _client()
    await getattr(client, name)(*args)
    await getattr(client, alias)(*args)
    assert rec.calls[0] == rec.calls[1]
    assert rec.calls[0][0] == name