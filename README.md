# tigeropen

Building blocks for a Tiger Brokers OpenAPI client:

- **Request signing** (`tigeropen.signer`): SHA1-with-RSA signatures over
  alphabetically sorted request parameters, and verification of server
  signatures.
- **Quote and trade calls** (`tigeropen.quote`, `tigeropen.trade`):
  `QuoteClient` and `TradeClient` build the business parameters for each API
  method and pass them to an executor you supply.
- **Push protocol** (`tigeropen.varint`, `tigeropen.pb`, `tigeropen.messages`,
  `tigeropen.push_client`): varint32 framing, the protobuf wire messages,
  request builders, and a `PushClient` that decodes incoming frames, dispatches
  them to callbacks and keeps subscription records.

## Installation

```
pip install tigeropen
```

To run the test suite:

```
pip install "tigeropen[test]"
pytest
```

## Signing requests

```python
from tigeropen.signer import get_sign_content, sign_with_rsa, verify_with_rsa

params = {
    "tiger_id": "your_tiger_id",
    "method": "market_state",
    "charset": "UTF-8",
    "sign_type": "RSA",
    "version": "3.0",
    "biz_content": '{"market":"US"}',
}

content = get_sign_content(params)
# 'biz_content={"market":"US"}&charset=UTF-8&method=market_state&sign_type=RSA&tiger_id=your_tiger_id&version=3.0'

signature = sign_with_rsa(private_key_pem, content)
```

`get_sign_content` joins `key=value` pairs sorted by key with `&`; an empty
mapping gives an empty string. `load_private_key` accepts PKCS#1 PEM, PKCS#8
PEM, or bare base64 DER in either layout. `verify_with_rsa(public_key_b64,
content, signature_b64)` takes a base64 DER public key and returns `True` for
a valid signature. Empty keys, unparsable keys or signatures, and signatures
that do not match raise `AuthError`.

## Varint32 framing

Every frame on the push connection is a varint32 length followed by a
protobuf message:

```python
from tigeropen.varint import encode_varint32, decode_varint32

frame = encode_varint32(b"hello")        # b"\x05hello"
message, rest = decode_varint32(frame)   # (b"hello", b"")
```

`decode_varint32` returns `None` when the buffer does not yet hold a whole
length prefix or a whole message body, so a reader can keep appending bytes
until it does. Any bytes after the first frame come back as `rest`.

## Protobuf messages

`tigeropen.pb` defines the wire messages as dataclasses: `Request` (with
`Connect` and `Subscribe`), `Response`, `PushData`, and the pushed data types
`QuoteData`, `QuoteDepthData`, `TradeTickData`, `TickData`, `KlineData`,
`StockTopData`, `OptionTopData`, `AssetData`, `PositionData`,
`OrderStatusData` and `OrderTransactionData`. Each has an `encode()` method
and a `decode()` class method; malformed input raises `DecodeError`.
`Command` and `DataType` are the protocol's enumerations.

`tigeropen.messages` builds requests. Each builder takes a fresh, strictly
increasing request id from a shared thread-safe counter:

```python
from tigeropen.messages import SubjectType, build_subscribe_message, subject_to_data_type
from tigeropen.varint import encode_varint32

request = build_subscribe_message(subject_to_data_type(SubjectType.QUOTE), "AAPL,TSLA")
frame = encode_varint32(request.encode())
```

The builders are `build_connect_message`, `build_heartbeat_message`,
`build_subscribe_message`, `build_unsubscribe_message` and
`build_disconnect_message`. `subject_to_data_type` maps each `SubjectType`
to its `DataType`; `TICK` and `FULL_TICK` both map to `TRADE_TICK`, and
`QUOTE_BBO` maps to `QUOTE`.

## Push client

```python
from tigeropen.pb import Command, DataType, PushData, QuoteData, Response
from tigeropen.push_client import Callbacks, PushClient, PushConfig
from tigeropen.varint import encode_varint32

client = PushClient(PushConfig(tiger_id="your_tiger_id", private_key="placeholder",
                               account="test_account"))
client.set_callbacks(Callbacks(on_quote=lambda quote: print(quote.symbol, quote.latest_price)))

response = Response(
    command=Command.MESSAGE,
    body=PushData(data_type=DataType.QUOTE,
                  body=QuoteData(symbol="AAPL", latest_price=155.0)),
)
client.handle_message(encode_varint32(response.encode()))   # prints: AAPL 155.0
```

`PushClientOptions` holds `push_url`, `heartbeat_interval`,
`reconnect_interval`, `auto_reconnect` and `connect_timeout` (seconds).

`handle_message` decodes one framed `Response` and dispatches it:

- `CONNECTED` sets the state to `ConnectionState.CONNECTED` and calls
  `on_connect`.
- `MESSAGE` passes the pushed body to its callback. `QuoteData` goes to
  `on_quote`, `on_option` or `on_future` by data type, otherwise to
  `on_quote_bbo`; depth, trade ticks, full ticks, K-lines, top lists, assets,
  positions, orders and transactions each have their own callback. A push
  without a body calls `on_error`.
- `ERROR` calls `on_kickout` with the message if it mentions "kick",
  otherwise `on_error`.
- `DISCONNECT` calls `on_disconnect`; `HEARTBEAT` is ignored.
- A frame that cannot be split or decoded calls `on_error`.

`add_subscription`, `remove_subscription`, `get_subscriptions` (symbols
sorted), `add_account_sub`, `remove_account_sub` and
`get_account_subscriptions` keep records of what has been subscribed.

`subscribe`, `unsubscribe` and `send_heartbeat` frame a request and hand it
to the connection's writer, returning whether that succeeded. `disconnect()`
sends a DISCONNECT request when it can, sets the state to `DISCONNECTED` and
calls `on_disconnect`.

## Quote and trade clients

Both clients take an executor: an async callable receiving
`(method, biz_content, version)` and returning the response's data.
`biz_content` is compact JSON with sorted keys; `version` is `None` for the
default API version, `"3.0"` for `timeline` and `option_chain`, and `"1.0"`
for `market_scanner`.

```python
import asyncio
from tigeropen.quote import QuoteClient
from tigeropen.trade import TradeClient

async def executor(method, biz_content, version):
    print(method, biz_content, version)
    return {}

async def main():
    await QuoteClient(executor).market_state("US")
    # market_state {"market":"US"} None
    await TradeClient(executor, "test_account").cancel_order(42)
    # cancel_order {"account":"test_account","id":42} None

asyncio.run(main())
```

`QuoteClient` covers market state, real-time quotes, K-lines, timelines,
trade ticks, depth, option expirations, chains, briefs and K-lines, futures
exchanges, contracts, quotes and K-lines, financial data, corporate actions,
capital flow and distribution, the market scanner and quote permission.
`TradeClient` covers contract queries, placing, previewing, modifying and
cancelling orders, order queries, positions, assets, prime assets and order
transactions, always adding its account. Methods with a `get_` prefix are
aliases of the same calls.

## What this package does not do

- It does not open the push connection. `PushClient` has no TCP/TLS
  transport, no CONNECT handshake, heartbeat loop or automatic reconnection,
  and no replay of recorded subscriptions. Without a writer installed by
  such a layer, `subscribe`, `unsubscribe` and `send_heartbeat` return
  `False`; incoming data is handled only when you pass frames to
  `handle_message`.
- It does not send HTTP requests. `QuoteClient` and `TradeClient` only build
  parameters; the executor you pass in must sign, send and unwrap the
  request (the functions in `tigeropen.signer` help with signing).