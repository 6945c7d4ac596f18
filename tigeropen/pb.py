"""Protobuf messages exchanged with the push server.

The messages are plain dataclasses. Each field carries its protobuf number
and wire kind, and a small codec turns them into wire bytes and back.
Proto3 rules apply: plain scalars equal to their zero value are left off
the wire, optional scalars and sub-messages are written whenever set, and
unknown fields are skipped while decoding.
"""

from __future__ import annotations

import functools
import struct
from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Any, Union

__all__ = [
    "DecodeError",
    "Command",
    "DataType",
    "Connect",
    "Subscribe",
    "Request",
    "QuoteData",
    "QuoteDepthData",
    "TradeTickData",
    "TickData",
    "KlineData",
    "StockTopData",
    "OptionTopData",
    "AssetData",
    "PositionData",
    "OrderStatusData",
    "OrderTransactionData",
    "PushData",
    "Response",
]


class DecodeError(ValueError):
    """Raised when bytes are not a valid encoding of the expected message."""


class Command(IntEnum):
    """Command carried by every request and response."""

    UNKNOWN = 0
    CONNECT = 1
    CONNECTED = 2
    SEND = 3
    SUBSCRIBE = 4
    UNSUBSCRIBE = 5
    DISCONNECT = 6
    MESSAGE = 7
    HEARTBEAT = 8
    ERROR = 9


class DataType(IntEnum):
    """Kind of data a subscription or a push concerns."""

    UNKNOWN = 0
    QUOTE = 1
    OPTION = 2
    FUTURE = 3
    QUOTE_DEPTH = 4
    TRADE_TICK = 5
    ASSET = 6
    POSITION = 7
    ORDER_STATUS = 8
    ORDER_TRANSACTION = 9
    STOCK_TOP = 10
    OPTION_TOP = 11
    KLINE = 12


_VARINT, _FIXED64, _LEN, _FIXED32 = 0, 1, 2, 5
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_KEY = "protobuf"

_WIRE = {
    "bool": _VARINT,
    "enum": _VARINT,
    "int32": _VARINT,
    "int64": _VARINT,
    "uint32": _VARINT,
    "uint64": _VARINT,
    "double": _FIXED64,
    "float": _FIXED32,
    "string": _LEN,
    "bytes": _LEN,
    "message": _LEN,
}

_ZERO: dict[str, Any] = {
    "bool": False,
    "enum": 0,
    "int32": 0,
    "int64": 0,
    "uint32": 0,
    "uint64": 0,
    "double": 0.0,
    "float": 0.0,
    "string": "",
    "bytes": b"",
}


# ----- wire primitives -----

def _write_varint(out: bytearray, value: int) -> None:
    value &= _MASK64
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise DecodeError("truncated varint")
        if shift >= 70:
            raise DecodeError("varint is too long")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & _MASK64, pos
        shift += 7


def _take(data: bytes, pos: int, size: int) -> tuple[bytes, int]:
    end = pos + size
    if end > len(data):
        raise DecodeError("truncated field")
    return data[pos:end], end


def _read_raw(data: bytes, pos: int, wire: int) -> tuple[Any, int]:
    if wire == _VARINT:
        return _read_varint(data, pos)
    if wire == _FIXED64:
        return _take(data, pos, 8)
    if wire == _FIXED32:
        return _take(data, pos, 4)
    if wire == _LEN:
        length, pos = _read_varint(data, pos)
        return _take(data, pos, length)
    raise DecodeError(f"unsupported wire type {wire}")


def _encode_value(kind: str, value: Any, out: bytearray) -> None:
    if kind == "double":
        out += struct.pack("<d", value)
    elif kind == "float":
        out += struct.pack("<f", value)
    elif kind in ("string", "bytes", "message"):
        if kind == "string":
            raw = value.encode("utf-8")
        elif kind == "bytes":
            raw = bytes(value)
        else:
            raw = value.encode()
        _write_varint(out, len(raw))
        out += raw
    else:
        _write_varint(out, int(value))


def _write_field(out: bytearray, number: int, kind: str, value: Any) -> None:
    _write_varint(out, (number << 3) | _WIRE[kind])
    _encode_value(kind, value, out)


def _convert(kind: str, raw: Any, message: type | None) -> Any:
    if kind == "bool":
        return raw != 0
    if kind in ("int32", "enum"):
        value = raw & _MASK32
        return value - (1 << 32) if value & 0x80000000 else value
    if kind == "int64":
        return raw - (1 << 64) if raw & (1 << 63) else raw
    if kind == "uint32":
        return raw & _MASK32
    if kind == "uint64":
        return raw
    if kind == "double":
        return struct.unpack("<d", raw)[0]
    if kind == "float":
        return struct.unpack("<f", raw)[0]
    if kind == "string":
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("string field is not valid UTF-8") from exc
    if kind == "bytes":
        return bytes(raw)
    assert message is not None
    return message.decode(raw)


def _unpack(kind: str, data: bytes) -> list[Any]:
    items = []
    pos = 0
    while pos < len(data):
        raw, pos = _read_raw(data, pos, _WIRE[kind])
        items.append(_convert(kind, raw, None))
    return items


def _expect(wire: int, expected: int) -> None:
    if wire != expected:
        raise DecodeError(f"wire type {wire} where {expected} was expected")


# ----- field descriptions -----

@dataclass(frozen=True)
class _Spec:
    number: int
    kind: str
    optional: bool = False
    repeated: bool = False
    message: type | None = None
    choices: tuple[tuple[int, type], ...] = ()

    def write(self, value: Any, out: bytearray) -> None:
        if self.choices:
            if value is None:
                return
            for number, message in self.choices:
                if type(value) is message:
                    _write_field(out, number, "message", value)
                    return
            raise TypeError(f"{type(value).__name__} cannot be a push body")
        if self.repeated:
            if not value:
                return
            if _WIRE[self.kind] == _LEN:
                for item in value:
                    _write_field(out, self.number, self.kind, item)
            else:
                packed = bytearray()
                for item in value:
                    _encode_value(self.kind, item, packed)
                _write_varint(out, (self.number << 3) | _LEN)
                _write_varint(out, len(packed))
                out += packed
            return
        if value is None:
            return
        if not self.optional and value == _ZERO[self.kind]:
            return
        _write_field(out, self.number, self.kind, value)

    def read(self, number: int, wire: int, raw: Any, values: dict[str, Any], name: str) -> None:
        if self.choices:
            _expect(wire, _LEN)
            values[name] = dict(self.choices)[number].decode(raw)
            return
        expected = _WIRE[self.kind]
        if self.repeated:
            items = values.setdefault(name, [])
            if wire == _LEN and expected != _LEN:
                items.extend(_unpack(self.kind, raw))
            else:
                _expect(wire, expected)
                items.append(_convert(self.kind, raw, self.message))
            return
        _expect(wire, expected)
        values[name] = _convert(self.kind, raw, self.message)


def _scalar(number: int, kind: str) -> Any:
    return field(default=_ZERO[kind], metadata={_KEY: _Spec(number, kind)})


def _opt(number: int, kind: str) -> Any:
    return field(default=None, metadata={_KEY: _Spec(number, kind, optional=True)})


def _sub(number: int, message: type) -> Any:
    return field(
        default=None,
        metadata={_KEY: _Spec(number, "message", optional=True, message=message)},
    )


def _rep(number: int, kind: str, message: type | None = None) -> Any:
    return field(
        default_factory=list,
        metadata={_KEY: _Spec(number, kind, repeated=True, message=message)},
    )


def _oneof(*choices: tuple[int, type]) -> Any:
    return field(
        default=None,
        metadata={_KEY: _Spec(0, "message", optional=True, choices=tuple(choices))},
    )


@functools.lru_cache(maxsize=None)
def _layout(cls: type) -> dict[int, tuple[str, _Spec]]:
    table: dict[int, tuple[str, _Spec]] = {}
    for item in fields(cls):
        spec: _Spec = item.metadata[_KEY]
        numbers = [number for number, _ in spec.choices] or [spec.number]
        for number in numbers:
            table[number] = (item.name, spec)
    return table


class _Message:
    """Shared protobuf encoding and decoding for the message dataclasses."""

    def encode(self) -> bytes:
        """Serialize the message to protobuf wire bytes."""
        out = bytearray()
        for item in fields(self):  # type: ignore[arg-type]
            item.metadata[_KEY].write(getattr(self, item.name), out)
        return bytes(out)

    @classmethod
    def decode(cls, data: bytes) -> Any:
        """Parse protobuf wire bytes into a message, raising DecodeError."""
        data = bytes(data)
        table = _layout(cls)
        values: dict[str, Any] = {}
        pos = 0
        while pos < len(data):
            tag, pos = _read_varint(data, pos)
            number, wire = tag >> 3, tag & 7
            if number == 0:
                raise DecodeError("invalid field number 0")
            raw, pos = _read_raw(data, pos, wire)
            entry = table.get(number)
            if entry is not None:
                name, spec = entry
                spec.read(number, wire, raw, values, name)
        return cls(**values)


# ----- requests -----

@dataclass
class Connect(_Message):
    tiger_id: str = _scalar(1, "string")
    sign: str = _scalar(2, "string")
    sdk_version: str = _scalar(3, "string")
    accept_version: str | None = _opt(4, "string")
    send_interval: int | None = _opt(5, "uint32")
    receive_interval: int | None = _opt(6, "uint32")
    use_full_tick: bool | None = _opt(7, "bool")


@dataclass
class Subscribe(_Message):
    data_type: int = _scalar(1, "enum")
    symbols: str | None = _opt(2, "string")
    account: str | None = _opt(3, "string")
    market: str | None = _opt(4, "string")


@dataclass
class Request(_Message):
    command: int = _scalar(1, "enum")
    id: int = _scalar(2, "uint32")
    connect: Connect | None = _sub(3, Connect)
    subscribe: Subscribe | None = _sub(4, Subscribe)

    def encode(self) -> bytes:
        """Serialize the request to protobuf wire bytes."""
        return super().encode()

    @classmethod
    def decode(cls, data: bytes) -> Request:
        """Parse protobuf wire bytes into a request, raising DecodeError."""
        return super().decode(data)


# ----- pushed data -----

@dataclass
class QuoteData(_Message):
    symbol: str = _scalar(1, "string")
    quote_type: int = _scalar(2, "enum")
    timestamp: int = _scalar(3, "int64")
    server_timestamp: int = _scalar(4, "int64")
    avg_price: float | None = _opt(5, "double")
    latest_price: float | None = _opt(6, "double")
    latest_price_timestamp: int | None = _opt(7, "int64")
    latest_time: str | None = _opt(8, "string")
    pre_close: float | None = _opt(9, "double")
    volume: int | None = _opt(10, "int64")
    amount: float | None = _opt(11, "double")
    open: float | None = _opt(12, "double")
    high: float | None = _opt(13, "double")
    low: float | None = _opt(14, "double")
    hour_trading_tag: str | None = _opt(15, "string")
    market_status: str | None = _opt(16, "string")
    bid_price: float | None = _opt(17, "double")
    bid_size: int | None = _opt(18, "int64")
    ask_price: float | None = _opt(19, "double")
    ask_size: int | None = _opt(20, "int64")


@dataclass
class QuoteDepthData(_Message):
    @dataclass
    class OrderBook(_Message):
        price: list[float] = _rep(1, "double")
        volume: list[int] = _rep(2, "int64")
        order_count: list[int] = _rep(3, "int32")
        exchange: list[str] = _rep(4, "string")
        time: list[int] = _rep(5, "int64")

    symbol: str = _scalar(1, "string")
    timestamp: int = _scalar(2, "int64")
    ask: QuoteDepthData.OrderBook | None = _sub(3, OrderBook)
    bid: QuoteDepthData.OrderBook | None = _sub(4, OrderBook)


@dataclass
class TradeTickData(_Message):
    symbol: str = _scalar(1, "string")
    tick_type: str = _scalar(2, "string")
    cond: str = _scalar(3, "string")
    sn: int = _scalar(4, "int64")
    price_base: int = _scalar(5, "int64")
    price_offset: int = _scalar(6, "int32")
    time: list[int] = _rep(7, "int64")
    price: list[int] = _rep(8, "int64")
    volume: list[int] = _rep(9, "int64")
    part_code: list[str] = _rep(10, "string")
    quote_level: str = _scalar(11, "string")
    timestamp: int = _scalar(12, "int64")
    sec_type: str = _scalar(13, "string")


@dataclass
class TickData(_Message):
    @dataclass
    class Tick(_Message):
        sn: int = _scalar(1, "int64")
        time: int = _scalar(2, "int64")
        price: float = _scalar(3, "double")
        volume: int = _scalar(4, "int64")
        tick_type: str = _scalar(5, "string")
        part_code: str = _scalar(6, "string")

    symbol: str = _scalar(1, "string")
    source: str = _scalar(2, "string")
    timestamp: int = _scalar(3, "int64")
    ticks: list[TickData.Tick] = _rep(4, "message", Tick)


@dataclass
class KlineData(_Message):
    time: int = _scalar(1, "int64")
    open: float = _scalar(2, "double")
    high: float = _scalar(3, "double")
    low: float = _scalar(4, "double")
    close: float = _scalar(5, "double")
    avg: float = _scalar(6, "double")
    volume: int = _scalar(7, "int64")
    count: int = _scalar(8, "int32")
    symbol: str = _scalar(9, "string")
    amount: float = _scalar(10, "double")
    server_timestamp: int = _scalar(11, "int64")


@dataclass
class StockTopData(_Message):
    @dataclass
    class StockItem(_Message):
        symbol: str = _scalar(1, "string")
        latest_price: float = _scalar(2, "double")
        target_value: float = _scalar(3, "double")

    @dataclass
    class TopData(_Message):
        target_name: str = _scalar(1, "string")
        item: list[StockTopData.StockItem] = _rep(2, "message")

    market: str = _scalar(1, "string")
    timestamp: int = _scalar(2, "int64")
    top_data: list[StockTopData.TopData] = _rep(3, "message", TopData)


@dataclass
class OptionTopData(_Message):
    @dataclass
    class OptionItem(_Message):
        symbol: str = _scalar(1, "string")
        expiry: str = _scalar(2, "string")
        strike: str = _scalar(3, "string")
        right: str = _scalar(4, "string")
        total_amount: float = _scalar(5, "double")
        total_volume: int = _scalar(6, "int64")
        total_open_int: int = _scalar(7, "int64")
        volume_to_open_int: float = _scalar(8, "double")
        latest_price: float = _scalar(9, "double")
        update_time: int = _scalar(10, "int64")

    @dataclass
    class TopData(_Message):
        target_name: str = _scalar(1, "string")
        item: list[OptionTopData.OptionItem] = _rep(2, "message")

    market: str = _scalar(1, "string")
    timestamp: int = _scalar(2, "int64")
    top_data: list[OptionTopData.TopData] = _rep(3, "message", TopData)


# Item lists of the ranking entries refer to sibling classes, which are only
# complete once the enclosing class body has run.
for _top, _item in (
    (StockTopData.TopData, StockTopData.StockItem),
    (OptionTopData.TopData, OptionTopData.OptionItem),
):
    for _field in fields(_top):
        if _field.name == "item":
            _field.metadata[_KEY].__dict__["message"] = _item
del _top, _item, _field


@dataclass
class AssetData(_Message):
    account: str = _scalar(1, "string")
    currency: str = _scalar(2, "string")
    segment: str = _scalar(3, "string")
    available_funds: float = _scalar(4, "double")
    excess_liquidity: float = _scalar(5, "double")
    net_liquidation: float = _scalar(6, "double")
    equity_with_loan: float = _scalar(7, "double")
    buying_power: float = _scalar(8, "double")
    cash_balance: float = _scalar(9, "double")
    gross_position_value: float = _scalar(10, "double")
    init_margin_req: float = _scalar(11, "double")
    maint_margin_req: float = _scalar(12, "double")
    timestamp: int = _scalar(13, "int64")


@dataclass
class PositionData(_Message):
    account: str = _scalar(1, "string")
    symbol: str = _scalar(2, "string")
    expiry: str = _scalar(3, "string")
    strike: str = _scalar(4, "string")
    right: str = _scalar(5, "string")
    identifier: str = _scalar(6, "string")
    multiplier: int = _scalar(7, "int32")
    market: str = _scalar(8, "string")
    currency: str = _scalar(9, "string")
    segment: str = _scalar(10, "string")
    sec_type: str = _scalar(11, "string")
    position: int = _scalar(12, "int64")
    average_cost: float = _scalar(13, "double")
    latest_price: float = _scalar(14, "double")
    market_value: float = _scalar(15, "double")
    unrealized_pnl: float = _scalar(16, "double")
    name: str = _scalar(17, "string")
    timestamp: int = _scalar(18, "int64")


@dataclass
class OrderStatusData(_Message):
    id: int = _scalar(1, "int64")
    account: str = _scalar(2, "string")
    symbol: str = _scalar(3, "string")
    expiry: str = _scalar(4, "string")
    strike: str = _scalar(5, "string")
    right: str = _scalar(6, "string")
    identifier: str = _scalar(7, "string")
    multiplier: int = _scalar(8, "int32")
    action: str = _scalar(9, "string")
    market: str = _scalar(10, "string")
    currency: str = _scalar(11, "string")
    segment: str = _scalar(12, "string")
    sec_type: str = _scalar(13, "string")
    order_type: str = _scalar(14, "string")
    is_long: bool = _scalar(15, "bool")
    total_quantity: int = _scalar(16, "int64")
    filled_quantity: int = _scalar(17, "int64")
    avg_fill_price: float = _scalar(18, "double")
    limit_price: float = _scalar(19, "double")
    stop_price: float = _scalar(20, "double")
    realized_pnl: float = _scalar(21, "double")
    status: str = _scalar(22, "string")
    name: str = _scalar(23, "string")
    open_time: int = _scalar(24, "int64")
    timestamp: int = _scalar(25, "int64")


@dataclass
class OrderTransactionData(_Message):
    id: int = _scalar(1, "int64")
    order_id: int = _scalar(2, "int64")
    account: str = _scalar(3, "string")
    symbol: str = _scalar(4, "string")
    identifier: str = _scalar(5, "string")
    multiplier: int = _scalar(6, "int32")
    action: str = _scalar(7, "string")
    market: str = _scalar(8, "string")
    currency: str = _scalar(9, "string")
    segment: str = _scalar(10, "string")
    sec_type: str = _scalar(11, "string")
    filled_price: float = _scalar(12, "double")
    filled_quantity: int = _scalar(13, "int64")
    create_time: int = _scalar(14, "int64")
    update_time: int = _scalar(15, "int64")
    transact_time: int = _scalar(16, "int64")
    timestamp: int = _scalar(17, "int64")


PushBody = Union[
    QuoteData,
    QuoteDepthData,
    TradeTickData,
    PositionData,
    AssetData,
    OrderStatusData,
    OrderTransactionData,
    StockTopData,
    OptionTopData,
    KlineData,
    TickData,
]


@dataclass
class PushData(_Message):
    data_type: int = _scalar(1, "enum")
    body: PushBody | None = _oneof(
        (2, QuoteData),
        (3, QuoteDepthData),
        (4, TradeTickData),
        (5, PositionData),
        (6, AssetData),
        (7, OrderStatusData),
        (8, OrderTransactionData),
        (9, StockTopData),
        (10, OptionTopData),
        (11, KlineData),
        (12, TickData),
    )


@dataclass
class Response(_Message):
    command: int = _scalar(1, "enum")
    id: int | None = _opt(2, "uint32")
    code: int | None = _opt(3, "int32")
    msg: str | None = _opt(4, "string")
    body: PushData | None = _sub(5, PushData)

    def encode(self) -> bytes:
        """Serialize the response to protobuf wire bytes."""
        return super().encode()

    @classmethod
    def decode(cls, data: bytes) -> Response:
        """Parse protobuf wire bytes into a response, raising DecodeError."""
        return super().decode(data)