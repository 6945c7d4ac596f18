"""Subscription subjects and builders for the push request messages.

Every builder takes a fresh request id from one shared, thread-safe counter.
"""

from __future__ import annotations

import itertools
import threading
from enum import Enum

from .pb import Command, Connect, DataType, Request, Subscribe

__all__ = [
    "SubjectType",
    "build_connect_message",
    "build_heartbeat_message",
    "build_subscribe_message",
    "build_unsubscribe_message",
    "build_disconnect_message",
    "subject_to_data_type",
]


class SubjectType(Enum):
    """Subject a client can subscribe to."""

    QUOTE = "quote"
    TICK = "tick"
    DEPTH = "depth"
    OPTION = "option"
    FUTURE = "future"
    KLINE = "kline"
    STOCK_TOP = "stock_top"
    OPTION_TOP = "option_top"
    FULL_TICK = "full_tick"
    QUOTE_BBO = "quote_bbo"
    ASSET = "asset"
    POSITION = "position"
    ORDER = "order"
    TRANSACTION = "transaction"


_SUBJECT_DATA_TYPES = {
    SubjectType.QUOTE: DataType.QUOTE,
    SubjectType.OPTION: DataType.OPTION,
    SubjectType.FUTURE: DataType.FUTURE,
    SubjectType.DEPTH: DataType.QUOTE_DEPTH,
    SubjectType.TICK: DataType.TRADE_TICK,
    SubjectType.FULL_TICK: DataType.TRADE_TICK,
    SubjectType.ASSET: DataType.ASSET,
    SubjectType.POSITION: DataType.POSITION,
    SubjectType.ORDER: DataType.ORDER_STATUS,
    SubjectType.TRANSACTION: DataType.ORDER_TRANSACTION,
    SubjectType.STOCK_TOP: DataType.STOCK_TOP,
    SubjectType.OPTION_TOP: DataType.OPTION_TOP,
    SubjectType.KLINE: DataType.KLINE,
    SubjectType.QUOTE_BBO: DataType.QUOTE,
}

_request_ids = itertools.count(1)
_request_id_lock = threading.Lock()


def _next_request_id() -> int:
    with _request_id_lock:
        return next(_request_ids) & 0xFFFFFFFF


def build_connect_message(
    tiger_id: str,
    sign: str,
    sdk_version: str,
    accept_version: str,
    send_interval: int,
    receive_interval: int,
    use_full_tick: bool,
) -> Request:
    """Build the CONNECT request that authenticates the session."""
    return Request(
        command=Command.CONNECT,
        id=_next_request_id(),
        connect=Connect(
            tiger_id=tiger_id,
            sign=sign,
            sdk_version=sdk_version,
            accept_version=accept_version,
            send_interval=send_interval,
            receive_interval=receive_interval,
            use_full_tick=use_full_tick,
        ),
    )


def build_heartbeat_message() -> Request:
    """Build a HEARTBEAT request."""
    return Request(command=Command.HEARTBEAT, id=_next_request_id())


def _subscription(
    command: Command,
    data_type: int,
    symbols: str | None,
    account: str | None,
    market: str | None,
) -> Request:
    return Request(
        command=command,
        id=_next_request_id(),
        subscribe=Subscribe(
            data_type=data_type, symbols=symbols, account=account, market=market
        ),
    )


def build_subscribe_message(
    data_type: int,
    symbols: str | None = None,
    account: str | None = None,
    market: str | None = None,
) -> Request:
    """Build a SUBSCRIBE request."""
    return _subscription(Command.SUBSCRIBE, data_type, symbols, account, market)


def build_unsubscribe_message(
    data_type: int,
    symbols: str | None = None,
    account: str | None = None,
    market: str | None = None,
) -> Request:
    """Build an UNSUBSCRIBE request."""
    return _subscription(Command.UNSUBSCRIBE, data_type, symbols, account, market)


def build_disconnect_message() -> Request:
    """Build a DISCONNECT request."""
    return Request(command=Command.DISCONNECT, id=_next_request_id())


def subject_to_data_type(subject: SubjectType) -> DataType:
    """Return the data type the server uses for a subscription subject."""
    return _SUBJECT_DATA_TYPES[subject]