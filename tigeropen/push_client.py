"""Push client state, callback dispatch and subscription bookkeeping.

The client frames every request as varint32 + protobuf and hands the bytes
to a writer installed by the connection layer. Incoming frames are decoded
and dispatched to the user's callbacks.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any

from . import messages
from .messages import SubjectType
from .pb import (
    AssetData,
    Command,
    DataType,
    DecodeError,
    KlineData,
    OptionTopData,
    OrderStatusData,
    OrderTransactionData,
    PositionData,
    PushData,
    QuoteData,
    QuoteDepthData,
    Request,
    Response,
    StockTopData,
    TickData,
    TradeTickData,
)
from .varint import decode_varint32, encode_varint32

__all__ = [
    "ConnectionState",
    "PushConfig",
    "PushClientOptions",
    "Callbacks",
    "PushClient",
    "DEFAULT_PUSH_URL",
    "SDK_VERSION",
    "ACCEPT_VERSION",
    "DEFAULT_SEND_INTERVAL",
    "DEFAULT_RECEIVE_INTERVAL",
    "MAX_RECONNECT_INTERVAL",
]

DEFAULT_PUSH_URL = "openapi.tigerfintech.com:9883"
DEFAULT_HEARTBEAT_INTERVAL = 10.0
DEFAULT_RECONNECT_INTERVAL = 5.0
MAX_RECONNECT_INTERVAL = 60.0
DEFAULT_CONNECT_TIMEOUT = 30.0
SDK_VERSION = "rust-sdk/1.0.0"
ACCEPT_VERSION = "2"
DEFAULT_SEND_INTERVAL = 10000
DEFAULT_RECEIVE_INTERVAL = 10000


class ConnectionState(Enum):
    """State of the push connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class PushConfig:
    """Credentials the push client authenticates and subscribes with."""

    tiger_id: str
    private_key: str
    account: str = ""


@dataclass
class PushClientOptions:
    """Connection tuning; intervals and timeouts are in seconds."""

    push_url: str = DEFAULT_PUSH_URL
    heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL
    reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL
    auto_reconnect: bool = True
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT


@dataclass
class Callbacks:
    """User callbacks, one per push type plus connection events."""

    on_quote: Callable[[QuoteData], Any] | None = None
    on_tick: Callable[[TradeTickData], Any] | None = None
    on_depth: Callable[[QuoteDepthData], Any] | None = None
    on_option: Callable[[QuoteData], Any] | None = None
    on_future: Callable[[QuoteData], Any] | None = None
    on_kline: Callable[[KlineData], Any] | None = None
    on_stock_top: Callable[[StockTopData], Any] | None = None
    on_option_top: Callable[[OptionTopData], Any] | None = None
    on_full_tick: Callable[[TickData], Any] | None = None
    on_quote_bbo: Callable[[QuoteData], Any] | None = None
    on_asset: Callable[[AssetData], Any] | None = None
    on_position: Callable[[PositionData], Any] | None = None
    on_order: Callable[[OrderStatusData], Any] | None = None
    on_transaction: Callable[[OrderTransactionData], Any] | None = None
    on_connect: Callable[[], Any] | None = None
    on_disconnect: Callable[[], Any] | None = None
    on_error: Callable[[str], Any] | None = None
    on_kickout: Callable[[str], Any] | None = None


_QUOTE_CALLBACKS = {
    DataType.QUOTE: attrgetter("on_quote"),
    DataType.OPTION: attrgetter("on_option"),
    DataType.FUTURE: attrgetter("on_future"),
}

_BODY_CALLBACKS: dict[type, Callable[[Callbacks], Any]] = {
    QuoteDepthData: attrgetter("on_depth"),
    TradeTickData: attrgetter("on_tick"),
    PositionData: attrgetter("on_position"),
    AssetData: attrgetter("on_asset"),
    OrderStatusData: attrgetter("on_order"),
    OrderTransactionData: attrgetter("on_transaction"),
    StockTopData: attrgetter("on_stock_top"),
    OptionTopData: attrgetter("on_option_top"),
    KlineData: attrgetter("on_kline"),
    TickData: attrgetter("on_full_tick"),
}


class PushClient:
    """Push client: callbacks, subscriptions and request framing.

    The connection layer installs ``_write`` (a callable taking frame bytes)
    and ``_stop`` (a callable that ends the background tasks), and waits on
    ``_connected`` for the server's CONNECTED response.
    """

    def __init__(self, config: PushConfig, options: PushClientOptions | None = None) -> None:
        opts = options if options is not None else PushClientOptions()
        self.config = config
        self.push_url = opts.push_url
        self.heartbeat_interval = opts.heartbeat_interval
        self.reconnect_interval = opts.reconnect_interval
        self.connect_timeout = opts.connect_timeout
        self.auto_reconnect = opts.auto_reconnect

        self._lock = threading.RLock()
        self._state = ConnectionState.DISCONNECTED
        self._callbacks = Callbacks()
        self._subscriptions: dict[SubjectType, set[str]] = {}
        self._account_subs: set[SubjectType] = set()
        self._write: Callable[[bytes], Any] | None = None
        self._stop: Callable[[], Any] | None = None
        self._connected = asyncio.Event()

    # ----- state and callbacks -----

    def state(self) -> ConnectionState:
        """Return the current connection state."""
        with self._lock:
            return self._state

    def _set_state(self, state: ConnectionState) -> None:
        with self._lock:
            self._state = state

    def set_callbacks(self, callbacks: Callbacks) -> None:
        """Replace the whole set of callbacks."""
        with self._lock:
            self._callbacks = callbacks

    def _current_callbacks(self) -> Callbacks:
        with self._lock:
            return self._callbacks

    def _report_error(self, message: str) -> None:
        on_error = self._current_callbacks().on_error
        if on_error is not None:
            on_error(message)

    # ----- sending -----

    def _send_request(self, request: Request) -> bool:
        with self._lock:
            write = self._write
        if write is None:
            return False
        try:
            write(encode_varint32(request.encode()))
        except Exception:
            return False
        return True

    def send_heartbeat(self) -> bool:
        """Send a HEARTBEAT; return whether it was handed to the connection."""
        return self._send_request(messages.build_heartbeat_message())

    def disconnect(self) -> None:
        """Send DISCONNECT, stop background work and notify the callback."""
        self._send_request(messages.build_disconnect_message())
        with self._lock:
            self._state = ConnectionState.DISCONNECTED
            stop = self._stop
            self._write = None
            self._stop = None
        if stop is not None:
            stop()
        on_disconnect = self._current_callbacks().on_disconnect
        if on_disconnect is not None:
            on_disconnect()

    def subscribe(
        self,
        subject: SubjectType,
        symbols: str | None = None,
        account: str | None = None,
        market: str | None = None,
    ) -> bool:
        """Send a SUBSCRIBE request for ``subject``."""
        data_type = messages.subject_to_data_type(subject)
        return self._send_request(
            messages.build_subscribe_message(data_type, symbols, account, market)
        )

    def unsubscribe(
        self,
        subject: SubjectType,
        symbols: str | None = None,
        account: str | None = None,
        market: str | None = None,
    ) -> bool:
        """Send an UNSUBSCRIBE request for ``subject``."""
        data_type = messages.subject_to_data_type(subject)
        return self._send_request(
            messages.build_unsubscribe_message(data_type, symbols, account, market)
        )

    # ----- receiving -----

    def handle_message(self, data: bytes) -> None:
        """Decode one varint32-framed Response and dispatch it."""
        frame = decode_varint32(data)
        if frame is None:
            self._report_error("varint32 frame decode failed")
            return
        payload, _ = frame
        try:
            response = Response.decode(payload)
        except DecodeError:
            self._report_error("protobuf deserialization failed")
            return
        self._dispatch_response(response)

    def _dispatch_response(self, response: Response) -> None:
        callbacks = self._current_callbacks()
        command = response.command
        if command == Command.CONNECTED:
            self._set_state(ConnectionState.CONNECTED)
            self._connected.set()
            if callbacks.on_connect is not None:
                callbacks.on_connect()
        elif command == Command.MESSAGE:
            if response.body is not None:
                self._dispatch_push_data(callbacks, response.body)
        elif command == Command.ERROR:
            msg = response.msg or ""
            if "kick" in msg:
                if callbacks.on_kickout is not None:
                    callbacks.on_kickout(msg)
            elif callbacks.on_error is not None:
                callbacks.on_error(f"服务端错误: {msg}")
        elif command == Command.DISCONNECT:
            if callbacks.on_disconnect is not None:
                callbacks.on_disconnect()

    def _dispatch_push_data(self, callbacks: Callbacks, push_data: PushData) -> None:
        body = push_data.body
        if body is None:
            if callbacks.on_error is not None:
                callbacks.on_error("PushData body is empty")
            return
        if isinstance(body, QuoteData):
            select = _QUOTE_CALLBACKS.get(push_data.data_type, attrgetter("on_quote_bbo"))
        else:
            select = _BODY_CALLBACKS[type(body)]
        callback = select(callbacks)
        if callback is not None:
            callback(body)

    # ----- subscription bookkeeping -----

    def add_subscription(self, subject: SubjectType, symbols: Iterable[str]) -> None:
        """Record market-data symbols subscribed under ``subject``."""
        with self._lock:
            self._subscriptions.setdefault(subject, set()).update(symbols)

    def remove_subscription(
        self, subject: SubjectType, symbols: Iterable[str] | None = None
    ) -> None:
        """Forget some symbols of ``subject``, or the whole subject if none given."""
        with self._lock:
            if symbols is None:
                self._subscriptions.pop(subject, None)
                return
            current = self._subscriptions.get(subject)
            if current is None:
                return
            current.difference_update(symbols)
            if not current:
                del self._subscriptions[subject]

    def get_subscriptions(self) -> dict[SubjectType, list[str]]:
        """Return recorded market-data subscriptions, symbols sorted."""
        with self._lock:
            return {subject: sorted(symbols) for subject, symbols in self._subscriptions.items()}

    def add_account_sub(self, subject: SubjectType) -> None:
        """Record an account-level subscription."""
        with self._lock:
            self._account_subs.add(subject)

    def remove_account_sub(self, subject: SubjectType) -> None:
        """Forget an account-level subscription."""
        with self._lock:
            self._account_subs.discard(subject)

    def get_account_subscriptions(self) -> list[SubjectType]:
        """Return the recorded account-level subscriptions."""
        with self._lock:
            return list(self._account_subs)