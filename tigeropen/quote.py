"""Market-data client: wraps the quote API methods.

Requests go through an *executor*: an async callable taking
``(method, biz_content, version)`` and returning the response's ``data``
field. ``version`` is ``None`` when the method uses the default API version.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

__all__ = ["QuoteClient", "Executor", "VERSION_V1", "VERSION_V3"]

VERSION_V1 = "1.0"
VERSION_V3 = "3.0"

Executor = Callable[[str, str, "str | None"], Awaitable[Any]]


def _biz_content(params: Any) -> str:
    try:
        return json.dumps(params, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"failed to serialize biz params: {exc}") from exc


class QuoteClient:
    """Client for the quote-related API methods."""

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    async def _execute(self, method: str, params: Any, version: str | None = None) -> Any:
        return await self._executor(method, _biz_content(params), version)

    # ----- basic quotes -----

    async def market_state(self, market: str) -> Any:
        """Get the state of a market."""
        return await self._execute("market_state", {"market": market})

    async def get_market_state(self, market: str) -> Any:
        """Alias of :meth:`market_state`."""
        return await self.market_state(market)

    async def quote_real_time(self, symbols: Sequence[str]) -> Any:
        """Get real-time quotes."""
        return await self._execute("quote_real_time", {"symbols": list(symbols)})

    async def get_brief(self, symbols: Sequence[str]) -> Any:
        """Alias of :meth:`quote_real_time`."""
        return await self.quote_real_time(symbols)

    async def kline(self, symbol: str, period: str) -> Any:
        """Get K-line data for one symbol."""
        return await self._execute("kline", {"symbols": [symbol], "period": period})

    async def get_kline(self, symbol: str, period: str) -> Any:
        """Alias of :meth:`kline`."""
        return await self.kline(symbol, period)

    async def timeline(self, symbols: Sequence[str]) -> Any:
        """Get intraday timeline data."""
        return await self._execute("timeline", {"symbols": list(symbols)}, VERSION_V3)

    async def get_timeline(self, symbols: Sequence[str]) -> Any:
        """Alias of :meth:`timeline`."""
        return await self.timeline(symbols)

    async def trade_tick(self, symbols: Sequence[str]) -> Any:
        """Get trade ticks."""
        return await self._execute("trade_tick", {"symbols": list(symbols)})

    async def get_trade_tick(self, symbols: Sequence[str]) -> Any:
        """Alias of :meth:`trade_tick`."""
        return await self.trade_tick(symbols)

    async def quote_depth(self, symbol: str) -> Any:
        """Get depth quotes."""
        return await self._execute("quote_depth", {"symbol": symbol})

    async def get_quote_depth(self, symbol: str) -> Any:
        """Alias of :meth:`quote_depth`."""
        return await self.quote_depth(symbol)

    # ----- options -----

    async def option_expiration(self, symbol: str) -> Any:
        """Get option expiration dates."""
        return await self._execute("option_expiration", {"symbols": [symbol]})

    async def get_option_expiration(self, symbol: str) -> Any:
        """Alias of :meth:`option_expiration`."""
        return await self.option_expiration(symbol)

    async def option_chain(self, symbol: str, expiry: str) -> Any:
        """Get the option chain for one expiry."""
        params = {"contracts": [{"symbol": symbol, "expiry": expiry}]}
        return await self._execute("option_chain", params, VERSION_V3)

    async def get_option_chain(self, symbol: str, expiry: str) -> Any:
        """Alias of :meth:`option_chain`."""
        return await self.option_chain(symbol, expiry)

    async def option_brief(self, identifiers: Sequence[str]) -> Any:
        """Get option brief quotes."""
        return await self._execute("option_brief", {"identifiers": list(identifiers)})

    async def get_option_brief(self, identifiers: Sequence[str]) -> Any:
        """Alias of :meth:`option_brief`."""
        return await self.option_brief(identifiers)

    async def option_kline(self, identifier: str, period: str) -> Any:
        """Get option K-line data."""
        return await self._execute("option_kline", {"identifier": identifier, "period": period})

    async def get_option_kline(self, identifier: str, period: str) -> Any:
        """Alias of :meth:`option_kline`."""
        return await self.option_kline(identifier, period)

    # ----- futures -----

    async def future_exchange(self) -> Any:
        """Get the list of futures exchanges."""
        return await self._execute("future_exchange", {"sec_type": "FUT"})

    async def get_future_exchange(self) -> Any:
        """Alias of :meth:`future_exchange`."""
        return await self.future_exchange()

    async def future_contracts(self, exchange: str) -> Any:
        """Get the futures contracts of an exchange."""
        return await self._execute("future_contracts", {"exchange": exchange})

    async def get_future_contracts(self, exchange: str) -> Any:
        """Alias of :meth:`future_contracts`."""
        return await self.future_contracts(exchange)

    async def future_real_time_quote(self, symbols: Sequence[str]) -> Any:
        """Get real-time futures quotes."""
        return await self._execute("future_real_time_quote", {"symbols": list(symbols)})

    async def get_future_real_time_quote(self, symbols: Sequence[str]) -> Any:
        """Alias of :meth:`future_real_time_quote`."""
        return await self.future_real_time_quote(symbols)

    async def future_kline(self, symbol: str, period: str) -> Any:
        """Get futures K-line data."""
        return await self._execute("future_kline", {"symbol": symbol, "period": period})

    async def get_future_kline(self, symbol: str, period: str) -> Any:
        """Alias of :meth:`future_kline`."""
        return await self.future_kline(symbol, period)

    # ----- fundamentals and capital flow -----

    async def financial_daily(self, symbol: str) -> Any:
        """Get daily financial data."""
        return await self._execute("financial_daily", {"symbol": symbol})

    async def get_financial_daily(self, symbol: str) -> Any:
        """Alias of :meth:`financial_daily`."""
        return await self.financial_daily(symbol)

    async def financial_report(self, symbol: str) -> Any:
        """Get the financial report."""
        return await self._execute("financial_report", {"symbol": symbol})

    async def get_financial_report(self, symbol: str) -> Any:
        """Alias of :meth:`financial_report`."""
        return await self.financial_report(symbol)

    async def corporate_action(self, symbol: str) -> Any:
        """Get corporate actions."""
        return await self._execute("corporate_action", {"symbol": symbol})

    async def get_corporate_action(self, symbol: str) -> Any:
        """Alias of :meth:`corporate_action`."""
        return await self.corporate_action(symbol)

    async def capital_flow(self, symbol: str) -> Any:
        """Get capital flow."""
        return await self._execute("capital_flow", {"symbol": symbol})

    async def get_capital_flow(self, symbol: str) -> Any:
        """Alias of :meth:`capital_flow`."""
        return await self.capital_flow(symbol)

    async def capital_distribution(self, symbol: str) -> Any:
        """Get capital distribution."""
        return await self._execute("capital_distribution", {"symbol": symbol})

    async def get_capital_distribution(self, symbol: str) -> Any:
        """Alias of :meth:`capital_distribution`."""
        return await self.capital_distribution(symbol)

    # ----- scanner and permissions -----

    async def market_scanner(self, params: Any) -> Any:
        """Run the market scanner with caller-supplied parameters."""
        return await self._execute("market_scanner", params, VERSION_V1)

    async def grab_quote_permission(self) -> Any:
        """Grab the quote permission for this session."""
        return await self._execute("grab_quote_permission", {})