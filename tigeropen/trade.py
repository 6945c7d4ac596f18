"""Trading client: wraps the trade API methods for one account.

Requests go through an *executor*: an async callable taking
``(method, biz_content, version)`` and returning the response's ``data``
field. Trade methods always use the default API version (``None``).
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

__all__ = ["TradeClient"]

Executor = Callable[[str, str, "str | None"], Awaitable[Any]]


def _biz_content(params: Any) -> str:
    try:
        return json.dumps(params, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"failed to serialize biz params: {exc}") from exc


def _order_params(order: Mapping[str, Any] | None) -> dict[str, Any]:
    if order is None:
        return {}
    if not isinstance(order, Mapping):
        raise TypeError("order must be a mapping of order fields")
    return dict(order)


class TradeClient:
    """Client for the trade-related API methods of one account."""

    def __init__(self, executor: Executor, account: str) -> None:
        self._executor = executor
        self.account = account

    async def _execute(self, method: str, params: Any) -> Any:
        return await self._executor(method, _biz_content(params), None)

    def _account_only(self) -> dict[str, Any]:
        return {"account": self.account}

    # ----- contracts -----

    async def contract(self, symbol: str, sec_type: str) -> Any:
        """Query one contract."""
        params = {"account": self.account, "symbol": symbol, "secType": sec_type}
        return await self._execute("contract", params)

    async def contracts(self, symbols: Sequence[str], sec_type: str) -> Any:
        """Query several contracts."""
        params = {"account": self.account, "symbols": list(symbols), "secType": sec_type}
        return await self._execute("contracts", params)

    async def quote_contract(self, symbol: str, sec_type: str) -> Any:
        """Query a derivative contract."""
        params = {"account": self.account, "symbol": symbol, "secType": sec_type}
        return await self._execute("quote_contract", params)

    # ----- order operations -----

    async def place_order(self, order: Mapping[str, Any] | None) -> Any:
        """Place an order; the account is filled in."""
        params = _order_params(order)
        params["account"] = self.account
        return await self._execute("place_order", params)

    async def preview_order(self, order: Mapping[str, Any] | None) -> Any:
        """Preview an order; the account is filled in."""
        params = _order_params(order)
        params["account"] = self.account
        return await self._execute("preview_order", params)

    async def modify_order(self, id: int, order: Mapping[str, Any] | None) -> Any:
        """Modify the order with the given id."""
        params = _order_params(order)
        params["account"] = self.account
        params["id"] = id
        return await self._execute("modify_order", params)

    async def cancel_order(self, id: int) -> Any:
        """Cancel the order with the given id."""
        return await self._execute("cancel_order", {"account": self.account, "id": id})

    # ----- order queries -----

    async def orders(self) -> Any:
        """Query all orders."""
        return await self._execute("orders", self._account_only())

    async def active_orders(self) -> Any:
        """Query orders waiting to be filled."""
        return await self._execute("active_orders", self._account_only())

    async def inactive_orders(self) -> Any:
        """Query cancelled orders."""
        return await self._execute("inactive_orders", self._account_only())

    async def filled_orders(self) -> Any:
        """Query filled orders."""
        return await self._execute("filled_orders", self._account_only())

    # ----- positions and assets -----

    async def positions(self) -> Any:
        """Query positions."""
        return await self._execute("positions", self._account_only())

    async def assets(self) -> Any:
        """Query assets."""
        return await self._execute("assets", self._account_only())

    async def prime_assets(self) -> Any:
        """Query prime account assets."""
        return await self._execute("prime_assets", self._account_only())

    async def order_transactions(self, id: int) -> Any:
        """Query the fills of an order."""
        return await self._execute("order_transactions", {"account": self.account, "id": id})

    # ----- aliases -----

    async def get_contract(self, symbol: str, sec_type: str) -> Any:
        """Alias of :meth:`contract`."""
        return await self.contract(symbol, sec_type)

    async def get_contracts(self, symbols: Sequence[str], sec_type: str) -> Any:
        """Alias of :meth:`contracts`."""
        return await self.contracts(symbols, sec_type)

    async def get_quote_contract(self, symbol: str, sec_type: str) -> Any:
        """Alias of :meth:`quote_contract`."""
        return await self.quote_contract(symbol, sec_type)

    async def get_orders(self) -> Any:
        """Alias of :meth:`orders`."""
        return await self.orders()

    async def get_active_orders(self) -> Any:
        """Alias of :meth:`active_orders`."""
        return await self.active_orders()

    async def get_inactive_orders(self) -> Any:
        """Alias of :meth:`inactive_orders`."""
        return await self.inactive_orders()

    async def get_filled_orders(self) -> Any:
        """Alias of :meth:`filled_orders`."""
        return await self.filled_orders()

    async def get_positions(self) -> Any:
        """Alias of :meth:`positions`."""
        return await self.positions()

    async def get_assets(self) -> Any:
        """Alias of :meth:`assets`."""
        return await self.assets()

    async def get_prime_assets(self) -> Any:
        """Alias of :meth:`prime_assets`."""
        return await self.prime_assets()

    async def get_order_transactions(self, id: int) -> Any:
        """Alias of :meth:`order_transactions`."""
        return await self.order_transactions(id)