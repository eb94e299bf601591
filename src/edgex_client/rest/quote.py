"""Public market data endpoints."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Client


class QuoteClient:
    def __init__(self, client: "Client"):
        self.client = client

    async def get_kline(
        self,
        contract_id: str,
        interval: str,
        start_time: str | None = None,
        end_time: str | None = None,
        limit: int | None = None,
    ) -> dict:
        """Candlesticks for one contract."""
        if not contract_id:
            raise ValueError("contract_id is required")
        if not interval:
            raise ValueError("interval is required")
        params = {
            "contractId": contract_id,
            "interval": interval,
            "startTime": start_time,
            "endTime": end_time,
            "limit": limit,
        }
        return await self.client.request("GET", "/api/v1/public/kline", params=params, operation="get kline")

    async def get_depth(self, contract_id: str, limit: int | None = None) -> dict:
        if not contract_id:
            raise ValueError("contract_id is required")
        params = {"contractId": contract_id, "limit": limit}
        return await self.client.request("GET", "/api/v1/public/depth", params=params, operation="get depth")

    async def get_ticker(self, contract_id: str | None = None) -> dict:
        """Ticker for one contract, or all tickers when contract_id is None."""
        params = {"contractId": contract_id}
        return await self.client.request("GET", "/api/v1/public/ticker", params=params, operation="get ticker")

    async def get_trades(self, contract_id: str, limit: int | None = None) -> dict:
        if not contract_id:
            raise ValueError("contract_id is required")
        params = {"contractId": contract_id, "limit": limit}
        return await self.client.request("GET", "/api/v1/public/trades", params=params, operation="get trades")
