"""Private asset endpoints: balances, asset orders and withdrawable amounts."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Client


class AssetClient:
    def __init__(self, client: "Client"):
        self.client = client

    async def get_account_asset(self) -> dict:
        """Collateral and position value summary for the configured account."""
        return await self.client.request(
            "GET", f"/api/v1/private/assets/{self.client.account_id}", operation="get account assets"
        )

    async def get_all_orders_page(
        self,
        start_time: str | None = None,
        end_time: str | None = None,
        chain_id: str | None = None,
        type_list: str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        """Deposit and withdrawal orders, paged via offsetData."""
        params = {
            "startTime": start_time,
            "endTime": end_time,
            "chainId": chain_id,
            "typeList": type_list,
            "size": size,
            "offsetData": offset_data,
        }
        return await self.client.request(
            "GET",
            f"/api/v1/private/assets/orders/{self.client.account_id}",
            params=params,
            operation="get asset orders",
        )

    async def get_coin_rate(self, chain_id: str | None = None, coin: str | None = None) -> dict:
        params = {"chainId": chain_id, "coin": coin}
        return await self.client.request(
            "GET", "/api/v1/private/assets/coin-rate", params=params, operation="get coin rate"
        )

    async def get_normal_withdrawable_amount(self, chain_id: str, coin: str) -> dict:
        if not chain_id:
            raise ValueError("chain_id is required")
        if not coin:
            raise ValueError("coin is required")
        params = {"chainId": chain_id, "coin": coin}
        return await self.client.request(
            "GET",
            "/api/v1/private/assets/withdraw/normal/available-amount",
            params=params,
            operation="get withdrawable amount",
        )
