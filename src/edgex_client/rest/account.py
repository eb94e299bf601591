"""Private account endpoints: positions and transaction history."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Client


class AccountClient:
    """
    Account queries for the client's configured account.

    All endpoints are private; calls fail with AuthConfigurationError when
    the client has no credential.
    """

    def __init__(self, client: "Client"):
        self.client = client

    def _path(self, suffix: str) -> str:
        return f"/api/v1/private/accounts/{self.client.account_id}/{suffix}"

    async def get_positions(self) -> dict:
        return await self.client.request("GET", self._path("positions"), operation="get account positions")

    async def get_position_by_contract_id(self, contract_id: str) -> dict:
        return await self.client.request(
            "GET",
            self._path(f"positions/{contract_id}"),
            operation="get position by contract ID",
        )

    async def get_position_transactions(
        self,
        contract_id: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        """Paged position transaction history. Pass the returned offsetData to page."""
        params = {
            "contractId": contract_id,
            "startTime": start_time,
            "endTime": end_time,
            "size": size,
            "offsetData": offset_data,
        }
        return await self.client.request(
            "GET",
            self._path("position-transactions"),
            params=params,
            operation="get position transactions",
        )

    async def get_collateral_transactions(
        self,
        start_time: str | None = None,
        end_time: str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        params = {
            "startTime": start_time,
            "endTime": end_time,
            "size": size,
            "offsetData": offset_data,
        }
        return await self.client.request(
            "GET",
            self._path("collateral-transactions"),
            params=params,
            operation="get collateral transactions",
        )
