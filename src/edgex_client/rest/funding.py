"""Funding rate endpoints (public) and funding payments (private)."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Client


class FundingClient:
    def __init__(self, client: "Client"):
        self.client = client

    async def get_funding_rate(
        self,
        contract_id: str,
        start_time: int | None = None,
        end_time: int | None = None,
        size: int | None = None,
        offset_data: str | None = None,
    ) -> dict:
        """
        Settled funding rate history for one contract.

        ``start_time`` is inclusive and ``end_time`` exclusive, both in ms.
        """
        if not contract_id:
            raise ValueError("contract_id is required")
        params = {
            "contractId": contract_id,
            "filterSettlementFundingRate": "true",
            "size": size,
            "offsetData": offset_data,
            "filterBeginTimeInclusive": start_time,
            "filterEndTimeExclusive": end_time,
        }
        return await self.client.request(
            "GET", "/api/v1/public/funding-rate", params=params, operation="get funding rate"
        )

    async def get_latest_funding_rate(self, contract_id: str) -> dict:
        if not contract_id:
            raise ValueError("contract_id is required")
        return await self.client.request(
            "GET",
            "/api/v1/public/funding/getLatestFundingRate",
            params={"contractId": contract_id},
            operation="get latest funding rate",
        )

    async def get_funding_transactions(
        self,
        start_time: str | None = None,
        end_time: str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        """Funding payments of the configured account."""
        params = {"startTime": start_time, "endTime": end_time, "size": size, "offsetData": offset_data}
        return await self.client.request(
            "GET",
            f"/api/v1/private/accounts/{self.client.account_id}/funding-transactions",
            params=params,
            operation="get funding transactions",
        )
