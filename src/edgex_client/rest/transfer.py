"""Private transfer endpoints: transfers between edgeX accounts."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Client


class TransferClient:
    """
    Transfers in and out of the configured account.

    create_transfer_out() is the only write; it is sent as a signed POST.
    """

    def __init__(self, client: "Client"):
        self.client = client

    def _path(self, suffix: str) -> str:
        return f"/api/v1/private/transfers/{self.client.account_id}/{suffix}"

    async def get_transfer_out_by_id(self, transfer_id: str) -> dict:
        if not transfer_id:
            raise ValueError("transfer_id is required")
        return await self.client.request(
            "GET",
            self._path("out"),
            params={"transferOutIdList": transfer_id},
            operation="get transfer out by ID",
        )

    async def create_transfer_out(
        self,
        coin_id: str,
        amount: str,
        to_account_id: str,
        client_transfer_id: str | None = None,
    ) -> dict:
        """
        Move ``amount`` of ``coin_id`` to another account.

        Args:
            coin_id: Coin to transfer.
            amount: Decimal string.
            to_account_id: Receiving account.
            client_transfer_id: Idempotency key. Defaults to a fresh UUID.
        """
        if not coin_id:
            raise ValueError("coin_id is required")
        if not amount:
            raise ValueError("amount is required")
        if not to_account_id:
            raise ValueError("to_account_id is required")
        body = {
            "coinId": coin_id,
            "amount": amount,
            "toAccountId": str(to_account_id),
            "clientTransferId": client_transfer_id or self.client.generate_uuid(),
        }
        return await self.client.request("POST", self._path("out"), json=body, operation="create transfer out")

    async def get_transfer_in_records(
        self,
        start_time: str | None = None,
        end_time: str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        params = {"startTime": start_time, "endTime": end_time, "size": size, "offsetData": offset_data}
        return await self.client.request(
            "GET", self._path("in"), params=params, operation="get transfer in records"
        )

    async def get_transfer_out_records(
        self,
        start_time: str | None = None,
        end_time: str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        params = {"startTime": start_time, "endTime": end_time, "size": size, "offsetData": offset_data}
        return await self.client.request(
            "GET", self._path("out"), params=params, operation="get transfer out records"
        )

    async def get_available_transfer_amount(self, coin_id: str) -> dict:
        if not coin_id:
            raise ValueError("coin_id is required")
        return await self.client.request(
            "GET",
            self._path("available-amount"),
            params={"coinId": coin_id},
            operation="get available transfer amount",
        )
