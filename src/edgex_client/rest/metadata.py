"""Public exchange metadata endpoints."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..client import Client


class MetadataClient:
    def __init__(self, client: "Client"):
        self.client = client

    async def get_server_time(self) -> dict:
        return await self.client.request("GET", "/api/v1/public/time", operation="get server time")

    async def get_metadata(self) -> dict:
        """Full exchange metadata: coins, contracts and global config."""
        return await self.client.request("GET", "/api/v1/public/metadata", operation="get metadata")

    async def get_contracts(self) -> list[dict]:
        metadata = await self.get_metadata()
        return (metadata.get("data") or {}).get("contractList") or []

    async def get_contract(self, contract_id: str) -> Optional[dict]:
        """Contract entry from metadata, or None if unknown."""
        for contract in await self.get_contracts():
            if str(contract.get("contractId")) == str(contract_id):
                return contract
        return None

    async def get_global_config(self) -> dict:
        """The ``global`` section of metadata, e.g. starkExCollateralCoin."""
        metadata = await self.get_metadata()
        return (metadata.get("data") or {}).get("global") or {}
