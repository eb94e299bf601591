"""Private order endpoints: create, cancel and query orders."""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import Client


class OrderType(str, Enum):
    LIMIT = "LIMIT"
    MARKET = "MARKET"


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TimeInForce(str, Enum):
    GOOD_TIL_CANCEL = "GOOD_TIL_CANCEL"
    IMMEDIATE_OR_CANCEL = "IMMEDIATE_OR_CANCEL"
    FILL_OR_KILL = "FILL_OR_KILL"


FEE_PLACES = Decimal("0.000001")


def taker_fee(price: str, size: str, fee_rate: str) -> str:
    """
    Fee for ``size`` at ``price``, rounded to 6 decimal places.

    >>> taker_fee("50000", "0.01", "0.0005")
    '0.25'
    """
    fee = (Decimal(price) * Decimal(size) * Decimal(fee_rate)).quantize(FEE_PLACES, rounding=ROUND_HALF_UP)
    return format(fee.normalize(), "f")


class OrderClient:
    """
    Order management for the client's configured account.

    All endpoints are private and signed; cancels go out as DELETE and
    order creation as POST.
    """

    def __init__(self, client: "Client"):
        self.client = client

    async def create_order(
        self,
        contract_id: str,
        side: OrderSide | str,
        order_type: OrderType | str,
        size: str,
        price: str,
        metadata: dict,
        time_in_force: TimeInForce | str | None = None,
        client_order_id: str | None = None,
        reduce_only: bool = False,
    ) -> dict:
        """
        Place an order.

        Args:
            contract_id: Contract to trade.
            side: BUY or SELL.
            order_type: LIMIT or MARKET.
            size: Order size as a decimal string.
            price: Limit price (worst price for MARKET) as a decimal string.
            metadata: The ``data`` part of MetadataClient.get_metadata(), used
                      for the contract's taker fee rate.
            time_in_force: Defaults to IMMEDIATE_OR_CANCEL for MARKET orders and
                           GOOD_TIL_CANCEL otherwise.
            client_order_id: Defaults to a fresh UUID.
            reduce_only: Only reduce an existing position.

        Raises:
            ValueError: Unknown contract or missing size/price.
        """
        if not size or not price:
            raise ValueError("size and price are required")
        side = OrderSide(side)
        order_type = OrderType(order_type)
        if time_in_force is None:
            time_in_force = (
                TimeInForce.IMMEDIATE_OR_CANCEL if order_type is OrderType.MARKET else TimeInForce.GOOD_TIL_CANCEL
            )
        time_in_force = TimeInForce(time_in_force)

        contract = next(
            (c for c in metadata.get("contractList") or [] if str(c.get("contractId")) == str(contract_id)),
            None,
        )
        if contract is None:
            raise ValueError(f"Contract not found: {contract_id}")

        body = {
            "accountId": str(self.client.account_id),
            "contractId": str(contract_id),
            "side": side.value,
            "type": order_type.value,
            "size": size,
            "price": price,
            "timeInForce": time_in_force.value,
            "clientOrderId": client_order_id or self.client.generate_uuid(),
            "reduceOnly": reduce_only,
            "fee": taker_fee(price, size, contract.get("defaultTakerFeeRate") or "0"),
        }
        return await self.client.request("POST", "/api/v1/private/orders", json=body, operation="create order")

    async def cancel_order(self, order_id: str) -> dict:
        if not order_id:
            raise ValueError("order_id is required")
        return await self.client.request(
            "DELETE", f"/api/v1/private/orders/{order_id}", operation="cancel order"
        )

    async def cancel_order_by_client_order_id(self, client_order_id: str) -> dict:
        if not client_order_id:
            raise ValueError("client_order_id is required")
        return await self.client.request(
            "DELETE",
            f"/api/v1/private/orders/client-order-id/{client_order_id}",
            operation="cancel order by client order ID",
        )

    async def get_active_orders(
        self,
        contract_id: str | None = None,
        side: OrderSide | str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        """Open orders, optionally filtered by contract and side. Paged via offsetData."""
        params = {
            "contractId": contract_id,
            "side": OrderSide(side).value if side is not None else None,
            "size": size,
            "offsetData": offset_data,
        }
        return await self.client.request(
            "GET",
            f"/api/v1/private/orders/active/{self.client.account_id}",
            params=params,
            operation="get active orders",
        )

    async def get_order_fill_transactions(
        self,
        contract_id: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        size: str | None = None,
        offset_data: str | None = None,
    ) -> dict:
        params = {
            "contractId": contract_id,
            "startTime": start_time,
            "endTime": end_time,
            "size": size,
            "offsetData": offset_data,
        }
        return await self.client.request(
            "GET",
            f"/api/v1/private/orders/fills/{self.client.account_id}",
            params=params,
            operation="get order fill transactions",
        )
