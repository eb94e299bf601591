"""Thin wrappers mapping REST endpoints onto Client.request()."""

from .account import AccountClient
from .asset import AssetClient
from .funding import FundingClient
from .metadata import MetadataClient
from .order import OrderClient, OrderSide, OrderType, TimeInForce
from .quote import QuoteClient
from .transfer import TransferClient

__all__ = [
    "AccountClient",
    "AssetClient",
    "FundingClient",
    "MetadataClient",
    "OrderClient",
    "OrderSide",
    "OrderType",
    "QuoteClient",
    "TimeInForce",
    "TransferClient",
]
