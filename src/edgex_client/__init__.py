"""
edgeX client

Async access to the edgeX derivatives exchange: signed REST calls and
public/private WebSocket streams.

REST example:
    >>> from edgex_client import Client
    >>> async with Client(account_id=12345, stark_private_key="0x...") as client:
    ...     positions = await client.account.get_positions()

Stream example:
    >>> await client.ws.connect_public()
    >>> await client.ws.subscribe_market_ticker("10000001", lambda msg: print(msg))
    >>> await client.ws.connect_private()
    >>> await client.ws.subscribe_order(on_order)
"""

import logging

from ._internal.log_config import setup_logging
from ._internal.stark import Signature, get_public_key, sign, verify
from .auth import (
    ACCOUNT_ID_HEADER,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    Credential,
    RequestAuthenticator,
    build_signing_string,
    keccak_hex,
)
from .client import Client, check_envelope
from .errors import (
    AuthConfigurationError,
    DomainError,
    EdgeXError,
    FormatError,
    NotConnectedError,
    RateLimitError,
    TransportError,
)
from .rest import (
    AccountClient,
    AssetClient,
    FundingClient,
    MetadataClient,
    OrderClient,
    OrderSide,
    OrderType,
    QuoteClient,
    TimeInForce,
    TransferClient,
)
from .ws import ChannelSession, SessionState, StreamManager

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Client (recommended entry point)
    "Client",
    "check_envelope",
    # REST resources
    "AccountClient",
    "AssetClient",
    "FundingClient",
    "MetadataClient",
    "OrderClient",
    "QuoteClient",
    "TransferClient",
    "OrderSide",
    "OrderType",
    "TimeInForce",
    # Streams
    "StreamManager",
    "ChannelSession",
    "SessionState",
    # Signing
    "Credential",
    "RequestAuthenticator",
    "Signature",
    "sign",
    "verify",
    "get_public_key",
    "build_signing_string",
    "keccak_hex",
    "TIMESTAMP_HEADER",
    "SIGNATURE_HEADER",
    "ACCOUNT_ID_HEADER",
    # Exceptions
    "EdgeXError",
    "FormatError",
    "AuthConfigurationError",
    "NotConnectedError",
    "TransportError",
    "DomainError",
    "RateLimitError",
    # Logging
    "setup_logging",
    # Version
    "__version__",
]
