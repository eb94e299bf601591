"""
edgeX REST client.

Every call goes through Client.request(): auth headers from the
RequestAuthenticator, then the {code, data} envelope check. Resource
wrappers (metadata, account, quote, order, asset, transfer, funding) and
the stream manager hang off the client and share its credential.
"""

import asyncio
import logging
import os
import uuid
from typing import Any, Optional

import aiohttp

from .auth import Credential, RequestAuthenticator
from .errors import AuthConfigurationError, DomainError, RateLimitError, TransportError
from .rest import (
    AccountClient,
    AssetClient,
    FundingClient,
    MetadataClient,
    OrderClient,
    QuoteClient,
    TransferClient,
)
from .ws.manager import StreamManager

logger = logging.getLogger(__name__)


# Default configuration
DEFAULT_BASE_URL = "https://pro.edgex.exchange"
DEFAULT_WS_URL = "wss://quote.edgex.exchange"
DEFAULT_TIMEOUT = 30.0

SUCCESS_CODE = "SUCCESS"


def check_envelope(body: Any, operation: str) -> dict:
    """
    Return ``body`` if it is a success envelope, else raise DomainError.

    Envelope shape: {"code": "SUCCESS", "data": ..., "msg": ...}
    """
    if not isinstance(body, dict):
        raise DomainError("INVALID_RESPONSE", "Response body is not a JSON object", operation)
    code = body.get("code")
    if code != SUCCESS_CODE:
        message = body.get("msg") or body.get("message") or ""
        raise DomainError(code, message, operation, data=body.get("data"))
    return body


def _load_credential(account_id: int | str | None, stark_private_key: str | None) -> Optional[Credential]:
    if account_id in (None, "") and not stark_private_key:
        return None
    if account_id in (None, "") or not stark_private_key:
        raise AuthConfigurationError(
            "Both account ID and STARK private key must be set, or neither"
        )
    try:
        account_id = int(account_id)
    except (TypeError, ValueError):
        raise AuthConfigurationError(f"Account ID must be an integer, got {account_id!r}") from None
    return Credential(account_id=account_id, private_key=stark_private_key)


class Client:
    """
    Async edgeX API client.

    Args:
        base_url: REST base URL. Reads from EDGEX_BASE_URL env var, defaults to pro.edgex.exchange.
        account_id: Account ID. Reads from EDGEX_ACCOUNT_ID env var if not provided.
        stark_private_key: Hex STARK private key. Reads from EDGEX_STARK_PRIVATE_KEY env var.
        ws_url: WebSocket base URL. Reads from EDGEX_WS_URL env var, defaults to quote.edgex.exchange.
        timeout: Total timeout in seconds for each REST call.
        http_session: Optional aiohttp session. If None, one is created on first use
                      and closed by close().

    Without an account ID and key the client can only reach public endpoints.

    Example:
        >>> async with Client() as client:
        ...     server_time = await client.metadata.get_server_time()
        ...     await client.ws.connect_public()
        ...     await client.ws.subscribe_market_ticker("10000001", print)
    """

    def __init__(
        self,
        base_url: str | None = None,
        account_id: int | str | None = None,
        stark_private_key: str | None = None,
        ws_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        http_session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = (base_url or os.getenv("EDGEX_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.ws_url = (ws_url or os.getenv("EDGEX_WS_URL", DEFAULT_WS_URL)).rstrip("/")

        if account_id is None:
            account_id = os.getenv("EDGEX_ACCOUNT_ID")
        if stark_private_key is None:
            stark_private_key = os.getenv("EDGEX_STARK_PRIVATE_KEY")
        self.credential = _load_credential(account_id, stark_private_key)

        self.authenticator = RequestAuthenticator(self.credential)
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._http = http_session
        self._owns_http = http_session is None

        self.metadata = MetadataClient(self)
        self.account = AccountClient(self)
        self.quote = QuoteClient(self)
        self.order = OrderClient(self)
        self.asset = AssetClient(self)
        self.transfer = TransferClient(self)
        self.funding = FundingClient(self)
        self.ws = StreamManager(self.ws_url, self.authenticator, http_session=http_session)

    @property
    def account_id(self) -> int:
        """Configured account ID. Raises AuthConfigurationError if unset."""
        if self.credential is None:
            raise AuthConfigurationError("No account ID configured")
        return self.credential.account_id

    @staticmethod
    def generate_uuid() -> str:
        """Fresh UUID4 string, e.g. for client order ids."""
        return str(uuid.uuid4())

    def _session(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession()
            self._owns_http = True
        return self._http

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
        operation: str | None = None,
    ) -> dict:
        """
        Send an authenticated request and return the success envelope.

        Args:
            method: HTTP verb.
            path: Path below the base URL, e.g. "/api/v1/public/time".
            params: Query parameters. None values are dropped.
            json: JSON body.
            operation: Name used in error messages. Defaults to "<METHOD> <path>".

        Raises:
            AuthConfigurationError: Private path without a credential.
            TransportError: Connection failure, timeout or undecodable body.
            RateLimitError: HTTP 429.
            DomainError: Any other non-200 status or non-SUCCESS code.
        """
        method = method.upper()
        operation = operation or f"{method} {path}"
        url = f"{self.base_url}{path}"
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}

        headers = self.authenticator.headers_for(method, url)

        logger.debug("%s %s params=%s", method, path, query)
        try:
            async with self._session().request(
                method,
                url,
                params=query or None,
                json=json,
                headers=headers,
                timeout=self.timeout,
            ) as resp:
                if resp.status == 429:
                    text = await resp.text()
                    raise RateLimitError(str(resp.status), f"Rate limit exceeded: {text}", operation)
                elif resp.status != 200:
                    text = await resp.text()
                    raise DomainError(str(resp.status), text, operation)

                body = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TransportError(f"{operation} failed: {e}") from e

        return check_envelope(body, operation)

    async def close(self):
        """Close both streams and the HTTP session if this client created it."""
        await self.ws.close()
        if self._owns_http and self._http is not None:
            await self._http.close()
        self._http = None

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
