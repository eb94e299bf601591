"""
Request signing for private REST calls and the private stream.

Signing string: ``<timestamp_ms><METHOD><path>``, hashed with Keccak-256
and signed with the STARK private key. The signature travels as ``r || s``
in the signature header next to the timestamp and account id headers.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from eth_utils import keccak
from yarl import URL

from ._internal import stark
from .errors import AuthConfigurationError

logger = logging.getLogger(__name__)


TIMESTAMP_HEADER = "X-Api-Timestamp"
SIGNATURE_HEADER = "X-Api-Signature"
ACCOUNT_ID_HEADER = "X-Api-AccountId"

PRIVATE_PATH_PREFIX = "/api/v1/private/"


@dataclass(frozen=True)
class Credential:
    """Account id and STARK private key. Shared read-only by REST and stream auth."""

    account_id: int
    private_key: str = field(repr=False)

    def __post_init__(self):
        if self.account_id is None or not self.private_key:
            raise AuthConfigurationError(
                "Account ID and STARK private key are both required for a credential"
            )
        # Fail at construction rather than on the first signed call.
        stark.get_public_key(self.private_key)

    @property
    def public_key(self) -> str:
        return stark.get_public_key(self.private_key)


def now_ms() -> int:
    return int(time.time() * 1000)


def is_private_path(url: str) -> bool:
    """True if the URL path targets a private endpoint."""
    return PRIVATE_PATH_PREFIX in URL(url).path


def build_signing_string(timestamp: int, method: str, path: str) -> str:
    """
    Canonical signing string for a REST call.

    The query string is dropped; only the URL path is signed.

    >>> build_signing_string(1700000000000, "get", "/accounts/42/positions?size=10")
    '1700000000000GET/accounts/42/positions'
    """
    return f"{timestamp}{method.upper()}{URL(path).path}"


def keccak_hex(text: str) -> str:
    """Keccak-256 of the UTF-8 bytes of ``text``, as hex."""
    return keccak(text=text).hex()


def signature_headers(credential: Credential, timestamp: int, signing_string: str) -> dict[str, str]:
    """Hash and sign ``signing_string`` and return the three auth headers."""
    signature = stark.sign(credential.private_key, keccak_hex(signing_string))
    return {
        TIMESTAMP_HEADER: str(timestamp),
        SIGNATURE_HEADER: signature.to_hex(),
        ACCOUNT_ID_HEADER: str(credential.account_id),
    }


class RequestAuthenticator:
    """
    Computes headers for every outbound REST call.

    Every call gets a timestamp header. Calls whose path contains
    ``/api/v1/private/`` are also signed; those fail fast with
    AuthConfigurationError when no credential is configured.

    Args:
        credential: Credential used for private paths, or None for a
                    public-only client.
    """

    def __init__(self, credential: Optional[Credential] = None):
        self.credential = credential

    def headers_for(self, method: str, url: str, timestamp: int | None = None) -> dict[str, str]:
        """
        Build auth headers for a request.

        Args:
            method: HTTP verb, any case.
            url: Absolute URL or path, query string allowed.
            timestamp: Milliseconds since epoch. Defaults to now.
        """
        if timestamp is None:
            timestamp = now_ms()

        if not is_private_path(url):
            return {TIMESTAMP_HEADER: str(timestamp)}

        if self.credential is None:
            raise AuthConfigurationError(
                f"Private endpoint {URL(url).path} requires an account ID and STARK private key"
            )

        signing_string = build_signing_string(timestamp, method, url)
        logger.debug("Signing %s %s", method.upper(), URL(url).path)
        return signature_headers(self.credential, timestamp, signing_string)

    def stream_headers(self, path: str, timestamp: int | None = None) -> dict[str, str]:
        """
        Headers authenticating a private stream connect.

        Signs ``<timestamp>GET<path>?accountId=<id>``, the synthetic request
        the stream endpoint checks. Unlike REST, the account id query is
        part of the signed content.
        """
        if self.credential is None:
            raise AuthConfigurationError(
                "Account ID and STARK private key are required for the private stream"
            )
        if timestamp is None:
            timestamp = now_ms()

        signed_path = f"{URL(path).path}?accountId={self.credential.account_id}"
        return signature_headers(self.credential, timestamp, f"{timestamp}GET{signed_path}")
