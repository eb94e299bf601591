"""
ECDSA over the STARK curve.

Curve: y^2 = x^3 + ALPHA*x + BETA over the field of FIELD_PRIME elements.
Signatures follow the StarkEx scheme: r and w = s^-1 must both be below
2^251, and nonces are RFC 6979 deterministic so signing is a pure function
of (private key, message hash).

Keys, hashes and signature components are exchanged as hex strings.
"""

import math
from dataclasses import dataclass
from hashlib import sha256

from ecdsa.ellipticcurve import CurveFp, PointJacobi
from ecdsa.numbertheory import SquareRootError, square_root_mod_prime
from ecdsa.rfc6979 import generate_k

from ..errors import FormatError


FIELD_PRIME = 2**251 + 17 * 2**192 + 1
ALPHA = 1
BETA = 0x06F21413EFBE40DE150E596D72F7A8C5609AD26C15C915C1F4CDFCB99CEE9E89
EC_ORDER = 0x0800000000000010FFFFFFFFFFFFFFFFB781126DCAE7B2321E66A241ADC64D2F
GEN_X = 0x01EF15C18599971B7BECED415A40F0C7DEACFD9B0D1819E03D723D8BC943CFCA
GEN_Y = 0x005668060AA49730B7BE4801DF46EC62DE53ECD11ABE43A32873000C36E8DC1F

# r and w must fit in a field element usable by the Cairo verifier.
N_ELEMENT_BITS_ECDSA = 251
MAX_ECDSA_VALUE = 2**N_ELEMENT_BITS_ECDSA

CURVE = CurveFp(FIELD_PRIME, ALPHA, BETA)
GENERATOR = PointJacobi(CURVE, GEN_X, GEN_Y, 1, EC_ORDER, generator=True)


@dataclass(frozen=True)
class Signature:
    """Signature pair as 64-char lower-case hex strings."""

    r: str
    s: str

    def to_hex(self) -> str:
        """Concatenation r || s, the form carried in request headers."""
        return self.r + self.s


def parse_hex(value: str, name: str = "value") -> int:
    """Parse a hex string (optional 0x prefix) into an int, raising FormatError."""
    if not isinstance(value, str):
        raise FormatError(f"{name} must be a hex string, got {type(value).__name__}")
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not text:
        raise FormatError(f"{name} is empty")
    try:
        return int(text, 16)
    except ValueError:
        raise FormatError(f"{name} is not valid hex: {value!r}") from None


def _to_hex(n: int) -> str:
    return format(n, "064x")


def _private_key_int(private_key: str) -> int:
    priv = parse_hex(private_key, "private key")
    if not 1 <= priv < EC_ORDER:
        raise FormatError("private key is out of range for the STARK curve")
    return priv


def _generate_k(msg_hash: int, priv_key: int, seed: int | None) -> int:
    # Hashes of 248..251 bits are shifted by a nibble so nonces match
    # the elliptic.js based signers used by StarkEx tooling.
    if 1 <= msg_hash.bit_length() % 8 <= 4 and msg_hash.bit_length() >= 248:
        msg_hash *= 16

    if seed is None:
        extra_entropy = b""
    else:
        extra_entropy = seed.to_bytes(math.ceil(seed.bit_length() / 8), "big")

    data = msg_hash.to_bytes(max(1, math.ceil(msg_hash.bit_length() / 8)), "big")
    return generate_k(EC_ORDER, priv_key, sha256, data, extra_entropy=extra_entropy)


def sign(private_key: str, message_hash: str) -> Signature:
    """
    Sign a message hash with a STARK private key.

    Args:
        private_key: Hex private key.
        message_hash: Hex message hash. Reduced modulo the curve order.

    Returns:
        Signature with hex r and s. Deterministic for fixed inputs.

    Raises:
        FormatError: If either input is not valid hex or the key is out of range.
    """
    priv = _private_key_int(private_key)
    msg = parse_hex(message_hash, "message hash") % EC_ORDER

    seed = None
    while True:
        k = _generate_k(msg, priv, seed)
        seed = 1 if seed is None else seed + 1

        r = (GENERATOR * k).x()
        if not 1 <= r < MAX_ECDSA_VALUE:
            continue

        if (msg + r * priv) % EC_ORDER == 0:
            continue

        w = k * pow(msg + r * priv, -1, EC_ORDER) % EC_ORDER
        if not 1 <= w < MAX_ECDSA_VALUE:
            continue

        s = pow(w, -1, EC_ORDER)
        return Signature(r=_to_hex(r), s=_to_hex(s))


def get_public_key(private_key: str) -> str:
    """Return the STARK public key (x-coordinate of priv*G) as hex."""
    priv = _private_key_int(private_key)
    return _to_hex((GENERATOR * priv).x())


def _y_for_x(x: int) -> int | None:
    rhs = (pow(x, 3, FIELD_PRIME) + ALPHA * x + BETA) % FIELD_PRIME
    try:
        return square_root_mod_prime(rhs, FIELD_PRIME)
    except SquareRootError:
        return None


def verify(public_key: str, message_hash: str, signature: Signature) -> bool:
    """
    Check a signature against a STARK public key (x-coordinate only).

    Both points sharing that x-coordinate are accepted, as the key does
    not carry the sign of y.

    Raises:
        FormatError: If any input is not valid hex.
    """
    pub_x = parse_hex(public_key, "public key")
    msg = parse_hex(message_hash, "message hash") % EC_ORDER
    r = parse_hex(signature.r, "signature r")
    s = parse_hex(signature.s, "signature s")

    if not 1 <= r < MAX_ECDSA_VALUE:
        return False
    if not 1 <= s < EC_ORDER:
        return False
    w = pow(s, -1, EC_ORDER)
    if not 1 <= w < MAX_ECDSA_VALUE:
        return False

    if not 0 <= pub_x < FIELD_PRIME:
        return False
    pub_y = _y_for_x(pub_x)
    if pub_y is None:
        return False

    u1 = msg * w % EC_ORDER
    u2 = r * w % EC_ORDER
    for y in (pub_y, FIELD_PRIME - pub_y):
        point = PointJacobi(CURVE, pub_x, y, 1, EC_ORDER)
        candidate = GENERATOR.mul_add(u1, point, u2)
        if candidate.x() == r:
            return True
    return False
