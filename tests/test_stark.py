"""Tests for STARK curve signing."""

import pytest

from edgex_client import FormatError, Signature, get_public_key, keccak_hex, sign, verify
from edgex_client._internal.stark import EC_ORDER, MAX_ECDSA_VALUE

from conftest import TEST_PRIVATE_KEY

MSG_HASH = keccak_hex("1700000000000GET/api/v1/private/accounts/42/positions")


def test_sign_is_deterministic():
    """Same key and hash always give the same signature."""
    assert sign(TEST_PRIVATE_KEY, MSG_HASH) == sign(TEST_PRIVATE_KEY, MSG_HASH)


def test_signature_format():
    """r and s are 64-char lower-case hex, r and s^-1 below 2^251."""
    sig = sign(TEST_PRIVATE_KEY, MSG_HASH)
    for part in (sig.r, sig.s):
        assert len(part) == 64
        assert part == part.lower()
        int(part, 16)

    r = int(sig.r, 16)
    s = int(sig.s, 16)
    assert 1 <= r < MAX_ECDSA_VALUE
    assert 1 <= pow(s, -1, EC_ORDER) < MAX_ECDSA_VALUE
    assert sig.to_hex() == sig.r + sig.s


def test_public_key_known_answer():
    """Test the STARK key of a published StarkEx test private key."""
    assert get_public_key(TEST_PRIVATE_KEY) == (
        "077a3b314db07c45076d11f62b6f9e748a39790441823307743cf00d6597ea43"
    )


def test_hash_is_reduced_before_signing():
    """Test a hash and its residue modulo the curve order sign identically."""
    residue = format(int(MSG_HASH, 16) % EC_ORDER, "x")
    assert sign(TEST_PRIVATE_KEY, MSG_HASH) == sign(TEST_PRIVATE_KEY, residue)


def test_sign_then_verify():
    """Test a fresh signature verifies."""
    public_key = get_public_key(TEST_PRIVATE_KEY)
    sig = sign(TEST_PRIVATE_KEY, MSG_HASH)
    assert verify(public_key, MSG_HASH, sig)


def test_verify_rejects_other_hash():
    """Test verification against another hash fails."""
    public_key = get_public_key(TEST_PRIVATE_KEY)
    sig = sign(TEST_PRIVATE_KEY, MSG_HASH)
    assert not verify(public_key, keccak_hex("something else"), sig)


def test_verify_rejects_other_key():
    """Test verification against another key fails."""
    other_public = get_public_key("0x1234567890abcdef")
    sig = sign(TEST_PRIVATE_KEY, MSG_HASH)
    assert not verify(other_public, MSG_HASH, sig)


def test_verify_rejects_tampered_signature():
    """Test a modified s fails verification."""
    public_key = get_public_key(TEST_PRIVATE_KEY)
    sig = sign(TEST_PRIVATE_KEY, MSG_HASH)
    tampered = Signature(r=sig.r, s=format(int(sig.s, 16) ^ 1, "064x"))
    assert not verify(public_key, MSG_HASH, tampered)


def test_different_hashes_give_different_signatures():
    """Test distinct hashes give distinct signatures."""
    assert sign(TEST_PRIVATE_KEY, MSG_HASH) != sign(TEST_PRIVATE_KEY, keccak_hex("other"))


def test_hex_prefix_is_optional():
    """Test keys and hashes with and without 0x."""
    bare_key = TEST_PRIVATE_KEY[2:]
    assert sign(bare_key, MSG_HASH) == sign(TEST_PRIVATE_KEY, "0x" + MSG_HASH)


@pytest.mark.parametrize("bad", ["", "0x", "not-hex", "12zz"])
def test_malformed_hash_raises_format_error(bad):
    """Test malformed hashes raise FormatError."""
    with pytest.raises(FormatError):
        sign(TEST_PRIVATE_KEY, bad)


def test_malformed_key_raises_format_error():
    """Test malformed keys raise FormatError."""
    with pytest.raises(FormatError):
        sign("0xnothex", MSG_HASH)


def test_out_of_range_key_raises_format_error():
    """Test keys outside the curve order raise FormatError."""
    with pytest.raises(FormatError):
        get_public_key("0x0")
    with pytest.raises(FormatError):
        get_public_key(hex(EC_ORDER))


def test_keccak_empty_string():
    """Keccak-256, not NIST SHA3-256."""
    assert keccak_hex("") == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
