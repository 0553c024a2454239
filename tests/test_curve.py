"""
Tests
"""

import random
from hashlib import sha256

import pytest
from ecdsa import SECP256k1, SigningKey, util

from tecdsa.curve import (
    G, HALF_ORDER, ORDER, Point, Scalar, ecdsa_verify, signature_to_der,
)
from tecdsa.field import batch_inverse, canonicalize_s, is_high


def test_scalar_is_always_reduced():
    assert Scalar(ORDER + 5) == 5
    assert Scalar(-1).value == ORDER - 1
    a = Scalar(ORDER - 1)
    assert (a + Scalar(2)).value == 1
    assert (Scalar(3) - Scalar(5)).value == ORDER - 2
    assert (a * a).value == 1


def test_scalar_inverse():
    x = Scalar(random.randint(1, ORDER - 1))
    assert x * x.inv() == 1
    with pytest.raises(ZeroDivisionError):
        Scalar.zero().inv()


def test_scalar_hex_is_fixed_width():
    assert Scalar(1).to_hex() == "0" * 63 + "1"
    x = Scalar(random.randint(0, ORDER - 1))
    assert len(x.to_hex()) == 64
    assert Scalar.from_hex(x.to_hex()) == x
    with pytest.raises(ValueError):
        Scalar.from_hex(f"{ORDER:064x}")


def test_scalar_wipe():
    x = Scalar(123456789)
    x.wipe()
    assert x.is_zero()


def test_point_addition():
    secret1 = random.randint(1, ORDER - 1)
    secret2 = random.randint(1, ORDER - 1)
    pub1 = Point.from_scalar(Scalar(secret1))
    pub2 = Point.from_scalar(Scalar(secret2))
    assert pub1 + pub2 == Point.from_scalar(Scalar(secret1 + secret2))
    assert Scalar(secret1) * G == pub1


def test_point_encoding():
    pub = Point.from_scalar(Scalar(random.randint(1, ORDER - 1)))
    assert Point.from_hex(pub.to_hex()) == pub
    assert Point.from_bytes(pub.to_bytes_uncompressed()) == pub
    with pytest.raises(ValueError):
        Point.from_bytes(b"\x00" * 33)
    with pytest.raises(ValueError):
        Point.from_bytes(b"\x05" * 33)


def test_ecdsa_verify_accepts_reference_signature():
    secret = random.randint(1, ORDER - 1)
    digest = sha256(b"Nitin").digest()
    priv = SigningKey.from_secret_exponent(secret, SECP256k1, hashfunc=sha256)
    raw = priv.sign_digest_deterministic(
        digest, sigencode=util.sigencode_string_canonize,
    )
    r = Scalar.from_bytes(raw[:32])
    s = Scalar.from_bytes(raw[32:])
    pub = Point.from_scalar(Scalar(secret))

    assert ecdsa_verify(pub, digest, r, s)
    assert not ecdsa_verify(pub, sha256(b"wrongdata").digest(), r, s)
    # high-s twin of a valid signature is refused
    assert not ecdsa_verify(pub, digest, r, -s)
    assert util.sigdecode_der(signature_to_der(r, s), ORDER) == (r.value, s.value)


def test_batch_inverse():
    xs = [Scalar(random.randint(1, ORDER - 1)) for _ in range(6)]
    for x, inv in zip(xs, batch_inverse(xs)):
        assert x * inv == 1
    assert batch_inverse([]) == []


def test_canonicalize_s():
    low = Scalar(HALF_ORDER)
    high = Scalar(HALF_ORDER + 1)
    assert not is_high(low)
    assert is_high(high)
    assert canonicalize_s(low) is low
    assert canonicalize_s(high) == ORDER - (HALF_ORDER + 1)
    assert not is_high(canonicalize_s(high))
