"""
Elliptic curve arithmetic on secp256k1 via libsecp256k1.

Group operations (scalar multiplication, point addition, point
decoding) and the standard ECDSA verification predicate are delegated
to the C library ``coincurve``, which wraps Bitcoin Core's
libsecp256k1.  Scalar arithmetic modulo the group order stays in pure
Python: it is cheap, and keeping it here lets secret scalars be wiped.

Install
-------
    pip install coincurve>=18.0.0

References
----------
- SEC 2 v2 §2.4.1  secp256k1 domain parameters
- SEC 1 v2 §4.1    Elliptic Curve Digital Signature Algorithm
"""

from __future__ import annotations

import secrets
from typing import Optional

from coincurve import PrivateKey as _SK, PublicKey as _PK
from coincurve.ecdsa import cdata_to_der, deserialize_compact

# ── secp256k1 constants ─────────────────────────────────────────────────
ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
HALF_ORDER = ORDER >> 1
SCALAR_BYTES = 32
SCALAR_HEX_DIGITS = 2 * SCALAR_BYTES
COMPRESSED_BYTES = 33


# ── Scalar  (Z_q arithmetic, pure Python) ───────────────────────────────
class Scalar:
    """
    Element of the scalar field  Z_q  where *q* = ``ORDER``.

    Every operation returns a fresh, fully reduced ``Scalar``.  A scalar
    holding secret material can be overwritten in place with
    :meth:`wipe`.
    """

    __slots__ = ("_v",)

    def __init__(self, value: int) -> None:
        self._v = value % ORDER

    # constructors -----------------------------------------------------------
    @classmethod
    def zero(cls) -> Scalar:
        return cls(0)

    @classmethod
    def one(cls) -> Scalar:
        return cls(1)

    @classmethod
    def random(cls) -> Scalar:
        """Uniform in [1, q-1] via rejection sampling."""
        while True:
            c = int.from_bytes(secrets.token_bytes(SCALAR_BYTES), "big")
            if 0 < c < ORDER:
                return cls(c)

    @classmethod
    def from_bytes(cls, data: bytes) -> Scalar:
        if len(data) != SCALAR_BYTES:
            raise ValueError(f"need {SCALAR_BYTES} bytes, got {len(data)}")
        v = int.from_bytes(data, "big")
        if v >= ORDER:
            raise ValueError("scalar out of range")
        return cls(v)

    @classmethod
    def from_bytes_reduce(cls, data: bytes) -> Scalar:
        """Hash-output safe: reduce arbitrary length modulo *q*."""
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def from_hex(cls, text: str) -> Scalar:
        """Parse a hex scalar as produced by :meth:`to_hex`."""
        v = int(text, 16)
        if v >= ORDER:
            raise ValueError("scalar out of range")
        return cls(v)

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self._v.to_bytes(SCALAR_BYTES, "big")

    def to_hex(self) -> str:
        """Lowercase hex, left-zero-padded to the full scalar width."""
        return f"{self._v:0{SCALAR_HEX_DIGITS}x}"

    @property
    def value(self) -> int:
        return self._v

    def is_zero(self) -> bool:
        return self._v == 0

    def wipe(self) -> None:
        """Overwrite the held value with zero (best-effort in Python)."""
        self._v = 0

    # arithmetic -------------------------------------------------------------
    def __add__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return Scalar((self._v + o._v) % ORDER)

    def __radd__(self, o):
        if isinstance(o, int) and o == 0:
            return self                       # for sum()
        return NotImplemented

    def __sub__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return Scalar((self._v - o._v) % ORDER)

    def __mul__(self, o):
        if isinstance(o, Scalar):
            return Scalar((self._v * o._v) % ORDER)
        if isinstance(o, Point):
            return o._smul(self)
        return NotImplemented

    def __neg__(self) -> Scalar:
        return Scalar((-self._v) % ORDER)

    def __truediv__(self, o: Scalar) -> Scalar:
        if not isinstance(o, Scalar):
            return NotImplemented
        return self * o.inv()

    def inv(self) -> Scalar:
        """Multiplicative inverse via Fermat's little theorem."""
        if self._v == 0:
            raise ZeroDivisionError("cannot invert zero scalar")
        return Scalar(pow(self._v, ORDER - 2, ORDER))

    # comparison / hashing ---------------------------------------------------
    def __eq__(self, o: object) -> bool:
        if isinstance(o, Scalar):
            return self._v == o._v
        if isinstance(o, int):
            return self._v == o % ORDER
        return False

    def __hash__(self) -> int:
        return hash(self._v)

    def __bool__(self) -> bool:
        return self._v != 0

    def __repr__(self) -> str:
        h = hex(self._v)
        return f"Scalar(0x{h[2:10]}…)" if len(h) > 14 else f"Scalar({h})"


# ── Point  (secp256k1 group element via libsecp256k1) ───────────────────
class Point:
    """
    Point on secp256k1.

    The identity (point at infinity) is represented by a flag rather than
    a ``coincurve.PublicKey``; this matches the algebraic convention
    *P + O = P* and avoids library quirks around serialising the identity.
    """

    __slots__ = ("_pk", "_inf")

    def __init__(self, *, pk: Optional[_PK] = None, infinity: bool = False):
        self._pk: Optional[_PK] = pk
        self._inf: bool = infinity

    # constructors -----------------------------------------------------------
    @classmethod
    def generator(cls) -> Point:
        """Standard base point *G*."""
        return cls(pk=_SK(b"\x00" * 31 + b"\x01").public_key)

    @classmethod
    def identity(cls) -> Point:
        """Point at infinity, the additive identity."""
        return cls(infinity=True)

    @classmethod
    def from_scalar(cls, s: Scalar) -> Point:
        """Compute *s · G*."""
        if s.is_zero():
            return cls.identity()
        return cls(pk=_SK(s.to_bytes()).public_key)

    @classmethod
    def from_bytes(cls, data: bytes) -> Point:
        """
        Deserialise SEC 1 compressed (33 B) or uncompressed (65 B).

        Raises ``ValueError`` for anything that is not a point on the
        curve, including the all-zero identity encoding.
        """
        if not data or all(b == 0 for b in data):
            raise ValueError("identity is not a valid public point")
        try:
            return cls(pk=_PK(bytes(data)))
        except (ValueError, TypeError) as exc:
            raise ValueError(f"not a secp256k1 point: {exc}") from exc

    @classmethod
    def from_hex(cls, text: str) -> Point:
        return cls.from_bytes(bytes.fromhex(text))

    # serialisation ----------------------------------------------------------
    def to_bytes_compressed(self) -> bytes:
        if self._inf:
            return b"\x00" * COMPRESSED_BYTES
        return self._pk.format(compressed=True)  # type: ignore[union-attr]

    def to_bytes_uncompressed(self) -> bytes:
        if self._inf:
            raise ValueError("identity has no uncompressed encoding")
        return self._pk.format(compressed=False)  # type: ignore[union-attr]

    def to_bytes(self) -> bytes:
        return self.to_bytes_compressed()

    def to_hex(self) -> str:
        return self.to_bytes_compressed().hex()

    @property
    def x(self) -> int:
        if self._inf:
            return 0
        raw = self._pk.format(compressed=False)  # type: ignore[union-attr]
        return int.from_bytes(raw[1:33], "big")

    def is_inf(self) -> bool:
        return self._inf

    # group operations -------------------------------------------------------
    def _smul(self, s: Scalar) -> Point:
        """Scalar multiplication  s · self  (C speed)."""
        if self._inf or s.is_zero():
            return Point.identity()
        copy = _PK(self._pk.format())  # type: ignore[union-attr]
        return Point(pk=copy.multiply(s.to_bytes()))

    def __add__(self, o: Point) -> Point:
        if not isinstance(o, Point):
            return NotImplemented
        if self._inf:
            return o
        if o._inf:
            return self
        # P + (-P) = O: the x-coordinates match but the points differ
        if self.x == o.x and self != o:
            return Point.identity()
        return Point(pk=_PK.combine_keys(
            [self._pk, o._pk]))  # type: ignore[list-item]

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Point):
            return False
        if self._inf and o._inf:
            return True
        if self._inf or o._inf:
            return False
        return self._pk.format() == o._pk.format()  # type: ignore

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        if self._inf:
            return "Point(∞)"
        return f"Point(0x{self.x:064x})"[:42] + "…)"


# ── ECDSA primitive ─────────────────────────────────────────────────────

def signature_to_der(r: Scalar, s: Scalar) -> bytes:
    """DER-encode  (r, s)  through libsecp256k1's own serialiser."""
    return cdata_to_der(deserialize_compact(r.to_bytes() + s.to_bytes()))


def ecdsa_verify(public_key: Point, digest: bytes, r: Scalar, s: Scalar) -> bool:
    """
    Standard single-key ECDSA verification of a 32-byte digest.

    libsecp256k1 only accepts low-s signatures, so a signature must be
    canonical to verify here.
    """
    if public_key.is_inf() or r.is_zero() or s.is_zero():
        return False
    try:
        der = signature_to_der(r, s)
        pk = _PK(public_key.to_bytes_compressed())
        return pk.verify(der, digest, hasher=None)
    except ValueError:
        return False


# ── module-level generator ──────────────────────────────────────────────
G = Point.generator()
