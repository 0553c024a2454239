"""
Explicit curve configuration for every tecdsa component.

Instead of reaching for module-level singletons, the dealer, signers,
combiner and verifier all receive a :class:`CurveContext` bundling the
capabilities they depend on:

- the group (order, base point, scalar multiplication, key encoding and
  ECDSA verification): secp256k1 via libsecp256k1;
- the message digest (SHA-256);
- the randomness source (``secrets``-backed by default);
- the clock used to timestamp records.

Tests swap the randomness source and clock for deterministic ones and
can then assert exact shares, coefficients and signatures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from .curve import Scalar, Point, ORDER, ecdsa_verify
from .errors import RandomnessError
from .hash import message_digest

PublicKeyLike = Union[Point, bytes, str]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CurveContext:
    """Capabilities of the fixed prime-order group plus injected ports."""

    order: int = ORDER
    generator: Point = field(default_factory=Point.generator)
    random_source: Callable[[], Scalar] = Scalar.random
    digest: Callable[[bytes], bytes] = message_digest
    clock: Callable[[], datetime] = _utc_now

    # ── factories ──────────────────────────────────────────────────────

    @classmethod
    def secp256k1(
        cls,
        *,
        random_source: Optional[Callable[[], Scalar]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> CurveContext:
        """Default context; override the randomness source or clock."""
        kwargs = {}
        if random_source is not None:
            kwargs["random_source"] = random_source
        if clock is not None:
            kwargs["clock"] = clock
        return cls(**kwargs)

    # ── randomness ─────────────────────────────────────────────────────

    def random_scalar(self) -> Scalar:
        """
        Draw a uniform non-zero scalar from the randomness source.

        Any failure of the source, or a value that is not a usable
        scalar, surfaces as ``RandomnessError``.
        """
        try:
            s = self.random_source()
        except Exception as exc:
            raise RandomnessError(
                f"randomness source failed: {type(exc).__name__}"
            ) from exc
        if not isinstance(s, Scalar) or s.is_zero():
            raise RandomnessError("randomness source returned an unusable scalar")
        return s

    def now(self) -> datetime:
        return self.clock()

    # ── group ──────────────────────────────────────────────────────────

    def base_multiply(self, k: Scalar) -> Point:
        """Compute  k · G."""
        return self.scalar_multiply(self.generator, k)

    def scalar_multiply(self, point: Point, k: Scalar) -> Point:
        return k * point

    def encode_public_key(self, point: Point) -> str:
        """SEC 1 compressed hex encoding."""
        return point.to_hex()

    def decode_public_key(self, data: PublicKeyLike) -> Point:
        """
        Accept a ``Point``, SEC 1 bytes or their hex form.

        Raises ``ValueError`` on malformed input.
        """
        if isinstance(data, Point):
            if data.is_inf():
                raise ValueError("identity is not a valid public point")
            return data
        if isinstance(data, str):
            return Point.from_hex(data)
        if isinstance(data, (bytes, bytearray)):
            return Point.from_bytes(bytes(data))
        raise ValueError(f"unsupported public key type {type(data).__name__}")

    def ecdsa_verify(
        self, public_key: Point, digest: bytes, r: Scalar, s: Scalar,
    ) -> bool:
        return ecdsa_verify(public_key, digest, r, s)
