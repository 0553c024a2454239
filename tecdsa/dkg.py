"""
Key generation with Shamir share distribution.

A single dealer samples the group secret, publishes  Y = x·G,  hides
x  as the constant term of a random degree  t-1  polynomial and hands
participant  i  the share  f(i).  The secret and every polynomial
coefficient are wiped before the result is returned, and on every
failure path, so after setup the group key exists only as shares.

There is deliberately no inverse operation: nothing in this package
turns shares back into the secret.  Signing works on shares directly
(see :pymod:`signing`).

References
----------
- Shamir (1979). "How to Share a Secret."  CACM 22(11).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .curve import Scalar, Point
from .access import ThresholdAccess
from .context import CurveContext
from .errors import KeyGenerationError, RandomnessError
from .polynomial import sample_polynomial, evaluate
from .secret import SecretScope

logger = logging.getLogger(__name__)


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Party:
    """
    One participant's key material.

    ``share_index`` is the evaluation point of the share and always
    equals ``id``.  The share is excluded from ``repr``.
    """

    id: int
    private_key_share: Scalar = field(repr=False)
    public_key: Point
    share_index: int

    def __post_init__(self) -> None:
        if self.id < 1:
            raise ValueError(f"party id must be ≥ 1, got {self.id}")
        if self.share_index != self.id:
            raise ValueError(
                f"share_index {self.share_index} does not match id {self.id}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Hex encoding for delivery to the party that owns it."""
        return {
            "id": self.id,
            "privateKeyShare": self.private_key_share.to_hex(),
            "publicKey": self.public_key.to_hex(),
            "shareIndex": self.share_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Party:
        return cls(
            id=int(data["id"]),
            private_key_share=Scalar.from_hex(data["privateKeyShare"]),
            public_key=Point.from_hex(data["publicKey"]),
            share_index=int(data["shareIndex"]),
        )


@dataclass(frozen=True)
class KeyGenerationResult:
    """Output of one key-generation run.  Immutable."""

    public_key: Point
    parties: Tuple[Party, ...]
    threshold: int
    total_parties: int

    @property
    def public_key_hex(self) -> str:
        return self.public_key.to_hex()

    @property
    def access(self) -> ThresholdAccess:
        return ThresholdAccess(
            threshold=self.threshold, total_parties=self.total_parties,
        )

    def party(self, party_id: int) -> Party:
        """Return the record of participant *party_id* (1-based)."""
        if not 1 <= party_id <= self.total_parties:
            raise ValueError(f"unknown participant {party_id}")
        return self.parties[party_id - 1]


# ── dealer ──────────────────────────────────────────────────────────────

class Dealer:
    """
    The single trusted actor that creates and splits a group key.

    Each call to :meth:`generate_keys` is an independent, atomic run:
    no state is kept between runs.
    """

    def __init__(
        self,
        access: ThresholdAccess,
        context: Optional[CurveContext] = None,
    ) -> None:
        self.access = access
        self._ctx = context or CurveContext.secp256k1()

    def generate_keys(self) -> KeyGenerationResult:
        """
        Run key generation.

        Raises
        ------
        KeyGenerationError
            If the randomness source fails.  Every scalar drawn so far
            has been wiped by the time the error propagates.
        """
        access = self.access
        with SecretScope() as scope:

            def draw() -> Scalar:
                return scope.keep(self._ctx.random_scalar())

            try:
                # 1. master secret, 2. its public key
                secret = draw()
                public_key = self._ctx.base_multiply(secret)

                # 3. f(x) with f(0) = secret
                coeffs = sample_polynomial(
                    access.polynomial_degree,
                    constant=secret,
                    random_scalar=draw,
                )
            except RandomnessError as exc:
                logger.error(
                    "Key generation aborted",
                    extra={
                        "event": "tecdsa.dkg.aborted",
                        "threshold": access.threshold,
                        "total_parties": access.total_parties,
                    },
                )
                raise KeyGenerationError(
                    "randomness source failed during key generation"
                ) from exc

            # 4. one share per participant
            parties = tuple(
                Party(
                    id=pid,
                    private_key_share=evaluate(coeffs, Scalar(pid)),
                    public_key=public_key,
                    share_index=pid,
                )
                for pid in access.all_participant_ids()
            )
        # 5. scope exit has wiped the secret and all coefficients

        logger.info(
            "Distributed key generation complete",
            extra={
                "event": "tecdsa.dkg.complete",
                "threshold": access.threshold,
                "total_parties": access.total_parties,
                "public_key": public_key.to_hex()[:16],
            },
        )
        return KeyGenerationResult(
            public_key=public_key,
            parties=parties,
            threshold=access.threshold,
            total_parties=access.total_parties,
        )


def run_dkg(
    access: ThresholdAccess,
    context: Optional[CurveContext] = None,
) -> KeyGenerationResult:
    """Generate and split a fresh group key for *access*."""
    return Dealer(access, context).generate_keys()
