"""
Verification of combined threshold signatures.

A combined signature is an ordinary ECDSA signature, so verification
needs only the group public key: the digest is recomputed from the
carried message and  ``(r, s)``  is handed to libsecp256k1.  Nothing
about shares, thresholds or participants is consulted.

Failure to verify is an expected outcome, not an error: every check
reports through a :class:`VerificationResult` and nothing is raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .context import CurveContext, PublicKeyLike
from .signing import CombinedSignature

logger = logging.getLogger(__name__)


class VerificationFailure(Enum):
    """Why a signature was rejected."""

    HASH_MISMATCH = "Message hash mismatch"
    INVALID_PUBLIC_KEY = "Invalid public key format"
    SIGNATURE_INVALID = "Signature verification failed"


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of :func:`verify_signature`.  Truthy iff ``valid``."""

    valid: bool
    reason: Optional[VerificationFailure] = None
    detail: str = ""
    message: Optional[bytes] = None
    public_key: Optional[str] = None
    verified_at: Optional[datetime] = None
    participants: Tuple[int, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def failure(
        cls,
        reason: VerificationFailure,
        detail: str = "",
    ) -> VerificationResult:
        return cls(valid=False, reason=reason, detail=detail or reason.value)


def verify_signature(
    signature: CombinedSignature,
    public_key: PublicKeyLike,
    context: Optional[CurveContext] = None,
) -> VerificationResult:
    """
    Check *signature* against the group *public_key*.

    Parameters
    ----------
    signature : CombinedSignature
        Output of the combiner.  A ``PartialSignature`` is always
        rejected.
    public_key : Point, bytes or hex str
        Group public key (SEC 1 encoding when not a ``Point``).
    """
    ctx = context or CurveContext.secp256k1()

    if not isinstance(signature, CombinedSignature):
        return _reject(VerificationFailure.SIGNATURE_INVALID, (
            f"{type(signature).__name__} is not a combined signature"
        ))

    digest = ctx.digest(signature.message)
    if digest != signature.message_hash:
        return _reject(VerificationFailure.HASH_MISMATCH)

    try:
        point = ctx.decode_public_key(public_key)
    except ValueError as exc:
        return _reject(
            VerificationFailure.INVALID_PUBLIC_KEY,
            f"Invalid public key format: {exc}",
        )

    if not ctx.ecdsa_verify(point, digest, signature.r, signature.s):
        return _reject(VerificationFailure.SIGNATURE_INVALID)

    return VerificationResult(
        valid=True,
        message=signature.message,
        public_key=ctx.encode_public_key(point),
        verified_at=ctx.now(),
        participants=tuple(signature.participating_parties),
    )


def _reject(reason: VerificationFailure, detail: str = "") -> VerificationResult:
    result = VerificationResult.failure(reason, detail)
    logger.warning(
        "Signature rejected",
        extra={
            "event": "tecdsa.verification.rejected",
            "reason": reason.name,
        },
    )
    return result
