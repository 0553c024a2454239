"""
tecdsa: t-of-n threshold ECDSA on secp256k1.

A dealer splits a group key into Shamir shares and forgets it; any
*t* parties then sign under one shared nonce, and their partial
signatures combine, by Lagrange interpolation at zero, into a
canonical (low-s) ECDSA signature that any standard verifier accepts
against the group public key.  No operation ever rebuilds the key.

Quick start
-----------
::

    from tecdsa import ThresholdECDSA

    tss = ThresholdECDSA.setup(threshold=2, total_parties=3)
    keys = tss.generate_keys()

    session = tss.new_session()
    partials = tss.sign_with(keys.parties[:2], b"pay Alice 1 BTC", session)
    signature = tss.combine(b"pay Alice 1 BTC", partials)

    assert tss.verify(signature, keys.public_key_hex).valid
"""

__version__ = "0.1.0"

# ── core types ──────────────────────────────────────────────────────────
from .curve import Scalar, Point, G, ORDER
from .context import CurveContext

# ── access structure ────────────────────────────────────────────────────
from .access import ThresholdAccess

# ── protocol ────────────────────────────────────────────────────────────
from .protocol import ThresholdECDSA

# ── key generation ──────────────────────────────────────────────────────
from .dkg import Dealer, KeyGenerationResult, Party, run_dkg

# ── signing primitives ──────────────────────────────────────────────────
from .signing import (
    Signer,
    Combiner,
    SigningSession,
    PartialSignature,
    CombinedSignature,
)

# ── verification ────────────────────────────────────────────────────────
from .verification import (
    VerificationFailure,
    VerificationResult,
    verify_signature,
)

# ── audit ───────────────────────────────────────────────────────────────
from .audit import AuditReport, ThresholdScheme, audit_scheme

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    ThresholdError,
    RandomnessError,
    KeyGenerationError,
    InvalidNonce,
    CombinationError,
    InsufficientSignatures,
    NonceMismatch,
    SessionMismatch,
    UnknownParty,
    InsufficientUniqueParties,
)

# ── building blocks ─────────────────────────────────────────────────────
from .polynomial import (
    sample_polynomial,
    evaluate,
    lagrange_coefficient,
    all_lagrange_coefficients,
)
from .hash import message_digest, digest_to_scalar

__all__ = [
    # version
    "__version__",
    # core
    "Scalar", "Point", "G", "ORDER", "CurveContext",
    # access
    "ThresholdAccess",
    # protocol
    "ThresholdECDSA",
    # key generation
    "Dealer", "KeyGenerationResult", "Party", "run_dkg",
    # signing
    "Signer", "Combiner", "SigningSession", "PartialSignature",
    "CombinedSignature",
    # verification
    "VerificationFailure", "VerificationResult", "verify_signature",
    # audit
    "AuditReport", "ThresholdScheme", "audit_scheme",
    # errors
    "ThresholdError", "RandomnessError", "KeyGenerationError",
    "InvalidNonce", "CombinationError", "InsufficientSignatures",
    "NonceMismatch", "SessionMismatch", "UnknownParty",
    "InsufficientUniqueParties",
    # building blocks
    "sample_polynomial", "evaluate", "lagrange_coefficient",
    "all_lagrange_coefficients", "message_digest", "digest_to_scalar",
]
