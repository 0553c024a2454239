"""
Exception hierarchy for tecdsa.

Caller mistakes (bad input to ``combine``, an unusable nonce) derive
from ``ValueError``; failures of the environment (the randomness
source) derive from ``RuntimeError``.  None of them is retried
internally, and no message ever carries a secret scalar.

Verification outcomes are *not* exceptions; see
:class:`tecdsa.verification.VerificationResult`.
"""


class ThresholdError(Exception):
    """Base class for every error raised by tecdsa."""


# ── environment failures ────────────────────────────────────────────────

class RandomnessError(ThresholdError, RuntimeError):
    """The randomness source failed or returned an unusable value."""


class KeyGenerationError(ThresholdError, RuntimeError):
    """Key generation aborted; all intermediate secrets were wiped."""


# ── signing input errors ────────────────────────────────────────────────

class InvalidNonce(ThresholdError, ValueError):
    """The agreed nonce reduces to zero or yields  r = 0."""


class CombinationError(ThresholdError, ValueError):
    """A set of partial signatures cannot be combined."""


class InsufficientSignatures(CombinationError):
    """Fewer partial signatures than the threshold were supplied."""


class NonceMismatch(CombinationError):
    """Partial signatures carry different  r  values."""


class SessionMismatch(CombinationError):
    """Partial signatures disagree on session or message."""


class UnknownParty(CombinationError):
    """A partial signature names a party outside  1..n."""


class InsufficientUniqueParties(CombinationError):
    """Too few distinct parties once duplicates are discounted."""
