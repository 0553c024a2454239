"""
Structural security audit of a threshold scheme.

The guarantee that the group key is never reassembled rests on the
*absence* of code: no operation, public or private, maps shares back to
the secret.  :class:`ThresholdScheme` spells out the operations a scheme
offers so that a static type checker holds implementations to it, and
:func:`audit_scheme` repeats the check at start-up, together with the
threshold bound, for callers that want an explicit assertion.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING, Any, Dict, Iterable, Mapping, Protocol, runtime_checkable,
)

from .access import MIN_THRESHOLD

if TYPE_CHECKING:
    from .dkg import KeyGenerationResult, Party
    from .signing import CombinedSignature, PartialSignature
    from .verification import VerificationResult

_FORBIDDEN_MARKERS = ("reconstruct", "recover_secret", "master_secret")


@runtime_checkable
class ThresholdScheme(Protocol):
    """Everything a threshold scheme may offer.  Note what is missing."""

    @property
    def threshold(self) -> int: ...

    def generate_keys(self) -> "KeyGenerationResult": ...

    def sign(
        self, message: bytes, party: "Party", session_id: str, nonce: Any,
    ) -> "PartialSignature": ...

    def combine(
        self, message: bytes, signatures: Iterable["PartialSignature"],
    ) -> "CombinedSignature": ...

    def verify(
        self, signature: "CombinedSignature", public_key: Any,
    ) -> "VerificationResult": ...


@dataclass(frozen=True)
class AuditReport:
    checks: Mapping[str, bool]

    @property
    def passed(self) -> bool:
        return all(self.checks.values())

    @property
    def overall(self) -> str:
        return "SECURE TSS" if self.passed else "INSECURE IMPLEMENTATION"

    def failed_checks(self) -> Dict[str, bool]:
        return {k: v for k, v in self.checks.items() if not v}


def _has_forbidden_member(scheme: object) -> bool:
    names = dir(scheme)
    return any(
        marker in name.lower()
        for name in names
        for marker in _FORBIDDEN_MARKERS
    )


def audit_scheme(scheme: object) -> AuditReport:
    """Audit *scheme* and report each check by name."""
    threshold = getattr(scheme, "threshold", 0)
    checks = {
        "no_private_key_reconstruction": not _has_forbidden_member(scheme),
        "distributed_signing_only": isinstance(scheme, ThresholdScheme),
        "threshold_enforced": isinstance(threshold, int) and threshold >= MIN_THRESHOLD,
        "audit_capability": callable(getattr(scheme, "audit", None)),
    }
    return AuditReport(checks=checks)
