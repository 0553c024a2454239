"""
High-level threshold ECDSA orchestration.

Provides a single ``ThresholdECDSA`` class that ties together key
generation, partial signing, combination, verification and the
security audit into one API.

Usage
-----
::

    from tecdsa import ThresholdECDSA

    tss = ThresholdECDSA.setup(threshold=3, total_parties=5)
    keys = tss.generate_keys()

    session = tss.new_session()
    partials = [
        tss.sign(b"hello world", party, session.session_id, session.nonce)
        for party in keys.parties[:3]
    ]
    signature = tss.combine(b"hello world", partials)
    assert tss.verify(signature, keys.public_key).valid
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .access import ThresholdAccess
from .audit import AuditReport, audit_scheme
from .context import CurveContext, PublicKeyLike
from .dkg import KeyGenerationResult, Party, run_dkg
from .hash import hash_session_id
from .secret import SecretScope
from .signing import (
    Combiner,
    CombinedSignature,
    NonceLike,
    PartialSignature,
    Signer,
    SigningSession,
)
from .verification import VerificationResult, verify_signature


class ThresholdECDSA:
    """
    End-to-end *t*-of-*n* threshold ECDSA.

    Holds only configuration (access structure and curve context), so
    one instance may serve many key sets and signing sessions, including
    concurrently.
    """

    def __init__(
        self,
        access: ThresholdAccess,
        context: Optional[CurveContext] = None,
    ) -> None:
        self._access = access
        self._ctx = context or CurveContext.secp256k1()
        self._combiner = Combiner(access, self._ctx)

    # ── factories ──────────────────────────────────────────────────────

    @classmethod
    def setup(
        cls,
        threshold: int = 2,
        total_parties: int = 3,
        context: Optional[CurveContext] = None,
    ) -> ThresholdECDSA:
        """
        Create a *threshold*-of-*total_parties* scheme.

        Raises ``ValueError`` unless  2 ≤ threshold ≤ total_parties.
        """
        return cls(ThresholdAccess(threshold, total_parties), context)

    # ── key generation ─────────────────────────────────────────────────

    def generate_keys(self) -> KeyGenerationResult:
        """Create a fresh group key split into ``total_parties`` shares."""
        return run_dkg(self._access, self._ctx)

    # ── signing ────────────────────────────────────────────────────────

    def new_session(self, session_id: Optional[str] = None) -> SigningSession:
        """
        Open a signing session with a fresh shared nonce.

        The returned nonce must reach every participating signer and be
        used for exactly one message.
        """
        if session_id is None:
            with SecretScope() as scope:
                session_id = hash_session_id(scope.keep(self._ctx.random_scalar()))
        return SigningSession(
            session_id=session_id, nonce=self._ctx.random_scalar(),
        )

    def sign(
        self,
        message: bytes,
        party: Party,
        session_id: str,
        nonce: NonceLike,
    ) -> PartialSignature:
        """Partial signature of *party* under the session's shared nonce."""
        return Signer(party, self._ctx).sign(message, session_id, nonce)

    def sign_with(
        self,
        parties: Sequence[Party],
        message: bytes,
        session: Optional[SigningSession] = None,
    ) -> List[PartialSignature]:
        """
        Collect partial signatures from every party in *parties*.

        Convenience for single-process use; in a deployment each party
        calls :meth:`sign` on its own machine.
        """
        if session is None:
            session = self.new_session()
        return [
            self.sign(message, party, session.session_id, session.nonce)
            for party in parties
        ]

    def combine(
        self,
        message: bytes,
        signatures: Iterable[PartialSignature],
    ) -> CombinedSignature:
        return self._combiner.combine(message, signatures)

    # ── verification ───────────────────────────────────────────────────

    def verify(
        self,
        signature: CombinedSignature,
        public_key: PublicKeyLike,
    ) -> VerificationResult:
        """
        Verify a combined signature.

        This is standard ECDSA verification; no threshold or share
        information is needed.
        """
        return verify_signature(signature, public_key, self._ctx)

    # ── audit ──────────────────────────────────────────────────────────

    def audit(self) -> AuditReport:
        return audit_scheme(self)

    # ── accessors ──────────────────────────────────────────────────────

    @property
    def threshold(self) -> int:
        return self._access.threshold

    @property
    def total_parties(self) -> int:
        return self._access.total_parties

    @property
    def access_structure(self) -> ThresholdAccess:
        return self._access

    @property
    def context(self) -> CurveContext:
        return self._ctx

    def __repr__(self) -> str:
        return f"ThresholdECDSA({self._access})"
