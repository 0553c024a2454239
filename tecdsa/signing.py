"""
Threshold ECDSA signing with a shared nonce and Lagrange combination.

All signers of one session use the **same** externally agreed nonce  k,
so they all derive the same  R = k·G  and  r = R.x mod q.  Signer  i
then contributes

    s_i = k^{-1} (e + r · x_i)                (partial signature)

where  x_i = f(i)  is its Shamir share and  e  the message digest.
Because the Lagrange weights of any  t  distinct signers sum to one and
interpolate  f  at zero,

    Σ λ_i s_i = k^{-1} (e Σ λ_i + r Σ λ_i x_i) = k^{-1} (e + r x)

which is an ordinary ECDSA signature under the group key  Y = x·G.  The
combiner only ever weights partial signatures: the group secret  x  is
never formed.

The combined  s  is finally mapped to its low-s form, removing the
``(r, s)`` / ``(r, q - s)`` malleability.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .curve import Scalar, signature_to_der
from .access import ThresholdAccess
from .context import CurveContext
from .dkg import Party
from .errors import (
    InvalidNonce,
    InsufficientSignatures,
    InsufficientUniqueParties,
    NonceMismatch,
    SessionMismatch,
    UnknownParty,
)
from .field import canonicalize_s
from .hash import digest_to_scalar
from .polynomial import all_lagrange_coefficients
from .secret import SecretScope

logger = logging.getLogger(__name__)

NonceLike = Union[Scalar, int, bytes, str]


# ── data structures ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class SigningSession:
    """
    Session identifier plus the nonce every signer of the session uses.

    The nonce is as sensitive as a private key: anyone holding it and
    the combined signature can solve for the group secret.  It is
    excluded from ``repr``.
    """

    session_id: str
    nonce: Scalar = field(repr=False)


@dataclass(frozen=True)
class PartialSignature:
    """
    One party's contribution  ⟨party_id, r, s_i⟩  to a signing session.

    It is not a signature: there is no public key under which it
    verifies.
    """

    party_id: int
    session_id: str
    r: Scalar
    si: Scalar
    message_hash: bytes
    message: bytes
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "partyId": self.party_id,
            "sessionId": self.session_id,
            "r": self.r.to_hex(),
            "si": self.si.to_hex(),
            "messageHash": self.message_hash.hex(),
            "message": self.message.hex(),
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PartialSignature:
        return cls(
            party_id=int(data["partyId"]),
            session_id=data["sessionId"],
            r=Scalar.from_hex(data["r"]),
            si=Scalar.from_hex(data["si"]),
            message_hash=bytes.fromhex(data["messageHash"]),
            message=bytes.fromhex(data["message"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass(frozen=True)
class CombinedSignature:
    """
    Final threshold signature.

    ``(r, s)`` is a standard, canonical (low-s) ECDSA signature over
    SHA-256(message); the remaining fields record how it was produced.
    """

    r: Scalar
    s: Scalar
    message: bytes
    message_hash: bytes
    participating_parties: Tuple[int, ...]
    session_id: str
    timestamp: datetime

    def to_bytes(self) -> bytes:
        """Serialise to 64 bytes: r (32) ‖ s (32)."""
        return self.r.to_bytes() + self.s.to_bytes()

    def to_der(self) -> bytes:
        """ASN.1 DER encoding, as consumed by OpenSSL and most libraries."""
        return signature_to_der(self.r, self.s)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "r": self.r.to_hex(),
            "s": self.s.to_hex(),
            "message": self.message.hex(),
            "messageHash": self.message_hash.hex(),
            "participatingParties": list(self.participating_parties),
            "sessionId": self.session_id,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CombinedSignature:
        return cls(
            r=Scalar.from_hex(data["r"]),
            s=Scalar.from_hex(data["s"]),
            message=bytes.fromhex(data["message"]),
            message_hash=bytes.fromhex(data["messageHash"]),
            participating_parties=tuple(
                int(pid) for pid in data["participatingParties"]
            ),
            session_id=data["sessionId"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


# ── signer ──────────────────────────────────────────────────────────────

def _nonce_to_scalar(nonce: NonceLike) -> Scalar:
    """Reduce an agreed nonce modulo *q* into a fresh ``Scalar``."""
    if isinstance(nonce, Scalar):
        return Scalar(nonce.value)
    if isinstance(nonce, bool):
        raise TypeError("nonce must be a Scalar, int, bytes or hex string")
    if isinstance(nonce, int):
        return Scalar(nonce)
    if isinstance(nonce, (bytes, bytearray)):
        return Scalar.from_bytes_reduce(bytes(nonce))
    if isinstance(nonce, str):
        try:
            return Scalar.from_bytes_reduce(bytes.fromhex(nonce))
        except ValueError as exc:
            raise InvalidNonce("nonce string is not hex") from exc
    raise TypeError("nonce must be a Scalar, int, bytes or hex string")


class Signer:
    """
    Signing state for one participant.

    A signer holds nothing but its own ``Party`` record; ``sign`` has
    no side effects, so different signers can run in parallel.
    """

    def __init__(
        self,
        party: Party,
        context: Optional[CurveContext] = None,
    ) -> None:
        self.party = party
        self._ctx = context or CurveContext.secp256k1()

    @property
    def id(self) -> int:
        return self.party.id

    def sign(
        self,
        message: bytes,
        session_id: str,
        nonce: NonceLike,
    ) -> PartialSignature:
        """
        Compute this party's partial signature.

        Parameters
        ----------
        message : bytes
            Message being signed.
        session_id : str
            Identifier shared by every signer of the session.
        nonce : Scalar, int, bytes or hex str
            The session nonce, identical for every signer.  It is
            reduced modulo *q*.

        Raises
        ------
        InvalidNonce
            If the nonce is zero modulo *q* or yields  r = 0.
        """
        message_hash = self._ctx.digest(message)
        e = digest_to_scalar(message_hash)

        with SecretScope() as scope:
            k = scope.keep(_nonce_to_scalar(nonce))
            if k.is_zero():
                raise InvalidNonce("nonce is zero modulo the group order")

            R = self._ctx.base_multiply(k)
            r = Scalar(R.x)
            if r.is_zero():
                raise InvalidNonce("nonce yields r = 0")

            k_inv = scope.keep(k.inv())
            r_x = scope.keep(r * self.party.private_key_share)
            si = k_inv * (e + r_x)

        logger.debug(
            "Partial signature generated",
            extra={
                "event": "tecdsa.signing.partial",
                "party_id": self.party.id,
                "session_id": session_id,
            },
        )
        return PartialSignature(
            party_id=self.party.id,
            session_id=session_id,
            r=r,
            si=si,
            message_hash=message_hash,
            message=message,
            timestamp=self._ctx.now(),
        )


# ── combiner ────────────────────────────────────────────────────────────

class Combiner:
    """
    Combines partial signatures into a standard ECDSA signature.

    Inputs are validated in a fixed order, each failure with its own
    exception type:

    1. at least  t  partial signatures  (``InsufficientSignatures``)
    2. one common  r                    (``NonceMismatch``)
    3. every party within  1..n         (``UnknownParty``)
    4. at least  t  distinct parties    (``InsufficientUniqueParties``)
    5. one session and message          (``SessionMismatch``)

    The first occurrence of each party, in input order, is used until
    ``t`` parties are collected; later duplicates and extra parties are
    ignored.
    """

    def __init__(
        self,
        access: ThresholdAccess,
        context: Optional[CurveContext] = None,
    ) -> None:
        self.access = access
        self._ctx = context or CurveContext.secp256k1()

    def combine(
        self,
        message: bytes,
        signatures: Iterable[PartialSignature],
    ) -> CombinedSignature:
        sigs = list(signatures)
        t = self.access.threshold

        if len(sigs) < t:
            raise InsufficientSignatures(
                f"at least {t} partial signatures are required, "
                f"got {len(sigs)}"
            )

        r = sigs[0].r
        if any(sig.r != r for sig in sigs):
            raise NonceMismatch(
                "all partial signatures must have the same r value"
            )

        unknown = sorted({
            sig.party_id for sig in sigs
            if not self.access.is_member(sig.party_id)
        })
        if unknown:
            raise UnknownParty(
                f"signatures from parties outside 1..{self.access.total_parties}: "
                f"{unknown}"
            )

        party_ids = [sig.party_id for sig in sigs]
        if not self.access.is_authorised(party_ids):
            raise InsufficientUniqueParties(
                f"need {t} unique party signatures, "
                f"but only have {len(set(party_ids))}"
            )

        message_hash = self._ctx.digest(message)
        session_id = sigs[0].session_id
        if any(sig.session_id != session_id for sig in sigs):
            raise SessionMismatch(
                "partial signatures belong to different sessions"
            )
        if any(sig.message_hash != message_hash for sig in sigs):
            raise SessionMismatch(
                "partial signatures were made over a different message"
            )

        selected = _select_first_seen(sigs, t)
        signer_ids = [sig.party_id for sig in selected]

        lambdas = all_lagrange_coefficients(signer_ids)
        s = sum(lam * sig.si for lam, sig in zip(lambdas, selected))
        s = canonicalize_s(s)

        logger.info(
            "Signature combination complete",
            extra={
                "event": "tecdsa.signing.combined",
                "session_id": session_id,
                "participants": signer_ids,
                "supplied": len(sigs),
            },
        )
        return CombinedSignature(
            r=r,
            s=s,
            message=message,
            message_hash=message_hash,
            participating_parties=tuple(signer_ids),
            session_id=session_id,
            timestamp=self._ctx.now(),
        )


# ── helpers ─────────────────────────────────────────────────────────────

def _select_first_seen(
    sigs: List[PartialSignature],
    count: int,
) -> List[PartialSignature]:
    """First signature of each distinct party, in input order, up to *count*."""
    seen = set()
    selected: List[PartialSignature] = []
    for sig in sigs:
        if sig.party_id in seen:
            continue
        seen.add(sig.party_id)
        selected.append(sig)
        if len(selected) == count:
            break
    return selected
