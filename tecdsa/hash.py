"""
Hash functions for tecdsa.

Two kinds of hashing appear in the protocol:

* the **message digest**  e = SHA-256(m): plain, untagged SHA-256, so
  that combined signatures verify under any standard ECDSA verifier;
* **tagged hashes** for protocol-internal values (session identifiers),
  following the BIP-340 convention

      H_tag(x) = SHA-256( SHA-256(tag) ‖ SHA-256(tag) ‖ x )

  so that they can never collide with a message digest.
"""

from __future__ import annotations

import hashlib
from typing import Any

from .curve import Scalar, Point, SCALAR_BYTES

DIGEST_BYTES = 32

# ── domain tags ─────────────────────────────────────────────────────────
_TAG_SESSION = b"TECDSA/v1/session_id"


# ── internal helpers ────────────────────────────────────────────────────
def _tagged_hasher(tag: bytes) -> "hashlib._Hash":
    """Return a SHA-256 context pre-loaded with the BIP-340 tag prefix."""
    tag_hash = hashlib.sha256(tag).digest()
    h = hashlib.sha256()
    h.update(tag_hash)
    h.update(tag_hash)
    return h


def _encode_item(item: Any) -> bytes:
    """
    Canonical encoding of a protocol element for hashing.

    Length-prefixing is used for variable-length items (bytes, text)
    to ensure unambiguous parsing.
    """
    if isinstance(item, bytes):
        return len(item).to_bytes(4, "big") + item
    if isinstance(item, str):
        return _encode_item(item.encode("utf-8"))
    if isinstance(item, int):
        return item.to_bytes(SCALAR_BYTES, "big")
    if isinstance(item, Scalar):
        return item.to_bytes()
    if isinstance(item, Point):
        return item.to_bytes_compressed()
    raise TypeError(f"cannot hash {type(item).__name__}")


def _tagged_hash(tag: bytes, *args: Any) -> bytes:
    """Compute BIP-340 tagged hash over arbitrary protocol elements."""
    h = _tagged_hasher(tag)
    for a in args:
        h.update(_encode_item(a))
    return h.digest()


# ── public hash functions ───────────────────────────────────────────────

def message_digest(message: bytes) -> bytes:
    """SHA-256 digest of the raw message bytes."""
    return hashlib.sha256(message).digest()


def digest_to_scalar(digest: bytes) -> Scalar:
    """
    Interpret a digest as the ECDSA scalar  e.

    SHA-256 output is exactly as wide as the secp256k1 order, so no
    truncation is needed; the value is reduced modulo *q*.
    """
    if len(digest) != DIGEST_BYTES:
        raise ValueError(f"need a {DIGEST_BYTES}-byte digest, got {len(digest)}")
    return Scalar.from_bytes_reduce(digest)


def hash_session_id(seed: Scalar) -> str:
    """Short printable session identifier derived from fresh randomness."""
    return _tagged_hash(_TAG_SESSION, seed).hex()[:16]
