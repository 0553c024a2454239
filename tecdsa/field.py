"""
Scalar-field utilities for Z_q  (q = secp256k1 curve order).

Provides the batch operations needed by the Lagrange interpolation in
:pymod:`polynomial` and the low-s canonicalisation applied to combined
signatures.  Individual ``Scalar`` arithmetic lives in :pymod:`curve`.
"""

from __future__ import annotations

from typing import List

from .curve import Scalar, HALF_ORDER


# ── batch inverse (Montgomery's trick) ──────────────────────────────────
def batch_inverse(scalars: List[Scalar]) -> List[Scalar]:
    """
    Invert a list of non-zero scalars using a single modular
    exponentiation (Montgomery's trick).

    Cost: 3(n-1) multiplications + 1 inversion  vs  n inversions naïvely.

    Raises ``ZeroDivisionError`` if any element is zero.
    """
    n = len(scalars)
    if n == 0:
        return []
    if n == 1:
        return [scalars[0].inv()]

    # prefix products  p[i] = s[0] * s[1] * … * s[i]
    prefix = [Scalar.zero()] * n
    prefix[0] = scalars[0]
    for i in range(1, n):
        prefix[i] = prefix[i - 1] * scalars[i]

    # single inversion of the total product
    inv_all = prefix[-1].inv()

    # back-substitution
    result = [Scalar.zero()] * n
    for i in range(n - 1, 0, -1):
        result[i] = prefix[i - 1] * inv_all
        inv_all = inv_all * scalars[i]
    result[0] = inv_all
    return result


# ── low-s canonical form ────────────────────────────────────────────────
def is_high(s: Scalar) -> bool:
    """True if  s > q/2, i.e. the malleable twin of a canonical  s."""
    return s.value > HALF_ORDER


def canonicalize_s(s: Scalar) -> Scalar:
    r"""
    Map  s  to its low-s representative.

    ``(r, s)`` and ``(r, q - s)`` both verify under textbook ECDSA;
    only the one with  s \le q/2  is kept.
    """
    if is_high(s):
        return -s
    return s
