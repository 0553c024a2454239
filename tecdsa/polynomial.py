"""
Polynomial secret sharing and Lagrange coefficients over Z_q.

A secret  a_0  is hidden as the constant term of a random polynomial

    f(x) = a_0 + a_1 x + … + a_{t-1} x^{t-1}

and participant  i  receives  f(i).  Any  t  evaluations determine  f,
hence  f(0);  any  t-1  reveal nothing about it [Shamir 1979].

Signing never evaluates  f(0).  The combiner only needs the Lagrange
weights  λ_i  with  Σ λ_i f(i) = f(0),  which it applies to *partial
signatures*, never to shares.  Accordingly this module offers no
function that maps shares back to a secret.

References
----------
- Shamir (1979). "How to Share a Secret."  CACM 22(11).
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from .curve import Scalar
from .field import batch_inverse


# ── polynomial representation ───────────────────────────────────────────
#  coefficients[i] = a_i   so  f(x) = a_0 + a_1 x + a_2 x^2 + …


def sample_polynomial(
    degree: int,
    constant: Optional[Scalar] = None,
    random_scalar: Callable[[], Scalar] = Scalar.random,
) -> List[Scalar]:
    """
    Sample a uniformly random polynomial of the given degree.

    Parameters
    ----------
    degree : int  (≥ 0)
        Polynomial degree  d;  result has  d+1  coefficients.
    constant : Scalar or None
        If given, force a_0 = constant (used to share a secret).
    random_scalar : callable
        Source of the random coefficients.
    """
    if degree < 0:
        raise ValueError("degree must be ≥ 0")
    a0 = constant if constant is not None else random_scalar()
    return [a0] + [random_scalar() for _ in range(degree)]


def evaluate(coeffs: Sequence[Scalar], x: Scalar) -> Scalar:
    """
    Evaluate  f(x) = Σ a_i x^i  by accumulating the powers  x^i.

    Every product and sum is reduced modulo *q* by ``Scalar`` itself.
    """
    result = Scalar.zero()
    x_pow = Scalar.one()
    for c in coeffs:
        result = result + c * x_pow
        x_pow = x_pow * x
    return result


# ── Lagrange coefficients at x = 0 ──────────────────────────────────────

def _check_ids(signer_ids: Sequence[int]) -> None:
    if len(set(signer_ids)) != len(signer_ids):
        raise ValueError("signer_ids must be distinct")
    if any(Scalar(sid).is_zero() for sid in signer_ids):
        raise ValueError("signer_ids must be non-zero modulo q")


def lagrange_coefficient(
    target_id: int,
    signer_ids: Sequence[int],
) -> Scalar:
    r"""
    Lagrange coefficient for participant *target_id* in set *S*,
    interpolating at  x = 0:

    .. math::
        \lambda_i = \prod_{j \in S,\; j \ne i}
            (-j) \cdot (i - j)^{-1}
    """
    if target_id not in signer_ids:
        raise ValueError(f"target_id {target_id} not in signer_ids")
    _check_ids(signer_ids)
    xi = Scalar(target_id)
    num = Scalar.one()
    den = Scalar.one()
    for sid in signer_ids:
        if sid == target_id:
            continue
        xj = Scalar(sid)
        num = num * (-xj)
        den = den * (xi - xj)
    return num / den


def all_lagrange_coefficients(signer_ids: Sequence[int]) -> List[Scalar]:
    """
    Lagrange coefficient for every signer, in the order of *signer_ids*.

    Numerators and denominators are accumulated per signer and the
    denominators are inverted together with one batch inversion.
    """
    _check_ids(signer_ids)
    xs = [Scalar(sid) for sid in signer_ids]
    nums: List[Scalar] = []
    dens: List[Scalar] = []
    for i, xi in enumerate(xs):
        num = Scalar.one()
        den = Scalar.one()
        for j, xj in enumerate(xs):
            if i == j:
                continue
            num = num * (-xj)
            den = den * (xi - xj)
        nums.append(num)
        dens.append(den)
    return [n * d for n, d in zip(nums, batch_inverse(dens))]
