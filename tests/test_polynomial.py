"""
Tests
"""

import itertools
import random

import pytest

from tecdsa.curve import ORDER, Scalar
from tecdsa.polynomial import (
    all_lagrange_coefficients,
    evaluate,
    lagrange_coefficient,
    sample_polynomial,
)


def generate_t_n():
    t = random.randint(2, 8)
    n = random.randint(t, 10)
    return t, n


def test_evaluate():
    coeffs = [Scalar(5), Scalar(3), Scalar(2)]
    assert evaluate(coeffs, Scalar(0)) == 5
    assert evaluate(coeffs, Scalar(2)) == 5 + 3 * 2 + 2 * 4
    assert evaluate([], Scalar(7)) == 0


def test_evaluate_reduces_modulo_order():
    coeffs = [Scalar(ORDER - 1), Scalar(ORDER - 1)]
    # (q-1) + (q-1)*2 = -3 mod q
    assert evaluate(coeffs, Scalar(2)).value == ORDER - 3


def test_sample_polynomial():
    secret = Scalar(42)
    coeffs = sample_polynomial(3, constant=secret)
    assert len(coeffs) == 4
    assert coeffs[0] is secret
    assert all(not c.is_zero() for c in coeffs[1:])
    assert len(sample_polynomial(0)) == 1
    with pytest.raises(ValueError):
        sample_polynomial(-1)


def test_sample_polynomial_uses_given_source():
    values = iter([Scalar(7), Scalar(8)])
    coeffs = sample_polynomial(2, constant=Scalar(1), random_scalar=lambda: next(values))
    assert coeffs == [Scalar(1), Scalar(7), Scalar(8)]


def test_lagrange_known_values():
    # S = {1, 2}:  λ1 = -2/(1-2) = 2,  λ2 = -1/(2-1) = -1
    assert lagrange_coefficient(1, [1, 2]) == 2
    assert lagrange_coefficient(2, [1, 2]) == ORDER - 1
    # S = {1, 2, 3}:  λ = (3, -3, 1)
    assert all_lagrange_coefficients([1, 2, 3]) == [
        Scalar(3), Scalar(-3), Scalar(1),
    ]


def test_lagrange_batch_matches_single():
    ids = random.sample(range(1, 20), 5)
    batch = all_lagrange_coefficients(ids)
    assert batch == [lagrange_coefficient(i, ids) for i in ids]
    assert sum(batch) == 1


def test_lagrange_rejects_bad_sets():
    with pytest.raises(ValueError):
        lagrange_coefficient(4, [1, 2, 3])
    with pytest.raises(ValueError):
        all_lagrange_coefficients([1, 2, 2])
    with pytest.raises(ValueError):
        all_lagrange_coefficients([0, 1])


def test_any_t_points_interpolate_constant_term():
    for _ in range(3):
        t, n = generate_t_n()
        secret = Scalar.random()
        coeffs = sample_polynomial(t - 1, constant=secret)
        points = {i: evaluate(coeffs, Scalar(i)) for i in range(1, n + 1)}
        for subset in itertools.islice(itertools.combinations(points, t), 20):
            lambdas = all_lagrange_coefficients(list(subset))
            value = sum(lam * points[i] for lam, i in zip(lambdas, subset))
            assert value == secret
