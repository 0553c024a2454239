"""
Tests
"""

import itertools
import logging

import pytest

from tecdsa import (
    CurveContext,
    Dealer,
    KeyGenerationError,
    Party,
    RandomnessError,
    Scalar,
    ThresholdAccess,
    ThresholdECDSA,
    run_dkg,
)
from tecdsa.curve import Point
from tecdsa.polynomial import all_lagrange_coefficients


@pytest.mark.parametrize("t,n", [(2, 2), (2, 3), (3, 5), (4, 7)])
def test_key_generation_shape(t, n):
    keys = run_dkg(ThresholdAccess(threshold=t, total_parties=n))
    assert keys.threshold == t
    assert keys.total_parties == n
    assert len(keys.parties) == n
    assert [p.share_index for p in keys.parties] == list(range(1, n + 1))
    assert all(p.id == p.share_index for p in keys.parties)
    assert all(p.public_key == keys.public_key for p in keys.parties)
    assert len({p.private_key_share for p in keys.parties}) == n


def test_any_t_shares_match_public_key():
    keys = ThresholdECDSA.setup(3, 5).generate_keys()
    for subset in itertools.combinations(keys.parties, 3):
        ids = [p.id for p in subset]
        lambdas = all_lagrange_coefficients(ids)
        # checked in the exponent so the test itself never forms the key
        pub = Point.identity()
        for lam, party in zip(lambdas, subset):
            pub = pub + Point.from_scalar(lam * party.private_key_share)
        assert pub == keys.public_key


def test_fewer_than_t_shares_do_not_match():
    keys = ThresholdECDSA.setup(3, 5).generate_keys()
    subset = keys.parties[:2]
    lambdas = all_lagrange_coefficients([p.id for p in subset])
    pub = Point.identity()
    for lam, party in zip(lambdas, subset):
        pub = pub + Point.from_scalar(lam * party.private_key_share)
    assert pub != keys.public_key


def test_secret_and_coefficients_are_wiped(deterministic_context, scalar_stream):
    keys = Dealer(ThresholdAccess(3, 4), deterministic_context).generate_keys()
    # one secret and t-1 coefficients drawn, all zero now
    assert len(scalar_stream.drawn) == 3
    assert all(s.is_zero() for s in scalar_stream.drawn)
    assert all(not p.private_key_share.is_zero() for p in keys.parties)


def test_key_generation_is_deterministic_under_fixed_randomness(make_context):
    first = run_dkg(ThresholdAccess(2, 3), make_context())
    second = run_dkg(ThresholdAccess(2, 3), make_context())
    assert first.public_key == second.public_key
    assert [p.private_key_share for p in first.parties] == [
        p.private_key_share for p in second.parties
    ]


class FailingSource:
    def __init__(self, fail_on):
        self.fail_on = fail_on
        self.drawn = []

    def __call__(self):
        if len(self.drawn) + 1 == self.fail_on:
            raise OSError("entropy pool unavailable")
        value = Scalar.random()
        self.drawn.append(value)
        return value


@pytest.mark.parametrize("fail_on", [1, 2, 3])
def test_randomness_failure_aborts_and_wipes(fail_on):
    source = FailingSource(fail_on)
    ctx = CurveContext.secp256k1(random_source=source)
    with pytest.raises(KeyGenerationError) as info:
        Dealer(ThresholdAccess(3, 5), ctx).generate_keys()
    assert isinstance(info.value.__cause__, RandomnessError)
    assert len(source.drawn) == fail_on - 1
    assert all(s.is_zero() for s in source.drawn)


def test_unusable_random_value_aborts():
    ctx = CurveContext.secp256k1(random_source=Scalar.zero)
    with pytest.raises(KeyGenerationError):
        run_dkg(ThresholdAccess(2, 3), ctx)


@pytest.mark.parametrize("t,n", [(1, 3), (0, 3), (4, 3)])
def test_threshold_bounds(t, n):
    with pytest.raises(ValueError):
        ThresholdAccess(threshold=t, total_parties=n)
    with pytest.raises(ValueError):
        ThresholdECDSA.setup(t, n)


def test_authorised_sets():
    access = ThresholdAccess(3, 5)
    assert access.is_authorised([1, 2, 3])
    assert access.is_authorised([5, 1, 1, 4])
    assert not access.is_authorised([1, 2])
    assert not access.is_authorised([2, 2, 2, 3])
    assert not access.is_authorised([1, 2, 6])
    assert access.all_participant_ids() == [1, 2, 3, 4, 5]
    assert access.polynomial_degree == 2


def test_party_serialisation_keeps_exact_scalars():
    keys = run_dkg(ThresholdAccess(2, 3))
    for party in keys.parties:
        data = party.to_dict()
        assert len(data["privateKeyShare"]) == 64
        restored = Party.from_dict(data)
        assert restored == party

    small = Party(
        id=1, private_key_share=Scalar(1),
        public_key=keys.public_key, share_index=1,
    )
    assert small.to_dict()["privateKeyShare"] == "0" * 63 + "1"


def test_party_invariants():
    keys = run_dkg(ThresholdAccess(2, 2))
    with pytest.raises(ValueError):
        Party(id=1, private_key_share=Scalar(5),
              public_key=keys.public_key, share_index=2)
    with pytest.raises(ValueError):
        keys.party(3)
    assert keys.party(2) is keys.parties[1]


def test_shares_never_appear_in_repr_or_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="tecdsa")
    keys = run_dkg(ThresholdAccess(2, 3))
    for party in keys.parties:
        share_hex = party.private_key_share.to_hex()
        assert share_hex[:8] not in repr(party)
        for record in caplog.records:
            assert all(share_hex not in str(v) for v in vars(record).values())
    assert any(
        getattr(r, "event", None) == "tecdsa.dkg.complete" for r in caplog.records
    )
