"""
Shared fixtures.
"""

import hashlib
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from tecdsa import CurveContext, Scalar, ThresholdECDSA

FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class ScalarStream:
    """Deterministic randomness source; remembers every scalar handed out."""

    def __init__(self, seed=b"tecdsa/tests"):
        self._seed = seed
        self._counter = 0
        self.drawn = []

    def __call__(self):
        self._counter += 1
        data = self._seed + self._counter.to_bytes(4, "big")
        value = Scalar.from_bytes_reduce(hashlib.sha256(data).digest())
        self.drawn.append(value)
        return value


@pytest.fixture
def scalar_stream():
    return ScalarStream()


@pytest.fixture
def deterministic_context(scalar_stream):
    return CurveContext.secp256k1(
        random_source=scalar_stream, clock=lambda: FIXED_TIME,
    )


@pytest.fixture(scope="module")
def env():
    """
    A 3-of-5 key set with partial signatures from all five parties under
    one shared nonce, plus an unrelated 2-of-2 key set signing the same
    message under the same nonce.
    """
    tss = ThresholdECDSA.setup(threshold=3, total_parties=5)
    keys = tss.generate_keys()

    false_tss = ThresholdECDSA.setup(threshold=2, total_parties=2)
    false_keys = false_tss.generate_keys()

    message = b"data to be signed"
    session = tss.new_session()

    valid_sigs = tss.sign_with(keys.parties, message, session)
    foreign_sigs = false_tss.sign_with(false_keys.parties, message, session)

    return SimpleNamespace(
        tss=tss,
        keys=keys,
        false_tss=false_tss,
        false_keys=false_keys,
        message=message,
        session=session,
        valid_sigs=valid_sigs,
        foreign_sigs=foreign_sigs,
    )


@pytest.fixture
def make_context():
    """Factory for independent deterministic contexts with the same seed."""

    def factory(seed=b"tecdsa/tests"):
        return CurveContext.secp256k1(
            random_source=ScalarStream(seed), clock=lambda: FIXED_TIME,
        )

    return factory
