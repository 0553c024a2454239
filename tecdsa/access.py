"""
Threshold access structure for tecdsa.

Defines the *t*-of-*n* configuration shared by the dealer, the combiner
and the security audit:

- participants are numbered  1 … n;
- participant  i  receives the share  f(i)  of a degree  t-1
  polynomial, so its evaluation point equals its ID;
- any set of at least  t  distinct participants is authorised.

A threshold below 2 would let a single share sign on its own and is
rejected outright.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

MIN_THRESHOLD = 2


@dataclass(frozen=True)
class ThresholdAccess:
    """
    Flat *t*-of-*n* access structure.

    Attributes
    ----------
    threshold : int
        Number of distinct participants required to sign (*t*).
    total_parties : int
        Total number of participants (*n*).
    """

    threshold: int
    total_parties: int

    def __post_init__(self) -> None:
        if self.threshold < MIN_THRESHOLD:
            raise ValueError(
                f"threshold must be ≥ {MIN_THRESHOLD} for security, "
                f"got {self.threshold}"
            )
        if self.threshold > self.total_parties:
            raise ValueError(
                f"threshold {self.threshold} exceeds participants "
                f"{self.total_parties}"
            )

    # ── queries ────────────────────────────────────────────────────────

    @property
    def polynomial_degree(self) -> int:
        """Degree of the sharing polynomial (= t - 1)."""
        return self.threshold - 1

    def all_participant_ids(self) -> List[int]:
        """All participant IDs, sorted."""
        return list(range(1, self.total_parties + 1))

    def is_member(self, participant_id: int) -> bool:
        return 1 <= participant_id <= self.total_parties

    def is_authorised(self, signer_ids: Iterable[int]) -> bool:
        """True iff *signer_ids* holds at least  t  distinct members."""
        distinct = set(signer_ids)
        if not all(self.is_member(pid) for pid in distinct):
            return False
        return len(distinct) >= self.threshold

    def __repr__(self) -> str:
        return (
            f"ThresholdAccess(t={self.threshold}, n={self.total_parties})"
        )
