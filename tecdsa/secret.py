"""
Scoped handling of secret scalars.

Python cannot guarantee that memory is scrubbed, but it can guarantee
that every ``Scalar`` object we hand a secret to is overwritten before
it leaves our control.  :class:`SecretScope` makes that structural: any
scalar registered inside a ``with`` block is wiped on exit, whether the
block returns normally or raises.
"""

from __future__ import annotations

from typing import Iterable, List

from .curve import Scalar


class SecretScope:
    """
    Context manager that wipes registered scalars on exit.

    ::

        with SecretScope() as scope:
            secret = scope.keep(Scalar.random())
            coeffs = scope.keep_all(sample_polynomial(...))
            ...
        # secret and every coefficient are zero here
    """

    def __init__(self) -> None:
        self._held: List[Scalar] = []

    def keep(self, s: Scalar) -> Scalar:
        """Register one scalar for wiping and return it unchanged."""
        self._held.append(s)
        return s

    def keep_all(self, scalars: Iterable[Scalar]) -> List[Scalar]:
        """Register a sequence of scalars; return them as a list."""
        items = list(scalars)
        self._held.extend(items)
        return items

    def wipe(self) -> None:
        for s in self._held:
            s.wipe()
        self._held.clear()

    def __enter__(self) -> SecretScope:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()
