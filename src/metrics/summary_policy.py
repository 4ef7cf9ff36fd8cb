"""Policies deciding how single-observation groups are summarized."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Protocol, Sequence, Tuple

import numpy as np

GroupKey = Tuple[Hashable, Hashable]


class SummaryValidationError(ValueError):
    """Raised when records cannot be summarized as requested."""


class InsufficientDataError(SummaryValidationError):
    """Raised when a group holds too few observations for a spread estimate."""

    def __init__(self, key: GroupKey, n: int) -> None:
        self.key = key
        self.n = n
        super().__init__(
            f"Group {key!r} has {n} observation(s); a standard deviation needs at least 2."
        )


class SingleObservationPolicy(Protocol):
    """Strategy object that supplies the standard deviation for a one-row group."""

    def resolve(self, key: GroupKey, values: Sequence[float]) -> float:
        """Return the sd to use for ``values`` (always of length 1)."""
        return 0.0


@dataclass(frozen=True)
class ZeroWidthPolicy:
    """Treat a lone observation as having no spread: sd = se = half-width = 0."""

    def resolve(self, key: GroupKey, values: Sequence[float]) -> float:
        if len(values) != 1:
            raise ValueError("ZeroWidthPolicy only applies to single-observation groups.")
        return 0.0


@dataclass(frozen=True)
class RaiseOnSinglePolicy:
    """Refuse to summarize a group holding a single observation."""

    def resolve(self, key: GroupKey, values: Sequence[float]) -> float:
        raise InsufficientDataError(key, len(values))


POLICIES = {
    "zero": ZeroWidthPolicy,
    "raise": RaiseOnSinglePolicy,
}


def get_policy(name: str) -> SingleObservationPolicy:
    """Instantiate a policy by its short CLI name."""
    try:
        return POLICIES[name]()
    except KeyError as exc:
        raise ValueError(f"Unknown single-observation policy '{name}'. Available: {list(POLICIES)}") from exc


def sample_sd(values: Sequence[float]) -> float:
    """Sample standard deviation (n - 1 denominator) for two or more values."""
    arr = np.asarray(values, dtype=float)
    if arr.size < 2:
        raise ValueError("Sample standard deviation needs at least two values.")
    return float(arr.std(ddof=1))
