from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class Observation:
    """Single measurement tagged with its two grouping labels."""

    x: Hashable
    group: Hashable
    value: float
