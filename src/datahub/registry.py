"""Registry of the small datasets bundled with the demos.

Each entry records where the CSV lives, which columns are categorical factors
(and how their raw codes are labelled), and which columns the grouped summary
and regression demos use by default.  Loader code stays declarative: adding a
dataset means adding a CSV and a ``DatasetSpec``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Tuple

from .config import MTCARS_LABELS, TOOTHGROWTH_LABELS, DemoColumns

DatasetKey = Literal["mtcars", "toothgrowth"]


@dataclass(frozen=True)
class DatasetSpec:
    """Metadata describing a bundled dataset."""

    name: str
    filename: str
    description: str
    demo: DemoColumns
    factor_labels: Dict[str, Dict[object, str]] = field(default_factory=dict)
    factors: Tuple[str, ...] = ()
    regression_target: Optional[str] = None
    regression_features: Tuple[str, ...] = ()


REGISTRY: dict[DatasetKey, DatasetSpec] = {
    "mtcars": DatasetSpec(
        name="mtcars",
        filename="mtcars.csv",
        description="Motor Trend 1974 road tests: fuel consumption and 10 design aspects of 32 cars.",
        demo={"x": "cyl", "group": "am", "value": "mpg"},
        factor_labels=MTCARS_LABELS,
        factors=("cyl", "am", "vs", "gear", "carb"),
        regression_target="mpg",
        regression_features=("cyl", "disp", "hp", "drat", "wt", "qsec", "vs", "am", "gear", "carb"),
    ),
    "toothgrowth": DatasetSpec(
        name="toothgrowth",
        filename="toothgrowth.csv",
        description="Odontoblast length in 60 guinea pigs by vitamin C dose and delivery method.",
        demo={"x": "dose", "group": "supp", "value": "len"},
        factor_labels=TOOTHGROWTH_LABELS,
        factors=("supp", "dose"),
    ),
}


def get_spec(key: str) -> DatasetSpec:
    """Return the DatasetSpec registered under ``key``."""
    try:
        return REGISTRY[key]  # type: ignore[index]
    except KeyError as exc:
        raise ValueError(f"Unknown dataset '{key}'. Available: {list(REGISTRY)}") from exc


def list_available_datasets() -> tuple[str, ...]:
    """Return the registry keys for all bundled datasets."""
    return tuple(sorted(REGISTRY))


__all__ = ["DatasetKey", "DatasetSpec", "REGISTRY", "get_spec", "list_available_datasets"]
