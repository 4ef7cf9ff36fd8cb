"""Grouped mean / standard-error summaries for two-factor designs."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Hashable, Iterable, List, Literal, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from src.datahub.observation import Observation
from .summary_policy import (
    SingleObservationPolicy,
    SummaryValidationError,
    ZeroWidthPolicy,
    sample_sd,
)

IntervalKind = Literal["normal", "student"]

SUMMARY_COLUMNS = ["x", "group", "n", "mean", "sd", "se", "ci", "lower", "upper", "degenerate"]


@dataclass(frozen=True)
class GroupSummary:
    """Summary statistics for one (x, group) cell."""

    x: Hashable
    group: Hashable
    n: int
    mean: float
    sd: float
    se: float
    half_width: float
    degenerate: bool = False

    @property
    def lower(self) -> float:
        return self.mean - self.half_width

    @property
    def upper(self) -> float:
        return self.mean + self.half_width


@dataclass
class SummaryConfig:
    """Configuration for `summarize_groups`."""

    z: float = 1.96
    interval: IntervalKind = "normal"
    # Only consulted when ``interval == "student"``.
    confidence: float = 0.95
    single_policy: SingleObservationPolicy = field(default_factory=ZeroWidthPolicy)
    dropna: bool = False

    def validate(self) -> None:
        if not np.isfinite(self.z) or self.z <= 0:
            raise ValueError("z must be a positive, finite multiplier.")
        if self.interval not in ("normal", "student"):
            raise ValueError(f"Unknown interval kind '{self.interval}'.")
        if not 0.0 < self.confidence < 1.0:
            raise ValueError("confidence must fall within (0, 1).")

    def critical_value(self, n: int) -> float:
        """Multiplier applied to the standard error for a group of size ``n`` (n >= 2)."""
        if self.interval == "normal":
            return float(self.z)
        return float(stats.t.ppf(0.5 + self.confidence / 2.0, n - 1))


def standard_error(sd: float, n: int) -> float:
    """Standard error of the mean: sd / sqrt(n)."""
    if n < 1:
        raise ValueError("Standard error needs at least one observation.")
    if sd < 0 or not np.isfinite(sd):
        raise ValueError("Standard deviation must be finite and non-negative.")
    return float(sd / math.sqrt(n))


def interval_half_width(se: float, z: float = 1.96) -> float:
    """Half-width of the symmetric interval mean ± z·se."""
    if se < 0:
        raise ValueError("Standard error cannot be negative.")
    return float(z * se)


def validate_records(
    frame: pd.DataFrame,
    x: str,
    group: str,
    value: str,
    dropna: bool = False,
) -> pd.DataFrame:
    """Check the three columns once, up front, and return them with a float value column.

    Raises:
        SummaryValidationError: missing columns, no rows, non-numeric or
            non-finite measurements, or missing grouping labels.
    """
    missing = [column for column in (x, group, value) if column not in frame.columns]
    if missing:
        raise SummaryValidationError(f"Missing columns {missing}; available: {list(frame.columns)}")
    if len({x, group, value}) != 3:
        raise SummaryValidationError("x, group and value must name three distinct columns.")

    subset = frame[[x, group, value]].copy()
    if subset.empty:
        raise SummaryValidationError("No records supplied for summarization.")

    subset[value] = _coerce_numeric(subset[value], value)

    if dropna:
        subset = subset.dropna(subset=[x, group, value])
        if subset.empty:
            raise SummaryValidationError("No records remain after dropping missing values.")

    if subset[[x, group]].isna().any().any():
        raise SummaryValidationError("Grouping columns contain missing labels.")
    values = subset[value].to_numpy()
    if not np.all(np.isfinite(values)):
        raise SummaryValidationError(f"Column '{value}' contains non-finite measurements.")
    return subset


def summarize_groups(
    frame: pd.DataFrame,
    x: str,
    group: str,
    value: str,
    config: Optional[SummaryConfig] = None,
) -> List[GroupSummary]:
    """Compute n, mean, sd, se and interval half-width for each observed (x, group) pair.

    Args:
        frame: Records holding at least the three named columns.
        x: First grouping key (plotted on the x axis).
        group: Second grouping key (one line per level).
        value: Numeric measurement column.
        config: Optional configuration overriding defaults.

    Returns:
        One GroupSummary per distinct key pair, in categorical order when the keys
        are categoricals and sorted order otherwise.
    """
    cfg = config or SummaryConfig()
    cfg.validate()
    records = validate_records(frame, x, group, value, dropna=cfg.dropna)

    summaries: List[GroupSummary] = []
    grouped = records.groupby([x, group], observed=True, sort=True)[value]
    for (x_key, group_key), series in grouped:
        x_key, group_key = _as_python(x_key), _as_python(group_key)
        values = series.to_numpy(dtype=float)
        summaries.append(_summarize_cell((x_key, group_key), values, cfg))
    return summaries


def summarize_observations(
    records: Iterable[Observation],
    config: Optional[SummaryConfig] = None,
) -> List[GroupSummary]:
    """Record-based entry point mirroring `summarize_groups`."""
    rows = [{"x": record.x, "group": record.group, "value": record.value} for record in records]
    frame = pd.DataFrame(rows, columns=["x", "group", "value"])
    return summarize_groups(frame, "x", "group", "value", config)


def summary_frame(
    summaries: Sequence[GroupSummary],
    x_levels: Optional[Sequence[Hashable]] = None,
    group_levels: Optional[Sequence[Hashable]] = None,
) -> pd.DataFrame:
    """Tabulate summaries with one row per cell and a ``ci`` half-width column.

    When level orders are given, ``x`` and ``group`` become ordered categoricals so
    downstream plots keep the factor order even for levels missing from some cells.
    """
    rows = [
        {
            "x": summary.x,
            "group": summary.group,
            "n": summary.n,
            "mean": summary.mean,
            "sd": summary.sd,
            "se": summary.se,
            "ci": summary.half_width,
            "lower": summary.lower,
            "upper": summary.upper,
            "degenerate": summary.degenerate,
        }
        for summary in summaries
    ]
    table = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    if x_levels is not None:
        table["x"] = pd.Categorical(table["x"], categories=list(x_levels), ordered=True)
    if group_levels is not None:
        table["group"] = pd.Categorical(table["group"], categories=list(group_levels), ordered=True)
    return table


def _summarize_cell(key: tuple, values: np.ndarray, cfg: SummaryConfig) -> GroupSummary:
    n = int(values.size)
    mean = float(values.mean())
    degenerate = n < 2
    if degenerate:
        sd = float(cfg.single_policy.resolve(key, values.tolist()))
    else:
        sd = sample_sd(values)
    if not (np.isfinite(mean) and np.isfinite(sd)):
        raise SummaryValidationError(
            f"Group {key} overflows floating point (mean={mean}, sd={sd}); rescale the measurements."
        )

    se = standard_error(sd, n)
    if degenerate:
        # No degrees of freedom left for a t quantile; a zero spread stays zero.
        half_width = interval_half_width(se, cfg.z) if se > 0 else 0.0
    else:
        half_width = interval_half_width(se, cfg.critical_value(n))
    return GroupSummary(
        x=key[0],
        group=key[1],
        n=n,
        mean=mean,
        sd=sd,
        se=se,
        half_width=half_width,
        degenerate=degenerate,
    )


def _coerce_numeric(series: pd.Series, name: str) -> pd.Series:
    if pd.api.types.is_bool_dtype(series):
        raise SummaryValidationError(f"Column '{name}' holds booleans, not numeric measurements.")
    if pd.api.types.is_numeric_dtype(series):
        return series.astype(float)

    bad = [
        item
        for item in series.tolist()
        if not (item is None or isinstance(item, numbers.Real)) or isinstance(item, bool)
    ]
    if bad:
        raise SummaryValidationError(f"Column '{name}' contains non-numeric values, e.g. {bad[0]!r}.")
    return series.astype(float)


def _as_python(value: Hashable) -> Hashable:
    """Unwrap numpy scalars so summary keys compare and print like plain Python values."""
    if isinstance(value, np.generic):
        return value.item()
    return value


__all__ = [
    "GroupSummary",
    "SummaryConfig",
    "SUMMARY_COLUMNS",
    "interval_half_width",
    "standard_error",
    "summarize_groups",
    "summarize_observations",
    "summary_frame",
    "validate_records",
]
