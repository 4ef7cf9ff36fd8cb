from __future__ import annotations

from typing import Any, Iterable, Mapping

import pandas as pd


def ensure_columns(frame: pd.DataFrame, columns: Iterable[str]) -> None:
    """Raise a ValueError naming every requested column missing from ``frame``."""
    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise ValueError(f"Missing columns {missing}; available: {list(frame.columns)}")


def apply_factor(series: pd.Series, labels: Mapping[Any, str] | None = None) -> pd.Series:
    """Turn ``series`` into an ordered categorical, relabelling raw codes when a map is given.

    Category order follows the sorted raw codes so that e.g. 4/6/8 cylinders or
    0.5/1/2 mg doses keep their natural order after relabelling.
    """
    codes = sorted(series.dropna().unique().tolist())
    if labels:
        unknown = [code for code in codes if code not in labels]
        if unknown:
            raise ValueError(f"No label for codes {unknown} in column '{series.name}'")
        categories = [labels[code] for code in codes]
        mapped = series.map(labels)
    else:
        categories = [_format_level(code) for code in codes]
        mapped = series.map(_format_level)
    return pd.Series(
        pd.Categorical(mapped, categories=categories, ordered=True),
        index=series.index,
        name=series.name,
    )


def _format_level(value: Any) -> str:
    """Render numeric factor levels without a trailing ``.0`` (4.0 -> "4", 0.5 -> "0.5")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = ["apply_factor", "ensure_columns"]
