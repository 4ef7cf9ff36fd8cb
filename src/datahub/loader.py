from __future__ import annotations

from pathlib import Path
from typing import Iterator, Optional

import pandas as pd

from .config import DATA_ROOT
from .helpers import apply_factor, ensure_columns
from .observation import Observation
from .registry import get_spec


def load_dataset(
    dataset_id: str,
    labelled: bool = True,
    root: Optional[Path] = None,
) -> pd.DataFrame:
    """Read a bundled dataset, optionally converting its factor columns to labelled categoricals."""
    spec = get_spec(dataset_id)
    path = (root or DATA_ROOT) / spec.filename
    if not path.exists():
        raise FileNotFoundError(f"Dataset file for '{dataset_id}' not found at {path}")

    frame = pd.read_csv(path)
    if not labelled:
        return frame

    ensure_columns(frame, spec.factors)
    for column in spec.factors:
        frame[column] = apply_factor(frame[column], spec.factor_labels.get(column))
    return frame


def observations_from_frame(
    frame: pd.DataFrame,
    x: str,
    group: str,
    value: str,
) -> Iterator[Observation]:
    """Yield Observation records for the three selected columns."""
    ensure_columns(frame, (x, group, value))
    for x_key, group_key, measurement in zip(frame[x], frame[group], frame[value]):
        yield Observation(x=x_key, group=group_key, value=measurement)
