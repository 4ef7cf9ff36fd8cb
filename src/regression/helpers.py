"""Array conversion helpers shared across the regression modules."""

from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd

from .base import ArrayLike, NamesLike, TargetLike


def ensure_2d_array(features: ArrayLike, *, name: str = "features") -> np.ndarray:
    """Coerce features into a float64 numpy array of shape (n_samples, n_features)."""
    arr = _as_numpy(features, name=name)
    if arr.ndim != 2:
        raise ValueError(f"{name} must be 2-D (samples × features), got shape {arr.shape}")
    try:
        arr = arr.astype(np.float64, copy=False)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be numeric") from exc
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains non-finite entries")
    return arr


def ensure_1d_array(values: TargetLike, *, name: str = "target") -> np.ndarray:
    """Coerce the response into a 1-D float64 numpy array."""
    arr = _as_numpy(values, name=name)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be 1-D (samples,), got shape {arr.shape}")
    try:
        arr = arr.astype(np.float64, copy=False)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be numeric") from exc
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains non-finite entries")
    return arr


def resolve_feature_names(features: ArrayLike, names: NamesLike, n_features: int) -> List[str]:
    """Use explicit names, then DataFrame columns, then ``x1..xp``."""
    if names is not None:
        resolved = [str(name) for name in names]
    elif isinstance(features, pd.DataFrame):
        resolved = [str(column) for column in features.columns]
    else:
        resolved = [f"x{idx + 1}" for idx in range(n_features)]
    if len(resolved) != n_features:
        raise ValueError(f"Expected {n_features} feature names, received {len(resolved)}")
    if len(set(resolved)) != len(resolved):
        raise ValueError("Feature names must be unique")
    return resolved


def _as_numpy(value: object, *, name: str) -> np.ndarray:
    """Convert frames/sequences to numpy arrays while keeping existing arrays intact."""
    if isinstance(value, (pd.DataFrame, pd.Series)):
        arr = value.to_numpy()
    else:
        arr = np.asarray(value)
    if arr.size == 0:
        raise ValueError(f"{name} cannot be empty")
    return arr


__all__ = ["ensure_1d_array", "ensure_2d_array", "resolve_feature_names"]
