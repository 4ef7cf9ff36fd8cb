"""Shared typing aliases for the regression helpers."""

from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

ArrayLike = Union[np.ndarray, pd.DataFrame, Sequence[Sequence[float]]]
TargetLike = Union[np.ndarray, pd.Series, Sequence[float]]
NamesLike = Optional[Sequence[str]]

INTERCEPT_TERM = "(Intercept)"
