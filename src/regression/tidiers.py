"""Tidy data-frame views of fitted paths (term/estimate tables, one-row glances, augmented data)."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .base import INTERCEPT_TERM
from .cv import CrossValidatedPath
from .path import RegularizationPath

TIDY_PATH_COLUMNS = ["term", "step", "estimate", "lambda", "dev_ratio"]
TIDY_CV_COLUMNS = ["lambda", "estimate", "std_error", "conf_low", "conf_high", "nzero"]


def tidy_path(path: RegularizationPath) -> pd.DataFrame:
    """One row per non-zero coefficient per lambda step (steps are numbered from 1)."""
    terms = [INTERCEPT_TERM, *path.feature_names]
    estimates = np.vstack([path.intercepts[None, :], path.coefficients])

    rows = []
    for step_idx, lam in enumerate(path.lambdas):
        for term_idx, term in enumerate(terms):
            estimate = float(estimates[term_idx, step_idx])
            if estimate == 0.0:
                continue
            rows.append(
                {
                    "term": term,
                    "step": step_idx + 1,
                    "estimate": estimate,
                    "lambda": float(lam),
                    "dev_ratio": float(path.dev_ratio[step_idx]),
                }
            )
    return pd.DataFrame(rows, columns=TIDY_PATH_COLUMNS)


def tidy_cv(cv: CrossValidatedPath) -> pd.DataFrame:
    """Cross-validation curve: mean error, its standard error and the ±1 SE band per lambda."""
    return pd.DataFrame(
        {
            "lambda": cv.lambdas,
            "estimate": cv.cvm,
            "std_error": cv.cvsd,
            "conf_low": cv.cvlo,
            "conf_high": cv.cvup,
            "nzero": cv.nzero,
        },
        columns=TIDY_CV_COLUMNS,
    )


def glance_path(path: RegularizationPath) -> pd.DataFrame:
    return pd.DataFrame([{"nulldev": path.null_deviance, "nobs": path.n_obs, "n_lambdas": path.n_lambdas}])


def glance_cv(cv: CrossValidatedPath) -> pd.DataFrame:
    return pd.DataFrame([{"lambda_min": cv.lambda_min, "lambda_1se": cv.lambda_1se, "nobs": cv.path.n_obs}])


def coefficient_table(path: RegularizationPath, lam: float) -> pd.DataFrame:
    """Coefficients at a single lambda, zeros included so dropped terms stay visible."""
    intercept, coefs = path.coefficients_at(lam)
    return pd.DataFrame(
        {
            "term": [INTERCEPT_TERM, *path.feature_names],
            "estimate": [intercept, *coefs.tolist()],
            "lambda": float(lam),
        }
    )


def augment_path(
    path: RegularizationPath,
    frame: pd.DataFrame,
    features: Sequence[str],
    lam: float,
    target: Optional[str] = None,
) -> pd.DataFrame:
    """Return ``frame`` with ``.fitted`` (and ``.resid`` when ``target`` is given) at ``lam``."""
    missing = [column for column in [*features, *([target] if target else [])] if column not in frame.columns]
    if missing:
        raise ValueError(f"Missing columns {missing}; available: {list(frame.columns)}")

    augmented = frame.copy()
    fitted = path.predict(frame[list(features)], lam)
    augmented[".fitted"] = fitted
    if target is not None:
        augmented[".resid"] = frame[target].to_numpy(dtype=float) - fitted
    return augmented


__all__ = [
    "TIDY_CV_COLUMNS",
    "TIDY_PATH_COLUMNS",
    "augment_path",
    "coefficient_table",
    "glance_cv",
    "glance_path",
    "tidy_cv",
    "tidy_path",
]
