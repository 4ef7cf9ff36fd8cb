"""Elastic-net regularization paths built on scikit-learn's coordinate descent."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from sklearn.linear_model import enet_path
from sklearn.preprocessing import StandardScaler

from .base import ArrayLike, NamesLike, TargetLike
from .helpers import ensure_1d_array, ensure_2d_array, resolve_feature_names

# lambda_max is computed with l1_ratio floored here so ridge paths still get a finite grid.
MIN_L1_RATIO_FOR_GRID = 1e-3


@dataclass
class RegularizationPathConfig:
    """Hyper-parameters for the penalty path.

    ``l1_ratio`` mixes the penalties: 1.0 is the lasso, 0.0 is ridge.  Lambda is on
    scikit-learn's ``alpha`` scale (loss is RSS / 2n).
    """

    l1_ratio: float = 1.0
    n_lambdas: int = 100
    lambda_min_ratio: Optional[float] = None
    standardize: bool = True
    fit_intercept: bool = True
    max_iter: int = 10_000
    tol: float = 1e-6

    def validate(self) -> None:
        if not 0.0 <= self.l1_ratio <= 1.0:
            raise ValueError("l1_ratio must fall within [0, 1].")
        if self.n_lambdas < 2:
            raise ValueError("n_lambdas must be at least 2.")
        if self.lambda_min_ratio is not None and not 0.0 < self.lambda_min_ratio < 1.0:
            raise ValueError("lambda_min_ratio must fall within (0, 1).")
        if self.max_iter < 1 or self.tol <= 0:
            raise ValueError("max_iter must be positive and tol strictly positive.")


@dataclass(frozen=True)
class RegularizationPath:
    """Coefficients on the original feature scale for every lambda on the grid."""

    lambdas: np.ndarray
    coefficients: np.ndarray  # (n_features, n_lambdas)
    intercepts: np.ndarray
    dev_ratio: np.ndarray
    null_deviance: float
    df: np.ndarray
    feature_names: Tuple[str, ...]
    n_obs: int
    l1_ratio: float

    @property
    def n_lambdas(self) -> int:
        return int(self.lambdas.shape[0])

    def coefficients_at(self, lam: float) -> Tuple[float, np.ndarray]:
        """Intercept and coefficients at ``lam``, linearly interpolated between grid points."""
        if not np.isfinite(lam) or lam < 0:
            raise ValueError("lambda must be finite and non-negative.")
        # np.interp needs increasing x; values outside the grid clamp to the end points.
        grid = self.lambdas[::-1]
        intercept = float(np.interp(lam, grid, self.intercepts[::-1]))
        coefs = np.asarray([np.interp(lam, grid, row[::-1]) for row in self.coefficients], dtype=float)
        return intercept, coefs

    def predict(self, features: ArrayLike, lam: Optional[float] = None) -> np.ndarray:
        """Predictions at ``lam``, or an (n_samples, n_lambdas) matrix for the whole path."""
        X = ensure_2d_array(features)
        if X.shape[1] != len(self.feature_names):
            raise ValueError(f"Expected {len(self.feature_names)} features, got {X.shape[1]}")
        if lam is None:
            return X @ self.coefficients + self.intercepts
        intercept, coefs = self.coefficients_at(lam)
        return X @ coefs + intercept


def lambda_grid(
    features: np.ndarray,
    target: np.ndarray,
    config: RegularizationPathConfig,
) -> np.ndarray:
    """Log-spaced decreasing grid from the smallest lambda that zeroes every coefficient."""
    n_samples, n_features = features.shape
    ratio = config.lambda_min_ratio
    if ratio is None:
        ratio = 1e-4 if n_samples > n_features else 1e-2

    l1_ratio = max(config.l1_ratio, MIN_L1_RATIO_FOR_GRID)
    lambda_max = float(np.max(np.abs(features.T @ target)) / (n_samples * l1_ratio))
    if not lambda_max > 0:
        raise ValueError("Target is uncorrelated with every feature (constant target?); no path to fit.")
    return np.geomspace(lambda_max, lambda_max * ratio, config.n_lambdas)


def fit_path(
    features: ArrayLike,
    target: TargetLike,
    feature_names: NamesLike = None,
    config: Optional[RegularizationPathConfig] = None,
    lambdas: Optional[np.ndarray] = None,
) -> RegularizationPath:
    """Fit the elastic-net path and return it on the original feature scale.

    Args:
        features: Design matrix (rows are observations).
        target: Continuous response.
        feature_names: Optional names; DataFrame columns are used otherwise.
        config: Optional configuration overriding defaults.
        lambdas: Explicit grid, e.g. the full-data grid reused across CV folds.
    """
    cfg = config or RegularizationPathConfig()
    cfg.validate()

    X = ensure_2d_array(features)
    y = ensure_1d_array(target)
    if X.shape[0] != y.shape[0]:
        raise ValueError(f"Feature rows ({X.shape[0]}) and target length ({y.shape[0]}) must match")
    if X.shape[0] < 2:
        raise ValueError("At least two observations are required to fit a path.")
    names: List[str] = resolve_feature_names(features, feature_names, X.shape[1])

    scaler = StandardScaler(with_mean=cfg.fit_intercept, with_std=cfg.standardize)
    X_scaled = scaler.fit_transform(X)
    x_mean = X.mean(axis=0) if cfg.fit_intercept else np.zeros(X.shape[1])
    x_scale = scaler.scale_ if cfg.standardize else np.ones(X.shape[1])
    y_mean = float(y.mean()) if cfg.fit_intercept else 0.0
    y_centered = y - y_mean

    if lambdas is None:
        grid = lambda_grid(X_scaled, y_centered, cfg)
    else:
        grid = np.sort(np.asarray(lambdas, dtype=float))[::-1]
        if grid.size == 0 or np.any(grid <= 0) or not np.all(np.isfinite(grid)):
            raise ValueError("lambdas must be a non-empty sequence of positive finite values.")

    _, coefs_scaled, _ = enet_path(
        X_scaled,
        y_centered,
        l1_ratio=cfg.l1_ratio,
        alphas=grid,
        max_iter=cfg.max_iter,
        tol=cfg.tol,
    )
    coefficients = coefs_scaled / x_scale[:, None]
    intercepts = y_mean - x_mean @ coefficients

    fitted = X @ coefficients + intercepts
    rss = np.sum((y[:, None] - fitted) ** 2, axis=0)
    null_deviance = float(np.sum(y_centered**2))
    if null_deviance > 0:
        dev_ratio = 1.0 - rss / null_deviance
    else:
        dev_ratio = np.zeros_like(rss)

    return RegularizationPath(
        lambdas=grid,
        coefficients=coefficients,
        intercepts=np.asarray(intercepts, dtype=float),
        dev_ratio=dev_ratio,
        null_deviance=null_deviance,
        df=np.count_nonzero(coefficients, axis=0),
        feature_names=tuple(names),
        n_obs=int(X.shape[0]),
        l1_ratio=float(cfg.l1_ratio),
    )


__all__ = ["RegularizationPath", "RegularizationPathConfig", "fit_path", "lambda_grid"]
