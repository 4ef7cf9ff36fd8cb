"""K-fold cross-validation over a shared lambda grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.model_selection import KFold

from .base import ArrayLike, NamesLike, TargetLike
from .helpers import ensure_1d_array, ensure_2d_array, resolve_feature_names
from .path import RegularizationPath, RegularizationPathConfig, fit_path

MIN_FOLDS = 3


@dataclass(frozen=True)
class CrossValidatedPath:
    """Cross-validated error curve plus the full-data path it was computed for."""

    path: RegularizationPath
    cvm: np.ndarray
    cvsd: np.ndarray
    fold_errors: np.ndarray  # (folds, n_lambdas)
    index_min: int
    index_1se: int

    @property
    def lambdas(self) -> np.ndarray:
        return self.path.lambdas

    @property
    def cvup(self) -> np.ndarray:
        return self.cvm + self.cvsd

    @property
    def cvlo(self) -> np.ndarray:
        return self.cvm - self.cvsd

    @property
    def nzero(self) -> np.ndarray:
        return self.path.df

    @property
    def lambda_min(self) -> float:
        """Lambda with the smallest mean CV error."""
        return float(self.lambdas[self.index_min])

    @property
    def lambda_1se(self) -> float:
        """Largest lambda whose CV error is within one standard error of the minimum."""
        return float(self.lambdas[self.index_1se])

    @property
    def folds(self) -> int:
        return int(self.fold_errors.shape[0])


def cross_validate_path(
    features: ArrayLike,
    target: TargetLike,
    feature_names: NamesLike = None,
    config: Optional[RegularizationPathConfig] = None,
    folds: int = 10,
    random_state: Optional[int] = None,
) -> CrossValidatedPath:
    """Estimate out-of-fold mean squared error at every lambda of the full-data path.

    Fold errors are averaged with fold-size weights; ``cvsd`` is the weighted spread
    of fold errors divided by sqrt(folds - 1).
    """
    cfg = config or RegularizationPathConfig()
    X = ensure_2d_array(features)
    y = ensure_1d_array(target)
    names = resolve_feature_names(features, feature_names, X.shape[1])

    if folds < MIN_FOLDS:
        raise ValueError(f"folds must be at least {MIN_FOLDS}, got {folds}")
    if X.shape[0] < folds:
        raise ValueError(f"Cannot split {X.shape[0]} observations into {folds} folds")

    path = fit_path(X, y, names, cfg)

    splitter = KFold(n_splits=folds, shuffle=True, random_state=random_state)
    fold_errors = np.empty((folds, path.n_lambdas), dtype=float)
    fold_sizes = np.empty(folds, dtype=float)
    for fold_idx, (train_idx, test_idx) in enumerate(splitter.split(X)):
        fold_path = fit_path(X[train_idx], y[train_idx], names, cfg, lambdas=path.lambdas)
        predicted = fold_path.predict(X[test_idx])
        fold_errors[fold_idx] = np.mean((y[test_idx, None] - predicted) ** 2, axis=0)
        fold_sizes[fold_idx] = len(test_idx)

    cvm = np.average(fold_errors, axis=0, weights=fold_sizes)
    spread = np.average((fold_errors - cvm) ** 2, axis=0, weights=fold_sizes)
    cvsd = np.sqrt(spread / (folds - 1))

    index_min = int(np.argmin(cvm))
    threshold = cvm[index_min] + cvsd[index_min]
    # Grid is decreasing, so the first qualifying index is the largest lambda.
    index_1se = int(np.flatnonzero(cvm <= threshold)[0])

    return CrossValidatedPath(
        path=path,
        cvm=cvm,
        cvsd=cvsd,
        fold_errors=fold_errors,
        index_min=index_min,
        index_1se=index_1se,
    )


__all__ = ["CrossValidatedPath", "cross_validate_path"]
