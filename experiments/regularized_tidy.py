from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import pandas as pd

from src.datahub import get_spec, load_dataset
from src.regression import (
    CrossValidatedPath,
    ElasticNetOptunaTuner,
    ElasticNetTuningConfig,
    RegularizationPathConfig,
    augment_path,
    coefficient_table,
    cross_validate_path,
    glance_cv,
    glance_path,
    tidy_cv,
    tidy_path,
)


@dataclass(frozen=True)
class RegularizedResult:
    """Fitted cross-validated path plus every tidy view the walkthrough shows."""

    cv: CrossValidatedPath
    config: RegularizationPathConfig
    tidy: pd.DataFrame
    glance: pd.DataFrame
    tidy_cv: pd.DataFrame
    glance_cv: pd.DataFrame
    coefficients: pd.DataFrame
    augmented: pd.DataFrame
    target: str
    features: Tuple[str, ...]

    def fitted_table(self, rows: int = 6) -> pd.DataFrame:
        """First ``rows`` of the augmented frame: identifier columns, response, fit and residual."""
        keep = [column for column in self.augmented.columns if column not in self.features]
        return self.augmented[keep].head(rows)


def run_regularized_tidy(
    dataset: str,
    target: Optional[str] = None,
    features: Optional[Sequence[str]] = None,
    config: Optional[RegularizationPathConfig] = None,
    folds: int = 10,
    seed: int = 42,
    tune: bool = False,
    trials: int = 20,
) -> RegularizedResult:
    """Fit, cross-validate and tidy an elastic-net path on a bundled dataset."""
    spec = get_spec(dataset)
    target = target or spec.regression_target
    features = list(features or spec.regression_features)
    if not target or not features:
        raise ValueError(f"Dataset '{dataset}' has no default regression columns; pass target and features.")

    frame = load_dataset(dataset, labelled=False)
    missing = [column for column in [target, *features] if column not in frame.columns]
    if missing:
        raise ValueError(f"Unknown columns {missing} for dataset '{dataset}'.")
    X = frame[features]
    y = frame[target]
    print(f"[regression] Loaded '{dataset}' ({len(frame)} rows); target={target}, {len(features)} features.")

    cfg = config or RegularizationPathConfig()
    if tune:
        print(f"[regression] Tuning l1_ratio with Optuna ({trials} trials) ...")
        tuner = ElasticNetOptunaTuner(
            cfg,
            ElasticNetTuningConfig(trials=trials, random_seed=seed, folds=folds),
        )
        tuner.tune(X, y, features)
        cfg = tuner.make_config()
        print(f"[regression] Best l1_ratio={cfg.l1_ratio:.3f} (CV MSE={tuner.best_value:.3f}).")

    cv = cross_validate_path(X, y, features, config=cfg, folds=folds, random_state=seed)
    print(
        f"[regression] {cv.folds}-fold CV over {cv.path.n_lambdas} lambdas: "
        f"lambda_min={cv.lambda_min:.4f}, lambda_1se={cv.lambda_1se:.4f}."
    )

    return RegularizedResult(
        cv=cv,
        config=cfg,
        tidy=tidy_path(cv.path),
        glance=glance_path(cv.path),
        tidy_cv=tidy_cv(cv),
        glance_cv=glance_cv(cv),
        coefficients=coefficient_table(cv.path, cv.lambda_1se),
        augmented=augment_path(cv.path, frame, features, cv.lambda_1se, target=target),
        target=target,
        features=tuple(features),
    )
