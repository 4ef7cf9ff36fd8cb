"""Tests for regularization paths, cross-validation, tidiers and tuning."""

from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.regression import (
    ElasticNetOptunaTuner,
    ElasticNetTuningConfig,
    RegularizationPathConfig,
    augment_path,
    coefficient_table,
    cross_validate_path,
    fit_path,
    glance_cv,
    glance_path,
    tidy_cv,
    tidy_path,
)
from src.regression.base import INTERCEPT_TERM
from src.regression.tidiers import TIDY_CV_COLUMNS, TIDY_PATH_COLUMNS


# ---------------------------------------------------------------------------
# Fixtures


@pytest.fixture()
def sparse_problem() -> tuple[pd.DataFrame, np.ndarray]:
    rng = np.random.default_rng(0)
    X = rng.normal(size=(100, 5))
    y = 5.0 + 3.0 * X[:, 0] - 2.0 * X[:, 1] + rng.normal(scale=0.1, size=100)
    frame = pd.DataFrame(X, columns=["a", "b", "c", "d", "e"])
    return frame, y


# ---------------------------------------------------------------------------
# Path tests


def test_lambda_grid_is_decreasing(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y, config=RegularizationPathConfig(n_lambdas=30))
    assert path.n_lambdas == 30
    assert np.all(np.diff(path.lambdas) < 0)
    assert path.lambdas[-1] == pytest.approx(path.lambdas[0] * 1e-4)


def test_lasso_path_starts_empty_and_recovers_signal(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y)

    assert np.allclose(path.coefficients[:, 0], 0.0, atol=1e-8)
    assert path.intercepts[0] == pytest.approx(y.mean())
    assert path.dev_ratio[0] == pytest.approx(0.0, abs=1e-8)

    assert path.coefficients[:, -1] == pytest.approx([3.0, -2.0, 0.0, 0.0, 0.0], abs=0.1)
    assert path.intercepts[-1] == pytest.approx(5.0, abs=0.1)
    assert path.dev_ratio[-1] > 0.99
    assert path.df[-1] >= 2


def test_path_uses_dataframe_column_names(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y)
    assert path.feature_names == ("a", "b", "c", "d", "e")
    assert path.n_obs == 100


def test_ridge_path_keeps_every_feature(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y, config=RegularizationPathConfig(l1_ratio=0.0, n_lambdas=20))
    assert np.all(path.df == 5)
    assert np.all(np.isfinite(path.coefficients))


def test_coefficients_at_interpolates_and_clamps(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y, config=RegularizationPathConfig(n_lambdas=20))

    intercept, coefs = path.coefficients_at(float(path.lambdas[5]))
    assert intercept == pytest.approx(path.intercepts[5])
    assert coefs == pytest.approx(path.coefficients[:, 5])

    midpoint = float((path.lambdas[5] + path.lambdas[6]) / 2)
    _, mid_coefs = path.coefficients_at(midpoint)
    assert mid_coefs == pytest.approx((path.coefficients[:, 5] + path.coefficients[:, 6]) / 2)

    _, beyond = path.coefficients_at(float(path.lambdas[0] * 10))
    assert beyond == pytest.approx(path.coefficients[:, 0])


def test_predict_shapes(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y, config=RegularizationPathConfig(n_lambdas=10))
    assert path.predict(X).shape == (100, 10)
    assert path.predict(X, float(path.lambdas[-1])).shape == (100,)
    with pytest.raises(ValueError):
        path.predict(X.iloc[:, :3])


def test_fit_path_input_validation(sparse_problem) -> None:
    X, y = sparse_problem
    with pytest.raises(ValueError, match="must match"):
        fit_path(X, y[:-1])
    with pytest.raises(ValueError, match="feature names"):
        fit_path(X.to_numpy(), y, feature_names=["a", "b"])
    with pytest.raises(ValueError, match="constant target"):
        fit_path(X, np.full(100, 2.0))
    with pytest.raises(ValueError, match="non-finite"):
        fit_path(X.to_numpy(), np.where(np.arange(100) == 3, np.nan, y))


@pytest.mark.parametrize(
    "config",
    [
        RegularizationPathConfig(l1_ratio=1.5),
        RegularizationPathConfig(n_lambdas=1),
        RegularizationPathConfig(lambda_min_ratio=2.0),
        RegularizationPathConfig(tol=0.0),
    ],
)
def test_path_config_validation(config: RegularizationPathConfig) -> None:
    with pytest.raises(ValueError):
        config.validate()


# ---------------------------------------------------------------------------
# Cross-validation tests


def test_cross_validation_selects_lambdas(sparse_problem) -> None:
    X, y = sparse_problem
    cv = cross_validate_path(X, y, config=RegularizationPathConfig(n_lambdas=40), folds=5, random_state=0)

    assert cv.folds == 5
    assert cv.fold_errors.shape == (5, 40)
    assert cv.cvm.shape == cv.cvsd.shape == (40,)
    assert np.all(cv.cvsd >= 0)
    assert np.all(cv.cvup >= cv.cvm)
    assert cv.lambda_1se >= cv.lambda_min
    assert cv.index_1se <= cv.index_min
    assert cv.cvm[cv.index_1se] <= cv.cvm[cv.index_min] + cv.cvsd[cv.index_min]
    assert cv.cvm[cv.index_min] < cv.cvm[0]


def test_cross_validation_is_reproducible(sparse_problem) -> None:
    X, y = sparse_problem
    config = RegularizationPathConfig(n_lambdas=15)
    first = cross_validate_path(X, y, config=config, folds=4, random_state=7)
    second = cross_validate_path(X, y, config=config, folds=4, random_state=7)
    assert np.array_equal(first.cvm, second.cvm)
    assert first.lambda_min == second.lambda_min


def test_cross_validation_fold_bounds(sparse_problem) -> None:
    X, y = sparse_problem
    with pytest.raises(ValueError, match="at least 3"):
        cross_validate_path(X, y, folds=2)
    with pytest.raises(ValueError, match="Cannot split"):
        cross_validate_path(X.iloc[:4], y[:4], folds=5)


# ---------------------------------------------------------------------------
# Tidier tests


def test_tidy_path_layout(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y, config=RegularizationPathConfig(n_lambdas=25))
    tidy = tidy_path(path)

    assert list(tidy.columns) == TIDY_PATH_COLUMNS
    assert (tidy["estimate"] != 0).all()
    assert tidy["step"].min() == 1
    assert tidy["step"].nunique() == 25
    assert (tidy.groupby("step")["term"].first() == INTERCEPT_TERM).all()
    assert set(tidy["term"]) <= {INTERCEPT_TERM, "a", "b", "c", "d", "e"}


def test_tidy_and_glance_cv(sparse_problem) -> None:
    X, y = sparse_problem
    cv = cross_validate_path(X, y, config=RegularizationPathConfig(n_lambdas=20), folds=5, random_state=1)

    curve = tidy_cv(cv)
    assert list(curve.columns) == TIDY_CV_COLUMNS
    assert len(curve) == 20
    assert curve["conf_low"].to_numpy() == pytest.approx((curve["estimate"] - curve["std_error"]).to_numpy())

    glance = glance_cv(cv)
    assert glance.shape == (1, 3)
    assert glance.loc[0, "lambda_min"] == cv.lambda_min
    assert glance.loc[0, "lambda_1se"] == cv.lambda_1se
    assert glance.loc[0, "nobs"] == 100

    path_glance = glance_path(cv.path)
    assert path_glance.loc[0, "nulldev"] == pytest.approx(np.sum((y - y.mean()) ** 2))


def test_coefficient_table_keeps_zero_terms(sparse_problem) -> None:
    X, y = sparse_problem
    path = fit_path(X, y, config=RegularizationPathConfig(n_lambdas=20))
    table = coefficient_table(path, float(path.lambdas[0]))
    assert table["term"].tolist() == [INTERCEPT_TERM, "a", "b", "c", "d", "e"]
    assert table["estimate"].iloc[1:].to_numpy() == pytest.approx(0.0, abs=1e-8)


def test_augment_path_adds_fitted_and_residuals(sparse_problem) -> None:
    X, y = sparse_problem
    frame = X.assign(y=y)
    features = ["a", "b", "c", "d", "e"]
    path = fit_path(frame[features], frame["y"], config=RegularizationPathConfig(n_lambdas=20))
    lam = float(path.lambdas[-1])

    augmented = augment_path(path, frame, features, lam, target="y")
    assert {".fitted", ".resid"} <= set(augmented.columns)
    assert augmented[".resid"].to_numpy() == pytest.approx(y - augmented[".fitted"].to_numpy())
    assert ".fitted" not in frame.columns

    with pytest.raises(ValueError, match="missing"):
        augment_path(path, frame, features, lam, target="missing")


# ---------------------------------------------------------------------------
# Tuning tests


def test_tuner_picks_l1_ratio_once(sparse_problem) -> None:
    X, y = sparse_problem
    base = RegularizationPathConfig(n_lambdas=15)
    tuner = ElasticNetOptunaTuner(base, ElasticNetTuningConfig(trials=3, random_seed=0, folds=3))

    assert tuner.make_config() is base
    assert tuner.best_value is None

    tuner.tune(X, y)
    tuned = tuner.make_config()
    assert 0.0 <= tuned.l1_ratio <= 1.0
    assert tuned.n_lambdas == 15
    assert tuner.best_value is not None and tuner.best_value > 0

    tuner.tune(X, y)
    assert tuner.make_config() is tuned


def test_tuner_requires_trials(sparse_problem) -> None:
    X, y = sparse_problem
    tuner = ElasticNetOptunaTuner(tuning_config=ElasticNetTuningConfig(trials=0))
    with pytest.raises(ValueError):
        tuner.tune(X, y)
