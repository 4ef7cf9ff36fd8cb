"""Optuna-backed search over the elastic-net mixing parameter."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

import numpy as np
import optuna

from .base import ArrayLike, NamesLike, TargetLike
from .cv import CrossValidatedPath, cross_validate_path
from .path import RegularizationPathConfig


@dataclass
class ElasticNetTuningConfig:
    """Configuration controlling the Optuna tuning pass."""

    trials: int = 20
    random_seed: int = 42
    folds: int = 10


class ElasticNetOptunaTuner:
    """Pick ``l1_ratio`` by minimum cross-validated error, once, then reuse it."""

    def __init__(
        self,
        base_config: Optional[RegularizationPathConfig] = None,
        tuning_config: Optional[ElasticNetTuningConfig] = None,
    ) -> None:
        self.base_config = base_config or RegularizationPathConfig()
        self.tuning_config = tuning_config or ElasticNetTuningConfig()
        self._best_config: Optional[RegularizationPathConfig] = None
        self._study: Optional[optuna.Study] = None

    def tune(self, features: ArrayLike, target: TargetLike, feature_names: NamesLike = None) -> None:
        if self._best_config is not None:
            return
        if self.tuning_config.trials < 1:
            raise ValueError("trials must be at least 1")

        sampler = optuna.samplers.TPESampler(seed=self.tuning_config.random_seed)
        self._study = optuna.create_study(direction="minimize", sampler=sampler, study_name="elastic_net_l1_ratio")
        self._study.optimize(
            lambda trial: self._objective(trial, features, target, feature_names),
            n_trials=self.tuning_config.trials,
        )
        self._best_config = replace(self.base_config, l1_ratio=float(self._study.best_params["l1_ratio"]))

    def make_config(self) -> RegularizationPathConfig:
        return self._best_config or self.base_config

    @property
    def best_value(self) -> Optional[float]:
        """Minimum mean CV error reached during tuning, if tuning ran."""
        if self._study is None:
            return None
        return float(self._study.best_value)

    # --- internals -----------------------------------------------------

    def _objective(
        self,
        trial: optuna.Trial,
        features: ArrayLike,
        target: TargetLike,
        feature_names: NamesLike,
    ) -> float:
        config = replace(self.base_config, l1_ratio=trial.suggest_float("l1_ratio", 0.0, 1.0))
        cv: CrossValidatedPath = cross_validate_path(
            features,
            target,
            feature_names,
            config=config,
            folds=self.tuning_config.folds,
            random_state=self.tuning_config.random_seed,
        )
        return float(np.min(cv.cvm))
