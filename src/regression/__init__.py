"""Regularized regression paths, cross-validation and tidy summaries."""

from .cv import CrossValidatedPath, cross_validate_path
from .path import RegularizationPath, RegularizationPathConfig, fit_path, lambda_grid
from .tidiers import augment_path, coefficient_table, glance_cv, glance_path, tidy_cv, tidy_path
from .tuning import ElasticNetOptunaTuner, ElasticNetTuningConfig

__all__ = [
    "CrossValidatedPath",
    "ElasticNetOptunaTuner",
    "ElasticNetTuningConfig",
    "RegularizationPath",
    "RegularizationPathConfig",
    "augment_path",
    "coefficient_table",
    "cross_validate_path",
    "fit_path",
    "glance_cv",
    "glance_path",
    "lambda_grid",
    "tidy_cv",
    "tidy_path",
]
