"""Plotting utilities for the demo results."""

from .group_means import build_group_means_figure, plot_group_means
from .regression_paths import (
    build_coefficient_paths_figure,
    build_cv_curve_figure,
    plot_coefficient_paths,
    plot_cv_curve,
)
from .save_config import PlotSaveConfig, PlotSaveDestinations, write_figure
from .theme import apply_theme

__all__ = [
    "apply_theme",
    "build_coefficient_paths_figure",
    "build_cv_curve_figure",
    "build_group_means_figure",
    "plot_coefficient_paths",
    "plot_cv_curve",
    "plot_group_means",
    "write_figure",
    "PlotSaveConfig",
    "PlotSaveDestinations",
]
