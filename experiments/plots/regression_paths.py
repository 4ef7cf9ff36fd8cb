"""Coefficient-path and cross-validation-curve plots for tidy regression frames."""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from src.regression.base import INTERCEPT_TERM
from .save_config import PlotSaveDestinations, write_figure
from .theme import apply_theme


def build_coefficient_paths_figure(
    tidy: pd.DataFrame,
    glance: Optional[pd.DataFrame] = None,
    title: Optional[str] = None,
) -> go.Figure:
    """Plot each term's estimate against log(lambda).

    Tidy frames omit zero estimates; those steps are filled back in with zeros so a
    lasso path visibly leaves the axis where a term enters the model.
    """
    if tidy.empty:
        raise ValueError("Cannot plot an empty tidy frame.")
    terms = tidy[tidy["term"] != INTERCEPT_TERM]
    step_lambda = tidy.drop_duplicates("step").set_index("step")["lambda"].sort_index()

    wide = terms.pivot_table(index="step", columns="term", values="estimate").reindex(step_lambda.index)
    wide = wide.fillna(0.0)
    wide["log_lambda"] = np.log(step_lambda.to_numpy())
    long = wide.melt(id_vars="log_lambda", var_name="term", value_name="estimate")

    fig = px.line(
        long,
        x="log_lambda",
        y="estimate",
        color="term",
        labels={"log_lambda": "log(lambda)", "estimate": "Coefficient", "term": "Term"},
    )
    apply_theme(fig, title=title)
    if glance is not None:
        _add_lambda_markers(fig, glance)
    return fig


def build_cv_curve_figure(
    tidy_cv: pd.DataFrame,
    glance: Optional[pd.DataFrame] = None,
    title: Optional[str] = None,
) -> go.Figure:
    """Mean cross-validated error with ±1 SE bars against log(lambda)."""
    if tidy_cv.empty:
        raise ValueError("Cannot plot an empty cross-validation frame.")
    fig = go.Figure(
        go.Scatter(
            x=np.log(tidy_cv["lambda"].to_numpy()),
            y=tidy_cv["estimate"],
            mode="markers",
            name="CV error",
            marker=dict(color="firebrick", size=6),
            error_y=dict(type="data", array=tidy_cv["std_error"], symmetric=True, color="darkgrey", width=2),
            customdata=tidy_cv[["nzero"]].to_numpy(),
            hovertemplate="log(lambda)=%{x:.3f}<br>MSE=%{y:.3f}<br>nonzero=%{customdata[0]}<extra></extra>",
        )
    )
    apply_theme(fig, title=title)
    fig.update_xaxes(title_text="log(lambda)")
    fig.update_yaxes(title_text="Mean-squared error")
    if glance is not None:
        _add_lambda_markers(fig, glance)
    return fig


def plot_coefficient_paths(
    tidy: pd.DataFrame,
    glance: Optional[pd.DataFrame] = None,
    title: Optional[str] = None,
    save_to: Optional[PlotSaveDestinations] = None,
) -> go.Figure:
    fig = build_coefficient_paths_figure(tidy, glance, title)
    write_figure(fig, save_to)
    return fig


def plot_cv_curve(
    tidy_cv: pd.DataFrame,
    glance: Optional[pd.DataFrame] = None,
    title: Optional[str] = None,
    save_to: Optional[PlotSaveDestinations] = None,
) -> go.Figure:
    fig = build_cv_curve_figure(tidy_cv, glance, title)
    write_figure(fig, save_to)
    return fig


def _add_lambda_markers(fig: go.Figure, glance: pd.DataFrame) -> None:
    row = glance.iloc[0]
    for column, label in (("lambda_min", "lambda.min"), ("lambda_1se", "lambda.1se")):
        if column in glance.columns:
            fig.add_vline(
                x=float(np.log(row[column])),
                line_dash="dash",
                line_color="grey",
                annotation_text=label,
                annotation_position="top",
            )
