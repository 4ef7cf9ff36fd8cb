"""Tests for figure builders and the save helpers."""

from __future__ import annotations

from pathlib import Path
import sys

import numpy as np
import pandas as pd
import plotly.express as px
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from experiments.group_means import run_group_means
from experiments.plots import (
    PlotSaveConfig,
    build_coefficient_paths_figure,
    build_cv_curve_figure,
    build_group_means_figure,
    plot_group_means,
)
from src.metrics.summary import summarize_groups, summary_frame
from src.regression import RegularizationPathConfig, cross_validate_path, glance_cv, tidy_cv, tidy_path


def _summary() -> pd.DataFrame:
    frame = pd.DataFrame(
        {
            "dose": ["0.5", "0.5", "1", "1", "0.5", "0.5", "1", "1"],
            "supp": ["OJ", "OJ", "OJ", "OJ", "VC", "VC", "VC", "VC"],
            "len": [13.0, 15.0, 22.0, 24.0, 7.0, 9.0, 16.0, 18.0],
        }
    )
    return summary_frame(summarize_groups(frame, "dose", "supp", "len"))


# ---------------------------------------------------------------------------
# Group means figure


def test_group_means_draws_markers_after_lines() -> None:
    fig = build_group_means_figure(_summary(), x_label="Dose (mg)", group_label="Supplement type")

    modes = [trace.mode for trace in fig.data]
    assert modes == ["lines", "lines", "markers", "markers"]
    assert [trace.showlegend for trace in fig.data[2:]] == [False, False]
    assert fig.layout.legend.title.text == "Supplement type"
    assert fig.layout.xaxis.title.text == "Dose (mg)"
    assert list(fig.layout.xaxis.ticktext) == ["0.5", "1"]
    assert fig.layout.plot_bgcolor == "white"
    assert fig.layout.xaxis.showline is True


def test_group_means_error_bars_and_dodge() -> None:
    summary = _summary()
    fig = build_group_means_figure(summary, dodge=0.2)

    oj_line, vc_line = fig.data[0], fig.data[1]
    assert list(oj_line.x) == pytest.approx([-0.1, 0.9])
    assert list(vc_line.x) == pytest.approx([0.1, 1.1])
    assert oj_line.error_y.symmetric is True
    expected = summary[summary["group"] == "OJ"]["ci"].tolist()
    assert list(oj_line.error_y.array) == pytest.approx(expected)
    assert list(fig.data[2].x) == list(oj_line.x)


def test_group_means_validates_input() -> None:
    with pytest.raises(ValueError, match="missing columns"):
        build_group_means_figure(pd.DataFrame({"x": [1], "mean": [2.0]}))
    with pytest.raises(ValueError, match="dodge"):
        build_group_means_figure(_summary(), dodge=-1.0)


def test_plot_group_means_writes_html(tmp_path: Path) -> None:
    config = PlotSaveConfig(base_dir=tmp_path, run_tag="run", save_static=False, save_html=True)
    destination = config.for_plot("group_means")
    plot_group_means(_summary(), title="Tooth growth", save_to=destination)

    assert destination.html_path == tmp_path / "run" / "group_means.html"
    assert destination.html_path.exists()
    assert not destination.png_path.exists()


def test_group_order_follows_factor_levels_when_first_cell_is_missing() -> None:
    frame = pd.DataFrame(
        {
            "cyl": pd.Categorical(["4", "4", "6", "6", "6", "6"], categories=["4", "6"], ordered=True),
            "am": pd.Categorical(
                ["manual", "manual", "auto", "auto", "manual", "manual"],
                categories=["auto", "manual"],
                ordered=True,
            ),
            "mpg": [26.0, 30.0, 19.0, 21.0, 20.0, 22.0],
        }
    )
    summary = summary_frame(summarize_groups(frame, "cyl", "am", "mpg"), ["4", "6"], ["auto", "manual"])
    assert summary["group"].tolist() == ["manual", "auto", "manual"]

    fig = build_group_means_figure(summary)
    assert [trace.name for trace in fig.data[:2]] == ["auto", "manual"]
    assert fig.data[0].line.color == px.colors.qualitative.Plotly[0]
    assert list(fig.layout.xaxis.ticktext) == ["4", "6"]


def test_run_group_means_carries_factor_levels() -> None:
    _, summary = run_group_means("toothgrowth")
    assert list(summary["group"].cat.categories) == ["Orange juice", "Ascorbic acid"]
    assert list(summary["x"].cat.categories) == ["0.5", "1", "2"]
    fig = build_group_means_figure(summary)
    assert [trace.name for trace in fig.data[:2]] == ["Orange juice", "Ascorbic acid"]


def test_group_order_is_sorted_for_plain_columns() -> None:
    frame = pd.DataFrame(
        {
            "dose": ["0.5", "0.5", "1", "1", "1", "1"],
            "supp": ["VC", "VC", "OJ", "OJ", "VC", "VC"],
            "len": [7.0, 9.0, 22.0, 24.0, 16.0, 18.0],
        }
    )
    fig = build_group_means_figure(summary_frame(summarize_groups(frame, "dose", "supp", "len")))
    assert [trace.name for trace in fig.data[:2]] == ["OJ", "VC"]


# ---------------------------------------------------------------------------
# Regression figures


@pytest.fixture()
def cv_result():
    rng = np.random.default_rng(3)
    X = pd.DataFrame(rng.normal(size=(60, 3)), columns=["p", "q", "r"])
    y = 2.0 * X["p"].to_numpy() + rng.normal(scale=0.5, size=60)
    return cross_validate_path(X, y, config=RegularizationPathConfig(n_lambdas=20), folds=3, random_state=0)


def test_coefficient_paths_one_line_per_term(cv_result) -> None:
    fig = build_coefficient_paths_figure(tidy_path(cv_result.path), glance_cv(cv_result))
    assert sorted(trace.name for trace in fig.data) == ["p", "q", "r"]
    assert all(len(trace.x) == 20 for trace in fig.data)
    assert len(fig.layout.shapes) == 2


def test_cv_curve_marks_selected_lambdas(cv_result) -> None:
    glance = glance_cv(cv_result)
    fig = build_cv_curve_figure(tidy_cv(cv_result), glance)
    assert len(fig.data) == 1
    assert len(fig.data[0].x) == 20
    xs = sorted(shape.x0 for shape in fig.layout.shapes)
    expected = sorted([np.log(cv_result.lambda_min), np.log(cv_result.lambda_1se)])
    assert xs == pytest.approx(expected)


def test_regression_figures_reject_empty_frames() -> None:
    with pytest.raises(ValueError):
        build_cv_curve_figure(pd.DataFrame(columns=["lambda", "estimate", "std_error", "nzero"]))
    with pytest.raises(ValueError):
        build_coefficient_paths_figure(pd.DataFrame(columns=["term", "step", "estimate", "lambda"]))
