"""Interaction line plot of group means with symmetric error bars."""

from __future__ import annotations

from typing import Dict, Hashable, List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .save_config import PlotSaveDestinations, write_figure
from .theme import apply_theme

REQUIRED_COLUMNS = ("x", "group", "mean", "ci")
DEFAULT_DODGE = 0.1


def build_group_means_figure(
    summary: pd.DataFrame,
    x_label: Optional[str] = None,
    group_label: Optional[str] = None,
    value_label: str = "Mean",
    title: Optional[str] = None,
    dodge: float = DEFAULT_DODGE,
    legend_inside: bool = True,
) -> go.Figure:
    """Draw one line per ``group`` level across the ``x`` levels of a summary frame.

    ``summary`` is the output of `summary_frame`: columns ``x``, ``group``, ``mean``
    and ``ci`` (the half-width).  The x levels are placed at integer positions and
    each series is shifted by ``dodge`` so overlapping error bars stay readable.
    Lines and error bars go in first; markers are separate traces added last so
    they sit on top.
    """
    missing = [column for column in REQUIRED_COLUMNS if column not in summary.columns]
    if missing:
        raise ValueError(f"Summary frame is missing columns {missing}")
    if summary.empty:
        raise ValueError("Cannot plot an empty summary frame.")
    if dodge < 0:
        raise ValueError("dodge must be non-negative.")

    x_levels = _ordered_levels(summary["x"])
    groups = _ordered_levels(summary["group"])
    positions = {level: idx for idx, level in enumerate(x_levels)}
    offsets = {group: (idx - (len(groups) - 1) / 2.0) * dodge for idx, group in enumerate(groups)}
    palette = px.colors.qualitative.Plotly
    colors = {group: palette[idx % len(palette)] for idx, group in enumerate(groups)}

    series: Dict[Hashable, pd.DataFrame] = {}
    for group in groups:
        cell = summary[summary["group"] == group].copy()
        cell["_pos"] = [positions[level] + offsets[group] for level in cell["x"]]
        series[group] = cell.sort_values("_pos")

    fig = go.Figure()
    for group, cell in series.items():
        fig.add_trace(
            go.Scatter(
                x=cell["_pos"],
                y=cell["mean"],
                mode="lines",
                name=str(group),
                legendgroup=str(group),
                line=dict(color=colors[group], width=2),
                error_y=dict(type="data", array=cell["ci"], symmetric=True, width=4, color=colors[group]),
                hoverinfo="skip",
            )
        )
    for group, cell in series.items():
        fig.add_trace(
            go.Scatter(
                x=cell["_pos"],
                y=cell["mean"],
                mode="markers",
                name=str(group),
                legendgroup=str(group),
                showlegend=False,
                marker=dict(size=9, color="white", line=dict(color=colors[group], width=2)),
                customdata=cell[["ci"]].to_numpy(),
                hovertemplate=f"{group}<br>mean=%{{y:.3f}} ± %{{customdata[0]:.3f}}<extra></extra>",
            )
        )

    apply_theme(fig, title=title)
    fig.update_xaxes(
        title_text=x_label or "x",
        tickmode="array",
        tickvals=list(range(len(x_levels))),
        ticktext=[str(level) for level in x_levels],
    )
    fig.update_yaxes(title_text=value_label)
    fig.update_layout(legend_title_text=group_label or "group")
    if legend_inside:
        fig.update_layout(legend=dict(x=0.99, xanchor="right", y=0.01, yanchor="bottom"))
    return fig


def plot_group_means(
    summary: pd.DataFrame,
    x_label: Optional[str] = None,
    group_label: Optional[str] = None,
    value_label: str = "Mean",
    title: Optional[str] = None,
    dodge: float = DEFAULT_DODGE,
    save_to: Optional[PlotSaveDestinations] = None,
) -> go.Figure:
    """Build the group-means figure, then save or show it."""
    fig = build_group_means_figure(
        summary,
        x_label=x_label,
        group_label=group_label,
        value_label=value_label,
        title=title,
        dodge=dodge,
    )
    write_figure(fig, save_to)
    return fig


def _ordered_levels(column: pd.Series) -> List[Hashable]:
    """Levels present in ``column``: category order for categoricals, sorted otherwise."""
    present = set(column.dropna().tolist())
    if isinstance(column.dtype, pd.CategoricalDtype):
        return [level for level in column.cat.categories.tolist() if level in present]
    try:
        return sorted(present)
    except TypeError:
        # Mixed key types have no natural order; keep the summary row order.
        return list(dict.fromkeys(column.dropna().tolist()))
