"""Common Plotly layout: white background, black axis rules, outside ticks."""

from __future__ import annotations

from typing import Optional

import plotly.graph_objects as go

AXIS_RULE = dict(showline=True, linecolor="black", linewidth=1, ticks="outside", mirror=False)


def apply_theme(fig: go.Figure, title: Optional[str] = None, height: int = 500) -> go.Figure:
    """Apply the shared layout to ``fig`` and return it."""
    fig.update_layout(
        template="plotly_white",
        plot_bgcolor="white",
        paper_bgcolor="white",
        height=height,
        title=title,
        title_x=0.5,
        margin=dict(t=60, b=50, l=60, r=30),
    )
    fig.update_xaxes(showgrid=False, zeroline=False, **AXIS_RULE)
    fig.update_yaxes(showgrid=False, zeroline=False, **AXIS_RULE)
    return fig
