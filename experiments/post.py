"""Assemble demo output into a single self-contained HTML article."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

import pandas as pd
import plotly.graph_objects as go
from plotly.offline import get_plotlyjs_version

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<script src="{plotlyjs_url}"></script>
<style>
body {{ max-width: 52rem; margin: 2rem auto; font-family: Georgia, serif; line-height: 1.5; }}
table {{ border-collapse: collapse; margin: 1rem 0; }}
th, td {{ padding: 0.25rem 0.6rem; border-bottom: 1px solid #ddd; text-align: right; }}
</style>
</head>
<body>
<h1>{title}</h1>
{body}
</body>
</html>
"""


def plotlyjs_url() -> str:
    """CDN address of the plotly.js bundle matching the installed plotly package."""
    return f"https://cdn.plot.ly/plotly-{get_plotlyjs_version()}.min.js"


@dataclass
class Section:
    """One heading with prose paragraphs, then optional tables and figures."""

    heading: str
    paragraphs: Sequence[str] = ()
    tables: Sequence[pd.DataFrame] = ()
    figures: Sequence[go.Figure] = field(default_factory=list)


def render_section(section: Section, float_format: str = "{:.3f}") -> str:
    parts: List[str] = [f"<h2>{html.escape(section.heading)}</h2>"]
    parts.extend(f"<p>{html.escape(paragraph)}</p>" for paragraph in section.paragraphs)
    for table in section.tables:
        parts.append(table.to_html(index=False, float_format=float_format.format, border=0))
    for fig in section.figures:
        # plotly.js is loaded once in the page head.
        parts.append(fig.to_html(full_html=False, include_plotlyjs=False))
    return "\n".join(parts)


def render_post(
    sections: Sequence[Section],
    output: Path,
    title: str = "Notes",
) -> Path:
    """Write ``sections`` to ``output`` as one HTML page and return the path."""
    if not sections:
        raise ValueError("A post needs at least one section.")
    body = "\n".join(render_section(section) for section in sections)
    output.parent.mkdir(parents=True, exist_ok=True)
    page = PAGE_TEMPLATE.format(title=html.escape(title), plotlyjs_url=plotlyjs_url(), body=body)
    output.write_text(page, encoding="utf-8")
    print(f"[post] Wrote {len(sections)} sections → {output}")
    return output
