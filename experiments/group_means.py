from __future__ import annotations

from typing import List, Optional, Tuple

import pandas as pd

from src.datahub import get_spec, load_dataset
from src.metrics.summary import GroupSummary, SummaryConfig, summarize_groups, summary_frame


def run_group_means(
    dataset: str,
    x: Optional[str] = None,
    group: Optional[str] = None,
    value: Optional[str] = None,
    config: Optional[SummaryConfig] = None,
) -> Tuple[List[GroupSummary], pd.DataFrame]:
    """Summarize ``value`` by (``x``, ``group``) for a bundled dataset.

    Column arguments default to the dataset's registered demo columns.
    """
    spec = get_spec(dataset)
    x = x or spec.demo["x"]
    group = group or spec.demo["group"]
    value = value or spec.demo["value"]

    frame = load_dataset(dataset)
    print(f"[summary] Loaded '{dataset}' ({len(frame)} rows); summarizing {value} by {x} × {group}.")

    summaries = summarize_groups(frame, x, group, value, config)
    degenerate = [summary for summary in summaries if summary.degenerate]
    for summary in degenerate:
        print(f"[summary] Group ({summary.x}, {summary.group}) has a single observation; interval width is zero.")
    print(f"[summary] Computed {len(summaries)} group summaries.")
    return summaries, summary_frame(summaries, _levels(frame[x]), _levels(frame[group]))


def _levels(column: pd.Series) -> Optional[List]:
    if isinstance(column.dtype, pd.CategoricalDtype):
        return column.cat.categories.tolist()
    return None
