"""Static configuration for bundled datasets and output paths."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, TypedDict


class DemoColumns(TypedDict):
    x: str
    group: str
    value: str


# Bundled CSVs ship inside the package next to this module.
DATA_ROOT = Path(__file__).resolve().parent / "data"

# Default directories used by the Typer CLI; callers may override these.
DEFAULT_POST_PATH = Path("posts/index.html")

# ---------------------------------------------------------------------------
# Dataset-specific label maps.

MTCARS_LABELS: Dict[str, Dict[object, str]] = {
    "am": {0: "auto", 1: "manual"},
    "vs": {0: "V-shaped", 1: "straight"},
}

TOOTHGROWTH_LABELS: Dict[str, Dict[object, str]] = {
    "supp": {"OJ": "Orange juice", "VC": "Ascorbic acid"},
}


__all__ = [
    "DATA_ROOT",
    "DEFAULT_POST_PATH",
    "DemoColumns",
    "MTCARS_LABELS",
    "TOOTHGROWTH_LABELS",
]
