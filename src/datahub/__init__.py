from .loader import load_dataset, observations_from_frame
from .observation import Observation
from .registry import REGISTRY, DatasetKey, DatasetSpec, get_spec, list_available_datasets

__all__ = [
    "REGISTRY",
    "DatasetKey",
    "DatasetSpec",
    "Observation",
    "get_spec",
    "list_available_datasets",
    "load_dataset",
    "observations_from_frame",
]
