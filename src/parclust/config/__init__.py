"""Configuration module for parclust parameters."""

from .params import (
    ExperimentParams,
    AlgorithmParams,
    IOParams,
    RuntimeParams,
    ParclustParams,
)
from .loader import load_yaml as load_parclust_params
from .loader import load_default, save_yaml

__all__ = [
    "ExperimentParams",
    "AlgorithmParams",
    "IOParams",
    "RuntimeParams",
    "ParclustParams",
    "load_parclust_params",
    "load_default",
    "save_yaml",
]
