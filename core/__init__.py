"""Core infrastructure components for dependency injection and application foundation."""
from __future__ import annotations

from .container import Container
from .exceptions import (
    FishdexException,
    SpeciesDataError,
    DetectionError,
    BackendError,
    SyncError,
    ConfigurationError,
)
from .result import Result, Success, Failure

__all__ = [
    "Container",
    "FishdexException",
    "SpeciesDataError",
    "DetectionError",
    "BackendError",
    "SyncError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
