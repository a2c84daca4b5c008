"""Custom exception hierarchy for the application."""
from __future__ import annotations


class FishdexException(Exception):
    """Base exception for all fishdex errors."""
    pass


class SpeciesDataError(FishdexException):
    """Raised when the species reference dataset cannot be read."""
    pass


class DetectionError(FishdexException):
    """Raised when the fish detection API call fails."""
    pass


class BackendError(FishdexException):
    """Raised when the backend data store rejects a request."""
    pass


class SyncError(FishdexException):
    """Raised when reconciling the reference dataset with the backend fails."""
    pass


class ConfigurationError(FishdexException):
    """Raised when configuration is invalid or missing."""
    pass
