"""Custom exception hierarchy for fieldmap."""

from __future__ import annotations


class FieldMapError(Exception):
    """Base class for all custom errors raised by fieldmap."""


# --- 3-layer hierarchy ---

class DomainError(FieldMapError):
    """Base class for domain-level errors."""


class InfrastructureError(FieldMapError):
    """Base class for infrastructure-level errors."""


class ApplicationError(FieldMapError):
    """Base class for application-level errors."""


# --- Domain errors ---

class GeometryError(DomainError):
    """Raised when a geometry violates its vertex-count or closure invariant."""


class DuplicateFeatureError(DomainError):
    """Raised when a feature id is already present in the feature store."""


class MalformedObjectError(DomainError):
    """Raised when a backend feature cannot be turned into a map object."""


# --- Infrastructure errors ---

class ObjectQueryError(InfrastructureError):
    """Raised when the object query endpoint fails or returns garbage."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


# --- Application errors ---

class ExportError(ApplicationError):
    """Raised when drawn features cannot be written to disk."""


# --- Settings ---

class SettingsError(FieldMapError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "ApplicationError",
    "DomainError",
    "DuplicateFeatureError",
    "ExportError",
    "FieldMapError",
    "GeometryError",
    "InfrastructureError",
    "MalformedObjectError",
    "ObjectQueryError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
]
