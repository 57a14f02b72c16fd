"""Validation engine."""

from shiori.validation.base import Validator
from shiori.validation.pipeline import (
    AVAILABLE_VALIDATORS,
    ValidationPipeline,
    default_validators,
)
from shiori.validation.types import (
    Diagnostic,
    DiagnosticCode,
    Position,
    Severity,
    ValidationOptions,
    ValidationResult,
    ValidationStats,
)
from shiori.validation.validators import (
    DuplicateIdValidator,
    FrontmatterValidator,
    HierarchyValidator,
    NamingValidator,
)

__all__ = [
    "AVAILABLE_VALIDATORS",
    "Diagnostic",
    "DiagnosticCode",
    "DuplicateIdValidator",
    "FrontmatterValidator",
    "HierarchyValidator",
    "NamingValidator",
    "Position",
    "Severity",
    "ValidationOptions",
    "ValidationPipeline",
    "ValidationResult",
    "ValidationStats",
    "Validator",
    "default_validators",
]
