# Ordering primitives
"""
Value types with parsing and comparison rules: fractional index, slug,
content path, identifier, element kind, file stats and diagnostics.
"""

from shiori.domain.content_path import LOCALE_PATTERN, ContentPath
from shiori.domain.diagnostics import (
    Diagnostic,
    DiagnosticCode,
    Position,
    Severity,
)
from shiori.domain.fractional_index import FractionalIndex
from shiori.domain.slug import Slug, slug_sort_key
from shiori.domain.types import (
    ALLOWED_CHILDREN,
    ElementKind,
    FileStats,
    is_allowed_child,
)
from shiori.domain.ulid import Ulid

__all__ = [
    "ALLOWED_CHILDREN",
    "ContentPath",
    "Diagnostic",
    "DiagnosticCode",
    "ElementKind",
    "FileStats",
    "FractionalIndex",
    "LOCALE_PATTERN",
    "Position",
    "Severity",
    "Slug",
    "Ulid",
    "is_allowed_child",
    "slug_sort_key",
]
