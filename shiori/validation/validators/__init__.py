"""Built-in validators."""

from shiori.validation.validators.duplicate_id import DuplicateIdValidator
from shiori.validation.validators.frontmatter import FrontmatterValidator
from shiori.validation.validators.hierarchy import HierarchyValidator
from shiori.validation.validators.naming import NamingValidator, check_segment

__all__ = [
    "DuplicateIdValidator",
    "FrontmatterValidator",
    "HierarchyValidator",
    "NamingValidator",
    "check_segment",
]
