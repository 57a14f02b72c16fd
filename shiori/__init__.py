"""Shiori - content tree validation and metadata generation for multi-locale docs.

Example:
    >>> from shiori import Shiori
    >>> shiori = Shiori({"repo_root": "docs"})
    >>> report = shiori.validate()
    >>> if report.is_valid:
    ...     shiori.generate()
"""

__version__ = "0.1.0"

from shiori.api import Shiori, ShioriConfig
from shiori.errors import ShioriError

__all__ = ["Shiori", "ShioriConfig", "ShioriError", "__version__"]
