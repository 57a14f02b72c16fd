# Shiori API Module
"""
shiori.api - Python API (Shiori Facade)
"""

from shiori.api.base import (
    DEFAULT_CONFIG_FILES,
    ShioriConfig,
    UpdateOutcome,
    ValidationReport,
)
from shiori.api.config import ConfigManager, find_config_file, load_config
from shiori.api.shiori import Shiori, create_shiori

__all__ = [
    "DEFAULT_CONFIG_FILES",
    "ConfigManager",
    "Shiori",
    "ShioriConfig",
    "UpdateOutcome",
    "ValidationReport",
    "create_shiori",
    "find_config_file",
    "load_config",
]
