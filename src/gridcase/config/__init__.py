"""
Configuration package for GridCase.
Provides hierarchical, validatable configuration management.
"""

from .base import (
    BaseConfig,
    ConfigFormat,
    ValidationLevel,
    ConfigValidationResult,
    EngineConfig
)

from .gridcase_config import (
    MonitoringConfig,
    GridCaseConfig
)

__all__ = [
    # Base configuration classes
    "BaseConfig",
    "ConfigFormat",
    "ValidationLevel",
    "ConfigValidationResult",

    # Engine configuration
    "EngineConfig",

    # Top-level configuration
    "MonitoringConfig",
    "GridCaseConfig"
]
