"""
Main GridCase configuration class that integrates all configuration components.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import logging
import os

from ..exceptions import ConfigurationError
from .base import (
    BaseConfig, ConfigValidationResult, ValidationLevel, EngineConfig
)


@dataclass
class MonitoringConfig:
    """Configuration for logging and diagnostics."""
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_events: bool = False  # mirror every event log entry at DEBUG

    def validate(self) -> ConfigValidationResult:
        """Validate monitoring configuration."""
        result = ConfigValidationResult(is_valid=True)

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            result.add_error(f"Invalid log level: {self.log_level}")

        return result


@dataclass
class GridCaseConfig(BaseConfig):
    """Top-level GridCase configuration."""

    name: str = "GridCase"
    engine: EngineConfig = field(default_factory=EngineConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    default_seed: int = 1
    batch_workers: int = 4
    config_version: str = "1.0"

    def __post_init__(self):
        """Initialize after dataclass creation."""
        super().__init__()
        self._setup_logging()

    def _setup_logging(self):
        """Setup logging based on monitoring configuration."""
        level = getattr(logging, self.monitoring.log_level, None)
        if not isinstance(level, int):
            raise ConfigurationError(f"Invalid log level: {self.monitoring.log_level}")

        logger = logging.getLogger("gridcase")
        logger.setLevel(level)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Console handler
        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        # File handler if specified, once per file
        if self.monitoring.log_file and not self._has_file_handler(logger, self.monitoring.log_file):
            file_handler = logging.FileHandler(self.monitoring.log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    @staticmethod
    def _has_file_handler(logger: logging.Logger, log_file: str) -> bool:
        path = os.path.abspath(log_file)
        return any(
            isinstance(h, logging.FileHandler) and h.baseFilename == path
            for h in logger.handlers
        )

    def validate(self) -> ConfigValidationResult:
        """Validate the entire configuration."""
        result = ConfigValidationResult(is_valid=True)

        if not self.name:
            result.add_error("Name cannot be empty")

        if self.batch_workers < 1:
            result.add_error(f"Batch workers must be >= 1, got {self.batch_workers}")

        if not isinstance(self.default_seed, int):
            result.add_error(f"Default seed must be an integer, got {type(self.default_seed).__name__}")

        # Prefix errors and warnings with component name
        result.extend(self.engine.validate(), prefix="engine: ")
        result.extend(self.monitoring.validate(), prefix="monitoring: ")

        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "name": self.name,
            "engine": self.engine.to_dict(),
            "monitoring": {
                "log_level": self.monitoring.log_level,
                "log_file": self.monitoring.log_file,
                "log_events": self.monitoring.log_events
            },
            "default_seed": self.default_seed,
            "batch_workers": self.batch_workers,
            "config_version": self.config_version
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridCaseConfig':
        """Create configuration from dictionary."""
        monitoring_data = data.get("monitoring", {})
        monitoring = MonitoringConfig(
            log_level=monitoring_data.get("log_level", "INFO"),
            log_file=monitoring_data.get("log_file"),
            log_events=monitoring_data.get("log_events", False)
        )

        return cls(
            name=data.get("name", "GridCase"),
            engine=EngineConfig.from_dict(data.get("engine", {})),
            monitoring=monitoring,
            default_seed=data.get("default_seed", 1),
            batch_workers=data.get("batch_workers", 4),
            config_version=data.get("config_version", "1.0")
        )

    def validate_and_log(self) -> bool:
        """Validate configuration and log results.

        Under ``ValidationLevel.STRICT`` an invalid configuration raises
        ``ConfigurationError``; ``WARN`` only logs; ``PERMISSIVE`` logs
        nothing and always reports success.
        """
        if self.validation_level == ValidationLevel.PERMISSIVE:
            return True

        result = self.validate()

        logger = logging.getLogger("gridcase.config")

        if result.is_valid:
            logger.info("Configuration validation passed")
        else:
            logger.error("Configuration validation failed")
            for error in result.errors:
                logger.error(f"Validation error: {error}")

        for warning in result.warnings:
            logger.warning(f"Validation warning: {warning}")

        if not result.is_valid and self.validation_level == ValidationLevel.STRICT:
            raise ConfigurationError("; ".join(result.errors))

        return result.is_valid
