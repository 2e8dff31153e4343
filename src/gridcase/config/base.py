"""
Configuration base classes for GridCase.
Provides hierarchical, validatable configuration with YAML/JSON persistence.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Union, List
from pathlib import Path
import yaml
import json
from enum import Enum
import logging


class ConfigFormat(Enum):
    """Supported configuration file formats."""
    YAML = "yaml"
    JSON = "json"


class ValidationLevel(Enum):
    """Configuration validation levels."""
    STRICT = "strict"      # Fail on any validation error
    WARN = "warn"          # Log warnings but continue
    PERMISSIVE = "permissive"  # Ignore validation errors


@dataclass
class ConfigValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add a validation error."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a validation warning."""
        self.warnings.append(message)

    def extend(self, other: 'ConfigValidationResult', prefix: str = "") -> None:
        """Fold another result into this one, prefixing its messages."""
        for error in other.errors:
            self.add_error(f"{prefix}{error}")
        for warning in other.warnings:
            self.add_warning(f"{prefix}{warning}")


class BaseConfig(ABC):
    """Abstract base class for all configuration objects."""

    def __init__(self, validation_level: ValidationLevel = ValidationLevel.STRICT):
        self.validation_level = validation_level
        self._logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def validate(self) -> ConfigValidationResult:
        """Validate the configuration."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseConfig':
        """Create configuration from dictionary."""
        pass

    def save_to_file(self, file_path: Union[str, Path], format: ConfigFormat = ConfigFormat.YAML) -> None:
        """Save configuration to file."""
        file_path = Path(file_path)
        data = self.to_dict()

        if format == ConfigFormat.YAML:
            with open(file_path, 'w') as f:
                yaml.dump(data, f, default_flow_style=False, indent=2)
        elif format == ConfigFormat.JSON:
            with open(file_path, 'w') as f:
                json.dump(data, f, indent=2)
        else:
            raise ValueError(f"Unsupported format: {format}")

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> 'BaseConfig':
        """Load configuration from file."""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        if file_path.suffix.lower() in ['.yaml', '.yml']:
            with open(file_path, 'r') as f:
                data = yaml.safe_load(f)
        elif file_path.suffix.lower() == '.json':
            with open(file_path, 'r') as f:
                data = json.load(f)
        else:
            raise ValueError(f"Unsupported file format: {file_path.suffix}")

        return cls.from_dict(data or {})

    def merge(self, other: 'BaseConfig') -> 'BaseConfig':
        """Merge this configuration with another."""
        self_dict = self.to_dict()
        other_dict = other.to_dict()
        merged = self._deep_merge(self_dict, other_dict)
        return self.__class__.from_dict(merged)

    @staticmethod
    def _deep_merge(dict1: Dict[str, Any], dict2: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = dict1.copy()

        for key, value in dict2.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = BaseConfig._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


@dataclass
class EngineConfig(BaseConfig):
    """Tunable constants of the stress, cascade and recovery model.

    The defaults reproduce the reference model exactly. Changing any of them
    changes simulation outputs for every seed.
    """
    # Stress / failure
    overload_warning_ratio: float = 0.85
    failure_headroom: float = 0.15  # threshold = 1.0 + rng() * headroom
    secondary_failure_ratio: float = 0.92
    secondary_failure_factor: float = 0.12  # chance = factor * vulnerability
    weather_derating: float = 0.4

    # Cascade
    critical_cascade_probability: float = 0.25
    cascade_probability: float = 0.15
    max_cascade_resistance: float = 0.8

    # Recovery
    base_recovery_probability: float = 0.03
    recovery_boost_factor: float = 0.05
    max_recovery_probability: float = 0.25
    min_down_hours: int = 2

    # Reporting
    peak_stress_cap: float = 2.0
    outage_deadband_hours: float = 0.5

    def __post_init__(self):
        super().__init__()

    def validate(self) -> ConfigValidationResult:
        """Validate engine configuration."""
        result = ConfigValidationResult(is_valid=True)

        probabilities = [
            ("critical_cascade_probability", self.critical_cascade_probability),
            ("cascade_probability", self.cascade_probability),
            ("max_cascade_resistance", self.max_cascade_resistance),
            ("base_recovery_probability", self.base_recovery_probability),
            ("max_recovery_probability", self.max_recovery_probability),
        ]
        for name, value in probabilities:
            if not 0 <= value <= 1:
                result.add_error(f"{name} must be between 0 and 1, got {value}")

        if self.overload_warning_ratio <= 0:
            result.add_error(f"Overload warning ratio must be > 0, got {self.overload_warning_ratio}")

        if self.failure_headroom < 0:
            result.add_error(f"Failure headroom must be >= 0, got {self.failure_headroom}")

        if not 0 <= self.weather_derating < 1:
            result.add_error(f"Weather derating must be in [0, 1), got {self.weather_derating}")

        if self.min_down_hours < 0:
            result.add_error(f"Minimum down hours must be >= 0, got {self.min_down_hours}")

        if self.outage_deadband_hours < 0:
            result.add_error(f"Outage deadband must be >= 0, got {self.outage_deadband_hours}")

        if self.base_recovery_probability > self.max_recovery_probability:
            result.add_warning(
                f"Base recovery probability {self.base_recovery_probability} exceeds "
                f"cap {self.max_recovery_probability}"
            )

        if self.secondary_failure_ratio < self.overload_warning_ratio:
            result.add_warning("Secondary failures can trigger below the overload warning ratio")

        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "overload_warning_ratio": self.overload_warning_ratio,
            "failure_headroom": self.failure_headroom,
            "secondary_failure_ratio": self.secondary_failure_ratio,
            "secondary_failure_factor": self.secondary_failure_factor,
            "weather_derating": self.weather_derating,
            "critical_cascade_probability": self.critical_cascade_probability,
            "cascade_probability": self.cascade_probability,
            "max_cascade_resistance": self.max_cascade_resistance,
            "base_recovery_probability": self.base_recovery_probability,
            "recovery_boost_factor": self.recovery_boost_factor,
            "max_recovery_probability": self.max_recovery_probability,
            "min_down_hours": self.min_down_hours,
            "peak_stress_cap": self.peak_stress_cap,
            "outage_deadband_hours": self.outage_deadband_hours
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineConfig':
        """Create from dictionary."""
        defaults = cls()
        return cls(**{
            key: data.get(key, value)
            for key, value in defaults.to_dict().items()
        })
