"""Validation utilities for scenarios, networks and plans."""

from typing import Any, Optional, Union, Type, Tuple
import math
import logging

from .config import ConfigValidationResult
from .exceptions import ValidationTypeError, ValidationRangeError, InvalidScenarioError
from .models import NetworkModel, Scenario
from .plan import PlanVersion, get_total_capex

logger = logging.getLogger("gridcase.validation")

class Validator:
    """Base validator class."""

    @staticmethod
    def validate_type(value: Any, expected_type: Union[Type, Tuple[Type, ...]]) -> None:
        """Validate value type."""
        if not isinstance(value, expected_type) or isinstance(value, bool):
            name = getattr(expected_type, "__name__", None) or "/".join(t.__name__ for t in expected_type)
            raise ValidationTypeError(
                f"Expected type {name}, got {type(value).__name__}"
            )

    @staticmethod
    def validate_range(
        value: Union[int, float],
        min_value: Optional[Union[int, float]] = None,
        max_value: Optional[Union[int, float]] = None
    ) -> None:
        """Validate numeric range."""
        if min_value is not None and value < min_value:
            raise ValidationRangeError(f"Value {value} is below minimum {min_value}")

        if max_value is not None and value > max_value:
            raise ValidationRangeError(f"Value {value} exceeds maximum {max_value}")

class ScenarioValidator(Validator):
    """Validator for stress scenarios."""

    @staticmethod
    def validate_curve(name: str, curve: Any) -> None:
        """Validate one hourly curve: non-empty and all finite numbers."""
        if curve is None or len(curve) == 0:
            raise InvalidScenarioError(f"{name} must not be empty")
        for hour, value in enumerate(curve):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidScenarioError(f"{name}[{hour}] is not a finite number: {value!r}")

    @staticmethod
    def validate(scenario: Scenario) -> None:
        """Raise ``InvalidScenarioError`` if ``scenario`` cannot be run."""
        try:
            Validator.validate_type(scenario.duration_hours, int)
            Validator.validate_range(scenario.duration_hours, min_value=1)
        except (ValidationTypeError, ValidationRangeError) as e:
            raise InvalidScenarioError(
                f"Scenario {scenario.id}: duration_hours must be a positive integer ({e})"
            )

        ScenarioValidator.validate_curve(f"Scenario {scenario.id}: demand_curve", scenario.demand_curve)
        ScenarioValidator.validate_curve(
            f"Scenario {scenario.id}: weather_stress_curve", scenario.weather_stress_curve
        )

        if len(scenario.demand_curve) < scenario.duration_hours:
            logger.warning(
                f"Scenario {scenario.id}: demand curve covers {len(scenario.demand_curve)} of "
                f"{scenario.duration_hours} hours; remaining hours default to 1.0"
            )
        if len(scenario.weather_stress_curve) < scenario.duration_hours:
            logger.warning(
                f"Scenario {scenario.id}: weather stress curve covers {len(scenario.weather_stress_curve)} of "
                f"{scenario.duration_hours} hours; remaining hours default to 0"
            )

class NetworkValidator(Validator):
    """Validator for network reference data.

    Problems are reported, never raised: the engine degrades unknown
    references to no-op effects.
    """

    @staticmethod
    def check(network: NetworkModel) -> ConfigValidationResult:
        """Collect errors and warnings about ``network``."""
        result = ConfigValidationResult(is_valid=True)

        for kind, items in (("zone", network.zones), ("node", network.nodes), ("edge", network.edges)):
            seen = set()
            for item in items:
                if item.id in seen:
                    result.add_error(f"Duplicate {kind} id: {item.id}")
                seen.add(item.id)

        for zone in network.zones:
            if zone.median_income <= 0:
                result.add_error(f"Zone {zone.id}: median income must be > 0")
            if not 0 <= zone.vulnerability <= 1:
                result.add_warning(f"Zone {zone.id}: vulnerability {zone.vulnerability} outside [0, 1]")

        for node in network.nodes:
            if network.get_zone(node.zone_id) is None:
                result.add_warning(f"Node {node.id} references unknown zone {node.zone_id}")
            if node.capacity_mw <= 0:
                result.add_warning(f"Node {node.id}: capacity {node.capacity_mw} MW is not positive")

        for edge in network.edges:
            for endpoint in (edge.from_node_id, edge.to_node_id):
                if network.get_node(endpoint) is None:
                    result.add_warning(f"Edge {edge.id} references unknown node {endpoint}")

        return result

def check_budget(plan: PlanVersion) -> ConfigValidationResult:
    """Warn when a plan's capex exceeds its budget cap."""
    result = ConfigValidationResult(is_valid=True)
    capex = get_total_capex(plan)
    cap = plan.assumptions.budget_cap_usd
    if cap > 0 and capex > cap:
        result.add_warning(f"Plan {plan.id}: capex ${capex:,.0f} exceeds budget cap ${cap:,.0f}")
    return result
