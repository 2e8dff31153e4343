"""Pairwise comparison of two simulation results."""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from .config import EngineConfig
from .results import SimulationResult


@dataclass(frozen=True)
class MetricDeltas:
    """Alternate minus base for each compared scorecard metric."""
    stability_score: float
    equity_score: float
    cost_efficiency: float
    total_outage_hours: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "stability_score": self.stability_score,
            "equity_score": self.equity_score,
            "cost_efficiency": self.cost_efficiency,
            "total_outage_hours": self.total_outage_hours,
        }


@dataclass(frozen=True)
class ComparisonDelta:
    """Difference between a base result and an alternate result."""
    base_result_id: str
    alt_result_id: str
    metric_deltas: MetricDeltas
    outage_by_zone_delta: Dict[str, float] = field(default_factory=dict)
    improved_zones: List[str] = field(default_factory=list)
    worsened_zones: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "base_result_id": self.base_result_id,
            "alt_result_id": self.alt_result_id,
            "metric_deltas": self.metric_deltas.to_dict(),
            "outage_by_zone_delta": dict(self.outage_by_zone_delta),
            "improved_zones": list(self.improved_zones),
            "worsened_zones": list(self.worsened_zones),
        }


def compare_results(
    base: SimulationResult,
    alt: SimulationResult,
    config: Optional[EngineConfig] = None
) -> ComparisonDelta:
    """Diff ``alt`` against ``base``.

    Zones are the union of both results, base zones first. A zone whose
    outage change falls inside the deadband counts as neither improved nor
    worsened.
    """
    config = config or EngineConfig()
    deadband = config.outage_deadband_hours

    zone_ids = list(base.outage_by_zone)
    zone_ids.extend(z for z in alt.outage_by_zone if z not in base.outage_by_zone)

    outage_by_zone_delta: Dict[str, float] = {}
    improved_zones: List[str] = []
    worsened_zones: List[str] = []

    for zone_id in zone_ids:
        delta = alt.outage_by_zone.get(zone_id, 0) - base.outage_by_zone.get(zone_id, 0)
        outage_by_zone_delta[zone_id] = delta
        if delta < -deadband:
            improved_zones.append(zone_id)
        elif delta > deadband:
            worsened_zones.append(zone_id)

    return ComparisonDelta(
        base_result_id=base.id,
        alt_result_id=alt.id,
        metric_deltas=MetricDeltas(
            stability_score=alt.metrics.stability_score - base.metrics.stability_score,
            equity_score=alt.metrics.equity_score - base.metrics.equity_score,
            cost_efficiency=alt.metrics.cost_efficiency - base.metrics.cost_efficiency,
            total_outage_hours=alt.metrics.total_outage_hours - base.metrics.total_outage_hours,
        ),
        outage_by_zone_delta=outage_by_zone_delta,
        improved_zones=improved_zones,
        worsened_zones=worsened_zones,
    )
