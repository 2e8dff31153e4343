"""Scorecard metrics and tabular analysis of simulation results."""

from typing import List, Dict, Any, Optional, Sequence, Mapping
import numpy as np
import pandas as pd

from .config import EngineConfig
from .events import EventType
from .models import NetworkModel, NodeStatus
from .results import ScorecardMetrics, SimulationResult


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into [lower, upper]."""
    return min(max(value, lower), upper)


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation of two equal-length series.

    Returns 0.0 when either series has no variance or fewer than two points.
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.size != y.size:
        raise ValueError(f"Series lengths differ: {x.size} != {y.size}")
    if x.size < 2:
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denominator == 0:
        return 0.0
    return float(np.sum(dx * dy) / denominator)


def compute_scorecard(
    network: NetworkModel,
    total_capex_usd: float,
    duration_hours: int,
    node_uptime_hours: Mapping[str, int],
    zone_outage_hours: Mapping[str, int],
    node_status_history: Mapping[str, Sequence[NodeStatus]],
    peak_stress_level: float,
    cascade_count: int,
    config: Optional[EngineConfig] = None
) -> ScorecardMetrics:
    """Derive the scorecard from the bookkeeping of a completed run."""
    config = config or EngineConfig()

    total_possible_uptime = len(network.nodes) * duration_hours
    actual_uptime = sum(node_uptime_hours.values())
    if total_possible_uptime > 0:
        stability_score = clamp(actual_uptime / total_possible_uptime, 0, 1)
    else:
        stability_score = 1.0

    # Positive correlation means low-income zones carry more of the outage
    outages = [zone_outage_hours.get(z.id, 0) for z in network.zones]
    inverse_incomes = [1 / z.median_income for z in network.zones]
    correlation = pearson_correlation(outages, inverse_incomes)
    equity_score = clamp(1 - max(0.0, correlation), 0, 1)

    if total_capex_usd > 0:
        cost_efficiency = clamp(stability_score * 100 / (total_capex_usd / 1_000_000), 0, 10)
    else:
        cost_efficiency = stability_score * 10

    nodes_failed_count = sum(
        1 for history in node_status_history.values()
        if NodeStatus.FAILED in history
    )

    return ScorecardMetrics(
        stability_score=stability_score,
        equity_score=equity_score,
        cost_efficiency=cost_efficiency,
        total_outage_hours=sum(zone_outage_hours.values()),
        peak_stress_level=clamp(peak_stress_level, 0, config.peak_stress_cap),
        nodes_failed_count=nodes_failed_count,
        cascade_count=cascade_count,
    )


class TimeSeriesAnalyzer:
    """Builds tabular views of a simulation result."""

    def create_status_frame(self, result: SimulationResult) -> pd.DataFrame:
        """Per-hour status of every node; one column per node."""
        frame = pd.DataFrame({
            node_id: [status.value for status in history]
            for node_id, history in result.node_status_history.items()
        })
        frame.index.name = "hour"
        return frame

    def failed_nodes_per_hour(self, result: SimulationResult) -> pd.Series:
        """Number of failed nodes at the end of each hour."""
        frame = self.create_status_frame(result)
        return (frame == NodeStatus.FAILED.value).sum(axis=1).rename("failed_nodes")

    def node_availability(self, result: SimulationResult) -> pd.Series:
        """Fraction of hours each node spent operational."""
        frame = self.create_status_frame(result)
        return (frame == NodeStatus.OPERATIONAL.value).mean().rename("availability")

    def create_event_frame(self, result: SimulationResult) -> pd.DataFrame:
        """Event log as a frame, one row per entry in log order."""
        columns = ["hour", "type", "node_id", "zone_id", "from_node_id", "message", "severity"]
        return pd.DataFrame([e.to_dict() for e in result.event_log], columns=columns)

    def event_counts(self, result: SimulationResult) -> Dict[str, int]:
        """Count of events per type, including types that never occurred."""
        counts = {event_type.value: 0 for event_type in EventType}
        for event in result.event_log:
            counts[event.type.value] += 1
        return counts

    def create_zone_frame(self, result: SimulationResult, network: NetworkModel) -> pd.DataFrame:
        """Outage hours per zone alongside the zone's demographics."""
        rows = [
            {
                "zone_id": zone.id,
                "name": zone.name,
                "population": zone.population,
                "median_income": zone.median_income,
                "vulnerability": zone.vulnerability,
                "outage_hours": result.outage_by_zone.get(zone.id, 0),
            }
            for zone in network.zones
        ]
        return (
            pd.DataFrame(rows)
            .sort_values("outage_hours", ascending=False, kind="mergesort")
            .set_index("zone_id")
        )


def summarize_runs(results: List[SimulationResult]) -> pd.DataFrame:
    """Scorecard metrics of several runs, one row per seed."""
    metrics: Dict[Any, Dict[str, Any]] = {}

    for result in results:
        metrics[result.seed] = result.metrics.to_dict()

    frame = pd.DataFrame.from_dict(metrics, orient='index')
    frame.index.name = "seed"
    return frame
