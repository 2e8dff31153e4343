"""Result containers produced by a simulation run."""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Tuple

from .events import EventLogEntry
from .models import NodeStatus


@dataclass(frozen=True)
class ScorecardMetrics:
    """Aggregate scorecard of one run."""
    stability_score: float  # [0, 1]
    equity_score: float  # [0, 1]
    cost_efficiency: float  # [0, 10]
    total_outage_hours: float
    peak_stress_level: float  # clamped to [0, peak_stress_cap]
    nodes_failed_count: int
    cascade_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "stability_score": self.stability_score,
            "equity_score": self.equity_score,
            "cost_efficiency": self.cost_efficiency,
            "total_outage_hours": self.total_outage_hours,
            "peak_stress_level": self.peak_stress_level,
            "nodes_failed_count": self.nodes_failed_count,
            "cascade_count": self.cascade_count,
        }


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one (plan, scenario, seed) run. Never edited after creation."""
    id: str
    plan_version_id: str
    scenario_id: str
    seed: int
    metrics: ScorecardMetrics
    outage_by_zone: Dict[str, int]
    node_status_history: Dict[str, Tuple[NodeStatus, ...]]
    event_log: Tuple[EventLogEntry, ...]
    created_at: str = field(default="", compare=False)

    @property
    def duration_hours(self) -> int:
        for history in self.node_status_history.values():
            return len(history)
        return 0

    def events_of(self, event_type) -> List[EventLogEntry]:
        """Event log entries of a single type, in log order."""
        return [e for e in self.event_log if e.type == event_type]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "plan_version_id": self.plan_version_id,
            "scenario_id": self.scenario_id,
            "seed": self.seed,
            "metrics": self.metrics.to_dict(),
            "outage_by_zone": dict(self.outage_by_zone),
            "node_status_history": {
                node_id: [status.value for status in history]
                for node_id, history in self.node_status_history.items()
            },
            "event_log": [e.to_dict() for e in self.event_log],
            "created_at": self.created_at,
        }
