"""GridCase library initialization."""

from .models import (
    Zone, GridNode, GridEdge, NodeStatus, Project, ProjectEffects,
    Assumptions, Scenario, NetworkModel, load_network
)
from .plan import (
    PlanVersion, create_plan, apply_project, remove_project, with_assumptions,
    get_total_capex, get_budget_remaining
)
from .effects import EffectiveNetwork, resolve_effects
from .events import EventType, Severity, EventLogEntry
from .results import ScorecardMetrics, SimulationResult
from .simulation import Simulator, run_simulation, run_batch
from .comparison import MetricDeltas, ComparisonDelta, compare_results
from .snapshot import AuditTrail, FilingSnapshot, export_snapshot
from .config import EngineConfig, GridCaseConfig
from .exceptions import GridCaseError, InvalidScenarioError

# Import submodules
from . import analysis
from . import data

__version__ = "0.1.0"
__author__ = "GridCase Development Team"
__license__ = "MIT"

__all__ = [
    # Network model
    "Zone", "GridNode", "GridEdge", "NodeStatus", "Project", "ProjectEffects",
    "Assumptions", "Scenario", "NetworkModel", "load_network",

    # Plans
    "PlanVersion", "create_plan", "apply_project", "remove_project", "with_assumptions",
    "get_total_capex", "get_budget_remaining",

    # Simulation
    "EffectiveNetwork", "resolve_effects",
    "EventType", "Severity", "EventLogEntry",
    "ScorecardMetrics", "SimulationResult",
    "Simulator", "run_simulation", "run_batch",

    # Comparison and export
    "MetricDeltas", "ComparisonDelta", "compare_results",
    "AuditTrail", "FilingSnapshot", "export_snapshot",

    # Configuration and errors
    "EngineConfig", "GridCaseConfig",
    "GridCaseError", "InvalidScenarioError",

    "analysis", "data",
]
