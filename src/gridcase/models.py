"""Data models for the grid network, projects, assumptions and scenarios.

The network model is reference data owned by an external source. Every
type here is immutable; the engine derives per-run values from them and
never edits them in place.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple, Union
import json
import logging

import yaml

from .exceptions import NetworkError

logger = logging.getLogger("gridcase.models")


class NodeStatus(str, Enum):
    """Operational state of a node or edge."""
    OPERATIONAL = "operational"
    FAILED = "failed"


@dataclass(frozen=True)
class Zone:
    """Aggregated service area."""
    id: str
    name: str
    population: int
    median_income: float
    infra_age_index: float  # [0, 1]
    base_load_mw: float
    vulnerability: float  # [0, 1]
    polygon_2d: Tuple[Tuple[float, float], ...] = ()


@dataclass(frozen=True)
class GridNode:
    """A substation."""
    id: str
    label: str
    zone_id: str
    capacity_mw: float
    critical: bool = False
    status: NodeStatus = NodeStatus.OPERATIONAL
    position: Optional[Tuple[float, float, float]] = None


@dataclass(frozen=True)
class GridEdge:
    """Capacity-limited connection between two nodes."""
    id: str
    from_node_id: str
    to_node_id: str
    max_flow_mw: float  # informational only
    status: NodeStatus = NodeStatus.OPERATIONAL

    def other_end(self, node_id: str) -> str:
        """Return the endpoint opposite ``node_id``."""
        return self.to_node_id if self.from_node_id == node_id else self.from_node_id


@dataclass(frozen=True)
class ProjectEffects:
    """Effects a project has on the nodes and zones it targets."""
    capacity_boost_mw: Optional[float] = None
    vulnerability_reduction: Optional[float] = None
    cascade_resistance: Optional[float] = None
    recovery_speed_boost: Optional[float] = None
    demand_reduction_factor: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, dropping unset effects."""
        return {
            key: value
            for key, value in (
                ("capacity_boost_mw", self.capacity_boost_mw),
                ("vulnerability_reduction", self.vulnerability_reduction),
                ("cascade_resistance", self.cascade_resistance),
                ("recovery_speed_boost", self.recovery_speed_boost),
                ("demand_reduction_factor", self.demand_reduction_factor),
            )
            if value is not None
        }


@dataclass(frozen=True)
class Project:
    """A candidate capital investment."""
    id: str
    name: str
    type: str
    capex_usd: float
    effects: ProjectEffects = field(default_factory=ProjectEffects)
    zone_id: Optional[str] = None
    node_id: Optional[str] = None
    description: str = ""

    def targets_node(self, node: GridNode) -> bool:
        """Whether this project's effects apply to ``node``."""
        return self.node_id == node.id or self.zone_id == node.zone_id

    def targets_zone(self, zone_id: str) -> bool:
        """Whether this project's zone-level effects apply to ``zone_id``."""
        return self.zone_id == zone_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "zone_id": self.zone_id,
            "node_id": self.node_id,
            "capex_usd": self.capex_usd,
            "effects": self.effects.to_dict(),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            type=data.get("type", "unknown"),
            capex_usd=data.get("capex_usd", 0.0),
            effects=ProjectEffects(**data.get("effects", {})),
            zone_id=data.get("zone_id"),
            node_id=data.get("node_id"),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class Assumptions:
    """Policy scalars applied to every zone and node."""
    ev_adoption_rate: float = 0.0
    population_growth_rate: float = 0.0  # percent
    renewable_target: float = 0.0
    budget_cap_usd: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "ev_adoption_rate": self.ev_adoption_rate,
            "population_growth_rate": self.population_growth_rate,
            "renewable_target": self.renewable_target,
            "budget_cap_usd": self.budget_cap_usd,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Assumptions':
        """Create from dictionary."""
        return cls(
            ev_adoption_rate=data.get("ev_adoption_rate", 0.0),
            population_growth_rate=data.get("population_growth_rate", 0.0),
            renewable_target=data.get("renewable_target", 0.0),
            budget_cap_usd=data.get("budget_cap_usd", 0.0),
        )


@dataclass(frozen=True)
class Scenario:
    """A time-indexed stress profile of fixed duration."""
    id: str
    name: str
    duration_hours: int
    demand_curve: Tuple[float, ...]
    weather_stress_curve: Tuple[float, ...]
    color: str = "#888888"
    description: str = ""

    def demand_at(self, hour: int) -> float:
        """Demand multiplier for ``hour``; 1.0 past the end of the curve."""
        if hour < len(self.demand_curve):
            return self.demand_curve[hour]
        return 1.0

    def weather_stress_at(self, hour: int) -> float:
        """Weather stress for ``hour``; 0 past the end of the curve."""
        if hour < len(self.weather_stress_curve):
            return self.weather_stress_curve[hour]
        return 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "duration_hours": self.duration_hours,
            "demand_curve": list(self.demand_curve),
            "weather_stress_curve": list(self.weather_stress_curve),
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Scenario':
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            duration_hours=data["duration_hours"],
            demand_curve=tuple(data.get("demand_curve", ())),
            weather_stress_curve=tuple(data.get("weather_stress_curve", ())),
            color=data.get("color", "#888888"),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class NetworkModel:
    """Static description of zones, nodes, edges and the project catalog."""
    zones: Tuple[Zone, ...]
    nodes: Tuple[GridNode, ...]
    edges: Tuple[GridEdge, ...]
    projects: Tuple[Project, ...] = ()
    _zone_index: Dict[str, Zone] = field(init=False, repr=False, compare=False)
    _node_index: Dict[str, GridNode] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_zone_index", {z.id: z for z in self.zones})
        object.__setattr__(self, "_node_index", {n.id: n for n in self.nodes})

    def get_zone(self, zone_id: str) -> Optional[Zone]:
        """Look up a zone by id."""
        return self._zone_index.get(zone_id)

    def get_node(self, node_id: str) -> Optional[GridNode]:
        """Look up a node by id."""
        return self._node_index.get(node_id)

    def get_project(self, project_id: str) -> Optional[Project]:
        """Look up a catalog project by id."""
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    def nodes_in_zone(self, zone_id: str) -> List[GridNode]:
        """All nodes owned by ``zone_id``, in network order."""
        return [n for n in self.nodes if n.zone_id == zone_id]

    def resolved_edges(self) -> List[GridEdge]:
        """Edges whose endpoints both resolve to known nodes."""
        return [
            e for e in self.edges
            if e.from_node_id in self._node_index and e.to_node_id in self._node_index
        ]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NetworkModel':
        """Create from dictionary."""
        try:
            zones = tuple(
                Zone(
                    id=z["id"],
                    name=z.get("name", z["id"]),
                    population=z.get("population", 0),
                    median_income=z["median_income"],
                    infra_age_index=z.get("infra_age_index", 0.0),
                    base_load_mw=z["base_load_mw"],
                    vulnerability=z.get("vulnerability", 0.0),
                    polygon_2d=tuple(tuple(p) for p in z.get("polygon_2d", ())),
                )
                for z in data.get("zones", [])
            )
            nodes = tuple(
                GridNode(
                    id=n["id"],
                    label=n.get("label", n["id"]),
                    zone_id=n["zone_id"],
                    capacity_mw=n["capacity_mw"],
                    critical=n.get("critical", False),
                    status=NodeStatus(n.get("status", "operational")),
                    position=tuple(n["position"]) if n.get("position") else None,
                )
                for n in data.get("nodes", [])
            )
            edges = tuple(
                GridEdge(
                    id=e["id"],
                    from_node_id=e["from_node_id"],
                    to_node_id=e["to_node_id"],
                    max_flow_mw=e.get("max_flow_mw", 0.0),
                    status=NodeStatus(e.get("status", "operational")),
                )
                for e in data.get("edges", [])
            )
            projects = tuple(Project.from_dict(p) for p in data.get("projects", []))
        except KeyError as e:
            raise NetworkError(f"Missing required network field: {e}")
        except (TypeError, ValueError) as e:
            raise NetworkError(f"Malformed network data: {e}")

        logger.info(
            f"Loaded network: {len(zones)} zones, {len(nodes)} nodes, "
            f"{len(edges)} edges, {len(projects)} projects"
        )
        return cls(zones=zones, nodes=nodes, edges=edges, projects=projects)


def load_network(file_path: Union[str, Path]) -> NetworkModel:
    """Load network reference data from a YAML or JSON file."""
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Network file not found: {file_path}")

    if file_path.suffix.lower() in ['.yaml', '.yml']:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    elif file_path.suffix.lower() == '.json':
        with open(file_path, 'r') as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported file format: {file_path.suffix}")

    return NetworkModel.from_dict(data or {})
