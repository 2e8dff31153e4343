"""Small hand-built networks shared by the test suites."""

import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridcase.models import (
    Assumptions, GridEdge, GridNode, NetworkModel, NodeStatus, Project, ProjectEffects, Scenario, Zone
)


def make_zone(zone_id, base_load_mw=50.0, median_income=50000.0, vulnerability=0.5):
    return Zone(
        id=zone_id,
        name=zone_id.upper(),
        population=10000,
        median_income=median_income,
        infra_age_index=0.5,
        base_load_mw=base_load_mw,
        vulnerability=vulnerability,
    )


def single_node_network(base_load_mw=50.0, capacity_mw=100.0):
    """One zone holding one substation, no edges."""
    return NetworkModel(
        zones=(make_zone("z1", base_load_mw=base_load_mw),),
        nodes=(GridNode("n1", "Node One", "z1", capacity_mw),),
        edges=(),
    )


def cascade_network(extra_edges=()):
    """Triangle A-B-C plus a separate D-E pair, each node in its own zone."""
    zones = tuple(make_zone(f"z-{n}") for n in "abcde")
    nodes = (
        GridNode("A", "Node A", "z-a", 100, critical=True),
        GridNode("B", "Node B", "z-b", 100),
        GridNode("C", "Node C", "z-c", 100),
        GridNode("D", "Node D", "z-d", 100),
        GridNode("E", "Node E", "z-e", 100),
    )
    edges = (
        GridEdge("e-ab", "A", "B", 50),
        GridEdge("e-bc", "B", "C", 50),
        GridEdge("e-ca", "C", "A", 50),
        GridEdge("e-de", "D", "E", 50),
    ) + tuple(extra_edges)
    return NetworkModel(zones=zones, nodes=nodes, edges=edges)


def flat_scenario(duration_hours, demand, stress=0.0, scenario_id="sc-flat"):
    return Scenario(
        id=scenario_id,
        name="Flat",
        duration_hours=duration_hours,
        demand_curve=tuple([demand] * duration_hours),
        weather_stress_curve=tuple([stress] * duration_hours),
    )


def recovery_project(zone_id, project_id=None, boost=5.0):
    return Project(
        id=project_id or f"p-recover-{zone_id}",
        name="Fast Restoration Crew",
        type="restoration",
        capex_usd=1_000_000,
        effects=ProjectEffects(recovery_speed_boost=boost),
        zone_id=zone_id,
    )


def capacity_project(zone_id, boost_mw, project_id=None, capex_usd=1_000_000):
    return Project(
        id=project_id or f"p-cap-{zone_id}",
        name="Transformer Bank",
        type="substation_upgrade",
        capex_usd=capex_usd,
        effects=ProjectEffects(capacity_boost_mw=boost_mw),
        zone_id=zone_id,
    )


class SequenceRng:
    """Deterministic stand-in for the generator that counts its draws."""

    def __init__(self, values, default=0.99):
        self.values = list(values)
        self.default = default
        self.draws = 0

    def __call__(self):
        self.draws += 1
        if self.values:
            return self.values.pop(0)
        return self.default


NO_ASSUMPTIONS = Assumptions()
OPERATIONAL = NodeStatus.OPERATIONAL
FAILED = NodeStatus.FAILED
