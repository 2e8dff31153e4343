"""Plan effects resolver.

Derives the effective network a plan produces: per-node capacity, cascade
resistance and recovery probability, and per-zone load and vulnerability.
Every function here is a pure function of the static network and the plan.
The arithmetic, including evaluation order, is kept exactly as calibrated
because any change shifts simulation outputs.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional
import logging

from .analysis import clamp
from .config import EngineConfig
from .models import GridEdge, GridNode, NetworkModel, Zone
from .plan import PlanVersion

logger = logging.getLogger("gridcase.effects")

UNKNOWN_ZONE_BASE_LOAD = 0.0
UNKNOWN_ZONE_VULNERABILITY = 0.5


def effective_capacity(node: GridNode, plan: PlanVersion) -> float:
    """Boosted node capacity less the EV-adoption penalty."""
    capacity = node.capacity_mw

    for project in plan.projects:
        if project.targets_node(node) and project.effects.capacity_boost_mw:
            capacity += project.effects.capacity_boost_mw

    # EV charging eats into headroom, floored at 85% of boosted capacity
    ev_load = plan.assumptions.ev_adoption_rate * 0.1 * capacity
    return max(capacity - ev_load * 0.1, capacity * 0.85)


def zone_base_load(zone: Optional[Zone], plan: PlanVersion) -> float:
    """Zone load after growth, EV adoption and demand-reduction projects."""
    if zone is None:
        return UNKNOWN_ZONE_BASE_LOAD

    load = zone.base_load_mw
    load *= 1 + plan.assumptions.population_growth_rate / 100
    load *= 1 + plan.assumptions.ev_adoption_rate * 0.25

    for project in plan.projects:
        if project.targets_zone(zone.id) and project.effects.demand_reduction_factor:
            load *= 1 - project.effects.demand_reduction_factor

    return load


def zone_vulnerability(zone: Optional[Zone], plan: PlanVersion) -> float:
    """Zone vulnerability less every matching reduction, floored at 0."""
    if zone is None:
        return UNKNOWN_ZONE_VULNERABILITY

    vulnerability = zone.vulnerability
    for project in plan.projects:
        if project.targets_zone(zone.id) and project.effects.vulnerability_reduction:
            vulnerability = max(0.0, vulnerability - project.effects.vulnerability_reduction)
    return vulnerability


def cascade_resistance(
    node: GridNode,
    plan: PlanVersion,
    config: Optional[EngineConfig] = None
) -> float:
    config = config or EngineConfig()
    resistance = 0.0
    for project in plan.projects:
        if project.targets_node(node) and project.effects.cascade_resistance:
            resistance += project.effects.cascade_resistance
    return clamp(resistance, 0, config.max_cascade_resistance)


def recovery_probability(
    node: GridNode,
    plan: PlanVersion,
    config: Optional[EngineConfig] = None
) -> float:
    config = config or EngineConfig()
    probability = config.base_recovery_probability
    for project in plan.projects:
        if project.targets_node(node) and project.effects.recovery_speed_boost:
            probability += project.effects.recovery_speed_boost * config.recovery_boost_factor
    return clamp(probability, 0, config.max_recovery_probability)


@dataclass(frozen=True)
class EffectiveNetwork:
    """The network as seen by one run of one plan.

    Built once per run; nothing here is shared with other runs.
    """
    nodes: List[GridNode]
    edges: List[GridEdge]
    zone_load: Dict[str, float]
    zone_vulnerability: Dict[str, float]
    cascade_resistance: Dict[str, float]
    recovery_probability: Dict[str, float]

    def load_for(self, zone_id: str) -> float:
        return self.zone_load.get(zone_id, UNKNOWN_ZONE_BASE_LOAD)

    def vulnerability_for(self, zone_id: str) -> float:
        return self.zone_vulnerability.get(zone_id, UNKNOWN_ZONE_VULNERABILITY)

    def get_node(self, node_id: str) -> Optional[GridNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


def resolve_effects(
    network: NetworkModel,
    plan: PlanVersion,
    config: Optional[EngineConfig] = None
) -> EffectiveNetwork:
    """Apply ``plan`` on top of ``network``.

    Nodes come back as fresh copies carrying their effective capacity; edges
    pass through unchanged since no project type alters them yet.
    """
    config = config or EngineConfig()

    nodes = [
        replace(node, capacity_mw=effective_capacity(node, plan))
        for node in network.nodes
    ]
    edges = list(network.edges)

    zone_ids = [z.id for z in network.zones]
    for node in network.nodes:
        if network.get_zone(node.zone_id) is None:
            logger.warning(f"Node {node.id} references unknown zone {node.zone_id}")
            if node.zone_id not in zone_ids:
                zone_ids.append(node.zone_id)

    for project in plan.projects:
        if project.zone_id and network.get_zone(project.zone_id) is None:
            logger.warning(f"Project {project.id} targets unknown zone {project.zone_id}; no effect")

    return EffectiveNetwork(
        nodes=nodes,
        edges=edges,
        zone_load={z: zone_base_load(network.get_zone(z), plan) for z in zone_ids},
        zone_vulnerability={z: zone_vulnerability(network.get_zone(z), plan) for z in zone_ids},
        cascade_resistance={n.id: cascade_resistance(n, plan, config) for n in network.nodes},
        recovery_probability={n.id: recovery_probability(n, plan, config) for n in network.nodes},
    )
