"""Hour-by-hour stress, failure, cascade and recovery simulation.

Each hour runs three phases in a fixed order:

1. Stress evaluation: every operational node compares its zone's load to
   its weather-derated capacity, may warn, and may fail. A failure
   immediately triggers a cascade sweep from that node.
2. Recovery: every failed node that has been down long enough draws once
   for a chance to come back.
3. Bookkeeping: node status, uptime and zone outage hours are recorded.

All three phases draw from one seeded generator. The order and number of
draws is part of the results contract, so two runs with the same plan,
scenario, seed and network produce identical results.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set
import logging
import math

from .analysis import compute_scorecard
from .cascade import CascadePropagator
from .config import EngineConfig, GridCaseConfig
from .data import default_network
from .effects import EffectiveNetwork, resolve_effects
from .events import EventLogEntry, EventType, Severity
from .exceptions import SimulationError, ValidationTypeError
from .models import GridNode, NetworkModel, NodeStatus, Scenario
from .plan import PlanVersion, get_total_capex
from .results import SimulationResult
from .rng import Mulberry32
from .validation import NetworkValidator, ScenarioValidator, Validator, check_budget


def generate_run_id(plan_id: str, scenario_id: str, seed: int) -> str:
    return f"run_{plan_id}_{scenario_id}_{seed}"


class _SimulationRun:
    """Mutable state of a single run. Created and discarded by ``Simulator.run``."""

    def __init__(
        self,
        effective: EffectiveNetwork,
        scenario: Scenario,
        seed: int,
        config: EngineConfig,
        zone_ids: List[str],
        log_events: bool,
        logger: logging.Logger
    ):
        self.effective = effective
        self.scenario = scenario
        self.config = config
        self.rng = Mulberry32(seed)
        self.cascade = CascadePropagator(effective, config)
        self.log_events = log_events
        self.logger = logger

        self.statuses: Dict[str, NodeStatus] = {n.id: NodeStatus.OPERATIONAL for n in effective.nodes}
        self.uptime_hours: Dict[str, int] = {n.id: 0 for n in effective.nodes}
        self.zone_outage_hours: Dict[str, int] = {z: 0 for z in zone_ids}
        self.status_history: Dict[str, List[NodeStatus]] = {n.id: [] for n in effective.nodes}
        self.event_log: List[EventLogEntry] = []
        self.warned: Set[str] = set()
        self.failed_at: Dict[str, int] = {}
        self.peak_stress_level = 0.0
        self.cascade_count = 0

    def _emit(self, event: EventLogEntry) -> None:
        self.event_log.append(event)
        if self.log_events:
            self.logger.debug(f"Hour {event.hour}: {event.type.value} {event.node_id}: {event.message}")

    def stress_ratio(self, node: GridNode, demand: float, weather_stress: float) -> float:
        """Zone load over the node's weather-derated capacity."""
        zone_load = self.effective.load_for(node.zone_id) * demand
        vulnerability = self.effective.vulnerability_for(node.zone_id)
        effective_capacity = node.capacity_mw * (1 - weather_stress * self.config.weather_derating * vulnerability)
        if effective_capacity <= 0:
            return math.inf
        return zone_load / effective_capacity

    def evaluate_stress(self, hour: int) -> None:
        demand = self.scenario.demand_at(hour)
        weather_stress = self.scenario.weather_stress_at(hour)

        for node in self.effective.nodes:
            if self.statuses[node.id] == NodeStatus.FAILED:
                continue

            stress = self.stress_ratio(node, demand, weather_stress)
            vulnerability = self.effective.vulnerability_for(node.zone_id)
            self.peak_stress_level = max(self.peak_stress_level, stress)

            if stress > self.config.overload_warning_ratio and node.id not in self.warned:
                self.warned.add(node.id)
                self._emit(EventLogEntry(
                    hour=hour,
                    type=EventType.OVERLOAD_WARNING,
                    node_id=node.id,
                    zone_id=node.zone_id,
                    message=f"{node.label} approaching capacity ({stress * 100:.0f}% stressed)",
                    severity=Severity.WARNING,
                ))

            # The secondary draw only happens when the threshold test fails
            failure_threshold = 1.0 + self.rng() * self.config.failure_headroom
            if stress >= failure_threshold or (
                stress > self.config.secondary_failure_ratio
                and self.rng() < self.config.secondary_failure_factor * vulnerability
            ):
                self.fail(node, hour, stress)

    def fail(self, node: GridNode, hour: int, stress: float) -> None:
        self.statuses[node.id] = NodeStatus.FAILED
        self.failed_at[node.id] = hour
        self.warned.discard(node.id)
        self._emit(EventLogEntry(
            hour=hour,
            type=EventType.NODE_FAIL,
            node_id=node.id,
            zone_id=node.zone_id,
            message=f"{node.label} failed: load exceeded capacity (stress={stress * 100:.0f}%)",
            severity=Severity.CRITICAL,
        ))

        cascaded = self.cascade.propagate(
            node.id, hour, self.statuses, self.failed_at, self.rng, self.event_log
        )
        self.cascade_count += len(cascaded)
        if self.log_events:
            for event in self.event_log[len(self.event_log) - len(cascaded):]:
                self.logger.debug(f"Hour {event.hour}: {event.type.value} {event.node_id}: {event.message}")

    def attempt_recovery(self, hour: int) -> None:
        for node in self.effective.nodes:
            if self.statuses[node.id] != NodeStatus.FAILED:
                continue

            hours_failed = hour - self.failed_at.get(node.id, hour)
            if hours_failed < self.config.min_down_hours:
                continue

            chance = self.effective.recovery_probability.get(node.id, self.config.base_recovery_probability)
            if self.rng() < chance:
                self.statuses[node.id] = NodeStatus.OPERATIONAL
                self.warned.discard(node.id)
                del self.failed_at[node.id]
                self._emit(EventLogEntry(
                    hour=hour,
                    type=EventType.NODE_RECOVER,
                    node_id=node.id,
                    zone_id=node.zone_id,
                    message=f"{node.label} restored after {hours_failed}h outage",
                    severity=Severity.INFO,
                ))

    def record_hour(self) -> None:
        # Any failed node puts its whole zone in outage for the hour
        zones_failed: Dict[str, bool] = {}
        for node in self.effective.nodes:
            status = self.statuses[node.id]
            self.status_history[node.id].append(status)
            if status == NodeStatus.OPERATIONAL:
                self.uptime_hours[node.id] += 1
            else:
                zones_failed[node.zone_id] = True

        for zone_id in zones_failed:
            self.zone_outage_hours[zone_id] = self.zone_outage_hours.get(zone_id, 0) + 1


class Simulator:
    """Runs plans against stress scenarios on a fixed network."""

    def __init__(
        self,
        network: Optional[NetworkModel] = None,
        config: Optional[EngineConfig] = None,
        log_events: bool = False,
        batch_workers: int = 4
    ):
        """Initialize simulator with a network and engine configuration."""
        self.network = network if network is not None else default_network()
        self.config = config or EngineConfig()
        self.log_events = log_events
        self.batch_workers = batch_workers
        self.logger = logging.getLogger("gridcase.simulation")

        network_check = NetworkValidator.check(self.network)
        for error in network_check.errors:
            self.logger.warning(f"Network error: {error}")
        for warning in network_check.warnings:
            self.logger.warning(f"Network warning: {warning}")

    @classmethod
    def from_config(cls, config: GridCaseConfig, network: Optional[NetworkModel] = None) -> 'Simulator':
        return cls(
            network=network,
            config=config.engine,
            log_events=config.monitoring.log_events,
            batch_workers=config.batch_workers,
        )

    def _zone_ids(self) -> List[str]:
        zone_ids = [z.id for z in self.network.zones]
        for node in self.network.nodes:
            if node.zone_id not in zone_ids:
                zone_ids.append(node.zone_id)
        return zone_ids

    def run(self, plan: PlanVersion, scenario: Scenario, seed: int) -> SimulationResult:
        """Run one simulation.

        Raises ``InvalidScenarioError`` before any run state exists if the
        scenario cannot be simulated.
        """
        ScenarioValidator.validate(scenario)
        try:
            Validator.validate_type(seed, int)
        except ValidationTypeError as e:
            raise SimulationError(f"Seed must be an integer: {e}")

        for warning in check_budget(plan).warnings:
            self.logger.warning(warning)

        self.logger.info(
            f"Starting simulation: plan={plan.id}, scenario={scenario.id}, seed={seed}, "
            f"hours={scenario.duration_hours}, nodes={len(self.network.nodes)}"
        )

        effective = resolve_effects(self.network, plan, self.config)
        state = _SimulationRun(
            effective, scenario, seed, self.config, self._zone_ids(), self.log_events, self.logger
        )

        try:
            for hour in range(scenario.duration_hours):
                state.evaluate_stress(hour)
                state.attempt_recovery(hour)
                state.record_hour()
        except Exception as e:
            raise SimulationError(f"Simulation failed: {str(e)}") from e

        metrics = compute_scorecard(
            network=self.network,
            total_capex_usd=get_total_capex(plan),
            duration_hours=scenario.duration_hours,
            node_uptime_hours=state.uptime_hours,
            zone_outage_hours=state.zone_outage_hours,
            node_status_history=state.status_history,
            peak_stress_level=state.peak_stress_level,
            cascade_count=state.cascade_count,
            config=self.config,
        )

        self.logger.info(
            f"Simulation complete: stability={metrics.stability_score:.3f}, "
            f"equity={metrics.equity_score:.3f}, failed_nodes={metrics.nodes_failed_count}, "
            f"cascades={metrics.cascade_count}, draws={state.rng.draws}"
        )

        return SimulationResult(
            id=generate_run_id(plan.id, scenario.id, seed),
            plan_version_id=plan.id,
            scenario_id=scenario.id,
            seed=seed,
            metrics=metrics,
            outage_by_zone=dict(state.zone_outage_hours),
            node_status_history={k: tuple(v) for k, v in state.status_history.items()},
            event_log=tuple(state.event_log),
            created_at=datetime.now(timezone.utc).isoformat(),
        )

    def run_batch(
        self,
        plan: PlanVersion,
        scenario: Scenario,
        seeds: Iterable[int],
        max_workers: Optional[int] = None
    ) -> List[SimulationResult]:
        """Run one simulation per seed; results come back in seed order.

        ``max_workers`` defaults to the simulator's ``batch_workers``.

        Runs share nothing mutable, so they are fanned out over a thread pool.
        """
        seeds = list(seeds)
        if max_workers is None:
            max_workers = self.batch_workers
        ScenarioValidator.validate(scenario)
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as pool:
            return list(pool.map(lambda seed: self.run(plan, scenario, seed), seeds))


def run_simulation(
    plan: PlanVersion,
    scenario: Scenario,
    seed: int,
    network: Optional[NetworkModel] = None,
    config: Optional[EngineConfig] = None
) -> SimulationResult:
    """Run ``plan`` against ``scenario`` with ``seed``."""
    return Simulator(network, config).run(plan, scenario, seed)


def run_batch(
    plan: PlanVersion,
    scenario: Scenario,
    seeds: Iterable[int],
    network: Optional[NetworkModel] = None,
    config: Optional[EngineConfig] = None,
    max_workers: int = 4
) -> List[SimulationResult]:
    """Run ``plan`` against ``scenario`` once per seed."""
    return Simulator(network, config).run_batch(plan, scenario, seeds, max_workers=max_workers)
