"""
Tests for the hour-by-hour simulation engine.

These exercise whole runs: determinism, the failure and recovery life cycle
of a node, outage bookkeeping and the bounds of every scorecard metric.
"""

import sys
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest import mock

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from helpers import (
    single_node_network, cascade_network, flat_scenario, recovery_project, capacity_project,
    make_zone, NO_ASSUMPTIONS, FAILED, OPERATIONAL
)
from gridcase.config import EngineConfig, GridCaseConfig
from gridcase.data import DEFAULT_ASSUMPTIONS, default_network, get_scenario, get_project
from gridcase.events import EventType
from gridcase.exceptions import InvalidScenarioError, SimulationError
from gridcase.models import GridEdge, GridNode, NetworkModel, Scenario
from gridcase.plan import create_plan
from gridcase.simulation import Simulator, run_simulation, run_batch, generate_run_id


class TestReferenceRuns(unittest.TestCase):
    """Runs against the reference network and scenarios."""

    @classmethod
    def setUpClass(cls):
        cls.network = default_network()
        cls.freeze = get_scenario("sc-freeze")
        cls.plan = create_plan("plan-base", DEFAULT_ASSUMPTIONS)
        cls.result = run_simulation(cls.plan, cls.freeze, 1)

    def test_same_inputs_same_result(self):
        """Two runs with identical inputs are identical apart from the timestamp."""
        again = run_simulation(self.plan, self.freeze, 1)
        self.assertEqual(again, self.result)
        self.assertEqual(again.event_log, self.result.event_log)
        self.assertEqual(again.node_status_history, self.result.node_status_history)

    def test_run_id(self):
        self.assertEqual(self.result.id, "run_plan-base_sc-freeze_1")
        self.assertEqual(generate_run_id("a", "b", 7), "run_a_b_7")
        self.assertEqual(self.result.plan_version_id, self.plan.id)
        self.assertEqual(self.result.scenario_id, "sc-freeze")
        self.assertEqual(self.result.seed, 1)

    def test_freeze_causes_failures(self):
        """Rundberg is loaded far past its derated capacity from the first hour."""
        metrics = self.result.metrics
        self.assertGreaterEqual(metrics.nodes_failed_count, 1)
        self.assertLess(metrics.stability_score, 1.0)
        self.assertEqual(self.result.node_status_history["n-rundberg-sub"][0], FAILED)
        self.assertTrue(self.result.events_of(EventType.NODE_FAIL))

    def test_reference_scorecard(self):
        """Winter Freeze, seed 1, default assumptions and no projects."""
        metrics = self.result.metrics
        self.assertAlmostEqual(metrics.stability_score, 0.03050595238095238, places=12)
        self.assertAlmostEqual(metrics.equity_score, 0.7180233917508756, places=12)
        self.assertEqual(metrics.total_outage_hours, 1303)
        self.assertEqual(metrics.nodes_failed_count, 14)
        self.assertEqual(metrics.cascade_count, 3)

    def test_history_covers_every_hour(self):
        self.assertEqual(set(self.result.node_status_history), {n.id for n in self.network.nodes})
        for history in self.result.node_status_history.values():
            self.assertEqual(len(history), self.freeze.duration_hours)
        self.assertEqual(self.result.duration_hours, 96)

    def test_outage_matches_status_history(self):
        """A zone is out for exactly the hours in which any of its nodes is failed."""
        history = self.result.node_status_history
        for zone in self.network.zones:
            nodes = self.network.nodes_in_zone(zone.id)
            expected = sum(
                1 for hour in range(self.freeze.duration_hours)
                if any(history[n.id][hour] == FAILED for n in nodes)
            )
            self.assertEqual(self.result.outage_by_zone[zone.id], expected, zone.id)
            self.assertLessEqual(self.result.outage_by_zone[zone.id], self.freeze.duration_hours)

        self.assertEqual(self.result.outage_by_zone["z-sunset-valley"], 0)
        self.assertEqual(self.result.metrics.total_outage_hours, sum(self.result.outage_by_zone.values()))

    def test_counts_match_logs(self):
        history = self.result.node_status_history
        failed_nodes = sum(1 for h in history.values() if FAILED in h)
        self.assertEqual(self.result.metrics.nodes_failed_count, failed_nodes)
        self.assertEqual(self.result.metrics.cascade_count, len(self.result.events_of(EventType.CASCADE_FAIL)))

    def test_stability_matches_uptime(self):
        history = self.result.node_status_history
        uptime = sum(h.count(OPERATIONAL) for h in history.values())
        expected = uptime / (len(self.network.nodes) * self.freeze.duration_hours)
        self.assertAlmostEqual(self.result.metrics.stability_score, expected)

    def test_metric_bounds(self):
        for scenario_id in ("sc-freeze", "sc-heat-dome", "sc-ev-spike"):
            for seed in (1, 42):
                metrics = run_simulation(self.plan, get_scenario(scenario_id), seed).metrics
                self.assertTrue(0 <= metrics.stability_score <= 1)
                self.assertTrue(0 <= metrics.equity_score <= 1)
                self.assertTrue(0 <= metrics.cost_efficiency <= 10)
                self.assertTrue(0 <= metrics.peak_stress_level <= 2)

    def test_events_in_hour_order(self):
        hours = [e.hour for e in self.result.event_log]
        self.assertEqual(hours, sorted(hours))

    def test_overwhelming_capacity_prevents_all_failures(self):
        """With ample headroom on every node nothing warns or fails."""
        projects = [
            capacity_project(zone.id, 10_000)
            for zone in self.network.zones if self.network.nodes_in_zone(zone.id)
        ]
        boosted = run_simulation(create_plan("plan-boost", DEFAULT_ASSUMPTIONS, projects), self.freeze, 1)
        self.assertGreaterEqual(boosted.metrics.stability_score, self.result.metrics.stability_score)
        self.assertEqual(boosted.metrics.stability_score, 1.0)
        self.assertEqual(boosted.metrics.nodes_failed_count, 0)
        self.assertEqual(boosted.metrics.total_outage_hours, 0)
        self.assertEqual(boosted.event_log, ())

    def test_network_not_mutated(self):
        plan = create_plan("plan", DEFAULT_ASSUMPTIONS, [get_project("p-dt-upgrade")])
        run_simulation(plan, self.freeze, 3)
        self.assertEqual(default_network().get_node("n-downtown-core").capacity_mw, 150)


class TestNodeLifecycle(unittest.TestCase):
    """Failure, recovery and re-warning on a single node."""

    def setUp(self):
        self.network = single_node_network(base_load_mw=50, capacity_mw=100)
        self.plan = create_plan("plan", NO_ASSUMPTIONS, [recovery_project("z1")])
        demand = [4.0] + [0.0] * 99 + [1.8] * 20
        self.scenario = Scenario(
            id="sc-lifecycle",
            name="Lifecycle",
            duration_hours=120,
            demand_curve=tuple(demand),
            weather_stress_curve=tuple([0.0] * 120),
        )
        self.result = run_simulation(self.plan, self.scenario, 5, network=self.network)

    def test_event_sequence(self):
        """Warn, fail, recover, then warn again on the next overload."""
        types = [e.type for e in self.result.event_log]
        self.assertEqual(types, [
            EventType.OVERLOAD_WARNING,
            EventType.NODE_FAIL,
            EventType.NODE_RECOVER,
            EventType.OVERLOAD_WARNING,
        ])
        warning, failure, recovery, second_warning = self.result.event_log
        self.assertEqual(warning.hour, 0)
        self.assertEqual(failure.hour, 0)
        self.assertIn("200% stressed", warning.message)
        self.assertGreaterEqual(recovery.hour, 2)
        self.assertIn(f"after {recovery.hour}h", recovery.message)
        self.assertEqual(second_warning.hour, 100)

    def test_outage_hours_match_recovery(self):
        recovery = self.result.events_of(EventType.NODE_RECOVER)[0]
        self.assertEqual(self.result.outage_by_zone["z1"], recovery.hour)
        self.assertAlmostEqual(self.result.metrics.stability_score, (120 - recovery.hour) / 120)
        history = self.result.node_status_history["n1"]
        self.assertEqual(history[recovery.hour - 1], FAILED)
        self.assertEqual(history[recovery.hour], OPERATIONAL)

    def test_scorecard(self):
        metrics = self.result.metrics
        self.assertEqual(metrics.nodes_failed_count, 1)
        self.assertEqual(metrics.cascade_count, 0)
        self.assertEqual(metrics.peak_stress_level, 2.0)
        # A single zone has no income spread to correlate against
        self.assertEqual(metrics.equity_score, 1.0)

    def test_no_recovery_before_minimum_downtime(self):
        config = EngineConfig(min_down_hours=200)
        result = run_simulation(self.plan, self.scenario, 5, network=self.network, config=config)
        self.assertEqual(result.events_of(EventType.NODE_RECOVER), [])
        self.assertEqual(result.outage_by_zone["z1"], 120)
        self.assertEqual(result.metrics.stability_score, 0.0)

    def test_unlimited_stress_with_zero_capacity(self):
        network = single_node_network(base_load_mw=50, capacity_mw=0)
        result = run_simulation(create_plan("plan"), flat_scenario(3, 1.0), 1, network=network)
        self.assertEqual(result.metrics.peak_stress_level, 2.0)
        self.assertEqual(result.node_status_history["n1"][0], FAILED)


class TestCascadeRecovery(unittest.TestCase):
    """Nodes felled by a cascade recover like any other failed node."""

    def test_cascaded_node_recovers(self):
        zones = (make_zone("z-a", base_load_mw=50), make_zone("z-b", base_load_mw=0))
        network = NetworkModel(
            zones=zones,
            nodes=(GridNode("A", "Node A", "z-a", 100), GridNode("B", "Node B", "z-b", 100)),
            edges=(GridEdge("e-ab", "A", "B", 50),),
        )
        config = EngineConfig(cascade_probability=1.0, critical_cascade_probability=1.0)
        plan = create_plan("plan", NO_ASSUMPTIONS, [recovery_project("z-a"), recovery_project("z-b")])
        scenario = Scenario("sc-spike", "Spike", 100, tuple([4.0] + [0.0] * 99), (0.0,))

        result = run_simulation(plan, scenario, 11, network=network, config=config)

        cascades = result.events_of(EventType.CASCADE_FAIL)
        self.assertEqual(len(cascades), 1)
        self.assertEqual(cascades[0].node_id, "B")
        self.assertEqual(cascades[0].from_node_id, "A")
        self.assertEqual(cascades[0].hour, 0)
        self.assertEqual(result.metrics.cascade_count, 1)

        recovered = {e.node_id: e for e in result.events_of(EventType.NODE_RECOVER)}
        self.assertIn("B", recovered)
        self.assertGreaterEqual(recovered["B"].hour, 2)
        self.assertEqual(result.outage_by_zone["z-b"], recovered["B"].hour)

    def test_cascade_contained_to_component(self):
        network = cascade_network()
        config = EngineConfig(cascade_probability=1.0, critical_cascade_probability=1.0)
        # Only node B is ever overloaded
        network = NetworkModel(
            zones=tuple(make_zone(z.id, base_load_mw=60 if z.id == "z-b" else 0) for z in network.zones),
            nodes=network.nodes,
            edges=network.edges,
        )
        scenario = flat_scenario(4, 2.0)
        result = run_simulation(create_plan("plan"), scenario, 1, network=network, config=config)
        for node_id in ("D", "E"):
            self.assertNotIn(FAILED, result.node_status_history[node_id])
        for node_id in ("A", "B", "C"):
            self.assertEqual(result.node_status_history[node_id][0], FAILED)


class TestScenarioHandling(unittest.TestCase):
    """Scenario validation and curve defaults."""

    def setUp(self):
        self.network = single_node_network()
        self.plan = create_plan("plan")

    def test_non_positive_duration_rejected(self):
        for duration in (0, -5):
            scenario = Scenario("sc-bad", "Bad", duration, (1.0,), (0.0,))
            with self.assertRaises(InvalidScenarioError):
                run_simulation(self.plan, scenario, 1, network=self.network)

    def test_empty_curve_rejected(self):
        scenario = Scenario("sc-bad", "Bad", 10, (), (0.0,))
        with self.assertRaises(InvalidScenarioError):
            run_simulation(self.plan, scenario, 1, network=self.network)

    def test_short_curves_use_defaults(self):
        """Demand defaults to 1.0 and weather stress to 0 past the curve end."""
        short = Scenario("sc-short", "Short", 6, (1.0,), (0.0,))
        full = flat_scenario(6, 1.0, 0.0, scenario_id="sc-short")
        with self.assertLogs("gridcase.validation", level="WARNING"):
            short_result = run_simulation(self.plan, short, 9, network=self.network)
        full_result = run_simulation(self.plan, full, 9, network=self.network)
        self.assertEqual(short_result.node_status_history, full_result.node_status_history)
        self.assertEqual(short_result.metrics, full_result.metrics)

    def test_seed_must_be_integer(self):
        with self.assertRaises(SimulationError):
            run_simulation(self.plan, flat_scenario(2, 1.0), "1", network=self.network)


class TestBatchRuns(unittest.TestCase):
    """Multi-seed runs."""

    def test_batch_preserves_seed_order(self):
        plan = create_plan("plan-base", DEFAULT_ASSUMPTIONS)
        scenario = get_scenario("sc-ev-spike")
        seeds = [3, 1, 2]
        results = run_batch(plan, scenario, seeds, max_workers=3)
        self.assertEqual([r.seed for r in results], seeds)
        for seed, result in zip(seeds, results):
            self.assertEqual(result, run_simulation(plan, scenario, seed))

    def test_simulator_from_config(self):
        config = GridCaseConfig(engine=EngineConfig(cascade_probability=0.0, critical_cascade_probability=0.0))
        simulator = Simulator.from_config(config)
        result = simulator.run(create_plan("plan", DEFAULT_ASSUMPTIONS), get_scenario("sc-freeze"), 1)
        self.assertEqual(result.metrics.cascade_count, 0)
        self.assertIs(simulator.config, config.engine)

    def test_batch_uses_configured_workers(self):
        simulator = Simulator.from_config(GridCaseConfig(batch_workers=2), network=single_node_network())
        self.assertEqual(simulator.batch_workers, 2)

        with mock.patch("gridcase.simulation.ThreadPoolExecutor", wraps=ThreadPoolExecutor) as executor:
            results = simulator.run_batch(create_plan("plan"), flat_scenario(4, 1.0), [1, 2, 3])
        self.assertEqual(executor.call_args.kwargs["max_workers"], 2)
        self.assertEqual([r.seed for r in results], [1, 2, 3])

        with mock.patch("gridcase.simulation.ThreadPoolExecutor", wraps=ThreadPoolExecutor) as executor:
            simulator.run_batch(create_plan("plan"), flat_scenario(4, 1.0), [1], max_workers=1)
        self.assertEqual(executor.call_args.kwargs["max_workers"], 1)


if __name__ == "__main__":
    unittest.main()
