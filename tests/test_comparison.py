"""
Tests for result comparison and filing snapshots.
"""

import json
import sys
import unittest
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridcase.comparison import compare_results
from gridcase.config import EngineConfig
from gridcase.data import DEFAULT_ASSUMPTIONS, get_scenario, get_project
from gridcase.events import EventLogEntry
from gridcase.models import Scenario
from gridcase.plan import PlanVersion, create_plan
from gridcase.results import ScorecardMetrics, SimulationResult
from gridcase.simulation import run_simulation
from gridcase.snapshot import export_snapshot, TOOL_VERSION


def make_result(result_id, outage_by_zone, stability=0.9):
    metrics = ScorecardMetrics(
        stability_score=stability,
        equity_score=0.5,
        cost_efficiency=1.0,
        total_outage_hours=sum(outage_by_zone.values()),
        peak_stress_level=1.2,
        nodes_failed_count=1,
        cascade_count=0,
    )
    return SimulationResult(
        id=result_id,
        plan_version_id="plan",
        scenario_id="sc-test",
        seed=1,
        metrics=metrics,
        outage_by_zone=outage_by_zone,
        node_status_history={},
        event_log=(),
    )


class TestCompareResults(unittest.TestCase):
    """Metric deltas and zone classification."""

    @classmethod
    def setUpClass(cls):
        freeze = get_scenario("sc-freeze")
        cls.base = run_simulation(create_plan("plan-base", DEFAULT_ASSUMPTIONS), freeze, 1)
        hardened = create_plan(
            "plan-base", DEFAULT_ASSUMPTIONS,
            [get_project("p-rund-hardening"), get_project("p-mont-microgrid")]
        )
        cls.alt = run_simulation(hardened, freeze, 1)

    def test_deltas_are_alt_minus_base(self):
        delta = compare_results(self.base, self.alt)
        self.assertEqual(delta.base_result_id, self.base.id)
        self.assertEqual(delta.alt_result_id, self.alt.id)
        self.assertAlmostEqual(
            delta.metric_deltas.stability_score,
            self.alt.metrics.stability_score - self.base.metrics.stability_score
        )
        self.assertAlmostEqual(
            delta.metric_deltas.total_outage_hours,
            self.alt.metrics.total_outage_hours - self.base.metrics.total_outage_hours
        )

    def test_swapping_inputs_negates(self):
        forward = compare_results(self.base, self.alt)
        backward = compare_results(self.alt, self.base)
        for name, value in forward.metric_deltas.to_dict().items():
            self.assertAlmostEqual(value, -backward.metric_deltas.to_dict()[name])
        for zone_id, value in forward.outage_by_zone_delta.items():
            self.assertAlmostEqual(value, -backward.outage_by_zone_delta[zone_id])
        self.assertEqual(forward.improved_zones, backward.worsened_zones)
        self.assertEqual(forward.worsened_zones, backward.improved_zones)

    def test_self_comparison_is_neutral(self):
        delta = compare_results(self.base, self.base)
        self.assertEqual(delta.improved_zones, [])
        self.assertEqual(delta.worsened_zones, [])
        self.assertTrue(all(v == 0 for v in delta.metric_deltas.to_dict().values()))

    def test_deadband_and_zone_union(self):
        base = make_result("base", {"z1": 10, "z2": 5, "z3": 3})
        alt = make_result("alt", {"z1": 9.6, "z2": 7, "z4": 1})
        delta = compare_results(base, alt)

        self.assertEqual(list(delta.outage_by_zone_delta), ["z1", "z2", "z3", "z4"])
        self.assertAlmostEqual(delta.outage_by_zone_delta["z1"], -0.4)
        self.assertEqual(delta.outage_by_zone_delta["z3"], -3)
        self.assertEqual(delta.outage_by_zone_delta["z4"], 1)
        self.assertEqual(delta.improved_zones, ["z3"])
        self.assertEqual(delta.worsened_zones, ["z2", "z4"])

    def test_custom_deadband(self):
        base = make_result("base", {"z1": 10})
        alt = make_result("alt", {"z1": 8})
        self.assertEqual(compare_results(base, alt).improved_zones, ["z1"])
        wide = EngineConfig(outage_deadband_hours=3)
        self.assertEqual(compare_results(base, alt, wide).improved_zones, [])


class TestExportSnapshot(unittest.TestCase):
    """Write-once filing snapshots."""

    def setUp(self):
        self.scenario = get_scenario("sc-ev-spike")
        self.plan = create_plan("plan-base", DEFAULT_ASSUMPTIONS, [get_project("p-mueller-ev")])
        self.result = run_simulation(self.plan, self.scenario, 42)

    def test_bundles_inputs_without_recomputing(self):
        snapshot = export_snapshot(self.plan, self.scenario, self.result)
        self.assertIs(snapshot.result, self.result)
        self.assertIs(snapshot.plan_version, self.plan)
        self.assertIs(snapshot.scenario, self.scenario)
        self.assertIsNone(snapshot.delta)

    def test_audit_trail(self):
        trail = export_snapshot(self.plan, self.scenario, self.result).audit_trail
        self.assertEqual(trail.run_id, self.result.id)
        self.assertEqual(trail.seed, 42)
        self.assertEqual(trail.plan_version_id, self.plan.id)
        self.assertEqual(trail.scenario_id, "sc-ev-spike")
        self.assertEqual(trail.tool_version, TOOL_VERSION)

    def test_snapshot_ids_are_unique(self):
        first = export_snapshot(self.plan, self.scenario, self.result)
        second = export_snapshot(self.plan, self.scenario, self.result)
        self.assertNotEqual(first.snapshot_id, second.snapshot_id)
        self.assertTrue(first.snapshot_id.endswith(self.result.id))

    def test_json_export_with_delta(self):
        base = run_simulation(create_plan("plan-base", DEFAULT_ASSUMPTIONS), self.scenario, 42)
        delta = compare_results(base, self.result)
        payload = json.loads(export_snapshot(self.plan, self.scenario, self.result, delta).to_json())

        self.assertEqual(payload["audit_trail"]["seed"], 42)
        self.assertEqual(payload["delta"]["alt_result_id"], self.result.id)
        self.assertEqual(len(payload["result"]["event_log"]), len(self.result.event_log))
        self.assertEqual(payload["scenario"]["duration_hours"], 72)

    def test_snapshot_json_reads_back(self):
        """Scenario and event log survive a trip through the exported JSON."""
        payload = json.loads(export_snapshot(self.plan, self.scenario, self.result).to_json())

        self.assertEqual(Scenario.from_dict(payload["scenario"]), self.scenario)
        events = tuple(EventLogEntry.from_dict(e) for e in payload["result"]["event_log"])
        self.assertEqual(events, self.result.event_log)
        self.assertEqual(PlanVersion.from_dict(payload["plan_version"]), self.plan)


if __name__ == "__main__":
    unittest.main()
