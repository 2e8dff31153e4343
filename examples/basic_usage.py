"""
Basic usage example of the GridCase library.
This example demonstrates core functionality including:
- Building a plan from the reference project catalog
- Running a seeded stress scenario
- Reading the scorecard and event log
- Tabular analysis with pandas
"""

import sys
import logging
from pathlib import Path

# Add the src directory to the path so we can import gridcase modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridcase import create_plan, apply_project, run_simulation, EventType
from gridcase.analysis import TimeSeriesAnalyzer
from gridcase.data import DEFAULT_ASSUMPTIONS, default_network, get_project, get_scenario


def setup_logging():
    """Setup logging for the example."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main():
    setup_logging()
    network = default_network()

    print("=" * 60)
    print("GRIDCASE BASIC USAGE")
    print("=" * 60)

    plan = create_plan("plan-base", DEFAULT_ASSUMPTIONS)
    plan = apply_project(plan, get_project("p-rund-hardening"))
    plan = apply_project(plan, get_project("p-mont-microgrid"))
    print(f"Plan: {plan.id}")
    for project in plan.projects:
        print(f"  {project.name}: ${project.capex_usd / 1e6:.0f}M")

    scenario = get_scenario("sc-freeze")
    print(f"\nScenario: {scenario.name} ({scenario.duration_hours}h)")

    result = run_simulation(plan, scenario, seed=1, network=network)
    metrics = result.metrics

    print("\nScorecard:")
    print(f"  Stability:        {metrics.stability_score:.3f}")
    print(f"  Equity:           {metrics.equity_score:.3f}")
    print(f"  Cost efficiency:  {metrics.cost_efficiency:.2f}")
    print(f"  Outage hours:     {metrics.total_outage_hours}")
    print(f"  Peak stress:      {metrics.peak_stress_level:.2f}")
    print(f"  Nodes failed:     {metrics.nodes_failed_count}")
    print(f"  Cascade failures: {metrics.cascade_count}")

    print("\nFirst events:")
    for event in result.event_log[:10]:
        print(f"  [h{event.hour:>3}] {event.type.value:<17} {event.message}")

    cascades = result.events_of(EventType.CASCADE_FAIL)
    if cascades:
        print(f"\n{len(cascades)} cascade failures, first from {cascades[0].from_node_id}")

    analyzer = TimeSeriesAnalyzer()
    print("\nZones by outage hours:")
    print(analyzer.create_zone_frame(result, network)[["name", "median_income", "outage_hours"]].head(5))

    failed = analyzer.failed_nodes_per_hour(result)
    print(f"\nMost nodes down at once: {failed.max()} (hour {failed.idxmax()})")


if __name__ == "__main__":
    main()
