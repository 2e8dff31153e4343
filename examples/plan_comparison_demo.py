"""
Plan Comparison Demonstration

This example compares a baseline plan against an equity-focused plan:
- Loading configuration from a YAML file
- Running both plans over several seeds
- Diffing results zone by zone
- Exporting an auditable filing snapshot
"""

import sys
import tempfile
from pathlib import Path

# Add the src directory to the path so we can import gridcase modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridcase import (
    Simulator, GridCaseConfig, create_plan, compare_results, export_snapshot, get_budget_remaining
)
from gridcase.analysis import summarize_runs
from gridcase.config import ConfigFormat
from gridcase.data import ADVOCATE_ASSUMPTIONS, DEFAULT_ASSUMPTIONS, get_project, get_scenario


def load_config() -> GridCaseConfig:
    """Write a config to disk and read it back, the way a study would."""
    print("=" * 60)
    print("CONFIGURATION")
    print("=" * 60)

    config = GridCaseConfig(name="Equity Study", default_seed=7, batch_workers=4)
    config_path = Path(tempfile.gettempdir()) / "gridcase_equity_study.yaml"
    config.save_to_file(config_path, ConfigFormat.YAML)

    loaded = GridCaseConfig.load_from_file(config_path)
    loaded.validate_and_log()
    print(f"✓ Loaded configuration '{loaded.name}' from {config_path}")
    return loaded


def compare_plans(config: GridCaseConfig):
    print("\n" + "=" * 60)
    print("PLAN COMPARISON")
    print("=" * 60)

    simulator = Simulator.from_config(config)
    scenario = get_scenario("sc-heat-dome")

    base = create_plan("plan-base", DEFAULT_ASSUMPTIONS)
    equity = create_plan("plan-equity", ADVOCATE_ASSUMPTIONS, [
        get_project("p-mont-microgrid"),
        get_project("p-mont-battery"),
        get_project("p-rund-hardening"),
        get_project("p-east-smart"),
    ])
    print(f"Equity plan budget remaining: ${get_budget_remaining(equity) / 1e6:.1f}M")

    seeds = range(config.default_seed, config.default_seed + 5)
    base_runs = simulator.run_batch(base, scenario, seeds, max_workers=config.batch_workers)
    equity_runs = simulator.run_batch(equity, scenario, seeds, max_workers=config.batch_workers)

    print("\nBaseline across seeds:")
    print(summarize_runs(base_runs)[["stability_score", "equity_score", "total_outage_hours"]])
    print("\nEquity plan across seeds:")
    print(summarize_runs(equity_runs)[["stability_score", "equity_score", "total_outage_hours"]])

    delta = compare_results(base_runs[0], equity_runs[0])
    print(f"\nSeed {base_runs[0].seed} deltas (equity - base):")
    for name, value in delta.metric_deltas.to_dict().items():
        print(f"  {name:<20} {value:+.3f}")
    print(f"  Improved zones: {', '.join(delta.improved_zones) or 'none'}")
    print(f"  Worsened zones: {', '.join(delta.worsened_zones) or 'none'}")

    snapshot = export_snapshot(equity, scenario, equity_runs[0], delta)
    out_path = Path(tempfile.gettempdir()) / f"{snapshot.snapshot_id}.json"
    out_path.write_text(snapshot.to_json())
    print(f"\n✓ Filing snapshot written to {out_path}")


def main():
    config = load_config()
    compare_plans(config)


if __name__ == "__main__":
    main()
