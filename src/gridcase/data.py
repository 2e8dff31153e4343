"""Reference data: an Austin-like network, project catalog, scenarios and presets.

Coordinates are grid units: X east-west, Z north-south, Y up. Zone polygons
are ground-plane ``(x, z)`` footprints.
"""

from typing import List, Optional
import math

from .models import (
    Assumptions, GridEdge, GridNode, NetworkModel, Project, ProjectEffects, Scenario, Zone
)

ZONES = (
    Zone("z-downtown", "Downtown", 42000, 78000, 0.65, 85, 0.35,
         ((-2.5, -1.5), (2.5, -1.5), (2.5, 1.5), (-2.5, 1.5))),
    Zone("z-east", "East Austin", 55000, 52000, 0.78, 70, 0.62,
         ((2.5, -2), (6.5, -2), (6.5, 2), (2.5, 2))),
    Zone("z-south", "South Congress", 38000, 68000, 0.55, 60, 0.30,
         ((-2.5, -4.5), (2.5, -4.5), (2.5, -1.5), (-2.5, -1.5))),
    Zone("z-north", "North Loop", 47000, 61000, 0.60, 65, 0.40,
         ((-2.5, 1.5), (2.5, 1.5), (2.5, 4.5), (-2.5, 4.5))),
    Zone("z-westlake", "Westlake", 28000, 120000, 0.35, 75, 0.18,
         ((-8, -2), (-4.5, -2), (-4.5, 2), (-8, 2))),
    Zone("z-mueller", "Mueller", 33000, 72000, 0.30, 45, 0.22,
         ((2.5, 2), (6.5, 2), (6.5, 5.5), (2.5, 5.5))),
    Zone("z-hyde-park", "Hyde Park", 29000, 85000, 0.70, 40, 0.28,
         ((-2.5, 4.5), (2.5, 4.5), (2.5, 7.5), (-2.5, 7.5))),
    Zone("z-rundberg", "Rundberg", 41000, 38000, 0.85, 55, 0.82,
         ((-2.5, 7.5), (2.5, 7.5), (2.5, 10.5), (-2.5, 10.5))),
    Zone("z-montopolis", "Montopolis", 31000, 41000, 0.80, 48, 0.75,
         ((2.5, -5.5), (6.5, -5.5), (6.5, -2), (2.5, -2))),
    Zone("z-buda", "Buda / Kyle", 52000, 58000, 0.40, 72, 0.35,
         ((-2.5, -7.5), (2.5, -7.5), (2.5, -4.5), (-2.5, -4.5))),
    Zone("z-cedar-park", "Cedar Park", 44000, 88000, 0.32, 58, 0.20,
         ((-8, 2), (-4.5, 2), (-4.5, 5.5), (-8, 5.5))),
    Zone("z-pflugerville", "Pflugerville", 60000, 64000, 0.45, 80, 0.42,
         ((6.5, 2), (10.5, 2), (10.5, 5.5), (6.5, 5.5))),
    Zone("z-manor", "Manor", 24000, 45000, 0.72, 36, 0.65,
         ((6.5, -2), (10.5, -2), (10.5, 2), (6.5, 2))),
    Zone("z-bee-cave", "Bee Cave", 20000, 135000, 0.28, 55, 0.15,
         ((-8, -5.5), (-4.5, -5.5), (-4.5, -2), (-8, -2))),
    Zone("z-sunset-valley", "Sunset Valley", 18000, 95000, 0.42, 30, 0.22,
         ((-5.5, -7.5), (-2.5, -7.5), (-2.5, -4.5), (-5.5, -4.5))),
)

NODES = (
    GridNode("n-downtown-core", "Downtown Core", "z-downtown", 150, critical=True, position=(0, 0.5, 0)),
    GridNode("n-east-sub", "East Substation", "z-east", 90, position=(4.5, 0.5, 0)),
    GridNode("n-south-sub", "South Congress Sub", "z-south", 80, position=(0, 0.5, -3)),
    GridNode("n-north-sub", "North Loop Sub", "z-north", 85, position=(0, 0.5, 3)),
    GridNode("n-westlake-sub", "Westlake Sub", "z-westlake", 110, position=(-6, 0.5, 0)),
    GridNode("n-mueller-sub", "Mueller Sub", "z-mueller", 70, position=(4.5, 0.5, 3.8)),
    GridNode("n-hyde-park-sub", "Hyde Park Sub", "z-hyde-park", 60, position=(0, 0.5, 6)),
    GridNode("n-rundberg-sub", "Rundberg Sub", "z-rundberg", 55, position=(0, 0.5, 9)),
    GridNode("n-montopolis-sub", "Montopolis Sub", "z-montopolis", 60, position=(4.5, 0.5, -3.8)),
    GridNode("n-buda-sub", "Buda Sub", "z-buda", 90, position=(0, 0.5, -6)),
    GridNode("n-cedar-park-sub", "Cedar Park Sub", "z-cedar-park", 80, position=(-6, 0.5, 3.8)),
    GridNode("n-pflugerville-sub", "Pflugerville Sub", "z-pflugerville", 100, position=(8.5, 0.5, 3.8)),
    GridNode("n-manor-sub", "Manor Sub", "z-manor", 55, position=(8.5, 0.5, 0)),
    GridNode("n-bee-cave-sub", "Bee Cave Sub", "z-bee-cave", 75, position=(-6, 0.5, -3.8)),
)

EDGES = (
    GridEdge("e-01", "n-downtown-core", "n-east-sub", 120),
    GridEdge("e-02", "n-downtown-core", "n-south-sub", 100),
    GridEdge("e-03", "n-downtown-core", "n-north-sub", 100),
    GridEdge("e-04", "n-downtown-core", "n-westlake-sub", 130),
    GridEdge("e-05", "n-east-sub", "n-mueller-sub", 80),
    GridEdge("e-06", "n-east-sub", "n-montopolis-sub", 70),
    GridEdge("e-07", "n-east-sub", "n-manor-sub", 60),
    GridEdge("e-08", "n-north-sub", "n-hyde-park-sub", 75),
    GridEdge("e-09", "n-north-sub", "n-mueller-sub", 70),
    GridEdge("e-10", "n-hyde-park-sub", "n-rundberg-sub", 60),
    GridEdge("e-11", "n-hyde-park-sub", "n-cedar-park-sub", 65),
    GridEdge("e-12", "n-cedar-park-sub", "n-westlake-sub", 85),
    GridEdge("e-13", "n-westlake-sub", "n-bee-cave-sub", 80),
    GridEdge("e-14", "n-south-sub", "n-buda-sub", 90),
    GridEdge("e-15", "n-south-sub", "n-montopolis-sub", 65),
    GridEdge("e-16", "n-mueller-sub", "n-pflugerville-sub", 90),
    GridEdge("e-17", "n-manor-sub", "n-pflugerville-sub", 75),
    GridEdge("e-18", "n-montopolis-sub", "n-buda-sub", 55),
    GridEdge("e-19", "n-bee-cave-sub", "n-south-sub", 60),
    GridEdge("e-20", "n-rundberg-sub", "n-pflugerville-sub", 50),
)

PROJECT_CATALOG = (
    Project(
        "p-dt-upgrade", "Downtown Substation Upgrade", "substation_upgrade", 45_000_000,
        ProjectEffects(capacity_boost_mw=60, cascade_resistance=0.3),
        zone_id="z-downtown", node_id="n-downtown-core",
        description="Expand transformer capacity and add redundant switching at downtown core hub.",
    ),
    Project(
        "p-east-solar", "East Austin Solar Farm", "solar_farm", 28_000_000,
        ProjectEffects(capacity_boost_mw=35, vulnerability_reduction=0.15),
        zone_id="z-east", node_id="n-east-sub",
        description="20 MW AC solar array with local injection at East Substation.",
    ),
    Project(
        "p-mont-battery", "Montopolis Battery Storage", "battery_storage", 22_000_000,
        ProjectEffects(capacity_boost_mw=25, recovery_speed_boost=0.4, vulnerability_reduction=0.2),
        zone_id="z-montopolis", node_id="n-montopolis-sub",
        description="4-hour 25 MW battery system to buffer outages in this high-vulnerability corridor.",
    ),
    Project(
        "p-rund-hardening", "Rundberg Grid Hardening", "grid_hardening", 18_000_000,
        ProjectEffects(cascade_resistance=0.45, vulnerability_reduction=0.30),
        zone_id="z-rundberg", node_id="n-rundberg-sub",
        description="Reconductoring aging feeders and adding sectionalizing switches in the Rundberg corridor.",
    ),
    Project(
        "p-mueller-ev", "Mueller EV Smart Charging Hub", "ev_charging", 12_000_000,
        ProjectEffects(demand_reduction_factor=0.08, capacity_boost_mw=10),
        zone_id="z-mueller", node_id="n-mueller-sub",
        description="Managed EV charging with V2G capability to shift load during peak stress.",
    ),
    Project(
        "p-west-cable", "Westlake Underground Cable", "underground_cable", 35_000_000,
        ProjectEffects(cascade_resistance=0.5, vulnerability_reduction=0.12),
        zone_id="z-westlake", node_id="n-westlake-sub",
        description="Replace overhead transmission with underground cable to eliminate weather-related outages.",
    ),
    Project(
        "p-east-smart", "East Austin Smart Meters", "smart_meter", 8_000_000,
        ProjectEffects(demand_reduction_factor=0.12),
        zone_id="z-east",
        description="Advanced metering infrastructure with demand-response automation for 18,000 customers.",
    ),
    Project(
        "p-manor-tx", "Manor-Pflugerville Transmission", "transmission_upgrade", 30_000_000,
        ProjectEffects(capacity_boost_mw=45, cascade_resistance=0.2),
        zone_id="z-manor", node_id="n-manor-sub",
        description="Upgrade 138 kV line to 345 kV between Manor and Pflugerville to relieve eastern congestion.",
    ),
    Project(
        "p-mont-microgrid", "Montopolis Community Microgrid", "community_microgrid", 16_000_000,
        ProjectEffects(vulnerability_reduction=0.35, recovery_speed_boost=0.5, cascade_resistance=0.25),
        zone_id="z-montopolis",
        description="Islanding-capable microgrid serving 3,200 low-income households with 72-hour backup.",
    ),
    Project(
        "p-buda-solar-storage", "Buda Solar + Storage Campus", "solar_storage", 40_000_000,
        ProjectEffects(capacity_boost_mw=50, vulnerability_reduction=0.18, cascade_resistance=0.15),
        zone_id="z-buda", node_id="n-buda-sub",
        description="30 MW solar paired with 6-hour battery storage to support southern growth corridor.",
    ),
    Project(
        "p-cedar-upgrade", "Cedar Park Substation Upgrade", "substation_upgrade", 25_000_000,
        ProjectEffects(capacity_boost_mw=30, cascade_resistance=0.2),
        zone_id="z-cedar-park", node_id="n-cedar-park-sub",
        description="Add second transformer bank at Cedar Park to eliminate N-1 vulnerability.",
    ),
    Project(
        "p-pflug-solar", "Pflugerville Solar Farm", "solar_farm", 32_000_000,
        ProjectEffects(capacity_boost_mw=40, vulnerability_reduction=0.12),
        zone_id="z-pflugerville", node_id="n-pflugerville-sub",
        description="25 MW AC solar farm on I-130 corridor to serve fast-growing northeast load.",
    ),
)


def build_demand_curve(hours: int, shape: str) -> List[float]:
    """Hourly demand multipliers for a named event shape."""
    curve = []
    for h in range(hours):
        hour = h % 24
        if shape == "freeze":
            # Sustained surge through hour 72 with a daily swing
            base = 1.7 + math.sin(hour * math.pi / 12) * 0.15
            curve.append(base if h < 72 else base * 0.9)
        elif shape == "heat":
            curve.append(1.6 + (hour - 12) * 0.05 if 12 <= hour <= 18 else 1.2)
        elif shape == "ev-spike":
            curve.append(1.45 + (hour - 17) * 0.08 if 17 <= hour <= 21 else 1.1)
        else:
            curve.append(1.0)
    return curve


def build_stress_curve(hours: int, shape: str) -> List[float]:
    """Hourly weather stress for a named event shape."""
    curve = []
    for h in range(hours):
        hour = h % 24
        if shape == "freeze":
            # Ice accumulation, capped mid-event
            curve.append(min(0.9, 0.4 + h * 0.008))
        elif shape == "heat":
            curve.append(0.55 if 13 <= hour <= 17 else 0.2)
        elif shape == "ev-spike":
            curve.append(0.1)
        else:
            curve.append(0.0)
    return curve


def _scenario(scenario_id, name, hours, shape, color, description) -> Scenario:
    return Scenario(
        id=scenario_id,
        name=name,
        duration_hours=hours,
        demand_curve=tuple(build_demand_curve(hours, shape)),
        weather_stress_curve=tuple(build_stress_curve(hours, shape)),
        color=color,
        description=description,
    )


SCENARIOS = (
    _scenario(
        "sc-freeze", "Winter Freeze", 96, "freeze", "#60a5fa",
        "Extended Arctic freeze with ice accumulation (Feb 2021 analogue). "
        "Sustained demand surge with cascading infrastructure failures.",
    ),
    _scenario(
        "sc-heat-dome", "Summer Heat Dome", 120, "heat", "#f97316",
        "Prolonged high-pressure heat dome with temperatures exceeding 110F for 5 days. "
        "Cooling loads spike at afternoon peak.",
    ),
    _scenario(
        "sc-ev-spike", "EV Adoption Surge", 72, "ev-spike", "#a78bfa",
        "Rapid EV adoption causes severe evening demand spikes in residential zones. "
        "Low weather stress but concentrated load growth.",
    ),
)

DEFAULT_ASSUMPTIONS = Assumptions(
    ev_adoption_rate=0.15,
    population_growth_rate=3.2,
    renewable_target=0.30,
    budget_cap_usd=150_000_000,
)

REGULATOR_ASSUMPTIONS = Assumptions(
    ev_adoption_rate=0.35,
    population_growth_rate=4.0,
    renewable_target=0.50,
    budget_cap_usd=200_000_000,
)

ADVOCATE_ASSUMPTIONS = Assumptions(
    ev_adoption_rate=0.25,
    population_growth_rate=3.5,
    renewable_target=0.60,
    budget_cap_usd=250_000_000,
)

_DEFAULT_NETWORK = NetworkModel(zones=ZONES, nodes=NODES, edges=EDGES, projects=PROJECT_CATALOG)


def default_network() -> NetworkModel:
    """The Austin-like reference network with its project catalog."""
    return _DEFAULT_NETWORK


def get_scenario(scenario_id: str) -> Optional[Scenario]:
    for scenario in SCENARIOS:
        if scenario.id == scenario_id:
            return scenario
    return None


def get_project(project_id: str) -> Optional[Project]:
    return _DEFAULT_NETWORK.get_project(project_id)


def get_zone_by_id(zone_id: str) -> Optional[Zone]:
    """Look up a reference zone; None for unknown ids."""
    return _DEFAULT_NETWORK.get_zone(zone_id)
