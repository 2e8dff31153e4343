"""Auditable filing snapshots of a simulation result."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Optional
import json
import uuid

from .comparison import ComparisonDelta
from .models import Scenario
from .plan import PlanVersion
from .results import SimulationResult

TOOL_VERSION = "gridcase-0.1.0"


@dataclass(frozen=True)
class AuditTrail:
    """Provenance of a snapshot."""
    run_id: str
    seed: int
    plan_version_id: str
    scenario_id: str
    tool_version: str = TOOL_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "seed": self.seed,
            "plan_version_id": self.plan_version_id,
            "scenario_id": self.scenario_id,
            "tool_version": self.tool_version,
        }


@dataclass(frozen=True)
class FilingSnapshot:
    """Write-once bundle of a plan, scenario, result and optional comparison."""
    snapshot_id: str
    generated_at: str
    plan_version: PlanVersion
    scenario: Scenario
    result: SimulationResult
    audit_trail: AuditTrail
    delta: Optional[ComparisonDelta] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "snapshot_id": self.snapshot_id,
            "generated_at": self.generated_at,
            "plan_version": self.plan_version.to_dict(),
            "scenario": self.scenario.to_dict(),
            "result": self.result.to_dict(),
            "delta": self.delta.to_dict() if self.delta else None,
            "audit_trail": self.audit_trail.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def export_snapshot(
    plan: PlanVersion,
    scenario: Scenario,
    result: SimulationResult,
    delta: Optional[ComparisonDelta] = None
) -> FilingSnapshot:
    """Package a result with its inputs. Nothing is recomputed."""
    return FilingSnapshot(
        snapshot_id=f"snap_{uuid.uuid4().hex[:12]}_{result.id}",
        generated_at=datetime.now(timezone.utc).isoformat(),
        plan_version=plan,
        scenario=scenario,
        result=result,
        delta=delta,
        audit_trail=AuditTrail(
            run_id=result.id,
            seed=result.seed,
            plan_version_id=result.plan_version_id,
            scenario_id=result.scenario_id,
        ),
    )
