"""Plan versions and the functional edits that derive new ones."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, Any, Iterable, Optional, Tuple

from .models import Assumptions, Project


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class PlanVersion:
    """An immutable selection of projects plus policy assumptions.

    Every edit returns a new value. The id carries one ``-p<projectId>``
    suffix per applied project, in application order; it is a display
    label, not a content hash, so two insertion orders of the same project
    set produce different ids.
    """
    id: str
    projects: Tuple[Project, ...] = ()
    assumptions: Assumptions = field(default_factory=Assumptions)
    created_at: str = field(default_factory=_now, compare=False)

    @property
    def project_ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.projects)

    def has_project(self, project_id: str) -> bool:
        return any(p.id == project_id for p in self.projects)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "projects": [p.to_dict() for p in self.projects],
            "assumptions": self.assumptions.to_dict(),
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlanVersion':
        """Create from dictionary."""
        return cls(
            id=data["id"],
            projects=tuple(Project.from_dict(p) for p in data.get("projects", [])),
            assumptions=Assumptions.from_dict(data.get("assumptions", {})),
            created_at=data.get("created_at") or _now(),
        )


def create_plan(
    plan_id: str,
    assumptions: Optional[Assumptions] = None,
    projects: Iterable[Project] = ()
) -> PlanVersion:
    """Create a plan, applying ``projects`` in order."""
    plan = PlanVersion(id=plan_id, assumptions=assumptions or Assumptions())
    for project in projects:
        plan = apply_project(plan, project)
    return plan


def apply_project(plan: PlanVersion, project: Project) -> PlanVersion:
    """Return ``plan`` with ``project`` appended; a no-op if already present."""
    if plan.has_project(project.id):
        return plan
    return replace(
        plan,
        id=f"{plan.id}-p{project.id}",
        projects=plan.projects + (project,),
        created_at=_now(),
    )


def _strip_project_suffix(plan_id: str, projects: Tuple[Project, ...], project_id: str) -> str:
    """Drop the exact ``-p<project_id>`` segment from a derived plan id."""
    suffix = "".join(f"-p{p.id}" for p in projects)
    if suffix and plan_id.endswith(suffix):
        base = plan_id[:len(plan_id) - len(suffix)]
        return base + "".join(f"-p{p.id}" for p in projects if p.id != project_id)

    # Ids not built by apply_project: drop the last matching segment
    segment = f"-p{project_id}"
    index = plan_id.rfind(segment)
    if index < 0:
        return plan_id
    return plan_id[:index] + plan_id[index + len(segment):]


def remove_project(plan: PlanVersion, project_id: str) -> PlanVersion:
    """Return ``plan`` without ``project_id``; a no-op if it is absent."""
    if not plan.has_project(project_id):
        return plan
    return replace(
        plan,
        id=_strip_project_suffix(plan.id, plan.projects, project_id),
        projects=tuple(p for p in plan.projects if p.id != project_id),
        created_at=_now(),
    )


def with_assumptions(plan: PlanVersion, assumptions: Assumptions) -> PlanVersion:
    """Return ``plan`` with its policy assumptions swapped out."""
    return replace(plan, assumptions=assumptions, created_at=_now())


def get_total_capex(plan: PlanVersion) -> float:
    """Sum of capital cost over every selected project."""
    return sum(p.capex_usd for p in plan.projects)


def get_budget_remaining(plan: PlanVersion) -> float:
    """Budget cap minus total capex; negative when the plan is over budget."""
    return plan.assumptions.budget_cap_usd - get_total_capex(plan)
