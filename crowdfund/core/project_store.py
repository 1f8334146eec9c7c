"""Project Store — append-only set of projects and their lifecycle state.

Invariants:
    - Ids are sequential from 1 and never reused
    - goal, deadline, owner immutable once created
    - ended flips False -> True exactly once; succeeded frozen at that moment
    - get_project returns None for ids outside [1, count()] (never raises)

Design Decisions:
    - In-memory dataclass store passed explicitly to the controller, not a
      module-level map: the state machine is testable without a server
    - Store trusts validated input; enforce_lifecycle checks goal and deadline
"""

from dataclasses import dataclass

from crowdfund.core.domain_types import (
    AccountId, Amount, ProjectId, ProjectStatus, Timestamp, FIRST_PROJECT_ID,
)


@dataclass
class Project:
    """Funding campaign — pure dataclass, no IO."""
    id: ProjectId
    owner: AccountId
    goal: Amount
    deadline: Timestamp
    amount_raised: Amount = Amount(0)
    ended: bool = False
    succeeded: bool = False

    @property
    def status(self) -> ProjectStatus:
        if not self.ended:
            return ProjectStatus.OPEN
        return ProjectStatus.SUCCEEDED if self.succeeded else ProjectStatus.FAILED


class ProjectStore:
    """Sequential project registry."""

    def __init__(self) -> None:
        self._projects: dict[ProjectId, Project] = {}

    def create_project(
        self, owner: AccountId, goal: Amount, deadline: Timestamp,
    ) -> Project:
        project_id = ProjectId(self.count() + FIRST_PROJECT_ID)
        project = Project(id=project_id, owner=owner, goal=goal, deadline=deadline)
        self._projects[project_id] = project
        return project

    def get_project(self, project_id: int) -> Project | None:
        return self._projects.get(ProjectId(project_id))

    def exists(self, project_id: int) -> bool:
        return FIRST_PROJECT_ID <= project_id <= self.count()

    def count(self) -> int:
        return len(self._projects)

    def list_projects(self, limit: int | None = None, offset: int = 0) -> list[Project]:
        """Projects in id order."""
        ordered = [self._projects[pid] for pid in sorted(self._projects)]
        end = None if limit is None else offset + limit
        return ordered[offset:end]

    def restore(self, projects: list[Project]) -> None:
        """Replace contents from a snapshot. Ids must be contiguous from 1."""
        ids = sorted(p.id for p in projects)
        if ids != list(range(FIRST_PROJECT_ID, len(ids) + FIRST_PROJECT_ID)):
            raise ValueError(f"Snapshot project ids are not contiguous: {ids}")
        self._projects = {p.id: p for p in projects}
