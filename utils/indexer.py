# utils/indexer.py
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Union

from models.member import Member
from models.subtask import OwnedSubtask
from models.task import Task, PROJECT_TASK_TYPES

logger = logging.getLogger(__name__)

UNASSIGNED = "unassigned"
DEFAULT_PROJECT = "General"

TeamOf = Union[Callable[[str], Optional[str]], Mapping]


@dataclass
class AssigneeBucket:
    owned_tasks: List[Task] = field(default_factory=list)
    owned_subtasks: List[OwnedSubtask] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.owned_tasks) + len(self.owned_subtasks)

    def items(self) -> list:
        return [*self.owned_tasks, *self.owned_subtasks]


def project_key(task: Task) -> str:
    for name in (task.related_project, task.project_name):
        if name and name.strip():
            return name.strip()
    return DEFAULT_PROJECT


def _resolver(team_of: TeamOf) -> Callable[[str], Optional[str]]:
    if isinstance(team_of, Mapping):
        return team_of.get
    return team_of


def index_by_assignee(tasks: Iterable[Task],
                      seed_members: Optional[Iterable[Member]] = None) -> Dict[str, AssigneeBucket]:
    """Group owned tasks and subtasks under the member responsible for them.

    When ``seed_members`` is given every seed gets a bucket, even an empty one,
    and assignees outside that list land in the ``unassigned`` bucket.
    A main assignee who also holds a subtask of the same task is counted once,
    through the subtask.
    """
    index: Dict[str, AssigneeBucket] = {}
    known = None
    if seed_members is not None:
        known = set()
        for m in seed_members:
            index.setdefault(m.id, AssigneeBucket())
            known.add(m.id)

    def bucket_for(member_id: Optional[str]) -> AssigneeBucket:
        if not member_id or (known is not None and member_id not in known):
            if member_id:
                logger.debug("Assignee %s is not a known member, routing to %s", member_id, UNASSIGNED)
            member_id = UNASSIGNED
        return index.setdefault(member_id, AssigneeBucket())

    for task in tasks:
        if not task.subtasks:
            bucket_for(task.assigned_to).owned_tasks.append(task)
            continue

        project = project_key(task)
        for sub in task.subtasks:
            owned = OwnedSubtask(
                **sub.model_dump(),
                parent_task_id=task.id,
                parent_task_title=task.title,
                project_name=project,
            )
            bucket_for(sub.assigned_to).owned_subtasks.append(owned)

        if task.assigned_to and not any(sub.assigned_to == task.assigned_to for sub in task.subtasks):
            bucket_for(task.assigned_to).owned_tasks.append(task)

    return index


def index_by_project(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    index: Dict[str, List[Task]] = {}
    for task in tasks:
        index.setdefault(project_key(task), []).append(task)
    return index


class TeamIndex(dict):
    """team id -> tasks, remembering which original task each split copy came from."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.origins: Dict[int, Task] = {}

    def origin_of(self, task: Task) -> Task:
        return self.origins.get(id(task), task)

    def subset(self, team_ids: Iterable[str]) -> "TeamIndex":
        out = TeamIndex({t: self[t] for t in team_ids if t in self})
        out.origins = self.origins
        return out


def index_by_team(tasks: Iterable[Task], team_of: TeamOf) -> TeamIndex:
    """Group tasks by the team doing the work.

    A task whose subtasks span several teams appears once per team, each copy
    keeping only that team's subtasks. Tasks are never mutated.
    """
    resolve = _resolver(team_of)
    index = TeamIndex()

    def team_key(member_id: Optional[str]) -> str:
        team_id = resolve(member_id) if member_id else None
        return team_id or UNASSIGNED

    for task in tasks:
        if not task.subtasks:
            index.setdefault(team_key(task.assigned_to), []).append(task)
            continue

        by_team: Dict[str, list] = {}
        for sub in task.subtasks:
            by_team.setdefault(team_key(sub.assigned_to), []).append(sub)
        for team_id, subs in by_team.items():
            if len(by_team) == 1:
                index.setdefault(team_id, []).append(task)
            else:
                part = task.model_copy(update={"subtasks": subs})
                index.origins[id(part)] = task
                index.setdefault(team_id, []).append(part)

    return index


def active_projects(tasks: Iterable[Task]) -> List[Task]:
    return [
        t for t in tasks
        if t.task_type in PROJECT_TASK_TYPES and t.status not in ("completed", "cancelled")
    ]
