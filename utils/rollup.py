# utils/rollup.py
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from models.member import Member
from models.subtask import OwnedSubtask
from models.task import Task
from utils.indexer import UNASSIGNED, AssigneeBucket, active_projects, index_by_assignee, project_key
from utils.progress import HealthLevel, Stats, classify_health, compute_stats, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class MemberReport:
    stats: Stats
    by_project: Dict[str, Stats] = field(default_factory=dict)


@dataclass
class LeaderboardEntry:
    member_id: str
    name: str
    assigned: int
    completed: int
    efficiency_score: int


@dataclass
class ProjectSummary:
    project_key: str
    stats: Stats


@dataclass
class TeamSummary:
    team_id: str
    stats: Stats
    health: HealthLevel


@dataclass
class Overview:
    stats: Stats
    health: HealthLevel
    active_projects: int


def _item_project(item) -> str:
    if isinstance(item, OwnedSubtask):
        return item.project_name
    return project_key(item)


def member_report(member_id: str, index: Mapping[str, AssigneeBucket],
                  now: Optional[datetime] = None) -> MemberReport:
    bucket = index.get(member_id) or AssigneeBucket()
    items = bucket.items()

    grouped: Dict[str, list] = {}
    for item in items:
        grouped.setdefault(_item_project(item), []).append(item)

    return MemberReport(
        stats=compute_stats(items, now=now),
        by_project={key: compute_stats(group, now=now) for key, group in grouped.items()},
    )


def _sub_key(sub):
    return sub.id if sub.id is not None else id(sub)


def _merge_team_copies(team_index: Mapping[str, List[Task]]) -> List[Task]:
    # index_by_team splits a cross-team task into per-team copies; stitch them back
    origin_of = getattr(team_index, "origin_of", lambda task: task)
    merged: Dict[object, Tuple[Task, list]] = {}
    for tasks in team_index.values():
        for task in tasks:
            origin = origin_of(task)
            key = origin.id if origin.id is not None else id(origin)
            if key not in merged:
                merged[key] = (origin, list(task.subtasks))
                continue
            subs = merged[key][1]
            seen = {_sub_key(s) for s in subs}
            subs.extend(s for s in task.subtasks if _sub_key(s) not in seen)

    return [task if len(subs) == len(task.subtasks) else task.model_copy(update={"subtasks": subs})
            for task, subs in merged.values()]


def team_leaderboard(team_index: Mapping[str, List[Task]], members: Iterable[Member],
                     now: Optional[datetime] = None) -> List[LeaderboardEntry]:
    """Rank members by efficiency score, then assigned count, then name."""
    members = list(members)
    if not members:
        return []
    tasks = _merge_team_copies(team_index)
    logger.debug("Ranking %d members over %d tasks", len(members), len(tasks))
    index = index_by_assignee(tasks, seed_members=members)

    entries = []
    for m in members:
        stats = compute_stats(index[m.id].items(), now=now)
        entries.append(LeaderboardEntry(
            member_id=m.id,
            name=m.name or "",
            assigned=stats.total,
            completed=stats.completed,
            efficiency_score=stats.percentage,
        ))
    entries.sort(key=lambda e: (-e.efficiency_score, -e.assigned, e.name))
    return entries


def project_summary(project_index: Mapping[str, List[Task]],
                    now: Optional[datetime] = None) -> List[ProjectSummary]:
    return [ProjectSummary(project_key=key, stats=compute_stats(tasks, now=now))
            for key, tasks in project_index.items()]


def team_summary(team_index: Mapping[str, List[Task]],
                 now: Optional[datetime] = None) -> List[TeamSummary]:
    out = []
    for team_id, tasks in team_index.items():
        stats = compute_stats(tasks, now=now)
        out.append(TeamSummary(team_id=team_id, stats=stats, health=classify_health(stats)))
    return out


def best_teams(team_index: Mapping[str, List[Task]], now: Optional[datetime] = None,
               limit: int = 10) -> List[TeamSummary]:
    """Teams by completion, most tasks first on ties; the unassigned bucket is not a team."""
    ranked = [s for s in team_summary(team_index, now=now) if s.team_id != UNASSIGNED]
    ranked.sort(key=lambda s: (-s.stats.percentage, -s.stats.total, s.team_id))
    return ranked[:limit]


def overview(tasks: Iterable[Task], now: Optional[datetime] = None) -> Overview:
    tasks = list(tasks)
    stats = compute_stats(tasks, now=now)
    return Overview(stats=stats, health=classify_health(stats), active_projects=len(active_projects(tasks)))


def lead_effectiveness(lead_id: str, index: Mapping[str, AssigneeBucket], members: Iterable[Member],
                       now: Optional[datetime] = None) -> int:
    """0.4 own completion + 0.4 mean member completion + 0.2 on-time rate."""
    own = member_report(lead_id, index, now=now).stats
    rates = [member_report(m.id, index, now=now).stats.percentage
             for m in members if m.id != lead_id]
    team_rate = sum(rates) / len(rates) if rates else 0
    overdue_rate = own.overdue / own.total * 100 if own.total else 0
    return round_half_up(own.percentage * 0.4 + team_rate * 0.4 + (100 - overdue_rate) * 0.2)


def effectiveness_rating(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Average"
    return "Needs Improvement"


def status_breakdown(stats: Stats) -> List[Tuple[str, int]]:
    pairs = [
        ("Completed", stats.completed),
        ("In Progress", stats.in_progress),
        ("Blocked", stats.blocked),
        ("Pending", stats.pending),
        ("Overdue", stats.overdue),
    ]
    return [(label, count) for label, count in pairs if count > 0]
