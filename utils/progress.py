# utils/progress.py
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, asdict
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Iterable, Optional

from dateutil import parser

logger = logging.getLogger(__name__)

PENDING_STATUSES = ("pending", "not_started")
BLOCKED_STATUSES = ("blocked", "on_hold")


class HealthLevel(str, Enum):
    HEALTHY = "healthy"
    AT_RISK = "at_risk"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Stats:
    """Status tallies and completion for a group of tasks or subtasks.

    The four status buckets need not add up to ``total``; statuses such as
    ``overdue`` or ``cancelled`` fall outside them. ``total`` is always the
    denominator.
    """

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    blocked: int = 0
    overdue: int = 0
    percentage: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# REST documents spell these in camelCase
CAMEL_KEYS = {
    "progress_percentage": "progressPercentage",
    "assigned_to": "assignedTo",
    "related_project": "relatedProject",
    "project_name": "projectName",
    "task_type": "taskType",
}


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        value = item.get(name)
        if value is None and name in CAMEL_KEYS:
            value = item.get(CAMEL_KEYS[name])
        return value
    return getattr(item, name, None)


def parse_datetime(x: Any) -> Optional[datetime]:
    if not x:
        return None
    if isinstance(x, date):
        return x
    try:
        return parser.isoparse(str(x))
    except (ValueError, OverflowError):
        try:
            return parser.parse(str(x))
        except (ValueError, OverflowError):
            logger.debug("Unparseable date %r", x)
            return None


def deadline_of(item: Any) -> Optional[datetime]:
    return parse_datetime(_field(item, "deadline"))


def status_of(item: Any) -> str:
    status = _field(item, "status")
    if not status:
        logger.debug("Item %s has no status, counting it as pending", _field(item, "id"))
        return "pending"
    return str(status).strip().lower()


def effective_percentage(item: Any) -> int:
    """Percent complete for a task or subtask.

    A task with subtasks is the rounded mean of its subtasks; otherwise the
    item's own progress, or 100/0 from its status when no progress is recorded.
    """
    subtasks = _field(item, "subtasks") or []
    if subtasks:
        vals = [effective_percentage(sub) for sub in subtasks]
        return round_half_up(sum(vals) / len(vals))
    progress = _field(item, "progress_percentage")
    if progress is not None:
        try:
            return max(0, min(100, round_half_up(float(progress))))
        except (TypeError, ValueError, OverflowError):
            logger.debug("Ignoring progress %r on %s", progress, _field(item, "id"))
    return 100 if status_of(item) == "completed" else 0


def is_overdue(item: Any, now: datetime) -> bool:
    status = status_of(item)
    if status == "completed":
        return False
    if status == "overdue":
        return True
    deadline = deadline_of(item)
    return deadline is not None and as_utc(deadline) < as_utc(now)


def compute_stats(items: Iterable[Any], now: Optional[datetime] = None) -> Stats:
    items = list(items)
    if not items:
        return Stats()
    now = utc_now() if now is None else as_utc(now)

    completed = in_progress = pending = blocked = overdue = 0
    for item in items:
        status = status_of(item)
        if status == "completed":
            completed += 1
        elif status == "in_progress":
            in_progress += 1
        elif status in PENDING_STATUSES:
            pending += 1
        elif status in BLOCKED_STATUSES:
            blocked += 1
        if is_overdue(item, now):
            overdue += 1

    vals = [effective_percentage(item) for item in items]
    return Stats(
        total=len(items),
        completed=completed,
        in_progress=in_progress,
        pending=pending,
        blocked=blocked,
        overdue=overdue,
        percentage=round_half_up(sum(vals) / len(vals)),
    )


def classify_health(stats: Stats) -> HealthLevel:
    if stats.overdue > 0 and stats.percentage < 50:
        return HealthLevel.CRITICAL
    if stats.overdue > 0 or (stats.percentage < 50 and stats.total > 0):
        return HealthLevel.AT_RISK
    return HealthLevel.HEALTHY
