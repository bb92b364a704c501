# utils/frames.py
from typing import Iterable, List

import pandas as pd

from models.task import Task
from utils.indexer import project_key
from utils.progress import as_utc, effective_percentage
from utils.rollup import LeaderboardEntry, MemberReport, ProjectSummary

LEADERBOARD_COLUMNS = ["Member", "Assigned", "Completed", "Efficiency"]
PROJECT_COLUMNS = ["Project", "Total", "Completed", "In Progress", "Pending", "Blocked", "Overdue", "Progress"]
DEADLINE_COLUMNS = ["Item", "Deadline", "Status", "Type", "Assignee", "Progress", "Project"]


def leaderboard_frame(entries: Iterable[LeaderboardEntry]) -> pd.DataFrame:
    rows = [{
        "Member": e.name or e.member_id,
        "Assigned": e.assigned,
        "Completed": e.completed,
        "Efficiency": e.efficiency_score,
    } for e in entries]
    return pd.DataFrame(rows, columns=LEADERBOARD_COLUMNS)


def _stats_row(key: str, stats) -> dict:
    return {
        "Project": key,
        "Total": stats.total,
        "Completed": stats.completed,
        "In Progress": stats.in_progress,
        "Pending": stats.pending,
        "Blocked": stats.blocked,
        "Overdue": stats.overdue,
        "Progress": stats.percentage,
    }


def project_frame(summaries: Iterable[ProjectSummary]) -> pd.DataFrame:
    return pd.DataFrame([_stats_row(s.project_key, s.stats) for s in summaries], columns=PROJECT_COLUMNS)


def member_project_frame(report: MemberReport) -> pd.DataFrame:
    rows = [_stats_row(key, stats) for key, stats in report.by_project.items()]
    return pd.DataFrame(rows, columns=PROJECT_COLUMNS)


def deadline_frame(tasks: Iterable[Task]) -> pd.DataFrame:
    """One row per task and subtask that has a deadline, earliest first."""
    rows: List[dict] = []
    for t in tasks:
        project = project_key(t)
        rows.append({
            "Item": f"Task: {t.title}",
            "Deadline": as_utc(t.deadline) if t.deadline else None,
            "Status": t.status,
            "Type": "Task",
            "Assignee": t.assigned_to,
            "Progress": effective_percentage(t),
            "Project": project,
        })
        for st_ in t.subtasks:
            rows.append({
                "Item": f"  ↳ {st_.title}",
                "Deadline": as_utc(st_.deadline) if st_.deadline else None,
                "Status": st_.status,
                "Type": "Subtask",
                "Assignee": st_.assigned_to,
                "Progress": effective_percentage(st_),
                "Project": project,
            })
    df = pd.DataFrame(rows, columns=DEADLINE_COLUMNS)
    if not df.empty:
        df = df.dropna(subset=["Deadline"])
        df["Deadline"] = pd.to_datetime(df["Deadline"], utc=True)
        df = df.sort_values("Deadline", kind="stable").reset_index(drop=True)
    return df
