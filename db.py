# db.py

#============================================================#
#                       Strivio-Rollup                       #
#============================================================#
# Purpose     : Reads the task/user/team snapshot exported   #
#               from the REST API and turns its documents    #
#               into models for the progress rollups.        #
#============================================================#


from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from models.member import Member
from models.subtask import Subtask
from models.task import Task
from models.team import Team
from utils.progress import parse_datetime, round_half_up

logger = logging.getLogger(__name__)

# ---- Config ----
try:
    import streamlit as st
    _secrets = getattr(st, "secrets", {})
except Exception:
    _secrets = {}


def _setting(key: str, default: str) -> str:
    try:
        value = _secrets.get(key)
    except Exception:
        # st.secrets raises when no secrets.toml exists
        value = None
    return value or os.getenv(key) or default


SNAPSHOT_PATH = _setting("SNAPSHOT_PATH", "snapshot.json")
LOG_LEVEL = _setting("LOG_LEVEL", "INFO")


@dataclass
class Snapshot:
    tasks: List[Task] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)
    teams: List[Team] = field(default_factory=list)
    team_of: Dict[str, str] = field(default_factory=dict)


# ---- helpers ----
def ref_id(value: Any) -> Optional[str]:
    """Id of a reference that may be a bare id or a populated document."""
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("_id") or value.get("id")
        if value is None:
            return None
    value = str(value).strip()
    return value or None


def _progress(x: Any) -> Optional[int]:
    if x is None or x == "":
        return None
    try:
        return max(0, min(100, round_half_up(float(x))))
    except (TypeError, ValueError, OverflowError):
        return None


def _status(x: Any) -> str:
    if not x:
        return "pending"
    return str(x).strip().lower().replace("-", "_").replace(" ", "_")


def subtask_from_document(doc: dict) -> Subtask:
    return Subtask(
        id=ref_id(doc.get("_id") or doc.get("id")),
        title=doc.get("title") or "",
        status=_status(doc.get("status")),
        progress_percentage=_progress(doc.get("progressPercentage")),
        assigned_to=ref_id(doc.get("assignedTo")),
        deadline=parse_datetime(doc.get("deadline")),
    )


def task_from_document(doc: dict) -> Task:
    return Task(
        id=ref_id(doc.get("_id") or doc.get("id")),
        title=doc.get("title") or "",
        description=doc.get("description"),
        status=_status(doc.get("status")),
        priority=doc.get("priority") or "medium",
        assigned_to=ref_id(doc.get("assignedTo")),
        deadline=parse_datetime(doc.get("deadline") or doc.get("dueDate")),
        progress_percentage=_progress(doc.get("progressPercentage")),
        subtasks=[subtask_from_document(s) for s in doc.get("subtasks") or []],
        task_type=doc.get("taskType") or "one_time",
        related_project=doc.get("relatedProject") or None,
        project_name=doc.get("projectName") or None,
    )


def member_from_document(doc: dict) -> Member:
    team = doc.get("teamId")
    return Member(
        id=ref_id(doc.get("_id") or doc.get("id")),
        name=doc.get("name"),
        designation=doc.get("designation"),
        team_id=ref_id(team),
        team_name=doc.get("teamName") or (team.get("name") if isinstance(team, dict) else None),
    )


def team_from_document(doc: dict) -> Team:
    return Team(
        id=ref_id(doc.get("_id") or doc.get("id")),
        name=doc.get("name") or "",
        lead_id=ref_id(doc.get("leadId")),
        member_ids=[mid for mid in (ref_id(m) for m in doc.get("members") or []) if mid],
    )


def team_lookup(teams: List[Team], members: Optional[List[Member]] = None) -> Dict[str, str]:
    """member id -> team id; the first team listing a member wins."""
    lookup: Dict[str, str] = {}
    for team in teams:
        for mid in team.all_member_ids():
            lookup.setdefault(mid, team.id)
    for m in members or []:
        if m.team_id:
            lookup.setdefault(m.id, m.team_id)
    return lookup


def _documents(payload: Any, key: str) -> List[dict]:
    section = payload.get(key, []) if isinstance(payload, dict) else []
    if isinstance(section, dict) and "data" in section:
        section = section["data"]
    if not isinstance(section, list):
        raise ValueError(f"Snapshot '{key}' must be a list of documents")
    return section


def _convert(docs: List[dict], convert, kind: str) -> list:
    out = []
    for doc in docs:
        try:
            out.append(convert(doc))
        except (AttributeError, TypeError, ValidationError) as e:
            logger.warning("Skipping malformed %s document: %s", kind, e)
    return out


def snapshot_from_payload(payload: Any) -> Snapshot:
    if not isinstance(payload, dict):
        raise ValueError("Snapshot must be a JSON object with 'tasks', 'users' and 'teams'")
    tasks = _convert(_documents(payload, "tasks"), task_from_document, "task")
    members = _convert(_documents(payload, "users" if "users" in payload else "members"),
                       member_from_document, "user")
    teams = _convert(_documents(payload, "teams"), team_from_document, "team")
    return Snapshot(tasks=tasks, members=members, teams=teams, team_of=team_lookup(teams, members))


def load_snapshot(path: Optional[str] = None) -> Snapshot:
    p = Path(path or SNAPSHOT_PATH)
    with p.open(encoding="utf-8") as fh:
        payload = json.load(fh)
    snap = snapshot_from_payload(payload)
    logger.info("Loaded %d tasks, %d members, %d teams from %s",
                len(snap.tasks), len(snap.members), len(snap.teams), p)
    return snap
