# main.py

#============================================================#
#                       Strivio-Rollup                       #
#============================================================#
# Purpose     : Dashboard over a task snapshot: member cards,#
#               team leaderboards, project charts and a      #
#               deadline timeline, all from one rollup pass. #
#============================================================#

import logging
from pathlib import Path
from typing import Optional

import streamlit as st

import db
from utils.indexer import index_by_assignee, index_by_project, index_by_team
from utils.progress import utc_now
from utils.rollup import overview
from ui.overview_panel import render_overview
from ui.members_panel import render_members_panel
from ui.projects_panel import render_projects_panel
from ui.team_panel import render_team_panel
from ui.gantt_panel import render_deadline_panel

logging.basicConfig(level=db.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("strivio")

st.set_page_config(
    page_title="Strivio - Progress",
    layout="wide",
    initial_sidebar_state="collapsed",
)


def _mtime(path: str) -> Optional[float]:
    try:
        return Path(path).stat().st_mtime
    except OSError:
        return None


# mtime is part of the cache key so a re-exported snapshot is picked up
@st.cache_data
def _load(path: str, mtime: Optional[float]):
    return db.load_snapshot(path)


path = st.sidebar.text_input("Snapshot file", value=db.SNAPSHOT_PATH)
try:
    snapshot = _load(path, _mtime(path))
except (OSError, ValueError) as e:
    logger.error("Could not load snapshot %s: %s", path, e)
    st.error(f"Could not load snapshot: {e}")
    st.stop()

# one clock reading and one snapshot for every widget on the page
now = utc_now()
assignee_index = index_by_assignee(snapshot.tasks, seed_members=snapshot.members)
project_index = index_by_project(snapshot.tasks)
team_index = index_by_team(snapshot.tasks, snapshot.team_of)

render_overview(overview(snapshot.tasks, now=now))
st.markdown("---")

tab1, tab2, tab3, tab4 = st.tabs(["Members", "Teams", "Projects", "Deadlines"])
with tab1:
    render_members_panel(snapshot.members, assignee_index, now)
with tab2:
    render_team_panel(snapshot.teams, snapshot.members, team_index, assignee_index, now)
with tab3:
    render_projects_panel(snapshot.tasks, project_index, now)
with tab4:
    render_deadline_panel(snapshot.tasks)
