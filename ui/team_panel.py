# ui/team_panel.py
from datetime import datetime
from typing import Dict, List

import streamlit as st
import pandas as pd

from models.member import Member
from models.team import Team
from utils.frames import leaderboard_frame
from utils.indexer import AssigneeBucket, TeamIndex
from utils.rollup import best_teams, effectiveness_rating, lead_effectiveness, team_leaderboard, team_summary


def _team_rows(summaries, names: Dict[str, str]) -> pd.DataFrame:
    return pd.DataFrame([{
        "Team": names.get(s.team_id, s.team_id),
        "Tasks": s.stats.total,
        "Completed": s.stats.completed,
        "Overdue": s.stats.overdue,
        "Completion %": s.stats.percentage,
        "Health": s.health.value,
    } for s in summaries])


def render_team_panel(teams: List[Team], members: List[Member], team_index: TeamIndex,
                      assignee_index: Dict[str, AssigneeBucket], now: datetime):
    st.subheader("Teams")
    names = {t.id: t.name for t in teams}

    st.markdown("**Best performing teams**")
    top = best_teams(team_index, now=now)
    if top:
        st.dataframe(_team_rows(top, names), use_container_width=True, hide_index=True)
    else:
        st.info("No team has tasks yet.")

    with st.expander("All teams"):
        st.dataframe(_team_rows(team_summary(team_index, now=now), names),
                     use_container_width=True, hide_index=True)

    if not teams:
        return
    options = {t.name or t.id: t for t in teams}
    team = options[st.selectbox("Leaderboard for", list(options.keys()))]
    roster_ids = set(team.all_member_ids())
    roster = [m for m in members if m.id in roster_ids]

    if team.lead_id:
        score = lead_effectiveness(team.lead_id, assignee_index, roster, now=now)
        st.metric("Lead effectiveness", f"{score}", effectiveness_rating(score), delta_color="off")

    entries = team_leaderboard(team_index.subset([team.id]), roster, now=now)
    if not entries:
        st.info("This team has no members yet.")
        return
    st.dataframe(leaderboard_frame(entries), use_container_width=True, hide_index=True,
                 column_config={"Efficiency": st.column_config.ProgressColumn(
                     "Efficiency", min_value=0, max_value=100, format="%d%%")})
