# ui/members_panel.py
from collections import Counter
from datetime import datetime
from typing import Dict, List

import streamlit as st
import plotly.express as px

from models.member import Member
from utils.frames import member_project_frame
from utils.indexer import AssigneeBucket
from utils.progress import classify_health
from utils.rollup import member_report, status_breakdown

HEALTH_BADGES = {"healthy": "🟢 Healthy", "at_risk": "🟠 At risk", "critical": "🔴 Critical"}


def member_labels(members: List[Member]) -> Dict[str, Member]:
    """Selectbox labels; members sharing a name and team get their id appended."""
    def base(m):
        return f"{m.name or m.id} ({m.team_name or 'No team'})"

    counts = Counter(base(m) for m in members)
    return {base(m) if counts[base(m)] == 1 else f"{base(m)} [{m.id}]": m for m in members}


def render_members_panel(members: List[Member], index: Dict[str, AssigneeBucket], now: datetime):
    st.subheader("Member Breakdown")
    if not members:
        st.info("No members in this snapshot.")
        return

    labels = member_labels(members)
    member = labels[st.selectbox("Member", list(labels.keys()))]
    report = member_report(member.id, index, now=now)
    stats = report.stats

    c1, c2, c3, c4, c5 = st.columns(5)
    with c1: st.metric("Items", stats.total)
    with c2: st.metric("Completed", stats.completed)
    with c3: st.metric("In Progress", stats.in_progress)
    with c4: st.metric("Overdue", stats.overdue)
    with c5: st.metric("% Complete", f"{stats.percentage}%")
    st.caption(HEALTH_BADGES[classify_health(stats).value])

    if stats.total == 0:
        st.info("No tasks or subtasks assigned yet.")
        return

    col1, col2 = st.columns(2, gap="medium")
    with col1:
        st.markdown("**Status**")
        pairs = status_breakdown(stats)
        fig = px.pie(names=[p[0] for p in pairs], values=[p[1] for p in pairs], hole=0.5)
        fig.update_layout(margin=dict(l=10, r=10, t=10, b=10))
        st.plotly_chart(fig, use_container_width=True)
    with col2:
        st.markdown("**Progress by project**")
        df = member_project_frame(report)
        fig = px.bar(df, y="Project", x="Progress", text="Progress", orientation="h", range_x=[0, 100])
        fig.update_layout(margin=dict(l=10, r=10, t=10, b=10), yaxis_title="", xaxis_title="")
        st.plotly_chart(fig, use_container_width=True)
