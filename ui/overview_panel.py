# ui/overview_panel.py
import streamlit as st

from utils.rollup import Overview

HEALTH_LABELS = {"healthy": "Healthy", "at_risk": "At risk", "critical": "Critical"}


def render_overview(ov: Overview):
    stats = ov.stats
    c1, c2, c3, c4, c5, c6 = st.columns(6)
    with c1: st.metric("Total Tasks", stats.total)
    with c2: st.metric("Completed", stats.completed)
    with c3: st.metric("In Progress", stats.in_progress)
    with c4: st.metric("Overdue", stats.overdue)
    with c5: st.metric("Completion", f"{stats.percentage}%")
    with c6: st.metric("Active Projects", ov.active_projects)
    st.caption(f"Overall health: {HEALTH_LABELS[ov.health.value]}")
