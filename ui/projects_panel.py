# ui/projects_panel.py
from datetime import datetime
from typing import Dict, List

import streamlit as st
import plotly.express as px

from models.task import Task
from utils.frames import project_frame
from utils.indexer import active_projects
from utils.rollup import project_summary

__all__ = ["render_projects_panel"]


def render_projects_panel(tasks: List[Task], project_index: Dict[str, List[Task]], now: datetime):
    st.subheader("Projects")
    st.metric("Active projects", len(active_projects(tasks)))

    df = project_frame(project_summary(project_index, now=now))
    if df.empty:
        st.info("No tasks in this snapshot.")
        return

    fig = px.bar(df, x="Project", y=["Completed", "In Progress", "Pending", "Blocked"], barmode="stack")
    fig.update_layout(margin=dict(l=10, r=10, t=10, b=10), xaxis_title="", yaxis_title="", legend_title="")
    st.plotly_chart(fig, use_container_width=True)
    st.dataframe(df, use_container_width=True, hide_index=True)
