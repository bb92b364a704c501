# ui/gantt_panel.py
import streamlit as st
import plotly.express as px

from utils.frames import deadline_frame


def render_deadline_panel(tasks):
    st.subheader("Deadlines")
    df = deadline_frame(tasks)
    if df.empty:
        st.info("Add tasks/subtasks with deadlines to see the timeline.")
    else:
        fig = px.scatter(df, x="Deadline", y="Item", color="Status",
                         hover_data=["Type", "Assignee", "Progress", "Project"])
        fig.update_yaxes(autorange="reversed")
        st.plotly_chart(fig, use_container_width=True)
