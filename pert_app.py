"""
PERT / CPM Project Scheduler
============================
Streamlit front end for the critical path engine in ``pert``.

Activities carry a duration and a list of finish-to-start predecessors. The
app computes earliest/latest start and finish times, slack, the project
duration and one critical path, and renders them as tables and charts.

Run with ``streamlit run pert_app.py``.
"""

import logging

import streamlit as st
import matplotlib.pyplot as plt

from pert.engine import PERTScheduler
from pert.parsing import load_activity_lines
from pert.reporting import format_number, format_report
from pert.samples import load_sample_project
from pert.ui_components import build_report_html, critical_path_html
from pert.ui_styles import DEFAULT_THEME, THEMES, get_active_theme, get_theme_css
from pert.visualizations import create_gantt_chart, create_network_diagram, create_plotly_gantt

logger = logging.getLogger(__name__)


def _mark_dirty():
    st.session_state.calculated = False


def render_sidebar(scheduler: PERTScheduler) -> None:
    with st.sidebar:
        theme_name = st.selectbox("Theme", options=list(THEMES), index=list(THEMES).index(DEFAULT_THEME))
        st.session_state.theme_name = theme_name

        st.header("Add Activity")
        with st.form("add_activity_form", clear_on_submit=True):
            activity_id = st.text_input("Activity ID", placeholder="e.g., A, B, TASK1")
            duration = st.number_input("Duration", min_value=0.0, value=1.0, step=1.0)
            predecessors = st.multiselect("Predecessors", options=list(scheduler.activities.keys()))
            submitted = st.form_submit_button("Add Activity", type="primary", use_container_width=True)

        if submitted:
            success, message = scheduler.add_activity(activity_id, duration, predecessors)
            if success:
                _mark_dirty()
                st.success(message)
            else:
                st.error(message)

        st.divider()
        st.header("Bulk Entry")
        st.caption("One activity per line: `ID DURATION [PRED ...]`, e.g. `C 7 A B`.")
        bulk_text = st.text_area("Activities", height=150, key="bulk_text")
        if st.button("Add Lines", use_container_width=True):
            results = load_activity_lines(scheduler, bulk_text.splitlines())
            for line, ok, message in results:
                if not ok:
                    st.error(f"`{line}`: {message}")
            added = sum(1 for _, ok, _ in results if ok)
            if added:
                _mark_dirty()
                st.success(f"Added {added} activities.")

        st.divider()
        st.header("Sample Project")
        if st.button("Load Sample Project (A-N)", use_container_width=True):
            load_sample_project(scheduler)
            _mark_dirty()
            st.rerun()

        if st.button("Clear All Activities", use_container_width=True, type="secondary"):
            scheduler.clear()
            _mark_dirty()
            st.rerun()


def render_results(scheduler: PERTScheduler, theme) -> None:
    st.divider()
    st.header("📈 Calculation Results")

    results_df = scheduler.get_results_dataframe()

    def highlight_critical(row):
        if row['Critical'] == 'Yes':
            return [f"background-color: {theme['critical_soft']}"] * len(row)
        return [''] * len(row)

    st.dataframe(results_df.style.apply(highlight_critical, axis=1), use_container_width=True, hide_index=True)

    st.subheader("Critical Path")
    path = scheduler.get_critical_path()
    st.markdown(
        f'<div class="pert-critical-path">{critical_path_html(path)}</div>',
        unsafe_allow_html=True,
    )

    scheduler_data = scheduler.to_dict()
    tab1, tab2, tab3, tab4 = st.tabs(
        ["📊 Network Diagram", "📅 Gantt Chart", "🖱 Interactive Gantt", "📝 Calculation Details"]
    )

    with tab1:
        st.pyplot(create_network_diagram(scheduler_data, theme))
    with tab2:
        st.pyplot(create_gantt_chart(scheduler_data, theme))
    with tab3:
        st.plotly_chart(create_plotly_gantt(scheduler_data, theme), use_container_width=True)
    with tab4:
        st.text_area("Calculation Steps", value="\n".join(scheduler.calculation_log), height=500, disabled=True)

    col_a, col_b = st.columns(2)
    with col_a:
        st.download_button("Download Text Report", data=format_report(scheduler),
                           file_name="pert_report.txt", mime="text/plain", use_container_width=True)
    with col_b:
        if st.button("Build HTML Report", use_container_width=True):
            html = build_report_html(scheduler, theme)
            st.download_button("Download HTML Report", data=html,
                               file_name="pert_report.html", mime="text/html", use_container_width=True)
            plt.close("all")


def main():
    """Main Streamlit application."""

    st.set_page_config(
        page_title="PERT / CPM Scheduler",
        page_icon="📊",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    if 'scheduler' not in st.session_state:
        st.session_state.scheduler = PERTScheduler()
    if 'calculated' not in st.session_state:
        st.session_state.calculated = False
    scheduler = st.session_state.scheduler

    render_sidebar(scheduler)
    theme = get_active_theme(st.session_state.get("theme_name", DEFAULT_THEME))
    st.markdown(get_theme_css(theme), unsafe_allow_html=True)

    st.title("📊 PERT / CPM Project Scheduler")

    col1, col2 = st.columns([2, 1])

    with col1:
        st.header("Activities")
        if scheduler.activities:
            st.dataframe(scheduler.get_activities_dataframe(), use_container_width=True, hide_index=True)
        else:
            st.info("No activities added yet. Use the sidebar to add activities.")

    with col2:
        st.header("Actions")
        if st.button("🔢 Calculate Critical Path",
                     use_container_width=True, type="primary",
                     disabled=len(scheduler.activities) == 0):
            success, message = scheduler.calculate()
            st.session_state.calculated = success
            if success:
                st.success(message)
            else:
                logger.info("Calculation rejected: %s", message)
                st.error(f"Calculation failed: {message}")

        if st.session_state.calculated and scheduler.is_calculated:
            st.metric("Project Duration", format_number(scheduler.get_project_duration()))
            st.metric("Critical Activities",
                      f"{sum(1 for a in scheduler.activities.values() if a.is_critical)}")

    if st.session_state.calculated and scheduler.is_calculated:
        render_results(scheduler, theme)


if __name__ == "__main__":
    main()
