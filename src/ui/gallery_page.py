import streamlit as st
from models.models import ResultType, Session
from storage.result_store import ResultStore
from ui.map_display import render_result_map
from ui.net_action import run_store_action
from ui.Page import Page
from utils.constants import TASKS, Label
from utils.session_utils import compute_session_stats, filter_sessions, format_date


class GalleryPage(Page):
    """UI listing every saved session with its results."""

    title = "Saved results gallery"

    def __init__(self, result_store: ResultStore):
        self.result_store = result_store

    def _delete_session(self, session_id: str):
        deleted = run_store_action(
            "Deleting session...", self.result_store.delete_session(session_id)
        )
        if deleted:
            st.toast("Session deleted.")
        else:
            st.toast("Could not delete the session.", icon=":material/error:")

    def _render_results(self, session: Session):
        for result in session.sorted_results():
            task = TASKS[result.task_id - 1] if result.task_id <= len(TASKS) else None
            st.markdown(
                f"**Task {result.task_id}:** {task.instruction if task else ''}"
            )
            st.caption(
                "Type: " + ("area" if result.type == ResultType.POLYGON else "markers")
            )
            render_result_map(result)

    def _render_session(self, session: Session):
        stats = compute_session_stats(session.results, len(TASKS))
        with st.container(border=True):
            header, action = st.columns([5, 1])
            with header:
                st.subheader(f"Session from {format_date(session.created_at)}")
                st.caption(f"ID: {session.id}")
            with action:
                with st.popover(":material/delete:"):
                    st.write(
                        "This cannot be undone. All saved results of this session will be deleted."
                    )
                    st.button(
                        "Delete",
                        key=f"delete_{session.id}",
                        type="primary",
                        on_click=self._delete_session,
                        args=(session.id,),
                    )

            polygons_col, popups_col = st.columns(2)
            polygons_col.markdown(f":material/crop_square: {stats.polygons} polygons")
            popups_col.markdown(f":material/location_on: {stats.popups} markers")
            st.progress(
                min(stats.progress, 100) / 100,
                text=f"Completed {stats.completed} of {stats.total} tasks",
            )
            with st.expander("Show results"):
                self._render_results(session)

    def render(self):
        st.title(self.title)
        search_term = st.text_input(
            Label.SEARCH_SESSIONS.value,
            placeholder=Label.SEARCH_SESSIONS.value,
            label_visibility="collapsed",
        )
        sessions = run_store_action(
            "Loading sessions...", self.result_store.get_all_sessions()
        )
        filtered = filter_sessions(sessions, search_term)

        if not filtered:
            with st.container(border=True):
                if search_term:
                    st.subheader("Nothing found")
                    st.caption("Try a different search term.")
                else:
                    st.subheader("No saved sessions")
                    st.caption("Complete some tasks to see their results here.")
            return

        for session in filtered:
            self._render_session(session)
