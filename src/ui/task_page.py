import pandas as pd
import streamlit as st
from typing import Any, List
from models.models import ResultType, Task
from storage.errors import IdentityUnavailableError, StorageError
from storage.identity import SessionIdentityProvider
from storage.result_store import ResultStore
from ui.map_display import render_map
from ui.net_action import run_store_action
from ui.Page import Page
from ui.state import reset_task_draft
from utils.constants import TASKS, Label
from utils.session_utils import (
    polygon_rows_to_rings,
    popup_rows_to_popups,
    result_to_polygon_rows,
    result_to_popup_rows,
    validate_submission,
)

POLYGON_COLUMNS = [Label.RING.value, Label.LATITUDE.value, Label.LONGITUDE.value]
POPUP_COLUMNS = [Label.LATITUDE.value, Label.LONGITUDE.value, Label.CONTENT.value]

COORDINATE_COLUMNS = {
    Label.LATITUDE.value: st.column_config.NumberColumn(
        Label.LATITUDE.value, min_value=-90.0, max_value=90.0, format="%.6f", required=True
    ),
    Label.LONGITUDE.value: st.column_config.NumberColumn(
        Label.LONGITUDE.value, min_value=-180.0, max_value=180.0, format="%.6f", required=True
    ),
}


class TaskPage(Page):
    """UI for drawing an area or placing markers for the current task."""

    title = "Task"

    def __init__(
        self,
        result_store: ResultStore,
        identity_provider: SessionIdentityProvider,
    ):
        self.result_store = result_store
        self.identity_provider = identity_provider

    def _current_task(self) -> Task:
        task_id = min(max(int(st.session_state.current_task_id), 1), len(TASKS))
        return TASKS[task_id - 1]

    def _go_to_task(self, task_id: int):
        st.session_state.current_task_id = task_id
        reset_task_draft()

    def _set_save_in_progress_true(self):
        st.session_state.save_in_progress = True

    def _load_existing_result(self, session_id: str, task: Task):
        """Fill the editor from the stored result once per task visit."""
        if st.session_state.loaded_task_id == task.id:
            return
        result = run_store_action(
            "Loading saved result...",
            self.result_store.get_task_results(session_id, task.id),
        )
        st.session_state.polygon_rows = result_to_polygon_rows(result)
        st.session_state.popup_rows = result_to_popup_rows(result)
        st.session_state.loaded_task_id = task.id

    def _edit_payload(self, session_id: str, task: Task) -> List[Any]:
        if task.type == ResultType.POLYGON:
            edited = st.data_editor(
                pd.DataFrame(st.session_state.polygon_rows, columns=POLYGON_COLUMNS),
                num_rows="dynamic",
                width="stretch",
                key=f"polygon_editor_{session_id}_{task.id}",
                column_config={
                    Label.RING.value: st.column_config.NumberColumn(
                        Label.RING.value, min_value=1, step=1, default=1
                    ),
                    **COORDINATE_COLUMNS,
                },
            )
            return polygon_rows_to_rings(edited.to_dict("records"))

        edited = st.data_editor(
            pd.DataFrame(st.session_state.popup_rows, columns=POPUP_COLUMNS),
            num_rows="dynamic",
            width="stretch",
            key=f"popup_editor_{session_id}_{task.id}",
            column_config={
                **COORDINATE_COLUMNS,
                Label.CONTENT.value: st.column_config.TextColumn(
                    Label.CONTENT.value, required=True
                ),
            },
        )
        return popup_rows_to_popups(edited.to_dict("records"))

    def _submit(self, session_id: str, task: Task, payload: List[Any]):
        st.session_state.save_error = ""
        saved = False
        try:
            saved = run_store_action(
                "Saving your result...",
                self.result_store.save_task_result(session_id, task.id, payload, task.type),
            )
        except StorageError as e:
            st.session_state.save_error = f"Could not save your result: {e}"
        finally:
            st.session_state.save_in_progress = False

        if not saved:
            st.session_state.save_error = (
                st.session_state.save_error or "Could not save your result. Please try again."
            )
            return

        if task.id < len(TASKS):
            st.session_state.current_task_id = task.id + 1
        else:
            st.session_state.tutorial_finished = True
        reset_task_draft()
        st.toast(
            "Your drawing was saved."
            if task.type == ResultType.POLYGON
            else "Your markers were saved."
        )
        st.rerun()

    def render(self):
        try:
            session_id = self.identity_provider.get_or_create_session_id()
        except IdentityUnavailableError as e:
            st.error(str(e))
            st.stop()

        task = self._current_task()
        self._load_existing_result(session_id, task)

        st.title(f"Task {task.id}")
        st.progress(task.id / len(TASKS), text=f"Task {task.id} of {len(TASKS)}")

        left, right = st.columns([1, 2])
        with left:
            with st.container(border=True):
                st.markdown(task.instruction)
                st.caption(
                    "Task type: "
                    + ("draw an area" if task.type == ResultType.POLYGON else "place markers")
                )
            payload = self._edit_payload(session_id, task)
        with right:
            if task.type == ResultType.POLYGON:
                render_map(polygons=payload)
            else:
                render_map(popups=payload)

        if st.session_state.save_error:
            st.error(st.session_state.save_error)

        back_col, submit_col = st.columns(2)
        with back_col:
            st.button(
                "Previous task",
                disabled=task.id == 1 or st.session_state.save_in_progress,
                on_click=self._go_to_task,
                args=(task.id - 1,),
                width="stretch",
            )
        with submit_col:
            submitted = st.button(
                Label.SUBMIT_POLYGON.value
                if task.type == ResultType.POLYGON
                else Label.SUBMIT_POPUPS.value,
                type="primary",
                disabled=st.session_state.save_in_progress,
                on_click=self._set_save_in_progress_true,
                width="stretch",
            )

        if not submitted:
            return

        error = validate_submission(task.type, payload)
        if error:
            st.session_state.save_in_progress = False
            st.error(error)
            return

        self._submit(session_id, task, payload)
