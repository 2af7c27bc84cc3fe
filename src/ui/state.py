import streamlit as st


def reset_task_draft():
    """Forget the editor contents so the next render reloads from the store."""
    st.session_state.update(
        {
            "loaded_task_id": None,
            "polygon_rows": [],
            "popup_rows": [],
            "save_error": "",
        }
    )


def ensure_state():
    """Ensure default values exist in this browser session's state.

    Tutorial progress lives only in ``st.session_state`` so that visitors
    never see each other's current task.
    """
    defaults = {
        "current_task_id": 1,
        "tutorial_finished": False,
        "loaded_task_id": None,
        "polygon_rows": [],
        "popup_rows": [],
        "save_in_progress": False,
        "save_error": "",
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)
