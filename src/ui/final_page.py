import streamlit as st
from storage.errors import IdentityUnavailableError
from storage.identity import SessionIdentityProvider
from ui.Page import Page
from ui.state import reset_task_draft


class FinalPage(Page):
    """Shown after the last task: hands out the session id for later review."""

    title = "Congratulations!"

    def __init__(self, identity_provider: SessionIdentityProvider):
        self.identity_provider = identity_provider

    def _start_new_attempt(self):
        self.identity_provider.reset()
        st.session_state.update({"current_task_id": 1, "tutorial_finished": False})
        reset_task_draft()

    def render(self):
        try:
            session_id = self.identity_provider.get_or_create_session_id()
        except IdentityUnavailableError as e:
            st.error(str(e))
            return

        with st.container(border=True):
            st.subheader(self.title)
            st.caption("You have completed all tasks.")
            st.write("Your session ID:")
            st.code(session_id, language=None)
            st.button(
                "Start a new attempt",
                type="primary",
                on_click=self._start_new_attempt,
            )
