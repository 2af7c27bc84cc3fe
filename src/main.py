import streamlit as st
from ui.state import ensure_state
from utils.constants import Pages
from utils.logging import setup_logging
from config.config import SETTINGS
from di.container import Container


def main():
    setup_logging(SETTINGS.log_level)
    st.set_page_config(page_title="Geo Tutorial", page_icon=":material/map:")
    ensure_state()
    container = Container()

    st.sidebar.title("Navigation")
    selection = st.sidebar.radio(
        "Navigation",
        (
            Pages.TASKS.value["key"],
            Pages.GALLERY.value["key"],
        ),
        format_func=lambda x: {
            Pages.TASKS.value["key"]: Pages.TASKS.value["title"],
            Pages.GALLERY.value["key"]: Pages.GALLERY.value["title"],
        }[x],
        label_visibility="hidden",
    )

    if selection == Pages.GALLERY.value["key"]:
        container.gallery_page().render()
    elif st.session_state.tutorial_finished:
        container.final_page().render()
    else:
        container.task_page().render()


if __name__ == "__main__":
    main()
