import streamlit as st
from contextlib import contextmanager
from typing import Awaitable, TypeVar
from utils.async_utils import run_async

T = TypeVar("T")


@contextmanager
def net_action(text: str):
    with st.spinner(text, show_time=True):
        yield


def run_store_action(text: str, awaitable: Awaitable[T]) -> T:
    """Await a store call behind a spinner."""
    with net_action(text):
        return run_async(awaitable)
