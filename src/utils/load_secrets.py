import os
import streamlit as st


def load_env_vars():
    """Copy Streamlit secrets into the environment when a secrets.toml exists."""
    if not st.secrets.load_if_toml_exists():
        return
    for k, v in st.secrets.items():
        if isinstance(v, str):
            os.environ.setdefault(k, v)
