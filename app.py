"""
Financial Independence Projection - Main Streamlit App

Projects income, taxes, registered and unregistered savings and
retirement readiness one year at a time.

Run with:
    streamlit run app.py
"""

import sys
from pathlib import Path

import streamlit as st

# Configure page
st.set_page_config(
    page_title="FIRE Projection",
    page_icon="🔥",
    layout="wide",
    initial_sidebar_state="expanded"
)

sys.path.insert(0, str(Path(__file__).parent))

from fire_model.ui import run_main_app

run_main_app(st_module=st, app_root=Path(__file__).parent)
