"""
Streamlit entry point for Persona Dossier.

Renders the input form, the recent-analyses list and one of four views
(idle, analyzing, result, error) from the `DossierSession` kept in
st.session_state for each browser session.

Clicking "Generate Dossier" only moves the session into the analyzing state.
The run that follows renders the disabled controls and the loading view, then
makes the provider call at the end of the script and reruns to show the outcome.
"""

from __future__ import annotations

import logging
from datetime import date

import streamlit as st
from dotenv import load_dotenv

from agents import DossierAgent
from dossier_state_manager import DossierResult, DossierSession, ViewState

# Ensure environment variables from .env are loaded before instantiating the agent.
load_dotenv()

LOGGER = logging.getLogger(__name__)

SESSION_KEY = "dossier_session"
INPUT_KEY = "dossier_input"
GENERATE_KEY = "generate"
CLEAR_KEY = "clear_input"
RESULT_ANCHOR = "dossier-result"

INPUT_PLACEHOLDER = "Enter name, social media handles, or raw text about the person..."
LOADING_MESSAGE = "Scanning global databases and aggregating sources..."
IDLE_MESSAGE = "Awaiting Input"
DISCLAIMER = (
    "This tool uses advanced AI to aggregate publicly available information. "
    "Accuracy is not guaranteed. Use for investigative purposes only."
)


@st.cache_resource(show_spinner=False)
def _get_agent() -> DossierAgent:
    """Create a singleton DossierAgent per Streamlit process."""
    return DossierAgent()


def _session() -> DossierSession:
    return st.session_state[SESSION_KEY]


def _init_session_state() -> DossierSession:
    """Initialize keys stored in st.session_state."""
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = DossierSession()
    if INPUT_KEY not in st.session_state:
        st.session_state[INPUT_KEY] = ""
    session = _session()
    session.input_text = st.session_state[INPUT_KEY]
    return session


# ----------------------------------------------------------------------
# Widget callbacks (run before the script reruns)
# ----------------------------------------------------------------------
def _request_analysis() -> None:
    session = _session()
    session.input_text = st.session_state[INPUT_KEY]
    session.request_analysis()


def _clear_input() -> None:
    _session().clear_input()
    st.session_state[INPUT_KEY] = ""


def _select_history(index: int) -> None:
    session = _session()
    session.select_history_entry(session.history[index])


# ----------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------
def _render_header(agent: DossierAgent) -> None:
    title_col, status_col = st.columns([3, 2])
    with title_col:
        st.title("Persona Dossier")
        st.caption("Advanced Investigative Intelligence")
    with status_col:
        st.caption(f"System Online · {agent.model_name} · {date.today().isoformat()}")


def _render_input(session: DossierSession) -> None:
    st.subheader("Target Identification")
    st.text_area(
        "Target details",
        key=INPUT_KEY,
        height=256,
        placeholder=INPUT_PLACEHOLDER,
        label_visibility="collapsed",
        disabled=session.is_analyzing,
    )

    st.button("Clear input", key=CLEAR_KEY, on_click=_clear_input, disabled=session.is_analyzing)
    st.button(
        "Generate Dossier",
        key=GENERATE_KEY,
        type="primary",
        on_click=_request_analysis,
        disabled=not session.can_submit,
        width="stretch",
    )

    if session.error:
        st.error(session.error)


def _render_history(session: DossierSession) -> None:
    if not len(session.history):
        return
    st.divider()
    st.subheader("Recent Analyses")
    for idx, entry in enumerate(session.history):
        st.button(
            f"{entry.label}  ·  {entry.timestamp}",
            key=f"history-{idx}",
            on_click=_select_history,
            args=(idx,),
            width="stretch",
        )


def _render_result(result: DossierResult) -> None:
    st.markdown(f'<div id="{RESULT_ANCHOR}"></div>', unsafe_allow_html=True)
    st.subheader("Intelligence Report")
    st.caption("CONFIDENTIAL // INTERNAL USE ONLY")
    st.markdown(result.text)

    if result.sources:
        st.divider()
        st.subheader("Verified Sources")
        for source in result.sources:
            st.markdown(f"- [{source.display_title}]({source.uri})  \n  `{source.hostname}`")


def _scroll_to_result() -> None:
    st.iframe(
        "<script>"
        f"window.parent.document.getElementById('{RESULT_ANCHOR}')"
        "?.scrollIntoView({behavior: 'smooth'});"
        "</script>"
    )


def _render_output(session: DossierSession) -> None:
    state = session.view_state
    if state is ViewState.ANALYZING:
        st.info(LOADING_MESSAGE)
    elif state is ViewState.RESULT and session.result is not None:
        _render_result(session.result)
        if session.consume_scroll_request():
            _scroll_to_result()
    elif state is ViewState.ERROR:
        st.caption("The last analysis failed. Adjust the input and try again.")
    else:
        st.caption(IDLE_MESSAGE)


def main() -> None:
    st.set_page_config(
        page_title="Persona Dossier",
        layout="wide",
    )

    session = _init_session_state()

    try:
        agent = _get_agent()
    except Exception as exc:  # pragma: no cover - defensive guard for UI
        LOGGER.exception("Streamlit failed to initialize DossierAgent: %s", exc)
        st.error(f"Failed to initialize the dossier agent.\n\nDetails: {exc}")
        return

    _render_header(agent)

    input_col, output_col = st.columns([5, 7], gap="large")
    with input_col:
        _render_input(session)
        _render_history(session)
    with output_col:
        _render_output(session)

    st.divider()
    st.caption(f"Persona Dossier AI · {DISCLAIMER}")

    if session.pending_input is not None:
        with st.spinner("Analyzing Data..."):
            session.run_pending(agent.analyze)
        st.rerun()


if __name__ == "__main__":
    main()
