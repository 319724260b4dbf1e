#!/usr/bin/env python3
"""
Streamlit UI for the Interview Scheduler.

Provides two pages:
- Schedule: pick a candidate, interviewers and a slot, book via the proxy
- Events: past interviews with AI summary, conclusion and transcript

Usage:
    uv run python proxy_server.py  # Terminal 1
    uv run streamlit run streamlit_ui.py --server.port 8501  # Terminal 2
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta
from typing import Final

import streamlit as st

from scheduler_platform import PLATFORM_NAME, load_ui_settings
from scheduler_platform.models import Event
from scheduler_platform.webhooks import WebhookGateway
from scheduler_views import (
    EventsView,
    LoadState,
    ScheduleFailure,
    ScheduleProxyClient,
    ScheduleSuccess,
    SchedulingView,
    format_datetime,
    format_duration,
)
from scheduler_views.events import WAITING_FOR_RECORDING, transcript_line_html

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger: logging.Logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================

UI_SETTINGS = load_ui_settings()

PAGE_SCHEDULE: Final[str] = "Schedule"
PAGE_EVENTS: Final[str] = "Events"
PAGES: Final[tuple[str, ...]] = (PAGE_SCHEDULE, PAGE_EVENTS)

TIME_STEP: Final[timedelta] = timedelta(minutes=30)


# =============================================================================
# Page Configuration
# =============================================================================

st.set_page_config(
    page_title=PLATFORM_NAME,
    page_icon="📅",
    layout="centered",
)


# =============================================================================
# Custom CSS
# =============================================================================

st.markdown("""
<style>
#MainMenu {visibility: hidden;}
footer {visibility: hidden;}
.stDeployButton {display: none;}

.transcript-line {
    background: #F8FAFC;
    border: 1px solid #E2E8F0;
    border-radius: 8px;
    padding: 0.5rem 0.75rem;
    margin-bottom: 0.4rem;
}

.transcript-meta {
    font-size: 0.8rem;
    font-weight: 600;
    color: #1565C0;
}
</style>
""", unsafe_allow_html=True)


# =============================================================================
# State Management
# =============================================================================

def build_gateway() -> WebhookGateway:
    return WebhookGateway(UI_SETTINGS.endpoints)


def build_schedule_view() -> SchedulingView:
    proxy_client = ScheduleProxyClient(
        UI_SETTINGS.proxy_endpoint,
        timeout_seconds=UI_SETTINGS.timeout_seconds,
    )
    return SchedulingView(build_gateway(), proxy_client)


def build_events_view() -> EventsView:
    return EventsView(build_gateway())


def mount_page(page: str) -> None:
    """
    Create a fresh view whenever a page is entered.

    A view instance is one page mount: its load runs once and its UI flags
    live until the page is left or the browser session is reloaded.
    """
    if st.session_state.get("page") == page:
        return
    st.session_state.page = page
    if page == PAGE_SCHEDULE:
        st.session_state.schedule_view = build_schedule_view()
    else:
        st.session_state.events_view = build_events_view()


def combine_slot(day: date | None, slot: time | None) -> datetime | None:
    """Combine picker values into a local, offset-aware datetime."""
    if day is None or slot is None:
        return None
    return datetime.combine(day, slot).astimezone()


# =============================================================================
# Schedule Page
# =============================================================================

def render_schedule_result(view: SchedulingView) -> None:
    result = view.result
    if isinstance(result, ScheduleSuccess):
        with st.container(border=True):
            st.success(result.message)
            if view.simulation_started:
                st.markdown(
                    "**Simulation started, results will be available in few minutes.**"
                )
            else:
                if st.button(
                    "Simulate meet conversation & initiate AI processing",
                    type="primary",
                    disabled=not view.can_simulate,
                ):
                    asyncio.run(view.simulate_processing())
                    st.rerun()
                st.caption(
                    "** Pressing Simulate ... is needed only for MVP. In real application "
                    "it will be hooked to Meet recording delivery and started automatically."
                )
    elif isinstance(result, ScheduleFailure):
        st.error(result.message)


def render_schedule_page() -> None:
    view: SchedulingView = st.session_state.schedule_view

    if view.load_state is LoadState.LOADING:
        with st.spinner("Loading candidates and interviewers..."):
            asyncio.run(view.load())

    st.markdown("### Schedule Interview")

    candidates = {c.email: c for c in view.candidates}
    candidate_email = st.selectbox(
        "Candidate",
        options=list(candidates),
        index=None,
        format_func=lambda email: candidates[email].label,
        placeholder="Select a candidate",
        key="candidate_email",
    )
    view.select_candidate(candidate_email)

    interviewers = {i.email: i for i in view.interviewers}
    interviewer_emails = st.multiselect(
        "Interviewers",
        options=list(interviewers),
        format_func=lambda email: interviewers[email].label,
        placeholder="Select interviewers",
        key="interviewer_emails",
    )
    view.select_interviewers(interviewer_emails)

    default_slot = view.selected_datetime or datetime.now().astimezone()
    col_date, col_time = st.columns(2)
    with col_date:
        day = st.date_input("Date", value=default_slot.date(), key="slot_date")
    with col_time:
        slot = st.time_input(
            "Time",
            value=default_slot.time().replace(tzinfo=None),
            step=TIME_STEP,
            key="slot_time",
        )
    view.select_datetime(combine_slot(day, slot))

    if st.button(
        "Schedule",
        type="primary",
        disabled=not view.can_submit,
        use_container_width=True,
    ):
        with st.spinner("Scheduling..."):
            asyncio.run(view.submit())

    render_schedule_result(view)


# =============================================================================
# Events Page
# =============================================================================

def render_event(view: EventsView, key: str, event: Event) -> None:
    with st.container(border=True):
        st.markdown(f"#### {event.description}")

        start, end = event.start.date_time, event.end.date_time
        st.markdown(
            f"**Time:** {format_datetime(start)} – {format_datetime(end)} "
            f"({format_duration(start, end)})"
        )

        if event.candidate is not None:
            st.markdown(f"**Candidate:** {event.candidate.label}")
        st.markdown(
            "**Interviewers:** " + ", ".join(i.label for i in event.interviewers)
        )

        if event.summary:
            st.markdown("**Summary**")
            st.write(event.summary)

        if event.has_transcript:
            st.info(f"🧠 **AI Conclusion:** {event.conclusion or ''}")

            expanded = view.is_expanded(key)
            toggle_label = "🗣️ Transcript ▲" if expanded else "🗣️ Transcript ▼"
            if st.button(toggle_label, key=f"toggle_{key}"):
                view.toggle_transcript(key)
                st.rerun()

            for line in view.visible_transcript(key, event):
                st.markdown(transcript_line_html(line), unsafe_allow_html=True)
        else:
            col_status, col_action = st.columns([3, 2])
            with col_status:
                st.warning(WAITING_FOR_RECORDING)
            with col_action:
                if st.button(
                    view.processing_label(key, event),
                    key=f"simulate_{key}",
                    disabled=view.processing_started(key, event),
                ):
                    asyncio.run(view.restart_processing(key, event))
                    st.rerun()


def render_events_page() -> None:
    view: EventsView = st.session_state.events_view

    st.markdown("### Interview Events")

    if view.load_state is LoadState.LOADING:
        with st.spinner("Loading events..."):
            asyncio.run(view.load())

    for key, event in view.keyed_events():
        render_event(view, key, event)


# =============================================================================
# Main Application
# =============================================================================

def main() -> None:
    """
    Main Streamlit application entry point.

    Sidebar navigation switches between the Schedule and Events pages.
    """
    with st.sidebar:
        st.markdown(f"### {PLATFORM_NAME}")
        page = st.radio("Navigate", PAGES, label_visibility="collapsed")

    mount_page(page)

    if page == PAGE_SCHEDULE:
        render_schedule_page()
    else:
        render_events_page()


if __name__ == "__main__":
    main()
