"""
Interview Scheduler views.

View state and lifecycle for the Schedule and Events pages, independent of
the Streamlit rendering in ``streamlit_ui.py``.

Components:
    - SchedulingView: Reference-list loading and the booking state machine
    - EventsView: Event listing with per-event transcript / re-trigger state
    - ScheduleProxyClient: Client side of the bounded proxy endpoint
"""

from .events import EventsView, EventUiState, ProcessingState, format_datetime, format_duration
from .lifecycle import LoadState
from .proxy_client import ScheduleProxyClient, UnexpectedResponseError
from .scheduling import (
    BookingState,
    FailureReason,
    ScheduleFailure,
    ScheduleResult,
    ScheduleSuccess,
    SchedulingView,
    classify_schedule_reply,
    default_schedule_time,
)

__all__ = [
    "BookingState",
    "EventUiState",
    "EventsView",
    "FailureReason",
    "LoadState",
    "ProcessingState",
    "ScheduleFailure",
    "ScheduleProxyClient",
    "ScheduleResult",
    "ScheduleSuccess",
    "SchedulingView",
    "UnexpectedResponseError",
    "classify_schedule_reply",
    "default_schedule_time",
    "format_datetime",
    "format_duration",
]
