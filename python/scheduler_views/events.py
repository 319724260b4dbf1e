"""
Events view state.

Lists interview events straight from the n8n events webhook and tracks the
per-event UI state (transcript expanded, AI processing re-triggered) in
explicit mappings owned by the view.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from scheduler_platform.models import Event, TranscriptLine
from scheduler_platform.webhooks import WebhookDispatchResult, WebhookGateway

from .lifecycle import LoadState


__all__ = [
    "EventUiState",
    "EventsView",
    "ProcessingState",
    "format_datetime",
    "format_duration",
    "parse_timestamp",
    "transcript_line_html",
]


logger = logging.getLogger(__name__)

WAITING_FOR_RECORDING = "Waiting for meet recording..."
RESTART_PROCESSING = "Re-Start AI Processing"
PROCESSING_IN_PROGRESS = "AI processing in progress..."


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or malformed."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_datetime(value: str | None) -> str:
    """Format as ``YYYY-MM-DD HH:mm`` in the timestamp's own offset."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return value or ""
    return parsed.strftime("%Y-%m-%d %H:%M")


def format_duration(start: str | None, end: str | None) -> str:
    """
    Whole minutes from ``start`` to ``end``.

    Negative, zero and unparseable ranges all render as ``0 minutes``.
    """
    start_at = parse_timestamp(start)
    end_at = parse_timestamp(end)
    minutes = 0
    if start_at is not None and end_at is not None:
        try:
            minutes = int((end_at - start_at).total_seconds() // 60)
        except TypeError:
            # naive vs aware timestamps
            minutes = 0
    minutes = max(minutes, 0)
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


def transcript_line_html(line: TranscriptLine) -> str:
    """Render one transcript line as escaped HTML for the events page."""
    return (
        '<div class="transcript-line">'
        f'<div class="transcript-meta">[{html.escape(line.timestamp)}] '
        f"{html.escape(line.speaker)}</div>"
        f"<div>{html.escape(line.message)}</div>"
        "</div>"
    )


class ProcessingState(str, Enum):
    """Local re-trigger state for one event. Never reset except by reload."""

    IDLE = "idle"
    STARTED = "started"


@dataclass
class EventUiState:
    """Transient UI flags for one event."""

    expanded: bool = False


class EventsView:
    """
    State behind the Events page.

    One instance corresponds to one page mount; ``load`` is single-shot.
    Transcript state is keyed by the event record: its ``id``, falling back
    to ``eventID``, then its position in the list. Re-trigger state is keyed
    by ``eventID``, so records sharing one show the same progress.
    """

    def __init__(self, gateway: WebhookGateway) -> None:
        self._gateway = gateway
        self._load_started = False
        self._ui: dict[str, EventUiState] = {}
        self._processing: dict[str, ProcessingState] = {}

        self.load_state = LoadState.LOADING
        self.events: list[Event] = []

    async def load(self) -> LoadState:
        """Fetch events once. Failures are logged and render as an empty list."""
        if self._load_started:
            return self.load_state
        self._load_started = True

        try:
            self.events = await self._gateway.fetch_events()
        except Exception as exc:  # noqa: BLE001 - silent degrade to empty list
            logger.warning("Error loading events: %s", exc)
            self.events = []
            self.load_state = LoadState.LOAD_ERROR
            return self.load_state

        self.load_state = LoadState.LOADED
        logger.info("Loaded %d events", len(self.events))
        return self.load_state

    @staticmethod
    def event_key(event: Event, index: int) -> str:
        return event.id or event.event_id or str(index)

    def keyed_events(self) -> list[tuple[str, Event]]:
        """Events in upstream order, paired with their UI state key."""
        return [(self.event_key(event, i), event) for i, event in enumerate(self.events)]

    def ui_state(self, key: str) -> EventUiState:
        return self._ui.setdefault(key, EventUiState())

    # -------------------------------------------------------------------------
    # Transcript
    # -------------------------------------------------------------------------

    def is_expanded(self, key: str) -> bool:
        return self.ui_state(key).expanded

    def toggle_transcript(self, key: str) -> bool:
        state = self.ui_state(key)
        state.expanded = not state.expanded
        return state.expanded

    def visible_transcript(self, key: str, event: Event) -> list[TranscriptLine]:
        """Transcript lines to render: all of them when expanded, none otherwise."""
        if not event.has_transcript or not self.is_expanded(key):
            return []
        return list(event.transcription or [])

    # -------------------------------------------------------------------------
    # AI processing re-trigger
    # -------------------------------------------------------------------------

    @staticmethod
    def processing_key(key: str, event: Event) -> str:
        return event.event_id or key

    def processing_state(self, key: str, event: Event) -> ProcessingState:
        return self._processing.get(self.processing_key(key, event), ProcessingState.IDLE)

    def processing_started(self, key: str, event: Event) -> bool:
        return self.processing_state(key, event) is ProcessingState.STARTED

    def processing_label(self, key: str, event: Event) -> str:
        if self.processing_started(key, event):
            return PROCESSING_IN_PROGRESS
        return RESTART_PROCESSING

    async def restart_processing(
        self, key: str, event: Event
    ) -> WebhookDispatchResult | None:
        """
        Re-trigger AI processing for one event.

        Best-effort one-way command. Returns None when already started for
        this eventID, otherwise the dispatch result.
        """
        if self.processing_started(key, event):
            return None

        self._processing[self.processing_key(key, event)] = ProcessingState.STARTED
        if not event.event_id:
            logger.warning("Event %s has no eventID; simulation not sent", key)
            return None
        return await self._gateway.trigger_simulation(event.event_id)
