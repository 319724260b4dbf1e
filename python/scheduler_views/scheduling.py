"""
Scheduling view state.

Loads the candidate and interviewer lists, holds the current selection and
drives one booking attempt at a time through the proxy endpoint.

Booking lifecycle:
    IDLE -> SUBMITTING -> SUCCESS(event_id) | ERROR(message)

SUCCESS and ERROR stay put until the user submits again.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Union

from fastapi import status

from scheduler_platform.errors import (
    MissingSelectionError,
    SchedulingValidationError,
    TransportError,
    UpstreamTimeoutError,
)
from scheduler_platform.models import Person, ScheduleRequest
from scheduler_platform.webhooks import WebhookDispatchResult, WebhookGateway
from scheduler_platform.webhooks.base import UpstreamReply

from .lifecycle import LoadState
from .proxy_client import ScheduleProxyClient, UnexpectedResponseError


__all__ = [
    "BookingState",
    "FailureReason",
    "ScheduleFailure",
    "ScheduleResult",
    "ScheduleSuccess",
    "SchedulingView",
    "classify_schedule_reply",
    "default_schedule_time",
]


logger = logging.getLogger(__name__)

UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from the server."
CONNECTION_FAILURE_MESSAGE = "Unable to connect to the scheduling service."


class BookingState(str, Enum):
    """State of the current booking attempt."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class FailureReason(str, Enum):
    """Why a booking failed; keeps timeouts apart from server errors."""

    SERVER_REPORTED = "server_reported"
    UNEXPECTED_RESPONSE = "unexpected_response"
    TIMEOUT = "timeout"
    CONNECTION = "connection"


@dataclass(frozen=True)
class ScheduleSuccess:
    event_id: str

    @property
    def message(self) -> str:
        return f"Interview scheduled successfully. Event ID: {self.event_id}"


@dataclass(frozen=True)
class ScheduleFailure:
    message: str
    reason: FailureReason


ScheduleResult = Union[ScheduleSuccess, ScheduleFailure]


def default_schedule_time(now: datetime | None = None) -> datetime:
    """Return the next full hour, or ``now`` when it is already on the hour."""
    current = now or datetime.now().astimezone()
    if current.minute == 0:
        return current.replace(second=0, microsecond=0)
    return (current + timedelta(hours=1)).replace(minute=0, second=0, microsecond=0)


def classify_schedule_reply(reply: UpstreamReply) -> ScheduleResult:
    """Map a proxy reply onto success, server-reported error or unexpected."""
    body = reply.body if isinstance(reply.body, dict) else {}

    event_id = body.get("eventID")
    if event_id:
        return ScheduleSuccess(event_id=str(event_id))

    error = body.get("error")
    if error:
        reason = (
            FailureReason.TIMEOUT
            if reply.status_code == status.HTTP_504_GATEWAY_TIMEOUT
            else FailureReason.SERVER_REPORTED
        )
        return ScheduleFailure(message=str(error), reason=reason)

    return ScheduleFailure(
        message=UNEXPECTED_RESPONSE_MESSAGE,
        reason=FailureReason.UNEXPECTED_RESPONSE,
    )


class SchedulingView:
    """
    State behind the Schedule page.

    One instance corresponds to one page mount; ``load`` is single-shot.
    """

    def __init__(
        self,
        gateway: WebhookGateway,
        proxy_client: ScheduleProxyClient,
        now: datetime | None = None,
    ) -> None:
        self._gateway = gateway
        self._proxy_client = proxy_client
        self._load_started = False

        self.load_state = LoadState.LOADING
        self.candidates: list[Person] = []
        self.interviewers: list[Person] = []

        self.selected_candidate_email: str | None = None
        self.selected_interviewer_emails: list[str] = []
        self.selected_datetime: datetime | None = default_schedule_time(now)

        self.booking_state = BookingState.IDLE
        self.result: ScheduleResult | None = None
        self.simulation_started = False

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self) -> LoadState:
        """Fetch both reference lists concurrently; failures degrade to empty."""
        if self._load_started:
            return self.load_state
        self._load_started = True

        candidates, interviewers = await asyncio.gather(
            self._gateway.fetch_candidates(),
            self._gateway.fetch_interviewers(),
            return_exceptions=True,
        )

        failures = [r for r in (candidates, interviewers) if isinstance(r, BaseException)]
        if failures:
            for failure in failures:
                logger.warning("Error loading reference lists: %s", failure)
            self.load_state = LoadState.LOAD_ERROR
            return self.load_state

        self.candidates = candidates
        self.interviewers = interviewers
        self.load_state = LoadState.LOADED
        logger.info(
            "Loaded %d candidates and %d interviewers",
            len(self.candidates),
            len(self.interviewers),
        )
        return self.load_state

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_candidate(self, email: str | None) -> None:
        self.selected_candidate_email = email or None

    def select_interviewers(self, emails: Iterable[str]) -> None:
        self.selected_interviewer_emails = list(emails)

    def select_datetime(self, when: datetime | None) -> None:
        self.selected_datetime = when

    @property
    def is_submitting(self) -> bool:
        return self.booking_state is BookingState.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return (
            not self.is_submitting
            and bool(self.selected_candidate_email)
            and bool(self.selected_interviewer_emails)
            and self.selected_datetime is not None
        )

    def build_request(self) -> ScheduleRequest:
        """Resolve the selected emails back to full records from the loaded lists."""
        if not self.can_submit:
            raise MissingSelectionError()

        candidate = next(
            (c for c in self.candidates if c.email == self.selected_candidate_email),
            None,
        )
        selected = set(self.selected_interviewer_emails)
        interviewers = [i for i in self.interviewers if i.email in selected]
        if candidate is None or not interviewers:
            raise MissingSelectionError()

        return ScheduleRequest.build(candidate, interviewers, self.selected_datetime)

    # -------------------------------------------------------------------------
    # Booking
    # -------------------------------------------------------------------------

    async def submit(self) -> ScheduleResult:
        """
        Run one booking attempt through the proxy.

        Raises:
            SchedulingValidationError: A request is already in flight.
            MissingSelectionError: A required selection is missing.
        """
        if self.is_submitting:
            raise SchedulingValidationError(
                "A scheduling request is already in flight.",
                error_code="SUBMIT_IN_FLIGHT",
            )
        request = self.build_request()

        self.booking_state = BookingState.SUBMITTING
        self.result = None
        self.simulation_started = False

        try:
            result = await self._attempt(request)
        except BaseException:
            # Never leave the view in SUBMITTING; the caller still sees the error.
            logger.exception("Scheduling request aborted unexpectedly")
            self.result = ScheduleFailure(
                message=CONNECTION_FAILURE_MESSAGE, reason=FailureReason.CONNECTION
            )
            self.booking_state = BookingState.ERROR
            raise

        self.result = result
        if isinstance(result, ScheduleSuccess):
            self.booking_state = BookingState.SUCCESS
            logger.info("Interview scheduled: %s", result.event_id)
        else:
            self.booking_state = BookingState.ERROR
            logger.warning("Scheduling failed (%s): %s", result.reason.value, result.message)
        return result

    async def _attempt(self, request: ScheduleRequest) -> ScheduleResult:
        try:
            reply = await self._proxy_client.schedule(request)
        except UpstreamTimeoutError as exc:
            return ScheduleFailure(message=exc.message, reason=FailureReason.TIMEOUT)
        except UnexpectedResponseError as exc:
            return ScheduleFailure(
                message=exc.message, reason=FailureReason.UNEXPECTED_RESPONSE
            )
        except TransportError as exc:
            return ScheduleFailure(message=exc.message, reason=FailureReason.CONNECTION)
        return classify_schedule_reply(reply)

    @property
    def can_simulate(self) -> bool:
        return isinstance(self.result, ScheduleSuccess) and not self.simulation_started

    async def simulate_processing(self) -> WebhookDispatchResult:
        """
        Fire-and-forget the downstream AI processing for the booked event.

        The started flag flips whatever the outcome of the call.
        """
        if not isinstance(self.result, ScheduleSuccess):
            raise SchedulingValidationError("No scheduled interview to simulate.")

        self.simulation_started = True
        return await self._gateway.trigger_simulation(self.result.event_id)
