"""Data-fetch lifecycle shared by the schedule and events views."""

from __future__ import annotations

from enum import Enum


class LoadState(str, Enum):
    """
    Lifecycle of a view's initial fetch.

    ``LOADING`` is left exactly once per view instance, for ``LOADED`` or
    ``LOAD_ERROR``. A load error renders the empty state; it is logged and
    never shown to the user. There is no retry; a new view instance (page
    reload) is required.
    """

    LOADING = "loading"
    LOADED = "loaded"
    LOAD_ERROR = "load_error"

    @property
    def is_settled(self) -> bool:
        return self is not LoadState.LOADING
