# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Filter session: wires user input, filter state, the address bar and the feed.

Facet changes apply immediately. Free-text input is debounced and applied
once typing settles. Every settled state is written to the URL with a history
replace and triggers a feed refresh.
"""

import os
import logging
from typing import Any, Callable, Iterable, Optional, Protocol, Union

from ..domain import filter_state as transitions
from ..domain.debounce import DEFAULT_WINDOW_MS, DebouncedQuery, Scheduler
from ..domain.url_codec import from_query_string, to_query_string
from ..models.enums import Facet, RequestStatus, Species
from ..models.filters import FilterState
from .feed import RequestFeed

logger = logging.getLogger(__name__)


class History(Protocol):
    """Address bar collaborator."""

    def replace(self, query_string: str) -> None:
        ...


def debounce_window_ms() -> float:
    """Debounce window from PETMATCH_DEBOUNCE_MS."""
    return float(os.getenv("PETMATCH_DEBOUNCE_MS", DEFAULT_WINDOW_MS))


class UrlSynchronizer:
    """Writes the canonical encoding of settled states to the history."""

    def __init__(self, history: History, current_query: Optional[str] = None):
        self.history = history
        self._current = current_query

    @property
    def current_query(self) -> Optional[str]:
        return self._current

    def sync(self, state: FilterState) -> bool:
        """Replace the URL if its encoding changed. Returns True when replaced."""
        query_string = to_query_string(state)
        if query_string == self._current:
            return False
        self.history.replace(query_string)
        self._current = query_string
        return True


class FilterSession:
    """
    One page view of the request feed.

    Args:
        feed: Feed loader refreshed on every settled state
        history: Address bar collaborator
        scheduler: Clock for the free-text debounce
        window_ms: Debounce window (defaults to PETMATCH_DEBOUNCE_MS)
        state: Starting state
    """

    def __init__(
        self,
        feed: RequestFeed,
        history: History,
        scheduler: Scheduler,
        window_ms: Optional[float] = None,
        state: Optional[FilterState] = None,
        refresh: Optional[Callable[[FilterState], Any]] = None
    ):
        self.feed = feed
        self.state = state or transitions.empty_state()
        self.url = UrlSynchronizer(history)
        self._refresh = refresh or feed.refresh
        self._text_input = DebouncedQuery(
            self._commit_text,
            scheduler,
            window_ms if window_ms is not None else debounce_window_ms()
        )

    @classmethod
    def from_query_string(
        cls,
        query_string: Optional[str],
        feed: RequestFeed,
        history: History,
        scheduler: Scheduler,
        **kwargs
    ) -> "FilterSession":
        """Start a session from the page URL."""
        session = cls(feed, history, scheduler, state=from_query_string(query_string), **kwargs)
        session.url = UrlSynchronizer(history, current_query=(query_string or "").lstrip("?"))
        return session

    @property
    def closed(self) -> bool:
        return self._text_input.closed

    @property
    def active_filter_count(self) -> int:
        return transitions.active_filter_count(self.state)

    def start(self) -> None:
        """Canonicalize the URL and load the first page of the feed."""
        self.url.sync(self.state)
        self._refresh(self.state)

    def toggle(self, facet: Union[Facet, str], value: Any) -> None:
        self._apply(transitions.toggle_facet_value(self.state, facet, value))

    def select_species(self, values: Iterable[Union[Species, str]]) -> None:
        self._apply(transitions.set_species(self.state, values))

    def set_location(self, text: Optional[str]) -> None:
        self._apply(transitions.set_location(self.state, text))

    def set_tab(self, status: Union[RequestStatus, str]) -> None:
        self._apply(transitions.set_tab(self.state, status))

    def type_text(self, text: str) -> None:
        """Raw keystroke input for the search box."""
        self._text_input.push(text)

    def submit_text(self, text: str) -> None:
        """
        Explicit search submit (e.g. on Enter).

        Bypasses the debounce: pending keystrokes are dropped and ``text`` is
        applied at once.
        """
        self._text_input.cancel()
        self._apply(transitions.set_free_text(self.state, text))

    def clear(self) -> None:
        """Reset every filter and drop pending search input."""
        self._text_input.cancel()
        self._apply(transitions.clear(self.state))

    def close(self) -> None:
        """End the session; pending input is discarded."""
        self._text_input.close()

    def _commit_text(self, text: str) -> None:
        self._apply(transitions.set_free_text(self.state, text))

    def _apply(self, new_state: FilterState) -> None:
        if self.closed:
            return
        if new_state == self.state:
            return
        self.state = new_state
        logger.debug(
            "Filter state settled",
            extra={"active_filters": transitions.active_filter_count(new_state)}
        )
        self.url.sync(new_state)
        self._refresh(new_state)
