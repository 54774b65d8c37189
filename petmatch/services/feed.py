# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request feed loader.

Every fetch is tagged with a generation number. Only the result of the most
recently issued fetch is applied; anything older is discarded, so a slow
response can never overwrite a newer one.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from opentelemetry import trace

from ..domain.predicates import Predicate, compile_predicate, filter_requests
from ..models.entities import DonationRequest
from ..models.filters import FilterState

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

Supplier = Callable[[FilterState], List[DonationRequest]]
Listener = Callable[["FeedSnapshot"], None]


@dataclass(frozen=True)
class FeedSnapshot:
    """What the feed currently shows."""
    requests: List[DonationRequest] = field(default_factory=list)
    error: Optional[Exception] = None
    generation: int = 0
    loading: bool = False


class RequestFeed:
    """
    Feed loader with a last-request-wins policy.

    Args:
        supplier: Callable returning the records for a filter state
        predicate_factory: Builds the local predicate applied to fetched records
    """

    def __init__(
        self,
        supplier: Supplier,
        predicate_factory: Callable[[FilterState], Predicate] = compile_predicate
    ):
        self._supplier = supplier
        self._predicate_factory = predicate_factory
        self._latest = 0
        self._snapshot = FeedSnapshot()
        self._listeners: List[Listener] = []

    @property
    def snapshot(self) -> FeedSnapshot:
        return self._snapshot

    @property
    def latest_generation(self) -> int:
        return self._latest

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener`` with every new snapshot."""
        self._listeners.append(listener)

    def begin(self) -> int:
        """Issue a new generation and mark the feed as loading."""
        self._latest += 1
        self._publish(FeedSnapshot(
            requests=self._snapshot.requests,
            error=None,
            generation=self._latest,
            loading=True
        ))
        return self._latest

    def is_current(self, generation: int) -> bool:
        return generation == self._latest

    def complete(self, generation: int, requests: List[DonationRequest]) -> bool:
        """Apply a fetch result. Returns False when the result was stale."""
        if not self.is_current(generation):
            self._discard(generation, "result")
            return False
        self._publish(FeedSnapshot(requests=list(requests), generation=generation))
        return True

    def fail(self, generation: int, error: Exception) -> bool:
        """Apply a fetch failure. Returns False when the failure was stale."""
        if not self.is_current(generation):
            self._discard(generation, "error")
            return False
        logger.warning(
            "Request feed refresh failed",
            extra={"generation": generation, "error": str(error)}
        )
        self._publish(FeedSnapshot(
            requests=self._snapshot.requests,
            error=error,
            generation=generation
        ))
        return True

    def refresh(self, state: FilterState) -> FeedSnapshot:
        """Fetch and apply synchronously."""
        generation = self.begin()
        with tracer.start_as_current_span("feed.refresh") as span:
            span.set_attribute("feed.generation", generation)
            try:
                records = self._supplier(state)
            except Exception as e:
                span.record_exception(e)
                self.fail(generation, e)
            else:
                self.complete(generation, self._filter(records, state))
        return self._snapshot

    async def refresh_async(self, state: FilterState) -> FeedSnapshot:
        """
        Fetch in the default executor and apply on the event loop.

        Overlapping calls are allowed; only the newest one lands.
        """
        generation = self.begin()
        loop = asyncio.get_running_loop()
        try:
            records = await loop.run_in_executor(None, self._supplier, state)
        except Exception as e:
            self.fail(generation, e)
        else:
            self.complete(generation, self._filter(records, state))
        return self._snapshot

    def _filter(self, records: List[DonationRequest], state: FilterState) -> List[DonationRequest]:
        return filter_requests(records, state, self._predicate_factory(state))

    def _discard(self, generation: int, kind: str) -> None:
        logger.debug(
            "Discarding stale feed %s",
            kind,
            extra={"generation": generation, "latest_generation": self._latest}
        )

    def _publish(self, snapshot: FeedSnapshot) -> None:
        self._snapshot = snapshot
        for listener in self._listeners:
            listener(snapshot)
