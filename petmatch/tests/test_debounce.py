# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the debounced query pipeline.
"""

import asyncio
import pytest

from petmatch.domain.debounce import AsyncioScheduler, DebouncedQuery, ManualScheduler


class Recorder:
    """Collects commits with the virtual time they happened at."""

    def __init__(self, scheduler):
        self.scheduler = scheduler
        self.commits = []

    def __call__(self, value):
        self.commits.append((self.scheduler.now(), value))


class TestManualScheduler:
    """Virtual clock behaviour."""

    def test_fires_in_due_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(200, lambda: fired.append(("b", scheduler.now())))
        scheduler.call_later(100, lambda: fired.append(("a", scheduler.now())))

        scheduler.advance(250)

        assert fired == [("a", 100), ("b", 200)]
        assert scheduler.now() == 250

    def test_cancelled_timer_does_not_fire(self):
        scheduler = ManualScheduler()
        fired = []
        timer = scheduler.call_later(10, lambda: fired.append(True))
        timer.cancel()

        scheduler.advance(100)

        assert fired == []
        assert scheduler.pending == 0


class TestDebouncedQuery:
    """Quiescence-window commits."""

    def test_burst_commits_once_with_latest_value(self):
        """Test inputs at t=0,100,150 commit once at t=450 with the last value."""
        scheduler = ManualScheduler()
        recorder = Recorder(scheduler)
        query = DebouncedQuery(recorder, scheduler, window_ms=300)

        query.push("r")
        scheduler.advance_to(100)
        query.push("ro")
        scheduler.advance_to(150)
        query.push("roc")
        scheduler.advance_to(449)

        assert recorder.commits == []
        assert query.pending

        scheduler.advance_to(1000)

        assert recorder.commits == [(450, "roc")]
        assert not query.pending

    def test_separate_bursts_commit_separately(self):
        scheduler = ManualScheduler()
        recorder = Recorder(scheduler)
        query = DebouncedQuery(recorder, scheduler, window_ms=300)

        query.push("luna")
        scheduler.advance_to(400)
        query.push("rocky")
        scheduler.advance_to(800)

        assert recorder.commits == [(300, "luna"), (700, "rocky")]

    def test_no_commit_before_quiet_window(self):
        """Test a value is only committed once a full window passed without input."""
        scheduler = ManualScheduler()
        recorder = Recorder(scheduler)
        query = DebouncedQuery(recorder, scheduler, window_ms=300)

        query.push("r")
        scheduler.advance_to(10)

        assert recorder.commits == []
        assert query.pending

        scheduler.advance_to(310)

        assert recorder.commits == [(300, "r")]

    def test_cancel_drops_pending_value(self):
        scheduler = ManualScheduler()
        recorder = Recorder(scheduler)
        query = DebouncedQuery(recorder, scheduler)

        query.push("rocky")
        query.cancel()
        scheduler.advance(1000)

        assert recorder.commits == []
        assert not query.closed

    def test_close_prevents_commits(self):
        """Test teardown cancels the pending commit and ignores later input."""
        scheduler = ManualScheduler()
        recorder = Recorder(scheduler)
        query = DebouncedQuery(recorder, scheduler, window_ms=300)

        query.push("rocky")
        query.close()
        query.push("luna")
        scheduler.advance(1000)

        assert recorder.commits == []
        assert query.closed
        assert scheduler.pending == 0

    def test_negative_window_rejected(self):
        with pytest.raises(ValueError):
            DebouncedQuery(lambda value: None, ManualScheduler(), window_ms=-1)


class TestAsyncioScheduler:
    """Debounce on a real event loop."""

    def test_commits_after_window(self):
        commits = []

        async def scenario():
            query = DebouncedQuery(commits.append, AsyncioScheduler(), window_ms=20)
            query.push("ro")
            await asyncio.sleep(0.005)
            query.push("rocky")
            await asyncio.sleep(0.1)

        asyncio.run(scenario())

        assert commits == ["rocky"]
