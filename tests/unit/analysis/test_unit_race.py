# tests/unit/analysis/test_unit_race.py — v1
"""Tests for analysis/race.py — call-vs-timer race and completion tokens."""

from __future__ import annotations

import asyncio

import pytest

from docmeta.analysis.race import CompletionToken, race_with_timeout
from docmeta.core.errors import AnalysisTimeout


async def _after(delay: float, value=None, exc: Exception | None = None):
    await asyncio.sleep(delay)
    if exc is not None:
        raise exc
    return value


class TestCompletionToken:
    def test_initial_state(self):
        token = CompletionToken()
        assert not token.claimed
        assert not token.abandoned

    def test_claim_first_wins(self):
        token = CompletionToken()
        assert token.claim() is True
        assert token.abandon() is False
        assert token.claimed and not token.abandoned

    def test_abandon_first_wins(self):
        token = CompletionToken()
        assert token.abandon() is True
        assert token.claim() is False
        assert token.abandoned and not token.claimed

    def test_repeat_is_noop(self):
        token = CompletionToken()
        token.claim()
        assert token.claim() is False


class TestRaceWithTimeout:
    @pytest.mark.asyncio
    async def test_call_wins(self):
        token = CompletionToken()
        result = await race_with_timeout(_after(0, "ok"), 1.0, "Op", token)
        assert result == "ok"
        assert token.claimed

    @pytest.mark.asyncio
    async def test_timer_wins(self):
        token = CompletionToken()
        with pytest.raises(AnalysisTimeout, match="Op timed out after 0.05 seconds") as exc_info:
            await race_with_timeout(_after(1.0, "late"), 0.05, "Op", token)
        assert token.abandoned
        assert exc_info.value.timeout_s == 0.05
        assert exc_info.value.operation == "Op"

    @pytest.mark.asyncio
    async def test_call_error_propagates(self):
        token = CompletionToken()
        with pytest.raises(ValueError, match="provider down"):
            await race_with_timeout(_after(0, exc=ValueError("provider down")), 1.0, "Op", token)
        assert token.claimed

    @pytest.mark.asyncio
    async def test_abandoned_call_not_cancelled(self):
        finished = asyncio.Event()

        async def slow():
            await asyncio.sleep(0.1)
            finished.set()
            return "late"

        with pytest.raises(AnalysisTimeout):
            await race_with_timeout(slow(), 0.01, "Op")
        await asyncio.wait_for(finished.wait(), timeout=1.0)
        assert finished.is_set()

    @pytest.mark.asyncio
    async def test_late_failure_is_consumed(self, caplog):
        with pytest.raises(AnalysisTimeout):
            await race_with_timeout(_after(0.05, exc=RuntimeError("late boom")), 0.01, "Op")
        with caplog.at_level("DEBUG", logger="docmeta.analysis.race"):
            await asyncio.sleep(0.1)
        assert any("late boom" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_pre_settled_token_reports_timeout(self):
        token = CompletionToken()
        token.abandon()
        with pytest.raises(AnalysisTimeout):
            await race_with_timeout(_after(0, "ok"), 1.0, "Op", token)

    @pytest.mark.asyncio
    async def test_outer_cancellation_abandons(self):
        token = CompletionToken()
        outer = asyncio.ensure_future(race_with_timeout(_after(1.0), 5.0, "Op", token))
        await asyncio.sleep(0.01)
        outer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await outer
        assert token.abandoned
