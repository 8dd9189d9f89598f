"""
Unit tests for announcer adapters.
"""

import asyncio
import io

import pytest
from rich.console import Console

from resus.protocol.announcer import (
    CUE_SCRIPTS,
    ConsoleAnnouncer,
    Cue,
    Priority,
    QueueAnnouncer,
    RecordingAnnouncer,
    safe_emit,
)


class Exploding:
    def emit(self, cue, priority="normal"):
        raise OSError("audio device busy")


def test_every_cue_has_a_script():
    assert set(CUE_SCRIPTS) == set(Cue)


def test_safe_emit_swallows_failures():
    safe_emit(Exploding(), Cue.EPI_DUE, Priority.HIGH)


def test_safe_emit_without_announcer():
    safe_emit(None, Cue.ROSC)


def test_recording_announcer_keeps_order():
    rec = RecordingAnnouncer()
    safe_emit(rec, Cue.CPR_STARTED, Priority.HIGH)
    safe_emit(rec, Cue.PAUSED)
    assert rec.cues == [("cpr_started", "high"), ("paused", "normal")]
    rec.clear()
    assert rec.names == []


def test_console_announcer_prints_phrase():
    buffer = io.StringIO()
    announcer = ConsoleAnnouncer(Console(file=buffer, force_terminal=False))
    announcer.emit("epi_due", "high")
    announcer.emit("custom_cue")
    output = buffer.getvalue()
    assert "Give epinephrine now" in output
    assert "custom_cue" in output


class TestQueueAnnouncer:
    def test_full_queue_drops_instead_of_blocking(self):
        announcer = QueueAnnouncer(maxsize=1)
        announcer.emit("epi_due", "high")
        announcer.emit("rosc", "high")
        assert announcer.dropped == 1
        assert announcer.queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_drain_forwards_to_target(self):
        announcer = QueueAnnouncer()
        target = RecordingAnnouncer()
        announcer.emit("shock_delivered", "high")
        announcer.emit("epi_given")

        task = asyncio.create_task(announcer.drain(target))
        await asyncio.wait_for(announcer.queue.join(), timeout=1)
        task.cancel()

        assert target.cues == [("shock_delivered", "high"), ("epi_given", "normal")]

    @pytest.mark.asyncio
    async def test_drain_survives_failing_target(self):
        announcer = QueueAnnouncer()
        announcer.emit("rosc", "high")

        task = asyncio.create_task(announcer.drain(Exploding()))
        await asyncio.wait_for(announcer.queue.join(), timeout=1)
        assert not task.done()
        task.cancel()
