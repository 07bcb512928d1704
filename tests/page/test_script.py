"""Tests for scripted page behaviour."""

from __future__ import annotations

from typing import Any

from ratelock.page.document import MediaDocument
from ratelock.page.script import PageScript, StepKind


class TestPageScript:
    def test_steps_run_in_time_order(self, document: MediaDocument, loop: Any) -> None:
        element = document.create_media("a", duration=30.0)
        script = PageScript(document)
        script.add(0.2, StepKind.RAW_WRITE, value=0.5)
        script.add(0.1, StepKind.WRITE, value=1.5)
        script.start(loop)

        loop.advance(0.1)
        assert element.playback_rate == 1.5
        loop.advance(0.1)
        assert element.get_raw_rate() == 0.5
        assert [s.kind for s in script.executed] == [StepKind.WRITE, StepKind.RAW_WRITE]

    def test_reload_and_remove(self, document: MediaDocument, loop: Any) -> None:
        first = document.create_media("a", duration=30.0, current_time=12.0)
        document.create_media("b")
        script = PageScript(document)
        script.add(0.1, "reload", element_id="a")
        script.add(0.2, StepKind.REMOVE, element_id="a")
        script.start(loop)
        loop.advance(0.3)
        assert first.current_time == 0.0
        assert not first.is_connected
        assert [e.element_id for e in document.query_media()] == ["b"]

    def test_missing_element_skipped(self, document: MediaDocument, loop: Any) -> None:
        script = PageScript(document).add(0.1, StepKind.WRITE, element_id="ghost", value=2.0)
        script.start(loop)
        loop.advance(0.2)
        assert script.executed == []

    def test_cancel(self, document: MediaDocument, loop: Any) -> None:
        element = document.create_media("a")
        script = PageScript(document).add(0.1, StepKind.RAW_WRITE, value=3.0)
        script.start(loop)
        script.cancel()
        loop.advance(1.0)
        assert element.get_raw_rate() == 1.0
