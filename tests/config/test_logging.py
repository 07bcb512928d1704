"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json
import logging

from ratelock.config.logging import configure_logging, element_context


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("ratelock").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("ratelock").level == logging.WARNING

    def test_third_party_stays_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy").level == logging.WARNING

    def test_repeat_calls_do_not_stack_handlers(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_json_mode_output(self) -> None:
        stream = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=stream)
        logging.getLogger("ratelock.guard.test").warning("drift on %s", "media-1")
        parsed = json.loads(stream.getvalue().strip())
        assert parsed["event"] == "drift on media-1"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "ratelock.guard.test"
        assert "timestamp" in parsed


class TestElementContext:
    def test_binds_element_field(self) -> None:
        stream = io.StringIO()
        configure_logging(verbose=True, log_json=True, stream=stream)
        with element_context("media-7"):
            logging.getLogger("ratelock.guard.test").debug("corrected")
        logging.getLogger("ratelock.guard.test").debug("outside")
        inside, outside = (json.loads(line) for line in stream.getvalue().splitlines())
        assert inside["element"] == "media-7"
        assert "element" not in outside
