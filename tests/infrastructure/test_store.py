"""Tests for RateStore."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import inspect, select

from ratelock.infrastructure.database.engine import init_database
from ratelock.infrastructure.database.schema import preferences
from ratelock.infrastructure.store import RATE_KEY, RateStore


class TestDatabase:
    def test_creates_parent_and_table(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path / "nested" / "state.db")
        try:
            assert "preferences" in inspect(engine).get_table_names()
        finally:
            engine.dispose()

    def test_init_is_idempotent(self, tmp_path: Path) -> None:
        init_database(tmp_path / "state.db").dispose()
        init_database(tmp_path / "state.db").dispose()


class TestRateStore:
    def test_round_trip(self, store: RateStore) -> None:
        assert store.load_rate() is None
        assert store.save_rate(1.75) is True
        assert store.load_rate() == 1.75

    def test_overwrite(self, store: RateStore) -> None:
        store.save_rate(1.5)
        store.save_rate(2.25)
        assert store.load_rate() == 2.25
        with store.engine.connect() as conn:
            rows = conn.execute(select(preferences.c.key)).all()
        assert rows == [(RATE_KEY,)]

    def test_clear(self, store: RateStore) -> None:
        store.save_rate(2.0)
        assert store.clear() is True
        assert store.clear() is False
        assert store.load_rate() is None

    @pytest.mark.parametrize("raw", ["fast", "nan", "inf", "-1", "0"])
    def test_unusable_values_ignored(self, store: RateStore, raw: str) -> None:
        store.put(RATE_KEY, raw)
        assert store.load_rate() is None

    def test_survives_reopen(self, tmp_path: Path) -> None:
        path = tmp_path / "state.db"
        first = RateStore.open(path)
        assert first is not None
        first.save_rate(3.0)
        first.close()
        second = RateStore.open(path)
        assert second is not None
        assert second.load_rate() == 3.0
        second.close()

    def test_open_failure_returns_none(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        assert RateStore.open(blocker / "state.db") is None

    def test_errors_are_best_effort(self, store: RateStore) -> None:
        preferences.drop(store.engine)
        assert store.save_rate(1.5) is False
        assert store.load_rate() is None
        assert store.clear() is False
