"""Tests for SimulationService — real asyncio loop, short runs."""

from __future__ import annotations

import pytest

from ratelock.config.models import RateLockConfig
from ratelock.infrastructure.store import RateStore
from ratelock.services.simulation import Scenario, SimulationService


@pytest.fixture
def fast_config(config: RateLockConfig) -> RateLockConfig:
    return config.model_copy(
        update={"advanced": config.advanced.model_copy(update={"check_interval": 20})}
    )


class TestSimulation:
    def test_keys_then_foreign_write(self, fast_config: RateLockConfig) -> None:
        scenario = Scenario(keys=["alt+d", "alt+d"], foreign_writes=[0.3], run_for=0.1)
        result = SimulationService(fast_config).run(scenario)
        assert result.ok
        report = result.data
        assert report["target_rate"] == 2.0
        (element,) = report["elements"]
        assert element["rate"] == 2.0
        assert element["raw_rate"] == 2.0
        assert element["foreign_writes"] == 1
        assert element["intercepting"] is True
        assert report["notifications"] == ["Speed: 1.50x", "Speed: 2.00x"]
        assert [a["ok"] for a in report["actions"]] == [True, True]

    def test_raw_write_and_reload_corrected(self, fast_config: RateLockConfig) -> None:
        scenario = Scenario(keys=["alt+e"], raw_writes=[0.5], reloads=1, run_for=0.1)
        result = SimulationService(fast_config).run(scenario)
        (element,) = result.data["elements"]
        assert element["raw_rate"] == 2.0
        assert element["corrections"] >= 2
        assert result.data["script_steps"] == 2

    def test_removed_element_released(self, fast_config: RateLockConfig) -> None:
        scenario = Scenario(elements=2, keys=["alt+w"], remove_first=True, run_for=0.1)
        result = SimulationService(fast_config).run(scenario)
        removed, kept = result.data["elements"]
        assert removed["connected"] is False
        assert removed["guarded"] is False
        assert kept["guarded"] is True
        assert kept["rate"] == 1.5

    def test_unbound_key_reported(self, fast_config: RateLockConfig) -> None:
        result = SimulationService(fast_config).run(Scenario(keys=["alt+k"], run_for=0.05))
        assert result.data["actions"] == [
            {"combo": "alt+k", "ok": False, "op": "handle_key", "code": "NO_MATCH"}
        ]

    def test_persisted_rate_restored(self, fast_config: RateLockConfig, store: RateStore) -> None:
        store.save_rate(1.25)
        result = SimulationService(fast_config, store=store).run(Scenario(run_for=0.05))
        assert result.data["target_rate"] == 1.25
        assert result.data["elements"][0]["rate"] == 1.25

    def test_invalid_combo(self, fast_config: RateLockConfig) -> None:
        result = SimulationService(fast_config).run(Scenario(keys=["hyper+d"]))
        assert result.error is not None
        assert result.error.code == "INVALID_COMBO"

    def test_needs_an_element(self, fast_config: RateLockConfig) -> None:
        result = SimulationService(fast_config).run(Scenario(elements=0))
        assert result.error is not None
        assert result.error.code == "INVALID_SCENARIO"
