"""PreferenceService — inspect and edit the persisted last rate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ratelock.domain.rates import clamp_rate
from ratelock.services.result import ServiceResult

if TYPE_CHECKING:
    from ratelock.config.models import RateLockConfig
    from ratelock.infrastructure.store import RateStore


class PreferenceService:
    """Operations on the ``ratelock.last_rate`` preference."""

    def __init__(self, config: RateLockConfig, store: RateStore | None) -> None:
        self._config = config
        self._store = store

    def _unavailable(self, op: str) -> ServiceResult:
        return ServiceResult.failure(
            op,
            "STORE_UNAVAILABLE",
            f"State database unavailable at {self._config.storage.path}",
        )

    def show(self) -> ServiceResult:
        """Report the saved rate and the rate a page would start at."""
        if self._store is None:
            return self._unavailable("show_rate")
        speed = self._config.speed
        saved = self._store.load_rate()
        startup = saved if speed.remember_last_rate and saved is not None else speed.default_rate
        return ServiceResult(
            ok=True,
            op="show_rate",
            data={
                "saved_rate": saved,
                "startup_rate": clamp_rate(startup, speed.min_rate, speed.max_rate),
                "remember_last_rate": speed.remember_last_rate,
                "path": str(self._config.storage.path),
            },
        )

    def set_rate(self, rate: float) -> ServiceResult:
        """Persist *rate* (clamped to the configured bounds)."""
        if self._store is None:
            return self._unavailable("set_rate")
        speed = self._config.speed
        clamped = clamp_rate(rate, speed.min_rate, speed.max_rate)
        if not self._store.save_rate(clamped):
            return ServiceResult.failure("set_rate", "WRITE_FAILED", "Could not persist rate")
        warnings: list[str] = []
        if clamped != rate:
            warnings.append(f"Rate {rate} clamped to {clamped}")
        if not speed.remember_last_rate:
            warnings.append("remember_last_rate is off; the saved rate is ignored at startup")
        return ServiceResult(ok=True, op="set_rate", data={"rate": clamped}, warnings=warnings)

    def clear(self) -> ServiceResult:
        if self._store is None:
            return self._unavailable("clear_rate")
        removed = self._store.clear()
        return ServiceResult(ok=True, op="clear_rate", data={"removed": removed})
