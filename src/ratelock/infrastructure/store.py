"""RateStore — best-effort persistence of the last requested rate.

One scalar under a fixed key, written on every successful rate change
(when enabled) and read once at startup. Storage is best effort: any
database error is logged and reported as "not saved" / "nothing saved",
never raised to the guard.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from ratelock.infrastructure.database.engine import init_database
from ratelock.infrastructure.database.schema import preferences

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

RATE_KEY = "ratelock.last_rate"

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class RateStore:
    """Key-value access to the ``preferences`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, db_path: Path) -> RateStore | None:
        """Open (creating if needed) the store at *db_path*; None on failure."""
        try:
            return cls(init_database(db_path))
        except (OSError, SQLAlchemyError):
            logger.warning("State database unavailable at %s", db_path, exc_info=True)
            return None

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Generic key-value
    # ------------------------------------------------------------------

    def get(self, key: str) -> str | None:
        try:
            with self._engine.connect() as conn:
                return conn.execute(
                    select(preferences.c.value).where(preferences.c.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError:
            logger.warning("Failed to read preference %s", key, exc_info=True)
            return None

    def put(self, key: str, value: str) -> bool:
        stmt = insert(preferences).values(key=key, value=value, updated=_now_iso())
        stmt = stmt.on_conflict_do_update(
            index_elements=[preferences.c.key],
            set_={"value": stmt.excluded.value, "updated": stmt.excluded.updated},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError:
            logger.warning("Failed to write preference %s", key, exc_info=True)
            return False
        return True

    def remove(self, key: str) -> bool:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(delete(preferences).where(preferences.c.key == key))
        except SQLAlchemyError:
            logger.warning("Failed to delete preference %s", key, exc_info=True)
            return False
        return bool(result.rowcount)

    # ------------------------------------------------------------------
    # Last rate
    # ------------------------------------------------------------------

    def load_rate(self) -> float | None:
        """The persisted rate, or None if absent or unparseable."""
        raw = self.get(RATE_KEY)
        if raw is None:
            return None
        try:
            rate = float(raw)
        except ValueError:
            logger.warning("Ignoring unparseable stored rate %r", raw)
            return None
        if math.isnan(rate) or math.isinf(rate) or rate <= 0:
            logger.warning("Ignoring invalid stored rate %r", raw)
            return None
        return rate

    def save_rate(self, rate: float) -> bool:
        return self.put(RATE_KEY, repr(float(rate)))

    def clear(self) -> bool:
        return self.remove(RATE_KEY)
