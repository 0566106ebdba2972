"""Daily quota rate limiter.

This module tracks remote catalog calls against a fixed quota that resets
once per window. It is a pure admission check: callers ask ``can_call``
before dispatching and ``record_call`` after deciding to dispatch. State is
loaded once at startup and persisted after every mutation.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cinesearch.shared.constants import RateLimitConfig, StorageKeys
from cinesearch.shared.errors import ApplicationError, ErrorCode, ErrorContext
from cinesearch.storage import KeyValueStore
from cinesearch.storage.codec import read_json, write_json

logger = logging.getLogger(__name__)


class RateLimiterState(BaseModel):
    """Persisted quota state.

    ``reset_at`` is a Unix timestamp in seconds. The persisted form uses the
    ``resetAt`` key.
    """

    calls: int = Field(default=0, ge=0)
    reset_at: float = Field(default=0.0, alias="resetAt")

    model_config = ConfigDict(populate_by_name=True)


class DailyQuotaRateLimiter:
    """Quota tracker with a rolling reset window.

    Args:
        store: Key-value store holding the quota state
        max_calls: Calls admitted per window (default: 900)
        window_seconds: Window length in seconds (default: 24h)
        clock: Callable returning the current Unix time
        storage_key: Key the state is persisted under
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_calls: int = RateLimitConfig.MAX_CALLS_PER_WINDOW,
        window_seconds: float = RateLimitConfig.WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
        storage_key: str = StorageKeys.RATE_LIMIT,
    ) -> None:
        context = ErrorContext(
            operation="rate_limiter_init",
            additional_data={"max_calls": max_calls, "window_seconds": window_seconds},
        )
        if max_calls <= 0:
            raise ApplicationError(
                ErrorCode.VALIDATION_ERROR,
                f"max_calls must be positive, got: {max_calls}",
                context,
            )
        if window_seconds <= 0:
            raise ApplicationError(
                ErrorCode.VALIDATION_ERROR,
                f"window_seconds must be positive, got: {window_seconds}",
                context,
            )

        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._store = store
        self._clock = clock
        self._storage_key = storage_key
        self._state = RateLimiterState(calls=0, reset_at=clock() + window_seconds)
        self._lock = threading.Lock()

    @property
    def state(self) -> RateLimiterState:
        """Copy of the current quota state."""
        with self._lock:
            return self._state.model_copy()

    @property
    def calls(self) -> int:
        return self._state.calls

    def load(self, now: float | None = None) -> RateLimiterState:
        """Load the persisted state, resetting it if its window has expired.

        A missing or malformed record starts a fresh window.

        Args:
            now: Current time, defaults to the injected clock

        Returns:
            The state in effect after loading
        """
        now = self._clock() if now is None else now
        raw = read_json(self._store, self._storage_key)
        with self._lock:
            loaded = self._parse(raw)
            if loaded is None:
                self._state = RateLimiterState(calls=0, reset_at=now + self.window_seconds)
                self._persist()
            else:
                self._state = loaded
                self._reset_if_expired(now)
            logger.debug(
                "Loaded quota state: %d/%d calls, resets at %.0f",
                self._state.calls,
                self.max_calls,
                self._state.reset_at,
            )
            return self._state.model_copy()

    def can_call(self, now: float | None = None) -> bool:
        """Check whether a remote call is admitted.

        Args:
            now: Current time, defaults to the injected clock

        Returns:
            True if fewer than ``max_calls`` calls were made in this window
        """
        now = self._clock() if now is None else now
        with self._lock:
            self._reset_if_expired(now)
            return self._state.calls < self.max_calls

    def record_call(self, now: float | None = None) -> int:
        """Count one remote call and persist the state.

        Returns:
            Calls made in the current window
        """
        now = self._clock() if now is None else now
        with self._lock:
            self._reset_if_expired(now)
            self._state = RateLimiterState(
                calls=self._state.calls + 1,
                reset_at=self._state.reset_at,
            )
            self._persist()
            return self._state.calls

    def remaining(self, now: float | None = None) -> int:
        now = self._clock() if now is None else now
        with self._lock:
            self._reset_if_expired(now)
            return max(0, self.max_calls - self._state.calls)

    def _reset_if_expired(self, now: float) -> None:
        if now >= self._state.reset_at:
            logger.info("Quota window expired, resetting call counter")
            self._state = RateLimiterState(calls=0, reset_at=now + self.window_seconds)
            self._persist()

    def _parse(self, raw: Any) -> RateLimiterState | None:
        if not isinstance(raw, dict):
            return None
        try:
            return RateLimiterState.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed quota state under '%s'", self._storage_key)
            return None

    def _persist(self) -> None:
        write_json(
            self._store,
            self._storage_key,
            self._state.model_dump(by_alias=True),
        )
