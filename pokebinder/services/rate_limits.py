"""
Rate limits: per-identifier action throttling.

Limits how often one identifier (a user id, a hashed IP) may perform an
action such as adding cards or exporting binders. Counters live in a
RateLimitStore; the limiter itself holds no global state and is handed to
request handlers through a FastAPI dependency.

INVARIANTS:
- Limits are HARD CAPS; exceeding one raises, nothing is queued
- Windows are fixed and aligned to the UTC clock (hour or day)
- Each (identifier, action) pair is counted independently
- Only the current window is stored; older counters are dropped
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from threading import Lock
from typing import Literal, Protocol

from pokebinder.config import settings
from pokebinder.models.failure import FailureKind, KnownError

logger = logging.getLogger(__name__)

Window = Literal["hour", "day"]

CARD_ADDITION = "card_addition"
BINDER_CREATION = "binder_creation"
BINDER_EXPORT = "binder_export"


class RateLimitExceededError(KnownError):
    """Raised when an identifier exhausts an action's limit for the window."""

    def __init__(self, action: str, limit: int, window: Window):
        self.action = action
        self.limit = limit
        self.window = window
        super().__init__(
            kind=FailureKind.RATE_LIMITED,
            message=f"Too many {action.replace('_', ' ')} requests. "
            f"The limit is {limit} per {window}.",
            detail=f"{action}: {limit}/{window}",
            suggestion=f"Try again next {window}.",
            status_code=429,
        )


@dataclass(frozen=True, slots=True)
class RateLimitRule:
    """Allow `limit` occurrences of an action per window."""

    limit: int
    window: Window


def default_rules() -> dict[str, RateLimitRule]:
    """Rules built from application settings."""
    return {
        CARD_ADDITION: RateLimitRule(limit=settings.card_additions_per_hour, window="hour"),
        BINDER_CREATION: RateLimitRule(limit=settings.binder_creations_per_day, window="day"),
        BINDER_EXPORT: RateLimitRule(limit=settings.binder_exports_per_day, window="day"),
    }


def window_key(window: Window, now: datetime) -> str:
    """Label of the fixed window containing `now`."""
    if window == "hour":
        return now.strftime("%Y-%m-%dT%H")
    return now.strftime("%Y-%m-%d")


RateLimitKey = tuple[str, str, str]


class RateLimitStore(Protocol):
    """Counter storage keyed by (identifier, action, window label)."""

    def get(self, key: RateLimitKey) -> int: ...

    def increment_within(self, key: RateLimitKey, amount: int, limit: int) -> int | None:
        """
        Atomically add `amount` unless the count would pass `limit`.

        Returns the new count, or None when refused (nothing is recorded).
        """
        ...

    def clear(self) -> None: ...


@dataclass
class InMemoryRateLimitStore:
    """
    Thread-safe in-process counter store.

    Only the current window of each action is kept: the first increment in a
    new window drops that action's older counters.
    """

    _counts: dict[RateLimitKey, int] = field(default_factory=dict)
    _windows: dict[str, str] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock)

    def _maybe_reset(self, action: str, label: str) -> None:
        """Drop counters of earlier windows. Caller holds the lock."""
        if self._windows.get(action) == label:
            return
        self._windows[action] = label
        stale = [key for key in self._counts if key[1] == action and key[2] != label]
        for key in stale:
            del self._counts[key]
        if stale:
            logger.info(
                "RATE_LIMIT_WINDOW_RESET",
                extra={"action": action, "window": label, "dropped": len(stale)},
            )

    def get(self, key: RateLimitKey) -> int:
        with self._lock:
            return self._counts.get(key, 0)

    def increment_within(self, key: RateLimitKey, amount: int, limit: int) -> int | None:
        with self._lock:
            self._maybe_reset(key[1], key[2])
            current = self._counts.get(key, 0)
            if current + amount > limit:
                return None
            self._counts[key] = current + amount
            return self._counts[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

    def clear(self) -> None:
        with self._lock:
            self._counts.clear()
            self._windows.clear()


class RateLimiter:
    """
    Enforces per-identifier limits for named actions.

    Handlers call `check` before doing the work and `hit` once it succeeded,
    so failed requests never use up the allowance. Actions without a rule
    are not limited.
    """

    def __init__(
        self,
        store: RateLimitStore,
        rules: dict[str, RateLimitRule] | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.store = store
        self.rules = rules if rules is not None else default_rules()
        self.clock = clock

    def _key(self, identifier: str, action: str, rule: RateLimitRule) -> RateLimitKey:
        return (identifier, action, window_key(rule.window, self.clock()))

    def _exceeded(
        self, identifier: str, action: str, rule: RateLimitRule, used: int
    ) -> RateLimitExceededError:
        logger.warning(
            "RATE_LIMIT_EXCEEDED",
            extra={
                "identifier": identifier,
                "action": action,
                "used": used,
                "limit": rule.limit,
            },
        )
        return RateLimitExceededError(action, rule.limit, rule.window)

    def remaining(self, identifier: str, action: str) -> int | None:
        """Remaining allowance in the current window (None when unlimited)."""
        rule = self.rules.get(action)
        if rule is None:
            return None
        used = self.store.get(self._key(identifier, action, rule))
        return max(0, rule.limit - used)

    def check(self, identifier: str, action: str, amount: int = 1) -> None:
        """
        Fail fast if `amount` more occurrences would exceed the limit.

        Records nothing.

        Raises:
            RateLimitExceededError: If the allowance is already used up
        """
        rule = self.rules.get(action)
        if rule is None:
            return

        used = self.store.get(self._key(identifier, action, rule))
        if used + amount > rule.limit:
            raise self._exceeded(identifier, action, rule, used)

    def hit(self, identifier: str, action: str, amount: int = 1) -> None:
        """
        Record `amount` occurrences of an action.

        The check and the increment are one atomic store operation.

        Raises:
            RateLimitExceededError: If the occurrences would exceed the limit;
                nothing is recorded in that case
        """
        rule = self.rules.get(action)
        if rule is None:
            return

        key = self._key(identifier, action, rule)
        if self.store.increment_within(key, amount, rule.limit) is None:
            raise self._exceeded(identifier, action, rule, self.store.get(key))


_store = InMemoryRateLimitStore()


def get_rate_limiter() -> RateLimiter:
    """FastAPI dependency providing the process-wide limiter."""
    return RateLimiter(_store)
