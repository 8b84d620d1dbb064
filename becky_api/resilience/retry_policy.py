"""Exponential backoff retry policy with jitter.

Delay for the retry with index ``n`` (0 for the first retry):

    raw    = initial_delay * 2**n
    jitter = raw * jitter_ratio * uniform(-1, 1)
    delay  = clamp(raw + jitter, 0, max_delay)

``next_delay`` returns ``None`` once ``n >= max_attempts`` or when the error
being retried is not retryable; the caller then stops and surfaces the last
error. ``max_attempts <= 0`` disables retries.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from becky_api.errors import ApiError, ConfigurationError

if TYPE_CHECKING:
    from becky_api.config.settings import ClientSettings

# Exponent cap; 2**62 seconds is far beyond any max_delay.
_MAX_EXPONENT = 62


def _backoff_factor(attempt_index: int) -> float:
    return float(2 ** min(max(attempt_index, 0), _MAX_EXPONENT))


class RetryPolicy:
    """Decides whether and when a failed attempt is retried.

    Args:
        max_attempts: Retries allowed beyond the first try.
        initial_delay: Delay in seconds before the first retry.
        max_delay: Upper bound in seconds for any single delay.
        jitter_ratio: Fraction of the raw delay used as +/- jitter.
        rng: Random source, injectable for deterministic tests.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        max_delay: float = 10.0,
        jitter_ratio: float = 0.3,
        rng: random.Random | None = None,
    ) -> None:
        if initial_delay < 0 or max_delay < 0:
            raise ConfigurationError(
                "Retry delays must be non-negative",
                initial_delay=initial_delay,
                max_delay=max_delay,
            )
        if not 0 <= jitter_ratio <= 1:
            raise ConfigurationError(
                "Retry jitter ratio must be within [0, 1]",
                jitter_ratio=jitter_ratio,
            )
        self._max_attempts = max(0, max_attempts)
        self._initial_delay = initial_delay
        self._max_delay = max_delay
        self._jitter_ratio = jitter_ratio
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> RetryPolicy:
        return cls(
            max_attempts=settings.retry_max_attempts,
            initial_delay=settings.retry_initial_delay,
            max_delay=settings.retry_max_delay,
            jitter_ratio=settings.retry_jitter_ratio,
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def initial_delay(self) -> float:
        return self._initial_delay

    @property
    def max_delay(self) -> float:
        return self._max_delay

    @property
    def jitter_ratio(self) -> float:
        return self._jitter_ratio

    def should_retry(self, attempt_index: int, error: ApiError | None = None) -> bool:
        if attempt_index >= self._max_attempts:
            return False
        return error is None or error.retryable

    def next_delay(
        self, attempt_index: int, error: ApiError | None = None
    ) -> float | None:
        """Delay in seconds before retry ``attempt_index``, or ``None`` to stop."""
        if not self.should_retry(attempt_index, error):
            return None

        raw = self._initial_delay * _backoff_factor(attempt_index)
        jitter = raw * self._jitter_ratio * self._rng.uniform(-1.0, 1.0)
        return min(max(raw + jitter, 0.0), self._max_delay)

    def expected_delay(self, attempt_index: int) -> float:
        """Jitter-free delay for ``attempt_index`` (mean of ``next_delay`` before clamping)."""
        return min(self._initial_delay * _backoff_factor(attempt_index), self._max_delay)

    def max_total_wait(self) -> float:
        """Worst-case total back-off across all retries."""
        return sum(
            min(
                self._initial_delay * _backoff_factor(n) * (1 + self._jitter_ratio),
                self._max_delay,
            )
            for n in range(self._max_attempts)
        )

    def __repr__(self) -> str:
        return (
            f"RetryPolicy(max_attempts={self._max_attempts}, "
            f"initial_delay={self._initial_delay}, max_delay={self._max_delay}, "
            f"jitter_ratio={self._jitter_ratio})"
        )
