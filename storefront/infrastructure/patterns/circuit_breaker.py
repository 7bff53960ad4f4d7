"""Circuit breaker pattern for resilient external service calls.

Monitors failures of calls to an external service and, once a threshold is
reached, rejects further calls immediately until a reset timeout has passed.
"""

import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import pybreaker
from pybreaker import CircuitBreaker, CircuitBreakerError

from storefront.infrastructure.logging.config import get_logger


logger = get_logger(__name__)


class CircuitBreakerService:
    """Registry of named circuit breakers.

    Circuit States:
        - Closed: Normal operation, requests pass through
        - Open: Too many failures, requests are rejected with CircuitBreakerError
        - Half-Open: Reset timeout elapsed, one call is let through as a trial;
          its failure reopens the circuit, its success closes it
    """

    def __init__(self) -> None:
        self._breakers: dict[str, CircuitBreaker] = {}
        self._opened_at: dict[str, float] = {}
        self._trials: set[str] = set()

    def get_breaker(
        self,
        name: str,
        fail_max: int = 5,
        reset_timeout: int = 30,
        exclude: Sequence[type[BaseException]] = (),
    ) -> CircuitBreaker:
        """Get or create a circuit breaker for a named service.

        Args:
            name: Unique identifier for the breaker (typically the service name)
            fail_max: Consecutive failures before the circuit opens
            reset_timeout: Seconds to wait before letting a trial call through
            exclude: Exception types that signal caller mistakes, not service failures

        Returns:
            Circuit breaker instance for the named service
        """
        if name not in self._breakers:
            self._breakers[name] = CircuitBreaker(
                fail_max=fail_max,
                reset_timeout=reset_timeout,
                exclude=list(exclude),
                name=name,
                listeners=[self._create_listener(name)],
            )
            logger.info(
                "circuit_breaker_created",
                name=name,
                fail_max=fail_max,
                reset_timeout=reset_timeout,
            )
        return self._breakers[name]

    def _create_listener(self, name: str) -> pybreaker.CircuitBreakerListener:
        opened_at = self._opened_at

        class LoggingListener(pybreaker.CircuitBreakerListener):
            """Logs circuit breaker state transitions and call outcomes."""

            def state_change(self, cb: CircuitBreaker, old_state: Any, new_state: Any) -> None:
                if new_state is not None and new_state.name == pybreaker.STATE_OPEN:
                    opened_at[name] = time.monotonic()
                logger.warning(
                    "circuit_breaker_state_change",
                    breaker=name,
                    old_state=str(old_state),
                    new_state=str(new_state),
                )

            def failure(self, cb: CircuitBreaker, exc: BaseException) -> None:
                logger.error(
                    "circuit_breaker_failure",
                    breaker=name,
                    error=str(exc),
                    failure_count=cb.fail_counter,
                )

            def success(self, cb: CircuitBreaker) -> None:
                logger.debug("circuit_breaker_success", breaker=name)

        return LoggingListener()

    async def call_with_breaker(
        self,
        breaker_name: str,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Await ``func`` under circuit breaker protection.

        pybreaker's state machine is synchronous, so the coroutine is awaited
        first and its outcome is then replayed through ``breaker.call``. While
        the circuit is open the coroutine is never started; once the reset
        timeout has elapsed exactly one caller runs it as the half-open trial.

        Raises:
            CircuitBreakerError: If the circuit is open, a trial is already
                running, or the trial call failed
            Exception: Any exception raised by the protected function
        """
        breaker = self.get_breaker(breaker_name)
        self._admit(breaker_name, breaker)

        try:
            result = await func(*args, **kwargs)
        except Exception as exc:
            error = exc

            def replay_failure() -> Any:
                raise error

            return breaker.call(replay_failure)
        finally:
            self._trials.discard(breaker_name)

        return breaker.call(lambda: result)

    def _admit(self, name: str, breaker: CircuitBreaker) -> None:
        """Reject the call unless the circuit lets it through."""
        state = breaker.current_state
        if state == pybreaker.STATE_OPEN:
            elapsed = time.monotonic() - self._opened_at.get(name, 0.0)
            if elapsed < breaker.reset_timeout:
                raise CircuitBreakerError("Timeout not elapsed yet, circuit breaker still open")
            breaker.half_open()
            state = pybreaker.STATE_HALF_OPEN
        if state == pybreaker.STATE_HALF_OPEN:
            if name in self._trials:
                raise CircuitBreakerError("Trial call in progress, circuit breaker half-open")
            self._trials.add(name)
