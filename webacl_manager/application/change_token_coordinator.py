"""Change Token Coordinator - Runs WAF mutations with a fresh change token per attempt."""
import time
from typing import Callable, TypeVar

from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from webacl_manager.domain.exceptions import (
    RetryBudgetExhaustedError,
    WafApiError,
    WafTransientError,
    WebACLOperationError,
)
from webacl_manager.ports.outbound import LoggerPort

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 8
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0


class ChangeTokenCoordinator:
    """
    Executes WAF Classic mutations that require a change token.

    Each attempt fetches a new token from ``token_source`` and hands it to
    the mutation. Stale tokens, throttling and not-yet-available entities
    are retried with exponential backoff; every other error is raised
    immediately as a WebACLOperationError.

    Tokens are shared by every caller in a scope, so nothing is locked
    locally: a concurrent writer makes our token stale and the next attempt
    picks up a new one.
    """

    def __init__(
        self,
        token_source: Callable[[str], str],
        scope: str,
        logger: LoggerPort,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the coordinator.

        Args:
            token_source: Function returning a new change token for a scope
            scope: Scope key the tokens are issued for
            logger: Logger for retry reporting
            max_attempts: Total attempts before giving up (at least 1)
            base_delay: Backoff before the second attempt, in seconds
            max_delay: Upper bound for a single backoff, in seconds
            sleep: Blocking sleep function
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._token_source = token_source
        self._scope = scope
        self._logger = logger
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._sleep = sleep

    @property
    def scope(self) -> str:
        return self._scope

    def run(self, mutation: Callable[[str], T], operation: str) -> T:
        """
        Run a mutation with a fresh change token, retrying transient failures.

        Args:
            mutation: Function taking the change token and performing the call
            operation: Description used in logs and errors ("updating WAF Web ACL")

        Returns:
            Whatever the mutation returns

        Raises:
            WebACLOperationError: on a non-retryable WAF error
            RetryBudgetExhaustedError: when every attempt failed transiently
        """
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._base_delay, max=self._max_delay),
            retry=retry_if_exception_type(WafTransientError),
            sleep=self._sleep,
            before_sleep=self._log_retry(operation),
        )

        try:
            for attempt in retrying:
                with attempt:
                    token = self._token_source(self._scope)
                    self._logger.debug(
                        f"Acquired change token for {operation}",
                        scope=self._scope,
                        attempt=attempt.retry_state.attempt_number,
                    )
                    return mutation(token)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            raise RetryBudgetExhaustedError(operation, self._max_attempts, last_error) from last_error
        except WafApiError as e:
            raise WebACLOperationError(operation, e) from e

        raise RuntimeError("Retrying loop exited unexpectedly")

    def _log_retry(self, operation: str) -> Callable[[RetryCallState], None]:
        def before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            self._logger.warning(
                f"Transient WAF error while {operation}, "
                f"retrying in {retry_state.next_action.sleep:.1f}s",
                scope=self._scope,
                attempt=retry_state.attempt_number,
                error_code=getattr(error, "code", None),
            )

        return before_sleep
