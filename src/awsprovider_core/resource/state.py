"""
Blocking state-transition waiter.

A waiter repeatedly calls a refresh function that looks up a remote resource
and returns a ``(snapshot, status)`` pair, until the status reaches one of the
target states, the resource disappears (when no target states are given),
or the time budget runs out.

.. code-block:: python

    conf = StateChangeConf(
        pending=["creating", "modifying"],
        target=["ready"],
        refresh=task_status(client, task_id),
        timeout=20 * 60,
        delay=30,
        min_timeout=10,
    )
    task = wait_for_state(conf)

A refresh function signals absence by returning ``(None, "")``. Lookup
failures are raised and are never retried by the waiter.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from logging import getLogger
from typing import Any, Callable, Optional, Sequence, Tuple

from awsprovider_core.resource.exceptions import (
    NotFoundError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
)

LOG = getLogger(__name__)

StateRefreshFunc = Callable[[], Tuple[Any, str]]

# Consecutive "not found" results tolerated while waiting for a target state.
DEFAULT_NOT_FOUND_CHECKS = 20

# Backoff schedule bounds, in seconds.
_INITIAL_WAIT = 0.1
_MAX_BACKOFF_WAIT = 10

# poll_interval values at or above this are ignored in favour of the backoff.
_MAX_POLL_INTERVAL = 180


@dataclass(frozen=True)
class StateChangeConf:  # pylint: disable=too-many-instance-attributes
    """Configuration of a single wait.

    :param refresh: Zero-argument callable returning ``(snapshot, status)``.
    :param timeout: Total time budget in seconds, including ``delay``.
    :param pending: States that mean "still in progress".
    :param target: States that mean success. Empty means
        "wait until the resource is gone".
    :param delay: Seconds to sleep before the first refresh.
    :param min_timeout: Lower bound for the interval between refreshes.
    :param poll_interval: Fixed interval between refreshes. Overrides the
        backoff schedule when set below 180 seconds.
    :param not_found_checks: Consecutive "not found" results tolerated
        before giving up (target states given) or required before declaring
        success (no target states).
    :param continuous_target_occurence: Consecutive target observations
        required to declare success.
    """

    refresh: StateRefreshFunc
    timeout: float
    pending: Sequence[str] = ()
    target: Sequence[str] = ()
    delay: float = 0
    min_timeout: float = 0
    poll_interval: float = 0
    not_found_checks: Optional[int] = None
    continuous_target_occurence: int = 1

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.continuous_target_occurence < 1:
            raise ValueError(
                f"continuous_target_occurence must be at least 1, got {self.continuous_target_occurence}"
            )
        overlap = set(self.pending) & set(self.target)
        if overlap:
            raise ValueError(f"States {sorted(overlap)} are both pending and target")

    @property
    def absent_checks(self) -> int:
        """Consecutive absent observations that finish a wait for disappearance."""
        return max(self.continuous_target_occurence, self.not_found_checks or 0)

    @property
    def max_not_found(self) -> int:
        """Consecutive absent observations tolerated while a target state is expected."""
        return DEFAULT_NOT_FOUND_CHECKS if self.not_found_checks is None else self.not_found_checks

    def next_wait(self, wait: float, target_streak: int) -> float:
        """Return the interval before the next refresh.

        The wait doubles while no target streak is in progress, and is bounded
        by ``min_timeout`` and the backoff ceiling. A valid ``poll_interval``
        replaces the schedule.
        """
        if self.poll_interval and 0 < self.poll_interval < _MAX_POLL_INTERVAL:
            return self.poll_interval

        wait = wait or _INITIAL_WAIT
        if target_streak == 0:
            wait *= 2
        if wait < self.min_timeout:
            return self.min_timeout
        return min(wait, max(_MAX_BACKOFF_WAIT, self.min_timeout))


def _clock() -> float:
    return time.monotonic()


def _sleep(seconds: float, cancel_event: Optional[threading.Event] = None) -> bool:
    """Sleep for ``seconds``. Return ``True`` if ``cancel_event`` got set meanwhile."""
    if seconds <= 0:
        return bool(cancel_event and cancel_event.is_set())
    if cancel_event is None:
        time.sleep(seconds)
        return False
    return cancel_event.wait(seconds)


def wait_for_state(conf: StateChangeConf, cancel_event: Optional[threading.Event] = None):
    """Block until the resource reaches one of ``conf.target`` states.

    :param conf: Wait configuration.
    :param cancel_event: Optional event; setting it aborts the wait promptly.
    :return: The snapshot returned by the last refresh. ``None`` when the wait
        was for the resource to disappear.
    :raises WaitTimeoutError: If ``conf.timeout`` expires first.
    :raises UnexpectedStateError: If the refresh returns a state outside
        both ``pending`` and ``target`` while ``pending`` is not empty.
    :raises NotFoundError: If the resource stays absent for more than
        ``not_found_checks`` consecutive refreshes.
    :raises WaitCancelledError: If ``cancel_event`` is set.
    """
    deadline = _clock() + conf.timeout
    last_result = None
    last_state = ""
    not_found_tick = 0
    target_streak = 0
    wait = 0.0

    def _timeout():
        LOG.warning("Timed out after %ss waiting for %s", conf.timeout, list(conf.target) or "absence")
        return WaitTimeoutError(
            conf.timeout,
            conf.target,
            last_state=last_state,
            last_result=last_result,
        )

    if conf.delay > 0:
        if _sleep(min(conf.delay, max(deadline - _clock(), 0)), cancel_event):
            raise WaitCancelledError()

    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise WaitCancelledError(last_result=last_result)
        if _clock() >= deadline:
            raise _timeout()

        result, state = conf.refresh()
        last_result, last_state = result, state

        if result is None and not conf.target:
            target_streak += 1
            LOG.debug("Resource not found (%d/%d)", target_streak, conf.absent_checks)
            if target_streak >= conf.absent_checks:
                return None

        elif result is None:
            not_found_tick += 1
            target_streak = 0
            LOG.debug("Resource not found (%d/%d)", not_found_tick, conf.max_not_found)
            if not_found_tick > conf.max_not_found:
                raise NotFoundError(retries=not_found_tick)

        else:
            not_found_tick = 0
            if state in conf.target:
                target_streak += 1
                LOG.debug("Target state %r (%d/%d)", state, target_streak, conf.continuous_target_occurence)
                if target_streak >= conf.continuous_target_occurence:
                    return result
            elif state in conf.pending or not conf.pending:
                target_streak = 0
                LOG.debug("Pending state %r", state)
            else:
                raise UnexpectedStateError(state, conf.target, last_result=result)

        wait = conf.next_wait(wait, target_streak)
        remaining = deadline - _clock()
        if remaining <= 0:
            raise _timeout()
        LOG.debug("Waiting %.1fs before next refresh", min(wait, remaining))
        if _sleep(min(wait, remaining), cancel_event):
            raise WaitCancelledError(last_result=last_result)


def wait_until(  # pylint: disable=too-many-arguments
    timeout: float,
    check: Callable[[], bool],
    continuous_target_occurence: int = 1,
    min_timeout: float = 0,
    poll_interval: float = 0,
    cancel_event: Optional[threading.Event] = None,
) -> None:
    """Block until ``check()`` returns ``True``.

    :param timeout: Total time budget in seconds.
    :param check: Zero-argument predicate. Exceptions it raises propagate.
    :param continuous_target_occurence: Consecutive ``True`` results required.
    :raises WaitTimeoutError: If the budget runs out first.
    """

    def _refresh():
        done = check()
        return done, str(bool(done)).lower()

    wait_for_state(
        StateChangeConf(
            pending=["false"],
            target=["true"],
            refresh=_refresh,
            timeout=timeout,
            min_timeout=min_timeout,
            poll_interval=poll_interval,
            continuous_target_occurence=continuous_target_occurence,
        ),
        cancel_event=cancel_event,
    )
