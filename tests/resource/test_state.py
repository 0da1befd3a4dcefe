"""Tests for StateChangeConf and wait_for_state()."""

import threading
from unittest import mock

import pytest

from awsprovider_core.resource.exceptions import (
    NotFoundError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
    set_last_error,
)
from awsprovider_core.resource.state import (
    DEFAULT_NOT_FOUND_CHECKS,
    StateChangeConf,
    wait_for_state,
    wait_until,
)

READY = {"Status": "ready"}
CREATING = {"Status": "creating"}
FAILED = {"Status": "failed"}


def _refresh(*results):
    """Return a mock refresh function returning ``results`` one by one."""
    return mock.MagicMock(side_effect=list(results))


def _conf(refresh, **kwargs):
    kwargs.setdefault("pending", ["creating"])
    kwargs.setdefault("target", ["ready"])
    kwargs.setdefault("timeout", 60)
    return StateChangeConf(refresh=refresh, **kwargs)


# -- StateChangeConf ----------------------------------------------------------


def test_conf_rejects_overlapping_states():
    """A state can't be both pending and target."""
    with pytest.raises(ValueError, match="both pending and target"):
        _conf(mock.MagicMock(), pending=["creating", "ready"])


def test_conf_rejects_non_positive_timeout():
    """timeout must be positive."""
    with pytest.raises(ValueError):
        _conf(mock.MagicMock(), timeout=0)


def test_conf_rejects_zero_target_occurence():
    """continuous_target_occurence must be at least 1."""
    with pytest.raises(ValueError):
        _conf(mock.MagicMock(), continuous_target_occurence=0)


def test_next_wait_backoff_is_capped():
    """The backoff doubles and stops growing at 10 seconds."""
    conf = _conf(mock.MagicMock())
    waits = []
    wait = 0
    for _ in range(10):
        wait = conf.next_wait(wait, 0)
        waits.append(wait)
    assert waits[:3] == [0.2, 0.4, 0.8]
    assert waits == sorted(waits)
    assert max(waits) == 10


def test_next_wait_respects_min_timeout():
    """min_timeout is a floor for every interval, even above the backoff ceiling."""
    conf = _conf(mock.MagicMock(), min_timeout=30)
    assert conf.next_wait(0, 0) == 30
    assert conf.next_wait(30, 0) == 30


def test_next_wait_poll_interval():
    """A poll_interval below 180 seconds replaces the backoff."""
    assert _conf(mock.MagicMock(), poll_interval=5).next_wait(0, 0) == 5
    assert _conf(mock.MagicMock(), poll_interval=200).next_wait(0, 0) == 0.2


def test_next_wait_keeps_interval_during_target_streak():
    """The interval doesn't grow while the target state is being confirmed."""
    conf = _conf(mock.MagicMock())
    assert conf.next_wait(0.4, 1) == 0.4


# -- wait_for_state: success -------------------------------------------------


def test_target_reached_immediately(fake_clock):
    """The snapshot is returned as soon as the target state shows up."""
    refresh = _refresh((READY, "ready"))

    assert wait_for_state(_conf(refresh)) is READY
    refresh.assert_called_once_with()
    assert fake_clock.sleeps == []


def test_pending_then_target(fake_clock):
    """Pending states are polled through until the target state."""
    refresh = _refresh((CREATING, "creating"), (CREATING, "creating"), (READY, "ready"))

    assert wait_for_state(_conf(refresh)) is READY
    assert refresh.call_count == 3
    assert len(fake_clock.sleeps) == 2


def test_delay_before_first_refresh(fake_clock):
    """The first refresh happens after ``delay``."""
    refresh = _refresh((READY, "ready"))

    wait_for_state(_conf(refresh, delay=30))

    assert fake_clock.sleeps == [30]


def test_min_timeout_is_respected(fake_clock):
    """No two refreshes are closer than min_timeout."""
    refresh = _refresh(*[(CREATING, "creating")] * 5, (READY, "ready"))

    wait_for_state(_conf(refresh, timeout=600, min_timeout=10))

    assert fake_clock.sleeps == [10] * 5


def test_poll_interval(fake_clock):
    """poll_interval sets a fixed spacing between refreshes."""
    refresh = _refresh(*[(CREATING, "creating")] * 3, (READY, "ready"))

    wait_for_state(_conf(refresh, poll_interval=7))

    assert fake_clock.sleeps == [7, 7, 7]


def test_continuous_target_occurence(fake_clock):
    """The target state must be observed k times in a row; a pending state resets the count."""
    refresh = _refresh(
        (READY, "ready"),
        (READY, "ready"),
        (CREATING, "creating"),
        (READY, "ready"),
        (READY, "ready"),
        (READY, "ready"),
        (READY, "ready"),
    )

    assert wait_for_state(_conf(refresh, continuous_target_occurence=3)) is READY
    assert refresh.call_count == 6


def test_unknown_state_without_pending_keeps_polling(fake_clock):
    """With no pending states any non-target state means "not yet"."""
    refresh = _refresh((FAILED, "failed"), (READY, "ready"))

    assert wait_for_state(_conf(refresh, pending=[])) is READY
    assert refresh.call_count == 2


# -- wait_for_state: absence ---------------------------------------------------


def test_wait_for_absence(fake_clock):
    """With an empty target, a missing resource is success."""
    refresh = _refresh((CREATING, "deleting"), (None, ""))

    assert wait_for_state(_conf(refresh, pending=["deleting"], target=[])) is None
    assert refresh.call_count == 2


def test_wait_for_absence_needs_not_found_checks(fake_clock):
    """Absence must be observed not_found_checks times in a row before success."""
    refresh = _refresh(
        (None, ""),
        (None, ""),
        ({"Status": "deleting"}, "deleting"),
        (None, ""),
        (None, ""),
        (None, ""),
        (None, ""),
    )

    conf = _conf(refresh, pending=["deleting"], target=[], not_found_checks=3)

    assert wait_for_state(conf) is None
    assert refresh.call_count == 6


def test_absent_while_expecting_target(fake_clock):
    """A resource that stays missing while a target state is expected is an error."""
    refresh = mock.MagicMock(return_value=(None, ""))

    with pytest.raises(NotFoundError) as exc_info:
        wait_for_state(_conf(refresh, not_found_checks=2))

    assert refresh.call_count == 3
    assert exc_info.value.retries == 3


def test_absent_default_not_found_checks(fake_clock):
    """Without not_found_checks the waiter tolerates 20 misses."""
    refresh = mock.MagicMock(return_value=(None, ""))

    with pytest.raises(NotFoundError):
        wait_for_state(_conf(refresh, timeout=3600))

    assert refresh.call_count == DEFAULT_NOT_FOUND_CHECKS + 1


def test_absence_then_target(fake_clock):
    """A few misses before the resource shows up are tolerated."""
    refresh = _refresh((None, ""), (None, ""), (READY, "ready"))

    assert wait_for_state(_conf(refresh, pending=[], not_found_checks=40)) is READY


# -- wait_for_state: failures ------------------------------------------------


def test_unexpected_state(fake_clock):
    """A state outside pending and target fails fast with the snapshot attached."""
    refresh = _refresh((CREATING, "creating"), (FAILED, "failed"), (READY, "ready"))

    with pytest.raises(UnexpectedStateError) as exc_info:
        wait_for_state(_conf(refresh))

    err = exc_info.value
    assert refresh.call_count == 2
    assert err.state == "failed"
    assert err.expected_state == ["ready"]
    assert err.last_result is FAILED
    assert "unexpected state 'failed'" in str(err)


def test_refresh_error_is_not_retried(fake_clock):
    """An exception raised by the refresh function propagates unchanged."""
    error = RuntimeError("describe failed")
    refresh = mock.MagicMock(side_effect=error)

    with pytest.raises(RuntimeError) as exc_info:
        wait_for_state(_conf(refresh))

    assert exc_info.value is error
    refresh.assert_called_once_with()


def test_timeout(fake_clock):
    """A resource stuck in a pending state times out within one interval of the budget."""
    refresh = mock.MagicMock(return_value=(CREATING, "creating"))

    with pytest.raises(WaitTimeoutError) as exc_info:
        wait_for_state(_conf(refresh, timeout=60))

    assert 60 <= fake_clock.now <= 60 + 10
    err = exc_info.value
    assert err.last_state == "creating"
    assert err.last_result is CREATING
    assert err.timeout == 60
    assert isinstance(err, TimeoutError)


def test_timeout_with_min_timeout(fake_clock):
    """The last sleep is cut short so the timeout is not overshot."""
    refresh = mock.MagicMock(return_value=(CREATING, "creating"))

    with pytest.raises(WaitTimeoutError):
        wait_for_state(_conf(refresh, timeout=25, min_timeout=10))

    assert fake_clock.sleeps == [10, 10, 5]
    assert fake_clock.now == 25


def test_timeout_includes_delay(fake_clock):
    """The delay is part of the time budget."""
    refresh = mock.MagicMock(return_value=(CREATING, "creating"))

    with pytest.raises(WaitTimeoutError):
        wait_for_state(_conf(refresh, timeout=60, delay=60))

    refresh.assert_not_called()


def test_timeout_last_error(fake_clock):
    """set_last_error() puts the remote failure reason into the message."""
    refresh = mock.MagicMock(return_value=(CREATING, "creating"))

    with pytest.raises(WaitTimeoutError) as exc_info:
        wait_for_state(_conf(refresh, timeout=5))

    err = exc_info.value
    set_last_error(err, "Subnet has no free addresses")
    assert str(err).endswith(": Subnet has no free addresses")


# -- wait_for_state: cancellation --------------------------------------------


def test_cancelled_before_start(fake_clock):
    """A cancelled wait doesn't refresh at all."""
    refresh = mock.MagicMock(return_value=(CREATING, "creating"))
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(WaitCancelledError):
        wait_for_state(_conf(refresh), cancel_event=cancel)

    refresh.assert_not_called()


def test_cancelled_during_sleep(fake_clock):
    """Cancellation interrupts the sleep between refreshes."""
    cancel = threading.Event()

    def _refresh_and_cancel():
        cancel.set()
        return CREATING, "creating"

    with pytest.raises(WaitCancelledError) as exc_info:
        wait_for_state(_conf(_refresh_and_cancel), cancel_event=cancel)

    assert len(fake_clock.sleeps) == 1
    assert exc_info.value.last_result is CREATING


def test_cancel_unblocks_real_sleep():
    """A real wait returns promptly once the event is set from another thread."""
    refresh = mock.MagicMock(return_value=(CREATING, "creating"))
    cancel = threading.Event()
    timer = threading.Timer(0.2, cancel.set)
    timer.start()
    try:
        with pytest.raises(WaitCancelledError):
            wait_for_state(_conf(refresh, timeout=600, poll_interval=60), cancel_event=cancel)
    finally:
        timer.cancel()

    refresh.assert_called_once_with()


# -- wait_until ----------------------------------------------------------------


def test_wait_until(fake_clock):
    """wait_until() needs the predicate to hold k times in a row."""
    check = mock.MagicMock(side_effect=[True, False, True, True])

    wait_until(60, check, continuous_target_occurence=2)

    assert check.call_count == 4


def test_wait_until_timeout(fake_clock):
    """wait_until() times out when the predicate never holds."""
    with pytest.raises(WaitTimeoutError):
        wait_until(30, lambda: False, min_timeout=1)

    assert fake_clock.now == 30
