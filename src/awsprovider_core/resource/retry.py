"""
Bounded retries of a single mutating API call.

The operation raises :class:`~awsprovider_core.resource.exceptions.RetryableError`
to ask for another attempt. Any other exception is fatal and propagates
unmodified on the first occurrence.

.. code-block:: python

    def _delete():
        try:
            client.delete_slot_type(name=name)
        except ClientError as err:
            if error_code(err) == "ConflictException":
                raise RetryableError(err) from err
            raise

    retry(DELETE_TIMEOUT, _delete)

The attempts are driven by :func:`~awsprovider_core.resource.state.wait_for_state`,
so they back off the same way status polls do.
"""

from __future__ import annotations

from logging import getLogger

from botocore.exceptions import ClientError

from awsprovider_core.aws import error_code, error_message
from awsprovider_core.resource.exceptions import (
    NotFoundError,
    RetryableError,
    WaitTimeoutError,
)
from awsprovider_core.resource.state import StateChangeConf, wait_for_state

LOG = getLogger(__name__)

_STATE_RETRYABLE = "retryableerror"
_STATE_SUCCESS = "success"

# Minimal spacing between attempts, in seconds.
_RETRY_MIN_TIMEOUT = 0.5


class _Outcome:  # pylint: disable=too-few-public-methods
    """Result of the last attempt, wrapped so that ``None`` results still count as found."""

    def __init__(self, value=None):
        self.value = value


def retry(timeout, operation, cancel_event=None):
    """Call ``operation`` until it succeeds, fails fatally or ``timeout`` expires.

    :param timeout: Time budget in seconds.
    :param operation: Zero-argument callable.
    :param cancel_event: Optional :class:`threading.Event` that aborts the retries.
    :return: Whatever ``operation`` returned on success.
    :raises WaitTimeoutError: If the budget is exhausted. ``last_error`` holds
        the last transient error, which is also the exception cause.
    """
    attempts = []
    last_error = []

    def _refresh():
        attempts.append(None)
        try:
            value = operation()
        except RetryableError as err:
            LOG.debug("Attempt %d failed with a retryable error: %s", len(attempts), err.cause)
            last_error[:] = [err.cause]
            return _Outcome(), _STATE_RETRYABLE
        return _Outcome(value), _STATE_SUCCESS

    conf = StateChangeConf(
        pending=[_STATE_RETRYABLE],
        target=[_STATE_SUCCESS],
        refresh=_refresh,
        timeout=timeout,
        min_timeout=_RETRY_MIN_TIMEOUT,
    )
    try:
        outcome = wait_for_state(conf, cancel_event=cancel_event)
    except WaitTimeoutError as err:
        if last_error:
            err.last_error = last_error[0]
            raise err from last_error[0]
        raise
    return outcome.value


def retry_when(timeout, operation, is_retryable, cancel_event=None):
    """Retry ``operation`` while ``is_retryable(exc)`` accepts the raised exception.

    When the budget runs out ``operation`` is called one last time and its
    outcome is returned or raised as is.

    :param is_retryable: Predicate over the exception raised by ``operation``.
    """

    def _attempt():
        try:
            return operation()
        except Exception as err:  # pylint: disable=broad-exception-caught
            if is_retryable(err):
                raise RetryableError(err) from err
            raise

    try:
        return retry(timeout, _attempt, cancel_event=cancel_event)
    except WaitTimeoutError:
        LOG.info("Retries exhausted after %ss, making a final attempt", timeout)
        return operation()


def retry_when_aws_error_code_equals(timeout, operation, *codes, cancel_event=None):
    """Retry ``operation`` while it raises a :class:`ClientError` with one of ``codes``."""

    def _is_retryable(err):
        return isinstance(err, ClientError) and error_code(err) in codes

    return retry_when(timeout, operation, _is_retryable, cancel_event=cancel_event)


def retry_when_aws_error_message_contains(  # pylint: disable=too-many-arguments
    timeout, operation, code, message, cancel_event=None
):
    """Retry ``operation`` while it raises a :class:`ClientError` with ``code``
    whose message contains ``message``."""

    def _is_retryable(err):
        return isinstance(err, ClientError) and error_code(err) == code and message in error_message(err)

    return retry_when(timeout, operation, _is_retryable, cancel_event=cancel_event)


def retry_when_not_found(timeout, operation, cancel_event=None):
    """Retry ``operation`` while it raises :class:`NotFoundError`.

    Used right after a create call to wait out read-after-write propagation.
    """
    return retry_when(timeout, operation, lambda err: isinstance(err, NotFoundError), cancel_event=cancel_event)
