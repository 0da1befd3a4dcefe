"""Waiter and retry exceptions.

Every wait error remembers the last snapshot returned by the refresh function
so that callers can dig a remote failure reason out of it and attach it
with :func:`set_last_error` before re-raising.
"""

from awsprovider_core.exceptions import AWSProviderException


class WaitError(AWSProviderException):
    """A wait for a state transition didn't succeed.

    :param last_result: Last snapshot returned by the refresh function.
    :param last_error: Underlying error, if any. May be replaced later
        with :func:`set_last_error`.
    """

    def __init__(self, last_result=None, last_error=None):
        super().__init__()
        self.last_result = last_result
        self.last_error = last_error

    def _message(self) -> str:
        raise NotImplementedError

    def __str__(self):
        message = self._message()
        if self.last_error is not None:
            return f"{message}: {self.last_error}"
        return message


class UnexpectedStateError(WaitError):
    """The refresh function returned a state that is neither pending nor target."""

    def __init__(self, state, expected_state, last_result=None, last_error=None):
        super().__init__(last_result=last_result, last_error=last_error)
        self.state = state
        self.expected_state = list(expected_state)

    def _message(self) -> str:
        return f"unexpected state '{self.state}', wanted target '{', '.join(self.expected_state)}'"


class WaitTimeoutError(WaitError, TimeoutError):
    """The wait didn't reach a target state within its time budget."""

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self, timeout, expected_state, last_state="", last_result=None, last_error=None
    ):
        super().__init__(last_result=last_result, last_error=last_error)
        self.timeout = timeout
        self.last_state = last_state
        self.expected_state = list(expected_state)

    def _message(self) -> str:
        expected = ", ".join(self.expected_state) if self.expected_state else "absent"
        message = f"timeout while waiting for state to become '{expected}'"
        if self.last_state:
            message += f" (last state: '{self.last_state}', timeout: {self.timeout:g}s)"
        else:
            message += f" (timeout: {self.timeout:g}s)"
        return message


class NotFoundError(WaitError):
    """The resource couldn't be found.

    Raised by finders when a lookup comes back empty and by the waiter
    when the resource stays absent for too many consecutive checks.
    """

    def __init__(self, message="couldn't find resource", retries=0, last_result=None, last_error=None):
        super().__init__(last_result=last_result, last_error=last_error)
        self.message = message
        self.retries = retries

    def _message(self) -> str:
        if self.retries:
            return f"{self.message} ({self.retries} retries)"
        return self.message


class WaitCancelledError(WaitError):
    """The wait was cancelled by the caller."""

    def _message(self) -> str:
        return "wait cancelled"


class RetryableError(AWSProviderException):
    """Raised by an operation passed to :func:`~awsprovider_core.resource.retry.retry`
    to request one more attempt.

    :param cause: The transient error that triggered the retry.
    """

    def __init__(self, cause):
        super().__init__(str(cause))
        self.cause = cause


def set_last_error(err, last_error) -> None:
    """Attach a richer failure reason to a wait error.

    Does nothing if ``err`` is not a wait error or ``last_error`` is empty.

    :param err: Exception raised by a waiter.
    :param last_error: Remote failure reason. Strings are accepted as is.
    """
    if not isinstance(err, WaitError) or not last_error:
        return
    err.last_error = last_error


def not_found(err) -> bool:
    """Return ``True`` if ``err`` means the resource doesn't exist."""
    return isinstance(err, NotFoundError)


def timed_out(err) -> bool:
    """Return ``True`` if ``err`` is a wait timeout."""
    return isinstance(err, WaitTimeoutError)
