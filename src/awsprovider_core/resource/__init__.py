"""
State-transition waiters and retry helpers shared by all resource wrappers.
"""

from awsprovider_core.resource.exceptions import (
    NotFoundError,
    RetryableError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitError,
    WaitTimeoutError,
    not_found,
    set_last_error,
    timed_out,
)
from awsprovider_core.resource.retry import (
    retry,
    retry_when,
    retry_when_aws_error_code_equals,
    retry_when_aws_error_message_contains,
    retry_when_not_found,
)
from awsprovider_core.resource.state import StateChangeConf, wait_for_state, wait_until

__all__ = [
    "NotFoundError",
    "RetryableError",
    "StateChangeConf",
    "UnexpectedStateError",
    "WaitCancelledError",
    "WaitError",
    "WaitTimeoutError",
    "not_found",
    "retry",
    "retry_when",
    "retry_when_aws_error_code_equals",
    "retry_when_aws_error_message_contains",
    "retry_when_not_found",
    "set_last_error",
    "timed_out",
    "wait_for_state",
    "wait_until",
]
