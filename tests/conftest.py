"""Shared test fixtures."""

from unittest import mock

import pytest


class FakeClock:
    """Monotonic clock that only moves when the code under test sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def monotonic(self):
        return self.now

    def sleep(self, seconds, cancel_event=None):
        self.sleeps.append(seconds)
        self.now += max(seconds, 0)
        return bool(cancel_event and cancel_event.is_set())


@pytest.fixture
def fake_clock():
    """Replace the waiter clock and sleep with a :class:`FakeClock`."""
    clock = FakeClock()
    with mock.patch("awsprovider_core.resource.state._clock", clock.monotonic), mock.patch(
        "awsprovider_core.resource.state._sleep", clock.sleep
    ):
        yield clock


@pytest.fixture
def aws_credentials(monkeypatch):
    """Set dummy AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
