"""Shared fixtures for the test suite."""

import pytest

from uptime_checker.models import Monitor

NOW_MS = 1_727_000_000_000


def monitor_payload(monitor_id: int = 1, name: str = "Personal website", **overrides) -> dict:
    """Build a getMonitors-style monitor dictionary."""
    payload = {
        "id": monitor_id,
        "friendly_name": name,
        "url": "https://www.rosshill.ca/",
        "type": 1,
        "interval": 300,
        "status": 2,
        "average_response_time": "144.123",
        "custom_uptime_ratio": "99.989",
        "logs": [
            {"type": 2, "datetime": 1_725_000_000, "duration": 1_500_000},
            {"type": 1, "datetime": 1_724_999_885, "duration": 115},
        ],
        "response_times": [{"datetime": 1_726_999_000, "value": 140}],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_monitor():
    """Factory for Monitor instances."""

    def _make(monitor_id: int = 1, name: str = "Personal website", **overrides) -> Monitor:
        return Monitor.model_validate(monitor_payload(monitor_id, name, **overrides))

    return _make
