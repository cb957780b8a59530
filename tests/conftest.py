"""Shared fixtures for condense tests."""

import pytest

from condense.core.observability import MetricsCollector
from condense.core.token_management import TokenEstimator
from fakes import ScriptedCompletionClient


@pytest.fixture
def estimator():
    """Fresh estimator so ratio overrides never leak between tests."""
    return TokenEstimator()


@pytest.fixture
def metrics():
    return MetricsCollector(prefix="condense-test")


@pytest.fixture
def completion_client():
    return ScriptedCompletionClient()
