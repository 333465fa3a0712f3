"""Hypothesis profiles and pytest fixtures for bigmath."""

from __future__ import annotations

from decimal import Context

import pytest
from hypothesis import HealthCheck, settings

from bigmath.core.context import math_context

# ---------------------------------------------------------------------------
# Hypothesis global settings
# ---------------------------------------------------------------------------

settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.register_profile(
    "dev",
    max_examples=50,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)
settings.load_profile("dev")


# ===================================================================
# FIXTURES
# ===================================================================


@pytest.fixture
def mc50() -> Context:
    """Fresh 50-digit context."""
    return math_context(50)
