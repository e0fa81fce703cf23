"""
Pytest fixtures for testing
"""
import random
from zoneinfo import ZoneInfo

import pytest

from opsboard.domain.condition_tree import (
    KIND_AND, KIND_FIRST, KIND_OR, KIND_SUBGROUP, Condition,
)


@pytest.fixture
def utc():
    return ZoneInfo("UTC")


@pytest.fixture
def execution_log():
    """A few cron runs spread over January / February 2024"""
    return [
        {"start_time": "2024-01-05T18:00:00Z", "status": "completed", "triggered_by": "scheduler", "job_name": "Nightly sync"},
        {"start_time": "2024-01-05T20:30:00Z", "status": "failed", "triggered_by": "manual", "job_name": "Nightly sync"},
        {"start_time": "2024-01-17T09:05:00Z", "status": "skipped", "triggered_by": "scheduler", "job_name": "Nightly sync"},
        {"start_time": "2024-01-31T23:59:00Z", "status": "completed", "triggered_by": "manual", "job_name": "Backfill"},
        {"start_time": "2024-02-01T00:00:00Z", "status": "completed", "triggered_by": "scheduler", "job_name": "Nightly sync"},
    ]


def random_tree(rng: random.Random, depth: int = 0, max_depth: int = 3) -> list[Condition]:
    """Random well-formed condition list: index 0 is `first`, subgroups non-empty."""
    size = rng.randint(1, 4)
    out: list[Condition] = []
    for i in range(size):
        if depth < max_depth and rng.random() < 0.3:
            out.append(Condition(kind=KIND_SUBGROUP, children=random_tree(rng, depth + 1, max_depth)))
            continue
        kind = KIND_FIRST if i == 0 else rng.choice([KIND_AND, KIND_OR])
        between = rng.random() < 0.3
        out.append(Condition(
            kind=kind,
            field=rng.choice(["ticker", "cusip", "price", "spread", "bias"]),
            operator="between" if between else rng.choice(["equals", "contains", "gt"]),
            value=str(rng.randint(0, 500)),
            value2=str(rng.randint(500, 1000)) if between else None,
        ))
    return out


@pytest.fixture
def tree_factory():
    return random_tree
