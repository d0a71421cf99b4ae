"""Shared fixtures: deterministic clocks and id factories."""

import itertools

import pytest


class Ticker:
    """A clock that advances by ``step`` seconds on every read."""

    def __init__(self, start: float = 1_700_000_000.0, step: float = 1.0) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def clock():
    return Ticker()


@pytest.fixture
def frozen_clock():
    return Ticker(step=0.0)


@pytest.fixture
def ids():
    counter = itertools.count()
    return lambda: f"n{next(counter)}"
