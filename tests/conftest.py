"""Shared fixtures for behavioral-sink tests."""

import numpy as np
import pytest

from behavioral_sink.config import SimulationConfig, SimulationSection, default_config
from behavioral_sink.rng import create_rng


class SequenceRNG:
    """Generator stand-in that replays a fixed list of uniform draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def random(self, size=None):
        n = 1 if size is None else int(size)
        if n > len(self.values):
            raise AssertionError(
                f"requested {n} draws, only {len(self.values)} left"
            )
        self.calls.append(n)
        out, self.values = self.values[:n], self.values[n:]
        return out[0] if size is None else np.array(out, dtype=np.float64)


@pytest.fixture
def default_cfg() -> SimulationConfig:
    return default_config()


@pytest.fixture
def crowded_cfg() -> SimulationConfig:
    """Founders large enough that births are non-zero from day 1."""
    return SimulationConfig(
        simulation=SimulationSection(initial_normal=1000, n_days=900),
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return create_rng(12345)


@pytest.fixture
def sequence_rng():
    return SequenceRNG
