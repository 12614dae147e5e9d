"""Smoke tests for behavioral_sink.viz — every plot renders and saves."""

import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt
import pytest
from matplotlib.colors import to_hex

from behavioral_sink.config import SimulationConfig, SimulationSection
from behavioral_sink.engine import Simulation, run_simulation
from behavioral_sink.rng import create_rng
from behavioral_sink.viz import (
    DARK_BG,
    DARK_PANEL,
    dark_figure,
    plot_birth_rate,
    plot_composition,
    plot_environment,
    plot_population_trajectory,
)


@pytest.fixture
def crowded_result(crowded_cfg):
    return run_simulation(crowded_cfg, n_days=200)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close('all')


class TestPlots:
    def test_population_trajectory(self, crowded_result, tmp_path):
        out = tmp_path / 'population.png'
        fig = plot_population_trajectory(
            crowded_result.history, max_capacity=3000, save_path=str(out),
        )
        assert isinstance(fig, plt.Figure)
        assert out.exists()

    def test_birth_rate(self, crowded_result, tmp_path):
        out = tmp_path / 'birth_rate.png'
        fig = plot_birth_rate(crowded_result.history, save_path=str(out))
        assert isinstance(fig, plt.Figure)
        assert out.exists()

    def test_composition(self, crowded_result, tmp_path):
        out = tmp_path / 'composition.png'
        fig = plot_composition(crowded_result, save_path=str(out))
        assert isinstance(fig, plt.Figure)
        assert out.exists()

    def test_environment(self, crowded_result, tmp_path):
        out = tmp_path / 'environment.png'
        fig = plot_environment(crowded_result.final_state, rng=create_rng(1),
                               save_path=str(out))
        assert isinstance(fig, plt.Figure)
        assert out.exists()

    def test_environment_empty_population(self):
        sim = Simulation(SimulationConfig(simulation=SimulationSection(initial_normal=0)))
        fig = plot_environment(sim.get_state())
        assert isinstance(fig, plt.Figure)

    def test_empty_history(self):
        fig = plot_population_trajectory([])
        assert isinstance(fig, plt.Figure)


class TestStyle:
    def test_dark_figure_single_panel(self):
        fig, ax = dark_figure(figsize=(4, 3))
        assert fig.axes == [ax]
        assert tuple(fig.get_size_inches()) == (4.0, 3.0)
        assert to_hex(ax.get_facecolor()) == DARK_PANEL
        assert to_hex(fig.get_facecolor()) == DARK_BG
