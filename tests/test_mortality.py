"""Tests for behavioral_sink.mortality — stress-scaled deaths."""

import pytest

from behavioral_sink.config import MortalitySection
from behavioral_sink.mortality import compute_deaths, mortality_step, stress_multiplier
from behavioral_sink.types import Phase, initial_state


class TestStressMultiplier:
    @pytest.mark.parametrize('phase, expected', [
        (Phase.A, 3.5), (Phase.B, 3.5), (Phase.C, 5.0), (Phase.D, 8.5),
    ])
    def test_by_phase(self, phase, expected):
        assert stress_multiplier(0.5, phase) == pytest.approx(expected)

    def test_no_stress(self):
        for phase in Phase:
            assert stress_multiplier(0.0, phase) == 1.0


class TestComputeDeaths:
    def test_phase_a(self):
        # rate = 0.002 * 2.5 = 0.005 → 6.17, 7.404, 9.255
        assert compute_deaths(1234, 1234, 1234, 0.3, Phase.A) == (6, 7, 9)

    def test_phase_c(self):
        # rate = 0.002 * 3.4 = 0.0068 → 8.39, 10.07, 12.59
        assert compute_deaths(1234, 1234, 1234, 0.3, Phase.C) == (8, 10, 12)

    def test_phase_d_heavier_abnormal_mortality(self):
        # rate = 0.002 * 5.5 = 0.011 → 13.57, 33.94, 40.72
        assert compute_deaths(1234, 1234, 1234, 0.3, Phase.D) == (13, 33, 40)

    def test_small_counts_floor_to_zero(self):
        assert compute_deaths(8, 3, 2, 0.0, Phase.A) == (0, 0, 0)

    def test_empty(self):
        assert compute_deaths(0, 0, 0, 1.0, Phase.D) == (0, 0, 0)


class TestMortalityStep:
    def test_reduces_counts(self):
        state = initial_state(3000, normal=1234, beautiful=1234, aggressive=1234)
        state.social_stress = 0.3
        state.phase = Phase.D
        applied = mortality_step(state)
        assert applied == (13, 33, 40)
        assert state.population.as_dict() == {
            'normal': 1221, 'beautiful': 1201, 'aggressive': 1194,
        }

    def test_clamped_at_zero(self):
        params = MortalitySection(base_death_rate=1.0)
        state = initial_state(100, normal=5, beautiful=5, aggressive=5)
        state.phase = Phase.A
        # 5, floor(6.0), floor(7.5) deaths against 5 each
        applied = mortality_step(state, params)
        assert applied == (5, 5, 5)
        assert state.population.as_dict() == {
            'normal': 0, 'beautiful': 0, 'aggressive': 0,
        }

    def test_never_negative(self):
        params = MortalitySection(base_death_rate=10.0)
        state = initial_state(100, normal=3, beautiful=1, aggressive=0)
        state.social_stress = 1.0
        state.phase = Phase.D
        mortality_step(state, params)
        assert min(state.population.as_dict().values()) == 0
