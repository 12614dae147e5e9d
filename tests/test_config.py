"""Tests for behavioral_sink.config — configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from behavioral_sink.config import (
    BirthSection,
    ConfigError,
    ConversionSection,
    MortalitySection,
    PhaseSection,
    SimulationConfig,
    SimulationSection,
    config_from_dict,
    deep_merge,
    default_config,
    load_config,
    validate_config,
)


PROJECT_ROOT = Path(__file__).resolve().parents[1]


# ── deep_merge tests ──────────────────────────────────────────────────

class TestDeepMerge:
    def test_simple_override(self):
        base = {'a': 1, 'b': 2}
        result = deep_merge(base, {'b': 3})
        assert result == {'a': 1, 'b': 3}

    def test_nested_merge(self):
        base = {'x': {'a': 1, 'b': 2}, 'y': 10}
        result = deep_merge(base, {'x': {'b': 3, 'c': 4}})
        assert result == {'x': {'a': 1, 'b': 3, 'c': 4}, 'y': 10}

    def test_new_key(self):
        assert deep_merge({'a': 1}, {'b': 2}) == {'a': 1, 'b': 2}

    def test_override_dict_with_scalar(self):
        assert deep_merge({'a': {'nested': 1}}, {'a': 'replaced'}) == {'a': 'replaced'}

    def test_empty_override(self):
        assert deep_merge({'a': 1, 'b': 2}, {}) == {'a': 1, 'b': 2}


# ── default_config tests ─────────────────────────────────────────────

class TestDefaultConfig:
    def test_creates_valid_config(self):
        assert isinstance(default_config(), SimulationConfig)

    def test_initial_population(self):
        s = default_config().simulation
        assert s.max_capacity == 3000
        assert (s.initial_normal, s.initial_beautiful, s.initial_aggressive) == (8, 0, 0)
        assert s.history_interval == 10

    def test_phase_breakpoints(self):
        p = default_config().phases
        assert (p.phase_a_end, p.phase_b_end, p.phase_c_end) == (104, 315, 560)
        assert p.b_multiplier == 1.2

    def test_rate_constants(self):
        cfg = default_config()
        assert cfg.births.base_rate == 0.05
        assert cfg.mortality.base_death_rate == 0.002
        assert cfg.conversion.density_threshold == 0.4
        assert cfg.conversion.beautiful_probability_decline == 0.9

    def test_to_dict_roundtrip(self):
        cfg = default_config()
        rebuilt = config_from_dict(cfg.to_dict())
        assert rebuilt == cfg


# ── YAML loading tests ───────────────────────────────────────────────

class TestLoadConfig:
    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "test.yaml"
        with open(path, 'w') as f:
            yaml.dump({'simulation': {'seed': 99, 'max_capacity': 500}}, f)

        config = load_config(path)
        assert config.simulation.seed == 99
        assert config.simulation.max_capacity == 500
        # Unspecified sections get defaults
        assert config.births.base_rate == 0.05
        assert config.phases.phase_c_end == 560

    def test_scenario_override(self, tmp_path):
        base_path = tmp_path / "base.yaml"
        scen_path = tmp_path / "scenario.yaml"
        with open(base_path, 'w') as f:
            yaml.dump({'simulation': {'seed': 1, 'initial_normal': 8}}, f)
        with open(scen_path, 'w') as f:
            yaml.dump({'simulation': {'initial_normal': 400}}, f)

        config = load_config(base_path, scen_path)
        assert config.simulation.initial_normal == 400
        assert config.simulation.seed == 1  # untouched

    def test_sweep_overrides_win(self, tmp_path):
        base_path = tmp_path / "base.yaml"
        with open(base_path, 'w') as f:
            yaml.dump({'mortality': {'base_death_rate': 0.002}}, f)

        config = load_config(
            base_path, sweep_overrides={'mortality': {'base_death_rate': 0.01}},
        )
        assert config.mortality.base_death_rate == 0.01

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "extra.yaml"
        with open(path, 'w') as f:
            yaml.dump({'simulation': {'seed': 3, 'not_a_field': 1}, 'bogus': {}}, f)
        assert load_config(path).simulation.seed == 3

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == default_config()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_missing_scenario_raises(self, tmp_path):
        base_path = tmp_path / "base.yaml"
        base_path.write_text("simulation: {seed: 1}\n")
        with pytest.raises(FileNotFoundError):
            load_config(base_path, tmp_path / "nope.yaml")

    def test_invalid_yaml_value_fails(self, tmp_path):
        path = tmp_path / "bad.yaml"
        with open(path, 'w') as f:
            yaml.dump({'simulation': {'max_capacity': 0}}, f)
        with pytest.raises(ConfigError):
            load_config(path)

    def test_shipped_base_matches_defaults(self):
        config = load_config(PROJECT_ROOT / 'configs' / 'base.yaml')
        assert config.simulation == default_config().simulation
        assert config.phases == default_config().phases
        assert config.births == default_config().births
        assert config.mortality == default_config().mortality
        assert config.conversion == default_config().conversion

    def test_shipped_scenarios_load(self):
        base = PROJECT_ROOT / 'configs' / 'base.yaml'
        for scen in sorted((PROJECT_ROOT / 'configs' / 'scenarios').glob('*.yaml')):
            config = load_config(base, scen)
            assert config.simulation.initial_normal > 8


# ── validation tests ─────────────────────────────────────────────────

class TestValidateConfig:
    @pytest.mark.parametrize('capacity', [0, -1, -3000])
    def test_non_positive_capacity(self, capacity):
        config = SimulationConfig(simulation=SimulationSection(max_capacity=capacity))
        with pytest.raises(ConfigError, match="max_capacity"):
            validate_config(config)

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)

    def test_negative_initial_count(self):
        config = SimulationConfig(simulation=SimulationSection(initial_beautiful=-1))
        with pytest.raises(ConfigError, match="initial_beautiful"):
            validate_config(config)

    def test_zero_history_interval(self):
        config = SimulationConfig(simulation=SimulationSection(history_interval=0))
        with pytest.raises(ConfigError, match="history_interval"):
            validate_config(config)

    def test_non_positive_speed(self):
        config = SimulationConfig(simulation=SimulationSection(speed=0.0))
        with pytest.raises(ConfigError, match="speed"):
            validate_config(config)

    def test_negative_seed(self):
        config = SimulationConfig(simulation=SimulationSection(seed=-5))
        with pytest.raises(ConfigError, match="seed"):
            validate_config(config)

    def test_unordered_breakpoints(self):
        config = SimulationConfig(phases=PhaseSection(phase_b_end=600))
        with pytest.raises(ConfigError, match="breakpoints"):
            validate_config(config)

    def test_threshold_out_of_range(self):
        config = SimulationConfig(births=BirthSection(beautiful_threshold=1.5))
        with pytest.raises(ConfigError, match="beautiful_threshold"):
            validate_config(config)

    def test_negative_death_rate(self):
        config = SimulationConfig(mortality=MortalitySection(base_death_rate=-0.1))
        with pytest.raises(ConfigError, match="base_death_rate"):
            validate_config(config)

    def test_probability_out_of_range(self):
        config = SimulationConfig(
            conversion=ConversionSection(beautiful_probability=-0.1),
        )
        with pytest.raises(ConfigError, match="beautiful_probability"):
            validate_config(config)

    def test_over_capacity_start_warns(self):
        config = SimulationConfig(
            simulation=SimulationSection(max_capacity=100, initial_normal=150),
        )
        with pytest.warns(UserWarning, match="exceeds max_capacity"):
            validate_config(config)

    @pytest.mark.parametrize('gate', ['beautiful_density_gate', 'aggressive_density_gate'])
    def test_density_gate_out_of_range(self, gate):
        config = SimulationConfig(births=BirthSection(**{gate: 1.2}))
        with pytest.raises(ConfigError, match=gate):
            validate_config(config)

    def test_conversion_threshold_out_of_range(self):
        config = SimulationConfig(conversion=ConversionSection(density_threshold=-0.1))
        with pytest.raises(ConfigError, match="density_threshold"):
            validate_config(config)

    @pytest.mark.parametrize(
        'exponent', ['c_exponent', 'd_stress_exponent', 'd_ratio_exponent'],
    )
    def test_negative_exponent(self, exponent):
        config = SimulationConfig(phases=PhaseSection(**{exponent: -1.0}))
        with pytest.raises(ConfigError, match=exponent):
            validate_config(config)
