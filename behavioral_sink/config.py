"""Configuration system for the behavioral-sink simulation.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → scenario override → sweep overrides

Every coefficient of the daily update lives here with its calibrated
default. The phase breakpoints (104 / 315 / 560) and rate constants are
tuned values, not derived ones; treat them as fixed inputs.
"""

from __future__ import annotations

import dataclasses
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


class ConfigError(ValueError):
    """Raised when a configuration cannot be used to run the engine."""


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationSection:
    """Top-level run control and initial population."""
    seed: int = 42
    max_capacity: int = 3000       # Enclosure ceiling (individuals)
    initial_normal: int = 8        # Founding population (4 breeding pairs)
    initial_beautiful: int = 0
    initial_aggressive: int = 0
    n_days: int = 1000             # Horizon for batch runs
    history_interval: int = 10     # Snapshot every N days
    speed: float = 1.0             # Driver pacing multiplier (never touches the math)
    step_interval_ms: float = 100.0  # Wall-clock ms per day at speed 1.0


@dataclass
class PhaseSection:
    """Phase breakpoints (inclusive upper bounds) and multiplier formulas."""
    phase_a_end: int = 104
    phase_b_end: int = 315
    phase_c_end: int = 560

    # Phase A: a_base + (day / phase_a_end) * a_ramp
    a_base: float = 0.6
    a_ramp: float = 0.4
    # Phase B: constant
    b_multiplier: float = 1.2
    # Phase C: c_scale * (1 - stress) ** c_exponent
    c_scale: float = 0.4
    c_exponent: float = 2.0
    # Phase D: d_scale * (1 - stress) ** d_stress_exponent * ratio ** d_ratio_exponent
    d_scale: float = 0.01
    d_stress_exponent: float = 3.0
    d_ratio_exponent: float = 2.0


@dataclass
class BirthSection:
    """Offspring production and sub-type assignment."""
    base_rate: float = 0.05              # Daily fraction of normals that breed
    beautiful_density_gate: float = 0.6  # Density above which beautiful births occur
    aggressive_density_gate: float = 0.5 # Density above which aggressive births occur

    # (beautiful, aggressive) draw thresholds per regime
    beautiful_threshold: float = 0.30
    aggressive_threshold: float = 0.15
    beautiful_threshold_stagnation: float = 0.50
    aggressive_threshold_stagnation: float = 0.25
    beautiful_threshold_decline: float = 0.75
    aggressive_threshold_decline: float = 0.20


@dataclass
class MortalitySection:
    """Stress-scaled daily mortality."""
    base_death_rate: float = 0.002
    stress_scale: float = 5.0             # Phases A-B
    stress_scale_stagnation: float = 8.0  # Phase C
    stress_scale_decline: float = 15.0    # Phase D
    beautiful_multiplier: float = 1.2
    beautiful_multiplier_decline: float = 2.5
    aggressive_multiplier: float = 1.5
    aggressive_multiplier_decline: float = 3.0


@dataclass
class ConversionSection:
    """Spontaneous normal → abnormal behavioral conversion."""
    density_threshold: float = 0.4        # Inactive at or below this density
    rate: float = 0.005                   # × stress, phases A-B
    rate_stagnation: float = 0.025        # × stress, phase C
    rate_decline: float = 0.08            # × stress ** decline_exponent, phase D
    decline_exponent: float = 0.5
    beautiful_probability: float = 0.7
    beautiful_probability_decline: float = 0.9


@dataclass
class OutputSection:
    """Output control for scripted runs."""
    directory: str = "results/"
    save_history: bool = True
    save_plots: bool = True


@dataclass
class SimulationConfig:
    """Complete simulation configuration.

    Load from YAML via `load_config()`. Sections map 1:1 to YAML top-level keys.
    """
    simulation: SimulationSection = field(default_factory=SimulationSection)
    phases: PhaseSection = field(default_factory=PhaseSection)
    births: BirthSection = field(default_factory=BirthSection)
    mortality: MortalitySection = field(default_factory=MortalitySection)
    conversion: ConversionSection = field(default_factory=ConversionSection)
    output: OutputSection = field(default_factory=OutputSection)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


_SECTION_MAP = {
    'simulation': SimulationSection,
    'phases': PhaseSection,
    'births': BirthSection,
    'mortality': MortalitySection,
    'conversion': ConversionSection,
    'output': OutputSection,
}


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Layer one config dict over another, in place on base.

    Sections merge key by key, so a scenario that only sets
    simulation.initial_normal keeps every other base.yaml value. Scalars
    and lists in override win outright. Returns base.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Build one config section, dropping YAML keys the section does not define."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> SimulationConfig:
    """Convert a merged YAML dict to a SimulationConfig."""
    sections = {}
    for key, cls in _SECTION_MAP.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()
    return SimulationConfig(**sections)


def _check_probability(name: str, value: float) -> None:
    if not (0.0 <= value <= 1.0):
        raise ConfigError(f"{name} must be in [0, 1], got {value}")


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ConfigError(f"{name} must be >= 0, got {value}")


def validate_config(config: SimulationConfig) -> None:
    """Validate configuration constraints. Raises ConfigError on failure.

    Checks:
      - Capacity is positive (density is undefined otherwise)
      - Initial counts are non-negative
      - Phase breakpoints are strictly increasing
      - Rates and exponents are non-negative
      - Probabilities and density gates lie in [0, 1]
    """
    s = config.simulation
    if s.max_capacity <= 0:
        raise ConfigError(
            f"simulation.max_capacity must be positive, got {s.max_capacity}"
        )
    for name in ('initial_normal', 'initial_beautiful', 'initial_aggressive'):
        if getattr(s, name) < 0:
            raise ConfigError(
                f"simulation.{name} must be >= 0, got {getattr(s, name)}"
            )
    if s.seed < 0:
        raise ConfigError("simulation.seed must be non-negative")
    if s.n_days < 0:
        raise ConfigError(f"simulation.n_days must be >= 0, got {s.n_days}")
    if s.history_interval < 1:
        raise ConfigError(
            f"simulation.history_interval must be >= 1, got {s.history_interval}"
        )
    if s.speed <= 0:
        raise ConfigError(f"simulation.speed must be positive, got {s.speed}")
    if s.step_interval_ms < 0:
        raise ConfigError(
            f"simulation.step_interval_ms must be >= 0, got {s.step_interval_ms}"
        )

    initial_total = s.initial_normal + s.initial_beautiful + s.initial_aggressive
    if initial_total > s.max_capacity:
        warnings.warn(
            f"Initial population ({initial_total}) exceeds max_capacity "
            f"({s.max_capacity}); births stay suppressed until it falls below.",
            UserWarning,
            stacklevel=2,
        )

    # Phase breakpoints
    p = config.phases
    if not (0 < p.phase_a_end < p.phase_b_end < p.phase_c_end):
        raise ConfigError(
            f"phase breakpoints must satisfy 0 < a_end < b_end < c_end, got "
            f"{p.phase_a_end}/{p.phase_b_end}/{p.phase_c_end}"
        )
    # Exponents apply to (1 - stress), which is negative above capacity; a
    # start above capacity with non-integer exponents is unsupported.
    for name in (
        'a_base', 'a_ramp', 'b_multiplier', 'c_scale', 'd_scale',
        'c_exponent', 'd_stress_exponent', 'd_ratio_exponent',
    ):
        _check_non_negative(f"phases.{name}", getattr(p, name))

    # Births
    b = config.births
    _check_non_negative("births.base_rate", b.base_rate)
    for name in (
        'beautiful_density_gate', 'aggressive_density_gate',
        'beautiful_threshold', 'aggressive_threshold',
        'beautiful_threshold_stagnation', 'aggressive_threshold_stagnation',
        'beautiful_threshold_decline', 'aggressive_threshold_decline',
    ):
        _check_probability(f"births.{name}", getattr(b, name))

    # Mortality
    m = config.mortality
    for f in dataclasses.fields(m):
        _check_non_negative(f"mortality.{f.name}", getattr(m, f.name))

    # Conversion
    c = config.conversion
    _check_probability("conversion.density_threshold", c.density_threshold)
    for name in ('rate', 'rate_stagnation', 'rate_decline', 'decline_exponent'):
        _check_non_negative(f"conversion.{name}", getattr(c, name))
    _check_probability("conversion.beautiful_probability", c.beautiful_probability)
    _check_probability(
        "conversion.beautiful_probability_decline",
        c.beautiful_probability_decline,
    )


def load_config(
    base_path: Union[str, Path],
    scenario_path: Optional[Union[str, Path]] = None,
    sweep_overrides: Optional[Dict] = None,
) -> SimulationConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → scenario → sweep overrides.
    Each layer overrides only the fields it specifies.

    Raises:
        FileNotFoundError: If base_path doesn't exist.
        ConfigError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    with open(base_path) as f:
        config_dict = yaml.safe_load(f) or {}

    if scenario_path is not None:
        scenario_path = Path(scenario_path)
        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {scenario_path}")
        with open(scenario_path) as f:
            scenario = yaml.safe_load(f) or {}
        deep_merge(config_dict, scenario)

    if sweep_overrides is not None:
        deep_merge(config_dict, sweep_overrides)

    return config_from_dict(config_dict)


def config_from_dict(data: Dict) -> SimulationConfig:
    """Build and validate a SimulationConfig from a nested dict."""
    config = _yaml_to_config(data)
    validate_config(config)
    return config


def default_config() -> SimulationConfig:
    """Return a SimulationConfig with all default values."""
    config = SimulationConfig()
    validate_config(config)
    return config
