"""Core data types for the behavioral-sink simulation.

This module is the single home for:
  - Phase and SubType enumerations
  - Population: the three aggregate sub-type counts
  - SimulationState: the one mutable aggregate owned by the engine
  - Read-only transfer objects (StateSnapshot, HistoryRecord, StepResult)

There is no per-individual object. Counts are plain integers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Dict, List, Tuple


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class Phase(IntEnum):
    """Day-range regimes, each with its own birth-rate formula.

    A → B → C → D, switching at the configured day breakpoints
    (defaults 104 / 315 / 560, inclusive upper bounds).
    """
    A = 0   # Adaptation: multiplier ramps 0.6 → 1.0
    B = 1   # Growth: constant peak multiplier
    C = 2   # Stagnation: multiplier collapses with stress
    D = 3   # Decline: near-zero multiplier, gated by normal share


class SubType(IntEnum):
    """Mutually exclusive behavioral categories."""
    NORMAL     = 0   # Only sub-type that reproduces
    BEAUTIFUL  = 1   # Withdrawn, self-grooming, no breeding
    AGGRESSIVE = 2   # Elevated fighting mortality


SUBTYPE_NAMES: Tuple[str, ...] = ('normal', 'beautiful', 'aggressive')


# ═══════════════════════════════════════════════════════════════════════
# MUTABLE STATE
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class Population:
    """Aggregate sub-type counts. All three stay ≥ 0."""
    normal: int = 8
    beautiful: int = 0
    aggressive: int = 0

    @property
    def total(self) -> int:
        return self.normal + self.beautiful + self.aggressive

    def count(self, subtype: SubType) -> int:
        return getattr(self, SUBTYPE_NAMES[subtype])

    def copy(self) -> 'Population':
        return Population(self.normal, self.beautiful, self.aggressive)

    def as_dict(self) -> Dict[str, int]:
        return {
            'normal': self.normal,
            'beautiful': self.beautiful,
            'aggressive': self.aggressive,
        }


@dataclass(frozen=True)
class HistoryRecord:
    """One periodic snapshot, as plotted by the population/birth-rate charts."""
    day: int
    total: int
    normal: int
    beautiful: int
    aggressive: int
    birth_rate_percent: int  # round(birth_rate_multiplier * 100)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class SimulationState:
    """The single mutable aggregate. Mutated only by the one-day update.

    current_density and social_stress are recomputed at the start of each
    day from the total at that moment; they describe the conditions the
    day's births, deaths and conversions were computed under.
    """
    max_capacity: int
    day: int = 0
    population: Population = field(default_factory=Population)
    current_density: float = 0.0
    social_stress: float = 0.0
    birth_rate_multiplier: float = 1.0
    phase: Phase = Phase.A
    daily_births: int = 0
    daily_deaths: int = 0
    history: List[HistoryRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.population.total

    def snapshot(self) -> 'StateSnapshot':
        """Freeze the current state into a read-only copy."""
        p = self.population
        return StateSnapshot(
            day=self.day,
            normal=p.normal,
            beautiful=p.beautiful,
            aggressive=p.aggressive,
            max_capacity=self.max_capacity,
            current_density=self.current_density,
            social_stress=self.social_stress,
            birth_rate_multiplier=self.birth_rate_multiplier,
            phase=self.phase,
            daily_births=self.daily_births,
            daily_deaths=self.daily_deaths,
            history=tuple(self.history),
        )


def initial_state(
    max_capacity: int,
    normal: int = 8,
    beautiful: int = 0,
    aggressive: int = 0,
) -> SimulationState:
    """Fresh state at day 0 with an empty history."""
    return SimulationState(
        max_capacity=max_capacity,
        population=Population(normal, beautiful, aggressive),
    )


# ═══════════════════════════════════════════════════════════════════════
# READ-ONLY TRANSFER OBJECTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StateSnapshot:
    """Immutable view of every SimulationState field, for presentation."""
    day: int
    normal: int
    beautiful: int
    aggressive: int
    max_capacity: int
    current_density: float
    social_stress: float
    birth_rate_multiplier: float
    phase: Phase
    daily_births: int
    daily_deaths: int
    history: Tuple[HistoryRecord, ...] = ()

    @property
    def total(self) -> int:
        return self.normal + self.beautiful + self.aggressive

    @property
    def birth_rate_percent(self) -> int:
        return round(self.birth_rate_multiplier * 100)

    @property
    def density_percent(self) -> float:
        return round(self.current_density * 100, 1)

    @property
    def stress_percent(self) -> float:
        return round(self.social_stress * 100, 1)

    def to_dict(self, include_history: bool = False) -> dict:
        """Plain-dict form (JSON-friendly)."""
        d = {
            'day': self.day,
            'total': self.total,
            'normal': self.normal,
            'beautiful': self.beautiful,
            'aggressive': self.aggressive,
            'max_capacity': self.max_capacity,
            'current_density': self.current_density,
            'social_stress': self.social_stress,
            'birth_rate_multiplier': self.birth_rate_multiplier,
            'phase': self.phase.name,
            'daily_births': self.daily_births,
            'daily_deaths': self.daily_deaths,
        }
        if include_history:
            d['history'] = [r.to_dict() for r in self.history]
        return d


@dataclass(frozen=True)
class StepResult:
    """Outcome of one advance call."""
    state: StateSnapshot
    is_extinct: bool = False
