"""Offspring production and sub-type assignment.

Only normal individuals breed. The daily birth count is

    births = ⌊N · base_rate · multiplier · (1 − S)⌋

and is forced to zero once the total reaches capacity. Each offspring
then gets its own uniform draw u from the injected generator:

    density > 0.6 and u < bt         → beautiful
    density > 0.5 and u < bt + at    → aggressive
    otherwise                        → normal

(bt, at) = (0.30, 0.15) in phases A-B, (0.50, 0.25) in C, (0.75, 0.20) in D.
At density ≤ 0.5 every offspring is normal whatever the draw.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from behavioral_sink.config import BirthSection
from behavioral_sink.types import Phase, SimulationState


def birth_thresholds(
    phase: Phase,
    params: Optional[BirthSection] = None,
) -> Tuple[float, float]:
    """(beautiful, aggressive) draw thresholds for the phase."""
    b = params if params is not None else BirthSection()
    if phase == Phase.D:
        return b.beautiful_threshold_decline, b.aggressive_threshold_decline
    if phase == Phase.C:
        return b.beautiful_threshold_stagnation, b.aggressive_threshold_stagnation
    return b.beautiful_threshold, b.aggressive_threshold


def compute_births(
    normal: int,
    total: int,
    max_capacity: int,
    multiplier: float,
    social_stress: float,
    params: Optional[BirthSection] = None,
) -> int:
    """Number of offspring born today (0 at or above capacity)."""
    b = params if params is not None else BirthSection()
    if total >= max_capacity:
        return 0
    effective_rate = b.base_rate * multiplier * (1.0 - social_stress)
    return max(0, math.floor(normal * effective_rate))


def assign_offspring(
    n_births: int,
    density: float,
    phase: Phase,
    rng: np.random.Generator,
    params: Optional[BirthSection] = None,
) -> Tuple[int, int, int]:
    """Split n_births into (normal, beautiful, aggressive) counts.

    One uniform draw per offspring, taken in a single vectorized call so
    the sequence consumed from the generator is identical to drawing one
    at a time.
    """
    if n_births <= 0:
        return 0, 0, 0
    b = params if params is not None else BirthSection()
    bt, at = birth_thresholds(phase, b)
    draws = np.asarray(rng.random(n_births), dtype=np.float64)

    beautiful = (density > b.beautiful_density_gate) & (draws < bt)
    aggressive = (
        ~beautiful
        & (density > b.aggressive_density_gate)
        & (draws < bt + at)
    )
    n_beautiful = int(np.count_nonzero(beautiful))
    n_aggressive = int(np.count_nonzero(aggressive))
    return n_births - n_beautiful - n_aggressive, n_beautiful, n_aggressive


def birth_step(
    state: SimulationState,
    rng: np.random.Generator,
    params: Optional[BirthSection] = None,
) -> int:
    """Apply today's births to state. Returns the birth count.

    Uses state.current_density / social_stress / birth_rate_multiplier as
    set at the start of the day. Sets state.daily_births.
    """
    pop = state.population
    births = compute_births(
        pop.normal,
        pop.total,
        state.max_capacity,
        state.birth_rate_multiplier,
        state.social_stress,
        params,
    )
    state.daily_births = births
    n_norm, n_beau, n_aggr = assign_offspring(
        births, state.current_density, state.phase, rng, params,
    )
    pop.normal += n_norm
    pop.beautiful += n_beau
    pop.aggressive += n_aggr
    return births
