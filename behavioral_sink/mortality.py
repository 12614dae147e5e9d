"""Stress-driven daily mortality.

    rate = base_death_rate · (1 + S · k)      k = 5 (A-B), 8 (C), 15 (D)

Normals die at `rate`, beautiful individuals at rate × 1.2 (× 2.5 in
phase D), aggressive ones at rate × 1.5 (× 3.0 in phase D). Death counts
are floored and every count is clamped at zero.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

from behavioral_sink.config import MortalitySection
from behavioral_sink.types import Phase, SimulationState


def stress_multiplier(
    social_stress: float,
    phase: Phase,
    params: Optional[MortalitySection] = None,
) -> float:
    m = params if params is not None else MortalitySection()
    if phase == Phase.D:
        scale = m.stress_scale_decline
    elif phase == Phase.C:
        scale = m.stress_scale_stagnation
    else:
        scale = m.stress_scale
    return 1.0 + social_stress * scale


def compute_deaths(
    normal: int,
    beautiful: int,
    aggressive: int,
    social_stress: float,
    phase: Phase,
    params: Optional[MortalitySection] = None,
) -> Tuple[int, int, int]:
    """(normal, beautiful, aggressive) death counts for one day."""
    m = params if params is not None else MortalitySection()
    rate = m.base_death_rate * stress_multiplier(social_stress, phase, m)

    if phase == Phase.D:
        beautiful_mult = m.beautiful_multiplier_decline
        aggressive_mult = m.aggressive_multiplier_decline
    else:
        beautiful_mult = m.beautiful_multiplier
        aggressive_mult = m.aggressive_multiplier

    return (
        math.floor(normal * rate),
        math.floor(beautiful * rate * beautiful_mult),
        math.floor(aggressive * rate * aggressive_mult),
    )


def mortality_step(
    state: SimulationState,
    params: Optional[MortalitySection] = None,
) -> Tuple[int, int, int]:
    """Remove today's deaths from state. Returns deaths actually applied."""
    pop = state.population
    d_norm, d_beau, d_aggr = compute_deaths(
        pop.normal, pop.beautiful, pop.aggressive,
        state.social_stress, state.phase, params,
    )
    applied = (
        min(d_norm, pop.normal),
        min(d_beau, pop.beautiful),
        min(d_aggr, pop.aggressive),
    )
    pop.normal = max(0, pop.normal - d_norm)
    pop.beautiful = max(0, pop.beautiful - d_beau)
    pop.aggressive = max(0, pop.aggressive - d_aggr)
    return applied
