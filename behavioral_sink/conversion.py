"""Spontaneous behavioral conversion of normal individuals.

Active only above 40% density. The daily conversion count is
⌊N · rate⌋ with

    rate = 0.005 · S      phases A-B
           0.025 · S      phase C
           0.08  · √S     phase D

Each converted individual leaves the normal pool and becomes beautiful
with probability 0.7 (0.9 in phase D), aggressive otherwise. No one is
born or dies here, so the total is unchanged.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from behavioral_sink.config import ConversionSection
from behavioral_sink.types import Phase, SimulationState


def conversion_rate(
    social_stress: float,
    phase: Phase,
    params: Optional[ConversionSection] = None,
) -> float:
    c = params if params is not None else ConversionSection()
    if phase == Phase.D:
        return c.rate_decline * social_stress ** c.decline_exponent
    if phase == Phase.C:
        return c.rate_stagnation * social_stress
    return c.rate * social_stress


def compute_conversions(
    normal: int,
    density: float,
    social_stress: float,
    phase: Phase,
    params: Optional[ConversionSection] = None,
) -> int:
    """Number of normals converting today, never more than are present."""
    c = params if params is not None else ConversionSection()
    if density <= c.density_threshold:
        return 0
    n = math.floor(normal * conversion_rate(social_stress, phase, c))
    return max(0, min(n, normal))


def conversion_step(
    state: SimulationState,
    rng: np.random.Generator,
    params: Optional[ConversionSection] = None,
) -> Tuple[int, int]:
    """Reclassify today's converts. Returns (to_beautiful, to_aggressive)."""
    c = params if params is not None else ConversionSection()
    pop = state.population
    n = compute_conversions(
        pop.normal, state.current_density, state.social_stress, state.phase, c,
    )
    if n == 0:
        return 0, 0

    p_beautiful = (
        c.beautiful_probability_decline if state.phase == Phase.D
        else c.beautiful_probability
    )
    draws = np.asarray(rng.random(n), dtype=np.float64)
    to_beautiful = int(np.count_nonzero(draws < p_beautiful))
    to_aggressive = n - to_beautiful

    pop.normal = max(0, pop.normal - n)
    pop.beautiful += to_beautiful
    pop.aggressive += to_aggressive
    return to_beautiful, to_aggressive
