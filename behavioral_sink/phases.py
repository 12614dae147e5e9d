"""Phase classification and the phase-specific birth-rate multiplier.

Phases are defined purely by day range (inclusive upper bounds, first
match wins):

  day ≤ 104        A  0.6 + (day / 104) · 0.4
  105 ≤ day ≤ 315  B  1.2
  316 ≤ day ≤ 560  C  0.4 · (1 − S)²
  day ≥ 561        D  0.01 · (1 − S)³ · (N / max(1, total))²

where S is social stress and N the normal count. Phase D's normal-share
term is kept as written even when the total is tiny.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from behavioral_sink.config import PhaseSection
from behavioral_sink.types import Phase


PHASE_INFO: Dict[Phase, Dict[str, str]] = {
    Phase.A: {
        'name': 'Phase A: Adaptation',
        'description': 'The colony settles into its environment and breeding gets under way.',
    },
    Phase.B: {
        'name': 'Phase B: Growth',
        'description': (
            'Abundant resources drive rapid population growth. '
            'A social hierarchy is forming.'
        ),
    },
    Phase.C: {
        'name': 'Phase C: Stagnation',
        'description': (
            'Crowding is breaking down social behavior. Aggression '
            'is rising and abnormal behavior is spreading.'
        ),
    },
    Phase.D: {
        'name': 'Phase D: Decline',
        'description': (
            'Births have all but stopped. The population is dying out '
            'despite unlimited resources.'
        ),
    },
}


def classify_phase(day: int, params: Optional[PhaseSection] = None) -> Phase:
    """Map a simulation day to its phase."""
    p = params if params is not None else PhaseSection()
    if day <= p.phase_a_end:
        return Phase.A
    if day <= p.phase_b_end:
        return Phase.B
    if day <= p.phase_c_end:
        return Phase.C
    return Phase.D


def birth_rate_multiplier(
    phase: Phase,
    day: int,
    social_stress: float,
    normal: int,
    total: int,
    params: Optional[PhaseSection] = None,
) -> float:
    """Phase-specific birth-rate multiplier.

    Args:
        phase: Phase returned by classify_phase(day).
        day: Current simulation day.
        social_stress: density², in [0, 1] while total ≤ capacity.
        normal: Current normal count (Phase D only).
        total: Current total population (Phase D only).
        params: Phase coefficients; defaults when None.
    """
    p = params if params is not None else PhaseSection()
    if phase == Phase.A:
        return p.a_base + (day / p.phase_a_end) * p.a_ramp
    if phase == Phase.B:
        return p.b_multiplier
    if phase == Phase.C:
        return p.c_scale * (1.0 - social_stress) ** p.c_exponent
    normal_ratio = normal / max(1, total)
    return (
        p.d_scale
        * (1.0 - social_stress) ** p.d_stress_exponent
        * normal_ratio ** p.d_ratio_exponent
    )


def update_phase(
    day: int,
    social_stress: float,
    normal: int,
    total: int,
    params: Optional[PhaseSection] = None,
) -> Tuple[Phase, float]:
    """Classify the day and compute its multiplier in one call."""
    phase = classify_phase(day, params)
    return phase, birth_rate_multiplier(
        phase, day, social_stress, normal, total, params,
    )
