"""Population visualizations for the behavioral-sink simulation.

Every function:
  - Accepts engine output (history records, SimResult or a StateSnapshot)
  - Returns a matplotlib Figure
  - Has an optional ``save_path`` parameter (saves PNG when given)
  - Uses the shared dark theme from ``behavioral_sink.viz.style``

matplotlib backend is forced to Agg (no display) on import.
"""

from __future__ import annotations

import matplotlib
matplotlib.use('Agg')

from typing import Dict, Optional, Sequence, Tuple, TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

from behavioral_sink.config import PhaseSection
from behavioral_sink.viz.style import (
    BIRTH_RATE_COLOR,
    DARK_PANEL,
    GRID_COLOR,
    SUBTYPE_COLORS,
    TEXT_COLOR,
    TOTAL_COLOR,
    dark_figure,
    legend,
    save_figure,
    shade_phases,
)

if TYPE_CHECKING:
    from behavioral_sink.engine import SimResult
    from behavioral_sink.types import HistoryRecord, StateSnapshot


_FIELDS = ('day', 'total', 'normal', 'beautiful', 'aggressive', 'birth_rate_percent')


def _history_arrays(history: Sequence['HistoryRecord']) -> Dict[str, np.ndarray]:
    return {
        f: np.array([getattr(r, f) for r in history], dtype=np.int64)
        for f in _FIELDS
    }


def _phase_ends(phases: Optional[PhaseSection]) -> Tuple[int, int, int]:
    p = phases if phases is not None else PhaseSection()
    return p.phase_a_end, p.phase_b_end, p.phase_c_end


# ═══════════════════════════════════════════════════════════════════════
# 1. POPULATION TRAJECTORY
# ═══════════════════════════════════════════════════════════════════════

def plot_population_trajectory(
    history: Sequence['HistoryRecord'],
    max_capacity: Optional[int] = None,
    phases: Optional[PhaseSection] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Total and per-sub-type counts at each history snapshot.

    Args:
        history: HistoryRecords (Simulation.get_history()).
        max_capacity: Draw the capacity ceiling as a dashed line.
        phases: Phase breakpoints for background shading.
        save_path: Optional path to save the figure.
    """
    h = _history_arrays(history)
    fig, ax = dark_figure()

    ax.plot(h['day'], h['total'], color=TOTAL_COLOR, linewidth=2.5,
            label='Total', zorder=3)
    ax.fill_between(h['day'], h['total'], alpha=0.12, color=TOTAL_COLOR)
    for name, color in SUBTYPE_COLORS.items():
        ax.plot(h['day'], h[name], color=color, linewidth=1.6,
                label=name.capitalize())
    if max_capacity is not None:
        ax.axhline(max_capacity, color=TEXT_COLOR, linestyle='--',
                   linewidth=1.0, alpha=0.5, label=f'Capacity = {max_capacity}')

    x_max = int(h['day'][-1]) if h['day'].size else 1
    shade_phases(ax, _phase_ends(phases), x_max)
    ax.set_xlim(0, x_max)
    ax.set_ylim(bottom=0)
    ax.set_xlabel('Day', fontsize=12)
    ax.set_ylabel('Individuals', fontsize=12)
    ax.set_title('Population by Sub-type', fontsize=14, fontweight='bold')
    legend(ax, fontsize=10)

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 2. BIRTH RATE
# ═══════════════════════════════════════════════════════════════════════

def plot_birth_rate(
    history: Sequence['HistoryRecord'],
    phases: Optional[PhaseSection] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Phase birth-rate multiplier (percent) at each history snapshot."""
    h = _history_arrays(history)
    fig, ax = dark_figure()

    ax.plot(h['day'], h['birth_rate_percent'], color=BIRTH_RATE_COLOR,
            linewidth=2.0, label='Birth rate (%)')
    ax.fill_between(h['day'], h['birth_rate_percent'], alpha=0.15,
                    color=BIRTH_RATE_COLOR)

    x_max = int(h['day'][-1]) if h['day'].size else 1
    shade_phases(ax, _phase_ends(phases), x_max)
    ax.set_xlim(0, x_max)
    top = int(h['birth_rate_percent'].max()) if h['day'].size else 100
    ax.set_ylim(0, max(100, top + 10))
    ax.set_xlabel('Day', fontsize=12)
    ax.set_ylabel('Birth rate (%)', fontsize=12)
    ax.set_title('Birth-rate Multiplier', fontsize=14, fontweight='bold')
    legend(ax, fontsize=10)

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 3. COMPOSITION
# ═══════════════════════════════════════════════════════════════════════

def plot_composition(
    result: 'SimResult',
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Daily sub-type shares as a stacked area (0–100%).

    Days with an empty population are left blank.
    """
    fig, ax = dark_figure()
    days = result.days
    totals = result.total.astype(np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        shares = [
            np.where(totals > 0, getattr(result, name) / totals * 100.0, np.nan)
            for name in SUBTYPE_COLORS
        ]
    ax.stackplot(days, *shares, colors=list(SUBTYPE_COLORS.values()),
                 labels=[n.capitalize() for n in SUBTYPE_COLORS], alpha=0.85)

    ax.set_xlim(days[0] if days.size else 0, days[-1] if days.size else 1)
    ax.set_ylim(0, 100)
    ax.set_xlabel('Day', fontsize=12)
    ax.set_ylabel('Share of population (%)', fontsize=12)
    ax.set_title('Behavioral Composition', fontsize=14, fontweight='bold')
    legend(ax, loc='lower left', fontsize=10)

    if save_path:
        save_figure(fig, save_path)
    return fig


# ═══════════════════════════════════════════════════════════════════════
# 4. ENVIRONMENT VIEW
# ═══════════════════════════════════════════════════════════════════════

def plot_environment(
    state: 'StateSnapshot',
    rng: Optional[np.random.Generator] = None,
    max_dots: int = 800,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """The enclosure as a dot field, one dot per individual up to max_dots.

    Dots are scattered uniformly and coloured in proportion to the current
    sub-type shares. Density and stress are annotated top-left. Uses its
    own generator so drawing never disturbs the engine's random stream.
    """
    if rng is None:
        rng = np.random.default_rng()
    fig, ax = dark_figure(figsize=(8, 6))
    ax.grid(False)

    n = min(state.total, max_dots)
    if n > 0:
        n_normal = int(round(n * state.normal / state.total))
        n_beautiful = int(round(n * state.beautiful / state.total))
        n_beautiful = min(n_beautiful, n - n_normal)
        counts = {
            'normal': n_normal,
            'beautiful': n_beautiful,
            'aggressive': n - n_normal - n_beautiful,
        }
        for name, k in counts.items():
            if k == 0:
                continue
            xy = rng.random((k, 2))
            ax.scatter(xy[:, 0], xy[:, 1], s=9, color=SUBTYPE_COLORS[name],
                       label=name.capitalize(), linewidths=0)

    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.text(0.02, 0.97,
            f"Density: {state.density_percent:.1f}%\n"
            f"Stress: {state.stress_percent:.1f}%",
            transform=ax.transAxes, va='top', ha='left', color=TEXT_COLOR,
            fontsize=11, fontweight='bold',
            bbox=dict(facecolor=DARK_PANEL, edgecolor=GRID_COLOR, alpha=0.8))
    ax.set_title(f'Day {state.day}: {state.total} individuals',
                 fontsize=14, fontweight='bold')
    if n > 0:
        legend(ax, loc='lower right', fontsize=9)

    if save_path:
        save_figure(fig, save_path)
    return fig
