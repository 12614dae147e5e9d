"""Daily update engine and headless batch runner.

One simulated day:
  0. Extinction check: an empty population halts the run (no mutation)
  1. day += 1; density = total / capacity; stress = density²
  2. Phase classification → birth-rate multiplier
  3. Births (normals only, per-offspring sub-type draw)
  4. Stress-scaled deaths
  5. Behavioral conversion of normals (density > 0.4)
  6. History snapshot every `history_interval` days

The engine owns the single SimulationState. Callers only ever see frozen
StateSnapshot copies. advance_one_day(), reset() and the state reads
share one lock, so one Simulation can be shared between a pacing driver
and other readers without exposing a half-applied day.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from behavioral_sink.births import birth_step
from behavioral_sink.config import SimulationConfig, default_config, validate_config
from behavioral_sink.conversion import conversion_step
from behavioral_sink.history import HistoryListener, HistoryRecorder
from behavioral_sink.mortality import mortality_step
from behavioral_sink.phases import update_phase
from behavioral_sink.rng import create_rng
from behavioral_sink.types import (
    HistoryRecord,
    Phase,
    SimulationState,
    StateSnapshot,
    StepResult,
    initial_state,
)


# ═══════════════════════════════════════════════════════════════════════
# SIMULATION
# ═══════════════════════════════════════════════════════════════════════

class Simulation:
    """Stateful engine exposing advance / reset / get_state / get_history."""

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Args:
            config: Full configuration; defaults when None.
            rng: Random source for offspring and conversion draws. Anything
                with a numpy-style ``random(size)`` works. Defaults to a
                generator seeded from ``config.simulation.seed``.

        Raises:
            ConfigError: If the configuration is invalid (e.g. max_capacity <= 0).
        """
        self.config = config if config is not None else default_config()
        validate_config(self.config)
        self.max_capacity = self.config.simulation.max_capacity
        self.rng = rng if rng is not None else create_rng(self.config.simulation.seed)
        self._lock = threading.Lock()
        self._listeners: List[HistoryListener] = []
        self._state, self._recorder = self._fresh_state()

    def _fresh_state(self) -> Tuple[SimulationState, HistoryRecorder]:
        s = self.config.simulation
        state = initial_state(
            self.max_capacity,
            normal=s.initial_normal,
            beautiful=s.initial_beautiful,
            aggressive=s.initial_aggressive,
        )
        recorder = HistoryRecorder(s.history_interval, records=state.history)
        for listener in self._listeners:
            recorder.add_listener(listener)
        return state, recorder

    # ── Queries ───────────────────────────────────────────────────────

    @property
    def is_extinct(self) -> bool:
        with self._lock:
            return self._state.total == 0

    def get_state(self) -> StateSnapshot:
        # Taken under the lock so a reader never sees a day mid-update
        with self._lock:
            return self._state.snapshot()

    def get_history(self) -> Tuple[HistoryRecord, ...]:
        with self._lock:
            return tuple(self._state.history)

    def add_history_listener(self, listener: HistoryListener) -> None:
        """Register a callback fired for every new history record."""
        self._listeners.append(listener)
        self._recorder.add_listener(listener)

    # ── Commands ──────────────────────────────────────────────────────

    def reset(self) -> StateSnapshot:
        """Discard state and history; start over from day 0.

        The replacement is built first and swapped in one assignment, so
        no half-reset state is ever visible. The random source is kept.
        """
        with self._lock:
            self._state, self._recorder = self._fresh_state()
            return self._state.snapshot()

    def advance_one_day(self) -> StepResult:
        """Run one full day, or report extinction without touching state."""
        with self._lock:
            state = self._state
            if state.total == 0:
                return StepResult(state=state.snapshot(), is_extinct=True)

            cfg = self.config
            state.day += 1
            pop = state.population
            state.current_density = pop.total / state.max_capacity
            state.social_stress = state.current_density ** 2

            state.phase, state.birth_rate_multiplier = update_phase(
                state.day, state.social_stress, pop.normal, pop.total, cfg.phases,
            )
            birth_step(state, self.rng, cfg.births)
            state.daily_deaths = sum(mortality_step(state, cfg.mortality))
            conversion_step(state, self.rng, cfg.conversion)
            self._recorder.maybe_record(state)

            return StepResult(state=state.snapshot(), is_extinct=False)


# ═══════════════════════════════════════════════════════════════════════
# BATCH RUNS
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimResult:
    """Daily trace and summary of a headless run."""
    n_days: int = 0                       # Days actually simulated
    # Daily timeseries (length = n_days)
    days: Optional[np.ndarray] = None
    total: Optional[np.ndarray] = None
    normal: Optional[np.ndarray] = None
    beautiful: Optional[np.ndarray] = None
    aggressive: Optional[np.ndarray] = None
    density: Optional[np.ndarray] = None
    stress: Optional[np.ndarray] = None
    birth_rate_multiplier: Optional[np.ndarray] = None
    daily_births: Optional[np.ndarray] = None
    daily_deaths: Optional[np.ndarray] = None
    phase: Optional[np.ndarray] = None    # Phase values as int8

    history: List[HistoryRecord] = field(default_factory=list)
    final_state: Optional[StateSnapshot] = None

    # Summary
    initial_pop: int = 0
    final_pop: int = 0
    peak_pop: int = 0
    peak_day: int = 0
    extinct: bool = False
    extinction_day: Optional[int] = None  # Day the population reached zero
    phase_entry_days: Dict[str, int] = field(default_factory=dict)

    def summary(self) -> dict:
        """JSON-friendly summary (no arrays)."""
        return {
            'n_days': self.n_days,
            'initial_pop': self.initial_pop,
            'final_pop': self.final_pop,
            'peak_pop': self.peak_pop,
            'peak_day': self.peak_day,
            'extinct': self.extinct,
            'extinction_day': self.extinction_day,
            'phase_entry_days': dict(self.phase_entry_days),
        }


def run_simulation(
    config: Optional[SimulationConfig] = None,
    n_days: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> SimResult:
    """Drive a fresh Simulation headlessly for n_days or until extinction.

    Args:
        config: SimulationConfig; default if None.
        n_days: Days to simulate; config.simulation.n_days if None.
        rng: Optional injected generator (seeded from config otherwise).
        progress_callback: Optional callable(day, n_days) called every day.

    Returns:
        SimResult with daily arrays truncated to the days actually run.
    """
    if config is None:
        config = default_config()
    if n_days is None:
        n_days = config.simulation.n_days

    sim = Simulation(config, rng=rng)
    start = sim.get_state()

    cols = {
        'total': np.zeros(n_days, dtype=np.int64),
        'normal': np.zeros(n_days, dtype=np.int64),
        'beautiful': np.zeros(n_days, dtype=np.int64),
        'aggressive': np.zeros(n_days, dtype=np.int64),
        'daily_births': np.zeros(n_days, dtype=np.int64),
        'daily_deaths': np.zeros(n_days, dtype=np.int64),
        'density': np.zeros(n_days, dtype=np.float64),
        'stress': np.zeros(n_days, dtype=np.float64),
        'birth_rate_multiplier': np.zeros(n_days, dtype=np.float64),
        'phase': np.zeros(n_days, dtype=np.int8),
    }
    phase_entry: Dict[str, int] = {}
    extinct = False
    extinction_day = None
    n_run = 0

    for i in range(n_days):
        result = sim.advance_one_day()
        if result.is_extinct:
            extinct = True
            extinction_day = result.state.day
            break
        st = result.state
        cols['total'][i] = st.total
        cols['normal'][i] = st.normal
        cols['beautiful'][i] = st.beautiful
        cols['aggressive'][i] = st.aggressive
        cols['daily_births'][i] = st.daily_births
        cols['daily_deaths'][i] = st.daily_deaths
        cols['density'][i] = st.current_density
        cols['stress'][i] = st.social_stress
        cols['birth_rate_multiplier'][i] = st.birth_rate_multiplier
        cols['phase'][i] = int(st.phase)
        phase_entry.setdefault(st.phase.name, st.day)
        n_run = i + 1
        if progress_callback is not None:
            progress_callback(st.day, n_days)

    # Population emptied on the final simulated day
    if not extinct and sim.is_extinct:
        extinct = True
        extinction_day = sim.get_state().day

    final = sim.get_state()
    cols = {k: v[:n_run] for k, v in cols.items()}
    totals = cols['total']
    peak_pop, peak_day = start.total, 0
    if n_run > 0 and int(totals.max()) > peak_pop:
        peak_idx = int(np.argmax(totals))
        peak_pop, peak_day = int(totals[peak_idx]), peak_idx + 1

    return SimResult(
        n_days=n_run,
        days=np.arange(1, n_run + 1, dtype=np.int64),
        history=list(final.history),
        final_state=final,
        initial_pop=start.total,
        final_pop=final.total,
        peak_pop=peak_pop,
        peak_day=peak_day,
        extinct=extinct,
        extinction_day=extinction_day,
        phase_entry_days=phase_entry,
        **cols,
    )


def phase_summary(result: SimResult) -> Dict[str, Dict[str, float]]:
    """Per-phase totals: days spent, births, deaths, end population."""
    out: Dict[str, Dict[str, float]] = {}
    if result.n_days == 0:
        return out
    for phase in Phase:
        mask = result.phase == int(phase)
        if not np.any(mask):
            continue
        idx = np.flatnonzero(mask)
        out[phase.name] = {
            'days': int(idx.size),
            'first_day': int(result.days[idx[0]]),
            'last_day': int(result.days[idx[-1]]),
            'births': int(result.daily_births[mask].sum()),
            'deaths': int(result.daily_deaths[mask].sum()),
            'end_total': int(result.total[idx[-1]]),
            'mean_density': float(result.density[mask].mean()),
        }
    return out
