#!/usr/bin/env python3
"""Run the behavioral-sink simulation from a YAML configuration.

Runs headless by default (as fast as possible) and writes the history,
a run summary and the standard plots into the configured output
directory. With --realtime the run is paced at 100 ms/day divided by
--speed and a status line is printed every history interval.

Usage:
    python scripts/run_simulation.py
    python scripts/run_simulation.py configs/base.yaml configs/scenarios/crowded_start.yaml
    python scripts/run_simulation.py --days 700 --initial-normal 400 --seed 7
    python scripts/run_simulation.py --realtime --speed 5 --days 200

References:
    - behavioral_sink/config.py: SimulationConfig, load_config
    - behavioral_sink/engine.py: Simulation, run_simulation
    - behavioral_sink/driver.py: PacedDriver
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

# ── Project imports ──────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from behavioral_sink.config import (
    SimulationConfig,
    config_from_dict,
    default_config,
    deep_merge,
    load_config,
)
from behavioral_sink.driver import PacedDriver
from behavioral_sink.engine import Simulation, phase_summary, run_simulation
from behavioral_sink.phases import PHASE_INFO
from behavioral_sink.types import Phase, StepResult


# ═══════════════════════════════════════════════════════════════════════
# ARGUMENTS
# ═══════════════════════════════════════════════════════════════════════

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Closed-population behavioral-sink simulation.")
    parser.add_argument('config', nargs='?', default=None,
                        help="Base YAML config (defaults built in if omitted)")
    parser.add_argument('scenario', nargs='?', default=None,
                        help="Optional scenario YAML merged over the base")
    parser.add_argument('--days', type=int, default=None,
                        help="Days to simulate (overrides simulation.n_days)")
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--capacity', type=int, default=None,
                        help="Override simulation.max_capacity")
    parser.add_argument('--initial-normal', type=int, default=None,
                        help="Override simulation.initial_normal")
    parser.add_argument('--output', type=str, default=None,
                        help="Override output.directory")
    parser.add_argument('--no-plots', action='store_true')
    parser.add_argument('--realtime', action='store_true',
                        help="Pace the run in wall-clock time")
    parser.add_argument('--speed', type=float, default=None,
                        help="Realtime speed multiplier (overrides simulation.speed)")
    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> Dict:
    sim: Dict = {}
    if args.days is not None:
        sim['n_days'] = args.days
    if args.seed is not None:
        sim['seed'] = args.seed
    if args.capacity is not None:
        sim['max_capacity'] = args.capacity
    if args.initial_normal is not None:
        sim['initial_normal'] = args.initial_normal
    if args.speed is not None:
        sim['speed'] = args.speed
    overrides: Dict = {}
    if sim:
        overrides['simulation'] = sim
    if args.output is not None:
        overrides['output'] = {'directory': args.output}
    if args.no_plots:
        deep_merge(overrides, {'output': {'save_plots': False}})
    return overrides


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    overrides = build_overrides(args)
    if args.config is not None:
        return load_config(args.config, args.scenario, sweep_overrides=overrides)
    base_path = PROJECT_ROOT / 'configs' / 'base.yaml'
    if base_path.exists():
        return load_config(base_path, args.scenario, sweep_overrides=overrides)
    return config_from_dict(deep_merge(default_config().to_dict(), overrides))


# ═══════════════════════════════════════════════════════════════════════
# RUN MODES
# ═══════════════════════════════════════════════════════════════════════

def run_realtime(config: SimulationConfig) -> Simulation:
    """Paced run with a console status line every history interval."""
    sim = Simulation(config)
    last_phase: List[Optional[Phase]] = [None]

    def on_step(result: StepResult) -> None:
        st = result.state
        if st.phase != last_phase[0]:
            info = PHASE_INFO[st.phase]
            print(f"\n== {info['name']} (day {st.day}) ==\n   {info['description']}")
            last_phase[0] = st.phase
        if st.day % config.simulation.history_interval == 0:
            print(f"day {st.day:5d} | total {st.total:5d} | "
                  f"N {st.normal:5d} B {st.beautiful:5d} A {st.aggressive:5d} | "
                  f"birth rate {st.birth_rate_percent:3d}% | "
                  f"density {st.density_percent:5.1f}% | "
                  f"births {st.daily_births} deaths {st.daily_deaths}")

    def on_extinct(result: StepResult) -> None:
        print(f"\nAll individuals are gone (day {result.state.day}). "
              f"The experiment is over.")

    driver = PacedDriver(
        sim,
        speed=config.simulation.speed,
        base_interval_ms=config.simulation.step_interval_ms,
        on_step=on_step,
        on_extinct=on_extinct,
    )
    try:
        driver.run(max_days=config.simulation.n_days)
    except KeyboardInterrupt:
        driver.stop()
        print("\nInterrupted.")
    return sim


def write_outputs(config: SimulationConfig, sim_state, history, result=None) -> None:
    out_dir = Path(config.output.directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    if config.output.save_history:
        payload = {
            'config': config.to_dict(),
            'final_state': sim_state.to_dict(),
            'history': [r.to_dict() for r in history],
        }
        if result is not None:
            payload['summary'] = result.summary()
            payload['phases'] = phase_summary(result)
        with open(out_dir / 'history.json', 'w') as f:
            json.dump(payload, f, indent=2)
        print(f"History written to {out_dir / 'history.json'}")

    if config.output.save_plots and history:
        from behavioral_sink.viz import (
            plot_birth_rate,
            plot_composition,
            plot_environment,
            plot_population_trajectory,
        )
        plot_population_trajectory(
            history, max_capacity=config.simulation.max_capacity,
            phases=config.phases, save_path=str(out_dir / 'population.png'))
        plot_birth_rate(history, phases=config.phases,
                        save_path=str(out_dir / 'birth_rate.png'))
        if result is not None and result.n_days > 0:
            plot_composition(result, save_path=str(out_dir / 'composition.png'))
        plot_environment(sim_state, save_path=str(out_dir / 'environment.png'))
        print(f"Plots written to {out_dir}/")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = resolve_config(args)
    s = config.simulation
    print(f"Behavioral sink: capacity {s.max_capacity}, founders "
          f"{s.initial_normal}/{s.initial_beautiful}/{s.initial_aggressive}, "
          f"{s.n_days} days, seed {s.seed}")

    if args.realtime:
        sim = run_realtime(config)
        final = sim.get_state()
        write_outputs(config, final, final.history)
        return 0

    t0 = time.perf_counter()
    result = run_simulation(
        config,
        progress_callback=lambda day, n: (
            print(f"  day {day}/{n}") if day % 100 == 0 else None
        ),
    )
    elapsed = time.perf_counter() - t0

    print(f"\nRan {result.n_days} days in {elapsed:.2f}s")
    print(f"Peak population {result.peak_pop} on day {result.peak_day}; "
          f"final {result.final_pop}")
    if result.extinct:
        print(f"Extinct on day {result.extinction_day}")
    for name, row in phase_summary(result).items():
        print(f"  Phase {name}: days {row['first_day']}-{row['last_day']}, "
              f"births {row['births']}, deaths {row['deaths']}, "
              f"end total {row['end_total']}, "
              f"mean density {row['mean_density'] * 100:.1f}%")

    write_outputs(config, result.final_state, result.history, result)
    return 0


if __name__ == '__main__':
    sys.exit(main())
