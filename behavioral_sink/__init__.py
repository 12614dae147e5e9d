"""Behavioral-sink: closed-population density collapse simulation.

An aggregate-count model of a single enclosed population:
  - Three behavioral sub-types (normal, beautiful, aggressive)
  - Four day-range phases (A adaptation, B growth, C stagnation, D decline)
  - Density-dependent births, stress-driven mortality, behavioral conversion
  - Periodic history snapshots for charts and batch analysis

The engine is UI-free; presentation (plots, paced stepping) consumes
immutable snapshots.
"""

__version__ = "0.1.0"
