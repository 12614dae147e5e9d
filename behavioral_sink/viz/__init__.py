"""Behavioral-sink visualization library.

Modules:
  - style: Dark theme colours and helpers
  - population: Trajectory, birth rate, composition and enclosure plots
"""

from behavioral_sink.viz.style import (  # noqa: F401
    BIRTH_RATE_COLOR,
    DARK_BG,
    DARK_PANEL,
    GRID_COLOR,
    PHASE_COLORS,
    SUBTYPE_COLORS,
    TEXT_COLOR,
    TOTAL_COLOR,
    apply_dark_theme,
    dark_figure,
    save_figure,
)

from behavioral_sink.viz.population import (  # noqa: F401
    plot_birth_rate,
    plot_composition,
    plot_environment,
    plot_population_trajectory,
)
