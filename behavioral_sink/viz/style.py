"""Shared look for the behavioral-sink charts.

Every plot in viz.population is a single dark panel: sub-types keep the
same colours across charts, and phases A-D are tinted in the background
so the collapse can be read against the day ranges.
"""

import matplotlib.pyplot as plt

# ═══════════════════════════════════════════════════════════════════════
# COLOR PALETTE
# ═══════════════════════════════════════════════════════════════════════

DARK_BG = '#1a1a2e'
DARK_PANEL = '#16213e'
TEXT_COLOR = '#e0e0e0'
GRID_COLOR = '#2a2a4a'

TOTAL_COLOR = '#667eea'
BIRTH_RATE_COLOR = '#FF9800'

SUBTYPE_COLORS = {
    'normal':     '#4CAF50',
    'beautiful':  '#2196F3',
    'aggressive': '#F44336',
}

PHASE_COLORS = {
    'A': '#48c9b0',
    'B': '#2ecc71',
    'C': '#f39c12',
    'D': '#e94560',
}


# ═══════════════════════════════════════════════════════════════════════
# THEME HELPERS
# ═══════════════════════════════════════════════════════════════════════

def apply_dark_theme(fig, ax):
    """Dark background, light text and a faint grid for one chart panel."""
    fig.patch.set_facecolor(DARK_BG)
    ax.set_facecolor(DARK_PANEL)
    ax.tick_params(colors=TEXT_COLOR)
    for text in (ax.xaxis.label, ax.yaxis.label, ax.title):
        text.set_color(TEXT_COLOR)
    for spine in ax.spines.values():
        spine.set_color(GRID_COLOR)
    ax.grid(True, color=GRID_COLOR, alpha=0.3, linewidth=0.5)


def dark_figure(figsize=(10, 6)):
    """New single-panel chart with the theme applied. Returns (fig, ax)."""
    fig, ax = plt.subplots(figsize=figsize)
    apply_dark_theme(fig, ax)
    return fig, ax


def legend(ax, **kwargs):
    """Legend in theme colors."""
    return ax.legend(facecolor=DARK_PANEL, edgecolor=GRID_COLOR,
                     labelcolor=TEXT_COLOR, **kwargs)


def shade_phases(ax, phase_ends, x_max):
    """Tint the background of each phase's day range.

    Args:
        phase_ends: (a_end, b_end, c_end) inclusive day breakpoints.
        x_max: Right edge of the plot in days.
    """
    bounds = [0, *phase_ends, max(x_max, phase_ends[-1])]
    for name, lo, hi in zip('ABCD', bounds[:-1], bounds[1:]):
        if lo >= x_max:
            break
        ax.axvspan(lo, min(hi, x_max), color=PHASE_COLORS[name], alpha=0.06,
                   linewidth=0)
        ax.text((lo + min(hi, x_max)) / 2, 1.0, name,
                transform=ax.get_xaxis_transform(), ha='center', va='bottom',
                color=PHASE_COLORS[name], fontsize=9, fontweight='bold')


def save_figure(fig, save_path, dpi=150):
    """Save a figure with tight layout and dark background."""
    fig.tight_layout()
    fig.savefig(save_path, dpi=dpi, facecolor=fig.get_facecolor(),
                edgecolor='none', bbox_inches='tight')
    plt.close(fig)
