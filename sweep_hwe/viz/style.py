"""Dark theme styling for sweep-hwe figures.

Shared colours and theme helpers so every plot has the same look.
"""

from pathlib import Path

import matplotlib.pyplot as plt

# ═══════════════════════════════════════════════════════════════════════
# COLOR PALETTE
# ═══════════════════════════════════════════════════════════════════════

DARK_BG = '#1a1a2e'
DARK_PANEL = '#16213e'
TEXT_COLOR = '#e0e0e0'
GRID_COLOR = '#2a2a4a'

DERIVED_COLOR = '#e94560'      # tracked allele / p
ANCESTRAL_COLOR = '#3498db'    # q
SIGNIFICANT_COLOR = '#f39c12'  # generations at or above the critical value

GENOTYPE_COLORS = {
    'AA': '#e94560',
    'Aa': '#f39c12',
    'aa': '#3498db',
}


# ═══════════════════════════════════════════════════════════════════════
# THEME HELPERS
# ═══════════════════════════════════════════════════════════════════════

def style_axes(ax):
    """Dark panel, light labels and a faint grid on one Axes."""
    ax.set_facecolor(DARK_PANEL)
    ax.tick_params(colors=TEXT_COLOR)
    for label in (ax.xaxis.label, ax.yaxis.label, ax.title):
        label.set_color(TEXT_COLOR)
    for spine in ax.spines.values():
        spine.set_color(GRID_COLOR)
    ax.grid(True, color=GRID_COLOR, alpha=0.3, linewidth=0.5)


def dark_figure(figsize=(10, 6)):
    """Single-panel (fig, ax) with the dark theme applied."""
    fig, ax = plt.subplots(figsize=figsize)
    fig.patch.set_facecolor(DARK_BG)
    style_axes(ax)
    return fig, ax


def legend_kwargs():
    """Legend styling matching the dark theme."""
    return dict(facecolor=DARK_PANEL, edgecolor=GRID_COLOR,
                labelcolor=TEXT_COLOR, fontsize=10)


def save_figure(fig, save_path, dpi=150):
    """Write a PNG (creating the directory) and close the figure."""
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(save_path, dpi=dpi, facecolor=DARK_BG,
                edgecolor='none', bbox_inches='tight')
    plt.close(fig)
