"""sweep-hwe visualization library.

Modules:
  - style: Dark theme colours and helpers
  - sweep: Allele trajectory, chi-square history, genotype composition
"""

from sweep_hwe.viz.style import (  # noqa: F401
    DARK_BG,
    DARK_PANEL,
    GENOTYPE_COLORS,
    GRID_COLOR,
    TEXT_COLOR,
    dark_figure,
    legend_kwargs,
    save_figure,
    style_axes,
)

from sweep_hwe.viz.sweep import (  # noqa: F401
    plot_allele_trajectory,
    plot_chi_square_history,
    plot_genotype_composition,
)
