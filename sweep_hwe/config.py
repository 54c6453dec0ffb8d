"""Configuration system for sweep-hwe.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → scenario override → explicit overrides

Population size, sweep start, selection and mutation parameters are fixed
setup data for a run; the monitor itself only reads the critical value and
its verbosity from here.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from sweep_hwe.types import CHI2_CRITICAL_DF1


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationSection:
    """Run control."""
    seed: int = 42
    max_generations: int = 100000   # Ceiling; guards a sweep that never resolves


@dataclass
class PopulationSection:
    """Host population."""
    size: int = 500                 # Diploid individuals N (constant)


@dataclass
class SweepSection:
    """The tracked allele and the selection acting on it."""
    mutation_type: int = 2              # Type id of the tracked allele
    start_generation: int = 1           # Generation the allele is introduced
    selection_coefficient: float = 0.1  # s; AA fitness 1 + s
    dominance: float = 0.5              # h; Aa fitness 1 + h·s
    mutation_rate: float = 0.0          # Recurrent mutation per genome copy per generation


@dataclass
class MonitorSection:
    """HWE monitor."""
    critical_value: float = CHI2_CRITICAL_DF1   # alpha = 0.05, df = 1
    verbose: bool = True                        # Per-generation text reports


@dataclass
class OutputSection:
    """Output control."""
    directory: str = "results/"
    save_result: bool = True
    plots: bool = False


@dataclass
class SweepConfig:
    """Complete run configuration.

    Load from YAML via `load_config()`. Sections map 1:1 to YAML top-level keys.
    """
    simulation: SimulationSection = field(default_factory=SimulationSection)
    population: PopulationSection = field(default_factory=PopulationSection)
    sweep: SweepSection = field(default_factory=SweepSection)
    monitor: MonitorSection = field(default_factory=MonitorSection)
    output: OutputSection = field(default_factory=OutputSection)


_SECTION_MAP = {
    'simulation': SimulationSection,
    'population': PopulationSection,
    'sweep': SweepSection,
    'monitor': MonitorSection,
    'output': OutputSection,
}


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values are replaced
    - Keys in override but not base are added

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> SweepConfig:
    """Convert a merged YAML dict to a SweepConfig."""
    sections = {}
    for key, cls in _SECTION_MAP.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()
    return SweepConfig(**sections)


def config_to_dict(config: SweepConfig) -> Dict:
    """Plain nested dict of a config (for YAML dumps and result metadata)."""
    return dataclasses.asdict(config)


def validate_config(config: SweepConfig) -> None:
    """Validate configuration constraints. Raises ValueError on failure."""
    sim = config.simulation
    if sim.seed < 0:
        raise ValueError("simulation.seed must be non-negative")
    if sim.max_generations < 1:
        raise ValueError(
            f"simulation.max_generations must be >= 1, got {sim.max_generations}"
        )

    if config.population.size < 1:
        raise ValueError(
            f"population.size must be >= 1, got {config.population.size}"
        )

    sw = config.sweep
    if sw.mutation_type < 1:
        raise ValueError(
            f"sweep.mutation_type must be >= 1, got {sw.mutation_type}"
        )
    if not (1 <= sw.start_generation < sim.max_generations):
        raise ValueError(
            f"sweep.start_generation ({sw.start_generation}) must be in "
            f"[1, max_generations={sim.max_generations})"
        )
    if sw.selection_coefficient <= -1.0:
        raise ValueError(
            f"sweep.selection_coefficient must be > -1, "
            f"got {sw.selection_coefficient}"
        )
    if 1.0 + sw.dominance * sw.selection_coefficient < 0.0:
        raise ValueError(
            f"heterozygote fitness 1 + h*s is negative "
            f"(h={sw.dominance}, s={sw.selection_coefficient})"
        )
    if not (0.0 <= sw.mutation_rate <= 1.0):
        raise ValueError(
            f"sweep.mutation_rate must be in [0, 1], got {sw.mutation_rate}"
        )

    if config.monitor.critical_value <= 0:
        raise ValueError(
            f"monitor.critical_value must be positive, "
            f"got {config.monitor.critical_value}"
        )


def load_config(
    base_path: Union[str, Path],
    scenario_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict] = None,
) -> SweepConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → scenario → overrides.
    Each layer overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        scenario_path: Optional scenario override YAML.
        overrides: Optional dict of overrides (e.g. from the command line).

    Returns:
        Validated SweepConfig.

    Raises:
        FileNotFoundError: If base_path or scenario_path doesn't exist.
        ValueError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    with open(base_path) as f:
        config_dict = yaml.safe_load(f) or {}

    if scenario_path is not None:
        scenario_path = Path(scenario_path)
        if not scenario_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {scenario_path}")
        with open(scenario_path) as f:
            scenario = yaml.safe_load(f) or {}
        deep_merge(config_dict, scenario)

    if overrides is not None:
        deep_merge(config_dict, overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> SweepConfig:
    """Return a SweepConfig with all default values."""
    config = SweepConfig()
    validate_config(config)
    return config
