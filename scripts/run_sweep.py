#!/usr/bin/env python3
"""Run one monitored sweep and report HWE deviation.

Usage:
    python3 scripts/run_sweep.py --config configs/default.yaml --seed 7
    python3 scripts/run_sweep.py --scenario configs/recessive.yaml --plots --quiet
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from sweep_hwe.config import load_config
from sweep_hwe.model import run_sweep_simulation
from sweep_hwe.report import format_summary


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--config', default=str(PROJECT_ROOT / 'configs' / 'default.yaml'),
                        help='Base configuration YAML')
    parser.add_argument('--scenario', default=None,
                        help='Scenario override YAML')
    parser.add_argument('--seed', type=int, default=None,
                        help='Override simulation.seed')
    parser.add_argument('--output', default=None,
                        help='Override output.directory')
    parser.add_argument('--plots', action='store_true',
                        help='Save trajectory, chi-square and genotype figures')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress per-generation reports')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    overrides = {}
    if args.seed is not None:
        overrides['simulation'] = {'seed': args.seed}
    if args.output is not None:
        overrides['output'] = {'directory': args.output}
    if args.plots:
        overrides.setdefault('output', {})['plots'] = True
    if args.quiet:
        overrides['monitor'] = {'verbose': False}

    config = load_config(args.config, args.scenario, overrides)

    t0 = time.perf_counter()
    result = run_sweep_simulation(config)
    elapsed = time.perf_counter() - t0

    outcome = result.outcome.name if result.outcome is not None else 'UNRESOLVED'
    print(f"\n{'=' * 60}")
    print(f" Sweep introduced at generation {result.introduction_generation}")
    print(f" Outcome: {outcome} at generation {result.final_generation}")
    print(f" Evaluated: {result.n_evaluated}  Skipped: {result.n_skipped}")
    if result.summary is not None:
        print(f" {format_summary(result.summary)}")
    print(f" Elapsed: {elapsed:.2f}s")
    print(f"{'=' * 60}")

    out_dir = Path(config.output.directory)
    seed = config.simulation.seed
    if config.output.save_result:
        path = out_dir / f'sweep_seed{seed}.npz'
        result.save(path)
        print(f"Result saved to {path}")

    if config.output.plots and result.n_evaluated > 0:
        from sweep_hwe.viz import (
            plot_allele_trajectory,
            plot_chi_square_history,
            plot_genotype_composition,
        )
        out_dir.mkdir(parents=True, exist_ok=True)
        plot_allele_trajectory(result, save_path=str(out_dir / f'trajectory_seed{seed}.png'))
        plot_chi_square_history(result, save_path=str(out_dir / f'chi_square_seed{seed}.png'))
        plot_genotype_composition(result, save_path=str(out_dir / f'genotypes_seed{seed}.png'))
        print(f"Figures saved to {out_dir}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
