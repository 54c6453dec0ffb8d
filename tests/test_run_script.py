"""End-to-end test of scripts/run_sweep.py."""

import importlib.util
from pathlib import Path

import pytest
import yaml

from sweep_hwe.model import SweepSimResult

PROJECT_ROOT = Path(__file__).parent.parent
SCRIPT = PROJECT_ROOT / 'scripts' / 'run_sweep.py'


@pytest.fixture(scope="module")
def run_sweep():
    spec = importlib.util.spec_from_file_location("run_sweep", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def scenario(tmp_path):
    path = tmp_path / "small.yaml"
    with open(path, 'w') as f:
        yaml.dump({
            'population': {'size': 60},
            'sweep': {'start_generation': 5, 'selection_coefficient': 0.5},
        }, f)
    return path


def test_quiet_run_saves_result(run_sweep, scenario, tmp_path, capsys):
    out_dir = tmp_path / "out"
    code = run_sweep.main([
        '--scenario', str(scenario), '--seed', '9',
        '--output', str(out_dir), '--quiet',
    ])
    assert code == 0

    path = out_dir / 'sweep_seed9.npz'
    assert path.exists()
    result = SweepSimResult.load(path)
    assert result.introduction_generation == 5
    assert result.resolved

    stdout = capsys.readouterr().out
    assert "Outcome:" in stdout
    assert "── Generation" not in stdout


def test_plots_written(run_sweep, scenario, tmp_path):
    out_dir = tmp_path / "figs"
    run_sweep.main([
        '--scenario', str(scenario), '--seed', '1',
        '--output', str(out_dir), '--quiet', '--plots',
    ])
    result = SweepSimResult.load(out_dir / 'sweep_seed1.npz')
    assert result.n_evaluated > 0
    pngs = sorted(p.name for p in out_dir.glob('*.png'))
    assert pngs == ['chi_square_seed1.png', 'genotypes_seed1.png',
                    'trajectory_seed1.png']


def test_verbose_run_prints_reports(run_sweep, scenario, tmp_path, capsys):
    run_sweep.main([
        '--scenario', str(scenario), '--seed', '3',
        '--output', str(tmp_path),
    ])
    stdout = capsys.readouterr().out
    assert "── Generation 5 " in stdout
