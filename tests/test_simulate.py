import argparse
import pathlib
import sys

import numpy as np
import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import simulate
from rps_lattice.lattice import Lattice, State
from rps_lattice.lattice_io import read_lattice


def test_positive_int():
    assert simulate.positive_int('3') == 3
    with pytest.raises(argparse.ArgumentTypeError):
        simulate.positive_int('0')
    with pytest.raises(argparse.ArgumentTypeError):
        simulate.positive_int('abc')


def test_format_table():
    text = simulate.format_table('Results', [('Absorbing-State', 1)])
    lines = text.splitlines()
    assert lines[0] == 'Results...'
    assert lines[1].startswith('Absorbing-State: ')
    assert lines[1].endswith('1')
    assert len(lines[1]) == simulate.COLUMN_WIDTH + 1


def test_run_simulation_measures_every_n_sweeps():
    rng = np.random.default_rng(0)
    lat = Lattice.random(rng, 5, 5, 0.5, 0.5)
    completed, history = simulate.run_simulation(lat, rng, 25, measure_every=10)
    assert completed == 25
    assert [s for s, _ in history] == [0, 10, 20]
    for _, fracs in history:
        assert sum(fracs.values()) == pytest.approx(1.0)


def test_run_simulation_stops_on_absorbing():
    rng = np.random.default_rng(1)
    lat = Lattice(4, 4, 1.0, 1.0, State.RED)
    completed, _ = simulate.run_simulation(lat, rng, 50, stop_on_absorbing=True)
    assert completed == 1


def test_main_writes_outputs(tmp_path):
    out = tmp_path / 'run'
    lattice, history = simulate.main([
        '--rows', '6', '--cols', '5', '--p1', '0.9', '--p2', '0.1',
        '--sweeps', '12', '--measure_every', '5', '--seed', '3',
        '--output', str(out), '--animate',
    ])
    for name in ('Lattice.dat', 'Fractions.dat', 'Input.txt', 'Results.txt'):
        assert (out / name).is_file()
    rows = [line.split() for line in (out / 'Fractions.dat').read_text().splitlines()]
    assert [int(r[0]) for r in rows] == [0, 5, 10]
    assert all(len(r) == 4 for r in rows)
    saved = read_lattice(out / 'Lattice.dat')
    assert np.array_equal(saved.grid, lattice.grid)
    assert 'Seed: ' in (out / 'Input.txt').read_text()
    assert 'Sweeps-Completed: ' in (out / 'Results.txt').read_text()
    assert len(history) == 3


def test_main_is_reproducible_for_a_seed(tmp_path):
    args = ['--rows', '4', '--cols', '4', '--sweeps', '5', '--seed', '12']
    a, _ = simulate.main(args + ['--output', str(tmp_path / 'a')])
    b, _ = simulate.main(args + ['--output', str(tmp_path / 'b')])
    assert np.array_equal(a.grid, b.grid)


def test_main_resumes_from_lattice_file(tmp_path):
    init = tmp_path / 'init.dat'
    init.write_text("1 1 1\n1 1 1\n")
    lattice, _ = simulate.main([
        '--init_lattice', str(init), '--sweeps', '3', '--seed', '0',
        '--output', str(tmp_path / 'out'),
    ])
    assert (lattice.rows, lattice.cols) == (2, 3)
    assert lattice.count(State.RED) == 6


def test_main_missing_init_lattice(tmp_path):
    with pytest.raises(FileNotFoundError):
        simulate.main(['--init_lattice', str(tmp_path / 'nope.dat'),
                       '--output', str(tmp_path / 'out'), '--sweeps', '1'])


def test_absorbing_stop_records_final_sweep():
    rng = np.random.default_rng(2)
    lat = Lattice.from_array([[0, 1, 0, 1]], p1=1.0, p2=0.0)
    calls = []
    completed, history = simulate.run_simulation(
        lat, rng, 50, measure_every=1000, stop_on_absorbing=True,
        on_sweep=lambda s, last: calls.append((s, last)))
    assert completed < 50
    assert history[-1][0] == completed - 1
    assert history[-1][1][State.GREEN] == 1.0
    assert calls[-1] == (completed - 1, True)
    assert not any(last for _, last in calls[:-1])


def test_last_flag_on_full_run():
    rng = np.random.default_rng(0)
    calls = []
    simulate.run_simulation(Lattice.random(rng, 3, 3), rng, 4,
                            on_sweep=lambda s, last: calls.append(last))
    assert calls == [False, False, False, True]


def test_fractions_file_column_order(tmp_path):
    init = tmp_path / 'init.dat'
    init.write_text("1 1 0\n2 1 1\n")
    out = tmp_path / 'out'
    # p1 = p2 = 0 freezes the lattice
    simulate.main(['--init_lattice', str(init), '--p1', '0', '--p2', '0',
                   '--sweeps', '1', '--seed', '0', '--output', str(out)])
    row = (out / 'Fractions.dat').read_text().split()
    # sweep red green blue
    assert [float(v) for v in row] == pytest.approx([0, 4 / 6, 1 / 6, 1 / 6], abs=1e-5)
