#!/usr/bin/env python3
"""
Run a cyclic-dominance (rock-paper-scissors) simulation on a periodic lattice.
Writes Lattice.dat, Fractions.dat, Input.txt and Results.txt into the output directory.
"""
import os
import time
import argparse
import numpy as np
from rps_lattice.lattice import Lattice, State
from rps_lattice.lattice_io import write_lattice, read_lattice
from rps_lattice.metrics import state_fractions, is_absorbing, dominant_state

COLUMN_WIDTH = 30

# Fractions.dat layout: sweep red green blue
FRACTION_COLUMNS = (State.RED, State.GREEN, State.BLUE)


def positive_int(x):
    try:
        v = int(x)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {x!r}")
    if v < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {v}")
    return v


def get_timestamp():
    return time.strftime('%Y-%m-%d_%H-%M-%S')


def format_table(title, rows):
    """Two-column text table: left aligned labels, values after a fixed width."""
    lines = [f"{title}..."]
    for label, value in rows:
        lines.append(f"{label + ': ':<{COLUMN_WIDTH}}{value}")
    return '\n'.join(lines) + '\n'


def sweep(lattice, rng):
    """One sweep: as many single-cell updates as there are cells."""
    for _ in range(lattice.size):
        lattice.update(rng)


def run_simulation(lattice, rng, sweeps, measure_every=10, on_measure=None, on_sweep=None,
                   stop_on_absorbing=False):
    """
    Evolve `lattice` for `sweeps` sweeps.
    Fractions are recorded after every sweep whose index is a multiple of
    `measure_every` (0, 10, 20, ... by default) and after the sweep an
    absorbing stop ends on.
    on_sweep(sweep, last) is called after every sweep; `last` is True for
    the final one.
    Returns (sweeps_completed, history) where history is a list of
    (sweep, {State: fraction}).
    """
    history = []
    completed = 0
    for s in range(sweeps):
        sweep(lattice, rng)
        completed = s + 1
        stopping = stop_on_absorbing and is_absorbing(lattice)
        if s % measure_every == 0 or stopping:
            fracs = state_fractions(lattice)
            history.append((s, fracs))
            if on_measure is not None:
                on_measure(s, fracs)
        if on_sweep is not None:
            on_sweep(s, stopping or completed == sweeps)
        if stopping:
            break
    return completed, history


def main(argv=None):
    p = argparse.ArgumentParser(description='Cyclic-dominance lattice simulation')
    p.add_argument('--rows', type=positive_int, default=50, help='number of rows in the lattice')
    p.add_argument('--cols', type=positive_int, default=50, help='number of columns in the lattice')
    p.add_argument('--p1', type=float, default=1.0, help='forward invasion probability')
    p.add_argument('--p2', type=float, default=1.0, help='reverse invasion probability')
    p.add_argument('--sweeps', type=positive_int, default=10000, help='number of sweeps')
    p.add_argument('--measure_every', type=positive_int, default=10,
                   help='write state fractions every N sweeps')
    p.add_argument('--output', type=str, default=None,
                   help='output directory (defaults to a time stamp)')
    p.add_argument('--seed', type=int, default=None, help='random seed (defaults to the clock)')
    p.add_argument('--animate', action='store_true',
                   help='rewrite Lattice.dat after every sweep')
    p.add_argument('--init_lattice', type=str, default=None,
                   help='start from a saved lattice file instead of a random fill')
    p.add_argument('--stop_on_absorbing', action='store_true',
                   help='stop once only one state remains')
    p.add_argument('--print_every', type=positive_int, default=100, help='print progress every N sweeps')
    args = p.parse_args(argv)

    start = time.perf_counter()
    seed = args.seed if args.seed is not None else time.time_ns() % (2 ** 32)
    rng = np.random.default_rng(seed)
    out_dir = args.output or get_timestamp()
    os.makedirs(out_dir, exist_ok=True)

    if args.init_lattice:
        if not os.path.isfile(args.init_lattice):
            raise FileNotFoundError(f"Initial lattice '{args.init_lattice}' not found.")
        lattice = read_lattice(args.init_lattice, p1=args.p1, p2=args.p2)
    else:
        lattice = Lattice.random(rng, args.rows, args.cols, args.p1, args.p2)

    inputs = format_table('Input-Parameters', [
        ('Rows', lattice.rows),
        ('Columns', lattice.cols),
        ('p_1', lattice.p1),
        ('p_2', lattice.p2),
        ('Sweeps', args.sweeps),
        ('Seed', seed),
        ('Output-Directory', out_dir),
    ])
    print(inputs)
    with open(os.path.join(out_dir, 'Input.txt'), 'w') as f:
        f.write(inputs)

    with open(os.path.join(out_dir, 'Lattice.dat'), 'w') as lattice_out, \
            open(os.path.join(out_dir, 'Fractions.dat'), 'w') as fractions_out:
        write_lattice(lattice, lattice_out)

        def on_measure(s, fracs):
            fractions_out.write(f"{s} " + ' '.join(f"{fracs[st]:.6g}" for st in FRACTION_COLUMNS) + '\n')

        def on_sweep(s, last):
            if args.animate:
                write_lattice(lattice, lattice_out)
            if (s + 1) % args.print_every == 0 or last:
                print(f"\rSweep {s + 1}/{args.sweeps}", end='', flush=True)

        completed, history = run_simulation(
            lattice, rng, args.sweeps,
            measure_every=args.measure_every,
            on_measure=on_measure,
            on_sweep=on_sweep,
            stop_on_absorbing=args.stop_on_absorbing,
        )
        print()
        write_lattice(lattice, lattice_out)

    final = state_fractions(lattice)
    results = format_table('Results', [
        ('Absorbing-State', int(is_absorbing(lattice))),
        ('Dominant-State', dominant_state(lattice).name),
        ('Sweeps-Completed', completed),
    ] + [(f'Fraction-{s.name}', f"{final[s]:.6g}") for s in State])
    print(results)
    with open(os.path.join(out_dir, 'Results.txt'), 'w') as f:
        f.write(results)

    print(f"{'Time taken to execute (s): ':<{COLUMN_WIDTH}}{time.perf_counter() - start:.3f}")
    return lattice, history


if __name__ == '__main__':
    main()
