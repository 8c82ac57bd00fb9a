#!/usr/bin/env python3
"""
Sweep the reverse invasion probability p2, run simulate.py for each value,
and append the final state fractions to a CSV for comparison.
"""
import argparse
import subprocess
import csv
import os
import sys

repo_root = os.path.abspath(os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

CSV_HEADER = [
    'rows', 'cols', 'p1', 'p2', 'sweeps', 'seed',
    'frac_green', 'frac_red', 'frac_blue',
    'absorbing', 'dominant', 'sweeps_completed'
]


def parse_args(argv=None):
    parser = argparse.ArgumentParser("Sweep p2 and log final state fractions")
    parser.add_argument('--p2_values', type=float, nargs='+', default=[0.0, 0.25, 0.5, 0.75, 1.0])
    parser.add_argument('--rows', type=int, default=50)
    parser.add_argument('--cols', type=int, default=50)
    parser.add_argument('--p1', type=float, default=1.0)
    parser.add_argument('--sweeps', type=int, default=1000)
    parser.add_argument('--seed', type=int, default=0)
    parser.add_argument('--out_root', type=str, default='./sweep_p2_runs')
    parser.add_argument('--output_csv', type=str, default='sweep_p2.csv')
    return parser.parse_args(argv)


def read_results(out_dir):
    """Parse Results.txt into {label: value string}."""
    results = {}
    with open(os.path.join(out_dir, 'Results.txt')) as f:
        for line in f:
            if ':' not in line:
                continue
            key, val = line.split(':', 1)
            results[key.strip()] = val.strip()
    return results


def summary_row(args, p2, out_dir):
    """CSV row for one finished run, taken from its Results.txt (state of the final lattice)."""
    res = read_results(out_dir)
    return [
        args.rows, args.cols, args.p1, p2, args.sweeps, args.seed,
        float(res['Fraction-GREEN']), float(res['Fraction-RED']), float(res['Fraction-BLUE']),
        res.get('Absorbing-State'), res.get('Dominant-State'), res.get('Sweeps-Completed')
    ]


def run_one(p2, args):
    out_dir = os.path.join(args.out_root, f'p2_{p2:g}')
    cmd = [
        sys.executable, os.path.join(repo_root, 'simulate.py'),
        '--rows', str(args.rows),
        '--cols', str(args.cols),
        '--p1', str(args.p1),
        '--p2', str(p2),
        '--sweeps', str(args.sweeps),
        '--seed', str(args.seed),
        '--output', out_dir,
    ]
    proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True)
    print(proc.stdout, end='')
    if proc.returncode != 0:
        raise RuntimeError(f"simulate.py failed for p2={p2} (exit code {proc.returncode})")
    return out_dir


if __name__ == '__main__':
    args = parse_args()
    os.makedirs(args.out_root, exist_ok=True)
    write_header = not os.path.isfile(args.output_csv)
    with open(args.output_csv, 'a', newline='') as f:
        writer = csv.writer(f)
        if write_header:
            writer.writerow(CSV_HEADER)
        for p2 in args.p2_values:
            out_dir = run_one(p2, args)
            writer.writerow(summary_row(args, p2, out_dir))
    print(f"Sweep complete. Results written to {args.output_csv}")
