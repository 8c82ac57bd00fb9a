"""
Text I/O for lattices: rows of space separated state codes.
"""
import os
import numpy as np
from .lattice import Lattice


def write_lattice(lattice, out):
    """
    Write the lattice text to `out`, a path or an open text stream.
    Streams are rewound and truncated first so repeated writes keep only
    the latest frame.
    """
    text = lattice.to_text()
    if isinstance(out, (str, os.PathLike)):
        with open(out, 'w') as f:
            f.write(text)
        return
    out.seek(0)
    out.truncate()
    out.write(text)
    out.flush()


def read_lattice(path, p1=1.0, p2=1.0):
    """Load a lattice written by write_lattice."""
    rows = []
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                rows.append([int(tok) for tok in line.split()])
            except ValueError:
                raise ValueError(f"Non-integer state code in {path}: {line!r}") from None
    if not rows:
        raise ValueError(f"No lattice rows found in {path}")
    width = len(rows[0])
    if any(len(r) != width for r in rows):
        raise ValueError(f"Ragged lattice rows in {path}")
    return Lattice.from_array(np.array(rows, dtype=np.int64), p1=p1, p2=p2)
