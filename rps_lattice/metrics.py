"""
Read-only population measurements over a lattice: per-state counts and
fractions, absorbing-state detection.
"""
from .lattice import State


def state_counts(lattice):
    """Return {State: count} for all three states."""
    return {s: lattice.count(s) for s in State}


def state_fractions(lattice):
    """Return {State: fraction of cells}; values sum to 1."""
    return {s: lattice.fraction(s) for s in State}


def is_absorbing(lattice):
    """True once a single state occupies the whole lattice (no invasion can change it)."""
    return any(c == lattice.size for c in state_counts(lattice).values())


def dominant_state(lattice):
    """State with the most cells; ties go to the lowest code."""
    counts = state_counts(lattice)
    # max keeps the first maximum, State iterates in code order
    return max(State, key=lambda s: counts[s])
