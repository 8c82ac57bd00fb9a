"""
Cyclic-dominance (rock-paper-scissors) lattice simulation.
"""
from .lattice import State, Lattice, NEIGHBOUR_OFFSETS, transition_probability
