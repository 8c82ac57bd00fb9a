"""
Toroidal lattice of three cyclically dominating states, evolved by
single-cell Monte Carlo invasion updates.
"""
from enum import IntEnum
import numpy as np


class State(IntEnum):
    """The three states. GREEN invades RED, RED invades BLUE, BLUE invades GREEN (forward, p1)."""
    GREEN = 0
    RED = 1
    BLUE = 2


N_STATES = len(State)

# (d_row, d_col) for neighbour draws 0..3: right, down, left, up
NEIGHBOUR_OFFSETS = ((0, 1), (1, 0), (0, -1), (-1, 0))


def transition_probability(a, b, p1, p2):
    """Probability that a cell in state `a` invades a neighbour in state `b`."""
    step = (int(b) - int(a)) % N_STATES
    if step == 1:
        return p1
    if step == 2:
        return p2
    return 0.0


class Lattice:
    """
    rows x cols grid of States with periodic boundaries.

    Preconditions (not checked): rows >= 1 and cols >= 1. p1 and p2 are
    used as given, values outside [0, 1] are not rejected.
    """

    def __init__(self, rows=50, cols=50, p1=1.0, p2=1.0, state=State.GREEN):
        self._grid = np.full((rows, cols), int(state), dtype=np.int8)
        self.p1 = p1
        self.p2 = p2

    @classmethod
    def random(cls, rng, rows=50, cols=50, p1=1.0, p2=1.0):
        """Lattice with every cell drawn uniformly from the three states."""
        lattice = cls(rows, cols, p1, p2)
        lattice.randomize(rng)
        return lattice

    @classmethod
    def from_array(cls, grid, p1=1.0, p2=1.0):
        """Build a lattice from a 2D array of state codes."""
        arr = np.asarray(grid)
        if arr.ndim != 2:
            raise ValueError("Expected 2D array of state codes")
        if arr.size == 0:
            raise ValueError("Lattice must have at least one cell")
        if not np.isin(arr, [s.value for s in State]).all():
            raise ValueError(f"State codes must be in 0..{N_STATES - 1}")
        lattice = cls(arr.shape[0], arr.shape[1], p1, p2)
        lattice._grid[...] = arr
        return lattice

    def randomize(self, rng):
        """Redraw every cell uniformly from the three states, in place."""
        self._grid[...] = rng.integers(0, N_STATES, size=self._grid.shape)

    # dimensions are fixed at construction
    @property
    def rows(self):
        return self._grid.shape[0]

    @property
    def cols(self):
        return self._grid.shape[1]

    @property
    def size(self):
        return self.rows * self.cols

    @property
    def grid(self):
        """Read-only view of the state codes."""
        view = self._grid.view()
        view.flags.writeable = False
        return view

    def get_rows(self):
        return self.rows

    def get_cols(self):
        return self.cols

    def get_size(self):
        return self.size

    def get_p1(self):
        return self.p1

    def get_p2(self):
        return self.p2

    def set_p1(self, prob):
        self.p1 = prob

    def set_p2(self, prob):
        self.p2 = prob

    def wrap(self, row, col):
        """Map any (row, col) onto the physical cell under periodic boundaries."""
        return row % self.rows, col % self.cols

    def __getitem__(self, index):
        row, col = self.wrap(*index)
        return State(int(self._grid[row, col]))

    def __setitem__(self, index, state):
        row, col = self.wrap(*index)
        self._grid[row, col] = int(state)

    def neighbour(self, row, col, direction):
        """Periodic neighbour of (row, col) for a direction draw 0..3."""
        d_row, d_col = NEIGHBOUR_OFFSETS[direction]
        return self.wrap(row + d_row, col + d_col)

    def neighbours(self, row, col):
        """The 4 periodic neighbours of (row, col), in draw order."""
        return [self.neighbour(row, col, d) for d in range(len(NEIGHBOUR_OFFSETS))]

    def probability(self, a, b):
        return transition_probability(a, b, self.p1, self.p2)

    def update(self, rng):
        """
        One Monte Carlo step.

        Draws, in order: origin row, origin col, neighbour direction and
        an acceptance value in [0, 1). The neighbour takes the origin's
        state when the acceptance value is below the transition
        probability. Returns the origin's state, which is never modified.
        """
        row = int(rng.integers(0, self.rows))
        col = int(rng.integers(0, self.cols))
        target = self.neighbour(row, col, int(rng.integers(0, len(NEIGHBOUR_OFFSETS))))

        origin_state = self[row, col]
        prob = self.probability(origin_state, self[target])
        if rng.random() < prob:
            self[target] = origin_state
        return origin_state

    def count(self, state):
        return int(np.count_nonzero(self._grid == int(state)))

    def fraction(self, state):
        return self.count(state) / self.size

    def to_text(self):
        """Rows of space separated state codes, one line per row."""
        return ''.join(' '.join(str(v) for v in row) + '\n' for row in self._grid.tolist())

    def __str__(self):
        return self.to_text()

    def __repr__(self):
        return f"Lattice(rows={self.rows}, cols={self.cols}, p1={self.p1}, p2={self.p2})"
