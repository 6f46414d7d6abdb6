import numpy as np

class OdeSystem:
    """
    Description of a first-order ODE system dy/dt = f(t, y).

    The descriptor is immutable once built: the initial state is stored as a
    read-only copy and the attributes are exposed through properties only.

    Args:
        rhs (callable): Right-hand side. Called as rhs(t, y) when params is
                        None, otherwise as rhs(t, y, params).
        initial_state (array-like): State at t0, `dimension` floats.
        t0 (float): Initial time.
        t1 (float): Final time, t1 >= t0.
        params (object): Opaque block passed unmodified to rhs.
        dimension (int): Number of state components. Inferred from the
                         initial state if omitted.
    """

    def __init__(self, rhs, initial_state, t0, t1, params=None, dimension=None):
        if not callable(rhs):
            raise ValueError("rhs must be callable.")

        y0 = np.array(initial_state, dtype=np.float64).reshape(-1)
        if dimension is None:
            dimension = y0.size
        dimension = int(dimension)
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}.")
        if y0.size != dimension:
            raise ValueError(
                f"initial_state has {y0.size} components, expected {dimension}."
            )

        t0 = float(t0)
        t1 = float(t1)
        if not (np.isfinite(t0) and np.isfinite(t1)):
            raise ValueError("t0 and t1 must be finite.")
        if t1 < t0:
            raise ValueError(f"t1 ({t1}) must not be smaller than t0 ({t0}).")

        y0.setflags(write=False)
        self._rhs = rhs
        self._params = params
        self._dimension = dimension
        self._t0 = t0
        self._t1 = t1
        self._y0 = y0

    @property
    def rhs(self):
        return self._rhs

    @property
    def params(self):
        return self._params

    @property
    def dimension(self):
        return self._dimension

    @property
    def t0(self):
        return self._t0

    @property
    def t1(self):
        return self._t1

    @property
    def initial_state(self):
        return self._y0

    @property
    def span(self):
        return self._t1 - self._t0

    def evaluate(self, t, y):
        """Return f(t, y) as a float64 array of length `dimension`."""
        if self._params is None:
            dy = self._rhs(t, y)
        else:
            dy = self._rhs(t, y, self._params)
        dy = np.asarray(dy, dtype=np.float64).reshape(-1)
        if dy.size != self._dimension:
            raise ValueError(
                f"rhs returned {dy.size} components, expected {self._dimension}."
            )
        return dy

    def __repr__(self):
        return (f"OdeSystem(dimension={self._dimension}, t0={self._t0}, "
                f"t1={self._t1}, initial_state={self._y0.tolist()})")


class Trajectory:
    """
    Sampled solution of one integration run.

    times has shape (num_steps,), states has shape (num_steps, dimension) in
    row-major order, so row i holds the state at times[i].
    """

    def __init__(self, times, states):
        times = np.asarray(times)
        states = np.asarray(states)
        if times.ndim != 1:
            raise ValueError("times must be one-dimensional.")
        if states.ndim != 2 or states.shape[0] != times.shape[0]:
            raise ValueError(
                f"states must have shape ({times.shape[0]}, dimension), got {states.shape}."
            )
        self.times = times
        self.states = states

    @property
    def num_steps(self):
        return self.times.shape[0]

    @property
    def dimension(self):
        return self.states.shape[1]

    @property
    def flat(self):
        """Row-major view: flat[i*dimension + j] is component j at step i."""
        return self.states.reshape(-1)

    @property
    def final_state(self):
        return self.states[-1]

    def component(self, j):
        return self.states[:, j]

    def __len__(self):
        return self.num_steps

    def __repr__(self):
        return f"Trajectory(num_steps={self.num_steps}, dimension={self.dimension})"
