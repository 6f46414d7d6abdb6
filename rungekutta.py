import math
import numbers
import numpy as np
from odesystem import OdeSystem, Trajectory

# (t1 - t0) / h is rounded up to the next integer when it is within this many
# units of roundoff of it
STEP_COUNT_ULPS = 64

# define rk schemes
def rk_scheme(rk, variant=None):
    """
    Return the Butcher tableau (A, b, c) of an explicit Runge-Kutta method.

    Args:
        rk (int): Order of the method, 1 to 4.
        variant (str): Only for rk == 2, "midpoint" (default) or "heun".
    """
    if rk == 4: # Classical explicit RK4 (order 4)
        if variant is not None:
            raise ValueError(f"RK4 has no variant '{variant}'.")
        A = [
            [0, 0, 0, 0],
            [1/2, 0, 0, 0],
            [0, 1/2, 0, 0],
            [0, 0, 1, 0]
        ]
        b = [1/6, 1/3, 1/3, 1/6]
        c = [0, 1/2, 1/2, 1]
    elif rk == 3:  # Kutta's explicit RK3 (order 3)
        if variant is not None:
            raise ValueError(f"RK3 has no variant '{variant}'.")
        A = [
            [0,   0, 0],
            [1/2, 0, 0],
            [-1,  2, 0]
        ]
        b = [1/6, 2/3, 1/6]
        c = [0, 1/2, 1]
    elif rk == 2:
        if variant is None or variant == "midpoint":  # explicit midpoint
            A = [
                [0, 0],
                [1/2, 0]
            ]
            b = [0, 1]
            c = [0, 1/2]
        elif variant == "heun":  # Heun (explicit trapezoidal)
            A = [
                [0, 0],
                [1, 0]
            ]
            b = [1/2, 1/2]
            c = [0, 1]
        else:
            raise ValueError(f"Unknown RK2 variant '{variant}'.")
    elif rk == 1: # Euler
        if variant is not None:
            raise ValueError(f"Euler has no variant '{variant}'.")
        A = [[0]]
        b = [1]
        c = [0]
    else:
        raise ValueError(f"RK order must be 1, 2, 3 or 4, got {rk}.")
    return A, b, c

class RungeKuttaMethod:
    """
    A general-purpose explicit Runge-Kutta stepper.

    This class is initialized with a Butcher tableau (A, b, c) and can
    perform time steps for any first-order ODE system dy/dt = F(t, y).
    The tableau is read-only, so one instance can be shared between
    threads.

    Only EXPLICIT tableaux can be stepped.
    """

    def __init__(self, A, b, c, order=None, name=None):
        """
        Initializes the stepper with a given Butcher tableau.

        Args:
            A (list or np.array): The A matrix (s x s) of the tableau.
            b (list or np.array): The b vector (s,) of weights.
            c (list or np.array): The c vector (s,) of nodes.
            order (int): Nominal order of the method, informational.
            name (str): Display name.
        """
        self.A = np.array(A, dtype=np.float64)
        self.b = np.array(b, dtype=np.float64)
        self.c = np.array(c, dtype=np.float64)

        # --- Property: self.stage ---
        num_stages = len(self.b)
        if (num_stages == 0 or self.b.ndim != 1 or
                self.A.shape != (num_stages, num_stages) or
                self.c.shape != (num_stages,)):
            raise ValueError("Inconsistent dimensions for A, b, and c.")

        self.stage = num_stages
        self.order = order
        self.name = name if name is not None else f"RK{order if order else num_stages}"

        for arr in (self.A, self.b, self.c):
            arr.setflags(write=False)

        # --- Property: self.method_type ---
        self.method_type = self._classify_method()
        if self.method_type != "explicit":
            raise ValueError(f"{self.method_type} methods are not implemented.")

    def _classify_method(self):
        """
        Classifies the 'A' matrix as 'explicit', 'dirk', or 'implicit'.

        - explicit: Strictly lower-triangular (zeros on and above diagonal).
        - dirk: Lower-triangular (zeros strictly above diagonal).
        - implicit: Contains non-zero entries above the diagonal.
        """
        if np.allclose(np.triu(self.A), 0):
            return "explicit"
        if np.allclose(np.triu(self.A, k=1), 0):
            return "dirk"
        return "implicit"

    def step(self, F, y0, h, t):
        """
        Performs a single time step of the Runge-Kutta method.

        Stage solution:   Y_j = y_0 + h * sum_{l<j}(a_jl * K_l)
        Stage derivative: K_j = F(t + c_j h, Y_j)
        Final solution:   y_1 = y_0 + h * sum_j(b_j * K_j)

        Args:
            F (callable): The right-hand side F(t, y). It receives a
                          read-only numpy array and returns the derivative.
            y0 (np.array): The solution at the current time (t_n).
            h (float): The step size.
            t (float): The current time t_n.

        Returns:
            np.array: The solution at t_n + h.
        """
        y0 = np.asarray(y0, dtype=np.float64)
        K_stages = np.zeros((self.stage, *y0.shape), dtype=np.float64)

        for j in range(self.stage):
            # sum_term = sum_{l=0}^{j-1} A[j,l] * K_stages[l]
            sum_term = np.zeros_like(y0)
            for l in range(j):
                sum_term += self.A[j, l] * K_stages[l]

            Y_j = np.add(y0, h * sum_term, out=np.empty_like(y0))
            Y_j.setflags(write=False)
            K_stages[j] = F(t + h * self.c[j], Y_j)

        final_sum_term = np.zeros_like(y0)
        for j in range(self.stage):
            final_sum_term += self.b[j] * K_stages[j]

        return y0 + h * final_sum_term

    def __repr__(self):
        return f"RungeKuttaMethod(name={self.name!r}, stage={self.stage})"


def _build_schemes():
    schemes = {}
    names = {1: "Euler", 2: "Midpoint", 3: "RK3", 4: "RK4"}
    for rk in (1, 2, 3, 4):
        A, b, c = rk_scheme(rk)
        schemes[rk] = RungeKuttaMethod(A, b, c, order=rk, name=names[rk])
    return schemes

# built-in methods keyed by order
SCHEMES = _build_schemes()
HEUN = RungeKuttaMethod(*rk_scheme(2, variant="heun"), order=2, name="Heun")

def get_method(order, variant=None):
    """Resolve an order (and optional RK2 variant) to a stepper."""
    if (isinstance(order, bool) or not isinstance(order, numbers.Integral)
            or order not in SCHEMES):
        raise ValueError(f"RK order must be 1, 2, 3 or 4, got {order}.")
    if variant is None:
        return SCHEMES[order]
    if order == 2 and variant == "heun":
        return HEUN
    if order == 2 and variant == "midpoint":
        return SCHEMES[2]
    raise ValueError(f"Unknown variant '{variant}' for order {order}.")

def num_steps(t0, t1, h):
    """
    Number of samples of a fixed-step run on [t0, t1], both ends included.

    floor((t1 - t0) / h) + 1, where a ratio within STEP_COUNT_ULPS units of
    roundoff of the next integer counts as that integer.
    """
    if not np.isfinite(h) or h <= 0:
        raise ValueError(f"step size must be positive, got {h}.")
    if t1 < t0:
        raise ValueError(f"t1 ({t1}) must not be smaller than t0 ({t0}).")
    ratio = (t1 - t0) / h
    n = math.floor(ratio)
    tol = STEP_COUNT_ULPS * np.finfo(np.float64).eps * max(1.0, ratio)
    if ratio - n >= 1.0 - tol:
        n += 1
    return int(n) + 1

def _check_buffer(name, buf, shape):
    if not isinstance(buf, np.ndarray):
        raise ValueError(f"{name} must be a numpy array.")
    if buf.dtype != np.float64:
        raise ValueError(f"{name} must have dtype float64, got {buf.dtype}.")
    if buf.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {buf.shape}.")
    if not buf.flags.c_contiguous or not buf.flags.writeable:
        raise ValueError(f"{name} must be a writeable C-contiguous array.")

def _allocate(shape):
    try:
        return np.empty(shape, dtype=np.float64)
    except (ValueError, OverflowError) as e:
        raise MemoryError(f"cannot allocate trajectory buffer of shape {shape}: {e}") from e

def integrate(system, order, h, times=None, states=None, variant=None):
    """
    Integrate `system` from t0 to t1 with a fixed step h.

    Args:
        system (OdeSystem): The ODE system descriptor.
        order (int): RK order, 1 to 4.
        h (float): Step size, > 0.
        times (np.array): Optional caller buffer of shape (num_steps,).
        states (np.array): Optional caller buffer of shape (num_steps, dimension).
        variant (str): RK2 variant, "midpoint" or "heun".

    Returns:
        Trajectory: times[i] = t0 + i*h and the state at each of them.
    """
    if not isinstance(system, OdeSystem):
        raise ValueError("system must be an OdeSystem.")
    method = get_method(order, variant)
    h = float(h)
    n = num_steps(system.t0, system.t1, h)
    dim = system.dimension
    t0 = system.t0
    if n > 1 and t0 + h == t0:
        raise ValueError(f"step size {h} is too small to advance from t0 = {t0}.")

    if times is None:
        times = _allocate((n,))
    else:
        _check_buffer("times", times, (n,))
    if states is None:
        states = _allocate((n, dim))
    else:
        _check_buffer("states", states, (n, dim))

    times[:] = t0 + h * np.arange(n, dtype=np.float64)
    if n > 1 and not np.all(times[1:] > times[:-1]):
        raise ValueError(f"step size {h} is too small to resolve the time grid on [{t0}, {system.t1}].")
    states[0] = system.initial_state

    F = system.evaluate
    for i in range(n - 1):
        states[i + 1] = method.step(F, states[i], h, times[i])

    return Trajectory(times, states)

# alias
gnc_rk1to4 = integrate
