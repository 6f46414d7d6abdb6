import os
import numpy as np
import matplotlib.pyplot as plt
from scipy.integrate import solve_ivp
from odesystem import Trajectory

def print_matrix(name, mat):
    print(f"\n{name}: shape={mat.shape}")
    with np.printoptions(precision=4, suppress=True):
        print(mat)

def print_trajectory(name, trajectory, rows=5):
    """Print the first `rows` samples as columns t, y_0, ..., y_{d-1}."""
    table = np.column_stack((trajectory.times, trajectory.states))
    print_matrix(name, table[:rows])

def _ensure_parent(path):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

def write_trajectory(path, trajectory, analytical=None):
    """
    Write one row per sample: t, the state components and, if given, the
    analytical values, all with %f formatting.
    """
    columns = [trajectory.times, trajectory.states]
    if analytical is not None:
        analytical = np.asarray(analytical, dtype=np.float64)
        if analytical.shape[0] != trajectory.num_steps:
            raise ValueError(
                f"analytical has {analytical.shape[0]} rows, expected {trajectory.num_steps}."
            )
        columns.append(analytical)
    table = np.column_stack(columns)
    _ensure_parent(path)
    np.savetxt(path, table, fmt="%f")
    return path

def read_trajectory(path, dimension):
    """Read a file written by write_trajectory. Returns (trajectory, analytical or None)."""
    table = np.loadtxt(path, ndmin=2)
    if table.shape[1] < 1 + dimension:
        raise ValueError(f"{path} has {table.shape[1]} columns, expected at least {1 + dimension}.")
    trajectory = Trajectory(table[:, 0].copy(), np.ascontiguousarray(table[:, 1:1 + dimension]))
    analytical = None
    if table.shape[1] > 1 + dimension:
        analytical = table[:, 1 + dimension:]
        if analytical.shape[1] == 1:
            analytical = analytical[:, 0]
    return trajectory, analytical

def max_error(numerical, exact):
    return float(np.max(np.abs(np.asarray(numerical) - np.asarray(exact))))

def observed_orders(step_sizes, errors):
    """log(e_k / e_{k+1}) / log(h_k / h_{k+1}) for successive step sizes."""
    h = np.asarray(step_sizes, dtype=np.float64)
    e = np.asarray(errors, dtype=np.float64)
    return np.log(e[:-1] / e[1:]) / np.log(h[:-1] / h[1:])

def reference_solution(system, times, rtol=1e-12, atol=1e-12):
    """
    High-accuracy solution of `system` at `times` using scipy's DOP853.

    Returns an array of shape (len(times), dimension).
    """
    times = np.asarray(times, dtype=np.float64)
    if times.size == 0:
        return np.empty((0, system.dimension), dtype=np.float64)
    if times.size == 1 or times[-1] == system.t0:
        return np.tile(system.initial_state, (times.size, 1))
    sol = solve_ivp(system.evaluate, [system.t0, times[-1]], system.initial_state,
                    method="DOP853", t_eval=times, rtol=rtol, atol=atol)
    if not sol.success:
        raise RuntimeError(f"reference solver failed: {sol.message}")
    return np.ascontiguousarray(sol.y.T)

def plot_trajectory(trajectory, analytical=None, path="ex_01_18b.png", title=None):
    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111)

    t = trajectory.times
    ax.plot(t, trajectory.component(0), "o", color="red", markersize=3, label="x(t)")
    if trajectory.dimension > 1:
        ax.plot(t, trajectory.component(1), "o", color="blue", markersize=3, label="v(t)")
    if analytical is not None:
        ax.plot(t, analytical, "-", color="black", label="x_a(t)")

    ax.set_xlabel("Time t [s]")
    ax.set_ylabel("x(t) [m], v(t) [m/s], x_a(t) [m]")
    ax.set_title(title if title is not None else "Simple Harmonic Oscillator using RK4")
    ax.grid(True, ls="--", alpha=0.5)
    ax.legend()

    _ensure_parent(path)
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved {path}")
    return path

def plot_convergence(step_sizes, errors, path="rk_convergence.png"):
    """errors maps each RK order to its list of errors, one per step size."""
    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111)

    for rk in sorted(errors):
        ax.loglog(step_sizes, errors[rk], marker='o', label=f"RK{rk}")

    ax.invert_xaxis()
    ax.set_xlabel("Time step size h")
    ax.set_ylabel("Max error")
    ax.set_title("Runge--Kutta Convergence")
    ax.grid(True, which="both", ls="--", alpha=0.5)
    ax.legend()

    _ensure_parent(path)
    fig.savefig(path, dpi=300, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved {path}")
    return path
