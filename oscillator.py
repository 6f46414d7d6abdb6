import numpy as np
from odesystem import OdeSystem

# Damped, forced harmonic oscillator (Curtis, Orbital Mechanics for
# Engineering Students, 3rd ed., example 1.18):
#   x'' + 2 zeta om_n x' + om_n^2 x = (F0 / m) sin(om t)

class OscillatorParams:
    def __init__(self, F0=1.0, m=1.0, om_n=1.0, zeta=0.03, om=0.4):
        if m <= 0:
            raise ValueError(f"mass must be positive, got {m}.")
        if om_n <= 0:
            raise ValueError(f"natural frequency must be positive, got {om_n}.")
        if not 0 <= zeta < 1:
            raise ValueError(f"damping ratio must be in [0, 1), got {zeta}.")
        if zeta == 0 and abs(om) == om_n:
            raise ValueError(f"undamped oscillator forced at resonance (om = {om}) has no bounded solution.")
        self.F0 = F0
        self.m = m
        self.om_n = om_n
        self.zeta = zeta
        self.om = om

    @property
    def om_d(self):
        """Damped natural frequency."""
        return self.om_n * np.sqrt(1 - self.zeta**2)

    def __repr__(self):
        return (f"OscillatorParams(F0={self.F0}, m={self.m}, om_n={self.om_n}, "
                f"zeta={self.zeta}, om={self.om})")

def forced_oscillator(t, y, p):
    """Right-hand side for the state y = (x, x')."""
    return np.array([
        y[1],
        (p.F0 / p.m) * np.sin(p.om * t) - 2 * p.zeta * p.om_n * y[1] - p.om_n**2 * y[0]
    ])

def analytical_solution(t, y0, p):
    """
    Closed-form displacement x(t) of the underdamped oscillator.

    Args:
        t (float or np.array): Time(s); the initial state is taken at t = 0.
        y0 (array-like): Initial state (x0, x'0).
        p (OscillatorParams): Oscillator parameters.
    """
    t = np.asarray(t, dtype=np.float64)
    x0, v0 = float(y0[0]), float(y0[1])
    zeta, om_n, om = p.zeta, p.om_n, p.om
    om_d = p.om_d
    F0m = p.F0 / p.m

    # steady-state amplitude denominator
    den = (om_n**2 - om**2)**2 + (2 * om * om_n * zeta)**2
    A = (zeta * (om_n / om_d) * x0 + v0 / om_d
         + ((om**2 + (2 * zeta**2 - 1) * om_n**2) / den) * (om / om_d) * F0m)
    B = x0 + (2 * om * om_n * zeta / den) * F0m

    transient = np.exp(-zeta * om_n * t) * (A * np.sin(om_d * t) + B * np.cos(om_d * t))
    steady = (F0m / den) * ((om_n**2 - om**2) * np.sin(om * t) - 2 * om * om_n * zeta * np.cos(om * t))
    return transient + steady

def build_system(params, t0=0.0, t1=110.0, y0=(0.0, 0.0)):
    # the closed form and the forcing phase both start at t = 0
    if t0 != 0:
        raise ValueError(f"the oscillator starts at t0 = 0, got {t0}.")
    return OdeSystem(forced_oscillator, y0, t0, t1, params=params, dimension=2)
