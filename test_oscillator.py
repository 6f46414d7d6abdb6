import numpy as np
import pytest
from numpy.testing import assert_allclose
from oscillator import OscillatorParams, forced_oscillator, analytical_solution, build_system
from rungekutta import integrate

def test_default_params():
    p = OscillatorParams()
    assert (p.F0, p.m, p.om_n, p.zeta, p.om) == (1.0, 1.0, 1.0, 0.03, 0.4)
    assert_allclose(p.om_d, np.sqrt(1 - 0.03**2))

@pytest.mark.parametrize("kwargs", [dict(m=0.0), dict(om_n=-1.0), dict(zeta=1.0), dict(zeta=-0.1),
                                    dict(zeta=0.0, om=1.0), dict(zeta=0.0, om_n=2.0, om=-2.0)])
def test_invalid_params(kwargs):
    with pytest.raises(ValueError):
        OscillatorParams(**kwargs)

def test_rhs():
    p = OscillatorParams(F0=2.0, m=4.0, om_n=3.0, zeta=0.1, om=0.5)
    t = 1.2
    dy = forced_oscillator(t, np.array([0.3, -0.7]), p)
    expected = 0.5 * np.sin(0.5 * t) - 2 * 0.1 * 3.0 * (-0.7) - 9.0 * 0.3
    assert_allclose(dy, [-0.7, expected])

@pytest.mark.parametrize("y0", [(0.0, 0.0), (1.0, -0.5)])
def test_analytical_solution_satisfies_ode(y0):
    p = OscillatorParams()
    assert_allclose(analytical_solution(0.0, y0, p), y0[0], atol=1e-12)

    t = np.linspace(0.5, 20.0, 40)
    d = 1e-4
    x = analytical_solution(t, y0, p)
    xp = analytical_solution(t + d, y0, p)
    xm = analytical_solution(t - d, y0, p)
    v = (xp - xm) / (2 * d)
    a = (xp - 2 * x + xm) / d**2
    residual = a + 2 * p.zeta * p.om_n * v + p.om_n**2 * x - (p.F0 / p.m) * np.sin(p.om * t)
    assert np.max(np.abs(residual)) < 1e-5

    v0 = (analytical_solution(d, y0, p) - analytical_solution(-d, y0, p)) / (2 * d)
    assert_allclose(v0, y0[1], atol=1e-7)

def test_build_system():
    p = OscillatorParams()
    system = build_system(p, 0.0, 110.0, (0.0, 0.0))
    assert system.dimension == 2
    assert system.params is p
    assert (system.t0, system.t1) == (0.0, 110.0)

def test_undamped_off_resonance_is_accepted():
    p = OscillatorParams(zeta=0.0, om=0.5)
    assert np.all(np.isfinite(analytical_solution(np.linspace(0.0, 10.0, 11), (0.0, 0.0), p)))

def test_build_system_requires_zero_start():
    with pytest.raises(ValueError):
        build_system(OscillatorParams(), 5.0, 110.0, (0.0, 0.0))

def test_example_tracks_closed_form():
    p = OscillatorParams()
    system = build_system(p, 0.0, 110.0, (0.0, 0.0))
    traj = integrate(system, 4, 1.0)
    assert traj.num_steps == 111
    assert traj.times[-1] == 110.0
    x_a = analytical_solution(traj.times, system.initial_state, p)
    # one second steps against a unit natural frequency
    assert np.max(np.abs(traj.component(0) - x_a)) < 0.1

def test_example_tracks_closed_form_small_step():
    p = OscillatorParams()
    system = build_system(p, 0.0, 110.0, (0.0, 0.0))
    traj = integrate(system, 4, 0.1)
    assert traj.num_steps == 1101
    x_a = analytical_solution(traj.times, system.initial_state, p)
    assert np.max(np.abs(traj.component(0) - x_a)) < 1e-3
