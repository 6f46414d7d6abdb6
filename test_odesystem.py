import numpy as np
import pytest
from numpy.testing import assert_array_equal
from odesystem import OdeSystem, Trajectory

def decay(t, y):
    return -y

def test_dimension_is_inferred():
    system = OdeSystem(decay, [1.0, 2.0, 3.0], 0.0, 1.0)
    assert system.dimension == 3
    assert system.span == 1.0
    assert system.params is None
    assert system.rhs is decay

def test_initial_state_is_a_read_only_copy():
    y0 = [1.0, 2.0]
    system = OdeSystem(decay, y0, 0.0, 1.0)
    y0[0] = 5.0
    assert_array_equal(system.initial_state, [1.0, 2.0])
    assert system.initial_state.dtype == np.float64
    with pytest.raises(ValueError):
        system.initial_state[0] = 3.0

def test_attributes_cannot_be_reassigned():
    system = OdeSystem(decay, [1.0], 0.0, 1.0)
    with pytest.raises(AttributeError):
        system.t1 = 2.0

@pytest.mark.parametrize("kwargs", [
    dict(rhs=decay, initial_state=[1.0, 2.0], t0=0.0, t1=1.0, dimension=3),
    dict(rhs=decay, initial_state=[1.0], t0=0.0, t1=1.0, dimension=-1),
    dict(rhs=decay, initial_state=[1.0], t0=0.0, t1=float("inf")),
    dict(rhs=decay, initial_state=[1.0], t0=float("nan"), t1=1.0),
    dict(rhs=decay, initial_state=[1.0], t0=2.0, t1=1.0),
    dict(rhs="decay", initial_state=[1.0], t0=0.0, t1=1.0),
])
def test_invalid_descriptor(kwargs):
    with pytest.raises(ValueError):
        OdeSystem(**kwargs)

def test_equal_times_are_allowed():
    system = OdeSystem(decay, [1.0], 3.0, 3.0)
    assert system.span == 0.0

def test_evaluate_without_params():
    system = OdeSystem(lambda t, y: [t, y[0]], [2.0, 0.0], 0.0, 1.0)
    dy = system.evaluate(0.5, system.initial_state)
    assert dy.dtype == np.float64
    assert_array_equal(dy, [0.5, 2.0])

def test_evaluate_with_params():
    class Params:
        k = 3.0

    p = Params()
    system = OdeSystem(lambda t, y, p: -p.k * y, [1.0], 0.0, 1.0, params=p)
    assert system.params is p
    assert_array_equal(system.evaluate(0.0, system.initial_state), [-3.0])

def test_evaluate_checks_length():
    system = OdeSystem(lambda t, y: [1.0, 2.0, 3.0], [1.0, 2.0], 0.0, 1.0)
    with pytest.raises(ValueError, match="3 components"):
        system.evaluate(0.0, system.initial_state)

def test_trajectory_layout():
    times = np.array([0.0, 0.5, 1.0])
    states = np.arange(6, dtype=np.float64).reshape(3, 2)
    traj = Trajectory(times, states)
    assert len(traj) == 3
    assert traj.num_steps == 3
    assert traj.dimension == 2
    # row i, column j lives at flat[i * dimension + j]
    assert traj.flat[2 * 2 + 1] == states[2, 1]
    assert_array_equal(traj.component(1), [1.0, 3.0, 5.0])
    assert_array_equal(traj.final_state, [4.0, 5.0])
    assert repr(traj) == "Trajectory(num_steps=3, dimension=2)"

def test_trajectory_shape_mismatch():
    with pytest.raises(ValueError):
        Trajectory(np.zeros(3), np.zeros((2, 2)))
    with pytest.raises(ValueError):
        Trajectory(np.zeros(3), np.zeros(3))
    with pytest.raises(ValueError):
        Trajectory(np.zeros((3, 1)), np.zeros((3, 2)))
