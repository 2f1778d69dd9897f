import math

import pytest

import simulation_constants as constants
from orbit import OrbitScenario, ParticleState, simulate_particle


def test_particle_moves_straight_without_force():
    particle = ParticleState(x=-1.0, vy=2.0, mass=1.0, force=0.0)
    simulate_particle(particle, 0.5)
    assert particle.x == -1.0
    assert particle.y == pytest.approx(1.0)


def test_force_points_to_origin():
    particle = ParticleState(x=2.0, mass=2.0, force=4.0)
    simulate_particle(particle, 0.1)
    # a = F / m = 2 towards -x
    assert particle.vx == pytest.approx(-0.2)
    assert particle.vy == 0.0
    assert particle.x == pytest.approx(2.0 - 0.02)


def test_particle_at_origin_goes_nan():
    particle = ParticleState(mass=1.0, force=1.0)
    simulate_particle(particle, 0.05)
    assert math.isnan(particle.x)
    assert math.isnan(particle.vy)


def test_state_speed_and_radius():
    state = ParticleState(x=3.0, y=4.0, vx=-6.0, vy=8.0)
    assert state.radius == pytest.approx(5.0)
    assert state.speed == pytest.approx(10.0)


def test_initial_state_from_quantities():
    orbit = OrbitScenario()
    initial = orbit.initial_state()
    assert (initial.x, initial.y) == (-1.0, 0.0)
    assert (initial.vx, initial.vy) == (0.0, 1.0)
    assert initial.mass == 1.0
    assert initial.force == 0.0


def test_without_force_the_particle_escapes():
    orbit = OrbitScenario()
    trajectory = orbit.trajectory
    assert 1 < len(trajectory) < 1000
    assert all(state.x == -1.0 for state in trajectory)
    assert abs(trajectory[-1].y) > constants.ORBIT_ESCAPE_DISTANCE


def test_circular_orbit_stops_after_one_turn():
    # F = m v^2 / r
    orbit = OrbitScenario({'force': 1.0, 'speed': 1.0, 'radius': 1.0, 'mass': 1.0})
    trajectory = orbit.trajectory
    assert len(trajectory) < 1000
    assert any(state.vx < 0 and state.vy < 0 for state in trajectory)
    assert trajectory[-1].vx > 0 and trajectory[-1].vy > 0
    assert max(state.radius for state in trajectory) < 2.0


def test_trajectory_is_capped():
    # Zero speed and zero force: the particle never moves.
    orbit = OrbitScenario({'speed': 0.0})
    assert len(orbit.trajectory) == round(constants.ORBIT_RECORD_WINDOW / constants.ORBIT_RECORD_DT) == 1000


def test_states_are_independent_copies():
    orbit = OrbitScenario({'force': 1.0})
    assert orbit.trajectory[0] is not orbit.trajectory[1]
    assert orbit.trajectory[0].y != orbit.trajectory[1].y


def test_set_quantity_rebuilds_trajectory():
    orbit = OrbitScenario()
    orbit.index_within_trajectory = 5
    orbit.set_quantity('radius', 2.0)
    assert orbit.initial_state().x == -2.0
    assert orbit.index_within_trajectory == 0

    orbit.set_parameter('speed', 1.0)
    assert orbit.initial_state().vy == pytest.approx(5.0)


def test_unknown_quantity():
    orbit = OrbitScenario()
    with pytest.raises(KeyError):
        orbit.set_quantity('charge', 1.0)
    with pytest.raises(KeyError):
        orbit.set_parameter('charge', 0.5)


def test_empty_trajectory_is_a_logic_error():
    orbit = OrbitScenario()
    orbit.trajectory.clear()
    with pytest.raises(AssertionError):
        orbit.initial_state()


def test_playback_advances_and_fades():
    orbit = OrbitScenario()
    assert orbit.playback_alpha() == pytest.approx(0.75)
    orbit.simulate()
    assert orbit.index_within_trajectory == 1
    assert orbit.current_state() is orbit.trajectory[1]
    assert orbit.playback_alpha() < 0.75


def test_hold_freezes_playback():
    orbit = OrbitScenario()
    orbit.hold = True
    orbit.simulate()
    assert orbit.index_within_trajectory == 0


def test_playback_restarts_after_delay():
    orbit = OrbitScenario()
    end = len(orbit.trajectory)
    orbit.index_within_trajectory = end
    assert orbit.current_state() is None

    for _ in range(29):
        orbit.advance_playback()
    assert orbit.index_within_trajectory == end

    for _ in range(2):
        if orbit.index_within_trajectory == end:
            orbit.advance_playback()
    assert orbit.index_within_trajectory == 0
    assert orbit.restart_timer == 0.0
