"""
Centripetal force demo: a point mass under a constant-magnitude central force.

The whole trajectory is precomputed with explicit Euler every time a quantity
changes, then replayed one state per rendered frame.
"""

import copy
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import simulation_constants as constants
from scenarios import ParameterRange


@dataclass
class ParticleState:
    """State of the particle at one instant of the trajectory."""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    mass: float = 0.0
    force: float = 0.0  # Magnitude of the centripetal force.

    @property
    def speed(self) -> float:
        return math.sqrt(self.vx * self.vx + self.vy * self.vy)

    @property
    def radius(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)


def simulate_particle(particle: ParticleState, dt: float) -> None:
    """
    Advance the particle by dt with first-order Euler, in place.

    The force always points to the origin. A particle sitting exactly at the
    origin gets NaN force components, which then propagate silently.
    """
    r = math.sqrt(particle.x * particle.x + particle.y * particle.y)
    if r == 0.0:
        fx = fy = math.nan
    else:
        fx = -particle.force * particle.x / r
        fy = -particle.force * particle.y / r

    particle.vx += fx / particle.mass * dt
    particle.vy += fy / particle.mass * dt

    particle.x += particle.vx * dt
    particle.y += particle.vy * dt


class OrbitScenario:
    """
    Holds the orbit quantities, the precomputed trajectory and the playback cursor.

    Quantities are set in physical units (force in N, speed in m/s,
    radius in m, mass in kg).
    """

    name = 'orbit'
    title = 'Centripetal force'
    renderer = 'orbit'
    aspect_ratio = 1.0

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self.parameters: Dict[str, ParameterRange] = {
            'force': ParameterRange('force', 0.0, 10.0, 0.0, variable="F", unit="N"),
            'speed': ParameterRange('speed', 0.0, 5.0, 1.0, variable="v", unit="m/s"),
            'radius': ParameterRange('radius', 0.5, 5.0, 1.0, variable="r", unit="m"),
            'mass': ParameterRange('mass', 0.5, 5.0, 1.0, variable="m", unit="kg"),
        }
        self.simulation_dt: float = 1.0 / constants.ORBIT_PLAYBACK_FPS

        for key, value in (settings or {}).items():
            if value is None:
                continue
            if key == 'simulation_dt':
                self.simulation_dt = float(value)
            elif key in self.parameters:
                self.parameters[key].value = float(value)
            else:
                print(f"Warning: Unknown setting '{key}' for scenario '{self.name}'. Ignoring it.")

        self.trajectory: List[ParticleState] = []
        self.index_within_trajectory: int = 0
        self.restart_timer: float = 0.0
        self.hold: bool = False  # Playback frozen while the user drags a control.

        self.recalculate_trajectory()

    def value(self, name: str) -> float:
        return self.parameters[name].value

    def set_quantity(self, name: str, value: float) -> None:
        """Set a quantity in physical units and rebuild the trajectory."""
        if name not in self.parameters:
            raise KeyError(f"Scenario '{self.name}' has no parameter '{name}'.")
        self.parameters[name].value = value
        self.recalculate_trajectory()

    def set_parameter(self, name: str, t: float) -> None:
        """Normalized [0, 1] variant of set_quantity."""
        if name not in self.parameters:
            raise KeyError(f"Scenario '{self.name}' has no parameter '{name}'.")
        self.parameters[name].set_normalized(t)
        self.recalculate_trajectory()

    def recalculate_trajectory(self) -> None:
        """Simulate a new trajectory from the current quantities."""
        particle = ParticleState(
            x=-self.value('radius'),
            y=0.0,
            vx=0.0,
            vy=self.value('speed'),
            mass=self.value('mass'),
            force=self.value('force'),
        )

        self.trajectory.clear()

        # Exactly window / dt states at most; the time loop is not float-accumulated.
        max_states = int(round(constants.ORBIT_RECORD_WINDOW / constants.ORBIT_RECORD_DT))
        completed_one_turn = False
        for _ in range(max_states):
            self.trajectory.append(copy.copy(particle))

            completed_one_turn = completed_one_turn or (particle.vy < 0 and particle.vx < 0)
            if completed_one_turn and particle.vx > 0 and particle.vy > 0:
                break

            # Gone off the screen.
            if abs(particle.y) > constants.ORBIT_ESCAPE_DISTANCE or abs(particle.x) > constants.ORBIT_ESCAPE_DISTANCE:
                break

            simulate_particle(particle, constants.ORBIT_INTEGRATION_DT)

        self.index_within_trajectory = 0

    def initial_state(self) -> ParticleState:
        assert len(self.trajectory) != 0, "Trajectory buffer is empty."
        return self.trajectory[0]

    def current_state(self) -> Optional[ParticleState]:
        """State under the playback cursor, or None between loops."""
        if self.index_within_trajectory < len(self.trajectory):
            return self.trajectory[self.index_within_trajectory]
        return None

    def playback_alpha(self) -> float:
        """Opacity of the replayed particle; fades along the trajectory."""
        return 0.75 * (1 - self.index_within_trajectory / len(self.trajectory)) ** 1.5

    def advance_playback(self) -> None:
        """Move the playback cursor by one frame, restarting after a short delay."""
        if self.hold:
            return

        if self.index_within_trajectory < len(self.trajectory):
            self.index_within_trajectory += 1
        else:
            self.restart_timer += 1.0 / constants.ORBIT_PLAYBACK_FPS
            if self.restart_timer > constants.ORBIT_RESTART_DELAY:
                self.restart_timer = 0.0
                self.index_within_trajectory = 0

    def simulate(self) -> None:
        self.advance_playback()
