"""
Implements the discrete 1D wave field and its explicit time step.

The field holds N samples of vertical displacement and their time derivative
on the normalized interval [0, 1] and integrates

    y_tt = c(x)^2 * y_xx - damping * y_t

with a central second difference in space and a semi-implicit Euler update
in time (velocity first, then position with the new velocity). The left end
can be driven by a pulse or an oscillator; both ends follow the configured
end type.

The scheme is explicit and only stable when max(c) * dt / dx stays below
roughly one. This is not enforced: non-positive or very large speeds simply
produce diverging or NaN values.
"""

import math
import numpy as np
from typing import Optional, Protocol, Union

import simulation_constants as constants

ArrayOrFloat = Union[float, np.ndarray]


class VelocityField(Protocol):
    """Anything that can report the local wave propagation speed."""

    def speed_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        """Propagation speed at normalized position(s) x in [0, 1]."""
        ...


class ConstantVelocityField:
    """Uniform propagation speed, the default of a new WaveField."""

    def __init__(self, speed: float = constants.DEFAULT_WAVE_SPEED):
        self.speed = speed

    def speed_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        return np.full(np.shape(x), self.speed, dtype=float)


class WaveField:
    """
    Discrete state (position + velocity per grid point) of a 1D wave.

    Parameters
    ----------
    point_count : int
        Number of samples along [0, 1]. Fixed for the lifetime of the field.
    velocity_field : VelocityField, optional
        Source of the local propagation speed. Defaults to a constant speed of 1.
    oscillator_time : float
        Initial value of the driving clock. Use constants.PULSE_IDLE_TIME for
        a pulse-driven field that should stay quiet until pulse() is called.

    Defaults: no damping, infinite ends, no input, pulse cutoff of pi,
    oscillator frequency 1 and amplitude 0.4.
    """

    def __init__(
        self,
        point_count: int,
        velocity_field: Optional[VelocityField] = None,
        oscillator_time: float = 0.0
    ):
        if point_count < constants.MIN_POINT_COUNT:
            raise ValueError(
                f"A wave field needs at least {constants.MIN_POINT_COUNT} points, got {point_count}."
            )

        self.point_count = int(point_count)
        self.position = np.zeros(self.point_count)
        self.velocity = np.zeros(self.point_count)

        # These simulation parameters can be freely changed on a live field.
        self.damping = constants.DEFAULT_DAMPING
        self._end_type = constants.DEFAULT_END_TYPE
        self._input_type = constants.DEFAULT_INPUT_TYPE
        self.pulse_cutoff = constants.DEFAULT_PULSE_CUTOFF
        self.oscillator_frequency = constants.DEFAULT_OSCILLATOR_FREQUENCY
        self.oscillator_amplitude = constants.DEFAULT_OSCILLATOR_AMPLITUDE
        self.oscillator_time = oscillator_time

        self.velocity_field = velocity_field if velocity_field is not None else ConstantVelocityField()

        # Sample positions do not change, so the interior slice is kept around.
        self.x_grid = np.arange(self.point_count) * self.dx
        self._x_interior = self.x_grid[1:-1]

    #--- Policies ---#

    @property
    def end_type(self) -> str:
        return self._end_type

    @end_type.setter
    def end_type(self, value: str) -> None:
        if value not in constants.END_TYPES:
            raise ValueError(f"Unknown end type: {value}")
        self._end_type = value

    @property
    def input_type(self) -> str:
        return self._input_type

    @input_type.setter
    def input_type(self, value: str) -> None:
        if value not in constants.INPUT_TYPES:
            raise ValueError(f"Unknown input type: {value}")
        self._input_type = value

    #--- Derived quantities ---#

    @property
    def dx(self) -> float:
        return 1.0 / self.point_count

    @property
    def phase_angle(self) -> float:
        """Current driving phase 2*pi*f*t."""
        return 2.0 * math.pi * self.oscillator_time * self.oscillator_frequency

    @property
    def pulse_window(self) -> float:
        """
        Duration of one pulse, i.e. the time at which the phase reaches the cutoff.

        A zero frequency gives an infinite window: the pulse never re-arms.
        """
        with np.errstate(divide='ignore', invalid='ignore'):
            window = np.float64(self.pulse_cutoff) / (2.0 * math.pi * np.float64(self.oscillator_frequency))
        return float(window)

    @property
    def is_pulse_active(self) -> bool:
        return self._input_type == constants.INPUT_PULSE and self.phase_angle < self.pulse_cutoff

    #--- Time stepping ---#

    def step(self, dt: float) -> None:
        """
        Advance the field by one timestep dt, in place.

        Order of operations:
        1. Advance the oscillator clock and compute the phase angle.
        2. Drive the left end according to the input type.
        3. Update interior velocities from the second difference and damping.
        4. Override end velocities according to the end type.
        5. Integrate all positions with the new velocities.
        6. Apply the end type position constraint.
        """
        y = self.position
        vy = self.velocity
        dx = self.dx
        last = self.point_count - 1

        self.oscillator_time += dt
        angle = self.phase_angle

        # Apply input to the left end.
        if self._input_type == constants.INPUT_OSCILLATOR:
            y[0] = math.sin(angle) * self.oscillator_amplitude
        elif self._input_type == constants.INPUT_PULSE:
            # Past the cutoff the left end is simply left alone.
            if angle < self.pulse_cutoff:
                y[0] = math.sin(angle) * self.oscillator_amplitude
        elif self._input_type == constants.INPUT_NONE:
            y[0] = 0.0
            vy[0] = 0.0

        # Interior points only; the ends are handled by the end type.
        c = np.asarray(self.velocity_field.speed_at(self._x_interior), dtype=float)
        d2y_dx2 = (y[2:] - 2.0 * y[1:-1] + y[:-2]) / (dx * dx)
        vy[1:-1] += ((c * c) * d2y_dx2 - self.damping * vy[1:-1]) * dt

        # Apply constraints to the end velocities.
        if self._end_type == constants.END_FIXED:
            vy[last] = 0.0
        elif self._end_type == constants.END_INFINITE:
            c_left = float(self.velocity_field.speed_at(constants.X_MIN))
            c_right = float(self.velocity_field.speed_at(constants.X_MAX))
            vy[0] = c_left * ((y[1] - y[0]) / dx)
            vy[last] = -c_right * ((y[last] - y[last - 1]) / dx)

        y += vy * dt

        if self._end_type == constants.END_FIXED:
            y[last] = 0.0
        elif self._end_type == constants.END_FREE:
            y[last] = y[last - 1]

    def pulse(self) -> None:
        """
        Apply a pulse at the left end of the wave.

        The driving clock is only restarted once the previous pulse window has
        elapsed, so repeated requests while a pulse is playing do nothing.
        """
        self.input_type = constants.INPUT_PULSE

        if self.oscillator_time > self.pulse_window:
            self.oscillator_time = 0.0

    def reset(self) -> None:
        """Bring the wave back to rest. Policies and the oscillator clock are kept."""
        self.position[:] = 0.0
        self.velocity[:] = 0.0

    def snapshot(self) -> np.ndarray:
        """Copy of the current positions, for consumers that keep frames around."""
        return self.position.copy()
