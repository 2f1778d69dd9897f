"""
Analysis script for the discrete wave field.

This script runs the wave integrator without any window and measures:
1.  The drift of the discrete energy of a free, undamped string with pinned ends.
2.  How much of a single pulse is left in the domain after it had time to reach
    the right end, for each end type (reflection vs. absorption).
"""

import argparse
import math
import numpy as np
from typing import Callable, Dict, Optional, Tuple

import simulation_constants as constants
from wave_field import ConstantVelocityField, WaveField
from wave_utils import courant_number, discrete_energy

def run_field_steps(
    field: WaveField,
    dt: float,
    n_steps: int,
    callback: Optional[Callable[[WaveField, int], None]] = None
) -> WaveField:
    """
    Advance a field by n_steps fixed steps of size dt.

    Parameters
    ----------
    field : WaveField
        Field to advance in place.
    dt : float
        Timestep.
    n_steps : int
        Number of steps.
    callback : Callable[[WaveField, int], None], optional
        Called after every step with the field and the step index.

    Returns
    -------
    WaveField
        The same field, for chaining.
    """
    for step_idx in range(n_steps):
        field.step(dt)
        if callback is not None:
            callback(field, step_idx)
    return field

def gaussian_bump(field: WaveField, center: float, width: float, amplitude: float = 1.0) -> None:
    """Set the field at rest with a Gaussian displacement centered at `center`."""
    field.position[:] = amplitude * np.exp(-0.5 * ((field.x_grid - center) / width) ** 2)
    field.velocity[:] = 0.0

def measure_energy_drift(
    point_count: int = 100,
    dt: float = constants.WAVE_SIMULATION_DT,
    n_steps: int = 2000,
    end_type: str = constants.END_FIXED
) -> Tuple[float, float]:
    """
    Measure how well an undamped, undriven field conserves its discrete energy.

    The string starts at rest with a Gaussian bump in the middle; the left end
    is pinned by the 'none' input.

    Returns
    -------
    Tuple[float, float]
        - initial_energy (float): Energy before the first step.
        - relative_drift (float): max |E(t) - E(0)| / E(0) over the run.
    """
    field = WaveField(point_count)
    field.input_type = constants.INPUT_NONE
    field.end_type = end_type
    field.damping = 0.0
    gaussian_bump(field, center=0.5, width=0.1)

    initial_energy = discrete_energy(field)
    max_deviation = 0.0

    def track(f: WaveField, _: int) -> None:
        nonlocal max_deviation
        max_deviation = max(max_deviation, abs(discrete_energy(f) - initial_energy))

    run_field_steps(field, dt, n_steps, track)
    return initial_energy, max_deviation / initial_energy

def measure_boundary_residual(
    end_type: str,
    point_count: int = 200,
    dt: float = constants.WAVE_SIMULATION_DT,
    t_end: float = 3.0,
    speed: float = 1.0
) -> float:
    """
    Send one pulse down a uniform string and measure what is left at t_end.

    With unit speed the half-sine pulse (0.5 s long) is fully launched at
    t = 0.5, reaches the right end at t = 1 and, if reflected, is still inside
    the domain at t = 3.

    Returns
    -------
    float
        max |y| over the whole string at t_end.
    """
    field = WaveField(point_count, velocity_field=ConstantVelocityField(speed),
                      oscillator_time=constants.PULSE_IDLE_TIME)
    field.end_type = end_type
    field.damping = 0.0
    field.oscillator_amplitude = 1.0
    field.oscillator_frequency = 1.0
    field.pulse()

    n_steps = int(round(t_end / dt))
    run_field_steps(field, dt, n_steps)
    return float(np.max(np.abs(field.position)))

def boundary_report(**kwargs) -> Dict[str, float]:
    """Residual amplitude after one pulse, for every end type."""
    return {end_type: measure_boundary_residual(end_type, **kwargs) for end_type in constants.END_TYPES}

if __name__ == "__main__":

    parser = argparse.ArgumentParser(description="Energy and boundary checks of the 1D wave integrator.")
    parser.add_argument('-n', '--npoints', type=int, default=200, help="Number of points. Default: 200.")
    parser.add_argument('-sdt', '--simulation_dt', type=float, default=constants.WAVE_SIMULATION_DT,
                        help=f"Timestep. Default: {constants.WAVE_SIMULATION_DT}.")
    args = parser.parse_args()

    print("\n#--- Starting Wave Field Analysis ---#")
    print("-----------------------------------------")

    probe = WaveField(args.npoints)
    courant = courant_number(probe, args.simulation_dt)
    print(f"Points: {args.npoints}, dt: {args.simulation_dt}, Courant number (c=1): {courant:.3f}")
    if courant > 1.0:
        print("Warning: Courant number above 1. Expect the results below to diverge.")

    #--- 1. Energy conservation ---#
    e0, drift = measure_energy_drift(point_count=args.npoints, dt=args.simulation_dt)
    print(f"\nEnergy: E0 = {e0:.6e}, max relative drift = {drift:.3e}")

    #--- 2. Boundary behavior ---#
    print("\nResidual amplitude after one pulse (t = 3):")
    for end_type, residual in boundary_report(point_count=args.npoints, dt=args.simulation_dt).items():
        behavior = "absorbs" if residual < 0.1 else "reflects"
        print(f"    {end_type:>9}: {residual:.4f}  ({behavior})")

    if math.isnan(drift):
        print("Warning: Energy is NaN; the run was numerically unstable.")
