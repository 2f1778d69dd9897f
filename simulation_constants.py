"""
Defines core physical and numerical constants for the 1D wave demonstrations.

These values are generally fixed for a given demo but are centralized here
for clarity and ease of modification if needed.
"""

import math

#--- Domain ---#
# The wave is sampled on the normalized interval [X_MIN, X_MAX].
X_MIN: float = 0.0
X_MAX: float = 1.0

# At least one interior point is needed for the second-derivative stencil.
MIN_POINT_COUNT: int = 3

#--- End (boundary) types ---#
# These determine the constraints of the wave's limits.
END_FREE: str = 'free'          # Zero slope (Neumann) at the right end.
END_FIXED: str = 'fixed'        # Right end pinned at zero.
END_INFINITE: str = 'infinite'  # One-sided absorbing condition at both ends.
END_TYPES = (END_FREE, END_FIXED, END_INFINITE)

#--- Input types ---#
# These determine the external changes to the wave over time (left end).
INPUT_NONE: str = 'none'
INPUT_PULSE: str = 'pulse'
INPUT_OSCILLATOR: str = 'oscillator'
INPUT_TYPES = (INPUT_NONE, INPUT_PULSE, INPUT_OSCILLATOR)

#--- WaveField defaults ---#
DEFAULT_DAMPING: float = 0.0
DEFAULT_END_TYPE: str = END_INFINITE
DEFAULT_INPUT_TYPE: str = INPUT_NONE
DEFAULT_PULSE_CUTOFF: float = math.pi
DEFAULT_OSCILLATOR_FREQUENCY: float = 1.0
DEFAULT_OSCILLATOR_AMPLITUDE: float = 0.4
DEFAULT_WAVE_SPEED: float = 1.0

# Oscillator clock value for a field that is pulse-driven but should stay quiet
# until pulse() is called: far beyond any pulse window.
PULSE_IDLE_TIME: float = 10000.0

#--- Fixed-timestep driver defaults ---#
DEFAULT_SIMULATION_DT: float = 1.0 / 60.0
DEFAULT_MAX_FRAME_DT: float = 1.0   # Seconds; caps catch-up after a stall.
WAVE_SIMULATION_DT: float = 0.001   # Step used by all wave scenarios.
WAVE_ASPECT_RATIO: float = 2.0

#--- Refraction scenario ---#
REFRACTION_POINT_COUNT: int = 400
REFRACTION_DAMPING: float = 0.3
REFRACTION_AMPLITUDE: float = 0.7
REFRACTION_TENSION: float = 0.05
REFRACTION_INTERFACE_X: float = 0.5
MIN_DENSITY: float = 0.2
MAX_DENSITY: float = 1.0

#--- Velocity scenario ---#
VELOCITY_POINT_COUNT: int = 500
VELOCITY_DAMPING: float = 0.2
VELOCITY_AMPLITUDE: float = 0.5
MIN_TENSION: float = 0.05
MAX_TENSION: float = 0.25

#--- Water scenario ---#
WATER_POINT_COUNT: int = 300
WATER_DAMPING: float = 0.0
WATER_AMPLITUDE: float = 1.0
WATER_PULSE_CUTOFF: float = 2.0 * math.pi
WATER_SPEED_FACTOR: float = 1.0  # k in speed = k * sqrt(depth)
MIN_DEPTH: float = 0.1
MAX_DEPTH: float = 1.0
# Relative heights of the drawing (fractions of the canvas height).
WATER_LEVEL_REL_POS: float = 0.7
SHALLOWEST_LAND_REL_POS: float = 0.6
DEEPEST_LAND_REL_POS: float = 0.1

#--- Orbit (centripetal force) demo ---#
ORBIT_RECORD_DT: float = 0.001        # Loop increment of the recording window.
ORBIT_RECORD_WINDOW: float = 1.0      # Recording window length (1000 states max).
ORBIT_INTEGRATION_DT: float = 0.05    # Euler step of the point mass.
ORBIT_ESCAPE_DISTANCE: float = 10.0   # Stop once |x| or |y| exceeds this.
ORBIT_PLAYBACK_FPS: float = 60.0
ORBIT_RESTART_DELAY: float = 0.5      # Seconds between playback loops.
ORBIT_VIEW_HALF_WIDTH: float = 5.0

#--- Output ---#
DEFAULT_OUTPUT_FORMAT: str = 'png'
