"""
Module for setting up the wave demonstration scenarios.

This module is responsible for:
- Declaring the tunable parameters of each scenario and their physical ranges.
- Providing each scenario's velocity-field policy (speed as a function of x).
- Loading scenario settings from the configuration file and applying
  command-line overrides.
- Building the WaveField a scenario drives.

Every scenario keeps its own parameter values; slider callbacks write them
through `set_parameter` and the field reads them on its next step through
`speed_at`. Changing a parameter never touches the wave state itself.
"""

import argparse
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, Optional

import config_loader
import simulation_constants as constants
from wave_field import ArrayOrFloat, WaveField
from wave_utils import lerp, map_range


# Settings restricted to a fixed set of names.
_ALLOWED_VALUES = {
    'end_type': constants.END_TYPES,
    'input_type': constants.INPUT_TYPES,
}


@dataclass
class ParameterRange:
    """A tunable quantity, stored in physical units, driven by a [0, 1] control."""
    name: str
    minimum: float
    maximum: float
    value: float
    variable: str = ""
    unit: str = ""

    def set_normalized(self, t: float) -> None:
        self.value = lerp(self.minimum, self.maximum, t)

    def normalized(self) -> float:
        return map_range(self.value, self.minimum, self.maximum, 0.0, 1.0)

    def label(self) -> str:
        return f"{self.variable} = {self.value:.2f} {self.unit}".strip()


class WaveScenario:
    """
    Base class for the scenarios built on a WaveField.

    Subclasses declare `name`, `title`, `defaults` and `_make_parameters`, and
    implement `speed_at`. The scenario itself is the field's velocity field.
    """

    name: str = ""
    title: str = ""
    renderer: str = "particles"
    aspect_ratio: float = constants.WAVE_ASPECT_RATIO
    defaults: Dict[str, Any] = {}

    def __init__(self, settings: Optional[Dict[str, Any]] = None):
        self.settings: Dict[str, Any] = dict(self.defaults)
        self.simulation_dt: float = constants.WAVE_SIMULATION_DT
        self.parameters: Dict[str, ParameterRange] = self._make_parameters()

        for key, value in (settings or {}).items():
            if value is None:
                continue
            if key == 'simulation_dt':
                self.simulation_dt = float(value)
            elif key in self.parameters:
                # Initial parameter values are given in physical units.
                self.parameters[key].value = float(value)
            elif key in _ALLOWED_VALUES and value not in _ALLOWED_VALUES[key]:
                print(f"Warning: Invalid {key} '{value}' for scenario '{self.name}'. "
                      f"Using default: {self.settings[key]}.")
            elif key in self.settings:
                self.settings[key] = value
            else:
                print(f"Warning: Unknown setting '{key}' for scenario '{self.name}'. Ignoring it.")

        self.field = self.build_field()

    def _make_parameters(self) -> Dict[str, ParameterRange]:
        return {}

    def build_field(self) -> WaveField:
        """Create the WaveField configured from the current settings."""
        input_type = self.settings['input_type']
        # A pulse-driven field starts quiet until the user asks for a pulse.
        oscillator_time = constants.PULSE_IDLE_TIME if input_type == constants.INPUT_PULSE else 0.0

        field = WaveField(int(self.settings['npoints']), velocity_field=self, oscillator_time=oscillator_time)
        field.damping = float(self.settings['damping'])
        field.oscillator_frequency = float(self.settings['frequency'])
        field.oscillator_amplitude = float(self.settings['amplitude'])
        field.pulse_cutoff = float(self.settings['pulse_cutoff'])
        field.input_type = input_type
        field.end_type = self.settings['end_type']
        return field

    def speed_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        raise NotImplementedError

    def set_parameter(self, name: str, t: float) -> None:
        """Set parameter `name` from a normalized control value t in [0, 1]."""
        if name not in self.parameters:
            raise KeyError(f"Scenario '{self.name}' has no parameter '{name}'.")
        self.parameters[name].set_normalized(t)

    def value(self, name: str) -> float:
        return self.parameters[name].value

    def simulate(self) -> None:
        self.field.step(self.simulation_dt)

    def pulse(self) -> None:
        self.field.pulse()

    def reset(self) -> None:
        self.field.reset()


def _wave_defaults(**overrides: Any) -> Dict[str, Any]:
    defaults = {
        'npoints': constants.VELOCITY_POINT_COUNT,
        'damping': constants.DEFAULT_DAMPING,
        'amplitude': constants.DEFAULT_OSCILLATOR_AMPLITUDE,
        'frequency': constants.DEFAULT_OSCILLATOR_FREQUENCY,
        'pulse_cutoff': constants.DEFAULT_PULSE_CUTOFF,
        'input_type': constants.INPUT_NONE,
        'end_type': constants.END_INFINITE,
    }
    defaults.update(overrides)
    return defaults


class RefractionScenario(WaveScenario):
    """Two strings of different density joined at x = 0.5."""

    name = 'refraction'
    title = 'Refraction'
    defaults = _wave_defaults(
        npoints=constants.REFRACTION_POINT_COUNT,
        damping=constants.REFRACTION_DAMPING,
        amplitude=constants.REFRACTION_AMPLITUDE,
        input_type=constants.INPUT_PULSE,
    )

    def _make_parameters(self) -> Dict[str, ParameterRange]:
        return {
            'density0': ParameterRange('density0', constants.MIN_DENSITY, constants.MAX_DENSITY,
                                       constants.MIN_DENSITY, variable="μ₁", unit="kg/m"),
            'density1': ParameterRange('density1', constants.MIN_DENSITY, constants.MAX_DENSITY,
                                       constants.MIN_DENSITY, variable="μ₂", unit="kg/m"),
        }

    def density_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        return np.where(np.asarray(x) < constants.REFRACTION_INTERFACE_X,
                        self.value('density0'), self.value('density1'))

    def speed_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        return np.sqrt(constants.REFRACTION_TENSION / self.density_at(x))


class VelocityScenario(WaveScenario):
    """A single uniform string; speed = sqrt(tension / density)."""

    name = 'velocity'
    title = 'Wave velocity'
    defaults = _wave_defaults(
        npoints=constants.VELOCITY_POINT_COUNT,
        damping=constants.VELOCITY_DAMPING,
        amplitude=constants.VELOCITY_AMPLITUDE,
        input_type=constants.INPUT_NONE,
    )

    def _make_parameters(self) -> Dict[str, ParameterRange]:
        return {
            'tension': ParameterRange('tension', constants.MIN_TENSION, constants.MAX_TENSION,
                                      constants.MIN_TENSION, variable="T", unit="N"),
            'density': ParameterRange('density', constants.MIN_DENSITY, constants.MAX_DENSITY,
                                      constants.MIN_DENSITY, variable="μ", unit="kg/m"),
        }

    def density_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        return np.full(np.shape(x), self.value('density'), dtype=float)

    def speed_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        speed = np.sqrt(self.value('tension') / self.value('density'))
        return np.full(np.shape(x), speed, dtype=float)


class WaterScenario(WaveScenario):
    """Shallow-water surface wave; speed = k * sqrt(depth)."""

    name = 'water'
    title = 'Shallow water'
    renderer = 'water'
    defaults = _wave_defaults(
        npoints=constants.WATER_POINT_COUNT,
        damping=constants.WATER_DAMPING,
        amplitude=constants.WATER_AMPLITUDE,
        pulse_cutoff=constants.WATER_PULSE_CUTOFF,
        input_type=constants.INPUT_PULSE,
    )

    def _make_parameters(self) -> Dict[str, ParameterRange]:
        return {
            'depth': ParameterRange('depth', constants.MIN_DEPTH, constants.MAX_DEPTH,
                                    constants.MIN_DEPTH, variable="h", unit="m"),
        }

    def speed_at(self, x: ArrayOrFloat) -> ArrayOrFloat:
        speed = constants.WATER_SPEED_FACTOR * np.sqrt(self.value('depth'))
        return np.full(np.shape(x), speed, dtype=float)

    def seabed_height(self) -> float:
        """Relative height (fraction of the canvas) of the seabed for the current depth."""
        return map_range(
            self.value('depth'),
            constants.MAX_DEPTH, constants.MIN_DEPTH,
            constants.DEEPEST_LAND_REL_POS, constants.SHALLOWEST_LAND_REL_POS
        )


SCENARIOS = {
    RefractionScenario.name: RefractionScenario,
    VelocityScenario.name: VelocityScenario,
    WaterScenario.name: WaterScenario,
}

SCENARIO_NAMES = tuple(SCENARIOS) + ('orbit',)

# Command-line overrides that map onto scenario settings.
_CLI_SETTING_KEYS = {
    'npoints': 'npoints',
    'damping': 'damping',
    'amplitude': 'amplitude',
    'frequency': 'frequency',
    'end_type': 'end_type',
    'input_type': 'input_type',
    'simulation_dt': 'simulation_dt',
}


def get_scenario_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Load the settings of `args.scenario` from the config file
    and apply command-line overrides.

    Parameters
    ----------
    args : argparse.Namespace
        Merged arguments; includes `scenario`, `config_file` and the optional
        per-setting overrides.

    Returns
    -------
    Dict[str, Any]
        Settings for the scenario constructor. Missing entries fall back to the
        scenario defaults.
    """
    section = args.scenario.capitalize()
    base_settings = config_loader.load_scenario_config(args.config_file, section)

    if base_settings is None:
        print(f"Warning: Could not load [{section}] from '{args.config_file}'. "
              "Using built-in scenario defaults.")
        base_settings = {}

    final_settings = dict(base_settings)
    # Command-line arguments (if not None) take precedence.
    for arg_name, setting_key in _CLI_SETTING_KEYS.items():
        value = getattr(args, arg_name, None)
        if value is not None:
            final_settings[setting_key] = value

    if args.scenario == 'orbit':
        # The orbit has no wave field.
        for key in ('npoints', 'damping', 'amplitude', 'frequency', 'end_type', 'input_type'):
            final_settings.pop(key, None)

    return final_settings


def build_scenario(name: str, settings: Optional[Dict[str, Any]] = None):
    """Create the scenario called `name` ('refraction', 'velocity', 'water' or 'orbit')."""
    if name == 'orbit':
        import orbit
        return orbit.OrbitScenario(settings)
    if name not in SCENARIOS:
        raise ValueError(f"Unknown scenario: {name}")
    return SCENARIOS[name](settings)
