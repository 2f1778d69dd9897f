"""
Module for loading demo configuration from an INI file.

Provides functions to read the driver settings ([Driver] section) and the
per-scenario settings ([Refraction], [Velocity], [Water], [Orbit] sections)
from a specified configuration file.
"""

import configparser
import os
from typing import Dict, Optional, Any

# Expected keys of each scenario section and their target types.
SCENARIO_KEYS: Dict[str, Dict[str, type]] = {
    'Refraction': {
        'npoints': int, 'damping': float, 'amplitude': float, 'frequency': float,
        'pulse_cutoff': float, 'end_type': str, 'input_type': str,
        'density0': float, 'density1': float,
    },
    'Velocity': {
        'npoints': int, 'damping': float, 'amplitude': float, 'frequency': float,
        'pulse_cutoff': float, 'end_type': str, 'input_type': str,
        'tension': float, 'density': float,
    },
    'Water': {
        'npoints': int, 'damping': float, 'amplitude': float, 'frequency': float,
        'pulse_cutoff': float, 'end_type': str, 'input_type': str,
        'depth': float,
    },
    'Orbit': {
        'force': float, 'speed': float, 'radius': float, 'mass': float,
    },
}

DRIVER_KEYS: Dict[str, type] = {
    'simulation_dt': float, 'max_frame_dt': float,
    'output_format': str, 'output_dir': str,
    'dt_save': float, 't_final': float,
}


def _strip_inline_comment(value_str: str) -> str:
    # Strip inline comments (anything after # or ;)
    if '#' in value_str:
        value_str = value_str.split('#', 1)[0]
    if ';' in value_str:
        value_str = value_str.split(';', 1)[0]
    return value_str.strip()


def _read_section(
    filepath: str,
    section: str,
    expected_params: Dict[str, type],
    warn_if_missing: bool = True
) -> Optional[Dict[str, Any]]:
    """
    Read the options of one section, converted to their expected types.

    Keys absent from the file are not added to the result, so defaults
    elsewhere can take over. Invalid or empty values are reported and set to None.
    """
    if not os.path.exists(filepath):
        if warn_if_missing:
            print(f"Warning: Configuration file not found at '{filepath}'.")
        return None

    config = configparser.ConfigParser()
    try:
        config.read(filepath)
    except configparser.Error as e:
        print(f"Error parsing configuration file '{filepath}': {e}")
        return None

    if section not in config:
        if warn_if_missing:
            print(f"Warning: Section [{section}] not found in '{filepath}'.")
        return None

    params: Dict[str, Any] = {}
    for key, param_type in expected_params.items():
        if not config.has_option(section, key):
            continue
        value_str = _strip_inline_comment(config.get(section, key))

        # Empty optional numbers mean "not set".
        if not value_str and param_type in (float, int):
            params[key] = None
            continue

        try:
            if param_type == int: params[key] = int(value_str)
            elif param_type == float: params[key] = float(value_str)
            else: params[key] = value_str
        except ValueError as e:
            print(f"Warning: Parameter '{key}' has invalid value for type {param_type.__name__} "
                  f"in [{section}] in '{filepath}': {e}. Setting to None.")
            params[key] = None

    for key in config.options(section):
        if key not in expected_params:
            print(f"Warning: Unknown parameter '{key}' in [{section}] in '{filepath}'. Ignoring it.")

    return params


def load_scenario_config(filepath: str, section: str) -> Optional[Dict[str, Any]]:
    """
    Load the settings of one scenario from a specified INI configuration file.

    Parameters
    ----------
    filepath : str
        The path to the INI configuration file.
    section : str
        Scenario section name ('Refraction', 'Velocity', 'Water' or 'Orbit').

    Returns
    -------
    Optional[Dict[str, Any]]
        Scenario settings with appropriate types (physical units for the
        tunable parameters). Returns None if the file or section is not found.
    """
    if section not in SCENARIO_KEYS:
        print(f"Warning: No configuration keys are known for section [{section}].")
        return None
    return _read_section(filepath, section, SCENARIO_KEYS[section])


def load_driver_config(filepath: str) -> Optional[Dict[str, Any]]:
    """
    Load the fixed-timestep driver and output settings ([Driver] section).

    A missing file or section is common (the user may rely on command-line
    arguments only) and is not reported.

    Returns
    -------
    Optional[Dict[str, Any]]
        Driver settings, or None if the file or section is not found.
    """
    return _read_section(filepath, 'Driver', DRIVER_KEYS, warn_if_missing=False)
