"""
Module for parsing command-line arguments for the wave demonstrations.

Defines arguments for the scenario, grid size, damping, end and input types,
driver timing, output settings, and the configuration file whose values can
be overridden via command-line flags.
"""

import argparse
import os # For constructing default paths

import simulation_constants as constants

SCENARIO_CHOICES = ['refraction', 'velocity', 'water', 'orbit']

def get_parser() -> argparse.ArgumentParser:
    """
    Defines and returns the ArgumentParser object for the demos.

    Scenario overrides default to None so that values from the configuration
    file (or the scenario's built-in defaults) apply unless a flag is given.
    """
    parser = argparse.ArgumentParser(
        description="Interactive 1D wave equation and centripetal force demonstrations."
    )

    #--- Scenario Selection ---#
    parser.add_argument(
        '-s', '--scenario',
        type=str,
        default='refraction',
        choices=SCENARIO_CHOICES,
        help="Demo to run: refraction, velocity, water or orbit. Default: refraction."
    )

    #--- Wave Field Overrides ---#
    parser.add_argument(
        '-n', '--npoints',
        type=int,
        default=None,
        help="Number of points of the wave. Default: scenario value."
    )
    parser.add_argument(
        '--damping',
        type=float,
        default=None,
        help="Damping coefficient of the wave. Default: scenario value."
    )
    parser.add_argument(
        '-e', '--end_type',
        type=str,
        default=None,
        choices=list(constants.END_TYPES),
        help="Constraint at the ends of the wave: free, fixed or infinite. Default: scenario value."
    )
    parser.add_argument(
        '-i', '--input_type',
        type=str,
        default=None,
        choices=list(constants.INPUT_TYPES),
        help="Input applied at the left end: none, pulse or oscillator. Default: scenario value."
    )
    parser.add_argument(
        '--frequency',
        type=float,
        default=None,
        help="Oscillator frequency of the left end input. Default: scenario value."
    )
    parser.add_argument(
        '--amplitude',
        type=float,
        default=None,
        help="Oscillator amplitude of the left end input. Default: scenario value."
    )
    parser.add_argument(
        '--pulse_on_start',
        action='store_true',
        help="Fire a pulse at the left end as soon as the demo starts."
    )

    #--- Driver Timing ---#
    parser.add_argument(
        '-sdt', '--simulation_dt',
        type=float,
        default=None,
        help="Simulated seconds per step. Default: scenario value (0.001 for waves)."
    )
    parser.add_argument(
        '-mfd', '--max_frame_dt',
        type=float,
        default=constants.DEFAULT_MAX_FRAME_DT,
        help=f"Maximum wall-clock seconds credited to one frame. Default: {constants.DEFAULT_MAX_FRAME_DT}."
    )
    parser.add_argument(
        '-tf', '--t_final',
        type=float,
        default=None,
        help="Simulated time at which to stop and save a frame. Default: None (continuous)."
    )
    parser.add_argument(
        '-dts', '--dt_save',
        type=float,
        default=0.0,
        help="Simulation time interval for auto-saving frames. 0 or negative to disable. Default: 0.0"
    )

    #--- Output Settings ---#
    parser.add_argument(
        '-fmt', '--output_format',
        type=str,
        default=constants.DEFAULT_OUTPUT_FORMAT,
        choices=['pdf', 'png', 'both'],
        help="Output format for saved figures ('pdf', 'png', or 'both'). Default: png."
    )
    parser.add_argument(
        '-o', '--output_dir',
        type=str,
        default=None,
        help="Directory to save output frames. Default: {scenario}_frames."
    )

    #--- Configuration File ---#
    parser.add_argument(
        '-c', '--config_file',
        type=str,
        default=os.path.join(os.path.dirname(os.path.abspath(__file__)), 'wave_config.ini'),
        help="Path to the configuration file. Default: wave_config.ini."
    )

    return parser

def parse_arguments() -> argparse.Namespace:
    """Define and parse command-line arguments for the demos."""
    parser = get_parser()
    args = parser.parse_args()
    return args
