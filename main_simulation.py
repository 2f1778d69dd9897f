"""
Main script for the interactive wave and orbit demonstrations.

This script orchestrates a demo by:
- Parsing command-line arguments and the configuration file.
- Building the selected scenario (refraction, velocity, water or orbit).
- Running the fixed-timestep driver from a Matplotlib animation timer.
- Handling visualization, pause/resume and output of plot frames.
"""

import argparse
import sys
import time
from typing import Any, Dict, List, Optional

import matplotlib.pyplot as plt
import matplotlib.animation as animation

# Import all the created modules
import cli_parser
import config_loader
import scenarios
import visualization
from frame_driver import FixedTimestepDriver
from wave_utils import courant_number


def merge_arguments(
    arg_parser_obj: argparse.ArgumentParser,
    cmd_args_raw_list: List[str],
    config_params: Optional[Dict[str, Any]]
) -> argparse.Namespace:
    """
    Establish the final configuration by merging sources with defined priority.

    Priority:
      1. Explicit command-line arguments.
      2. Values from the config file's [Driver] section (if not None or empty).
      3. Argparse defaults.

    Parameters
    ----------
    arg_parser_obj : argparse.ArgumentParser
        Parser holding the defaults.
    cmd_args_raw_list : List[str]
        Raw command-line arguments (without the program name).
    config_params : Optional[Dict[str, Any]]
        Values loaded from the configuration file, or None.

    Returns
    -------
    argparse.Namespace
        The merged arguments.
    """
    config_params = config_params or {}
    args_cmd_line_only = arg_parser_obj.parse_args(cmd_args_raw_list)
    merged = argparse.Namespace()

    for action in arg_parser_obj._actions:
        dest = action.dest
        if dest == 'help': # Skip help action, not a parameter.
            continue

        current_value = arg_parser_obj.get_default(dest)

        config_value = config_params.get(dest)
        if config_value is not None and config_value != '':
            current_value = config_value

        # e.g. ['-n', '--npoints'], given either as '-n 5' or '--npoints=5'.
        flag_present = any(
            arg == opt_string or arg.startswith(opt_string + '=')
            for opt_string in action.option_strings
            for arg in cmd_args_raw_list
        )
        if flag_present:
            current_value = getattr(args_cmd_line_only, dest)

        setattr(merged, dest, current_value)

    return merged


class DemoRunner:
    """
    Couples a scenario, its figure and the fixed-timestep driver.

    The driver calls `simulate` a whole number of times per animation frame
    and `render` once; both run on the GUI thread, never concurrently.
    """

    def __init__(self, scenario, args: argparse.Namespace, handles: Optional[Dict[str, Any]] = None):
        self.scenario = scenario
        self.args = args
        self.handles = handles
        self.sim_time: float = 0.0
        self.t_final_frame_saved: bool = False
        self._save_pending: bool = False
        self._next_frame_save: float = args.dt_save if args.dt_save and args.dt_save > 0 else 0.0
        self.animation: Optional[animation.FuncAnimation] = None

        self.driver = FixedTimestepDriver(
            self.simulate, self.render,
            simulation_dt=scenario.simulation_dt,
            max_frame_dt=args.max_frame_dt
        )

    @property
    def filename_prefix(self) -> str:
        field = getattr(self.scenario, 'field', None)
        if field is None:
            return self.scenario.name
        return f"{self.scenario.name}_N{field.point_count}"

    def t_final_reached(self) -> bool:
        t_final = self.args.t_final
        return t_final is not None and t_final > 0 and self.sim_time >= t_final

    def simulate(self) -> None:
        """One fixed step of the scenario; stops advancing once t_final is reached."""
        if self.t_final_reached():
            return

        self.scenario.simulate()
        self.sim_time += self.scenario.simulation_dt

        # --- Auto-save frame logic ---
        if self.args.dt_save > 0 and self.sim_time >= self._next_frame_save:
            self._save_pending = True
            self._next_frame_save += self.args.dt_save

    def render(self) -> None:
        if self.handles is None:
            return
        visualization.render_frame(self.handles, self.scenario, self.sim_time, self.driver.paused)

        if self._save_pending:
            self._save_pending = False
            print(f"Auto-saving frame for {self.scenario.name} at t={self.sim_time:.4f}...")
            self.save_frame()

        if self.t_final_reached() and not self.t_final_frame_saved:
            if self.animation is not None and self.animation.event_source is not None:
                self.animation.event_source.stop() # Stop the animation timer.
            print(f"INFO: t_final ({self.args.t_final:.4f}) reached. Animation stopped. Saving final frame.")
            self.save_frame()
            print("Please close the plot window manually to exit.")
            self.t_final_frame_saved = True

    def save_frame(self) -> None:
        if self.handles is None:
            return
        visualization.save_plot_frame(
            self.handles['fig'], self.sim_time,
            self.args.output_dir, self.args.output_format, self.filename_prefix
        )

    def animation_update(self, frame_idx: int) -> tuple:
        """Called by FuncAnimation; frame_idx is not used."""
        self.driver.do_frame(time.perf_counter())
        return tuple()

    def on_key_press(self, event: Any) -> None:
        if event.key == ' ':
            self.driver.toggle_pause()
            print(f"INFO: {'Paused' if self.driver.paused else 'Resumed'} at t={self.sim_time:.3f}.")
        elif event.key == 'n' and hasattr(self.scenario, 'reset'):
            self.scenario.reset()
        elif event.key == 'enter' and hasattr(self.scenario, 'pulse'):
            self.scenario.pulse()

    def on_close(self, event: Any) -> None:
        """Save the last frame when the window closes, unless the t_final frame was already saved."""
        if self.t_final_frame_saved:
            print(f"Animation window closing. Frame at t_final={self.args.t_final:.4f} was already saved.")
            return
        if self.args.dt_save > 0 or self.args.t_final is not None:
            print(f"Animation window closing. Saving final frame at t={self.sim_time:.3f}...")
            self.save_frame()

    def run(self) -> None:
        fig = self.handles['fig']
        fig.canvas.mpl_connect('close_event', self.on_close)
        fig.canvas.mpl_connect('key_press_event', self.on_key_press)

        self.animation = animation.FuncAnimation(
            fig,
            self.animation_update,
            frames=None,              # Continuous animation until t_final or window close.
            blit=False,
            interval=16,               # ms; roughly display rate, the driver absorbs the jitter.
            repeat=False,
            cache_frame_data=False    # Avoids unbounded cache with frames=None.
        )
        plt.show()


def print_summary(scenario, args: argparse.Namespace) -> None:
    print(f"\n#--- Starting {scenario.title} demo ({scenario.name}) ---#")
    print("\nSimulation parameters:")
    print(f"    Config file: {args.config_file}")
    print(f"    Simulation dt: {scenario.simulation_dt}")
    print(f"    Max frame dt: {args.max_frame_dt}")

    field = getattr(scenario, 'field', None)
    if field is not None:
        print(f"    Points: {field.point_count}")
        print(f"    Damping: {field.damping}")
        print(f"    End type: {field.end_type}")
        print(f"    Input type: {field.input_type}")
        print(f"    Oscillator: f={field.oscillator_frequency}, A={field.oscillator_amplitude}")

        # Reported only; the integrator is never clamped.
        courant = courant_number(field, scenario.simulation_dt)
        print(f"    Courant number: {courant:.3f}")
        if courant > 1.0:
            print("Warning: Courant number above 1. The explicit scheme will likely be unstable "
                  "for these parameters.")

    for param in scenario.parameters.values():
        print(f"    {param.name}: {param.label()}")

    print(f"    Output format: {args.output_format}")
    print(f"    Output directory: '{args.output_dir}'")
    print("\nKeys: space = pause/resume, enter = pulse, n = reset.")


def main(argv: Optional[List[str]] = None) -> None:
    #--- Configuration Setup ---#
    arg_parser_obj = cli_parser.get_parser()
    cmd_args_raw_list = sys.argv[1:] if argv is None else argv

    args_probe = arg_parser_obj.parse_args(cmd_args_raw_list)
    config_driver_params = config_loader.load_driver_config(args_probe.config_file)
    args = merge_arguments(arg_parser_obj, cmd_args_raw_list, config_driver_params)

    #--- Output Directory Finalization ---#
    if not args.output_dir:
        args.output_dir = f"{args.scenario}_frames"
        print(f"INFO: Output directory not set. Using scenario-based default: '{args.output_dir}'.")

    #--- Scenario Setup ---#
    settings = scenarios.get_scenario_settings(args)
    scenario = scenarios.build_scenario(args.scenario, settings)

    if args.pulse_on_start and hasattr(scenario, 'pulse'):
        scenario.pulse()

    print_summary(scenario, args)

    #--- Plotting Setup ---#
    handles = visualization.setup_figure(scenario)
    visualization.add_controls(handles, scenario)

    runner = DemoRunner(scenario, args, handles)
    runner.run()

    #--- Post-Animation Information ---#
    print(f"\nAnimation stopped. Final simulation time: {runner.sim_time:.4f} s.")
    print(f"Total simulation steps taken: {runner.driver.step_count}")


if __name__ == "__main__":
    main()
