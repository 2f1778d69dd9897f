"""
Module for handling demo visualization and frame saving.

Provides functions to:
- Setup a Matplotlib figure sized to a scenario's aspect ratio, with sliders
  and buttons bound to the scenario's parameters.
- Draw each scenario: stacked particles (refraction, velocity), a water
  surface over a seabed (water) and the orbit of a point mass (orbit).
- Save plot frames to files.

Renderers only read the simulation state; all writes go through the
scenario's `set_parameter` / `set_quantity` / `pulse` methods.
"""

import os
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import PathCollection
from matplotlib.patches import Circle, Polygon, Rectangle
from matplotlib.widgets import Button, RadioButtons, Slider
from typing import Any, Callable, Dict, Optional, Tuple

import simulation_constants as constants
from wave_utils import arrow_head, fit_viewport, lerp, map_range

# Largest figure, in inches, that the canvas is fitted into.
FIGURE_MAX_W: float = 14.0
FIGURE_MAX_H: float = 7.0
CONTROL_ROW_HEIGHT: float = 0.35  # Inches per slider row below the canvas.

PARTICLE_COLOR = "#b59a51"
WATER_COLOR = "#49bad1"
SAND_COLOR = "#e6bd5e"

Handles = Dict[str, Any]


#--- Figure Setup ---#

def _canvas_size(aspect_ratio: float) -> Tuple[float, float]:
    """Width and height (data units) of the drawing canvas: height is always 1."""
    return aspect_ratio, 1.0

def setup_figure(scenario) -> Handles:
    """
    Create the figure, the canvas axes and the control widgets for a scenario.

    Parameters
    ----------
    scenario : WaveScenario or OrbitScenario
        The scenario to display.

    Returns
    -------
    Handles
        Dictionary of the figure, axes, artists and widgets. Widgets must stay
        referenced for their callbacks to keep working.
    """
    n_rows = len(scenario.parameters) + (1 if scenario.renderer != 'orbit' else 0)
    controls_h = CONTROL_ROW_HEIGHT * (n_rows + 1)

    _, _, canvas_w, canvas_h = fit_viewport(FIGURE_MAX_W, FIGURE_MAX_H, scenario.aspect_ratio)
    fig = plt.figure(figsize=(canvas_w, canvas_h + controls_h))
    controls_frac = controls_h / (canvas_h + controls_h)

    ax = fig.add_axes([0.0, controls_frac, 1.0, 1.0 - controls_frac])
    ax.set_axis_off()

    handles: Handles = {'fig': fig, 'ax': ax, 'widgets': {}, 'controls_frac': controls_frac}

    if scenario.renderer == 'particles':
        _setup_particles(handles, scenario)
    elif scenario.renderer == 'water':
        _setup_water(handles, scenario)
    elif scenario.renderer == 'orbit':
        _setup_orbit(handles, scenario)
    else:
        raise ValueError(f"Unknown renderer: {scenario.renderer}")

    handles['title'] = ax.text(
        0.01, 0.98, scenario.title, transform=ax.transAxes,
        ha='left', va='top', fontsize=12,
        color='black' if scenario.renderer == 'water' else 'white'
    )
    return handles

def add_controls(handles: Handles, scenario, on_pulse: Optional[Callable[[], None]] = None) -> None:
    """
    Add one slider per scenario parameter, plus pulse/input/end controls for waves.

    Wave sliders run on the normalized [0, 1] range and forward to
    `scenario.set_parameter`; orbit sliders use physical units and forward to
    `scenario.set_quantity`.
    """
    fig = handles['fig']
    widgets = handles['widgets']
    controls_frac = handles['controls_frac']
    row_h = controls_frac / (len(scenario.parameters) + 2)

    for row, (name, param) in enumerate(scenario.parameters.items()):
        ax_slider = fig.add_axes([0.15, controls_frac - (row + 1) * row_h, 0.45, row_h * 0.6])
        if scenario.renderer == 'orbit':
            slider = Slider(ax_slider, name, param.minimum, param.maximum, valinit=param.value)
            apply_value = scenario.set_quantity
        else:
            slider = Slider(ax_slider, name, 0.0, 1.0, valinit=param.normalized())
            apply_value = scenario.set_parameter

        def on_changed(val, name=name, slider=slider, param=param, apply_value=apply_value):
            apply_value(name, val)
            slider.valtext.set_text(param.label())

        slider.on_changed(on_changed)
        slider.valtext.set_text(param.label())
        widgets[f"slider_{name}"] = slider

    if scenario.renderer == 'orbit':
        # Freeze playback while a control is being dragged.
        def on_press(event):
            scenario.hold = True

        def on_release(event):
            scenario.hold = False

        fig.canvas.mpl_connect('button_press_event', on_press)
        fig.canvas.mpl_connect('button_release_event', on_release)
        return

    field = scenario.field

    if scenario.defaults['input_type'] == constants.INPUT_PULSE:
        ax_pulse = fig.add_axes([0.70, controls_frac - row_h * 1.2, 0.08, row_h * 0.8])
        pulse_button = Button(ax_pulse, "Pulse")
        pulse_button.on_clicked(lambda event: on_pulse() if on_pulse is not None else scenario.pulse())
        widgets['pulse'] = pulse_button

    ax_input = fig.add_axes([0.80, controls_frac * 0.05, 0.09, controls_frac * 0.9])
    input_radio = RadioButtons(ax_input, constants.INPUT_TYPES,
                               active=constants.INPUT_TYPES.index(field.input_type))
    ax_input.set_title("Input", fontsize=9)

    def on_input(label):
        field.input_type = label

    input_radio.on_clicked(on_input)
    widgets['input'] = input_radio

    ax_end = fig.add_axes([0.90, controls_frac * 0.05, 0.09, controls_frac * 0.9])
    end_radio = RadioButtons(ax_end, constants.END_TYPES,
                             active=constants.END_TYPES.index(field.end_type))
    ax_end.set_title("End", fontsize=9)

    def on_end(label):
        field.end_type = label

    end_radio.on_clicked(on_end)
    widgets['end'] = end_radio


#--- Particles (refraction / velocity) ---#

def _radius_to_marker_size(ax, radius: float, canvas_h: float) -> float:
    """Convert a radius in data units to a scatter marker size (points^2)."""
    ax_height_pts = ax.get_window_extent().height * 72.0 / ax.figure.dpi
    radius_pts = radius * ax_height_pts / canvas_h
    return (2.0 * radius_pts) ** 2

def _setup_particles(handles: Handles, scenario) -> None:
    ax = handles['ax']
    canvas_w, canvas_h = _canvas_size(scenario.aspect_ratio)
    ax.set_xlim(0.0, canvas_w)
    ax.set_ylim(0.0, canvas_h)
    ax.set_facecolor("black")
    handles['fig'].patch.set_facecolor("black")

    n = scenario.field.point_count
    handles['particles'] = ax.scatter(np.zeros(n), np.zeros(n), s=1.0, c=PARTICLE_COLOR, linewidths=0)

    if scenario.name == 'velocity':
        (handles['tension_line'],) = ax.plot([], [], '-', lw=2, color="white")
        handles['tension_head'] = Polygon(np.zeros((3, 2)), closed=True, color="white")
        ax.add_patch(handles['tension_head'])
        (handles['tension_anchor'],) = ax.plot([], [], 'o', markersize=10, color="white")

def particle_layout(scenario) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Canvas coordinates and radii of the particles of a wave scenario.

    Returns
    -------
    Tuple[np.ndarray, np.ndarray, np.ndarray]
        x, y and radius of every particle, in canvas units (height 1).
    """
    canvas_w, canvas_h = _canvas_size(scenario.aspect_ratio)
    field = scenario.field
    n = field.point_count
    i = np.arange(n)

    if scenario.name == 'velocity':
        wave_size = canvas_w * 0.8
        arrow_size = canvas_w - wave_size
        point_radius = (wave_size / n) * 0.5
        x = arrow_size + (i + 0.5) * point_radius * 2
        t = map_range(scenario.value('density'), constants.MIN_DENSITY, constants.MAX_DENSITY, 0.0, 1.0)
        radius = np.full(n, lerp(1.0, 4.0, t) * point_radius * 2)
    else:
        point_radius = (canvas_w / n) * 0.5
        x = (i + 0.5) * point_radius * 2
        density = scenario.density_at(i / n)
        t = (density - constants.MIN_DENSITY) / (constants.MAX_DENSITY - constants.MIN_DENSITY)
        radius = 2 * lerp(1.0, 4.0, t) * point_radius

    y = (field.position + 1) * canvas_h * 0.5
    return x, y, radius

def tension_arrow(scenario) -> Tuple[float, float, float, float]:
    """Start and end points (x0, y, x1, y) of the tension arrow of the velocity scenario."""
    canvas_w, canvas_h = _canvas_size(scenario.aspect_ratio)
    arrow_size = canvas_w - canvas_w * 0.8
    t = map_range(scenario.value('tension'), constants.MIN_TENSION, constants.MAX_TENSION, 0.0, 1.0)
    w = arrow_size * lerp(0.5, 1.0, t)

    y = (scenario.field.position[0] + 1) * 0.5 * canvas_h
    return arrow_size, y, arrow_size - w, y

def _render_particles(handles: Handles, scenario) -> None:
    ax = handles['ax']
    _, canvas_h = _canvas_size(scenario.aspect_ratio)
    x, y, radius = particle_layout(scenario)

    particles: PathCollection = handles['particles']
    particles.set_offsets(np.column_stack([x, y]))
    particles.set_sizes(_radius_to_marker_size(ax, 1.0, canvas_h) * radius ** 2)

    if scenario.name == 'velocity':
        x0, y0, x1, y1 = tension_arrow(scenario)
        handles['tension_line'].set_data([x0, x1], [y0, y1])
        handles['tension_head'].set_xy(arrow_head(x0, y0, x1, y1, abs(x1 - x0) * 0.1))
        handles['tension_anchor'].set_data([x0], [y0])


#--- Water ---#

def _setup_water(handles: Handles, scenario) -> None:
    ax = handles['ax']
    canvas_w, canvas_h = _canvas_size(scenario.aspect_ratio)
    ax.set_xlim(0.0, canvas_w)
    ax.set_ylim(0.0, canvas_h)
    ax.set_facecolor("white")

    n = scenario.field.point_count
    handles['water'] = Polygon(np.zeros((n + 2, 2)), closed=True, color=WATER_COLOR)
    ax.add_patch(handles['water'])
    handles['seabed'] = Rectangle((0.0, 0.0), canvas_w, 0.0, color=SAND_COLOR)
    ax.add_patch(handles['seabed'])

def water_surface(scenario) -> np.ndarray:
    """
    Vertices of the water polygon: the surface, closed along the canvas bottom.

    Returns
    -------
    np.ndarray
        Array of shape (N + 2, 2) in canvas units.
    """
    canvas_w, canvas_h = _canvas_size(scenario.aspect_ratio)
    field = scenario.field
    n = field.point_count

    real_water_level = canvas_h * constants.WATER_LEVEL_REL_POS
    real_water_max_amplitude = canvas_h * (constants.WATER_LEVEL_REL_POS - constants.SHALLOWEST_LAND_REL_POS)

    x = (np.arange(n) + 0.5) / n * canvas_w
    y = real_water_level + (field.position + 1) * real_water_max_amplitude

    surface = np.column_stack([x, y])
    bottom = np.array([[canvas_w, 0.0], [0.0, 0.0]])
    return np.vstack([surface, bottom])

def _render_water(handles: Handles, scenario) -> None:
    _, canvas_h = _canvas_size(scenario.aspect_ratio)
    handles['water'].set_xy(water_surface(scenario))
    handles['seabed'].set_height(scenario.seabed_height() * canvas_h)


#--- Orbit ---#

def _make_particle_artists(ax) -> Handles:
    body = Circle((0.0, 0.0), 0.1, color="white")
    ax.add_patch(body)
    artists: Handles = {'body': body}
    for key, color in (('force', (1.0, 0.0, 0.0)), ('velocity', (0.0, 1.0, 1.0))):
        (line,) = ax.plot([], [], '-', lw=1.5, color=color)
        head = Polygon(np.zeros((3, 2)), closed=True, color=color)
        ax.add_patch(head)
        artists[f"{key}_line"] = line
        artists[f"{key}_head"] = head
    return artists

def _set_arrow(line, head, x0, y0, x1, y1, alpha: float, visible: bool) -> None:
    line.set_visible(visible)
    head.set_visible(visible)
    if not visible:
        return
    line.set_data([x0, x1], [y0, y1])
    line.set_alpha(alpha)
    head.set_xy(arrow_head(x0, y0, x1, y1, 0.2))
    head.set_alpha(alpha)

def _update_particle_artists(artists: Handles, state, alpha: float = 1.0) -> None:
    """Draw a particle, its centripetal force (red) and its velocity (cyan)."""
    visible = state is not None
    artists['body'].set_visible(visible)
    if not visible:
        _set_arrow(artists['force_line'], artists['force_head'], 0, 0, 0, 0, alpha, False)
        _set_arrow(artists['velocity_line'], artists['velocity_head'], 0, 0, 0, 0, alpha, False)
        return

    # The size of the particle depends on its mass.
    artists['body'].set_center((state.x, state.y))
    artists['body'].set_radius(0.1 + 0.2 * (state.mass / 5))
    artists['body'].set_alpha(alpha)

    # Non-finite directions are drawn as-is, never guarded.
    with np.errstate(divide='ignore', invalid='ignore'):
        r = np.float64(state.radius)
        rx, ry = state.x / r, state.y / r
        force_length = state.force / 5.0
        _set_arrow(artists['force_line'], artists['force_head'],
                   state.x, state.y, state.x - force_length * rx, state.y - force_length * ry,
                   alpha, bool(state.force))

        speed = np.float64(state.speed)
        tx, ty = state.vx / speed, state.vy / speed
        _set_arrow(artists['velocity_line'], artists['velocity_head'],
                   state.x, state.y, state.x + speed * tx, state.y + speed * ty,
                   alpha, True)

def _setup_orbit(handles: Handles, scenario) -> None:
    ax = handles['ax']
    half = constants.ORBIT_VIEW_HALF_WIDTH
    ax.set_xlim(-half, half)
    ax.set_ylim(-half, half)
    ax.set_aspect('equal')
    ax.set_facecolor("black")
    handles['fig'].patch.set_facecolor("black")

    # Draw the x and y axis
    ax.plot([-half, half], [0, 0], '-', lw=1, color="#222222")
    ax.plot([0, 0], [-half, half], '-', lw=1, color="#222222")

    (handles['trajectory'],) = ax.plot([], [], '--', lw=1.5, color="gray")
    handles['initial'] = _make_particle_artists(ax)
    handles['current'] = _make_particle_artists(ax)

def _render_orbit(handles: Handles, scenario) -> None:
    initial_state = scenario.initial_state()
    _update_particle_artists(handles['initial'], initial_state)

    xs = [state.x for state in scenario.trajectory]
    ys = [state.y for state in scenario.trajectory]
    handles['trajectory'].set_data(xs, ys)

    current = scenario.current_state()
    alpha = scenario.playback_alpha() if current is not None else 0.0
    _update_particle_artists(handles['current'], current, alpha)


#--- Frame Rendering ---#

def render_frame(handles: Handles, scenario, sim_time: float, paused: bool = False) -> None:
    """
    Draw the current state of a scenario into its figure.

    Parameters
    ----------
    handles : Handles
        Output of setup_figure.
    scenario : WaveScenario or OrbitScenario
        Scenario to draw (read only).
    sim_time : float
        Current simulation time, shown in the title.
    paused : bool
        Whether the driver is paused, shown in the title.
    """
    if scenario.renderer == 'particles':
        _render_particles(handles, scenario)
    elif scenario.renderer == 'water':
        _render_water(handles, scenario)
    else:
        _render_orbit(handles, scenario)

    title_str = f"{scenario.title} | t = {sim_time:.2f} s"
    if paused:
        title_str += " | paused (space to resume)"
    handles['title'].set_text(title_str)


def save_plot_frame(
    fig: plt.Figure,
    time: float,
    output_dir: str,
    output_format: str,
    filename_prefix: str
) -> None:
    """
    Saves the current Matplotlib figure to a file.

    The filename is constructed from the prefix and the current simulation
    time. The output directory is created if it does not exist.

    Parameters
    ----------
    fig : plt.Figure
        The Matplotlib figure object to be saved.
    time : float
        The current simulation time, used for naming the output file.
    output_dir : str
        Directory to write into.
    output_format : str
        'png', 'pdf' or 'both'.
    filename_prefix : str
        Prefix of the filename (scenario name and grid size).
    """
    if fig is None:
        print("Warning: Figure object is None, cannot save frame.")
        return

    # Ensure the output directory exists.
    if not os.path.exists(output_dir):
        try:
            os.makedirs(output_dir)
            print(f"Created output directory: {output_dir}")
        except OSError as e:
            print(f"Error creating output directory {output_dir}: {e}")
            return

    def save_single_format(selected_format: str):
        frame_filename = f"{filename_prefix}_t{time:.4f}.{selected_format}"
        full_save_path = os.path.join(output_dir, frame_filename)
        try:
            fig.savefig(full_save_path, bbox_inches='tight', dpi=200, facecolor=fig.get_facecolor())
            print(f"Frame saved: {full_save_path}")
        except (OSError, ValueError) as e:
            print(f"Error saving frame {full_save_path}: {e}")

    if output_format == 'both':
        save_single_format('png')
        save_single_format('pdf')
    else:
        save_single_format(output_format)
