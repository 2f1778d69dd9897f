import matplotlib.pyplot as plt
import numpy as np
import pytest

import scenarios
import visualization


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.mark.parametrize("name", ['refraction', 'velocity', 'water', 'orbit'])
def test_render_does_not_touch_state(name):
    scenario = scenarios.build_scenario(name)
    handles = visualization.setup_figure(scenario)
    visualization.add_controls(handles, scenario)

    if hasattr(scenario, 'field'):
        scenario.field.position[:] = np.linspace(-0.3, 0.3, scenario.field.point_count)
        before = scenario.field.snapshot()
        visualization.render_frame(handles, scenario, 1.25)
        assert np.array_equal(scenario.field.position, before)
    else:
        index = scenario.index_within_trajectory
        visualization.render_frame(handles, scenario, 1.25)
        assert scenario.index_within_trajectory == index

    assert "t = 1.25 s" in handles['title'].get_text()


def test_paused_title():
    scenario = scenarios.build_scenario('velocity')
    handles = visualization.setup_figure(scenario)
    visualization.render_frame(handles, scenario, 0.0, paused=True)
    assert "paused" in handles['title'].get_text()


def test_particle_layout_follows_field():
    scenario = scenarios.build_scenario('refraction', {'npoints': 40})
    scenario.set_parameter('density1', 1.0)
    scenario.field.position[:] = 1.0

    x, y, radius = visualization.particle_layout(scenario)

    assert x.shape == y.shape == radius.shape == (40,)
    assert np.all(np.diff(x) > 0)
    assert np.allclose(y, 1.0)  # top of the canvas
    assert radius[-1] == pytest.approx(4 * radius[0])


def test_tension_arrow_grows_with_tension():
    scenario = scenarios.build_scenario('velocity')
    x0, _, x1, _ = visualization.tension_arrow(scenario)
    short = x0 - x1
    scenario.set_parameter('tension', 1.0)
    x0, _, x1, _ = visualization.tension_arrow(scenario)
    assert x0 - x1 == pytest.approx(2 * short)


def test_water_surface_is_closed_polygon():
    scenario = scenarios.build_scenario('water', {'npoints': 30})
    surface = visualization.water_surface(scenario)
    assert surface.shape == (32, 2)
    assert np.all(surface[-2:, 1] == 0.0)


def test_save_plot_frame(tmp_path):
    scenario = scenarios.build_scenario('water', {'npoints': 30})
    handles = visualization.setup_figure(scenario)
    visualization.render_frame(handles, scenario, 0.5)

    output_dir = tmp_path / "frames"
    visualization.save_plot_frame(handles['fig'], 0.5, str(output_dir), 'png', 'water_N30')

    assert (output_dir / "water_N30_t0.5000.png").exists()


@pytest.mark.parametrize("name, has_pulse", [
    ('refraction', True),
    ('water', True),
    ('velocity', False),
])
def test_pulse_button_only_for_pulse_driven_scenarios(name, has_pulse):
    scenario = scenarios.build_scenario(name)
    handles = visualization.setup_figure(scenario)
    visualization.add_controls(handles, scenario)
    assert ('pulse' in handles['widgets']) == has_pulse
    assert 'end' in handles['widgets']
