import argparse

import pytest

import scenarios
from cli_parser import get_parser
from main_simulation import DemoRunner, merge_arguments


def test_merge_priority():
    parser = get_parser()
    config = {'max_frame_dt': 0.5, 'dt_save': 0.2, 'output_dir': '', 't_final': None}

    merged = merge_arguments(parser, ['-n', '50', '--dt_save=0.3'], config)

    assert merged.npoints == 50                  # command line
    assert merged.dt_save == pytest.approx(0.3)  # command line beats config
    assert merged.max_frame_dt == pytest.approx(0.5)  # config beats default
    assert merged.output_dir is None             # empty config value ignored
    assert merged.scenario == 'refraction'       # default


def test_merge_without_config():
    merged = merge_arguments(get_parser(), ['-s', 'water'], None)
    assert merged.scenario == 'water'
    assert merged.max_frame_dt == pytest.approx(1.0)


def make_args(**overrides):
    values = dict(max_frame_dt=1.0, dt_save=0.0, t_final=None, output_dir='frames', output_format='png')
    values.update(overrides)
    return argparse.Namespace(**values)


def test_runner_steps_scenario_through_driver():
    scenario = scenarios.build_scenario('velocity', {'npoints': 20, 'input_type': 'oscillator',
                                                    'simulation_dt': 0.25})
    runner = DemoRunner(scenario, make_args())

    runner.driver.do_frame(0.0)
    runner.driver.do_frame(0.5)

    assert runner.sim_time == pytest.approx(0.5)
    assert scenario.field.oscillator_time == pytest.approx(0.5)


def test_runner_stops_at_t_final():
    scenario = scenarios.build_scenario('velocity', {'npoints': 20})
    runner = DemoRunner(scenario, make_args(t_final=0.005))

    runner.driver.do_frame(0.0)
    runner.driver.do_frame(1.0)

    assert runner.t_final_reached()
    assert 0.005 <= runner.sim_time < 0.0065
    assert scenario.field.oscillator_time == pytest.approx(runner.sim_time)


def test_runner_schedules_auto_save():
    scenario = scenarios.build_scenario('water', {'npoints': 20, 'simulation_dt': 0.25})
    runner = DemoRunner(scenario, make_args(dt_save=0.5))
    runner.simulate()
    assert not runner._save_pending
    runner.simulate()
    assert runner._save_pending


def test_filename_prefix():
    runner = DemoRunner(scenarios.build_scenario('water', {'npoints': 20}), make_args())
    assert runner.filename_prefix == "water_N20"
    assert DemoRunner(scenarios.build_scenario('orbit'), make_args()).filename_prefix == "orbit"


class KeyEvent:
    def __init__(self, key):
        self.key = key


def test_key_bindings():
    scenario = scenarios.build_scenario('refraction', {'npoints': 20})
    runner = DemoRunner(scenario, make_args())

    runner.on_key_press(KeyEvent(' '))
    assert runner.driver.paused
    runner.on_key_press(KeyEvent(' '))
    assert not runner.driver.paused

    runner.on_key_press(KeyEvent('enter'))
    assert scenario.field.is_pulse_active

    scenario.field.position[:] = 0.2
    runner.on_key_press(KeyEvent('n'))
    assert scenario.field.position.max() == 0.0
