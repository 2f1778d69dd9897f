import os

import pytest

import config_loader
from cli_parser import get_parser

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'wave_config.ini')


def write_config(tmp_path, text):
    path = tmp_path / "demo.ini"
    path.write_text(text)
    return str(path)


def test_shipped_config_matches_scenario_defaults():
    refraction = config_loader.load_scenario_config(DEFAULT_CONFIG, 'Refraction')
    assert refraction['npoints'] == 400
    assert refraction['density0'] == pytest.approx(0.2)
    assert refraction['input_type'] == 'pulse'

    water = config_loader.load_scenario_config(DEFAULT_CONFIG, 'Water')
    assert water['depth'] == pytest.approx(0.1)

    orbit = config_loader.load_scenario_config(DEFAULT_CONFIG, 'Orbit')
    assert orbit == {'force': 0.0, 'speed': 1.0, 'radius': 1.0, 'mass': 1.0}


def test_shipped_driver_section():
    driver = config_loader.load_driver_config(DEFAULT_CONFIG)
    assert driver['max_frame_dt'] == pytest.approx(1.0)
    assert driver['output_format'] == 'png'
    assert driver['output_dir'] == ''
    assert driver['t_final'] is None


def test_types_and_inline_comments(tmp_path):
    path = write_config(tmp_path, "[Water]\nnpoints = 64   ; points\ndamping = 0.5 # per second\nend_type = fixed\n")
    settings = config_loader.load_scenario_config(path, 'Water')
    assert settings == {'npoints': 64, 'damping': 0.5, 'end_type': 'fixed'}
    assert isinstance(settings['npoints'], int)


def test_invalid_value_becomes_none(tmp_path, capsys):
    path = write_config(tmp_path, "[Velocity]\nnpoints = many\ntension = 0.1\n")
    settings = config_loader.load_scenario_config(path, 'Velocity')
    assert settings['npoints'] is None
    assert settings['tension'] == pytest.approx(0.1)
    assert "invalid value" in capsys.readouterr().out


def test_unknown_key_is_reported(tmp_path, capsys):
    path = write_config(tmp_path, "[Orbit]\nforce = 1.0\ncharge = 3\n")
    settings = config_loader.load_scenario_config(path, 'Orbit')
    assert settings == {'force': 1.0}
    assert "Unknown parameter 'charge'" in capsys.readouterr().out


def test_missing_file_and_section(tmp_path, capsys):
    assert config_loader.load_scenario_config(str(tmp_path / "nope.ini"), 'Water') is None
    assert "not found" in capsys.readouterr().out

    path = write_config(tmp_path, "[Water]\ndepth = 0.3\n")
    assert config_loader.load_scenario_config(path, 'Refraction') is None
    assert "Section [Refraction] not found" in capsys.readouterr().out


def test_missing_driver_section_is_silent(tmp_path, capsys):
    path = write_config(tmp_path, "[Water]\ndepth = 0.3\n")
    assert config_loader.load_driver_config(path) is None
    assert config_loader.load_driver_config(str(tmp_path / "nope.ini")) is None
    assert capsys.readouterr().out == ""


def test_unknown_section_name(capsys):
    assert config_loader.load_scenario_config(DEFAULT_CONFIG, 'Ocean') is None
    assert "Warning" in capsys.readouterr().out


def test_parser_defaults():
    args = get_parser().parse_args([])
    assert args.scenario == 'refraction'
    assert args.npoints is None
    assert args.end_type is None
    assert args.max_frame_dt == pytest.approx(1.0)
    assert args.dt_save == 0.0
    assert args.output_format == 'png'
    assert not args.pulse_on_start
    assert args.config_file == DEFAULT_CONFIG


def test_parse_arguments_reads_sys_argv(monkeypatch):
    from cli_parser import parse_arguments

    monkeypatch.setattr('sys.argv', ['wave-demos', '-s', 'orbit', '--pulse_on_start', '-tf', '2.5'])
    args = parse_arguments()
    assert args.scenario == 'orbit'
    assert args.pulse_on_start
    assert args.t_final == pytest.approx(2.5)


def test_parser_rejects_unknown_choices():
    parser = get_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(['-s', 'tsunami'])
    with pytest.raises(SystemExit):
        parser.parse_args(['-e', 'periodic'])
