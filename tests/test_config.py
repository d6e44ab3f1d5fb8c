import json

import pytest

from lenticalib.config import (
    CalibrationConfig,
    ConfigurationError,
    ProjectionMode,
    load_calibration_config,
    parse_calibration_config,
)


def test_parse_config_ok():
    cfg = parse_calibration_config(
        {
            "schema_version": "lenticalib.config.v0",
            "h_res": 1920,
            "v_res": 1080,
            "screen_diagonal_in": 24,
            "lenticular_lpi": 40.0,
            "viewpoint": [0.1, -0.2, 2],
            "projection_mode": "simple",
            "lock_params": True,
        }
    )
    assert cfg.h_res == 1920
    assert cfg.screen_diagonal_in == 24.0
    assert cfg.viewpoint == (0.1, -0.2, 2.0)
    assert cfg.projection_mode is ProjectionMode.SIMPLE
    assert cfg.lock_params is True
    # Unspecified keys keep their defaults.
    assert cfg.lenticular_offset == 0.5
    assert cfg.upscale == 1


def test_to_dict_parses_back():
    cfg = CalibrationConfig(h_res=800, v_res=600, viewpoint=(0.0, 0.1, 3.0), debug_print=True)
    assert parse_calibration_config(cfg.to_dict()) == cfg


@pytest.mark.parametrize(
    "patch",
    [
        {"schema_version": "lenticalib.config.v1"},
        {"h_res": 1024.5},
        {"h_res": True},
        {"upscale": "2"},
        {"lenticular_lpi": "thirty"},
        {"lock_params": 1},
        {"viewpoint": [0.0, 1.5]},
        {"viewpoint": [0.0, "a", 1.5]},
        {"projection_mode": "orthographic"},
        {"screen_size": 15.4},
    ],
)
def test_parse_config_rejects(patch):
    data = {"schema_version": "lenticalib.config.v0", **patch}
    with pytest.raises(ConfigurationError):
        parse_calibration_config(data)


def test_parse_does_not_range_check():
    # Range checks belong to the compute step.
    cfg = parse_calibration_config({"schema_version": "lenticalib.config.v0", "h_res": 0, "far_clip": -1.0})
    assert cfg.h_res == 0
    assert cfg.far_clip == -1.0


def test_load_config_file(tmp_path):
    p = tmp_path / "display.json"
    p.write_text(json.dumps({"schema_version": "lenticalib.config.v0", "lenticular_lpi": 50}), encoding="utf-8")
    assert load_calibration_config(p).lenticular_lpi == 50.0

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_calibration_config(bad)


def test_replace_returns_copy():
    cfg = CalibrationConfig()
    other = cfg.replace(upscale=4)
    assert other.upscale == 4
    assert cfg.upscale == 1
