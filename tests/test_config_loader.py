#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
配置加载测试
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from jps_canvas.common.exceptions import ConfigurationError
from jps_canvas.config import CanvasConfig, GridConfig, RenderConfig, load_config
from jps_canvas.utils.global_path import GetConfigPath

BUNDLED = Path(__file__).resolve().parent.parent / "config" / "jps_canvas.yaml"


def test_bundled_config_matches_defaults():
    config = load_config(BUNDLED)
    defaults = CanvasConfig()
    assert config.grid == defaults.grid
    assert config.path_planning == defaults.path_planning
    assert config.render == defaults.render
    assert config.ui == defaults.ui
    assert config.log.level == "INFO"
    assert Path(config.log.directory).is_absolute()


def test_default_config_path_layout():
    path = GetConfigPath()
    assert path.name == "jps_canvas.yaml"
    assert path.parent.name == "config"


def test_partial_config_fills_defaults(tmp_path):
    path = tmp_path / "canvas.yaml"
    path.write_text("grid:\n  width: 40\nrender:\n  path_color: '#ABCDEF'\n", encoding="utf-8")
    config = load_config(path)
    assert config.grid.width == 40
    assert config.grid.height == 15
    assert config.render.path_color == "#abcdef"
    assert config.path_planning.smoothing == "none"


def test_relative_log_directory_resolved_against_base(tmp_path):
    path = tmp_path / "canvas.yaml"
    path.write_text("log:\n  directory: my_logs\n  level: debug\n", encoding="utf-8")
    config = load_config(path)
    assert Path(config.log.directory) == (tmp_path / "my_logs").resolve()
    assert config.log.level == "DEBUG"


@pytest.mark.parametrize("text", [
    "grid:\n  width: 0\n",
    "grid:\n  height: 1001\n",
    "path_planning:\n  smoothing: bezier\n",
    "path_planning:\n  max_expansions: 0\n",
    "render:\n  start_color: red\n",
    "log:\n  level: LOUD\n",
    "- just\n- a list\n",
    "",
])
def test_bad_config_raises_configuration_error(tmp_path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_broken_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("grid: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_config(path)


def test_models_validate_directly():
    with pytest.raises(ValidationError):
        GridConfig(width=-1)
    with pytest.raises(ValidationError):
        RenderConfig(cell_px=0)
