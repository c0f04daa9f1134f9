#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命令行入口测试（只测 headless 模式）
"""

import cv2
import pytest

from jps_canvas.main import main


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "canvas.yaml"
    path.write_text("log:\n  directory: logs\n  level: WARNING\n", encoding="utf-8")
    return path


def test_headless_writes_png(tmp_path, config_file):
    out = tmp_path / "frame.png"
    code = main(["--config", str(config_file), "--width", "6", "--height", "4",
                 "--diagonal", "--headless", str(out), "--log-level", "warning"])
    assert code == 0
    assert (tmp_path / "logs").is_dir()

    image = cv2.imread(str(out))
    assert image.shape == (120, 180, 3)
    assert tuple(int(c) for c in image[2, 2]) == (0, 0, 255)


def test_headless_clamps_size(tmp_path, config_file):
    out = tmp_path / "tiny.png"
    assert main(["--config", str(config_file), "--width", "0", "--height", "2",
                 "--headless", str(out)]) == 0
    assert cv2.imread(str(out)).shape == (60, 30, 3)


def test_bad_config_exits_non_zero(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("grid:\n  width: -5\n", encoding="utf-8")
    assert main(["--config", str(cfg), "--headless", str(tmp_path / "x.png")]) == 2


def test_missing_config_exits_non_zero(tmp_path):
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 2
