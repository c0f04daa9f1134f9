#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
测试公共夹具
"""

from typing import List, Tuple

import numpy as np
import pytest

from jps_canvas.config.models import CanvasConfig, GridConfig
from jps_canvas.grid.grid_model import GridModel
from jps_canvas.path_planner.pathfinding_client import PathfindingClient
from jps_canvas.service.canvas_session import CanvasSession


def grid_from_rows(rows: List[str]) -> np.ndarray:
    """'#'=障碍，其余=空地；返回 (H, W) uint8"""
    return np.array([[1 if ch == '#' else 0 for ch in row] for row in rows], dtype=np.uint8)


def cell_center_norm(cell: Tuple[int, int], size: Tuple[int, int]) -> Tuple[float, float]:
    """格子中心的归一化坐标"""
    (x, y), (w, h) = cell, size
    return ((x + 0.5) / w, (y + 0.5) / h)


@pytest.fixture
def model() -> GridModel:
    return GridModel(8, 6)


@pytest.fixture
def client() -> PathfindingClient:
    return PathfindingClient()


@pytest.fixture
def make_session():
    def _make(width: int = 20, height: int = 15, **kwargs) -> CanvasSession:
        config = CanvasConfig(grid=GridConfig(width=width, height=height))
        return CanvasSession(config, **kwargs)
    return _make
