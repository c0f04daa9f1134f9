#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
画布配置模块

提供类型安全的配置管理和验证。
"""

from .models import (
    CanvasConfig,
    GridConfig,
    PathPlanningConfig,
    RenderConfig,
    UiConfig,
    LogConfig,
    GRID_MIN_SIZE,
    GRID_MAX_SIZE,
)
from .loader import load_config

__all__ = [
    'CanvasConfig',
    'GridConfig',
    'PathPlanningConfig',
    'RenderConfig',
    'UiConfig',
    'LogConfig',
    'GRID_MIN_SIZE',
    'GRID_MAX_SIZE',
    'load_config'
]
