#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
jps_canvas 主包

交互式障碍栅格编辑 + 最短路径实时可视化。
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
