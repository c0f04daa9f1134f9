#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
自定义异常类：定义画布模块的专用异常
"""


class CanvasError(Exception):
    """画布模块基础异常类"""
    pass


class PathPlanningError(CanvasError):
    """路径规划失败异常"""
    pass


class PathfindingInputError(PathPlanningError):
    """寻路请求格式错误（尺寸不匹配、端点越界等）"""
    pass


class OracleUnavailableError(PathPlanningError):
    """寻路引擎不可用（启动时即视为致命错误）"""
    pass


class SearchBudgetExceededError(PathPlanningError):
    """单次搜索展开节点数超过预算"""
    pass


class ConfigurationError(CanvasError):
    """配置错误异常"""
    pass
