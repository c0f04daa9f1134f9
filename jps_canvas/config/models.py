#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
画布配置模型

使用Pydantic定义类型安全的配置模型。所有字段都有默认值，
因此 CanvasConfig() 本身就是一份可用的配置。
"""

import re
from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator

# 栅格尺寸上下限（含）
GRID_MIN_SIZE = 1
GRID_MAX_SIZE = 1000

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


class GridConfig(BaseModel):
    """初始栅格配置"""
    width: int = Field(20, description="栅格宽度（格）")
    height: int = Field(15, description="栅格高度（格）")

    @field_validator('width', 'height')
    @classmethod
    def validate_size(cls, v: int) -> int:
        """验证栅格尺寸"""
        if not GRID_MIN_SIZE <= v <= GRID_MAX_SIZE:
            raise ValueError(f"栅格尺寸必须在{GRID_MIN_SIZE}-{GRID_MAX_SIZE}之间: {v}")
        return v


class PathPlanningConfig(BaseModel):
    """路径规划配置"""
    allow_diagonal: bool = Field(False, description="是否允许8方向移动")
    prevent_corner_cutting: bool = Field(True, description="斜向移动时禁止穿过两个障碍的公共角")
    smoothing: str = Field("none", description="路径后处理方法: 'none' 或 'los'")
    max_expansions: Optional[int] = Field(None, description="单次搜索最多展开的节点数，None 表示不限")

    @field_validator('smoothing')
    @classmethod
    def validate_smoothing(cls, v: str) -> str:
        """验证平滑方法"""
        if v not in ['none', 'los']:
            raise ValueError(f"平滑方法必须是 'none' 或 'los': {v}")
        return v

    @field_validator('max_expansions')
    @classmethod
    def validate_max_expansions(cls, v: Optional[int]) -> Optional[int]:
        """验证搜索预算"""
        if v is not None and v <= 0:
            raise ValueError(f"max_expansions 必须大于0: {v}")
        return v


class RenderConfig(BaseModel):
    """渲染配置"""
    cell_px: int = Field(30, description="每格像素数（视口缩放前）")
    margin_px: int = Field(40, description="视口边距（像素）")
    max_raster_px: int = Field(4096, description="栅格图像长边上限（像素）")
    min_display_scale: float = Field(0.05, description="显示缩放下限，防止视口过小时尺寸为0")
    background_color: str = Field("#ffffff", description="背景色")
    obstacle_color: str = Field("#000000", description="障碍色")
    path_color: str = Field("#d0d000", description="路径格填充色")
    start_color: str = Field("#ff0000", description="起点色")
    end_color: str = Field("#00d000", description="终点色")
    stroke_color: str = Field("#0000d0", description="路径连线色")
    stroke_width: int = Field(3, description="路径连线宽度（像素，按30px/格计）")
    show_smoothed_path: bool = Field(False, description="是否叠加显示平滑后的路径")
    smoothed_color: str = Field("#00a0ff", description="平滑路径连线色")
    smoothed_width: int = Field(1, description="平滑路径连线宽度")

    @field_validator('cell_px', 'max_raster_px', 'stroke_width', 'smoothed_width')
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """验证正整数"""
        if v <= 0:
            raise ValueError(f"值必须大于0: {v}")
        return v

    @field_validator('margin_px')
    @classmethod
    def validate_margin(cls, v: int) -> int:
        """验证边距"""
        if v < 0:
            raise ValueError(f"边距不能为负数: {v}")
        return v

    @field_validator('min_display_scale')
    @classmethod
    def validate_min_display_scale(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"min_display_scale 必须大于0: {v}")
        return v

    @field_validator(
        'background_color', 'obstacle_color', 'path_color', 'start_color',
        'end_color', 'stroke_color', 'smoothed_color'
    )
    @classmethod
    def validate_color(cls, v: str) -> str:
        """验证颜色格式 #rrggbb"""
        if not _HEX_COLOR_RE.match(v):
            raise ValueError(f"颜色必须是 #rrggbb 格式: {v}")
        return v.lower()


class UiConfig(BaseModel):
    """UI配置"""
    title: str = Field("JPS Canvas", description="窗口标题")
    window_size: Tuple[int, int] = Field((960, 720), description="初始窗口尺寸 (width, height)")
    panel_width: int = Field(220, description="左侧控制面板宽度（像素）")

    @field_validator('window_size')
    @classmethod
    def validate_window_size(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        width, height = v
        if width <= 0 or height <= 0:
            raise ValueError(f"窗口尺寸必须大于0: {v}")
        return v


class LogConfig(BaseModel):
    """日志配置"""
    level: str = Field("INFO", description="日志级别")
    directory: str = Field("Logs", description="日志目录（相对路径按配置文件所在目录解析）")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']:
            raise ValueError(f"未知日志级别: {v}")
        return level


class CanvasConfig(BaseModel):
    """画布主配置"""
    grid: GridConfig = Field(default_factory=GridConfig, description="栅格配置")
    path_planning: PathPlanningConfig = Field(default_factory=PathPlanningConfig, description="路径规划配置")
    render: RenderConfig = Field(default_factory=RenderConfig, description="渲染配置")
    ui: UiConfig = Field(default_factory=UiConfig, description="UI配置")
    log: LogConfig = Field(default_factory=LogConfig, description="日志配置")
