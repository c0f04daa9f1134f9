#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
指针事件与坐标转换

前端（鼠标/触摸）事件统一转换为 PointerEvent，坐标归一化到画布显示区域 [0,1)。
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class PointerKind(Enum):
    """指针事件类型"""
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"      # 指针离开窗口
    CANCEL = "cancel"    # 触摸被系统取消


class PointerSource(Enum):
    MOUSE = "mouse"
    TOUCH = "touch"


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    x_norm: float = 0.0
    y_norm: float = 0.0
    source: PointerSource = PointerSource.MOUSE
    button: int = 0          # 鼠标按键，0=左键
    touch_count: int = 1     # 当前触点数量

    @property
    def ends_gesture(self) -> bool:
        return self.kind in (PointerKind.UP, PointerKind.LEAVE, PointerKind.CANCEL)


def display_to_normalized(
    display_pos: Tuple[float, float],
    display_size: Tuple[float, float]
) -> Tuple[float, float]:
    """
    将画布显示区域内的像素坐标转换为归一化坐标

    Args:
        display_pos: 相对画布左上角的像素坐标 (x, y)
        display_size: 画布显示尺寸 (width, height)

    Returns:
        归一化坐标 (x_norm, y_norm)；显示尺寸非法时返回 (-1, -1)
    """
    px, py = display_pos
    dw, dh = display_size
    if dw <= 0 or dh <= 0:
        return (-1.0, -1.0)
    return (px / dw, py / dh)


def pointer_to_cell(
    x_norm: float,
    y_norm: float,
    grid_size: Tuple[int, int]
) -> Optional[Tuple[int, int]]:
    """
    将归一化坐标转换为栅格坐标

    Args:
        x_norm: 归一化x，有效范围 [0, 1)
        y_norm: 归一化y，有效范围 [0, 1)
        grid_size: 栅格尺寸 (width, height)

    Returns:
        栅格坐标 (x, y)；坐标落在画布之外时返回 None
    """
    if not (math.isfinite(x_norm) and math.isfinite(y_norm)):
        return None
    if not (0.0 <= x_norm < 1.0 and 0.0 <= y_norm < 1.0):
        return None

    grid_w, grid_h = grid_size
    gx = min(int(math.floor(x_norm * grid_w)), grid_w - 1)
    gy = min(int(math.floor(y_norm * grid_h)), grid_h - 1)
    return (gx, gy)
