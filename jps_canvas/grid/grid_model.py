#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
栅格模型模块：占用栅格 + 起点/终点

- 栅格以 (height, width) 的 uint8 数组保存，0=可通行，1=障碍，行优先
- 起点与终点始终在界内、互不重合、不在障碍上
- 所有非法修改都是静默的空操作（返回 False），不抛异常
"""

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np
from loguru import logger

from jps_canvas.config.models import GRID_MAX_SIZE, GRID_MIN_SIZE

GridCoord = Tuple[int, int]  # (x, y)


def _is_index(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def clamp_dimension(value: Any) -> int:
    """
    将输入框中的尺寸值规整到 [1, 1000]

    非数字、非有限值、小于1的值都视为1；其余向下取整后截断到上限。

    Args:
        value: 任意输入（int / float / str ...）

    Returns:
        合法的栅格尺寸
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return GRID_MIN_SIZE

    if not math.isfinite(number) or number < GRID_MIN_SIZE:
        return GRID_MIN_SIZE

    return min(int(math.floor(number)), GRID_MAX_SIZE)


@dataclass(frozen=True)
class GridSnapshot:
    """某一时刻的栅格快照，作为寻路请求的输入"""
    occupancy: np.ndarray  # 一维，长度 width*height，行优先，只读
    width: int
    height: int
    start: GridCoord
    end: GridCoord


class GridModel:
    """
    占用栅格与起终点的唯一持有者

    示例:
        ```python
        model = GridModel(8, 1)
        model.toggle_obstacle(3, 0)
        model.move_end(6, 0)
        ```
    """

    def __init__(self, width: Any = 20, height: Any = 15):
        self.width_ = GRID_MIN_SIZE
        self.height_ = GRID_MIN_SIZE
        self.grid_ = np.zeros((GRID_MIN_SIZE, GRID_MIN_SIZE), dtype=np.uint8)
        self.start_: GridCoord = (0, 0)
        self.end_: GridCoord = (0, 0)
        self.resize(width, height)

    # ------------------------------------------------------------------
    # 属性
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.width_

    @property
    def height(self) -> int:
        return self.height_

    @property
    def start(self) -> GridCoord:
        return self.start_

    @property
    def end(self) -> GridCoord:
        return self.end_

    @property
    def grid(self) -> np.ndarray:
        """只读视图，形状 (height, width)"""
        view = self.grid_.view()
        view.flags.writeable = False
        return view

    # ------------------------------------------------------------------
    # 修改操作
    # ------------------------------------------------------------------
    def resize(self, width: Any, height: Any) -> Tuple[int, int]:
        """
        重新分配栅格：清空所有障碍，起终点回到左上/右下角

        Args:
            width: 新宽度（会被规整到 [1, 1000]）
            height: 新高度（会被规整到 [1, 1000]）

        Returns:
            实际生效的 (width, height)
        """
        w = clamp_dimension(width)
        h = clamp_dimension(height)

        self.width_ = w
        self.height_ = h
        self.grid_ = np.zeros((h, w), dtype=np.uint8)
        self.start_ = (0, 0)
        # 1x1 栅格只有一个格子，起终点只能重合
        self.end_ = (w - 1, h - 1)

        logger.debug(f"[GridModel] resize: requested=({width}, {height}), actual=({w}, {h})")
        return (w, h)

    def toggle_obstacle(self, x: int, y: int) -> bool:
        """
        翻转 (x, y) 的障碍状态

        Returns:
            是否翻转成功（越界或落在起终点上时为 False）
        """
        if not self._is_editable(x, y):
            return False
        self.grid_[y, x] ^= 1
        return True

    def set_obstacle(self, x: int, y: int, value: int) -> bool:
        """
        把 (x, y) 强制设置为给定值（拖动涂抹时使用）

        Args:
            x: 栅格x
            y: 栅格y
            value: 0 或 1

        Returns:
            格子的值是否真的发生了变化
        """
        if value not in (0, 1):
            return False
        if not self._is_editable(x, y):
            return False
        if self.grid_[y, x] == value:
            return False
        self.grid_[y, x] = int(value)
        return True

    def move_start(self, x: int, y: int) -> bool:
        """
        移动起点；目标必须在界内、可通行且不是终点

        Returns:
            起点是否真的移动了
        """
        if not self._can_place_endpoint(x, y, other=self.end_):
            return False
        if (x, y) == self.start_:
            return False
        self.start_ = (int(x), int(y))
        return True

    def move_end(self, x: int, y: int) -> bool:
        """
        移动终点；目标必须在界内、可通行且不是起点

        Returns:
            终点是否真的移动了
        """
        if not self._can_place_endpoint(x, y, other=self.start_):
            return False
        if (x, y) == self.end_:
            return False
        self.end_ = (int(x), int(y))
        return True

    def clear_obstacles(self) -> bool:
        """清除全部障碍，保留起终点；返回是否有格子被清除"""
        if not self.grid_.any():
            return False
        self.grid_.fill(0)
        return True

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        """整数坐标且在界内；浮点、bool 等一律视为越界"""
        if not _is_index(x) or not _is_index(y):
            return False
        return 0 <= x < self.width_ and 0 <= y < self.height_

    def is_obstacle(self, x: int, y: int) -> Optional[bool]:
        """(x, y) 是否为障碍；越界返回 None"""
        if not self.in_bounds(x, y):
            return None
        return bool(self.grid_[y, x])

    def is_endpoint(self, x: int, y: int) -> bool:
        return (x, y) == self.start_ or (x, y) == self.end_

    def has_distinct_endpoints(self) -> bool:
        return self.start_ != self.end_

    def cell_count(self) -> int:
        return self.width_ * self.height_

    def dimensions(self) -> Tuple[int, int]:
        return (self.width_, self.height_)

    def obstacle_count(self) -> int:
        return int(self.grid_.sum())

    def snapshot(self) -> GridSnapshot:
        """拷贝当前状态，后续编辑不会影响快照"""
        occupancy = self.grid_.reshape(-1).copy()
        occupancy.flags.writeable = False
        return GridSnapshot(
            occupancy=occupancy,
            width=self.width_,
            height=self.height_,
            start=self.start_,
            end=self.end_,
        )

    def to_ascii(self, path: Optional[List[GridCoord]] = None) -> str:
        """
        ASCII 可视化：'#'=障碍, '.'=空地, '*'=路径点, 'S'=起点, 'G'=终点
        """
        vis = np.full((self.height_, self.width_), '.', dtype='<U1')
        vis[self.grid_ == 1] = '#'
        for x, y in path or []:
            if self.in_bounds(x, y):
                vis[y, x] = '*'
        sx, sy = self.start_
        gx, gy = self.end_
        vis[sy, sx] = 'S'
        vis[gy, gx] = 'G'
        return "\n".join("".join(row) for row in vis)

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------
    def _is_editable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and not self.is_endpoint(x, y)

    def _can_place_endpoint(self, x: int, y: int, other: GridCoord) -> bool:
        if not self.in_bounds(x, y):
            return False
        if self.grid_[y, x] != 0:
            return False
        return (x, y) != other
