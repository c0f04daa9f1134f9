#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
交互状态机模块

把一次拖动手势解释为对 GridModel 的修改：
- 在终点上按下：拖动终点（终点优先于起点判断）
- 在起点上按下：拖动起点
- 在其他格子上按下：翻转该格，之后拖过的格子都涂成翻转后的值
"""

from enum import Enum
from typing import Optional

from loguru import logger

from jps_canvas.grid.grid_model import GridCoord, GridModel
from jps_canvas.interaction.pointer_events import (
    PointerEvent,
    PointerKind,
    PointerSource,
    pointer_to_cell,
)


class InteractionMode(Enum):
    """手势状态枚举"""
    IDLE = "idle"
    PAINT = "paint"
    MOVE_START = "move_start"
    MOVE_END = "move_end"


class InteractionStateMachine:
    """手势状态机；只修改模型，不负责寻路与重绘"""

    def __init__(self, model: GridModel):
        self.model_ = model
        self.mode_ = InteractionMode.IDLE
        self.paint_value_: Optional[int] = None

    @property
    def mode(self) -> InteractionMode:
        return self.mode_

    @property
    def paint_value(self) -> Optional[int]:
        """PAINT 状态下涂抹的值，其他状态为 None"""
        return self.paint_value_

    def reset(self) -> None:
        """强制回到 IDLE（控件变更、窗口失焦时调用）"""
        self._set_mode(InteractionMode.IDLE)

    # ------------------------------------------------------------------
    # 手势
    # ------------------------------------------------------------------
    def pointer_down(self, x_norm: float, y_norm: float) -> bool:
        """
        手势开始

        Args:
            x_norm: 归一化x
            y_norm: 归一化y

        Returns:
            模型是否发生变化
        """
        cell = self._to_cell(x_norm, y_norm)
        if cell is None:
            return False

        if cell == self.model_.end:
            self._set_mode(InteractionMode.MOVE_END)
            return False
        if cell == self.model_.start:
            self._set_mode(InteractionMode.MOVE_START)
            return False

        if not self.model_.toggle_obstacle(*cell):
            return False
        value = 1 if self.model_.is_obstacle(*cell) else 0
        self._set_mode(InteractionMode.PAINT, value)
        return True

    def pointer_move(self, x_norm: float, y_norm: float) -> bool:
        """手势继续；返回模型是否发生变化"""
        if self.mode_ is InteractionMode.IDLE:
            return False
        cell = self._to_cell(x_norm, y_norm)
        if cell is None:
            return False

        if self.mode_ is InteractionMode.MOVE_START:
            return self.model_.move_start(*cell)
        if self.mode_ is InteractionMode.MOVE_END:
            return self.model_.move_end(*cell)
        if self.model_.is_endpoint(*cell):
            return False
        return self.model_.set_obstacle(cell[0], cell[1], self.paint_value_)

    def pointer_up(self) -> bool:
        """手势结束，不修改模型"""
        self.reset()
        return False

    def handle_event(self, event: PointerEvent) -> bool:
        """
        分发一个指针事件

        Returns:
            模型是否发生变化
        """
        if event.ends_gesture:
            return self.pointer_up()

        if event.source is PointerSource.TOUCH and event.touch_count != 1:
            return False

        if event.kind is PointerKind.DOWN:
            if event.source is PointerSource.MOUSE and event.button != 0:
                return False
            return self.pointer_down(event.x_norm, event.y_norm)
        if event.kind is PointerKind.MOVE:
            return self.pointer_move(event.x_norm, event.y_norm)
        return False

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------
    def _to_cell(self, x_norm: float, y_norm: float) -> Optional[GridCoord]:
        return pointer_to_cell(x_norm, y_norm, self.model_.dimensions())

    def _set_mode(self, mode: InteractionMode, paint_value: Optional[int] = None) -> None:
        if mode is not self.mode_ or paint_value != self.paint_value_:
            logger.debug(f"[InteractionStateMachine] 状态切换: {self.mode_.value} -> {mode.value}"
                         + (f" (paint={paint_value})" if paint_value is not None else ""))
        self.mode_ = mode
        self.paint_value_ = paint_value if mode is InteractionMode.PAINT else None
