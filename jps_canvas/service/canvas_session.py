#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
画布会话：编辑 -> 寻路 -> 重绘 的编排者

持有唯一的 GridModel / 状态机 / 寻路客户端 / 渲染器 / PathHub，
以及移动设置（是否斜向、是否禁止擦角）。
"""

from typing import Any, Callable, List, Optional, Tuple

from loguru import logger

from jps_canvas.common.exceptions import PathfindingInputError
from jps_canvas.config.models import CanvasConfig
from jps_canvas.grid.grid_model import GridCoord, GridModel
from jps_canvas.interaction.pointer_events import PointerEvent
from jps_canvas.interaction.state_machine import InteractionMode, InteractionStateMachine
from jps_canvas.path_planner.map_model import PlanRequest, PlanResult
from jps_canvas.path_planner.pathfinding_client import PathfindingClient
from jps_canvas.render.grid_renderer import GridRenderer, RenderedFrame
from jps_canvas.service.data_hub import PathHub

FrameListener = Callable[[RenderedFrame], None]


class CanvasSession:
    """
    会话对象，UI 层只和它打交道

    示例:
        ```python
        session = CanvasSession(CanvasConfig())
        session.set_grid_size(8, 1)
        session.path  # [(0, 0), (7, 0)]
        ```
    """

    def __init__(self, config: Optional[CanvasConfig] = None,
                 client: Optional[PathfindingClient] = None,
                 renderer: Optional[GridRenderer] = None):
        """
        Args:
            config: 画布配置，None 时使用默认值
            client: 寻路客户端，None 时按配置创建

        Raises:
            OracleUnavailableError: 寻路引擎不可用
        """
        self.config_ = config or CanvasConfig()

        self.model_ = GridModel(self.config_.grid.width, self.config_.grid.height)
        self.state_machine_ = InteractionStateMachine(self.model_)
        self.client_ = client or PathfindingClient(config=self.config_.path_planning)
        self.renderer_ = renderer or GridRenderer(self.config_.render)
        self.hub_ = PathHub()

        self.allow_diagonal_ = self.config_.path_planning.allow_diagonal
        self.prevent_corner_cutting_ = self.config_.path_planning.prevent_corner_cutting
        self.viewport_: Tuple[float, float] = tuple(self.config_.ui.window_size)

        self.frame_listeners_: List[FrameListener] = []
        self.last_frame_: Optional[RenderedFrame] = None
        self.last_result_: Optional[PlanResult] = None

        logger.info(f"[CanvasSession] 初始化: grid={self.model_.dimensions()}, "
                    f"diagonal={self.allow_diagonal_}, "
                    f"prevent_corner_cutting={self.prevent_corner_cutting_}")
        self.recompute()
        self.redraw()

    # ------------------------------------------------------------------
    # 属性
    # ------------------------------------------------------------------
    @property
    def model(self) -> GridModel:
        return self.model_

    @property
    def path(self) -> List[GridCoord]:
        return self.hub_.current_path()

    @property
    def smoothed_path(self) -> List[GridCoord]:
        snap = self.hub_.latest()
        return list(snap.smoothed) if snap is not None else []

    @property
    def allow_diagonal(self) -> bool:
        return self.allow_diagonal_

    @property
    def prevent_corner_cutting(self) -> bool:
        return self.prevent_corner_cutting_

    @property
    def interaction_mode(self) -> InteractionMode:
        return self.state_machine_.mode

    @property
    def viewport(self) -> Tuple[float, float]:
        return self.viewport_

    @property
    def last_frame(self) -> Optional[RenderedFrame]:
        return self.last_frame_

    @property
    def last_result(self) -> Optional[PlanResult]:
        return self.last_result_

    def add_frame_listener(self, listener: FrameListener) -> None:
        """注册重绘回调，每次 redraw 后调用"""
        self.frame_listeners_.append(listener)

    # ------------------------------------------------------------------
    # 用户输入
    # ------------------------------------------------------------------
    def handle_pointer(self, event: PointerEvent) -> bool:
        """
        处理指针事件；模型有变化时重新寻路并重绘

        Returns:
            模型是否发生变化
        """
        changed = self.state_machine_.handle_event(event)
        if changed:
            self._refresh()
        return changed

    def set_grid_size(self, width: Any, height: Any) -> Tuple[int, int]:
        """
        修改栅格尺寸（输入会被规整到 [1, 1000]），进行中的手势被取消

        Returns:
            实际生效的 (width, height)
        """
        self.state_machine_.reset()
        size = self.model_.resize(width, height)
        # 旧尺寸下的路径不再有效
        self.hub_.clear()
        logger.info(f"[CanvasSession] 栅格尺寸: {size[0]}x{size[1]}")
        self._refresh()
        return size

    def set_allow_diagonal(self, enabled: bool) -> bool:
        enabled = bool(enabled)
        if enabled == self.allow_diagonal_:
            return False
        self.allow_diagonal_ = enabled
        logger.info(f"[CanvasSession] 斜向移动: {enabled}")
        self._refresh()
        return True

    def set_prevent_corner_cutting(self, enabled: bool) -> bool:
        enabled = bool(enabled)
        if enabled == self.prevent_corner_cutting_:
            return False
        self.prevent_corner_cutting_ = enabled
        logger.info(f"[CanvasSession] 禁止擦角: {enabled}")
        self._refresh()
        return True

    def clear_obstacles(self) -> bool:
        """清除全部障碍；有变化时重新寻路并重绘"""
        self.state_machine_.reset()
        if not self.model_.clear_obstacles():
            return False
        self._refresh()
        return True

    def set_viewport(self, width: float, height: float) -> RenderedFrame:
        """视口尺寸变化只重绘，不重新寻路"""
        self.viewport_ = (float(width), float(height))
        return self.redraw()

    # ------------------------------------------------------------------
    # 寻路 / 重绘
    # ------------------------------------------------------------------
    def recompute(self) -> List[GridCoord]:
        """
        以当前模型和移动设置重新寻路，并发布到 PathHub

        请求格式错误时记录错误，本次编辑的路径视为空。
        """
        request_id = self.hub_.next_request_id()
        snapshot = self.model_.snapshot()
        request = PlanRequest(
            occupancy=snapshot.occupancy,
            width=snapshot.width,
            height=snapshot.height,
            start=snapshot.start,
            goal=snapshot.end,
            allow_diagonal=self.allow_diagonal_,
            prevent_corner_cutting=self.prevent_corner_cutting_,
        )

        try:
            result = self.client_.plan(request)
        except PathfindingInputError as e:
            logger.error(f"[CanvasSession] 寻路请求非法: {e}")
            result = PlanResult(ok=False, path=[], reason="input_error")

        self.last_result_ = result
        self.hub_.publish(request_id, result.path, result.smoothed_path)
        return list(result.path)

    def redraw(self) -> RenderedFrame:
        snap = self.hub_.latest()
        path = snap.grid if snap is not None else []
        smoothed = snap.smoothed if snap is not None else []

        frame = self.renderer_.Render(self.model_, path, self.viewport_, smoothed_path=smoothed)
        self.last_frame_ = frame
        for listener in self.frame_listeners_:
            listener(frame)
        return frame

    def _refresh(self) -> None:
        self.recompute()
        self.redraw()
