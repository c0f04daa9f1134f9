#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
寻路客户端：校验请求、调用寻路引擎、可选平滑

负责把 GridModel 的快照（或任意 0/1 序列）转换为引擎输入，
对格式错误抛 PathfindingInputError，对无路径返回空列表。
"""

import time
from typing import Any, List, Optional

import numpy as np
from loguru import logger

from jps_canvas.common.exceptions import (
    OracleUnavailableError,
    PathfindingInputError,
    SearchBudgetExceededError,
)
from jps_canvas.config.models import PathPlanningConfig
from jps_canvas.path_planner.jps_planner import JumpPointPlanner, PathOracle
from jps_canvas.path_planner.map_model import GridCoord, PlanRequest, PlanResult
from jps_canvas.path_planner.path_smoothing import smooth_path_los


def _is_integer(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))


def build_occupancy_grid(occupancy: Any, width: Any, height: Any) -> np.ndarray:
    """
    把 0/1 序列整理为 (height, width) 的 uint8 数组

    Args:
        occupancy: 行优先的一维序列（list / bytes / ndarray），也接受形状正确的二维数组
        width: 栅格宽度
        height: 栅格高度

    Returns:
        (height, width) uint8 数组

    Raises:
        PathfindingInputError: 尺寸非正、长度不匹配或含有 0/1 以外的值
    """
    if not _is_integer(width) or not _is_integer(height) or width <= 0 or height <= 0:
        raise PathfindingInputError(f"栅格尺寸必须为正整数: width={width!r}, height={height!r}")

    if isinstance(occupancy, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(occupancy, dtype=np.uint8)
    else:
        arr = np.asarray(occupancy)

    if arr.ndim == 2 and arr.shape == (height, width):
        arr = arr.reshape(-1)
    if arr.ndim != 1 or arr.size != width * height:
        raise PathfindingInputError(
            f"占用数据长度不匹配: 期望 {width * height}，实际 {arr.size} (shape={arr.shape})"
        )
    if arr.dtype != np.bool_ and not np.issubdtype(arr.dtype, np.number):
        raise PathfindingInputError(f"占用数据类型非法: {arr.dtype}")
    if arr.size and not np.isin(arr, (0, 1)).all():
        raise PathfindingInputError("占用数据只能包含 0 和 1")

    return arr.astype(np.uint8).reshape(height, width)


def _check_endpoint(name: str, point: Any, width: int, height: int) -> GridCoord:
    try:
        x, y = point
    except (TypeError, ValueError):
        raise PathfindingInputError(f"{name} 必须是 (x, y): {point!r}")
    if not _is_integer(x) or not _is_integer(y):
        raise PathfindingInputError(f"{name} 坐标必须为整数: {point!r}")
    if not (0 <= x < width and 0 <= y < height):
        raise PathfindingInputError(f"{name} 越界: {point!r}, 栅格大小 {width}x{height}")
    return (int(x), int(y))


class PathfindingClient:
    """寻路引擎的唯一调用入口"""

    def __init__(self, oracle: Optional[PathOracle] = None,
                 config: Optional[PathPlanningConfig] = None):
        """
        Args:
            oracle: 寻路引擎，None 时使用内置 JumpPointPlanner
            config: 路径规划配置

        Raises:
            OracleUnavailableError: 引擎不提供 Plan 方法
        """
        self.config_ = config or PathPlanningConfig()
        if oracle is None:
            oracle = JumpPointPlanner(max_expansions=self.config_.max_expansions)
        if not callable(getattr(oracle, "Plan", None)):
            raise OracleUnavailableError(f"寻路引擎不可用: {type(oracle).__name__}")
        self.oracle_ = oracle
        logger.info(f"[PathfindingClient] 使用寻路引擎: {type(oracle).__name__}, "
                    f"smoothing={self.config_.smoothing}")

    # ------------------------------------------------------------------
    # 对外接口
    # ------------------------------------------------------------------
    def compute_path(self, occupancy: Any, width: int, height: int,
                     start: GridCoord, end: GridCoord,
                     allow_diagonal: bool, prevent_corner_cutting: bool) -> List[GridCoord]:
        """
        计算跳点路径

        Returns:
            从 start 到 end 的跳点列表；不可达时为空列表

        Raises:
            PathfindingInputError: 请求格式错误
        """
        request = PlanRequest(
            occupancy=occupancy,
            width=width,
            height=height,
            start=start,
            goal=end,
            allow_diagonal=allow_diagonal,
            prevent_corner_cutting=prevent_corner_cutting,
        )
        return self.plan(request).path

    def compute_path_for(self, model, allow_diagonal: bool,
                         prevent_corner_cutting: bool) -> List[GridCoord]:
        """以 GridModel 的当前状态计算路径"""
        snapshot = model.snapshot()
        return self.compute_path(
            snapshot.occupancy, snapshot.width, snapshot.height,
            snapshot.start, snapshot.end,
            allow_diagonal, prevent_corner_cutting,
        )

    def plan(self, request: PlanRequest) -> PlanResult:
        """
        执行一次完整规划（校验 + 搜索 + 可选平滑）

        Raises:
            PathfindingInputError: 请求格式错误
        """
        grid = build_occupancy_grid(request.occupancy, request.width, request.height)
        start = _check_endpoint("start", request.start, request.width, request.height)
        goal = _check_endpoint("end", request.goal, request.width, request.height)

        t0 = time.perf_counter()
        try:
            path = self.oracle_.Plan(
                grid, start, goal,
                allow_diagonal=bool(request.allow_diagonal),
                prevent_corner_cutting=bool(request.prevent_corner_cutting),
            )
        except SearchBudgetExceededError as e:
            elapsed_ms = (time.perf_counter() - t0) * 1000.0
            logger.warning(f"[PathfindingClient] 搜索放弃: {e}, start={start}, goal={goal}")
            return PlanResult(ok=False, path=[], reason="budget_exceeded",
                              nodes_expanded=self._NodesExpanded(), elapsed_ms=elapsed_ms)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        path = [(int(x), int(y)) for x, y in path]
        nodes_expanded = self._NodesExpanded()

        if not path:
            logger.debug(f"[PathfindingClient] 无路径: start={start}, goal={goal}, "
                         f"耗时 {elapsed_ms:.2f}ms")
            return PlanResult(ok=False, path=[], reason="unreachable",
                              nodes_expanded=nodes_expanded, elapsed_ms=elapsed_ms)

        smoothed: List[GridCoord] = []
        if self.config_.smoothing == "los":
            strict = bool(request.prevent_corner_cutting) or not request.allow_diagonal
            smoothed = smooth_path_los(path, grid, strict_corners=strict)

        logger.debug(f"[PathfindingClient] 规划完成: {len(path)} 个跳点, "
                     f"展开 {nodes_expanded} 个节点, 耗时 {elapsed_ms:.2f}ms")
        return PlanResult(ok=True, path=path, smoothed_path=smoothed,
                          nodes_expanded=nodes_expanded, elapsed_ms=elapsed_ms)

    def _NodesExpanded(self) -> int:
        return int(getattr(self.oracle_, "last_nodes_expanded_", 0))
