#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
跳点搜索（Jump Point Search）规划器

在均匀代价栅格上求最短路径，返回跳点序列（相邻跳点之间为直线段）。
支持三种移动方式：
- 仅四方向
- 八方向，允许擦角（两个正交格都为障碍时仍可斜穿）
- 八方向，禁止擦角（斜向移动时两个正交格至多一个为障碍）

跳跃过程全部迭代实现，1000x1000 的栅格也不会触发递归深度限制。
"""

import heapq
import math
from enum import Enum
from typing import Dict, List, Optional, Protocol, Set, Tuple

import numpy as np
from loguru import logger

from jps_canvas.common.exceptions import SearchBudgetExceededError

Coord = Tuple[int, int]

SQRT2 = math.sqrt(2.0)


class MovementMode(Enum):
    """移动方式"""
    ORTHOGONAL = "orthogonal"
    DIAGONAL = "diagonal"
    DIAGONAL_NO_CORNER_CUT = "diagonal_no_corner_cut"

    @classmethod
    def from_flags(cls, allow_diagonal: bool, prevent_corner_cutting: bool) -> "MovementMode":
        if not allow_diagonal:
            return cls.ORTHOGONAL
        if prevent_corner_cutting:
            return cls.DIAGONAL_NO_CORNER_CUT
        return cls.DIAGONAL


class PathOracle(Protocol):
    """寻路引擎接口：grid 为 (H, W) 数组，0=可通行，1=障碍"""

    def Plan(self, grid: np.ndarray, start: Coord, goal: Coord,
             allow_diagonal: bool = False,
             prevent_corner_cutting: bool = True) -> List[Coord]:
        ...


def octile_distance(a: Coord, b: Coord) -> float:
    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    return max(dx, dy) + (SQRT2 - 1.0) * min(dx, dy)


def manhattan_distance(a: Coord, b: Coord) -> float:
    return float(abs(a[0] - b[0]) + abs(a[1] - b[1]))


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class JumpPointPlanner:
    """
    跳点搜索规划器

    open 表按 (f, h, 入队序号) 排序，同一输入总是得到同一条路径。
    """

    def __init__(self, max_expansions: Optional[int] = None):
        """
        Args:
            max_expansions: 单次搜索允许展开的最大节点数，None 表示不限
                跳跃过程中扫描的格子不计入该上限
        """
        self.max_expansions_ = max_expansions
        self.last_nodes_expanded_ = 0

        self.width_ = 0
        self.height_ = 0
        self.walkable_: List[List[bool]] = []
        self.goal_: Coord = (0, 0)
        self.mode_ = MovementMode.ORTHOGONAL

    def Plan(self, grid: np.ndarray, start: Coord, goal: Coord,
             allow_diagonal: bool = False,
             prevent_corner_cutting: bool = True) -> List[Coord]:
        """
        搜索 start 到 goal 的最短路径

        Args:
            grid: (H, W) 栅格，0=可通行，1=障碍
            start: 起点 (x, y)
            goal: 终点 (x, y)
            allow_diagonal: 是否允许斜向移动
            prevent_corner_cutting: 斜向移动时是否禁止擦角

        Returns:
            跳点列表（含起终点）；不可达时为空列表

        Raises:
            ValueError: grid 不是二维数组
            SearchBudgetExceededError: 展开节点数超过 max_expansions
        """
        grid = np.asarray(grid)
        if grid.ndim != 2:
            raise ValueError(f"grid 必须是二维数组，实际维度: {grid.ndim}")

        self.height_, self.width_ = grid.shape
        self.walkable_ = (grid == 0).tolist()
        self.goal_ = (int(goal[0]), int(goal[1]))
        self.mode_ = MovementMode.from_flags(allow_diagonal, prevent_corner_cutting)
        self.last_nodes_expanded_ = 0

        start = (int(start[0]), int(start[1]))
        goal = self.goal_

        if not self._Walkable(*start) or not self._Walkable(*goal):
            return []
        if start == goal:
            return [start]

        heuristic = manhattan_distance if self.mode_ is MovementMode.ORTHOGONAL else octile_distance

        g_score: Dict[Coord, float] = {start: 0.0}
        parent: Dict[Coord, Optional[Coord]] = {start: None}
        closed: Set[Coord] = set()
        counter = 0
        h0 = heuristic(start, goal)
        open_heap = [(h0, h0, counter, start)]

        while open_heap:
            _, _, _, node = heapq.heappop(open_heap)
            if node in closed:
                continue
            closed.add(node)
            self.last_nodes_expanded_ += 1

            if node == goal:
                return self._CompressCollinear(self._Backtrace(parent, goal))

            if self.max_expansions_ is not None and self.last_nodes_expanded_ > self.max_expansions_:
                raise SearchBudgetExceededError(
                    f"展开节点数超过上限 {self.max_expansions_}"
                )

            for nx, ny in self._FindNeighbors(node, parent[node]):
                jump_point = self._Jump(nx, ny, nx - node[0], ny - node[1])
                if jump_point is None or jump_point in closed:
                    continue

                tentative = g_score[node] + octile_distance(node, jump_point)
                if tentative < g_score.get(jump_point, math.inf):
                    g_score[jump_point] = tentative
                    parent[jump_point] = node
                    h = heuristic(jump_point, goal)
                    counter += 1
                    heapq.heappush(open_heap, (tentative + h, h, counter, jump_point))

        logger.debug(f"[JumpPointPlanner] 无路径: start={start}, goal={goal}, "
                     f"expanded={self.last_nodes_expanded_}")
        return []

    # ------------------------------------------------------------------
    # 栅格查询
    # ------------------------------------------------------------------
    def _Walkable(self, x: int, y: int) -> bool:
        return 0 <= x < self.width_ and 0 <= y < self.height_ and self.walkable_[y][x]

    def _CanStepDiagonal(self, x: int, y: int, dx: int, dy: int) -> bool:
        """从 (x, y) 向 (dx, dy) 斜走一步是否合法（目标格本身另行判断）"""
        if self.mode_ is MovementMode.DIAGONAL:
            return True
        return self._Walkable(x + dx, y) or self._Walkable(x, y + dy)

    # ------------------------------------------------------------------
    # 邻居裁剪
    # ------------------------------------------------------------------
    def _FindNeighbors(self, node: Coord, parent: Optional[Coord]) -> List[Coord]:
        x, y = node
        walk = self._Walkable
        neighbors: List[Coord] = []

        if parent is None:
            for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
                if walk(x + dx, y + dy):
                    neighbors.append((x + dx, y + dy))
            if self.mode_ is not MovementMode.ORTHOGONAL:
                for dx, dy in ((-1, -1), (1, -1), (1, 1), (-1, 1)):
                    if walk(x + dx, y + dy) and self._CanStepDiagonal(x, y, dx, dy):
                        neighbors.append((x + dx, y + dy))
            return neighbors

        dx = _sign(x - parent[0])
        dy = _sign(y - parent[1])

        if self.mode_ is MovementMode.ORTHOGONAL:
            if dx != 0:
                candidates = ((x, y - 1), (x, y + 1), (x + dx, y))
            else:
                candidates = ((x - 1, y), (x + 1, y), (x, y + dy))
            return [c for c in candidates if walk(*c)]

        if self.mode_ is MovementMode.DIAGONAL:
            if dx != 0 and dy != 0:
                if walk(x, y + dy):
                    neighbors.append((x, y + dy))
                if walk(x + dx, y):
                    neighbors.append((x + dx, y))
                if walk(x + dx, y + dy):
                    neighbors.append((x + dx, y + dy))
                if not walk(x - dx, y) and walk(x - dx, y + dy):
                    neighbors.append((x - dx, y + dy))
                if not walk(x, y - dy) and walk(x + dx, y - dy):
                    neighbors.append((x + dx, y - dy))
            elif dx != 0:
                if walk(x + dx, y):
                    neighbors.append((x + dx, y))
                if not walk(x, y + 1) and walk(x + dx, y + 1):
                    neighbors.append((x + dx, y + 1))
                if not walk(x, y - 1) and walk(x + dx, y - 1):
                    neighbors.append((x + dx, y - 1))
            else:
                if walk(x, y + dy):
                    neighbors.append((x, y + dy))
                if not walk(x + 1, y) and walk(x + 1, y + dy):
                    neighbors.append((x + 1, y + dy))
                if not walk(x - 1, y) and walk(x - 1, y + dy):
                    neighbors.append((x - 1, y + dy))
            return neighbors

        # 禁止擦角
        if dx != 0 and dy != 0:
            walk_y = walk(x, y + dy)
            walk_x = walk(x + dx, y)
            if walk_y:
                neighbors.append((x, y + dy))
            if walk_x:
                neighbors.append((x + dx, y))
            if (walk_x or walk_y) and walk(x + dx, y + dy):
                neighbors.append((x + dx, y + dy))
            if not walk(x - dx, y) and walk_y and walk(x - dx, y + dy):
                neighbors.append((x - dx, y + dy))
            if not walk(x, y - dy) and walk_x and walk(x + dx, y - dy):
                neighbors.append((x + dx, y - dy))
        elif dx != 0:
            if walk(x + dx, y):
                neighbors.append((x + dx, y))
                if not walk(x, y + 1) and walk(x + dx, y + 1):
                    neighbors.append((x + dx, y + 1))
                if not walk(x, y - 1) and walk(x + dx, y - 1):
                    neighbors.append((x + dx, y - 1))
        else:
            if walk(x, y + dy):
                neighbors.append((x, y + dy))
                if not walk(x + 1, y) and walk(x + 1, y + dy):
                    neighbors.append((x + 1, y + dy))
                if not walk(x - 1, y) and walk(x - 1, y + dy):
                    neighbors.append((x - 1, y + dy))
        return neighbors

    # ------------------------------------------------------------------
    # 跳跃
    # ------------------------------------------------------------------
    def _Jump(self, x: int, y: int, dx: int, dy: int) -> Optional[Coord]:
        if self.mode_ is MovementMode.ORTHOGONAL:
            return self._JumpOrthogonal(x, y, dx, dy)
        if dx != 0 and dy != 0:
            return self._JumpDiagonal(x, y, dx, dy)
        return self._JumpStraight(x, y, dx, dy)

    def _JumpOrthogonal(self, x: int, y: int, dx: int, dy: int) -> Optional[Coord]:
        """四方向模式：竖直跳跃时顺带向两侧做水平探测"""
        walk = self._Walkable
        while True:
            if not walk(x, y):
                return None
            if (x, y) == self.goal_:
                return (x, y)

            if dx != 0:
                if (walk(x, y - 1) and not walk(x - dx, y - 1)) or \
                   (walk(x, y + 1) and not walk(x - dx, y + 1)):
                    return (x, y)
            else:
                if (walk(x - 1, y) and not walk(x - 1, y - dy)) or \
                   (walk(x + 1, y) and not walk(x + 1, y - dy)):
                    return (x, y)
                if self._JumpOrthogonal(x + 1, y, 1, 0) is not None or \
                   self._JumpOrthogonal(x - 1, y, -1, 0) is not None:
                    return (x, y)

            x += dx
            y += dy

    def _JumpStraight(self, x: int, y: int, dx: int, dy: int) -> Optional[Coord]:
        """八方向模式下的水平/竖直跳跃"""
        walk = self._Walkable
        while True:
            if not walk(x, y):
                return None
            if (x, y) == self.goal_:
                return (x, y)

            if dx != 0:
                if (walk(x + dx, y + 1) and not walk(x, y + 1)) or \
                   (walk(x + dx, y - 1) and not walk(x, y - 1)):
                    return (x, y)
            else:
                if (walk(x + 1, y + dy) and not walk(x + 1, y)) or \
                   (walk(x - 1, y + dy) and not walk(x - 1, y)):
                    return (x, y)

            x += dx
            y += dy

    def _JumpDiagonal(self, x: int, y: int, dx: int, dy: int) -> Optional[Coord]:
        walk = self._Walkable
        while True:
            if not walk(x, y):
                return None
            if (x, y) == self.goal_:
                return (x, y)

            if (walk(x - dx, y + dy) and not walk(x - dx, y)) or \
               (walk(x + dx, y - dy) and not walk(x, y - dy)):
                return (x, y)

            if self._JumpStraight(x + dx, y, dx, 0) is not None or \
               self._JumpStraight(x, y + dy, 0, dy) is not None:
                return (x, y)

            if not self._CanStepDiagonal(x, y, dx, dy):
                return None

            x += dx
            y += dy

    # ------------------------------------------------------------------
    # 路径整理
    # ------------------------------------------------------------------
    @staticmethod
    def _Backtrace(parent: Dict[Coord, Optional[Coord]], goal: Coord) -> List[Coord]:
        path = [goal]
        node = parent[goal]
        while node is not None:
            path.append(node)
            node = parent[node]
        path.reverse()
        return path

    @staticmethod
    def _CompressCollinear(path: List[Coord]) -> List[Coord]:
        """去掉方向不变的中间跳点"""
        if len(path) <= 2:
            return path
        result = [path[0]]
        for i in range(1, len(path) - 1):
            prev, cur, nxt = result[-1], path[i], path[i + 1]
            d1 = (_sign(cur[0] - prev[0]), _sign(cur[1] - prev[1]))
            d2 = (_sign(nxt[0] - cur[0]), _sign(nxt[1] - cur[1]))
            if d1 != d2:
                result.append(cur)
        result.append(path[-1])
        return result
