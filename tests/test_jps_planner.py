#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
JumpPointPlanner 测试：与逐格 Dijkstra 的最短代价对比，并检查路径合法性
"""

import heapq
import math

import numpy as np
import pytest

from conftest import grid_from_rows
from jps_canvas.common.exceptions import SearchBudgetExceededError
from jps_canvas.path_planner.jps_planner import JumpPointPlanner, MovementMode

SQRT2 = math.sqrt(2.0)


def _walkable(grid, x, y):
    h, w = grid.shape
    return 0 <= x < w and 0 <= y < h and grid[y, x] == 0


def _step_allowed(grid, x, y, dx, dy, mode):
    if not _walkable(grid, x + dx, y + dy):
        return False
    if dx == 0 or dy == 0:
        return True
    if mode is MovementMode.ORTHOGONAL:
        return False
    if mode is MovementMode.DIAGONAL_NO_CORNER_CUT:
        return _walkable(grid, x + dx, y) or _walkable(grid, x, y + dy)
    return True


def _reference_cost(grid, start, goal, mode):
    """逐格 Dijkstra，返回最短代价；不可达返回 None"""
    dirs = [(1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (1, -1), (-1, 1), (-1, -1)]
    dist = {start: 0.0}
    heap = [(0.0, start)]
    while heap:
        d, node = heapq.heappop(heap)
        if node == goal:
            return d
        if d > dist[node]:
            continue
        x, y = node
        for dx, dy in dirs:
            if not _step_allowed(grid, x, y, dx, dy, mode):
                continue
            nd = d + (SQRT2 if dx and dy else 1.0)
            nxt = (x + dx, y + dy)
            if nd < dist.get(nxt, math.inf):
                dist[nxt] = nd
                heapq.heappush(heap, (nd, nxt))
    return None


def _expand_and_cost(grid, path, mode):
    """把跳点展开为逐格移动，逐步检查合法性并返回总代价"""
    cost = 0.0
    for (x0, y0), (x1, y1) in zip(path, path[1:]):
        dx = (x1 > x0) - (x1 < x0)
        dy = (y1 > y0) - (y1 < y0)
        # 相邻跳点之间必须是水平、竖直或 45 度直线
        assert dx == 0 or dy == 0 or abs(x1 - x0) == abs(y1 - y0)
        x, y = x0, y0
        while (x, y) != (x1, y1):
            assert _step_allowed(grid, x, y, dx, dy, mode), f"非法移动 {(x, y)} -> {(x + dx, y + dy)}"
            x += dx
            y += dy
            cost += SQRT2 if dx and dy else 1.0
    return cost


MODES = [
    (False, True, MovementMode.ORTHOGONAL),
    (True, False, MovementMode.DIAGONAL),
    (True, True, MovementMode.DIAGONAL_NO_CORNER_CUT),
]


def test_open_row_four_directions():
    planner = JumpPointPlanner()
    path = planner.Plan(np.zeros((1, 8), dtype=np.uint8), (0, 0), (7, 0))
    assert path == [(0, 0), (7, 0)]


def test_full_height_wall_has_no_path():
    grid = grid_from_rows([
        "..#..",
        "..#..",
        "..#..",
        "..#..",
    ])
    planner = JumpPointPlanner()
    for allow_diagonal, prevent, _ in MODES:
        assert planner.Plan(grid, (0, 0), (4, 3), allow_diagonal, prevent) == []


def test_start_equals_goal():
    planner = JumpPointPlanner()
    assert planner.Plan(np.zeros((1, 1), dtype=np.uint8), (0, 0), (0, 0)) == [(0, 0)]


def test_blocked_goal_has_no_path():
    grid = grid_from_rows(["...", "..#"])
    assert JumpPointPlanner().Plan(grid, (0, 0), (2, 1)) == []


def test_corner_cutting_allowed_goes_through_corner():
    grid = grid_from_rows([
        "#..",
        ".#.",
        "...",
    ])
    path = JumpPointPlanner().Plan(grid, (0, 1), (1, 0), allow_diagonal=True,
                                   prevent_corner_cutting=False)
    assert path == [(0, 1), (1, 0)]


def test_corner_cutting_prevented_detours():
    grid = grid_from_rows([
        "#..",
        ".#.",
        "...",
    ])
    path = JumpPointPlanner().Plan(grid, (0, 1), (1, 0), allow_diagonal=True,
                                   prevent_corner_cutting=True)
    assert path[0] == (0, 1)
    assert path[-1] == (1, 0)
    assert len(path) > 2
    cost = _expand_and_cost(grid, path, MovementMode.DIAGONAL_NO_CORNER_CUT)
    assert cost == pytest.approx(3 * SQRT2)


def test_four_directions_never_moves_diagonally():
    grid = grid_from_rows([
        ".....",
        ".###.",
        ".....",
    ])
    path = JumpPointPlanner().Plan(grid, (0, 0), (4, 2))
    assert path[0] == (0, 0) and path[-1] == (4, 2)
    for (x0, y0), (x1, y1) in zip(path, path[1:]):
        assert x0 == x1 or y0 == y1
    assert _expand_and_cost(grid, path, MovementMode.ORTHOGONAL) == pytest.approx(6.0)


@pytest.mark.parametrize("allow_diagonal,prevent,mode", MODES)
def test_matches_reference_cost_on_random_grids(allow_diagonal, prevent, mode):
    rng = np.random.default_rng(20240611)
    planner = JumpPointPlanner()
    for _ in range(40):
        w, h = int(rng.integers(2, 16)), int(rng.integers(2, 16))
        grid = (rng.random((h, w)) < 0.3).astype(np.uint8)
        start, goal = (0, 0), (w - 1, h - 1)
        grid[0, 0] = 0
        grid[h - 1, w - 1] = 0

        path = planner.Plan(grid, start, goal, allow_diagonal, prevent)
        expected = _reference_cost(grid, start, goal, mode)

        if expected is None:
            assert path == []
        else:
            assert path[0] == start and path[-1] == goal
            assert _expand_and_cost(grid, path, mode) == pytest.approx(expected)


def test_deterministic_for_equal_inputs():
    rng = np.random.default_rng(7)
    grid = (rng.random((30, 30)) < 0.25).astype(np.uint8)
    grid[0, 0] = grid[29, 29] = 0
    planner = JumpPointPlanner()
    first = planner.Plan(grid, (0, 0), (29, 29), True, True)
    for _ in range(3):
        assert JumpPointPlanner().Plan(grid.copy(), (0, 0), (29, 29), True, True) == first


def test_large_open_grid_does_not_recurse_deeply():
    grid = np.zeros((2, 1000), dtype=np.uint8)
    path = JumpPointPlanner().Plan(grid, (0, 0), (999, 0))
    assert path == [(0, 0), (999, 0)]
    path = JumpPointPlanner().Plan(grid, (0, 0), (999, 1), allow_diagonal=True)
    assert path[0] == (0, 0) and path[-1] == (999, 1)


def test_budget_exceeded_raises():
    grid = grid_from_rows([
        "..#..",
        "..#..",
        "..#..",
        "..#..",
        ".....",
    ])
    planner = JumpPointPlanner(max_expansions=1)
    with pytest.raises(SearchBudgetExceededError):
        planner.Plan(grid, (0, 0), (4, 0))
    assert planner.last_nodes_expanded_ == 2


def test_budget_counts_expansions_not_scanned_cells():
    grid = np.zeros((50, 50), dtype=np.uint8)
    planner = JumpPointPlanner(max_expansions=3)
    path = planner.Plan(grid, (0, 0), (49, 49))
    assert path == [(0, 0), (0, 49), (49, 49)]
    assert planner.last_nodes_expanded_ == 3


def test_rejects_non_2d_grid():
    with pytest.raises(ValueError):
        JumpPointPlanner().Plan(np.zeros(4), (0, 0), (1, 0))


def test_movement_mode_from_flags():
    assert MovementMode.from_flags(False, False) is MovementMode.ORTHOGONAL
    assert MovementMode.from_flags(True, False) is MovementMode.DIAGONAL
    assert MovementMode.from_flags(True, True) is MovementMode.DIAGONAL_NO_CORNER_CUT
