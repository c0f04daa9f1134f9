#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径平滑模块：基于视线（Line of Sight）的跳点精简
"""

from typing import List, Tuple

import numpy as np


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def line_of_sight(grid: np.ndarray, p1: Tuple[int, int], p2: Tuple[int, int],
                  strict_corners: bool = True) -> bool:
    """
    检查两个格子中心之间的线段是否只经过可通行格子

    沿线段遍历它穿过的每一个格子（supercover），线段恰好穿过格角时：
    strict_corners=True 要求两侧格子至少一个可通行，否则直接放行。

    Args:
        grid: (H, W) 栅格，0=可通行，1=障碍
        p1: 起点 (x, y)
        p2: 终点 (x, y)
        strict_corners: 是否禁止从两个障碍之间的格角穿过

    Returns:
        是否可见
    """
    h, w = grid.shape

    def walkable(x: int, y: int) -> bool:
        return 0 <= x < w and 0 <= y < h and grid[y, x] == 0

    x, y = int(p1[0]), int(p1[1])
    x1, y1 = int(p2[0]), int(p2[1])
    if not walkable(x, y) or not walkable(x1, y1):
        return False

    nx, ny = abs(x1 - x), abs(y1 - y)
    sx, sy = _sign(x1 - x), _sign(y1 - y)
    ix = iy = 0

    while ix < nx or iy < ny:
        # 比较下一次跨越竖线与横线的参数 t：(0.5+ix)/nx 与 (0.5+iy)/ny
        decision = (1 + 2 * ix) * ny - (1 + 2 * iy) * nx
        if decision == 0:
            if strict_corners and not walkable(x + sx, y) and not walkable(x, y + sy):
                return False
            x += sx
            y += sy
            ix += 1
            iy += 1
        elif decision < 0:
            x += sx
            ix += 1
        else:
            y += sy
            iy += 1

        if not walkable(x, y):
            return False

    return True


def smooth_path_los(path: List[Tuple[int, int]], grid: np.ndarray,
                    strict_corners: bool = True) -> List[Tuple[int, int]]:
    """
    使用视线检查精简路径：从当前点出发，找能直接看到的最远路径点

    Args:
        path: 跳点列表
        grid: (H, W) 栅格，0=可通行，1=障碍
        strict_corners: 见 line_of_sight

    Returns:
        精简后的路径（首尾不变）
    """
    if len(path) <= 2:
        return list(path)

    smoothed = [path[0]]
    i = 0
    while i < len(path) - 1:
        j = len(path) - 1
        while j > i + 1:
            if line_of_sight(grid, path[i], path[j], strict_corners):
                break
            j -= 1
        smoothed.append(path[j])
        i = j

    return smoothed
