#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
栅格渲染模块

把 (GridModel, 路径, 视口尺寸) 渲染成一帧 BGR 图像，图层顺序固定：
背景 -> 障碍 -> 路径格 -> 起点 -> 终点 -> 路径连线 -> 平滑路径（可选）
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger

from jps_canvas.config.models import RenderConfig

Color = Tuple[int, int, int]  # BGR


def hex_to_bgr(color: str) -> Color:
    """'#rrggbb' -> (b, g, r)"""
    value = color.lstrip('#')
    r = int(value[0:2], 16)
    g = int(value[2:4], 16)
    b = int(value[4:6], 16)
    return (b, g, r)


@dataclass
class RenderedFrame:
    """一帧渲染结果"""
    image: np.ndarray                      # BGR uint8, (H*cell_px, W*cell_px, 3)
    cell_px: int                           # 实际栅格单元像素
    scale: float                           # 显示缩放（每格显示像素数）
    display_size: Tuple[float, float]      # 画布显示尺寸 (scale*W, scale*H)

    @property
    def raster_size(self) -> Tuple[int, int]:
        h, w = self.image.shape[:2]
        return (w, h)


class GridRenderer:
    """确定性的分层渲染器，同样的输入总是得到同样的图像"""

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config_ = config or RenderConfig()

        self.background_ = hex_to_bgr(self.config_.background_color)
        self.obstacle_ = hex_to_bgr(self.config_.obstacle_color)
        self.path_ = hex_to_bgr(self.config_.path_color)
        self.start_ = hex_to_bgr(self.config_.start_color)
        self.end_ = hex_to_bgr(self.config_.end_color)
        self.stroke_ = hex_to_bgr(self.config_.stroke_color)
        self.smoothed_ = hex_to_bgr(self.config_.smoothed_color)

    # ------------------------------------------------------------------
    # 几何
    # ------------------------------------------------------------------
    def ComputeCellPx(self, width: int, height: int) -> int:
        """栅格单元像素：默认 cell_px，长边超过 max_raster_px 时缩小（最少1像素）"""
        unit = self.config_.cell_px
        longest = max(width, height)
        if longest * unit > self.config_.max_raster_px:
            unit = max(1, self.config_.max_raster_px // longest)
        return unit

    def ComputeDisplayScale(self, width: int, height: int,
                            viewport: Tuple[float, float]) -> float:
        """
        显示缩放 = min((vw - margin) / W, (vh - margin) / H)，并设下限

        Args:
            width: 栅格宽度
            height: 栅格高度
            viewport: 视口尺寸 (vw, vh)
        """
        vw, vh = viewport
        margin = self.config_.margin_px
        scale = min((vw - margin) / width, (vh - margin) / height)
        return max(scale, self.config_.min_display_scale)

    @staticmethod
    def _CellCenter(cell: Tuple[int, int], unit: int) -> Tuple[int, int]:
        x, y = cell
        return (unit * x + unit // 2, unit * y + unit // 2)

    def _StrokeWidth(self, width: int, unit: int) -> int:
        return max(1, int(round(width * unit / self.config_.cell_px)))

    # ------------------------------------------------------------------
    # 渲染
    # ------------------------------------------------------------------
    def Render(self, model, path: Sequence[Tuple[int, int]],
               viewport: Tuple[float, float],
               smoothed_path: Optional[Sequence[Tuple[int, int]]] = None) -> RenderedFrame:
        """
        渲染一帧

        Args:
            model: GridModel（只读使用 grid / start / end / dimensions）
            path: 跳点路径，可以为空
            viewport: 视口尺寸 (vw, vh)
            smoothed_path: 平滑路径，仅在 show_smoothed_path 打开时绘制

        Returns:
            RenderedFrame
        """
        width, height = model.dimensions()
        unit = self.ComputeCellPx(width, height)

        # 1-5: 先在格子分辨率上着色，再按 unit 放大
        cells = np.empty((height, width, 3), dtype=np.uint8)
        cells[:, :] = self.background_
        cells[np.asarray(model.grid) == 1] = self.obstacle_
        for x, y in path:
            if 0 <= x < width and 0 <= y < height:
                cells[y, x] = self.path_
        sx, sy = model.start
        ex, ey = model.end
        cells[sy, sx] = self.start_
        cells[ey, ex] = self.end_

        image = np.repeat(np.repeat(cells, unit, axis=0), unit, axis=1)

        # 6: 路径连线，格子中心到格子中心
        if len(path) >= 2:
            pts = np.array([self._CellCenter(p, unit) for p in path], dtype=np.int32)
            cv2.polylines(image, [pts.reshape(-1, 1, 2)], False, self.stroke_,
                          self._StrokeWidth(self.config_.stroke_width, unit))

        # 7: 平滑路径
        if self.config_.show_smoothed_path and smoothed_path and len(smoothed_path) >= 2:
            pts = np.array([self._CellCenter(p, unit) for p in smoothed_path], dtype=np.int32)
            cv2.polylines(image, [pts.reshape(-1, 1, 2)], False, self.smoothed_,
                          self._StrokeWidth(self.config_.smoothed_width, unit))

        scale = self.ComputeDisplayScale(width, height, viewport)
        display_size = (scale * width, scale * height)

        logger.trace(f"[GridRenderer] {width}x{height} unit={unit} scale={scale:.3f} "
                     f"path={len(path)}")
        return RenderedFrame(image=image, cell_px=unit, scale=scale, display_size=display_size)

    @staticmethod
    def ToRgbaFloat(image_bgr: np.ndarray) -> np.ndarray:
        """BGR uint8 -> 展平的 RGBA float32 [0, 1]（DearPyGui 纹理格式）"""
        h, w, _ = image_bgr.shape
        rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)
        alpha = np.full((h, w, 1), 255, dtype=np.uint8)
        rgba = np.concatenate([rgb, alpha], axis=2)
        return (rgba.astype(np.float32) / 255.0).reshape(-1)
