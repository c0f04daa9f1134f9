#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""DearPyGui front-end for the grid canvas.

The view owns the DearPyGui context and the render loop. It translates
mouse callbacks into `PointerEvent`s and control widgets into calls on a
`CanvasSession`; everything it draws comes from the session's latest
`RenderedFrame`.
"""

from typing import Optional, Tuple

import dearpygui.dearpygui as dpg
import numpy as np
from loguru import logger

from jps_canvas.interaction.pointer_events import (
    PointerEvent,
    PointerKind,
    PointerSource,
    display_to_normalized,
)
from jps_canvas.interaction.state_machine import InteractionMode
from jps_canvas.render.grid_renderer import GridRenderer, RenderedFrame
from jps_canvas.service.canvas_session import CanvasSession


class DpgCanvasView:
    """DearPyGui window with a control panel on the left and the canvas on the right.

    Instantiate once and call `run()` from the main thread. Only mouse
    handlers are registered: DearPyGui delivers OS-synthesized single-touch
    input as left-button mouse events, so touch gestures arrive through them.
    """

    def __init__(
        self,
        session: CanvasSession,
        title: str = "JPS Canvas",
        window_size: Tuple[int, int] = (960, 720),
        panel_width: int = 220,
    ) -> None:
        self._session = session
        self._title = title
        self._window_size = window_size
        self._panel_width = panel_width

        # DearPyGui ids
        self._tex_registry: Optional[int] = None
        self._tex_id_canvas: Optional[int] = None
        self._tex_w: int = 0
        self._tex_h: int = 0

        self._drawlist: Optional[int] = None
        self._input_width: Optional[int] = None
        self._input_height: Optional[int] = None
        self._chk_diagonal: Optional[int] = None
        self._chk_corner: Optional[int] = None
        self._txt_status: Optional[int] = None

        self._pending_frame: Optional[RenderedFrame] = None
        self._display_size: Tuple[float, float] = (1.0, 1.0)

        session.add_frame_listener(self._on_frame)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Create the DearPyGui context and start the UI loop (blocking)."""

        dpg.create_context()

        self._tex_registry = dpg.add_texture_registry()

        win_w, win_h = self._window_size
        model = self._session.model

        with dpg.window(label=self._title, tag="main_window"):
            with dpg.group(horizontal=True):
                # left: controls
                with dpg.child_window(width=self._panel_width, autosize_y=True):
                    dpg.add_text("Grid size")
                    self._input_width = dpg.add_input_int(
                        label="width",
                        default_value=model.width,
                        on_enter=True,
                        callback=self._on_size_changed,
                    )
                    self._input_height = dpg.add_input_int(
                        label="height",
                        default_value=model.height,
                        on_enter=True,
                        callback=self._on_size_changed,
                    )
                    dpg.add_spacer(height=10)
                    self._chk_diagonal = dpg.add_checkbox(
                        label="Allow diagonal",
                        default_value=self._session.allow_diagonal,
                        callback=self._on_diagonal_changed,
                    )
                    self._chk_corner = dpg.add_checkbox(
                        label="Prevent corner cutting",
                        default_value=self._session.prevent_corner_cutting,
                        callback=self._on_corner_changed,
                    )
                    dpg.add_spacer(height=10)
                    dpg.add_button(label="Clear obstacles", callback=self._on_clear_clicked)
                    dpg.add_spacer(height=10)
                    self._txt_status = dpg.add_text("")

                # right: canvas
                self._drawlist = dpg.add_drawlist(width=1, height=1)

        with dpg.handler_registry():
            dpg.add_mouse_click_handler(button=dpg.mvMouseButton_Left, callback=self._on_mouse_down)
            dpg.add_mouse_move_handler(callback=self._on_mouse_move)
            dpg.add_mouse_release_handler(button=dpg.mvMouseButton_Left, callback=self._on_mouse_up)

        dpg.create_viewport(title=self._title, width=win_w, height=win_h)
        dpg.set_viewport_resize_callback(self._on_viewport_resized)
        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

        self._session.set_viewport(*self._canvas_viewport())

        # Custom render loop so frames produced by callbacks are uploaded once per tick
        while dpg.is_dearpygui_running():
            self._check_pointer_left()
            self._flush_frame()
            dpg.render_dearpygui_frame()

        dpg.destroy_context()
        logger.info("[DpgCanvasView] UI closed")

    def close(self) -> None:
        if dpg.is_dearpygui_running():
            dpg.stop_dearpygui()

    # ------------------------------------------------------------------
    # Session callbacks
    # ------------------------------------------------------------------

    def _on_frame(self, frame: RenderedFrame) -> None:
        self._pending_frame = frame

    def _flush_frame(self) -> None:
        frame = self._pending_frame
        if frame is None or self._drawlist is None:
            return
        self._pending_frame = None

        self._ensure_texture(frame.image)
        dpg.set_value(self._tex_id_canvas, GridRenderer.ToRgbaFloat(frame.image))

        dw, dh = frame.display_size
        self._display_size = (dw, dh)
        dpg.configure_item(self._drawlist, width=max(1, int(dw)), height=max(1, int(dh)))
        dpg.delete_item(self._drawlist, children_only=True)
        dpg.draw_image(
            self._tex_id_canvas,
            pmin=(0, 0),
            pmax=(dw, dh),
            parent=self._drawlist,
        )
        self._update_status()

    def _ensure_texture(self, image: np.ndarray) -> None:
        h, w = image.shape[:2]
        if self._tex_id_canvas is not None and w == self._tex_w and h == self._tex_h:
            return

        if self._tex_id_canvas is not None:
            dpg.delete_item(self._tex_id_canvas)

        self._tex_id_canvas = dpg.add_raw_texture(
            w,
            h,
            np.zeros(w * h * 4, dtype=np.float32),
            format=dpg.mvFormat_Float_rgba,
            parent=self._tex_registry,
        )
        self._tex_w = w
        self._tex_h = h

    def _update_status(self) -> None:
        if self._txt_status is None:
            return
        model = self._session.model
        path = self._session.path
        result = self._session.last_result
        lines = [
            f"Grid: {model.width} x {model.height}",
            f"Obstacles: {model.obstacle_count()}",
            f"Path points: {len(path)}" if path else "Path: none",
        ]
        if result is not None:
            lines.append(f"Expanded: {result.nodes_expanded}  ({result.elapsed_ms:.1f} ms)")
        dpg.set_value(self._txt_status, "\n".join(lines))

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def _on_size_changed(self, sender=None, app_data=None) -> None:
        width = dpg.get_value(self._input_width)
        height = dpg.get_value(self._input_height)
        actual_w, actual_h = self._session.set_grid_size(width, height)
        # Write back the clamped values
        dpg.set_value(self._input_width, actual_w)
        dpg.set_value(self._input_height, actual_h)

    def _on_diagonal_changed(self, sender=None, app_data=None) -> None:
        self._session.set_allow_diagonal(bool(app_data))

    def _on_corner_changed(self, sender=None, app_data=None) -> None:
        self._session.set_prevent_corner_cutting(bool(app_data))

    def _on_clear_clicked(self, sender=None, app_data=None) -> None:
        self._session.clear_obstacles()

    def _on_viewport_resized(self, sender=None, app_data=None) -> None:
        self._session.set_viewport(*self._canvas_viewport())

    def _canvas_viewport(self) -> Tuple[float, float]:
        vw = dpg.get_viewport_client_width() - self._panel_width
        vh = dpg.get_viewport_client_height()
        return (float(max(vw, 1)), float(max(vh, 1)))

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def _pointer_norm(self) -> Tuple[float, float]:
        mx, my = dpg.get_mouse_pos(local=False)
        ox, oy = dpg.get_item_rect_min(self._drawlist)
        return display_to_normalized((mx - ox, my - oy), self._display_size)

    def _on_mouse_down(self, sender=None, app_data=None) -> None:
        if self._drawlist is None or not dpg.is_item_hovered(self._drawlist):
            return
        x_norm, y_norm = self._pointer_norm()
        self._session.handle_pointer(
            PointerEvent(PointerKind.DOWN, x_norm, y_norm, PointerSource.MOUSE, button=0)
        )

    def _on_mouse_move(self, sender=None, app_data=None) -> None:
        if self._drawlist is None or self._session.interaction_mode is InteractionMode.IDLE:
            return
        x_norm, y_norm = self._pointer_norm()
        self._session.handle_pointer(
            PointerEvent(PointerKind.MOVE, x_norm, y_norm, PointerSource.MOUSE)
        )

    def _on_mouse_up(self, sender=None, app_data=None) -> None:
        self._session.handle_pointer(PointerEvent(PointerKind.UP))

    def _check_pointer_left(self) -> None:
        """A gesture ends when the pointer leaves the viewport."""
        if self._session.interaction_mode is InteractionMode.IDLE:
            return
        mx, my = dpg.get_mouse_pos(local=False)
        if mx < 0 or my < 0 or mx >= dpg.get_viewport_client_width() \
                or my >= dpg.get_viewport_client_height():
            self._session.handle_pointer(PointerEvent(PointerKind.LEAVE))
