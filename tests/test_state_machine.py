#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
InteractionStateMachine 测试
"""

import pytest

from conftest import cell_center_norm
from jps_canvas.grid.grid_model import GridModel
from jps_canvas.interaction.pointer_events import (
    PointerEvent,
    PointerKind,
    PointerSource,
    display_to_normalized,
    pointer_to_cell,
)
from jps_canvas.interaction.state_machine import InteractionMode, InteractionStateMachine


@pytest.fixture
def machine(model):
    return InteractionStateMachine(model)


def _down(machine, cell, **kwargs):
    x, y = cell_center_norm(cell, machine.model_.dimensions())
    return machine.handle_event(PointerEvent(PointerKind.DOWN, x, y, **kwargs))


def _move(machine, cell, **kwargs):
    x, y = cell_center_norm(cell, machine.model_.dimensions())
    return machine.handle_event(PointerEvent(PointerKind.MOVE, x, y, **kwargs))


def test_pointer_to_cell():
    assert pointer_to_cell(0.0, 0.0, (8, 6)) == (0, 0)
    assert pointer_to_cell(0.99, 0.99, (8, 6)) == (7, 5)
    assert pointer_to_cell(0.5, 0.5, (8, 6)) == (4, 3)
    assert pointer_to_cell(1.0, 0.5, (8, 6)) is None
    assert pointer_to_cell(-0.01, 0.5, (8, 6)) is None
    assert pointer_to_cell(float('nan'), 0.5, (8, 6)) is None


def test_display_to_normalized():
    assert display_to_normalized((50, 25), (100, 100)) == (0.5, 0.25)
    assert display_to_normalized((1, 1), (0, 100)) == (-1.0, -1.0)


def test_paint_gesture(machine, model):
    assert _down(machine, (2, 2))
    assert machine.mode is InteractionMode.PAINT
    assert machine.paint_value == 1
    assert _move(machine, (3, 2))
    assert not _move(machine, (3, 2))   # 已经是障碍
    assert _move(machine, (4, 2))
    assert machine.handle_event(PointerEvent(PointerKind.UP)) is False
    assert machine.mode is InteractionMode.IDLE
    assert [model.is_obstacle(x, 2) for x in (2, 3, 4)] == [True, True, True]


def test_gesture_starting_on_obstacle_erases(machine, model):
    model.toggle_obstacle(2, 2)
    model.toggle_obstacle(3, 2)
    assert _down(machine, (2, 2))
    assert machine.paint_value == 0
    assert _move(machine, (3, 2))
    assert model.obstacle_count() == 0


def test_paint_never_touches_endpoints(machine, model):
    _down(machine, (6, 5))
    assert not _move(machine, model.end)
    assert model.is_obstacle(*model.end) is False


def test_gesture_on_end_moves_end(machine, model):
    assert not _down(machine, model.end)
    assert machine.mode is InteractionMode.MOVE_END
    assert model.is_obstacle(7, 5) is False

    assert _move(machine, (5, 3))
    assert model.end == (5, 3)
    assert not _move(machine, model.start)   # 不能移到起点上
    assert model.end == (5, 3)


def test_gesture_on_end_never_paints_its_cell(machine, model):
    assert not _down(machine, (7, 5))
    assert _move(machine, (6, 5))
    assert _move(machine, (7, 5))
    assert not _move(machine, (7, 5))
    machine.handle_event(PointerEvent(PointerKind.UP))

    assert model.is_obstacle(7, 5) is False
    assert model.end == (7, 5)
    assert model.obstacle_count() == 0


def test_gesture_on_start_moves_start(machine, model):
    model.toggle_obstacle(1, 1)
    assert not _down(machine, model.start)
    assert machine.mode is InteractionMode.MOVE_START
    assert not _move(machine, (1, 1))          # 障碍
    assert _move(machine, (2, 1))
    assert model.start == (2, 1)


def test_end_checked_before_start():
    model = GridModel(1, 1)
    machine = InteractionStateMachine(model)
    machine.pointer_down(0.5, 0.5)
    assert machine.mode is InteractionMode.MOVE_END


def test_outside_canvas_is_ignored(machine, model):
    assert not machine.pointer_down(1.2, 0.5)
    assert machine.mode is InteractionMode.IDLE

    _down(machine, (2, 2))
    assert not machine.pointer_move(-0.1, 0.5)
    assert machine.mode is InteractionMode.PAINT
    assert model.obstacle_count() == 1


def test_move_without_gesture_does_nothing(machine, model):
    assert not _move(machine, (3, 3))
    assert model.obstacle_count() == 0


@pytest.mark.parametrize("kind", [PointerKind.UP, PointerKind.LEAVE, PointerKind.CANCEL])
def test_gesture_end_events_return_to_idle(machine, model, kind):
    _down(machine, (2, 2))
    assert not machine.handle_event(PointerEvent(kind))
    assert machine.mode is InteractionMode.IDLE
    assert machine.paint_value is None
    assert not _move(machine, (3, 2))


def test_secondary_mouse_button_is_ignored(machine, model):
    assert not _down(machine, (2, 2), button=1)
    assert machine.mode is InteractionMode.IDLE
    assert model.obstacle_count() == 0


def test_multi_touch_is_ignored(machine, model):
    assert not _down(machine, (2, 2), source=PointerSource.TOUCH, touch_count=2)
    assert model.obstacle_count() == 0

    assert _down(machine, (2, 2), source=PointerSource.TOUCH, touch_count=1)
    assert not _move(machine, (3, 2), source=PointerSource.TOUCH, touch_count=2)
    assert model.is_obstacle(3, 2) is False


def test_reset_forces_idle(machine):
    _down(machine, (2, 2))
    machine.reset()
    assert machine.mode is InteractionMode.IDLE
