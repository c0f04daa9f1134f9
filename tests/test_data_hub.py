#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from jps_canvas.service.data_hub import PathHub


def test_request_ids_increase():
    hub = PathHub()
    ids = [hub.next_request_id() for _ in range(3)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3
    assert hub.latest_request_id == ids[-1]


def test_stale_result_is_dropped():
    hub = PathHub()
    first = hub.next_request_id()
    second = hub.next_request_id()

    assert hub.publish(second, [(0, 0), (3, 0)])
    assert not hub.publish(first, [(0, 0), (1, 0)])
    assert hub.current_path() == [(0, 0), (3, 0)]
    assert hub.latest().request_id == second


def test_latest_wins_in_order():
    hub = PathHub()
    assert hub.latest() is None
    assert hub.current_path() == []

    for n in range(1, 4):
        rid = hub.next_request_id()
        assert hub.publish(rid, [(0, 0), (n, 0)], smoothed_path=[(0, 0), (n, 0)])

    assert hub.current_path() == [(0, 0), (3, 0)]
    assert hub.latest().smoothed == [(0, 0), (3, 0)]


def test_clear_keeps_ordering():
    hub = PathHub()
    rid = hub.next_request_id()
    hub.publish(rid, [(0, 0)])
    hub.clear()
    assert hub.current_path() == []
    assert not hub.publish(rid, [(0, 0)])
