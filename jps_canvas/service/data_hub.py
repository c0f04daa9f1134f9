#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from loguru import logger


@dataclass
class PathSnapshot:
    request_id: int                                              # 产生该路径的请求序号
    grid: List[Tuple[int, int]]                                  # 跳点路径
    smoothed: List[Tuple[int, int]] = field(default_factory=list)  # 平滑路径（可选）


class PathHub:
    """
    PathHub：当前路径的唯一持有者
    - 每次请求分配递增的序号
    - 只接受比已发布结果更新的请求，旧结果直接丢弃（后发请求优先）
    - 线程安全读写
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_id = 0
        self._published_id = -1
        self._path: Optional[PathSnapshot] = None

    # --------------------------------------------------------
    # 请求序号
    # --------------------------------------------------------
    def next_request_id(self) -> int:
        with self._lock:
            self._next_id += 1
            return self._next_id

    @property
    def latest_request_id(self) -> int:
        with self._lock:
            return self._next_id

    # --------------------------------------------------------
    # 发布 / 读取
    # --------------------------------------------------------
    def publish(
        self,
        request_id: int,
        grid_path: List[Tuple[int, int]],
        smoothed_path: Optional[List[Tuple[int, int]]] = None,
    ) -> bool:
        """
        发布某次请求的结果

        Returns:
            是否被接受；比已发布结果旧的请求返回 False
        """
        snap = PathSnapshot(
            request_id=request_id,
            grid=list(grid_path),
            smoothed=list(smoothed_path or []),
        )
        with self._lock:
            if request_id <= self._published_id:
                logger.debug(f"PathHub: 丢弃过期结果 request={request_id} "
                             f"(已发布 {self._published_id})")
                return False
            self._published_id = request_id
            self._path = snap
        return True

    def latest(self) -> Optional[PathSnapshot]:
        with self._lock:
            return self._path

    def current_path(self) -> List[Tuple[int, int]]:
        with self._lock:
            return list(self._path.grid) if self._path is not None else []

    def clear(self) -> None:
        with self._lock:
            self._path = None
