from dataclasses import dataclass, field
from typing import Any, List, Tuple

GridCoord = Tuple[int, int]

@dataclass
class PlanRequest:
    occupancy: Any                   # 0/1 行优先序列，长度 width*height：1=障碍
    width: int
    height: int
    start: GridCoord
    goal: GridCoord
    allow_diagonal: bool = False
    prevent_corner_cutting: bool = True

@dataclass
class PlanResult:
    ok: bool
    path: List[GridCoord]
    smoothed_path: List[GridCoord] = field(default_factory=list)
    reason: str = ""
    nodes_expanded: int = 0
    elapsed_ms: float = 0.0
