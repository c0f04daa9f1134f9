from .map_model import GridCoord, PlanRequest, PlanResult
from .jps_planner import JumpPointPlanner, MovementMode, PathOracle
from .path_smoothing import line_of_sight, smooth_path_los
from .pathfinding_client import PathfindingClient, build_occupancy_grid

__all__ = [
    'GridCoord', 'PlanRequest', 'PlanResult',
    'JumpPointPlanner', 'MovementMode', 'PathOracle',
    'line_of_sight', 'smooth_path_los',
    'PathfindingClient', 'build_occupancy_grid',
]
