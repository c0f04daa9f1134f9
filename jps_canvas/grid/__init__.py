from .grid_model import GridModel, GridSnapshot, GridCoord, clamp_dimension

__all__ = ['GridModel', 'GridSnapshot', 'GridCoord', 'clamp_dimension']
