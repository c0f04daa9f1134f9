from .data_hub import PathHub, PathSnapshot
from .canvas_session import CanvasSession

__all__ = ['PathHub', 'PathSnapshot', 'CanvasSession']
