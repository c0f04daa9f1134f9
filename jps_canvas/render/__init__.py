from .grid_renderer import GridRenderer, RenderedFrame, hex_to_bgr

__all__ = ['GridRenderer', 'RenderedFrame', 'hex_to_bgr']
