from .pointer_events import (
    PointerEvent,
    PointerKind,
    PointerSource,
    display_to_normalized,
    pointer_to_cell,
)
from .state_machine import InteractionMode, InteractionStateMachine

__all__ = [
    'PointerEvent', 'PointerKind', 'PointerSource',
    'display_to_normalized', 'pointer_to_cell',
    'InteractionMode', 'InteractionStateMachine',
]
