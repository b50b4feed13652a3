from ._config import ContextConfig, load_config
from ._execution_context import (
    ExecutionContext,
    debug_mode,
    default_context,
    get_default_device,
    get_default_dtype,
    reset_default_context,
    set_debug_mode,
    set_default_device,
    set_default_dtype,
    with_debug_mode,
    with_device,
    with_dtype,
)
from ._tick import TickCounter, current_tick, global_tick_counter, next_tick

__all__ = [
    ContextConfig.__name__,
    ExecutionContext.__name__,
    TickCounter.__name__,
    current_tick.__name__,
    debug_mode.__name__,
    default_context.__name__,
    get_default_device.__name__,
    get_default_dtype.__name__,
    global_tick_counter.__name__,
    load_config.__name__,
    next_tick.__name__,
    reset_default_context.__name__,
    set_debug_mode.__name__,
    set_default_device.__name__,
    set_default_dtype.__name__,
    with_debug_mode.__name__,
    with_device.__name__,
    with_dtype.__name__,
]
