"""
keytensor: execution-context and memory-layout core of a minimal tensor runtime.

- `with_device` / `with_dtype`: scoped overrides of the ambient device and
  element type.
- `resolve_options`: late-binding resolution of partial construction options.
- `compute_strides`: stride policies for allocation, reshape and copy.
- `next_tick` / `current_tick`: invalidation tick counter.
"""

from .domain import (
    MAX_AXES,
    BinaryFunction,
    Device,
    DeviceType,
    ElementType,
    InitializePolicy,
    InvalidArgumentError,
    StridePolicy,
    UnaryFunction,
    element_size,
)
from .infrastructure._numpy_dtype import as_element_type, to_numpy_dtype
from .infrastructure.context import (
    ContextConfig,
    ExecutionContext,
    TickCounter,
    current_tick,
    debug_mode,
    default_context,
    get_default_device,
    get_default_dtype,
    load_config,
    next_tick,
    reset_default_context,
    set_debug_mode,
    set_default_device,
    set_default_dtype,
    with_debug_mode,
    with_device,
    with_dtype,
)
from .infrastructure.options import (
    ResolvedOptions,
    TensorOptions,
    resolve_options,
    with_options,
)
from .infrastructure.strides import (
    compute_strides,
    is_contiguous,
    num_elements,
    storage_nbytes,
    storage_span,
    validate_shape,
)

__version__ = "0.1.0"
