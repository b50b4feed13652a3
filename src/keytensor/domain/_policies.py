"""
Allocation and dispatch enumerations shared by the tensor layers.

- `StridePolicy` selects how strides are chosen for new storage.
- `InitializePolicy` tells an allocator whether fresh storage is zeroed.
- `UnaryFunction` / `BinaryFunction` name the elementwise kernels so glue code
  can dispatch on an enum instead of one entry point per function. Matrix
  multiplication is not listed; it goes to BLAS separately.
"""

from enum import Enum

MAX_AXES = 6
"""
Maximum number of axes a tensor may have.

User tensors rarely exceed 5 axes, but simplifying matrix multiplications can
temporarily add one.
"""


class StridePolicy(Enum):
    """
    Strategy for choosing strides when allocating a tensor.

    Attributes
    ----------
    KEEP_STRIDE_ORDER : StridePolicy
        Keep the size-ordering of the source tensor's strides, but make every
        stride non-negative and the layout compact.
    NORMALIZED : StridePolicy
        Row-major ("C") strides in the public axis numbering: the last non-unit
        axis is contiguous.
    COPY_STRIDES : StridePolicy
        Use exactly the strides provided.

    All policies give size-1 axes a zero stride.
    """

    KEEP_STRIDE_ORDER = "keep_stride_order"
    NORMALIZED = "normalized"
    COPY_STRIDES = "copy_strides"


class InitializePolicy(Enum):
    """Whether freshly allocated tensor storage is zeroed."""

    ZERO_DATA = "zero_data"
    UNINITIALIZED = "uninitialized"


class UnaryFunction(Enum):
    """Elementwise unary functions applied to tensors."""

    EXP = "exp"
    LOG = "log"
    RELU = "relu"
    INVERT = "invert"
    SQUARE = "square"


class BinaryFunction(Enum):
    """Elementwise binary functions applied to tensors (excluding multiply)."""

    ADD = "add"
    DIVIDE = "divide"
    MAX = "max"
    MIN = "min"
