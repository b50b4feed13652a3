from ._dtype import ElementType, element_size
from ._errors import InvalidArgumentError
from ._policies import (
    MAX_AXES,
    BinaryFunction,
    InitializePolicy,
    StridePolicy,
    UnaryFunction,
)
from .device import Device, DeviceType

__all__ = [
    "MAX_AXES",
    BinaryFunction.__name__,
    Device.__name__,
    DeviceType.__name__,
    ElementType.__name__,
    InitializePolicy.__name__,
    InvalidArgumentError.__name__,
    StridePolicy.__name__,
    UnaryFunction.__name__,
    element_size.__name__,
]
