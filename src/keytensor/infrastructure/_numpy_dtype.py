"""
NumPy interop for element types.

Bridges the backend-agnostic `ElementType` enum and `numpy.dtype`, so
allocators backed by NumPy (and callers passing `np.float32`-style values)
can interoperate with the context and options layers.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ..domain._dtype import ElementType
from ..domain._errors import InvalidArgumentError

_TO_NUMPY = {
    ElementType.FLOAT32: np.dtype(np.float32),
    ElementType.FLOAT64: np.dtype(np.float64),
}
_FROM_NUMPY = {v: k for k, v in _TO_NUMPY.items()}


def to_numpy_dtype(dtype: ElementType) -> np.dtype:
    """
    Map a concrete `ElementType` to its NumPy dtype.

    Raises
    ------
    InvalidArgumentError
        If `dtype` is `ElementType.DEFAULT`.
    """
    try:
        return _TO_NUMPY[dtype]
    except (KeyError, TypeError):
        raise InvalidArgumentError(
            "dtype", dtype, "no storage type for an unresolved element type"
        ) from None


def as_element_type(value: Any) -> ElementType:
    """
    Normalize any supported dtype description to an `ElementType`.

    Accepts `ElementType` members, names understood by `ElementType.parse`,
    and anything `numpy.dtype` accepts that maps to float32/float64
    (e.g., `np.float64`, `np.dtype("float32")`).

    Raises
    ------
    InvalidArgumentError
        If the value names no supported element type.
    """
    if isinstance(value, (ElementType, str)):
        try:
            return ElementType.parse(value)
        except InvalidArgumentError:
            if not isinstance(value, str):
                raise
    if value is None:
        # np.dtype(None) is float64
        raise InvalidArgumentError("dtype", value, "unknown element type")
    try:
        np_dtype = np.dtype(value)
    except TypeError:
        raise InvalidArgumentError("dtype", value, "unknown element type") from None
    member = _FROM_NUMPY.get(np_dtype)
    if member is None:
        raise InvalidArgumentError(
            "dtype", value, "only float32 and float64 are supported"
        )
    return member
