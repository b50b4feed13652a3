"""
Element-type definitions.

`ElementType` names the numeric types a tensor can be stored as, plus the
`DEFAULT` sentinel meaning "inherit from the execution context". The sentinel
is an input-only value: resolution replaces it before storage is sized, and
`element_size` refuses it.

This module is backend-agnostic; the NumPy mapping lives in the
infrastructure layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from ._errors import InvalidArgumentError


class ElementType(Enum):
    """
    Tensor element types.

    Attributes
    ----------
    DEFAULT : ElementType
        Sentinel: use the execution context's current element type.
    FLOAT32 : ElementType
        32-bit IEEE float.
    FLOAT64 : ElementType
        64-bit IEEE float.
    """

    DEFAULT = 0
    FLOAT32 = 1
    FLOAT64 = 2

    @property
    def is_concrete(self) -> bool:
        """True for every member except `DEFAULT`."""
        return self is not ElementType.DEFAULT

    @classmethod
    def parse(cls, value: Union["ElementType", str]) -> "ElementType":
        """
        Normalize an element-type description.

        Parameters
        ----------
        value : ElementType | str
            An `ElementType`, or one of the names "default", "float32",
            "float", "f32", "float64", "double", "f64" (case-insensitive).

        Returns
        -------
        ElementType

        Raises
        ------
        InvalidArgumentError
            If the value does not name a known element type.
        """
        if isinstance(value, ElementType):
            return value
        if isinstance(value, str):
            member = _NAMES.get(value.strip().lower())
            if member is not None:
                return member
        raise InvalidArgumentError("dtype", value, "unknown element type")

    def __str__(self) -> str:
        return self.name.lower()


_NAMES = {
    "default": ElementType.DEFAULT,
    "float32": ElementType.FLOAT32,
    "float": ElementType.FLOAT32,
    "f32": ElementType.FLOAT32,
    "float64": ElementType.FLOAT64,
    "double": ElementType.FLOAT64,
    "f64": ElementType.FLOAT64,
}

# Only concrete types have a width.
_ELEMENT_SIZES = {
    ElementType.FLOAT32: 4,
    ElementType.FLOAT64: 8,
}


def element_size(dtype: ElementType) -> int:
    """
    Return the storage width in bytes of one element of `dtype`.

    Raises
    ------
    InvalidArgumentError
        If `dtype` is `ElementType.DEFAULT` or not an `ElementType`.
    """
    try:
        return _ELEMENT_SIZES[dtype]
    except (KeyError, TypeError):
        raise InvalidArgumentError(
            "dtype", dtype, "byte width requested for an unresolved element type"
        ) from None
