"""
Tensor construction options and their resolution against the execution context.

Tensor constructors accept an optional, possibly partial, description of where
and as what the tensor should be stored:

    Tensor(shape)                                   # neither
    Tensor(shape, ElementType.FLOAT64)              # dtype only
    Tensor(shape, "cuda")                           # device only
    Tensor(shape, TensorOptions(ElementType.FLOAT64, Device("cuda")))   # both

`resolve_options` fills every unset field from the execution context *at the
time of resolution*. A partial `TensorOptions` built once and reused therefore
picks up whatever scoped override is active when a tensor is finally created.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

import numpy as np
from typing_extensions import TypeAlias

from ...domain._dtype import ElementType, element_size
from ...domain.device._device import Device, DeviceType
from .._numpy_dtype import as_element_type, to_numpy_dtype
from ..context._execution_context import ExecutionContext, default_context


@dataclass(frozen=True)
class TensorOptions:
    """
    Partially specified construction options.

    Attributes
    ----------
    dtype : ElementType
        Requested element type; `ElementType.DEFAULT` means unset.
    device : Device or None
        Requested device; None means unset.

    Both fields are normalized on construction, so any value accepted by
    `Device(...)` or `as_element_type(...)` may be passed.
    """

    dtype: ElementType = ElementType.DEFAULT
    device: Optional[Device] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "dtype", as_element_type(self.dtype))
        if self.device is not None:
            object.__setattr__(self, "device", Device(self.device))

    @classmethod
    def of(cls, value: "OptionsLike" = None) -> "TensorOptions":
        """
        Build options from any single partial form.

        Parameters
        ----------
        value : OptionsLike
            None, a `TensorOptions` (returned unchanged), a `Device`,
            `DeviceType` or device string, or an element type (`ElementType`,
            dtype name, NumPy dtype).

        Raises
        ------
        InvalidArgumentError
            If `value` is neither a device nor an element type description.
        """
        if value is None:
            return cls()
        if isinstance(value, TensorOptions):
            return value
        if isinstance(value, (Device, DeviceType)):
            return cls(device=Device(value))
        if isinstance(value, str) and _looks_like_device(value):
            return cls(device=Device(value))
        return cls(dtype=as_element_type(value))

    @property
    def has_dtype(self) -> bool:
        return self.dtype is not ElementType.DEFAULT

    @property
    def has_device(self) -> bool:
        return self.device is not None

    def with_dtype(self, dtype: Any) -> "TensorOptions":
        """Return a copy with `dtype` replaced."""
        return TensorOptions(dtype=dtype, device=self.device)

    def with_device(
        self, device: Optional[Union[str, DeviceType, Device]]
    ) -> "TensorOptions":
        """Return a copy with `device` replaced."""
        return TensorOptions(dtype=self.dtype, device=device)

    def resolve(
        self, context: Optional[ExecutionContext] = None
    ) -> "ResolvedOptions":
        """Fill unset fields from `context` (or the process default)."""
        ctx = context if context is not None else default_context()
        return ResolvedOptions(
            dtype=self.dtype if self.has_dtype else ctx.get_default_dtype(),
            device=self.device if self.has_device else ctx.get_default_device(),
        )


def _looks_like_device(text: str) -> bool:
    head = text.strip().lower().split(":", 1)[0]
    return head in {t.value for t in DeviceType}


@dataclass(frozen=True)
class ResolvedOptions:
    """
    Fully specified construction options.

    Attributes
    ----------
    device : Device
        Target device.
    dtype : ElementType
        Concrete element type.
    """

    device: Device
    dtype: ElementType
    numpy_dtype: np.dtype = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Raises for ElementType.DEFAULT
        object.__setattr__(self, "numpy_dtype", to_numpy_dtype(self.dtype))

    @property
    def itemsize(self) -> int:
        """Bytes per element."""
        return element_size(self.dtype)

    def __iter__(self):
        # Allows `device, dtype = resolve_options(...)`.
        yield self.device
        yield self.dtype


OptionsLike: TypeAlias = Union[
    None, TensorOptions, Device, DeviceType, ElementType, str, np.dtype, type
]


def resolve_options(
    partial: OptionsLike = None, context: Optional[ExecutionContext] = None
) -> ResolvedOptions:
    """
    Resolve a partial options value to a concrete `(device, dtype)` pair.

    Each field is handled independently: an explicit value is kept, an unset
    one is read from `context` (the process default context when omitted) at
    call time.

    Parameters
    ----------
    partial : OptionsLike, optional
        Options, bare device, bare element type, or None.
    context : ExecutionContext, optional
        Context supplying the defaults.

    Returns
    -------
    ResolvedOptions
    """
    return TensorOptions.of(partial).resolve(context)


@contextmanager
def with_options(
    options: OptionsLike, context: Optional[ExecutionContext] = None
) -> Iterator[ResolvedOptions]:
    """
    Temporarily install every field `options` sets as the context default.

    Unset fields keep their current value. Yields the options as they resolve
    inside the scope.
    """
    ctx = context if context is not None else default_context()
    opts = TensorOptions.of(options)
    device = opts.device if opts.has_device else ctx.get_default_device()
    dtype = opts.dtype if opts.has_dtype else ctx.get_default_dtype()
    with ctx.with_device(device), ctx.with_dtype(dtype):
        yield opts.resolve(ctx)
