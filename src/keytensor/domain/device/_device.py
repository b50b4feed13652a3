"""
Device abstraction utilities.

This module defines lightweight abstractions for representing computation
devices (CPU and an accelerator) in a framework-agnostic way. It provides:

- `DeviceType`: an enumeration of supported device categories
- `Device`: an immutable device descriptor that validates and normalizes
  user-facing device strings such as "cpu", "cuda" or "cuda:0"

Only a single logical accelerator is modeled today. The optional index is
carried so that multi-accelerator selection can be added without changing
the type.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union
import re

from typing_extensions import TypeAlias

from .._errors import InvalidArgumentError


class DeviceType(Enum):
    """
    Enumeration of supported device categories.

    Attributes
    ----------
    CPU : DeviceType
        Central Processing Unit.
    CUDA : DeviceType
        CUDA-enabled accelerator. `ACCELERATOR` is an alias.
    """

    CPU = "cpu"
    CUDA = "cuda"
    ACCELERATOR = "cuda"


class Device:
    """
    Immutable computation device descriptor.

    Parameters
    ----------
    device : str | DeviceType | Device
        One of:
        - "cpu"
        - "cuda" (the single logical accelerator)
        - "cuda:<index>", where <index> is a non-negative integer
        - a `DeviceType`, optionally combined with `index`
        - another `Device` (copied)
    index : int, optional
        Accelerator index. Only valid for CUDA devices and only when `device`
        does not already carry one.

    Raises
    ------
    InvalidArgumentError
        If the device description is malformed or unsupported.

    Notes
    -----
    Instances compare and hash by `(type, index)`. Attributes are read-only.
    """

    __slots__ = ("_type", "_index")

    _CUDA_PATTERN = re.compile(r"^cuda(?::(\d+))?$")

    def __init__(
        self, device: Union[str, DeviceType, "Device"], index: Optional[int] = None
    ) -> None:
        if isinstance(device, Device):
            dev_type, dev_index = device.type, device.index
        elif isinstance(device, DeviceType):
            dev_type, dev_index = device, None
        elif isinstance(device, str):
            dev_type, dev_index = self._parse(device)
        else:
            raise InvalidArgumentError(
                "device", device, "expected a str, DeviceType or Device"
            )

        if index is not None:
            if dev_index is not None:
                raise InvalidArgumentError(
                    "index", index, f"device '{device}' already specifies an index"
                )
            dev_index = index

        if dev_index is not None:
            if dev_type is DeviceType.CPU:
                raise InvalidArgumentError(
                    "index", dev_index, "CPU devices do not take an index"
                )
            if (
                isinstance(dev_index, bool)
                or not isinstance(dev_index, int)
                or dev_index < 0
            ):
                raise InvalidArgumentError(
                    "index", dev_index, "expected a non-negative integer"
                )

        object.__setattr__(self, "_type", dev_type)
        object.__setattr__(self, "_index", dev_index)

    @classmethod
    def _parse(cls, device: str) -> tuple[DeviceType, Optional[int]]:
        text = device.strip().lower()
        if text == "cpu":
            return DeviceType.CPU, None
        m = cls._CUDA_PATTERN.match(text)
        if not m:
            raise InvalidArgumentError(
                "device", device, "expected 'cpu', 'cuda' or 'cuda:<index>'"
            )
        return DeviceType.CUDA, None if m.group(1) is None else int(m.group(1))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def type(self) -> DeviceType:
        """Device category."""
        return self._type

    @property
    def index(self) -> Optional[int]:
        """Accelerator index, or None for CPU and the default accelerator."""
        return self._index

    def __str__(self) -> str:
        """
        Return the canonical string representation of the device.

        Returns
        -------
        str
            "cpu", "cuda" or "cuda:<index>".
        """
        if self._type is DeviceType.CPU:
            return "cpu"
        return "cuda" if self._index is None else f"cuda:{self._index}"

    def __repr__(self) -> str:
        return f"Device('{self}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return (self._type, self._index) == (other._type, other._index)

    def __hash__(self) -> int:
        return hash((self._type, self._index))

    def __reduce__(self):
        return (Device, (str(self),))

    def is_cpu(self) -> bool:
        """Return True if this device is a CPU."""
        return self._type is DeviceType.CPU

    def is_cuda(self) -> bool:
        """Return True if this device is the accelerator."""
        return self._type is DeviceType.CUDA


DeviceSpec: TypeAlias = Union[str, DeviceType, Device]
"""Any value accepted by the `Device` constructor."""
