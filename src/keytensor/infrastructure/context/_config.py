"""
Environment configuration for the process default execution context.

Recognized variables
--------------------
KEYTENSOR_DEFAULT_DEVICE
    Initial default device ("cpu", "cuda", "cuda:<index>"). Defaults to "cpu".
KEYTENSOR_DEFAULT_DTYPE
    Initial default element type ("float32", "float64", ...). Defaults to
    "float32".
KEYTENSOR_DEBUG
    Enables debug mode unless unset or one of "0", "", "false".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
import os

from ...domain._dtype import ElementType
from ...domain._errors import InvalidArgumentError
from ...domain.device._device import Device
from .._numpy_dtype import as_element_type

ENV_DEFAULT_DEVICE = "KEYTENSOR_DEFAULT_DEVICE"
ENV_DEFAULT_DTYPE = "KEYTENSOR_DEFAULT_DTYPE"
ENV_DEBUG = "KEYTENSOR_DEBUG"

_FALSY = ("0", "", "false", "False", "FALSE")


@dataclass(frozen=True)
class ContextConfig:
    """
    Initial register values for an execution context.

    Attributes
    ----------
    device : Device
        Default device.
    dtype : ElementType
        Default element type. Must be concrete.
    debug : bool
        Initial debug-mode flag.
    """

    device: Device = Device("cpu")
    dtype: ElementType = ElementType.FLOAT32
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.dtype.is_concrete:
            raise InvalidArgumentError(
                "dtype", self.dtype, "the context default must be a concrete type"
            )


def load_config(environ: Optional[Mapping[str, str]] = None) -> ContextConfig:
    """
    Build a `ContextConfig` from environment variables.

    Parameters
    ----------
    environ : Mapping[str, str], optional
        Variable source. Defaults to `os.environ`.

    Raises
    ------
    InvalidArgumentError
        If a variable holds an unparseable device or dtype, or the dtype is
        "default".
    """
    env = os.environ if environ is None else environ

    device = Device(env.get(ENV_DEFAULT_DEVICE, "cpu") or "cpu")
    dtype = as_element_type(env.get(ENV_DEFAULT_DTYPE, "float32") or "float32")
    debug = env.get(ENV_DEBUG, "0").strip() not in _FALSY

    return ContextConfig(device=device, dtype=dtype, debug=debug)
