"""
Execution context: the ambient device, element type and debug flag.

An `ExecutionContext` answers "what device/dtype should a construction call
that did not specify one use right now". Code can overwrite the current values
directly (`set_default_device`) or install a scoped override
(`with_device`, `with_dtype`) that restores the previous value when the scope
exits, whether normally or by an exception.

Storage
-------
Each register has two layers:

- a process-wide base value, guarded by a lock. `set_default_*` writes it,
  so every thread and task (including ones started later) sees the change;
- scoped overrides, kept in module-level `contextvars.ContextVar`s keyed by
  context. They are local to the current thread or asyncio task, so a
  `with_device(...)` in one task never leaks into another.

A `set_default_*` call made inside an active scope also replaces that scope's
override so the new value is current at once; the scope still restores what
it captured on exit.

Process default
---------------
Module-level helpers (`get_default_device`, `with_dtype`, ...) operate on a
lazily created process default context whose initial values come from the
environment (see `_config`). Tests and embedded runtimes can construct their
own `ExecutionContext` and pass it explicitly.

Example
-------
    with with_device("cuda"):
        with with_dtype(ElementType.FLOAT64):
            opts = resolve_options()   # (cuda, FLOAT64)
    opts = resolve_options()           # back to the previous defaults
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Generic, Iterator, Mapping, Optional, Tuple, TypeVar
import itertools
import logging
import threading

from ...domain._dtype import ElementType
from ...domain.device._device import Device, DeviceSpec
from .._numpy_dtype import as_element_type
from ._config import ContextConfig, load_config

logger = logging.getLogger(__name__)

T = TypeVar("T")

_context_ids = itertools.count()

# Scoped overrides per register: context key -> value. Copy-on-write mappings.
_DEVICE_OVERRIDES: ContextVar[Mapping[int, Any]] = ContextVar(
    "keytensor_device_overrides", default={}
)
_DTYPE_OVERRIDES: ContextVar[Mapping[int, Any]] = ContextVar(
    "keytensor_dtype_overrides", default={}
)
_DEBUG_OVERRIDES: ContextVar[Mapping[int, Any]] = ContextVar(
    "keytensor_debug_overrides", default={}
)

_NO_OVERRIDE = object()


class _Register(Generic[T]):
    """One current-value slot: a shared base plus task-local scoped overrides."""

    def __init__(
        self, overrides: ContextVar[Mapping[int, Any]], key: int, base: T
    ) -> None:
        self._overrides = overrides
        self._key = key
        self._base = base
        self._lock = threading.Lock()

    def get(self) -> T:
        value = self._overrides.get().get(self._key, _NO_OVERRIDE)
        if value is not _NO_OVERRIDE:
            return value
        with self._lock:
            return self._base

    def set(self, value: T) -> None:
        with self._lock:
            self._base = value
        scoped = self._overrides.get()
        if self._key in scoped:
            self._overrides.set({**scoped, self._key: value})

    @contextmanager
    def override(self, value: T) -> Iterator[T]:
        previous = self._overrides.get().get(self._key, _NO_OVERRIDE)
        self._overrides.set({**self._overrides.get(), self._key: value})
        try:
            yield value
        finally:
            # Restore only this context's entry.
            restored = dict(self._overrides.get())
            if previous is _NO_OVERRIDE:
                restored.pop(self._key, None)
            else:
                restored[self._key] = previous
            self._overrides.set(restored)


class ExecutionContext:
    """
    Holder of the current device, element type and debug-mode registers.

    Parameters
    ----------
    device : DeviceSpec, optional
        Initial default device. Defaults to `config.device`.
    dtype : ElementType | str | numpy dtype, optional
        Initial default element type. Defaults to `config.dtype`.
    debug : bool, optional
        Initial debug-mode flag. Defaults to `config.debug`.
    config : ContextConfig, optional
        Base configuration. Defaults to `ContextConfig()` (cpu, float32, off).

    Notes
    -----
    The configured initial values are also what `set_default_dtype(DEFAULT)`
    and `set_default_device(None)` fall back to, and what `reset()` restores.
    """

    def __init__(
        self,
        device: Optional[DeviceSpec] = None,
        dtype: Any = None,
        debug: Optional[bool] = None,
        *,
        config: Optional[ContextConfig] = None,
    ) -> None:
        base = config if config is not None else ContextConfig()
        self._config = ContextConfig(
            device=base.device if device is None else Device(device),
            dtype=base.dtype if dtype is None else as_element_type(dtype),
            debug=base.debug if debug is None else bool(debug),
        )

        key = next(_context_ids)
        self._device: _Register[Device] = _Register(
            _DEVICE_OVERRIDES, key, self._config.device
        )
        self._dtype: _Register[ElementType] = _Register(
            _DTYPE_OVERRIDES, key, self._config.dtype
        )
        self._debug: _Register[bool] = _Register(
            _DEBUG_OVERRIDES, key, self._config.debug
        )

    def __repr__(self) -> str:
        return (
            f"ExecutionContext(device={self.get_default_device()}, "
            f"dtype={self.get_default_dtype()}, debug={self.debug_mode()})"
        )

    @property
    def config(self) -> ContextConfig:
        """The initial values this context was created with."""
        return self._config

    # ------------------------------------------------------------------
    # normalization
    # ------------------------------------------------------------------

    def _normalize_device(self, device: Optional[DeviceSpec]) -> Device:
        if device is None:
            return self._config.device
        return Device(device)

    def _normalize_dtype(self, dtype: Any) -> ElementType:
        value = as_element_type(dtype)
        if value is ElementType.DEFAULT:
            return self._config.dtype
        return value

    # ------------------------------------------------------------------
    # device register
    # ------------------------------------------------------------------

    def get_default_device(self) -> Device:
        """Return the current default device."""
        return self._device.get()

    def set_default_device(self, device: Optional[DeviceSpec]) -> None:
        """
        Overwrite the default device for every thread and task.

        Passing None reinstates the configured initial device.
        """
        value = self._normalize_device(device)
        logger.debug("default device set to %s", value)
        self._device.set(value)

    @contextmanager
    def with_device(self, device: Optional[DeviceSpec]) -> Iterator[Device]:
        """
        Temporarily install `device` as the default device in this task.

        The previously current device is restored on every exit path.
        Usable as a context manager or a decorator.

        Yields
        ------
        Device
            The installed device.
        """
        value = self._normalize_device(device)
        with self._device.override(value):
            yield value

    # ------------------------------------------------------------------
    # dtype register
    # ------------------------------------------------------------------

    def get_default_dtype(self) -> ElementType:
        """Return the current default element type (always concrete)."""
        return self._dtype.get()

    def set_default_dtype(self, dtype: Any) -> None:
        """
        Overwrite the default element type for every thread and task.

        `ElementType.DEFAULT` reinstates the configured initial type.
        """
        value = self._normalize_dtype(dtype)
        logger.debug("default dtype set to %s", value)
        self._dtype.set(value)

    @contextmanager
    def with_dtype(self, dtype: Any) -> Iterator[ElementType]:
        """
        Temporarily install `dtype` as the default element type in this task.

        The previously current type is restored on every exit path.
        Usable as a context manager or a decorator.
        """
        value = self._normalize_dtype(dtype)
        with self._dtype.override(value):
            yield value

    # ------------------------------------------------------------------
    # debug mode
    # ------------------------------------------------------------------

    def debug_mode(self) -> bool:
        """Whether invalidation checks are enabled."""
        return self._debug.get()

    def set_debug_mode(self, flag: bool) -> None:
        logger.debug("debug mode %s", "enabled" if flag else "disabled")
        self._debug.set(bool(flag))

    @contextmanager
    def with_debug_mode(self, flag: bool = True) -> Iterator[bool]:
        with self._debug.override(bool(flag)) as value:
            yield value

    # ------------------------------------------------------------------

    def snapshot(self) -> Tuple[Device, ElementType]:
        """Return the current `(device, dtype)` pair."""
        return self._device.get(), self._dtype.get()

    def reset(self) -> None:
        """Restore all registers to the configured initial values."""
        self._device.set(self._config.device)
        self._dtype.set(self._config.dtype)
        self._debug.set(self._config.debug)


_default_context: Optional[ExecutionContext] = None
_default_context_lock = threading.Lock()


def default_context() -> ExecutionContext:
    """
    Return the process default execution context.

    Created on first use from the environment configuration.
    """
    global _default_context
    ctx = _default_context
    if ctx is None:
        with _default_context_lock:
            if _default_context is None:
                _default_context = ExecutionContext(config=load_config())
            ctx = _default_context
    return ctx


def reset_default_context(config: Optional[ContextConfig] = None) -> ExecutionContext:
    """
    Replace the process default context.

    Parameters
    ----------
    config : ContextConfig, optional
        Configuration for the new context. Re-read from the environment when
        omitted.

    Returns
    -------
    ExecutionContext
        The new default context.
    """
    global _default_context
    with _default_context_lock:
        _default_context = ExecutionContext(
            config=config if config is not None else load_config()
        )
        return _default_context


def get_default_device() -> Device:
    return default_context().get_default_device()


def set_default_device(device: Optional[DeviceSpec]) -> None:
    default_context().set_default_device(device)


def get_default_dtype() -> ElementType:
    return default_context().get_default_dtype()


def set_default_dtype(dtype: Any) -> None:
    default_context().set_default_dtype(dtype)


def with_device(device: Optional[DeviceSpec]):
    """Scoped default-device override on the process default context."""
    return default_context().with_device(device)


def with_dtype(dtype: Any):
    """Scoped default-dtype override on the process default context."""
    return default_context().with_dtype(dtype)


def debug_mode() -> bool:
    return default_context().debug_mode()


def set_debug_mode(flag: bool) -> None:
    default_context().set_debug_mode(flag)


def with_debug_mode(flag: bool = True):
    return default_context().with_debug_mode(flag)
