import unittest
from unittest import TestCase
import dataclasses
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from keytensor.domain._dtype import ElementType
from keytensor.domain._errors import InvalidArgumentError
from keytensor.domain.device._device import Device, DeviceType
from keytensor.infrastructure.context._config import ContextConfig
from keytensor.infrastructure.context import _execution_context as ec
from keytensor.infrastructure.context._execution_context import ExecutionContext
from keytensor.infrastructure.options._options import (
    ResolvedOptions,
    TensorOptions,
    resolve_options,
    with_options,
)

CPU = Device("cpu")
CUDA = Device("cuda")


class TestTensorOptionsForms(TestCase):
    def test_neither(self):
        opts = TensorOptions()
        self.assertFalse(opts.has_dtype)
        self.assertFalse(opts.has_device)
        self.assertEqual(TensorOptions.of(None), opts)

    def test_dtype_only(self):
        opts = TensorOptions.of(ElementType.FLOAT64)
        self.assertTrue(opts.has_dtype)
        self.assertFalse(opts.has_device)
        self.assertIs(TensorOptions.of(np.float32).dtype, ElementType.FLOAT32)
        self.assertIs(TensorOptions.of("double").dtype, ElementType.FLOAT64)

    def test_device_only(self):
        self.assertEqual(TensorOptions.of(CUDA).device, CUDA)
        self.assertEqual(TensorOptions.of(DeviceType.CUDA).device, CUDA)
        self.assertEqual(TensorOptions.of("cuda:1").device, Device("cuda:1"))
        self.assertEqual(TensorOptions.of("cpu").device, CPU)
        self.assertFalse(TensorOptions.of("cpu").has_dtype)

    def test_both(self):
        opts = TensorOptions(ElementType.FLOAT64, "cuda")
        self.assertIs(opts.dtype, ElementType.FLOAT64)
        self.assertEqual(opts.device, CUDA)

    def test_of_returns_existing_options_unchanged(self):
        opts = TensorOptions(ElementType.FLOAT64, CPU)
        self.assertIs(TensorOptions.of(opts), opts)

    def test_invalid_values_raise(self):
        with self.assertRaises(InvalidArgumentError):
            TensorOptions.of("tpu")
        with self.assertRaises(InvalidArgumentError):
            TensorOptions(device="gpu:0")
        with self.assertRaises(InvalidArgumentError):
            TensorOptions.of(np.int8)

    def test_immutable_and_copy_helpers(self):
        opts = TensorOptions(dtype=ElementType.FLOAT32)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            opts.dtype = ElementType.FLOAT64
        moved = opts.with_device("cuda")
        self.assertIsNone(opts.device)
        self.assertEqual(moved, TensorOptions(ElementType.FLOAT32, CUDA))
        self.assertEqual(moved.with_dtype(ElementType.DEFAULT).has_dtype, False)


class TestResolveOptions(TestCase):
    def setUp(self) -> None:
        self.ctx = ExecutionContext()

    def test_nothing_explicit_uses_context(self):
        resolved = resolve_options(None, self.ctx)
        self.assertEqual(resolved, ResolvedOptions(CPU, ElementType.FLOAT32))

    def test_explicit_fields_are_kept(self):
        self.ctx.set_default_device(CUDA)
        self.ctx.set_default_dtype(ElementType.FLOAT64)
        resolved = resolve_options(TensorOptions(ElementType.FLOAT32, CPU), self.ctx)
        self.assertEqual(resolved.device, CPU)
        self.assertIs(resolved.dtype, ElementType.FLOAT32)

    def test_fields_resolve_independently(self):
        self.ctx.set_default_device(CUDA)
        self.ctx.set_default_dtype(ElementType.FLOAT64)

        only_dtype = resolve_options(ElementType.FLOAT32, self.ctx)
        self.assertEqual(only_dtype.device, CUDA)
        self.assertIs(only_dtype.dtype, ElementType.FLOAT32)

        only_device = resolve_options("cpu", self.ctx)
        self.assertEqual(only_device.device, CPU)
        self.assertIs(only_device.dtype, ElementType.FLOAT64)

    def test_nested_scopes_resolve_then_restore(self):
        with self.ctx.with_device(DeviceType.ACCELERATOR):
            with self.ctx.with_dtype(ElementType.FLOAT64):
                device, dtype = resolve_options(context=self.ctx)
                self.assertEqual(device, CUDA)
                self.assertIs(dtype, ElementType.FLOAT64)
        self.assertEqual(
            resolve_options(context=self.ctx),
            ResolvedOptions(CPU, ElementType.FLOAT32),
        )

    def test_resolution_is_late_binding(self):
        partial = TensorOptions(dtype=ElementType.FLOAT64)
        with self.ctx.with_device(CUDA):
            self.assertEqual(partial.resolve(self.ctx).device, CUDA)
        self.assertEqual(partial.resolve(self.ctx).device, CPU)

    def test_resolved_options_metadata(self):
        resolved = resolve_options(ElementType.FLOAT64, self.ctx)
        self.assertEqual(resolved.itemsize, 8)
        self.assertEqual(resolved.numpy_dtype, np.dtype(np.float64))
        self.assertEqual(resolve_options(None, self.ctx).itemsize, 4)

    def test_resolved_options_reject_sentinel(self):
        with self.assertRaises(InvalidArgumentError):
            ResolvedOptions(CPU, ElementType.DEFAULT)


class TestResolveWithProcessDefault(TestCase):
    def setUp(self) -> None:
        ec.reset_default_context(ContextConfig())

    def tearDown(self) -> None:
        ec.reset_default_context(ContextConfig())

    def test_module_scopes_feed_resolution(self):
        with ec.with_device(CUDA):
            with ec.with_dtype(ElementType.FLOAT64):
                self.assertEqual(
                    resolve_options(), ResolvedOptions(CUDA, ElementType.FLOAT64)
                )
        self.assertEqual(resolve_options(), ResolvedOptions(CPU, ElementType.FLOAT32))

    def test_worker_thread_resolves_process_defaults_set_earlier(self):
        ec.set_default_dtype(ElementType.FLOAT64)
        ec.set_default_device("cuda")
        with ThreadPoolExecutor(max_workers=1) as pool:
            in_worker = pool.submit(resolve_options).result(timeout=5)
        self.assertEqual(in_worker, ResolvedOptions(CUDA, ElementType.FLOAT64))
        self.assertEqual(resolve_options(), in_worker)

    def test_scoped_override_stays_out_of_worker_threads(self):
        with ThreadPoolExecutor(max_workers=1) as pool:
            # start the worker before the scope is entered
            pool.submit(int).result(timeout=5)
            with ec.with_dtype(ElementType.FLOAT64):
                in_worker = pool.submit(resolve_options).result(timeout=5)
                self.assertIs(resolve_options().dtype, ElementType.FLOAT64)
        self.assertIs(in_worker.dtype, ElementType.FLOAT32)

    def test_with_options_overrides_set_fields_only(self):
        ec.set_default_dtype(ElementType.FLOAT64)
        with with_options("cuda") as resolved:
            self.assertEqual(resolved, ResolvedOptions(CUDA, ElementType.FLOAT64))
            self.assertEqual(ec.get_default_device(), CUDA)
        self.assertEqual(ec.get_default_device(), CPU)
        self.assertIs(ec.get_default_dtype(), ElementType.FLOAT64)

    def test_with_options_restores_after_error(self):
        with self.assertRaises(RuntimeError):
            with with_options(TensorOptions(ElementType.FLOAT64, CUDA)):
                raise RuntimeError("kernel failed")
        self.assertEqual(resolve_options(), ResolvedOptions(CPU, ElementType.FLOAT32))


if __name__ == "__main__":
    unittest.main()
