import unittest
from unittest import TestCase

from keytensor.domain._errors import InvalidArgumentError
from keytensor.domain.device._device import Device, DeviceType


class TestDeviceParsing(TestCase):
    def test_cpu_string(self):
        d = Device("cpu")
        self.assertIs(d.type, DeviceType.CPU)
        self.assertIsNone(d.index)
        self.assertTrue(d.is_cpu())
        self.assertFalse(d.is_cuda())
        self.assertEqual(str(d), "cpu")

    def test_cuda_without_index_is_single_logical_accelerator(self):
        d = Device("cuda")
        self.assertIs(d.type, DeviceType.CUDA)
        self.assertIsNone(d.index)
        self.assertEqual(str(d), "cuda")

    def test_cuda_with_index(self):
        d = Device("cuda:1")
        self.assertEqual(d.index, 1)
        self.assertEqual(str(d), "cuda:1")
        self.assertEqual(repr(d), "Device('cuda:1')")

    def test_from_device_type_and_index(self):
        self.assertEqual(Device(DeviceType.CUDA, index=0), Device("cuda:0"))
        self.assertEqual(Device(DeviceType.CPU), Device("cpu"))

    def test_accelerator_alias(self):
        self.assertIs(DeviceType.ACCELERATOR, DeviceType.CUDA)
        self.assertEqual(Device(DeviceType.ACCELERATOR), Device("cuda"))

    def test_copy_constructor(self):
        d = Device("cuda:2")
        self.assertEqual(Device(d), d)

    def test_invalid_strings_raise(self):
        for bad in ["gpu", "cuda:", "cuda:-1", "cpu:0", "", "cuda:x"]:
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidArgumentError):
                    Device(bad)

    def test_invalid_index_raises(self):
        with self.assertRaises(InvalidArgumentError):
            Device("cpu", index=0)
        with self.assertRaises(InvalidArgumentError):
            Device("cuda:0", index=1)
        with self.assertRaises(InvalidArgumentError):
            Device("cuda", index=-3)

    def test_invalid_argument_is_value_error(self):
        with self.assertRaises(ValueError):
            Device(42)


class TestDeviceValueSemantics(TestCase):
    def test_equality_and_hash(self):
        self.assertEqual(Device("cpu"), Device("cpu"))
        self.assertNotEqual(Device("cpu"), Device("cuda"))
        self.assertNotEqual(Device("cuda"), Device("cuda:0"))
        self.assertEqual(len({Device("cuda:0"), Device("cuda:0"), Device("cpu")}), 2)

    def test_not_equal_to_strings(self):
        self.assertNotEqual(Device("cpu"), "cpu")

    def test_immutable(self):
        d = Device("cpu")
        with self.assertRaises(AttributeError):
            d.index = 3
        with self.assertRaises(AttributeError):
            d.type = DeviceType.CUDA


if __name__ == "__main__":
    unittest.main()
