from ._device import Device, DeviceSpec, DeviceType

__all__ = [Device.__name__, DeviceType.__name__, "DeviceSpec"]
