"""Devices and the registry that owns them."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional, Tuple


class DeviceType(enum.IntEnum):
    """Kind of device a tensor lives on."""

    CPU = 0
    CUDA = 1


_state = threading.local()
_device_locks: Dict[Tuple[DeviceType, int], threading.RLock] = {}
_device_locks_guard = threading.Lock()


def _lock_for(device: "Device") -> threading.RLock:
    """Return the lock that serialises work on ``device``."""
    key = (device.type, device.index)
    with _device_locks_guard:
        lock = _device_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _device_locks[key] = lock
        return lock


def _current_device() -> Optional["Device"]:
    """Return the device made current in this thread, if any."""
    return getattr(_state, "current", None)


@dataclass(frozen=True)
class Device:
    """A device identified by its type and index."""

    type: DeviceType
    index: int = 0

    def is_cpu(self) -> bool:
        return self.type is DeviceType.CPU

    def is_cuda(self) -> bool:
        return self.type is DeviceType.CUDA

    def set_device(self) -> None:
        """Make this device the current one for the calling thread."""
        _state.current = self

    def synchronize(self) -> None:
        """Wait until work that other threads hold on this device is done."""
        with _lock_for(self):
            _state.last_synchronized = self


class DeviceManager:
    """Process-wide registry of the available devices."""

    _instance: ClassVar[Optional["DeviceManager"]] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._devices: Dict[DeviceType, Tuple[Device, ...]] = {
            DeviceType.CPU: (Device(DeviceType.CPU, 0),),
            DeviceType.CUDA: (),
        }

    @classmethod
    def instance(cls) -> "DeviceManager":
        """Return the shared manager, creating it on first use."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def get_device(self, device_type: DeviceType, index: int = 0) -> Device:
        """Return the device of ``device_type`` at ``index``."""
        device_type = DeviceType(device_type)
        devices = self._devices.get(device_type, ())
        if not 0 <= index < len(devices):
            raise LookupError(f"No {device_type.name} device with index {index}")
        return devices[index]

    def get_default_device(self) -> Device:
        return self.get_device(DeviceType.CPU, 0)

    def get_all_available_devices(self, device_type: DeviceType) -> List[Device]:
        return list(self._devices.get(DeviceType(device_type), ()))