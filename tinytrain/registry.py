"""Registry of kernels keyed by device type and kernel name."""

from __future__ import annotations

import threading
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple, TypeVar

from tinytrain.device import DeviceType

KernelKey = Tuple[DeviceType, str]

F = TypeVar("F", bound=Callable[..., Any])


class KernelRegistryError(LookupError):
    """Raised when a kernel is missing or registered twice."""


class KernelFunction:
    """A callable kernel held by the dispatcher."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[..., Any]) -> None:
        if not callable(func):
            raise TypeError(f"Kernel must be callable, got {type(func).__name__}")
        self.func = func

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"KernelFunction({name})"


def _normalize_key(key: KernelKey) -> KernelKey:
    device_type, name = key
    return DeviceType(device_type), str(name)


class Dispatcher:
    """Maps (device type, kernel name) pairs to kernels."""

    _instance: ClassVar[Optional["Dispatcher"]] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        self._kernels: Dict[KernelKey, KernelFunction] = {}

    @classmethod
    def instance(cls) -> "Dispatcher":
        """Return the shared dispatcher, creating it on first use."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def register(self, key: KernelKey, kernel: Callable[..., Any]) -> KernelFunction:
        """Register ``kernel`` under ``key``; a key may be registered only once."""
        device_type, name = _normalize_key(key)
        if (device_type, name) in self._kernels:
            raise KernelRegistryError(
                f"Kernel already registered: {name} on device: {int(device_type)}"
            )
        function = kernel if isinstance(kernel, KernelFunction) else KernelFunction(kernel)
        self._kernels[(device_type, name)] = function
        return function

    def get_kernel(self, key: KernelKey) -> KernelFunction:
        """Return the kernel registered under ``key``."""
        device_type, name = _normalize_key(key)
        try:
            return self._kernels[(device_type, name)]
        except KeyError:
            raise KernelRegistryError(
                f"Kernel not found: {name} on device: {int(device_type)}"
            ) from None

    def __contains__(self, key: object) -> bool:
        try:
            normalized = _normalize_key(key)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False
        return normalized in self._kernels


def register_kernel(device_type: DeviceType, name: str) -> Callable[[F], F]:
    """Decorator registering a function as a kernel with the shared dispatcher."""

    def decorator(func: F) -> F:
        Dispatcher.instance().register((device_type, name), func)
        return func

    return decorator