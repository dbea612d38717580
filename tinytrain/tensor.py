"""Dense tensors backed by shared host buffers."""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional, Sequence, Union

import numpy as np

from tinytrain.datatype import DataType, UnsupportedDataTypeError, cast, to_numpy
from tinytrain.device import Device, DeviceManager, DeviceType
from tinytrain.dispatch import ALL_TYPES, dispatch_func, dispatch_func_multi


class TensorBuffer:
    """A block of raw bytes owned by a device."""

    __slots__ = ("device", "data")

    def __init__(self, device: Device, size: int) -> None:
        if device is None:
            raise ValueError("TensorBuffer requires a device")
        if size < 0:
            raise ValueError(f"Buffer size must be non-negative, got {size}")
        if device.type is not DeviceType.CPU:
            raise ValueError(f"Unsupported device type: {int(device.type)}")
        self.device = device
        self.data = np.zeros(size, dtype=np.uint8)

    def __len__(self) -> int:
        return int(self.data.size)

    def __repr__(self) -> str:
        return f"TensorBuffer(device={self.device}, size={len(self)})"


def _element_count(dims: Sequence[int]) -> int:
    if any(d < 0 for d in dims):
        raise ValueError(f"Dimensions must be non-negative, got {list(dims)}")
    return math.prod(dims)


class Tensor:
    """An n-dimensional array of one data type living in a buffer on a device."""

    def __init__(
        self,
        dims: Iterable[int],
        dtype: DataType,
        device: Optional[Device] = None,
    ) -> None:
        if device is None:
            device = DeviceManager.instance().get_device(DeviceType.CPU, 0)
        self._dims: List[int] = [int(d) for d in dims]
        self._dtype = DataType(dtype)
        self._num_elements = _element_count(self._dims)
        self._offset = 0
        self._buffer = TensorBuffer(device, self._dtype.size() * self._num_elements)
        self._init_autograd()

    def _init_autograd(self) -> None:
        self.grad: Optional[Tensor] = None
        self.requires_grad = False
        self.is_leaf = True
        self.grad_fn: Any = None
        self.output_idx = -1

    @classmethod
    def view_of(cls, tensor: "Tensor", offset: int, dims: Iterable[int]) -> "Tensor":
        """Return a tensor sharing ``tensor``'s buffer, starting ``offset`` bytes in."""
        view = cls.__new__(cls)
        view._dims = [int(d) for d in dims]
        view._dtype = tensor._dtype
        view._num_elements = _element_count(view._dims)
        view._offset = int(offset)
        view._buffer = tensor._buffer
        end = view._offset + view._dtype.size() * view._num_elements
        if view._offset < 0 or end > len(view._buffer):
            raise ValueError(
                f"View of {end - view._offset} bytes at offset {view._offset} "
                f"exceeds buffer of {len(view._buffer)} bytes"
            )
        view._init_autograd()
        return view

    @property
    def device(self) -> Device:
        return self._buffer.device

    @property
    def dims(self) -> List[int]:
        return list(self._dims)

    @property
    def dtype(self) -> DataType:
        return self._dtype

    @property
    def num_elements(self) -> int:
        return self._num_elements

    @property
    def size_in_bytes(self) -> int:
        return self._dtype.size() * self._num_elements

    @property
    def data(self) -> np.ndarray:
        """A writable numpy view of the elements, shaped like the tensor."""
        raw = self._buffer.data[self._offset : self._offset + self.size_in_bytes]
        return raw.view(to_numpy(self._dtype)).reshape(self._dims)

    def fill(self, value: Union[int, float]) -> None:
        """Set every element to ``value`` converted to the tensor's data type."""
        self.device.set_device()
        scalar = dispatch_func(
            self._dtype,
            lambda np_type: np_type(cast(value, self._dtype)),
            ALL_TYPES,
            "fill",
        )
        self.data[...] = scalar

    def _float_view(self) -> np.ndarray:
        if self._dtype is not DataType.FLOAT32:
            raise UnsupportedDataTypeError(self._dtype, "float view")
        return self.data

    def matrix(self) -> np.ndarray:
        """A 2-D float32 view: all leading dimensions folded into rows."""
        if not self._dims:
            raise ValueError("matrix() needs at least one dimension")
        return self._float_view().reshape(-1, self._dims[-1]) if self._dims[-1] else (
            self._float_view().reshape(math.prod(self._dims[:-1]), 0)
        )

    def vector(self) -> np.ndarray:
        """A 1-D float32 view of a one-dimensional tensor."""
        if len(self._dims) != 1:
            raise ValueError(f"vector() needs a 1-D tensor, got {len(self._dims)} dimensions")
        return self._float_view()

    def _alias(self) -> "Tensor":
        alias = Tensor.view_of(self, self._offset, self._dims)
        if self.grad is not None:
            alias.grad = Tensor.view_of(self.grad, self.grad._offset, self.grad._dims)
        return alias

    def to(self, target: Union[Device, DataType]) -> "Tensor":
        """Return this tensor on another device or converted to another data type."""
        if isinstance(target, DataType):
            return self._to_dtype(target)
        if isinstance(target, Device):
            return self._to_device(target)
        raise TypeError(f"Cannot move a tensor to {target!r}")

    def _to_device(self, device: Device) -> "Tensor":
        if device == self.device:
            return self._alias()
        raise ValueError(f"Unsupported device type: {int(device.type)}")

    def _to_dtype(self, dtype: DataType) -> "Tensor":
        if dtype is self._dtype:
            return self._alias()
        self.device.set_device()
        converted = Tensor(self._dims, dtype, self.device)
        source = self.data

        def _copy(_src_type: type, dst_type: type) -> None:
            converted.data[...] = source.astype(dst_type)

        dispatch_func_multi([self._dtype, dtype], _copy, [ALL_TYPES, ALL_TYPES], "Cast")
        if self.grad is not None:
            converted.grad = self.grad.to(dtype)
        converted.requires_grad = self.requires_grad
        return converted

    def view(self, dims: Iterable[int]) -> "Tensor":
        """Return a tensor of shape ``dims`` sharing this tensor's elements."""
        dims = [int(d) for d in dims]
        count = _element_count(dims)
        if count != self._num_elements:
            raise ValueError(
                f"Cannot view {self._num_elements} elements as shape {dims} ({count} elements)"
            )
        return Tensor.view_of(self, self._offset, dims)

    def contiguous(self) -> "Tensor":
        return self.view(self._dims)

    def flatten(self, start: int = 0, end: int = -1) -> "Tensor":
        """Merge dimensions ``start`` through ``end`` (inclusive) into one."""
        ndim = len(self._dims)
        start_dim = start if start >= 0 else start + ndim
        end_dim = end if end >= 0 else end + ndim
        if not (start_dim >= 0 and end_dim >= start_dim and end_dim <= ndim):
            raise ValueError(f"Invalid flatten range [{start}, {end}] for {ndim} dimensions")
        new_shape = self._dims[:start_dim]
        if end_dim < ndim:
            new_shape.append(math.prod(self._dims[start_dim : end_dim + 1]))
        new_shape.extend(self._dims[end_dim + 1 :])
        return self.contiguous().view(new_shape)

    def squeeze(self, dim: int) -> "Tensor":
        """Remove dimension ``dim``, which must have size one."""
        new_shape = list(self._dims)
        if dim < 0:
            dim += len(new_shape)
        if not 0 <= dim < len(new_shape):
            raise IndexError(f"Dimension {dim} out of range for {len(new_shape)} dimensions")
        if new_shape[dim] != 1:
            raise ValueError(
                f"Cannot squeeze dim {dim} because size ({new_shape[dim]}) != 1."
            )
        del new_shape[dim]
        return self.contiguous().view(new_shape)

    def requires_grad_(self) -> "Tensor":
        """Mark the tensor as needing a gradient, allocating a zeroed one."""
        self.requires_grad = True
        if self.grad is None:
            self.grad = Tensor(self._dims, self._dtype, self.device)
            self.grad.fill(0.0)
        return self

    def zero_grad(self) -> None:
        if self.grad is not None:
            self.grad.fill(0.0)

    def __repr__(self) -> str:
        address = self._buffer.data.__array_interface__["data"][0] + self._offset
        dims = "".join(f"{d}, " for d in self._dims)
        return f"Tensor(data_ptr={address:#x}, dims=[{dims}], dtype={self._dtype.desc()})"