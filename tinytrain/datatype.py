"""Element data types, their sizes and host-side conversions."""

from __future__ import annotations

import enum
from typing import Any, Union

import numpy as np


class DataType(enum.Enum):
    """Element type of a tensor."""

    UINT8 = 0
    INT8 = 1
    UINT16 = 2
    INT16 = 3
    UINT32 = 4
    INT32 = 5
    UINT64 = 6
    INT64 = 7
    BFLOAT16 = 8
    FLOAT16 = 9
    FLOAT32 = 10
    FLOAT64 = 11

    def size(self) -> int:
        """Size of one element in bytes."""
        return _SIZES[self]

    def desc(self) -> str:
        """Short human-readable name of the type."""
        return _DESCS[self]


_SIZES = {
    DataType.UINT8: 1,
    DataType.INT8: 1,
    DataType.UINT16: 2,
    DataType.INT16: 2,
    DataType.UINT32: 4,
    DataType.INT32: 4,
    DataType.UINT64: 8,
    DataType.INT64: 8,
    DataType.BFLOAT16: 2,
    DataType.FLOAT16: 2,
    DataType.FLOAT32: 4,
    DataType.FLOAT64: 8,
}

_DESCS = {
    DataType.UINT8: "uint8",
    DataType.INT8: "int8",
    DataType.UINT16: "uint16",
    DataType.INT16: "int16",
    DataType.UINT32: "uint32",
    DataType.INT32: "int32",
    DataType.UINT64: "uint64",
    DataType.INT64: "int64",
    DataType.BFLOAT16: "bf16",
    DataType.FLOAT16: "fp16",
    DataType.FLOAT32: "fp32",
    DataType.FLOAT64: "fp64",
}

# On the host, the reduced floating types are stored as raw 16-bit words.
_NUMPY_TYPES = {
    DataType.UINT8: np.uint8,
    DataType.INT8: np.int8,
    DataType.UINT16: np.uint16,
    DataType.INT16: np.int16,
    DataType.UINT32: np.uint32,
    DataType.INT32: np.int32,
    DataType.UINT64: np.uint64,
    DataType.INT64: np.int64,
    DataType.BFLOAT16: np.uint16,
    DataType.FLOAT16: np.uint16,
    DataType.FLOAT32: np.float32,
    DataType.FLOAT64: np.float64,
}

_REDUCED = frozenset({DataType.BFLOAT16, DataType.FLOAT16})
_SIGNED = frozenset({DataType.INT8, DataType.INT16, DataType.INT32, DataType.INT64})

_FROM_NUMPY = {
    np.dtype(np_type): dtype for dtype, np_type in _NUMPY_TYPES.items() if dtype not in _REDUCED
}


class UnsupportedDataTypeError(ValueError):
    """Raised when an operation does not support a data type."""

    def __init__(self, dtype: Any, context: str = "") -> None:
        self.dtype = dtype
        self.context = context
        name = dtype.desc() if isinstance(dtype, DataType) else str(dtype)
        message = f"Unsupported data type: {name}"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)


def to_numpy(dtype: DataType) -> type:
    """Return the numpy scalar type used to store elements of ``dtype`` on the host."""
    return _NUMPY_TYPES[DataType(dtype)]


def from_numpy(np_dtype: Union[type, str, np.dtype]) -> DataType:
    """Return the data type whose host storage is ``np_dtype``."""
    key = np.dtype(np_dtype)
    try:
        return _FROM_NUMPY[key]
    except KeyError:
        raise UnsupportedDataTypeError(key, "from_numpy") from None


def cast(value: Any, dtype: DataType) -> Union[int, float]:
    """Convert ``value`` the way a static cast to ``dtype`` would.

    Floats are truncated toward zero for integer targets and integers wrap
    around to the width of the target type.
    """
    dtype = DataType(dtype)
    if dtype in _REDUCED:
        raise UnsupportedDataTypeError(dtype, "cast")
    if dtype is DataType.FLOAT32:
        return float(np.float32(value))
    if dtype is DataType.FLOAT64:
        return float(value)
    bits = dtype.size() * 8
    wrapped = int(value) & ((1 << bits) - 1)
    if dtype in _SIGNED and wrapped >= 1 << (bits - 1):
        wrapped -= 1 << bits
    return wrapped


def ceil_div(x: int, y: int) -> int:
    """Integer division of ``x`` by ``y`` rounded up."""
    return (x + y - 1) // y