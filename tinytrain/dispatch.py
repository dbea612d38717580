"""Runtime dispatch from data types to host element types."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Sequence

from tinytrain.datatype import DataType, UnsupportedDataTypeError, to_numpy

FLOATING_TYPES = (DataType.FLOAT32, DataType.FLOAT64)
REDUCED_FLOATING_TYPES = (DataType.FLOAT16, DataType.BFLOAT16)
ALL_FLOATING_TYPES = FLOATING_TYPES + REDUCED_FLOATING_TYPES
SIGNED_INTEGRAL_TYPES = (DataType.INT8, DataType.INT16, DataType.INT32, DataType.INT64)
UNSIGNED_INTEGRAL_TYPES = (DataType.UINT8, DataType.UINT16, DataType.UINT32, DataType.UINT64)
ALL_INTEGRAL_TYPES = SIGNED_INTEGRAL_TYPES + UNSIGNED_INTEGRAL_TYPES
ALL_TYPES = ALL_FLOATING_TYPES + ALL_INTEGRAL_TYPES
TYPES_8_BIT = (DataType.INT8, DataType.UINT8)
TYPES_16_BIT = (DataType.INT16, DataType.UINT16, DataType.FLOAT16, DataType.BFLOAT16)
TYPES_32_BIT = (DataType.INT32, DataType.UINT32, DataType.FLOAT32)
TYPES_64_BIT = (DataType.INT64, DataType.UINT64, DataType.FLOAT64)

# Reduced floating types have no host arithmetic, so they never dispatch.
_HOST_DISPATCHABLE = frozenset(DataType) - frozenset(REDUCED_FLOATING_TYPES)


class DispatchError(ValueError):
    """Raised when a dispatch call is malformed."""


def dispatch_func(
    dtype: DataType,
    func: Callable[[type], Any],
    allowed: Iterable[DataType],
    context: str = "",
) -> Any:
    """Call ``func`` with the host element type of ``dtype``.

    ``dtype`` is accepted when its host element type equals that of any
    allowed data type; otherwise UnsupportedDataTypeError is raised.
    """
    if dtype in _HOST_DISPATCHABLE:
        target = to_numpy(dtype)
        if any(to_numpy(candidate) is target for candidate in allowed):
            return func(target)
    raise UnsupportedDataTypeError(dtype, context)


def dispatch_func_multi(
    dtypes: Sequence[DataType],
    func: Callable[..., Any],
    allowed_lists: Sequence[Iterable[DataType]],
    context: str = "",
) -> Any:
    """Call ``func`` with one host element type per entry of ``dtypes``.

    Each data type must appear in the allowed list at the same position.
    """
    dtypes = list(dtypes)
    allowed_lists = [tuple(allowed) for allowed in allowed_lists]
    if len(dtypes) != len(allowed_lists):
        raise DispatchError(
            f"dispatch_func_multi expects {len(allowed_lists)} dtypes, "
            f"but only got {len(dtypes)} in {context}"
        )
    resolved = []
    for dtype, allowed in zip(dtypes, allowed_lists):
        if dtype not in _HOST_DISPATCHABLE or dtype not in allowed:
            raise UnsupportedDataTypeError(dtype, context)
        resolved.append(to_numpy(dtype))
    return func(*resolved)