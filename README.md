# tinytrain

A small tensor core for building training loops in Python, with numpy as
its only dependency.

## Modules

- `tinytrain.datatype` – the `DataType` enum (`size()` in bytes, short
  name via `desc()`), `to_numpy` / `from_numpy` for the host storage type,
  `cast` (C-style conversion: floats truncate toward zero for integer
  targets, integers wrap to the target width), `ceil_div`, and
  `UnsupportedDataTypeError`. `BFLOAT16` and `FLOAT16` are stored on the
  host as raw 16-bit words and cannot be cast to.
- `tinytrain.device` – `DeviceType`, the frozen `Device` dataclass and the
  `DeviceManager` singleton (`DeviceManager.instance()`). Only the CPU
  device (`DeviceType.CPU`, index 0) is available; asking for any other
  device raises `LookupError`.
- `tinytrain.dispatch` – `dispatch_func` and `dispatch_func_multi`, which
  call a function with the numpy element type(s) of runtime data types.
  A data type outside the allowed set raises `UnsupportedDataTypeError`;
  a mismatch between the number of data types and allowed lists raises
  `DispatchError`. Ready-made sets such as `ALL_TYPES`,
  `FLOATING_TYPES` and `ALL_INTEGRAL_TYPES` are provided.
- `tinytrain.registry` – the kernel `Dispatcher`, keyed by
  `(DeviceType, name)`, `KernelFunction`, the `register_kernel` decorator
  and `KernelRegistryError` (raised for a missing kernel or a second
  registration under the same key).
- `tinytrain.dataset` – the abstract `Dataset` base class: subclasses
  implement `__getitem__` returning an `(input, target)` pair and
  `__len__`; iterating a dataset yields every pair in order.
- `tinytrain.tensor` – `Tensor` and `TensorBuffer`. A tensor is a shaped,
  typed view over a shared byte buffer, with `data` (a writable numpy
  view), `fill`, `view`, `view_of`, `contiguous`, `flatten`, `squeeze`,
  `matrix` and `vector` (float32 only), `to` for data-type conversion, and
  gradient bookkeeping (`requires_grad_`, `zero_grad`, `grad`).

## Installation

```
pip install .
```

## Example

```python
from tinytrain.datatype import DataType
from tinytrain.tensor import Tensor

t = Tensor([2, 3], DataType.FLOAT32)
t.fill(1.5)
print(t.data)              # numpy view of the elements
flat = t.flatten()         # dims [6], same buffer
ints = t.to(DataType.INT32)
print(ints.data)           # all ones
print(t)                   # Tensor(data_ptr=0x..., dims=[2, 3, ], dtype=fp32)
```

Registering and looking up a kernel:

```python
from tinytrain.device import DeviceType
from tinytrain.registry import Dispatcher, register_kernel

@register_kernel(DeviceType.CPU, "Double")
def double(x):
    return x * 2

kernel = Dispatcher.instance().get_kernel((DeviceType.CPU, "Double"))
assert kernel(21) == 42
```

## What it does not do

- There is no arithmetic on tensors and no backward pass: the gradient
  fields are kept, but nothing computes gradients.
- Tensors cannot be printed as their values; `repr` shows only the buffer
  address, dims and data type. There is no saving to or loading from
  files.
- Only the CPU device exists; moving a tensor to any other device raises
  `ValueError`.

## Running the tests

```
pip install .[test]
pytest
```