import numpy as np
import pytest

from tinytrain.datatype import DataType, UnsupportedDataTypeError
from tinytrain.device import Device, DeviceManager, DeviceType
from tinytrain.tensor import Tensor, TensorBuffer


def test_buffer_size_and_device():
    device = DeviceManager.instance().get_default_device()
    buf = TensorBuffer(device, 24)
    assert len(buf) == 24
    assert buf.device == device


def test_buffer_rejects_missing_device():
    with pytest.raises(ValueError):
        TensorBuffer(None, 4)


def test_buffer_rejects_cuda_device():
    with pytest.raises(ValueError):
        TensorBuffer(Device(DeviceType.CUDA, 0), 4)


def test_shape_and_sizes():
    t = Tensor([2, 3, 4], DataType.FLOAT32)
    assert t.dims == [2, 3, 4]
    assert t.num_elements == 24
    assert t.size_in_bytes == 24 * DataType.FLOAT32.size()
    assert t.data.shape == (2, 3, 4)
    assert t.data.dtype == np.float32
    assert t.device == DeviceManager.instance().get_default_device()


def test_scalar_tensor_has_one_element():
    t = Tensor([], DataType.INT64)
    assert t.num_elements == 1
    t.fill(7)
    assert int(t.data) == 7


@pytest.mark.parametrize("dtype", [DataType.INT32, DataType.UINT8, DataType.FLOAT64])
def test_fill_sets_every_element(dtype):
    t = Tensor([3, 2], dtype)
    t.fill(5)
    assert t.data.tolist() == [[5, 5], [5, 5], [5, 5]]


def test_fill_wraps_integers():
    t = Tensor([4], DataType.UINT8)
    t.fill(-1)
    assert t.data.tolist() == [255, 255, 255, 255]


def test_fill_reduced_type_raises():
    t = Tensor([2], DataType.BFLOAT16)
    with pytest.raises(UnsupportedDataTypeError):
        t.fill(1.0)


def test_view_of_shares_buffer():
    base = Tensor([6], DataType.FLOAT32)
    part = Tensor.view_of(base, 2 * DataType.FLOAT32.size(), [2, 2])
    assert part.dims == [2, 2]
    part.fill(3.0)
    assert base.data.tolist() == [0.0, 0.0, 3.0, 3.0, 3.0, 3.0]


def test_view_of_out_of_range_raises():
    base = Tensor([4], DataType.FLOAT32)
    with pytest.raises(ValueError):
        Tensor.view_of(base, 4, [4])


def test_matrix_folds_leading_dims_and_aliases():
    t = Tensor([2, 3, 4], DataType.FLOAT32)
    m = t.matrix()
    assert m.shape[-1] == 4
    assert m.size == t.num_elements
    m[-1, -1] = 9.0
    assert t.data[1, 2, 3] == 9.0


def test_matrix_requires_float32():
    with pytest.raises(UnsupportedDataTypeError):
        Tensor([2, 2], DataType.INT32).matrix()


def test_vector_requires_one_dim():
    v = Tensor([5], DataType.FLOAT32).vector()
    assert v.shape == (5,)
    with pytest.raises(ValueError):
        Tensor([5, 1], DataType.FLOAT32).vector()


def test_to_same_dtype_aliases_data_and_grad():
    t = Tensor([3], DataType.FLOAT32).requires_grad_()
    alias = t.to(DataType.FLOAT32)
    assert alias.dims == [3]
    alias.fill(2.0)
    assert t.data.tolist() == [2.0, 2.0, 2.0]
    alias.grad.fill(1.0)
    assert t.grad.data.tolist() == [1.0, 1.0, 1.0]


def test_to_other_dtype_converts_values():
    t = Tensor([4], DataType.FLOAT32)
    t.data[...] = np.array([-2.5, -0.5, 1.5, 3.75], dtype=np.float32)
    converted = t.to(DataType.INT32)
    assert converted.dtype is DataType.INT32
    assert converted.dims == t.dims
    np.testing.assert_array_equal(converted.data, np.array([-2, 0, 1, 3], dtype=np.int32))
    converted.fill(0)
    assert t.data[3] == np.float32(3.75)


def test_to_dtype_converts_grad_and_keeps_flag():
    t = Tensor([2], DataType.FLOAT32).requires_grad_()
    converted = t.to(DataType.FLOAT64)
    assert converted.requires_grad
    assert converted.grad.dtype is DataType.FLOAT64
    assert np.all(converted.grad.data == 0.0)


def test_to_reduced_dtype_raises():
    with pytest.raises(UnsupportedDataTypeError):
        Tensor([2], DataType.FLOAT32).to(DataType.FLOAT16)


def test_to_same_device_aliases():
    t = Tensor([2], DataType.FLOAT32)
    moved = t.to(t.device)
    assert moved.device == t.device
    moved.fill(4.0)
    assert t.data.tolist() == [4.0, 4.0]


def test_to_unavailable_device_raises():
    with pytest.raises(ValueError):
        Tensor([2], DataType.FLOAT32).to(Device(DeviceType.CUDA, 0))


def test_view_reshapes_and_shares():
    t = Tensor([2, 6], DataType.FLOAT32)
    v = t.view([3, 4])
    assert v.dims == [3, 4]
    v.fill(1.0)
    assert np.all(t.data == 1.0)
    with pytest.raises(ValueError):
        t.view([5, 2])


def test_contiguous_keeps_shape():
    t = Tensor([2, 3], DataType.FLOAT32)
    assert t.contiguous().dims == [2, 3]


def test_flatten_default_and_range():
    t = Tensor([2, 3, 4], DataType.FLOAT32)
    assert t.flatten().dims == [24]
    partial = t.flatten(1, 2)
    assert partial.dims == [2, 12]
    assert partial.num_elements == 24


def test_flatten_invalid_range_raises():
    t = Tensor([2, 3], DataType.FLOAT32)
    with pytest.raises(ValueError):
        t.flatten(1, 0)


def test_squeeze():
    t = Tensor([2, 1, 3], DataType.FLOAT32)
    assert t.squeeze(1).dims == [2, 3]
    assert t.squeeze(-2).dims == [2, 3]
    with pytest.raises(ValueError):
        t.squeeze(0)
    with pytest.raises(IndexError):
        t.squeeze(3)


def test_requires_grad_allocates_zero_grad():
    t = Tensor([2, 2], DataType.FLOAT32)
    assert t.grad is None
    assert t.requires_grad_() is t
    assert t.requires_grad
    assert t.grad.dims == [2, 2]
    assert np.all(t.grad.data == 0.0)


def test_zero_grad_resets():
    t = Tensor([3], DataType.FLOAT32).requires_grad_()
    t.grad.fill(5.0)
    assert t.grad.data.tolist() == [5.0, 5.0, 5.0]
    t.zero_grad()
    assert t.grad.data.tolist() == [0.0, 0.0, 0.0]


def test_repr_format():
    t = Tensor([2, 3], DataType.FLOAT32)
    text = repr(t)
    assert text.startswith("Tensor(data_ptr=0x")
    assert text.endswith(", dims=[2, 3, ], dtype=fp32)")