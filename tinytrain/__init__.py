"""A small tensor core: data types, devices, kernel dispatch, datasets and tensors."""

__version__ = "0.3.0"
__all__ = ["datatype", "device", "dispatch", "registry", "dataset", "tensor"]