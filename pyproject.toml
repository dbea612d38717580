[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinytrain"
version = "0.3.0"
description = "A small tensor core for training: data types, devices, kernel dispatch, datasets and tensors"
requires-python = ">=3.10"
keywords = ["tensor", "deep learning", "training", "kernels", "numpy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tinytrain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
