"""Abstract dataset of (input, target) tensor pairs."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Iterator, Tuple

if TYPE_CHECKING:
    from tinytrain.tensor import Tensor


class Dataset(abc.ABC):
    """A sized collection of (input, target) pairs indexed from zero."""

    @abc.abstractmethod
    def __getitem__(self, idx: int) -> Tuple["Tensor", "Tensor"]:
        """Return the (input, target) pair at ``idx``."""

    @abc.abstractmethod
    def __len__(self) -> int:
        """Return the number of samples."""

    def __iter__(self) -> Iterator[Tuple["Tensor", "Tensor"]]:
        for idx in range(len(self)):
            yield self[idx]