# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""nn.Parameter — learnable array wrapper."""
from __future__ import annotations

import numpy as np

from ..exceptions import DimensionMismatch


class Parameter:
    """An array that is automatically registered as a module parameter.

    The wrapped buffer is owned by the parameter: its shape is fixed at
    construction and every later write goes into the same buffer.
    """

    __slots__ = ('_data', 'requires_grad', 'grad')

    def __init__(self, data: Parameter | np.ndarray | None = None,
                 requires_grad: bool = True):
        if data is None:
            data = np.empty(0, dtype=np.float32)
        if isinstance(data, Parameter):
            self._data = data._data.copy()
        else:
            self._data = np.array(data, copy=True)
        self.requires_grad = requires_grad
        self.grad: np.ndarray | None = None

    @property
    def data(self) -> np.ndarray:
        return self._data

    @data.setter
    def data(self, value) -> None:
        value = np.asarray(value)
        if value.shape != self._data.shape:
            raise DimensionMismatch(
                f"cannot assign an array of shape {value.shape} to a "
                f"parameter of shape {self._data.shape}")
        self._data[...] = value

    @property
    def shape(self) -> tuple[int, ...]:
        return self._data.shape

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def ndim(self) -> int:
        return self._data.ndim

    @property
    def size(self) -> int:
        return self._data.size

    def __array__(self, dtype=None, copy=None):
        if dtype is None or dtype == self._data.dtype:
            return self._data.copy() if copy else self._data
        return self._data.astype(dtype)

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, idx):
        return self._data[idx]

    def __setitem__(self, idx, value) -> None:
        self._data[idx] = value

    def __repr__(self) -> str:
        return f"Parameter containing:\n{self._data!r}"
