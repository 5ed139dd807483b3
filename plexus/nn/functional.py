# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""nn.functional — stateless array operations (F.*).

Arrays are features-first: axis 0 holds features, trailing axes are batch.
"""
from __future__ import annotations

import math
from functools import reduce
import operator

import numpy as np


# ──────────────────────── Activations ─────────────────────────────────

def identity(input: np.ndarray) -> np.ndarray:
    return input


def relu(input: np.ndarray) -> np.ndarray:
    return np.maximum(input, 0)


def leaky_relu(input: np.ndarray, negative_slope: float = 0.01) -> np.ndarray:
    return np.where(input > 0, input, input * negative_slope)


def sigmoid(input: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-input))


def tanh(input: np.ndarray) -> np.ndarray:
    return np.tanh(input)


def silu(input: np.ndarray) -> np.ndarray:
    return input * sigmoid(input)


def gelu(input: np.ndarray) -> np.ndarray:
    x = input
    return 0.5 * x * (1 + np.tanh(
        math.sqrt(2.0 / math.pi) * (x + 0.044715 * x ** 3)))


def softmax(input: np.ndarray, axis: int = 0) -> np.ndarray:
    shifted = input - np.max(input, axis=axis, keepdims=True)
    e = np.exp(shifted)
    return e / np.sum(e, axis=axis, keepdims=True)


# ──────────────────────── Array primitives ────────────────────────────

def batched_mul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Batched matrix multiply with the batch on the last axis.

    ``(m, k, B) x (k, n, B) -> (m, n, B)``.
    """
    if a.ndim != 3 or b.ndim != 3:
        raise ValueError(
            f"batched_mul expects 3-d operands, got {a.ndim}-d and {b.ndim}-d")
    out = np.matmul(np.moveaxis(a, -1, 0), np.moveaxis(b, -1, 0))
    return np.moveaxis(out, 0, -1)


def gather(table: np.ndarray, indices) -> np.ndarray:
    """Select columns of *table*; result is ``(table.shape[0], *indices.shape)``."""
    idx = np.asarray(indices)
    n = table.shape[1]
    if idx.size and (idx.min() < 0 or idx.max() >= n):
        raise IndexError(
            f"index out of range for a table of {n} columns: "
            f"got min={idx.min()}, max={idx.max()}")
    return table.take(idx.ravel(), axis=1).reshape(
        (table.shape[0],) + idx.shape)


def one_hot(indices, num_classes: int) -> np.ndarray:
    """Boolean encoding of shape ``(num_classes, *indices.shape)``."""
    idx = np.asarray(indices)
    if idx.size and (idx.min() < 0 or idx.max() >= num_classes):
        raise IndexError(
            f"index out of range for {num_classes} classes: "
            f"got min={idx.min()}, max={idx.max()}")
    classes = np.arange(num_classes).reshape((num_classes,) + (1,) * idx.ndim)
    return classes == idx


# ──────────────────────── Connections ─────────────────────────────────

def add(*xs):
    """Sum any number of branch outputs."""
    return reduce(operator.add, xs)


def vcat(*xs) -> np.ndarray:
    """Concatenate along the feature axis."""
    return np.concatenate([np.atleast_1d(x) for x in xs], axis=0)


def hcat(*xs) -> np.ndarray:
    """Concatenate along axis 1, treating vectors as single columns."""
    cols = [x.reshape(-1, 1) if np.ndim(x) == 1 else x
            for x in map(np.asarray, xs)]
    return np.concatenate(cols, axis=1)
