# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Neural network layers — Dense, Scale, Bilinear, Embedding, EmbeddingBag.

All layers are features-first: axis 0 of an input is the feature axis and
every trailing axis is a batch axis.
"""
from __future__ import annotations

import logging
import numpy as np

from ..exceptions import (ConfigurationError, DimensionMismatch,
                          UnsupportedInputError)
from . import functional as F
from .init import glorot_uniform, ones32, randn32
from .module import Module, _callable_name
from .parameter import Parameter
from .utils import create_bias, match_eltype, size_check, summarize

logger = logging.getLogger(__name__)


def _act_repr(activation) -> str:
    if activation is None:
        return ''
    return f", activation={_callable_name(activation)}"


# ──────────────────────── Dense ───────────────────────────────────────

class Dense(Module):
    """Fully connected layer: ``y = activation(W @ x + b)``.

    The input is a vector of length ``in_features`` or any array with
    ``x.shape[0] == in_features``; trailing axes are batch axes, so the
    output has shape ``(out_features, *x.shape[1:])``.

    The weight is ``init(out_features, in_features)``.  ``bias=False``
    switches off the trainable bias; an explicit bias array of length
    ``out_features`` may also be given.  Use :meth:`from_weight` to wrap
    an existing weight matrix::

        >>> d = Dense.from_weight(np.ones((2, 5)), bias=False,
        ...                       activation=np.tanh)
        >>> d(np.ones(5))
        array([0.9999092, 0.9999092])
    """

    def __init__(self, in_features: int | None = None,
                 out_features: int | None = None, activation=None, *,
                 bias=True, init=glorot_uniform, weight=None):
        super().__init__()
        if weight is None:
            if in_features is None or out_features is None:
                raise ConfigurationError(
                    "Dense needs in_features and out_features, or a weight")
            weight = init(out_features, in_features)
        weight = np.asarray(weight)
        if weight.ndim != 2:
            raise ConfigurationError(
                f"Dense expects a 2-d weight, got {summarize(weight)}")
        self.out_features, self.in_features = weight.shape
        self.weight = Parameter(weight)
        self.bias = create_bias(weight, bias, self.out_features)
        self.activation = activation

    @classmethod
    def from_weight(cls, weight, bias=True, activation=None) -> 'Dense':
        return cls(activation=activation, bias=bias, weight=weight)

    def forward(self, x) -> np.ndarray:
        x = np.asarray(x)
        size_check(self, x, 0, self.in_features)
        x = match_eltype(self, self.weight.dtype, x)
        y = self.weight.data @ x.reshape(self.in_features, -1)
        if self.bias is not None:
            y = y + self.bias.data[:, np.newaxis]
        if self.activation is not None:
            y = self.activation(y)
        return y.reshape((self.out_features,) + x.shape[1:])

    def __repr__(self) -> str:
        return (f"Dense(in_features={self.in_features}, "
                f"out_features={self.out_features}"
                f"{_act_repr(self.activation)}, bias={self.bias is not None})")


# ──────────────────────── Scale ───────────────────────────────────────

def _lead(a: np.ndarray, ndim: int) -> np.ndarray:
    # align on leading axes by appending singleton trailing axes
    return a.reshape(a.shape + (1,) * (ndim - a.ndim))


class Scale(Module):
    """Elementwise layer: ``y = activation(scale * x + bias)``.

    Uses elementwise multiplication rather than the matrix product of
    :class:`Dense`.  Broadcasting aligns the leading axes, so
    ``Scale(2)`` applied to a ``(1, 3)`` input gives ``(2, 3)``.

    The scale is ``init(*size)`` (ones by default) and the bias zeros.
    """

    def __init__(self, *size: int, activation=None, bias=True,
                 init=ones32, scale=None):
        super().__init__()
        if scale is None:
            if not size:
                raise ConfigurationError("Scale needs a size or a scale array")
            scale = init(*size)
        scale = np.asarray(scale)
        self.scale = Parameter(scale)
        self.bias = create_bias(scale, bias, *scale.shape)
        self.activation = activation

    @classmethod
    def from_array(cls, scale, bias=True, activation=None) -> 'Scale':
        return cls(activation=activation, bias=bias, scale=scale)

    def forward(self, x) -> np.ndarray:
        x = np.asarray(x)
        ndim = max(x.ndim, self.scale.ndim)
        y = _lead(self.scale.data, ndim) * _lead(x, ndim)
        if self.bias is not None:
            y = y + _lead(self.bias.data, ndim)
        if self.activation is not None:
            y = self.activation(y)
        return y

    def __repr__(self) -> str:
        dims = ', '.join(str(d) for d in self.scale.shape)
        return (f"Scale({dims}{_act_repr(self.activation)}, "
                f"bias={self.bias is not None})")


# ──────────────────────── Bilinear ────────────────────────────────────

class Bilinear(Module):
    """Bilinear form of two inputs: ``z[i] = activation(x' W[i] y + b[i])``.

    ``in_features`` is either one size shared by both inputs or a pair
    ``(in1, in2)``.  The weight has shape ``(out, in1, in2)``.

    Call as ``b(x, y)``, ``b((x, y))`` or ``b(x)``, which means ``b(x, x)``.
    Matrices hold one sample per column; vectors are a single sample and
    give a vector back.
    """

    def __init__(self, in_features=None, out_features: int | None = None,
                 activation=None, *, bias=True, init=glorot_uniform,
                 weight=None):
        super().__init__()
        if weight is None:
            if in_features is None or out_features is None:
                raise ConfigurationError(
                    "Bilinear needs in_features and out_features, or a weight")
            if isinstance(in_features, (int, np.integer)):
                in1 = in2 = in_features
            else:
                in1, in2 = in_features
            weight = init(out_features, in1, in2)
        weight = np.asarray(weight)
        if weight.ndim != 3:
            raise ConfigurationError(
                f"expected a 3-array of weights, got {summarize(weight)}")
        self.out_features, self.in1_features, self.in2_features = weight.shape
        self.weight = Parameter(weight)
        self.bias = create_bias(weight, bias, self.out_features)
        self.activation = activation

    @classmethod
    def from_weight(cls, weight, bias=True, activation=None) -> 'Bilinear':
        return cls(activation=activation, bias=bias, weight=weight)

    def forward(self, x, y=None) -> np.ndarray:
        if y is None:
            if isinstance(x, tuple):
                if len(x) != 2:
                    raise UnsupportedInputError(
                        f"Bilinear takes a pair of inputs, got {len(x)}")
                x, y = x
            else:
                y = x
        x = np.asarray(x)
        y = np.asarray(y)
        if x.ndim == 1 and y.ndim == 1:
            return self._forward_matrix(x.reshape(-1, 1), y.reshape(-1, 1))[:, 0]
        if x.ndim != 2 or y.ndim != 2:
            raise DimensionMismatch(
                f"Bilinear expects two vectors or two matrices, "
                f"got {summarize(x)} and {summarize(y)}")
        return self._forward_matrix(x, y)

    def _forward_matrix(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        W = self.weight.data
        d_z, d_x, d_y = W.shape
        if x.shape[0] != d_x or y.shape[0] != d_y:
            raise DimensionMismatch(
                f"number of rows in data must match W: expected "
                f"({d_x}, {d_y}), got ({x.shape[0]}, {y.shape[0]})")
        if x.shape[1] != y.shape[1]:
            raise DimensionMismatch(
                f"data inputs must agree on number of columns, "
                f"got {x.shape[1]} and {y.shape[1]}")
        s = x.shape[1]
        # Wy[o, i, s] = W[o, i, j] * y[j, s]
        Wy = (W.reshape(-1, d_y) @ y).reshape(d_z, d_x, s)
        # Z[o, s] = Wy[o, i, s] * x[i, s]
        Z = F.batched_mul(Wy, x.reshape(d_x, 1, s)).reshape(d_z, s)
        if self.bias is not None:
            Z = Z + self.bias.data[:, np.newaxis]
        if self.activation is not None:
            Z = self.activation(Z)
        return Z

    def __repr__(self) -> str:
        if self.in1_features == self.in2_features:
            ins = str(self.in1_features)
        else:
            ins = f"({self.in1_features}, {self.in2_features})"
        return (f"Bilinear(in_features={ins}, "
                f"out_features={self.out_features}"
                f"{_act_repr(self.activation)}, bias={self.bias is not None})")


# ──────────────────────── Embedding ───────────────────────────────────

def _embed(layer, weight: np.ndarray, x) -> np.ndarray:
    x = np.asarray(x)
    if x.dtype == np.bool_:
        if x.ndim == 0:
            raise UnsupportedInputError(
                f"{layer!r} cannot embed a boolean scalar")
        size_check(layer, x, 0, weight.shape[1])
        flat = x.reshape(x.shape[0], -1).astype(weight.dtype)
        return (weight @ flat).reshape((weight.shape[0],) + x.shape[1:])
    if not np.issubdtype(x.dtype, np.integer):
        raise UnsupportedInputError(
            f"{layer!r} expects integer indices or a boolean one-hot "
            f"encoding, got {summarize(x)}")
    return F.gather(weight, x)


class Embedding(Module):
    """A lookup table of ``embedding_dim`` vectors for a fixed vocabulary.

    The weight has shape ``(embedding_dim, num_embeddings)``; looking up
    index ``i`` returns column ``i``.  Accepts an int, an integer array of
    any shape (result ``(embedding_dim, *x.shape)``), or a boolean one-hot
    encoding of shape ``(num_embeddings, *batch)`` (result
    ``(embedding_dim, *batch)``).
    """

    def __init__(self, num_embeddings: int | None = None,
                 embedding_dim: int | None = None, *, init=randn32,
                 weight=None):
        super().__init__()
        if weight is None:
            if num_embeddings is None or embedding_dim is None:
                raise ConfigurationError(
                    "Embedding needs num_embeddings and embedding_dim, "
                    "or a weight")
            weight = init(embedding_dim, num_embeddings)
        weight = np.asarray(weight)
        if weight.ndim != 2:
            raise ConfigurationError(
                f"Embedding expects a 2-d weight, got {summarize(weight)}")
        self.embedding_dim, self.num_embeddings = weight.shape
        self.weight = Parameter(weight)

    @classmethod
    def from_weight(cls, weight) -> 'Embedding':
        return cls(weight=weight)

    def forward(self, indices) -> np.ndarray:
        return _embed(self, self.weight.data, indices)

    def __repr__(self) -> str:
        return f"Embedding({self.num_embeddings}, {self.embedding_dim})"


# ──────────────────────── EmbeddingBag ────────────────────────────────

def _splitat(data, at) -> list[np.ndarray]:
    """Partition *data* into views, each starting at an offset in *at*.

    Offsets must start at 0 and be strictly increasing; the views never
    overlap, are never empty, and the last one ends with ``data[-1]``::

        >>> _splitat(np.arange(10), [0, 2, 3, 7])
        [array([0, 1]), array([2]), array([3, 4, 5, 6]), array([7, 8, 9])]
    """
    data = np.asarray(data)
    at = np.asarray(at)
    if data.ndim != 1:
        raise ConfigurationError(
            f"`data` must be a vector, got {summarize(data)}")
    if at.ndim != 1 or at.size == 0 or not np.issubdtype(at.dtype, np.integer):
        raise ConfigurationError(
            f"`at` must be a non-empty vector of integer offsets, "
            f"got {summarize(at)}")
    if at[0] != 0:
        raise ConfigurationError("The first element in `at` must be 0.")
    if at[-1] > len(data) - 1:
        raise ConfigurationError(
            "The last element in `at` must be at most len(data) - 1.")
    if np.any(np.diff(at) <= 0):
        raise ConfigurationError(
            "`at` must be monotonically increasing with no duplicates.")
    bounds = [int(i) for i in at] + [len(data)]
    logger.debug('splitting %d indices into %d bags', len(data), len(at))
    return [data[bounds[n]:bounds[n + 1]] for n in range(len(at))]


def _is_bag_collection(data) -> bool:
    return (isinstance(data, (list, tuple)) and len(data) > 0
            and all(np.ndim(b) >= 1 for b in data))


class EmbeddingBag(Module):
    """Like :class:`Embedding`, but each query is a bag of indices.

    The embeddings of one bag are reduced to one vector by
    ``reduction(embedded, axis=1)``, the mean by default.

    * A vector of indices is one bag; the result is ``(embedding_dim,)``.
    * A list of bags (ragged is fine) or an object array of bags gives one
      column per bag, ``(embedding_dim, *bags.shape)``.
    * An integer array of rank ``N > 1`` holds equal-length bags along
      axis 0; the result is ``(embedding_dim, *x.shape[1:])``.
    * ``bag(data, at)`` splits the vector *data* at offsets *at* first,
      see :func:`_splitat`.
    * A bag may also be a one-hot matrix ``(num_embeddings, n)``.

    A single index or a one-hot vector is not a bag and is rejected.
    """

    def __init__(self, num_embeddings: int | None = None,
                 embedding_dim: int | None = None, reduction=np.mean, *,
                 init=randn32, weight=None):
        super().__init__()
        if weight is None:
            if num_embeddings is None or embedding_dim is None:
                raise ConfigurationError(
                    "EmbeddingBag needs num_embeddings and embedding_dim, "
                    "or a weight")
            weight = init(embedding_dim, num_embeddings)
        weight = np.asarray(weight)
        if weight.ndim != 2:
            raise ConfigurationError(
                f"EmbeddingBag expects a 2-d weight, got {summarize(weight)}")
        self.embedding_dim, self.num_embeddings = weight.shape
        self.weight = Parameter(weight)
        self.reduction = reduction

    @classmethod
    def from_weight(cls, weight, reduction=np.mean) -> 'EmbeddingBag':
        return cls(reduction=reduction, weight=weight)

    def forward(self, data, at=None) -> np.ndarray:
        if at is not None:
            return self._stack_bags(_splitat(data, at))
        if _is_bag_collection(data):
            return self._stack_bags(data)
        x = np.asarray(data)
        if x.dtype == object:
            return self._stack_bags(x)
        if x.ndim == 0:
            raise UnsupportedInputError(
                "EmbeddingBag expects an array of indices, not just one")
        if x.size == 0:
            raise UnsupportedInputError(
                "EmbeddingBag cannot reduce an empty bag")
        if x.dtype == np.bool_ and x.ndim == 1:
            raise UnsupportedInputError(
                "EmbeddingBag is not defined for a one-hot vector")
        return self.reduction(_embed(self, self.weight.data, x), axis=1)

    def _stack_bags(self, bags) -> np.ndarray:
        if isinstance(bags, np.ndarray):
            shape, items = bags.shape, list(bags.ravel())
        else:
            shape, items = (len(bags),), list(bags)
        if not items:
            raise UnsupportedInputError(
                "EmbeddingBag got an empty collection of bags")
        out = np.stack([self(b) for b in items], axis=1)
        return out.reshape((out.shape[0],) + shape + out.shape[2:])

    def __repr__(self) -> str:
        extra = ''
        if self.reduction is not np.mean:
            extra = f", reduction={_callable_name(self.reduction)}"
        return f"EmbeddingBag({self.num_embeddings}, {self.embedding_dim}{extra})"
