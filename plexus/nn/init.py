# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""nn.init — parameter initialization routines.

Two families live here:

* shape-to-array initializers, called as ``init(*dims)`` and returning a
  freshly allocated array.  Layer constructors take one of these through
  their ``init=`` keyword, e.g. ``Dense(5, 2, init=glorot_normal)``.
  Extra options are bound with :func:`functools.partial`::

      Embedding(26, 4, init=partial(identity_init, gain=22))

* in-place fillers (trailing underscore) that overwrite an existing
  :class:`Parameter`, for re-initialising a layer after construction.
"""
from __future__ import annotations

import math
import numpy as np

from .parameter import Parameter

DEFAULT_DTYPE = np.float32


def _source(rng):
    return np.random if rng is None else rng


# ──────────────────────── Shape-to-array ──────────────────────────────

def glorot_uniform(*dims: int, gain: float = 1.0, dtype=DEFAULT_DTYPE,
                   rng=None) -> np.ndarray:
    """Uniform in ``±gain·sqrt(6 / (fan_in + fan_out))`` (Xavier/Glorot)."""
    fan_in, fan_out = _calculate_fan_in_and_fan_out(dims)
    bound = gain * math.sqrt(6.0 / (fan_in + fan_out))
    return _source(rng).uniform(-bound, bound, dims).astype(dtype)


def glorot_normal(*dims: int, gain: float = 1.0, dtype=DEFAULT_DTYPE,
                  rng=None) -> np.ndarray:
    fan_in, fan_out = _calculate_fan_in_and_fan_out(dims)
    std = gain * math.sqrt(2.0 / (fan_in + fan_out))
    return (_source(rng).standard_normal(dims) * std).astype(dtype)


def kaiming_uniform(*dims: int, gain: float = math.sqrt(2.0),
                    dtype=DEFAULT_DTYPE, rng=None) -> np.ndarray:
    fan_in, _ = _calculate_fan_in_and_fan_out(dims)
    bound = math.sqrt(3.0) * gain / math.sqrt(fan_in)
    return _source(rng).uniform(-bound, bound, dims).astype(dtype)


def kaiming_normal(*dims: int, gain: float = math.sqrt(2.0),
                   dtype=DEFAULT_DTYPE, rng=None) -> np.ndarray:
    fan_in, _ = _calculate_fan_in_and_fan_out(dims)
    std = gain / math.sqrt(fan_in)
    return (_source(rng).standard_normal(dims) * std).astype(dtype)


def randn32(*dims: int, rng=None) -> np.ndarray:
    """Standard-normal samples as ``float32``."""
    return _source(rng).standard_normal(dims).astype(np.float32)


def rand32(*dims: int, rng=None) -> np.ndarray:
    return _source(rng).uniform(0.0, 1.0, dims).astype(np.float32)


def ones32(*dims: int) -> np.ndarray:
    return np.ones(dims, dtype=np.float32)


def zeros32(*dims: int) -> np.ndarray:
    return np.zeros(dims, dtype=np.float32)


def identity_init(*dims: int, gain: float = 1.0, shift: int = 0,
                  dtype=DEFAULT_DTYPE) -> np.ndarray:
    """Identity matrix scaled by *gain*, rolled by *shift* along the rows.

    A single dimension is assumed to be a bias and gives zeros.  Non-square
    shapes are padded with zeros.
    """
    if len(dims) == 1:
        return np.zeros(dims, dtype=dtype)
    if len(dims) != 2:
        raise ValueError(
            f"identity_init supports 1 or 2 dimensions, got {len(dims)}")
    w = (np.eye(dims[0], dims[1]) * gain).astype(dtype)
    if shift:
        w = np.roll(w, shift, axis=0)
    return w


# ──────────────────────── In-place ────────────────────────────────────

def normal_(param: Parameter, mean: float = 0.0,
            std: float = 1.0) -> Parameter:
    """Fill param with values from N(mean, std^2) in-place."""
    param.data = np.random.normal(mean, std, param.shape).astype(param.dtype)
    return param


def uniform_(param: Parameter, a: float = 0.0,
             b: float = 1.0) -> Parameter:
    param.data = np.random.uniform(a, b, param.shape).astype(param.dtype)
    return param


def zeros_(param: Parameter) -> Parameter:
    param.data.fill(0)
    return param


def ones_(param: Parameter) -> Parameter:
    param.data.fill(1)
    return param


def constant_(param: Parameter, val: float) -> Parameter:
    param.data.fill(val)
    return param


def xavier_uniform_(param: Parameter, gain: float = 1.0) -> Parameter:
    fan_in, fan_out = _calculate_fan_in_and_fan_out(param.shape)
    std = gain * math.sqrt(2.0 / (fan_in + fan_out))
    bound = math.sqrt(3.0) * std
    return uniform_(param, -bound, bound)


def xavier_normal_(param: Parameter, gain: float = 1.0) -> Parameter:
    fan_in, fan_out = _calculate_fan_in_and_fan_out(param.shape)
    std = gain * math.sqrt(2.0 / (fan_in + fan_out))
    return normal_(param, 0.0, std)


def _calculate_fan_in_and_fan_out(shape):
    # (out, in, *receptive); a vector fans out from a single input
    if len(shape) == 0:
        return 1, 1
    if len(shape) == 1:
        return 1, shape[0]
    fan_in = shape[1]
    fan_out = shape[0]
    if len(shape) > 2:
        receptive = 1
        for s in shape[2:]:
            receptive *= s
        fan_in *= receptive
        fan_out *= receptive
    return fan_in, fan_out
