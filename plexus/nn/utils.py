# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""nn.utils — shape checks, bias creation and input dtype matching."""
from __future__ import annotations

import logging
import warnings
import numpy as np

from ..exceptions import ConfigurationError, DimensionMismatch
from .parameter import Parameter

logger = logging.getLogger(__name__)


def summarize(x) -> str:
    """Short description of an array, e.g. ``5x64 ndarray[float32]``."""
    x = np.asarray(x)
    dims = 'x'.join(str(d) for d in x.shape) or '0-dim'
    return f"{dims} {type(x).__name__}[{x.dtype}]"


def size_check(layer, x: np.ndarray, dim: int, n: int) -> None:
    """Raise :class:`DimensionMismatch` unless ``x.shape[dim] == n``."""
    if not 0 <= dim < x.ndim:
        raise DimensionMismatch(
            f"layer {layer!r} expects x.ndim > {dim}, but got {summarize(x)}")
    if x.shape[dim] != n:
        raise DimensionMismatch(
            f"layer {layer!r} expects x.shape[{dim}] == {n}, "
            f"but got {summarize(x)}")


def create_bias(weight, bias, *dims: int) -> Parameter | None:
    """Build the bias a layer owns.

    ``True`` gives a zero-filled trainable bias of shape *dims* with the
    weight's dtype.  ``False`` or ``None`` gives no bias at all, which the
    forward pass treats as an additive zero.  An explicit array must have
    shape *dims* and is converted to the weight's dtype.
    """
    dtype = np.asarray(weight).dtype
    if bias is True:
        return Parameter(np.zeros(dims, dtype=dtype))
    if bias is False or bias is None:
        return None
    b = np.asarray(bias)
    if b.shape != tuple(dims):
        raise ConfigurationError(
            f"expected bias of shape {tuple(dims)}, got shape {b.shape}")
    if b.dtype != dtype:
        logger.debug('converting bias from %s to %s', b.dtype, dtype)
        b = b.astype(dtype)
    return Parameter(b)


def match_eltype(layer, dtype, x) -> np.ndarray:
    """Convert *x* to the dtype of a layer's parameters where that is safe.

    Integer and boolean input is converted silently.  ``float64`` input to
    a ``float32`` layer is converted with a warning, since it usually means
    an earlier stage is producing double precision by accident.
    """
    x = np.asarray(x)
    dtype = np.dtype(dtype)
    if x.dtype == dtype or not np.issubdtype(dtype, np.floating):
        return x
    if dtype == np.float32 and x.dtype == np.float64:
        warnings.warn(
            f"Layer with float32 parameters got float64 input. The input "
            f"will be converted, but any earlier layers may be very slow.\n"
            f"  layer = {layer!r}\n  input = {summarize(x)}",
            RuntimeWarning, stacklevel=2)
        return x.astype(dtype)
    if np.issubdtype(x.dtype, np.integer) or x.dtype == np.bool_:
        return x.astype(dtype)
    return x
