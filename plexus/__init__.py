# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""
Plexus — composable neural-network layers on NumPy.

Leaf layers (``Dense``, ``Scale``, ``Bilinear``, ``Embedding``,
``EmbeddingBag``) hold shape-checked parameters; combinators (``Chain``,
``Parallel``, ``PairwiseFusion``, ``Maxout``, ``SkipConnection``) wire any
callables into forward-pass graphs.  Arrays are features-first.

Usage::

    import numpy as np
    import plexus.nn as nn
    import plexus.nn.functional as F

    model = nn.Chain(
        nn.Dense(3, 5, F.relu),
        nn.Parallel(F.vcat, nn.Dense(5, 4), nn.Chain(nn.Dense(5, 7), nn.Dense(7, 4))),
        nn.Dense(8, 17),
    )
    model(np.random.rand(3, 32).astype(np.float32)).shape   # (17, 32)
"""
from __future__ import annotations

import logging

__version__ = "0.1.0"
__author__ = "Pictofeed, LLC"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .exceptions import (
    PlexusError,
    ConfigurationError,
    DimensionMismatch,
    UnsupportedInputError,
)

# ── Sub-packages ──
from . import nn

__all__ = [
    "__version__",
    "__author__",
    'PlexusError', 'ConfigurationError', 'DimensionMismatch',
    'UnsupportedInputError',
    'nn',
]
