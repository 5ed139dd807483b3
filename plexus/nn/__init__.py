# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""plexus.nn — layers and combinators."""
from __future__ import annotations

# Module base class & sub-layer storage
from .module import Module, Layers, Container, trainables

# Parameter
from .parameter import Parameter

# Leaf layers
from .layers import (
    Dense,
    Scale,
    Bilinear,
    Embedding,
    EmbeddingBag,
)

# Combinators
from .containers import (
    Chain,
    Maxout,
    SkipConnection,
    Parallel,
    PairwiseFusion,
    activations,
)

# Functional API (accessible as nn.functional or F)
from . import functional

# Initialization routines
from . import init

# Shape checks and bias creation
from . import utils

__all__ = [
    'Module', 'Layers', 'Container', 'trainables',
    'Parameter',
    'Dense', 'Scale', 'Bilinear', 'Embedding', 'EmbeddingBag',
    'Chain', 'Maxout', 'SkipConnection', 'Parallel', 'PairwiseFusion',
    'activations',
    'functional', 'init', 'utils',
]
