# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Exception classes raised by plexus layers.

Every error derives from :class:`PlexusError` and from the builtin
exception it specialises, so callers can catch either
``plexus.exceptions.DimensionMismatch`` or a plain ``ValueError``.
"""


class PlexusError(Exception):
    """Base exception for all plexus errors."""


class ConfigurationError(PlexusError, ValueError):
    """Raised when a layer is constructed with invalid arguments.

    This exception is raised when:
    - A named sub-layer reuses a reserved field name
    - A combinator that needs sub-layers is given none
    - Positional and named sub-layers are mixed
    - A Bilinear weight is not a rank-3 array
    - Bag split offsets are malformed
    - An explicit bias does not have the layer's output shape
    """


class DimensionMismatch(PlexusError, ValueError):
    """Raised when an input shape does not fit a layer's parameters.

    Also raised when the number of inputs does not match the number of
    branches of a multi-input combinator.
    """


class UnsupportedInputError(PlexusError, TypeError):
    """Raised when a layer is given an input kind it cannot interpret."""
