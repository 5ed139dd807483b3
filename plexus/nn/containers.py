# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Combinators — Chain, Maxout, SkipConnection, Parallel, PairwiseFusion.

Every sub-layer is any callable: a plexus layer, another combinator, or a
plain function.  Calling a combinator evaluates its tree depth-first; there
is no separate graph-building step.
"""
from __future__ import annotations

import functools
import itertools
import logging
import numpy as np

from ..exceptions import (ConfigurationError, DimensionMismatch,
                          UnsupportedInputError)
from .module import Container, Layers, Module, _callable_name

logger = logging.getLogger(__name__)


# ──────────────────────── Chain ───────────────────────────────────────

def _call(x, f):
    return f(x)


def _applychain(layers: Layers, x):
    if layers.kind == Layers.LIST:
        for f in layers:
            x = f(x)
        return x
    return functools.reduce(_call, layers.values(), x)


class Chain(Container):
    """Calls its sub-layers in sequence, each on the previous output.

    ::

        m = Chain(Dense(10, 5, F.tanh), Dense(5, 2))
        m(x) == m[1](m[0](x))

        m2 = Chain(enc=Chain(flatten, Dense(10, 5)), dec=Dense(5, 2))
        m2(x) == m2['dec'](m2['enc'](x))

    Called with several arguments, a chain passes them on as one tuple,
    which :class:`Parallel` understands as several inputs.

    A chain built from a Python list, ``Chain([l1, l2, ...])``, runs a plain
    loop over the mutable list.  Otherwise the chain folds its fixed tuple of
    sub-layers with :func:`functools.reduce`.  Both give the same result.
    """

    def __init__(self, *layers, **named_layers):
        super().__init__()
        self._set_layers(Layers.from_args(
            'Chain', layers, named_layers, reserved=('layers',)))

    def forward(self, x, *xs):
        if xs:
            x = (x,) + xs
        return _applychain(self.layers, x)

    def __repr__(self) -> str:
        if not len(self.layers):
            return "Chain()"
        return super().__repr__()


def activations(chain: Chain, x) -> tuple:
    """Like calling *chain*, but returns every sub-layer's output.

    ::

        >>> activations(Chain(lambda x: x + 1, lambda x: x * 2,
        ...                   lambda x: x ** 3), 1)
        (2, 4, 64)
    """
    outputs = []
    for f in chain.layers:
        x = f(x)
        outputs.append(x)
    return tuple(outputs)


# ──────────────────────── Maxout ──────────────────────────────────────

class Maxout(Container):
    """Elementwise maximum over several layers applied to the same input.

    ``Maxout(f, g, h)`` uses the given layers.  ``Maxout(factory, n)``
    calls the zero-argument *factory* ``n`` times, so each branch gets its
    own parameters::

        m = Maxout(lambda: Dense(5, 7, F.tanh), 3)

    NaN follows :func:`numpy.maximum`: a NaN in any branch propagates.
    """

    def __init__(self, *layers):
        super().__init__()
        if len(layers) == 2 and isinstance(layers[1], (int, np.integer)):
            factory, n = layers
            if n < 1:
                raise ConfigurationError(
                    f"Maxout needs at least one layer, got n={n}")
            logger.debug('building %d Maxout branches from %s',
                         n, _callable_name(factory))
            layers = tuple(factory() for _ in range(n))
        store = Layers.from_args('Maxout', layers, {})
        if not len(store):
            raise ConfigurationError(
                "cannot construct a Maxout layer with no sub-layers")
        self._set_layers(store)

    def forward(self, x):
        x = np.asarray(x)
        return functools.reduce(np.maximum, (f(x) for f in self.layers))


# ──────────────────────── SkipConnection ──────────────────────────────

class SkipConnection(Module):
    """Residual block: ``connection(layers(x), x)``.

    *connection* takes the layer output first and the untouched input
    second.  ``SkipConnection(layer, F.add)`` is the plain ResNet form;
    ``lambda mx, x: np.concatenate([mx, x], axis=0)`` stacks features.
    """

    def __init__(self, layers, connection):
        super().__init__()
        if not callable(layers) or not callable(connection):
            raise ConfigurationError(
                "SkipConnection needs a callable layer and connection")
        self.layers = layers
        self.connection = connection

    def forward(self, x):
        return self.connection(self.layers(x), x)

    def __repr__(self) -> str:
        return (f"SkipConnection({_callable_name(self.layers)}, "
                f"{_callable_name(self.connection)})")


# ──────────────────────── Parallel ────────────────────────────────────

class Parallel(Container):
    """Passes input to every branch and reduces the outputs with *connection*.

    Behaves like broadcasting:

    * one input ``x``: ``connection(f1(x), ..., fN(x))``
    * N inputs and N layers: ``connection(f1(x1), ..., fN(xN))``
    * several inputs and one layer: ``connection(f(x1), ..., f(xK))``

    A single tuple argument is always unpacked into several inputs::

        p = Parallel(F.add, np.square, np.sqrt)
        p(3.0, 4.0)     # 3**2 + sqrt(4) == 11.0
        p((3.0, 4.0))   # same
        p(4.0)          # 4**2 + sqrt(4) == 18.0
    """

    _reserved = ('layers', 'connection')

    def __init__(self, connection, /, *layers, **named_layers):
        super().__init__()
        store = Layers.from_args(
            'Parallel', layers, named_layers, reserved=self._reserved)
        if not len(store):
            raise ConfigurationError(
                "cannot construct a Parallel layer with no sub-layers")
        if not callable(connection):
            raise ConfigurationError(
                f"Parallel connection is not callable: {connection!r}")
        self.connection = connection
        self._set_layers(store)

    def _rebuild(self, layers: Layers) -> 'Parallel':
        return type(self)(self.connection, layers)

    def forward(self, *xs):
        if len(xs) == 1 and isinstance(xs[0], tuple):
            return self.forward(*xs[0])
        if not xs:
            raise UnsupportedInputError("Parallel layer cannot take 0 inputs")
        layers = self.layers.values()
        if len(xs) == 1:
            x, = xs
            return self.connection(*(f(x) for f in layers))
        if len(layers) == 1:
            f, = layers
            return self.connection(*(f(x) for x in xs))
        if len(layers) != len(xs):
            raise DimensionMismatch(
                f"Parallel with {len(layers)} > 1 sub-layers can take one "
                f"input or {len(layers)} inputs, but got {len(xs)} inputs")
        return self.connection(*(f(x) for f, x in zip(layers, xs)))

    def _repr_lines(self) -> list[str]:
        return ([f"  (connection): {_callable_name(self.connection)}"]
                + super()._repr_lines())


# ──────────────────────── PairwiseFusion ──────────────────────────────

class PairwiseFusion(Container):
    """A chain whose every step also takes a new input.

    With inputs ``(x1, ..., xN)``, one per layer::

        y1 = layer1(x1)
        y2 = layer2(connection(y1, x2))
        y3 = layer3(connection(y2, x3))

    With a single input ``x`` every step fuses with the same ``x``.
    Returns the tuple ``(y1, ..., yN)``.
    """

    _reserved = ('layers', 'connection')

    def __init__(self, connection, /, *layers, **named_layers):
        super().__init__()
        if not callable(connection):
            raise ConfigurationError(
                f"PairwiseFusion connection is not callable: {connection!r}")
        self.connection = connection
        self._set_layers(Layers.from_args(
            'PairwiseFusion', layers, named_layers, reserved=self._reserved))

    def _rebuild(self, layers: Layers) -> 'PairwiseFusion':
        return type(self)(self.connection, layers)

    def forward(self, *xs):
        x = xs[0] if len(xs) == 1 else xs
        n = len(self.layers)
        if isinstance(x, tuple) and len(x) != n:
            raise DimensionMismatch(
                f"PairwiseFusion with {n} sub-layers can take one input or "
                f"{n} inputs, but got {len(x)} inputs")
        inputs = x if isinstance(x, tuple) else itertools.repeat(x)
        outputs = []
        for i, (f, xi) in enumerate(zip(self.layers, inputs)):
            y = f(xi if i == 0 else self.connection(outputs[-1], xi))
            outputs.append(y)
        return tuple(outputs)

    def _repr_lines(self) -> list[str]:
        return ([f"  (connection): {_callable_name(self.connection)}"]
                + super()._repr_lines())
