# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Plexus — Composable Layer Library                                   ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""nn.Module — base class for all layers, plus sub-layer storage."""
from __future__ import annotations

import operator
import numpy as np
from collections import OrderedDict
from collections.abc import Mapping
from typing import Iterator

from ..exceptions import ConfigurationError
from .parameter import Parameter


def _callable_name(f) -> str:
    if isinstance(f, Module):
        return repr(f)
    return getattr(f, '__name__', None) or repr(f)


class Module:
    """Base class for all layers.

    Assigning a :class:`Parameter` attribute registers it as a parameter,
    assigning a :class:`Module` registers it as a child.  Everything else
    is stored as a plain attribute.
    """

    _modules: OrderedDict
    _parameters: OrderedDict

    def __init__(self):
        object.__setattr__(self, '_modules', OrderedDict())
        object.__setattr__(self, '_parameters', OrderedDict())

    def forward(self, *args, **kwargs):
        raise NotImplementedError

    def __call__(self, *args, **kwargs):
        return self.forward(*args, **kwargs)

    # ---- Attribute management ----

    def __setattr__(self, name: str, value):
        if '_parameters' not in self.__dict__:
            raise AttributeError(
                f"cannot assign '{name}' before Module.__init__() call")
        self._parameters.pop(name, None)
        self._modules.pop(name, None)
        if isinstance(value, Parameter):
            self.__dict__.pop(name, None)
            self._parameters[name] = value
        elif isinstance(value, Module):
            self.__dict__.pop(name, None)
            self._modules[name] = value
        else:
            object.__setattr__(self, name, value)

    def __getattr__(self, name: str):
        params = self.__dict__.get('_parameters', {})
        if name in params:
            return params[name]
        modules = self.__dict__.get('_modules', {})
        if name in modules:
            return modules[name]
        raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

    def __delattr__(self, name: str):
        if name in self._parameters:
            del self._parameters[name]
        elif name in self._modules:
            del self._modules[name]
        else:
            object.__delattr__(self, name)

    # ---- Parameter access ----

    def named_parameters(self, prefix: str = '',
                         recurse: bool = True) -> Iterator[tuple[str, Parameter]]:
        """Yield ``(dotted_name, parameter)``; shared parameters appear once."""
        seen: set[int] = set()
        for name, p in self._named_parameters(prefix, recurse):
            if id(p) not in seen:
                seen.add(id(p))
                yield name, p

    def _named_parameters(self, prefix, recurse):
        for name, p in self._parameters.items():
            full_name = f"{prefix}.{name}" if prefix else name
            yield full_name, p
        if recurse:
            for mname, m in self._modules.items():
                full_prefix = f"{prefix}.{mname}" if prefix else mname
                yield from m._named_parameters(full_prefix, True)

    def parameters(self, recurse: bool = True) -> Iterator[Parameter]:
        for _, p in self.named_parameters(recurse=recurse):
            yield p

    def children(self) -> Iterator['Module']:
        yield from self._modules.values()

    def named_modules(self, prefix: str = '') -> Iterator[tuple[str, 'Module']]:
        yield prefix, self
        for name, m in self._modules.items():
            full_name = f"{prefix}.{name}" if prefix else name
            yield from m.named_modules(full_name)

    def num_parameters(self) -> int:
        return sum(p.size for p in self.parameters())

    # ---- State dict ----

    def state_dict(self) -> dict:
        sd = OrderedDict()
        for name, p in self.named_parameters():
            sd[name] = p.data
        return sd

    def load_state_dict(self, state_dict: dict, strict: bool = True):
        """Copy arrays into the existing parameters, in place."""
        own = dict(self.named_parameters())
        if strict:
            missing = [k for k in own if k not in state_dict]
            unexpected = [k for k in state_dict if k not in own]
            if missing or unexpected:
                raise KeyError(
                    f"error loading state dict into {type(self).__name__}: "
                    f"missing keys {missing}, unexpected keys {unexpected}")
        for key, val in state_dict.items():
            if key in own:
                own[key].data = val
        return self

    # ---- Gradient management ----

    def zero_grad(self, set_to_none: bool = False):
        for p in self.parameters():
            if set_to_none:
                p.grad = None
            elif p.grad is not None:
                p.grad = np.zeros_like(p.grad)

    # ---- Utilities ----

    def __repr__(self) -> str:
        lines = [f"{type(self).__name__}("]
        for name, m in self._modules.items():
            child_repr = repr(m).replace('\n', '\n  ')
            lines.append(f"  ({name}): {child_repr}")
        for name, p in self._parameters.items():
            lines.append(f"  ({name}): Parameter({p.shape})")
        lines.append(")")
        return '\n'.join(lines)


def trainables(model: Module) -> list[np.ndarray]:
    """The arrays an optimizer should update, each once."""
    return [p.data for p in model.parameters() if p.requires_grad]


# ---- Sub-layer storage ----

class Layers:
    """Sub-layers of a container, held in exactly one of three forms.

    ``tuple``
        positional, fixed length
    ``list``
        positional, built from a Python list; containers iterate over it
        with a plain loop instead of a fold
    ``named``
        order-preserving ``name -> layer`` mapping

    Indexing accepts an int, a name (named form only), a slice, or a
    sequence of ints and names.  Sub-selections are returned as a new
    ``Layers`` of the same form, keeping the selected names in order.
    """

    TUPLE = 'tuple'
    LIST = 'list'
    NAMED = 'named'

    __slots__ = ('kind', '_values', '_names')

    def __init__(self, values=(), names=None, kind: str | None = None):
        if names is not None:
            names = tuple(names)
            kind = self.NAMED
        elif kind is None:
            kind = self.TUPLE
        values = list(values) if kind == self.LIST else tuple(values)
        if kind == self.NAMED:
            if len(names) != len(values):
                raise ConfigurationError(
                    f"got {len(names)} names for {len(values)} layers")
            for name in names:
                if not isinstance(name, str):
                    raise ConfigurationError(
                        f"layer names must be strings, got {name!r}")
            if len(set(names)) != len(names):
                raise ConfigurationError(f"duplicate layer names in {names}")
        self.kind = kind
        self._values = values
        self._names = names

    @classmethod
    def from_args(cls, owner: str, args: tuple, kwargs: dict,
                  reserved: tuple[str, ...] = ('layers',)) -> 'Layers':
        """Build storage from a container's ``*layers, **named`` arguments."""
        if len(args) == 1 and not kwargs:
            arg = args[0]
            if isinstance(arg, Layers):
                return arg
            if isinstance(arg, Mapping):
                args, kwargs = (), dict(arg)
        if args and kwargs:
            raise ConfigurationError(
                f"{owner} takes positional or named sub-layers, not both")
        if kwargs:
            if any(name in kwargs for name in reserved):
                names = ' or '.join(f"'{n}'" for n in reserved)
                raise ConfigurationError(
                    f"a {owner} cannot have a named sub-layer called {names}")
            layers = cls(kwargs.values(), names=kwargs.keys())
        elif len(args) == 1 and isinstance(args[0], list):
            layers = cls(args[0], kind=cls.LIST)
        else:
            layers = cls(args)
        for key, layer in layers.items():
            if not callable(layer):
                raise ConfigurationError(
                    f"{owner} sub-layer {key!r} is not callable: {layer!r}")
        return layers

    @property
    def is_named(self) -> bool:
        return self.kind == self.NAMED

    def keys(self) -> tuple:
        if self._names is not None:
            return self._names
        return tuple(range(len(self._values)))

    def values(self) -> tuple:
        return tuple(self._values)

    def items(self):
        return zip(self.keys(), self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __contains__(self, key) -> bool:
        return key in self.keys()

    def _position(self, key) -> int:
        n = len(self._values)
        if isinstance(key, str):
            if self._names is None:
                raise KeyError(
                    f"layers are positional, cannot look up name '{key}'")
            try:
                return self._names.index(key)
            except ValueError:
                raise KeyError(
                    f"no layer named '{key}', have {list(self._names)}") from None
        i = operator.index(key)
        if not -n <= i < n:
            raise IndexError(f"layer index {i} out of range for {n} layers")
        return i % n

    def _select(self, positions) -> 'Layers':
        values = [self._values[i] for i in positions]
        if self._names is None:
            return Layers(values, kind=self.kind)
        return Layers(values, names=[self._names[i] for i in positions])

    def __getitem__(self, key):
        if isinstance(key, slice):
            return self._select(range(len(self._values))[key])
        if isinstance(key, (list, tuple, np.ndarray)):
            return self._select([self._position(k) for k in key])
        return self._values[self._position(key)]

    def __repr__(self) -> str:
        if self._names is not None:
            body = ', '.join(f"{k}={_callable_name(v)}"
                             for k, v in self.items())
        else:
            body = ', '.join(_callable_name(v) for v in self._values)
            if self.kind == self.LIST:
                body = f"[{body}]"
        return f"Layers({body})"


class Container(Module):
    """Base class of combinators with an indexable set of sub-layers.

    Sub-layers that are modules become children (keyed by name or
    position), so their parameters belong to the container's parameter
    set.  Plain functions are held but own no parameters.
    """

    def _set_layers(self, layers: Layers) -> None:
        self.layers = layers
        for key, layer in layers.items():
            if isinstance(layer, Module):
                self._modules[str(key)] = layer

    def _rebuild(self, layers: Layers) -> 'Container':
        return type(self)(layers)

    def __getitem__(self, key):
        item = self.layers[key]
        if isinstance(key, (slice, list, tuple, np.ndarray)):
            return self._rebuild(item)
        return item

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    def keys(self) -> tuple:
        return self.layers.keys()

    def __getattr__(self, name: str):
        try:
            return super().__getattr__(name)
        except AttributeError:
            layers = self.__dict__.get('layers')
            if isinstance(layers, Layers) and layers.is_named and name in layers:
                return layers[name]
            raise

    def _repr_lines(self) -> list[str]:
        lines = []
        for key, layer in self.layers.items():
            child_repr = _callable_name(layer).replace('\n', '\n  ')
            lines.append(f"  ({key}): {child_repr}")
        return lines

    def __repr__(self) -> str:
        lines = [f"{type(self).__name__}("] + self._repr_lines() + [")"]
        return '\n'.join(lines)
