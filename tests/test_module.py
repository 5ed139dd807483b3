"""Tests for Module, Parameter and Layers."""
import numpy as np
import pytest

import plexus.nn as nn
from plexus.exceptions import ConfigurationError, DimensionMismatch


def test_parameter_copies_its_input():
    a = np.zeros((2, 3))
    p = nn.Parameter(a)
    a[0, 0] = 1.0
    assert p.data[0, 0] == 0.0
    assert p.shape == (2, 3)
    assert p.requires_grad


def test_parameter_shape_is_fixed():
    p = nn.Parameter(np.zeros((2, 3)))
    buf = p.data
    p.data = np.ones((2, 3))
    assert p.data is buf
    np.testing.assert_array_equal(buf, np.ones((2, 3)))
    with pytest.raises(DimensionMismatch):
        p.data = np.ones(3)


def test_parameter_array_protocol():
    p = nn.Parameter(np.arange(4, dtype=np.float32))
    np.testing.assert_array_equal(np.asarray(p), [0, 1, 2, 3])
    p[1] = 7
    assert p[1] == 7
    assert len(p) == 4
    assert repr(p).startswith("Parameter containing:")


def test_module_registers_parameters_and_children():
    m = nn.Module()
    m.bias = None
    m.bias = nn.Parameter(np.zeros(2))
    m.child = nn.Dense(2, 2)
    assert isinstance(m.bias, nn.Parameter)
    names = [n for n, _ in m.named_parameters()]
    assert names == ['bias', 'child.weight', 'child.bias']
    assert [n for n, _ in m.named_modules()] == ['', 'child']
    del m.child
    assert [n for n, _ in m.named_parameters()] == ['bias']


def test_shared_parameters_counted_once():
    d = nn.Dense(3, 3)
    c = nn.Chain(d, d)
    assert len(list(c.parameters())) == 2
    assert len(nn.trainables(c)) == 2


def test_trainables_skip_frozen_parameters():
    d = nn.Dense(3, 2)
    d.bias.requires_grad = False
    params = nn.trainables(d)
    assert len(params) == 1
    assert params[0] is d.weight.data


def test_state_dict_round_trip_in_place():
    d = nn.Dense(3, 2)
    weight = d.weight.data
    sd = {k: np.ones_like(v) for k, v in d.state_dict().items()}
    d.load_state_dict(sd)
    assert d.weight.data is weight
    np.testing.assert_array_equal(d.weight.data, np.ones((2, 3)))
    np.testing.assert_array_equal(d.bias.data, np.ones(2))


def test_load_state_dict_strict():
    d = nn.Dense(3, 2)
    with pytest.raises(KeyError, match="missing keys"):
        d.load_state_dict({'weight': np.zeros((2, 3))})
    d.load_state_dict({'weight': np.zeros((2, 3))}, strict=False)
    np.testing.assert_array_equal(d.weight.data, np.zeros((2, 3)))
    with pytest.raises(DimensionMismatch):
        d.load_state_dict({'weight': np.zeros((3, 3)), 'bias': np.zeros(2)})


def test_zero_grad():
    d = nn.Dense(3, 2)
    d.weight.grad = np.ones((2, 3))
    d.zero_grad()
    np.testing.assert_array_equal(d.weight.grad, np.zeros((2, 3)))
    assert d.bias.grad is None
    d.zero_grad(set_to_none=True)
    assert d.weight.grad is None


def test_layers_kinds_and_lookup():
    def f(x):
        return x

    def g(x):
        return x

    named = nn.Layers([f, g], names=['a', 'b'])
    assert named.is_named
    assert named.keys() == ('a', 'b')
    assert named['b'] is g
    assert 'a' in named
    assert dict(named.items()) == {'a': f, 'b': g}

    positional = nn.Layers([f, g])
    assert positional.kind == nn.Layers.TUPLE
    assert positional.keys() == (0, 1)
    with pytest.raises(KeyError):
        positional['a']
    with pytest.raises(IndexError):
        positional[2]


def test_layers_name_validation():
    with pytest.raises(ConfigurationError, match="duplicate"):
        nn.Layers([abs, abs], names=['a', 'a'])
    with pytest.raises(ConfigurationError):
        nn.Layers([abs], names=['a', 'b'])
    with pytest.raises(ConfigurationError):
        nn.Layers([abs], names=[1])
