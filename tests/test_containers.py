"""Tests for the combinators: Chain, Maxout, SkipConnection, Parallel, PairwiseFusion."""
import numpy as np
import pytest

import plexus.nn as nn
import plexus.nn.functional as F
from plexus.exceptions import (ConfigurationError, DimensionMismatch,
                               UnsupportedInputError)


def _rand32(*shape, seed=0):
    return np.random.default_rng(seed).standard_normal(shape).astype(np.float32)


def plus_one(x):
    return x + 1


def double(x):
    return x * 2


def cube(x):
    return x ** 3


# ── Chain ──

def test_chain_of_functions():
    assert nn.Chain(lambda x: x ** 2, lambda x: x + 1)(5) == 26


def test_chain_equals_nested_calls():
    m = nn.Chain(nn.Dense(10, 5, F.tanh), nn.Dense(5, 2))
    x = _rand32(10, 3)
    np.testing.assert_allclose(m(x), m[1](m[0](x)))


def test_chain_named_access():
    m2 = nn.Chain(enc=nn.Chain(nn.Dense(10, 5, F.tanh)), dec=nn.Dense(5, 2))
    x = _rand32(10)
    np.testing.assert_allclose(m2(x), m2['dec'](m2['enc'](x)))
    assert m2.keys() == ('enc', 'dec')
    assert m2.enc is m2['enc'] is m2[0]
    assert m2.dec is m2[-1]


def test_chain_named_function_attribute():
    c = nn.Chain(a=plus_one, b=double)
    assert c.b is double
    with pytest.raises(AttributeError):
        c.missing


def test_chain_positional_indexing_and_slicing():
    c = nn.Chain(plus_one, double, cube)
    assert c[-1] is cube
    head = c[:2]
    assert isinstance(head, nn.Chain)
    assert len(head) == 2
    assert head(1) == 4
    assert c[[2, 0]](1) == 2
    with pytest.raises(IndexError):
        c[3]
    with pytest.raises(KeyError):
        c['a']


def test_chain_named_slicing_keeps_names():
    c = nn.Chain(a=plus_one, b=double, c=cube)
    assert c[1:].keys() == ('b', 'c')
    assert c[['c', 'a']].keys() == ('c', 'a')
    assert c[['c', 'a']](1) == 2


def test_chain_list_storage_matches_tuple_storage():
    layers = [nn.Dense(8, 8, F.relu) for _ in range(5)]
    looped = nn.Chain(layers)
    folded = nn.Chain(*layers)
    assert looped.layers.kind == nn.Layers.LIST
    assert folded.layers.kind == nn.Layers.TUPLE
    x = _rand32(8, 4)
    np.testing.assert_array_equal(looped(x), folded(x))
    named = nn.Chain(**{f"l{i}": layer for i, layer in enumerate(layers)})
    np.testing.assert_array_equal(named(x), looped(x))
    assert looped[1:3].layers.kind == nn.Layers.LIST


def test_empty_chain_is_identity():
    assert nn.Chain()(3) == 3
    assert nn.activations(nn.Chain(), 3) == ()
    assert repr(nn.Chain()) == "Chain()"


def test_chain_passes_several_arguments_as_tuple():
    assert nn.Chain(lambda t: t)(1, 2, 3) == (1, 2, 3)
    m = nn.Chain(lambda t: t,
                 nn.Parallel(F.add, lambda x: 1 / x, lambda x: x ** 2))
    assert m(4, 5) == 25.25


def test_chain_construction_errors():
    with pytest.raises(ConfigurationError, match="'layers'"):
        nn.Chain(layers=plus_one)
    with pytest.raises(ConfigurationError):
        nn.Chain(plus_one, b=double)
    with pytest.raises(ConfigurationError, match="not callable"):
        nn.Chain(3)


def test_chain_from_mapping():
    c = nn.Chain({'first': plus_one, 'second': double})
    assert c.keys() == ('first', 'second')
    assert c(1) == 4


def test_activations():
    c = nn.Chain(plus_one, double, cube)
    assert nn.activations(c, 1) == (2, 4, 64)


def test_activations_of_dense_chain():
    c = nn.Chain(nn.Dense(4, 6, F.relu), nn.Dense(6, 3), F.softmax)
    x = _rand32(4, 5)
    acts = nn.activations(c, x)
    assert len(acts) == 3
    np.testing.assert_allclose(acts[-1], c(x))
    np.testing.assert_allclose(acts[1], c[1](acts[0]))


def test_chain_parameters():
    c = nn.Chain(nn.Dense(3, 4), np.tanh, nn.Dense(4, 2))
    names = [name for name, _ in c.named_parameters()]
    assert names == ['0.weight', '0.bias', '2.weight', '2.bias']
    assert c.num_parameters() == 3 * 4 + 4 + 4 * 2 + 2


def test_chain_repr():
    text = repr(nn.Chain(nn.Dense(3, 4), np.tanh))
    assert text.startswith("Chain(")
    assert "(0): Dense(in_features=3, out_features=4, bias=True)" in text
    assert "(1): tanh" in text


def test_composite_model_shape():
    model = nn.Chain(
        nn.Dense(3, 5),
        nn.Parallel(F.vcat, nn.Dense(5, 4),
                    nn.Chain(nn.Dense(5, 7), nn.Dense(7, 4))),
        nn.Dense(8, 17))
    assert model(_rand32(3)).shape == (17,)
    assert model(_rand32(3, 32)).shape == (17, 32)


# ── Maxout ──

def test_maxout_of_functions():
    x = np.array([-2, -1, 0, 1, 2])
    m = nn.Maxout(lambda x: x ** 2, lambda x: 3 * x)
    np.testing.assert_array_equal(m(x), [4, 1, 0, 3, 6])
    m2 = nn.Maxout(lambda x: 3 * x, lambda x: x ** 2)
    np.testing.assert_array_equal(m2(x), [4, 1, 0, 3, 6])


def test_maxout_accepts_a_plain_list():
    m = nn.Maxout(lambda x: x ** 2, lambda x: 3 * x)
    np.testing.assert_array_equal(m([-2, -1, 0, 1, 2]), [4, 1, 0, 3, 6])


def test_maxout_factory_builds_independent_layers():
    m = nn.Maxout(lambda: nn.Dense(5, 7, F.tanh), 3)
    assert len(m) == 3
    assert m[0] is not m[1]
    assert not np.array_equal(m[0].weight.data, m[1].weight.data)
    assert len(list(m.parameters())) == 6
    assert m(_rand32(5, 11)).shape == (7, 11)


def test_maxout_propagates_nan():
    m = nn.Maxout(lambda x: x, lambda x: np.full_like(x, np.nan))
    assert np.all(np.isnan(m(np.ones(2))))


def test_maxout_needs_layers():
    with pytest.raises(ConfigurationError):
        nn.Maxout()
    with pytest.raises(ConfigurationError):
        nn.Maxout(lambda: plus_one, 0)


# ── SkipConnection ──

def test_skip_connection_adds_input():
    d = nn.Dense(4, 4)
    s = nn.SkipConnection(d, F.add)
    x = _rand32(4, 3)
    np.testing.assert_allclose(s(x), d(x) + x)
    assert len(list(s.parameters())) == 2


def test_skip_connection_concatenates():
    s = nn.SkipConnection(nn.Dense(4, 7),
                          lambda mx, x: np.concatenate([mx, x], axis=0))
    assert s(_rand32(4, 3)).shape == (11, 3)


def test_skip_connection_needs_callables():
    with pytest.raises(ConfigurationError):
        nn.SkipConnection(plus_one, 3)


# ── Parallel ──

def test_parallel_input_forms():
    p = nn.Parallel(F.add, np.square, np.sqrt)
    assert p(3.0, 4.0) == 11.0
    assert p((3.0, 4.0)) == 11.0
    assert p(4.0) == 18.0


def test_parallel_single_layer_many_inputs():
    p = nn.Parallel(lambda *ys: ys, double)
    assert p(1, 2, 3) == (2, 4, 6)
    assert p(5) == (10,)


def test_parallel_count_mismatch():
    p = nn.Parallel(F.add, plus_one, double)
    with pytest.raises(DimensionMismatch, match="2 > 1 sub-layers"):
        p(1, 2, 3)


def test_parallel_zero_inputs():
    with pytest.raises(UnsupportedInputError):
        nn.Parallel(F.add, plus_one)()


def test_parallel_construction_errors():
    with pytest.raises(ConfigurationError):
        nn.Parallel(F.add)
    with pytest.raises(ConfigurationError, match="'connection'"):
        nn.Parallel(F.add, layers=plus_one)
    with pytest.raises(ConfigurationError, match="'connection'"):
        nn.Parallel(F.add, connection=plus_one)
    with pytest.raises(ConfigurationError):
        nn.Parallel(3, plus_one)


def test_parallel_named_branches():
    model = nn.Parallel(F.add, alpha=nn.Dense(10, 2, F.tanh),
                        beta=nn.Dense(5, 2))
    assert model(_rand32(10), _rand32(5)).shape == (2,)
    assert model['beta'] is model[1]
    assert model.alpha is model[0]
    assert [n for n, _ in model.named_parameters()] == [
        'alpha.weight', 'alpha.bias', 'beta.weight', 'beta.bias']


def test_parallel_slicing_keeps_connection():
    p = nn.Parallel(F.add, plus_one, double, cube)
    sub = p[[0, 2]]
    assert isinstance(sub, nn.Parallel)
    assert sub.connection is F.add
    assert sub(2) == 3 + 8


def test_parallel_repr_names_connection():
    assert "(connection): add" in repr(nn.Parallel(F.add, plus_one))


# ── PairwiseFusion ──

def test_pairwise_fusion_tuple_inputs():
    m = nn.PairwiseFusion(F.add, plus_one, double, lambda x: x - 3)
    assert m((1, 2, 3)) == (2, 8, 8)
    assert m(1, 2, 3) == (2, 8, 8)


def test_pairwise_fusion_single_input():
    m = nn.PairwiseFusion(F.add, plus_one, double, lambda x: x - 3)
    assert m(1) == (2, 6, 4)


def test_pairwise_fusion_with_arrays():
    m = nn.PairwiseFusion(F.vcat, nn.Dense(2, 3), nn.Dense(5, 4))
    y1, y2 = m((_rand32(2), _rand32(2, seed=1)))
    assert y1.shape == (3,)
    assert y2.shape == (4,)


def test_pairwise_fusion_mismatch():
    m = nn.PairwiseFusion(F.add, plus_one, double, cube)
    with pytest.raises(DimensionMismatch):
        m((1, 2))


def test_pairwise_fusion_empty():
    assert nn.PairwiseFusion(F.add)(1) == ()


def test_pairwise_fusion_construction_and_slicing():
    with pytest.raises(ConfigurationError):
        nn.PairwiseFusion(F.add, connection=plus_one)
    m = nn.PairwiseFusion(F.add, a=plus_one, b=double, c=cube)
    head = m[:2]
    assert isinstance(head, nn.PairwiseFusion)
    assert head.keys() == ('a', 'b')
    assert head.connection is F.add
    assert head(1) == (2, 6)
