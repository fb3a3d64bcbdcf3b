"""Tests for the presample / normal / ZLB partition."""

from __future__ import annotations

import numpy as np
import pytest

from zlb_dsge.estimate import Regime, RegimeIndices, expand_to_zlb, partition_regimes
from zlb_dsge.models import ModelSpec


def _spec(nant: int = 2, **overrides) -> ModelSpec:
    kwargs = dict(
        n_observables=2 + nant,
        n_anticipated_shocks=nant,
        n_states=4 + nant,
        n_states_augmented=8 + nant,
        n_exogenous_shocks=3 + nant,
        anticipated_lags=1,
        n_presample_periods=2,
    )
    kwargs.update(overrides)
    return ModelSpec(**kwargs)


def _system(spec: ModelSpec):
    n = spec.n_states_augmented
    TTT = np.arange(n * n, dtype=float).reshape(n, n)
    RRR = np.arange(n * spec.n_exogenous_shocks, dtype=float).reshape(n, spec.n_exogenous_shocks)
    CCC = np.arange(n, dtype=float)
    return TTT, RRR, CCC


def test_indices_for_two_anticipated_shocks():
    idx = RegimeIndices.from_spec(_spec())

    np.testing.assert_array_equal(idx.before, np.arange(4))
    np.testing.assert_array_equal(idx.anticipated, [4, 5])
    np.testing.assert_array_equal(idx.after_zlb, np.arange(6, 10))
    np.testing.assert_array_equal(idx.after_normal, np.arange(4, 8))
    np.testing.assert_array_equal(idx.normal_states, [0, 1, 2, 3, 6, 7, 8, 9])
    np.testing.assert_array_equal(idx.normal_shocks, [0, 1, 2])
    np.testing.assert_array_equal(idx.normal_observables, [0, 1])
    assert idx.n_states_zlb == 10


def test_partition_row_counts_and_slices():
    spec = _spec()
    data = np.arange(20 * 4, dtype=float).reshape(20, 4)

    regimes = partition_regimes(data, spec, *_system(spec))

    assert [bundle.regime for bundle in regimes] == [Regime.PRESAMPLE, Regime.NORMAL, Regime.ZLB]
    assert regimes.presample.n_periods == 2
    assert regimes.normal.n_periods == 16
    assert regimes.zlb.n_periods == 2
    np.testing.assert_array_equal(regimes.presample.data, data[:2, :2])
    np.testing.assert_array_equal(regimes.normal.data, data[2:18, :2])
    np.testing.assert_array_equal(regimes.zlb.data, data[18:, :])
    assert regimes.normal.n_states == 8
    assert regimes.zlb.n_states == 10
    assert regimes.normal.n_observables == 2
    assert regimes.zlb.n_observables == 4


def test_partition_copies_data():
    spec = _spec()
    data = np.zeros((20, 4))
    regimes = partition_regimes(data, spec, *_system(spec))
    regimes.normal.data[0, 0] = 99.0
    assert data[2, 0] == 0.0
    regimes.presample.data[0, 0] = 99.0
    assert data[0, 0] == 0.0


def test_normal_regimes_keep_normal_observable_columns():
    spec = _spec(nant=3)
    data = np.arange(20 * 5, dtype=float).reshape(20, 5)

    regimes = partition_regimes(data, spec, *_system(spec))
    columns = regimes.indices.normal_observables

    np.testing.assert_array_equal(regimes.presample.data, data[:2][:, columns])
    np.testing.assert_array_equal(regimes.normal.data, data[2:18][:, columns])
    assert regimes.presample.n_observables == regimes.normal.n_observables == columns.size == 2
    assert regimes.normal.n_states == regimes.indices.normal_states.size


def test_normal_transition_is_submatrix_of_zlb_transition():
    spec = _spec()
    TTT, RRR, CCC = _system(spec)
    regimes = partition_regimes(np.zeros((20, 4)), spec, TTT, RRR, CCC)
    states = regimes.indices.normal_states

    normal = regimes.normal.transition
    np.testing.assert_array_equal(normal.TTT, TTT[np.ix_(states, states)])
    np.testing.assert_array_equal(normal.RRR, RRR[np.ix_(states, [0, 1, 2])])
    np.testing.assert_array_equal(normal.CCC, CCC[states])
    assert regimes.presample.transition is normal
    np.testing.assert_array_equal(regimes.zlb.transition.TTT, TTT)
    assert regimes.presample.measurement is None


def test_partition_without_anticipated_shocks_keeps_every_state():
    spec = _spec(nant=0)
    TTT, RRR, CCC = _system(spec)
    regimes = partition_regimes(np.zeros((10, 2)), spec, TTT, RRR, CCC)

    np.testing.assert_array_equal(regimes.normal.transition.TTT, TTT)
    np.testing.assert_array_equal(regimes.normal.data, np.zeros((6, 2)))


@pytest.mark.parametrize(
    "data, message",
    [
        (np.zeros((20, 3)), "columns"),
        (np.zeros((3, 4)), "periods"),
        (np.zeros(20), "matrix"),
    ],
)
def test_partition_rejects_bad_data(data, message):
    spec = _spec()
    with pytest.raises(ValueError, match=message):
        partition_regimes(data, spec, *_system(spec))


def test_partition_rejects_bad_transition():
    spec = _spec()
    TTT, RRR, CCC = _system(spec)
    with pytest.raises(ValueError, match="TTT"):
        partition_regimes(np.zeros((20, 4)), spec, TTT[:-1], RRR, CCC)
    with pytest.raises(ValueError, match="RRR"):
        partition_regimes(np.zeros((20, 4)), spec, TTT, RRR[:, :-1], CCC)


def test_expand_is_identity_without_anticipated_shocks():
    idx = RegimeIndices.from_spec(_spec(nant=0))
    rng = np.random.default_rng(0)
    z = rng.standard_normal(8)
    B = rng.standard_normal((8, 8))
    P = B @ B.T

    z_new, P_new = expand_to_zlb(z, P, idx)

    np.testing.assert_array_equal(z_new, z)
    np.testing.assert_array_equal(P_new, P)


def test_expand_inserts_zero_anticipated_block():
    idx = RegimeIndices.from_spec(_spec())
    rng = np.random.default_rng(1)
    z = rng.standard_normal(8)
    B = rng.standard_normal((8, 8))
    P = B @ B.T

    z_new, P_new = expand_to_zlb(z, P, idx)

    assert z_new.shape == (10,)
    assert P_new.shape == (10, 10)
    np.testing.assert_array_equal(z_new[idx.anticipated], 0.0)
    np.testing.assert_array_equal(P_new[idx.anticipated, :], 0.0)
    np.testing.assert_array_equal(P_new[:, idx.anticipated], 0.0)
    np.testing.assert_array_equal(z_new[idx.normal_states], z)
    np.testing.assert_array_equal(P_new[np.ix_(idx.normal_states, idx.normal_states)], P)


def test_expand_rejects_wrong_state_size():
    idx = RegimeIndices.from_spec(_spec())
    with pytest.raises(ValueError):
        expand_to_zlb(np.zeros(10), np.eye(10), idx)
