"""End-to-end tests of the regime-switching likelihood."""

from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from zlb_dsge import likelihood
from zlb_dsge.config import LikelihoodConfig, SettingsConfig
from zlb_dsge.errors import ModelSolutionError
from zlb_dsge.estimate import Regime, expand_to_zlb, filter_regimes
from zlb_dsge.kalman import kalman_filter, solve_discrete_lyapunov
from zlb_dsge.models import ParameterVector, ToyZLBModel, simulate
from zlb_dsge.utils import WorkUnitLogger


SETTINGS = SettingsConfig(n_presample_periods=2, n_anticipated_shocks=2, anticipated_lags=3)


@pytest.fixture(scope="module")
def toy():
    model = ToyZLBModel(SETTINGS)
    data = simulate(model, n_periods=40, rng=np.random.default_rng(7))
    return model, data


def _with(model, **values):
    new = model.parameters.values
    for key, value in values.items():
        new[model.parameters.keys.index(key)] = value
    return model.parameters.update(new)


class _SolverMustNotRun(ToyZLBModel):
    def solve(self, parameters):
        raise AssertionError("the solver must not run for an out-of-bounds draw")


def test_likelihood_is_sum_of_normal_and_zlb(toy):
    model, data = toy
    work = WorkUnitLogger()

    value = likelihood(model, data, work_logger=work)
    regimes = filter_regimes(model, data, model.parameters)

    assert np.isfinite(value)
    np.testing.assert_allclose(
        value, regimes.normal.filtered.log_likelihood + regimes.zlb.filtered.log_likelihood
    )
    assert regimes.presample.filtered.log_likelihood != 0.0
    assert work.kalman_evals == 3
    assert work.lyapunov_solves == 1


def test_regime_bundles_have_expected_shapes(toy):
    model, data = toy
    regimes = filter_regimes(model, data, model.parameters)

    assert regimes.presample.filtered.log_likelihood_by_period.shape == (2,)
    assert regimes.normal.filtered.log_likelihood_by_period.shape == (34,)
    assert regimes.zlb.filtered.log_likelihood_by_period.shape == (4,)
    assert regimes.normal.filtered.z_end.shape == (3,)
    assert regimes.zlb.filtered.z_end.shape == (5,)
    assert regimes.presample.measurement is regimes.normal.measurement


def test_each_regime_starts_where_the_previous_one_ended(toy):
    model, data = toy
    regimes = filter_regimes(model, data, model.parameters)
    presample, normal, zlb = regimes.presample, regimes.normal, regimes.zlb

    normal_again = kalman_filter(
        normal.data,
        presample.filtered.z_end,
        presample.filtered.P_end,
        normal.transition.TTT,
        normal.measurement.DD,
        normal.measurement.ZZ,
        normal.measurement.VVall,
    )
    np.testing.assert_allclose(normal.filtered.log_likelihood, normal_again.log_likelihood, rtol=1e-12)

    z0, P0 = expand_to_zlb(normal.filtered.z_end, normal.filtered.P_end, regimes.indices)
    np.testing.assert_array_equal(z0[regimes.indices.anticipated], 0.0)
    np.testing.assert_array_equal(P0[regimes.indices.anticipated], 0.0)
    zlb_again = kalman_filter(
        zlb.data,
        z0,
        P0,
        zlb.transition.TTT,
        zlb.measurement.DD,
        zlb.measurement.ZZ,
        zlb.measurement.VVall,
    )
    np.testing.assert_allclose(zlb.filtered.log_likelihood, zlb_again.log_likelihood, rtol=1e-12)
    np.testing.assert_allclose(zlb.filtered.z_end, zlb_again.z_end, atol=1e-12)
    np.testing.assert_allclose(zlb.filtered.P_end, zlb_again.P_end, atol=1e-12)


def test_mh_out_of_bounds_short_circuits():
    model = _SolverMustNotRun(SETTINGS)
    data = np.zeros((40, 4))
    work = WorkUnitLogger()

    value, bundle = likelihood(model, data, _with(model, rho_x=1.5), mh=True, work_logger=work)

    assert value == -np.inf
    assert bundle is None
    assert work.rejected_draws == 1
    assert work.kalman_evals == 0


def test_fixed_parameter_outside_bounds_is_not_rejected(toy):
    model, data = toy
    # fixed parameters keep their value through update, so build the vector directly
    params = ParameterVector(
        replace(p, value=2.0) if p.key == "sigma_me" else p for p in model.parameters
    )
    assert params["sigma_me"].fixed
    assert not params["sigma_me"].in_bounds()
    assert params.out_of_bounds() == []
    value, bundle = likelihood(model, data, params, mh=True)
    assert np.isfinite(value)
    assert bundle.regime is Regime.ZLB
    assert bundle.filtered is not None
    np.testing.assert_allclose(value, likelihood(model, data, params))


def test_bounds_are_ignored_outside_sampling(toy):
    model, data = toy
    params = _with(model, phi=6.0)
    assert params.out_of_bounds() == ["phi"]
    assert np.isfinite(likelihood(model, data, params))


def test_solver_failure_is_rejected_by_default(toy):
    model, data = toy
    params = _with(model, rho_x=1.0)
    work = WorkUnitLogger()

    assert likelihood(model, data, params, work_logger=work) == -np.inf
    value, bundle = likelihood(model, data, params, mh=True, work_logger=work)
    assert value == -np.inf
    assert bundle is None
    assert work.failed_draws == 2


def test_solver_failure_propagates_when_configured(toy):
    model, data = toy
    params = _with(model, rho_x=1.0)
    with pytest.raises(ModelSolutionError):
        likelihood(model, data, params, config=LikelihoodConfig(on_failure="raise"))


def test_dimension_errors_always_propagate(toy):
    model, data = toy
    with pytest.raises(ValueError):
        likelihood(model, data[:, :3])


def test_parameters_are_not_modified(toy):
    model, data = toy
    params = _with(model, rho_x=0.6)
    before = params.values.copy()
    likelihood(model, data, params, mh=True)
    np.testing.assert_array_equal(params.values, before)
    assert model.parameters["rho_x"].value == 0.8


def test_without_anticipated_shocks_matches_one_continuous_filter():
    settings = SettingsConfig(n_presample_periods=2, n_anticipated_shocks=0, anticipated_lags=3)
    model = ToyZLBModel(settings)
    data = simulate(model, n_periods=30, rng=np.random.default_rng(3))
    params = model.parameters
    assert params["mu"].value == 0.0

    TTT, RRR, CCC = model.solve(params)
    ZZ, DD, QQ, EE, MM = model.measurement(params, TTT, RRR, CCC, shocks=False)
    VVall = np.block([[RRR @ QQ @ RRR.T, np.zeros((3, 2))], [np.zeros((2, 3)), EE]])
    P0 = solve_discrete_lyapunov(TTT, RRR @ QQ @ RRR.T)
    pre = kalman_filter(data[:2], np.zeros(3), P0, TTT, DD, ZZ, VVall)
    rest = kalman_filter(data[2:], pre.z_end, pre.P_end, TTT, DD, ZZ, VVall)

    np.testing.assert_allclose(likelihood(model, data), rest.log_likelihood, rtol=1e-9)
