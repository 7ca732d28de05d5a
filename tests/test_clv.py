import numpy as np
import pytest

from numclv import (
    ClvRecord,
    DiscreteMap,
    SingularSystemError,
    covariant_lyapunov_vectors,
    lyapunov_exponents,
    stack_records,
)
from numclv.numpy.clv import clv_backward


def _henon(x, a=1.4, b=0.3):
    return np.array([1.0 - a * x[0] ** 2 + x[1], b * x[0]])


def _make_linear_map(A):
    A = np.asarray(A, dtype=float)
    return DiscreteMap(lambda x: A @ x, dim=A.shape[0])


def test_clv_record_shapes_and_finiteness():
    duration = 300
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, duration
    )
    assert len(records) == duration
    for rec in records:
        assert isinstance(rec, ClvRecord)
        assert rec.state.shape == (2,)
        assert rec.vectors.shape == (2, 2)
        assert rec.growth.shape == (2,)
        assert np.all(np.isfinite(rec.state))
        assert np.all(np.isfinite(rec.vectors))
        assert np.all(np.isfinite(rec.growth))


def test_clv_columns_have_unit_norm():
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, 200, qr_method="gs"
    )
    _, V, _ = stack_records(records)
    assert np.allclose(np.linalg.norm(V, axis=1), 1.0, atol=1e-12)


def test_clv_records_are_chronological():
    duration = 100
    x0 = np.array([0.1, 0.1])
    records = covariant_lyapunov_vectors(DiscreteMap(_henon, dim=2), x0, 1e-7, duration)

    # Records start after the burn-in and follow the orbit step by step
    x = x0.copy()
    for _ in range(duration // 10):
        x = _henon(x)
    for rec in records:
        assert np.allclose(rec.state, x)
        x = _henon(x)


def test_clvs_are_eigenvectors_of_non_normal_map():
    A = np.array([[2.0, 1.0], [0.0, 0.5]])
    records = covariant_lyapunov_vectors(_make_linear_map(A), np.zeros(2), 1e-7, 200)

    v1 = np.array([1.0, 0.0])
    v2 = np.array([1.0, -1.5]) / np.sqrt(3.25)
    for rec in records:
        assert np.isclose(abs(rec.vectors[:, 0] @ v1), 1.0, atol=1e-8)
        assert np.isclose(abs(rec.vectors[:, 1] @ v2), 1.0, atol=1e-8)
        assert np.allclose(rec.growth, [2.0, 0.5], atol=1e-8)


def test_clvs_equal_eigenvectors_for_diagonal_map():
    eigs = [1.5, 1.0, 0.2]
    records = covariant_lyapunov_vectors(_make_linear_map(np.diag(eigs)), np.zeros(3), 1e-7, 100)
    Id = np.eye(3)
    for k in range(3):
        dots = np.array([rec.vectors[:, k] @ Id[:, k] for rec in records])
        assert np.allclose(np.abs(dots), 1.0, atol=1e-6)


def test_clvs_are_covariant_under_henon_dynamics():
    duration = 400
    system = DiscreteMap(_henon, dim=2)
    records = covariant_lyapunov_vectors(system, np.array([0.1, 0.1]), 1e-8, duration)

    def jac(x):
        return np.array([[-2.0 * 1.4 * x[0], 1.0], [0.3, 0.0]])

    # J(x_t) v_t is parallel to v_{t+1} and stretched by growth_t
    for rec, nxt in zip(records[:-1], records[1:]):
        JV = jac(rec.state) @ rec.vectors
        norms = np.linalg.norm(JV, axis=0)
        assert np.allclose(norms, rec.growth, rtol=1e-5)
        cos = np.abs(np.einsum("ij,ij->j", JV / norms, nxt.vectors))
        assert np.allclose(cos, 1.0, atol=1e-6)


def test_first_clv_growth_matches_exponent():
    duration = 2000
    system = DiscreteMap(_henon, dim=2)
    x0 = np.array([0.1, 0.1])
    LE = lyapunov_exponents(system, x0, 1e-7, duration)
    records = covariant_lyapunov_vectors(system, x0, 1e-7, duration)
    _, _, growth = stack_records(records)
    mean_log_growth = np.log(growth).mean(axis=0)
    assert np.isclose(mean_log_growth[0], LE[0], atol=1e-8)
    assert np.isclose(mean_log_growth[1], LE[1], atol=2e-2)


def test_identity_map_does_not_fail():
    records = covariant_lyapunov_vectors(
        DiscreteMap(lambda x: x, dim=2), np.array([0.5, -0.25]), 1e-7, 50
    )
    assert len(records) == 50
    for rec in records:
        assert np.allclose(np.abs(rec.vectors), np.eye(2), atol=1e-6)
        assert np.allclose(rec.growth, 1.0, atol=1e-6)


def test_stack_records_is_time_first():
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, 30
    )
    states, vectors, growth = stack_records(records)
    assert states.shape == (30, 2)
    assert vectors.shape == (30, 2, 2)
    assert growth.shape == (30, 2)
    assert np.array_equal(vectors[7], records[7].vectors)


def test_stack_records_rejects_empty():
    with pytest.raises(ValueError):
        stack_records([])


def test_clv_backward_step():
    R = np.array([[2.0, 1.0], [0.0, 0.5]])
    C_now, f = clv_backward(np.eye(2), R)
    assert np.allclose(np.linalg.norm(C_now, axis=0), 1.0)
    assert np.allclose(R @ (C_now / f), np.eye(2))
    assert np.allclose(np.triu(C_now), C_now)


def test_clv_backward_singular_r_raises():
    R = np.array([[1.0, 1.0], [0.0, 0.0]])
    with pytest.raises(SingularSystemError) as info:
        clv_backward(np.eye(2), R, step=7)
    assert info.value.step == 7
