import numpy as np
import pytest

from numclv import (
    DiscreteMap,
    InvalidParameterError,
    clv_angles,
    compute_ICLE,
    covariant_lyapunov_vectors,
    lyapunov_exponents,
    principal_angles,
)


def _henon(x, a=1.4, b=0.3):
    return np.array([1.0 - a * x[0] ** 2 + x[1], b * x[0]])


def test_principal_angles_of_non_normal_map():
    A = np.array([[2.0, 1.0], [0.0, 0.5]])
    records = covariant_lyapunov_vectors(DiscreteMap(lambda x: A @ x), np.zeros(2), 1e-7, 100)
    theta = principal_angles(records, 1)
    assert theta.shape == (100, 1)
    assert np.allclose(theta[:, 0], np.arccos(1.0 / np.sqrt(3.25)), atol=1e-8)


def test_principal_angles_of_diagonal_map_are_right_angles():
    eigs = np.array([1.5, 0.8, 0.2])
    records = covariant_lyapunov_vectors(DiscreteMap(lambda x: eigs * x), np.zeros(3), 1e-7, 40)
    for k in (1, 2):
        theta = principal_angles(records, k)
        assert theta.shape == (40, 1)
        assert np.allclose(theta, np.pi / 2, atol=1e-6)


def test_principal_angles_match_clv_angles_for_two_dimensions():
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, 300
    )
    theta = principal_angles(records, 1)
    assert np.allclose(theta[:, 0], clv_angles(records, 0, 1), atol=1e-7)


def test_principal_angles_rejects_bad_split():
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, 20
    )
    for k in (0, 2):
        with pytest.raises(InvalidParameterError):
            principal_angles(records, k)
    with pytest.raises(InvalidParameterError):
        principal_angles([], 1)


def test_clv_angles_of_non_normal_map():
    A = np.array([[2.0, 1.0], [0.0, 0.5]])
    records = covariant_lyapunov_vectors(DiscreteMap(lambda x: A @ x), np.zeros(2), 1e-7, 100)
    theta = clv_angles(records, 0, 1)
    expected = np.arccos(1.0 / np.sqrt(3.25))
    assert theta.shape == (100,)
    assert np.allclose(theta, expected, atol=1e-8)


def test_clv_angles_on_henon_are_in_range():
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, 500
    )
    theta = clv_angles(records, 0, 1)
    assert np.all((theta >= 0.0) & (theta <= np.pi / 2))
    # Same vector: zero angle
    assert np.allclose(clv_angles(records, 1, 1), 0.0, atol=1e-7)


def test_clv_angles_index_out_of_range():
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, 20
    )
    with pytest.raises(InvalidParameterError):
        clv_angles(records, 0, 2)
    with pytest.raises(InvalidParameterError):
        clv_angles([], 0, 1)


def test_icle_of_diagonal_map_equals_log_eigenvalues():
    eigs = np.array([1.5, 0.8, 0.2])
    dt = 0.5
    system = DiscreteMap(lambda x: eigs * x, dt=dt)
    records = covariant_lyapunov_vectors(system, np.zeros(3), 1e-7, 50)
    icle = compute_ICLE(records, dt)
    assert icle.shape == (50, 3)
    for i in range(50):
        assert np.allclose(icle[i], np.log(eigs) / dt, atol=1e-8)


def test_icle_time_average_recovers_spectrum():
    duration = 2000
    system = DiscreteMap(_henon, dim=2)
    x0 = np.array([0.1, 0.1])
    LE = lyapunov_exponents(system, x0, 1e-7, duration)
    icle = compute_ICLE(covariant_lyapunov_vectors(system, x0, 1e-7, duration), 1.0)
    assert np.allclose(icle.mean(axis=0), LE, atol=2e-2)


def test_icle_rejects_bad_inputs():
    with pytest.raises(InvalidParameterError):
        compute_ICLE([], 1.0)
    records = covariant_lyapunov_vectors(
        DiscreteMap(_henon, dim=2), np.array([0.1, 0.1]), 1e-7, 20
    )
    with pytest.raises(InvalidParameterError):
        compute_ICLE(records, 0.0)
