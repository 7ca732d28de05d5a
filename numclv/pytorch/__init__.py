"""PyTorch-backed implementations of numclv routines."""

from .api import lyapunov_exponents, covariant_lyapunov_vectors, compute_ICLE
from .jacobian import NumericalJacobian

__all__ = [
    "lyapunov_exponents",
    "covariant_lyapunov_vectors",
    "compute_ICLE",
    "NumericalJacobian",
]
