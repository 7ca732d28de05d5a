"""NumPy-backed implementations of numclv routines."""

from .api import iterate_series, lyapunov_exponents, covariant_lyapunov_vectors
from .angles import principal_angles, clv_angles
from .clv import ClvRecord, stack_records
from .icle import compute_ICLE
from .jacobian import NumericalJacobian, jacobian
from .series import TimeSeries

__all__ = [
    "iterate_series",
    "lyapunov_exponents",
    "covariant_lyapunov_vectors",
    "principal_angles",
    "clv_angles",
    "ClvRecord",
    "stack_records",
    "compute_ICLE",
    "NumericalJacobian",
    "jacobian",
    "TimeSeries",
]
