"""numclv: Lyapunov exponents and Covariant Lyapunov Vectors of black-box maps.

The Jacobian is never supplied: it is approximated by forward differences of
the state-advance map. Public API mirrors the NumPy backend; the PyTorch
backend (if available) is exposed as ``numclv.pytorch``.
"""

import logging

from . import numpy as numpy_backend
from .config import LyapunovConfig, DEFAULT_CONFIG
from .errors import (
    NumclvError,
    InvalidParameterError,
    DegenerateJacobianError,
    SingularSystemError,
)
from .system import StateAdvance, DiscreteMap
from .numpy import (
    iterate_series,
    lyapunov_exponents,
    covariant_lyapunov_vectors,
    principal_angles,
    clv_angles,
    ClvRecord,
    stack_records,
    compute_ICLE,
    NumericalJacobian,
    jacobian,
    TimeSeries,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

numpy = numpy_backend

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
    "StateAdvance",
    "DiscreteMap",
    "LyapunovConfig",
    "DEFAULT_CONFIG",
    "NumclvError",
    "InvalidParameterError",
    "DegenerateJacobianError",
    "SingularSystemError",
    "numpy",
]

try:
    from . import pytorch as pytorch_backend
except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
    if exc.name in {"torch", "numclv.pytorch", f"{__name__}.pytorch"}:
        pytorch = None
    else:  # importing numclv.pytorch failed for another reason
        raise
else:
    pytorch = pytorch_backend
    __all__.append("pytorch")

__version__ = "0.1.0"
