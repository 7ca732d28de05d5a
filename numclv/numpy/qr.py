import logging
from typing import Optional, Tuple

import numpy as np
import scipy.linalg

from ..errors import DegenerateJacobianError, InvalidParameterError

logger = logging.getLogger(__name__)

_HOUSEHOLDER = {"householder", "scipy", "qr"}
_GRAM_SCHMIDT = {"gs", "gram-schmidt", "gram_schmidt", "numba"}


def check_qr_method(qr_method: str) -> str:
    if not isinstance(qr_method, str):
        raise InvalidParameterError("qr_method must be a string.")
    method = qr_method.lower()
    if method in _HOUSEHOLDER:
        return "householder"
    if method in _GRAM_SCHMIDT:
        return "gs"
    available = "householder, gs"
    raise InvalidParameterError(f"Unknown qr_method '{qr_method}'. Available: {available}.")


def _compute_qr(A: np.ndarray, method: str) -> Tuple[np.ndarray, np.ndarray]:
    if method == "householder":
        return scipy.linalg.qr(A, overwrite_a=True, mode="full", check_finite=False)
    from ..numba import gram_schmidt_qr

    return gram_schmidt_qr(np.ascontiguousarray(A, dtype=np.float64))


def orthonormalize(
    A: np.ndarray,
    qr_method: str = "householder",
    rank_rtol: Optional[float] = None,
    step: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """QR-factorize ``A`` and reject numerically rank-deficient results."""
    method = check_qr_method(qr_method)
    if not np.all(np.isfinite(A)):
        raise DegenerateJacobianError("J @ Q contains non-finite entries", step=step)
    try:
        Q, R = _compute_qr(A, method)
    except (np.linalg.LinAlgError, ValueError) as exc:
        raise DegenerateJacobianError(f"QR factorization failed: {exc}", step=step) from exc

    d = np.abs(np.diag(R))
    if rank_rtol is None:
        rank_rtol = A.shape[1] * np.finfo(float).eps
    finite = np.all(np.isfinite(Q)) and np.all(np.isfinite(d))
    d_max = d.max() if d.size else 0.0
    if not finite or d_max == 0.0 or d.min() <= rank_rtol * d_max:
        logger.debug("Rank-deficient R at step %s: |diag(R)| = %s", step, d)
        raise DegenerateJacobianError(
            "J @ Q is numerically rank-deficient; try a larger alpha or another initial state",
            step=step,
        )
    return Q, R


__all__ = [
    "check_qr_method",
    "orthonormalize",
]
