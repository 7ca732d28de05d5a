import numpy as np
import scipy.linalg
from typing import Sequence

from ..errors import InvalidParameterError
from .clv import ClvRecord, stack_records


def _clv_history(records: Sequence[ClvRecord]) -> np.ndarray:
    if len(records) == 0:
        raise InvalidParameterError("records must contain at least one CLV record.")
    _, V, _ = stack_records(records)
    return V


def principal_angles(records: Sequence[ClvRecord], k: int) -> np.ndarray:
    """Principal angles (radians) between span(CLV[:k]) and span(CLV[k:]).

    Evaluated at every record; returns shape (nt, min(k, n - k)). The
    smallest angle tending to zero marks a tangency between the leading
    and trailing Oseledets subspaces, i.e. a loss of hyperbolicity.
    """
    V = _clv_history(records)
    nt, _, n = V.shape
    if not 0 < k < n:
        raise InvalidParameterError(f"k must split {n} CLVs into two non-empty groups, got {k}.")

    theta = np.empty((nt, min(k, n - k)), dtype=float)
    for i in range(nt):
        theta[i] = scipy.linalg.subspace_angles(V[i, :, :k], V[i, :, k:])
    return theta


def clv_angles(records: Sequence[ClvRecord], i: int, j: int) -> np.ndarray:
    """Angle in [0, pi/2] between CLV ``i`` and CLV ``j`` along the orbit.

    CLVs are defined up to sign, so the absolute cosine is used. Angles
    close to zero signal near-tangencies between the two directions.
    """
    V = _clv_history(records)
    n = V.shape[2]
    for k in (i, j):
        if not -n <= k < n:
            raise InvalidParameterError(f"CLV index {k} out of range for {n} vectors.")

    cos = np.abs(np.einsum("ti,ti->t", V[:, :, i], V[:, :, j]))
    # Clamp so round-off above 1 does not turn into NaN
    return np.arccos(np.clip(cos, 0.0, 1.0))


__all__ = [
    "principal_angles",
    "clv_angles",
]
