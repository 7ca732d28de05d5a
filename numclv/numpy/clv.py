import logging
from itertools import islice
from typing import List, NamedTuple, Optional, Tuple

import numpy as np
import scipy.linalg

from ..config import DEFAULT_CONFIG, LyapunovConfig
from ..errors import SingularSystemError
from ..system import StateAdvance
from .lyapunov import qr_series

logger = logging.getLogger(__name__)


class ClvRecord(NamedTuple):
    """CLVs at one point of the orbit.

    ``vectors[:, j]`` is the j-th covariant vector (unit norm) and
    ``growth[j]`` the factor it is stretched by over the following step.
    """

    state: np.ndarray
    vectors: np.ndarray
    growth: np.ndarray


def _normalize_columns(A: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    norms = np.linalg.norm(A, axis=0)
    return A / norms, norms


def clv_backward(C: np.ndarray, R: np.ndarray, step: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """One backward Ginelli step: solve ``R @ C_now = C`` and renormalize.

    Returns the normalized ``C_now`` and ``f = 1 / |C_now[:, j]|``.
    """
    try:
        CD = scipy.linalg.solve_triangular(R, C, lower=False, check_finite=False)
    except (np.linalg.LinAlgError, ValueError) as exc:
        raise SingularSystemError(f"Failed to solve R: {exc}", step=step) from exc

    C_now, norms = _normalize_columns(CD)
    if not np.all(np.isfinite(C_now)) or not np.all(norms > 0.0):
        raise SingularSystemError("Failed to solve R: non-finite or zero solution", step=step)
    return C_now, 1.0 / norms


def clv(
    system: StateAdvance,
    x0: np.ndarray,
    alpha: float,
    duration: int,
    *,
    qr_method: str = "householder",
    config: LyapunovConfig = DEFAULT_CONFIG,
) -> List[ClvRecord]:
    """
    Covariant Lyapunov vectors by Ginelli's method (PRL, 2007).

    The forward pass keeps every ``(x, Q, R)`` for ``duration + burn_in``
    steps, so memory grows as ``duration * n**2``. The backward pass starts
    from ``C = I`` at the latest step; its first ``burn_in`` records are
    dropped so that the returned ``duration`` records are converged.
    """
    n = np.asarray(x0).size
    burn_in = config.burn_in(duration)
    logger.debug(
        "CLV forward pass: n=%d alpha=%g duration=%d burn_in=%d qr=%s, buffering %d frames (%.1f MiB)",
        n, alpha, duration, burn_in, qr_method, duration + burn_in,
        (duration + burn_in) * (2 * n * n + n) * 8 / 2**20,
    )

    steps = qr_series(system, x0, alpha, qr_method=qr_method, config=config)
    qr_history = list(islice(steps, burn_in, burn_in + duration + burn_in))

    clv_rev = []
    C = np.eye(n, dtype=float)
    for i in reversed(range(len(qr_history))):
        x, Q, R = qr_history[i]
        C, f = clv_backward(C, R, step=burn_in + i)
        clv_rev.append(ClvRecord(x, Q @ C, f))
    del qr_history

    logger.debug("CLV backward pass done, dropping %d unconverged records", burn_in)
    return clv_rev[burn_in:][::-1]


def stack_records(records: List[ClvRecord]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Time-first arrays ``(states (T, n), vectors (T, n, n), growth (T, n))``."""
    if len(records) == 0:
        raise ValueError("records must contain at least one CLV record.")
    states = np.stack([r.state for r in records])
    vectors = np.stack([r.vectors for r in records])
    growth = np.stack([r.growth for r in records])
    return states, vectors, growth


__all__ = [
    "ClvRecord",
    "clv_backward",
    "clv",
    "stack_records",
]
