import logging
from itertools import islice
from typing import Iterator, Tuple, Union

import numpy as np

from ..config import DEFAULT_CONFIG, LyapunovConfig
from ..system import StateAdvance
from .jacobian import NumericalJacobian
from .qr import orthonormalize
from .series import orbit

logger = logging.getLogger(__name__)


def qr_series(
    system: StateAdvance,
    x0: np.ndarray,
    alpha: float,
    *,
    qr_method: str = "householder",
    config: LyapunovConfig = DEFAULT_CONFIG,
) -> Iterator[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """Benettin forward pass as an infinite generator.

    Yields ``(x_t, Q_t, R_t)`` where ``Q_t`` is the orthonormal frame that was
    pushed through ``J(x_t)`` and ``J(x_t) @ Q_t = Q_{t+1} R_t``.
    """
    n = np.asarray(x0).size
    Q = np.eye(n, dtype=float)
    for step, x in enumerate(orbit(x0, system)):
        JQ = NumericalJacobian(system, x, alpha, norm_floor=config.norm_floor).dot(Q)
        Q_next, R = orthonormalize(JQ, qr_method, rank_rtol=config.rank_rtol, step=step)
        yield x, Q, R
        Q = Q_next


def exponents(
    system: StateAdvance,
    x0: np.ndarray,
    alpha: float,
    duration: int,
    *,
    qr_method: str = "householder",
    return_history: bool = False,
    config: LyapunovConfig = DEFAULT_CONFIG,
) -> Union[np.ndarray, Tuple[np.ndarray, np.ndarray]]:
    """
    Average ``ln|diag(R)|`` over ``duration`` steps after a burn-in of
    ``duration // burn_in_divisor`` steps.

    Returns
    -------
    LE : ndarray, shape (n,)
        Lyapunov exponents per unit time.
    LE_history : ndarray, shape (duration, n)
        Running average after each averaged step (only with ``return_history``).
    """
    n = np.asarray(x0).size
    dt = system.time_step()
    burn_in = config.burn_in(duration)
    logger.debug(
        "Lyapunov exponents: n=%d alpha=%g duration=%d burn_in=%d qr=%s",
        n, alpha, duration, burn_in, qr_method,
    )

    LE_history = np.empty((duration, n), dtype=float) if return_history else None
    log_sums = np.zeros(n, dtype=float)
    steps = qr_series(system, x0, alpha, qr_method=qr_method, config=config)
    for i, (_, _, R) in enumerate(islice(steps, burn_in, burn_in + duration)):
        log_sums += np.log(np.abs(np.diag(R)))
        if LE_history is not None:
            LE_history[i] = log_sums / ((i + 1) * dt)

    LE = log_sums / (dt * duration)
    logger.debug("Lyapunov exponents: %s", LE)
    if return_history:
        return LE, LE_history
    return LE


__all__ = [
    "qr_series",
    "exponents",
]
