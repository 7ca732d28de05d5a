import logging
import torch
from itertools import islice
from typing import Iterator, List, Optional, Tuple, Union

from ..config import DEFAULT_CONFIG, LyapunovConfig
from ..errors import DegenerateJacobianError, SingularSystemError
from ..numpy.clv import ClvRecord
from ..system import StateAdvance
from .jacobian import NumericalJacobian, _advance

Tensor = torch.Tensor

logger = logging.getLogger(__name__)


def _orthonormalize(
    A: Tensor, rank_rtol: Optional[float], step: int
) -> Tuple[Tensor, Tensor]:
    if not bool(torch.isfinite(A).all()):
        raise DegenerateJacobianError("J @ Q contains non-finite entries", step=step)
    try:
        Q, R = torch.linalg.qr(A, mode="complete")
    except RuntimeError as exc:
        raise DegenerateJacobianError(f"QR factorization failed: {exc}", step=step) from exc
    d = torch.abs(torch.diagonal(R))
    if rank_rtol is None:
        rank_rtol = A.shape[1] * torch.finfo(A.dtype).eps
    d_max = float(d.max())
    finite = bool(torch.isfinite(Q).all()) and bool(torch.isfinite(d).all())
    if not finite or d_max == 0.0 or float(d.min()) <= rank_rtol * d_max:
        raise DegenerateJacobianError(
            "J @ Q is numerically rank-deficient; try a larger alpha or another initial state",
            step=step,
        )
    return Q, R


def qr_series(
    system: StateAdvance,
    x0: Tensor,
    alpha: float,
    *,
    config: LyapunovConfig = DEFAULT_CONFIG,
) -> Iterator[Tuple[Tensor, Tensor, Tensor]]:
    """Benettin forward pass yielding ``(x_t, Q_t, R_t)`` forever."""
    n = x0.numel()
    Q = torch.eye(n, dtype=x0.dtype, device=x0.device)
    x = x0.clone()
    step = 0
    while True:
        JQ = NumericalJacobian(system, x, alpha, norm_floor=config.norm_floor).dot(Q)
        Q_next, R = _orthonormalize(JQ, config.rank_rtol, step)
        yield x, Q, R
        Q = Q_next
        x = _advance(system, x)
        step += 1


def exponents(
    system: StateAdvance,
    x0: Tensor,
    alpha: float,
    duration: int,
    *,
    return_history: bool = False,
    config: LyapunovConfig = DEFAULT_CONFIG,
) -> Union[Tensor, Tuple[Tensor, Tensor]]:
    n = x0.numel()
    dt = system.time_step()
    burn_in = config.burn_in(duration)
    logger.debug(
        "Lyapunov exponents (torch): n=%d alpha=%g duration=%d burn_in=%d",
        n, alpha, duration, burn_in,
    )

    LE_history = torch.empty((duration, n), dtype=x0.dtype, device=x0.device)
    log_sums = torch.zeros(n, dtype=x0.dtype, device=x0.device)
    steps = qr_series(system, x0, alpha, config=config)
    for i, (_, _, R) in enumerate(islice(steps, burn_in, burn_in + duration)):
        log_sums += torch.log(torch.abs(torch.diagonal(R)))
        LE_history[i] = log_sums / ((i + 1) * dt)

    LE = log_sums / (dt * duration)
    if return_history:
        return LE, LE_history
    return LE


def clv_backward(C: Tensor, R: Tensor, step: Optional[int] = None) -> Tuple[Tensor, Tensor]:
    try:
        CD = torch.linalg.solve_triangular(R, C, upper=True)
    except RuntimeError as exc:
        raise SingularSystemError(f"Failed to solve R: {exc}", step=step) from exc
    norms = torch.linalg.norm(CD, dim=0)
    if not bool(torch.isfinite(CD).all()) or not bool((norms > 0.0).all()):
        raise SingularSystemError("Failed to solve R: non-finite or zero solution", step=step)
    return CD / norms, 1.0 / norms


def clv(
    system: StateAdvance,
    x0: Tensor,
    alpha: float,
    duration: int,
    *,
    config: LyapunovConfig = DEFAULT_CONFIG,
) -> List[ClvRecord]:
    """Ginelli forward/backward pass on tensors; see :func:`numclv.numpy.clv.clv`."""
    n = x0.numel()
    burn_in = config.burn_in(duration)
    logger.debug(
        "CLV forward pass (torch): n=%d duration=%d burn_in=%d, buffering %d frames",
        n, duration, burn_in, duration + burn_in,
    )

    steps = qr_series(system, x0, alpha, config=config)
    qr_history = list(islice(steps, burn_in, burn_in + duration + burn_in))

    clv_rev = []
    C = torch.eye(n, dtype=x0.dtype, device=x0.device)
    for i in reversed(range(len(qr_history))):
        x, Q, R = qr_history[i]
        C, f = clv_backward(C, R, step=burn_in + i)
        clv_rev.append(ClvRecord(x, Q @ C, f))
    del qr_history

    return clv_rev[burn_in:][::-1]


__all__ = [
    "qr_series",
    "exponents",
    "clv_backward",
    "clv",
]
