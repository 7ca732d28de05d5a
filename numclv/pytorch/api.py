import math
import warnings
import torch
from typing import List, Optional, Sequence, Tuple, Union

from ..config import LyapunovConfig, resolve_config
from ..errors import InvalidParameterError
from ..numpy.clv import ClvRecord
from ..system import StateAdvance
from .clv import clv, exponents

Tensor = torch.Tensor


def lyapunov_exponents(
    system: StateAdvance,
    initial_state: Tensor,
    alpha: float,
    duration: int,
    *,
    return_history: bool = False,
    config: Optional[LyapunovConfig] = None,
) -> Union[Tensor, Tuple[Tensor, Tensor]]:
    x0, cfg = _validate_lyap_inputs(system, initial_state, alpha, duration, config)
    return exponents(
        system, x0, alpha, duration, return_history=return_history, config=cfg
    )


def covariant_lyapunov_vectors(
    system: StateAdvance,
    initial_state: Tensor,
    alpha: float,
    duration: int,
    *,
    config: Optional[LyapunovConfig] = None,
) -> List[ClvRecord]:
    x0, cfg = _validate_lyap_inputs(system, initial_state, alpha, duration, config)
    return clv(system, x0, alpha, duration, config=cfg)


def compute_ICLE(records: Sequence[ClvRecord], dt: float) -> Tensor:
    """Instantaneous covariant Lyapunov exponents ``ln(growth) / dt``, shape (T, n)."""
    if not math.isfinite(dt) or dt <= 0.0:
        raise InvalidParameterError("dt must be a positive finite number.")
    if len(records) == 0:
        raise InvalidParameterError("records must contain at least one CLV record.")
    return torch.log(torch.stack([r.growth for r in records])) / dt


def _validate_lyap_inputs(
    system: StateAdvance,
    initial_state: Tensor,
    alpha: float,
    duration: int,
    config: Optional[LyapunovConfig],
) -> Tuple[Tensor, LyapunovConfig]:
    if not callable(getattr(system, "advance", None)) or not callable(getattr(system, "time_step", None)):
        raise TypeError("system must provide callable advance(state) and time_step().")
    dt = system.time_step()
    if not math.isfinite(dt) or dt <= 0.0:
        raise InvalidParameterError(f"time_step() must be positive and finite, got {dt}.")

    if not isinstance(initial_state, torch.Tensor):
        raise TypeError("initial_state must be a torch.Tensor.")
    if initial_state.ndim != 1:
        raise InvalidParameterError("initial_state must be one-dimensional.")
    if initial_state.numel() < 1:
        raise InvalidParameterError("initial_state must contain at least one state variable.")
    if not initial_state.is_floating_point():
        raise InvalidParameterError("initial_state must have a floating-point dtype.")
    if not bool(torch.isfinite(initial_state).all()):
        raise InvalidParameterError("initial_state must be finite.")
    dim = getattr(system, "dim", None)
    if dim is not None and dim != initial_state.numel():
        raise InvalidParameterError(
            f"initial_state has {initial_state.numel()} entries but system expects {dim}."
        )

    if not math.isfinite(alpha) or alpha <= 0.0:
        raise InvalidParameterError(f"alpha must be positive and finite, got {alpha}.")
    if not isinstance(duration, int) or isinstance(duration, bool):
        raise TypeError("duration must be an integer.")
    if duration < 1:
        raise InvalidParameterError("duration must be at least 1.")

    cfg = resolve_config(config)
    if cfg.burn_in(duration) == 0:
        warnings.warn(
            f"duration={duration} is shorter than burn_in_divisor={cfg.burn_in_divisor}; "
            "running without burn-in, the frame may not have converged.",
            RuntimeWarning,
            stacklevel=3,
        )
    return initial_state.detach().clone(), cfg


__all__ = [
    "lyapunov_exponents",
    "covariant_lyapunov_vectors",
    "compute_ICLE",
]
