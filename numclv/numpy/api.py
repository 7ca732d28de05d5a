import math
import warnings
import numpy as np
from typing import List, Optional, Tuple, Union

from ..config import LyapunovConfig, resolve_config
from ..errors import InvalidParameterError
from ..system import StateAdvance
from .clv import ClvRecord, clv
from .lyapunov import exponents
from .qr import check_qr_method
from .series import TimeSeries, iterate_series as _iterate_series


def iterate_series(initial_state: np.ndarray, system: StateAdvance) -> TimeSeries:
    """
    Lazy infinite orbit of ``initial_state`` under ``system``.
    The returned iterator is consumed destructively and cannot be restarted.
    """
    _validate_system(system)
    x0 = _validate_state(initial_state, system)
    return _iterate_series(x0, system)


def lyapunov_exponents(
    system: StateAdvance,
    initial_state: np.ndarray,
    alpha: float,
    duration: int,
    *,
    qr_method: str = "householder",
    return_history: bool = False,
    config: Optional[LyapunovConfig] = None,
) -> Union[np.ndarray, Tuple[np.ndarray, np.ndarray]]:
    """
    Lyapunov spectrum of ``system`` by the Benettin algorithm with a
    finite-difference Jacobian.
    Returns LE (n,) or (LE, LE_history) with LE_history of shape (duration, n).
    """
    x0, cfg = _validate_lyap_inputs(system, initial_state, alpha, duration, qr_method, config)
    return exponents(
        system, x0, alpha, duration,
        qr_method=qr_method, return_history=return_history, config=cfg,
    )


def covariant_lyapunov_vectors(
    system: StateAdvance,
    initial_state: np.ndarray,
    alpha: float,
    duration: int,
    *,
    qr_method: str = "householder",
    config: Optional[LyapunovConfig] = None,
) -> List[ClvRecord]:
    """
    Covariant Lyapunov vectors along the orbit of ``initial_state``.
    Returns ``duration`` records ``(state, vectors, growth)`` in time order.
    """
    x0, cfg = _validate_lyap_inputs(system, initial_state, alpha, duration, qr_method, config)
    return clv(system, x0, alpha, duration, qr_method=qr_method, config=cfg)


def _validate_system(system: StateAdvance) -> float:
    advance = getattr(system, "advance", None)
    time_step = getattr(system, "time_step", None)
    if not callable(advance) or not callable(time_step):
        raise TypeError("system must provide callable advance(state) and time_step().")

    dt = time_step()
    if not isinstance(dt, (int, float, np.floating, np.integer)) or isinstance(dt, bool):
        raise TypeError("time_step() must return a real number.")
    if not math.isfinite(dt) or dt <= 0.0:
        raise InvalidParameterError(f"time_step() must be positive and finite, got {dt}.")
    return float(dt)


def _validate_state(initial_state: np.ndarray, system: StateAdvance) -> np.ndarray:
    try:
        x0 = np.array(initial_state, dtype=float, copy=True)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"initial_state must be real-valued: {exc}") from exc
    if x0.ndim != 1:
        raise InvalidParameterError("initial_state must be one-dimensional.")
    if x0.size < 1:
        raise InvalidParameterError("initial_state must contain at least one state variable.")
    if not np.all(np.isfinite(x0)):
        raise InvalidParameterError("initial_state must be finite.")

    dim = getattr(system, "dim", None)
    if dim is not None and dim != x0.size:
        raise InvalidParameterError(
            f"initial_state has {x0.size} entries but system expects {dim}."
        )
    return x0


def _validate_lyap_inputs(
    system: StateAdvance,
    initial_state: np.ndarray,
    alpha: float,
    duration: int,
    qr_method: str,
    config: Optional[LyapunovConfig],
) -> Tuple[np.ndarray, LyapunovConfig]:
    _validate_system(system)
    x0 = _validate_state(initial_state, system)

    if not isinstance(alpha, (int, float, np.floating, np.integer)) or isinstance(alpha, bool):
        raise TypeError("alpha must be a real number.")
    if not math.isfinite(alpha) or alpha <= 0.0:
        raise InvalidParameterError(f"alpha must be positive and finite, got {alpha}.")

    if not isinstance(duration, (int, np.integer)) or isinstance(duration, bool):
        raise TypeError("duration must be an integer.")
    if duration < 1:
        raise InvalidParameterError("duration must be at least 1.")

    check_qr_method(qr_method)
    cfg = resolve_config(config)

    if cfg.burn_in(int(duration)) == 0:
        warnings.warn(
            f"duration={duration} is shorter than burn_in_divisor={cfg.burn_in_divisor}; "
            "running without burn-in, the frame may not have converged.",
            RuntimeWarning,
            stacklevel=3,
        )
    return x0, cfg


__all__ = [
    "iterate_series",
    "lyapunov_exponents",
    "covariant_lyapunov_vectors",
]
