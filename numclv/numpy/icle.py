import numpy as np
from typing import Sequence

from ..errors import InvalidParameterError
from .clv import ClvRecord


def compute_ICLE(records: Sequence[ClvRecord], dt: float) -> np.ndarray:
    """Compute instantaneous covariant Lyapunov exponents (ICLEs).

    ``ICLE[t, j] = ln(growth[t, j]) / dt``: the local expansion rate of the
    j-th CLV over the step leaving time ``t``. Averaged over time these
    recover the Lyapunov spectrum.
    """
    if not np.isfinite(dt) or dt <= 0.0:
        raise InvalidParameterError("dt must be a positive finite number.")
    if len(records) == 0:
        raise InvalidParameterError("records must contain at least one CLV record.")

    growth = np.stack([r.growth for r in records])
    return np.log(growth) / dt


__all__ = [
    "compute_ICLE",
]
