"""Run configuration shared by the NumPy and PyTorch backends."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidParameterError


@dataclass(frozen=True)
class LyapunovConfig:
    """Tuning knobs that are not part of the call signature.

    burn_in_divisor
        ``burn_in = duration // burn_in_divisor`` steps are run but not averaged.
    norm_floor
        Norm used by the finite-difference step when both the base point and
        the direction are zero. ``None`` rejects that case.
    rank_rtol
        ``R`` counts as rank-deficient when ``min|R_jj| <= rank_rtol * max|R_jj|``.
        ``None`` means ``n * eps``.
    """

    burn_in_divisor: int = 10
    norm_floor: Optional[float] = None
    rank_rtol: Optional[float] = None

    def validate(self) -> "LyapunovConfig":
        if not isinstance(self.burn_in_divisor, int) or isinstance(self.burn_in_divisor, bool):
            raise InvalidParameterError("burn_in_divisor must be an integer.")
        if self.burn_in_divisor < 1:
            raise InvalidParameterError("burn_in_divisor must be at least 1.")
        if self.norm_floor is not None:
            if not math.isfinite(self.norm_floor) or self.norm_floor <= 0.0:
                raise InvalidParameterError("norm_floor must be a positive finite number.")
        if self.rank_rtol is not None:
            if not math.isfinite(self.rank_rtol) or self.rank_rtol < 0.0:
                raise InvalidParameterError("rank_rtol must be a non-negative finite number.")
        return self

    def burn_in(self, duration: int) -> int:
        return duration // self.burn_in_divisor

    def replace(self, **changes) -> "LyapunovConfig":
        return dataclasses.replace(self, **changes).validate()


DEFAULT_CONFIG = LyapunovConfig()


def resolve_config(config: Optional[LyapunovConfig]) -> LyapunovConfig:
    if config is None:
        return DEFAULT_CONFIG
    if not isinstance(config, LyapunovConfig):
        raise InvalidParameterError("config must be a LyapunovConfig instance.")
    return config.validate()


__all__ = [
    "LyapunovConfig",
    "DEFAULT_CONFIG",
    "resolve_config",
]
