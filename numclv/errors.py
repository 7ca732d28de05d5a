from __future__ import annotations

from typing import Optional

import numpy as np

__all__ = [
    "NumclvError",
    "InvalidParameterError",
    "DegenerateJacobianError",
    "SingularSystemError",
]


class NumclvError(Exception):
    """Base error for the numclv package."""


class InvalidParameterError(NumclvError, ValueError):
    """Raised when run parameters or the initial state are rejected up front."""


class DegenerateJacobianError(NumclvError, np.linalg.LinAlgError):
    """Raised when the QR factorization of J @ Q fails or is rank-deficient."""
    def __init__(self, message: str, step: Optional[int] = None):
        self.step = step
        if step is not None:
            message = f"{message} (step {step})"
        super().__init__(message)


class SingularSystemError(NumclvError, np.linalg.LinAlgError):
    """Raised when the triangular solve of the backward CLV pass fails."""
    def __init__(self, message: str, step: Optional[int] = None):
        self.step = step
        if step is not None:
            message = f"{message} (step {step})"
        super().__init__(message)
