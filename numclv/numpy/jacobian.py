"""Jacobian-vector products of a state-advance map by forward differences."""

import numpy as np
from typing import Optional

from ..errors import InvalidParameterError
from ..system import StateAdvance
from .series import _advance


class NumericalJacobian:
    """Linearization of ``system.advance`` around the base point ``x``.

    The finite-difference step is ``alpha / max(|x|, |dx|)``, so the
    perturbation stays relative to whichever of the base point and the
    direction is larger.

    Parameters
    ----------
    system : StateAdvance
        Map to differentiate.
    x : ndarray, shape (n,)
        Base point.
    alpha : float
        Relative perturbation scale, ``alpha > 0``.
    norm_floor : float, optional
        Norm to use when both ``x`` and ``dx`` are zero. Without it that
        case raises :class:`InvalidParameterError`.
    """

    def __init__(
        self,
        system: StateAdvance,
        x: np.ndarray,
        alpha: float,
        norm_floor: Optional[float] = None,
    ):
        self.system = system
        self.x = np.asarray(x, dtype=float)
        self.fx = _advance(system, self.x)
        self.alpha = alpha
        self.norm_floor = norm_floor
        self._x_norm = np.linalg.norm(self.x)

    @property
    def shape(self):
        n = self.x.size
        return (n, n)

    def _dot_vector(self, dx: np.ndarray) -> np.ndarray:
        nrm = max(self._x_norm, np.linalg.norm(dx))
        if nrm == 0.0:
            if self.norm_floor is None:
                raise InvalidParameterError(
                    "Base point and direction are both zero; set norm_floor to "
                    "differentiate at the origin along a zero direction."
                )
            nrm = self.norm_floor
        s = self.alpha / nrm
        x = s * dx + self.x
        return (_advance(self.system, x) - self.fx) / s

    def dot(self, dx: np.ndarray) -> np.ndarray:
        """Approximate ``J(x) @ dx`` for a vector or column-wise for a matrix."""
        dx = np.asarray(dx, dtype=float)
        if dx.ndim == 1:
            if dx.shape != self.x.shape:
                raise InvalidParameterError(
                    f"direction has shape {dx.shape}, expected {self.x.shape}."
                )
            return self._dot_vector(dx)
        if dx.ndim == 2:
            if dx.shape[0] != self.x.size:
                raise InvalidParameterError(
                    f"directions have {dx.shape[0]} rows, expected {self.x.size}."
                )
            out = np.empty((self.x.size, dx.shape[1]), dtype=float)
            for j in range(dx.shape[1]):
                out[:, j] = self._dot_vector(dx[:, j])
            return out
        raise InvalidParameterError("dx must be one- or two-dimensional.")

    def __matmul__(self, dx: np.ndarray) -> np.ndarray:
        return self.dot(dx)

    def matrix(self) -> np.ndarray:
        """Dense ``n x n`` Jacobian, one finite difference per basis vector."""
        return self.dot(np.eye(self.x.size))


def jacobian(
    system: StateAdvance,
    x: np.ndarray,
    alpha: float,
    norm_floor: Optional[float] = None,
) -> NumericalJacobian:
    return NumericalJacobian(system, x, alpha, norm_floor=norm_floor)


__all__ = [
    "NumericalJacobian",
    "jacobian",
]
