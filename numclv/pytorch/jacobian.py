import torch
from typing import Optional

from ..errors import InvalidParameterError
from ..system import StateAdvance

Tensor = torch.Tensor


def _advance(system: StateAdvance, state: Tensor) -> Tensor:
    x_next = torch.as_tensor(system.advance(state), dtype=state.dtype, device=state.device)
    if x_next.shape != state.shape:
        raise InvalidParameterError(
            f"advance returned shape {tuple(x_next.shape)}, expected {tuple(state.shape)}."
        )
    return x_next


class NumericalJacobian:
    """Forward-difference linearization of ``system.advance`` at ``x`` (tensors)."""

    def __init__(
        self,
        system: StateAdvance,
        x: Tensor,
        alpha: float,
        norm_floor: Optional[float] = None,
    ):
        self.system = system
        self.x = x
        self.fx = _advance(system, x)
        self.alpha = alpha
        self.norm_floor = norm_floor
        self._x_norm = float(torch.linalg.norm(x))

    def _dot_vector(self, dx: Tensor) -> Tensor:
        nrm = max(self._x_norm, float(torch.linalg.norm(dx)))
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

    def dot(self, dx: Tensor) -> Tensor:
        if dx.ndim == 1:
            if dx.shape != self.x.shape:
                raise InvalidParameterError(
                    f"direction has shape {tuple(dx.shape)}, expected {tuple(self.x.shape)}."
                )
            return self._dot_vector(dx)
        if dx.ndim == 2:
            if dx.shape[0] != self.x.numel():
                raise InvalidParameterError(
                    f"directions have {dx.shape[0]} rows, expected {self.x.numel()}."
                )
            return torch.stack([self._dot_vector(dx[:, j]) for j in range(dx.shape[1])], dim=1)
        raise InvalidParameterError("dx must be one- or two-dimensional.")

    def __matmul__(self, dx: Tensor) -> Tensor:
        return self.dot(dx)


__all__ = [
    "NumericalJacobian",
]
