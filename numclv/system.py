"""State-advance capability consumed by the estimators."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class StateAdvance(Protocol):
    """Anything that maps a state one step forward and knows its time step."""

    def advance(self, state: np.ndarray) -> np.ndarray:
        ...

    def time_step(self) -> float:
        ...


class DiscreteMap:
    """Wrap a plain callable ``func(x, *args)`` as a :class:`StateAdvance`.

    ``dt`` only rescales exponents to per-unit-time rates. ``dim``, when
    given, is the expected state size and is checked against initial states.
    """

    def __init__(self, func: Callable, *args, dt: float = 1.0, dim: Optional[int] = None):
        if not callable(func):
            raise TypeError("func must be callable.")
        self.func = func
        self.args = args
        self.dt = dt
        self.dim = dim

    def advance(self, state: np.ndarray) -> np.ndarray:
        return np.asarray(self.func(state, *self.args), dtype=float)

    def time_step(self) -> float:
        return self.dt

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", repr(self.func))
        return f"DiscreteMap({name}, dt={self.dt}, dim={self.dim})"


__all__ = [
    "StateAdvance",
    "DiscreteMap",
]
