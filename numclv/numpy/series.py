import numpy as np
from typing import Iterator

from ..errors import InvalidParameterError
from ..system import StateAdvance


def _advance(system: StateAdvance, state: np.ndarray) -> np.ndarray:
    x_next = np.asarray(system.advance(state), dtype=float)
    if x_next.shape != state.shape:
        raise InvalidParameterError(
            f"advance returned shape {x_next.shape}, expected {state.shape}."
        )
    return x_next


class TimeSeries:
    """Lazy, infinite sequence of states ``x1, x2, ...`` generated from ``x0``.

    Each ``next()`` advances the internal state and returns a copy of it.
    The sequence never ends and cannot be restarted; build a new one with
    :func:`iterate_series` to start over.
    """

    def __init__(self, x0: np.ndarray, system: StateAdvance):
        self.state = np.array(x0, dtype=float, copy=True)
        self.system = system

    def iterate(self) -> None:
        self.state = _advance(self.system, self.state)

    def __iter__(self) -> "TimeSeries":
        return self

    def __next__(self) -> np.ndarray:
        self.iterate()
        return self.state.copy()


def iterate_series(x0: np.ndarray, system: StateAdvance) -> TimeSeries:
    """Return the orbit of ``x0`` under ``system`` as a :class:`TimeSeries`."""
    return TimeSeries(x0, system)


def orbit(x0: np.ndarray, system: StateAdvance) -> Iterator[np.ndarray]:
    """Yield ``x0`` followed by every advanced state, forever."""
    x = np.array(x0, dtype=float, copy=True)
    while True:
        yield x
        x = _advance(system, x)


__all__ = [
    "TimeSeries",
    "iterate_series",
    "orbit",
]
