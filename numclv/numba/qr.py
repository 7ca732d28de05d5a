import numpy as np
from typing import Tuple

from numba import njit


@njit(fastmath=True)
def gram_schmidt_qr(A: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    m, n = A.shape
    Q = np.zeros((m, n), dtype=np.float64)
    R = np.zeros((n, n), dtype=np.float64)

    for j in range(n):
        # v = A[:, j].copy()
        v = np.empty(m, dtype=np.float64)
        for r in range(m):
            v[r] = A[r, j]

        for i in range(j):
            # R[i, j] = dot(Q[:, i], v), modified Gram-Schmidt
            s = 0.0
            for k in range(m):
                s += Q[k, i] * v[k]
            R[i, j] = s

            # v -= R[i, j] * Q[:, i]
            c = R[i, j]
            for k in range(m):
                v[k] -= c * Q[k, i]

        # R[j, j] = norm(v)
        s2 = 0.0
        for k in range(m):
            s2 += v[k] * v[k]
        Rjj = np.sqrt(s2)
        R[j, j] = Rjj

        # Zero column: leave Q[:, j] at zero, the caller sees R[j, j] == 0
        if Rjj == 0.0:
            continue
        inv = 1.0 / Rjj
        for k in range(m):
            Q[k, j] = v[k] * inv

    return Q, R


__all__ = [
    "gram_schmidt_qr",
]
