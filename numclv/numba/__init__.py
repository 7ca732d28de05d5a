"""Numba-compiled kernels used by the NumPy backend."""

from .qr import gram_schmidt_qr

__all__ = [
    "gram_schmidt_qr",
]
