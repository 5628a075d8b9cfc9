"""Physical conventions and operator definitions.

Everything here is expressed in natural units with ħ = 1, so Hamiltonians
are angular frequencies (rad/s) and pulses are Rabi rates.
"""

from __future__ import annotations

import numpy as np

# ---------- Pauli / basic operators ----------
sx = np.array([[0, 1], [1, 0]], dtype=complex)
sy = np.array([[0, -1j], [1j, 0]], dtype=complex)
sz = np.array([[1, 0], [0, -1]], dtype=complex)
I2 = np.eye(2, dtype=complex)


def pauli():
    return sx, sy, sz, I2


# ---------- Truncated oscillator operators ----------
def destroy(n: int) -> np.ndarray:
    """Annihilation operator truncated to ``n`` levels (<k-1|a|k> = sqrt(k))."""
    return np.diag(np.sqrt(np.arange(1, n, dtype=float)), k=1).astype(complex)


def create(n: int) -> np.ndarray:
    return destroy(n).conj().T


def basis(n: int, level: int) -> np.ndarray:
    if not 0 <= level < n:
        raise IndexError(f"Level {level} outside a {n}-level space")
    ket = np.zeros(n, dtype=complex)
    ket[level] = 1.0
    return ket


def projector(n: int, level: int) -> np.ndarray:
    ket = basis(n, level)
    return np.outer(ket, ket.conj())


def zero(n: int) -> np.ndarray:
    return np.zeros((n, n), dtype=complex)


def identity(n: int) -> np.ndarray:
    return np.eye(n, dtype=complex)


__all__ = [
    "sx",
    "sy",
    "sz",
    "I2",
    "pauli",
    "destroy",
    "create",
    "basis",
    "projector",
    "zero",
    "identity",
]
