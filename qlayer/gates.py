# qlayer/gates.py
import numpy as np

# 2x2 matrices in the basis |0>,|1> of the target qubit; column = input bit.
# The kernels read U[b,b] for the stay-in-place contribution and U[1-b,b]
# for the contribution moved to the flipped index.

def H(dtype=np.complex128) -> np.ndarray:
    s = np.sqrt(0.5)
    return np.array([[s, s],
                     [s, -s]], dtype=dtype)

def X(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, 1],
                     [1, 0]], dtype=dtype)

def Y(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, -1j],
                     [1j, 0]], dtype=dtype)

def Z(dtype=np.complex128) -> np.ndarray:
    return np.array([[1, 0],
                     [0, -1]], dtype=dtype)

def RX(theta: float, dtype=np.complex128) -> np.ndarray:
    c = np.cos(theta/2.0)
    s = -1j*np.sin(theta/2.0)
    return np.array([[c, s],
                     [s, c]], dtype=dtype)

def RY(theta: float, dtype=np.complex128) -> np.ndarray:
    c = np.cos(theta/2.0)
    s = np.sin(theta/2.0)
    return np.array([[c, -s],
                     [s, c]], dtype=dtype)

def RZ(theta: float, dtype=np.complex128) -> np.ndarray:
    c = np.cos(theta/2.0)
    s = np.sin(theta/2.0)
    return np.array([[c - 1j*s, 0],
                     [0, c + 1j*s]], dtype=dtype)

def is_diagonal(U2: np.ndarray) -> bool:
    return U2[0,1] == 0 and U2[1,0] == 0

def is_antidiagonal(U2: np.ndarray) -> bool:
    return U2[0,0] == 0 and U2[1,1] == 0
