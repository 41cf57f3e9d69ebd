# qlayer/apply_numba.py
import numpy as np
from numba import njit, prange, set_num_threads, get_num_threads
from .state import LayerPair
from .gates import is_diagonal, is_antidiagonal

# ---------- low-level kernels (Numba JIT) ----------

@njit(parallel=True, fastmath=True)
def _stay_kernel(src, dst, U2, k):
    N = src.shape[0]
    for i in prange(N):
        a = src[i]
        if a.real != 0.0 or a.imag != 0.0:
            b = (i >> k) & 1
            dst[i] += U2[b,b]*a

@njit(parallel=True, fastmath=True)
def _move_kernel(src, dst, U2, k):
    N = src.shape[0]
    mt = 1 << k
    for i in prange(N):
        a = src[i]
        if a.real != 0.0 or a.imag != 0.0:
            b = (i >> k) & 1
            dst[i ^ mt] += U2[1-b,b]*a

@njit(parallel=True, fastmath=True)
def _controlled_x_kernel(src, dst, control_mask, target):
    N = src.shape[0]
    mt = 1 << target
    for i in prange(N):
        a = src[i]
        if a.real != 0.0 or a.imag != 0.0:
            if (i & control_mask) == control_mask:
                dst[i ^ mt] = a
            else:
                dst[i] = a

@njit(parallel=True, fastmath=True)
def _controlled_phase_kernel(src, dst, mask):
    N = src.shape[0]
    for i in prange(N):
        a = src[i]
        if a.real != 0.0 or a.imag != 0.0:
            if (i & mask) == mask:
                dst[i] = -a
            else:
                dst[i] = a

# ---------- user-facing apply helpers ----------

def set_threads(n: int):
    set_num_threads(n)

def get_threads() -> int:
    return get_num_threads()

def apply_single_qubit(layers: LayerPair, U2: np.ndarray, k: int):
    # two separate launches: the first returns before the second starts, which
    # is the barrier between the i->i and i->flip(i) sweeps
    U = U2.astype(layers.dtype)
    if not is_antidiagonal(U):
        _stay_kernel(layers.current, layers.scratch, U, k)
    if not is_diagonal(U):
        _move_kernel(layers.current, layers.scratch, U, k)
    layers.flip()

def apply_controlled_x(layers: LayerPair, control_mask: int, target: int):
    _controlled_x_kernel(layers.current, layers.scratch, control_mask, target)
    layers.flip()

def apply_controlled_phase(layers: LayerPair, mask: int):
    _controlled_phase_kernel(layers.current, layers.scratch, mask)
    layers.flip()
