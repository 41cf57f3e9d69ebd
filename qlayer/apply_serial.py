# qlayer/apply_serial.py
import numpy as np
from .state import LayerPair
from .gates import is_diagonal, is_antidiagonal

# Every kernel reads layers.current, writes layers.scratch, then calls
# layers.flip(). Zero amplitudes are skipped; they contribute nothing.

def apply_single_qubit(layers: LayerPair, U2: np.ndarray, k: int):
    """Apply 2x2 gate U2 to qubit k (little-endian: bit k).

    Two sweeps: first every i -> i contribution U2[b,b], then every
    i -> i^(1<<k) contribution U2[1-b,b], b being bit k of i. Within a sweep
    each destination has exactly one source.
    """
    src = layers.current
    dst = layers.scratch
    N = src.shape[0]
    mt = 1 << k
    if not is_antidiagonal(U2):
        for i in range(N):
            a = src[i]
            if a.real != 0.0 or a.imag != 0.0:
                b = (i >> k) & 1
                dst[i] += U2[b,b]*a
    if not is_diagonal(U2):
        for i in range(N):
            a = src[i]
            if a.real != 0.0 or a.imag != 0.0:
                b = (i >> k) & 1
                dst[i ^ mt] += U2[1-b,b]*a
    layers.flip()

def apply_controlled_x(layers: LayerPair, control_mask: int, target: int):
    """Flip bit `target` of every index whose control bits are all set."""
    src = layers.current
    dst = layers.scratch
    N = src.shape[0]
    mt = 1 << target
    for i in range(N):
        a = src[i]
        if a.real != 0.0 or a.imag != 0.0:
            if (i & control_mask) == control_mask:
                dst[i ^ mt] = a
            else:
                dst[i] = a
    layers.flip()

def apply_controlled_phase(layers: LayerPair, mask: int):
    """Negate every amplitude whose index has all bits of `mask` set."""
    src = layers.current
    dst = layers.scratch
    N = src.shape[0]
    for i in range(N):
        a = src[i]
        if a.real != 0.0 or a.imag != 0.0:
            if (i & mask) == mask:
                dst[i] = -a
            else:
                dst[i] = a
    layers.flip()
