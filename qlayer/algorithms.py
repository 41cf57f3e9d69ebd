# qlayer/algorithms.py
"""Grover search on a QubitLayer.

The oracle marks one basis state by sandwiching a multi-controlled phase
between X gates on the qubits whose bit in `marked` is 0; the diffusion
operator reflects about the uniform superposition the same way.
"""
import math
from typing import Optional

from .circuit import Circuit
from .engine import QubitLayer


def optimal_iterations(num_qubits: int) -> int:
    return int(math.floor(math.pi / 4 * math.sqrt(1 << num_qubits)))


def _validate(num_qubits: int, marked: int):
    if num_qubits < 2:
        raise ValueError(f"Grover search needs at least 2 qubits, got {num_qubits}")
    if not 0 <= marked < (1 << num_qubits):
        raise ValueError(f"marked state {marked} out of range for {num_qubits} qubits")


def _phase_all(c: Circuit, n: int):
    # -1 on |1...1>
    c.mcphase(range(n - 1), n - 1)


def grover_circuit(num_qubits: int, marked: int, iterations: Optional[int] = None) -> Circuit:
    _validate(num_qubits, marked)
    n = num_qubits
    if iterations is None:
        iterations = optimal_iterations(n)
    zeros = [k for k in range(n) if not (marked >> k) & 1]

    c = Circuit.empty(n)
    for k in range(n):
        c.h(k)
    for _ in range(iterations):
        # oracle
        for k in zeros:
            c.x(k)
        _phase_all(c, n)
        for k in zeros:
            c.x(k)
        # diffusion
        for k in range(n):
            c.h(k)
        for k in range(n):
            c.x(k)
        _phase_all(c, n)
        for k in range(n):
            c.x(k)
        for k in range(n):
            c.h(k)
    return c


def grover(num_qubits: int, marked: int, iterations: Optional[int] = None,
           backend: str = "serial", num_threads: Optional[int] = None) -> QubitLayer:
    """Run Grover search for `marked` and return the final register."""
    circ = grover_circuit(num_qubits, marked, iterations)
    return circ.run(backend=backend, num_threads=num_threads)
