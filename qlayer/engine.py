# qlayer/engine.py
"""Double-buffered dense state-vector engine.

Qubit k is bit k of the basis-state index (little-endian). Every gate reads
the current buffer, writes the scratch buffer, zeroes the buffer it read and
flips the parity, so the two arrays swap roles once per call.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np

from . import gates as G
from .errors import ConstructionError, QubitIndexError
from .state import LayerPair

log = logging.getLogger(__name__)

MAX_QUBITS = 30
BACKENDS = ("serial", "numba")
DTYPES = (np.dtype(np.complex128),)


@dataclass(frozen=True)
class Measurement:
    state: int
    prob: float


def _load_backend(backend: str, num_threads: Optional[int]):
    if backend == "serial":
        from . import apply_serial
        return apply_serial
    if backend == "numba":
        try:
            from . import apply_numba
        except ImportError as e:
            raise ConstructionError("Numba backend not available. Did you `pip install numba`?") from e
        if num_threads is not None:
            try:
                apply_numba.set_threads(num_threads)
            except ValueError as e:
                raise ConstructionError(f"cannot run numba with {num_threads} threads: {e}") from e
        return apply_numba
    raise ConstructionError(f"Unknown backend: {backend!r} (expected one of {BACKENDS})")


class QubitLayer:
    """An n-qubit register held as two amplitude arrays of length 2**n.

    Parameters
    ----------
    num_qubits:
        Register width, 0 <= num_qubits <= MAX_QUBITS. Zero gives a one-state
        register on which no gate can be applied.
    amplitudes:
        Optional initial state of length 2**num_qubits, copied as-is. Defaults
        to |0...0>.
    backend:
        "serial" (pure Python loops) or "numba" (parallel JIT kernels).
    check_norm, norm_tol:
        Reject initial amplitudes whose squared norm is not 1 within norm_tol.
    dtype:
        Must be complex128; anything else raises ConstructionError.
    """

    def __init__(self, num_qubits: int, amplitudes=None, *, backend: str = "serial",
                 num_threads: Optional[int] = None, dtype=np.complex128,
                 check_norm: bool = True, norm_tol: float = 1e-6):
        if isinstance(num_qubits, bool) or not isinstance(num_qubits, (int, np.integer)):
            raise ConstructionError(f"num_qubits must be an int, got {type(num_qubits).__name__}")
        num_qubits = int(num_qubits)
        if not 0 <= num_qubits <= MAX_QUBITS:
            raise ConstructionError(f"num_qubits must be in [0, {MAX_QUBITS}], got {num_qubits}")
        if num_threads is not None and (isinstance(num_threads, bool)
                                        or not isinstance(num_threads, (int, np.integer))
                                        or num_threads < 1):
            raise ConstructionError(f"num_threads must be a positive int, got {num_threads!r}")
        try:
            dtype = np.dtype(dtype)
        except TypeError as e:
            raise ConstructionError(f"invalid dtype {dtype!r}") from e
        if dtype not in DTYPES:
            raise ConstructionError(f"amplitudes must be complex128, got dtype {dtype}")

        self._kernels = _load_backend(backend, num_threads)
        self._backend = backend

        if amplitudes is None:
            self._layers = LayerPair.zero(num_qubits, dtype=dtype)
        else:
            try:
                psi = np.asarray(amplitudes, dtype=dtype)
            except (TypeError, ValueError) as e:
                raise ConstructionError(f"initial amplitudes are not complex numbers: {e}") from e
            if psi.ndim != 1 or psi.shape[0] != (1 << num_qubits):
                raise ConstructionError(
                    f"initial amplitudes must have shape ({1 << num_qubits},), got {psi.shape}")
            self._layers = LayerPair.from_amplitudes(num_qubits, psi, dtype=dtype)
            if check_norm:
                n2 = self._layers.norm2()
                if not abs(1.0 - n2) <= norm_tol:
                    raise ConstructionError(f"initial amplitudes are not normalized: ||psi||^2={n2}")

        log.debug("QubitLayer created: %d qubits, %d states, backend=%s",
                  num_qubits, 1 << num_qubits, backend)

    # ---------------------------------------------------------------- queries

    @property
    def num_qubits(self) -> int:
        return self._layers.n

    @property
    def num_states(self) -> int:
        return self._layers.even.shape[0]

    @property
    def backend(self) -> str:
        return self._backend

    @property
    def parity(self) -> bool:
        return self._layers.parity

    @property
    def amplitudes(self) -> np.ndarray:
        return self.get_buffer("current")

    def get_buffer(self, which: str = "current") -> np.ndarray:
        """Read-only view of "current", "scratch", "even" or "odd"."""
        layers = self._layers
        if which == "current":
            buf = layers.current
        elif which == "scratch":
            buf = layers.scratch
        elif which == "even":
            buf = layers.even
        elif which == "odd":
            buf = layers.odd
        else:
            raise ValueError(f"Unknown buffer {which!r}")
        view = buf.view()
        view.flags.writeable = False
        return view

    def probabilities(self) -> np.ndarray:
        return np.abs(self._layers.current) ** 2

    def norm2(self) -> float:
        return self._layers.norm2()

    def check_normalized(self, tol=1e-6):
        self._layers.check_normalized(tol)

    def get_max_amplitude(self) -> Measurement:
        """Most probable basis state of the current buffer; ties go to the lowest index."""
        probs = self.probabilities()
        # argmax returns the first maximum; an all-zero buffer gives (0, 0.0)
        state = int(np.argmax(probs))
        return Measurement(state=state, prob=float(probs[state]))

    def copy(self) -> "QubitLayer":
        other = object.__new__(QubitLayer)
        other._kernels = self._kernels
        other._backend = self._backend
        other._layers = self._layers.copy()
        return other

    # ------------------------------------------------------------- validation

    def _check_qubit(self, q) -> int:
        if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
            raise QubitIndexError(f"qubit index must be an int, got {q!r}")
        if not 0 <= q < self._layers.n:
            raise QubitIndexError(f"qubit index {q} out of range for {self._layers.n} qubits")
        return int(q)

    def _control_list(self, controls) -> list:
        try:
            return list(controls)
        except TypeError:
            raise QubitIndexError(f"controls must be a sequence of qubit indices, got {controls!r}") from None

    def _control_mask(self, controls: Iterable[int], target: int) -> int:
        mask = 0
        for c in controls:
            c = self._check_qubit(c)
            if c == target:
                raise QubitIndexError(f"qubit {c} is both control and target")
            if mask & (1 << c):
                raise QubitIndexError(f"duplicate control qubit {c}")
            mask |= 1 << c
        return mask

    # ------------------------------------------------------------------ gates

    def _apply_1q(self, name: str, U2: np.ndarray, target) -> "QubitLayer":
        k = self._check_qubit(target)
        log.debug("%s on qubit %d", name, k)
        self._kernels.apply_single_qubit(self._layers, U2, k)
        return self

    def apply_pauli_x(self, target: int) -> "QubitLayer":
        return self._apply_1q("X", G.X(self._layers.dtype), target)

    def apply_pauli_y(self, target: int) -> "QubitLayer":
        return self._apply_1q("Y", G.Y(self._layers.dtype), target)

    def apply_pauli_z(self, target: int) -> "QubitLayer":
        return self._apply_1q("Z", G.Z(self._layers.dtype), target)

    def apply_hadamard(self, target: int) -> "QubitLayer":
        return self._apply_1q("H", G.H(self._layers.dtype), target)

    def apply_rx(self, target: int, theta: float) -> "QubitLayer":
        return self._apply_1q("RX", G.RX(theta, self._layers.dtype), target)

    def apply_ry(self, target: int, theta: float) -> "QubitLayer":
        return self._apply_1q("RY", G.RY(theta, self._layers.dtype), target)

    def apply_rz(self, target: int, theta: float) -> "QubitLayer":
        return self._apply_1q("RZ", G.RZ(theta, self._layers.dtype), target)

    def apply_mcnot(self, controls: Iterable[int], target: int) -> "QubitLayer":
        """Flip `target` where every qubit in `controls` is 1. No controls: plain X."""
        t = self._check_qubit(target)
        controls = self._control_list(controls)
        mask = self._control_mask(controls, t)
        log.debug("MCNOT controls=%s target=%d", controls, t)
        self._kernels.apply_controlled_x(self._layers, mask, t)
        return self

    def apply_cnot(self, control: int, target: int) -> "QubitLayer":
        return self.apply_mcnot([control], target)

    def apply_toffoli(self, control1: int, control2: int, target: int) -> "QubitLayer":
        return self.apply_mcnot([control1, control2], target)

    def apply_mcphase(self, controls: Iterable[int], target: int) -> "QubitLayer":
        """Negate amplitudes where every control and the target are 1. No controls: Z on target."""
        t = self._check_qubit(target)
        controls = self._control_list(controls)
        mask = self._control_mask(controls, t) | (1 << t)
        log.debug("MCPHASE controls=%s target=%d", controls, t)
        self._kernels.apply_controlled_phase(self._layers, mask)
        return self

    def apply_cz(self, control: int, target: int) -> "QubitLayer":
        return self.apply_mcphase([control], target)

    def __repr__(self) -> str:
        return f"QubitLayer(num_qubits={self.num_qubits}, backend={self._backend!r})"
