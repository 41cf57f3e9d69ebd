# qlayer/state.py
import numpy as np
from dataclasses import dataclass

@dataclass
class LayerPair:
    """Two amplitude buffers of shape (2**n,) and the flag saying which one is current.

    parity=True: `even` holds the current state and `odd` is the scratch buffer
    the next gate writes into. Each gate flips the parity exactly once.
    """
    n: int
    even: np.ndarray  # dtype complex128
    odd: np.ndarray
    parity: bool = True

    @staticmethod
    def zero(n: int, dtype=np.complex128) -> "LayerPair":
        N = 1 << n
        even = np.zeros(N, dtype=dtype)
        even[0] = 1.0 + 0.0j
        return LayerPair(n=n, even=even, odd=np.zeros(N, dtype=dtype))

    @staticmethod
    def from_amplitudes(n: int, amplitudes, dtype=np.complex128) -> "LayerPair":
        even = np.array(amplitudes, dtype=dtype, copy=True)
        return LayerPair(n=n, even=even, odd=np.zeros_like(even))

    @property
    def dtype(self):
        return self.even.dtype

    @property
    def current(self) -> np.ndarray:
        return self.even if self.parity else self.odd

    @property
    def scratch(self) -> np.ndarray:
        return self.odd if self.parity else self.even

    def flip(self):
        """Zero the buffer just read from and make the freshly written one current."""
        self.current.fill(0)
        self.parity = not self.parity

    def norm2(self) -> float:
        psi = self.current
        return float(np.vdot(psi, psi).real)

    def check_normalized(self, tol=1e-6):
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: ||psi||^2={n2}")

    def copy(self) -> "LayerPair":
        return LayerPair(self.n, self.even.copy(), self.odd.copy(), self.parity)
