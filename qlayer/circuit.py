# qlayer/circuit.py
from dataclasses import dataclass
from typing import List, Tuple, Sequence
from .engine import QubitLayer

Op = Tuple[str, Tuple]  # e.g., ("H",(k,)) or ("CNOT",(c,t)) or ("MCNOT",((c0,c1,...),t))

@dataclass
class Circuit:
    n: int
    ops: List[Op]

    @staticmethod
    def empty(n:int) -> "Circuit":
        return Circuit(n, [])

    def __len__(self) -> int:
        return len(self.ops)

    def x(self, k:int): self.ops.append(("X",(k,))); return self
    def y(self, k:int): self.ops.append(("Y",(k,))); return self
    def z(self, k:int): self.ops.append(("Z",(k,))); return self
    def h(self, k:int): self.ops.append(("H",(k,))); return self
    def rx(self, k:int, theta:float): self.ops.append(("RX",(k,theta))); return self
    def ry(self, k:int, theta:float): self.ops.append(("RY",(k,theta))); return self
    def rz(self, k:int, theta:float): self.ops.append(("RZ",(k,theta))); return self
    def cnot(self, c:int, t:int): self.ops.append(("CNOT",(c,t))); return self
    def toffoli(self, c1:int, c2:int, t:int): self.ops.append(("TOFFOLI",(c1,c2,t))); return self
    def mcnot(self, cs:Sequence[int], t:int): self.ops.append(("MCNOT",(tuple(cs),t))); return self
    def cz(self, c:int, t:int): self.ops.append(("CZ",(c,t))); return self
    def mcphase(self, cs:Sequence[int], t:int): self.ops.append(("MCPHASE",(tuple(cs),t))); return self

    def apply_to(self, q: QubitLayer) -> QubitLayer:
        for name, args in self.ops:
            if name == "X":
                (k,) = args; q.apply_pauli_x(k)
            elif name == "Y":
                (k,) = args; q.apply_pauli_y(k)
            elif name == "Z":
                (k,) = args; q.apply_pauli_z(k)
            elif name == "H":
                (k,) = args; q.apply_hadamard(k)
            elif name == "RX":
                k,theta = args; q.apply_rx(k, theta)
            elif name == "RY":
                k,theta = args; q.apply_ry(k, theta)
            elif name == "RZ":
                k,theta = args; q.apply_rz(k, theta)
            elif name == "CNOT":
                c,t = args; q.apply_cnot(c, t)
            elif name == "TOFFOLI":
                c1,c2,t = args; q.apply_toffoli(c1, c2, t)
            elif name == "MCNOT":
                cs,t = args; q.apply_mcnot(cs, t)
            elif name == "CZ":
                c,t = args; q.apply_cz(c, t)
            elif name == "MCPHASE":
                cs,t = args; q.apply_mcphase(cs, t)
            else:
                raise ValueError(f"Unknown gate {name}")
        return q

    def run(self, backend:str="serial", amplitudes=None, num_threads=None, check_norm=True, check_norm_tol=1e-6) -> QubitLayer:
        q = QubitLayer(self.n, amplitudes, backend=backend, num_threads=num_threads)
        self.apply_to(q)
        if check_norm:
            q.check_normalized(tol=check_norm_tol)
        return q
