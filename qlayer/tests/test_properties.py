# qlayer/tests/test_properties.py
import numpy as np
import pytest
from qlayer.engine import QubitLayer

N = 3

def random_state(n, seed):
    rng = np.random.default_rng(seed)
    psi = rng.normal(size=1 << n) + 1j*rng.normal(size=1 << n)
    return psi / np.linalg.norm(psi)

GATES = [
    ("x", lambda q: q.apply_pauli_x(1)),
    ("y", lambda q: q.apply_pauli_y(0)),
    ("z", lambda q: q.apply_pauli_z(2)),
    ("h", lambda q: q.apply_hadamard(1)),
    ("rx", lambda q: q.apply_rx(0, 0.42)),
    ("ry", lambda q: q.apply_ry(2, -1.9)),
    ("rz", lambda q: q.apply_rz(1, 2.5)),
    ("cnot", lambda q: q.apply_cnot(2, 0)),
    ("toffoli", lambda q: q.apply_toffoli(0, 2, 1)),
    ("mcnot", lambda q: q.apply_mcnot([1], 2)),
    ("cz", lambda q: q.apply_cz(1, 0)),
    ("mcphase", lambda q: q.apply_mcphase([0, 1], 2)),
]

@pytest.mark.parametrize("name,gate", GATES)
def test_gate_preserves_norm(name, gate):
    for seed in range(3):
        q = QubitLayer(N, random_state(N, seed))
        gate(q)
        assert abs(q.norm2() - 1.0) < 1e-12, name

def test_long_sequence_preserves_norm():
    q = QubitLayer(N, random_state(N, 11))
    for _ in range(5):
        for _, gate in GATES:
            gate(q)
    assert abs(q.norm2() - 1.0) < 1e-10

@pytest.mark.parametrize("apply", [
    lambda q: q.apply_pauli_x(1),
    lambda q: q.apply_pauli_y(1),
    lambda q: q.apply_pauli_z(1),
    lambda q: q.apply_hadamard(1),
])
def test_self_inverse(apply):
    psi = random_state(N, 7)
    q = QubitLayer(N, psi)
    apply(apply(q))
    assert np.allclose(q.amplitudes, psi, atol=1e-12, rtol=0)

def test_rotations_undo_with_negative_angle():
    psi = random_state(N, 3)
    q = QubitLayer(N, psi)
    q.apply_rx(0, 0.8).apply_rx(0, -0.8)
    q.apply_ry(1, 1.1).apply_ry(1, -1.1)
    q.apply_rz(2, 2.2).apply_rz(2, -2.2)
    assert np.allclose(q.amplitudes, psi, atol=1e-12, rtol=0)

def test_scratch_buffer_is_zero_after_each_gate():
    q = QubitLayer(N, random_state(N, 1))
    for _, gate in GATES:
        gate(q)
        assert not np.any(q.get_buffer("scratch"))
