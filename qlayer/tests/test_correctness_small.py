# qlayer/tests/test_correctness_small.py
import numpy as np
from qlayer.engine import QubitLayer

S = 1/np.sqrt(2)
C_HALF_PI = np.cos(np.pi/2)
S_HALF_PI = np.sin(np.pi/2)

def almost(p, q, tol=1e-12):
    return np.allclose(p, q, atol=tol, rtol=0)

def basis(n, i):
    psi = np.zeros(1 << n, dtype=np.complex128); psi[i] = 1.0
    return psi

def one():
    return QubitLayer(1, basis(1, 1))

def test_x_flips():
    assert almost(QubitLayer(1).apply_pauli_x(0).amplitudes, [0, 1])
    assert almost(one().apply_pauli_x(0).amplitudes, [1, 0])

def test_y_on_zero_and_one():
    assert almost(QubitLayer(1).apply_pauli_y(0).amplitudes, [0, 1j])
    assert almost(one().apply_pauli_y(0).amplitudes, [-1j, 0])

def test_z_phase_on_one_only():
    assert almost(QubitLayer(1).apply_pauli_z(0).amplitudes, [1, 0])
    assert almost(one().apply_pauli_z(0).amplitudes, [0, -1])

def test_h_on_zero_and_one():
    assert almost(QubitLayer(1).apply_hadamard(0).amplitudes, [S, S])
    assert almost(one().apply_hadamard(0).amplitudes, [S, -S])

def test_rx_pi():
    assert almost(QubitLayer(1).apply_rx(0, np.pi).amplitudes, [C_HALF_PI, -1j*S_HALF_PI])
    assert almost(one().apply_rx(0, np.pi).amplitudes, [-1j*S_HALF_PI, C_HALF_PI])

def test_rx_arbitrary_angle():
    theta = 0.7
    c, s = np.cos(theta/2), np.sin(theta/2)
    assert almost(QubitLayer(1).apply_rx(0, theta).amplitudes, [c, -1j*s])

def test_ry_pi():
    assert almost(QubitLayer(1).apply_ry(0, np.pi).amplitudes, [C_HALF_PI, S_HALF_PI])
    assert almost(one().apply_ry(0, np.pi).amplitudes, [-S_HALF_PI, C_HALF_PI])

def test_ry_arbitrary_angle_on_superposition():
    theta = 1.3
    c, s = np.cos(theta/2), np.sin(theta/2)
    q = QubitLayer(1, [S, S]).apply_ry(0, theta)
    assert almost(q.amplitudes, [S*(c - s), S*(s + c)])

def test_rz_pi():
    assert almost(QubitLayer(1).apply_rz(0, np.pi).amplitudes, [C_HALF_PI - 1j*S_HALF_PI, 0])
    assert almost(one().apply_rz(0, np.pi).amplitudes, [0, C_HALF_PI + 1j*S_HALF_PI])

def test_single_qubit_gate_acts_on_target_bit_only():
    # X on qubit 1 of |000> -> index 2
    assert almost(QubitLayer(3).apply_pauli_x(1).amplitudes, basis(3, 2))
    # H on qubit 2 -> indices 0 and 4
    expect = np.zeros(8); expect[0] = expect[4] = S
    assert almost(QubitLayer(3).apply_hadamard(2).amplitudes, expect)

def test_cnot_truth_table():
    # control=0, target=1; index bit 0 is qubit 0
    for src, dst in [(0, 0), (2, 2), (1, 3), (3, 1)]:
        q = QubitLayer(2, basis(2, src)).apply_cnot(0, 1)
        assert almost(q.amplitudes, basis(2, dst)), (src, dst)

def test_cnot_control_on_flips():
    # X on qubit 1 (control), then CNOT(1->0): index 2 -> index 3
    q = QubitLayer(2).apply_pauli_x(1).apply_cnot(1, 0)
    assert almost(q.amplitudes, basis(2, 3))

def test_toffoli_truth_table():
    for src in range(8):
        q = QubitLayer(3, basis(3, src)).apply_toffoli(0, 1, 2)
        dst = src ^ 0b100 if (src & 0b011) == 0b011 else src
        assert almost(q.amplitudes, basis(3, dst)), src

def test_mcnot_three_controls():
    controls = [3, 2, 1]
    for src in range(16):
        q = QubitLayer(4, basis(4, src)).apply_mcnot(controls, 0)
        dst = src ^ 1 if (src & 0b1110) == 0b1110 else src
        assert almost(q.amplitudes, basis(4, dst)), src

def test_mcnot_without_controls_is_x():
    rng = np.random.default_rng(5)
    psi = rng.normal(size=8) + 1j*rng.normal(size=8)
    psi /= np.linalg.norm(psi)
    a = QubitLayer(3, psi).apply_mcnot([], 1)
    b = QubitLayer(3, psi).apply_pauli_x(1)
    assert almost(a.amplitudes, b.amplitudes)

def test_mcphase_without_controls_is_z():
    psi = np.full(4, 0.5, dtype=np.complex128)
    a = QubitLayer(2, psi).apply_mcphase([], 0)
    b = QubitLayer(2, psi).apply_pauli_z(0)
    assert almost(a.amplitudes, b.amplitudes)
    assert almost(a.amplitudes, [0.5, -0.5, 0.5, -0.5])

def test_cz_phase_on_eleven_only():
    for src in range(4):
        q = QubitLayer(2, basis(2, src)).apply_cz(0, 1)
        sign = -1 if src == 3 else 1
        assert almost(q.amplitudes, sign*basis(2, src)), src

def test_mcphase_matches_cz_generalization():
    psi = np.full(8, 1/np.sqrt(8), dtype=np.complex128)
    q = QubitLayer(3, psi).apply_mcphase([0, 2], 1)
    expect = psi.copy(); expect[7] *= -1
    assert almost(q.amplitudes, expect)

def test_normalization():
    q = QubitLayer(2).apply_hadamard(0).apply_hadamard(1).apply_cnot(1, 0)
    n2 = float((q.amplitudes.conj()*q.amplitudes).sum().real)
    assert abs(1.0 - n2) < 1e-12
