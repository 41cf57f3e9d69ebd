# qlayer/tests/test_cross_backend.py
import numpy as np
import pytest
from qlayer.circuit import Circuit
from qlayer.bench import random_circuit

numba = pytest.importorskip("numba")

def max_abs_diff(a, b):
    return float(np.max(np.abs(a - b)))

def threads(n):
    return min(n, numba.config.NUMBA_NUM_THREADS)

def test_serial_vs_numba_small():
    # 3-qubit circuit touching every gate kind
    c = (Circuit.empty(3).h(0).x(1).y(2).cnot(1,2).h(2).rx(0, 0.3).ry(1, 1.2).rz(2, -0.4)
         .cz(0,1).toffoli(0,1,2).mcnot([2],0).mcphase([0,1],2).z(1))
    st_s = c.run(backend="serial")
    st_n = c.run(backend="numba", num_threads=threads(4))
    assert max_abs_diff(st_s.amplitudes, st_n.amplitudes) < 1e-12

def test_random_circuits_match():
    for depth in (5, 10, 20):
        c = random_circuit(5, depth, seed=depth)
        s = c.run(backend="serial")
        t = c.run(backend="numba", num_threads=threads(8))
        assert np.allclose(s.amplitudes, t.amplitudes, atol=1e-12, rtol=0)
        assert s.parity == t.parity

def test_numba_scratch_zeroed_and_parity():
    q = Circuit.empty(2).h(0).run(backend="numba")
    assert q.parity is False
    assert not np.any(q.get_buffer("scratch"))

def test_thread_count_roundtrip():
    from qlayer.apply_numba import set_threads, get_threads
    before = get_threads()
    set_threads(1)
    assert get_threads() == 1
    set_threads(before)
    assert get_threads() == before

def test_thread_count_above_pool_rejected():
    from qlayer.engine import QubitLayer
    from qlayer.errors import ConstructionError
    with pytest.raises(ConstructionError):
        QubitLayer(1, backend="numba", num_threads=numba.config.NUMBA_NUM_THREADS + 1)
