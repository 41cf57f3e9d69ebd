# qlayer/bench.py
import argparse, csv, logging, os, socket, subprocess, time, platform
from datetime import datetime
import numpy as np
from .algorithms import grover_circuit
from .circuit import Circuit
from .display import print_measurement, print_qubits
from .log import setup_logging

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

log = logging.getLogger(__name__)

def backend_dir(backend, data_dir=None):
    path = os.path.join(data_dir or DATA_DIR, backend)
    os.makedirs(path, exist_ok=True)
    return path

def warmup(circ, backend, threads=None):
    # one dummy run to JIT-compile the numba kernels; no norm check
    _ = circ.run(backend=backend, num_threads=threads, check_norm=False)

# ---------------------------------------------------------------------

def meta_row():
    commit = ""
    try:
        commit = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                         stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        pass
    return {
        "hostname": socket.gethostname(),
        "commit": commit,
        "dtype": "complex128",
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "python": platform.python_version(),
        "machine": platform.machine(),
    }

HEADER = ["qubits","depth","backend","threads","gates","wall_ms","hostname","commit","dtype","timestamp"]

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, row):
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

def result_row(n, depth, backend, threads, circ, wall):
    m = meta_row()
    return {
        "qubits": n, "depth": depth, "backend": backend, "threads": threads,
        "gates": len(circ), "wall_ms": f"{wall:.3f}",
        "hostname": m["hostname"], "commit": m["commit"], "dtype": m["dtype"], "timestamp": m["timestamp"]
    }

# ---------------------------------------------------------------------

def random_circuit(n, depth, seed=0):
    """Alternating layers: random 1-qubit gates, then CNOT/CZ on neighbour pairs."""
    rng = np.random.default_rng(seed)
    c = Circuit.empty(n)
    for layer in range(depth):
        if layer % 2 == 0:
            for k in range(n):
                g = rng.integers(0, 4)
                if g == 0:
                    c.h(k)
                elif g == 1:
                    c.x(k)
                elif g == 2:
                    c.ry(k, float(rng.uniform(0, 2*np.pi)))
                else:
                    c.rz(k, float(rng.uniform(0, 2*np.pi)))
        else:
            for k in range(0, n-1, 2):
                if rng.integers(0, 2) == 0:
                    c.cnot(k, k+1)
                else:
                    c.cz(k+1, k)
    return c

def time_run(circ, backend, threads=None):
    t0 = time.perf_counter()
    _ = circ.run(backend=backend, num_threads=threads, check_norm=False)
    return (time.perf_counter() - t0) * 1e3  # ms

def numba_max_threads():
    try:
        from numba import config
        return config.NUMBA_NUM_THREADS
    except ImportError:
        return os.cpu_count() or 1

def row_threads(backend):
    return 0 if backend == "serial" else numba_max_threads()

# ---------------------------------------------------------------------
# individual experiments

def run_grover(n, marked, backend, threads=None, show_state=False, plot=None):
    circ = grover_circuit(n, marked)
    if backend == "numba":
        warmup(circ, backend, threads)
    t0 = time.perf_counter()
    q = circ.run(backend=backend, num_threads=threads)
    us = (time.perf_counter() - t0) * 1e6
    log.debug("grover n=%d marked=%d: %d gates", n, marked, len(circ))
    print(f"Execution time: {us:.0f} µs")
    print_measurement(q)
    if show_state:
        print_qubits(q)
    if plot:
        from .plot_results import plot_probabilities
        print(f"Saved {plot_probabilities(q, plot)}")
    return q

def bench_qubits(ns, depth, backend, out_path):
    print(f"[run] Qubits scaling → {out_path}")
    new_csv(out_path)
    did_warmup = False
    for n in ns:
        circ = random_circuit(n, depth, seed=42)
        if not did_warmup:
            warmup(circ, backend=backend)
            did_warmup = True
        wall = time_run(circ, backend)
        write_row(out_path, result_row(n, depth, backend, row_threads(backend), circ, wall))
        print(f"  n={n}  wall={wall:.2f} ms")
    print("✓ done.\n")

def bench_threads(n, depth, threads_list, out_path):
    print(f"[run] Thread scaling → {out_path}")
    new_csv(out_path)
    circ = random_circuit(n, depth, seed=123)
    warmup(circ, "numba", threads=1)
    t1 = time_run(circ, "numba", threads=1)
    pool = numba_max_threads()
    print(f"  pool={pool}  T1={t1:.1f} ms")

    for t in threads_list:
        tt = min(int(t), pool)
        if tt != t:
            print(f"  requested t={t} > pool={pool}; using t={tt}")
        wall = time_run(circ, "numba", threads=tt)
        speedup = t1 / wall if wall > 0 else float("nan")
        write_row(out_path, result_row(n, depth, "numba", tt, circ, wall))
        print(f"  t={tt}  wall={wall:.2f} ms  speedup={speedup:.2f}×")
    print("✓ done.\n")

def bench_depth(n, depths, backend, out_path):
    print(f"[run] Depth scaling → {out_path}")
    new_csv(out_path)
    circ0 = random_circuit(n, min(depths), seed=7)
    warmup(circ0, backend=backend)

    for d in depths:
        circ = random_circuit(n, d, seed=7)
        wall = time_run(circ, backend)
        write_row(out_path, result_row(n, d, backend, row_threads(backend), circ, wall))
        print(f"  depth={d}  wall={wall:.2f} ms")
    print("✓ done.\n")

# ---------------------------------------------------------------------
def build_parser():
    p = argparse.ArgumentParser(description="qlayer: timed Grover run and benchmarks → data/<backend>/*.csv")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    p.add_argument("--data-dir", type=str, default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    p_grover = sub.add_parser("grover")
    p_grover.add_argument("--n", type=int, default=4)
    p_grover.add_argument("--marked", type=int, default=0)
    p_grover.add_argument("--backend", type=str, default="serial", choices=["serial","numba"])
    p_grover.add_argument("--threads", type=int, default=None)
    p_grover.add_argument("--show-state", action="store_true")
    p_grover.add_argument("--plot", type=str, default=None, help="write a probability bar chart to this PNG")

    p_qubits = sub.add_parser("qubits")
    p_qubits.add_argument("--ns", type=str, required=True)
    p_qubits.add_argument("--depth", type=int, default=20)
    p_qubits.add_argument("--backend", type=str, default="numba", choices=["serial","numba"])

    p_threads = sub.add_parser("threads")
    p_threads.add_argument("--n", type=int, default=16)
    p_threads.add_argument("--depth", type=int, default=40)
    p_threads.add_argument("--threads", type=str, default="1,2,4,8")

    p_depth = sub.add_parser("depth")
    p_depth.add_argument("--n", type=int, default=12)
    p_depth.add_argument("--depths", type=str, default="10,50,100")
    p_depth.add_argument("--backend", type=str, default="numba", choices=["serial","numba"])
    return p

def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.cmd == "grover":
        run_grover(args.n, args.marked, args.backend, args.threads, args.show_state, args.plot)

    elif args.cmd == "qubits":
        ns = [int(x) for x in args.ns.split(",")]
        out_path = os.path.join(backend_dir(args.backend, args.data_dir), "qubits.csv")
        bench_qubits(ns, args.depth, args.backend, out_path)

    elif args.cmd == "threads":
        ts = [int(x) for x in args.threads.split(",")]
        out_path = os.path.join(backend_dir("numba", args.data_dir), "threads.csv")
        bench_threads(args.n, args.depth, ts, out_path)

    elif args.cmd == "depth":
        ds = [int(x) for x in args.depths.split(",")]
        out_path = os.path.join(backend_dir(args.backend, args.data_dir), "depth.csv")
        bench_depth(args.n, ds, args.backend, out_path)

if __name__ == "__main__":
    main()
