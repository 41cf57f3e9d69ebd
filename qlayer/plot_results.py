# qlayer/plot_results.py
import csv, os, sys
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from collections import defaultdict
from statistics import median
from .bitindex import display_string

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        r = csv.DictReader(f)
        for row in r:
            row["qubits"]  = int(row["qubits"])
            row["depth"]   = int(row["depth"])
            row["threads"] = int(row["threads"])
            row["wall_ms"] = float(row["wall_ms"])
            rows.append(row)
    return rows

def median_by_key(rows, key_fields):
    buckets = defaultdict(list)
    for r in rows:
        key = tuple(r[k] for k in key_fields)
        buckets[key].append(r["wall_ms"])
    agg = []
    for key, vals in buckets.items():
        out = dict(zip(key_fields, key))
        out["wall_ms"] = float(median(vals))
        agg.append(out)
    return agg

def _save(out_dir, name):
    path = os.path.join(out_dir, name)
    plt.savefig(path, dpi=200)
    plt.close()
    return path

def plot_runtime_vs_qubits(rows, tag, out_dir):
    pts = median_by_key(rows, ["backend", "qubits"])
    if not pts: return None
    by_backend = defaultdict(list)
    for r in pts:
        by_backend[r["backend"]].append((r["qubits"], r["wall_ms"]))
    plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Qubits (n)")
    plt.ylabel("Runtime (ms, log scale)")
    plt.yscale("log")
    plt.title(f"Runtime vs Qubits [{tag}]")
    plt.grid(True, which="both", ls="--", lw=0.5)
    plt.legend()
    return _save(out_dir, f"runtime_vs_qubits_{tag}.png")

def plot_speedup_vs_threads(rows, tag, out_dir):
    pts = sorted(median_by_key(rows, ["threads"]), key=lambda r: r["threads"])
    t1 = next((r["wall_ms"] for r in pts if r["threads"] == 1), None)
    if not t1: return None
    xs = [r["threads"] for r in pts]
    ys = [t1 / r["wall_ms"] for r in pts]
    plt.figure()
    plt.plot(xs, ys, marker="o", label="measured")
    plt.plot(xs, xs, ls="--", label="ideal")
    plt.xlabel("Threads")
    plt.ylabel("Speedup (T1/Tt)")
    plt.title(f"Speedup vs Threads [{tag}]")
    plt.grid(True)
    plt.legend()
    return _save(out_dir, f"speedup_vs_threads_{tag}.png")

def plot_runtime_vs_depth(rows, tag, out_dir):
    pts = median_by_key(rows, ["backend", "depth"])
    if not pts: return None
    by_backend = defaultdict(list)
    for r in pts:
        by_backend[r["backend"]].append((r["depth"], r["wall_ms"]))
    plt.figure()
    for be, p in by_backend.items():
        xs, ys = zip(*sorted(p))
        plt.plot(xs, ys, marker="o", label=be)
    plt.xlabel("Depth")
    plt.ylabel("Runtime (ms)")
    plt.title(f"Runtime vs Depth [{tag}]")
    plt.legend()
    plt.grid(True)
    return _save(out_dir, f"runtime_vs_depth_{tag}.png")

def plot_probabilities(q, path):
    """Bar chart of |amplitude|^2 per basis state, labelled qubit 0 first."""
    probs = q.probabilities()
    labels = [display_string(i, q.num_qubits) for i in range(q.num_states)]
    plt.figure(figsize=(max(6, 0.4 * len(labels)), 4))
    plt.bar(range(len(probs)), probs)
    plt.xticks(range(len(probs)), labels, rotation=90)
    plt.ylabel("Probability")
    plt.ylim(0, 1)
    plt.tight_layout()
    plt.savefig(path, dpi=200)
    plt.close()
    return path

def plot_dir(data_dir):
    # find all CSVs recursively under data_dir
    csvs = []
    for root, _, files in os.walk(data_dir):
        for f in files:
            if f.endswith(".csv"):
                csvs.append(os.path.join(root, f))

    written = []
    for path in sorted(csvs):
        tag = os.path.splitext(os.path.basename(path))[0]
        backend = os.path.basename(os.path.dirname(path))  # 'serial' or 'numba'
        try:
            rows = load_rows(path)
        except (OSError, KeyError, ValueError) as e:
            print(f"Skipping {path}: {e}")
            continue

        print(f"Plotting from {backend}/{tag}.csv ({len(rows)} rows)...")
        out_dir = os.path.dirname(path)
        if tag.startswith("qubits"):
            out = [plot_runtime_vs_qubits(rows, backend, out_dir)]
        elif tag.startswith("threads"):
            out = [plot_speedup_vs_threads(rows, backend, out_dir)]
        elif tag.startswith("depth"):
            out = [plot_runtime_vs_depth(rows, backend, out_dir)]
        else:
            out = []
        written.extend(p for p in out if p)
    return written

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    data_dir = argv[0] if argv else DATA_DIR
    written = plot_dir(data_dir)
    if not written:
        print(f"No CSV files found under {data_dir}")
        return
    print(f"\nSaved {len(written)} plots under {data_dir}/<backend>/*.png")


if __name__ == "__main__":
    main()
