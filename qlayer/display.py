# qlayer/display.py
from .bitindex import display_string
from .engine import QubitLayer


def format_qubits(q: QubitLayer) -> str:
    """Both buffers side by side, one basis state per line, qubit 0 leftmost."""
    even = q.get_buffer("even")
    odd = q.get_buffer("odd")
    lines = ["Amplitude, State"]
    for i in range(q.num_states):
        lines.append(f"{even[i]} {odd[i]} |{display_string(i, q.num_qubits)}>")
    return "\n".join(lines)


def format_measurement(q: QubitLayer) -> str:
    m = q.get_max_amplitude()
    return (f"Measurement outcome:        |{display_string(m.state, q.num_qubits)}>\n"
            f"Probability of outcome:     {m.prob}")


def print_qubits(q: QubitLayer):
    print(format_qubits(q))


def print_measurement(q: QubitLayer):
    print(format_measurement(q))
