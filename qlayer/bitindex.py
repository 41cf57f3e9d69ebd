# qlayer/bitindex.py
"""Fixed-width bit container with qubit-0-first display order.

Basis states are stored little-endian (qubit k = bit k of the index), but
states are printed with qubit 0 as the leftmost character, e.g. index 1 on
three qubits reads "100".
"""


class BitIndex:
    __slots__ = ("_value", "_width")

    def __init__(self, value: int, width: int):
        if width < 0:
            raise ValueError(f"width must be >= 0, got {width}")
        self._width = width
        self._value = int(value) % (1 << width)

    @property
    def value(self) -> int:
        return self._value

    @property
    def width(self) -> int:
        return self._width

    def __len__(self) -> int:
        return self._width

    def bit_at(self, i: int) -> bool:
        """Bit at reversed position i, i.e. storage bit (width - 1 - i)."""
        if not 0 <= i < self._width:
            raise IndexError(f"bit position {i} out of range for width {self._width}")
        return bool((self._value >> (self._width - 1 - i)) & 1)

    __getitem__ = bit_at

    def to_display_string(self) -> str:
        # least significant stored bit first
        return "".join("1" if (self._value >> k) & 1 else "0" for k in range(self._width))

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        return f"BitIndex({self._value}, width={self._width})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, BitIndex):
            return NotImplemented
        return self._value == other._value and self._width == other._width

    def __hash__(self) -> int:
        return hash((self._value, self._width))


def display_string(state: int, width: int) -> str:
    return BitIndex(state, width).to_display_string()
