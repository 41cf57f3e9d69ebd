# qlayer/errors.py


class QLayerError(Exception):
    """Base class for errors raised by qlayer."""


class ConstructionError(QLayerError, ValueError):
    """Invalid qubit count, initial amplitudes or backend for a QubitLayer."""


class QubitIndexError(QLayerError, IndexError):
    """Qubit index out of range, or overlapping control/target indices."""
