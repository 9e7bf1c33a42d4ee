"""Tank Arena: deterministic two-player arena combat simulation."""

__version__ = "0.1.0"
