"""mapsketch: constraint engine for drawing non-overlapping map features."""

__version__ = "0.1.0"
