"""Model-free face location and embedding verification."""

__version__ = "0.1.0"
