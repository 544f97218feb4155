"""NextAva clinic availability backend."""

__version__ = "0.1.0"
