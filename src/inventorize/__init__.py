"""File inventory builder and integrity verifier."""

__version__ = "0.1.0"
