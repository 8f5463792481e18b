"""payctl — payment instruction parsing and settlement."""

__version__ = "0.1.0"
