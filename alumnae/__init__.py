"""SSA Alumnae association REST backend."""

__version__ = "1.0.0"
