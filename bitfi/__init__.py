"""Bit fields: bit and bit-range operations on fixed-width integers and declared bit-field types."""

__version__ = "0.3.1"
__all__ = ["bits", "declare", "inttypes"]