"""
bitfour - Bitboard Connect Four engine

This package provides a two-player Connect Four game built around a compact
bit-packed board: an occupied set, a color set and a precomputed table of
every four-in-a-row pattern on the 6x7 grid.
"""

# Version number
__version__ = '0.1.0'
