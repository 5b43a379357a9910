"""
bitfour.interfaces - User interfaces for the bitfour engine

Currently a terminal interface for two players sharing one keyboard.
"""

# Don't import anything here to avoid circular imports
__all__ = []
