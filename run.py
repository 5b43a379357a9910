#!/usr/bin/env python3
"""
run.py - Main entry point for the bitfour Connect Four game

Usage:
    python run.py                     play a two-player game
    python run.py play --no-color     play without ANSI colors
    python run.py show --moves 1,2,1,2,1,2,1
    python run.py benchmark --iterations 500
"""

import sys

from bitfour.interfaces.cli import main


if __name__ == "__main__":
    sys.exit(main())
