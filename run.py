#!/usr/bin/env python3
"""
TORUS CHASE Launcher
=====================
Run this script to start the game.
"""

from torus_chase.main import main

if __name__ == "__main__":
    main()
