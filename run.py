#!/usr/bin/env python3
"""
MYSTIC QUEST Launcher
======================
Run this script to start the game.
"""

from mystic_quest.main import main

if __name__ == "__main__":
    main()
