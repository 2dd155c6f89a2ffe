#!/usr/bin/env python3
"""
Hytale dev-server launcher
Usage: launcher.py run build/libs/my-mod.jar [--include earlyplugins=agent.jar]
"""

import sys

from hytale_launcher.cli import main

if __name__ == "__main__":
    sys.exit(main())
