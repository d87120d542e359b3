"""
Root entry point for the Emotional Weather application.
Bootstraps the mood_climate package and runs the command-line interface.
"""

import sys
import os

# Ensure the project root is in python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from mood_climate.main import main

if __name__ == "__main__":
    sys.exit(main())
