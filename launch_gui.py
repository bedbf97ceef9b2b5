#!/usr/bin/env python3
"""
Launcher script for the trajectory optimization panel.

Runs the panel from a source checkout without installing the package.
"""

import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

try:
    from trajopt.gui.panel import main
except ImportError as e:
    print(f"Error importing required modules: {e}")
    print("Please ensure all dependencies are installed:")
    print("  pip install -e .")
    sys.exit(1)


if __name__ == "__main__":
    main()
