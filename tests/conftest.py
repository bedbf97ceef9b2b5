"""
Pytest configuration for the trajopt test suite.

Skips the Ipopt availability probe so importing the entry points never
builds a solver during collection.
"""

import os
import sys
from pathlib import Path

os.environ["TRAJOPT_SKIP_VALIDATION"] = "1"

# Add project root to Python path for direct execution
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
