"""Pytest configuration for the Monkey test suite."""

import sys
from pathlib import Path

# Add the repository root to the path so `monkey` imports without installing
sys.path.insert(0, str(Path(__file__).parent.parent))
