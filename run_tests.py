#!/usr/bin/env python3
"""Test runner that puts the project root on the path before running pytest."""
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

import pytest

if __name__ == "__main__":
    # Pass through any command line arguments
    sys.exit(pytest.main(sys.argv[1:]))
