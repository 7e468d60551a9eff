"""Configure pytest for the Healify project."""
import os
import sys
import tempfile
from pathlib import Path

# =============================================================================
# Test Environment Configuration
# =============================================================================
# Set environment for tests BEFORE any imports
# persistence.db reads HEALIFY_DB_PATH at import time
os.environ.setdefault("HEALIFY_ENVIRONMENT", "test")
os.environ.setdefault(
    "HEALIFY_DB_PATH", str(Path(tempfile.gettempdir()) / "healify_test.db")
)

# Project root on the path so app/auth/persistence import without install
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Ensure environment is set before test collection."""
    os.environ.setdefault("HEALIFY_ENVIRONMENT", "test")
