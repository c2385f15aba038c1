"""Pytest configuration for martingale grid tests."""

import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep log and event files out of the working tree
os.environ.setdefault("GRID_LOGS_DIR", tempfile.mkdtemp(prefix="grid-logs-"))
