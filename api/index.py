import sys
from pathlib import Path

# Serverless entry point: make `leadcleaner` importable from the backend
# directory without installing the package.
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from leadcleaner.main import app  # noqa: E402, F401
