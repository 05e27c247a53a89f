"""Vercel serverless function handler for FastAPI"""

import sys
from pathlib import Path

# Add current directory to path so we can import web.api and config
current_dir = str(Path(__file__).parent)
if current_dir not in sys.path:
    sys.path.insert(0, current_dir)

from web.api import app  # noqa: E402,F401
