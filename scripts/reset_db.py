"""Standalone launcher for the interactive database reset utility.

Usage:
    python scripts/reset_db.py

Requires DATABASE_URL and RESET_URL (environment or .env).
⚠️  Options 1–3 permanently delete rows. Each one asks for confirmation first.
"""

import sys
from pathlib import Path

# Add repo root to sys.path
repo_root = Path(__file__).resolve().parent.parent
sys.path.append(str(repo_root))

from classroll.reset import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
