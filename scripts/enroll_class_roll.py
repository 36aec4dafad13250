"""Standalone launcher for loading GitHub usernames into classRoll.

Usage:
    python scripts/enroll_class_roll.py names.txt
    python scripts/enroll_class_roll.py names.txt --dry-run
"""

import sys
from pathlib import Path

# Add repo root to sys.path
repo_root = Path(__file__).resolve().parent.parent
sys.path.append(str(repo_root))

from classroll.enroll import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
