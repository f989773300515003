#!/usr/bin/env python3
"""Database initialization script.

Usage:
    python scripts/init_db.py [--database-url URL]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from newsagg.cli.init_db import main  # noqa: E402

if __name__ == "__main__":
    main()
