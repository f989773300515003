#!/usr/bin/env python3
"""Fetch articles from the news providers.

Usage:
    python scripts/aggregate_news.py [--source SOURCE] [--limit N] [--store]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from newsagg.cli.aggregate import main  # noqa: E402

if __name__ == "__main__":
    main()
