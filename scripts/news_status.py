#!/usr/bin/env python3
"""Show news aggregation status and statistics.

Usage:
    python scripts/news_status.py [--hours N] [--detailed]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from newsagg.cli.status import main  # noqa: E402

if __name__ == "__main__":
    main()
