"""
Run one ingestion from the command line

Usage:
    python scripts/trigger_ingestion.py
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

from trender.core.logging_config import setup_logging
from trender.tasks.ingestion_tasks import run_ingestion_async


if __name__ == "__main__":
    setup_logging()
    result = asyncio.run(run_ingestion_async())
    print("=" * 60)
    for key, value in result.items():
        print(f"  {key}: {value}")
    print("=" * 60)
    sys.exit(0 if result["status"] == "success" else 1)
