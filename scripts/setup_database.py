#!/usr/bin/env python3
"""One-shot database setup: init tables, generate demo data."""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from scripts.generate_data import generate_all_data
from scripts.init_db import init_db


async def setup_all() -> None:
    """Run all setup steps."""
    print("=== Setting up Homewatch database ===")
    print()

    print("Step 1: Creating tables...")
    await init_db()
    print()

    print("Step 2: Generating sensor data (48h)...")
    await generate_all_data()
    print()

    print("=== Setup complete! ===")
    print("Start the server with: uvicorn homewatch.main:app --reload --port 8000")


if __name__ == "__main__":
    asyncio.run(setup_all())
