#!/usr/bin/env python3
"""Poll the bridge on an interval and store every reading it reports."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from homewatch.config import (
    HUE_ACCESS_TOKEN,
    HUE_PROXY_URL,
    HUE_USERNAME,
    POLL_INTERVAL_SECONDS,
)
from homewatch.database import get_session
from homewatch.logging_config import setup_logging
from homewatch.services import BridgeError, HueProxyClient, get_full_config, ingest_bridge_config

logger = logging.getLogger("homewatch.poller")


async def poll_once(client: HueProxyClient) -> int:
    """Fetch the bridge once and store the result."""
    config = await get_full_config(client)
    async with get_session() as session:
        return await ingest_bridge_config(session, config)


async def run_once() -> None:
    client = HueProxyClient(HUE_PROXY_URL, HUE_ACCESS_TOKEN, HUE_USERNAME)
    try:
        written = await poll_once(client)
        logger.info(f"Stored {written} readings")
    finally:
        await client.aclose()


async def poll_forever(interval: int) -> None:
    if not HUE_PROXY_URL or not HUE_ACCESS_TOKEN:
        logger.error("HUE_PROXY_URL and HUE_ACCESS_TOKEN must be set")
        return

    client = HueProxyClient(HUE_PROXY_URL, HUE_ACCESS_TOKEN, HUE_USERNAME)
    logger.info(f"Polling bridge every {interval}s")
    try:
        while True:
            try:
                written = await poll_once(client)
                logger.info(f"Poll cycle stored {written} readings")
            except (BridgeError, httpx.HTTPError) as e:
                # The bridge being unreachable must not stop the loop
                logger.warning(f"Bridge fetch failed: {e}")
            await asyncio.sleep(interval)
    finally:
        await client.aclose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--interval", type=int, default=POLL_INTERVAL_SECONDS)
    parser.add_argument("--once", action="store_true", help="Run a single poll cycle and exit")
    args = parser.parse_args()

    setup_logging()
    if args.once:
        asyncio.run(run_once())
    else:
        asyncio.run(poll_forever(args.interval))
