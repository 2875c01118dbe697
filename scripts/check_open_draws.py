"""Report which pool products currently have an open draw with events.

Usage (local):
    python scripts/check_open_draws.py
"""

import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


async def main() -> int:
    from tipset.config import settings
    from tipset.rounds import PRODUCTS, RoundClient

    async with RoundClient(settings.api_base_url, timeout=settings.http_timeout) as client:
        results = await asyncio.gather(*(client.has_open_draw(p) for p in PRODUCTS))

    open_count = 0
    for product, is_open in zip(PRODUCTS, results):
        print(f"{product:<14} {'open' if is_open else 'closed'}")
        open_count += int(is_open)
    logger.info(f"{open_count}/{len(PRODUCTS)} products open")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
