"""Entry point for running the giveaway bot via python -m bots"""

import asyncio

from bots.runtime import main

if __name__ == "__main__":
    asyncio.run(main())
