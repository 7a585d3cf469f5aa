"""
터미널 클라이언트.

실행:
    python -m src.client --url http://localhost:10000
"""

import argparse
import asyncio

from src.client.api import CatChatAPI
from src.client.controller import ChatController
from src.client.terminal import TerminalChat
from src.core.logging import setup_logging


async def _run(url: str) -> None:
    async with CatChatAPI(url) as api:
        await TerminalChat(ChatController(api)).run()


def main() -> None:
    parser = argparse.ArgumentParser(description="猫AIチャット (terminal)")
    parser.add_argument("--url", default="http://localhost:10000", help="server URL")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    setup_logging({"logging": {"level": args.log_level}})
    try:
        asyncio.run(_run(args.url))
    except (KeyboardInterrupt, EOFError):
        pass


if __name__ == "__main__":
    main()
