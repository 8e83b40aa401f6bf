import logging
import os

from dotenv import load_dotenv

from infrastructure.memory.match_repository import InMemoryMatchRepository
from interfaces.discord.handlers import create_discord_bot


load_dotenv()

DISCORD_TOKEN = os.environ.get("DISCORD_TOKEN")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def main() -> None:
    if not DISCORD_TOKEN:
        raise RuntimeError("DISCORD_TOKEN environment variable is not set.")

    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    match_repo = InMemoryMatchRepository()

    bot = create_discord_bot(match_repo)
    # discord.py would install its own log handler on top of basicConfig.
    bot.run(DISCORD_TOKEN, log_handler=None)


if __name__ == "__main__":
    main()
