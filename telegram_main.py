import logging
import os

from dotenv import load_dotenv

from infrastructure.memory.match_repository import InMemoryMatchRepository
from interfaces.telegram.handlers import create_telegram_bot


load_dotenv()

TELEGRAM_TOKEN = os.environ.get("TELEGRAM_TOKEN")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)


def main() -> None:
    if not TELEGRAM_TOKEN:
        raise RuntimeError("TELEGRAM_TOKEN environment variable is not set.")

    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    match_repo = InMemoryMatchRepository()

    bot = create_telegram_bot(TELEGRAM_TOKEN, match_repo)
    logger.info("Telegram bot polling")
    bot.infinity_polling()


if __name__ == "__main__":
    main()
