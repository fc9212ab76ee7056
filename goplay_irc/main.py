"""Process entry point for ``goplay-irc``."""

from __future__ import annotations

import asyncio
import logging

from .config import settings as _settings
from .config.settings import ConfigError, Settings
from .messaging import Bot, IrcTransport, TransportError

logger = logging.getLogger(__name__)

_NOISY_LOGGERS = ("irc.client", "irc.client_aio", "asyncio")


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s  %(name)s  %(levelname)s  %(message)s",
    )
    if not debug:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


async def serve(settings: Settings) -> None:
    transport = IrcTransport(settings)
    bot = Bot(settings, transport)
    await bot.run()


def main() -> None:
    cfg = _settings.cfg
    _configure_logging(cfg.debug)
    try:
        cfg.validate()
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise SystemExit(2) from exc
    logger.info("Starting goplay-irc with %s", cfg.describe())

    try:
        asyncio.run(serve(cfg))
    except TransportError as exc:
        logger.error("Unable to connect: %s", exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")


if __name__ == "__main__":
    main()
