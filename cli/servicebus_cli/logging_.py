from __future__ import annotations

import logging

LIBRARY_LOGGER = "servicebus_client"
HTTP_LOGGERS = ("httpx", "httpcore")


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger(LIBRARY_LOGGER).setLevel(level)

    # request lines from httpx with -v; httpcore connection chatter stays hidden
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
