from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, TypeVar

from .errors import OperationCancelled, OperationTimeout

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 5.0

T = TypeVar("T")


def retry(
        timeout_s: float,
        operation: Callable[[], T],
        *,
        interval_s: float = DEFAULT_INTERVAL_S,
        cancel: threading.Event | None = None,
        sleep: Callable[[float], Any] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
) -> T:
    """Call ``operation`` until it returns something truthy.

    Between attempts the helper waits ``interval_s`` seconds. Once
    ``timeout_s`` has elapsed after a falsy result, ``OperationTimeout`` is
    raised with that result in ``.output``. Exceptions from ``operation`` are
    not retried. When ``cancel`` is given the wait happens on the event and
    setting it raises ``OperationCancelled``.
    """
    start = clock()
    attempt = 0
    while True:
        attempt += 1
        output = operation()
        if output:
            return output

        elapsed = clock() - start
        if elapsed >= timeout_s:
            raise OperationTimeout(output)

        logger.debug("attempt %d returned %r, next in %ss", attempt, output, interval_s)
        if cancel is None:
            sleep(interval_s)
        elif cancel.wait(interval_s):
            raise OperationCancelled(output)
