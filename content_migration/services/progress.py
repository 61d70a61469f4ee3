"""Progress reporting for long-running phases."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ProgressReporter:
    """
    Counts completed jobs and reports them.

    Each tick produces a status line such as ``Creating records (3/10)``,
    logged at INFO every ``log_every`` ticks and on the last one, and passed
    to an optional callback for other renderers.
    """

    def __init__(
        self,
        total: int,
        label: str = "Processing",
        log_every: int = 10,
        on_tick: Optional[Callable[[str], None]] = None
    ):
        self.total = total
        self.label = label
        self.log_every = max(1, log_every)
        self.on_tick = on_tick
        self.done = 0

    @property
    def text(self) -> str:
        return f"{self.label} ({self.done}/{self.total})"

    def tick(self) -> str:
        """Advance the counter by one."""
        self.done += 1
        text = self.text

        if self.done % self.log_every == 0 or self.done == self.total:
            logger.info(text)
        else:
            logger.debug(text)

        if self.on_tick:
            self.on_tick(text)
        return text

