"""Poll the input file and report modifications."""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

POLL_INTERVAL = 2.0


class FileWatcher:
    """Calls ``callback`` whenever ``path`` gets a newer modification time."""

    def __init__(self, path: Path | str, callback: Callable[[], None], interval: float = POLL_INTERVAL):
        self.path = Path(path)
        self.callback = callback
        self.interval = interval
        self.last_modified = self._mtime()

    def _mtime(self) -> float | None:
        try:
            return self.path.stat().st_mtime
        except OSError as e:
            logger.warning("Could not check %s for hot reload: %s", self.path, e)
            return None

    def check(self) -> bool:
        """Stat the file once; returns True if the callback fired."""
        current = self._mtime()
        if current is None:
            return False
        if self.last_modified is None or current > self.last_modified:
            self.last_modified = current
            self.callback()
            return True
        return False

    async def run(self) -> None:
        logger.debug("Watching %s every %.1fs", self.path, self.interval)
        while True:
            await asyncio.sleep(self.interval)
            self.check()
