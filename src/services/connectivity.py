"""Online/offline mode derived from the outcome of the last remote call."""

import logging


logger = logging.getLogger(__name__)


class ModeTracker:
    """Holds the single `is_offline` flag.

    The flag only changes as a side effect of a remote call: a failure turns it
    on, a success turns it off. There is no probing, so after a failure the
    tracker stays offline until the next remote call succeeds.
    """

    def __init__(self) -> None:
        self._is_offline = False

    @property
    def is_offline(self) -> bool:
        return self._is_offline

    @property
    def is_online(self) -> bool:
        return not self._is_offline

    def record_success(self) -> None:
        if self._is_offline:
            logger.info("Task API reachable again, switching to online mode")
        self._is_offline = False

    def record_failure(self, error: Exception) -> None:
        if not self._is_offline:
            logger.warning("Task API call failed, switching to offline mode: %s", error)
        self._is_offline = True
