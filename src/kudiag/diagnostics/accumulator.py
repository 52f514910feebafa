"""Run-scoped error accumulation for bundle writes.

Collects the text of every failed write during a single bundle run so the
caller can decide the overall exit status once the dump is complete.
"""

import logging
from typing import Iterator, List

logger = logging.getLogger(__name__)


class ErrorAccumulator:
    """Ordered, append-only list of error messages for one bundle run.

    Entries are never removed or deduplicated. Not thread-safe: callers that
    feed one writer from several threads must serialize access themselves.
    """

    def __init__(self):
        self._messages: List[str] = []

    def collect(self, message: str) -> None:
        """Append one error message."""
        self._messages.append(message)
        logger.debug(f"Collected error #{len(self._messages)}: {message}")

    def has_errors(self) -> bool:
        """Check if any errors have been collected."""
        return len(self._messages) > 0

    @property
    def messages(self) -> List[str]:
        """Copy of the collected messages in collection order."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def summary(self) -> str:
        """All messages joined by newlines, as reported at the end of a run."""
        return "\n".join(self._messages)
