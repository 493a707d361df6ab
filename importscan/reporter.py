"""Warning reporters the scanner writes to instead of printing."""

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Protocol


logger = logging.getLogger("importscan")


@dataclass(frozen=True)
class ScanWarning:
    """A single non-fatal problem encountered during a scan."""

    message: str
    path: Optional[str] = None

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class Reporter(Protocol):
    """Anything that accepts scan warnings."""

    def warning(self, message: str, path: Optional[str] = None) -> None:
        ...


class LoggingReporter:
    """Forward warnings to the ``importscan`` logger."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def warning(self, message: str, path: Optional[str] = None) -> None:
        self._log.warning("%s", ScanWarning(message, path))


class CollectingReporter:
    """
    Keep warnings in memory so callers can inspect them afterwards.

    Safe to share between the worker threads of a concurrent scan.
    """

    def __init__(self):
        self._warnings: List[ScanWarning] = []
        self._lock = threading.Lock()

    @property
    def warnings(self) -> List[ScanWarning]:
        """Return a copy of the collected warnings, in arrival order."""
        with self._lock:
            return list(self._warnings)

    @property
    def messages(self) -> List[str]:
        """Return the collected warnings rendered as strings."""
        return [str(w) for w in self.warnings]

    def warning(self, message: str, path: Optional[str] = None) -> None:
        with self._lock:
            self._warnings.append(ScanWarning(message, path))

    def __len__(self) -> int:
        with self._lock:
            return len(self._warnings)


def default_reporter(reporter: Optional[Reporter] = None) -> Reporter:
    """Return ``reporter`` or a :class:`LoggingReporter` when none was given."""
    return reporter if reporter is not None else LoggingReporter()
