# diagnostics.py
# Post-hoc debugging records for completions that could not be parsed.
import atexit
import logging
import os
import queue
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

logger = logging.getLogger(__name__)

SNAPSHOT_CHARS = 2000


def _snapshot(text: Optional[str]) -> str:
    if text is None:
        return "<none>"
    return text[:SNAPSHOT_CHARS]


class NullDiagnostics:
    """Sink that drops every record."""

    def record_parse_failure(self, raw: str, extracted: Optional[str], sanitized: Optional[str],
                             error: Optional[str]) -> None:
        return None


class _ResponseLogHandler(logging.FileHandler):
    """FileHandler that reports write errors as a warning instead of printing a traceback."""

    def emit(self, record):
        # FileHandler opens the file outside its own error handling.
        try:
            super().emit(record)
        except Exception:
            self.handleError(record)

    def handleError(self, record):
        logger.warning("Could not write AI parse failure to %s", self.baseFilename, exc_info=True)


class FileDiagnostics:
    """
    Appends one plain-text entry per unparseable completion to `path`.

    The caller only enqueues the entry; a QueueListener thread does the file
    I/O, so a slow or broken log volume never holds up a response. Write
    errors are logged as warnings and dropped.
    """

    def __init__(self, path: str, handler: Optional[logging.Handler] = None):
        self.path = path
        self._queue = queue.Queue(-1)
        self._handler = handler
        self._listener = None
        # One logger per sink; records go to the queue only, never to the root handlers.
        self._log = logging.getLogger(f"{__name__}.responses.{id(self)}")
        self._log.setLevel(logging.INFO)
        self._log.propagate = False
        self._log.addHandler(QueueHandler(self._queue))

    def start(self) -> "FileDiagnostics":
        if self._listener is not None:
            return self
        if self._handler is None:
            folder = os.path.dirname(self.path)
            try:
                if folder:
                    os.makedirs(folder, exist_ok=True)
            except OSError as e:
                logger.warning("Could not create diagnostics folder %s: %s", folder, e)
            self._handler = _ResponseLogHandler(self.path, encoding="utf-8", delay=True)
            self._handler.setFormatter(logging.Formatter("%(message)s"))
        self._listener = QueueListener(self._queue, self._handler)
        self._listener.start()
        atexit.register(self.stop)
        return self

    def stop(self) -> None:
        """Flush pending entries and stop the writer thread."""
        if self._listener is None:
            return
        self._listener.stop()
        self._listener = None
        self._handler.close()

    def format_entry(self, raw: str, extracted: Optional[str], sanitized: Optional[str],
                     error: Optional[str]) -> str:
        stamp = datetime.now(timezone.utc).isoformat()
        return (
            f"[{stamp}] Failed to parse AI response as JSON: {error or 'unknown error'}\n"
            f"--- Original (first {SNAPSHOT_CHARS} chars):\n{_snapshot(raw)}\n"
            f"--- Extracted (first {SNAPSHOT_CHARS} chars):\n{_snapshot(extracted)}\n"
            f"--- Sanitized (first {SNAPSHOT_CHARS} chars):\n{_snapshot(sanitized)}\n"
        )

    def record_parse_failure(self, raw: str, extracted: Optional[str], sanitized: Optional[str],
                             error: Optional[str]) -> None:
        try:
            self._log.info(self.format_entry(raw, extracted, sanitized, error))
        except Exception as e:
            logger.warning("Could not queue AI parse failure: %s", e)


def build_diagnostics(path: Optional[str]):
    if not path:
        return NullDiagnostics()
    return FileDiagnostics(path).start()
