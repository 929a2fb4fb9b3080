"""Record dump watcher using polling.

The memory reader appends to the dump file in bursts, so filesystem events
are unreliable. Instead we poll the file size every poll_interval seconds.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from xivchat.constants import CHATLOG_ARRAY_SIZE
from xivchat.decoder import decode_entry
from xivchat.dump import parse_dump_line
from xivchat.entry import DecodedEntry

logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0  # seconds
MAX_LINE_SIZE = 65536  # bytes; longer unterminated lines are dropped


class RecordDumpWatcher:
    """Monitors a record dump file and decodes each new record.

    Usage:
        watcher = RecordDumpWatcher(Path("chatlog.dump"), handle_entry)
        watcher.start()
        # ... later ...
        watcher.stop()
    """

    def __init__(
        self,
        file_path: Path,
        on_entry: Callable[[DecodedEntry], None],
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self._file_path = file_path.resolve()
        self._on_entry = on_entry
        self._poll_interval = poll_interval
        self._position: int = 0
        self._pending: bytes = b""
        self._discarding = False
        self._resume_position: int | None = None
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def read_tail(self, max_records: int = CHATLOG_ARRAY_SIZE) -> list[DecodedEntry]:
        """Decode the last N records of the file (for history on startup).

        The game keeps at most CHATLOG_ARRAY_SIZE records, so older lines
        are never worth more than that. start() resumes right after the
        last complete line read here.
        """
        try:
            with open(self._file_path, "rb") as f:
                data = f.read()
        except OSError:
            return []
        end = data.rfind(b"\n") + 1
        self._resume_position = end

        lines = data[:end].decode("ascii", errors="replace").splitlines()
        records = [r for r in (parse_dump_line(line) for line in lines) if r is not None]
        max_records = min(max_records, CHATLOG_ARRAY_SIZE)
        if max_records <= 0:
            return []
        return [decode_entry(raw) for raw in records[-max_records:]]

    def start(self) -> None:
        """Start polling the dump file."""
        self._init_position()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, daemon=True)
        self._thread.start()
        logger.info("Watching (poll) %s", self._file_path)

    def stop(self) -> None:
        """Stop polling."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5)
        logger.info("Stopped watching")

    def _init_position(self) -> None:
        """Resume after the history read by read_tail, else start at the end."""
        if self._resume_position is None:
            self._seek_to_end()
            return
        self._position = self._resume_position
        self._pending = b""
        self._discarding = False

    def _seek_to_end(self) -> None:
        """Move position to end of file so we only get new records."""
        try:
            self._position = self._file_path.stat().st_size
        except FileNotFoundError:
            self._position = 0
        self._pending = b""
        self._discarding = False

    def _poll_loop(self) -> None:
        """Poll file for changes every poll_interval seconds."""
        while not self._stop_event.is_set():
            self._read_new_records()
            self._stop_event.wait(self._poll_interval)

    def _read_new_records(self) -> int:
        """Decode any complete new lines from current position. Returns the count delivered."""
        try:
            size = self._file_path.stat().st_size
        except FileNotFoundError:
            return 0

        # File was truncated or recreated, reset position
        if size < self._position:
            logger.info("Dump truncated or recreated, resetting position")
            self._position = 0
            self._pending = b""
            self._discarding = False

        if size == self._position:
            return 0

        try:
            with open(self._file_path, "rb") as f:
                f.seek(self._position)
                data = f.read()
                self._position = f.tell()
        except OSError as e:
            logger.warning("Cannot read record dump: %s", e)
            return 0

        # Keep a partially written last line for the next poll
        data = self._pending + data
        lines = data.split(b"\n")
        self._pending = lines.pop()

        if self._discarding and lines:
            # Rest of an oversized line
            lines.pop(0)
            self._discarding = False
        if len(self._pending) > MAX_LINE_SIZE:
            logger.warning(
                "Dropping unterminated dump line over %d bytes", MAX_LINE_SIZE,
            )
            self._pending = b""
            self._discarding = True

        delivered = 0
        for line in lines:
            raw = parse_dump_line(line.decode("ascii", errors="replace"))
            if raw is None:
                continue
            self._on_entry(decode_entry(raw))
            delivered += 1
        return delivered
