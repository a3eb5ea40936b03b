"""
Report sinks.

The report is written line by line to one or more sinks; every line is
flushed immediately so a report file can be tailed while the run is going.
"""

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, TextIO


class Sink(ABC):
    """Destination for report lines."""

    @abstractmethod
    def write_line(self, line: str = "") -> None:
        """Write one line (a newline is appended) and flush."""

    def write_text(self, text: str) -> None:
        """Write a multi-line block, one line at a time."""
        for line in text.splitlines():
            self.write_line(line)

    def close(self) -> None:
        pass

    def __enter__(self) -> "Sink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ConsoleSink(Sink):
    """Writes to stdout (or any text stream); never closes the stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so a replaced sys.stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, line: str = "") -> None:
        text = f"{line}\n"
        try:
            self.stream.write(text)
        except UnicodeEncodeError:
            # Terminals with a narrow encoding get replacement characters
            encoding = getattr(self.stream, "encoding", None) or "utf-8"
            self.stream.write(text.encode(encoding, errors="replace").decode(encoding))
        self.stream.flush()


class FileSink(Sink):
    """Writes to a UTF-8 text file, truncating it on open; unencodable characters are replaced."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(self.path, "w", encoding="utf-8", errors="replace")

    def write_line(self, line: str = "") -> None:
        self._handle.write(f"{line}\n")
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()


class MultiSink(Sink):
    """Fans every line out to all member sinks."""

    def __init__(self, *sinks: Sink):
        self.sinks: List[Sink] = list(sinks)

    def write_line(self, line: str = "") -> None:
        for sink in self.sinks:
            sink.write_line(line)

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
