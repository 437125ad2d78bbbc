"""
Human-readable trace sinks.

The deterministic core never writes traces. Drivers (the spine, the
collapse experiment, the CLI) receive a TraceSink and push ordered
key/value lines, sections and banners into it. Nothing read back from a
sink ever feeds a hash.

    FileTrace    out/run_<stamp>_<name>.log, echoed to a stream
    MemoryTrace  in-memory lines (tests, embedding)
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

RULE = "=" * 60
THIN_RULE = "-" * 60
PREVIEW_BYTES = 64


class TraceError(Exception):
    """Raised when a trace file cannot be created or written."""
    pass


def run_stamp(now: Optional[datetime] = None) -> str:
    """Local-time run identifier, e.g. 20261018_142501."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


class TraceSink:
    """
    Append-only trace interface.

    Subclasses implement write_line(); everything else is formatting.
    """

    def __init__(self, name: str):
        self.name = name

    def write_line(self, text: str) -> None:
        raise NotImplementedError

    def line(self, text: str) -> None:
        self.write_line(text)

    def kv(self, key: str, value: object) -> None:
        self.write_line(f"{key}: {value}")

    def banner(self, title: str) -> None:
        self.line("")
        self.line(RULE)
        self.kv("TRACE", self.name)
        self.kv("TITLE", title)
        self.kv("FILE", self.location())
        self.line(RULE)
        self.line("")

    def section(self, title: str) -> None:
        self.line("")
        self.line(THIN_RULE)
        self.line(title)
        self.line(THIN_RULE)

    def bytes_hex_preview(self, label: str, data: bytes) -> None:
        head = data[:PREVIEW_BYTES].hex()
        if len(data) > PREVIEW_BYTES:
            head += "..."
        self.kv(label, f"len={len(data)} hex64={head}")

    def location(self) -> str:
        return f"<{self.name}>"

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class MemoryTrace(TraceSink):
    """Collects lines in memory."""

    def __init__(self, name: str = "memory"):
        super().__init__(name)
        self.lines: List[str] = []

    def write_line(self, text: str) -> None:
        self.lines.append(text)

    def pairs(self) -> List[Tuple[str, str]]:
        """Key/value lines split on the first ': '."""
        out = []
        for text in self.lines:
            if ": " in text:
                key, value = text.split(": ", 1)
                out.append((key, value))
        return out

    def get(self, key: str) -> Optional[str]:
        for k, v in self.pairs():
            if k == key:
                return v
        return None

    def text(self) -> str:
        return "\n".join(self.lines) + "\n"


class FileTrace(TraceSink):
    """
    Writes run_<stamp>_<name>.log under out_dir and echoes every line to
    a stream (stdout by default, None to disable).
    """

    def __init__(
        self,
        out_dir: Path,
        stamp: str,
        name: str,
        echo: Optional[TextIO] = sys.stdout,
    ):
        super().__init__(name)
        out_dir = Path(out_dir)
        self.path = out_dir / f"run_{stamp}_{name}.log"
        self.echo = echo
        try:
            out_dir.mkdir(parents=True, exist_ok=True)
            self._fh = open(self.path, "w", encoding="utf-8")
        except OSError as e:
            raise TraceError(f"Cannot create trace file {self.path}: {e}") from e

    def write_line(self, text: str) -> None:
        if self.echo is not None:
            self.echo.write(text + "\n")
            self.echo.flush()
        try:
            self._fh.write(text + "\n")
            self._fh.flush()
        except (OSError, ValueError) as e:
            raise TraceError(f"Cannot write trace file {self.path}: {e}") from e

    def location(self) -> str:
        return str(self.path)

    def close(self) -> None:
        if not self._fh.closed:
            self._fh.close()


__all__ = [
    'TraceError',
    'TraceSink',
    'MemoryTrace',
    'FileTrace',
    'run_stamp',
]
