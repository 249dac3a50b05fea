"""Streaming JSONL writer for crawl events."""

import json
from pathlib import Path
from typing import TextIO

from .events import CrawlEvent


class JsonlEventWriter:
    """Writes crawl events to JSONL format as they happen.

    Instances are crawl observers: pass the writer itself as ``observer``.
    """

    def __init__(self, output_path: str | Path):
        self.output_path = Path(output_path)
        self._file: TextIO | None = None
        self._count = 0

    def __enter__(self) -> "JsonlEventWriter":
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.output_path, "w", encoding="utf-8")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._file is not None:
            self._file.close()
            self._file = None

    def __call__(self, event: CrawlEvent):
        """Write one event as a JSON line and flush it."""
        if self._file is None:
            raise RuntimeError("JsonlEventWriter must be used as context manager")

        self._file.write(json.dumps(event.to_dict(), ensure_ascii=False) + "\n")
        self._file.flush()
        self._count += 1

    @property
    def count(self) -> int:
        """Number of events written."""
        return self._count
