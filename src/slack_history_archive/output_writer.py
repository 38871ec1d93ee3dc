from __future__ import annotations

import json
from typing import Any, BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class OutputWriter(Protocol):
    def open(self) -> None: ...
    def write_element(self, message: Any) -> None: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...


class JsonArrayWriter:
    """Streams values into a single JSON array on a binary sink.

    Each element is serialized and written as soon as it arrives; nothing but
    the "emitted anything yet" flag is kept between calls. The sink itself is
    not closed, only the array.
    """

    def __init__(self, sink: BinaryIO):
        self._sink = sink
        self._opened = False
        self._closed = False
        self._emitted = False
        self.count = 0

    def __enter__(self) -> JsonArrayWriter:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._opened and not self._closed:
            self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        if self._opened:
            raise RuntimeError("JSON array already opened")
        self._sink.write(b"[")
        self._opened = True

    def write_element(self, message: Any) -> None:
        if not self._opened or self._closed:
            raise RuntimeError("write_element called outside open()/close()")
        encoded = json.dumps(
            message, ensure_ascii=False, allow_nan=False, separators=(",", ":")
        ).encode("utf-8")
        if self._emitted:
            self._sink.write(b",")
        self._sink.write(encoded)
        self._emitted = True
        self.count += 1

    def flush(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        if not self._opened:
            raise RuntimeError("close called before open()")
        if self._closed:
            raise RuntimeError("JSON array already closed")
        self._sink.write(b"]")
        self._closed = True
        self._sink.flush()
