"""
Output sinks for generated bindings.

A sink is either standard output or a file created for this run. Both expose
the same two operations: ``write(data)`` and ``close()``. Sinks are context
managers so they are released on every path.
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Optional, Union

from .errors import OutputCreateError


class StdoutSink:
    """Writes to the process's standard output."""

    def __init__(self, stream: Optional[BinaryIO] = None):
        self._stream = stream
        self._closed = False

    @property
    def stream(self) -> BinaryIO:
        # Resolved lazily so that replacing sys.stdout (e.g. under capture) is honored
        if self._stream is None:
            return sys.stdout.buffer
        return self._stream

    def write(self, data: bytes) -> None:
        self.stream.write(data)

    def close(self) -> None:
        """
        Flush the stream; the process's stdout itself stays open.

        Only the first call flushes, so a failed flush is reported once.

        Raises:
            OSError: If flushing fails (e.g. a broken pipe)
        """
        if self._closed:
            return
        self._closed = True
        self.stream.flush()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "StdoutSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return "StdoutSink()"


class FileSink:
    """Writes to a file opened in create/truncate mode."""

    def __init__(self, path: str, handle: BinaryIO):
        self.path = path
        self._handle = handle
        self._closed = False

    def write(self, data: bytes) -> None:
        self._handle.write(data)

    def close(self) -> None:
        """
        Close the file, flushing buffered data.

        Raises:
            OSError: If the buffered data cannot be written (e.g. disk full)
        """
        if self._closed:
            return
        self._closed = True
        self._handle.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "FileSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FileSink({self.path!r})"


OutputSink = Union[StdoutSink, FileSink]


def select_output(token: str) -> OutputSink:
    """
    Select the sink for an output token.

    Args:
        token: ``-`` for standard output, otherwise a filesystem path

    Returns:
        The selected sink

    Raises:
        OutputCreateError: If the file cannot be created
    """
    if token == "-":
        return StdoutSink()

    try:
        handle = open(token, "wb")
    except OSError as e:
        raise OutputCreateError(token) from e

    return FileSink(token, handle)
