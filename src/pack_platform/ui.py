"""User-facing output sinks.

The lifecycle controller writes raw tool output and progress messages here,
separately from the structured log stream.
"""

import sys
from contextlib import contextmanager
from enum import Enum
from typing import ContextManager, Iterator, List, Optional, Protocol, TextIO, Tuple


class OutputStyle(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class OutputSink(Protocol):
    def output(self, message: str, style: OutputStyle = OutputStyle.INFO) -> None:
        ...

    def step(self, message: str) -> ContextManager[None]:
        ...


class ConsoleUI:
    """Writes messages to the terminal; errors go to stderr."""

    _PREFIXES = {
        OutputStyle.INFO: "",
        OutputStyle.SUCCESS: "✓ ",
        OutputStyle.WARNING: "! ",
        OutputStyle.ERROR: "✗ ",
    }

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def output(self, message: str, style: OutputStyle = OutputStyle.INFO) -> None:
        stream = self.stderr if style == OutputStyle.ERROR else self.stdout
        message = message.rstrip("\n")
        if not message:
            return
        prefix = self._PREFIXES[style]
        for line in message.splitlines():
            stream.write(f"{prefix}{line}\n")
        stream.flush()

    @contextmanager
    def step(self, message: str) -> Iterator[None]:
        self.output(f"» {message}")
        try:
            yield
        except Exception:
            self.output(f"{message}: failed", OutputStyle.ERROR)
            raise
        self.output(f"{message}: done", OutputStyle.SUCCESS)


class RecordingUI:
    """Keeps every message in memory; used by embedding hosts and tests."""

    def __init__(self):
        self.messages: List[Tuple[OutputStyle, str]] = []

    def output(self, message: str, style: OutputStyle = OutputStyle.INFO) -> None:
        self.messages.append((style, message))

    @contextmanager
    def step(self, message: str) -> Iterator[None]:
        self.messages.append((OutputStyle.INFO, message))
        yield

    def texts(self, style: Optional[OutputStyle] = None) -> List[str]:
        return [m for s, m in self.messages if style is None or s == style]
